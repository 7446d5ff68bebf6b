from psr_console.formatting import (
    format_response_with_sources,
    generate_conversation_title,
    parse_content_blocks,
    parse_structured_troubleshooting,
    render_markdown,
)
from psr_console.models import BlockType, SearchResult, SearchResultMetadata

TROUBLESHOOTING_REPLY = """Here is what to do.
ACTION REQUIRED:
- Replace the intake filter
TOOLS NEEDED
- 10 mm wrench
• Replacement filter
PROCEDURE
I. Power down the unit
II. Remove the front cover
   and set the screws aside
III. Swap the filter
RESOLUTION
- Unit restarts normally
"""


# ----------------------------------------------------------------
# Troubleshooting replies
# ----------------------------------------------------------------

def test_parse_structured_troubleshooting_sections():
    parsed = parse_structured_troubleshooting(TROUBLESHOOTING_REPLY)

    assert parsed.is_structured
    assert parsed.action_required == ["Replace the intake filter"]
    assert parsed.tools_needed == ["10 mm wrench", "Replacement filter"]
    assert [(s.step, s.detail) for s in parsed.procedure] == [
        ("I", "Power down the unit"),
        ("II", "Remove the front cover and set the screws aside"),
        ("III", "Swap the filter"),
    ]
    assert parsed.resolution == ["Unit restarts normally"]
    assert parsed.raw == TROUBLESHOOTING_REPLY


def test_parse_structured_troubleshooting_plain_text():
    parsed = parse_structured_troubleshooting("Just restart the pump.")

    assert not parsed.is_structured
    assert parsed.action_required is None
    assert parsed.procedure is None


def test_headers_match_case_insensitively_and_repeat_resets():
    parsed = parse_structured_troubleshooting(
        "action required\n- first\nAction Required\n- second"
    )

    assert parsed.action_required == ["second"]
    assert parsed.tools_needed is None


def test_parse_structured_troubleshooting_handles_empty_input():
    assert not parse_structured_troubleshooting("").is_structured
    assert not parse_structured_troubleshooting(None).is_structured


# ----------------------------------------------------------------
# Content blocks
# ----------------------------------------------------------------

def test_parse_content_blocks_mixed_reply():
    blocks = parse_content_blocks(
        "## Overview\n"
        "The pump trips on start.\n"
        "It happens when cold.\n"
        "\n"
        "Steps:\n"
        "1. Check the breaker\n"
        "   on the main panel\n"
        "2. Reset the controller\n"
        "\n"
        "- Wear gloves\n"
        "* Keep the area dry\n"
    )

    assert [b.type for b in blocks] == [
        BlockType.HEADER,
        BlockType.PARAGRAPH,
        BlockType.HEADER,
        BlockType.NUMBERED_LIST,
        BlockType.BULLET_LIST,
    ]
    assert blocks[0].text == "Overview"
    assert blocks[1].text == "The pump trips on start. It happens when cold."
    assert blocks[2].text == "Steps"
    assert blocks[3].items == ["Check the breaker on the main panel", "Reset the controller"]
    assert blocks[4].items == ["Wear gloves", "Keep the area dry"]


def test_bold_header_and_render_markdown():
    blocks = parse_content_blocks("**Safety**\n- Isolate power")

    assert blocks[0].type == BlockType.HEADER
    assert render_markdown(blocks) == "#### Safety\n\n- Isolate power"


def test_parse_content_blocks_empty():
    assert parse_content_blocks("") == []


# ----------------------------------------------------------------
# Sources and titles
# ----------------------------------------------------------------

def test_format_response_with_sources_appends_footer():
    results = [
        SearchResult(
            content="x" * 200, score=0.875,
            metadata=SearchResultMetadata(filename="manual.pdf"),
        ),
        SearchResult(content="short", score=0.5),
    ]

    content, sources = format_response_with_sources("Answer", results)

    assert content == (
        "Answer\n\n**Sources:**\n"
        "1. manual.pdf (Relevance: 87.5%)\n"
        "2. Unknown Document (Relevance: 50.0%)\n"
    )
    assert [s.id for s in sources] == ["source_1", "source_2"]
    assert sources[0].snippet == "x" * 150 + "..."
    assert sources[0].domain == "trained-data"


def test_format_response_without_results_is_unchanged():
    assert format_response_with_sources("Answer", []) == ("Answer", [])


def test_generate_conversation_title():
    assert generate_conversation_title("") == "New conversation"
    assert generate_conversation_title("Pump noise") == "Pump noise"
    assert generate_conversation_title("a" * 40) == "a" * 40
    assert generate_conversation_title(
        "How do I reset the main breaker on unit seven today"
    ) == "How do I reset the main breaker on..."
    assert generate_conversation_title("x" * 50) == "x" * 37 + "..."
