"""
Parser for concise troubleshooting replies.

When the chat is asked for a concise answer, the assistant replies in a
fixed layout:

    ACTION REQUIRED
    - Replace the filter
    TOOLS NEEDED
    - 10 mm wrench
    PROCEDURE
    I. Power down the unit
    II. Remove the cover
    RESOLUTION
    - Unit restarts normally

Section headers are matched by case-insensitive line prefix. Text before
the first header is ignored. Nothing here raises; a reply without any header
comes back with `is_structured=False` and is rendered as plain text.
"""
import re

from psr_console.models import ParsedStructuredResponse, ProcedureStep

SECTION_PREFIXES = [
    ("ACTION REQUIRED", "action_required"),
    ("TOOLS NEEDED", "tools_needed"),
    ("PROCEDURE", "procedure"),
    ("RESOLUTION", "resolution"),
]

ROMAN_STEP = re.compile(r"^([IVX]+)\.\s*(.*)$")
LIST_MARKER = re.compile(r"^[-•]\s*")


def _section_for(line: str):
    upper = line.upper()
    for prefix, section in SECTION_PREFIXES:
        if upper.startswith(prefix):
            return section
    return None


def parse_structured_troubleshooting(text: str) -> ParsedStructuredResponse:
    lines = [ln.strip() for ln in re.split(r"\r?\n", text or "")]
    lines = [ln for ln in lines if ln]

    sections: dict[str, list] = {}
    steps: list[ProcedureStep] = []
    current = None

    for line in lines:
        section = _section_for(line)
        if section:
            current = section
            # a repeated header starts that section over
            if section != "procedure":
                sections[section] = []
            else:
                sections.setdefault("procedure", [])
            continue
        if current is None:
            continue

        if current == "procedure":
            m = ROMAN_STEP.match(line)
            if m:
                steps.append(ProcedureStep(step=m.group(1), detail=m.group(2)))
            elif steps:
                steps[-1].detail = f"{steps[-1].detail} {line}".strip()
        else:
            sections[current].append(LIST_MARKER.sub("", line))

    return ParsedStructuredResponse(
        raw=text or "",
        is_structured=bool(sections),
        action_required=sections.get("action_required"),
        tools_needed=sections.get("tools_needed"),
        procedure=steps or None,
        resolution=sections.get("resolution"),
    )
