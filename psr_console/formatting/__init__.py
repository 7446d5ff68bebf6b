"""Parsing and formatting of assistant replies."""
from psr_console.formatting.blocks import parse_content_blocks, render_markdown
from psr_console.formatting.sources import (
    format_response_with_sources,
    generate_conversation_title,
)
from psr_console.formatting.troubleshooting import parse_structured_troubleshooting

__all__ = [
    "format_response_with_sources",
    "generate_conversation_title",
    "parse_content_blocks",
    "parse_structured_troubleshooting",
    "render_markdown",
]
