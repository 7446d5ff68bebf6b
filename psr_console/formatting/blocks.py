"""Split a free-text assistant reply into header / list / paragraph blocks."""
import re

from psr_console.models import BlockType, ContentBlock

MARKDOWN_HEADER = re.compile(r"^#{1,6}\s+(.+?)\s*#*$")
BOLD_HEADER = re.compile(r"^\*\*(.+?)\*\*:?$")
COLON_HEADER = re.compile(r"^([^.!?]{1,60}):$")
NUMBERED_ITEM = re.compile(r"^\d+[.)]\s+(.*)$")
BULLET_ITEM = re.compile(r"^[-*•]\s+(.*)$")

LIST_TYPES = (BlockType.NUMBERED_LIST, BlockType.BULLET_LIST)


def _header_text(line: str):
    for pattern in (MARKDOWN_HEADER, BOLD_HEADER, COLON_HEADER):
        m = pattern.match(line)
        if m:
            return m.group(1).strip()
    return None


def parse_content_blocks(text: str) -> list[ContentBlock]:
    blocks: list[ContentBlock] = []
    open_block = None

    def close():
        nonlocal open_block
        if open_block is not None:
            blocks.append(open_block)
            open_block = None

    for raw in re.split(r"\r?\n", text or ""):
        line = raw.strip()
        if not line:
            close()
            continue

        header = _header_text(line)
        if header:
            close()
            blocks.append(ContentBlock(type=BlockType.HEADER, text=header))
            continue

        for pattern, block_type in ((NUMBERED_ITEM, BlockType.NUMBERED_LIST),
                                    (BULLET_ITEM, BlockType.BULLET_LIST)):
            m = pattern.match(line)
            if m:
                if open_block is None or open_block.type != block_type:
                    close()
                    open_block = ContentBlock(type=block_type)
                open_block.items.append(m.group(1).strip())
                break
        else:
            if open_block is not None and open_block.type in LIST_TYPES:
                # continuation of the previous list item
                open_block.items[-1] = f"{open_block.items[-1]} {line}"
            elif open_block is None:
                open_block = ContentBlock(type=BlockType.PARAGRAPH, text=line)
            else:
                open_block.text = f"{open_block.text} {line}"

    close()
    return blocks


def render_markdown(blocks: list[ContentBlock]) -> str:
    """Turn parsed blocks back into markdown for `st.markdown`."""
    parts = []
    for block in blocks:
        if block.type == BlockType.HEADER:
            parts.append(f"#### {block.text}")
        elif block.type == BlockType.NUMBERED_LIST:
            parts.append("\n".join(f"{i}. {item}" for i, item in enumerate(block.items, 1)))
        elif block.type == BlockType.BULLET_LIST:
            parts.append("\n".join(f"- {item}" for item in block.items))
        else:
            parts.append(block.text)
    return "\n\n".join(parts)
