import math
import re
from typing import Any, List

WORDS_PER_MINUTE = 238
TEXT_BLOCK_TYPES = ("header", "paragraph", "quote")
HTML_TAG_RE = re.compile(r"<[^>]*>")


def get_blocks(content: Any) -> List[dict]:
    """Return the Editor.js blocks of a ``[{"blocks": [...]}]`` document."""
    if not isinstance(content, list) or not content:
        return []
    first = content[0]
    if not isinstance(first, dict):
        return []
    blocks = first.get("blocks")
    return blocks if isinstance(blocks, list) else []


def _list_item_text(item) -> str:
    if isinstance(item, dict):
        return str(item.get("content", ""))
    return str(item)


def block_text(block: Any) -> str:
    """Plain text carried by a single block, HTML stripped."""
    if not isinstance(block, dict):
        return ""
    block_type = block.get("type")
    data = block.get("data")
    if not isinstance(data, dict):
        return ""

    if block_type in TEXT_BLOCK_TYPES:
        text = data.get("text") or ""
    elif block_type == "list":
        items = data.get("items")
        if not isinstance(items, list):
            items = []
        text = " ".join(_list_item_text(item) for item in items)
    elif block_type == "code":
        text = data.get("code") or ""
    else:
        text = ""

    return HTML_TAG_RE.sub("", str(text))


def calculate_reading_time(content: Any) -> int:
    """Minutes to read ``content`` at 238 words per minute, rounded up."""
    words = sum(len(block_text(block).split()) for block in get_blocks(content))
    return math.ceil(words / WORDS_PER_MINUTE)


def normalize_tags(tags) -> List[str]:
    """Lowercase, trim and de-duplicate tag names keeping their order."""
    seen = []
    for tag in tags or []:
        name = str(tag).strip().lower()
        if name and name not in seen:
            seen.append(name)
    return seen
