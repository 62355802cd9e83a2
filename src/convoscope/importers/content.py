"""Content flattening for convoscope.

Vendor exports carry message content in several shapes: plain strings,
the legacy ``{"parts": [...]}`` object, and arrays of typed blocks
(text, tool results, images, anything else). This module turns any of
them into one flat string. Flattening never raises: a block that cannot
be interpreted is replaced by ``UNPARSED_MARKER``.
"""

import json
from collections.abc import Mapping
from typing import Any

from convoscope.logging import get_logger
from convoscope.models.content import (
    ContentBlock,
    ImageBlock,
    TextBlock,
    ToolResultBlock,
    UnknownBlock,
    UnparsedBlock,
)

__all__ = [
    "TEXT_BLOCK_TYPES",
    "UNPARSED_MARKER",
    "flatten_blocks",
    "flatten_content",
    "parse_block",
]

logger = get_logger(__name__)

TEXT_BLOCK_TYPES = frozenset({"text", "output_text", "input_text"})
UNPARSED_MARKER = "[[unparsed block]]"
BLOCK_SEPARATOR = "\n\n"


def _fenced_json(value: Any) -> str:
    return "```json\n" + json.dumps(value, indent=2, ensure_ascii=False) + "\n```"


def parse_block(block: Any) -> ContentBlock:
    """Classify one raw content block into its variant."""
    try:
        if isinstance(block, str):
            return TextBlock(block)
        if not isinstance(block, Mapping):
            return UnknownBlock(block)

        block_type = str(block.get("type") or "").lower()
        text = block.get("text")

        if block_type in TEXT_BLOCK_TYPES and text:
            return TextBlock(str(text))
        if block_type == "tool_result":
            return ToolResultBlock(block.get("content"))
        if "image" in block_type:
            return ImageBlock(str(block.get("id") or block.get("name") or "asset"))
        if text:
            return TextBlock(str(text))
        return UnknownBlock(block)
    except Exception as e:
        return UnparsedBlock(reason=str(e))


def _render_tool_result(content: Any) -> str | None:
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        pieces: list[str] = []
        for item in content:
            if isinstance(item, str):
                pieces.append(item)
            elif isinstance(item, Mapping) and item.get("type") == "text" and item.get("text"):
                pieces.append(str(item["text"]))
            else:
                pieces.append(_fenced_json(item))
        return BLOCK_SEPARATOR.join(pieces) if pieces else None
    if content:
        return _fenced_json(content)
    return None


def _render_block(block: ContentBlock) -> str | None:
    match block:
        case TextBlock(text=text):
            return text
        case ToolResultBlock(content=content):
            return _render_tool_result(content)
        case ImageBlock(ref=ref):
            return f"![image:{ref}]"
        case UnknownBlock(raw=raw):
            return _fenced_json(raw)
        case UnparsedBlock():
            return UNPARSED_MARKER


def flatten_blocks(blocks: list[Any]) -> str:
    """Flatten an array of content blocks, one piece per block."""
    parts: list[str] = []
    for raw in blocks:
        block = parse_block(raw)
        try:
            rendered = _render_block(block)
        except Exception as e:
            logger.debug("content_block_unparsed", error=str(e))
            rendered = UNPARSED_MARKER
        if rendered is not None:
            parts.append(rendered)
    return BLOCK_SEPARATOR.join(parts).strip()


def _stringify_part(part: Any) -> str:
    if isinstance(part, str):
        return part
    return json.dumps(part, ensure_ascii=False, separators=(",", ":"), default=str)


def flatten_content(content: Any) -> str:
    """Flatten any message content value into one string.

    Args:
        content: String, ``{"parts": [...]}`` object, block array, or
            an object with a ``text`` field

    Returns:
        Flat text; "" for unrecognized shapes
    """
    if isinstance(content, list):
        return flatten_blocks(content)

    if isinstance(content, Mapping):
        parts = content.get("parts")
        if isinstance(parts, list):
            return BLOCK_SEPARATOR.join(_stringify_part(p) for p in parts).strip()
        text = content.get("text")
        return str(text) if text else ""

    if isinstance(content, str):
        return content

    return ""
