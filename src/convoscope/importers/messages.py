"""Raw message conversion shared by the import adapters."""

import math
from collections.abc import Mapping
from typing import Any

from convoscope.importers.content import flatten_content
from convoscope.importers.roles import normalize_role
from convoscope.models.message import ParsedMessage, Role, Vendor
from convoscope.utils.hashing import canonical_json, to_epoch_ms

__all__ = [
    "keep_message",
    "message_timestamp_ms",
    "to_parsed_message",
]


def message_timestamp_ms(raw: Mapping[str, Any]) -> int:
    """Resolve a message timestamp in epoch milliseconds.

    ``create_time`` in seconds wins; otherwise ``update_time`` (or a
    non-numeric ``create_time``) is parsed; 0 when nothing resolves.
    """
    create_time = raw.get("create_time")
    if isinstance(create_time, (int, float)) and not isinstance(create_time, bool):
        millis = create_time * 1000
        if create_time and (isinstance(millis, int) or math.isfinite(millis)):
            return max(0, int(millis))
        # NaN, Infinity and 0 never resolve; try update_time
        create_time = None
    fallback = to_epoch_ms(raw.get("update_time") or create_time)
    return max(0, fallback or 0)


def keep_message(role: Role, text: str) -> bool:
    """Assistant messages without text are aborted generations; drop them."""
    return bool(text) or role != "assistant"


def _tool_name(raw: Mapping[str, Any], role: Role) -> str | None:
    author = raw.get("author")
    if role == "tool" and isinstance(author, Mapping) and author.get("name"):
        return str(author["name"])
    for key in ("tool_name", "name", "function_name"):
        if raw.get(key):
            return str(raw[key])
    return None


def _attachments(raw: Mapping[str, Any]) -> list[Any]:
    metadata = raw.get("metadata")
    for value in (
        raw.get("attachments"),
        raw.get("files"),
        metadata.get("attachments") if isinstance(metadata, Mapping) else None,
    ):
        if isinstance(value, list) and value:
            return list(value)
    return []


def _tool_json(raw: Mapping[str, Any]) -> str | None:
    for key in ("tool_payload", "arguments", "call"):
        if raw.get(key) is not None:
            return canonical_json(raw[key])
    return None


def to_parsed_message(
    raw: Mapping[str, Any],
    message_id: str,
    conversation_id: str,
    conversation_title: str,
    vendor: Vendor,
    author: Any = None,
    timestamp_ms: int | None = None,
) -> ParsedMessage | None:
    """Convert one raw export message into a ParsedMessage.

    Args:
        raw: Raw message object (``author``, ``content``, timestamps)
        message_id: Id to assign to the message
        conversation_id: Owning conversation id
        conversation_title: Owning conversation title
        vendor: Originating product
        author: Author override when the vendor stores it under another key
        timestamp_ms: Timestamp override when the vendor uses other fields

    Returns:
        ParsedMessage, or None for an assistant message without text
    """
    role = normalize_role(raw.get("author") if author is None else author)
    text = flatten_content(raw.get("content"))
    if not keep_message(role, text):
        return None

    return ParsedMessage(
        id=message_id,
        conversation_id=conversation_id,
        conversation_title=conversation_title,
        role=role,
        timestamp_ms=message_timestamp_ms(raw) if timestamp_ms is None else max(0, timestamp_ms),
        text=text,
        vendor=vendor,
        tool_name=_tool_name(raw, role),
        tool_json=_tool_json(raw),
        attachments=_attachments(raw),
    )
