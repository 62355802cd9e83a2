"""Canonical message models for convoscope.

These frozen Pydantic models define the contract between import adapters
and everything downstream (identity, grouping, indexing, search).
"""

from enum import StrEnum
from typing import Any, Literal

from pydantic import BaseModel, Field

__all__ = [
    "ParsedMessage",
    "Role",
    "Vendor",
]

Role = Literal["user", "assistant", "tool", "system"]


class Vendor(StrEnum):
    """Chat-assistant products whose exports can be ingested."""

    CHATGPT = "chatgpt"
    CLAUDE = "claude"
    GROK = "grok"
    GEMINI = "gemini"
    UNKNOWN = "unknown"


class ParsedMessage(BaseModel, frozen=True):
    """One message of the canonical, time-ordered stream.

    Attributes:
        id: Native message/node id from the export
        conversation_id: Native conversation id from the export
        conversation_title: Conversation title, "(untitled)" when absent
        role: Normalized author role
        timestamp_ms: Epoch milliseconds, 0 when unknown
        text: Flattened message content
        vendor: Originating product
        uid: Stable ``msg_`` id, set by identity assignment
        conversation_uid: Stable ``conv_`` id, set by identity assignment
        tool_name: Tool/function name for tool traffic
        tool_json: Canonicalized tool payload for indexing
        attachments: Attachment descriptors (names or raw objects)
    """

    id: str
    conversation_id: str
    conversation_title: str = "(untitled)"
    role: Role
    timestamp_ms: int = Field(default=0, ge=0, description="Epoch milliseconds")
    text: str = ""
    vendor: Vendor = Vendor.UNKNOWN
    uid: str | None = Field(default=None, description="Stable message id")
    conversation_uid: str | None = Field(default=None, description="Stable conversation id")
    tool_name: str | None = None
    tool_json: str | None = None
    attachments: list[Any] = Field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        """Check if the flattened text is blank."""
        return not self.text.strip()
