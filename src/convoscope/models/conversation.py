"""Conversation summary models for convoscope."""

from pydantic import BaseModel, Field

from convoscope.models.message import ParsedMessage, Vendor

__all__ = [
    "UNTITLED",
    "ConversationSummary",
    "ParsedConversation",
]

UNTITLED = "(untitled)"


class ConversationSummary(BaseModel, frozen=True):
    """One row per conversation, folded from the message stream.

    Attributes:
        conversation_id: Conversation id the messages carried
        title: Conversation title or the "(untitled)" placeholder
        vendor: Originating product
        message_count: Number of messages seen
        first_timestamp: Earliest message timestamp (epoch ms)
        last_timestamp: Latest message timestamp (epoch ms)
    """

    conversation_id: str
    title: str = UNTITLED
    vendor: Vendor = Vendor.UNKNOWN
    message_count: int = Field(default=0, ge=0)
    first_timestamp: int = 0
    last_timestamp: int = 0


class ParsedConversation(BaseModel, frozen=True):
    """One conversation as read from an export, before identity assignment.

    Attributes:
        id: Native conversation id (derived from content when missing)
        title: Conversation title or the "(untitled)" placeholder
        vendor: Originating product
        created_at: Creation timestamp exactly as exported
        source_type: Export file kind (e.g. "conversations.json")
        messages: Canonical path messages in time order
    """

    id: str
    title: str = UNTITLED
    vendor: Vendor = Vendor.UNKNOWN
    created_at: str | int | float | None = None
    source_type: str | None = None
    messages: list[ParsedMessage] = Field(default_factory=list)

    @property
    def message_count(self) -> int:
        """Get the number of messages in this conversation."""
        return len(self.messages)

    @property
    def has_messages(self) -> bool:
        """Check if this conversation has any messages."""
        return len(self.messages) > 0

    @property
    def participants(self) -> list[str]:
        """Distinct roles present, sorted."""
        return sorted({m.role for m in self.messages})
