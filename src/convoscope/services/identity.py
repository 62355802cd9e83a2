"""Stable identity assignment for convoscope.

This module stamps parsed conversations with content-derived ids so a
re-import of an unchanged export reproduces the same ids, and drops
messages whose id has already been seen.
"""

from collections.abc import Iterable

from convoscope.logging import get_logger
from convoscope.models.conversation import ParsedConversation
from convoscope.models.message import ParsedMessage
from convoscope.utils.stable_ids import (
    conversation_fingerprint,
    stable_conv_id,
    stable_msg_id,
)

__all__ = [
    "IdentityService",
    "dedupe_messages",
]

logger = get_logger(__name__)


class IdentityService:
    """Assigns stable conversation, message and fingerprint ids.

    Example:
        service = IdentityService()
        conversation = service.assign(parsed_conversation)
        conversation.messages[0].uid  # "msg_..."
    """

    def __init__(self, fingerprint_messages: int = 5) -> None:
        """Initialize service.

        Args:
            fingerprint_messages: Leading messages hashed into a fingerprint
        """
        self._fingerprint_messages = fingerprint_messages

    def conversation_id(self, conversation: ParsedConversation) -> str:
        """Generate the stable ``conv_`` id of a conversation.

        The seed uses the first user or system message, or the first
        message of any role when neither exists.
        """
        messages = conversation.messages
        first = next((m for m in messages if m.role in ("user", "system")), None)
        if first is None and messages:
            first = messages[0]

        return stable_conv_id(
            vendor=conversation.vendor,
            title=conversation.title,
            created_at=conversation.created_at,
            participants=conversation.participants,
            first_message_text=first.text if first else "",
            extra={
                "nativeId": conversation.id,
                "sourceType": conversation.source_type or "",
            },
        )

    def message_id(self, message: ParsedMessage, conversation_uid: str) -> str:
        """Generate the stable ``msg_`` id of a message."""
        return stable_msg_id(
            vendor=message.vendor,
            conversation_stable_id=conversation_uid,
            role=message.role,
            created_at=message.timestamp_ms,
            text=message.text,
            tool_name=message.tool_name,
            attachments=message.attachments,
        )

    def fingerprint(self, conversation: ParsedConversation) -> str:
        """Generate the ``fp_`` fingerprint used to spot re-exports."""
        return conversation_fingerprint(
            vendor=conversation.vendor,
            participants=conversation.participants,
            first_messages=[m.text for m in conversation.messages],
            max_messages=self._fingerprint_messages,
        )

    def assign(self, conversation: ParsedConversation) -> ParsedConversation:
        """Return a copy of the conversation with ``uid`` fields populated."""
        conversation_uid = self.conversation_id(conversation)
        messages = [
            msg.model_copy(
                update={
                    "uid": self.message_id(msg, conversation_uid),
                    "conversation_uid": conversation_uid,
                }
            )
            for msg in conversation.messages
        ]

        logger.debug(
            "conversation_ids_assigned",
            conversation_id=conversation.id,
            conversation_uid=conversation_uid,
            message_count=len(messages),
        )
        return conversation.model_copy(update={"messages": messages})


def dedupe_messages(messages: Iterable[ParsedMessage]) -> list[ParsedMessage]:
    """Drop messages whose stable id was already seen, keeping the first.

    Messages without a ``uid`` are always kept.
    """
    seen: set[str] = set()
    out: list[ParsedMessage] = []
    for msg in messages:
        if msg.uid is not None:
            if msg.uid in seen:
                continue
            seen.add(msg.uid)
        out.append(msg)
    return out
