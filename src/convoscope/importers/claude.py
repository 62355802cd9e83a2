"""Claude import adapter for convoscope.

This module provides an adapter for parsing Claude export files.
"""

from collections.abc import Mapping
from typing import Any

from typing_extensions import override

from convoscope.importers.base import ExportAdapter
from convoscope.importers.messages import to_parsed_message
from convoscope.importers.registry import ImportAdapterRegistry
from convoscope.models.conversation import UNTITLED, ParsedConversation
from convoscope.models.message import ParsedMessage, Vendor
from convoscope.utils.hashing import canonical_json, fnv1a64, to_epoch_ms

__all__ = [
    "ClaudeAdapter",
]

# Claude names its authors differently; everything else goes through
# the shared role normalizer
_SENDER_ALIASES: dict[str, str] = {
    "human": "user",
    "ai": "assistant",
    "claude": "assistant",
}


@ImportAdapterRegistry.register
class ClaudeAdapter(ExportAdapter):
    """Adapter for Claude export format.

    Claude exports are flat: each conversation carries an ordered
    ``chat_messages`` list, so there is no branch selection.

    Expected format:
        [
            {
                "uuid": "conversation-id",
                "name": "Chat Title",
                "created_at": "2024-01-01T00:00:00Z",
                "chat_messages": [
                    {
                        "uuid": "message-id",
                        "sender": "human",
                        "text": "Hello",
                        "content": [{"type": "text", "text": "Hello"}],
                        "created_at": "2024-01-01T00:00:00Z"
                    }
                ]
            }
        ]
    """

    @property
    @override
    def vendor(self) -> Vendor:
        return Vendor.CLAUDE

    @override
    def parse_conversation(self, conv: Mapping[str, Any]) -> ParsedConversation:
        """Parse a single conversation."""
        conv_id = str(conv.get("uuid") or conv.get("id") or "")
        if not conv_id:
            conv_id = "anon_" + fnv1a64(canonical_json(conv))
        title = str(conv.get("name") or conv.get("title") or UNTITLED)

        raw_messages = conv.get("chat_messages", conv.get("messages", []))
        messages: list[ParsedMessage] = []
        if isinstance(raw_messages, list):
            for index, raw in enumerate(raw_messages):
                if not isinstance(raw, Mapping):
                    continue
                msg = self._parse_message(raw, index, conv_id, title)
                if msg is not None:
                    messages.append(msg)

        messages.sort(key=lambda m: m.timestamp_ms)

        return ParsedConversation(
            id=conv_id,
            title=title,
            vendor=self.vendor,
            created_at=conv.get("created_at", conv.get("create_time")),
            source_type="conversations.json",
            messages=messages,
        )

    def _parse_message(
        self,
        raw: Mapping[str, Any],
        index: int,
        conv_id: str,
        title: str,
    ) -> ParsedMessage | None:
        """Parse a single message."""
        sender = raw.get("sender", raw.get("role", ""))
        if isinstance(sender, str):
            sender = _SENDER_ALIASES.get(sender.lower(), sender)

        # Prefer structured blocks; the flat text field drops tool traffic
        content = raw.get("content")
        if not (isinstance(content, list) and content):
            content = raw.get("text", content)

        created_at = raw.get("created_at", raw.get("timestamp"))
        return to_parsed_message(
            {**raw, "content": content},
            message_id=str(raw.get("uuid") or raw.get("id") or f"{conv_id}:{index}"),
            conversation_id=conv_id,
            conversation_title=title,
            vendor=self.vendor,
            author=sender,
            timestamp_ms=to_epoch_ms(created_at) or 0,
        )
