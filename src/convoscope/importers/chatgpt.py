"""ChatGPT import adapter for convoscope.

This module provides an adapter for parsing ChatGPT export files.
"""

from collections.abc import Mapping
from typing import Any

from typing_extensions import override

from convoscope.importers.base import ExportAdapter
from convoscope.importers.graph import ConversationGraph
from convoscope.importers.messages import to_parsed_message
from convoscope.importers.registry import ImportAdapterRegistry
from convoscope.logging import get_logger
from convoscope.models.conversation import UNTITLED, ParsedConversation
from convoscope.models.message import ParsedMessage, Vendor
from convoscope.utils.hashing import canonical_json, fnv1a64

__all__ = [
    "ChatGPTAdapter",
]

logger = get_logger(__name__)


@ImportAdapterRegistry.register
class ChatGPTAdapter(ExportAdapter):
    """Adapter for ChatGPT export format (conversations.json).

    Each conversation holds a ``mapping`` graph of message nodes. The
    canonical path is the one ending at ``current_node``, or at the latest
    leaf when that pointer is missing. Conversations without a mapping
    may carry a flat ``messages`` list instead.

    Export format example:
        [
            {
                "id": "conversation-id",
                "title": "Chat Title",
                "create_time": 1704067200,
                "current_node": "node-2",
                "mapping": {
                    "node-1": {
                        "id": "node-1",
                        "message": {
                            "author": {"role": "user"},
                            "content": {"parts": ["Hello"]},
                            "create_time": 1704067200
                        },
                        "children": ["node-2"]
                    },
                    "node-2": {"id": "node-2", "parent": "node-1", ...}
                }
            }
        ]
    """

    def __init__(self, source_type: str | None = "conversations.json") -> None:
        """Initialize adapter.

        Args:
            source_type: Export file kind recorded on each conversation
        """
        self._source_type = source_type

    @property
    @override
    def vendor(self) -> Vendor:
        return Vendor.CHATGPT

    @override
    def conversations(self, raw_export: Any) -> list[Mapping[str, Any]]:
        """Split a ChatGPT export into conversation objects.

        Besides a list or a dict with a 'conversations' key, a single
        conversation object (as in shared_conversations.json) is accepted.
        """
        if isinstance(raw_export, Mapping) and "conversations" not in raw_export:
            return [raw_export]
        return super().conversations(raw_export)

    @override
    def parse(self, raw_export: Any) -> list[ParsedConversation]:
        parsed = super().parse(raw_export)
        logger.debug("chatgpt_export_parsed", conversation_count=len(parsed))
        return parsed

    @override
    def parse_conversation(self, conv: Mapping[str, Any]) -> ParsedConversation:
        """Parse a single conversation object."""
        conv_id = str(conv.get("id") or conv.get("conversation_id") or "")
        if not conv_id:
            conv_id = "anon_" + fnv1a64(canonical_json(conv))
        title = str(conv.get("title") or UNTITLED)

        mapping = conv.get("mapping")
        if isinstance(mapping, Mapping):
            graph = ConversationGraph.from_mapping(mapping)
            current_node = conv.get("current_node")
            messages = graph.messages(
                conversation_id=conv_id,
                conversation_title=title,
                vendor=self.vendor,
                current_node=str(current_node) if current_node else None,
            )
        else:
            messages = self._parse_message_list(conv.get("messages"), conv_id, title)

        return ParsedConversation(
            id=conv_id,
            title=title,
            vendor=self.vendor,
            created_at=conv.get("create_time"),
            source_type=self._source_type,
            messages=messages,
        )

    def _parse_message_list(
        self,
        raw_messages: Any,
        conv_id: str,
        title: str,
    ) -> list[ParsedMessage]:
        """Parse the flat ``messages`` fallback shape."""
        if not isinstance(raw_messages, list):
            return []

        messages: list[ParsedMessage] = []
        for index, raw in enumerate(raw_messages):
            if not isinstance(raw, Mapping):
                continue
            msg = to_parsed_message(
                raw,
                message_id=str(raw.get("id") or f"{conv_id}:{index}"),
                conversation_id=conv_id,
                conversation_title=title,
                vendor=self.vendor,
                author=raw.get("author", raw.get("role")),
            )
            if msg is not None:
                messages.append(msg)

        messages.sort(key=lambda m: m.timestamp_ms)
        return messages
