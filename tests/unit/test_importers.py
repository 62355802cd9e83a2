"""Unit tests for convoscope importers."""

import io
import json
from pathlib import Path
from typing import Any

import pytest

from convoscope.importers.base import ExportAdapter
from convoscope.importers.chatgpt import ChatGPTAdapter
from convoscope.importers.claude import ClaudeAdapter
from convoscope.importers.registry import ImportAdapterRegistry
from convoscope.models.message import Vendor


class TestChatGPTAdapter:
    """Tests for ChatGPT import adapter."""

    def test_vendor(self) -> None:
        assert ChatGPTAdapter().vendor == Vendor.CHATGPT

    def test_parse_mapping_conversation(self, branched_conversation: dict[str, Any]) -> None:
        conversations = ChatGPTAdapter().parse([branched_conversation])

        assert len(conversations) == 1
        conv = conversations[0]
        assert conv.id == "conv-branch"
        assert conv.title == "Python Async Programming Help"
        assert conv.vendor == Vendor.CHATGPT
        assert conv.source_type == "conversations.json"
        assert conv.created_at == 1704067200
        assert [m.text for m in conv.messages] == [
            "How does asyncio.gather work?",
            "asyncio.gather runs awaitables concurrently.",
        ]

    def test_accepts_wrapped_and_single_exports(
        self,
        branched_conversation: dict[str, Any],
    ) -> None:
        adapter = ChatGPTAdapter()

        wrapped = adapter.parse({"conversations": [branched_conversation]})
        single = adapter.parse(branched_conversation)

        assert [c.id for c in wrapped] == ["conv-branch"]
        assert [c.id for c in single] == ["conv-branch"]

    def test_parse_empty_export(self) -> None:
        assert ChatGPTAdapter().parse([]) == []
        assert ChatGPTAdapter().parse(None) == []

    def test_parse_filters_conversations_without_messages(self) -> None:
        export = [
            {
                "id": "conv1",
                "title": "Test",
                "mapping": {
                    "node1": {
                        "message": {
                            "author": {"role": "assistant"},
                            "content": {"parts": [""]},
                        }
                    }
                },
            }
        ]

        assert ChatGPTAdapter().parse(export) == []

    def test_missing_title_uses_placeholder(self, two_node_mapping: dict[str, Any]) -> None:
        export = [{"id": "c", "current_node": "B", "mapping": two_node_mapping}]

        conv = ChatGPTAdapter().parse(export)[0]

        assert conv.title == "(untitled)"
        assert conv.messages[0].conversation_title == "(untitled)"

    def test_missing_id_is_derived_from_content(self, two_node_mapping: dict[str, Any]) -> None:
        export = [{"title": "No id", "mapping": two_node_mapping}]

        first = ChatGPTAdapter().parse(export)[0]
        second = ChatGPTAdapter().parse(export)[0]

        assert first.id.startswith("anon_")
        assert first.id == second.id

    def test_flat_messages_fallback(self) -> None:
        export = [
            {
                "id": "flat",
                "title": "Flat",
                "messages": [
                    {"role": "user", "content": "question", "create_time": 1704067260},
                    {"author": {"role": "assistant"}, "content": "answer", "create_time": 1704067200},
                    {"role": "assistant", "content": ""},
                ],
            }
        ]

        conv = ChatGPTAdapter().parse(export)[0]

        assert [m.text for m in conv.messages] == ["answer", "question"]
        assert [m.id for m in conv.messages] == ["flat:1", "flat:0"]

    def test_tool_message_fields(self) -> None:
        export = [
            {
                "id": "tools",
                "messages": [
                    {
                        "author": {"role": "tool", "name": "python"},
                        "content": "result: 3",
                        "arguments": {"code": "1+2"},
                        "attachments": [{"name": "data.csv"}],
                    }
                ],
            }
        ]

        msg = ChatGPTAdapter().parse(export)[0].messages[0]

        assert msg.role == "tool"
        assert msg.tool_name == "python"
        assert msg.tool_json == '{"code":"1+2"}'
        assert msg.attachments == [{"name": "data.csv"}]


class TestClaudeAdapter:
    """Tests for Claude import adapter."""

    def test_vendor(self) -> None:
        assert ClaudeAdapter().vendor == Vendor.CLAUDE

    def test_parse_conversation(self) -> None:
        export = [
            {
                "uuid": "conv-uuid-1",
                "name": "Claude Test",
                "created_at": "2024-01-01T00:00:00Z",
                "chat_messages": [
                    {
                        "uuid": "msg-1",
                        "sender": "human",
                        "text": "Hello Claude",
                        "created_at": "2024-01-01T00:00:00Z",
                    },
                    {
                        "uuid": "msg-2",
                        "sender": "assistant",
                        "text": "flat text",
                        "content": [{"type": "text", "text": "Hello! How can I help?"}],
                        "created_at": "2024-01-01T00:00:01Z",
                    },
                ],
            }
        ]

        conversations = ClaudeAdapter().parse(export)

        assert len(conversations) == 1
        conv = conversations[0]
        assert conv.id == "conv-uuid-1"
        assert conv.title == "Claude Test"
        assert [m.role for m in conv.messages] == ["user", "assistant"]
        assert [m.id for m in conv.messages] == ["msg-1", "msg-2"]
        assert conv.messages[1].text == "Hello! How can I help?"
        assert conv.messages[0].timestamp_ms == 1704067200000

    def test_empty_content_list_falls_back_to_text(self) -> None:
        export = [
            {
                "uuid": "c",
                "chat_messages": [{"sender": "human", "text": "typed", "content": []}],
            }
        ]

        msg = ClaudeAdapter().parse(export)[0].messages[0]

        assert msg.text == "typed"
        assert msg.id == "c:0"

    def test_messages_are_time_ordered(self) -> None:
        export = [
            {
                "uuid": "c",
                "chat_messages": [
                    {"sender": "human", "text": "later", "created_at": "2024-01-02T00:00:00Z"},
                    {"sender": "human", "text": "earlier", "created_at": "2024-01-01T00:00:00Z"},
                ],
            }
        ]

        conv = ClaudeAdapter().parse(export)[0]

        assert [m.text for m in conv.messages] == ["earlier", "later"]


class TestExportAdapterLoaders:
    """Tests for the shared file/string/stream loaders."""

    def test_parse_string(self, branched_conversation: dict[str, Any]) -> None:
        data = json.dumps([branched_conversation])

        assert len(ChatGPTAdapter().parse_string(data)) == 1

    def test_parse_stream(self, branched_conversation: dict[str, Any]) -> None:
        stream = io.BytesIO(json.dumps([branched_conversation]).encode("utf-8"))

        assert len(ChatGPTAdapter().parse_stream(stream)) == 1

    def test_parse_file(self, tmp_path: Path, branched_conversation: dict[str, Any]) -> None:
        path = tmp_path / "conversations.json"
        path.write_text(json.dumps([branched_conversation]), encoding="utf-8")

        assert len(ChatGPTAdapter().parse_file(path)) == 1

    def test_parse_messages_flattens(self, branched_conversation: dict[str, Any]) -> None:
        messages = ChatGPTAdapter().parse_messages([branched_conversation])

        assert [m.id for m in messages] == ["question", "answer-2"]

    def test_non_finite_timestamps_do_not_abort_export(self) -> None:
        data = """[{"id": "c", "mapping": {
            "a": {"id": "a", "parent": null, "children": ["b"], "message": {
                "author": {"role": "user"}, "content": {"parts": ["hi"]},
                "create_time": NaN}},
            "b": {"id": "b", "parent": "a", "children": [], "message": {
                "author": {"role": "assistant"}, "content": {"parts": ["hello"]},
                "create_time": Infinity, "update_time": 1704067200}}}}]"""

        [conversation] = ChatGPTAdapter().parse_string(data)

        assert [m.timestamp_ms for m in conversation.messages] == [0, 1704067200000]
        assert [m.text for m in conversation.messages] == ["hi", "hello"]


class TestImportAdapterRegistry:
    """Tests for adapter registry."""

    def test_builtin_adapters_registered(self) -> None:
        vendors = ImportAdapterRegistry.list_vendors()

        assert "chatgpt" in vendors
        assert "claude" in vendors
        assert ImportAdapterRegistry.is_registered("chatgpt")

    def test_get_and_create(self) -> None:
        assert ImportAdapterRegistry.get("chatgpt") is ChatGPTAdapter
        assert isinstance(ImportAdapterRegistry.create("claude"), ClaudeAdapter)

    def test_get_unknown_vendor(self) -> None:
        with pytest.raises(KeyError, match="No adapter registered"):
            ImportAdapterRegistry.get("nonexistent")

    def test_duplicate_registration_rejected(self) -> None:
        class AnotherChatGPT(ChatGPTAdapter):
            pass

        with pytest.raises(ValueError, match="already registered"):
            ImportAdapterRegistry.register(AnotherChatGPT)

    def test_register_custom_adapter(self) -> None:
        class GrokAdapter(ExportAdapter):
            @property
            def vendor(self) -> Vendor:
                return Vendor.GROK

            def parse_conversation(self, conv):  # type: ignore[no-untyped-def]
                raise NotImplementedError

        try:
            ImportAdapterRegistry.register(GrokAdapter)
            assert ImportAdapterRegistry.get("grok") is GrokAdapter
        finally:
            ImportAdapterRegistry._adapters.pop("grok", None)
