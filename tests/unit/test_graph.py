"""Unit tests for the conversation graph walker."""

from typing import Any

from convoscope.importers.graph import ConversationGraph
from convoscope.models.message import Vendor


def _node(
    key: str,
    parent: str | None,
    children: list[str],
    role: str | None = "user",
    text: str = "",
    create_time: float | None = None,
) -> dict[str, Any]:
    message = None
    if role is not None:
        message = {"author": {"role": role}, "content": {"parts": [text or key]}}
        if create_time is not None:
            message["create_time"] = create_time
    return {"id": key, "parent": parent, "children": children, "message": message}


class TestChoosePath:
    """Tests for canonical path selection."""

    def test_current_node_path(self, two_node_mapping: dict[str, Any]) -> None:
        graph = ConversationGraph.from_mapping(two_node_mapping)

        assert graph.choose_path("B") == ["A", "B"]

    def test_current_node_wins_over_latest_leaf(
        self,
        branched_conversation: dict[str, Any],
    ) -> None:
        graph = ConversationGraph.from_mapping(branched_conversation["mapping"])

        assert graph.choose_path("answer-2") == ["root", "question", "answer-2"]

    def test_latest_leaf_when_current_node_missing(
        self,
        branched_conversation: dict[str, Any],
    ) -> None:
        graph = ConversationGraph.from_mapping(branched_conversation["mapping"])

        assert graph.choose_path(None) == ["root", "question", "answer-1"]
        assert graph.choose_path("does-not-exist") == ["root", "question", "answer-1"]

    def test_latest_leaf_tie_keeps_first(self) -> None:
        mapping = {
            "q": _node("q", None, ["a1", "a2"], create_time=1),
            "a1": _node("a1", "q", [], role="assistant", create_time=5),
            "a2": _node("a2", "q", [], role="assistant", create_time=5),
        }
        graph = ConversationGraph.from_mapping(mapping)

        assert graph.latest_leaf().key == "a1"

    def test_unresolvable_graph_is_empty(self) -> None:
        mapping = {
            "root": _node("root", None, ["x"], role=None),
            "x": _node("x", "root", [], role=None),
        }
        graph = ConversationGraph.from_mapping(mapping)

        assert graph.choose_path(None) == []
        assert graph.messages("c", "t", Vendor.CHATGPT) == []

    def test_parent_cycle_terminates(self) -> None:
        mapping = {
            "a": _node("a", "b", []),
            "b": _node("b", "a", ["a"]),
        }
        graph = ConversationGraph.from_mapping(mapping)

        assert graph.path_to("a") == ["b", "a"]

    def test_non_mapping_input(self) -> None:
        graph = ConversationGraph.from_mapping(["not", "a", "mapping"])

        assert len(graph) == 0
        assert graph.choose_path("anything") == []


class TestGraphMessages:
    """Tests for message emission along the canonical path."""

    def test_two_node_scenario(self, two_node_mapping: dict[str, Any]) -> None:
        graph = ConversationGraph.from_mapping(two_node_mapping)

        messages = graph.messages("conv", "Greeting", Vendor.CHATGPT, current_node="B")

        assert [m.id for m in messages] == ["A", "B"]
        assert [m.text for m in messages] == ["Hi", "Hello"]
        assert [m.role for m in messages] == ["user", "assistant"]
        assert all(m.conversation_title == "Greeting" for m in messages)

    def test_structural_nodes_skipped(self, branched_conversation: dict[str, Any]) -> None:
        graph = ConversationGraph.from_mapping(branched_conversation["mapping"])

        messages = graph.messages("conv", "t", Vendor.CHATGPT, current_node="answer-2")

        assert [m.id for m in messages] == ["question", "answer-2"]
        assert messages[0].timestamp_ms == 1704067200000

    def test_empty_assistant_dropped(self) -> None:
        mapping = {
            "q": _node("q", None, ["a"], text="question", create_time=1),
            "a": {
                "id": "a",
                "parent": "q",
                "children": [],
                "message": {"author": {"role": "assistant"}, "content": {"parts": [""]}},
            },
        }
        graph = ConversationGraph.from_mapping(mapping)

        messages = graph.messages("c", "t", Vendor.CHATGPT, current_node="a")

        assert [m.id for m in messages] == ["q"]

    def test_output_is_time_ordered(self) -> None:
        mapping = {
            "first": _node("first", None, ["second"], create_time=300),
            "second": _node("second", "first", ["third"], role="assistant", create_time=100),
            "third": _node("third", "second", [], create_time=200),
        }
        graph = ConversationGraph.from_mapping(mapping)

        messages = graph.messages("c", "t", Vendor.CHATGPT, current_node="third")
        timestamps = [m.timestamp_ms for m in messages]

        assert timestamps == sorted(timestamps)
        assert [m.id for m in messages] == ["second", "third", "first"]


class TestMessageTimestamps:
    """Tests for per-node timestamp resolution."""

    @staticmethod
    def _timestamp(**times: Any) -> int:
        message = {"author": {"role": "user"}, "content": {"parts": ["hi"]}, **times}
        mapping = {"n": {"id": "n", "parent": None, "children": [], "message": message}}
        graph = ConversationGraph.from_mapping(mapping)
        [msg] = graph.messages("c", "t", Vendor.CHATGPT, current_node="n")
        return msg.timestamp_ms

    def test_create_time_in_seconds(self) -> None:
        assert self._timestamp(create_time=1704067200.25, update_time=1) == 1704067200250

    def test_update_time_when_create_time_missing(self) -> None:
        assert self._timestamp(update_time=1704067200) == 1704067200000
        assert self._timestamp(create_time=None, update_time="2024-01-01T00:00:00Z") == 1704067200000

    def test_non_numeric_create_time_is_parsed(self) -> None:
        assert self._timestamp(create_time="2024-01-01T00:00:00Z") == 1704067200000

    def test_non_finite_create_time_falls_through(self) -> None:
        assert self._timestamp(create_time=float("nan"), update_time=1704067200) == 1704067200000
        assert self._timestamp(create_time=float("inf")) == 0
        assert self._timestamp(create_time=1e308) == 0

    def test_unresolvable_is_zero(self) -> None:
        assert self._timestamp() == 0
        assert self._timestamp(create_time="soon", update_time=None) == 0
