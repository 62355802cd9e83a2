"""Conversation graph walker.

ChatGPT exports store each conversation as a ``mapping``: a flat,
id-keyed dictionary of nodes with parent back-references and child-id
lists. Regenerated answers and edited prompts create branches. This
module selects the single linear path that represents the conversation
as the user last saw it.

The graph is held as an arena: nodes live in one dict and every relation
is an id lookup, so walking to the root is bounded by the node count even
when an export contains a broken parent chain.
"""

import math
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from convoscope.importers.messages import to_parsed_message
from convoscope.logging import get_logger
from convoscope.models.message import ParsedMessage, Vendor

__all__ = [
    "ConversationGraph",
    "GraphNode",
]

logger = get_logger(__name__)


@dataclass(frozen=True)
class GraphNode:
    """One node of a conversation mapping.

    Attributes:
        key: Key of the node in the mapping
        id: Node id as exported (falls back to the key)
        message: Raw message object, None for structural nodes
        parent: Key of the parent node
        children: Keys of the child nodes
    """

    key: str
    id: str
    message: Mapping[str, Any] | None = None
    parent: str | None = None
    children: tuple[str, ...] = field(default_factory=tuple)

    @property
    def is_leaf(self) -> bool:
        return not self.children

    @property
    def create_time(self) -> float:
        value = self.message.get("create_time") if self.message else None
        if isinstance(value, (int, float)) and not isinstance(value, bool) and math.isfinite(value):
            return float(value)
        return 0.0


class ConversationGraph:
    """Arena of conversation nodes keyed by mapping key.

    Example:
        graph = ConversationGraph.from_mapping(conv["mapping"])
        path = graph.choose_path(conv.get("current_node"))
    """

    def __init__(self, nodes: Mapping[str, GraphNode]) -> None:
        self._nodes: dict[str, GraphNode] = dict(nodes)

    @classmethod
    def from_mapping(cls, mapping: Any) -> "ConversationGraph":
        """Build the arena from a raw ``mapping`` object.

        Entries that are not objects are ignored.
        """
        nodes: dict[str, GraphNode] = {}
        if not isinstance(mapping, Mapping):
            return cls(nodes)

        for key, raw in mapping.items():
            if not isinstance(raw, Mapping):
                continue
            message = raw.get("message")
            children = raw.get("children")
            parent = raw.get("parent")
            nodes[str(key)] = GraphNode(
                key=str(key),
                id=str(raw.get("id") or key),
                message=message if isinstance(message, Mapping) and message else None,
                parent=str(parent) if parent else None,
                children=tuple(str(c) for c in children) if isinstance(children, list) else (),
            )
        return cls(nodes)

    def __len__(self) -> int:
        return len(self._nodes)

    def __contains__(self, key: object) -> bool:
        return key in self._nodes

    def get(self, key: str) -> GraphNode | None:
        return self._nodes.get(key)

    def leaves(self) -> list[GraphNode]:
        """Message-bearing nodes without children, in mapping order."""
        return [n for n in self._nodes.values() if n.message is not None and n.is_leaf]

    def latest_leaf(self) -> GraphNode | None:
        """Leaf with the greatest ``create_time``; ties keep the first found."""
        latest: GraphNode | None = None
        for node in self.leaves():
            if latest is None or node.create_time > latest.create_time:
                latest = node
        return latest

    def path_to(self, key: str) -> list[str]:
        """Keys from the root down to ``key``; [] when ``key`` is unknown."""
        path: list[str] = []
        seen: set[str] = set()
        node = self._nodes.get(key)
        while node is not None and node.key not in seen:
            seen.add(node.key)
            path.append(node.key)
            node = self._nodes.get(node.parent) if node.parent else None
        if node is not None:
            logger.warning("conversation_graph_cycle", key=node.key)
        path.reverse()
        return path

    def choose_path(self, current_node: str | None = None) -> list[str]:
        """Select the canonical path through the graph.

        The path to ``current_node`` is authoritative when it resolves.
        Otherwise the latest leaf is used. The two may disagree on an
        internally inconsistent export; no reconciliation is attempted.

        Returns:
            Node keys from root to the selected end, [] when nothing resolves
        """
        if current_node and current_node in self._nodes:
            return self.path_to(current_node)

        leaf = self.latest_leaf()
        if leaf is None:
            return []
        return self.path_to(leaf.key)

    def messages(
        self,
        conversation_id: str,
        conversation_title: str,
        vendor: Vendor,
        current_node: str | None = None,
    ) -> list[ParsedMessage]:
        """Walk the canonical path and emit its messages in time order.

        Structural nodes without a message are skipped and empty assistant
        messages are dropped.
        """
        out: list[ParsedMessage] = []
        for key in self.choose_path(current_node):
            node = self._nodes[key]
            if node.message is None:
                continue
            msg = to_parsed_message(
                node.message,
                message_id=node.id,
                conversation_id=conversation_id,
                conversation_title=conversation_title,
                vendor=vendor,
            )
            if msg is not None:
                out.append(msg)

        out.sort(key=lambda m: m.timestamp_ms)
        return out
