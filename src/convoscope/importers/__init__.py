"""Import adapters for convoscope.

This module exports the import adapter base class, the registry, the
built-in vendor adapters and the content helpers they share.
"""

from convoscope.importers.base import ExportAdapter
from convoscope.importers.chatgpt import ChatGPTAdapter
from convoscope.importers.claude import ClaudeAdapter
from convoscope.importers.content import UNPARSED_MARKER, flatten_content, parse_block
from convoscope.importers.graph import ConversationGraph, GraphNode
from convoscope.importers.registry import ImportAdapterRegistry
from convoscope.importers.roles import normalize_role

__all__ = [
    "UNPARSED_MARKER",
    "ChatGPTAdapter",
    "ClaudeAdapter",
    "ConversationGraph",
    "ExportAdapter",
    "GraphNode",
    "ImportAdapterRegistry",
    "flatten_content",
    "normalize_role",
    "parse_block",
]
