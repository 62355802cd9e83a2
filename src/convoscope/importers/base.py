"""Base import adapter for convoscope.

This module defines the abstract base class for export import adapters.
"""

import json
from abc import ABC, abstractmethod
from collections.abc import Mapping
from pathlib import Path
from typing import Any, BinaryIO

from convoscope.models.conversation import ParsedConversation
from convoscope.models.message import ParsedMessage, Vendor

__all__ = [
    "ExportAdapter",
]


class ExportAdapter(ABC):
    """Abstract base class for export import adapters.

    Import adapters parse one vendor's export format into
    ParsedConversation objects carrying the canonical message stream.

    Important: Adapters must NOT persist data or mutate any state.
    They only normalize data. Stable ids are assigned downstream.

    Example:
        class MyAdapter(ExportAdapter):
            @property
            def vendor(self) -> Vendor:
                return Vendor.GROK

            def parse_conversation(self, conv) -> ParsedConversation:
                ...
    """

    @property
    @abstractmethod
    def vendor(self) -> Vendor:
        """Return the vendor this adapter reads.

        The vendor doubles as the registry lookup key.

        Returns:
            Vendor enum member
        """
        ...

    @abstractmethod
    def parse_conversation(self, conv: Mapping[str, Any]) -> ParsedConversation:
        """Parse one raw conversation object.

        This method must be pure. Malformed content degrades to empty or
        placeholder text rather than raising.

        Args:
            conv: Raw conversation object from the export

        Returns:
            ParsedConversation, possibly without messages
        """
        ...

    def conversations(self, raw_export: Any) -> list[Mapping[str, Any]]:
        """Split an export into raw conversation objects.

        Accepts a list of conversations or a dict with a 'conversations'
        key. Entries that are not objects are dropped.
        """
        if isinstance(raw_export, list):
            items = raw_export
        elif isinstance(raw_export, Mapping):
            items = raw_export.get("conversations") or []
        else:
            items = []
        return [c for c in items if isinstance(c, Mapping)]

    def parse(self, raw_export: Any) -> list[ParsedConversation]:
        """Parse raw export data into ParsedConversation objects.

        Args:
            raw_export: Raw JSON data from the export file

        Returns:
            Conversations that produced at least one message
        """
        parsed: list[ParsedConversation] = []
        for conv in self.conversations(raw_export):
            conversation = self.parse_conversation(conv)
            if conversation.has_messages:
                parsed.append(conversation)
        return parsed

    def parse_messages(self, raw_export: Any) -> list[ParsedMessage]:
        """Parse an export straight into one flat message stream.

        Conversations keep export order; messages inside each conversation
        are in time order.
        """
        return [msg for conv in self.parse(raw_export) for msg in conv.messages]

    def parse_file(self, path: Path | str) -> list[ParsedConversation]:
        """Parse from file path.

        Args:
            path: Path to the export JSON file

        Returns:
            List of ParsedConversation objects
        """
        path = Path(path)
        with path.open("r", encoding="utf-8") as f:
            data = json.load(f)
        return self.parse(data)

    def parse_stream(self, stream: BinaryIO) -> list[ParsedConversation]:
        """Parse from a binary stream containing JSON data."""
        return self.parse(json.load(stream))

    def parse_string(self, json_string: str) -> list[ParsedConversation]:
        """Parse from a JSON string."""
        return self.parse(json.loads(json_string))
