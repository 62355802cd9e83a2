"""Public data models for convoscope.

This module exports all public value objects.
"""

from convoscope.models.content import (
    ContentBlock,
    ImageBlock,
    TextBlock,
    ToolResultBlock,
    UnknownBlock,
    UnparsedBlock,
)
from convoscope.models.conversation import UNTITLED, ConversationSummary, ParsedConversation
from convoscope.models.ids import StableIdInfo, StableIdKind
from convoscope.models.message import ParsedMessage, Role, Vendor
from convoscope.models.search import SearchDocument, SearchFilters, SearchResult
from convoscope.models.turn import DayBucket, Turn

__all__ = [
    "UNTITLED",
    "ContentBlock",
    "ConversationSummary",
    "DayBucket",
    "ImageBlock",
    "ParsedConversation",
    "ParsedMessage",
    "Role",
    "SearchDocument",
    "SearchFilters",
    "SearchResult",
    "StableIdInfo",
    "StableIdKind",
    "TextBlock",
    "ToolResultBlock",
    "Turn",
    "UnknownBlock",
    "UnparsedBlock",
    "Vendor",
]
