"""Shared test fixtures for convoscope.

This module provides pytest fixtures used across all tests.
"""

from typing import Any
from unittest.mock import AsyncMock

import pytest

from convoscope.models.message import ParsedMessage, Vendor
from convoscope.models.search import SearchDocument

# 2024-01-01T00:00:00Z
BASE_TS_MS = 1704067200000


# Mock fixtures
@pytest.fixture
def mock_embedding() -> AsyncMock:
    """Create mock embedding interface returning one fixed unit vector."""
    embedding = AsyncMock()
    embedding.embed.return_value = [1.0, 0.0, 0.0]
    embedding.embed_batch.side_effect = lambda texts: [[1.0, 0.0, 0.0] for _ in texts]
    return embedding


# Sample data fixtures
@pytest.fixture
def two_node_mapping() -> dict[str, Any]:
    """Minimal ChatGPT mapping: user "Hi" followed by assistant "Hello"."""
    return {
        "A": {
            "id": "A",
            "message": {"author": {"role": "user"}, "content": "Hi"},
            "children": ["B"],
        },
        "B": {
            "id": "B",
            "parent": "A",
            "message": {
                "author": {"role": "assistant"},
                "content": [{"type": "text", "text": "Hello"}],
            },
            "children": [],
        },
    }


@pytest.fixture
def branched_conversation() -> dict[str, Any]:
    """ChatGPT conversation with a regenerated answer (two leaves)."""
    return {
        "id": "conv-branch",
        "title": "Python Async Programming Help",
        "create_time": 1704067200,
        "current_node": "answer-2",
        "mapping": {
            "root": {"id": "root", "message": None, "parent": None, "children": ["question"]},
            "question": {
                "id": "question",
                "parent": "root",
                "children": ["answer-1", "answer-2"],
                "message": {
                    "author": {"role": "user"},
                    "content": {"content_type": "text", "parts": ["How does asyncio.gather work?"]},
                    "create_time": 1704067200,
                },
            },
            "answer-1": {
                "id": "answer-1",
                "parent": "question",
                "children": [],
                "message": {
                    "author": {"role": "assistant"},
                    "content": {"content_type": "text", "parts": ["First draft answer."]},
                    "create_time": 1704067260,
                },
            },
            "answer-2": {
                "id": "answer-2",
                "parent": "question",
                "children": [],
                "message": {
                    "author": {"role": "assistant"},
                    "content": {
                        "content_type": "text",
                        "parts": ["asyncio.gather runs awaitables concurrently."],
                    },
                    "create_time": 1704067230,
                },
            },
        },
    }


@pytest.fixture
def sample_messages() -> list[ParsedMessage]:
    """Create a small two-conversation message stream."""
    return [
        ParsedMessage(
            id="m1",
            conversation_id="c1",
            conversation_title="Python asyncio",
            role="user",
            timestamp_ms=BASE_TS_MS,
            text="How do I use asyncio.gather?",
            vendor=Vendor.CHATGPT,
        ),
        ParsedMessage(
            id="m2",
            conversation_id="c1",
            conversation_title="Python asyncio",
            role="assistant",
            timestamp_ms=BASE_TS_MS + 5_000,
            text="Pass coroutines to asyncio.gather and await the result.",
            vendor=Vendor.CHATGPT,
        ),
        ParsedMessage(
            id="m3",
            conversation_id="c2",
            conversation_title="Sourdough",
            role="user",
            timestamp_ms=BASE_TS_MS + 86_400_000,
            text="How long should sourdough proof?",
            vendor=Vendor.CLAUDE,
        ),
    ]


@pytest.fixture
def sample_documents() -> list[SearchDocument]:
    """Create search documents with distinct vocabulary."""
    return [
        SearchDocument(
            id="d1",
            title="Python asyncio",
            body="gather runs coroutines concurrently",
            vendor=Vendor.CHATGPT,
        ),
        SearchDocument(
            id="d2",
            title="Sourdough",
            body="python is not a bread ingredient",
            vendor=Vendor.CLAUDE,
        ),
        SearchDocument(
            id="d3",
            title="Gardening",
            body="tomatoes need sun",
            vendor=Vendor.CLAUDE,
        ),
    ]
