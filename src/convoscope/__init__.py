"""convoscope - Ingestion and hybrid retrieval for exported chat-assistant conversations.

This package provides tools for:
- Parsing ChatGPT and Claude exports into one canonical message stream
- Selecting the canonical path through branching ChatGPT conversation graphs
- Assigning stable, content-derived ids for deduplication across re-imports
- Grouping messages into turns and summarizing conversations
- Lexical and hybrid lexical+vector search

Example usage:
    from convoscope import Convoscope, ChatGPTAdapter

    # Config loaded from .env automatically
    async with Convoscope.from_config() as cs:
        result = cs.ingest_file("conversations.json", ChatGPTAdapter)
        docs = cs.build_documents(result.messages)
        hits = await cs.search("python asyncio", docs, await cs.embed_documents(docs))
"""

__version__ = "0.1.0"

from convoscope.config import ConvoscopeConfig, EmbeddingSettings, SearchSettings
from convoscope.errors import ConvoscopeError, DimensionMismatchError, EmbeddingProviderError

# Import adapters
from convoscope.importers.base import ExportAdapter
from convoscope.importers.chatgpt import ChatGPTAdapter
from convoscope.importers.claude import ClaudeAdapter
from convoscope.importers.registry import ImportAdapterRegistry

# Implementations
from convoscope.infra.embeddings import (
    HttpEmbeddingProvider,
    OpenAIEmbeddingProvider,
    create_embedding_provider,
)

# Interfaces
from convoscope.interfaces.embedding import EmbeddingServiceInterface
from convoscope.models import (
    ConversationSummary,
    ParsedConversation,
    ParsedMessage,
    SearchDocument,
    SearchFilters,
    SearchResult,
    Turn,
    Vendor,
)

# Orchestrator
from convoscope.orchestrator import Convoscope, IngestResult

__all__ = [  # noqa: RUF022
    # Orchestrator
    "Convoscope",
    "IngestResult",
    # Config and errors
    "ConvoscopeConfig",
    "EmbeddingSettings",
    "SearchSettings",
    "ConvoscopeError",
    "DimensionMismatchError",
    "EmbeddingProviderError",
    # Implementations
    "HttpEmbeddingProvider",
    "OpenAIEmbeddingProvider",
    "create_embedding_provider",
    # Import adapters
    "ChatGPTAdapter",
    "ClaudeAdapter",
    "ExportAdapter",
    "ImportAdapterRegistry",
    # Interfaces
    "EmbeddingServiceInterface",
    # Models
    "ConversationSummary",
    "ParsedConversation",
    "ParsedMessage",
    "SearchDocument",
    "SearchFilters",
    "SearchResult",
    "Turn",
    "Vendor",
]
