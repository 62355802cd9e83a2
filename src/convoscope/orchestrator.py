"""Convoscope orchestrator for high-level ingestion and retrieval.

This module provides the main entry point for the convoscope package,
wiring the import adapters, identity assignment, turn grouping, the
conversation index and the rankers together.
"""

import json
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Literal, Self

from convoscope.config import ConvoscopeConfig
from convoscope.errors import EmbeddingProviderError
from convoscope.importers.base import ExportAdapter
from convoscope.importers.registry import ImportAdapterRegistry
from convoscope.infra.embeddings import create_embedding_provider
from convoscope.interfaces.embedding import EmbeddingServiceInterface
from convoscope.logging import get_logger
from convoscope.models.conversation import ConversationSummary, ParsedConversation
from convoscope.models.message import ParsedMessage
from convoscope.models.search import SearchDocument, SearchFilters, SearchResult
from convoscope.models.turn import Turn
from convoscope.services.conversation_index import ConversationIndexBuilder
from convoscope.services.hybrid import HybridRanker, generate_document_embeddings
from convoscope.services.identity import IdentityService, dedupe_messages
from convoscope.services.lexical import (
    LexicalScorer,
    conversation_to_document,
    message_to_document,
    ranked_search,
)
from convoscope.services.turn_grouper import TurnGrouper

__all__ = ["Convoscope", "IngestResult"]

logger = get_logger(__name__)

AdapterSpec = ExportAdapter | type[ExportAdapter] | str


@dataclass
class IngestResult:
    """Output and statistics from one export ingestion."""

    conversations: list[ParsedConversation] = field(default_factory=list)
    messages: list[ParsedMessage] = field(default_factory=list)
    turns: list[Turn] = field(default_factory=list)
    summaries: list[ConversationSummary] = field(default_factory=list)
    fingerprints: dict[str, str] = field(default_factory=dict)
    source_id: str | None = None
    duplicates_dropped: int = 0
    errors: list[str] = field(default_factory=list)


class Convoscope:
    """Main orchestrator for conversation ingestion and search.

    Without an embedding service every search is lexical-only.

    Example:
        async with Convoscope.from_config() as cs:
            result = cs.ingest_file("conversations.json", "chatgpt")
            docs = cs.build_documents(result.messages)
            embeddings = await cs.embed_documents(docs)
            hits = await cs.search("asyncio gather", docs, embeddings)
    """

    def __init__(
        self,
        embedding_service: EmbeddingServiceInterface | None = None,
        config: ConvoscopeConfig | None = None,
    ) -> None:
        """Initialize Convoscope.

        Args:
            embedding_service: Service used for hybrid search (optional)
            config: Settings (loaded from env / .env when omitted)
        """
        self._config = config or ConvoscopeConfig()
        search = self._config.search

        self._embedding = embedding_service
        self._owns_embedding = False
        self._identity = IdentityService(fingerprint_messages=search.fingerprint_messages)
        self._grouper = TurnGrouper(gap_ms=search.turn_gap_ms)
        self._index_builder = ConversationIndexBuilder()
        self._scorer = LexicalScorer(
            recency_window_days=search.recency_window_days,
            recency_boost=search.recency_boost,
        )
        self._ranker = (
            HybridRanker(
                embedding_service,
                scorer=self._scorer,
                alpha=search.alpha,
                beta=search.beta,
                top_k=search.top_k,
            )
            if embedding_service is not None
            else None
        )

    @classmethod
    def from_config(cls, config: ConvoscopeConfig | None = None) -> Self:
        """Create an instance that owns a provider built from settings."""
        config = config or ConvoscopeConfig()
        instance = cls(create_embedding_provider(config.embedding), config)
        instance._owns_embedding = True
        return instance

    @property
    def config(self) -> ConvoscopeConfig:
        return self._config

    async def close(self) -> None:
        """Close the embedding service if this instance created it."""
        if self._owns_embedding and self._embedding and hasattr(self._embedding, "close"):
            await self._embedding.close()

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    # === INGESTION ===

    def ingest(
        self,
        raw_export: Any,
        adapter: AdapterSpec,
        source_id: str | None = None,
    ) -> IngestResult:
        """Run an export through the complete ingestion pipeline.

        Args:
            raw_export: Parsed JSON data, a JSON string, or a path to a JSON file
            adapter: Adapter instance, adapter class, or registered vendor name
            source_id: Stable source id recorded on the result

        Returns:
            IngestResult with conversations, messages, turns and summaries
        """
        export_adapter = self._resolve_adapter(adapter)
        data = self._load(raw_export)
        result = IngestResult(source_id=source_id)

        for raw in export_adapter.conversations(data):
            try:
                conversation = export_adapter.parse_conversation(raw)
            except Exception as e:
                native_id = raw.get("id") or raw.get("uuid") or "?"
                logger.error("conversation_parse_failed", conversation_id=native_id, error=str(e))
                result.errors.append(f"Conversation '{native_id}': {e}")
                continue

            if not conversation.has_messages:
                continue

            conversation = self._identity.assign(conversation)
            conversation_uid = conversation.messages[0].conversation_uid or conversation.id
            result.fingerprints[conversation_uid] = self._identity.fingerprint(conversation)
            result.conversations.append(conversation)

        all_messages = [m for conv in result.conversations for m in conv.messages]
        result.messages = dedupe_messages(all_messages)
        result.duplicates_dropped = len(all_messages) - len(result.messages)

        result.turns = self.group_turns(result.messages)
        result.summaries = self._index_builder.build(result.messages)

        logger.info(
            "ingest_completed",
            vendor=str(export_adapter.vendor),
            conversations=len(result.conversations),
            messages=len(result.messages),
            turns=len(result.turns),
            duplicates_dropped=result.duplicates_dropped,
            errors=len(result.errors),
        )
        return result

    def ingest_file(
        self,
        path: Path | str,
        adapter: AdapterSpec,
        source_id: str | None = None,
    ) -> IngestResult:
        """Ingest an export file from disk."""
        return self.ingest(Path(path), adapter, source_id)

    def group_turns(self, messages: Iterable[ParsedMessage]) -> list[Turn]:
        """Group messages into turns, one conversation at a time.

        Conversations keep their first-seen order.
        """
        by_conversation: dict[str, list[ParsedMessage]] = {}
        for msg in messages:
            key = msg.conversation_uid or msg.conversation_id
            by_conversation.setdefault(key, []).append(msg)

        turns: list[Turn] = []
        for conversation_messages in by_conversation.values():
            turns.extend(self._grouper.group(conversation_messages))
        return turns

    def build_documents(
        self,
        messages: Iterable[ParsedMessage],
        per: Literal["conversation", "message"] = "conversation",
        source_id: str | None = None,
    ) -> list[SearchDocument]:
        """Build search documents from a message stream.

        Args:
            messages: Parsed (ideally id-assigned) messages
            per: One document per conversation or per message
            source_id: Source id stamped on every document

        Returns:
            Search documents in stream order
        """
        if per == "message":
            return [message_to_document(m, source_id) for m in messages]

        grouped: dict[str, list[ParsedMessage]] = {}
        for msg in messages:
            grouped.setdefault(msg.conversation_uid or msg.conversation_id, []).append(msg)

        docs: list[SearchDocument] = []
        for conversation_messages in grouped.values():
            first = conversation_messages[0]
            conversation = ParsedConversation(
                id=first.conversation_id,
                title=first.conversation_title,
                vendor=first.vendor,
                messages=conversation_messages,
            )
            docs.append(conversation_to_document(conversation, source_id))
        return docs

    # === RETRIEVAL ===

    async def embed_documents(self, docs: Sequence[SearchDocument]) -> dict[str, list[float]]:
        """Embed documents for hybrid search; empty without a service."""
        if self._embedding is None:
            return {}
        return await generate_document_embeddings(
            docs,
            self._embedding,
            batch_size=self._config.embedding.batch_size,
        )

    async def search(
        self,
        query: str,
        docs: Sequence[SearchDocument],
        embeddings: dict[str, list[float]] | None = None,
        *,
        use_regex: bool = False,
        filters: SearchFilters | None = None,
        alpha: float | None = None,
        beta: float | None = None,
        top_k: int | None = None,
    ) -> list[SearchResult]:
        """Search documents, hybrid when possible and lexical otherwise.

        Hybrid ranking needs an embedding service, a literal query and an
        embedding for every candidate with text. Missing embeddings (as left
        by a failed ``embed_documents``) or a provider failure at query time
        fall back to lexical ranking.
        """
        candidates = [d for d in docs if filters is None or filters.accepts(d)]
        limit = self._config.search.top_k if top_k is None else top_k

        hybrid = self._ranker is not None and bool(embeddings) and not use_regex
        if hybrid:
            missing = [d.id for d in candidates if d.embedding_text and d.id not in embeddings]
            if missing:
                logger.warning(
                    "hybrid_search_incomplete_embeddings",
                    missing=len(missing),
                    candidates=len(candidates),
                )
                hybrid = False

        if hybrid:
            try:
                return await self._ranker.rank(
                    query,
                    candidates,
                    embeddings,
                    alpha=alpha,
                    beta=beta,
                    top_k=limit,
                )
            except EmbeddingProviderError as e:
                logger.warning("hybrid_search_fallback", error=str(e))

        return ranked_search(candidates, query, use_regex=use_regex, scorer=self._scorer)[:limit]

    # === HELPERS ===

    def _resolve_adapter(self, adapter: AdapterSpec) -> ExportAdapter:
        if isinstance(adapter, ExportAdapter):
            return adapter
        if isinstance(adapter, str):
            return ImportAdapterRegistry.create(adapter)
        return adapter()

    def _load(self, raw_export: Any) -> Any:
        if isinstance(raw_export, Path):
            with raw_export.open("r", encoding="utf-8") as f:
                return json.load(f)
        if isinstance(raw_export, str):
            path = Path(raw_export)
            if not raw_export.lstrip().startswith(("[", "{")) and path.exists():
                return self._load(path)
            return json.loads(raw_export)
        return raw_export
