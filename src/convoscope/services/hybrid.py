"""Hybrid lexical + vector ranking for convoscope.

The fused score of a document is::

    alpha * lexical / max_lexical + beta * (cosine + 1) / 2

with ``alpha`` and ``beta`` normalized to sum to 1, so every fused score
lies in [0, 1].
"""

from collections.abc import Mapping, Sequence

import numpy as np

from convoscope.errors import DimensionMismatchError, EmbeddingProviderError
from convoscope.interfaces.embedding import EmbeddingServiceInterface
from convoscope.logging import get_logger
from convoscope.models.search import SearchDocument, SearchResult
from convoscope.services.lexical import LexicalScorer, tokenize_query

__all__ = [
    "HybridRanker",
    "cosine_similarity",
    "generate_document_embeddings",
    "normalize_weights",
    "vector_search",
]

logger = get_logger(__name__)


def cosine_similarity(a: Sequence[float], b: Sequence[float]) -> float:
    """Compute cosine similarity between two embeddings.

    Raises:
        DimensionMismatchError: If the vectors differ in length
    """
    if len(a) != len(b):
        raise DimensionMismatchError(len(a), len(b))

    vec1 = np.asarray(a, dtype=float)
    vec2 = np.asarray(b, dtype=float)
    norm1 = np.linalg.norm(vec1)
    norm2 = np.linalg.norm(vec2)
    if norm1 == 0 or norm2 == 0:
        return 0.0
    return float(np.dot(vec1, vec2) / (norm1 * norm2))


def normalize_weights(alpha: float, beta: float) -> tuple[float, float]:
    """Scale weights to sum to 1; both zero gives an even split."""
    total = alpha + beta
    if total <= 0:
        return 0.5, 0.5
    return alpha / total, beta / total


def vector_search(
    query_embedding: Sequence[float],
    docs: Sequence[SearchDocument],
    embeddings: Mapping[str, Sequence[float]],
    top_k: int = 10,
) -> list[SearchResult]:
    """Rank documents by cosine similarity alone.

    Documents without an embedding are skipped; only positive
    similarities are kept.
    """
    results: list[SearchResult] = []
    for doc in docs:
        doc_embedding = embeddings.get(doc.id)
        if doc_embedding is None:
            continue
        similarity = cosine_similarity(query_embedding, doc_embedding)
        if similarity > 0:
            results.append(SearchResult(id=doc.id, score=similarity, doc=doc))

    results.sort(key=lambda r: r.score, reverse=True)
    return results[:top_k]


async def generate_document_embeddings(
    docs: Sequence[SearchDocument],
    service: EmbeddingServiceInterface,
    batch_size: int = 10,
) -> dict[str, list[float]]:
    """Embed each document's title, system and body text.

    Documents with no text are skipped. Texts go to the service
    ``batch_size`` at a time; a provider failure is logged and the
    embeddings produced by earlier batches are returned.
    """
    embeddable = [doc for doc in docs if doc.embedding_text.strip()]
    embeddings: dict[str, list[float]] = {}

    for start in range(0, len(embeddable), batch_size):
        chunk = embeddable[start : start + batch_size]
        try:
            vectors = await service.embed_batch([doc.embedding_text for doc in chunk])
        except EmbeddingProviderError as e:
            logger.warning(
                "document_embedding_failed",
                embedded=len(embeddings),
                total=len(embeddable),
                error=str(e),
            )
            break
        for doc, vector in zip(chunk, vectors, strict=True):
            embeddings[doc.id] = vector

    logger.debug("document_embeddings_generated", count=len(embeddings), total=len(docs))
    return embeddings


class HybridRanker:
    """Fuses lexical and vector scores into one ranking.

    The embedding service is injected; the ranker never reaches for a
    global provider.

    Example:
        ranker = HybridRanker(provider)
        results = await ranker.rank("python asyncio", docs, embeddings)
    """

    def __init__(
        self,
        embedding_service: EmbeddingServiceInterface,
        scorer: LexicalScorer | None = None,
        alpha: float = 0.5,
        beta: float = 0.5,
        top_k: int = 10,
    ) -> None:
        """Initialize ranker.

        Args:
            embedding_service: Service used to embed the query
            scorer: Lexical scorer (default weights when omitted)
            alpha: Default lexical weight
            beta: Default vector weight
            top_k: Default result limit
        """
        self._embedding = embedding_service
        self._scorer = scorer or LexicalScorer()
        self._alpha = alpha
        self._beta = beta
        self._top_k = top_k

    async def rank(
        self,
        query: str,
        docs: Sequence[SearchDocument],
        embeddings: Mapping[str, Sequence[float]],
        alpha: float | None = None,
        beta: float | None = None,
        top_k: int | None = None,
        now_ms: int | None = None,
    ) -> list[SearchResult]:
        """Rank documents by fused lexical and vector score.

        Only documents that have an embedding are ranked. A blank query
        returns no results without contacting the provider.

        Raises:
            EmbeddingProviderError: If the query cannot be embedded
            DimensionMismatchError: If a document embedding has the wrong length
        """
        if not query.strip():
            return []

        w_lex, w_vec = normalize_weights(
            self._alpha if alpha is None else alpha,
            self._beta if beta is None else beta,
        )
        limit = self._top_k if top_k is None else top_k

        query_embedding = await self._embedding.embed(query)

        tokens = tokenize_query(query)
        lexical = {doc.id: self._scorer.score(doc, tokens, now_ms) for doc in docs}
        max_lexical = max(lexical.values(), default=0.0)
        divisor = max_lexical if max_lexical > 0 else 1.0

        results: list[SearchResult] = []
        for doc in docs:
            doc_embedding = embeddings.get(doc.id)
            if doc_embedding is None:
                continue
            similarity = cosine_similarity(query_embedding, doc_embedding)
            fused = w_lex * (lexical[doc.id] / divisor) + w_vec * (similarity + 1) / 2
            if fused > 0:
                results.append(SearchResult(id=doc.id, score=fused, doc=doc))

        results.sort(key=lambda r: r.score, reverse=True)
        logger.debug(
            "hybrid_ranked",
            doc_count=len(docs),
            hit_count=len(results),
            alpha=w_lex,
            beta=w_vec,
        )
        return results[:limit]

    async def search_vector(
        self,
        query: str,
        docs: Sequence[SearchDocument],
        embeddings: Mapping[str, Sequence[float]],
        top_k: int | None = None,
    ) -> list[SearchResult]:
        """Embed the query and rank by cosine similarity only."""
        if not query.strip():
            return []
        query_embedding = await self._embedding.embed(query)
        return vector_search(
            query_embedding,
            docs,
            embeddings,
            self._top_k if top_k is None else top_k,
        )
