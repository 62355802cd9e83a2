"""In-memory embedding cache for convoscope.

Embeddings are keyed by provider, model and normalized text so repeated
requests for the same text are served without a network round-trip.
The cache lives for the process lifetime and is never evicted.
"""

from convoscope.logging import get_logger

__all__ = [
    "EmbeddingCache",
]

logger = get_logger(__name__)


class EmbeddingCache:
    """Process-local cache of text embeddings.

    Writes are idempotent: a key always maps to the same vector, so
    concurrent writers from one event loop cannot corrupt it.
    """

    def __init__(self, provider: str, model: str) -> None:
        """Initialize embedding cache.

        Args:
            provider: Provider name, part of every key
            model: Model name, part of every key
        """
        self._provider = provider
        self._model = model
        self._entries: dict[str, list[float]] = {}

    def _make_key(self, text: str) -> str:
        """Generate cache key for text."""
        return f"{self._provider}:{self._model}:{text.strip().lower()}"

    def get(self, text: str) -> list[float] | None:
        """Get cached embedding for text, None on a miss."""
        return self._entries.get(self._make_key(text))

    def set(self, text: str, embedding: list[float]) -> None:
        """Cache embedding for text."""
        self._entries[self._make_key(text)] = embedding

    def clear(self) -> None:
        """Drop every cached embedding."""
        count = len(self._entries)
        self._entries.clear()
        logger.debug("embedding_cache_cleared", count=count)

    def __contains__(self, text: object) -> bool:
        return isinstance(text, str) and self._make_key(text) in self._entries

    def __len__(self) -> int:
        return len(self._entries)
