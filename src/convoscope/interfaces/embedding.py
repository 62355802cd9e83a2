"""Embedding service interface for convoscope.

This module defines the Protocol for embedding generation services.
"""

from typing import Protocol, runtime_checkable

__all__ = [
    "EmbeddingServiceInterface",
]


@runtime_checkable
class EmbeddingServiceInterface(Protocol):
    """Contract for embedding generation services.

    Rankers and the orchestrator receive an implementation explicitly;
    there is no process-wide default service.
    """

    async def embed(self, text: str) -> list[float]:
        """Generate embedding vector for text.

        Args:
            text: Input text to embed

        Returns:
            Embedding vector as list of floats

        Raises:
            EmbeddingProviderError: If the provider request fails
        """
        ...

    async def embed_batch(self, texts: list[str]) -> list[list[float]]:
        """Generate embeddings for multiple texts.

        Args:
            texts: List of input texts

        Returns:
            List of embedding vectors, in input order
        """
        ...
