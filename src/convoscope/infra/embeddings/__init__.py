"""Embedding provider implementations for convoscope."""

from convoscope.config import EmbeddingSettings
from convoscope.infra.embeddings.cache import EmbeddingCache
from convoscope.infra.embeddings.http_provider import HttpEmbeddingProvider
from convoscope.infra.embeddings.openai_provider import OpenAIEmbeddingProvider
from convoscope.interfaces.embedding import EmbeddingServiceInterface

__all__ = [
    "EmbeddingCache",
    "HttpEmbeddingProvider",
    "OpenAIEmbeddingProvider",
    "create_embedding_provider",
]


def create_embedding_provider(
    settings: EmbeddingSettings | None = None,
) -> EmbeddingServiceInterface:
    """Create the embedding provider selected by ``settings.provider``.

    Args:
        settings: Embedding settings (loaded from the environment if omitted)

    Returns:
        Provider instance; callers own it and should ``close()`` it
    """
    settings = settings or EmbeddingSettings()
    if settings.provider == "openai":
        return OpenAIEmbeddingProvider(settings)
    return HttpEmbeddingProvider(settings)
