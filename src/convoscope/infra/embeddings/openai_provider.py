"""OpenAI embedding provider for convoscope.

This module provides the OpenAI implementation of the embedding interface.
"""

from typing import Any, Self

import openai
from openai import AsyncOpenAI

from convoscope.config import EmbeddingSettings
from convoscope.errors import EmbeddingProviderError
from convoscope.infra.embeddings.cache import EmbeddingCache
from convoscope.interfaces.embedding import EmbeddingServiceInterface
from convoscope.logging import get_logger

__all__ = [
    "OpenAIEmbeddingProvider",
]

logger = get_logger(__name__)


class OpenAIEmbeddingProvider(EmbeddingServiceInterface):
    """OpenAI implementation of the embedding interface.

    ``settings.base_url`` may point the SDK at any OpenAI-compatible server.
    """

    config_class = EmbeddingSettings

    def __init__(self, settings: EmbeddingSettings, client: AsyncOpenAI | None = None) -> None:
        """Initialize OpenAI provider.

        Args:
            settings: Embedding configuration settings
            client: Preconfigured SDK client
        """
        self._settings = settings
        api_key = settings.api_key.get_secret_value() if settings.api_key else None
        self._client = client or AsyncOpenAI(
            api_key=api_key,
            base_url=settings.base_url,
            timeout=settings.timeout,
        )
        self._model = settings.model
        self._batch_size = settings.batch_size
        self._cache = EmbeddingCache("openai", self._model)

    @classmethod
    async def from_config(cls, config: EmbeddingSettings) -> Self:
        """Factory method for orchestrator instantiation."""
        return cls(config)

    @classmethod
    async def from_dict(cls, config: dict[str, Any]) -> Self:
        """Factory method for custom config dict."""
        return cls(EmbeddingSettings(**config))

    async def close(self) -> None:
        """Close the SDK client."""
        await self._client.close()

    async def embed(self, text: str) -> list[float]:
        """Generate embedding for text."""
        if not text or not text.strip():
            raise ValueError("Text cannot be empty")

        cached = self._cache.get(text)
        if cached is not None:
            return cached

        embedding = (await self._create([text]))[0]
        self._cache.set(text, embedding)
        return embedding

    async def embed_batch(self, texts: list[str]) -> list[list[float]]:
        """Generate embeddings for multiple texts.

        Cached texts are served locally; the rest go out one request per
        chunk of ``batch_size``.
        """
        if not texts:
            return []
        if any(not t or not t.strip() for t in texts):
            raise ValueError("Text cannot be empty")

        missing = [t for t in dict.fromkeys(texts) if self._cache.get(t) is None]
        for start in range(0, len(missing), self._batch_size):
            chunk = missing[start : start + self._batch_size]
            for text, embedding in zip(chunk, await self._create(chunk), strict=True):
                self._cache.set(text, embedding)

        return [self._cache.get(t) or [] for t in texts]

    def clear_cache(self) -> None:
        """Clear embedding cache."""
        self._cache.clear()

    async def _create(self, inputs: list[str]) -> list[list[float]]:
        try:
            response = await self._client.embeddings.create(model=self._model, input=inputs)
        except openai.APIStatusError as e:
            raise EmbeddingProviderError(
                f"openai API error: {e.status_code}",
                provider="openai",
                status_code=e.status_code,
            ) from e
        except openai.OpenAIError as e:
            raise EmbeddingProviderError(f"openai request failed: {e}", provider="openai") from e

        sorted_data = sorted(response.data, key=lambda x: x.index)
        if len(sorted_data) != len(inputs):
            raise EmbeddingProviderError(
                f"openai returned {len(sorted_data)} embeddings for {len(inputs)} inputs",
                provider="openai",
            )
        logger.debug("openai_embeddings_created", count=len(inputs), model=self._model)
        return [list(item.embedding) for item in sorted_data]
