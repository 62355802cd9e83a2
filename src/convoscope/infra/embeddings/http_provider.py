"""HTTP embedding provider for convoscope.

This module talks to local embedding servers over HTTP:

- Ollama: ``POST {base_url}/api/embeddings`` with ``{model, prompt}``,
  answering ``{"embedding": [...]}``
- LM Studio (OpenAI-compatible): ``POST {base_url}/v1/embeddings`` with
  ``{model, input}``, answering ``{"data": [{"embedding": [...]}]}``
"""

import asyncio
from typing import Any, Self

import httpx

from convoscope.config import EmbeddingSettings
from convoscope.errors import EmbeddingProviderError
from convoscope.infra.embeddings.cache import EmbeddingCache
from convoscope.interfaces.embedding import EmbeddingServiceInterface
from convoscope.logging import get_logger

__all__ = [
    "HttpEmbeddingProvider",
]

logger = get_logger(__name__)


class HttpEmbeddingProvider(EmbeddingServiceInterface):
    """Embedding service backed by an Ollama or LM Studio server.

    Batches are split into chunks of ``batch_size``; each chunk's requests
    run concurrently and the whole chunk fails if any request fails.
    Chunks completed before a failure stay in the cache.

    Example:
        async with HttpEmbeddingProvider(EmbeddingSettings()) as provider:
            vector = await provider.embed("hello")
    """

    config_class = EmbeddingSettings

    def __init__(
        self,
        settings: EmbeddingSettings,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize HTTP provider.

        Args:
            settings: Embedding configuration settings
            client: Preconfigured client (owned by the caller when given)
        """
        if settings.provider not in ("ollama", "lmstudio"):
            raise ValueError(f"Unsupported HTTP embedding provider: {settings.provider}")

        self._settings = settings
        self._provider = settings.provider
        self._model = settings.model
        self._base_url = settings.resolved_base_url
        self._batch_size = settings.batch_size
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=settings.timeout)
        self._cache = EmbeddingCache(self._provider, self._model)

    @classmethod
    async def from_config(cls, config: EmbeddingSettings) -> Self:
        """Factory method for orchestrator instantiation."""
        return cls(config)

    @classmethod
    async def from_dict(cls, config: dict[str, Any]) -> Self:
        """Factory method for custom config dict."""
        return cls(EmbeddingSettings(**config))

    @property
    def cache(self) -> EmbeddingCache:
        return self._cache

    async def close(self) -> None:
        """Close the HTTP client if this provider created it."""
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    async def embed(self, text: str) -> list[float]:
        """Generate embedding for text, using the cache when possible.

        Raises:
            ValueError: If text is empty
            EmbeddingProviderError: If the request fails or the response
                has no embedding
        """
        if not text or not text.strip():
            raise ValueError("Text cannot be empty")

        cached = self._cache.get(text)
        if cached is not None:
            return cached

        embedding = await self._fetch_embedding(text)
        self._cache.set(text, embedding)
        return embedding

    async def embed_batch(self, texts: list[str]) -> list[list[float]]:
        """Generate embeddings chunk by chunk, concurrently within a chunk."""
        results: list[list[float]] = []
        for start in range(0, len(texts), self._batch_size):
            chunk = texts[start : start + self._batch_size]
            results.extend(await self._embed_chunk(chunk))
            logger.debug(
                "embedding_chunk_done",
                provider=self._provider,
                done=len(results),
                total=len(texts),
            )
        return results

    async def _embed_chunk(self, chunk: list[str]) -> list[list[float]]:
        """Embed one chunk concurrently; the first failure cancels the rest."""
        tasks = [asyncio.ensure_future(self.embed(t)) for t in chunk]
        try:
            return list(await asyncio.gather(*tasks))
        except BaseException:
            for task in tasks:
                task.cancel()
            # Collect sibling outcomes so none is left unretrieved
            await asyncio.gather(*tasks, return_exceptions=True)
            raise

    async def test_connection(self) -> bool:
        """Check that the provider answers an embedding request."""
        try:
            await self.embed("test")
        except (EmbeddingProviderError, ValueError) as e:
            logger.warning("embedding_connection_failed", provider=self._provider, error=str(e))
            return False
        return True

    def clear_cache(self) -> None:
        """Clear embedding cache."""
        self._cache.clear()

    async def _fetch_embedding(self, text: str) -> list[float]:
        if self._provider == "ollama":
            url = f"{self._base_url}/api/embeddings"
            payload = {"model": self._model, "prompt": text}
        else:
            url = f"{self._base_url}/v1/embeddings"
            payload = {"model": self._model, "input": text}

        try:
            response = await self._client.post(url, json=payload)
        except httpx.HTTPError as e:
            raise EmbeddingProviderError(
                f"{self._provider} request failed: {e}",
                provider=self._provider,
            ) from e

        if response.is_error:
            raise EmbeddingProviderError(
                f"{self._provider} API error: {response.status_code} {response.reason_phrase}",
                provider=self._provider,
                status_code=response.status_code,
            )

        try:
            data = response.json()
        except ValueError as e:
            raise EmbeddingProviderError(
                f"Invalid JSON from {self._provider}",
                provider=self._provider,
                status_code=response.status_code,
            ) from e

        return self._extract_embedding(data)

    def _extract_embedding(self, data: Any) -> list[float]:
        embedding: Any = None
        if isinstance(data, dict):
            if self._provider == "ollama":
                embedding = data.get("embedding")
            else:
                items = data.get("data")
                if isinstance(items, list) and items and isinstance(items[0], dict):
                    embedding = items[0].get("embedding")

        if not isinstance(embedding, list) or not embedding:
            raise EmbeddingProviderError(
                f"Invalid embedding response from {self._provider}",
                provider=self._provider,
            )
        return [float(x) for x in embedding]
