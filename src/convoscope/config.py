"""Configuration management for convoscope.

This module provides typed configuration classes using pydantic-settings.
Configuration is loaded from environment variables with optional .env file support.
"""

from typing import Literal

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

__all__ = [
    "EmbeddingSettings",
    "SearchSettings",
    "ConvoscopeConfig",
]

EmbeddingProviderName = Literal["ollama", "lmstudio", "openai"]

_DEFAULT_BASE_URLS: dict[str, str] = {
    "ollama": "http://localhost:11434",
    "lmstudio": "http://localhost:1234",
}


class EmbeddingSettings(BaseSettings):
    """Embedding provider settings."""

    model_config = SettingsConfigDict(
        env_prefix="CONVOSCOPE_EMBEDDING_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    provider: EmbeddingProviderName = "ollama"
    base_url: str | None = None
    model: str = "nomic-embed-text"
    dimension: int = 768
    batch_size: int = Field(default=10, ge=1)
    timeout: float = Field(default=30.0, gt=0)
    api_key: SecretStr | None = None  # openai only

    @property
    def resolved_base_url(self) -> str:
        """Base URL with the provider default applied."""
        if self.base_url:
            return self.base_url.rstrip("/")
        return _DEFAULT_BASE_URLS.get(self.provider, "")


class SearchSettings(BaseSettings):
    """Ranking, grouping and fingerprint settings."""

    model_config = SettingsConfigDict(
        env_prefix="CONVOSCOPE_SEARCH_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    alpha: float = Field(default=0.5, ge=0.0)
    beta: float = Field(default=0.5, ge=0.0)
    top_k: int = Field(default=10, ge=1)
    turn_gap_minutes: float = Field(default=7.0, ge=0.0)
    recency_window_days: float = Field(default=180.0, gt=0)
    recency_boost: float = Field(default=0.25, ge=0.0)
    fingerprint_messages: int = Field(default=5, ge=1)

    @property
    def turn_gap_ms(self) -> int:
        """Turn gap threshold in milliseconds."""
        return int(self.turn_gap_minutes * 60 * 1000)


class ConvoscopeConfig(BaseSettings):
    """Main configuration aggregating all settings.

    Example usage:
        config = ConvoscopeConfig()
        gap = config.search.turn_gap_ms
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    embedding: EmbeddingSettings = Field(default_factory=EmbeddingSettings)
    search: SearchSettings = Field(default_factory=SearchSettings)
