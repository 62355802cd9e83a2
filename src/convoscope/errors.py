"""Exception types for convoscope.

Only caller defects and provider failures are raised. Malformed export
content is recovered where it is read and never surfaces here.
"""

__all__ = [
    "ConvoscopeError",
    "DimensionMismatchError",
    "EmbeddingProviderError",
]


class ConvoscopeError(Exception):
    """Base class for all convoscope errors."""


class DimensionMismatchError(ConvoscopeError, ValueError):
    """Two vectors of different length were compared."""

    def __init__(self, left: int, right: int) -> None:
        super().__init__(f"Embeddings must have same dimension ({left} != {right})")
        self.left = left
        self.right = right


class EmbeddingProviderError(ConvoscopeError, RuntimeError):
    """Embedding request failed or returned an unexpected payload."""

    def __init__(
        self,
        message: str,
        *,
        provider: str | None = None,
        status_code: int | None = None,
    ) -> None:
        super().__init__(message)
        self.provider = provider
        self.status_code = status_code
