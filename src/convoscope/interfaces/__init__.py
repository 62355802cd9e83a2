"""Interface contracts for convoscope.

This module exports all Protocol-based interfaces for dependency injection.
"""

from convoscope.interfaces.embedding import EmbeddingServiceInterface

__all__ = [
    "EmbeddingServiceInterface",
]
