"""Stable id models for convoscope."""

from typing import Literal

from pydantic import BaseModel

__all__ = [
    "StableIdInfo",
    "StableIdKind",
]

StableIdKind = Literal["conversation", "message", "source", "fingerprint", "unknown"]


class StableIdInfo(BaseModel, frozen=True):
    """Parsed view of a stable id.

    Attributes:
        kind: Entity type derived from the prefix
        digest: Base-36 hash part after the prefix ("" for unknown ids)
        raw: The id as given
    """

    kind: StableIdKind
    digest: str = ""
    raw: str = ""
