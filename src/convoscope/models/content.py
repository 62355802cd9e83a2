"""Content block variants for convoscope.

Vendor exports carry message content as loosely typed block arrays.
Blocks are parsed into one of these variants before flattening so the
flattener can match on a closed set of shapes.
"""

from dataclasses import dataclass, field
from typing import Any

__all__ = [
    "ContentBlock",
    "ImageBlock",
    "TextBlock",
    "ToolResultBlock",
    "UnknownBlock",
    "UnparsedBlock",
]


@dataclass(frozen=True)
class TextBlock:
    """Plain string or a ``text``/``output_text``/``input_text`` block."""

    text: str


@dataclass(frozen=True)
class ToolResultBlock:
    """A ``tool_result`` block; content is a string, a list or any JSON value."""

    content: Any = None


@dataclass(frozen=True)
class ImageBlock:
    """Any block whose type mentions ``image``."""

    ref: str = "asset"


@dataclass(frozen=True)
class UnknownBlock:
    """A block of unrecognized type, kept verbatim for a JSON dump."""

    raw: Any = field(default=None)


@dataclass(frozen=True)
class UnparsedBlock:
    """A block that could not be interpreted at all."""

    reason: str = ""


ContentBlock = TextBlock | ToolResultBlock | ImageBlock | UnknownBlock | UnparsedBlock
