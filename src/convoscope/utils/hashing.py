"""Hashing utilities for convoscope.

This module provides the deterministic primitives that stable ids are
built from: FNV-1a hashes over UTF-16 code units, text normalization that
absorbs formatting noise, and sorted-key JSON canonicalization.
"""

import json
import math
import re
from collections.abc import Iterator
from datetime import UTC, datetime
from typing import Any

__all__ = [
    "canonical_json",
    "fnv1a32",
    "fnv1a64",
    "hash_attachments",
    "hash_tool_payload",
    "normalize_text",
    "slugify",
    "to_base36",
    "to_epoch_ms",
]

FNV64_OFFSET = 0xCBF29CE484222325
FNV64_PRIME = 0x100000001B3
FNV32_OFFSET = 0x811C9DC5
FNV32_PRIME = 0x01000193

MASK64 = 0xFFFFFFFFFFFFFFFF
MASK32 = 0xFFFFFFFF

_BASE36_DIGITS = "0123456789abcdefghijklmnopqrstuvwxyz"
_WHITESPACE_RE = re.compile(r"\s+")
_SLUG_RE = re.compile(r"[^a-z0-9]+")


def _utf16_units(text: str) -> Iterator[int]:
    """Yield UTF-16 code units; astral characters become surrogate pairs."""
    data = text.encode("utf-16-le", "surrogatepass")
    for i in range(0, len(data), 2):
        yield data[i] | (data[i + 1] << 8)


def to_base36(value: int) -> str:
    """Encode a non-negative integer in lowercase base 36."""
    if value < 0:
        raise ValueError("base36 encoding requires a non-negative integer")
    if value == 0:
        return "0"
    digits: list[str] = []
    while value:
        value, rem = divmod(value, 36)
        digits.append(_BASE36_DIGITS[rem])
    return "".join(reversed(digits))


def fnv1a64(text: str) -> str:
    """64-bit FNV-1a over UTF-16 code units, base-36 encoded.

    Args:
        text: Seed string

    Returns:
        Base-36 digest (at most 13 characters)
    """
    h = FNV64_OFFSET
    for unit in _utf16_units(text):
        h ^= unit
        h = (h * FNV64_PRIME) & MASK64
    return to_base36(h)


def fnv1a32(text: str) -> str:
    """32-bit FNV-1a for short graph-node labels.

    Returns:
        Zero-padded 8-character hex digest
    """
    h = FNV32_OFFSET
    for unit in _utf16_units(text):
        h ^= unit
        h = (h * FNV32_PRIME) & MASK32
    return f"{h:08x}"


def normalize_text(text: str | None) -> str:
    """Normalize text so hashes do not churn on whitespace or case.

    CRLF becomes LF, every whitespace run collapses to one space, then the
    result is trimmed and lowercased.
    """
    if not text:
        return ""
    text = text.replace("\r\n", "\n")
    return _WHITESPACE_RE.sub(" ", text).strip().lower()


def canonical_json(value: Any) -> str:
    """Serialize a JSON-like value with sorted keys and no whitespace.

    Values that cannot be serialized (cycles, exotic objects) fall back to
    their ``str()`` form; ``None`` becomes ``""``.
    """
    try:
        return json.dumps(
            value,
            sort_keys=True,
            separators=(",", ":"),
            ensure_ascii=False,
            default=str,
        )
    except (TypeError, ValueError):
        return "" if value is None else str(value)


def hash_tool_payload(payload: Any) -> str:
    """Hash a tool payload to group identical calls; empty payloads hash to ""."""
    if not payload:
        return ""
    return fnv1a64(canonical_json(payload))


def hash_attachments(attachments: list[Any] | None) -> str:
    """Order-independent hash of an attachment list.

    Attachments are reduced to their name (or filename) when they have one,
    otherwise to their canonical JSON form.
    """
    if not attachments or not isinstance(attachments, list):
        return ""
    keys: list[str] = []
    for att in attachments:
        if isinstance(att, str):
            keys.append(att)
        elif isinstance(att, dict) and att.get("name"):
            keys.append(str(att["name"]))
        elif isinstance(att, dict) and att.get("filename"):
            keys.append(str(att["filename"]))
        else:
            keys.append(canonical_json(att))
    return fnv1a64("|".join(sorted(keys)))


def to_epoch_ms(value: Any) -> int | None:
    """Convert a seconds/milliseconds number or an ISO-8601 string to epoch ms.

    Numbers below 1e12 are read as seconds. Returns None for missing,
    zero or unparseable values.
    """
    if value is None or value == "" or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        millis = value * 1000 if value < 1e12 else value
        if value == 0 or (isinstance(millis, float) and not math.isfinite(millis)):
            return None
        return int(millis)
    if isinstance(value, str):
        text = value.strip()
        try:
            return to_epoch_ms(float(text))
        except ValueError:
            pass
        try:
            dt = datetime.fromisoformat(text.replace("Z", "+00:00"))
        except ValueError:
            return None
        if dt.tzinfo is None:
            dt = dt.replace(tzinfo=UTC)
        return int(dt.timestamp() * 1000)
    return None


def slugify(text: str) -> str:
    """Lowercase, dash-separated slug of at most 120 characters."""
    slug = _SLUG_RE.sub("-", text.lower()).strip("-")
    return slug[:120]
