"""Utility functions for convoscope.

This module contains the hashing primitives and stable id generators.
"""

from convoscope.utils.hashing import (
    canonical_json,
    fnv1a32,
    fnv1a64,
    hash_attachments,
    hash_tool_payload,
    normalize_text,
    slugify,
    to_epoch_ms,
)
from convoscope.utils.stable_ids import (
    conversation_fingerprint,
    is_valid_stable_id,
    parse_stable_id,
    stable_conv_id,
    stable_msg_id,
    stable_source_id,
)

__all__ = [
    "canonical_json",
    "conversation_fingerprint",
    "fnv1a32",
    "fnv1a64",
    "hash_attachments",
    "hash_tool_payload",
    "is_valid_stable_id",
    "normalize_text",
    "parse_stable_id",
    "slugify",
    "stable_conv_id",
    "stable_msg_id",
    "stable_source_id",
    "to_epoch_ms",
]
