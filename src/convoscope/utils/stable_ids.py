"""Stable, content-derived identifiers.

Every id is a type prefix plus the base-36 FNV-1a 64 digest of a seed
built from tagged, pipe-delimited fields. The same normalized input always
yields the same id, on any machine and in any process.
"""

from collections.abc import Iterable, Mapping
from typing import Any

from convoscope.models.ids import StableIdInfo, StableIdKind
from convoscope.utils.hashing import canonical_json, fnv1a64, normalize_text

__all__ = [
    "CONVERSATION_PREFIX",
    "FINGERPRINT_PREFIX",
    "MESSAGE_PREFIX",
    "SOURCE_PREFIX",
    "conversation_fingerprint",
    "is_valid_stable_id",
    "parse_stable_id",
    "stable_conv_id",
    "stable_msg_id",
    "stable_source_id",
]

CONVERSATION_PREFIX = "conv_"
MESSAGE_PREFIX = "msg_"
SOURCE_PREFIX = "src_"
FINGERPRINT_PREFIX = "fp_"

_PREFIX_KINDS: dict[str, StableIdKind] = {
    CONVERSATION_PREFIX: "conversation",
    MESSAGE_PREFIX: "message",
    SOURCE_PREFIX: "source",
    FINGERPRINT_PREFIX: "fingerprint",
}

# Digest must be longer than this for an id to be well-formed
MIN_DIGEST_LENGTH = 8


def _timestamp_field(value: str | int | float | None) -> str:
    """Render a creation timestamp for a seed; falsy values become ""."""
    if not value:
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _roles_field(participants: Iterable[str] | None) -> str:
    return ",".join(sorted(participants or []))


def stable_conv_id(
    vendor: str,
    title: str | None = None,
    created_at: str | int | float | None = None,
    participants: Iterable[str] | None = None,
    first_message_text: str | None = None,
    extra: Mapping[str, Any] | None = None,
) -> str:
    """Generate a deterministic conversation id.

    Args:
        vendor: Originating product
        title: Conversation title (normalized before hashing)
        created_at: Creation timestamp as exported (ISO string or epoch)
        participants: Roles taking part; order does not matter
        first_message_text: Text of the first message (normalized)
        extra: Additional metadata, canonicalized with sorted keys

    Returns:
        ``conv_`` + base-36 digest
    """
    seed = "|".join([
        f"v={vendor}",
        f"t={normalize_text(title)}",
        f"p={_roles_field(participants)}",
        f"c={_timestamp_field(created_at)}",
        f"m={normalize_text(first_message_text)}",
        f"x={canonical_json(dict(extra or {}))}",
    ])
    return CONVERSATION_PREFIX + fnv1a64(seed)


def stable_msg_id(
    vendor: str,
    conversation_stable_id: str,
    role: str,
    created_at: str | int | float | None = None,
    text: str | None = None,
    tool_name: str | None = None,
    attachments: list[Any] | None = None,
) -> str:
    """Generate a deterministic message id.

    Whitespace and case differences in ``text`` do not change the id.

    Returns:
        ``msg_`` + base-36 digest
    """
    seed = "|".join([
        f"v={vendor}",
        f"c={conversation_stable_id}",
        f"r={role}",
        f"t={_timestamp_field(created_at)}",
        f"x={normalize_text(text)}",
        f"tool={tool_name or ''}",
        f"att={canonical_json(attachments or [])}",
    ])
    return MESSAGE_PREFIX + fnv1a64(seed)


def stable_source_id(vendor: str, folder_path: str, added_at: int) -> str:
    """Generate a deterministic id for an export folder."""
    seed = "|".join([
        f"v={vendor}",
        f"p={normalize_text(folder_path)}",
        f"a={added_at}",
    ])
    return SOURCE_PREFIX + fnv1a64(seed)


def conversation_fingerprint(
    vendor: str,
    participants: Iterable[str],
    first_messages: Iterable[str],
    max_messages: int = 5,
) -> str:
    """Coarse id used to spot re-exports of the same logical conversation.

    Only the first ``max_messages`` texts are considered; blank ones are
    dropped after normalization.

    Returns:
        ``fp_`` + base-36 digest
    """
    texts = [normalize_text(m) for m in list(first_messages)[:max_messages]]
    texts = [t for t in texts if t]
    seed = "|".join([
        f"v={vendor}",
        f"p={_roles_field(participants)}",
        f"m={'|'.join(texts)}",
    ])
    return FINGERPRINT_PREFIX + fnv1a64(seed)


def is_valid_stable_id(value: Any) -> bool:
    """Check that a value is a well-formed stable id. Never raises."""
    if not isinstance(value, str) or not value:
        return False
    for prefix in _PREFIX_KINDS:
        if value.startswith(prefix):
            return len(value) > len(prefix) + MIN_DIGEST_LENGTH
    return False


def parse_stable_id(value: str) -> StableIdInfo:
    """Split a stable id into its kind and digest."""
    for prefix, kind in _PREFIX_KINDS.items():
        if value and value.startswith(prefix):
            return StableIdInfo(kind=kind, digest=value[len(prefix):], raw=value)
    return StableIdInfo(kind="unknown", raw=value or "")
