"""Author role normalization."""

from collections.abc import Mapping
from typing import Any

from convoscope.models.message import Role

__all__ = [
    "normalize_role",
]


def normalize_role(author: Any) -> Role:
    """Map any author representation onto one of the four roles.

    Accepts a role string or a mapping with a ``role`` field. Unknown or
    missing values fall back to "system".
    """
    value = author.get("role") if isinstance(author, Mapping) else author
    if not isinstance(value, str):
        return "system"

    role = value.lower()
    if role == "user":
        return "user"
    if role in ("assistant", "gpt"):
        return "assistant"
    if "tool" in role:
        return "tool"
    return "system"
