"""Substring/regex gate used by simple lookups."""

import re

__all__ = [
    "highlight_text",
    "matches",
]

_CODE_QUERY_RE = re.compile(r"^[A-Za-z0-9]+$")
MIN_CODE_LENGTH = 4


def matches(title: str, body: str, query: str, is_regex: bool = False) -> bool:
    """Check whether a title/body pair matches a query.

    A blank query matches everything. In regex mode the pattern is
    searched case-insensitively in the title or the body, and an invalid
    pattern matches nothing. In literal mode the query must occur
    case-insensitively in ``title + " " + body``; alphanumeric "code"
    queries of four or more characters (ticket numbers, ids) must also
    stand alone rather than sit inside a longer token.
    """
    query = (query or "").strip()
    if not query:
        return True

    title = title or ""
    body = body or ""

    if is_regex:
        try:
            regex = re.compile(query, re.IGNORECASE)
        except re.error:
            return False
        return bool(regex.search(title) or regex.search(body))

    text = f"{title} {body}"
    if query.lower() not in text.lower():
        return False

    if _CODE_QUERY_RE.match(query) and len(query) >= MIN_CODE_LENGTH:
        escaped = re.escape(query)
        if re.search(rf"\b{escaped}\b", text, re.IGNORECASE):
            return True
        return bool(re.search(rf"(^|[^a-z0-9]){escaped}([^a-z0-9]|$)", text, re.IGNORECASE))

    return True


def highlight_text(text: str, query: str, use_regex: bool = False) -> str:
    """Wrap every match of the query in ``<mark>`` tags.

    An invalid regex falls back to highlighting the literal query.
    """
    if not query or not query.strip():
        return text

    literal = re.compile(re.escape(query), re.IGNORECASE)
    if not use_regex:
        return literal.sub(lambda m: f"<mark>{m.group(0)}</mark>", text)

    try:
        pattern = re.compile(query, re.IGNORECASE)
    except re.error:
        pattern = literal
    return pattern.sub(lambda m: f"<mark>{m.group(0)}</mark>", text)
