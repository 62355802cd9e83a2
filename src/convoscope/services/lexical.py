"""Lexical scoring for convoscope.

A light BM25-style score without corpus statistics: whole-word hits of
each query token are counted per field, multiplied by the field weight
and summed, then boosted for recent documents.
"""

import re
import time
from collections.abc import Iterable, Mapping
from functools import lru_cache

from convoscope.logging import get_logger
from convoscope.models.conversation import ParsedConversation
from convoscope.models.message import ParsedMessage
from convoscope.models.search import SearchDocument, SearchFilters, SearchResult

__all__ = [
    "FIELD_WEIGHTS",
    "LexicalScorer",
    "conversation_to_document",
    "message_to_document",
    "ranked_search",
    "tokenize_query",
]

logger = get_logger(__name__)

# title > system/meta > tool payload > body
FIELD_WEIGHTS: dict[str, float] = {
    "title": 3.0,
    "system": 2.0,
    "tool_json": 1.25,
    "body": 1.0,
}

MS_PER_DAY = 86_400_000


def tokenize_query(query: str) -> list[str]:
    """Split a query on whitespace into lowercase tokens."""
    return [t.lower() for t in query.split() if t]


@lru_cache(maxsize=1024)
def _word_pattern(token: str) -> re.Pattern[str]:
    return re.compile(r"\b" + re.escape(token) + r"\b")


def _now_ms() -> int:
    return int(time.time() * 1000)


class LexicalScorer:
    """Field-weighted term-overlap scorer with a recency boost.

    Example:
        scorer = LexicalScorer()
        score = scorer.score(doc, tokenize_query("python asyncio"))
    """

    def __init__(
        self,
        weights: Mapping[str, float] | None = None,
        recency_window_days: float = 180.0,
        recency_boost: float = 0.25,
    ) -> None:
        """Initialize scorer.

        Args:
            weights: Per-field weights (defaults to FIELD_WEIGHTS)
            recency_window_days: Age at which the recency boost reaches zero
            recency_boost: Maximum relative boost for a brand-new document
        """
        self._weights = dict(FIELD_WEIGHTS if weights is None else weights)
        self._recency_window_days = recency_window_days
        self._recency_boost = recency_boost

    def recency_multiplier(self, date_ms: int | None, now_ms: int) -> float:
        """Multiplier in [1, 1 + recency_boost], decaying linearly with age.

        Freshness is clamped to [0, 1], so a future-dated document gets the
        full boost rather than the larger multiplier the unclamped linear
        formula would give it.
        """
        if not date_ms:
            return 1.0
        age_days = (now_ms - date_ms) / MS_PER_DAY
        freshness = min(1.0, max(0.0, 1.0 - age_days / self._recency_window_days))
        return 1.0 + self._recency_boost * freshness

    def score(
        self,
        doc: SearchDocument,
        tokens: list[str],
        now_ms: int | None = None,
    ) -> float:
        """Score a document against query tokens.

        Args:
            doc: Candidate document
            tokens: Lowercase query tokens (see tokenize_query)
            now_ms: Reference time for the recency boost (default: now)

        Returns:
            Non-negative, unbounded score
        """
        total = 0.0
        for field, weight in self._weights.items():
            text = getattr(doc, field, None)
            if not text:
                continue
            low = text.lower()
            for token in tokens:
                if not token:
                    continue
                hits = len(_word_pattern(token).findall(low))
                total += hits * weight

        if total == 0.0:
            return 0.0
        return total * self.recency_multiplier(doc.date, _now_ms() if now_ms is None else now_ms)

    def regex_score(self, doc: SearchDocument, pattern: str) -> float:
        """Score by which fields match a case-insensitive pattern.

        Each matching field contributes its weight once. An invalid pattern
        scores 0.
        """
        try:
            regex = re.compile(pattern, re.IGNORECASE)
        except re.error:
            return 0.0

        total = 0.0
        for field, weight in self._weights.items():
            if regex.search(getattr(doc, field, None) or ""):
                total += weight
        return total


def conversation_to_document(
    conversation: ParsedConversation,
    source_id: str | None = None,
) -> SearchDocument:
    """Build a conversation-level search document.

    The id is the stable conversation id when one was assigned.
    """
    messages = conversation.messages
    conversation_uid = next((m.conversation_uid for m in messages if m.conversation_uid), None)
    system = "\n".join(m.text for m in messages if m.role == "system" and m.text)
    tool_json = "\n".join(m.tool_json for m in messages if m.role == "tool" and m.tool_json)
    body = "\n".join(m.text for m in messages if m.text)
    dates = [m.timestamp_ms for m in messages if m.timestamp_ms]

    return SearchDocument(
        id=conversation_uid or conversation.id,
        title=conversation.title,
        system=system or None,
        tool_json=tool_json or None,
        body=body or None,
        date=max(dates) if dates else None,
        vendor=conversation.vendor,
        conversation_id=conversation_uid or conversation.id,
        source_id=source_id,
    )


def message_to_document(
    message: ParsedMessage,
    source_id: str | None = None,
) -> SearchDocument:
    """Build a message-level search document."""
    return SearchDocument(
        id=message.uid or message.id,
        title=message.conversation_title,
        system=message.text if message.role == "system" else None,
        tool_json=message.tool_json if message.role == "tool" else None,
        body=message.text or None,
        date=message.timestamp_ms or None,
        vendor=message.vendor,
        conversation_id=message.conversation_uid or message.conversation_id,
        role=message.role,
        source_id=source_id,
    )


def ranked_search(
    docs: Iterable[SearchDocument],
    query: str,
    use_regex: bool = False,
    filters: SearchFilters | None = None,
    scorer: LexicalScorer | None = None,
    now_ms: int | None = None,
) -> list[SearchResult]:
    """Lexical-only ranked search.

    Documents are filtered by facets first, then scored; only positive
    scores are kept, highest first.
    """
    scorer = scorer or LexicalScorer()
    tokens = tokenize_query(query)
    now_ms = _now_ms() if now_ms is None else now_ms

    results: list[SearchResult] = []
    for doc in docs:
        if filters is not None and not filters.accepts(doc):
            continue
        score = scorer.regex_score(doc, query) if use_regex else scorer.score(doc, tokens, now_ms)
        if score > 0:
            results.append(SearchResult(id=doc.id, score=score, doc=doc))

    results.sort(key=lambda r: r.score, reverse=True)
    logger.debug("ranked_search", query_length=len(query), hit_count=len(results))
    return results
