"""Conversation index builder for convoscope."""

from collections.abc import Iterable

from convoscope.logging import get_logger
from convoscope.models.conversation import UNTITLED, ConversationSummary
from convoscope.models.message import ParsedMessage

__all__ = [
    "ConversationIndexBuilder",
]

logger = get_logger(__name__)


class ConversationIndexBuilder:
    """Folds a message stream into one summary row per conversation.

    Rows are keyed by ``conversation_id``. The first message seen for an
    id seeds the row; later ones bump the count and widen the timestamp
    range, regardless of input order.
    """

    def build(self, messages: Iterable[ParsedMessage]) -> list[ConversationSummary]:
        """Build summaries, most recently active conversation first."""
        rows: dict[str, dict] = {}
        for msg in messages:
            row = rows.get(msg.conversation_id)
            if row is None:
                row = {
                    "conversation_id": msg.conversation_id,
                    "title": msg.conversation_title or UNTITLED,
                    "vendor": msg.vendor,
                    "message_count": 0,
                    "first_timestamp": msg.timestamp_ms,
                    "last_timestamp": msg.timestamp_ms,
                }
                rows[msg.conversation_id] = row
            row["message_count"] += 1
            row["first_timestamp"] = min(row["first_timestamp"], msg.timestamp_ms)
            row["last_timestamp"] = max(row["last_timestamp"], msg.timestamp_ms)

        summaries = [ConversationSummary(**row) for row in rows.values()]
        summaries.sort(key=lambda s: s.last_timestamp, reverse=True)

        logger.debug("conversation_index_built", conversation_count=len(summaries))
        return summaries
