"""Turn grouping service for convoscope.

This module coalesces a message stream into turns: maximal runs of
same-role messages where no gap exceeds a threshold.
"""

from collections.abc import Iterable
from datetime import UTC, datetime, tzinfo

from convoscope.logging import get_logger
from convoscope.models.message import ParsedMessage
from convoscope.models.turn import DayBucket, Turn

__all__ = [
    "DEFAULT_TURN_GAP_MS",
    "TurnGrouper",
    "bucket_by_day",
]

logger = get_logger(__name__)

DEFAULT_TURN_GAP_MS = 7 * 60 * 1000


class TurnGrouper:
    """Service for grouping ParsedMessages into Turns.

    A new turn starts when the role changes or when the gap between a
    message and the end of the current turn exceeds ``gap_ms``.

    Example:
        grouper = TurnGrouper()
        turns = grouper.group(messages)
    """

    def __init__(self, gap_ms: int = DEFAULT_TURN_GAP_MS) -> None:
        self._gap_ms = gap_ms

    @property
    def gap_ms(self) -> int:
        """Get the gap threshold in milliseconds."""
        return self._gap_ms

    def group(self, messages: Iterable[ParsedMessage]) -> list[Turn]:
        """Group messages into turns in chronological order.

        Args:
            messages: Messages in any order; they are stably sorted by time

        Returns:
            List of Turn objects
        """
        ordered = sorted(messages, key=lambda m: m.timestamp_ms)

        runs: list[list[ParsedMessage]] = []
        for msg in ordered:
            current = runs[-1] if runs else None
            if (
                current is None
                or msg.role != current[0].role
                or msg.timestamp_ms - current[-1].timestamp_ms > self._gap_ms
            ):
                runs.append([msg])
            else:
                current.append(msg)

        turns = [self._create_turn(items) for items in runs]

        logger.debug(
            "turns_grouped",
            input_count=len(ordered),
            output_count=len(turns),
        )
        return turns

    def _create_turn(self, items: list[ParsedMessage]) -> Turn:
        first = items[0]
        return Turn(
            id=f"turn_{first.id}",
            role=first.role,
            vendor=first.vendor,
            ts_start=first.timestamp_ms,
            ts_end=items[-1].timestamp_ms,
            items=items,
        )


def bucket_by_day(turns: Iterable[Turn], tz: tzinfo = UTC) -> list[DayBucket]:
    """Group turns by the calendar day their first message falls on.

    Args:
        turns: Turns in any order; order within a day is preserved
        tz: Time zone used to pick the calendar day

    Returns:
        DayBuckets sorted by day ascending
    """
    buckets: dict[str, list[Turn]] = {}
    for turn in turns:
        day = datetime.fromtimestamp(turn.ts_start / 1000, tz=tz).strftime("%Y-%m-%d")
        buckets.setdefault(day, []).append(turn)

    return [DayBucket(day=day, turns=buckets[day]) for day in sorted(buckets)]
