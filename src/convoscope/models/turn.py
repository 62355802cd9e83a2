"""Turn models for convoscope."""

from pydantic import BaseModel, Field

from convoscope.models.message import ParsedMessage, Role, Vendor

__all__ = [
    "DayBucket",
    "Turn",
]


class Turn(BaseModel, frozen=True):
    """A maximal run of same-role messages within a bounded time gap.

    Attributes:
        id: ``turn_`` + id of the first message
        role: Role shared by every item
        vendor: Vendor of the first message
        ts_start: Timestamp of the first item (epoch ms)
        ts_end: Timestamp of the last item (epoch ms)
        items: Messages in chronological order
    """

    id: str
    role: Role
    vendor: Vendor = Vendor.UNKNOWN
    ts_start: int
    ts_end: int
    items: list[ParsedMessage] = Field(default_factory=list)

    @property
    def duration_ms(self) -> int:
        """Span covered by the enclosed items."""
        return self.ts_end - self.ts_start

    @property
    def text(self) -> str:
        """Item texts joined by blank lines."""
        return "\n\n".join(m.text for m in self.items if m.text)


class DayBucket(BaseModel, frozen=True):
    """Turns that started on the same calendar day."""

    day: str = Field(description="YYYY-MM-DD")
    turns: list[Turn] = Field(default_factory=list)
