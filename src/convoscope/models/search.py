"""Search models for convoscope.

These models describe the indexable unit, the ranked output and the
facet filters applied before scoring.
"""

from pydantic import BaseModel, Field

from convoscope.models.message import Role, Vendor

__all__ = [
    "SearchDocument",
    "SearchFilters",
    "SearchResult",
]


class SearchDocument(BaseModel, frozen=True):
    """Indexable unit, either a whole conversation or one message.

    Attributes:
        id: Document id (conversation or message id)
        title: Conversation title
        system: System/meta text
        tool_json: Canonicalized tool payloads
        body: Concatenated message text
        date: Epoch milliseconds used for the recency boost
        vendor: Originating product
        conversation_id: Owning conversation
        role: Message role (message documents only)
        source_id: Stable source id of the export folder
    """

    id: str
    title: str | None = None
    system: str | None = None
    tool_json: str | None = None
    body: str | None = None
    date: int | None = Field(default=None, description="Epoch milliseconds")
    vendor: Vendor = Vendor.UNKNOWN
    conversation_id: str | None = None
    role: Role | None = None
    source_id: str | None = None

    @property
    def embedding_text(self) -> str:
        """Text sent to the embedding provider for this document."""
        parts = [self.title or "", self.system or "", self.body or ""]
        return "\n".join(p for p in parts if p)


class SearchResult(BaseModel, frozen=True):
    """Ranked search hit."""

    id: str
    score: float = Field(ge=0.0)
    doc: SearchDocument


class SearchFilters(BaseModel, frozen=True):
    """Facet filters applied before scoring.

    ``None`` means "do not filter" for every field.
    """

    vendor: Vendor | None = None
    role: Role | None = None
    date_from: int | None = Field(default=None, description="Epoch milliseconds, inclusive")
    date_to: int | None = Field(default=None, description="Epoch milliseconds, inclusive")
    source_ids: list[str] = Field(default_factory=list)

    def accepts(self, doc: SearchDocument) -> bool:
        """Check whether a document passes every configured facet."""
        if self.vendor is not None and doc.vendor != self.vendor:
            return False
        if self.role is not None and doc.role != self.role:
            return False
        if self.date_from is not None and doc.date and doc.date < self.date_from:
            return False
        if self.date_to is not None and doc.date and doc.date > self.date_to:
            return False
        if self.source_ids and doc.source_id not in self.source_ids:
            return False
        return True
