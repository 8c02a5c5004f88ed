"""
Reader document and request schemas.

Documents are owned by the remote service. These dataclasses are
transient per-call views of the API JSON; nothing here is cached or
persisted.
"""

from dataclasses import asdict, dataclass, field, replace
from datetime import datetime, timezone
from typing import Any, Optional


def parse_timestamp(value: str) -> datetime:
    """Parse an ISO 8601 timestamp or date into an aware datetime.

    Naive values are taken as UTC so they compare with the service's
    ``saved_at`` timestamps.
    """
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


@dataclass
class Document:
    """Reader document representation."""

    id: str
    url: Optional[str] = None
    title: Optional[str] = None
    author: Optional[str] = None
    source: Optional[str] = None
    category: Optional[str] = None
    location: Optional[str] = None
    tags: Any = field(default_factory=list)  # list of names or {key: tag} mapping
    site_name: Optional[str] = None
    word_count: Optional[int] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
    published_date: Any = None
    summary: Optional[str] = None
    image_url: Optional[str] = None
    source_url: Optional[str] = None
    notes: Optional[str] = None
    parent_id: Optional[str] = None
    reading_progress: Optional[float] = None
    first_opened_at: Optional[str] = None
    last_opened_at: Optional[str] = None
    saved_at: Optional[str] = None
    last_moved_at: Optional[str] = None

    # Raw markup, only present when requested from the service
    html_content: Optional[str] = None
    # Plain text produced by content hydration
    content: Optional[str] = None

    @classmethod
    def from_api_response(cls, data: dict) -> "Document":
        """Create from a Reader API document record."""
        return cls(
            id=str(data["id"]),
            url=data.get("url"),
            title=data.get("title"),
            author=data.get("author"),
            source=data.get("source"),
            category=data.get("category"),
            location=data.get("location"),
            tags=data.get("tags") if data.get("tags") is not None else [],
            site_name=data.get("site_name"),
            word_count=data.get("word_count"),
            created_at=data.get("created_at"),
            updated_at=data.get("updated_at"),
            published_date=data.get("published_date"),
            summary=data.get("summary"),
            image_url=data.get("image_url"),
            source_url=data.get("source_url"),
            notes=data.get("notes"),
            parent_id=data.get("parent_id"),
            reading_progress=data.get("reading_progress"),
            first_opened_at=data.get("first_opened_at"),
            last_opened_at=data.get("last_opened_at"),
            saved_at=data.get("saved_at"),
            last_moved_at=data.get("last_moved_at"),
            html_content=data.get("html_content"),
        )

    @property
    def content_url(self) -> Optional[str]:
        """URL used for URL-to-text conversion."""
        return self.source_url or self.url

    def saved_after(self, moment: datetime) -> bool:
        """True if ``saved_at`` is strictly later than ``moment``."""
        if not self.saved_at:
            return False
        return parse_timestamp(self.saved_at) > moment

    def tag_names(self) -> list[str]:
        """Tag names when tags are a plain list, else an empty list."""
        if isinstance(self.tags, list):
            return [str(t) for t in self.tags]
        return []

    def to_dict(self) -> dict:
        """Public shape; ``content``/``html_content`` only when present."""
        data = asdict(self)
        if self.content is None:
            data.pop("content")
        if self.html_content is None:
            data.pop("html_content")
        return data


@dataclass
class DocumentPage:
    """One page of ``GET /list/`` results."""

    count: int
    results: list[Document] = field(default_factory=list)
    next_page_cursor: Optional[str] = None

    @classmethod
    def from_api_response(cls, data: dict) -> "DocumentPage":
        return cls(
            count=data.get("count", 0),
            results=[Document.from_api_response(d) for d in data.get("results", [])],
            next_page_cursor=data.get("nextPageCursor") or None,
        )

    def to_dict(self) -> dict:
        return {
            "count": self.count,
            "nextPageCursor": self.next_page_cursor,
            "documents": [d.to_dict() for d in self.results],
        }


@dataclass
class Tag:
    """Reader tag record."""

    key: str
    name: str

    @classmethod
    def from_api_response(cls, data: dict) -> "Tag":
        return cls(key=data.get("key", ""), name=data.get("name", ""))


@dataclass
class ListDocumentsParams:
    """Query configuration for listing documents.

    ``with_full_content`` and ``added_after`` are evaluated client-side
    and are never sent to the service.
    """

    id: Optional[str] = None
    page_cursor: Optional[str] = None
    limit: Optional[int] = None
    category: Optional[str] = None
    location: Optional[str] = None
    tag: Optional[str] = None
    updated_after: Optional[str] = None
    with_html_content: bool = False
    with_full_content: bool = False
    added_after: Optional[str] = None

    @property
    def is_paginated(self) -> bool:
        """True if the caller pinned a cursor or a limit."""
        return bool(self.page_cursor or self.limit)

    def to_query(self) -> dict[str, str]:
        """Render remote query parameters, skipping unset values."""
        query: dict[str, str] = {}
        for key, value in (
            ("id", self.id),
            ("updatedAfter", self.updated_after),
            ("location", self.location),
            ("category", self.category),
            ("tag", self.tag),
            ("pageCursor", self.page_cursor),
            ("limit", self.limit),
        ):
            if value is not None and value != "":
                query[key] = str(value)
        if self.with_html_content:
            query["withHtmlContent"] = "true"
        return query

    def without_content(self) -> "ListDocumentsParams":
        """Same filters with every content flag stripped."""
        return replace(self, with_html_content=False, with_full_content=False)

    def with_cursor(self, cursor: Optional[str]) -> "ListDocumentsParams":
        return replace(self, page_cursor=cursor)


@dataclass
class CreateDocumentRequest:
    """Fields accepted by ``POST /save/``."""

    url: str
    html: Optional[str] = None
    should_clean_html: Optional[bool] = None
    title: Optional[str] = None
    author: Optional[str] = None
    summary: Optional[str] = None
    published_date: Optional[str] = None
    image_url: Optional[str] = None
    location: Optional[str] = None
    category: Optional[str] = None
    saved_using: Optional[str] = None
    tags: Optional[list[str]] = None
    notes: Optional[str] = None

    def to_payload(self) -> dict:
        return {k: v for k, v in asdict(self).items() if v is not None}


@dataclass
class UpdateDocumentRequest:
    """Partial update accepted by ``PATCH /update/{id}/``."""

    title: Optional[str] = None
    author: Optional[str] = None
    summary: Optional[str] = None
    published_date: Optional[str] = None
    image_url: Optional[str] = None
    location: Optional[str] = None
    category: Optional[str] = None
    tags: Optional[list[str]] = None
    notes: Optional[str] = None

    def to_payload(self) -> dict:
        return {k: v for k, v in asdict(self).items() if v is not None}

    def is_empty(self) -> bool:
        return not self.to_payload()
