"""Book record data models.

Python attributes are snake_case; the persisted JSON uses the camelCase
names (``totalPages``, ``isWishlist``, ``addedAt``...) through aliases.
"""

import time
from enum import Enum
from typing import Any
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class BookStatus(str, Enum):
    UNREAD = "Unread"
    READING = "Reading"
    COMPLETED = "Completed"
    ABANDONED = "Abandoned"


class BookFormat(str, Enum):
    PHYSICAL = "Physical"
    DIGITAL = "Digital"
    AUDIOBOOK = "Audiobook"


class Owner(str, Enum):
    ME = "Me"
    SPOUSE = "Spouse"
    SHARED = "Shared"


def now_ms() -> int:
    """Current time as epoch milliseconds."""
    return int(time.time() * 1000)


def coerce_page_count(value: Any) -> int:
    """Coerce a page number to a non-negative integer.

    Non-numeric or missing values become 0; fractional values are truncated.

    Args:
        value: Raw value from a form, a suggestion or persisted JSON.

    Returns:
        A non-negative int.
    """
    if isinstance(value, bool):
        return 0
    try:
        number = int(float(value))
    except (TypeError, ValueError, OverflowError):
        return 0
    return max(number, 0)


def split_labels(raw: str) -> list[str]:
    """Split comma-separated labels, trimming and dropping empties."""
    return [part.strip() for part in raw.split(",") if part.strip()]


class BookFields(BaseModel):
    """Descriptive and user-classification fields shared by records and drafts."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    title: str = ""
    author: str = ""
    cover_url: str | None = None
    genre: list[str] = Field(default_factory=list)
    tags: list[str] = Field(default_factory=list)
    description: str | None = None
    total_pages: int = 0
    current_page: int = 0
    status: BookStatus = BookStatus.UNREAD
    format: BookFormat = BookFormat.PHYSICAL
    owner: Owner = Owner.ME
    location: str | None = None  # shelf or file path
    is_wishlist: bool = False
    rating: float | None = Field(default=None, ge=0, le=5)

    @field_validator("total_pages", "current_page", mode="before")
    @classmethod
    def _coerce_pages(cls, value: Any) -> int:
        return coerce_page_count(value)

    @field_validator("genre", "tags", mode="before")
    @classmethod
    def _coerce_labels(cls, value: Any) -> Any:
        if value is None:
            return []
        if isinstance(value, str):
            return split_labels(value)
        return value


class Book(BookFields):
    """A saved record in the collection.

    ``id`` and ``added_at`` are assigned once at creation and are never
    changed by edits or enrichment.
    """

    id: str = Field(default_factory=lambda: str(uuid4()))
    title: str
    added_at: int = Field(default_factory=now_ms)

    def to_json_dict(self) -> dict[str, Any]:
        """Serialize with the persisted camelCase field names."""
        return self.model_dump(mode="json", by_alias=True)


class BookDraft(BookFields):
    """In-progress form state. ``id``/``added_at`` stay None until first save."""

    id: str | None = None
    added_at: int | None = None

    @classmethod
    def from_book(cls, book: Book) -> "BookDraft":
        return cls.model_validate(book.model_dump())


class BookSuggestion(BaseModel):
    """Partial metadata proposed by an enrichment source.

    Only the fields actually present in the payload (``model_fields_set``)
    take part in a merge. ``status``, ``owner`` and ``location`` are
    accepted loosely because they are never applied.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    title: str | None = None
    author: str | None = None
    cover_url: str | None = None
    genre: list[str] | None = None
    tags: list[str] | None = None
    description: str | None = None
    total_pages: int | None = None
    current_page: int | None = None
    format: BookFormat | None = None
    rating: float | None = Field(default=None, ge=0, le=5)
    status: str | None = None
    owner: str | None = None
    location: str | None = None
    is_wishlist: bool | None = None

    @field_validator("total_pages", "current_page", mode="before")
    @classmethod
    def _coerce_pages(cls, value: Any) -> int | None:
        if value is None:
            return None
        return coerce_page_count(value)

    @field_validator("genre", "tags", mode="before")
    @classmethod
    def _coerce_labels(cls, value: Any) -> Any:
        if isinstance(value, str):
            return split_labels(value)
        return value
