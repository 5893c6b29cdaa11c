"""Aggregate statistics data models."""

from pydantic import BaseModel, Field

from biblio.models.book import BookStatus, Owner


class GenreCount(BaseModel):
    """How many library records carry a genre label."""

    name: str
    count: int


class LibraryStats(BaseModel):
    """Reductions over the library partition of a collection snapshot."""

    library_count: int = 0
    wishlist_count: int = 0
    status_counts: dict[BookStatus, int] = Field(default_factory=dict)
    top_genres: list[GenreCount] = Field(default_factory=list)
    owner_counts: dict[Owner, int] = Field(default_factory=dict)
    pages_read: int = 0
    total_pages: int = 0

    @property
    def overall_progress(self) -> float:
        """Pages read as a percentage of all pages, 0 for an empty library."""
        if self.total_pages <= 0:
            return 0.0
        return self.pages_read / self.total_pages * 100
