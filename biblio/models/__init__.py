"""Data models for the BiblioGestor application."""

from biblio.models.book import (
    Book,
    BookDraft,
    BookFields,
    BookFormat,
    BookStatus,
    BookSuggestion,
    Owner,
)
from biblio.models.stats import GenreCount, LibraryStats

__all__ = [
    "Book",
    "BookDraft",
    "BookFields",
    "BookFormat",
    "BookStatus",
    "BookSuggestion",
    "GenreCount",
    "LibraryStats",
    "Owner",
]
