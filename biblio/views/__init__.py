"""Derived, read-only views of the collection."""

from biblio.views.projection import (
    View,
    filter_books,
    library_stats,
    library_view,
    reading_progress,
    recent_reads,
    wishlist_view,
)

__all__ = [
    "View",
    "filter_books",
    "library_stats",
    "library_view",
    "reading_progress",
    "recent_reads",
    "wishlist_view",
]
