"""Read-only display sets derived from a collection snapshot."""

from collections import Counter
from collections.abc import Iterable, Sequence
from enum import Enum

from biblio.models.book import Book, BookStatus, Owner
from biblio.models.stats import GenreCount, LibraryStats

RECENT_STATUSES = (BookStatus.READING, BookStatus.COMPLETED)


class View(str, Enum):
    LIBRARY = "library"
    WISHLIST = "wishlist"
    ALL = "all"


def library_view(books: Iterable[Book]) -> list[Book]:
    return [book for book in books if not book.is_wishlist]


def wishlist_view(books: Iterable[Book]) -> list[Book]:
    return [book for book in books if book.is_wishlist]


def matches_search(book: Book, term: str) -> bool:
    """Case-insensitive substring match on title, author or any genre."""
    needle = term.lower()
    return (
        needle in book.title.lower()
        or needle in book.author.lower()
        or any(needle in genre.lower() for genre in book.genre)
    )


def filter_books(books: Sequence[Book], view: View = View.ALL, term: str = "") -> list[Book]:
    """Split by view first, then apply the search term. Empty term matches all."""
    if view == View.LIBRARY:
        selected = library_view(books)
    elif view == View.WISHLIST:
        selected = wishlist_view(books)
    else:
        selected = list(books)
    return [book for book in selected if matches_search(book, term)]


def recent_reads(books: Iterable[Book], count: int = 4) -> list[Book]:
    """Most recently added books that are being read or finished."""
    active = [book for book in books if book.status in RECENT_STATUSES]
    active.sort(key=lambda book: book.added_at, reverse=True)
    return active[:count]


def reading_progress(book: Book) -> int:
    """Percentage of the book read, rounded, capped at 100."""
    if book.total_pages <= 0:
        return 0
    return min(round(book.current_page / book.total_pages * 100), 100)


def pages_read(book: Book) -> int:
    if book.status is BookStatus.COMPLETED:
        return book.total_pages
    return book.current_page


def top_genres(books: Iterable[Book], limit: int = 5) -> list[GenreCount]:
    """Most frequent genre labels; ties keep first-encountered order."""
    counts: Counter[str] = Counter()
    for book in books:
        counts.update(book.genre)
    # sorted() is stable and Counter keeps insertion order
    ranked = sorted(counts.items(), key=lambda item: item[1], reverse=True)
    return [GenreCount(name=name, count=count) for name, count in ranked[:limit]]


def library_stats(books: Sequence[Book], genre_limit: int = 5) -> LibraryStats:
    """Recompute dashboard statistics over the library partition.

    Wishlist records only contribute to ``wishlist_count``.
    """
    library = library_view(books)

    status_counts = {status: 0 for status in BookStatus}
    owner_counts = {owner: 0 for owner in Owner}
    for book in library:
        status_counts[book.status] += 1
        owner_counts[book.owner] += 1

    return LibraryStats(
        library_count=len(library),
        wishlist_count=len(books) - len(library),
        status_counts=status_counts,
        top_genres=top_genres(library, genre_limit),
        owner_counts=owner_counts,
        pages_read=sum(pages_read(book) for book in library),
        total_pages=sum(book.total_pages for book in library),
    )
