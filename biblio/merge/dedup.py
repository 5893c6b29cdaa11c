"""Title-based duplicate detection for import batches."""

import logging
from collections.abc import Iterable, Sequence
from typing import TypeVar

from biblio.models.book import BookFields

logger = logging.getLogger(__name__)

RecordT = TypeVar("RecordT", bound=BookFields)


def normalize_title(title: str) -> str:
    """Duplicate key for a title: lowercased, surrounding whitespace removed."""
    return title.lower().strip()


def filter_new_candidates(
    existing: Iterable[BookFields],
    candidates: Sequence[RecordT],
    *,
    collapse_batch_duplicates: bool = False,
) -> list[RecordT]:
    """Drop candidates whose title already exists in the collection.

    Matching is an exact comparison of :func:`normalize_title` keys, so
    "DUNE " collides with "Dune" but "Dune!" does not. Candidate order is
    preserved. Repeats inside the batch itself pass through unless
    ``collapse_batch_duplicates`` is set, in which case only the first
    occurrence is kept.

    Args:
        existing: Records already in the collection.
        candidates: Records proposed by an import path.
        collapse_batch_duplicates: Also drop repeats within ``candidates``.

    Returns:
        The candidates that are new. Empty means nothing to import.
    """
    seen = {normalize_title(book.title) for book in existing}
    accepted: list[RecordT] = []
    for candidate in candidates:
        key = normalize_title(candidate.title)
        if key in seen:
            continue
        accepted.append(candidate)
        if collapse_batch_duplicates:
            seen.add(key)

    logger.debug(
        "Dedup kept %d of %d candidates", len(accepted), len(candidates)
    )
    return accepted
