"""Turning submitted form state into saved records."""

from collections.abc import Mapping
from typing import Any
from uuid import uuid4

from pydantic import ValidationError as PydanticValidationError

from biblio.errors import ValidationError
from biblio.models.book import Book, BookDraft, now_ms, split_labels


def new_draft(is_wishlist: bool = False) -> BookDraft:
    """Blank form state; the wishlist flag follows the view the add started in."""
    return BookDraft(is_wishlist=is_wishlist, location="", description="")


def enrichment_query(draft: BookDraft) -> str | None:
    """Free-text lookup for the enrichment service, None without a title."""
    title = draft.title.strip()
    if not title:
        return None
    author = draft.author.strip()
    return f"{title} by {author}" if author else title


def build_book_from_form(
    form: BookDraft | Mapping[str, Any],
    *,
    raw_genres: str | None = None,
    raw_tags: str | None = None,
    initial: Book | None = None,
) -> Book:
    """Build the record to save from submitted form state.

    Genres and tags typed as comma-separated text override the draft's
    lists. An edited record keeps the ``id`` and ``added_at`` of
    ``initial``; a new one gets a fresh id and the current time.

    Args:
        form: Draft model or raw field mapping from the form.
        raw_genres: Comma-separated genre text, if the form edited it.
        raw_tags: Comma-separated tag text, if the form edited it.
        initial: The record being edited, None when adding.

    Returns:
        A Book ready for the record store.

    Raises:
        ValidationError: If a field is invalid or the title is empty.
    """
    try:
        draft = form if isinstance(form, BookDraft) else BookDraft.model_validate(form)
    except PydanticValidationError as exc:
        errors = [f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in exc.errors()]
        raise ValidationError("Invalid book fields", errors=errors) from exc

    if not draft.title.strip():
        raise ValidationError("Title is required", field="title")

    data = draft.model_dump()
    if raw_genres is not None:
        data["genre"] = split_labels(raw_genres)
    if raw_tags is not None:
        data["tags"] = split_labels(raw_tags)

    if initial is not None:
        data["id"] = initial.id
        data["added_at"] = initial.added_at
    else:
        data["id"] = draft.id or str(uuid4())
        data["added_at"] = draft.added_at or now_ms()

    return Book.model_validate(data)
