"""Field-level precedence for merging AI suggestions into a record."""

from enum import Enum
from typing import Any, TypeVar

from biblio.models.book import BookFields, BookSuggestion


class FieldRule(str, Enum):
    REPLACE = "replace"  # a value present in the suggestion wins
    PRESERVE = "preserve"  # the current value is always kept


# Every field a record or draft can carry. Unlisted names are preserved.
ENRICHMENT_RULES: dict[str, FieldRule] = {
    "title": FieldRule.REPLACE,
    "author": FieldRule.REPLACE,
    "cover_url": FieldRule.REPLACE,
    "genre": FieldRule.REPLACE,
    "tags": FieldRule.REPLACE,
    "description": FieldRule.REPLACE,
    "total_pages": FieldRule.REPLACE,
    "current_page": FieldRule.REPLACE,
    "format": FieldRule.REPLACE,
    "rating": FieldRule.REPLACE,
    # User classification
    "status": FieldRule.PRESERVE,
    "owner": FieldRule.PRESERVE,
    "location": FieldRule.PRESERVE,
    # Only manual edits may move a record between library and wishlist
    "is_wishlist": FieldRule.PRESERVE,
    # Identity
    "id": FieldRule.PRESERVE,
    "added_at": FieldRule.PRESERVE,
}

RecordT = TypeVar("RecordT", bound=BookFields)


def rule_for(field_name: str) -> FieldRule:
    return ENRICHMENT_RULES.get(field_name, FieldRule.PRESERVE)


def suggested_updates(suggested: BookSuggestion) -> dict[str, Any]:
    """Values from ``suggested`` that the precedence table lets through.

    A field counts as present only if the payload set it to a non-null
    value. Lists are copied so the merged record never shares them.
    """
    updates: dict[str, Any] = {}
    for name in suggested.model_fields_set:
        if rule_for(name) is not FieldRule.REPLACE:
            continue
        value = getattr(suggested, name)
        if value is None:
            continue
        updates[name] = list(value) if isinstance(value, list) else value
    return updates


def merge_enrichment(current: RecordT, suggested: BookSuggestion | None) -> RecordT:
    """Combine a record being edited with AI-suggested metadata.

    ``genre`` and ``tags`` are replaced as whole sequences. Page counts are
    re-coerced to non-negative integers on the way out. Never raises; with
    no suggestion the result equals ``current``.

    Args:
        current: The record or draft being edited.
        suggested: Partial metadata from an enrichment source, or None.

    Returns:
        A new instance of the same type as ``current``.
    """
    if suggested is None:
        return current.model_copy(deep=True)

    merged = current.model_dump()
    merged.update(suggested_updates(suggested))
    return type(current).model_validate(merged)
