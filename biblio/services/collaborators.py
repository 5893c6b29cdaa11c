"""Interfaces and payload parsing for the external AI services.

The services are passed into :class:`~biblio.services.library.LibraryService`
explicitly. Each may hand back decoded JSON or raw JSON text; the
``parse_*`` helpers validate either form and raise
:class:`~biblio.errors.CollaboratorError` on anything unusable.
"""

from __future__ import annotations

import json
from collections.abc import Sequence
from typing import Any, Protocol

from pydantic import ValidationError as PydanticValidationError

from biblio.errors import CollaboratorError
from biblio.models.book import Book, BookSuggestion

ENRICHMENT = "enrichment"
RECOMMENDATIONS = "recommendations"
IMAGE_EXTRACTION = "image_extraction"


class EnrichmentClient(Protocol):
    async def enrich(self, query: str) -> Any:
        """Return partial book metadata for ``query``, or None."""
        ...


class RecommendationClient(Protocol):
    async def recommend(self, books: Sequence[Book], count: int) -> Any:
        """Return "Title by Author" strings inspired by ``books``."""
        ...


class ImageExtractionClient(Protocol):
    async def extract_titles(self, data: bytes, mime_type: str) -> Any:
        """Return a list of ``{"title": ...}`` objects found in the image, or None."""
        ...


def _decode(payload: Any, service: str) -> Any:
    if isinstance(payload, bytes):
        payload = payload.decode("utf-8", errors="replace")
    if isinstance(payload, str):
        if not payload.strip():
            return None
        try:
            return json.loads(payload)
        except json.JSONDecodeError as exc:
            raise CollaboratorError(f"Unparsable {service} response: {exc}", service=service) from exc
    return payload


def parse_suggestion(payload: Any) -> BookSuggestion | None:
    """Validate an enrichment payload. None/empty means "no suggestion"."""
    data = _decode(payload, ENRICHMENT)
    if data is None:
        return None
    if not isinstance(data, dict):
        raise CollaboratorError("Enrichment response is not an object", service=ENRICHMENT)
    try:
        return BookSuggestion.model_validate(data)
    except PydanticValidationError as exc:
        raise CollaboratorError(
            f"Invalid enrichment fields: {exc.error_count()} errors", service=ENRICHMENT
        ) from exc


def parse_recommendations(payload: Any) -> list[str]:
    """Validate a recommendation payload into non-empty strings."""
    data = _decode(payload, RECOMMENDATIONS)
    if data is None:
        return []
    if not isinstance(data, list):
        raise CollaboratorError("Recommendation response is not a list", service=RECOMMENDATIONS)
    return [item.strip() for item in data if isinstance(item, str) and item.strip()]


def parse_titles(payload: Any) -> list[str] | None:
    """Validate an image-extraction payload into titles. None means nothing found."""
    data = _decode(payload, IMAGE_EXTRACTION)
    if data is None:
        return None
    if not isinstance(data, list):
        raise CollaboratorError("Image extraction response is not a list", service=IMAGE_EXTRACTION)

    titles = []
    for item in data:
        title = item.get("title") if isinstance(item, dict) else None
        if isinstance(title, str) and title.strip():
            titles.append(title.strip())
    return titles
