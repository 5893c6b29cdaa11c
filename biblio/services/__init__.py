"""Application services and external collaborator interfaces."""

from biblio.services.collaborators import (
    EnrichmentClient,
    ImageExtractionClient,
    RecommendationClient,
)
from biblio.services.library import LibraryService, Notice, NoticeLevel

__all__ = [
    "EnrichmentClient",
    "ImageExtractionClient",
    "LibraryService",
    "Notice",
    "NoticeLevel",
    "RecommendationClient",
]
