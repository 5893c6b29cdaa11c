"""Record producers: form submit and legacy bulk import."""

from biblio.ingestion.forms import build_book_from_form, enrichment_query, new_draft
from biblio.ingestion.legacy import LegacyImporter

__all__ = ["LegacyImporter", "build_book_from_form", "enrichment_query", "new_draft"]
