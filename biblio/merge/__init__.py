"""Duplicate filtering and enrichment merge rules."""

from biblio.merge.dedup import filter_new_candidates, normalize_title
from biblio.merge.enrichment import ENRICHMENT_RULES, FieldRule, merge_enrichment

__all__ = [
    "ENRICHMENT_RULES",
    "FieldRule",
    "filter_new_candidates",
    "merge_enrichment",
    "normalize_title",
]
