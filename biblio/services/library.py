"""User-facing operations over the record store.

This is the boundary where failures stop: store errors and collaborator
failures are logged and turned into a :class:`Notice` for the user.
Nothing here leaves the store partially mutated.
"""

import logging
from collections.abc import Callable, Iterator, Sequence
from contextlib import contextmanager
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field

from biblio.config import AppConfig
from biblio.errors import BiblioError, CollaboratorError
from biblio.ingestion.forms import enrichment_query
from biblio.ingestion.legacy import LegacyImporter
from biblio.merge.dedup import filter_new_candidates
from biblio.merge.enrichment import merge_enrichment
from biblio.models.book import Book, BookDraft, BookFormat, BookStatus, Owner
from biblio.models.stats import LibraryStats
from biblio.services.collaborators import (
    ENRICHMENT,
    IMAGE_EXTRACTION,
    RECOMMENDATIONS,
    EnrichmentClient,
    ImageExtractionClient,
    RecommendationClient,
    parse_recommendations,
    parse_suggestion,
    parse_titles,
)
from biblio.storage.record_store import RecordStore
from biblio.views.projection import View, filter_books, library_stats, recent_reads

logger = logging.getLogger(__name__)


class NoticeLevel(str, Enum):
    INFO = "info"
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"


class Notice(BaseModel):
    """A message to show the user after an action."""

    level: NoticeLevel
    message: str


class ImportResult(BaseModel):
    """Outcome of a bulk or image import."""

    added: list[Book] = Field(default_factory=list)
    skipped: int = 0
    notice: Notice


class EnrichmentResult(BaseModel):
    """The draft to show next, and a notice when enrichment did not apply."""

    draft: BookDraft
    notice: Notice | None = None


class RecommendationResult(BaseModel):
    suggestions: list[str] = Field(default_factory=list)
    notice: Notice | None = None


class Dashboard(BaseModel):
    total_records: int
    stats: LibraryStats
    recent: list[Book]


def _error(exc: BiblioError) -> Notice:
    return Notice(level=NoticeLevel.ERROR, message=exc.message)


class LibraryService:
    """Runs user actions against the store and the AI collaborators.

    Collaborator calls are the only awaiting operations. Each kind is
    tracked in ``in_progress`` while it runs and a second request of the
    same kind is refused until the first completes.

    Args:
        store: The record store.
        config: Application configuration.
        enrichment: Metadata lookup service, optional.
        recommendations: Recommendation service, optional.
        images: Title extraction service for wishlist images, optional.
    """

    def __init__(
        self,
        store: RecordStore,
        config: AppConfig,
        *,
        enrichment: EnrichmentClient | None = None,
        recommendations: RecommendationClient | None = None,
        images: ImageExtractionClient | None = None,
    ) -> None:
        self._store = store
        self._config = config
        self._enrichment = enrichment
        self._recommendations = recommendations
        self._images = images
        self.in_progress: set[str] = set()

    # ── Manual edits ────────────────────────────────────────────────────────

    def books(self) -> list[Book]:
        return self._store.list()

    def save_book(self, book: Book, *, editing: bool = False) -> Notice:
        """Create a new record or fully replace the edited one."""
        try:
            if editing:
                self._store.update(book.id, book)
            else:
                self._store.create(book)
        except BiblioError as exc:
            logger.warning("Could not save %r: %s", book.title, exc)
            return _error(exc)
        action = "updated" if editing else "added"
        return Notice(level=NoticeLevel.SUCCESS, message=f"'{book.title}' {action}.")

    def delete_book(self, record_id: str) -> Notice:
        try:
            self._store.delete(record_id)
        except BiblioError as exc:
            logger.warning("Could not delete %s: %s", record_id, exc)
            return _error(exc)
        return Notice(level=NoticeLevel.SUCCESS, message="Book removed.")

    # ── Legacy import ───────────────────────────────────────────────────────

    def legacy_import_available(self) -> bool:
        """The demo dataset is only offered to small collections."""
        return len(self._store) < self._config.imports.legacy_import_limit

    def legacy_dataset(self, file_path: str | None = None) -> list[Book]:
        """Load legacy candidates from ``file_path``, the configured path or the bundled demo.

        Raises:
            FileNotFoundError: If the file does not exist.
            ValueError: If the file cannot be parsed.
        """
        return LegacyImporter().load(file_path or self._config.imports.legacy_path)

    def import_legacy(self, dataset: Sequence[Book]) -> ImportResult:
        """Append the legacy records whose titles are not in the collection yet."""
        new_books = filter_new_candidates(
            self._store.list(),
            dataset,
            collapse_batch_duplicates=self._config.imports.collapse_batch_duplicates,
        )
        skipped = len(dataset) - len(new_books)
        if not new_books:
            return ImportResult(
                skipped=skipped,
                notice=Notice(
                    level=NoticeLevel.INFO,
                    message="All books from the spreadsheet are already in your library.",
                ),
            )
        return self._append(new_books, skipped, source="spreadsheet")

    def _append(self, new_books: list[Book], skipped: int, *, source: str) -> ImportResult:
        try:
            self._store.bulk_append(new_books)
        except BiblioError as exc:
            logger.warning("Import from %s failed: %s", source, exc)
            return ImportResult(skipped=len(new_books) + skipped, notice=_error(exc))
        logger.info("Imported %d books from %s (%d skipped)", len(new_books), source, skipped)
        return ImportResult(
            added=new_books,
            skipped=skipped,
            notice=Notice(
                level=NoticeLevel.SUCCESS,
                message=f"{len(new_books)} books imported from {source}.",
            ),
        )

    # ── Collaborator calls ──────────────────────────────────────────────────

    @contextmanager
    def _busy(self, operation: str) -> Iterator[None]:
        self.in_progress.add(operation)
        try:
            yield
        finally:
            self.in_progress.discard(operation)

    async def _call(self, service: str, func: Callable[..., Any], *args: Any) -> Any:
        """Await a collaborator, folding any failure into CollaboratorError."""
        try:
            return await func(*args)
        except Exception as exc:
            logger.exception("%s request failed", service)
            raise CollaboratorError(f"{service} request failed: {exc}", service=service) from exc

    def _already_running(self, operation: str) -> Notice | None:
        if operation in self.in_progress:
            return Notice(level=NoticeLevel.WARNING, message="Still working on the previous request.")
        return None

    async def magic_fill(self, draft: BookDraft) -> EnrichmentResult:
        """Fill a draft's descriptive fields from the enrichment service.

        Status, owner and location in the draft are never overwritten. On
        any failure the draft comes back unchanged with a notice.
        """
        query = enrichment_query(draft)
        if query is None:
            return EnrichmentResult(
                draft=draft,
                notice=Notice(level=NoticeLevel.WARNING, message="Enter a title first."),
            )
        if self._enrichment is None:
            return EnrichmentResult(
                draft=draft,
                notice=Notice(level=NoticeLevel.WARNING, message="AI enrichment is not configured."),
            )
        running = self._already_running(ENRICHMENT)
        if running:
            return EnrichmentResult(draft=draft, notice=running)

        with self._busy(ENRICHMENT):
            try:
                payload = await self._call(ENRICHMENT, self._enrichment.enrich, query)
                suggestion = parse_suggestion(payload)
            except CollaboratorError as exc:
                logger.warning("Enrichment for %r failed: %s", query, exc)
                return EnrichmentResult(
                    draft=draft,
                    notice=Notice(level=NoticeLevel.ERROR, message="Could not fetch book details."),
                )

        if suggestion is None:
            return EnrichmentResult(
                draft=draft,
                notice=Notice(level=NoticeLevel.INFO, message=f"No details found for {query!r}."),
            )
        return EnrichmentResult(draft=merge_enrichment(draft, suggestion))

    async def generate_recommendations(self) -> RecommendationResult:
        """Ask for new books based on the first records of the collection."""
        books = self._store.list()
        if not books:
            return RecommendationResult()
        if self._recommendations is None:
            return RecommendationResult(
                notice=Notice(level=NoticeLevel.WARNING, message="Recommendations are not configured.")
            )
        running = self._already_running(RECOMMENDATIONS)
        if running:
            return RecommendationResult(notice=running)

        sample = books[: self._config.recommendations.sample_size]
        with self._busy(RECOMMENDATIONS):
            try:
                payload = await self._call(
                    RECOMMENDATIONS,
                    self._recommendations.recommend,
                    sample,
                    self._config.recommendations.count,
                )
                suggestions = parse_recommendations(payload)
            except CollaboratorError as exc:
                logger.warning("Recommendations failed: %s", exc)
                return RecommendationResult(
                    notice=Notice(level=NoticeLevel.ERROR, message="Could not generate recommendations.")
                )
        return RecommendationResult(suggestions=suggestions)

    def _wishlist_record(self, title: str) -> Book:
        imports = self._config.imports
        return Book(
            title=title,
            author=imports.placeholder_author,
            genre=[],
            tags=[imports.image_import_tag],
            status=BookStatus.UNREAD,
            format=BookFormat.PHYSICAL,
            owner=Owner.ME,
            total_pages=0,
            current_page=0,
            is_wishlist=True,
        )

    async def import_wishlist_image(self, data: bytes, mime_type: str = "image/png") -> ImportResult:
        """Add the titles found in an image to the wishlist.

        Titles already in the collection are dropped when
        ``imports.dedupe_image_import`` is set.
        """
        if self._images is None:
            return ImportResult(
                notice=Notice(level=NoticeLevel.WARNING, message="Image import is not configured.")
            )
        running = self._already_running(IMAGE_EXTRACTION)
        if running:
            return ImportResult(notice=running)

        with self._busy(IMAGE_EXTRACTION):
            try:
                payload = await self._call(IMAGE_EXTRACTION, self._images.extract_titles, data, mime_type)
                titles = parse_titles(payload)
            except CollaboratorError as exc:
                logger.warning("Image import failed: %s", exc)
                return ImportResult(
                    notice=Notice(level=NoticeLevel.ERROR, message="Could not process the image.")
                )

        if not titles:
            return ImportResult(
                notice=Notice(
                    level=NoticeLevel.WARNING,
                    message="No books found in the image. Try a clearer picture.",
                )
            )

        candidates = [self._wishlist_record(title) for title in titles]
        imports = self._config.imports
        if imports.dedupe_image_import:
            new_books = filter_new_candidates(
                self._store.list(),
                candidates,
                collapse_batch_duplicates=imports.collapse_batch_duplicates,
            )
        else:
            new_books = candidates
        skipped = len(candidates) - len(new_books)

        if not new_books:
            return ImportResult(
                skipped=skipped,
                notice=Notice(
                    level=NoticeLevel.INFO,
                    message="Every book in the image is already in your collection.",
                ),
            )
        return self._append(new_books, skipped, source="image")

    # ── Views ───────────────────────────────────────────────────────────────

    def view(self, view: View = View.ALL, term: str = "") -> list[Book]:
        return filter_books(self._store.list(), view, term)

    def dashboard(self) -> Dashboard:
        books = self._store.list()
        dashboard = self._config.dashboard
        return Dashboard(
            total_records=len(books),
            stats=library_stats(books, dashboard.top_genres),
            recent=recent_reads(books, dashboard.recent_count),
        )
