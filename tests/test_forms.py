"""Tests for form-submit record construction."""

import pytest

from biblio.errors import ValidationError
from biblio.ingestion.forms import build_book_from_form, enrichment_query, new_draft
from biblio.models.book import BookDraft, BookFormat, BookStatus, Owner
from tests.conftest import make_book


class TestNewDraft:
    def test_defaults(self) -> None:
        draft = new_draft()
        assert draft.status is BookStatus.UNREAD
        assert draft.format is BookFormat.PHYSICAL
        assert draft.owner is Owner.ME
        assert draft.is_wishlist is False
        assert draft.location == ""

    def test_wishlist_mode(self) -> None:
        assert new_draft(is_wishlist=True).is_wishlist is True


class TestEnrichmentQuery:
    def test_title_and_author(self) -> None:
        assert enrichment_query(BookDraft(title="Dune", author="Herbert")) == "Dune by Herbert"

    def test_title_only(self) -> None:
        assert enrichment_query(BookDraft(title=" Dune ")) == "Dune"

    def test_no_title(self) -> None:
        assert enrichment_query(BookDraft(title="  ", author="Herbert")) is None


class TestBuildBookFromForm:
    def test_new_book_gets_identity(self) -> None:
        book = build_book_from_form(BookDraft(title="Dune"))
        assert book.id
        assert book.added_at > 0

    def test_raw_labels_split(self) -> None:
        book = build_book_from_form(
            BookDraft(title="Dune", genre=["ignored"]),
            raw_genres="Sci-Fi, Classic, ",
            raw_tags=" space ,,politics",
        )
        assert book.genre == ["Sci-Fi", "Classic"]
        assert book.tags == ["space", "politics"]

    def test_edit_keeps_identity(self) -> None:
        original = make_book("Dune", added_at=77)
        draft = BookDraft.from_book(original).model_copy(update={"id": None, "title": "Dune!"})
        book = build_book_from_form(draft, initial=original)
        assert book.id == original.id
        assert book.added_at == 77
        assert book.title == "Dune!"

    def test_from_raw_mapping(self) -> None:
        book = build_book_from_form(
            {"title": "Dune", "totalPages": "688", "currentPage": "", "status": "Reading"}
        )
        assert book.total_pages == 688
        assert book.current_page == 0
        assert book.status is BookStatus.READING

    def test_invalid_mapping(self) -> None:
        with pytest.raises(ValidationError) as exc_info:
            build_book_from_form({"title": "Dune", "status": "Lido"})
        assert exc_info.value.errors

    def test_empty_title(self) -> None:
        with pytest.raises(ValidationError) as exc_info:
            build_book_from_form(BookDraft(title=" "))
        assert exc_info.value.field == "title"
