"""In-memory book collection with full-replace persistence."""

import logging
from collections.abc import Iterable
from typing import Protocol

from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from biblio.errors import NotFoundError, PersistenceError, ValidationError
from biblio.models.book import Book

logger = logging.getLogger(__name__)

DEFAULT_SLOT_KEY = "biblio-gestor-data"

_BOOK_LIST = TypeAdapter(list[Book])


class KeyValueSlot(Protocol):
    """Durable storage for one serialized collection per key."""

    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...


def serialize_books(books: Iterable[Book]) -> str:
    """Serialize records to the persisted JSON array (camelCase keys)."""
    return _BOOK_LIST.dump_json(list(books), by_alias=True).decode("utf-8")


def deserialize_books(raw: str) -> list[Book]:
    """Parse a persisted JSON array back into records.

    Raises:
        PersistenceError: If the text is not a valid serialized collection.
    """
    try:
        return _BOOK_LIST.validate_json(raw)
    except PydanticValidationError as exc:
        raise PersistenceError(f"Stored collection is unreadable: {exc.error_count()} errors") from exc


class RecordStore:
    """Owns every Book record and mirrors the collection to a durable slot.

    The slot is read once here at construction. Every mutation builds the
    new collection, writes it to the slot in full and only then swaps it
    in, so a failed write leaves the in-memory collection untouched.
    Readers always get copies.

    Args:
        slot: Key-value storage for the serialized collection.
        key: Name of the slot entry.
    """

    def __init__(self, slot: KeyValueSlot, key: str = DEFAULT_SLOT_KEY) -> None:
        self._slot = slot
        self._key = key
        self._books: list[Book] = self._load()

    def __len__(self) -> int:
        return len(self._books)

    def _load(self) -> list[Book]:
        try:
            raw = self._slot.get(self._key)
            if raw is None:
                return []
            books = deserialize_books(raw)
        except PersistenceError as exc:
            logger.warning("Starting with an empty collection: %s", exc)
            return []

        seen: set[str] = set()
        unique = []
        for book in books:
            if book.id in seen:
                logger.warning("Dropping stored book %r: id %s is already taken", book.title, book.id)
                continue
            seen.add(book.id)
            unique.append(book)
        books = unique
        logger.info("Loaded %d books from slot %r", len(books), self._key)
        return books

    def _commit(self, books: list[Book]) -> None:
        self._slot.set(self._key, serialize_books(books))
        self._books = books

    def _index_of(self, record_id: str) -> int:
        for index, book in enumerate(self._books):
            if book.id == record_id:
                return index
        raise NotFoundError(record_id)

    @staticmethod
    def _check_title(book: Book) -> None:
        if not book.title.strip():
            raise ValidationError("Title is required", field="title")

    def list(self) -> list[Book]:
        """Return a snapshot of the collection in insertion order."""
        return [book.model_copy(deep=True) for book in self._books]

    def get(self, record_id: str) -> Book:
        """Return a copy of the record with ``record_id``.

        Raises:
            NotFoundError: If no record has that id.
        """
        return self._books[self._index_of(record_id)].model_copy(deep=True)

    def create(self, book: Book) -> Book:
        """Append a new record.

        Raises:
            ValidationError: If the title is empty or the id is taken.
            PersistenceError: If the collection cannot be written.
        """
        self._check_title(book)
        if any(existing.id == book.id for existing in self._books):
            raise ValidationError(f"A book with id {book.id!r} already exists", field="id")

        stored = book.model_copy(deep=True)
        self._commit([*self._books, stored])
        logger.debug("Created book %s (%r)", stored.id, stored.title)
        return stored.model_copy(deep=True)

    def update(self, record_id: str, book: Book) -> Book:
        """Replace the record with ``record_id`` wholesale.

        ``id`` and ``added_at`` are kept from the original record.

        Raises:
            NotFoundError: If no record has that id.
            ValidationError: If the replacement has an empty title.
            PersistenceError: If the collection cannot be written.
        """
        index = self._index_of(record_id)
        self._check_title(book)

        original = self._books[index]
        replacement = book.model_copy(
            update={"id": original.id, "added_at": original.added_at}, deep=True
        )
        books = list(self._books)
        books[index] = replacement
        self._commit(books)
        logger.debug("Updated book %s", record_id)
        return replacement.model_copy(deep=True)

    def delete(self, record_id: str) -> None:
        """Remove the record with ``record_id``.

        Raises:
            NotFoundError: If no record has that id.
            PersistenceError: If the collection cannot be written.
        """
        index = self._index_of(record_id)
        self._commit(self._books[:index] + self._books[index + 1 :])
        logger.debug("Deleted book %s", record_id)

    def bulk_append(self, books: Iterable[Book]) -> int:
        """Append a batch of records without deduplicating them.

        The batch is validated as a whole; one bad record rejects all.

        Returns:
            Number of records appended.

        Raises:
            ValidationError: If any title is empty or any id collides.
            PersistenceError: If the collection cannot be written.
        """
        batch = [book.model_copy(deep=True) for book in books]
        if not batch:
            return 0

        taken = {book.id for book in self._books}
        for book in batch:
            self._check_title(book)
            if book.id in taken:
                raise ValidationError(f"A book with id {book.id!r} already exists", field="id")
            taken.add(book.id)

        self._commit([*self._books, *batch])
        logger.info("Appended %d books", len(batch))
        return len(batch)
