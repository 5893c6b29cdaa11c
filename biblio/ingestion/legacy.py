"""Loader for the legacy spreadsheet dataset (JSON or CSV)."""

import csv
import io
import json
import logging
import re
from pathlib import Path
from typing import Any

import chardet
from pydantic import ValidationError as PydanticValidationError

from biblio.models.book import Book

logger = logging.getLogger(__name__)

BUNDLED_DATASET = Path(__file__).resolve().parent.parent / "data" / "legacy_library.json"

# Supported file extensions mapped to format identifiers
SUPPORTED_FORMATS: dict[str, str] = {
    ".json": "json",
    ".csv": "csv",
    ".tsv": "tsv",
}


def _normalize_header(header: str) -> str:
    """Map spreadsheet headers ("Total Pages", "TotalPages") onto field names."""
    cleaned = header.strip()
    if re.search(r"[\s-]", cleaned):
        return re.sub(r"[\s-]+", "_", cleaned.lower())
    return cleaned[:1].lower() + cleaned[1:]


class LegacyImporter:
    """Reads a legacy book list into candidate records.

    Every loaded row becomes a brand-new record: ids in the source are
    ignored and a fresh one is assigned. Rows without a usable title or
    with invalid fields are skipped with a warning. The result still has
    to go through duplicate filtering before it is appended.
    """

    def load(self, file_path: str | Path | None = None) -> list[Book]:
        """Load candidate records from a file.

        Args:
            file_path: JSON array or CSV/TSV spreadsheet. Defaults to the
                bundled demo dataset.

        Returns:
            Candidate records in file order.

        Raises:
            FileNotFoundError: If file_path does not exist.
            ValueError: If the format is unsupported or the JSON is not a list.
        """
        path = Path(file_path) if file_path else BUNDLED_DATASET
        if not path.exists():
            raise FileNotFoundError(f"File not found: {path}")

        file_format = self._detect_format(path)
        text = self._read_text(path)

        dispatch = {
            "json": self._rows_from_json,
            "csv": lambda raw: self._rows_from_delimited(raw, ","),
            "tsv": lambda raw: self._rows_from_delimited(raw, "\t"),
        }
        rows = dispatch[file_format](text)

        books = []
        for line_number, row in enumerate(rows, start=1):
            book = self._to_book(row, line_number, path)
            if book is not None:
                books.append(book)

        logger.info("Loaded %d legacy books from %s", len(books), path)
        return books

    def _detect_format(self, file_path: Path) -> str:
        ext = file_path.suffix.lower()
        if ext not in SUPPORTED_FORMATS:
            raise ValueError(
                f"Unsupported file format: '{ext}'. "
                f"Supported: {', '.join(SUPPORTED_FORMATS.keys())}"
            )
        return SUPPORTED_FORMATS[ext]

    def _read_text(self, file_path: Path) -> str:
        """Read a text file, detecting the encoding when it is not UTF-8.

        Spreadsheet exports are often Windows-1252 or UTF-16; chardet picks
        the codec when UTF-8 decoding fails.
        """
        raw_bytes = file_path.read_bytes()
        try:
            return raw_bytes.decode("utf-8-sig")
        except UnicodeDecodeError:
            pass

        detected = chardet.detect(raw_bytes)
        encoding = detected.get("encoding") or "utf-8"
        confidence = detected.get("confidence") or 0

        if confidence < 0.7:
            logger.warning(
                "Low confidence encoding detection for %s: %s (%.0f%%)",
                file_path,
                encoding,
                confidence * 100,
            )

        try:
            return raw_bytes.decode(encoding)
        except (UnicodeDecodeError, LookupError):
            logger.error("Failed to decode file: %s", file_path)
            return raw_bytes.decode("utf-8", errors="replace")

    def _rows_from_json(self, text: str) -> list[dict[str, Any]]:
        data = json.loads(text) if text.strip() else []
        if not isinstance(data, list):
            raise ValueError("Legacy JSON must be an array of books")
        return [row for row in data if isinstance(row, dict)]

    def _rows_from_delimited(self, text: str, delimiter: str) -> list[dict[str, Any]]:
        reader = csv.DictReader(io.StringIO(text), delimiter=delimiter)
        rows = []
        for raw_row in reader:
            # Blank cells mean "use the default", not an empty value
            rows.append(
                {
                    _normalize_header(key): value.strip()
                    for key, value in raw_row.items()
                    if key and isinstance(value, str) and value.strip()
                }
            )
        return rows

    def _to_book(self, row: dict[str, Any], line_number: int, path: Path) -> Book | None:
        data = {key: value for key, value in row.items() if key != "id"}
        title = data.get("title")
        if not isinstance(title, str) or not title.strip():
            logger.warning("Skipping row %d in %s: missing title", line_number, path)
            return None

        try:
            return Book.model_validate(data)
        except PydanticValidationError as exc:
            logger.warning(
                "Skipping row %d in %s (%r): %d invalid fields",
                line_number,
                path,
                title,
                exc.error_count(),
            )
            return None
