"""
BiblioGestor exception hierarchy.

Exception Hierarchy:
    BiblioError (base)
    ├── ValidationError - Required field missing or invalid on create/save
    ├── NotFoundError - Update/delete referencing an unknown record id
    ├── CollaboratorError - Enrichment, recommendation or image service failure
    └── PersistenceError - Durable slot unreadable or unwritable
"""

from __future__ import annotations

from typing import Any


class BiblioError(Exception):
    """Base exception for all BiblioGestor errors."""

    def __init__(self, message: str, *, details: dict[str, Any] | None = None) -> None:
        """
        Initialize exception.

        Args:
            message: Human-readable error message
            details: Optional structured error details for logging/debugging
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        return self.message


class ValidationError(BiblioError):
    """A record failed validation; the store is left unchanged."""

    def __init__(
        self,
        message: str,
        *,
        field: str | None = None,
        errors: list[str] | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        details = details or {}
        if field:
            details["field"] = field
        if errors:
            details["errors"] = errors
        super().__init__(message, details=details)
        self.field = field
        self.errors = errors or []


class NotFoundError(BiblioError):
    """No record matches the given id."""

    def __init__(self, record_id: str) -> None:
        super().__init__(f"No book with id {record_id!r}", details={"id": record_id})
        self.record_id = record_id


class CollaboratorError(BiblioError):
    """An external enrichment/recommendation/image call failed."""

    def __init__(
        self,
        message: str,
        *,
        service: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        details = details or {}
        details["service"] = service
        super().__init__(message, details=details)
        self.service = service


class PersistenceError(BiblioError):
    """The durable slot could not be read or written."""

    def __init__(
        self,
        message: str,
        *,
        key: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        details = details or {}
        if key:
            details["key"] = key
        super().__init__(message, details=details)
        self.key = key
