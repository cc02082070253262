"""Exceptions raised by the catalog layer and mapped to JSON responses."""

from __future__ import annotations

from typing import Iterable, Optional


class CatalogError(Exception):
    """Base class carrying the HTTP status the API should answer with."""

    status = 500

    def __init__(self, message: str, status: Optional[int] = None):
        super().__init__(message)
        self.message = message
        if status is not None:
            self.status = status


class ValidationError(CatalogError):
    status = 400

    def __init__(self, message: str, fields: Optional[Iterable[str]] = None):
        super().__init__(message)
        self.fields = list(fields or [])


class ConflictError(CatalogError):
    status = 409


class NotFoundError(CatalogError):
    status = 404
