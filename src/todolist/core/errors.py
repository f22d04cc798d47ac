# src/todolist/core/errors.py

"""
Error taxonomy shared by the service and the HTTP layer.

- ValidationError: caller sent something unusable (HTTP 400)
- StorageError: the store failed; message is passed through verbatim (HTTP 500)

"Not found" is deliberately absent here: the service reports it as data
(None / zero affected rows) and the HTTP layer turns that into a 404.
"""

from __future__ import annotations


class TodoError(Exception):
    """Base exception for all todolist errors."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message


class ValidationError(TodoError):
    """Raised before any storage call when the input breaks a task rule."""


class StorageError(TodoError):
    """Raised when the underlying store fails (unreachable, I/O, SQL error)."""
