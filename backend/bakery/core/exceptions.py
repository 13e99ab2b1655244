"""Domain exceptions shared by services and routers."""

from __future__ import annotations


class InvalidDateError(ValueError):
    """Raised when a value cannot be interpreted as a calendar date."""


class StorageError(RuntimeError):
    """Raised when the persistence layer fails to read or write."""


class StorageTimeoutError(StorageError, TimeoutError):
    """Raised when a persistence call exceeds the configured timeout."""


__all__ = ["InvalidDateError", "StorageError", "StorageTimeoutError"]
