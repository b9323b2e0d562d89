from __future__ import annotations


class StorageError(Exception):
    """Raised when the storage medium cannot persist the document."""


class StorageQuotaExceeded(StorageError):
    """Raised when a write would exceed the storage slot's byte quota."""

    def __init__(self, size: int, quota: int) -> None:
        super().__init__(f"Document of {size} bytes exceeds storage quota of {quota} bytes")
        self.size = size
        self.quota = quota


class ImportParseError(ValueError):
    """Raised when an import file is not a JSON object or array."""
