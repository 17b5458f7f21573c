"""
Store Errors

Every failure raised by the store services derives from StoreError and
carries an error code alongside its message.
"""

from typing import Any, Dict, Optional


class StoreError(Exception):
    code = "STORE_ERROR"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(StoreError):
    """Malformed or out-of-range input."""

    code = "VALIDATION_ERROR"

    def __init__(self, message: str, messages: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.messages = messages or {}


class NotFoundError(StoreError):
    """A referenced identifier does not exist."""

    code = "NOT_FOUND"


class ConflictError(StoreError):
    """A uniqueness constraint would be violated."""

    code = "DUPLICATE_ENTRY"


class StorageError(StoreError):
    """The database failed underneath an operation."""

    code = "STORAGE_ERROR"
