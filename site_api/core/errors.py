"""Error taxonomy shared by the storage layer, services and routers."""
from __future__ import annotations


class StoreError(Exception):
    def __init__(self, message: str, code: str = "error", status_code: int = 500):
        super().__init__(message)
        self.message = message
        self.code = code
        self.status_code = status_code


class ValidationError(StoreError):
    """Bad input: non-image upload, oversized file, missing field."""

    def __init__(self, message: str, code: str = "invalid"):
        super().__init__(message, code, 400)


class NotFoundError(StoreError):
    """Raised when an id does not resolve to a record."""

    def __init__(self, message: str, code: str = "not_found"):
        super().__init__(message, code, 404)


class WriteError(StoreError):
    """Raised when a blob or snapshot could not be written to disk."""

    def __init__(self, message: str, code: str = "write_failed"):
        super().__init__(message, code, 500)


class CorruptDataError(StoreError):
    """Raised when a snapshot exists but cannot be deserialized."""

    def __init__(self, message: str, code: str = "corrupt_data"):
        super().__init__(message, code, 500)
