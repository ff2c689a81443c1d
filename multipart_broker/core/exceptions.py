"""Exceptions raised by the storage layer."""

from typing import Optional


class StorageError(Exception):
    """A call to the object store failed.

    Attributes:
        message: Provider error text, surfaced to the caller verbatim
        operation: Storage operation that failed (e.g. ``complete_multipart_upload``)
        error_code: Provider error code when one was returned
    """

    def __init__(
        self,
        message: str,
        operation: Optional[str] = None,
        error_code: Optional[str] = None,
    ):
        super().__init__(message)
        self.message = message
        self.operation = operation
        self.error_code = error_code


class StorageConfigurationError(StorageError):
    """The storage client could not be configured."""
