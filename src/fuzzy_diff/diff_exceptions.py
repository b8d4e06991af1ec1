"""Custom exceptions for diff operations."""

from typing import Any


class DiffError(Exception):
    """Base exception for diff operations."""

    def __init__(self, message: str, error_details: dict[str, Any] | None = None):
        """
        Initialize the exception.

        Args:
            message: Error message
            error_details: Optional dictionary with detailed error information
        """
        super().__init__(message)
        self.error_details = error_details


class DiffParseError(DiffError):
    """Raised when diff input cannot be parsed at all."""


class DiffContentError(DiffError):
    """Raised when a content provider cannot read or write a file."""


class DiffSettingsError(DiffError):
    """Raised when applier settings are missing or invalid."""
