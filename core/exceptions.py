"""
Custom exceptions for better error handling.
"""
from typing import Any, Dict, Optional


class StatementImportException(Exception):
    """Base exception for all statement import errors."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        """
        Initialize exception.

        Args:
            message: Error message
            details: Additional error details
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ConfigurationError(StatementImportException):
    """Raised when configuration is invalid."""
    pass


class TaxonomyError(ConfigurationError):
    """Raised when a category taxonomy cannot be loaded or is malformed."""
    pass


class ParsingError(StatementImportException):
    """Raised when statement text cannot be parsed."""
    pass


class RowExtractionError(ParsingError):
    """Raised for a single statement row that cannot become an entry."""
    pass


class FileProcessingError(StatementImportException):
    """Raised when an uploaded file cannot be read as statement text."""
    pass


class DataNotFoundError(StatementImportException):
    """Raised when no importable records are found."""
    pass
