"""
Custom exceptions for better error handling.
"""
from typing import Any, Dict, Optional


class LedgerSheetException(Exception):
    """Base exception for all ledgersheet errors."""

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


class ConfigurationError(LedgerSheetException):
    """Raised when configuration is invalid (fatal, before any row is read)."""
    pass


class RowParseError(LedgerSheetException):
    """Raised for a single malformed CSV line. Recoverable: the line is skipped."""

    def __init__(
        self,
        message: str,
        line_number: int,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message, details={"line_number": line_number, **(details or {})})
        self.line_number = line_number


class ParsingError(LedgerSheetException):
    """Raised when the input file cannot be read as a whole."""
    pass


class ExportError(LedgerSheetException):
    """Raised when writing the local transformed CSV fails."""
    pass


class SinkError(LedgerSheetException):
    """Raised when appending rows to the remote sheet fails."""
    pass
