"""
Unit tests for custom exceptions.
"""
from core.exceptions import (
    LedgerSheetException,
    ConfigurationError,
    RowParseError,
    ParsingError,
    ExportError,
    SinkError,
)


def test_base_exception():
    """Test base exception class."""
    exc = LedgerSheetException("Test error", details={"key": "value"})
    assert str(exc) == "Test error"
    assert exc.message == "Test error"
    assert exc.details == {"key": "value"}


def test_exception_hierarchy():
    """Test exception inheritance."""
    assert issubclass(ConfigurationError, LedgerSheetException)
    assert issubclass(RowParseError, LedgerSheetException)
    assert issubclass(ParsingError, LedgerSheetException)
    assert issubclass(ExportError, LedgerSheetException)
    assert issubclass(SinkError, LedgerSheetException)


def test_row_parse_error_carries_line_number():
    """Test line number is kept on the error and in details."""
    exc = RowParseError("Bad quoting", line_number=7, details={"values": ["a"]})
    assert exc.line_number == 7
    assert exc.details == {"line_number": 7, "values": ["a"]}


def test_exception_without_details():
    """Test exception without details."""
    exc = SinkError("API call failed")
    assert exc.message == "API call failed"
    assert exc.details == {}
