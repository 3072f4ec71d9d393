"""
Streaming CSV parsing.
Reads an export line by line, keyed by its header row, skipping malformed lines.
"""
import csv
from pathlib import Path
from typing import Callable, Dict, Iterator, List, Optional

from core.exceptions import ConfigurationError, ParsingError, RowParseError
from core.logger import setup_logger
from core.schema import RawRow

logger = setup_logger(__name__)

ErrorHandler = Callable[[RowParseError], None]


def check_input_file(file_path: str) -> Path:
    """
    Check that the input CSV exists and can be opened.

    Raises:
        ConfigurationError: If the path is missing or unreadable
    """
    path = Path(file_path)
    if not path.is_file():
        raise ConfigurationError(
            f"Input file not found: {file_path}",
            details={"file_path": file_path}
        )
    try:
        with path.open("rb"):
            pass
    except OSError as e:
        raise ConfigurationError(
            f"Input file is not readable: {file_path}",
            details={"file_path": file_path, "error": str(e)}
        )
    return path


def _report(error: RowParseError, on_error: Optional[ErrorHandler]) -> None:
    logger.warning(f"Skipping line {error.line_number}: {error.message}")
    if on_error is not None:
        on_error(error)


def dedupe_header(header: List[str]) -> List[str]:
    """
    Make repeated column names unique.

    The first occurrence keeps its name, later ones get _1, _2, ... so no
    column is lost when rows are keyed by the header.

    Args:
        header: Column names as read from the file

    Returns:
        Unique column names, same length and order
    """
    taken = set(header)
    counts: Dict[str, int] = {}
    seen = set()
    unique: List[str] = []
    for name in header:
        if name not in seen:
            seen.add(name)
            unique.append(name)
            continue
        suffix = counts.get(name, 0)
        while True:
            suffix += 1
            candidate = f"{name}_{suffix}"
            if candidate not in taken:
                break
        counts[name] = suffix
        taken.add(candidate)
        unique.append(candidate)
    return unique


def _iter_rows(path: Path, on_error: Optional[ErrorHandler]) -> Iterator[RawRow]:
    with path.open(newline="", encoding="utf-8-sig") as handle:
        reader = csv.reader(handle, strict=True)
        header: Optional[List[str]] = None

        while True:
            try:
                values = next(reader)
            except StopIteration:
                break
            except csv.Error as e:
                _report(
                    RowParseError(f"Malformed CSV line: {e}", line_number=reader.line_num),
                    on_error
                )
                continue
            except UnicodeDecodeError as e:
                raise ParsingError(
                    f"Input file is not valid UTF-8: {path.name}",
                    details={"file_path": str(path), "error": str(e)}
                )

            # Blank lines carry no data
            if not values or values == [""]:
                continue

            if header is None:
                header = dedupe_header(values)
                if header != values:
                    logger.warning(f"Renamed duplicate CSV columns: {values} -> {header}")
                logger.debug(f"CSV header: {header}")
                continue

            if len(values) != len(header):
                _report(
                    RowParseError(
                        f"Expected {len(header)} fields, found {len(values)}",
                        line_number=reader.line_num,
                        details={"values": values}
                    ),
                    on_error
                )
                continue

            yield dict(zip(header, values))


def stream_csv_rows(file_path: str, on_error: Optional[ErrorHandler] = None) -> Iterator[RawRow]:
    """
    Stream raw rows from a CSV file.

    The first non-blank line is the header. Every later line becomes a Raw
    Row keyed by it, in column order. Lines with broken quoting or the wrong
    number of fields are reported and skipped.

    Args:
        file_path: Path to CSV file
        on_error: Optional callback for each skipped line

    Returns:
        Lazy iterator of raw rows

    Raises:
        ConfigurationError: If the file doesn't exist (raised immediately)
        ParsingError: If the file is not UTF-8 (raised while iterating)
    """
    path = check_input_file(file_path)
    logger.info(f"Parsing transactions from {path.name}")
    return _iter_rows(path, on_error)
