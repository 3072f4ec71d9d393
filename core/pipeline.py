"""
CSV-to-rows pipeline.
Streams an export through the institution's normalizer and keeps the local copy.
"""
from typing import Iterable, List, Optional, Union

from core.exporters import create_output_filename, export_to_csv
from core.logger import setup_logger
from core.normalize import get_normalizer
from core.parsing import ErrorHandler, check_input_file, stream_csv_rows
from core.schema import CanonicalRow, Institution, NormalizationTable, RawRow

logger = setup_logger(__name__)


def normalize_rows(
    raw_rows: Iterable[RawRow],
    institution: Union[Institution, str],
    table: NormalizationTable
) -> List[CanonicalRow]:
    """
    Fold raw rows into the Row Collection.

    Rows are normalized one at a time in input order; dropped rows are left out.

    Args:
        raw_rows: Raw rows in CSV order
        institution: Institution selecting the normalizer
        table: Normalization table for that institution

    Returns:
        Canonical rows in input order
    """
    normalizer = get_normalizer(institution)

    rows: List[CanonicalRow] = []
    dropped = 0
    for raw_row in raw_rows:
        normalized = normalizer(raw_row, table)
        if normalized is None:
            dropped += 1
            continue
        rows.append(normalized)

    logger.info(f"Normalized {len(rows)} rows ({dropped} dropped)")
    return rows


def run_pipeline(
    csv_path: str,
    institution: Union[Institution, str],
    table: NormalizationTable,
    output_dir: str = ".",
    on_error: Optional[ErrorHandler] = None
) -> List[CanonicalRow]:
    """
    Normalize a CSV export and write <input-stem>_transformed.csv.

    The institution and input path are checked before any row is read.

    Args:
        csv_path: Input CSV path
        institution: Institution key or enum member
        table: Normalization table for that institution
        output_dir: Directory for the transformed copy
        on_error: Optional callback for skipped lines

    Returns:
        Canonical rows in input order

    Raises:
        ConfigurationError: Unknown institution or unreadable input
        ExportError: If the transformed copy cannot be written
    """
    if not isinstance(institution, Institution):
        institution = Institution.parse(institution)
    check_input_file(csv_path)

    rows = collect_rows(csv_path, institution, table, on_error=on_error)
    export_to_csv(rows, create_output_filename(csv_path, output_dir))
    return rows


def collect_rows(
    csv_path: str,
    institution: Institution,
    table: NormalizationTable,
    on_error: Optional[ErrorHandler] = None
) -> List[CanonicalRow]:
    """Stream the file and return its normalized rows without writing anything."""
    return normalize_rows(stream_csv_rows(csv_path, on_error=on_error), institution, table)
