"""
Local CSV exporter for the transformed rows.
Writes <input-stem>_transformed.csv into the configured output directory.
"""
from pathlib import Path
from typing import List, Sequence

import pandas as pd

from core.exceptions import ExportError
from core.logger import setup_logger
from core.schema import CanonicalRow

logger = setup_logger(__name__)

TRANSFORMED_SUFFIX = "_transformed.csv"


def collect_columns(rows: Sequence[CanonicalRow]) -> List[str]:
    """
    Union of the rows' keys in first-seen order.

    Args:
        rows: Canonical rows

    Returns:
        Column names for the output header
    """
    columns: List[str] = []
    seen = set()
    for row in rows:
        for key in row:
            if key not in seen:
                seen.add(key)
                columns.append(key)
    return columns


def export_to_csv(rows: Sequence[CanonicalRow], output_path: str) -> str:
    """
    Write canonical rows to a CSV file.

    Cells a row does not have are written empty. An empty collection
    produces an empty file.

    Args:
        rows: Canonical rows in output order
        output_path: Output file path

    Returns:
        Path to created file

    Raises:
        ExportError: If the file cannot be written
    """
    logger.info(f"Exporting {len(rows)} rows to {output_path}")

    output_file = Path(output_path)

    try:
        output_file.parent.mkdir(parents=True, exist_ok=True)

        if not rows:
            output_file.write_text("", encoding="utf-8")
            logger.warning(f"No rows to export, wrote empty file {output_path}")
            return output_path

        df = pd.DataFrame(list(rows), columns=collect_columns(rows), dtype=object)
        df.to_csv(output_path, index=False, na_rep="", lineterminator="\n", encoding="utf-8")

        logger.info(f"Successfully exported to {output_path}")
        return output_path

    except Exception as e:
        logger.error(f"Failed to export CSV: {e}")
        raise ExportError(
            "Failed to export transformed CSV",
            details={"output_path": output_path, "error": str(e)}
        )


def create_output_filename(csv_path: str, base_path: str = ".") -> str:
    """
    Build the local artifact path for an input file.

    Args:
        csv_path: Input CSV path
        base_path: Output directory

    Returns:
        <base_path>/<input-stem>_transformed.csv
    """
    filename = f"{Path(csv_path).stem}{TRANSFORMED_SUFFIX}"
    return str(Path(base_path) / filename)
