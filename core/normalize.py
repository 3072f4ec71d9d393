"""
Per-institution row normalization.
Renames source columns to canonical sheet columns, categorizes values,
and drops non-transaction lines.
"""
from typing import Callable, Dict, Iterable, Optional, Tuple, Union

from core.exceptions import ConfigurationError
from core.logger import setup_logger
from core.schema import CanonicalRow, Institution, NormalizationTable, RawRow

logger = setup_logger(__name__)

# Canonical columns read by derived fields
TIMESTAMP_COLUMN = "Timestamp"
ITEM_COLUMN = "Item"

# Capital One source columns
CAPITAL_ONE_CATEGORY_COLUMN = "Category"

# Schwab source columns
SCHWAB_CHECK_COLUMN = "Check #"
SCHWAB_TYPE_COLUMN = "Type"
SCHWAB_BALANCE_COLUMN = "RunningBalance"

DEFAULT_MONETARY_COLUMNS: Dict[Institution, Tuple[str, ...]] = {
    Institution.CAPITAL_ONE: ("Debit", "Credit"),
    Institution.SCHWAB: ("Withdrawal (-)", "Deposit (+)"),
}

# Returns the canonical row, or None when the row is dropped
RowNormalizer = Callable[[RawRow, NormalizationTable], Optional[CanonicalRow]]


def canonical_key(key: str, table: NormalizationTable) -> str:
    """Canonical name for a source column; unmapped columns keep their name."""
    return table.header_normalization.get(key, key)


def categorize_value(value: Optional[str], table: NormalizationTable) -> str:
    """Canonical category for a raw value; unknown values are kept as-is."""
    if value is None:
        return ""
    return table.categorize.get(value, value)


def monetary_columns(institution: Institution, table: NormalizationTable) -> Tuple[str, ...]:
    """Monetary source columns for an institution, table override first."""
    if table.monetary_columns:
        return tuple(table.monetary_columns)
    return DEFAULT_MONETARY_COLUMNS[institution]


def is_non_transaction(raw_row: RawRow, columns: Iterable[str]) -> bool:
    """
    Check whether a row carries no amount at all.

    Only monetary columns present in the row are judged. A row that has
    none of them is treated as a transaction.

    Args:
        raw_row: Source row
        columns: Monetary source column names

    Returns:
        True if every present monetary column is blank
    """
    present = [raw_row.get(column) for column in columns if column in raw_row]
    if not present:
        return False
    return all(not (value or "").strip() for value in present)


def normalize_capital_one(raw_row: RawRow, table: NormalizationTable) -> Optional[CanonicalRow]:
    """
    Normalize a Capital One row.

    Args:
        raw_row: Source column -> raw value
        table: Capital One normalization table

    Returns:
        Canonical row, or None for a non-transaction line
    """
    if is_non_transaction(raw_row, monetary_columns(Institution.CAPITAL_ONE, table)):
        logger.debug(f"Dropping Capital One row without amounts: {raw_row}")
        return None

    normalized: CanonicalRow = {}
    for key, value in raw_row.items():
        if key == CAPITAL_ONE_CATEGORY_COLUMN:
            value = categorize_value(value, table)
        normalized[canonical_key(key, table)] = value

    logger.debug(f"Parsed Capital One row: {normalized}")
    return normalized


def normalize_schwab(raw_row: RawRow, table: NormalizationTable) -> Optional[CanonicalRow]:
    """
    Normalize a Schwab row.

    Runs in two passes so the derived columns do not depend on the source
    column order: first every column is renamed, then Type takes the row's
    Timestamp and RunningBalance takes the categorized Item.

    Args:
        raw_row: Source column -> raw value
        table: Schwab normalization table

    Returns:
        Canonical row, or None for a non-transaction line
    """
    if is_non_transaction(raw_row, monetary_columns(Institution.SCHWAB, table)):
        logger.debug(f"Dropping Schwab row without amounts: {raw_row}")
        return None

    normalized: CanonicalRow = {}
    for key, value in raw_row.items():
        if key == SCHWAB_CHECK_COLUMN:
            continue
        normalized[canonical_key(key, table)] = value

    if SCHWAB_TYPE_COLUMN in raw_row:
        normalized[canonical_key(SCHWAB_TYPE_COLUMN, table)] = normalized.get(TIMESTAMP_COLUMN, "")

    if SCHWAB_BALANCE_COLUMN in raw_row:
        normalized[canonical_key(SCHWAB_BALANCE_COLUMN, table)] = categorize_value(
            normalized.get(ITEM_COLUMN, ""), table
        )

    logger.debug(f"Parsed Schwab row: {normalized}")
    return normalized


NORMALIZERS: Dict[Institution, RowNormalizer] = {
    Institution.CAPITAL_ONE: normalize_capital_one,
    Institution.SCHWAB: normalize_schwab,
}

_unhandled = (set(Institution) - set(NORMALIZERS)) | (set(Institution) - set(DEFAULT_MONETARY_COLUMNS))
if _unhandled:
    raise ConfigurationError(
        "Institutions without a row normalizer",
        details={"institutions": sorted(i.value for i in _unhandled)}
    )


def get_normalizer(institution: Union[Institution, str]) -> RowNormalizer:
    """
    Select the row normalizer for an institution.

    Args:
        institution: Institution enum member or its key

    Returns:
        Normalizer function

    Raises:
        ConfigurationError: If the key names no known institution
    """
    if not isinstance(institution, Institution):
        institution = Institution.parse(institution)
    return NORMALIZERS[institution]
