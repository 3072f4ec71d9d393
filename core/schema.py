"""
Pydantic schemas for the per-institution normalization tables.
Also defines the closed set of supported institutions.
"""
import json
from enum import Enum
from pathlib import Path
from types import MappingProxyType
from typing import Annotated, Dict, Mapping, Optional, Tuple

from pydantic import AfterValidator, BaseModel, ConfigDict, Field, ValidationError, field_validator

from core.exceptions import ConfigurationError
from core.logger import setup_logger

logger = setup_logger(__name__)

# Raw Row / Canonical Row: column name -> string value, in CSV column order
RawRow = Dict[str, str]
CanonicalRow = Dict[str, str]


def freeze_mapping(v):
    """Copy a validated mapping into a read-only view."""
    return MappingProxyType(dict(v))


# Read-only once validated, so tables cannot change during a run
FrozenStrMapping = Annotated[Mapping[str, str], AfterValidator(freeze_mapping)]


class Institution(str, Enum):
    """Source institutions with a dedicated row normalizer."""
    CAPITAL_ONE = "capitalOne"
    SCHWAB = "schwab"

    @classmethod
    def parse(cls, key: str) -> "Institution":
        """
        Resolve an institution key from configuration.

        Raises:
            ConfigurationError: If the key names no known institution
        """
        try:
            return cls(key)
        except ValueError:
            raise ConfigurationError(
                f"Unknown institution: {key!r}",
                details={"institution": key, "known": [i.value for i in cls]}
            )


class NormalizationTable(BaseModel):
    """Header renames and category lookup for one institution."""
    model_config = ConfigDict(populate_by_name=True, frozen=True, validate_default=True)

    header_normalization: FrozenStrMapping = Field(
        default_factory=dict, alias="headerNormalization"
    )
    categorize: FrozenStrMapping = Field(default_factory=dict)
    monetary_columns: Optional[Tuple[str, ...]] = Field(
        default=None,
        alias="monetaryColumns",
        description="Source columns that are all empty on non-transaction lines"
    )

    @field_validator("monetary_columns")
    @classmethod
    def validate_monetary_columns(cls, v):
        if v is not None and len(v) == 0:
            raise ValueError("monetaryColumns must name at least one column")
        return v


class NormalizationConfig(BaseModel):
    """Contents of the normalization file: one table per institution key."""
    model_config = ConfigDict(populate_by_name=True, frozen=True, validate_default=True)

    sheet_title: Optional[str] = Field(default=None, alias="sheetTitle")
    institutions: Annotated[
        Mapping[str, NormalizationTable], AfterValidator(freeze_mapping)
    ] = Field(default_factory=dict)

    def table_for(self, institution: Institution) -> NormalizationTable:
        """
        Get the table for an institution.

        Raises:
            ConfigurationError: If the file has no table for it
        """
        table = self.institutions.get(institution.value)
        if table is None:
            raise ConfigurationError(
                f"No normalization table for institution {institution.value!r}",
                details={
                    "institution": institution.value,
                    "configured": sorted(self.institutions),
                }
            )
        return table


def load_normalization_config(file_path: str) -> NormalizationConfig:
    """
    Load normalization tables from a JSON file.

    Args:
        file_path: Path to the JSON file

    Returns:
        Parsed configuration

    Raises:
        ConfigurationError: If the file is missing, not JSON, or has the wrong shape
    """
    path = Path(file_path)
    if not path.is_file():
        raise ConfigurationError(
            f"Normalization file not found: {file_path}",
            details={"file_path": file_path}
        )

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
        config = NormalizationConfig.model_validate(data)
    except (OSError, UnicodeDecodeError, json.JSONDecodeError, ValidationError) as e:
        raise ConfigurationError(
            f"Invalid normalization file: {file_path}",
            details={"file_path": file_path, "error": str(e)}
        )

    logger.info(
        f"Loaded normalization tables for {sorted(config.institutions)} from {path.name}"
    )
    return config
