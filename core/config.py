"""
Centralized configuration management.
All environment variables and settings are defined here.
"""
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings

DEFAULT_SHEET_TITLE = "Transactions"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Run
    institution: str = Field(..., alias="INSTITUTION")
    csv_path: str = Field(..., alias="CSV_PATH")
    normalization_config_path: str = Field(
        default="normalization.json", alias="NORMALIZATION_CONFIG_PATH"
    )
    output_dir: str = Field(default=".", alias="OUTPUT_DIR")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    # Google Sheets
    sheet_id: Optional[str] = Field(default=None, alias="SHEET_ID")
    sheet_title: Optional[str] = Field(default=None, alias="SHEET_TITLE")
    google_credentials_path: str = Field(
        default="credentials.json", alias="GOOGLE_CREDENTIALS_PATH"
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v):
        """Validate log level is one of the standard levels."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(f"Log level must be one of: {valid_levels}")
        return v_upper

    @field_validator("institution", "csv_path")
    @classmethod
    def validate_not_blank(cls, v):
        """Reject empty strings for required run settings."""
        if not v.strip():
            raise ValueError("Value must not be empty")
        return v.strip()

    class Config:
        """Pydantic configuration."""
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False
        populate_by_name = True
        extra = "ignore"

    @property
    def remote_enabled(self) -> bool:
        """Whether a spreadsheet is configured to receive the rows."""
        return bool(self.sheet_id)


# Global settings instance
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """
    Get application settings singleton.

    Returns:
        Settings instance
    """
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reset_settings() -> None:
    """Reset settings singleton (useful for testing)."""
    global _settings
    _settings = None
