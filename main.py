"""
Main entry point for ledgersheet.

This module loads configuration, normalizes the configured CSV export,
writes the transformed copy and appends the rows to the Google Sheet.
"""
import asyncio
import sys
from pathlib import Path

# Add project root to Python path for module imports
PROJECT_ROOT = Path(__file__).parent
sys.path.insert(0, str(PROJECT_ROOT))

from dotenv import load_dotenv
from pydantic import ValidationError

from core.config import get_settings
from core.exceptions import ConfigurationError, ExportError, ParsingError, SinkError
from core.logger import configure_logging, setup_logger

# Load environment variables from .env file
_env_file = PROJECT_ROOT / ".env"
if _env_file.exists():
    load_dotenv(_env_file)
else:
    print("Warning: .env file not found. Using environment variables or defaults.")

logger = setup_logger(__name__)


def main() -> int:
    """Main application entry point."""
    try:
        # Load and validate configuration
        settings = get_settings()
        configure_logging(settings.log_level)

        from services.sync_service import SyncService
        from sheets.client import GoogleSheetsClient

        logger.info("Starting ledgersheet sync")
        logger.info(f"Institution: {settings.institution}")
        logger.info(f"Input: {settings.csv_path}")
        logger.info(f"Normalization tables: {settings.normalization_config_path}")
        logger.info(f"Log Level: {settings.log_level}")

        service = SyncService(settings=settings)

        if settings.remote_enabled:
            service.sink = GoogleSheetsClient(
                credentials_path=settings.google_credentials_path,
                sheet_id=settings.sheet_id,
                sheet_title=service.resolve_sheet_title(),
            )

        result = asyncio.run(service.process_file())

        stats = result["stats"]
        logger.info(
            f"Done: {stats['normalized_count']} rows written to {result['output_path']}, "
            f"{stats['appended_count']} appended to sheet"
        )
        return 0

    except ValidationError as e:
        logger.error(f"Invalid settings: {e}")
        return 1

    except ConfigurationError as e:
        logger.error(f"Configuration error: {e.message}")
        if e.details:
            logger.error(f"Details: {e.details}")
        return 1

    except SinkError as e:
        logger.error(f"Sheet append failed: {e.message}")
        if e.details:
            logger.error(f"Details: {e.details}")
        return 2

    except (ParsingError, ExportError) as e:
        logger.error(f"Processing failed: {e.message}")
        if e.details:
            logger.error(f"Details: {e.details}")
        return 3

    except Exception as e:
        logger.error(f"Failed to run sync: {e}", exc_info=True)
        return 1


if __name__ == "__main__":
    sys.exit(main())
