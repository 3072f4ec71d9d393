"""
Sync service.
Normalizes one export, then writes the local copy and appends to the sheet.
"""
import asyncio
from typing import Any, Dict, List, Optional, Tuple

from core.config import DEFAULT_SHEET_TITLE, Settings, get_settings
from core.exceptions import ExportError, RowParseError, SinkError
from core.exporters import create_output_filename, export_to_csv
from core.logger import setup_logger
from core.parsing import check_input_file
from core.pipeline import collect_rows
from core.schema import (
    CanonicalRow,
    Institution,
    NormalizationConfig,
    NormalizationTable,
    load_normalization_config,
)
from sheets.base import RowSink

logger = setup_logger(__name__)


class SyncService:
    """Service for moving one CSV export into the sheet."""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        sink: Optional[RowSink] = None,
        normalization_config: Optional[NormalizationConfig] = None
    ):
        """
        Initialize sync service.

        Args:
            settings: Settings to use (defaults to the global settings)
            sink: Remote sink; None keeps the run local only
            normalization_config: Tables to use instead of loading the configured file
        """
        self.settings = settings or get_settings()
        self.sink = sink
        self._normalization_config = normalization_config

    @property
    def normalization_config(self) -> NormalizationConfig:
        if self._normalization_config is None:
            self._normalization_config = load_normalization_config(
                self.settings.normalization_config_path
            )
        return self._normalization_config

    def resolve_sheet_title(self) -> str:
        """Sheet title from settings, then the normalization file, then the default."""
        return (
            self.settings.sheet_title
            or self.normalization_config.sheet_title
            or DEFAULT_SHEET_TITLE
        )

    def resolve(self, institution_key: str, csv_path: str) -> Tuple[Institution, NormalizationTable]:
        """
        Validate the run configuration before any row is read.

        Raises:
            ConfigurationError: Unknown institution, missing table, or unreadable input
        """
        institution = Institution.parse(institution_key)
        table = self.normalization_config.table_for(institution)
        check_input_file(csv_path)
        return institution, table

    async def publish(self, rows: List[CanonicalRow], output_path: str) -> int:
        """
        Write the local copy and append to the sink concurrently.

        Both side effects finish before this returns.

        Returns:
            Number of rows appended to the sink (0 when running local only)

        Raises:
            ExportError: If the local copy could not be written
            SinkError: If the append failed (the local copy is already written)
        """
        loop = asyncio.get_event_loop()

        tasks = [loop.run_in_executor(None, export_to_csv, rows, output_path)]
        if self.sink is not None:
            tasks.append(loop.run_in_executor(None, self.sink.append, rows))
        else:
            logger.warning("No sheet configured, skipping remote append")

        results = await asyncio.gather(*tasks, return_exceptions=True)

        export_result = results[0]
        if isinstance(export_result, ExportError):
            raise export_result
        if isinstance(export_result, Exception):
            raise ExportError(
                "Failed to export transformed CSV",
                details={"output_path": output_path, "error": str(export_result)}
            )

        if len(results) == 1:
            return 0

        sink_result = results[1]
        if isinstance(sink_result, Exception):
            logger.error(f"Remote append failed, local copy kept at {output_path}: {sink_result}")
            details = getattr(sink_result, "details", {"error": str(sink_result)})
            raise SinkError(
                f"Failed to append rows to sheet: {sink_result}",
                details={**details, "output_path": output_path}
            )
        return sink_result

    async def process_file(
        self,
        csv_path: Optional[str] = None,
        institution_key: Optional[str] = None
    ) -> Dict[str, Any]:
        """
        Process a single CSV export through the full pipeline.

        Args:
            csv_path: Input CSV (defaults to settings)
            institution_key: Institution key (defaults to settings)

        Returns:
            Dictionary with output_path, rows and statistics

        Raises:
            ConfigurationError: If the run is misconfigured (nothing is read or written)
            ExportError: If the local copy cannot be written
            SinkError: If the remote append fails
        """
        csv_path = csv_path or self.settings.csv_path
        institution_key = institution_key or self.settings.institution

        institution, table = self.resolve(institution_key, csv_path)
        logger.info(f"Processing {institution.value} export: {csv_path}")

        # 1. Stream and normalize
        skipped: List[RowParseError] = []
        rows = collect_rows(csv_path, institution, table, on_error=skipped.append)
        if skipped:
            logger.warning(f"Skipped {len(skipped)} malformed lines")

        # 2. Local copy + remote append
        output_path = create_output_filename(csv_path, self.settings.output_dir)
        appended = await self.publish(rows, output_path)

        return {
            "output_path": output_path,
            "rows": rows,
            "stats": {
                "institution": institution.value,
                "normalized_count": len(rows),
                "skipped_lines": [error.line_number for error in skipped],
                "appended_count": appended,
            }
        }
