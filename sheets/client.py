"""
Google Sheets client using a service account.
Appends canonical rows to a worksheet, matched to the sheet's header row.
"""
from pathlib import Path
from typing import List, Optional, Sequence

import gspread
import requests
from google.auth.exceptions import GoogleAuthError
from google.oauth2.service_account import Credentials
from gspread.exceptions import GSpreadException, WorksheetNotFound

from core.exceptions import ConfigurationError, SinkError
from core.logger import setup_logger
from core.schema import CanonicalRow
from sheets.base import RowSink

logger = setup_logger(__name__)

SCOPES = [
    "https://www.googleapis.com/auth/spreadsheets",
    "https://www.googleapis.com/auth/drive",
]

# Errors raised by gspread or its transport while talking to the API
REMOTE_ERRORS = (GSpreadException, GoogleAuthError, requests.RequestException)


class GoogleSheetsClient(RowSink):
    """Wrapper for a single worksheet in a Google spreadsheet."""

    def __init__(self, credentials_path: str, sheet_id: str, sheet_title: str):
        """
        Initialize client and load service account credentials.

        Raises:
            ConfigurationError: If the credentials file is missing or invalid
        """
        if not Path(credentials_path).is_file():
            raise ConfigurationError(
                "You must provide Google API credentials (service account JSON)",
                details={
                    "credentials_path": credentials_path,
                    "docs": "https://docs.gspread.org/en/latest/oauth2.html#for-bots-using-service-account",
                }
            )

        try:
            self.credentials = Credentials.from_service_account_file(
                credentials_path, scopes=SCOPES
            )
        except (ValueError, KeyError, OSError) as e:
            raise ConfigurationError(
                f"Invalid service account credentials: {credentials_path}",
                details={"credentials_path": credentials_path, "error": str(e)}
            )

        self.sheet_id = sheet_id
        self.sheet_title = sheet_title
        self._worksheet: Optional[gspread.Worksheet] = None

        logger.info(f"Initialized Google Sheets client for sheet '{sheet_title}' ({sheet_id})")

    def get_worksheet(self) -> gspread.Worksheet:
        """
        Open the spreadsheet by id and find the worksheet by title.

        Raises:
            SinkError: If the spreadsheet or worksheet cannot be opened
        """
        if self._worksheet is not None:
            return self._worksheet

        try:
            gc = gspread.authorize(self.credentials)
            spreadsheet = gc.open_by_key(self.sheet_id)
            self._worksheet = spreadsheet.worksheet(self.sheet_title)
        except WorksheetNotFound:
            raise SinkError(
                f"Worksheet '{self.sheet_title}' not found",
                details={"sheet_id": self.sheet_id, "sheet_title": self.sheet_title}
            )
        except REMOTE_ERRORS as e:
            logger.error(f"Failed to open spreadsheet {self.sheet_id}: {e}")
            raise SinkError(
                "Failed to open spreadsheet",
                details={"sheet_id": self.sheet_id, "error": str(e)}
            )

        return self._worksheet

    def get_headers(self) -> List[str]:
        """Column names from the worksheet's first row."""
        worksheet = self.get_worksheet()
        try:
            headers = worksheet.row_values(1)
        except REMOTE_ERRORS as e:
            raise SinkError(
                "Failed to read sheet header row",
                details={"sheet_title": self.sheet_title, "error": str(e)}
            )
        logger.debug(f"Sheet headers: {headers}")
        return headers

    def append(self, rows: Sequence[CanonicalRow]) -> int:
        """
        Append rows below the existing data, inserting new sheet rows.

        Each row is laid out by the sheet's header row. Columns the sheet
        does not have are skipped.

        Args:
            rows: Canonical rows in output order

        Returns:
            Number of rows appended

        Raises:
            SinkError: If the sheet has no header row or the API call fails
        """
        if not rows:
            logger.info("No rows to append to sheet")
            return 0

        headers = self.get_headers()
        if not headers:
            raise SinkError(
                f"Worksheet '{self.sheet_title}' has no header row",
                details={"sheet_id": self.sheet_id, "sheet_title": self.sheet_title}
            )

        unknown = sorted({key for row in rows for key in row} - set(headers))
        if unknown:
            logger.warning(f"Columns not in sheet '{self.sheet_title}', skipped: {unknown}")

        values = [[row.get(header, "") for header in headers] for row in rows]

        logger.info(f"Appending {len(values)} rows to sheet '{self.sheet_title}'")
        try:
            self.get_worksheet().append_rows(
                values,
                value_input_option="USER_ENTERED",
                insert_data_option="INSERT_ROWS",
            )
        except REMOTE_ERRORS as e:
            logger.error(f"Failed to append rows: {e}")
            raise SinkError(
                "Failed to append rows to sheet",
                details={"sheet_title": self.sheet_title, "rows": len(values), "error": str(e)}
            )

        logger.info(f"Successfully appended {len(values)} rows")
        return len(values)
