"""
Google Sheets Storage Implementation

DESIGN DECISION: Google Sheets is offered as a backend because:
1. Users can look at their ledger directly in Sheets
2. No database setup required
3. Built-in backup (Google's infrastructure)

LAYOUT (one worksheet):
    key            | carry_over_balance | payload_json
    __schema__     | 1                  |
    Jan .. Dec     | TRUE / FALSE       | [transactions...]
    __categories__ |                    | [categories...]

TRADEOFFS:
- A cell holds at most 50,000 characters, which bounds one month's
  transactions. Saves that would exceed it fail loudly.
- Saving overwrites the sheet in place from A1 and only then clears
  rows below the snapshot. A failed write leaves the previous rows
  readable; the sheet is never emptied first.
"""

import json
from typing import Optional

import gspread
from google.oauth2.service_account import Credentials
from tenacity import retry, stop_after_attempt, wait_exponential

from ledger.config import GoogleSheetsSettings, get_settings
from ledger.models.ledger import MONTHS, FinanceState
from ledger.services.storage.interface import (
    SNAPSHOT_SCHEMA_VERSION,
    FinanceStateStorageInterface,
    SnapshotFormatError,
    SnapshotTooLargeError,
    StorageConnectionError,
    StorageError,
    snapshot_to_state,
)


LEDGER_COLUMNS = ["key", "carry_over_balance", "payload_json"]

SCHEMA_ROW_KEY = "__schema__"
CATEGORIES_ROW_KEY = "__categories__"

MAX_CELL_CHARS = 50_000

LAST_COLUMN = "C"


class GoogleSheetsClient:
    """
    Low-level Google Sheets client wrapper.

    Handles authentication and provides retry logic for API calls.
    """

    def __init__(self, settings: Optional[GoogleSheetsSettings] = None):
        self._client: Optional[gspread.Client] = None
        self._spreadsheet: Optional[gspread.Spreadsheet] = None
        self._settings = settings or get_settings().google_sheets

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        reraise=True,
    )
    def connect(self) -> gspread.Client:
        """
        Establish connection to Google Sheets.

        Uses service account credentials for authentication.
        """
        if self._client is None:
            try:
                scopes = [
                    "https://www.googleapis.com/auth/spreadsheets",
                    "https://www.googleapis.com/auth/drive",
                ]
                credentials = Credentials.from_service_account_file(
                    self._settings.credentials_path,
                    scopes=scopes,
                )
                self._client = gspread.authorize(credentials)
            except FileNotFoundError:
                raise StorageConnectionError(
                    f"Google credentials file not found: {self._settings.credentials_path}"
                )
            except Exception as e:
                raise StorageConnectionError(f"Failed to connect to Google Sheets: {e}")

        return self._client

    def get_spreadsheet(self) -> gspread.Spreadsheet:
        """Get the configured spreadsheet."""
        if self._spreadsheet is None:
            client = self.connect()
            try:
                self._spreadsheet = client.open_by_key(
                    self._settings.spreadsheet_id
                )
            except gspread.SpreadsheetNotFound:
                raise StorageConnectionError(
                    f"Spreadsheet not found: {self._settings.spreadsheet_id}"
                )
        return self._spreadsheet

    def get_ledger_sheet(self) -> gspread.Worksheet:
        """Get or create the Ledger worksheet."""
        spreadsheet = self.get_spreadsheet()
        try:
            sheet = spreadsheet.worksheet(self._settings.ledger_sheet_name)
        except gspread.WorksheetNotFound:
            sheet = spreadsheet.add_worksheet(
                title=self._settings.ledger_sheet_name,
                rows=len(MONTHS) + 3,
                cols=len(LEDGER_COLUMNS),
            )
            sheet.append_row(LEDGER_COLUMNS)
        return sheet


class GoogleSheetsStateStorage(FinanceStateStorageInterface):
    """
    Google Sheets implementation of snapshot storage.

    Each month is one row; categories and the schema version get
    a row each.
    """

    def __init__(self, client: Optional[GoogleSheetsClient] = None):
        self._client = client or GoogleSheetsClient()

    def _state_to_rows(self, state: FinanceState) -> list[list[str]]:
        """Convert a FinanceState to spreadsheet rows (header included)."""
        data = state.model_dump(mode="json")
        rows = [
            LEDGER_COLUMNS,
            [SCHEMA_ROW_KEY, str(SNAPSHOT_SCHEMA_VERSION), ""],
        ]
        for month in MONTHS:
            ledger = data["months"][month.value]
            rows.append([
                month.value,
                "TRUE" if ledger["settings"]["carry_over_balance"] else "FALSE",
                json.dumps(ledger["transactions"], ensure_ascii=False),
            ])
        rows.append([
            CATEGORIES_ROW_KEY,
            "",
            json.dumps(data["categories"], ensure_ascii=False),
        ])

        for row in rows:
            if len(row[2]) > MAX_CELL_CHARS:
                raise SnapshotTooLargeError(
                    f"Row {row[0]} is too large for a Google Sheets cell "
                    f"({len(row[2])} > {MAX_CELL_CHARS} characters)"
                )
        return rows

    def _rows_to_state(self, rows: list[list[str]]) -> Optional[FinanceState]:
        """Convert spreadsheet rows back to a FinanceState."""
        body = [row for row in rows[1:] if row and row[0]]
        if not body:
            return None

        def safe_get(row: list[str], index: int) -> str:
            try:
                return row[index]
            except IndexError:
                return ""

        # First occurrence wins; rows below the snapshot are leftovers
        by_key: dict[str, list[str]] = {}
        for row in body:
            by_key.setdefault(row[0], row)
        schema_row = by_key.get(SCHEMA_ROW_KEY)
        version = safe_get(schema_row, 1) if schema_row else ""

        try:
            months = {}
            for month in MONTHS:
                row = by_key.get(month.value)
                if row is None:
                    continue
                payload = safe_get(row, 2)
                months[month.value] = {
                    "transactions": json.loads(payload) if payload else [],
                    "settings": {
                        "carry_over_balance": safe_get(row, 1).upper() == "TRUE",
                    },
                }
            state: dict = {"months": months}
            categories_row = by_key.get(CATEGORIES_ROW_KEY)
            if categories_row is not None and safe_get(categories_row, 2):
                state["categories"] = json.loads(safe_get(categories_row, 2))
        except json.JSONDecodeError as e:
            raise SnapshotFormatError(f"Ledger sheet holds invalid JSON: {e}")

        return snapshot_to_state({
            "schema_version": int(version) if version.isdigit() else version,
            "state": state,
        })

    async def load(self) -> Optional[FinanceState]:
        """Load the ledger from the sheet."""
        try:
            sheet = self._client.get_ledger_sheet()
            rows = sheet.get_all_values()
        except StorageError:
            raise
        except Exception as e:
            raise StorageError(f"Failed to read ledger sheet: {e}")
        return self._rows_to_state(rows)

    async def save(self, state: FinanceState) -> None:
        """
        Overwrite the sheet with the current state.

        Raises:
            SnapshotTooLargeError: If a month does not fit in one cell
            StorageError: If the sheet cannot be written
        """
        rows = self._state_to_rows(state)
        try:
            sheet = self._client.get_ledger_sheet()
            sheet.update(range_name="A1", values=rows, value_input_option="RAW")
            sheet.batch_clear([f"A{len(rows) + 1}:{LAST_COLUMN}"])
        except StorageError:
            raise
        except Exception as e:
            raise StorageError(f"Failed to save ledger: {e}")
