import logging
import threading
from dataclasses import dataclass, field
from typing import List, Optional

import gspread
import requests
from fastapi import Request
from google.auth.exceptions import GoogleAuthError
from google.oauth2.service_account import Credentials

from . import config
from .errors import StoreNotConfigured, StoreUnavailable

logger = logging.getLogger(__name__)

TOKEN_URI = "https://oauth2.googleapis.com/token"

# Rows are written verbatim so user input is never evaluated as a formula
VALUE_INPUT_OPTION = "RAW"

_CLIENT_ERRORS = (gspread.exceptions.GSpreadException, GoogleAuthError, requests.RequestException)


@dataclass
class ReadResult:
    """Outcome of a range read: either rows, or the reason there are none."""
    rows: List[List[str]] = field(default_factory=list)
    error: Optional[StoreUnavailable] = None

    @property
    def unavailable(self) -> bool:
        return self.error is not None

    @property
    def not_configured(self) -> bool:
        return isinstance(self.error, StoreNotConfigured)


class SheetsStore:
    """Google Sheets document used as the backing store.

    The spreadsheet handle is opened lazily on first use and reused after
    that. FastAPI runs sync endpoints on a thread pool, so the handshake is
    guarded by a lock to avoid opening it twice.
    """

    def __init__(self, spreadsheet_id: Optional[str], service_account_email: Optional[str],
                 private_key: Optional[str]):
        self.spreadsheet_id = spreadsheet_id
        self.service_account_email = service_account_email
        # .env files usually carry the PEM key with escaped newlines
        self.private_key = private_key.replace("\\n", "\n") if private_key else None
        self._handle = None
        self._lock = threading.Lock()

    @classmethod
    def from_env(cls) -> "SheetsStore":
        return cls(config.GOOGLE_SHEETS_ID, config.GOOGLE_SERVICE_ACCOUNT_EMAIL, config.GOOGLE_PRIVATE_KEY)

    @property
    def configured(self) -> bool:
        return bool(self.private_key and self.service_account_email and self.spreadsheet_id)

    def connect(self) -> Optional[gspread.Spreadsheet]:
        """Return the spreadsheet handle, or None if it cannot be opened. Never raises."""
        if self._handle is not None:
            return self._handle

        if not self.configured:
            logger.warning("Google Sheets credentials not found. Using fallback data.")
            return None

        with self._lock:
            if self._handle is None:
                try:
                    credentials = Credentials.from_service_account_info(
                        {
                            "client_email": self.service_account_email,
                            "private_key": self.private_key,
                            "token_uri": TOKEN_URI,
                        },
                        scopes=config.SHEETS_SCOPES,
                    )
                    client = gspread.authorize(credentials)
                    self._handle = client.open_by_key(self.spreadsheet_id)
                    logger.info("Google Sheets API connected")
                except (ValueError, *_CLIENT_ERRORS) as e:
                    logger.error("Google Sheets connection failed: %s", e)
                    return None
        return self._handle

    def _require_handle(self) -> gspread.Spreadsheet:
        handle = self.connect()
        if handle is None:
            raise StoreNotConfigured()
        return handle

    def read_range(self, sheet_name: str, cell_range: str) -> List[List[str]]:
        handle = self._require_handle()
        try:
            response = handle.values_get(f"{sheet_name}!{cell_range}")
        except _CLIENT_ERRORS as e:
            raise StoreUnavailable(f"Failed to read {sheet_name}!{cell_range}: {e}") from e
        return response.get("values", [])

    def read_result(self, sheet_name: str, cell_range: str) -> ReadResult:
        try:
            return ReadResult(rows=self.read_range(sheet_name, cell_range))
        except StoreUnavailable as e:
            return ReadResult(error=e)

    def append_row(self, sheet_name: str, cell_range: str, row: list) -> None:
        handle = self._require_handle()
        try:
            handle.values_append(
                f"{sheet_name}!{cell_range}",
                params={"valueInputOption": VALUE_INPUT_OPTION},
                body={"values": [row]},
            )
        except _CLIENT_ERRORS as e:
            raise StoreUnavailable(f"Failed to append to {sheet_name}: {e}") from e

    def update_range(self, sheet_name: str, cell_range: str, row: list) -> None:
        handle = self._require_handle()
        try:
            handle.values_update(
                f"{sheet_name}!{cell_range}",
                params={"valueInputOption": VALUE_INPUT_OPTION},
                body={"values": [row]},
            )
        except _CLIENT_ERRORS as e:
            raise StoreUnavailable(f"Failed to update {sheet_name}!{cell_range}: {e}") from e


# Dependency for routes
def get_store(request: Request):
    return request.app.state.store
