from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any, Protocol

from google.auth.exceptions import GoogleAuthError
from google.oauth2.service_account import Credentials
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError

from ..errors import FetchError, WriteError
from ..models.config_models import CredentialsConfig, SheetLocation

"""Google Sheets row source / row sink.

Thin wrapper around the Sheets v4 values API. The core only consumes two
shapes from here: "list of string rows" in (first row = headers) and
"number of rows written" out. Any API, auth or transport failure is wrapped
into FetchError / WriteError so the pipeline can abort before (fetch) or
without partially committing (write) anything.
"""

__all__ = [
    "SCOPES",
    "RowSource",
    "RowSink",
    "SheetsClient",
    "build_credentials",
]

logger = logging.getLogger(__name__)

SCOPES = [
    "https://www.googleapis.com/auth/spreadsheets",
    "https://www.googleapis.com/auth/drive.readonly",
]
TOKEN_URI = "https://oauth2.googleapis.com/token"

# "sheet unreachable" failures, as opposed to programming errors
_IO_ERRORS = (HttpError, GoogleAuthError, OSError)


class RowSource(Protocol):
    def fetch_rows(self, location: SheetLocation) -> list[list[str]]: ...


class RowSink(Protocol):
    def append_rows(self, location: SheetLocation, rows: Sequence[Sequence[str]]) -> int: ...


def build_credentials(config: CredentialsConfig) -> Credentials:
    """Service account credentials from a key file or from individual fields."""
    if config.service_account_file:
        return Credentials.from_service_account_file(config.service_account_file, scopes=SCOPES)
    if config.client_email and config.private_key:
        info = {
            "type": "service_account",
            "project_id": config.project_id or "",
            "client_email": config.client_email,
            "client_id": config.client_id or "",
            # .env では改行が \n でエスケープされている
            "private_key": config.private_key.replace("\\n", "\n"),
            "token_uri": TOKEN_URI,
        }
        return Credentials.from_service_account_info(info, scopes=SCOPES)
    raise GoogleAuthError(
        "no service account credentials configured "
        "(set credentials.service_account_file or GOOGLE_CLIENT_EMAIL / GOOGLE_PRIVATE_KEY)"
    )


class SheetsClient:
    """Row source and row sink backed by the Google Sheets API."""

    def __init__(self, service: Any) -> None:
        self.service = service

    @classmethod
    def from_config(cls, config: CredentialsConfig) -> SheetsClient:
        """Authenticate and build the Sheets service.

        Raises:
            FetchError: credentials are missing, unreadable or malformed
        """
        try:
            creds = build_credentials(config)
            service = build("sheets", "v4", credentials=creds, cache_discovery=False)
        except (GoogleAuthError, OSError, ValueError) as e:
            raise FetchError(f"authentication failed: {e}") from e
        logger.debug("google sheets service initialized")
        return cls(service)

    def fetch_rows(self, location: SheetLocation) -> list[list[str]]:
        """Return every row of ``location`` as strings (row 0 = headers, [] if empty)."""
        logger.info("fetching rows from %s (%s)", location.label, location.a1_range)
        try:
            response = self.service.spreadsheets().values().get(
                spreadsheetId=location.spreadsheet_id,
                range=location.a1_range,
            ).execute()
        except _IO_ERRORS as e:
            raise FetchError(
                f"could not read {location.a1_range}: {e}",
                spreadsheet=location.spreadsheet_id,
                sheet=location.label,
            ) from e
        values = response.get("values", [])
        if not values:
            logger.warning("sheet '%s' is empty or has no header row", location.label)
            return []
        return [["" if cell is None else str(cell) for cell in row] for row in values]

    def append_rows(self, location: SheetLocation, rows: Sequence[Sequence[str]]) -> int:
        """Append ``rows`` after the last row of ``location``; returns rows written."""
        if not rows:
            return 0
        width = max(len(r) for r in rows)
        target = location.columns_range(width)
        logger.info("appending %d rows to %s", len(rows), target)
        try:
            response = self.service.spreadsheets().values().append(
                spreadsheetId=location.spreadsheet_id,
                range=target,
                valueInputOption="RAW",
                insertDataOption="INSERT_ROWS",
                body={"values": [list(r) for r in rows]},
            ).execute()
        except _IO_ERRORS as e:
            raise WriteError(
                f"could not append to {target}: {e}",
                spreadsheet=location.spreadsheet_id,
                sheet=location.label,
            ) from e
        updates = (response or {}).get("updates", {})
        return int(updates.get("updatedRows", len(rows)))
