from __future__ import annotations

"""Error taxonomy shared by the sheet collaborators and the pipeline.

All fatal errors derive from SyncError so the CLI can report them uniformly.
Rows without an email are NOT errors; the normalizer drops them silently.
"""

__all__ = [
    "SyncError",
    "SchemaError",
    "FetchError",
    "WriteError",
]


class SyncError(Exception):
    """Base exception for fatal sync failures."""

    error_type = "SYNC_ERROR"

    def __init__(self, message: str, *, spreadsheet: str = "", sheet: str = "") -> None:
        super().__init__(message)
        self.spreadsheet = spreadsheet
        self.sheet = sheet


class SchemaError(SyncError):
    """Raised when the identity column (email) cannot be located."""

    error_type = "SCHEMA_ERROR"


class FetchError(SyncError):
    """Raised when a sheet cannot be read (auth, access, invalid range)."""

    error_type = "FETCH_ERROR"


class WriteError(SyncError):
    """Raised when appending rows fails. Zero rows are considered written."""

    error_type = "WRITE_ERROR"
