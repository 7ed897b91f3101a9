from __future__ import annotations

from dataclasses import dataclass

"""Config dataclasses for the networking dashboard sync.

These are the immutable configuration objects injected into the pipeline's
entry point. The loader in networking_sync.config.loader builds them from the
YAML file plus environment overrides; nothing in the pipeline reads process
state directly.
"""

DEFAULT_RANGE = "A:Z"


@dataclass(frozen=True)
class SheetLocation:
    """Where a dataset lives: spreadsheet id + optional tab name + A1 range."""
    spreadsheet_id: str
    sheet_name: str | None = None
    cell_range: str = DEFAULT_RANGE

    @property
    def a1_range(self) -> str:
        """Range string for the Sheets API (``'Tab name'!A:Z`` or ``A:Z``)."""
        if self.sheet_name:
            return f"'{self.sheet_name}'!{self.cell_range}"
        return self.cell_range

    def columns_range(self, width: int) -> str:
        """Range covering columns A through the ``width``-th column."""
        last = column_letter(max(width, 1))
        if self.sheet_name:
            return f"'{self.sheet_name}'!A:{last}"
        return f"A:{last}"

    @property
    def label(self) -> str:
        return self.sheet_name or self.spreadsheet_id


@dataclass(frozen=True)
class CredentialsConfig:
    """Service account credentials source.

    Either a JSON key file, or the individual fields (as exported in env vars).
    """
    service_account_file: str | None = None
    client_email: str | None = None
    private_key: str | None = None
    project_id: str | None = None
    client_id: str | None = None


@dataclass(frozen=True)
class SyncConfig:
    """Root configuration object for one sync / preview / backup run."""
    onboarding: SheetLocation
    networking: SheetLocation
    timezone: str = "UTC"
    backup_directory: str = "./backups"
    credentials: CredentialsConfig = CredentialsConfig()


def column_letter(index: int) -> str:
    """1-based column index -> A1 letters (1 -> A, 27 -> AA)."""
    if index < 1:
        raise ValueError(f"column index must be >= 1: {index}")
    letters = ""
    while index:
        index, rem = divmod(index - 1, 26)
        letters = chr(ord("A") + rem) + letters
    return letters
