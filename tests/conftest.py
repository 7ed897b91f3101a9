# Shared pytest fixtures
from __future__ import annotations

import copy
from collections.abc import Sequence
from datetime import UTC, datetime
from pathlib import Path

import pytest

from networking_sync.errors import FetchError, WriteError
from networking_sync.models.config_models import SheetLocation, SyncConfig

ONBOARDING_ID = "onboarding-sheet-id"
NETWORKING_ID = "networking-sheet-id"


class FakeSheets:
    """In-memory row source / row sink keyed by spreadsheet id."""

    def __init__(self) -> None:
        self.sheets: dict[str, list[list[str]]] = {}
        self.fetch_calls: list[str] = []
        self.append_calls: list[tuple[str, list[list[str]]]] = []
        self.fail_fetch: set[str] = set()
        self.fail_append = False

    def fetch_rows(self, location: SheetLocation) -> list[list[str]]:
        self.fetch_calls.append(location.spreadsheet_id)
        if location.spreadsheet_id in self.fail_fetch:
            raise FetchError("simulated fetch failure", spreadsheet=location.spreadsheet_id, sheet=location.label)
        return copy.deepcopy(self.sheets.get(location.spreadsheet_id, []))

    def append_rows(self, location: SheetLocation, rows: Sequence[Sequence[str]]) -> int:
        if self.fail_append:
            raise WriteError("simulated write failure", spreadsheet=location.spreadsheet_id, sheet=location.label)
        materialized = [list(r) for r in rows]
        self.append_calls.append((location.spreadsheet_id, materialized))
        self.sheets.setdefault(location.spreadsheet_id, []).extend(materialized)
        return len(materialized)


@pytest.fixture()
def temp_workdir(monkeypatch, tmp_path: Path) -> Path:
    (tmp_path / "config").mkdir()
    (tmp_path / "logs").mkdir()
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture()
def clean_env(monkeypatch):
    for var in (
        "ONBOARDING_FORM_FILE_ID",
        "ONBOARDING_SHEET_NAME",
        "ONBOARDING_SHEET_RANGE",
        "NETWORKING_DASHBOARD_FILE_ID",
        "NETWORKING_SHEET_NAME",
        "NETWORKING_SHEET_RANGE",
        "GOOGLE_APPLICATION_CREDENTIALS",
        "GOOGLE_CLIENT_EMAIL",
        "GOOGLE_PRIVATE_KEY",
        "GOOGLE_PROJECT_ID",
        "GOOGLE_CLIENT_ID",
        "SYNC_TIMEZONE",
    ):
        monkeypatch.delenv(var, raising=False)


@pytest.fixture()
def sample_config_yaml() -> str:
    return f"""onboarding:
  spreadsheet_id: {ONBOARDING_ID}
  sheet_name: Form Responses 1
networking:
  spreadsheet_id: {NETWORKING_ID}
  sheet_name: Dashboard
  range: A:T
timezone: UTC
backup_directory: ./backups
credentials:
  service_account_file: ./service-account.json
"""


@pytest.fixture()
def write_config(temp_workdir: Path, clean_env, sample_config_yaml: str) -> Path:
    cfg = temp_workdir / "config" / "sync.yml"
    cfg.write_text(sample_config_yaml, encoding="utf-8")
    return cfg


@pytest.fixture()
def sync_config() -> SyncConfig:
    return SyncConfig(
        onboarding=SheetLocation(ONBOARDING_ID, "Form Responses 1"),
        networking=SheetLocation(NETWORKING_ID, "Dashboard"),
        timezone="UTC",
    )


@pytest.fixture()
def fixed_now() -> datetime:
    return datetime(2025, 9, 1, 12, 0, tzinfo=UTC)


@pytest.fixture()
def fake_sheets() -> FakeSheets:
    sheets = FakeSheets()
    sheets.sheets[ONBOARDING_ID] = [
        ["Timestamp", "Email", "Name", "Graduation Year", "Company", "Job Title", "Company_Rating"],
        ["2023-01-01 09:00:00", "alice@x.com", "Alice", "2022", "Acme", "Engineer", "4"],
        ["2024-06-01 10:00:00", "ALICE@x.com ", "Alice A.", "2022", "Globex", "Senior Engineer", "5"],
        ["2024-02-10 08:30:00", "bob@x.com", "Bob", "2027", "Initech", "Intern", "3"],
        ["2024-03-15 12:00:00", "   ", "No Email", "2026", "Nowhere", "", ""],
        ["2024-04-20 15:45:00", "carol@x.com", "Carol", "2030", "Umbrella", "Analyst", ""],
    ]
    sheets.sheets[NETWORKING_ID] = [
        ["Name", "Email", "Company", "Job Title", "Graduation Year", "Company Rating", "Personal Email", "Notes"],
        ["Bob Builder", "Bob@x.com", "Old Co", "Manager", "2020", "2", "bob@home.com", "keep me"],
    ]
    return sheets
