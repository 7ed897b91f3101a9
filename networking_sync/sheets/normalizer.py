from __future__ import annotations

import logging
from collections.abc import Iterator, Sequence
from datetime import datetime
from zoneinfo import ZoneInfo

import pandas as pd

from ..models.person_record import MemberStatus, PersonRecord
from .row_builder import require_identity_column
from .schema import CanonicalField, ColumnMap, require_email, resolve_columns

"""Record normalizer: raw sheet rows -> PersonRecord.

The header row is resolved once per batch through the schema mapper; every
data row is then read by position. Derived fields:

- current_status: status column first ("alumni" anywhere in the text), then
  graduation year vs. the current calendar year, then ``current``.
- submission_date: timestamp column parsed with pandas; falls back to the
  normalization's "now" when the column is absent or the cell is unparsable.

Onboarding rows without an email are dropped silently. They are not errors.
"""

__all__ = [
    "OnboardingRecords",
    "normalize_onboarding",
    "normalize_existing",
    "parse_submission_date",
    "derive_status",
]

logger = logging.getLogger(__name__)

# First data row in a sheet (row 1 is the header)
FIRST_DATA_ROW = 2


def _cell(row: Sequence[object], position: int | None) -> str:
    if position is None or position >= len(row):
        return ""
    value = row[position]
    if value is None:
        return ""
    return str(value).strip()


def _now(timezone: str, now: datetime | None) -> datetime:
    tz = ZoneInfo(timezone)
    if now is None:
        return datetime.now(tz)
    if now.tzinfo is None:
        return now.replace(tzinfo=tz)
    return now.astimezone(tz)


def parse_submission_date(text: str, timezone: str = "UTC") -> datetime | None:
    """Parse a timestamp cell. Naive values are taken as local to ``timezone``.

    Returns None for empty or unparsable text.
    """
    if not text:
        return None
    parsed = pd.to_datetime(text, errors="coerce")
    if parsed is None or pd.isna(parsed):
        return None
    if parsed.tzinfo is None:
        parsed = parsed.tz_localize(timezone)
    else:
        parsed = parsed.tz_convert(timezone)
    return parsed.to_pydatetime()


def _parse_year(text: str) -> int | None:
    try:
        return int(text)
    except ValueError:
        return None


def derive_status(status_text: str | None, graduation_text: str | None, current_year: int) -> MemberStatus:
    """Classify a person as current member or alumni.

    ``status_text`` / ``graduation_text`` are None when the column did not
    resolve. An empty status cell falls through to the graduation year rule.
    """
    if status_text:
        return MemberStatus.ALUMNI if "alumni" in status_text.lower() else MemberStatus.CURRENT
    if graduation_text:
        year = _parse_year(graduation_text)
        if year is not None:
            return MemberStatus.ALUMNI if year < current_year else MemberStatus.CURRENT
    return MemberStatus.CURRENT


def _text_fields(row: Sequence[object], columns: ColumnMap) -> dict[str, str]:
    values: dict[str, str] = {}
    for field, position in columns.items():
        if field in (CanonicalField.EMAIL, CanonicalField.SUBMISSION_DATE):
            continue
        values[field.value] = _cell(row, position)
    return values


class OnboardingRecords:
    """Lazy, restartable sequence of PersonRecord built from onboarding rows.

    Column positions and "now" are fixed at construction; every iteration
    re-derives the records from the same rows, so iterating twice yields
    equal results. SchemaError is raised here, before any record exists.
    """

    def __init__(
        self,
        headers: Sequence[object],
        rows: Sequence[Sequence[object]],
        *,
        timezone: str = "UTC",
        now: datetime | None = None,
        sheet: str = "",
        spreadsheet: str = "",
    ) -> None:
        self.headers = list(headers)
        self.rows = rows
        self.timezone = timezone
        self.now = _now(timezone, now)
        self.columns = resolve_columns(self.headers)
        self.email_position = require_email(self.columns, sheet=sheet, spreadsheet=spreadsheet)

    def __iter__(self) -> Iterator[PersonRecord]:
        status_pos = self.columns[CanonicalField.STATUS]
        grad_pos = self.columns[CanonicalField.GRADUATION_YEAR]
        date_pos = self.columns[CanonicalField.SUBMISSION_DATE]
        for index, row in enumerate(self.rows):
            row_number = index + FIRST_DATA_ROW
            email = _cell(row, self.email_position)
            if not email:
                logger.debug("row=%d skipped: no email", row_number)
                continue
            texts = _text_fields(row, self.columns)
            current_status = derive_status(
                texts["status"] if status_pos is not None else None,
                texts["graduation_year"] if grad_pos is not None else None,
                self.now.year,
            )
            submitted = parse_submission_date(_cell(row, date_pos), self.timezone) if date_pos is not None else None
            yield PersonRecord(
                email=email.lower(),
                submission_date=submitted or self.now,
                source_row_number=row_number,
                current_status=current_status,
                **texts,
            )


def normalize_onboarding(
    headers: Sequence[object],
    rows: Sequence[Sequence[object]],
    *,
    timezone: str = "UTC",
    now: datetime | None = None,
    sheet: str = "",
    spreadsheet: str = "",
) -> OnboardingRecords:
    """Normalize onboarding form rows (header row excluded from ``rows``)."""
    return OnboardingRecords(headers, rows, timezone=timezone, now=now, sheet=sheet, spreadsheet=spreadsheet)


def normalize_existing(
    headers: Sequence[object],
    rows: Sequence[Sequence[object]],
    *,
    timezone: str = "UTC",
    now: datetime | None = None,
    sheet: str = "",
    spreadsheet: str = "",
) -> list[PersonRecord]:
    """Normalize dashboard rows for the conservative merge.

    Simpler than the onboarding path: every row is kept (a row without an
    email simply cannot collide), and the status is read back as written on
    the dashboard instead of being recomputed from the graduation year. The
    identity column is located with the write-side rule, not the greedy alias.
    """
    if not rows:
        return []
    columns = resolve_columns(headers)
    email_position = require_identity_column(headers, sheet=sheet, spreadsheet=spreadsheet)
    fallback = _now(timezone, now)
    date_pos = columns[CanonicalField.SUBMISSION_DATE]

    records: list[PersonRecord] = []
    for index, row in enumerate(rows):
        texts = _text_fields(row, columns)
        submitted = parse_submission_date(_cell(row, date_pos), timezone) if date_pos is not None else None
        records.append(
            PersonRecord(
                email=_cell(row, email_position).lower(),
                submission_date=submitted or fallback,
                source_row_number=index + FIRST_DATA_ROW,
                current_status=(
                    MemberStatus.ALUMNI if "alumni" in texts["status"].lower() else MemberStatus.CURRENT
                ),
                **texts,
            )
        )
    return records
