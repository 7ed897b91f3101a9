from __future__ import annotations

import logging
import re
from collections.abc import Mapping, Sequence
from datetime import UTC, datetime
from pathlib import Path

"""Dashboard backup export.

The backup is a plain delimited dump of the dashboard as read: one dict per
row keyed by camel-cased header, plus the sheet row number as ``id``.

Format: first line = keys of the first record (insertion order); one line per
record with values joined by ",". String values containing a comma are
wrapped in double quotes. Embedded double quotes are NOT escaped, so a value
holding both a comma and a quote does not round-trip. Known limitation.
"""

__all__ = [
    "camelize",
    "dashboard_rows_as_dicts",
    "render_backup_csv",
    "backup_filename",
    "write_backup",
]

logger = logging.getLogger(__name__)

_WORD_START = re.compile(r"(?:^\w|[A-Z]|\b\w)")
_SPACES = re.compile(r"\s+")


def camelize(text: str) -> str:
    """'Current Company' -> 'currentCompany', 'Email' -> 'email'."""
    def _case(match: re.Match[str]) -> str:
        return match.group(0).lower() if match.start() == 0 else match.group(0).upper()

    return _SPACES.sub("", _WORD_START.sub(_case, text))


def dashboard_rows_as_dicts(
    headers: Sequence[object], rows: Sequence[Sequence[object]]
) -> list[dict[str, object]]:
    """Dashboard data rows as dicts (header row excluded from ``rows``)."""
    keys = [(index, camelize(str(h))) for index, h in enumerate(headers) if h]
    records: list[dict[str, object]] = []
    for offset, row in enumerate(rows):
        record: dict[str, object] = {}
        for index, key in keys:
            value = row[index] if index < len(row) else ""
            record[key] = value if value is not None else ""
        record["id"] = offset + 2  # sheet row number
        records.append(record)
    return records


def _format_value(value: object) -> str:
    if isinstance(value, str) and "," in value:
        return f'"{value}"'
    return str(value)


def render_backup_csv(records: Sequence[Mapping[str, object]]) -> str:
    """Render records as delimited text ("" for an empty dataset)."""
    if not records:
        return ""
    lines = [",".join(records[0].keys())]
    for record in records:
        lines.append(",".join(_format_value(v) for v in record.values()))
    return "\n".join(lines)


def backup_filename(now: datetime) -> str:
    stamp = re.sub(r"[:.]", "-", now.isoformat())
    return f"networking-dashboard-backup-{stamp}.csv"


def write_backup(
    records: Sequence[Mapping[str, object]],
    directory: Path,
    now: datetime | None = None,
) -> Path | None:
    """Write the backup file; returns its path, or None when there is nothing to back up."""
    if not records:
        logger.warning("no data found to backup")
        return None
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / backup_filename(now or datetime.now(UTC))
    path.write_text(render_backup_csv(records), encoding="utf-8")
    logger.info("backup created: %s (%d entries)", path, len(records))
    return path
