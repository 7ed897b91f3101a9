from __future__ import annotations

import logging
from collections.abc import Iterable

from ..models.person_record import PersonRecord

"""Deduplicator: one record per normalized email, most recent submission wins.

Ties on submission_date go to the higher source_row_number (the row entered
later in the sheet). Output order is NOT part of the contract; this
implementation emits emails in first-seen order, but callers must not rely
on it.
"""

__all__ = [
    "dedupe",
]

logger = logging.getLogger(__name__)


def _rank(record: PersonRecord) -> tuple:
    return (record.submission_date, record.source_row_number)


def dedupe(records: Iterable[PersonRecord]) -> list[PersonRecord]:
    """Collapse records sharing an email into the most recent one."""
    latest: dict[str, PersonRecord] = {}
    seen = 0
    for record in records:
        seen += 1
        current = latest.get(record.email)
        if current is None or _rank(record) > _rank(current):
            latest[record.email] = record
    unique = list(latest.values())
    logger.info(
        "deduplicated: %d duplicates removed, %d unique people", seen - len(unique), len(unique)
    )
    return unique
