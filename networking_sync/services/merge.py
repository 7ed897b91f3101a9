from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence

from ..models.person_record import PersonRecord
from ..models.sync_result import MergeResult

"""Conservative merger.

Existing dashboard rows are the source of truth: they are passed through
untouched (status included) and nothing is ever updated or removed. Only new
people, i.e. emails absent from the dashboard, are surfaced for appending.
New records that collide with an existing email are dropped.
"""

__all__ = [
    "existing_emails",
    "merge",
]

logger = logging.getLogger(__name__)


def existing_emails(records: Iterable[PersonRecord]) -> set[str]:
    """Normalized identity keys present in ``records`` (blank emails ignored)."""
    return {r.email.strip().lower() for r in records if r.email and r.email.strip()}


def merge(new_records: Iterable[PersonRecord], existing_records: Sequence[PersonRecord]) -> MergeResult:
    """Split deduplicated ``new_records`` against ``existing_records``.

    Returns:
        MergeResult whose ``kept`` is every existing record unchanged and
        whose ``added`` holds the new records with unseen emails, in input order
    """
    known = existing_emails(existing_records)
    added: list[PersonRecord] = []
    dropped = 0
    for record in new_records:
        if record.email in known:
            dropped += 1
            logger.debug("email=%s already on dashboard, kept unchanged", record.email)
            continue
        added.append(record)
    logger.info(
        "merged: %d total entries (%d new people added, %d existing kept unchanged, %d collisions skipped)",
        len(existing_records) + len(added),
        len(added),
        len(existing_records),
        dropped,
    )
    return MergeResult(kept=tuple(existing_records), added=tuple(added))
