from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from .person_record import PersonRecord

"""Result models for the sync pipeline.

MergeResult is the output of the conservative merger; SyncStats / SyncResult
aggregate what a sync or preview run did, for the SUMMARY line.
"""

__all__ = [
    "MergeResult",
    "SyncStats",
    "SyncResult",
]


@dataclass(frozen=True)
class MergeResult:
    """Conservative merge output.

    kept: every existing record, verbatim and in sheet order
    added: new records whose email is absent from the existing set
    """
    kept: tuple[PersonRecord, ...]
    added: tuple[PersonRecord, ...]


@dataclass(frozen=True)
class SyncStats:
    total_onboarding_entries: int  # normalized onboarding records (before dedupe)
    deduplicated_entries: int  # unique emails
    current_entries: int  # dashboard rows before the run
    final_entries: int  # current + new
    new_entries: int
    # sync: always 0 (nothing is ever updated); preview: deduplicated - new
    updated_entries: int


@dataclass(frozen=True)
class SyncResult:
    mode: Literal["sync", "preview"]
    stats: SyncStats
    rows_written: int = 0
    message: str = ""
