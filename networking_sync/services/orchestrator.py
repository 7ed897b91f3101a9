from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime

from ..errors import SchemaError
from ..models.config_models import SyncConfig
from ..models.person_record import PersonRecord
from ..models.sync_result import MergeResult, SyncResult, SyncStats
from ..sheets.client import RowSink, RowSource
from ..sheets.normalizer import normalize_existing, normalize_onboarding
from ..sheets.row_builder import build_output_rows, require_identity_column
from .dedupe import dedupe
from .merge import merge
from .progress import StageProgress

"""Pipeline orchestration for the networking dashboard sync.

The pipeline is strictly sequential and has exactly one mutation point:

1. fetch onboarding rows -> normalize -> deduplicate
2. fetch dashboard rows -> normalize (existing path) -> conservative merge
3. build output rows in the dashboard's column layout
4. append (sync only)

Any SyncError (schema, fetch, write) propagates to the caller. Because the
append is the last step, a failure anywhere before it leaves the dashboard
untouched; nothing is retried.
"""

__all__ = [
    "SyncPlan",
    "build_plan",
    "run_preview",
    "run_sync",
]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SyncPlan:
    """Everything computed before the write step."""
    onboarding_total: int
    deduplicated: tuple[PersonRecord, ...]
    dashboard_headers: tuple[str, ...]
    merge: MergeResult
    output_rows: tuple[tuple[str, ...], ...]

    def stats(self, *, preview: bool) -> SyncStats:
        current = len(self.merge.kept)
        new = len(self.merge.added)
        dedup = len(self.deduplicated)
        return SyncStats(
            total_onboarding_entries=self.onboarding_total,
            deduplicated_entries=dedup,
            current_entries=current,
            final_entries=current + new,
            new_entries=new,
            # 保守モード: sync では既存行を一切更新しない
            updated_entries=dedup - new if preview else 0,
        )


def _split(rows: list[list[str]]) -> tuple[list[str], list[list[str]]]:
    if not rows:
        return [], []
    return rows[0], rows[1:]


def build_plan(
    config: SyncConfig,
    source: RowSource,
    *,
    now: datetime | None = None,
    progress: StageProgress | None = None,
) -> SyncPlan:
    """Read both sheets and compute the merge without writing anything.

    Raises:
        FetchError: either sheet could not be read
        SchemaError: onboarding has no email column, or the dashboard lacks
            an email column (or a header row) while it has rows or people
            must be added
    """
    if progress is None:
        with StageProgress(4, description="Planning") as own:
            return _compute_plan(config, source, now, own)
    return _compute_plan(config, source, now, progress)


def _compute_plan(
    config: SyncConfig,
    source: RowSource,
    now: datetime | None,
    progress: StageProgress,
) -> SyncPlan:
    progress.start("fetch onboarding")
    onboarding_headers, onboarding_rows = _split(source.fetch_rows(config.onboarding))
    if onboarding_headers:
        logger.info("onboarding columns: %s", ", ".join(onboarding_headers))
        records = list(
            normalize_onboarding(
                onboarding_headers,
                onboarding_rows,
                timezone=config.timezone,
                now=now,
                sheet=config.onboarding.label,
                spreadsheet=config.onboarding.spreadsheet_id,
            )
        )
    else:
        records = []
    logger.info("found %d onboarding entries", len(records))
    progress.finish(onboarding=len(records))

    progress.start("deduplicate")
    unique = dedupe(records)
    progress.finish(unique=len(unique))

    progress.start("fetch dashboard")
    dashboard_headers, dashboard_rows = _split(source.fetch_rows(config.networking))
    existing = normalize_existing(
        dashboard_headers,
        dashboard_rows,
        timezone=config.timezone,
        now=now,
        sheet=config.networking.label,
        spreadsheet=config.networking.spreadsheet_id,
    )
    logger.info("found %d current networking entries", len(existing))
    progress.finish(existing=len(existing))

    progress.start("merge")
    result = merge(unique, existing)
    if result.added:
        if not dashboard_headers:
            raise SchemaError(
                f"dashboard '{config.networking.label}' has no header row; cannot lay out new rows",
                spreadsheet=config.networking.spreadsheet_id,
                sheet=config.networking.label,
            )
        # 追記した行が次回も照合できること
        require_identity_column(
            dashboard_headers,
            sheet=config.networking.label,
            spreadsheet=config.networking.spreadsheet_id,
        )
    output_rows = build_output_rows(dashboard_headers, result.added)
    progress.finish(new=len(result.added))

    return SyncPlan(
        onboarding_total=len(records),
        deduplicated=tuple(unique),
        dashboard_headers=tuple(dashboard_headers),
        merge=result,
        output_rows=tuple(tuple(r) for r in output_rows),
    )


def run_preview(config: SyncConfig, source: RowSource, *, now: datetime | None = None) -> SyncResult:
    """Compute what a sync would do; never writes."""
    with StageProgress(4, description="Previewing") as progress:
        plan = build_plan(config, source, now=now, progress=progress)
    return SyncResult(
        mode="preview",
        stats=plan.stats(preview=True),
        rows_written=0,
        message="Preview completed successfully",
    )


def run_sync(
    config: SyncConfig,
    source: RowSource,
    sink: RowSink,
    *,
    now: datetime | None = None,
) -> SyncResult:
    """Run the full sync: compute everything, then append new people once.

    Raises:
        SyncError subclasses; on WriteError zero rows are considered written.
    """
    with StageProgress(5, description="Syncing") as progress:
        plan = build_plan(config, source, now=now, progress=progress)

        progress.start("append")
        if not plan.output_rows:
            logger.warning("no new people to add")
            written = 0
            message = "No new people to add"
        else:
            written = sink.append_rows(config.networking, [list(r) for r in plan.output_rows])
            message = f"Successfully added {written} new people to networking dashboard"
            logger.info(message)
        progress.finish(written=written)

    return SyncResult(
        mode="sync",
        stats=plan.stats(preview=False),
        rows_written=written,
        message=message,
    )
