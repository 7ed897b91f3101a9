from __future__ import annotations

from ..models.sync_result import SyncResult, SyncStats

"""Summary rendering for sync / preview runs.

The SUMMARY line is a single machine-greppable line of key=value pairs:

SUMMARY mode={mode} onboarding={total} deduplicated={dedup} current={current}
new={new} updated={updated} final={final} rows_written={written}
"""

__all__ = [
    "render_summary_line",
    "render_stats_lines",
]


def render_summary_line(result: SyncResult) -> str:
    """Render the SUMMARY line for ``result``.

    Examples:
        >>> stats = SyncStats(
        ...     total_onboarding_entries=12, deduplicated_entries=10, current_entries=7,
        ...     final_entries=9, new_entries=2, updated_entries=0,
        ... )
        >>> render_summary_line(SyncResult(mode="sync", stats=stats, rows_written=2))
        'SUMMARY mode=sync onboarding=12 deduplicated=10 current=7 new=2 updated=0 final=9 rows_written=2'
    """
    s = result.stats
    return (
        f"SUMMARY mode={result.mode} "
        f"onboarding={s.total_onboarding_entries} "
        f"deduplicated={s.deduplicated_entries} "
        f"current={s.current_entries} "
        f"new={s.new_entries} "
        f"updated={s.updated_entries} "
        f"final={s.final_entries} "
        f"rows_written={result.rows_written}"
    )


def render_stats_lines(stats: SyncStats, *, preview: bool = False) -> list[str]:
    """Human readable statistics block."""
    if preview:
        new_label = "New entries that will be added"
        updated_label = "Existing entries matched (left unchanged)"
    else:
        new_label = "New entries"
        updated_label = "Updated entries"
    return [
        f"Total onboarding entries: {stats.total_onboarding_entries}",
        f"After deduplication: {stats.deduplicated_entries}",
        f"Current dashboard entries: {stats.current_entries}",
        f"Final entries: {stats.final_entries}",
        f"{new_label}: {stats.new_entries}",
        f"{updated_label}: {stats.updated_entries}",
    ]
