from __future__ import annotations

import sys
from typing import Any

from tqdm import tqdm
from tqdm.std import tqdm as TqdmType

"""Pipeline stage progress display with tqdm (TTY only).

A single tqdm bar counts pipeline stages (fetch onboarding, deduplicate,
fetch dashboard, merge, append). In non-TTY environments (CI, cron) the bar
is disabled so logs are not interleaved with ANSI control sequences.
"""

__all__ = [
    "StageProgress",
    "is_tty_enabled",
]


def is_tty_enabled() -> bool:
    """True if stdout is a TTY and progress should be displayed."""
    return sys.stdout.isatty()


class StageProgress:
    """Progress tracker over the sequential pipeline stages."""

    def __init__(self, total_stages: int, *, description: str = "Syncing") -> None:
        self.total_stages = total_stages
        self.description = description
        self.current_stage = 0
        self.enabled = is_tty_enabled()
        self.pbar: TqdmType[Any] | None
        if self.enabled:
            self.pbar = tqdm(
                total=total_stages,
                desc=description,
                unit="step",
                leave=False,
                ncols=80,
                ascii=True,
            )
        else:
            self.pbar = None

    def start(self, stage: str) -> None:
        self.current_stage += 1
        if self.pbar is not None:
            self.pbar.set_description(f"{self.description} ({stage})")

    def finish(self, **postfix: Any) -> None:
        if self.pbar is not None:
            self.pbar.update(1)
            if postfix:
                self.pbar.set_postfix(**postfix)
            self.pbar.set_description(self.description)

    def close(self) -> None:
        if self.pbar is not None:
            self.pbar.close()
            self.pbar = None

    def __enter__(self) -> StageProgress:
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()
