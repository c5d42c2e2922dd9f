from __future__ import annotations

import sys
from pathlib import Path
from typing import Any

from tqdm import tqdm
from tqdm.std import tqdm as TqdmType

"""Per-workbook progress bar for batch imports.

The bar exists only when stdout is a terminal; redirected output (CI, log
files) gets the labeled log lines alone.
"""

__all__ = [
    "ProgressTracker",
    "is_tty_enabled",
]


def is_tty_enabled() -> bool:
    return sys.stdout.isatty()


class ProgressTracker:
    """Counts workbooks through an import run and mirrors the tally on a tqdm bar.

    The ok/failed tally is kept whether or not a bar is shown, so callers can
    read it back after the run.
    """

    def __init__(self, total: int, *, description: str = "Importing workbooks") -> None:
        self.description = description
        self.current_file = 0
        self.succeeded = 0
        self.failed = 0
        self.pbar: TqdmType[Any] | None = None
        if is_tty_enabled():
            self.pbar = tqdm(
                total=total,
                desc=description,
                unit="file",
                leave=True,
                position=0,
                ncols=80,
                ascii=True,
            )

    @property
    def enabled(self) -> bool:
        return self.pbar is not None

    def start_file(self, file_path: Path) -> None:
        self.current_file += 1
        if self.pbar is not None:
            self.pbar.set_description(f"{self.description} ({file_path.name})")

    def finish_file(self, success: bool) -> None:
        if success:
            self.succeeded += 1
        else:
            self.failed += 1
        if self.pbar is None:
            return
        self.pbar.set_description(self.description)
        self.pbar.set_postfix(ok=self.succeeded, failed=self.failed)
        self.pbar.update(1)

    def close(self) -> None:
        if self.pbar is not None:
            self.pbar.close()
            self.pbar = None

    def __enter__(self) -> ProgressTracker:
        return self

    def __exit__(self, *exc: Any) -> None:
        self.close()
