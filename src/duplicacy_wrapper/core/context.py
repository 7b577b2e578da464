"""State shared by the orchestrator and the operation runners of one run."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from .. import __util__
from .revision import BackupRevision, CopyRevision

SEPARATOR = "#" * 70


class RunState(Enum):
    """Lifecycle of a run."""

    PENDING = "pending"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"


def _null_run_log() -> logging.Logger:
    run_log = logging.Logger("duplicacy-wrapper.run", logging.DEBUG)
    run_log.addHandler(logging.NullHandler())
    return run_log


@dataclass
class RunContext:
    """Result tables and run log of one run.

    The tables are append-only and hold one entry per processed target, in
    configuration order. Records are frozen once appended.
    """

    name: str = "default"
    run_log: logging.Logger = field(default_factory=_null_run_log)
    backup_table: list[BackupRevision] = field(default_factory=list)
    copy_table: list[CopyRevision] = field(default_factory=list)
    state: RunState = RunState.PENDING
    error: Optional[BaseException] = None
    started_at: float = field(default_factory=time.monotonic)
    completed_at: float = 0.0

    @property
    def duration(self) -> float:
        if self.completed_at:
            return self.completed_at - self.started_at
        return time.monotonic() - self.started_at

    @property
    def duration_text(self) -> str:
        return __util__.format_duration(self.duration)

    def separator(self) -> None:
        """Mark the start of a new invocation in the run log."""
        self.run_log.info(SEPARATOR)

    def finish(self, state: RunState, error: Optional[BaseException] = None) -> None:
        self.state = state
        self.error = error
        self.completed_at = time.monotonic()
