"""Run notifications.

A notifier is told when a run starts, and once more when it ends, either
with the finished result tables or with the error that aborted the run.
"""

from __future__ import annotations

import logging
import smtplib
from typing import TYPE_CHECKING, Iterable, Protocol

from ..core.revision import BackupRevision, CopyRevision

if TYPE_CHECKING:
    from ..core.context import RunContext

logger = logging.getLogger(__name__)

UNSET = "-"

BACKUP_HEADERS = (
    "Storage",
    "Files",
    "File Size",
    "New Files",
    "New File Size",
    "Chunks",
    "Chunk Size",
    "New Chunks",
    "New Chunk Size",
    "Uploaded",
    "Duration",
)

COPY_HEADERS = (
    "From",
    "To",
    "Total Chunks",
    "Copied",
    "Skipped",
    "Duration",
)


class Notifier(Protocol):
    """Receiver of run notifications."""

    def notify_start(self) -> None: ...

    def notify_success(self, context: RunContext) -> None: ...

    def notify_failure(self, context: RunContext, error: BaseException) -> None: ...


def _show(value: str | None) -> str:
    return UNSET if value is None else value


def render_backup_rows(table: Iterable[BackupRevision]) -> list[tuple[str, ...]]:
    """Display rows for a backup result table, unset metrics shown as '-'."""
    return [
        (
            r.storage,
            _show(r.files_total_count),
            _show(r.files_total_size),
            _show(r.files_new_count),
            _show(r.files_new_size),
            _show(r.chunk_total_count),
            _show(r.chunk_total_size),
            _show(r.chunk_new_count),
            _show(r.chunk_new_size),
            _show(r.chunk_new_uploaded),
            r.duration,
        )
        for r in table
    ]


def render_copy_rows(table: Iterable[CopyRevision]) -> list[tuple[str, ...]]:
    """Display rows for a copy result table, unset metrics shown as '-'."""
    return [
        (
            r.storage_from,
            r.storage_to,
            _show(r.chunk_total_count),
            _show(r.chunk_copy_count),
            _show(r.chunk_skip_count),
            r.duration,
        )
        for r in table
    ]


class NotifierGroup:
    """Fans notifications out to several notifiers, in order.

    A notifier failing to deliver (mail server down) is logged and skipped;
    it never changes the outcome of the run.
    """

    def __init__(self, notifiers: Iterable[Notifier] = ()) -> None:
        self.notifiers = list(notifiers)

    def _each(self, method: str, *args) -> None:
        for notifier in self.notifiers:
            try:
                getattr(notifier, method)(*args)
            except (OSError, smtplib.SMTPException) as e:
                logger.error(
                    "Notification via %s failed: %s", type(notifier).__name__, e
                )

    def notify_start(self) -> None:
        self._each("notify_start")

    def notify_success(self, context: RunContext) -> None:
        self._each("notify_success", context)

    def notify_failure(self, context: RunContext, error: BaseException) -> None:
        self._each("notify_failure", context, error)
