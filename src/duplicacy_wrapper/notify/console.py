"""Console report of a run, rendered with rich tables."""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

from rich import box
from rich.console import Console
from rich.table import Table

from .. import __logger__
from . import BACKUP_HEADERS, COPY_HEADERS, render_backup_rows, render_copy_rows

if TYPE_CHECKING:
    from ..core.context import RunContext


def build_table(title: str, headers: tuple[str, ...], rows: list[tuple[str, ...]]) -> Table:
    table = Table(title=title, box=box.SIMPLE, show_lines=False)
    for i, header in enumerate(headers):
        table.add_column(header, justify="left" if i == 0 else "right")
    for row in rows:
        table.add_row(*row)
    return table


class ConsoleNotifier:
    """Prints the result tables once the run is over."""

    def __init__(self, console: Optional[Console] = None) -> None:
        self.console = console

    @property
    def _console(self) -> Console:
        # create_logger() may replace the shared console after construction
        return self.console or __logger__.cons

    def notify_start(self) -> None:
        pass

    def notify_success(self, context: RunContext) -> None:
        self._print_tables(context)
        self._console.print(
            f"[bold green]Run '{context.name}' completed[/] in {context.duration_text}"
        )

    def notify_failure(self, context: RunContext, error: BaseException) -> None:
        self._print_tables(context)
        self._console.print(f"[bold red]Run '{context.name}' FAILED:[/] {error}")

    def _print_tables(self, context: RunContext) -> None:
        if context.backup_table:
            self._console.print(
                build_table(
                    "Backup", BACKUP_HEADERS, render_backup_rows(context.backup_table)
                )
            )
        if context.copy_table:
            self._console.print(
                build_table("Copy", COPY_HEADERS, render_copy_rows(context.copy_table))
            )
