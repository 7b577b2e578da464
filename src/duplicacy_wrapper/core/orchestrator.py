"""Run orchestration: rotate logs, notify, then backup, copy, prune and check.

The steps run strictly in that order. A step is skipped when its mode was
not requested. The first failing invocation ends the run: no further step
runs, no success notification is sent, and the error is re-raised to the
caller after the failure notification.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from .. import __util__
from ..__logger__ import close_run_log, log_error, log_message, open_run_log, rotate_log_files
from ..config import Config
from ..notify import Notifier
from .context import SEPARATOR, RunContext, RunState
from .runner import Executor, run_backups, run_checks, run_copies, run_prunes


@dataclass(frozen=True)
class RunModes:
    """Which operations a run performs."""

    backup: bool = False
    copy: bool = False
    prune: bool = False
    check: bool = False

    @classmethod
    def everything(cls) -> "RunModes":
        return cls(backup=True, copy=True, prune=True, check=True)

    def any(self) -> bool:
        return self.backup or self.copy or self.prune or self.check

    def describe(self) -> str:
        names = [n for n in ("backup", "copy", "prune", "check") if getattr(self, n)]
        return ", ".join(names) or "nothing"


def perform_run(
    config: Config,
    modes: RunModes,
    notifier: Notifier,
    context: Optional[RunContext] = None,
    executor: Executor = __util__.exec_streaming,
) -> RunContext:
    """Execute one complete run.

    Args:
        config: Validated configuration
        modes: Operations to perform
        notifier: Receives start, success and failure notifications
        context: Pre-built context (a fresh one is created by default)
        executor: Process executor, replaceable for testing

    Returns:
        The completed RunContext holding the result tables.

    Raises:
        AbortError: The first failing invocation, after notify_failure.
    """
    if context is None:
        context = RunContext(name=config.name)

    # Rotate before anything is written so the previous log stays intact
    log_message(None, "Rotating log files")
    rotate_log_files(config.log_dir, config.name, config.global_config.log_keep)
    context.run_log = open_run_log(config.log_dir, config.name)

    steps = (
        (modes.backup, run_backups),
        (modes.copy, run_copies),
        (modes.prune, run_prunes),
        (modes.check, run_checks),
    )

    try:
        context.state = RunState.RUNNING
        log_message(
            context.run_log,
            __util__.log_heading(
                f"Beginning {modes.describe()} on {datetime.now():%m-%d-%Y %H:%M:%S}"
            ),
        )
        notifier.notify_start()

        for enabled, step in steps:
            if enabled:
                step(config, context, executor)

    except __util__.AbortError as e:
        context.finish(RunState.FAILED, e)
        log_error(context.run_log, f"Run aborted after {context.duration_text}: {e}")
        notifier.notify_failure(context, e)
        raise

    else:
        context.run_log.info(SEPARATOR)
        context.finish(RunState.COMPLETED)
        log_message(
            context.run_log,
            __util__.log_heading(f"Operations completed in {context.duration_text}"),
        )
        notifier.notify_success(context)

    finally:
        close_run_log(context.run_log)

    return context
