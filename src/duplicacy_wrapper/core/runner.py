"""Operation runners: one duplicacy invocation per configured target.

Targets run one at a time in configuration order. The first invocation
that fails raises ExecutionError, which aborts the remaining targets and
every later operation of the run.
"""

import time
from pathlib import Path
from typing import Callable, Sequence

from .. import __util__, storage_label
from ..__logger__ import log_debug, log_error, log_message
from ..config import Config
from .commands import (
    TargetInfo,
    build_backup_args,
    build_check_args,
    build_copy_args,
    build_prune_args,
)
from .context import RunContext
from .revision import BackupAccumulator, CopyAccumulator
from .sinks import OutputSink

Executor = Callable[[str | Path, Sequence[str], str | Path, __util__.LineSink], int]


def _quote_note(quote: str) -> str:
    return f" {quote}" if quote else ""


def _execute(
    config: Config,
    context: RunContext,
    operation: str,
    target: str,
    build: Callable[[TargetInfo], list[str]],
    info: TargetInfo,
    sink: OutputSink,
    executor: Executor,
) -> None:
    """Build the arguments for `info` and run one invocation.

    Raises:
        ExecutionError: If the arguments cannot be built, the process cannot
            be started, or it exits with a non-zero status.
    """
    path = config.global_config.duplicacy_path
    try:
        args = build(info)
    except ValueError as e:
        log_error(context.run_log, f"Error building command: {e}")
        raise __util__.ExecutionError(operation, target, reason=str(e)) from e

    log_debug(context.run_log, f"Executing: {__util__.command_line(path, args)}")
    try:
        returncode = executor(path, args, config.repository, sink)
    except OSError as e:
        log_error(context.run_log, f"Error executing command: {e}")
        raise __util__.ExecutionError(operation, target, reason=str(e)) from e

    if returncode != 0:
        log_error(context.run_log, f"Error executing command: exit status {returncode}")
        if sink.credential_problems:
            log_error(context.run_log, "  Check the storage password / credentials")
        raise __util__.ExecutionError(operation, target, returncode)


def run_backups(
    config: Config,
    context: RunContext,
    executor: Executor = __util__.exec_streaming,
) -> None:
    """Back up to every configured storage, recording a BackupRevision each."""
    for info in config.backup_info:
        started = time.monotonic()
        context.separator()

        vss_note = ""
        if info.vss:
            vss_note = " -vss"
            if info.vss_timeout:
                vss_note += f" -vss-timeout {info.vss_timeout}"
        log_message(
            context.run_log,
            f"Backing up to storage {info.name}{vss_note} with {info.threads} threads"
            f"{_quote_note(info.quote)}",
        )

        accumulator = BackupAccumulator()
        sink = OutputSink(context.run_log, accumulator)
        _execute(config, context, "backup", info.name, build_backup_args, info, sink, executor)

        duration = __util__.format_duration(time.monotonic() - started)
        log_message(context.run_log, f"  Duration: {duration}")
        context.backup_table.append(accumulator.finalize(info.name, duration))


def run_copies(
    config: Config,
    context: RunContext,
    executor: Executor = __util__.exec_streaming,
) -> None:
    """Copy between every configured pair of storages, recording a CopyRevision each."""
    for info in config.copy_info:
        started = time.monotonic()
        context.separator()

        log_message(
            context.run_log,
            f"Copying from storage {info.from_storage} to storage {info.to_storage} "
            f"with {info.threads} threads{_quote_note(info.quote)}",
        )

        accumulator = CopyAccumulator()
        sink = OutputSink(context.run_log, accumulator)
        target = storage_label(info.from_storage, info.to_storage)
        _execute(config, context, "copy", target, build_copy_args, info, sink, executor)

        duration = __util__.format_duration(time.monotonic() - started)
        log_message(context.run_log, f"  Duration: {duration}")
        context.copy_table.append(
            accumulator.finalize(info.from_storage, info.to_storage, duration)
        )


def run_prunes(
    config: Config,
    context: RunContext,
    executor: Executor = __util__.exec_streaming,
) -> None:
    """Apply the retention rules of every prune target."""
    for info in config.prune_info:
        started = time.monotonic()
        context.separator()

        all_note = " -all" if info.all else ""
        log_message(
            context.run_log,
            f"Pruning storage {info.storage} using {info.threads} thread(s)"
            f"{all_note}{_quote_note(info.quote)}",
        )

        _execute(
            config, context, "prune", info.storage, build_prune_args, info,
            OutputSink(context.run_log), executor,
        )
        log_message(
            context.run_log,
            f"  Duration: {__util__.format_duration(time.monotonic() - started)}",
        )


def run_checks(
    config: Config,
    context: RunContext,
    executor: Executor = __util__.exec_streaming,
) -> None:
    """Check the integrity of every check target."""
    for info in config.check_info:
        started = time.monotonic()
        context.separator()

        all_note = " with -all" if info.all else ""
        log_message(
            context.run_log,
            f"Checking storage {info.storage}{all_note}{_quote_note(info.quote)}",
        )

        _execute(
            config, context, "check", info.storage, build_check_args, info,
            OutputSink(context.run_log), executor,
        )
        log_message(
            context.run_log,
            f"  Duration: {__util__.format_duration(time.monotonic() - started)}",
        )
