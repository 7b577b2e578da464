"""Run command: Execute the requested duplicacy operations."""

import argparse
import logging

from filelock import FileLock, Timeout

from .. import __logger__, __util__
from ..config import Config
from ..core.commands import build_args
from ..core.orchestrator import RunModes, perform_run
from ..notify import NotifierGroup
from ..notify.console import ConsoleNotifier, build_table
from ..notify.mailer import EmailNotifier
from .common import get_log_level, load_configuration

logger = logging.getLogger(__name__)


def modes_from_args(args: argparse.Namespace) -> RunModes:
    """Translate --backup/--copy/--prune/--check/--all into RunModes."""
    if getattr(args, "all", False):
        return RunModes.everything()
    return RunModes(
        backup=getattr(args, "backup", False),
        copy=getattr(args, "copy", False),
        prune=getattr(args, "prune", False),
        check=getattr(args, "check", False),
    )


def build_notifier(config: Config, enabled: bool = True) -> NotifierGroup:
    """Console report always; e-mail when configured and not disabled."""
    notifiers = [ConsoleNotifier()]
    if enabled and config.email.enabled:
        notifiers.append(EmailNotifier(config.email, config.name))
    return NotifierGroup(notifiers)


def execute_run(args: argparse.Namespace) -> int:
    """Execute the run command.

    Args:
        args: Parsed command line arguments

    Returns:
        Exit code (0 for success, non-zero for failure)
    """
    # Initialize logger
    log_level = get_log_level(args)
    __logger__.create_logger(level=log_level)

    modes = modes_from_args(args)
    if not modes.any():
        logger.error("No operation requested (use --backup, --copy, --prune, --check or --all)")
        return 1

    config = load_configuration(args)
    if config is None:
        return 1

    if getattr(args, "verbose", False):
        show_configuration(config)

    # Dry run mode
    if getattr(args, "dry_run", False):
        return _dry_run(config, modes)

    lock_path = config.log_dir / f"{config.name}.lock"
    config.log_dir.mkdir(parents=True, exist_ok=True)
    notifier = build_notifier(config, not getattr(args, "no_notify", False))

    try:
        with FileLock(lock_path, timeout=0):
            perform_run(config, modes, notifier)
    except Timeout:
        logger.error("Another run of '%s' is in progress (lock: %s)", config.name, lock_path)
        return 1
    except __util__.AbortError as e:
        logger.error("%s", e)
        return 1

    return 0


def _dry_run(config: Config, modes: RunModes) -> int:
    """Show the commands that would be executed."""
    print("Dry run mode - showing what would be executed:")
    print(f"  Repository: {config.repository}")
    print("")

    groups = (
        (modes.backup, "Backup", config.backup_info),
        (modes.copy, "Copy", config.copy_info),
        (modes.prune, "Prune", config.prune_info),
        (modes.check, "Check", config.check_info),
    )
    for enabled, title, targets in groups:
        if not enabled:
            continue
        print(f"{title}:")
        if not targets:
            print("  (none)")
        for info in targets:
            print(f"  {__util__.command_line(config.global_config.duplicacy_path, build_args(info))}")
        print("")

    return 0


def show_configuration(config: Config) -> None:
    """Print the configured targets as tables."""
    __logger__.cons.print(
        build_table(
            "Backup Information",
            ("Num", "Storage", "Threads", "VSS"),
            [
                (str(i), b.name, b.threads, "yes" if b.vss else "")
                for i, b in enumerate(config.backup_info, 1)
            ],
        )
    )
    if config.copy_info:
        __logger__.cons.print(
            build_table(
                "Copy Information",
                ("Num", "From", "To", "Threads"),
                [
                    (str(i), c.from_storage, c.to_storage, c.threads)
                    for i, c in enumerate(config.copy_info, 1)
                ],
            )
        )
    __logger__.cons.print(
        build_table(
            "Prune Information",
            ("Num", "Storage", "Keep", "All Snapshots"),
            [
                (str(i), p.storage, p.keep, str(p.all).lower())
                for i, p in enumerate(config.prune_info, 1)
            ],
        )
    )
    __logger__.cons.print(
        build_table(
            "Check Information",
            ("Num", "Storage", "All Snapshots"),
            [
                (str(i), c.storage, str(c.all).lower())
                for i, c in enumerate(config.check_info, 1)
            ],
        )
    )
