# pyright: standard

"""duplicacy-wrapper: duplicacy_wrapper/__logger__.py
A common console logger plus the per-run log file.
"""

import logging
import logging.handlers
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler

# Initialize basic console and handler
cons = Console()
rich_handler = RichHandler(console=cons, show_path=False)
# Create a logger directly
logger = logging.Logger("duplicacy-wrapper", logging.INFO)
logger.addHandler(rich_handler)

RUN_LOG_FORMAT = "%(asctime)s %(message)s"
RUN_LOG_DATEFMT = "%H:%M:%S"


def create_logger(level: str = "INFO") -> None:
    """Helper function to setup console logging at the requested level."""
    # pylint: disable=global-statement
    global cons, rich_handler

    cons = Console()
    rich_handler = RichHandler(console=cons, show_path=False)

    logger.handlers.clear()
    logger.propagate = False
    logger.addHandler(rich_handler)
    try:
        logger.setLevel(level)
    except (ValueError, TypeError):
        # Fallback to INFO if level is invalid
        logger.setLevel(logging.INFO)

    logging.basicConfig(
        format="%(message)s",
        datefmt=RUN_LOG_DATEFMT,
        level=logger.level,
        handlers=[rich_handler],
        force=True,
    )


def log_file_path(log_dir: Path | str, name: str) -> Path:
    """Return the path of the run log for configuration `name`."""
    return Path(log_dir).expanduser() / f"{name}.log"


def rotate_log_files(log_dir: Path | str, name: str, keep: int = 5) -> None:
    """Shift name.log -> name.log.1 -> ... keeping at most `keep` old logs.

    Must be called before anything is written to the new run's log.
    """
    path = log_file_path(log_dir, name)
    path.parent.mkdir(parents=True, exist_ok=True)
    if not path.exists() or keep < 1:
        return

    handler = logging.handlers.RotatingFileHandler(
        path, backupCount=keep, delay=True, encoding="utf-8"
    )
    try:
        handler.doRollover()
    finally:
        handler.close()


def open_run_log(log_dir: Path | str, name: str) -> logging.Logger:
    """Create the plain-text logger that receives every line of a run."""
    path = log_file_path(log_dir, name)
    path.parent.mkdir(parents=True, exist_ok=True)

    run_log = logging.Logger(f"duplicacy-wrapper.run.{name}", logging.DEBUG)
    handler = logging.FileHandler(path, mode="w", encoding="utf-8")
    handler.setFormatter(logging.Formatter(RUN_LOG_FORMAT, datefmt=RUN_LOG_DATEFMT))
    run_log.addHandler(handler)
    run_log.propagate = False
    return run_log


def close_run_log(run_log: logging.Logger) -> None:
    """Flush and detach the file handlers of a run log."""
    for handler in list(run_log.handlers):
        handler.close()
        run_log.removeHandler(handler)


def log_message(run_log: logging.Logger | None, message: str) -> None:
    """Log to the console and, when open, to the run log."""
    logger.info(message)
    if run_log is not None:
        run_log.info(message)


def log_warning(run_log: logging.Logger | None, message: str) -> None:
    """Warn on the console and, when open, in the run log."""
    logger.warning(message)
    if run_log is not None:
        run_log.warning(message)


def log_error(run_log: logging.Logger | None, message: str) -> None:
    """Report an error on the console and, when open, in the run log."""
    logger.error(message)
    if run_log is not None:
        run_log.error(message)


def log_debug(run_log: logging.Logger | None, message: str) -> None:
    """Debug output, copied to the run log only when debugging is enabled."""
    if not logger.isEnabledFor(logging.DEBUG):
        return
    logger.debug(message)
    if run_log is not None:
        run_log.debug(message)
