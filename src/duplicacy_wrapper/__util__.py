"""duplicacy-wrapper: duplicacy_wrapper/__util__.py.

Common exceptions, formatting helpers and the streaming process executor.
"""

import logging
import shlex
import subprocess
from pathlib import Path
from typing import Protocol, Sequence

logger = logging.getLogger(__name__)


class AbortError(Exception):
    """Base class for errors that abort a run."""


class ExecutionError(AbortError):
    """An external tool invocation failed to start or exited abnormally."""

    def __init__(self, operation: str, target: str, returncode: int | None = None, reason: str = ""):
        self.operation = operation
        self.target = target
        self.returncode = returncode
        self.reason = reason
        super().__init__(str(self))

    def __str__(self) -> str:
        msg = f"duplicacy {self.operation} failed for storage {self.target}"
        if self.returncode is not None:
            msg += f" (exit status {self.returncode})"
        if self.reason:
            msg += f": {self.reason}"
        return msg


class LineSink(Protocol):
    """Consumer of process output, one line at a time."""

    def accept(self, line: str) -> None: ...


def log_heading(caption: str) -> str:
    """Formatted heading for logging output sections."""
    return f"{'-' * 10} {caption} {'-' * 10}"


def format_duration(seconds: float) -> str:
    """Render an elapsed time as '1 hour, 2 minutes, 3 seconds'."""
    total = int(round(seconds))
    hours, rest = divmod(total, 3600)
    minutes, secs = divmod(rest, 60)

    parts = []
    for value, unit in ((hours, "hour"), (minutes, "minute"), (secs, "second")):
        if value:
            parts.append(f"{value} {unit}{'' if value == 1 else 's'}")
    return ", ".join(parts) if parts else "0 seconds"


def command_line(path: str | Path, args: Sequence[str]) -> str:
    """Shell-quoted command line, for logging."""
    return shlex.join([str(path), *args])


def exec_streaming(
    path: str | Path,
    args: Sequence[str],
    cwd: str | Path,
    sink: LineSink,
) -> int:
    """Run a command and feed its combined output to `sink` line by line.

    Standard error is merged into standard output so the sink sees lines in
    the order the child produced them.

    Returns:
        The exit status of the process.

    Raises:
        OSError: If the process cannot be started.
    """
    cmd = [str(path), *args]

    with subprocess.Popen(
        cmd,
        cwd=str(cwd),
        stdin=subprocess.DEVNULL,
        stdout=subprocess.PIPE,
        stderr=subprocess.STDOUT,
        text=True,
        errors="replace",
        bufsize=1,
    ) as process:
        assert process.stdout is not None
        for line in process.stdout:
            sink.accept(line.rstrip("\r\n"))
        returncode = process.wait()

    logger.debug("Process exited with status %d", returncode)
    return returncode
