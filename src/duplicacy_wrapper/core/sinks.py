"""Line sinks handed to the process executor.

A sink receives every output line of one duplicacy invocation, in order,
on the same thread that runs the process.
"""

import logging
from typing import Optional

from ..__logger__ import log_warning, logger
from .parser import LineKind, classify_line
from .revision import RevisionAccumulator

PASSWORD_WARNING = "Error: Duplicacy appears to be prompting for a password"


class OutputSink:
    """Writes every line verbatim to the run log.

    Summary lines are echoed to the console as well, and credential prompts
    produce a warning. When an accumulator is given, each line is also fed
    to it so the summary fields end up in the target's revision record.
    """

    def __init__(
        self,
        run_log: logging.Logger,
        accumulator: Optional[RevisionAccumulator] = None,
    ) -> None:
        self.run_log = run_log
        self.accumulator = accumulator
        self.credential_problems = 0

    def accept(self, line: str) -> None:
        if self.accumulator is not None:
            result = self.accumulator.observe(line)
        else:
            result = classify_line(line)

        if result is not None and result.kind is LineKind.CREDENTIAL:
            self.credential_problems += 1
            log_warning(self.run_log, PASSWORD_WARNING)

        self.run_log.info(line)
        if result is not None:
            logger.info("  %s", line)
