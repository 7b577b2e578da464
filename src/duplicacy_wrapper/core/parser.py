"""Classification of duplicacy output lines.

Only the handful of summary lines that duplicacy prints at the end of a
backup or copy are recognized. Each is anchored by a literal prefix and
captured with a small regular expression; values are kept verbatim
("15,951M"), never converted to numbers.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum


class LineKind(Enum):
    """Kinds of recognized output lines."""

    FILES = "files"
    CHUNKS = "chunks"
    COPY = "copy"
    CREDENTIAL = "credential"


@dataclass(frozen=True)
class Classification:
    """A recognized line and its captured fields.

    `fields` is empty when the prefix matched but the rest of the line did
    not have the expected shape.
    """

    kind: LineKind
    fields: dict[str, str] = field(default_factory=dict)


# Files: 161318 total, 1666G bytes; 373 new, 15,951M bytes
FILES_PREFIX = "Files:"
FILES_PATTERN = re.compile(
    r"^Files: (?P<files_total_count>\S+) total, (?P<files_total_size>\S+) bytes; "
    r"(?P<files_new_count>\S+) new, (?P<files_new_size>\S+) bytes"
)

# All chunks: 348444 total, 1668G bytes; 2415 new, 12,391M bytes, 12,255M bytes uploaded
CHUNKS_PREFIX = "All chunks:"
CHUNKS_PATTERN = re.compile(
    r"^All chunks: (?P<chunk_total_count>\S+) total, (?P<chunk_total_size>\S+) bytes; "
    r"(?P<chunk_new_count>\S+) new, (?P<chunk_new_size>\S+) bytes, "
    r"(?P<chunk_new_uploaded>\S+) bytes uploaded"
)

# Copy complete, 107 total chunks, 0 chunks copied, 107 skipped
COPY_PREFIX = "Copy complete, "
COPY_PATTERN = re.compile(
    r"^Copy complete, (?P<chunk_total_count>\S+) total chunks, "
    r"(?P<chunk_copy_count>\S+) chunks copied, (?P<chunk_skip_count>\S+) skipped"
)

PASSWORD_PROMPT = "Enter storage password:"
AUTH_FAILURE = "Authorization failure"

_CAPTURES = (
    (FILES_PREFIX, LineKind.FILES, FILES_PATTERN),
    (CHUNKS_PREFIX, LineKind.CHUNKS, CHUNKS_PATTERN),
    (COPY_PREFIX, LineKind.COPY, COPY_PATTERN),
)


def is_credential_problem(line: str) -> bool:
    """True if duplicacy is prompting for a password or rejected credentials."""
    return line.startswith(PASSWORD_PROMPT) or line.rstrip().endswith(AUTH_FAILURE)


def classify_line(line: str) -> Classification | None:
    """Classify one line of duplicacy output.

    Args:
        line: Output line without its trailing newline.

    Returns:
        A Classification for recognized lines, None for everything else.
    """
    for prefix, kind, pattern in _CAPTURES:
        if line.startswith(prefix):
            match = pattern.match(line)
            return Classification(kind, match.groupdict() if match else {})

    if is_credential_problem(line):
        return Classification(LineKind.CREDENTIAL)

    return None
