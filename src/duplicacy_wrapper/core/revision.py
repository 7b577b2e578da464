"""Per-target summary records built from duplicacy output."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .parser import Classification, LineKind, classify_line


@dataclass(frozen=True)
class BackupRevision:
    """Summary of one `duplicacy backup` run against one storage.

    Metrics are the tool's text verbatim; None means the line carrying the
    value was never seen.
    """

    storage: str
    chunk_total_count: Optional[str] = None  # 348444
    chunk_total_size: Optional[str] = None  # 1668G
    files_total_count: Optional[str] = None  # 161318
    files_total_size: Optional[str] = None  # 1666G
    files_new_count: Optional[str] = None  # 373
    files_new_size: Optional[str] = None  # 15,951M
    chunk_new_count: Optional[str] = None  # 2415
    chunk_new_size: Optional[str] = None  # 12,391M
    chunk_new_uploaded: Optional[str] = None  # 12,255M
    duration: str = ""


@dataclass(frozen=True)
class CopyRevision:
    """Summary of one `duplicacy copy` run between two storages."""

    storage_from: str
    storage_to: str
    chunk_total_count: Optional[str] = None  # 109
    chunk_copy_count: Optional[str] = None  # 3
    chunk_skip_count: Optional[str] = None  # 106
    duration: str = ""


class RevisionAccumulator:
    """Collects captured fields for the target currently being processed."""

    kinds: frozenset[LineKind] = frozenset()

    def __init__(self) -> None:
        self.fields: dict[str, str] = {}

    def observe(self, line: str) -> Classification | None:
        """Classify `line` and merge its captures if this accumulator tracks them."""
        result = classify_line(line)
        if result is not None and result.kind in self.kinds:
            self.fields.update(result.fields)
        return result


class BackupAccumulator(RevisionAccumulator):
    kinds = frozenset({LineKind.FILES, LineKind.CHUNKS})

    def finalize(self, storage: str, duration: str) -> BackupRevision:
        return BackupRevision(storage=storage, duration=duration, **self.fields)


class CopyAccumulator(RevisionAccumulator):
    kinds = frozenset({LineKind.COPY})

    def finalize(self, storage_from: str, storage_to: str, duration: str) -> CopyRevision:
        return CopyRevision(
            storage_from=storage_from,
            storage_to=storage_to,
            duration=duration,
            **self.fields,
        )
