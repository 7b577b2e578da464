"""Core run pipeline for duplicacy-wrapper.

Command construction, output classification and the per-target revision
records. The runners and the orchestrator live in `core.runner` and
`core.orchestrator`.
"""

from .commands import build_args, expand_keep
from .parser import Classification, LineKind, classify_line
from .revision import BackupRevision, CopyRevision

__all__ = [
    "build_args",
    "expand_keep",
    "classify_line",
    "Classification",
    "LineKind",
    "BackupRevision",
    "CopyRevision",
]
