"""Argument lists for duplicacy invocations.

Each builder returns the arguments that follow the duplicacy binary:
the operation verb, mandatory storage identifiers, optional flags in a
fixed order, then any passthrough flags from the target's `quote` field.
No validation happens here; the config loader guarantees non-empty
identifiers and thread counts.
"""

import shlex

from ..config import BackupInfo, CheckInfo, CopyInfo, PruneInfo

TargetInfo = BackupInfo | CopyInfo | PruneInfo | CheckInfo


def expand_keep(keep: str) -> list[str]:
    """Expand "7 30 365" into ["-keep", "7", "-keep", "30", "-keep", "365"]."""
    args: list[str] = []
    for rule in keep.split():
        args.extend(["-keep", rule])
    return args


def split_quote(quote: str) -> list[str]:
    """Split passthrough flags using shell quoting rules."""
    return shlex.split(quote) if quote else []


def build_backup_args(info: BackupInfo) -> list[str]:
    args = ["backup", "-storage", info.name, "-stats", "-threads", info.threads]
    if info.vss:
        args.append("-vss")
        if info.vss_timeout:
            args.extend(["-vss-timeout", info.vss_timeout])
    return args + split_quote(info.quote)


def build_copy_args(info: CopyInfo) -> list[str]:
    args = ["copy", "-from", info.from_storage, "-to", info.to_storage]
    args.extend(["-threads", info.threads])
    return args + split_quote(info.quote)


def build_prune_args(info: PruneInfo) -> list[str]:
    args = ["prune", "-storage", info.storage]
    args.extend(expand_keep(info.keep))
    args.extend(["-threads", info.threads])
    if info.all:
        args.append("-all")
    return args + split_quote(info.quote)


def build_check_args(info: CheckInfo) -> list[str]:
    args = ["check", "-storage", info.storage]
    if info.all:
        args.append("-all")
    return args + split_quote(info.quote)


def build_args(info: TargetInfo) -> list[str]:
    """Build the argument list for any kind of target."""
    if isinstance(info, BackupInfo):
        return build_backup_args(info)
    if isinstance(info, CopyInfo):
        return build_copy_args(info)
    if isinstance(info, PruneInfo):
        return build_prune_args(info)
    if isinstance(info, CheckInfo):
        return build_check_args(info)
    raise TypeError(f"Unsupported target type: {type(info).__name__}")
