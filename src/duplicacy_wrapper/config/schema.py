"""Configuration schema definitions using dataclasses.

Defines the structure for TOML configuration with sensible defaults.
Target entries are frozen: they are read-only for the duration of a run.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional


@dataclass(frozen=True)
class BackupInfo:
    """One `duplicacy backup` target.

    Attributes:
        name: Storage name as known to the duplicacy repository
        threads: Upload thread count, kept as text
        vss: Enable volume shadow copy (Windows) / snapshot (macOS)
        vss_timeout: Timeout passed through with -vss-timeout
        quote: Extra flags appended verbatim to the command line
    """

    name: str
    threads: str = "1"
    vss: bool = False
    vss_timeout: str = ""
    quote: str = ""


@dataclass(frozen=True)
class CopyInfo:
    """One `duplicacy copy` target.

    Attributes:
        from_storage: Source storage name
        to_storage: Destination storage name
        threads: Copy thread count, kept as text
        quote: Extra flags appended verbatim to the command line
    """

    from_storage: str
    to_storage: str
    threads: str = "1"
    quote: str = ""


@dataclass(frozen=True)
class PruneInfo:
    """One `duplicacy prune` target.

    Attributes:
        storage: Storage name to prune
        keep: Space separated retention rules, e.g. "0:365 30:180 7:30"
        threads: Thread count, kept as text
        all: Apply to snapshots of all repositories on the storage
        quote: Extra flags appended verbatim to the command line
    """

    storage: str
    keep: str
    threads: str = "1"
    all: bool = True
    quote: str = ""


@dataclass(frozen=True)
class CheckInfo:
    """One `duplicacy check` target."""

    storage: str
    all: bool = False
    quote: str = ""


@dataclass
class EmailConfig:
    """SMTP settings for run reports.

    Attributes:
        enabled: Send mail at all
        smtp_host: SMTP server host name
        smtp_port: SMTP server port
        starttls: Upgrade the connection with STARTTLS
        username: Login name (empty for no login)
        password: Login password
        from_address: Sender address
        to_addresses: Recipients
        send_on_start: Also send a mail when the run starts
    """

    enabled: bool = False
    smtp_host: str = "localhost"
    smtp_port: int = 25
    starttls: bool = False
    username: str = ""
    password: str = ""
    from_address: str = ""
    to_addresses: list[str] = field(default_factory=list)
    send_on_start: bool = False


@dataclass
class GlobalConfig:
    """Global configuration settings.

    Attributes:
        repository: Duplicacy repository directory (working directory of the tool)
        duplicacy_path: Path to the duplicacy binary
        log_dir: Directory holding run logs and the run lock
        log_keep: Number of rotated logs to keep
    """

    repository: str = ""
    duplicacy_path: str = "duplicacy"
    log_dir: str = "~/.duplicacy-wrapper/logs"
    log_keep: int = 5


@dataclass
class Config:
    """Root configuration object.

    Attributes:
        name: Configuration name (file stem), used for log and lock files
        global_config: Global settings
        backup_info: Backup targets in configuration order
        copy_info: Copy targets in configuration order
        prune_info: Prune targets in configuration order
        check_info: Check targets in configuration order
        email: Mail notification settings
    """

    name: str = "default"
    global_config: GlobalConfig = field(default_factory=GlobalConfig)
    backup_info: list[BackupInfo] = field(default_factory=list)
    copy_info: list[CopyInfo] = field(default_factory=list)
    prune_info: list[PruneInfo] = field(default_factory=list)
    check_info: list[CheckInfo] = field(default_factory=list)
    email: EmailConfig = field(default_factory=EmailConfig)
    path: Optional[Path] = None

    @property
    def log_dir(self) -> Path:
        return Path(self.global_config.log_dir).expanduser()

    @property
    def repository(self) -> Path:
        return Path(self.global_config.repository).expanduser()

    def storage_names(self) -> list[str]:
        """Names of all storages listed for backup."""
        return [b.name for b in self.backup_info]
