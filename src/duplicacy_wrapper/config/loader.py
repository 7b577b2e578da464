"""TOML configuration loading and validation.

Handles config file discovery, parsing, and validation with helpful error messages.
"""

import shlex
import tomllib
from pathlib import Path
from typing import Any

from .schema import (
    BackupInfo,
    CheckInfo,
    Config,
    CopyInfo,
    EmailConfig,
    GlobalConfig,
    PruneInfo,
)


class ConfigError(Exception):
    """Configuration loading or validation error."""

    pass


# Config file search paths in priority order
CONFIG_PATHS = [
    Path.home() / ".config" / "duplicacy-wrapper" / "config.toml",
    Path("/etc/duplicacy-wrapper/config.toml"),
]


def find_config_file(explicit_path: str | None = None) -> Path | None:
    """Find configuration file.

    Args:
        explicit_path: Explicitly specified config path (highest priority)

    Returns:
        Path to config file, or None if not found
    """
    if explicit_path:
        path = Path(explicit_path)
        if path.exists():
            return path
        raise ConfigError(f"Config file not found: {explicit_path}")

    for path in CONFIG_PATHS:
        if path.exists():
            return path

    return None


def _text(value: Any, default: str = "") -> str:
    """Normalize a scalar to text; TOML users often write threads = 4."""
    if value is None:
        return default
    if isinstance(value, bool):
        raise ConfigError(f"Expected a string or number, got boolean {value!r}")
    text = str(value).strip()
    return text or default


def _int(value: Any, where: str) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ConfigError(f"Expected an integer for {where}, got {value!r}")


def _bool(value: Any, where: str) -> bool:
    # "false" as a string would otherwise be truthy
    if not isinstance(value, bool):
        raise ConfigError(f"Expected true or false for {where}, got {value!r}")
    return value


def _quote(data: dict[str, Any], where: str) -> str:
    """Passthrough flags, checked to split cleanly with shell quoting rules."""
    quote = _text(data.get("quote"))
    try:
        shlex.split(quote)
    except ValueError as e:
        raise ConfigError(f"Invalid quote for {where}: {e}")
    return quote


def _require(data: dict[str, Any], key: str, where: str) -> str:
    value = _text(data.get(key))
    if not value:
        raise ConfigError(f"Missing mandatory field: {where}.{key}")
    return value


def _parse_backup(data: dict[str, Any], index: int) -> BackupInfo:
    """Parse one [[storage]] entry."""
    return BackupInfo(
        name=_require(data, "name", f"storage[{index}]"),
        threads=_text(data.get("threads"), "1"),
        vss=_bool(data.get("vss", False), f"storage[{index}].vss"),
        vss_timeout=_text(data.get("vss_timeout")),
        quote=_quote(data, f"storage[{index}]"),
    )


def _parse_copy(data: dict[str, Any], index: int) -> CopyInfo:
    """Parse one [[copy]] entry."""
    return CopyInfo(
        from_storage=_require(data, "name", f"copy[{index}]"),
        to_storage=_require(data, "to", f"copy[{index}]"),
        threads=_text(data.get("threads"), "1"),
        quote=_quote(data, f"copy[{index}]"),
    )


def _parse_prune(data: dict[str, Any], index: int) -> PruneInfo:
    """Parse one [[prune]] entry."""
    return PruneInfo(
        storage=_require(data, "storage", f"prune[{index}]"),
        keep=_require(data, "keep", f"prune[{index}]"),
        threads=_text(data.get("threads"), "1"),
        all=_bool(data.get("all", True), f"prune[{index}].all"),
        quote=_quote(data, f"prune[{index}]"),
    )


def _parse_check(data: dict[str, Any], index: int) -> CheckInfo:
    """Parse one [[check]] entry."""
    return CheckInfo(
        storage=_require(data, "storage", f"check[{index}]"),
        all=_bool(data.get("all", False), f"check[{index}].all"),
        quote=_quote(data, f"check[{index}]"),
    )


def _parse_global(data: dict[str, Any]) -> GlobalConfig:
    """Parse global configuration from dict."""
    repository = _text(data.get("repository"))
    if not repository:
        raise ConfigError("Missing mandatory repository location: global.repository")

    return GlobalConfig(
        repository=repository,
        duplicacy_path=_text(data.get("duplicacy_path"), "duplicacy"),
        log_dir=_text(data.get("log_dir"), "~/.duplicacy-wrapper/logs"),
        log_keep=_int(data.get("log_keep", 5), "global.log_keep"),
    )


def _parse_email(data: dict[str, Any]) -> EmailConfig:
    """Parse [notify.email] settings."""
    recipients = data.get("to_addresses", [])
    if isinstance(recipients, str):
        recipients = [recipients]

    email = EmailConfig(
        enabled=_bool(data.get("enabled", False), "notify.email.enabled"),
        smtp_host=_text(data.get("smtp_host"), "localhost"),
        smtp_port=_int(data.get("smtp_port", 25), "notify.email.smtp_port"),
        starttls=_bool(data.get("starttls", False), "notify.email.starttls"),
        username=_text(data.get("username")),
        password=str(data.get("password", "")),
        from_address=_text(data.get("from_address")),
        to_addresses=list(recipients),
        send_on_start=_bool(data.get("send_on_start", False), "notify.email.send_on_start"),
    )
    if email.enabled and (not email.from_address or not email.to_addresses):
        raise ConfigError("Email notification requires from_address and to_addresses")
    return email


def _entries(data: dict[str, Any], key: str) -> list[dict[str, Any]]:
    entries = data.get(key, [])
    if not isinstance(entries, list) or not all(isinstance(e, dict) for e in entries):
        raise ConfigError(f"'{key}' must be an array of tables ([[{key}]])")
    return entries


def _validate_config(config: Config) -> list[str]:
    """Validate configuration and return list of warnings."""
    warnings = []

    if not config.repository.is_dir():
        warnings.append(f"Repository directory does not exist: {config.repository}")

    names = config.storage_names()
    if len(names) != len(set(names)):
        warnings.append("Duplicate storage names detected")

    known = set(names)
    for copy in config.copy_info:
        if copy.from_storage not in known:
            warnings.append(f"Copy source '{copy.from_storage}' is not a backup storage")
    for prune in config.prune_info:
        if prune.storage not in known:
            warnings.append(f"Prune storage '{prune.storage}' is not a backup storage")
    for check in config.check_info:
        if check.storage not in known:
            warnings.append(f"Check storage '{check.storage}' is not a backup storage")

    return warnings


def load_config(path: Path | str) -> tuple[Config, list[str]]:
    """Load and validate configuration from TOML file.

    Args:
        path: Path to configuration file

    Returns:
        Tuple of (Config object, list of warnings)

    Raises:
        ConfigError: If config is invalid or cannot be parsed
    """
    path = Path(path)

    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"Invalid TOML syntax: {e}")
    except OSError as e:
        raise ConfigError(f"Cannot read config file: {e}")

    global_config = _parse_global(data.get("global", {}))

    backup_info = [_parse_backup(d, i) for i, d in enumerate(_entries(data, "storage"))]
    if not backup_info:
        raise ConfigError("No storage locations defined in configuration")

    copy_info = [_parse_copy(d, i) for i, d in enumerate(_entries(data, "copy"))]

    prune_info = [_parse_prune(d, i) for i, d in enumerate(_entries(data, "prune"))]
    if not prune_info:
        raise ConfigError("No prune locations defined in configuration")

    check_info = [_parse_check(d, i) for i, d in enumerate(_entries(data, "check"))]
    if not check_info:
        raise ConfigError("No check locations defined in configuration")

    email = _parse_email(data.get("notify", {}).get("email", {}))

    config = Config(
        name=path.stem,
        global_config=global_config,
        backup_info=backup_info,
        copy_info=copy_info,
        prune_info=prune_info,
        check_info=check_info,
        email=email,
        path=path,
    )

    # Validate and collect warnings
    warnings = _validate_config(config)

    return config, warnings


def generate_example_config() -> str:
    """Generate example configuration file content."""
    return """# duplicacy-wrapper configuration
# See documentation for full options

[global]
repository = "/home/user"        # duplicacy repository (where .duplicacy lives)
duplicacy_path = "duplicacy"
log_dir = "~/.duplicacy-wrapper/logs"
log_keep = 5                     # rotated logs to keep

# Backup targets, run in order
[[storage]]
name = "b2"
threads = "10"

# [[storage]]
# name = "azure"
# threads = "5"
# vss = true
# vss_timeout = "400"
# quote = "-limit-rate 5000"

# Copy between storages
# [[copy]]
# name = "b2"
# to = "azure"
# threads = "5"

[[prune]]
storage = "b2"
keep = "0:365 30:180 7:30 1:7"   # expands to -keep 0:365 -keep 30:180 ...
all = true

[[check]]
storage = "b2"
all = true

[notify.email]
enabled = false
# smtp_host = "smtp.example.com"
# smtp_port = 587
# starttls = true
# username = "backup@example.com"
# password = "secret"
# from_address = "backup@example.com"
# to_addresses = ["me@example.com"]
# send_on_start = false
"""
