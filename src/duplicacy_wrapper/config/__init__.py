"""Configuration system for duplicacy-wrapper.

This module provides TOML-based configuration loading, validation,
and schema definitions for the backup, copy, prune and check targets.
"""

from .loader import ConfigError, find_config_file, generate_example_config, load_config
from .schema import (
    BackupInfo,
    CheckInfo,
    Config,
    CopyInfo,
    EmailConfig,
    GlobalConfig,
    PruneInfo,
)

__all__ = [
    "BackupInfo",
    "CopyInfo",
    "PruneInfo",
    "CheckInfo",
    "EmailConfig",
    "GlobalConfig",
    "Config",
    "load_config",
    "find_config_file",
    "generate_example_config",
    "ConfigError",
]
