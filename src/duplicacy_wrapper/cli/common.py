"""Shared CLI utilities and argument parsers."""

import argparse
import logging

from ..config import Config, ConfigError, find_config_file, load_config

logger = logging.getLogger(__name__)


def add_verbosity_args(parser: argparse.ArgumentParser) -> None:
    """Add verbosity-related arguments to a parser."""
    group = parser.add_argument_group("Output options")
    group.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose output",
    )
    group.add_argument(
        "-q",
        "--quiet",
        action="store_true",
        help="Suppress non-essential output",
    )
    group.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug output",
    )


def add_mode_args(parser: argparse.ArgumentParser) -> None:
    """Add the operation selection flags of the run command."""
    group = parser.add_argument_group("Operations")
    group.add_argument("--backup", action="store_true", help="Run duplicacy backup")
    group.add_argument("--copy", action="store_true", help="Run duplicacy copy")
    group.add_argument("--prune", action="store_true", help="Run duplicacy prune")
    group.add_argument("--check", action="store_true", help="Run duplicacy check")
    group.add_argument(
        "-a",
        "--all",
        action="store_true",
        help="Run backup, copy, prune and check",
    )


def get_log_level(args: argparse.Namespace) -> str:
    """Determine log level from parsed arguments.

    Args:
        args: Parsed command line arguments

    Returns:
        Log level string (DEBUG, INFO, WARNING, ERROR)
    """
    if getattr(args, "debug", False):
        return "DEBUG"
    elif getattr(args, "quiet", False):
        return "WARNING"
    elif getattr(args, "verbose", False):
        return "DEBUG"
    else:
        return "INFO"


def load_configuration(args: argparse.Namespace) -> Config | None:
    """Find and load the configuration, reporting problems.

    Returns:
        The loaded Config, or None if it could not be found or loaded.
    """
    try:
        config_path = find_config_file(getattr(args, "config", None))
        if config_path is None:
            print("No configuration file found.")
            print("Create one with: duplicacy-wrapper config init")
            return None

        logger.info("Using config file: %s", config_path)
        config, warnings = load_config(config_path)

        for warning in warnings:
            logger.warning("Config: %s", warning)

    except ConfigError as e:
        logger.error("Configuration error: %s", e)
        return None

    return config
