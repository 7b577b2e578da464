"""Command line interface for duplicacy-wrapper."""
