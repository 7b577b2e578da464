"""duplicacy-wrapper: duplicacy_wrapper/__init__.py."""

__version__ = "0.3.0"


def storage_label(*names: str) -> str:
    """Join storage names for display, e.g. 'b2 -> azure'."""
    return " -> ".join(n for n in names if n)
