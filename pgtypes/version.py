"""Release version of the package."""

from __future__ import annotations


def version() -> str:
    """Return the current release version."""
    return "10.10.6"