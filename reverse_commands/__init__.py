"""Per-user shell wrappers whose names are reversed commands."""

from .cli import main

__all__ = ["main"]
