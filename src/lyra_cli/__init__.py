"""Lyra operator CLI: install hooks, inspect classification."""

from lyra import __version__

__all__ = ["__version__"]
