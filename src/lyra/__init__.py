"""Lyra - lexical prompt routing for coding-assistant hooks."""

__version__ = "2.0.0"
