"""Shared typed data models for novelshelf.

This package contains dataclasses used across catalog and text modules to
avoid cross-module coupling and circular imports.
"""

from .datatypes import UNKNOWN_AUTHOR, Chapter, SearchOutcome, SearchState, Work

__all__ = [
    "UNKNOWN_AUTHOR",
    "Chapter",
    "SearchOutcome",
    "SearchState",
    "Work",
]
