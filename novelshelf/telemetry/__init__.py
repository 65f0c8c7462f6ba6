"""Telemetry and observability helpers.

This package routes catalog and content diagnostics to structured log lines.
"""

from .logger import RunLogger

__all__ = ["RunLogger"]
