"""Structured run logging utilities.

Responsibilities:
- Emit concise, deterministic stage-level runtime logs through `loguru`.
- Keep payload details (response bodies, URLs with queries) out of log lines.
"""

from __future__ import annotations

import sys
from typing import TextIO

from loguru import logger as _loguru_logger


def _sanitize_context_value(value: object) -> str:
    """Convert context values into stable, shell-safe tokens."""

    raw = str(value).strip()
    if not raw:
        return "none"
    return "".join(
        character if character.isalnum() or character in {"-", "_", ".", ":", "/"} else "_"
        for character in raw
    )


def _format_context(context: dict[str, object]) -> str:
    """Serialize context key/value pairs in deterministic key order."""

    if not context:
        return ""
    tokens = [
        f"{key}={_sanitize_context_value(context[key])}"
        for key in sorted(context.keys())
    ]
    return " " + " ".join(tokens)


class RunLogger:
    """Emit deterministic stage logs for catalog search and content fetch activity."""

    def __init__(
        self,
        sink: TextIO | None = None,
        level: str = "INFO",
        *,
        exclusive: bool = False,
    ) -> None:
        """Bind a `loguru` logger, attaching a dedicated handler when asked to.

        Without `sink` or `exclusive`, no handler is added and lines go through
        whatever `loguru` handlers the application has configured. With a
        `sink`, a filtered handler writes plain lines there. With `exclusive`,
        every previously configured `loguru` handler is removed first so the
        sink (stderr by default) receives the only rendering of each line.
        """

        self._logger = _loguru_logger.bind(run_logger=id(self))
        self._handler_id: int | None = None
        if sink is None and not exclusive:
            return
        if exclusive:
            _loguru_logger.remove()
        self._handler_id = _loguru_logger.add(
            sink or sys.stderr,
            format="{message}",
            level=level,
            colorize=False,
            filter=lambda record: record["extra"].get("run_logger") == id(self),
        )

    def close(self) -> None:
        """Detach the handler added for this logger, if any."""

        if self._handler_id is not None:
            _loguru_logger.remove(self._handler_id)
            self._handler_id = None

    def _emit(self, level: str, event: str, stage: str, **context: object) -> None:
        """Emit one structured runtime log line."""

        line = f"[phase] level={level} stage={stage} event={event}{_format_context(context)}"
        self._logger.log(level, line)

    def log_stage_start(self, stage: str, **context: object) -> None:
        """Emit a stage-start runtime event."""

        self._emit("INFO", "start", stage, **context)

    def log_stage_complete(self, stage: str, **context: object) -> None:
        """Emit a stage-complete runtime event."""

        self._emit("INFO", "complete", stage, **context)

    def log_stage_skipped(self, stage: str, reason: str) -> None:
        """Emit a stage-skipped runtime event."""

        self._emit("INFO", "skipped", stage, reason=reason)

    def log_stage_failure(self, stage: str, error_type: str, **context: object) -> None:
        """Emit a stage-failure runtime event without sensitive payload details."""

        self._emit("ERROR", "failure", stage, error_type=error_type, **context)
