"""Shared pytest fixtures for the full novelshelf test suite."""

from __future__ import annotations

import io
from typing import Any, Iterator

import pytest

from novelshelf.telemetry.logger import RunLogger


@pytest.fixture
def log_sink() -> io.StringIO:
    """Provide an in-memory sink capturing structured log lines."""

    return io.StringIO()


@pytest.fixture
def run_logger(log_sink: io.StringIO) -> Iterator[RunLogger]:
    """Provide a run logger writing to `log_sink`, detached after the test."""

    logger = RunLogger(sink=log_sink)
    yield logger
    logger.close()


def make_record(
    book_id: int = 1342,
    *,
    title: str = "Pride and Prejudice",
    authors: list[dict[str, Any]] | None = None,
    formats: dict[str, str] | None = None,
    download_count: int = 52614,
    subjects: list[str] | None = None,
) -> dict[str, Any]:
    """Build one catalog record in the search response shape."""

    return {
        "id": book_id,
        "title": title,
        "authors": [{"name": "Austen, Jane"}] if authors is None else authors,
        "formats": (
            {
                "text/plain; charset=utf-8": f"https://www.gutenberg.org/ebooks/{book_id}.txt.utf-8",
                "image/jpeg": f"https://www.gutenberg.org/cache/epub/{book_id}/cover.jpg",
            }
            if formats is None
            else formats
        ),
        "download_count": download_count,
        "subjects": (
            ["Courtship -- Fiction", "England -- Fiction", "Sisters -- Fiction"]
            if subjects is None
            else subjects
        ),
    }


@pytest.fixture
def record_factory():
    """Expose the catalog record builder to tests."""

    return make_record
