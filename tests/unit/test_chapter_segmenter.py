"""Unit tests for marker-based chapter segmentation and content fetching."""

from __future__ import annotations

import asyncio
import io

import pytest
import requests

from novelshelf.models.datatypes import Work
from novelshelf.telemetry.logger import RunLogger
from novelshelf.text.segmenter import (
    LOAD_FAILED_MESSAGE,
    NO_VALID_URL_MESSAGE,
    ChapterSegmenter,
    chapter_title,
    select_chapter,
    split_fragments,
)


class _MockRequestsResponse:
    """Minimal requests response mock for text payloads."""

    def __init__(self, *, payload: bytes, status_code: int = 200) -> None:
        """Initialize response payload and status."""

        self.content = payload
        self.status_code = status_code

    def raise_for_status(self) -> None:
        """Raise HTTPError for failure status codes."""

        if self.status_code >= 400:
            raise requests.HTTPError(f"HTTP {self.status_code}", response=self)


def _work(text_url: str | None = "https://www.gutenberg.org/ebooks/84.txt.utf-8") -> Work:
    """Build a work pointing at `text_url`."""

    return Work(id="gut-84", title="Frankenstein", text_url=text_url)


def _serve(monkeypatch: pytest.MonkeyPatch, payload: bytes, status_code: int = 200) -> list[str]:
    """Serve `payload` for every GET and return the list of requested URLs."""

    requested: list[str] = []

    def _mock_get(url: str, **_kwargs: object) -> _MockRequestsResponse:
        """Record the URL and return the payload."""

        requested.append(url)
        return _MockRequestsResponse(payload=payload, status_code=status_code)

    monkeypatch.setattr("novelshelf.catalog.http.requests.get", _mock_get)
    return requested


def test_split_fragments_keeps_front_matter_and_spacing() -> None:
    """Splitting should consume markers and keep surrounding whitespace."""

    assert split_fragments("PREFACE CHAPTER A CHAPTER B") == ["PREFACE ", " A ", " B"]


def test_select_chapter_skips_front_matter_and_clamps_out_of_range() -> None:
    """Index 0 is the first marked chapter; out-of-range indices fall back to fragment 0."""

    text = "PREFACE CHAPTER A CHAPTER B"

    assert select_chapter(text, 0) == "CHAPTER  A "
    assert select_chapter(text, 1) == "CHAPTER  B"
    assert select_chapter(text, 2) == "CHAPTER PREFACE "
    assert select_chapter(text, 5) == "CHAPTER PREFACE "
    assert select_chapter(text, -7) == "CHAPTER PREFACE "


@pytest.mark.parametrize("chapter_index", [0, 3, 19])
def test_select_chapter_without_marker_returns_text_unchanged(chapter_index: int) -> None:
    """Short works without markers are a single pseudo-chapter."""

    text = "Chapter one is lower case.\nNo upper-case marker here."

    assert select_chapter(text, chapter_index) == text


def test_select_chapter_matches_marker_inside_words() -> None:
    """The marker is a plain substring, so `CHAPTERS` also splits."""

    assert split_fragments("CONTENTS: CHAPTERS I-II") == ["CONTENTS: ", "S I-II"]
    assert select_chapter("CONTENTS: CHAPTERS I-II", 0) == "CHAPTER S I-II"


def test_chapter_title_is_one_based() -> None:
    """Reader titles should number chapters from 1."""

    assert chapter_title(0) == "Chapter 1"
    assert chapter_title(9) == "Chapter 10"


def test_fetch_chapter_returns_selected_chapter(
    monkeypatch: pytest.MonkeyPatch, run_logger: RunLogger, log_sink: io.StringIO
) -> None:
    """Fetched UTF-8 text should be split and the requested chapter returned."""

    text = "Title page\nCHAPTER I\nIt was a dark night.\nCHAPTER II\nMorning came.\n"
    requested = _serve(monkeypatch, text.encode("utf-8"))
    segmenter = ChapterSegmenter(run_logger=run_logger)

    chapter_text = asyncio.run(segmenter.fetch_chapter(_work(), 1))

    assert requested == ["https://www.gutenberg.org/ebooks/84.txt.utf-8"]
    assert chapter_text == "CHAPTER  II\nMorning came.\n"
    assert "stage=fetch event=complete chapter=1 fragments=3 work=gut-84" in log_sink.getvalue()


def test_fetch_chapter_recomputes_on_every_read(
    monkeypatch: pytest.MonkeyPatch, run_logger: RunLogger
) -> None:
    """Each read should fetch the source again."""

    requested = _serve(monkeypatch, "Only text".encode("utf-8"))
    segmenter = ChapterSegmenter(run_logger=run_logger)

    first = asyncio.run(segmenter.fetch_chapter(_work(), 0))
    second = asyncio.run(segmenter.fetch_chapter(_work(), 4))

    assert first == second == "Only text"
    assert len(requested) == 2


@pytest.mark.parametrize("text_url", [None, "", "not a url", "ftp://example.org/book.txt"])
def test_fetch_chapter_without_valid_url_skips_network(
    monkeypatch: pytest.MonkeyPatch,
    run_logger: RunLogger,
    log_sink: io.StringIO,
    text_url: str | None,
) -> None:
    """Missing or unusable URLs should yield the fixed message with no I/O."""

    requested = _serve(monkeypatch, b"unused")
    segmenter = ChapterSegmenter(run_logger=run_logger)

    result = asyncio.run(segmenter.fetch_chapter(_work(text_url), 0))

    assert result == NO_VALID_URL_MESSAGE == "Error: No valid URL found."
    assert requested == []
    assert "failure_kind=not_found" in log_sink.getvalue()


@pytest.mark.parametrize(
    ("payload", "status_code"),
    [
        (b"", 200),
        (b"\xc3\x28 invalid continuation", 200),
        (b"Not Found", 404),
    ],
)
def test_fetch_chapter_load_failures_return_fixed_message(
    monkeypatch: pytest.MonkeyPatch,
    run_logger: RunLogger,
    payload: bytes,
    status_code: int,
) -> None:
    """Empty, non-UTF-8, or failed responses should resolve to the load-failure string."""

    _serve(monkeypatch, payload, status_code)
    segmenter = ChapterSegmenter(run_logger=run_logger)

    result = asyncio.run(segmenter.fetch_chapter(_work(), 0))

    assert result == LOAD_FAILED_MESSAGE == "Failed to load content."


def test_fetch_chapter_transport_failure_returns_fixed_message(
    monkeypatch: pytest.MonkeyPatch, run_logger: RunLogger
) -> None:
    """Transport errors should never propagate to the caller."""

    def _mock_get(*_args: object, **_kwargs: object) -> _MockRequestsResponse:
        """Raise transport error."""

        raise requests.ConnectionError("connection reset")

    monkeypatch.setattr("novelshelf.catalog.http.requests.get", _mock_get)
    segmenter = ChapterSegmenter(run_logger=run_logger)

    assert asyncio.run(segmenter.fetch_chapter(_work(), 0)) == LOAD_FAILED_MESSAGE


def test_read_wraps_content_with_reader_title(
    monkeypatch: pytest.MonkeyPatch, run_logger: RunLogger
) -> None:
    """`read` should pair the chapter text with a 1-based title."""

    _serve(monkeypatch, b"Front CHAPTER one CHAPTER two")
    segmenter = ChapterSegmenter(run_logger=run_logger)

    chapter = asyncio.run(segmenter.read(_work(), 0))

    assert chapter.title == "Chapter 1"
    assert chapter.content == "CHAPTER  one "
