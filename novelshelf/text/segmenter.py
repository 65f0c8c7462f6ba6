"""Chapter segmentation of fetched plain-text works.

Responsibilities:
- Fetch a work's plain-text resource off the event loop.
- Split the text on the literal `CHAPTER` marker and select one chapter.
- Resolve every failure to a fixed display string instead of raising.
"""

from __future__ import annotations

import asyncio
from urllib.parse import urlparse

from ..catalog.http import HTTPTransport
from ..config import NovelshelfConfig
from ..errors import CatalogError, NotFound
from ..models.datatypes import Chapter, Work
from ..telemetry.logger import RunLogger


CHAPTER_MARKER = "CHAPTER"
NO_VALID_URL_MESSAGE = "Error: No valid URL found."
LOAD_FAILED_MESSAGE = "Failed to load content."


def split_fragments(text: str) -> list[str]:
    """Split text on every literal marker occurrence.

    The match is a case-sensitive plain substring, so words such as
    `CHAPTERS` split too. Fragment 0 is front matter.
    """

    return text.split(CHAPTER_MARKER)


def select_chapter(text: str, chapter_index: int) -> str:
    """Return the display text of the 0-based chapter `chapter_index`.

    Text without any marker is returned unchanged. An index past the last
    chapter falls back to the front matter fragment.
    """

    fragments = split_fragments(text)
    if len(fragments) == 1:
        return text

    target_index = chapter_index + 1
    if not 0 <= target_index < len(fragments):
        target_index = 0
    return f"{CHAPTER_MARKER} {fragments[target_index]}"


def chapter_title(chapter_index: int) -> str:
    """Return the reader title for a 0-based chapter index."""

    return f"Chapter {chapter_index + 1}"


def resolve_fetch_url(work: Work) -> str:
    """Return the work's text URL when it is an absolute http(s) URL.

    Raises:
        NotFound: If the work has no text URL or it cannot be parsed.
    """

    if not work.text_url:
        raise NotFound(f"Work `{work.id}` has no text URL.")
    try:
        parsed = urlparse(work.text_url)
    except ValueError as exc:
        raise NotFound(f"Work `{work.id}` has an unparsable text URL.") from exc
    if parsed.scheme not in {"http", "https"} or not parsed.netloc:
        raise NotFound(f"Work `{work.id}` has an unparsable text URL.")
    return work.text_url


class ChapterSegmenter:
    """Fetch a work's text and return one heuristically delimited chapter.

    Chapters are recomputed from the source text on every call.
    """

    def __init__(
        self,
        config: NovelshelfConfig | None = None,
        *,
        transport: HTTPTransport | None = None,
        run_logger: RunLogger | None = None,
    ) -> None:
        self.config = config or NovelshelfConfig()
        self._transport = transport or HTTPTransport(
            timeout_seconds=self.config.request_timeout_seconds,
            user_agent=self.config.user_agent,
        )
        self._run_logger = run_logger or RunLogger()

    async def fetch_chapter(self, work: Work, chapter_index: int) -> str:
        """Return chapter text, the whole text, or a fixed error message."""

        try:
            url = resolve_fetch_url(work)
        except NotFound as exc:
            self._log_failure(exc, work)
            return NO_VALID_URL_MESSAGE

        self._run_logger.log_stage_start("fetch", work=work.id, chapter=chapter_index)
        try:
            text = await asyncio.to_thread(self._transport.get_text, url)
        except CatalogError as exc:
            self._log_failure(exc, work)
            return LOAD_FAILED_MESSAGE

        chapter_text = select_chapter(text, chapter_index)
        self._run_logger.log_stage_complete(
            "fetch",
            work=work.id,
            chapter=chapter_index,
            fragments=len(split_fragments(text)),
        )
        return chapter_text

    async def read(self, work: Work, chapter_index: int) -> Chapter:
        """Return the requested chapter with its reader title."""

        content = await self.fetch_chapter(work, chapter_index)
        return Chapter(title=chapter_title(chapter_index), content=content)

    def _log_failure(self, exc: CatalogError, work: Work) -> None:
        self._run_logger.log_stage_failure(
            "fetch",
            error_type=type(exc).__name__,
            failure_kind=exc.failure_kind,
            work=work.id,
        )
