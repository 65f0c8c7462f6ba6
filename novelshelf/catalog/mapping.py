"""Normalization of raw catalog records into `Work` values.

Responsibilities:
- Validate the search envelope and record shapes strictly.
- Apply the id, cover, text URL, author, summary, and tag derivation rules.
"""

from __future__ import annotations

from typing import Any, Mapping
from urllib.parse import quote

from ..errors import DecodeFailure
from ..models.datatypes import UNKNOWN_AUTHOR, Work


COVER_FORMAT_KEY = "image/jpeg"
TEXT_FORMAT_KEYS = ("text/plain; charset=utf-8", "text/plain")
SUBJECT_DELIMITER = " -- "
MAX_TAGS = 2
SUMMARY_LABEL = "Classic Literature"


def encode_query(query: str) -> str | None:
    """Strip and percent-encode a search query, returning `None` when nothing can be sent."""

    stripped = query.strip()
    if not stripped:
        return None
    try:
        encoded = quote(stripped, safe="", encoding="utf-8", errors="strict")
    except UnicodeEncodeError:
        return None
    return encoded or None


def normalize_author(authors: list[Mapping[str, Any]]) -> str:
    """Return the first author's name in `Last First` form, or `Unknown`."""

    if not authors:
        return UNKNOWN_AUTHOR
    return str(authors[0]["name"]).replace(", ", " ")


def derive_tags(subjects: list[str]) -> tuple[str, ...]:
    """Return the heads of the first two subjects, split on ` -- `."""

    return tuple(subject.split(SUBJECT_DELIMITER, 1)[0] for subject in subjects[:MAX_TAGS])


def resolve_text_url(formats: Mapping[str, str]) -> str | None:
    """Pick the plain-text resource, preferring the explicit UTF-8 variant."""

    for key in TEXT_FORMAT_KEYS:
        if key in formats:
            return formats[key]
    return None


def synthesize_summary(download_count: int) -> str:
    """Build the display summary from catalog metrics."""

    return f"{SUMMARY_LABEL}. Downloads: {download_count}"


def record_to_work(
    record: Mapping[str, Any],
    *,
    source_prefix: str = "gut",
    source_label: str = "Gutenberg",
) -> Work:
    """Map one validated catalog record onto a `Work`."""

    formats = record["formats"]
    return Work(
        id=f"{source_prefix}-{record['id']}",
        title=record["title"],
        author=normalize_author(record["authors"]),
        cover_image_url=formats.get(COVER_FORMAT_KEY, ""),
        source=source_label,
        summary=synthesize_summary(record["download_count"]),
        tags=derive_tags(record["subjects"]),
        text_url=resolve_text_url(formats),
    )


def parse_search_envelope(
    payload: Any,
    *,
    source_prefix: str = "gut",
    source_label: str = "Gutenberg",
) -> tuple[Work, ...]:
    """Decode a search envelope into readable works in response order.

    Any malformed record fails the whole envelope, and records without a
    plain-text format are dropped.

    Raises:
        DecodeFailure: If the envelope or any record has an unexpected shape.
    """

    if not isinstance(payload, Mapping):
        raise DecodeFailure("Search response must be a JSON object.")
    results = payload.get("results")
    if not isinstance(results, list):
        raise DecodeFailure("Search response is missing the `results` list.")

    works: list[Work] = []
    for position, record in enumerate(results):
        _validate_record(record, position)
        work = record_to_work(record, source_prefix=source_prefix, source_label=source_label)
        if work.text_url is not None:
            works.append(work)
    return tuple(works)


def _validate_record(record: Any, position: int) -> None:
    """Check field presence and types of one raw record."""

    def fail(detail: str) -> DecodeFailure:
        return DecodeFailure(f"Search result {position} {detail}.")

    if not isinstance(record, Mapping):
        raise fail("is not an object")
    if not _is_int(record.get("id")):
        raise fail("has no integer `id`")
    if not isinstance(record.get("title"), str):
        raise fail("has no string `title`")
    if not _is_int(record.get("download_count")):
        raise fail("has no integer `download_count`")

    authors = record.get("authors")
    if not isinstance(authors, list) or not all(
        isinstance(author, Mapping) and isinstance(author.get("name"), str)
        for author in authors
    ):
        raise fail("has malformed `authors`")

    formats = record.get("formats")
    if not isinstance(formats, Mapping) or not all(
        isinstance(key, str) and isinstance(value, str) for key, value in formats.items()
    ):
        raise fail("has malformed `formats`")

    subjects = record.get("subjects")
    if not isinstance(subjects, list) or not all(isinstance(item, str) for item in subjects):
        raise fail("has malformed `subjects`")


def _is_int(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)
