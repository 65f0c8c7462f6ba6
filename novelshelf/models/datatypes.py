"""Core datatypes shared across novelshelf modules.

Responsibilities:
- Represent immutable records produced by catalog search and chapter reads.
- Carry degraded outcomes as values instead of raised errors.

Key types:
- `Work`, `Chapter`, `SearchOutcome`, and `SearchState`.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from ..errors import CatalogError


UNKNOWN_AUTHOR = "Unknown"


@dataclass(frozen=True, slots=True)
class Work:
    """One catalog entry available for reading.

    Attributes:
        id: Namespaced identifier, `<source-prefix>-<catalog id>`.
        title: Work title as supplied by the catalog.
        author: Normalized first author name, or `Unknown`.
        cover_image_url: JPEG cover URL, empty when the catalog has none.
        source: Display label of the catalog the work came from.
        summary: Synthesized human-readable description.
        tags: At most two subject heads.
        text_url: Plain-text resource URL; always set on surfaced works.
    """

    id: str
    title: str
    author: str = UNKNOWN_AUTHOR
    cover_image_url: str = ""
    source: str = "Gutenberg"
    summary: str = ""
    tags: tuple[str, ...] = field(default_factory=tuple)
    text_url: str | None = None


@dataclass(frozen=True, slots=True)
class Chapter:
    """A chapter as shown to a reader.

    Attributes:
        title: Display title, `Chapter <n>` with a 1-based number.
        content: Opaque chapter text or a fixed error message.
    """

    title: str
    content: str


@dataclass(frozen=True, slots=True)
class SearchOutcome:
    """Result of one catalog search.

    Attributes:
        works: Normalized works in response order.
        diagnostic: Error that degraded the search to empty, if any.
    """

    works: tuple[Work, ...] = field(default_factory=tuple)
    diagnostic: CatalogError | None = None

    @property
    def degraded(self) -> bool:
        """Return whether the search failed and produced no results."""

        return self.diagnostic is not None


@dataclass(frozen=True, slots=True)
class SearchState:
    """Snapshot of a search session published to listeners."""

    is_searching: bool
    results: tuple[Work, ...]
    query: str | None = None
    last_diagnostic: CatalogError | None = None
