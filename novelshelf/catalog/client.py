"""Catalog search client.

Responsibilities:
- Build the catalog search request for a free-text query.
- Run the blocking HTTP call off the event loop.
- Degrade every failure to an empty `SearchOutcome` carrying a logged diagnostic.
"""

from __future__ import annotations

import asyncio

from ..config import NovelshelfConfig
from ..errors import CatalogError
from ..models.datatypes import SearchOutcome, Work
from ..telemetry.logger import RunLogger
from .http import HTTPTransport
from .mapping import encode_query, parse_search_envelope


class CatalogClient:
    """Query the remote catalog and normalize its records into works."""

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

    def search_url(self, encoded_query: str) -> str:
        """Return the catalog request URL for an already encoded query."""

        return f"{self.config.catalog_url}?search={encoded_query}"

    async def search(self, query: str) -> SearchOutcome:
        """Search the catalog and return readable works in response order.

        An empty or unencodable query returns an empty outcome without any
        request. Failures never propagate; they are logged and reported through
        `SearchOutcome.diagnostic`.
        """

        encoded = encode_query(query)
        if encoded is None:
            self._run_logger.log_stage_skipped("search", reason="unencodable_query")
            return SearchOutcome()

        self._run_logger.log_stage_start("search")
        try:
            works = await asyncio.to_thread(self._search_blocking, encoded)
        except CatalogError as exc:
            self._run_logger.log_stage_failure(
                "search",
                error_type=type(exc).__name__,
                failure_kind=exc.failure_kind,
            )
            return SearchOutcome(diagnostic=exc)

        self._run_logger.log_stage_complete("search", works=len(works))
        return SearchOutcome(works=works)

    def _search_blocking(self, encoded_query: str) -> tuple[Work, ...]:
        payload = self._transport.get_json(self.search_url(encoded_query))
        return parse_search_envelope(
            payload,
            source_prefix=self.config.source_prefix,
            source_label=self.config.source_label,
        )
