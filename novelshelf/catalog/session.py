"""Caller-scoped search state holder.

Responsibilities:
- Track the "is searching" flag and current results for one browsing session.
- Publish state snapshots to subscribed listeners after every change.
- Order overlapping searches by generation, cancelling superseded ones when enabled.

All mutation happens on the event loop that awaits `SearchSession.search`.
"""

from __future__ import annotations

import asyncio
from typing import Callable

from ..errors import CatalogError
from ..models.datatypes import SearchState, Work
from .client import CatalogClient
from .mapping import encode_query


SearchListener = Callable[[SearchState], None]


class SearchSession:
    """Run catalog searches and hold their published state."""

    def __init__(self, client: CatalogClient, *, cancel_superseded: bool | None = None) -> None:
        self._client = client
        self.cancel_superseded = (
            client.config.cancel_superseded if cancel_superseded is None else cancel_superseded
        )
        self.is_searching = False
        self.results: tuple[Work, ...] = ()
        self.query: str | None = None
        self.last_diagnostic: CatalogError | None = None
        self._generation = 0
        self._in_flight: asyncio.Task | None = None
        self._listeners: list[SearchListener] = []

    def subscribe(self, listener: SearchListener) -> Callable[[], None]:
        """Register a listener and return a callable that removes it."""

        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def snapshot(self) -> SearchState:
        """Return the current state as an immutable value."""

        return SearchState(
            is_searching=self.is_searching,
            results=self.results,
            query=self.query,
            last_diagnostic=self.last_diagnostic,
        )

    async def search(self, query: str) -> tuple[Work, ...]:
        """Run one search and return the session's results afterwards.

        An empty or unencodable query is a no-op. Otherwise the flag is raised
        at the start and cleared exactly once when this call finishes, whatever
        the outcome, unless superseded searches are cancelled and a newer search
        has been issued; that search clears it instead.
        """

        if encode_query(query) is None:
            return self.results

        self._generation += 1
        generation = self._generation
        previous = self._in_flight
        if self.cancel_superseded and previous is not None and not previous.done():
            previous.cancel()

        task = asyncio.ensure_future(self._client.search(query))
        self._in_flight = task
        self._set_searching(True)
        try:
            outcome = await task
        except asyncio.CancelledError:
            if not task.cancelled() or generation == self._generation:
                raise
            # superseded by a newer search
            return self.results
        finally:
            if self._in_flight is task:
                self._in_flight = None
            if not (self.cancel_superseded and generation != self._generation):
                self._set_searching(False)

        if self.cancel_superseded and generation != self._generation:
            return self.results

        self.query = query
        self.results = outcome.works
        self.last_diagnostic = outcome.diagnostic
        self._publish()
        return self.results

    def _set_searching(self, value: bool) -> None:
        self.is_searching = value
        self._publish()

    def _publish(self) -> None:
        state = self.snapshot()
        for listener in list(self._listeners):
            listener(state)
