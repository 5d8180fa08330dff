"""Incremental city-name search with stale-result discarding."""

from __future__ import annotations

import logging
from collections.abc import Callable

from ..weather.base import Geocoder
from ..weather.models import GeoSuggestion
from .fetch import FetchOrchestrator, WeatherState
from .state import RequestSequencer, RequestState

SearchState = RequestState[list[GeoSuggestion]]


class GeocodingSearchController:
    """Track one search query and the suggestions for it.

    Search is advisory: lookup failures leave the suggestion list empty and are
    only logged.
    """

    def __init__(
        self,
        geocoder: Geocoder,
        orchestrator: FetchOrchestrator,
        logger: logging.Logger,
        *,
        limit: int = 5,
        min_query_length: int = 2,
        on_change: Callable[[SearchState], None] | None = None,
    ) -> None:
        self.geocoder = geocoder
        self.orchestrator = orchestrator
        self.logger = logger
        self.limit = limit
        self.min_query_length = min_query_length
        self._on_change = on_change
        self._sequence = RequestSequencer()
        self._state: SearchState = RequestState.idle()
        self.query = ""
        self.suggestions_visible = False

    @property
    def state(self) -> SearchState:
        return self._state

    @property
    def suggestions(self) -> list[GeoSuggestion]:
        if self._state.is_success and self._state.payload is not None:
            return list(self._state.payload)
        return []

    async def set_query(self, query: str) -> SearchState:
        """Update the query and look up matches when it is long enough."""
        self.query = query
        if len(query.strip()) < self.min_query_length:
            self._sequence.invalidate()
            self.suggestions_visible = False
            self._apply(RequestState.idle())
            return self._state

        token = self._sequence.issue()
        self._apply(RequestState.loading())
        try:
            matches = await self.geocoder.search(query.strip(), limit=self.limit)
        except Exception as exc:  # noqa: BLE001 - search failures are never surfaced
            outcome: SearchState = RequestState.failure(str(exc), "unknown")
            self.logger.warning(
                "City search for %r failed: %s", query, exc, extra={"query": query}
            )
        else:
            outcome = RequestState.success(matches[: self.limit])

        if not self._sequence.is_current(token):
            self.logger.debug("Discarding stale search result for %r", query)
            return self._state
        self.suggestions_visible = outcome.is_success
        self._apply(outcome)
        return self._state

    async def select(self, suggestion: GeoSuggestion) -> WeatherState:
        """Adopt a suggestion as the query and fetch its weather."""
        self._sequence.invalidate()
        self.suggestions_visible = False
        self.query = suggestion.label
        self._apply(RequestState.idle())
        return await self.orchestrator.fetch_city(suggestion)

    def _apply(self, state: SearchState) -> None:
        self._state = state
        if self._on_change is not None:
            self._on_change(state)
