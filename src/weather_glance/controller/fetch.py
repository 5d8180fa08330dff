"""Weather fetch lifecycle: idle -> loading -> success | failure."""

from __future__ import annotations

import logging
from collections.abc import Callable

from ..exceptions import (
    MalformedUpstreamData,
    MissingCredential,
    TransportError,
    WeatherProviderError,
)
from ..weather.base import WeatherProvider
from ..weather.cities import CityCatalog
from ..weather.models import CityRecord, WeatherSnapshot
from .state import RequestSequencer, RequestState

WeatherState = RequestState[WeatherSnapshot]


class FetchOrchestrator:
    """Own the weather request state for one view.

    Every call to :meth:`fetch` resets the state to loading immediately, and a
    result is applied only if no newer fetch was issued while it was in flight.
    """

    def __init__(
        self,
        provider: WeatherProvider,
        logger: logging.Logger,
        *,
        on_change: Callable[[WeatherState], None] | None = None,
    ) -> None:
        self.provider = provider
        self.logger = logger
        self._on_change = on_change
        self._sequence = RequestSequencer()
        self._state: WeatherState = RequestState.idle()

    @property
    def state(self) -> WeatherState:
        return self._state

    async def fetch(
        self,
        lat: float,
        lon: float,
        *,
        city: CityRecord | None = None,
    ) -> WeatherState:
        """Fetch current weather for a coordinate pair and return the current state."""
        token = self._sequence.issue()
        try:
            self.provider.ensure_ready()
        except MissingCredential as exc:
            self.logger.error("Weather fetch blocked: %s", exc)
            self._apply(RequestState.failure(str(exc), "missing_credential"))
            return self._state

        self._apply(RequestState.loading())
        outcome = await self._run(token, lat, lon, city)
        if not self._sequence.is_current(token):
            self.logger.debug("Discarding stale weather result (request %d)", token)
            return self._state
        self._apply(outcome)
        return self._state

    async def fetch_city(self, city: CityRecord) -> WeatherState:
        return await self.fetch(city.latitude, city.longitude, city=city)

    async def fetch_random(self, catalog: CityCatalog) -> WeatherState:
        """Fetch weather for a randomly chosen catalog city."""
        return await self.fetch_city(catalog.random_city())

    async def _run(
        self,
        token: int,
        lat: float,
        lon: float,
        city: CityRecord | None,
    ) -> WeatherState:
        context = {"provider": self.provider.provider_name, "request_id": token}
        try:
            snapshot = await self.provider.fetch_current(lat=lat, lon=lon, city=city)
        except MissingCredential as exc:
            return RequestState.failure(str(exc), "missing_credential")
        except TransportError as exc:
            self.logger.warning("Weather request %d failed: %s", token, exc, extra=context)
            return RequestState.failure(str(exc), "transport")
        except MalformedUpstreamData as exc:
            self.logger.warning(
                "Weather request %d returned malformed data at %s: %s",
                token, exc.field_path, exc,
                extra=context,
            )
            return RequestState.failure(str(exc), "malformed")
        except WeatherProviderError as exc:
            self.logger.warning("Weather request %d failed: %s", token, exc, extra=context)
            return RequestState.failure(str(exc), "unknown")
        except Exception as exc:  # noqa: BLE001 - every failure stays recoverable
            self.logger.exception(
                "Unexpected weather fetch failure: %s", exc, extra=context
            )
            return RequestState.failure(str(exc), "unknown")

        self.logger.info(
            "Weather request %d succeeded for %s (%s)",
            token, snapshot.location_name, snapshot.provider,
            extra=context,
        )
        return RequestState.success(snapshot)

    def _apply(self, state: WeatherState) -> None:
        self._state = state
        if self._on_change is not None:
            self._on_change(state)
