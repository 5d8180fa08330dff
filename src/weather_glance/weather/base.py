"""Provider-agnostic weather and geocoding interfaces."""

from __future__ import annotations

from abc import ABC, abstractmethod

from .models import CityRecord, GeoSuggestion, WeatherSnapshot


class WeatherProvider(ABC):
    """Base contract for current-conditions providers."""

    provider_name: str = "unknown"

    def ensure_ready(self) -> None:
        """Raise MissingCredential when the provider cannot be called at all."""

    @abstractmethod
    async def fetch_current(
        self,
        *,
        lat: float,
        lon: float,
        city: CityRecord | None = None,
    ) -> WeatherSnapshot:
        """Fetch and normalize current conditions for a coordinate pair."""


class Geocoder(ABC):
    """Base contract for incremental city-name lookups."""

    @abstractmethod
    async def search(self, query: str, *, limit: int) -> list[GeoSuggestion]:
        """Return up to ``limit`` ranked matches for a partial city name."""
