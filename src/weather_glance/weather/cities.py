"""Built-in catalog of well-known cities."""

from __future__ import annotations

import random

from .base import Geocoder
from .models import CityRecord, GeoSuggestion

DEFAULT_CITIES: tuple[CityRecord, ...] = (
    CityRecord(name="Beijing", country="China", latitude=39.9042, longitude=116.4074),
    CityRecord(name="Shanghai", country="China", latitude=31.2304, longitude=121.4737),
    CityRecord(name="Tokyo", country="Japan", latitude=35.6762, longitude=139.6503),
    CityRecord(name="New York", country="United States", latitude=40.7128, longitude=-74.0060),
    CityRecord(name="London", country="United Kingdom", latitude=51.5074, longitude=-0.1278),
    CityRecord(name="Paris", country="France", latitude=48.8566, longitude=2.3522),
    CityRecord(name="Sydney", country="Australia", latitude=-33.8688, longitude=151.2093),
    CityRecord(name="Berlin", country="Germany", latitude=52.5200, longitude=13.4050),
    CityRecord(name="Moscow", country="Russia", latitude=55.7558, longitude=37.6173),
    CityRecord(name="Seoul", country="South Korea", latitude=37.5665, longitude=126.9780),
)


class CityCatalog(Geocoder):
    """Fixed city list used for random picks and offline name lookup."""

    def __init__(
        self,
        cities: tuple[CityRecord, ...] = DEFAULT_CITIES,
        rng: random.Random | None = None,
    ) -> None:
        if not cities:
            raise ValueError("CityCatalog requires at least one city.")
        self.cities = cities
        self._rng = rng or random.Random()

    def random_city(self) -> CityRecord:
        return self._rng.choice(self.cities)

    def find(self, name: str) -> CityRecord | None:
        """Exact, case-insensitive name match."""
        needle = name.strip().casefold()
        for city in self.cities:
            if city.name.casefold() == needle:
                return city
        return None

    async def search(self, query: str, *, limit: int) -> list[GeoSuggestion]:
        # Prefix matches rank ahead of substring matches.
        needle = query.strip().casefold()
        prefix = [c for c in self.cities if c.name.casefold().startswith(needle)]
        inner = [c for c in self.cities if needle in c.name.casefold() and c not in prefix]
        return [GeoSuggestion(**city.model_dump()) for city in (prefix + inner)[:limit]]
