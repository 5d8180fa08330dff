"""Typed models for normalized weather snapshots and city records."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .parsing import round_half_up


class CityRecord(BaseModel):
    """A named place with coordinates."""

    model_config = ConfigDict(frozen=True)

    name: str
    country: str
    state: str | None = None
    latitude: float = Field(ge=-90, le=90)
    longitude: float = Field(ge=-180, le=180)

    @property
    def label(self) -> str:
        """Canonical "name, country" display label."""
        return f"{self.name}, {self.country}"


class GeoSuggestion(CityRecord):
    """One ranked geocoding match shown as a search-result row."""


class WeatherSnapshot(BaseModel):
    """Provider-independent current-conditions record.

    Every adapter converges on this shape. Percentages are clamped to [0, 100]
    and wind direction is folded into [0, 360) on construction; temperatures
    arrive already rounded and are stored as integers.
    """

    model_config = ConfigDict(frozen=True)

    provider: str
    location_name: str
    country_or_region: str
    administrative_area: str | None = None
    latitude: float = Field(ge=-90, le=90)
    longitude: float = Field(ge=-180, le=180)

    temperature_c: int
    feels_like_c: int | None = None
    temperature_min_c: int | None = None
    temperature_max_c: int | None = None

    humidity_pct: int
    pressure_hpa: int | None = None
    visibility_km: int | None = None
    cloudiness_pct: int | None = None

    wind_speed_ms: float = Field(ge=0)
    wind_direction_deg: float

    condition_code: int | str
    condition_text: str | None = None

    sunrise_epoch_sec: int | None = None
    sunset_epoch_sec: int | None = None
    utc_offset_sec: int | None = None

    @field_validator("humidity_pct", "cloudiness_pct", mode="before")
    @classmethod
    def clamp_percentage(cls, value: float | None) -> int | None:
        if value is None:
            return None
        return min(100, max(0, round_half_up(value)))

    @field_validator("wind_direction_deg", mode="before")
    @classmethod
    def normalize_direction(cls, value: float) -> float:
        folded = float(value) % 360.0
        # Tiny negative inputs fold to exactly 360.0 in float arithmetic.
        return 0.0 if folded >= 360.0 else folded
