"""OpenWeatherMap current-weather and direct-geocoding provider."""

from __future__ import annotations

import logging
from typing import Any

from pydantic import ValidationError

from ..config import Settings, has_usable_key
from ..exceptions import MalformedUpstreamData, MissingCredential
from ..transport import JsonTransport
from .base import Geocoder, WeatherProvider
from .models import CityRecord, GeoSuggestion, WeatherSnapshot
from .parsing import (
    build_model,
    optional_number,
    optional_rounded,
    optional_str,
    require_number,
    require_object,
    require_str,
    round_half_up,
)

SNAPSHOT_PATHS = {
    "latitude": "coord.lat",
    "longitude": "coord.lon",
    "humidity_pct": "main.humidity",
    "cloudiness_pct": "clouds.all",
    "wind_speed_ms": "wind.speed",
    "wind_direction_deg": "wind.deg",
}


def normalize_current(payload: Any) -> WeatherSnapshot:
    """Map a ``/data/2.5/weather`` response (metric units) to a snapshot."""
    require_object(payload, "main")
    require_object(payload, "sys")
    conditions = payload.get("weather")
    if not isinstance(conditions, list) or not conditions:
        raise MalformedUpstreamData(
            "OpenWeatherMap payload missing non-empty 'weather' list.", field_path="weather"
        )

    visibility_m = optional_number(payload, "visibility")
    sunrise = optional_number(payload, "sys.sunrise")
    sunset = optional_number(payload, "sys.sunset")
    timezone = optional_number(payload, "timezone")

    return build_model(
        WeatherSnapshot,
        SNAPSHOT_PATHS,
        provider=OpenWeatherProvider.provider_name,
        location_name=require_str(payload, "name"),
        country_or_region=optional_str(payload, "sys.country") or "",
        latitude=require_number(payload, "coord.lat"),
        longitude=require_number(payload, "coord.lon"),
        temperature_c=round_half_up(require_number(payload, "main.temp")),
        feels_like_c=optional_rounded(payload, "main.feels_like"),
        temperature_min_c=optional_rounded(payload, "main.temp_min"),
        temperature_max_c=optional_rounded(payload, "main.temp_max"),
        humidity_pct=require_number(payload, "main.humidity"),
        pressure_hpa=optional_rounded(payload, "main.pressure"),
        visibility_km=None if visibility_m is None else round_half_up(visibility_m / 1000),
        cloudiness_pct=optional_number(payload, "clouds.all"),
        wind_speed_ms=require_number(payload, "wind.speed"),
        wind_direction_deg=optional_number(payload, "wind.deg") or 0.0,
        condition_code=require_str(payload, "weather[0].icon"),
        condition_text=optional_str(payload, "weather[0].description"),
        sunrise_epoch_sec=None if sunrise is None else int(sunrise),
        sunset_epoch_sec=None if sunset is None else int(sunset),
        utc_offset_sec=None if timezone is None else int(timezone),
    )


def normalize_geocoding(payload: Any, logger: logging.Logger | None = None) -> list[GeoSuggestion]:
    """Map a ``/geo/1.0/direct`` response to suggestions, skipping unusable rows."""
    if not isinstance(payload, list):
        raise MalformedUpstreamData("Geocoding payload is not a list.", field_path="$")

    suggestions: list[GeoSuggestion] = []
    for index, item in enumerate(payload):
        try:
            suggestions.append(
                GeoSuggestion(
                    name=require_str(item, "name"),
                    country=require_str(item, "country"),
                    state=optional_str(item, "state"),
                    latitude=require_number(item, "lat"),
                    longitude=require_number(item, "lon"),
                )
            )
        except (MalformedUpstreamData, ValidationError) as exc:
            if logger is not None:
                logger.debug("Skipping geocoding row %d: %s", index, exc)
    return suggestions


class OpenWeatherProvider(WeatherProvider, Geocoder):
    """Fetches full-detail snapshots and city matches from api.openweathermap.org."""

    provider_name = "openweather"

    def __init__(
        self,
        settings: Settings,
        transport: JsonTransport,
        logger: logging.Logger,
    ) -> None:
        self.settings = settings
        self.transport = transport
        self.logger = logger

    def ensure_ready(self) -> None:
        if not has_usable_key(self.settings.openweather_api_key):
            raise MissingCredential(
                "OpenWeatherMap API key is not configured; set OPENWEATHER_API_KEY."
            )

    async def fetch_current(
        self,
        *,
        lat: float,
        lon: float,
        city: CityRecord | None = None,
    ) -> WeatherSnapshot:
        self.ensure_ready()
        payload = await self.transport.get_json(
            str(self.settings.openweather_base_url),
            params={
                "lat": lat,
                "lon": lon,
                "appid": self.settings.openweather_api_key,
                "units": "metric",
                "lang": self.settings.openweather_lang,
            },
            context="Weather request",
        )
        snapshot = normalize_current(payload)
        # The upstream name is authoritative; the record only fills a missing state.
        if city is not None and city.state and snapshot.administrative_area is None:
            snapshot = snapshot.model_copy(update={"administrative_area": city.state})
        return snapshot

    async def search(self, query: str, *, limit: int) -> list[GeoSuggestion]:
        self.ensure_ready()
        payload = await self.transport.get_json(
            str(self.settings.openweather_geo_url),
            params={
                "q": query,
                "limit": limit,
                "appid": self.settings.openweather_api_key,
            },
            context="City search",
        )
        return normalize_geocoding(payload, self.logger)[:limit]
