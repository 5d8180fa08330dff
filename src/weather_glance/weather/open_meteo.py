"""Open-Meteo current-conditions provider.

Open-Meteo returns codes and measurements for a coordinate but no place
naming, so the caller's city record is merged into every snapshot.
"""

from __future__ import annotations

import logging
from typing import Any

from ..config import Settings
from ..exceptions import MalformedUpstreamData, WeatherProviderError
from ..transport import JsonTransport
from .base import WeatherProvider
from .models import CityRecord, WeatherSnapshot
from .parsing import (
    build_model,
    optional_number,
    optional_rounded,
    optional_str,
    require_number,
    require_object,
    round_half_up,
)

CURRENT_FIELDS = (
    "temperature_2m",
    "relative_humidity_2m",
    "apparent_temperature",
    "weather_code",
    "cloud_cover",
    "pressure_msl",
    "wind_speed_10m",
    "wind_direction_10m",
)
DAILY_FIELDS = ("temperature_2m_max", "temperature_2m_min", "sunrise", "sunset")

_SPEED_TO_MS = {
    "km/h": 1 / 3.6,
    "m/s": 1.0,
    "mph": 0.44704,
    "kn": 0.514444,
}

SNAPSHOT_PATHS = {
    "latitude": "latitude",
    "longitude": "longitude",
    "humidity_pct": "current.relative_humidity_2m",
    "cloudiness_pct": "current.cloud_cover",
    "wind_speed_ms": "current.wind_speed_10m",
    "wind_direction_deg": "current.wind_direction_10m",
}


def _wind_speed_ms(payload: dict[str, Any]) -> float:
    speed = require_number(payload, "current.wind_speed_10m")
    unit = optional_str(payload, "current_units.wind_speed_10m") or "km/h"
    factor = _SPEED_TO_MS.get(unit)
    if factor is None:
        raise MalformedUpstreamData(
            f"Unsupported Open-Meteo wind speed unit '{unit}'.",
            field_path="current_units.wind_speed_10m",
        )
    return round(speed * factor, 2)


def _first_daily(payload: dict[str, Any], name: str) -> float | None:
    return optional_number(payload, f"daily.{name}[0]")


def normalize_current(payload: Any, city: CityRecord) -> WeatherSnapshot:
    """Map an Open-Meteo forecast response with ``current`` data to a snapshot."""
    require_object(payload, "current")

    weather_code = require_number(payload, "current.weather_code")
    sunrise = _first_daily(payload, "sunrise")
    sunset = _first_daily(payload, "sunset")
    daily_max = _first_daily(payload, "temperature_2m_max")
    daily_min = _first_daily(payload, "temperature_2m_min")
    utc_offset = optional_number(payload, "utc_offset_seconds")

    return build_model(
        WeatherSnapshot,
        SNAPSHOT_PATHS,
        provider=OpenMeteoProvider.provider_name,
        location_name=city.name,
        country_or_region=city.country,
        administrative_area=city.state,
        latitude=city.latitude,
        longitude=city.longitude,
        temperature_c=round_half_up(require_number(payload, "current.temperature_2m")),
        feels_like_c=optional_rounded(payload, "current.apparent_temperature"),
        temperature_min_c=None if daily_min is None else round_half_up(daily_min),
        temperature_max_c=None if daily_max is None else round_half_up(daily_max),
        humidity_pct=require_number(payload, "current.relative_humidity_2m"),
        pressure_hpa=optional_rounded(payload, "current.pressure_msl"),
        cloudiness_pct=optional_number(payload, "current.cloud_cover"),
        wind_speed_ms=_wind_speed_ms(payload),
        wind_direction_deg=require_number(payload, "current.wind_direction_10m"),
        condition_code=int(weather_code),
        sunrise_epoch_sec=None if sunrise is None else int(sunrise),
        sunset_epoch_sec=None if sunset is None else int(sunset),
        utc_offset_sec=None if utc_offset is None else int(utc_offset),
    )


class OpenMeteoProvider(WeatherProvider):
    """Fetches current conditions from api.open-meteo.com."""

    provider_name = "open-meteo"

    def __init__(
        self,
        settings: Settings,
        transport: JsonTransport,
        logger: logging.Logger,
    ) -> None:
        self.settings = settings
        self.transport = transport
        self.logger = logger

    async def fetch_current(
        self,
        *,
        lat: float,
        lon: float,
        city: CityRecord | None = None,
    ) -> WeatherSnapshot:
        if city is None:
            raise WeatherProviderError(
                "Open-Meteo does not name locations; a city record is required."
            )
        params = {
            "latitude": lat,
            "longitude": lon,
            "current": ",".join(CURRENT_FIELDS),
            "daily": ",".join(DAILY_FIELDS),
            "forecast_days": 1,
            "timezone": "auto",
            "timeformat": "unixtime",
        }
        payload = await self.transport.get_json(
            str(self.settings.open_meteo_base_url),
            params=params,
            context="Weather request",
        )
        self.logger.debug("Open-Meteo payload received for %s", city.label)
        return normalize_current(payload, city)
