"""Derived display values for a weather snapshot.

Everything here is pure: the same snapshot always yields the same icon,
description, color band, compass label and local times.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime
from types import MappingProxyType
from typing import Literal

from .weather.models import WeatherSnapshot
from .weather.parsing import round_half_up

ColorBand = Literal["hot", "warm", "mild", "cool", "cold"]

DEFAULT_ICON = "🌤️"
UNKNOWN_DESCRIPTION = "Unknown"
DIRECTIONS = ("N", "NE", "E", "SE", "S", "SW", "W", "NW")
ICON_URL_TEMPLATE = "https://openweathermap.org/img/wn/{code}@2x.png"

# WMO weather interpretation codes as reported by Open-Meteo.
_WMO_ICONS = MappingProxyType(
    {
        0: "☀️",
        1: "🌤️",
        2: "⛅",
        3: "☁️",
        45: "🌫️",
        48: "🌫️",
        51: "🌦️",
        53: "🌦️",
        55: "🌦️",
        61: "🌧️",
        63: "🌧️",
        65: "🌧️",
        71: "🌨️",
        73: "🌨️",
        75: "🌨️",
        77: "🌨️",
        80: "🌦️",
        81: "🌦️",
        82: "🌦️",
        85: "🌨️",
        86: "🌨️",
        95: "⛈️",
        96: "⛈️",
        99: "⛈️",
    }
)

_WMO_DESCRIPTIONS = MappingProxyType(
    {
        0: "Clear sky",
        1: "Mainly clear",
        2: "Partly cloudy",
        3: "Overcast",
        45: "Fog",
        48: "Depositing rime fog",
        51: "Light drizzle",
        53: "Moderate drizzle",
        55: "Dense drizzle",
        61: "Slight rain",
        63: "Moderate rain",
        65: "Heavy rain",
        71: "Slight snow",
        73: "Moderate snow",
        75: "Heavy snow",
        77: "Snow grains",
        80: "Slight rain showers",
        81: "Moderate rain showers",
        82: "Violent rain showers",
        85: "Slight snow showers",
        86: "Heavy snow showers",
        95: "Thunderstorm",
        96: "Thunderstorm with slight hail",
        99: "Thunderstorm with heavy hail",
    }
)

# OpenWeatherMap icon keys without the trailing d/n day-night marker.
_OWM_ICONS = MappingProxyType(
    {
        "01": "☀️",
        "02": "🌤️",
        "03": "⛅",
        "04": "☁️",
        "09": "🌧️",
        "10": "🌦️",
        "11": "⛈️",
        "13": "🌨️",
        "50": "🌫️",
    }
)

_OWM_DESCRIPTIONS = MappingProxyType(
    {
        "01": "Clear sky",
        "02": "Few clouds",
        "03": "Scattered clouds",
        "04": "Broken clouds",
        "09": "Shower rain",
        "10": "Rain",
        "11": "Thunderstorm",
        "13": "Snow",
        "50": "Mist",
    }
)

_COLOR_BANDS: tuple[tuple[float, ColorBand], ...] = (
    (30, "hot"),
    (20, "warm"),
    (10, "mild"),
    (0, "cool"),
)


def _icon_key(code: int | str) -> str | None:
    if isinstance(code, str) and len(code) == 3 and code[-1] in "dn":
        return code[:2]
    return None


def icon_for(code: int | str) -> str:
    """Glyph for a condition code; unknown codes get the partly-clear glyph."""
    key = _icon_key(code)
    if key is not None:
        return _OWM_ICONS.get(key, DEFAULT_ICON)
    if isinstance(code, bool) or not isinstance(code, int):
        return DEFAULT_ICON
    return _WMO_ICONS.get(code, DEFAULT_ICON)


def description_for(code: int | str) -> str:
    key = _icon_key(code)
    if key is not None:
        return _OWM_DESCRIPTIONS.get(key, UNKNOWN_DESCRIPTION)
    if isinstance(code, bool) or not isinstance(code, int):
        return UNKNOWN_DESCRIPTION
    return _WMO_DESCRIPTIONS.get(code, UNKNOWN_DESCRIPTION)


def describe(snapshot: WeatherSnapshot) -> str:
    """Provider-supplied text when present, otherwise the table description."""
    return snapshot.condition_text or description_for(snapshot.condition_code)


def icon_url_for(code: int | str) -> str | None:
    """Hosted icon image URL for OpenWeatherMap icon keys, None otherwise."""
    if _icon_key(code) is None:
        return None
    return ICON_URL_TEMPLATE.format(code=code)


def color_band_for(temperature_c: float) -> ColorBand:
    for lower_bound, band in _COLOR_BANDS:
        if temperature_c >= lower_bound:
            return band
    return "cold"


def compass_for(degrees: float) -> str:
    """Eight-point compass label; 359 degrees wraps to N."""
    return DIRECTIONS[round_half_up(degrees / 45) % 8]


def local_time_for(epoch_seconds: int, utc_offset_seconds: int = 0) -> str:
    """Format ``epoch + offset`` as UTC wall-clock ``HH:MM``.

    The offset is applied arithmetically; no timezone database or host
    timezone is consulted.
    """
    shifted = datetime.fromtimestamp(epoch_seconds + utc_offset_seconds, tz=UTC)
    return shifted.strftime("%H:%M")


@dataclass(frozen=True, slots=True)
class WeatherPresentation:
    """All derived view values for one snapshot."""

    icon: str
    icon_url: str | None
    description: str
    color_band: ColorBand
    compass: str
    location_label: str
    coordinates_label: str
    sunrise: str | None
    sunset: str | None


def resolve(snapshot: WeatherSnapshot) -> WeatherPresentation:
    offset = snapshot.utc_offset_sec or 0
    location_parts = [snapshot.location_name]
    if snapshot.administrative_area:
        location_parts.append(snapshot.administrative_area)
    if snapshot.country_or_region:
        location_parts.append(snapshot.country_or_region)
    return WeatherPresentation(
        icon=icon_for(snapshot.condition_code),
        icon_url=icon_url_for(snapshot.condition_code),
        description=describe(snapshot),
        color_band=color_band_for(snapshot.temperature_c),
        compass=compass_for(snapshot.wind_direction_deg),
        location_label=", ".join(location_parts),
        coordinates_label=f"{snapshot.latitude:.2f}°, {snapshot.longitude:.2f}°",
        sunrise=(
            local_time_for(snapshot.sunrise_epoch_sec, offset)
            if snapshot.sunrise_epoch_sec is not None
            else None
        ),
        sunset=(
            local_time_for(snapshot.sunset_epoch_sec, offset)
            if snapshot.sunset_epoch_sec is not None
            else None
        ),
    )
