"""Shared fixtures: fake settings, mock HTTP transport, and upstream payloads."""

from __future__ import annotations

import logging
from collections.abc import Callable
from types import SimpleNamespace
from typing import Any

import httpx
import pytest

from weather_glance.transport import JsonTransport
from weather_glance.weather.models import CityRecord, WeatherSnapshot

BEIJING = CityRecord(name="Beijing", country="China", latitude=39.9042, longitude=116.4074)


def make_settings(**overrides: Any) -> SimpleNamespace:
    defaults: dict[str, Any] = {
        "open_meteo_base_url": "https://api.open-meteo.com/v1/forecast",
        "openweather_base_url": "https://api.openweathermap.org/data/2.5/weather",
        "openweather_geo_url": "https://api.openweathermap.org/geo/1.0/direct",
        "openweather_api_key": "test-key",
        "openweather_lang": "en",
        "weather_timeout_seconds": 5.0,
    }
    defaults.update(overrides)
    return SimpleNamespace(**defaults)


def make_transport(handler: Callable[[httpx.Request], httpx.Response]) -> JsonTransport:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return JsonTransport(
        timeout_seconds=5.0,
        logger=logging.getLogger("test.transport"),
        client=client,
    )


def open_meteo_payload(**current_overrides: Any) -> dict[str, Any]:
    current: dict[str, Any] = {
        "time": 1700000000,
        "interval": 900,
        "temperature_2m": 21.0,
        "relative_humidity_2m": 55,
        "apparent_temperature": 20.6,
        "weather_code": 2,
        "cloud_cover": 40,
        "pressure_msl": 1013.2,
        "wind_speed_10m": 10.0,
        "wind_direction_10m": 90,
    }
    current.update(current_overrides)
    return {
        "latitude": 39.875,
        "longitude": 116.375,
        "utc_offset_seconds": 28800,
        "timezone": "Asia/Shanghai",
        "current_units": {"temperature_2m": "°C", "wind_speed_10m": "km/h"},
        "current": current,
        "daily": {
            "time": [1699977600],
            "temperature_2m_max": [23.5],
            "temperature_2m_min": [12.4],
            "sunrise": [1700000000],
            "sunset": [1700036000],
        },
    }


def openweather_payload(**overrides: Any) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "coord": {"lon": 116.4074, "lat": 39.9042},
        "weather": [
            {"id": 802, "main": "Clouds", "description": "scattered clouds", "icon": "03d"}
        ],
        "main": {
            "temp": 21.5,
            "feels_like": 20.4,
            "temp_min": 19.6,
            "temp_max": 23.5,
            "pressure": 1012,
            "humidity": 40,
        },
        "visibility": 9500,
        "wind": {"speed": 3.4, "deg": 359},
        "clouds": {"all": 40},
        "sys": {"country": "CN", "sunrise": 1700000000, "sunset": 1700036000},
        "timezone": 28800,
        "id": 1816670,
        "name": "Beijing",
    }
    payload.update(overrides)
    return payload


def make_snapshot(**overrides: Any) -> WeatherSnapshot:
    fields: dict[str, Any] = {
        "provider": "fake",
        "location_name": "Beijing",
        "country_or_region": "China",
        "latitude": 39.9042,
        "longitude": 116.4074,
        "temperature_c": 21,
        "humidity_pct": 55,
        "wind_speed_ms": 2.78,
        "wind_direction_deg": 90,
        "condition_code": 2,
    }
    fields.update(overrides)
    return WeatherSnapshot(**fields)


@pytest.fixture
def logger() -> logging.Logger:
    return logging.getLogger("test.weather_glance")
