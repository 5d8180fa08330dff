"""Tests for OpenWeatherMap normalization, geocoding, and credential checks."""

from __future__ import annotations

import logging

import httpx
import pytest

from conftest import make_settings, make_transport, openweather_payload
from weather_glance.config import PLACEHOLDER_API_KEY
from weather_glance.exceptions import MalformedUpstreamData, MissingCredential
from weather_glance.weather.models import CityRecord
from weather_glance.weather.openweather import (
    OpenWeatherProvider,
    normalize_current,
    normalize_geocoding,
)


def _provider(handler, **settings_overrides) -> OpenWeatherProvider:
    return OpenWeatherProvider(
        settings=make_settings(**settings_overrides),
        transport=make_transport(handler),
        logger=logging.getLogger("test.openweather"),
    )


def _refuse(request: httpx.Request) -> httpx.Response:
    raise AssertionError(f"unexpected request to {request.url}")


def test_normalize_full_payload() -> None:
    snapshot = normalize_current(openweather_payload())

    assert snapshot.provider == "openweather"
    assert snapshot.location_name == "Beijing"
    assert snapshot.country_or_region == "CN"
    assert snapshot.latitude == 39.9042
    assert snapshot.longitude == 116.4074
    assert snapshot.temperature_c == 22
    assert snapshot.feels_like_c == 20
    assert snapshot.temperature_min_c == 20
    assert snapshot.temperature_max_c == 24
    assert snapshot.humidity_pct == 40
    assert snapshot.pressure_hpa == 1012
    assert snapshot.visibility_km == 10
    assert snapshot.cloudiness_pct == 40
    assert snapshot.wind_speed_ms == 3.4
    assert snapshot.wind_direction_deg == 359
    assert snapshot.condition_code == "03d"
    assert snapshot.condition_text == "scattered clouds"
    assert snapshot.sunrise_epoch_sec == 1700000000
    assert snapshot.sunset_epoch_sec == 1700036000
    assert snapshot.utc_offset_sec == 28800


def test_optional_fields_default_when_absent() -> None:
    payload = openweather_payload(wind={"speed": 1.2})
    del payload["visibility"]
    snapshot = normalize_current(payload)
    assert snapshot.wind_direction_deg == 0
    assert snapshot.visibility_km is None


def test_empty_condition_list_raises() -> None:
    with pytest.raises(MalformedUpstreamData) as excinfo:
        normalize_current(openweather_payload(weather=[]))
    assert excinfo.value.field_path == "weather"


def test_missing_temperature_reports_path() -> None:
    payload = openweather_payload()
    del payload["main"]["temp"]
    with pytest.raises(MalformedUpstreamData) as excinfo:
        normalize_current(payload)
    assert excinfo.value.field_path == "main.temp"


@pytest.mark.parametrize(
    ("overrides", "field_path"),
    [
        ({"coord": {"lat": 200.0, "lon": 10.0}}, "coord.lat"),
        ({"coord": {"lat": 10.0, "lon": -181.0}}, "coord.lon"),
        ({"wind": {"speed": -2.0, "deg": 90}}, "wind.speed"),
    ],
)
def test_out_of_range_values_report_upstream_path(
    overrides: dict[str, object], field_path: str
) -> None:
    with pytest.raises(MalformedUpstreamData) as excinfo:
        normalize_current(openweather_payload(**overrides))
    assert excinfo.value.field_path == field_path


def test_geocoding_rows_are_normalized_and_bad_rows_skipped() -> None:
    payload = [
        {"name": "London", "country": "GB", "state": "England", "lat": 51.5073, "lon": -0.1276},
        {"name": "London", "country": "CA", "state": "Ontario", "lat": 42.9834, "lon": -81.233},
        {"name": "Nameless", "lat": 1.0, "lon": 2.0},
        {"name": "Nowhere", "country": "XX", "lat": 95.0, "lon": 0.0},
        "not-a-row",
    ]
    suggestions = normalize_geocoding(payload)
    assert [(s.name, s.country, s.state) for s in suggestions] == [
        ("London", "GB", "England"),
        ("London", "CA", "Ontario"),
    ]


def test_geocoding_payload_must_be_list() -> None:
    with pytest.raises(MalformedUpstreamData):
        normalize_geocoding({"cod": "401"})


@pytest.mark.asyncio
@pytest.mark.parametrize("api_key", [PLACEHOLDER_API_KEY, "", "   "])
async def test_missing_credential_short_circuits_before_transport(api_key: str) -> None:
    provider = _provider(_refuse, openweather_api_key=api_key)
    with pytest.raises(MissingCredential):
        provider.ensure_ready()
    with pytest.raises(MissingCredential):
        await provider.fetch_current(lat=1.0, lon=2.0)
    with pytest.raises(MissingCredential):
        await provider.search("London", limit=5)
    await provider.transport.aclose()


@pytest.mark.asyncio
async def test_fetch_current_sends_metric_request() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json=openweather_payload())

    provider = _provider(handler, openweather_lang="zh_cn")
    city = CityRecord(
        name="Beijing", country="CN", state="Beijing", latitude=39.9042, longitude=116.4074
    )
    snapshot = await provider.fetch_current(lat=39.9042, lon=116.4074, city=city)
    await provider.transport.aclose()

    assert snapshot.temperature_c == 22
    assert snapshot.administrative_area == "Beijing"
    params = seen[0].url.params
    assert seen[0].url.path == "/data/2.5/weather"
    assert params["units"] == "metric"
    assert params["lang"] == "zh_cn"
    assert params["appid"] == "test-key"


@pytest.mark.asyncio
async def test_search_uses_direct_geocoding_with_limit() -> None:
    seen: list[httpx.Request] = []
    rows = [
        {"name": f"Springfield {i}", "country": "US", "lat": 39.0 + i, "lon": -89.0}
        for i in range(7)
    ]

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json=rows)

    provider = _provider(handler)
    suggestions = await provider.search("Spring", limit=5)
    await provider.transport.aclose()

    assert len(suggestions) == 5
    assert seen[0].url.path == "/geo/1.0/direct"
    assert seen[0].url.params["q"] == "Spring"
    assert seen[0].url.params["limit"] == "5"
