"""CLI offline smoke tests."""

from __future__ import annotations

from typing import Any

import httpx
import pytest

from conftest import make_transport, open_meteo_payload
from weather_glance import cli


@pytest.fixture
def requests_seen(monkeypatch: Any, tmp_path: Any) -> list[httpx.Request]:
    for key in ("OPENWEATHER_API_KEY", "WEATHER_PROVIDER", "WEATHER_DEFAULT_LAT",
                "WEATHER_DEFAULT_LON", "LOG_LEVEL"):
        monkeypatch.delenv(key, raising=False)
    monkeypatch.chdir(tmp_path)
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json=open_meteo_payload())

    monkeypatch.setattr(cli, "_make_transport", lambda settings, logger: make_transport(handler))
    return seen


def test_current_for_builtin_city(requests_seen: list[httpx.Request], capsys: Any) -> None:
    exit_code = cli.main(["current", "--city", "tokyo"])
    assert exit_code == 0

    output = capsys.readouterr().out
    assert "Tokyo, Japan" in output
    assert "21°C" in output
    assert "Partly cloudy" in output
    assert "E (90°)" in output
    assert "Sunrise" in output
    assert requests_seen[0].url.params["latitude"] == "35.6762"


def test_current_defaults_to_configured_location(
    requests_seen: list[httpx.Request], capsys: Any
) -> None:
    assert cli.main(["current"]) == 0
    assert "Beijing, China" in capsys.readouterr().out


def test_unknown_city_exits_with_weather_failure(
    requests_seen: list[httpx.Request], capsys: Any
) -> None:
    assert cli.main(["current", "--city", "Atlantis"]) == 4
    assert requests_seen == []
    assert "Unknown city" in capsys.readouterr().out


def test_openweather_without_key_reports_configuration(
    requests_seen: list[httpx.Request], capsys: Any
) -> None:
    assert cli.main(["--provider", "openweather", "current"]) == 4
    assert requests_seen == []
    assert "Configuration needed" in capsys.readouterr().out


def test_search_and_pick_uses_catalog_for_open_meteo(
    requests_seen: list[httpx.Request], capsys: Any
) -> None:
    assert cli.main(["search", "be", "--pick", "2"]) == 0

    output = capsys.readouterr().out
    assert "City Suggestions" in output
    assert "Beijing" in output
    assert "Selected: Berlin, Germany" in output
    assert len(requests_seen) == 1
    assert requests_seen[0].url.params["latitude"] == "52.52"


def test_search_pick_out_of_range(requests_seen: list[httpx.Request], capsys: Any) -> None:
    assert cli.main(["search", "be", "--pick", "9"]) == 4
    assert requests_seen == []


def test_invalid_config_exits_two(monkeypatch: Any, tmp_path: Any) -> None:
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("SEARCH_LIMIT", "0")
    assert cli.main(["current"]) == 2
