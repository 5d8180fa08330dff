"""Terminal front end: fetch current weather or search for a city."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys

from rich.console import Console
from rich.table import Table

from .config import ProviderName, Settings, load_settings
from .controller import FetchOrchestrator, GeocodingSearchController, WeatherState
from .exceptions import ConfigError, WeatherProviderError
from .log_setup import setup_logger
from .presentation import ColorBand, resolve
from .transport import JsonTransport
from .weather import (
    CityCatalog,
    CityRecord,
    Geocoder,
    GeoSuggestion,
    OpenMeteoProvider,
    OpenWeatherProvider,
    WeatherProvider,
)

_BAND_STYLES: dict[ColorBand, str] = {
    "hot": "bold red",
    "warm": "bold dark_orange",
    "mild": "bold yellow",
    "cool": "bold blue",
    "cold": "bold purple",
}


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse weather-glance CLI arguments."""
    parser = argparse.ArgumentParser(description="Show current weather for a location.")
    parser.add_argument(
        "--provider",
        choices=["open-meteo", "openweather"],
        default=None,
        help="Upstream provider; defaults to WEATHER_PROVIDER.",
    )
    commands = parser.add_subparsers(dest="command", required=True)

    current = commands.add_parser("current", help="Fetch current conditions.")
    current.add_argument("--lat", type=float, default=None, help="Latitude.")
    current.add_argument("--lon", type=float, default=None, help="Longitude.")
    current.add_argument("--city", type=str, default=None, help="Built-in city name.")
    current.add_argument(
        "--random", action="store_true", help="Pick a random built-in city."
    )

    search = commands.add_parser("search", help="Search city names.")
    search.add_argument("query", help="Partial city name (at least two characters).")
    search.add_argument(
        "--pick",
        type=int,
        default=None,
        help="1-based suggestion to select and fetch weather for.",
    )
    return parser.parse_args(argv)


def _make_transport(settings: Settings, logger: logging.Logger) -> JsonTransport:
    return JsonTransport(timeout_seconds=settings.weather_timeout_seconds, logger=logger)


def build_provider(
    name: ProviderName,
    settings: Settings,
    transport: JsonTransport,
    logger: logging.Logger,
) -> WeatherProvider:
    if name == "openweather":
        return OpenWeatherProvider(settings=settings, transport=transport, logger=logger)
    return OpenMeteoProvider(settings=settings, transport=transport, logger=logger)


def _resolve_target(
    args: argparse.Namespace, settings: Settings, catalog: CityCatalog
) -> CityRecord:
    if args.random:
        return catalog.random_city()
    if args.city:
        city = catalog.find(args.city)
        if city is None:
            known = ", ".join(c.name for c in catalog.cities)
            raise WeatherProviderError(f"Unknown city '{args.city}'. Known cities: {known}.")
        return city
    if (args.lat is None) != (args.lon is None):
        raise WeatherProviderError("Pass --lat and --lon together.")

    lat = args.lat if args.lat is not None else settings.weather_default_lat
    lon = args.lon if args.lon is not None else settings.weather_default_lon
    if lat is None or lon is None:
        raise WeatherProviderError(
            "Missing location input: pass --lat/--lon, --city, --random, "
            "or set WEATHER_DEFAULT_LAT/LON."
        )
    if not (-90 <= lat <= 90):
        raise WeatherProviderError(f"Invalid latitude {lat}; expected between -90 and 90.")
    if not (-180 <= lon <= 180):
        raise WeatherProviderError(f"Invalid longitude {lon}; expected between -180 and 180.")
    for city in catalog.cities:
        if (city.latitude, city.longitude) == (lat, lon):
            return city
    return CityRecord(name=f"{lat:.4f}, {lon:.4f}", country="", latitude=lat, longitude=lon)


def _print_weather(console: Console, state: WeatherState) -> None:
    if state.is_failure:
        prefix = "Configuration needed" if state.failure_kind == "missing_credential" else "Error"
        console.print(f"[red]{prefix}:[/red] {state.message}")
        return
    if not state.is_success or state.payload is None:
        console.print("No weather data.")
        return

    snapshot = state.payload
    view = resolve(snapshot)
    console.print(f"{view.icon}  [bold]{view.location_label}[/bold]  ({view.coordinates_label})")
    console.print(
        f"[{_BAND_STYLES[view.color_band]}]{snapshot.temperature_c}°C[/] {view.description}"
    )

    table = Table(title=f"Current Conditions ({snapshot.provider})")
    table.add_column("Field")
    table.add_column("Value", overflow="fold")
    if snapshot.feels_like_c is not None:
        table.add_row("Feels like", f"{snapshot.feels_like_c}°C")
    if snapshot.temperature_min_c is not None and snapshot.temperature_max_c is not None:
        table.add_row("Range", f"{snapshot.temperature_min_c}° ~ {snapshot.temperature_max_c}°")
    table.add_row("Humidity", f"{snapshot.humidity_pct}%")
    if snapshot.pressure_hpa is not None:
        table.add_row("Pressure", f"{snapshot.pressure_hpa} hPa")
    if snapshot.visibility_km is not None:
        table.add_row("Visibility", f"{snapshot.visibility_km} km")
    if snapshot.cloudiness_pct is not None:
        table.add_row("Cloudiness", f"{snapshot.cloudiness_pct}%")
    table.add_row("Wind", f"{snapshot.wind_speed_ms:g} m/s")
    table.add_row("Direction", f"{view.compass} ({snapshot.wind_direction_deg:g}°)")
    if view.sunrise:
        table.add_row("Sunrise", view.sunrise)
    if view.sunset:
        table.add_row("Sunset", view.sunset)
    console.print(table)


def _print_suggestions(console: Console, suggestions: list[GeoSuggestion]) -> None:
    if not suggestions:
        console.print("No matching cities.")
        return
    table = Table(title="City Suggestions")
    table.add_column("#")
    table.add_column("City", overflow="fold")
    table.add_column("Coordinates")
    for index, suggestion in enumerate(suggestions, start=1):
        parts = [suggestion.name]
        if suggestion.state:
            parts.append(suggestion.state)
        parts.append(suggestion.country)
        table.add_row(
            str(index),
            ", ".join(parts),
            f"{suggestion.latitude:.2f}, {suggestion.longitude:.2f}",
        )
    console.print(table)


async def _run(
    args: argparse.Namespace,
    settings: Settings,
    logger: logging.Logger,
    console: Console,
) -> int:
    catalog = CityCatalog()
    provider_name: ProviderName = args.provider or settings.weather_provider
    async with _make_transport(settings, logger) as transport:
        provider = build_provider(provider_name, settings, transport, logger)
        orchestrator = FetchOrchestrator(provider, logger)

        if args.command == "current":
            state = await orchestrator.fetch_city(_resolve_target(args, settings, catalog))
            _print_weather(console, state)
            return 0 if state.is_success else 4

        geocoder: Geocoder = provider if isinstance(provider, Geocoder) else catalog
        controller = GeocodingSearchController(
            geocoder,
            orchestrator,
            logger,
            limit=settings.search_limit,
            min_query_length=settings.search_min_query_length,
        )
        await controller.set_query(args.query)
        suggestions = controller.suggestions
        _print_suggestions(console, suggestions)
        if args.pick is None:
            return 0
        if not (1 <= args.pick <= len(suggestions)):
            raise WeatherProviderError(
                f"--pick must be between 1 and {len(suggestions)}; got {args.pick}."
            )
        state = await controller.select(suggestions[args.pick - 1])
        console.print(f"Selected: {controller.query}")
        _print_weather(console, state)
        return 0 if state.is_success else 4


def main(argv: list[str] | None = None) -> int:
    """Run the weather-glance CLI."""
    args = parse_args(argv)
    logger = setup_logger()
    console = Console()

    try:
        settings = load_settings()
    except ConfigError as exc:
        logger.error("Configuration failure: %s", exc)
        return 2
    logger = setup_logger(level=settings.log_level)
    logger.debug("Settings loaded: %s", settings.safe_summary())

    try:
        return asyncio.run(_run(args, settings, logger, console))
    except WeatherProviderError as exc:
        logger.error("Weather failure: %s", exc)
        console.print(f"[red]Error:[/red] {exc}")
        return 4
    except Exception as exc:  # pragma: no cover - last-resort catch for CLI runtime
        logger.exception("Unexpected weather-glance failure: %s", exc)
        return 99


if __name__ == "__main__":
    sys.exit(main())
