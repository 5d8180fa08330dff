"""Weather provider integrations and canonical models."""

from .base import Geocoder, WeatherProvider
from .cities import DEFAULT_CITIES, CityCatalog
from .models import CityRecord, GeoSuggestion, WeatherSnapshot
from .open_meteo import OpenMeteoProvider
from .openweather import OpenWeatherProvider

__all__ = [
    "DEFAULT_CITIES",
    "CityCatalog",
    "CityRecord",
    "GeoSuggestion",
    "Geocoder",
    "OpenMeteoProvider",
    "OpenWeatherProvider",
    "WeatherProvider",
    "WeatherSnapshot",
]
