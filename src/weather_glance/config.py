"""Typed settings loader for weather-glance."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import AnyUrl, Field, ValidationError, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .exceptions import ConfigError

PLACEHOLDER_API_KEY = "YOUR_API_KEY_HERE"

ProviderName = Literal["open-meteo", "openweather"]


class Settings(BaseSettings):
    """Application settings loaded from environment variables and `.env`."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    app_env: Literal["dev", "staging", "prod"] = Field(default="dev", alias="APP_ENV")
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO", alias="LOG_LEVEL"
    )

    open_meteo_base_url: AnyUrl = Field(
        default="https://api.open-meteo.com/v1/forecast",
        alias="OPEN_METEO_BASE_URL",
    )
    openweather_base_url: AnyUrl = Field(
        default="https://api.openweathermap.org/data/2.5/weather",
        alias="OPENWEATHER_BASE_URL",
    )
    openweather_geo_url: AnyUrl = Field(
        default="https://api.openweathermap.org/geo/1.0/direct",
        alias="OPENWEATHER_GEO_URL",
    )
    openweather_api_key: str = Field(
        default=PLACEHOLDER_API_KEY, alias="OPENWEATHER_API_KEY", repr=False
    )
    openweather_lang: str = Field(default="en", alias="OPENWEATHER_LANG")

    weather_provider: ProviderName = Field(default="open-meteo", alias="WEATHER_PROVIDER")
    weather_timeout_seconds: float = Field(default=15.0, alias="WEATHER_TIMEOUT_SECONDS")
    weather_default_lat: float | None = Field(default=39.9042, alias="WEATHER_DEFAULT_LAT")
    weather_default_lon: float | None = Field(default=116.4074, alias="WEATHER_DEFAULT_LON")

    search_limit: int = Field(default=5, alias="SEARCH_LIMIT")
    search_min_query_length: int = Field(default=2, alias="SEARCH_MIN_QUERY_LENGTH")

    @field_validator("weather_default_lat", "weather_default_lon", mode="before")
    @classmethod
    def empty_string_to_none(cls, value: Any) -> Any:
        """Treat empty env-string values as unset optional coordinates."""
        if isinstance(value, str) and value.strip() == "":
            return None
        return value

    @field_validator("openweather_api_key", mode="before")
    @classmethod
    def strip_api_key(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip()
        return value

    @model_validator(mode="after")
    def validate_ranges(self) -> Settings:
        """Validate numeric ranges and paired fields."""
        if self.weather_timeout_seconds <= 0:
            raise ValueError("WEATHER_TIMEOUT_SECONDS must be > 0.")
        if not self.openweather_lang.strip():
            raise ValueError("OPENWEATHER_LANG must not be empty.")
        if not (1 <= self.search_limit <= 5):
            raise ValueError("SEARCH_LIMIT must be between 1 and 5.")
        if self.search_min_query_length < 1:
            raise ValueError("SEARCH_MIN_QUERY_LENGTH must be >= 1.")

        has_default_lat = self.weather_default_lat is not None
        has_default_lon = self.weather_default_lon is not None
        if has_default_lat != has_default_lon:
            raise ValueError("WEATHER_DEFAULT_LAT and WEATHER_DEFAULT_LON must be set together.")
        if has_default_lat and not (-90 <= self.weather_default_lat <= 90):
            raise ValueError("WEATHER_DEFAULT_LAT must be between -90 and 90.")
        if has_default_lon and not (-180 <= self.weather_default_lon <= 180):
            raise ValueError("WEATHER_DEFAULT_LON must be between -180 and 180.")
        return self

    def has_openweather_credential(self) -> bool:
        """Return True when the OpenWeatherMap key is set and not the placeholder."""
        return has_usable_key(self.openweather_api_key)

    def safe_summary(self) -> dict[str, Any]:
        """Return config summary safe for logging (no credentials)."""
        return {
            "app_env": self.app_env,
            "weather_provider": self.weather_provider,
            "open_meteo_base_url": str(self.open_meteo_base_url),
            "openweather_base_url": str(self.openweather_base_url),
            "openweather_geo_url": str(self.openweather_geo_url),
            "openweather_credential_set": self.has_openweather_credential(),
            "openweather_lang": self.openweather_lang,
            "weather_timeout_seconds": self.weather_timeout_seconds,
            "search_limit": self.search_limit,
        }


def has_usable_key(api_key: str | None) -> bool:
    """Return True for a non-empty key that is not the shipped placeholder."""
    if api_key is None:
        return False
    candidate = api_key.strip()
    return bool(candidate) and candidate != PLACEHOLDER_API_KEY


def load_settings() -> Settings:
    """Load and validate settings, raising ConfigError on failure."""
    try:
        return Settings()
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration: {exc}") from exc
    except OSError as exc:
        raise ConfigError(f"Failed reading environment/.env: {exc}") from exc
