"""Application exception classes."""


class ConfigError(Exception):
    """Raised when configuration is invalid or incomplete."""


class WeatherProviderError(Exception):
    """Raised when weather provider requests or normalization fail."""


class TransportError(WeatherProviderError):
    """Raised for network failures and non-2xx upstream responses."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class MalformedUpstreamData(WeatherProviderError):
    """Raised when an upstream payload cannot be mapped to a snapshot."""

    def __init__(self, message: str, *, field_path: str) -> None:
        super().__init__(message)
        self.field_path = field_path


class MissingCredential(WeatherProviderError):
    """Raised before any request when a provider access key is absent."""
