"""Exceptions raised by the forecast pipeline."""


class WeatherError(Exception):
    """Base class for forecast pipeline errors."""
    pass


class ConfigurationError(WeatherError):
    """Raised when a required setting is missing."""
    pass


class GeocodingError(WeatherError):
    """Raised when geocoding fails."""
    pass


class TimeoutExhaustedError(WeatherError):
    """Raised when geocoding gives up without making a single attempt."""
    pass


class ForecastFetchError(WeatherError):
    """Raised when the daily forecast cannot be fetched or parsed."""
    pass
