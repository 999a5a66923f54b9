"""Weather service chaining geocoding and forecast retrieval."""

import logging
from datetime import date
from typing import List, Optional

import httpx

from weekly_forecast.config import DEFAULT_LOCALE
from weekly_forecast.weather.client import OpenMeteoClient
from weekly_forecast.weather.codes import translate
from weekly_forecast.weather.exceptions import ForecastFetchError, WeatherError
from weekly_forecast.weather.geocoding import GeocodingService
from weekly_forecast.weather.models import (
    Coordinates, DailyForecastRecord, OpenMeteoDaily, WeeklyForecast
)

logger = logging.getLogger(__name__)


class WeatherService:
    """Service resolving a city and assembling its weekly forecast."""

    def __init__(
        self,
        client: Optional[OpenMeteoClient] = None,
        geocoding_service: Optional[GeocodingService] = None
    ):
        """Initialize the weather service.

        Args:
            client: Forecast client instance (creates default if None)
            geocoding_service: Geocoding service instance (creates default if None)
        """
        self.client = client or OpenMeteoClient()
        self.geocoding_service = geocoding_service or GeocodingService()

    async def get_weekly_forecast(self, city: str, locale: str = DEFAULT_LOCALE) -> WeeklyForecast:
        """
        Resolve a city name and fetch its daily forecast.

        Args:
            city: City name
            locale: Output locale for condition descriptions

        Returns:
            WeeklyForecast with one record per day

        Raises:
            ConfigurationError: If the geocoding key is missing
            GeocodingError: If the city cannot be resolved
            TimeoutExhaustedError: If geocoding made no attempt
            ForecastFetchError: If the forecast cannot be fetched
        """
        try:
            coords = await self.geocoding_service.resolve(city)
            logger.info(f"Getting forecast for city={city}, lat={coords.latitude}, lon={coords.longitude}")

            days, timezone = await self._fetch(coords, locale)
            return WeeklyForecast(city=city, coordinates=coords, timezone=timezone, days=days)

        except WeatherError as e:
            logger.error(f"Error getting weekly forecast for '{city}': {e}")
            raise

    async def fetch_forecast(self, coords: Coordinates, locale: str = DEFAULT_LOCALE) -> List[DailyForecastRecord]:
        """Fetch daily forecast records for coordinates.

        Args:
            coords: Coordinates to forecast
            locale: Output locale for condition descriptions

        Returns:
            Daily forecast records in ascending date order

        Raises:
            ForecastFetchError: If the request fails or the response is unusable
        """
        days, _ = await self._fetch(coords, locale)
        return days

    async def _fetch(self, coords: Coordinates, locale: str):
        try:
            forecast = await self.client.get_daily_forecast(coords)
            days = build_daily_records(forecast.daily, locale)
        except (httpx.HTTPError, ValueError) as e:
            logger.error(f"Failed to fetch weather data for ({coords.latitude}, {coords.longitude}): {e}")
            raise ForecastFetchError("Failed to fetch weather data") from e

        logger.info(f"Assembled {len(days)} daily forecast records")
        return days, forecast.timezone

    async def aclose(self):
        """Close the forecast and geocoding clients."""
        for closeable in (self.client, self.geocoding_service):
            try:
                await closeable.aclose()
            except Exception as e:
                logger.error(f"Error closing {type(closeable).__name__}: {e}")

    async def __aenter__(self):
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.aclose()


def build_daily_records(daily: OpenMeteoDaily, locale: str = DEFAULT_LOCALE) -> List[DailyForecastRecord]:
    """Build one record per day from Open-Meteo's parallel daily series.

    Args:
        daily: Validated daily series of equal length
        locale: Output locale for condition descriptions

    Returns:
        Daily forecast records in the provider's date order

    Raises:
        ValueError: If dates are malformed, duplicated or not ascending
    """
    parsed_dates = [date.fromisoformat(day) for day in daily.time]
    for previous, current in zip(parsed_dates, parsed_dates[1:]):
        if current <= previous:
            raise ValueError(f"Forecast dates are not strictly ascending: {previous} then {current}")

    records = []
    for index, day in enumerate(daily.time):
        max_temp = daily.temperature_2m_max[index]
        min_temp = daily.temperature_2m_min[index]
        if min_temp > max_temp:
            logger.warning(f"Forecast for {day} has min {min_temp}°C above max {max_temp}°C")

        condition = translate(daily.weather_code[index], locale)
        records.append(DailyForecastRecord(
            date=day,
            avg_temp_c=(max_temp + min_temp) / 2,
            min_temp_c=min_temp,
            max_temp_c=max_temp,
            condition_text=condition.text,
            condition_icon=condition.icon
        ))

    return records
