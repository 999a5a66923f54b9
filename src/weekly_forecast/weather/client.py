"""HTTP client for the Open-Meteo forecast API."""

import logging

import httpx
from pydantic import ValidationError

from weekly_forecast.config import OPEN_METEO_FORECAST_URL, USER_AGENT, HTTP_TIMEOUT_SECONDS
from weekly_forecast.weather.models import Coordinates, OpenMeteoForecastResponse

logger = logging.getLogger(__name__)

DAILY_FIELDS = ("weather_code", "temperature_2m_max", "temperature_2m_min")


class OpenMeteoClient:
    """Async client for fetching daily forecasts from Open-Meteo."""

    def __init__(self, base_url: str = OPEN_METEO_FORECAST_URL, user_agent: str = USER_AGENT):
        """Initialize the forecast client.

        Args:
            base_url: Open-Meteo forecast endpoint URL
            user_agent: User-Agent header for API requests
        """
        self.base_url = base_url
        self.user_agent = user_agent
        self.client = httpx.AsyncClient(
            headers={"User-Agent": self.user_agent},
            timeout=HTTP_TIMEOUT_SECONDS
        )

    async def get_daily_forecast(self, coords: Coordinates) -> OpenMeteoForecastResponse:
        """Fetch the daily forecast series for given coordinates.

        Args:
            coords: Coordinates to forecast

        Returns:
            Validated Open-Meteo response

        Raises:
            httpx.HTTPError: If API request fails
            ValidationError: If response format is invalid
        """
        params = {
            "latitude": coords.latitude,
            "longitude": coords.longitude,
            "daily": ",".join(DAILY_FIELDS),
            "timezone": "auto",
        }

        logger.info(f"Fetching forecast for lat={coords.latitude}, lon={coords.longitude}")

        try:
            response = await self.client.get(self.base_url, params=params)
            response.raise_for_status()

            forecast = OpenMeteoForecastResponse.model_validate(response.json())
            logger.info(f"Successfully fetched forecast with {len(forecast.daily.time)} days")
            return forecast

        except httpx.HTTPStatusError as e:
            logger.error(f"HTTP error from Open-Meteo API: {e.response.status_code} - {e.response.text}")
            raise
        except httpx.RequestError as e:
            logger.error(f"Request error to Open-Meteo API: {e}")
            raise
        except ValidationError as e:
            logger.error(f"Invalid API response format: {e}")
            raise

    async def aclose(self):
        """Close the async HTTP client."""
        await self.client.aclose()

    async def __aenter__(self):
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.aclose()
