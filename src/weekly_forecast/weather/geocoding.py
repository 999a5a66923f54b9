"""Geocoding service for weekly forecast."""

import asyncio
import logging
import math
from typing import Optional

import httpx
from pydantic import ValidationError

from weekly_forecast.config import (
    AMAP_API_KEY, AMAP_GEOCODE_URL, USER_AGENT, HTTP_TIMEOUT_SECONDS,
    GEOCODING_MAX_ATTEMPTS, GEOCODING_RETRY_DELAY_SECONDS
)
from weekly_forecast.weather.exceptions import (
    ConfigurationError, GeocodingError, TimeoutExhaustedError
)
from weekly_forecast.weather.models import AmapGeocodeResponse, Coordinates

logger = logging.getLogger(__name__)


class GeocodingService:
    """Async service resolving city names to coordinates with the AMap API."""

    def __init__(
        self,
        api_key: Optional[str] = AMAP_API_KEY,
        base_url: str = AMAP_GEOCODE_URL,
        max_attempts: int = GEOCODING_MAX_ATTEMPTS,
        retry_delay: float = GEOCODING_RETRY_DELAY_SECONDS
    ):
        """Initialize the geocoding service.

        Args:
            api_key: AMap web service key
            base_url: Geocoding endpoint URL
            max_attempts: Total number of geocoding attempts per city
            retry_delay: Seconds to wait between failed attempts
        """
        self.api_key = api_key
        self.base_url = base_url
        self.max_attempts = max_attempts
        self.retry_delay = retry_delay
        self.client = httpx.AsyncClient(
            headers={"User-Agent": USER_AGENT},
            timeout=HTTP_TIMEOUT_SECONDS
        )
        logger.info("GeocodingService initialized with AMap geocoder")

    async def resolve(self, city: str) -> Coordinates:
        """Convert city name to coordinates, retrying failed attempts.

        Args:
            city: City name to geocode

        Returns:
            Coordinates of the first geocoding result

        Raises:
            ConfigurationError: If no API key is configured
            GeocodingError: If every attempt fails; wraps the last failure
            TimeoutExhaustedError: If no attempt was made at all
        """
        if not self.api_key:
            raise ConfigurationError("AMap API key is not configured (set AMAP_API_KEY)")

        for attempt in range(1, self.max_attempts + 1):
            try:
                return await self._geocode_once(city)
            except (httpx.HTTPError, ValueError, GeocodingError) as e:
                if attempt >= self.max_attempts:
                    logger.error(f"Geocoding '{city}' failed after {attempt} attempts: {e}")
                    raise GeocodingError(f"Unable to get coordinates for '{city}': {e}") from e

                logger.warning(
                    f"Geocoding attempt {attempt}/{self.max_attempts} for '{city}' failed: {e}; "
                    f"retrying in {self.retry_delay}s"
                )
                await asyncio.sleep(self.retry_delay)

        raise TimeoutExhaustedError("Geocoding request timed out, please check the network connection")

    async def _geocode_once(self, city: str) -> Coordinates:
        """Issue a single geocoding request.

        Raises:
            GeocodingError: If the provider reports a failure or the location is unusable
            httpx.HTTPError: If the request fails
            ValueError: If the response body is not valid geocoding JSON
        """
        logger.info(f"Geocoding city: {city}")
        response = await self.client.get(
            self.base_url,
            params={"address": city, "key": self.api_key}
        )
        response.raise_for_status()

        data = AmapGeocodeResponse.model_validate(response.json())
        if data.status != "1":
            raise GeocodingError(f"AMap API error: {data.info}")

        if not data.geocodes:
            raise GeocodingError(f"City '{city}' not found")

        coordinates = parse_location(data.geocodes[0].location)
        logger.info(
            f"Successfully geocoded '{city}' to ({coordinates.latitude}, {coordinates.longitude})"
        )
        return coordinates

    async def aclose(self):
        """Close the async HTTP client."""
        await self.client.aclose()

    async def __aenter__(self):
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.aclose()


def parse_location(location: Optional[str]) -> Coordinates:
    """Parse an AMap 'lon,lat' location string.

    Raises:
        GeocodingError: If the location is missing or not two finite numbers
    """
    parts = (location or "").split(",")
    if len(parts) != 2:
        raise GeocodingError(f"Unable to parse coordinates from {location!r}")

    try:
        lon, lat = float(parts[0]), float(parts[1])
    except ValueError:
        raise GeocodingError(f"Unable to parse coordinates from {location!r}")

    if not (math.isfinite(lat) and math.isfinite(lon)):
        raise GeocodingError(f"Unable to parse coordinates from {location!r}")

    try:
        return Coordinates(latitude=lat, longitude=lon)
    except ValidationError:
        raise GeocodingError(f"Coordinates out of range: {location!r}")
