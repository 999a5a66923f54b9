"""API endpoints for weekly forecast service."""

import json
import logging

from fastapi import APIRouter, HTTPException, Query, WebSocket, WebSocketDisconnect

from weekly_forecast.config import DEFAULT_CITY, DEFAULT_LOCALE, DEBOUNCE_SECONDS, SUPPORTED_LOCALES
from weekly_forecast.search import SearchSession
from weekly_forecast.weather.exceptions import (
    ConfigurationError, ForecastFetchError, GeocodingError, TimeoutExhaustedError
)
from weekly_forecast.weather.models import ErrorResponse, SearchUpdate, WeeklyForecast
from weekly_forecast.weather.service import WeatherService

logger = logging.getLogger(__name__)

LOCALE_PATTERN = f"^({'|'.join(SUPPORTED_LOCALES)})$"

# Create router
router = APIRouter(prefix="/weather", tags=["weather"])


def get_weather_service() -> WeatherService:
    """Dependency to get weather service instance."""
    return WeatherService()


@router.get(
    "/",
    response_model=WeeklyForecast,
    responses={
        404: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
        502: {"model": ErrorResponse},
    }
)
async def get_weekly_forecast(
    city: str = Query(
        DEFAULT_CITY,
        min_length=1,
        description="City name to forecast"
    ),
    lang: str = Query(
        DEFAULT_LOCALE,
        pattern=LOCALE_PATTERN,
        description="Output locale: 'en' or 'zh'"
    )
) -> WeeklyForecast:
    """Get the 7-day forecast for a city.

    Args:
        city: City name
        lang: Output locale for condition descriptions

    Returns:
        WeeklyForecast with daily records

    Raises:
        HTTPException: If the city cannot be resolved or the forecast is unavailable
    """
    try:
        weather_service = get_weather_service()
        async with weather_service:
            forecast = await weather_service.get_weekly_forecast(city, lang)

        logger.info(f"Successfully retrieved forecast with {len(forecast.days)} days")
        return forecast

    except ConfigurationError as e:
        logger.error(f"Configuration error: {e}")
        raise HTTPException(status_code=500, detail="Geocoding service is not configured")

    except (GeocodingError, TimeoutExhaustedError) as e:
        logger.error(f"Error resolving city '{city}': {e}")
        raise HTTPException(status_code=404, detail=str(e))

    except ForecastFetchError as e:
        logger.error(f"Error fetching forecast: {e}")
        raise HTTPException(status_code=502, detail=str(e))


@router.websocket("/ws")
async def search_socket(
    websocket: WebSocket,
    city: str = Query(DEFAULT_CITY, min_length=1),
    lang: str = Query(DEFAULT_LOCALE, pattern=LOCALE_PATTERN)
):
    """Debounced search over a WebSocket.

    The client sends `{"type": "input", "value": ...}` for each keystroke and
    `{"type": "reset", "value": ...}` to replace the city outright. The server
    pushes a SearchUpdate for every search it runs, starting with `city`.
    """
    await websocket.accept()

    async def publish(update: SearchUpdate) -> None:
        await websocket.send_json(update.model_dump())

    weather_service = get_weather_service()
    async with weather_service:
        session = SearchSession(
            weather_service,
            publish,
            initial_city=city,
            locale=lang,
            debounce_seconds=DEBOUNCE_SECONDS
        )
        session.search(city)

        try:
            while True:
                raw = await websocket.receive_text()
                try:
                    message = json.loads(raw)
                except ValueError:
                    logger.warning(f"Ignoring non-JSON search message: {raw!r}")
                    continue

                value = message.get("value") if isinstance(message, dict) else None
                if not isinstance(value, str):
                    logger.warning(f"Ignoring malformed search message: {message!r}")
                    continue

                if message.get("type") == "reset":
                    session.reset(value)
                else:
                    session.on_input(value)
        except WebSocketDisconnect:
            logger.info("Search client disconnected")
        finally:
            await session.aclose()


@router.get("/health")
async def health_check() -> dict:
    """Health check endpoint.

    Returns:
        Health status response
    """
    return {"status": "healthy", "service": "weekly-forecast"}


@router.get("/info")
async def get_service_info() -> dict:
    """Get service information.

    Returns:
        Service information including defaults and data sources
    """
    return {
        "service": "Weekly Forecast Service",
        "version": "0.1.0",
        "default_city": DEFAULT_CITY,
        "default_locale": DEFAULT_LOCALE,
        "debounce_seconds": DEBOUNCE_SECONDS,
        "features": [
            "7-day daily forecast by city name",
            "Debounced search over WebSocket"
        ],
        "data_sources": ["AMap geocoding API", "Open-Meteo forecast API"]
    }
