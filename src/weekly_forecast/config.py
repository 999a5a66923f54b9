"""Configuration settings for the weekly forecast service."""

import os
from typing import Final, Optional
from dotenv import load_dotenv

load_dotenv()

# API Configuration
AMAP_GEOCODE_URL: Final[str] = os.getenv("AMAP_GEOCODE_URL", "https://restapi.amap.com/v3/geocode/geo")
OPEN_METEO_FORECAST_URL: Final[str] = os.getenv("OPEN_METEO_FORECAST_URL", "https://api.open-meteo.com/v1/forecast")
USER_AGENT: Final[str] = "WeeklyForecastService/0.1 (user@example.com)"
HTTP_TIMEOUT_SECONDS: float = float(os.getenv("HTTP_TIMEOUT_SECONDS", "30"))

# Geocoding credential, required by the coordinate resolver
AMAP_API_KEY: Optional[str] = os.getenv("AMAP_API_KEY")

# Geocoding retry policy
GEOCODING_MAX_ATTEMPTS: int = int(os.getenv("GEOCODING_MAX_ATTEMPTS", "3"))
GEOCODING_RETRY_DELAY_SECONDS: float = float(os.getenv("GEOCODING_RETRY_DELAY_SECONDS", "1.0"))

# Search input settings
DEBOUNCE_SECONDS: float = float(os.getenv("DEBOUNCE_SECONDS", "0.5"))
DEFAULT_CITY: str = os.getenv("DEFAULT_CITY", "上海")

# Output locales
SUPPORTED_LOCALES: Final[tuple] = ("en", "zh")
DEFAULT_LOCALE: str = os.getenv("DEFAULT_LOCALE", "zh")

# Server configuration
HOST: str = os.getenv("HOST", "0.0.0.0")
PORT: int = int(os.getenv("PORT", "8000"))
DEBUG: bool = os.getenv("DEBUG", "false").lower() == "true"
