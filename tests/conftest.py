"""Shared test fixtures."""

import pytest


@pytest.fixture
def geocode_success() -> dict:
    """AMap response for a successful lookup of Shanghai."""
    return {
        "status": "1",
        "info": "OK",
        "count": "1",
        "geocodes": [
            {
                "formatted_address": "上海市",
                "location": "121.473667,31.230525",
            }
        ],
    }


@pytest.fixture
def geocode_failure() -> dict:
    return {"status": "0", "info": "INVALID_USER_KEY", "geocodes": []}


@pytest.fixture
def forecast_payload() -> dict:
    """Open-Meteo response with a 7-day daily series."""
    return {
        "latitude": 31.25,
        "longitude": 121.5,
        "timezone": "Asia/Shanghai",
        "daily_units": {
            "time": "iso8601",
            "weather_code": "wmo code",
            "temperature_2m_max": "°C",
            "temperature_2m_min": "°C",
        },
        "daily": {
            "time": [
                "2026-10-19", "2026-10-20", "2026-10-21", "2026-10-22",
                "2026-10-23", "2026-10-24", "2026-10-25",
            ],
            "weather_code": [0, 2, 3, 61, 95, 71, 42],
            "temperature_2m_max": [24.5, 23.0, 21.3, 19.0, 22.1, 2.0, 18.4],
            "temperature_2m_min": [17.1, 16.0, 15.2, 14.5, 18.0, -3.5, 11.0],
        },
    }
