"""Tests for forecast fetching and the resolve-then-fetch pipeline."""

from unittest.mock import AsyncMock

import httpx
import pytest

from weekly_forecast.weather.client import OpenMeteoClient
from weekly_forecast.weather.exceptions import ForecastFetchError, GeocodingError
from weekly_forecast.weather.models import Coordinates, OpenMeteoDaily
from weekly_forecast.weather.service import WeatherService, build_daily_records

FORECAST_URL = "https://test-meteo.example.com/v1/forecast"
SHANGHAI = Coordinates(latitude=31.230525, longitude=121.473667)


def make_service(geocoder=None) -> WeatherService:
    geocoder = geocoder or AsyncMock()
    return WeatherService(client=OpenMeteoClient(base_url=FORECAST_URL), geocoding_service=geocoder)


class TestFetchForecast:
    @pytest.mark.asyncio
    async def test_seven_day_records(self, respx_mock, forecast_payload: dict):
        respx_mock.get(FORECAST_URL).mock(return_value=httpx.Response(200, json=forecast_payload))

        async with make_service() as service:
            days = await service.fetch_forecast(SHANGHAI, "en")

        daily = forecast_payload["daily"]
        assert len(days) == 7
        assert [day.date for day in days] == daily["time"]
        for index, day in enumerate(days):
            expected = (daily["temperature_2m_max"][index] + daily["temperature_2m_min"][index]) / 2
            assert day.avg_temp_c == expected
            assert day.max_temp_c == daily["temperature_2m_max"][index]
            assert day.min_temp_c == daily["temperature_2m_min"][index]

    @pytest.mark.asyncio
    async def test_conditions_translated(self, respx_mock, forecast_payload: dict):
        respx_mock.get(FORECAST_URL).mock(return_value=httpx.Response(200, json=forecast_payload))

        async with make_service() as service:
            days = await service.fetch_forecast(SHANGHAI, "zh")

        assert (days[0].condition_text, days[0].condition_icon) == ("晴", "sunny.svg")
        assert (days[4].condition_text, days[4].condition_icon) == ("雷雨", "thunderstorm.svg")
        assert (days[6].condition_text, days[6].condition_icon) == ("未知天气", "unknown.svg")

    @pytest.mark.asyncio
    async def test_request_params(self, respx_mock, forecast_payload: dict):
        route = respx_mock.get(FORECAST_URL).mock(
            return_value=httpx.Response(200, json=forecast_payload)
        )

        async with make_service() as service:
            await service.fetch_forecast(SHANGHAI)

        params = route.calls[0].request.url.params
        assert float(params["latitude"]) == SHANGHAI.latitude
        assert float(params["longitude"]) == SHANGHAI.longitude
        assert params["daily"] == "weather_code,temperature_2m_max,temperature_2m_min"
        assert params["timezone"] == "auto"

    @pytest.mark.asyncio
    async def test_http_error_preserves_cause(self, respx_mock):
        route = respx_mock.get(FORECAST_URL).mock(return_value=httpx.Response(500))

        async with make_service() as service:
            with pytest.raises(ForecastFetchError, match="Failed to fetch weather data") as exc_info:
                await service.fetch_forecast(SHANGHAI)

        assert route.call_count == 1
        assert isinstance(exc_info.value.__cause__, httpx.HTTPStatusError)

    @pytest.mark.asyncio
    async def test_missing_series(self, respx_mock, forecast_payload: dict):
        del forecast_payload["daily"]["weather_code"]
        respx_mock.get(FORECAST_URL).mock(return_value=httpx.Response(200, json=forecast_payload))

        async with make_service() as service:
            with pytest.raises(ForecastFetchError):
                await service.fetch_forecast(SHANGHAI)

    @pytest.mark.asyncio
    async def test_mismatched_lengths(self, respx_mock, forecast_payload: dict):
        forecast_payload["daily"]["temperature_2m_min"].pop()
        respx_mock.get(FORECAST_URL).mock(return_value=httpx.Response(200, json=forecast_payload))

        async with make_service() as service:
            with pytest.raises(ForecastFetchError):
                await service.fetch_forecast(SHANGHAI)

    @pytest.mark.asyncio
    async def test_not_json(self, respx_mock):
        respx_mock.get(FORECAST_URL).mock(return_value=httpx.Response(200, text="<html>"))

        async with make_service() as service:
            with pytest.raises(ForecastFetchError):
                await service.fetch_forecast(SHANGHAI)


class TestBuildDailyRecords:
    def test_rejects_unsorted_dates(self):
        daily = OpenMeteoDaily(
            time=["2026-10-20", "2026-10-19"],
            weather_code=[0, 0],
            temperature_2m_max=[20.0, 21.0],
            temperature_2m_min=[10.0, 11.0],
        )
        with pytest.raises(ValueError):
            build_daily_records(daily)

    def test_rejects_duplicate_dates(self):
        daily = OpenMeteoDaily(
            time=["2026-10-19", "2026-10-19"],
            weather_code=[0, 0],
            temperature_2m_max=[20.0, 21.0],
            temperature_2m_min=[10.0, 11.0],
        )
        with pytest.raises(ValueError):
            build_daily_records(daily)

    def test_inverted_range_is_kept(self):
        daily = OpenMeteoDaily(
            time=["2026-10-19"],
            weather_code=[3],
            temperature_2m_max=[10.0],
            temperature_2m_min=[12.0],
        )
        [record] = build_daily_records(daily, "en")
        assert record.avg_temp_c == 11.0
        assert record.condition_text == "overcast"

    def test_empty_series(self):
        daily = OpenMeteoDaily(time=[], weather_code=[], temperature_2m_max=[], temperature_2m_min=[])
        assert build_daily_records(daily) == []


class TestGetWeeklyForecast:
    @pytest.mark.asyncio
    async def test_resolve_then_fetch(self, respx_mock, forecast_payload: dict):
        respx_mock.get(FORECAST_URL).mock(return_value=httpx.Response(200, json=forecast_payload))
        geocoder = AsyncMock()
        geocoder.resolve.return_value = SHANGHAI

        async with make_service(geocoder) as service:
            forecast = await service.get_weekly_forecast("上海", "en")

        geocoder.resolve.assert_awaited_once_with("上海")
        assert forecast.city == "上海"
        assert forecast.coordinates == SHANGHAI
        assert forecast.timezone == "Asia/Shanghai"
        assert len(forecast.days) == 7

    @pytest.mark.asyncio
    async def test_geocoding_error_skips_fetch(self, respx_mock):
        geocoder = AsyncMock()
        geocoder.resolve.side_effect = GeocodingError("Unable to get coordinates for 'x': boom")

        async with make_service(geocoder) as service:
            with pytest.raises(GeocodingError):
                await service.get_weekly_forecast("x")

        assert not respx_mock.calls
