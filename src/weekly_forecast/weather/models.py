"""Data models for weekly forecast service."""

from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


class Coordinates(BaseModel):
    """Geographic coordinates resolved for a city."""
    model_config = ConfigDict(frozen=True)

    latitude: float = Field(..., ge=-90, le=90, description="Latitude in decimal degrees")
    longitude: float = Field(..., ge=-180, le=180, description="Longitude in decimal degrees")


class DailyForecastRecord(BaseModel):
    """Forecast for a single day."""
    date: str = Field(..., description="Date in YYYY-MM-DD format")
    avg_temp_c: float = Field(..., description="Mean of the daily max and min temperature in Celsius")
    min_temp_c: float = Field(..., description="Minimum temperature in Celsius")
    max_temp_c: float = Field(..., description="Maximum temperature in Celsius")
    condition_text: str = Field(..., description="Weather description")
    condition_icon: str = Field(..., description="Weather icon file name")


class WeeklyForecast(BaseModel):
    """Weekly forecast response model."""
    city: str = Field(..., description="City name as searched")
    coordinates: Coordinates = Field(..., description="Resolved coordinates")
    timezone: Optional[str] = Field(None, description="Timezone resolved by the forecast provider")
    days: List[DailyForecastRecord] = Field(..., description="Daily forecasts in ascending date order")


class SearchUpdate(BaseModel):
    """Update pushed to a search client."""
    type: Literal["loading", "forecast", "error"] = Field(..., description="Update kind")
    sequence: int = Field(..., description="Search sequence number")
    city: str = Field(..., description="City name being searched")
    days: List[DailyForecastRecord] = Field(default_factory=list, description="Daily forecasts")
    message: Optional[str] = Field(None, description="User-facing error message")


class AmapGeocode(BaseModel):
    """Single geocoding result from AMap."""
    location: Optional[str] = Field(None, description="Coordinates formatted as 'lon,lat'")
    formatted_address: Optional[str] = Field(None, description="Full address")


class AmapGeocodeResponse(BaseModel):
    """Raw response from AMap geocoding API."""
    status: str = Field(..., description="'1' on success")
    info: str = Field("", description="Status message")
    geocodes: List[AmapGeocode] = Field(default_factory=list, description="Geocoding results")


class OpenMeteoDaily(BaseModel):
    """Parallel daily series from Open-Meteo."""
    time: List[str] = Field(..., description="Dates in YYYY-MM-DD format")
    weather_code: List[int] = Field(..., description="WMO weather codes")
    temperature_2m_max: List[float] = Field(..., description="Daily max temperature in Celsius")
    temperature_2m_min: List[float] = Field(..., description="Daily min temperature in Celsius")

    @model_validator(mode="after")
    def check_lengths(self) -> "OpenMeteoDaily":
        lengths = {
            len(self.time),
            len(self.weather_code),
            len(self.temperature_2m_max),
            len(self.temperature_2m_min),
        }
        if len(lengths) != 1:
            raise ValueError("Daily series have mismatched lengths")
        return self


class OpenMeteoForecastResponse(BaseModel):
    """Raw response from Open-Meteo forecast API."""
    latitude: Optional[float] = Field(None, description="Grid cell latitude")
    longitude: Optional[float] = Field(None, description="Grid cell longitude")
    timezone: Optional[str] = Field(None, description="Resolved timezone")
    daily: OpenMeteoDaily = Field(..., description="Daily series")


class ErrorResponse(BaseModel):
    """Error body returned with HTTPException."""
    detail: str = Field(..., description="Error message")
