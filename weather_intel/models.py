# ABOUTME: Pydantic BaseModels for geocoding matches, raw telemetry, and weather snapshots.
# ABOUTME: Defines the immutable data passed between pipeline stages and held by the session.

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, model_validator


class ConditionLabel(str, Enum):
    """Semantic weather condition derived from a WMO weather code."""

    CLEAR_SKY = "Clear Sky"
    PARTLY_CLOUDY = "Partly Cloudy"
    FOGGY = "Foggy"
    DRIZZLE = "Drizzle"
    RAIN = "Rain"
    SNOW = "Snow"
    SHOWERS = "Showers"
    THUNDERSTORM = "Thunderstorm"
    UNCLASSIFIED = "Unknown"


class LocationMatch(BaseModel):
    """Best geocoding match for a free-text query."""

    model_config = ConfigDict(frozen=True)

    display_name: str
    country_name: str = ""
    latitude: float
    longitude: float

    @property
    def label(self) -> str:
        if not self.country_name:
            return self.display_name
        return f"{self.display_name}, {self.country_name}"


class RawTelemetry(BaseModel):
    """Current conditions exactly as Open-Meteo reports them (wind already in km/h)."""

    model_config = ConfigDict(frozen=True)

    temperature_2m: float
    apparent_temperature: float
    relative_humidity_2m: int
    weather_code: int
    wind_speed_10m: float = 0.0
    surface_pressure: float = 0.0
    uv_index: float = 0.0
    precipitation: float = 0.0
    is_day: int = 1

    @model_validator(mode="before")
    @classmethod
    def _drop_nulls(cls, data: Any) -> Any:
        """Treat null optional readings as absent so their defaults apply."""
        if isinstance(data, dict):
            return {k: v for k, v in data.items() if v is not None}
        return data


class WeatherSnapshot(BaseModel):
    """Normalized result of one successful query."""

    model_config = ConfigDict(frozen=True)

    location_label: str
    temperature_c: float
    feels_like_c: float
    condition: ConditionLabel
    humidity_pct: int
    wind_kph: float
    pressure_hpa: float
    uv_index: float
    precipitation_mm: float
    is_daytime: bool
    narrative: str
