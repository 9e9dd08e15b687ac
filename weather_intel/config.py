# ABOUTME: Runtime settings loaded once at startup from the environment and an optional .env file.
# ABOUTME: Covers API endpoints, the optional narrative backend key, and session timing.

import os

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field

GEOCODING_URL = "https://geocoding-api.open-meteo.com/v1/search"
FORECAST_URL = "https://api.open-meteo.com/v1/forecast"
DEFAULT_NARRATIVE_MODEL = "google/gemini-2.5-flash"


class Settings(BaseModel):
    """Application settings. Build with `Settings.from_env()` in production code."""

    model_config = ConfigDict(frozen=True)

    geocoding_url: str = GEOCODING_URL
    forecast_url: str = FORECAST_URL
    geocoding_language: str = "en"
    openrouter_api_key: str | None = Field(default=None, repr=False)
    narrative_model: str = DEFAULT_NARRATIVE_MODEL
    startup_delay: float = Field(default=2.5, ge=0)
    tick_interval: float = Field(default=0.8, gt=0)
    settle_delay: float = Field(default=1.2, ge=0)

    @classmethod
    def from_env(cls) -> "Settings":
        """Read settings from os.environ after loading .env; unset keys keep their defaults."""
        load_dotenv()
        env_map = {
            "geocoding_url": "GEOCODING_URL",
            "forecast_url": "FORECAST_URL",
            "geocoding_language": "GEOCODING_LANGUAGE",
            "openrouter_api_key": "OPENROUTER_API_KEY",
            "narrative_model": "NARRATIVE_MODEL",
            "startup_delay": "STARTUP_DELAY_SECONDS",
            "tick_interval": "LOADING_TICK_SECONDS",
            "settle_delay": "SETTLE_DELAY_SECONDS",
        }
        values = {}
        for field, var in env_map.items():
            raw = os.environ.get(var, "").strip()
            if raw:
                values[field] = raw
        return cls(**values)
