# ABOUTME: Shared test fixtures for the weather intelligence test suite.
# ABOUTME: Blocks real LLM calls and provides mock HTTP clients with canned Open-Meteo payloads.

from unittest.mock import AsyncMock

import httpx
import pydantic_ai.models
import pytest

# Prevent accidental LLM calls during testing
pydantic_ai.models.ALLOW_MODEL_REQUESTS = False

PARIS_GEOCODE = {
    "results": [
        {
            "latitude": 48.85,
            "longitude": 2.35,
            "name": "Paris",
            "country": "France",
        }
    ]
}

PARIS_FORECAST = {
    "latitude": 48.86,
    "longitude": 2.34,
    "current": {
        "time": "2025-06-01T12:00",
        "temperature_2m": 18.4,
        "apparent_temperature": 17.9,
        "relative_humidity_2m": 60,
        "wind_speed_10m": 12.3,
        "surface_pressure": 1013,
        "weather_code": 1,
        "uv_index": 3,
        "is_day": 1,
    },
}


def make_response(json_data: dict, status_code: int = 200) -> httpx.Response:
    """Build a real httpx.Response carrying a JSON body."""
    return httpx.Response(status_code=status_code, json=json_data, request=httpx.Request("GET", "https://test"))


def mock_client(*responses) -> httpx.AsyncClient:
    """Create a mock httpx.AsyncClient returning the given responses (or raising exceptions) in order."""
    mock = AsyncMock(spec=httpx.AsyncClient)
    mock.get.side_effect = list(responses)
    return mock


@pytest.fixture
def paris_client() -> httpx.AsyncClient:
    return mock_client(make_response(PARIS_GEOCODE), make_response(PARIS_FORECAST))
