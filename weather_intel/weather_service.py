# ABOUTME: Service layer for Open-Meteo geocoding and current-conditions calls.
# ABOUTME: Normalizes responses into LocationMatch/RawTelemetry and maps failures to the error taxonomy.

import logging

import httpx
from pydantic import ValidationError

from weather_intel.config import FORECAST_URL, GEOCODING_URL
from weather_intel.errors import NotFoundError, ProviderError, TransportError
from weather_intel.models import LocationMatch, RawTelemetry

logger = logging.getLogger(__name__)

CURRENT_PARAMS = (
    "temperature_2m,relative_humidity_2m,apparent_temperature,is_day,"
    "precipitation,weather_code,surface_pressure,wind_speed_10m,uv_index"
)

NOT_FOUND_MESSAGE = "City not found. Please check the spelling."
PROVIDER_FAILURE_MESSAGE = "Failed to retrieve weather data."


class GeoResolver:
    """Resolves a free-text place name to its best Open-Meteo geocoding match."""

    def __init__(self, client: httpx.AsyncClient, url: str = GEOCODING_URL, language: str = "en"):
        self.client = client
        self.url = url
        self.language = language

    async def resolve(self, query: str) -> LocationMatch:
        """Return the first ranked match for `query`.

        Raises NotFoundError when the provider has no results, TransportError on
        network, status, or parse failures.
        """
        try:
            resp = await self.client.get(
                self.url,
                params={"name": query, "count": 1, "language": self.language, "format": "json"},
            )
            resp.raise_for_status()
            data = resp.json()
        except httpx.HTTPError as e:
            raise TransportError(f"Geocoding request failed: {e}") from e
        except ValueError as e:
            raise TransportError("Geocoding response was not valid JSON.") from e

        results = data.get("results") if isinstance(data, dict) else None
        if not results:
            raise NotFoundError(NOT_FOUND_MESSAGE)

        r = results[0]
        try:
            match = LocationMatch(
                display_name=r["name"],
                country_name=r.get("country") or "",
                latitude=r["latitude"],
                longitude=r["longitude"],
            )
        except (AttributeError, KeyError, TypeError, ValidationError) as e:
            raise TransportError("Geocoding response was malformed.") from e

        logger.debug("Resolved %r to %s (%s, %s)", query, match.label, match.latitude, match.longitude)
        return match


class TelemetryFetcher:
    """Fetches current conditions for a coordinate pair from the Open-Meteo forecast API."""

    def __init__(self, client: httpx.AsyncClient, url: str = FORECAST_URL):
        self.client = client
        self.url = url

    async def fetch(self, latitude: float, longitude: float) -> RawTelemetry:
        """Return current telemetry with wind speed in km/h.

        Raises ProviderError when the body carries Open-Meteo's error marker,
        TransportError on network, status, or parse failures.
        """
        try:
            resp = await self.client.get(
                self.url,
                params={
                    "latitude": latitude,
                    "longitude": longitude,
                    "current": CURRENT_PARAMS,
                    "wind_speed_unit": "kmh",
                },
            )
            data = resp.json()
        except httpx.HTTPError as e:
            raise TransportError(f"Forecast request failed: {e}") from e
        except ValueError as e:
            raise TransportError("Forecast response was not valid JSON.") from e

        # Open-Meteo reports bad requests as HTTP 400 with {"error": true, "reason": ...}
        if isinstance(data, dict) and data.get("error"):
            reason = data.get("reason")
            logger.info("Forecast provider rejected request: %s", reason)
            raise ProviderError(reason or PROVIDER_FAILURE_MESSAGE)

        try:
            resp.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise TransportError(f"Forecast request failed: {e}") from e

        current = data.get("current") if isinstance(data, dict) else None
        if not isinstance(current, dict):
            raise TransportError("Forecast response had no current conditions.")
        try:
            return RawTelemetry.model_validate(current)
        except ValidationError as e:
            raise TransportError("Forecast response was malformed.") from e
