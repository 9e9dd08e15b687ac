# ABOUTME: Sequences geocoding, telemetry, classification, and narrative into one WeatherSnapshot.
# ABOUTME: Stateless per run; the first geocoding or forecast failure propagates unchanged.

import logging

from weather_intel.conditions import classify_condition
from weather_intel.models import WeatherSnapshot
from weather_intel.narrative import NarrativeGenerator
from weather_intel.weather_service import GeoResolver, TelemetryFetcher

logger = logging.getLogger(__name__)


class QueryOrchestrator:
    """Runs the location → telemetry → narrative pipeline for a single query."""

    def __init__(self, geo_resolver: GeoResolver, telemetry_fetcher: TelemetryFetcher, narrator: NarrativeGenerator):
        self.geo_resolver = geo_resolver
        self.telemetry_fetcher = telemetry_fetcher
        self.narrator = narrator

    async def run(self, query: str) -> WeatherSnapshot | None:
        """Build a snapshot for `query`.

        Blank queries return None without touching the network. Raises
        NotFoundError, ProviderError or TransportError from the lookup stages.
        """
        query = query.strip()
        if not query:
            return None

        logger.info("Running weather query %r", query)
        place = await self.geo_resolver.resolve(query)
        telemetry = await self.telemetry_fetcher.fetch(place.latitude, place.longitude)
        condition = classify_condition(telemetry.weather_code)
        narrative = await self.narrator.narrate(place, telemetry, condition)

        return WeatherSnapshot(
            location_label=place.label,
            temperature_c=telemetry.temperature_2m,
            feels_like_c=telemetry.apparent_temperature,
            condition=condition,
            humidity_pct=telemetry.relative_humidity_2m,
            wind_kph=telemetry.wind_speed_10m,
            pressure_hpa=telemetry.surface_pressure,
            uv_index=telemetry.uv_index,
            precipitation_mm=telemetry.precipitation,
            is_daytime=bool(telemetry.is_day),
            narrative=narrative,
        )
