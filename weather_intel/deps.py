# ABOUTME: Wiring for the weather session: HTTP client, pipeline components, and state machine.
# ABOUTME: The narrative backend is resolved once here and passed down as an optional collaborator.

import httpx

from weather_intel.config import Settings
from weather_intel.narrative import NarrativeGenerator, build_narrative_agent
from weather_intel.orchestrator import QueryOrchestrator
from weather_intel.session import SessionStateMachine
from weather_intel.weather_service import GeoResolver, TelemetryFetcher


def create_http_client() -> httpx.AsyncClient:
    """Create the shared httpx client. Failed requests are not retried."""
    return httpx.AsyncClient(headers={"Accept": "application/json"})


def build_orchestrator(settings: Settings, http_client: httpx.AsyncClient) -> QueryOrchestrator:
    """Assemble the query pipeline from settings."""
    return QueryOrchestrator(
        geo_resolver=GeoResolver(http_client, settings.geocoding_url, settings.geocoding_language),
        telemetry_fetcher=TelemetryFetcher(http_client, settings.forecast_url),
        narrator=NarrativeGenerator(build_narrative_agent(settings)),
    )


def build_session(settings: Settings, http_client: httpx.AsyncClient) -> SessionStateMachine:
    """Create a session state machine in the Starting state; call `start()` to run the startup sequence."""
    return SessionStateMachine(
        build_orchestrator(settings, http_client),
        startup_delay=settings.startup_delay,
        tick_interval=settings.tick_interval,
        settle_delay=settings.settle_delay,
    )
