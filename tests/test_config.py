# ABOUTME: Tests for environment-driven settings and session wiring.
# ABOUTME: Validates defaults, overrides, validation errors, and that build_session assembles a working pipeline.

import pytest
from pydantic import ValidationError

from conftest import PARIS_FORECAST, PARIS_GEOCODE, make_response, mock_client
from weather_intel import config
from weather_intel.config import Settings
from weather_intel.deps import build_orchestrator, build_session, create_http_client
from weather_intel.models import ConditionLabel
from weather_intel.session import Failure, Starting, Success

_ENV_VARS = (
    "OPENROUTER_API_KEY",
    "NARRATIVE_MODEL",
    "GEOCODING_URL",
    "FORECAST_URL",
    "GEOCODING_LANGUAGE",
    "STARTUP_DELAY_SECONDS",
    "LOADING_TICK_SECONDS",
    "SETTLE_DELAY_SECONDS",
)


@pytest.fixture
def clean_env(monkeypatch):
    """Clear settings variables and skip reading any local .env file."""
    for var in _ENV_VARS:
        monkeypatch.delenv(var, raising=False)
    monkeypatch.setattr(config, "load_dotenv", lambda: False)
    return monkeypatch


class TestSettings:
    def test_defaults(self, clean_env):
        """Settings.from_env falls back to Open-Meteo endpoints and default timings.

        Implementation: Loads settings with no relevant variables set.
        Passing implies: The app runs with zero configuration and no narrative backend.
        """
        settings = Settings.from_env()
        assert settings.geocoding_url == config.GEOCODING_URL
        assert settings.forecast_url == config.FORECAST_URL
        assert settings.geocoding_language == "en"
        assert settings.openrouter_api_key is None
        assert settings.startup_delay == 2.5
        assert settings.tick_interval == 0.8
        assert settings.settle_delay == 1.2

    def test_environment_overrides(self, clean_env):
        clean_env.setenv("OPENROUTER_API_KEY", "sk-test")
        clean_env.setenv("NARRATIVE_MODEL", "anthropic/claude-haiku-4.5")
        clean_env.setenv("STARTUP_DELAY_SECONDS", "0")
        clean_env.setenv("LOADING_TICK_SECONDS", "0.5")

        settings = Settings.from_env()
        assert settings.openrouter_api_key == "sk-test"
        assert settings.narrative_model == "anthropic/claude-haiku-4.5"
        assert settings.startup_delay == 0.0
        assert settings.tick_interval == 0.5

    def test_blank_values_are_ignored(self, clean_env):
        clean_env.setenv("OPENROUTER_API_KEY", "   ")
        assert Settings.from_env().openrouter_api_key is None

    def test_invalid_timing_rejected(self, clean_env):
        """Non-positive tick intervals fail at startup rather than spinning the ticker."""
        clean_env.setenv("LOADING_TICK_SECONDS", "0")
        with pytest.raises(ValidationError):
            Settings.from_env()

    def test_api_key_hidden_from_repr(self):
        assert "sk-secret" not in repr(Settings(openrouter_api_key="sk-secret"))


class TestWiring:
    @pytest.mark.asyncio
    async def test_create_http_client(self):
        client = create_http_client()
        try:
            assert client.headers["Accept"] == "application/json"
        finally:
            await client.aclose()

    def test_orchestrator_uses_configured_endpoints(self):
        client = mock_client()
        settings = Settings(geocoding_url="https://geo.test", forecast_url="https://wx.test", geocoding_language="fr")
        orchestrator = build_orchestrator(settings, client)

        assert orchestrator.geo_resolver.url == "https://geo.test"
        assert orchestrator.geo_resolver.language == "fr"
        assert orchestrator.telemetry_fetcher.url == "https://wx.test"
        assert orchestrator.narrator.agent is None

    @pytest.mark.asyncio
    async def test_build_session_runs_end_to_end(self):
        """A wired session resolves a query into a Success snapshot.

        Implementation: Builds a session with zero delays against mocked Open-Meteo responses.
        Passing implies: Settings, pipeline, and state machine are connected correctly.
        """
        client = mock_client(make_response(PARIS_GEOCODE), make_response(PARIS_FORECAST))
        session = build_session(Settings(startup_delay=0, settle_delay=0), client)
        assert isinstance(session.state, Starting)

        await session.start()
        await session.submit("Paris")

        assert isinstance(session.state, Success)
        assert session.state.snapshot.location_label == "Paris, France"
        assert session.state.snapshot.condition is ConditionLabel.PARTLY_CLOUDY

    @pytest.mark.asyncio
    async def test_build_session_unknown_place_fails_without_forecast(self):
        """A wired session turns an empty geocoding result into Failure and never calls the forecast API.

        Implementation: Builds a session against a mock client whose only response is an empty results list.
        Passing implies: NotFoundError flows from the resolver to the session message, stopping the pipeline.
        """
        client = mock_client(make_response({"results": []}))
        session = build_session(Settings(startup_delay=0, settle_delay=0), client)

        await session.start()
        await session.submit("Nowhereland")

        assert session.state == Failure(message="City not found. Please check the spelling.")
        assert client.get.call_count == 1
