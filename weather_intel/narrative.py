# ABOUTME: Natural-language weather briefing via an optional Pydantic AI agent.
# ABOUTME: Falls back to a deterministic template when the agent is absent, fails, or returns nothing.

import logging

from pydantic_ai import Agent
from pydantic_ai.models.openrouter import OpenRouterModel
from pydantic_ai.providers.openrouter import OpenRouterProvider

from weather_intel.config import Settings
from weather_intel.models import ConditionLabel, LocationMatch, RawTelemetry

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You are the analyst of a weather intelligence system. You write short, factual "
    "briefings about current conditions at a single location.\n\n"
    "Rules:\n"
    "1. Write exactly two sentences.\n"
    "2. The first sentence analyses the conditions; the second gives a practical advisory.\n"
    "3. Use Celsius, km/h, hPa and mm as given. Do not invent data that is not provided.\n"
    "4. No greetings, lists, markdown or emojis.\n"
)

PROMPT_TEMPLATE = (
    "Location: {place}, {country}\n"
    "Condition: {condition}\n"
    "Temperature: {temperature}°C (feels like {feels_like}°C)\n"
    "Humidity: {humidity}%\n"
    "Wind speed: {wind} km/h\n"
    "Surface pressure: {pressure} hPa\n"
    "UV index: {uv}\n"
    "Precipitation: {precipitation} mm\n"
    "Time of day: {daypart}\n\n"
    "Write the two-sentence briefing for this location."
)

FALLBACK_TEMPLATE = (
    "{condition} with a perceived temperature of {feels_like:g}°C. Standard operational precautions advised."
)


def build_narrative_agent(settings: Settings) -> Agent | None:
    """Create the briefing agent, or None when no backend is configured or it cannot be built."""
    if not settings.openrouter_api_key:
        logger.info("OPENROUTER_API_KEY not set, narratives will use the fallback template")
        return None
    try:
        provider = OpenRouterProvider(api_key=settings.openrouter_api_key)
        model = OpenRouterModel(settings.narrative_model, provider=provider)
    except Exception:
        logger.warning("Could not initialise narrative model %s", settings.narrative_model, exc_info=True)
        return None
    return Agent(model, system_prompt=SYSTEM_PROMPT)


def build_prompt(place: LocationMatch, telemetry: RawTelemetry, condition: ConditionLabel) -> str:
    """Fill the fixed briefing prompt with place and telemetry values."""
    return PROMPT_TEMPLATE.format(
        place=place.display_name,
        country=place.country_name or "unknown country",
        condition=condition.value,
        temperature=telemetry.temperature_2m,
        feels_like=telemetry.apparent_temperature,
        humidity=telemetry.relative_humidity_2m,
        wind=telemetry.wind_speed_10m,
        pressure=telemetry.surface_pressure,
        uv=telemetry.uv_index,
        precipitation=telemetry.precipitation,
        daypart="day" if telemetry.is_day else "night",
    )


def fallback_narrative(condition: ConditionLabel, feels_like_c: float) -> str:
    """Deterministic one-sentence briefing used whenever the agent path is unavailable."""
    return FALLBACK_TEMPLATE.format(condition=condition.value.lower(), feels_like=feels_like_c)


class NarrativeGenerator:
    """Produces a briefing for a snapshot. `narrate` never raises."""

    def __init__(self, agent: Agent | None = None):
        self.agent = agent

    async def narrate(self, place: LocationMatch, telemetry: RawTelemetry, condition: ConditionLabel) -> str:
        if self.agent is None:
            return fallback_narrative(condition, telemetry.apparent_temperature)

        try:
            result = await self.agent.run(build_prompt(place, telemetry, condition))
            text = str(result.output or "").strip()
        except Exception:
            logger.warning("Narrative agent failed for %s, using fallback", place.label, exc_info=True)
            return fallback_narrative(condition, telemetry.apparent_temperature)

        if not text:
            logger.warning("Narrative agent returned empty output for %s, using fallback", place.label)
            return fallback_narrative(condition, telemetry.apparent_temperature)
        return text
