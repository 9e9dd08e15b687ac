# ABOUTME: Client-visible session state machine: starting, idle, loading, success, failure.
# ABOUTME: Guards against stale completions with request tokens and rotates loading captions while a query runs.

import asyncio
import logging
from collections.abc import Awaitable, Callable, Sequence
from typing import Literal, Protocol

from pydantic import BaseModel, ConfigDict

from weather_intel.errors import WeatherError
from weather_intel.models import WeatherSnapshot

logger = logging.getLogger(__name__)

LOADING_CAPTIONS = (
    "Acquiring Satellite Data...",
    "Triangulating Coordinates...",
    "Analyzing Atmospheric Conditions...",
    "Compiling Intelligence Briefing...",
)

GENERIC_ERROR_MESSAGE = "An error occurred while fetching data."


class Starting(BaseModel):
    """One-time startup sequence; submissions are ignored."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["starting"] = "starting"


class Idle(BaseModel):
    """Ready and awaiting the first query."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["idle"] = "idle"


class Loading(BaseModel):
    """A query is in flight; `step_index` selects the current caption."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["loading"] = "loading"
    step_index: int = 0


class Success(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["success"] = "success"
    snapshot: WeatherSnapshot


class Failure(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["failure"] = "failure"
    message: str


SessionState = Starting | Idle | Loading | Success | Failure

Listener = Callable[[SessionState], None]
Sleep = Callable[[float], Awaitable[None]]


class Orchestrator(Protocol):
    async def run(self, query: str) -> WeatherSnapshot | None: ...


class SessionStateMachine:
    """Owns the single session state cell.

    External code dispatches `start()` and `submit(query)` and reads `state`;
    renderers register with `subscribe()` to be told about every transition.
    """

    def __init__(
        self,
        orchestrator: Orchestrator,
        *,
        startup_delay: float = 0.0,
        tick_interval: float = 0.8,
        settle_delay: float = 0.0,
        captions: Sequence[str] = LOADING_CAPTIONS,
        sleep: Sleep = asyncio.sleep,
    ):
        if not captions:
            raise ValueError("At least one loading caption is required")
        self._orchestrator = orchestrator
        self._startup_delay = startup_delay
        self._tick_interval = tick_interval
        self._settle_delay = settle_delay
        self._captions = tuple(captions)
        self._sleep = sleep
        self._state: SessionState = Starting()
        self._token = 0
        self._ticker: asyncio.Task | None = None
        self._listeners: list[Listener] = []

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def caption(self) -> str | None:
        """Loading caption for the current step, or None outside Loading."""
        if isinstance(self._state, Loading):
            return self._captions[self._state.step_index]
        return None

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a state listener. Returns a callable that unsubscribes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    async def start(self) -> None:
        """Run the startup sequence once, then become Idle."""
        if not isinstance(self._state, Starting):
            return
        if self._startup_delay:
            await self._sleep(self._startup_delay)
        if isinstance(self._state, Starting):
            self._set_state(Idle())

    async def submit(self, query: str) -> None:
        """Run a query and settle the session, unless a newer submission supersedes it.

        If the submitting task is cancelled while it is still the latest query,
        the session returns to Idle before the cancellation propagates.
        """
        query = query.strip()
        if not query or isinstance(self._state, Starting):
            return

        self._token += 1
        token = self._token
        self._enter_loading()

        try:
            outcome = await self._run_query(query)
            if self._settle_delay:
                await self._sleep(self._settle_delay)
        except asyncio.CancelledError:
            if token == self._token:
                logger.info("Weather query %r was cancelled", query)
                self._set_state(Idle())
            raise

        if token != self._token:
            logger.debug("Ignoring stale completion for %r (token %d, latest %d)", query, token, self._token)
            return
        self._set_state(outcome)

    def close(self) -> None:
        """Stop caption rotation. In-flight queries settle as usual."""
        self._stop_ticker()

    async def _run_query(self, query: str) -> SessionState:
        try:
            snapshot = await self._orchestrator.run(query)
        except WeatherError as e:
            return Failure(message=str(e) or GENERIC_ERROR_MESSAGE)
        except Exception:
            logger.exception("Weather query %r failed unexpectedly", query)
            return Failure(message=GENERIC_ERROR_MESSAGE)
        return Success(snapshot=snapshot) if snapshot is not None else Idle()

    def _enter_loading(self) -> None:
        self._stop_ticker()
        self._set_state(Loading(step_index=0))
        self._ticker = asyncio.create_task(self._rotate_captions())

    async def _rotate_captions(self) -> None:
        step = 0
        while True:
            await self._sleep(self._tick_interval)
            step = (step + 1) % len(self._captions)
            self._set_state(Loading(step_index=step))

    def _stop_ticker(self) -> None:
        if self._ticker is not None:
            self._ticker.cancel()
            self._ticker = None

    def _set_state(self, state: SessionState) -> None:
        if not isinstance(state, Loading):
            self._stop_ticker()
        self._state = state
        for listener in list(self._listeners):
            try:
                listener(state)
            except Exception:
                logger.exception("Session listener failed on %s", state.kind)
