"""Main application entry-point for ook-switch."""

from __future__ import annotations

import asyncio
import contextlib
import logging
from enum import Enum
from typing import Optional

from .config import OokConfig, load_config
from .health import HealthReporter
from .ingress import IngressServer
from .logging import configure_logging
from .sequencer import TransmissionSequencer
from .sink import ByteSink, SinkWriteError, open_sink

LOGGER = logging.getLogger(__name__)


class AgentState(str, Enum):
    STARTING = "starting"
    ACTIVE = "active"
    FAILED = "failed"
    STOPPING = "stopping"


class OokSwitchApp:
    """Coordinates application startup and shutdown.

    Startup order is sink, then sequencer (which primes the sink with
    silence), then the HTTP ingress. Shutdown runs in reverse. The
    application exits when asked to or when the sequencer's output fails,
    the latter being fatal.

    A sink can be injected for testing; otherwise the configured output
    path is opened.
    """

    def __init__(
        self,
        config: Optional[OokConfig] = None,
        *,
        sink: Optional[ByteSink] = None,
    ) -> None:
        self._config = config or load_config()
        self._sink: Optional[ByteSink] = sink
        self._owns_sink = sink is None
        self._health = HealthReporter()
        self._sequencer: Optional[TransmissionSequencer] = None
        self._ingress: Optional[IngressServer] = None
        self._shutdown_event: Optional[asyncio.Event] = None
        self._state = AgentState.STARTING
        self._state_detail: Optional[str] = None
        self._failure: Optional[BaseException] = None

    @property
    def state(self) -> AgentState:
        return self._state

    @property
    def health(self) -> HealthReporter:
        return self._health

    @property
    def sequencer(self) -> Optional[TransmissionSequencer]:
        return self._sequencer

    async def run(self) -> int:
        """Run until shutdown is requested; returns the process exit code."""

        self._shutdown_event = asyncio.Event()
        LOGGER.info("ook-switch starting with config: %s", self._config.path)

        try:
            try:
                await self._start_services()
            except (OSError, ValueError, SinkWriteError) as exc:
                self._failure = exc
                await self._transition_state(AgentState.FAILED, detail=str(exc))
                LOGGER.critical("ook-switch failed to start: %s", exc)
            else:
                await self._idle_loop()
        except asyncio.CancelledError:
            LOGGER.info("ook-switch received shutdown signal")
            raise
        finally:
            await self._stop_services()

        return 1 if self._failure is not None else 0

    def request_shutdown(self) -> None:
        if self._shutdown_event is not None:
            self._shutdown_event.set()

    @classmethod
    def start(cls, config: Optional[OokConfig] = None) -> int:
        instance = cls(config=config)
        configure_logging(
            instance._config.logging.level,
            log_path=instance._config.logging.path,
            log_network=instance._config.logging.log_network,
        )
        try:
            return asyncio.run(instance.run())
        except KeyboardInterrupt:
            LOGGER.info("ook-switch received shutdown signal")
            return 0

    async def _transition_state(
        self, state: AgentState, *, detail: Optional[str] = None
    ) -> None:
        if state == self._state and detail == self._state_detail:
            return

        previous = self._state
        self._state = state
        self._state_detail = detail

        message_detail = detail or state.value
        LOGGER.info(
            "Agent state transition %s -> %s (%s)",
            previous.value,
            state.value,
            message_detail,
        )
        await self._health.set_service_state(
            state.value, healthy=state == AgentState.ACTIVE
        )

    async def _start_services(self) -> None:
        await self._transition_state(AgentState.STARTING, detail="initialising")

        timing = self._config.timing
        radio = self._config.radio

        if self._sink is None:
            loop = asyncio.get_running_loop()
            # May block on a FIFO until the transmitter opens it for reading.
            self._sink = await loop.run_in_executor(
                None, open_sink, self._config.output.path
            )
        await self._health.update("sink", True, self._config.output.path)

        self._sequencer = TransmissionSequencer(
            self._sink,
            timing,
            repeats=radio.repeats,
            health=self._health,
        )
        await self._sequencer.start(prime=True)

        server = self._config.server
        self._ingress = IngressServer(
            self._sequencer,
            server.host,
            server.port,
            health=self._health,
            assets_path=server.assets_path,
        )
        await self._ingress.start()

        await self._transition_state(AgentState.ACTIVE)

    async def _idle_loop(self) -> None:
        shutdown_event = self._shutdown_event
        sequencer = self._sequencer
        if shutdown_event is None or sequencer is None:
            raise RuntimeError("services must be started before the idle loop")

        shutdown = asyncio.create_task(shutdown_event.wait())
        sequencer_done = asyncio.create_task(sequencer.join())
        try:
            await asyncio.wait(
                {shutdown, sequencer_done}, return_when=asyncio.FIRST_COMPLETED
            )
        finally:
            for task in (shutdown, sequencer_done):
                if not task.done():
                    task.cancel()
                    with contextlib.suppress(asyncio.CancelledError):
                        await task

        if sequencer_done.done() and not sequencer_done.cancelled():
            exc = sequencer_done.exception()
            if exc is not None:
                self._failure = exc
                await self._health.update("sink", False, str(exc))
                await self._transition_state(AgentState.FAILED, detail=str(exc))
                LOGGER.critical("Transmission stopped: %s", exc)

    async def _stop_services(self) -> None:
        if self._state != AgentState.FAILED:
            await self._transition_state(
                AgentState.STOPPING, detail="shutdown requested"
            )

        if self._ingress is not None:
            await self._ingress.stop()
            self._ingress = None

        if self._sequencer is not None:
            if self._sequencer.running:
                # Accepted commands are always sent before the sink closes.
                await self._sequencer.wait_idle()
            await self._sequencer.stop()
            self._sequencer = None

        if self._sink is not None and self._owns_sink:
            self._sink.close()
            self._sink = None

        if self._shutdown_event is not None:
            self._shutdown_event.set()
