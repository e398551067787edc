"""Single-writer sequencing of commands onto the IQ output.

Request handlers submit commands concurrently; one consumer task owns the
sample buffer and the sink, so transmissions reach the sink whole and in
the order they were accepted. Submission is a handoff: a producer is
released only once the consumer has taken its command, which gives the
HTTP layer natural back-pressure while a transmission is being written.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
from dataclasses import dataclass
from typing import Optional

from .core import REPEATS, Command, WaveformTiming, encode, synthesize, write_flush
from .health import HealthReporter
from .sink import ByteSink, SinkWriteError

LOGGER = logging.getLogger(__name__)

_HEALTH_COMPONENT = "sequencer"


class SequencerStoppedError(RuntimeError):
    """Raised when submitting to a sequencer whose consumer is not running."""


@dataclass(slots=True)
class _Submission:
    command: Command
    accepted: asyncio.Future[None]


class TransmissionSequencer:
    """Serialises command transmissions onto a single byte sink."""

    def __init__(
        self,
        sink: ByteSink,
        timing: WaveformTiming,
        *,
        repeats: int = REPEATS,
        health: Optional[HealthReporter] = None,
    ) -> None:
        self._sink = sink
        self._timing = timing
        self._repeats = max(repeats, 0)
        self._health = health
        self._buffer = bytearray()
        self._queue: asyncio.Queue[_Submission] = asyncio.Queue(maxsize=1)
        self._worker: Optional[asyncio.Task[None]] = None
        self._closed = True
        self._transmitted = 0

    @property
    def running(self) -> bool:
        return self._worker is not None and not self._worker.done()

    @property
    def transmitted_count(self) -> int:
        return self._transmitted

    @property
    def pending_count(self) -> int:
        return self._queue.qsize()

    async def start(self, *, prime: bool = True) -> None:
        """Start the consumer task.

        With ``prime`` set, a flush run is written first so the transmitter
        has silence queued instead of idling on its default carrier.
        """

        if self._worker is not None:
            raise RuntimeError("TransmissionSequencer already started")

        if prime:
            write_flush(self._buffer, self._timing)
            await self._flush()

        self._closed = False
        self._worker = asyncio.create_task(self._run())
        await self._report(True, "running")
        LOGGER.info(
            "Transmission sequencer started (symbol=%d samples, repeats=%d)",
            self._timing.symbol_length,
            self._repeats,
        )

    async def stop(self) -> None:
        self._closed = True
        worker = self._worker
        if worker is not None and not worker.done():
            worker.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await worker
        self._fail_pending()
        await self._report(False, "stopped")

    async def submit(self, command: Command) -> None:
        """Hand ``command`` to the consumer, returning once it is accepted."""

        worker = self._worker
        if self._closed or worker is None:
            raise SequencerStoppedError("transmission sequencer is not running")

        loop = asyncio.get_running_loop()
        submission = _Submission(command=command, accepted=loop.create_future())
        await self._queue.put(submission)

        await asyncio.wait(
            {submission.accepted, worker}, return_when=asyncio.FIRST_COMPLETED
        )
        if not submission.accepted.done():
            # Consumer ended while this command was still queued.
            self._fail_pending()
            if not submission.accepted.done():
                submission.accepted.set_exception(
                    SequencerStoppedError("transmission sequencer stopped")
                )

        await submission.accepted
        LOGGER.debug("Command %s accepted for transmission", command)

    async def wait_idle(self) -> None:
        """Wait until every accepted command has been written to the sink."""

        await self._queue.join()

    async def join(self) -> None:
        """Wait for the consumer to end, re-raising the error that ended it."""

        worker = self._worker
        if worker is None:
            return
        await asyncio.wait({worker})
        if worker.cancelled():
            return
        exc = worker.exception()
        if exc is not None:
            raise exc

    async def _run(self) -> None:
        try:
            while True:
                submission = await self._queue.get()
                try:
                    # A producer cancelled after queueing is still transmitted.
                    if not submission.accepted.done():
                        submission.accepted.set_result(None)
                    await self._transmit(submission.command)
                finally:
                    self._queue.task_done()
        except SinkWriteError as exc:
            LOGGER.critical("IQ output failed; no further commands can be sent: %s", exc)
            await self._report(False, str(exc))
            raise
        finally:
            self._closed = True
            self._fail_pending()

    async def _transmit(self, command: Command) -> None:
        bits = encode(command)
        synthesize(bits, self._buffer, self._timing, repeats=self._repeats)
        size = len(self._buffer)
        await self._flush()
        self._transmitted += 1
        LOGGER.info("Transmitted %s (bits=%s, %d bytes)", command, bits, size)

    async def _flush(self) -> None:
        data = bytes(self._buffer)
        self._buffer.clear()
        loop = asyncio.get_running_loop()
        await loop.run_in_executor(None, self._sink.write, data)

    def _fail_pending(self) -> None:
        while True:
            try:
                submission = self._queue.get_nowait()
            except asyncio.QueueEmpty:
                break
            self._queue.task_done()
            if not submission.accepted.done():
                submission.accepted.set_exception(
                    SequencerStoppedError("transmission sequencer stopped")
                )

    async def _report(self, healthy: bool, detail: Optional[str]) -> None:
        if self._health is None:
            return
        await self._health.update(_HEALTH_COMPONENT, healthy, detail)
