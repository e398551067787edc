"""Append-only byte sink feeding the radio transmitter."""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import BinaryIO, Optional, Protocol

from . import constants

LOGGER = logging.getLogger(__name__)


class SinkWriteError(RuntimeError):
    """Raised when the output sink can no longer accept bytes."""


class ByteSink(Protocol):
    """Minimal contract for destinations of synthesized IQ data."""

    def write(self, data: bytes | bytearray | memoryview) -> None:
        """Append ``data`` and push it through to the consumer."""
        ...

    def close(self) -> None:
        ...


class StreamSink:
    """Writes IQ bytes to a binary stream, flushing after every write."""

    def __init__(
        self, stream: BinaryIO, *, name: str = "stream", owns_stream: bool = True
    ) -> None:
        self._stream = stream
        self._name = name
        self._owns_stream = owns_stream

    @property
    def name(self) -> str:
        return self._name

    def write(self, data: bytes | bytearray | memoryview) -> None:
        try:
            self._stream.write(data)
            self._stream.flush()
        except (OSError, ValueError) as exc:
            raise SinkWriteError(f"writing to {self._name} failed: {exc}") from exc

    def close(self) -> None:
        if not self._owns_stream:
            return
        try:
            self._stream.close()
        except OSError as exc:
            LOGGER.warning("Closing %s failed: %s", self._name, exc)


def open_sink(path: Optional[str] = None) -> StreamSink:
    """Open the configured output; ``"-"`` selects standard output.

    Opening a FIFO blocks until the reading side (sendiq) has connected.
    """

    target = path or constants.DEFAULT_OUTPUT_PATH
    if target == constants.STDOUT_PATH:
        return StreamSink(sys.stdout.buffer, name="stdout", owns_stream=False)

    file_path = Path(target).expanduser()
    LOGGER.info("Opening IQ output %s", file_path)
    return StreamSink(file_path.open("ab"), name=str(file_path))
