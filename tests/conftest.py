import threading
from typing import Callable

import pytest

from ook_switch.core import WaveformTiming


class RecordingSink:
    """Byte sink keeping every write for inspection."""

    def __init__(self) -> None:
        self.writes: list[bytes] = []
        self.closed = False
        self._lock = threading.Lock()

    def write(self, data) -> None:
        with self._lock:
            self.writes.append(bytes(data))

    def close(self) -> None:
        self.closed = True


class BrokenPipeStream:
    """Binary stream that starts raising ``BrokenPipeError`` after N writes."""

    def __init__(self, fail_after: int) -> None:
        self.fail_after = fail_after
        self.writes = 0

    def write(self, data) -> int:
        if self.writes >= self.fail_after:
            raise BrokenPipeError(32, "Broken pipe")
        self.writes += 1
        return len(data)

    def flush(self) -> None:
        pass

    def close(self) -> None:
        pass


@pytest.fixture
def fast_timing() -> WaveformTiming:
    """Short symbols keep transmissions small: 10 samples per bit."""
    return WaveformTiming(sample_rate=1000, bit_rate=100, flush_length=16)


@pytest.fixture
def recording_sink() -> RecordingSink:
    return RecordingSink()


@pytest.fixture
def broken_pipe_stream() -> Callable[[int], BrokenPipeStream]:
    return BrokenPipeStream
