"""IQ waveform synthesis for on-off keyed transmissions.

Each bit occupies one fixed-length symbol slot made of a pulse run
(full-amplitude samples) followed by a pause run (zero-amplitude samples).
The bit value is carried only by the duty cycle: 30% pulse for ``0``, 70%
pulse for ``1``. Samples are unsigned 8-bit I/Q pairs centred on 127, so
the carrier sits at zero frequency.

A transmission is framed as::

    flush | bits | 0 | blank | bits | 0 | blank | ... | bits | flush

with ``REPEATS + 1`` copies of the bit string. The flush runs push stale
data through the transmitter's FIFO; without them it falls back to its
default carrier when the input runs dry.
"""

from __future__ import annotations

from dataclasses import dataclass

from .encoder import encode
from .models import Command

FULL_SAMPLE = bytes((255, 127))
ZERO_SAMPLE = bytes((127, 127))

SAMPLE_RATE = 150000
BIT_RATE = 751
FLUSH_LENGTH = 32000  # samples, enough to drain sendiq's FIFO
REPEATS = 5

# Pulse share of a ``0`` bit in tenths; a ``1`` bit uses the complement.
DUTY_CYCLE_TENTHS = 3


@dataclass(frozen=True, slots=True)
class WaveformTiming:
    """Sample counts derived from the sample rate and symbol bit rate."""

    sample_rate: int = SAMPLE_RATE
    bit_rate: int = BIT_RATE
    flush_length: int = FLUSH_LENGTH

    def __post_init__(self) -> None:
        if self.sample_rate <= 0 or self.bit_rate <= 0:
            raise ValueError("sample_rate and bit_rate must be positive")
        if self.bit_rate > self.sample_rate:
            raise ValueError(
                f"bit_rate {self.bit_rate} exceeds sample_rate {self.sample_rate}"
            )
        if self.flush_length < 0:
            raise ValueError("flush_length must not be negative")

    @property
    def symbol_length(self) -> int:
        return self.sample_rate // self.bit_rate

    @property
    def blank_length(self) -> int:
        """Silence between repeated messages, 6.5 symbol slots."""
        return 6 * self.symbol_length + (self.symbol_length >> 1)

    def pulse_length(self, bit: str) -> int:
        short = (self.symbol_length * DUTY_CYCLE_TENTHS) // 10
        if bit == "0":
            return short
        if bit == "1":
            return self.symbol_length - short
        raise ValueError(f"not a bit: {bit!r}")

    def pause_length(self, bit: str) -> int:
        return self.symbol_length - self.pulse_length(bit)


def write_run(buffer: bytearray, pulse: int, pause: int) -> None:
    buffer += FULL_SAMPLE * pulse
    buffer += ZERO_SAMPLE * pause


def write_bit(buffer: bytearray, bit: str, timing: WaveformTiming) -> None:
    write_run(buffer, timing.pulse_length(bit), timing.pause_length(bit))


def write_flush(buffer: bytearray, timing: WaveformTiming) -> None:
    write_run(buffer, 0, timing.flush_length)


def synthesize(
    bits: str,
    buffer: bytearray,
    timing: WaveformTiming,
    *,
    repeats: int = REPEATS,
) -> None:
    """Append a complete framed transmission of ``bits`` to ``buffer``."""

    # Every copy of the message is identical, so build it once.
    message = bytearray()
    for bit in bits:
        write_bit(message, bit, timing)

    separator = bytearray()
    write_bit(separator, "0", timing)
    write_run(separator, 0, timing.blank_length)

    write_flush(buffer, timing)
    for remaining in range(repeats, -1, -1):
        buffer += message
        if remaining > 0:
            buffer += separator
    write_flush(buffer, timing)


def render_transmission(
    command: Command, timing: WaveformTiming, *, repeats: int = REPEATS
) -> bytes:
    buffer = bytearray()
    synthesize(encode(command), buffer, timing, repeats=repeats)
    return bytes(buffer)
