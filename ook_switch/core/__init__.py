"""Core primitives for ook-switch: commands, symbol encoding and IQ synthesis."""

from .encoder import BIT_STRING_LENGTH, encode, one_hot, split_symbols
from .models import (
    Address,
    Command,
    CommandFormatError,
    Group,
    all_commands,
    parse_command,
)
from .waveform import (
    FULL_SAMPLE,
    REPEATS,
    ZERO_SAMPLE,
    WaveformTiming,
    render_transmission,
    synthesize,
    write_bit,
    write_flush,
    write_run,
)

__all__ = [
    "Address",
    "BIT_STRING_LENGTH",
    "Command",
    "CommandFormatError",
    "FULL_SAMPLE",
    "Group",
    "REPEATS",
    "WaveformTiming",
    "ZERO_SAMPLE",
    "all_commands",
    "encode",
    "one_hot",
    "parse_command",
    "render_transmission",
    "split_symbols",
    "synthesize",
    "write_bit",
    "write_flush",
    "write_run",
]
