"""Symbol encoder turning a command into its on-air bit string.

Every field is sent as a run of 2-bit symbols. Group and address use
positional (one-hot) placement: the selected slot carries the mark symbol
and every other slot carries the pad symbol, so a receiver only needs to
find which slot has energy. Four constant pad symbols follow, then one
state symbol which is ``11`` for on and ``00`` for off.

Resulting patterns, with ``_`` standing for a pad symbol bit pair::

    A1+: 00______00____________11
    A1-: 00______00____________00
    B2+: __00______00__________11
    D3-: ______00____00________00
"""

from __future__ import annotations

from typing import List

from .models import Command

MARK_SYMBOL = "00"
PAD_SYMBOL = "01"
STATE_ON_SYMBOL = "11"
STATE_OFF_SYMBOL = "00"

SYMBOL_BITS = 2

GROUP_SLOTS = 4
ADDRESS_SLOTS = 3
PADDING_SLOTS = 4

BIT_STRING_LENGTH = (
    GROUP_SLOTS + ADDRESS_SLOTS + PADDING_SLOTS
) * SYMBOL_BITS + SYMBOL_BITS


def one_hot(slots: int, index: int) -> str:
    """Return ``slots`` symbols with the mark symbol at position ``index``."""

    return "".join(
        MARK_SYMBOL if slot == index else PAD_SYMBOL for slot in range(slots)
    )


def encode(command: Command) -> str:
    state_symbol = STATE_ON_SYMBOL if command.state else STATE_OFF_SYMBOL
    return "".join(
        (
            one_hot(GROUP_SLOTS, int(command.group)),
            one_hot(ADDRESS_SLOTS, int(command.address)),
            PAD_SYMBOL * PADDING_SLOTS,
            state_symbol,
        )
    )


def split_symbols(bits: str) -> List[str]:
    if len(bits) % SYMBOL_BITS:
        raise ValueError(
            f"bit string length {len(bits)} is not a whole number of symbols"
        )
    return [bits[i : i + SYMBOL_BITS] for i in range(0, len(bits), SYMBOL_BITS)]
