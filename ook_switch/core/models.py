"""Domain models for remote-control commands."""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import IntEnum
from typing import Iterator

_IDENTIFIER_PATTERN = re.compile(r"([A-D])([1-3])([+\-])")


class CommandFormatError(ValueError):
    """Raised when a command identifier does not match ``<A-D><1-3><+|->``."""


class Group(IntEnum):
    """Receiver group selected by the remote's letter buttons."""

    A = 0
    B = 1
    C = 2
    D = 3

    @property
    def label(self) -> str:
        return self.name


class Address(IntEnum):
    """Outlet within a receiver group, labelled 1-3 on the remote."""

    ONE = 0
    TWO = 1
    THREE = 2

    @property
    def label(self) -> str:
        return str(self.value + 1)

    @classmethod
    def from_label(cls, label: str) -> "Address":
        return cls(int(label) - 1)


@dataclass(frozen=True, slots=True)
class Command:
    group: Group
    address: Address
    state: bool

    @property
    def identifier(self) -> str:
        sign = "+" if self.state else "-"
        return f"{self.group.label}{self.address.label}{sign}"

    def __str__(self) -> str:
        return self.identifier


def parse_command(identifier: str) -> Command:
    """Build a :class:`Command` from its textual identifier, e.g. ``"B2-"``."""

    match = _IDENTIFIER_PATTERN.fullmatch(identifier)
    if match is None:
        raise CommandFormatError(f"invalid command identifier: {identifier!r}")

    letter, digit, sign = match.groups()
    return Command(
        group=Group[letter],
        address=Address.from_label(digit),
        state=sign == "+",
    )


def all_commands() -> Iterator[Command]:
    for group in Group:
        for address in Address:
            for state in (True, False):
                yield Command(group=group, address=address, state=state)
