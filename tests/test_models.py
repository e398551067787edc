import pytest

from ook_switch.core import Address, Command, CommandFormatError, Group, all_commands, parse_command


def test_parse_command_on():
    command = parse_command("A1+")

    assert command == Command(group=Group.A, address=Address.ONE, state=True)


def test_parse_command_off_last_slot():
    command = parse_command("D3-")

    assert command.group is Group.D
    assert command.address is Address.THREE
    assert command.state is False


@pytest.mark.parametrize(
    "identifier",
    ["E1+", "A4+", "A0-", "a1+", "A1", "A1*", "A1++", " A1+", "", "AA+", "1A+", "A1+\n", "\nA1+"],
)
def test_parse_command_rejects_malformed(identifier):
    with pytest.raises(CommandFormatError):
        parse_command(identifier)


def test_command_format_error_is_value_error():
    assert issubclass(CommandFormatError, ValueError)


def test_identifier_round_trips_for_every_command():
    commands = list(all_commands())

    assert len(commands) == 24
    assert len(set(commands)) == 24
    for command in commands:
        assert parse_command(command.identifier) == command
        assert str(command) == command.identifier


def test_command_is_immutable():
    command = parse_command("B2+")

    with pytest.raises(AttributeError):
        command.state = False  # type: ignore[misc]
