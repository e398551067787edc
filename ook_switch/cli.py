"""Command-line interface for ook-switch."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional

from . import constants
from .app import OokSwitchApp
from .config import load_config
from .core import (
    CommandFormatError,
    encode,
    parse_command,
    render_transmission,
    split_symbols,
)
from .sink import SinkWriteError, open_sink

LOGGER = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ook-switch", description="Remote-control outlets over an OOK IQ stream"
    )
    parser.add_argument(
        "-c",
        "--config",
        type=Path,
        default=constants.DEFAULT_CONFIG_PATH,
        help=f"Path to configuration file (default: {constants.DEFAULT_CONFIG_PATH})",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("start", help="Start the ook-switch service")

    subparsers.add_parser(
        "show-config", help="Print the resolved configuration and exit"
    )

    encode_parser = subparsers.add_parser(
        "encode", help="Write one command's IQ transmission and exit"
    )
    encode_parser.add_argument("identifier", help="Command such as A1+ or C3-")
    encode_parser.add_argument(
        "-o",
        "--output",
        default=constants.STDOUT_PATH,
        help="Output file, '-' for standard output (default: -)",
    )

    bits_parser = subparsers.add_parser(
        "bits", help="Print a command's symbol string and exit"
    )
    bits_parser.add_argument("identifier", help="Command such as A1+ or C3-")

    return parser


def main(argv: Optional[list[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    config = load_config(args.config)

    if args.command == "start":
        return OokSwitchApp.start(config)

    if args.command == "show-config":
        print(f"Configuration loaded from {config.path!s}\n")
        for section in config.raw.sections():
            print(f"[{section}]")
            for key, value in config.raw[section].items():
                print(f"{key} = {value}")
            print()
        return 0

    if args.command in ("encode", "bits"):
        try:
            command = parse_command(args.identifier)
        except CommandFormatError as exc:
            LOGGER.error("%s", exc)
            return 2

        if args.command == "bits":
            print(" ".join(split_symbols(encode(command))))
            return 0

        try:
            timing = config.timing
        except ValueError as exc:
            LOGGER.error("Invalid [radio] settings in %s: %s", config.path, exc)
            return 2

        data = render_transmission(command, timing, repeats=config.radio.repeats)
        sink = open_sink(args.output)
        try:
            sink.write(data)
        except SinkWriteError as exc:
            LOGGER.error("%s", exc)
            return 1
        finally:
            sink.close()
        return 0

    LOGGER.error("Unknown command: %s", args.command)
    return 1


if __name__ == "__main__":
    sys.exit(main())
