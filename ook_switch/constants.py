"""Constants used across the ook-switch package."""

from __future__ import annotations

from pathlib import Path

APP_NAME = "ook-switch"
DEFAULT_CONFIG_FILENAME = f"{APP_NAME}.cfg"
DEFAULT_CONFIG_PATH = Path.home() / ".config" / APP_NAME / DEFAULT_CONFIG_FILENAME

DEFAULT_SERVER_HOST = "0.0.0.0"
DEFAULT_SERVER_PORT = 8080

# "-" selects the process's standard output, which sendiq reads from.
STDOUT_PATH = "-"
DEFAULT_OUTPUT_PATH = STDOUT_PATH
