"""Configuration loader for ook-switch."""

from __future__ import annotations

from configparser import ConfigParser
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from . import constants
from .core import REPEATS, WaveformTiming
from .core.waveform import BIT_RATE, FLUSH_LENGTH, SAMPLE_RATE


@dataclass(slots=True)
class RadioConfig:
    sample_rate: int = SAMPLE_RATE
    bit_rate: int = BIT_RATE
    repeats: int = REPEATS
    flush_samples: int = FLUSH_LENGTH


@dataclass(slots=True)
class ServerConfig:
    host: str = constants.DEFAULT_SERVER_HOST
    port: int = constants.DEFAULT_SERVER_PORT
    assets_path: Optional[Path] = None  # served at /assets/ when set


@dataclass(slots=True)
class OutputConfig:
    path: str = constants.DEFAULT_OUTPUT_PATH


@dataclass(slots=True)
class LoggingConfig:
    level: str = "INFO"
    path: Optional[Path] = None
    log_network: bool = False


@dataclass(slots=True)
class OokConfig:
    radio: RadioConfig
    server: ServerConfig
    output: OutputConfig
    logging: LoggingConfig
    raw: ConfigParser
    path: Path

    @property
    def timing(self) -> WaveformTiming:
        return WaveformTiming(
            sample_rate=self.radio.sample_rate,
            bit_rate=self.radio.bit_rate,
            flush_length=self.radio.flush_samples,
        )


def _optional_path(value: Optional[str]) -> Optional[Path]:
    if not value:
        return None
    return Path(value).expanduser()


def load_config(path: Optional[Path] = None) -> OokConfig:
    """Load configuration from disk, applying defaults where necessary."""

    config_path = path or constants.DEFAULT_CONFIG_PATH
    parser = ConfigParser()
    parser.read_dict(
        {
            "radio": {
                "sample_rate": str(SAMPLE_RATE),
                "bit_rate": str(BIT_RATE),
                "repeats": str(REPEATS),
                "flush_samples": str(FLUSH_LENGTH),
            },
            "server": {
                "host": constants.DEFAULT_SERVER_HOST,
                "port": str(constants.DEFAULT_SERVER_PORT),
                "assets_path": "",
            },
            "output": {
                "path": constants.DEFAULT_OUTPUT_PATH,
            },
            "logging": {
                "level": "INFO",
                "path": "",
                "log_network": "false",
            },
        }
    )

    if config_path.exists():
        parser.read(config_path)

    radio = RadioConfig(
        sample_rate=parser.getint("radio", "sample_rate", fallback=SAMPLE_RATE),
        bit_rate=parser.getint("radio", "bit_rate", fallback=BIT_RATE),
        repeats=max(0, parser.getint("radio", "repeats", fallback=REPEATS)),
        flush_samples=max(
            0, parser.getint("radio", "flush_samples", fallback=FLUSH_LENGTH)
        ),
    )

    server = ServerConfig(
        host=parser.get("server", "host", fallback=constants.DEFAULT_SERVER_HOST),
        port=max(
            0,
            parser.getint("server", "port", fallback=constants.DEFAULT_SERVER_PORT),
        ),
        assets_path=_optional_path(parser.get("server", "assets_path", fallback="")),
    )

    output = OutputConfig(
        path=parser.get("output", "path", fallback=constants.DEFAULT_OUTPUT_PATH).strip()
        or constants.DEFAULT_OUTPUT_PATH,
    )

    logging_config = LoggingConfig(
        level=parser.get("logging", "level", fallback="INFO"),
        path=_optional_path(parser.get("logging", "path", fallback="")),
        log_network=parser.getboolean("logging", "log_network", fallback=False),
    )

    return OokConfig(
        radio=radio,
        server=server,
        output=output,
        logging=logging_config,
        raw=parser,
        path=config_path,
    )


def save_config(config: OokConfig) -> None:
    """Persist the current configuration to disk."""

    config_path = config.path
    config_path.parent.mkdir(parents=True, exist_ok=True)
    with config_path.open("w", encoding="utf-8") as stream:
        config.raw.write(stream)
