from pathlib import Path

import pytest

from ook_switch.config import load_config, save_config
from ook_switch.core import WaveformTiming


def test_load_config_defaults(tmp_path: Path) -> None:
    config_path = tmp_path / "ook-switch.cfg"
    config = load_config(config_path)

    assert config.path == config_path
    assert config.radio.sample_rate == 150000
    assert config.radio.bit_rate == 751
    assert config.radio.repeats == 5
    assert config.radio.flush_samples == 32000
    assert config.server.host == "0.0.0.0"
    assert config.server.port == 8080
    assert config.server.assets_path is None
    assert config.output.path == "-"
    assert config.logging.level == "INFO"
    assert config.logging.path is None
    assert config.logging.log_network is False
    assert config.timing == WaveformTiming()


def test_load_config_overrides_defaults(tmp_path: Path) -> None:
    config_file = tmp_path / "ook-switch.cfg"
    config_file.write_text(
        """
[radio]
sample_rate = 48000
bit_rate = 600
repeats = 2
flush_samples = 1000

[server]
host = 127.0.0.1
port = 9090
assets_path = ~/assets

[output]
path = /tmp/sendiq.fifo

[logging]
level = debug
path = /var/log/ook-switch.log
log_network = true
"""
    )

    config = load_config(config_file)

    assert config.radio.sample_rate == 48000
    assert config.radio.bit_rate == 600
    assert config.radio.repeats == 2
    assert config.server.host == "127.0.0.1"
    assert config.server.port == 9090
    assert config.server.assets_path == Path("~/assets").expanduser()
    assert config.output.path == "/tmp/sendiq.fifo"
    assert config.logging.level == "debug"
    assert config.logging.path == Path("/var/log/ook-switch.log")
    assert config.logging.log_network is True

    timing = config.timing
    assert timing.symbol_length == 80
    assert timing.flush_length == 1000


def test_load_config_clamps_negative_values(tmp_path: Path) -> None:
    config_path = tmp_path / "ook-switch.cfg"
    config_path.write_text(
        "[radio]\nrepeats = -3\nflush_samples = -10\n\n[server]\nport = -1\n",
        encoding="utf-8",
    )

    config = load_config(config_path)

    assert config.radio.repeats == 0
    assert config.radio.flush_samples == 0
    assert config.server.port == 0


def test_empty_output_path_means_stdout(tmp_path: Path) -> None:
    config_path = tmp_path / "ook-switch.cfg"
    config_path.write_text("[output]\npath =\n", encoding="utf-8")

    assert load_config(config_path).output.path == "-"


def test_impossible_rates_rejected_when_building_timing(tmp_path: Path) -> None:
    config_path = tmp_path / "ook-switch.cfg"
    config_path.write_text("[radio]\nsample_rate = 100\nbit_rate = 751\n", encoding="utf-8")

    config = load_config(config_path)

    with pytest.raises(ValueError):
        config.timing


def test_save_config_round_trip(tmp_path: Path) -> None:
    config_path = tmp_path / "nested" / "ook-switch.cfg"
    config = load_config(config_path)
    config.raw.set("server", "port", "8181")

    save_config(config)

    assert load_config(config_path).server.port == 8181
