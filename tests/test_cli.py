from pathlib import Path

from ook_switch.cli import build_parser, main
from ook_switch.core import WaveformTiming, parse_command, render_transmission


def test_parser_requires_subcommand():
    parser = build_parser()

    args = parser.parse_args(["bits", "A1+"])

    assert args.command == "bits"
    assert args.identifier == "A1+"


def test_bits_prints_symbols(tmp_path: Path, capsys):
    code = main(["-c", str(tmp_path / "missing.cfg"), "bits", "A1+"])

    assert code == 0
    assert capsys.readouterr().out.strip() == "00 01 01 01 00 01 01 01 01 01 01 11"


def test_bits_rejects_malformed_identifier(tmp_path: Path):
    assert main(["-c", str(tmp_path / "missing.cfg"), "bits", "E1+"]) == 2


def test_encode_writes_transmission(tmp_path: Path):
    output = tmp_path / "a1.iq"

    code = main(["-c", str(tmp_path / "missing.cfg"), "encode", "A1+", "-o", str(output)])

    assert code == 0
    assert output.read_bytes() == render_transmission(parse_command("A1+"), WaveformTiming())


def test_encode_uses_configured_radio(tmp_path: Path):
    config_path = tmp_path / "ook-switch.cfg"
    config_path.write_text(
        "[radio]\nsample_rate = 1000\nbit_rate = 100\nrepeats = 1\nflush_samples = 4\n",
        encoding="utf-8",
    )
    output = tmp_path / "b2.iq"

    assert main(["-c", str(config_path), "encode", "B2-", "-o", str(output)]) == 0

    timing = WaveformTiming(sample_rate=1000, bit_rate=100, flush_length=4)
    assert output.read_bytes() == render_transmission(
        parse_command("B2-"), timing, repeats=1
    )


def test_show_config_prints_sections(tmp_path: Path, capsys):
    assert main(["-c", str(tmp_path / "missing.cfg"), "show-config"]) == 0

    out = capsys.readouterr().out
    assert "[radio]" in out
    assert "bit_rate = 751" in out
    assert "[output]" in out


def test_encode_rejects_impossible_rates(tmp_path: Path):
    config_path = tmp_path / "ook-switch.cfg"
    config_path.write_text("[radio]\nsample_rate = 100\nbit_rate = 751\n", encoding="utf-8")
    output = tmp_path / "never.iq"

    assert main(["-c", str(config_path), "encode", "A1+", "-o", str(output)]) == 2
    assert not output.exists()


def test_bits_rejects_trailing_newline(tmp_path: Path, capsys):
    assert main(["-c", str(tmp_path / "missing.cfg"), "bits", "A1+\n"]) == 2
    assert capsys.readouterr().out == ""
