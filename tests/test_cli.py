"""Tests for the panlayout command-line interface."""

from pathlib import Path

from click.testing import CliRunner

from panlayout import __version__
from panlayout.cli import _layout_to_filename, main

KURD = "D/-A-Bb-C-D-E-F-G-A_"


def test_layout_to_filename() -> None:
    assert _layout_to_filename("D/-A-Bb-C", ".svg") == "D_A_Bb_C.svg"
    assert _layout_to_filename("F#/-G#", ".mid") == "Fs_Gs.mid"
    assert _layout_to_filename("///", ".pdf") == "layout.pdf"


def test_version_option() -> None:
    result = CliRunner().invoke(main, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.output


def test_parse_prints_one_line_per_note() -> None:
    result = CliRunner().invoke(main, ["parse", KURD])
    assert result.exit_code == 0
    lines = result.output.strip().splitlines()
    assert len(lines) == 9
    assert "ding" in lines[0]
    assert "Bb3" in lines[2]
    assert "As3" in lines[2]


def test_parse_french_notation() -> None:
    result = CliRunner().invoke(main, ["parse", KURD, "--notation", "french"])
    assert result.exit_code == 0
    assert "Sib3" in result.output


def test_parse_failure_exits_non_zero() -> None:
    result = CliRunner().invoke(main, ["parse", "Z/-A"])
    assert result.exit_code == 1
    assert "ERROR" in result.output


def test_parse_strict_rejects_unknown_token() -> None:
    runner = CliRunner()
    assert runner.invoke(main, ["parse", "D/-A-H"]).exit_code == 0
    assert runner.invoke(main, ["parse", "D/-A-H", "--strict"]).exit_code == 1


def test_render_writes_svg(tmp_path: Path) -> None:
    out = tmp_path / "kurd.svg"
    result = CliRunner().invoke(main, ["render", KURD, "-o", str(out)])
    assert result.exit_code == 0, result.output
    assert "[3/3]" in result.output
    assert out.read_text(encoding="utf-8").startswith("<svg")


def test_render_writes_html_with_title(tmp_path: Path) -> None:
    out = tmp_path / "kurd.html"
    result = CliRunner().invoke(
        main, ["render", KURD, "--format", "html", "--title", "D Kurd", "-o", str(out)]
    )
    assert result.exit_code == 0, result.output
    assert "<h1>D Kurd</h1>" in out.read_text(encoding="utf-8")


def test_render_invalid_layout_fails() -> None:
    result = CliRunner().invoke(main, ["render", "", "-o", "unused.svg"])
    assert result.exit_code == 1
    assert "Could not render layout" in result.output


def test_render_fallback_text(tmp_path: Path) -> None:
    out = tmp_path / "raw.svg"
    result = CliRunner().invoke(main, ["render", "Z/-A", "--fallback-text", "-o", str(out)])
    assert result.exit_code == 0, result.output
    assert "Z/-A" in out.read_text(encoding="utf-8")


def test_midi_writes_file(tmp_path: Path) -> None:
    out = tmp_path / "kurd.mid"
    result = CliRunner().invoke(main, ["midi", KURD, "-o", str(out)])
    assert result.exit_code == 0, result.output
    assert "9-note preview" in result.output
    assert out.read_bytes().startswith(b"MThd")


def test_scales_lists_catalog() -> None:
    result = CliRunner().invoke(main, ["scales"])
    assert result.exit_code == 0
    assert "D Kurd" in result.output
    assert "F# Low Pygmy" in result.output


def test_scales_with_note_count() -> None:
    result = CliRunner().invoke(main, ["scales", "--notes", "12"])
    assert result.exit_code == 0
    assert "D/(F)-(G)-A-Bb-C-D-E-F-G-A-C" in result.output


def test_midi_out_of_range_layout_fails(tmp_path: Path) -> None:
    out = tmp_path / "high.mid"
    result = CliRunner().invoke(main, ["midi", "D/-A9-B", "-o", str(out)])
    assert result.exit_code == 1
    assert "outside the MIDI range" in result.output
    assert "Done!" not in result.output
    assert not out.exists()


def test_render_stops_before_later_steps_on_parse_failure() -> None:
    result = CliRunner().invoke(main, ["render", "Z/", "-o", "unused.svg"])
    assert result.exit_code == 1
    assert "[1/3]" in result.output
    assert "[2/3]" not in result.output
    assert "[3/3]" not in result.output
