"""panlayout CLI entry point."""

import logging
import sys
from pathlib import Path
from typing import NoReturn

import click

from panlayout import __version__
from panlayout.diagram_exporter import SUPPORTED_FORMATS, DiagramExporter, LayoutParseError
from panlayout.layout_models import ParseFailure
from panlayout.layout_parser import LayoutParser
from panlayout.midi_exporter import LayoutMidiExporter
from panlayout.scales import SCALES, pattern_for, scale_display_name
from panlayout.speller import MODE_OFFSETS, spelling_for

MODE_CHOICE = click.Choice(sorted(MODE_OFFSETS), case_sensitive=False)
NOTATION_CHOICE = click.Choice(["american", "french"], case_sensitive=False)


def _layout_to_filename(layout: str, suffix: str) -> str:
    """
    Derive a safe output filename from a layout string.

    ``D/-A-Bb-C`` → ``D_A_Bb_C.svg``.
    """
    stem = "".join(ch if ch.isalnum() or ch == "#" else "_" for ch in layout)
    stem = "_".join(part for part in stem.replace("#", "s").split("_") if part)
    return f"{stem or 'layout'}{suffix}"


def _fail(message: str) -> NoReturn:
    click.echo(f"  ERROR: {message}", err=True)
    sys.exit(1)


# ── CLI group ──────────────────────────────────────────────────────────────────

@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(version=__version__, prog_name="panlayout")
@click.option("--verbose", "-v", is_flag=True, help="Log parse decisions to stderr.")
def main(verbose: bool) -> None:
    """panlayout: handpan layout parser and diagram generator."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")


# ── parse subcommand ───────────────────────────────────────────────────────────

@main.command()
@click.argument("layout")
@click.option("--mode", type=MODE_CHOICE, default="aeolian", show_default=True,
              help="Scale mode, used to choose sharp or flat spelling.")
@click.option("--notation", type=NOTATION_CHOICE, default="american", show_default=True,
              help="American letter names or French solfège.")
@click.option("--strict", is_flag=True, help="Fail on unrecognised note tokens instead of skipping them.")
def parse(layout: str, mode: str, notation: str, strict: bool) -> None:
    """
    Parse LAYOUT and print one line per note.

    \b
    Examples:
      panlayout parse "D/-A-Bb-C-D-E-F-G-A_"
      panlayout parse "D/(F)-(G)-A-Bb-C-D-E-F-G-A-C-[D]" --notation french
    """
    result = LayoutParser(strict=strict).parse(layout)
    if isinstance(result, ParseFailure):
        _fail(f"Could not parse layout ({result.stage}) — {result.message}")

    spelling = spelling_for(result[0].pitch_class, mode, notation.lower())
    for index, note in enumerate(result):
        label = note.display_name(spelling.use_flats, spelling.notation)
        click.echo(f"{index:3d}  {note.role.value:<6}  {label:<6}  {note.sample_name}")


# ── render subcommand ──────────────────────────────────────────────────────────

@main.command()
@click.argument("layout")
@click.option("--output", "-o", default=None, metavar="PATH",
              help="Destination file path. Defaults to a name derived from the layout.")
@click.option("--format", "output_format",
              type=click.Choice(sorted(SUPPORTED_FORMATS), case_sensitive=False),
              default="svg", show_default=True, help="Diagram output format.")
@click.option("--size", type=click.FloatRange(min=50.0), default=300.0, show_default=True,
              help="Diagram size in px (SVG/HTML); PDF diagrams are always 80 mm wide.")
@click.option("--mode", type=MODE_CHOICE, default="aeolian", show_default=True,
              help="Scale mode, used to choose sharp or flat spelling.")
@click.option("--notation", type=NOTATION_CHOICE, default="american", show_default=True,
              help="American letter names or French solfège.")
@click.option("--title", default="", metavar="TEXT", help="Title shown above the diagram.")
@click.option("--fallback-text", is_flag=True,
              help="Write the raw layout as text instead of failing when it cannot be parsed.")
def render(
    layout: str,
    output: str | None,
    output_format: str,
    size: float,
    mode: str,
    notation: str,
    title: str,
    fallback_text: bool,
) -> None:
    """
    Render LAYOUT as an SVG, HTML or PDF diagram.

    \b
    Examples:
      panlayout render "D/-A-Bb-C-D-E-F-G-A_"
      panlayout render "F#/-G#-A-C#-E-F#-G#-A-C#" --format pdf -o low_pygmy.pdf
      panlayout render "D/(F)-(G)-A-Bb-C-D-E-F-G-A-C" --format html --title "D Kurd 12"
    """
    normalized_format = output_format.lower()
    resolved_output = output if output is not None else _layout_to_filename(layout, f".{normalized_format}")

    click.echo(f"panlayout v{__version__}")
    click.echo(f"  Layout : {layout}")
    click.echo(f"  Format : {normalized_format}  |  Mode: {mode}  |  Notation: {notation}")
    click.echo(f"  Output : {resolved_output}")
    click.echo()

    exporter = DiagramExporter(
        title=title,
        output_format=normalized_format,
        size=size,
        mode=mode,
        notation=notation.lower(),
        fallback_to_text=fallback_text,
    )

    click.echo("[1/3] Parsing layout and computing note positions...")
    prepared = None
    try:
        prepared = exporter.prepare(layout)
    except LayoutParseError as exc:
        if not fallback_text:
            _fail(f"Could not render layout — {exc}")
        click.echo(f"  Using raw layout text — {exc}")
    except ValueError as exc:
        _fail(f"Could not render layout — {exc}")

    click.echo(f"[2/3] Rendering {normalized_format.upper()} diagram...")
    if prepared is None:
        content = exporter.render_fallback(layout)
    else:
        content = exporter.render_prepared(*prepared)

    click.echo(f"[3/3] Writing {normalized_format.upper()} file...")
    try:
        exporter.write(content, resolved_output)
    except OSError as exc:
        _fail(f"Could not write output file — {exc}")

    click.echo()
    click.echo(f"Done!  Open '{resolved_output}'.")


# ── midi subcommand ────────────────────────────────────────────────────────────

@main.command()
@click.argument("layout")
@click.option("--output", "-o", default=None, metavar="PATH",
              help="Destination MIDI file path. Defaults to a name derived from the layout.")
@click.option("--tempo", type=click.IntRange(20, 300), default=LayoutMidiExporter.DEFAULT_TEMPO,
              show_default=True, help="Tempo in BPM written to the file.")
def midi(layout: str, output: str | None, tempo: int) -> None:
    """
    Write a MIDI preview of LAYOUT: up through every note, then back down.
    """
    resolved_output = output if output is not None else _layout_to_filename(layout, ".mid")
    result = LayoutParser().parse(layout)
    if isinstance(result, ParseFailure):
        _fail(f"Could not parse layout ({result.stage}) — {result.message}")

    click.echo(f"Writing {len(result)}-note preview → '{resolved_output}'...")
    try:
        LayoutMidiExporter(tempo=tempo).export(result, resolved_output)
    except OSError as exc:
        _fail(f"Could not write MIDI file — {exc}")
    except ValueError as exc:
        _fail(f"Could not build MIDI preview — {exc}")

    click.echo(f"Done!  Open '{Path(resolved_output).name}' in any MIDI player.")


# ── scales subcommand ──────────────────────────────────────────────────────────

@main.command()
@click.option("--notes", "note_count", type=click.IntRange(9, 17), default=None,
              help="Show each scale's layout for this total note count.")
@click.option("--notation", type=NOTATION_CHOICE, default="american", show_default=True,
              help="American letter names or French solfège.")
def scales(note_count: int | None, notation: str) -> None:
    """List the scale catalog."""
    for key in SCALES:
        name = scale_display_name(key, notation=notation.lower())
        if note_count is None:
            click.echo(f"{key:<11} {name}")
            continue
        pattern = pattern_for(key, note_count)
        click.echo(f"{key:<11} {name:<18} {pattern or '-'}")
