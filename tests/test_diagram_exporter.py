"""Unit tests for DiagramExporter."""

from pathlib import Path

import pytest

from panlayout.diagram_exporter import DiagramExporter, LayoutParseError
from panlayout.diagram_renderers import HtmlDiagramRenderer, PdfDiagramRenderer, SvgDiagramRenderer
from panlayout.layout_models import FailureKind, NoteRole

KURD = "D/-A-Bb-C-D-E-F-G-A_"


def test_default_format_is_svg() -> None:
    exporter = DiagramExporter()
    assert exporter.output_format == "svg"
    assert isinstance(exporter.renderer, SvgDiagramRenderer)


@pytest.mark.parametrize(
    ("output_format", "renderer_type"),
    [("HTML", HtmlDiagramRenderer), (" pdf ", PdfDiagramRenderer), ("svg", SvgDiagramRenderer)],
)
def test_format_selects_renderer(output_format: str, renderer_type: type) -> None:
    assert isinstance(DiagramExporter(output_format=output_format).renderer, renderer_type)


def test_unsupported_format_raises() -> None:
    with pytest.raises(ValueError, match="Unsupported output format"):
        DiagramExporter(output_format="png")


def test_prepare_spells_from_ding_and_mode() -> None:
    positioned, spelling = DiagramExporter(mode="aeolian").prepare(KURD)
    assert len(positioned) == 9
    assert positioned[0].role is NoteRole.DING
    assert spelling.use_flats is True

    _, dorian = DiagramExporter(mode="dorian").prepare(KURD)
    assert dorian.use_flats is False


def test_render_svg_labels_with_flats() -> None:
    content = DiagramExporter().render(KURD)
    assert isinstance(content, str)
    assert ">Bb3<" in content


def test_render_french_notation() -> None:
    content = DiagramExporter(notation="french").render(KURD)
    assert ">Sib3<" in content
    assert ">Ré3<" in content


def test_unparseable_layout_raises() -> None:
    with pytest.raises(LayoutParseError) as exc_info:
        DiagramExporter().render("Z/-A")
    assert exc_info.value.failure.kind is FailureKind.INVALID_PITCH_CLASS


def test_layout_parse_error_is_a_value_error() -> None:
    with pytest.raises(ValueError):
        DiagramExporter().render("")


def test_fallback_renders_raw_text() -> None:
    content = DiagramExporter(output_format="html", fallback_to_text=True).render("Z/-A")
    assert isinstance(content, str)
    assert "layout-fallback" in content
    assert "Z/-A" in content


def test_unknown_mode_raises() -> None:
    with pytest.raises(ValueError, match="Unsupported mode"):
        DiagramExporter(mode="blues").render(KURD)


def test_export_writes_svg(tmp_path: Path) -> None:
    out = tmp_path / "kurd.svg"
    DiagramExporter(title="D Kurd").export(KURD, str(out))
    content = out.read_text(encoding="utf-8")
    assert content.startswith("<svg")
    assert content.count('class="note-group"') == 9


def test_export_writes_html(tmp_path: Path) -> None:
    out = tmp_path / "kurd.html"
    DiagramExporter(title="D Kurd", output_format="html").export(KURD, str(out))
    content = out.read_text(encoding="utf-8")
    assert "<!DOCTYPE html>" in content
    assert "<h1>D Kurd</h1>" in content
    assert "9 notes" in content


@pytest.mark.integration
def test_export_writes_pdf(tmp_path: Path) -> None:
    """Smoke test: a PDF diagram is written with matplotlib."""
    out = tmp_path / "kurd.pdf"
    DiagramExporter(title="D Kurd", output_format="pdf").export("D/(F)-(G)-A-Bb-C-D-E-F-G-A-C-[D]", str(out))
    assert out.read_bytes().startswith(b"%PDF")
