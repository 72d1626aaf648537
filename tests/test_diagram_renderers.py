"""Unit tests for the SVG and HTML diagram renderers."""

import re

from panlayout.diagram_renderers import (
    DiagramStyle,
    HtmlDiagramRenderer,
    PdfDiagramRenderer,
    SvgDiagramRenderer,
)
from panlayout.layout_models import Note, NoteRole, PositionedNote, SpellingPreference
from panlayout.radial_layout import RadialLayout


def _sample_positioned(with_extras: bool = False) -> list[PositionedNote]:
    notes = [
        Note("D", 3, NoteRole.DING),
        Note("A", 3, NoteRole.TONAL),
        Note("A#", 3, NoteRole.TONAL),
        Note("C", 4, NoteRole.TONAL),
    ]
    if with_extras:
        notes.append(Note("D", 5, NoteRole.MUTANT))
        notes.append(Note("F", 3, NoteRole.BOTTOM))
    return RadialLayout(300.0).layout(notes)


def _render_svg(with_extras: bool = False, spelling: SpellingPreference | None = None, title: str = "") -> str:
    return SvgDiagramRenderer().render(
        title=title,
        positioned=_sample_positioned(with_extras),
        size=300.0,
        spelling=spelling or SpellingPreference(use_flats=True),
    )


# ---------------------------------------------------------------------------
# SVG
# ---------------------------------------------------------------------------

def test_svg_renderer_default_extension() -> None:
    renderer = SvgDiagramRenderer()
    assert renderer.default_extension == ".svg"
    assert renderer.is_binary is False


def test_svg_has_one_group_per_note() -> None:
    content = _render_svg(with_extras=True)
    assert content.count('class="note-group"') == 6


def test_svg_groups_carry_note_data() -> None:
    content = _render_svg()
    assert 'data-note="A#3"' in content
    assert 'data-sample="As3"' in content
    assert 'data-role="ding"' in content
    assert 'data-index="0"' in content


def test_svg_labels_follow_spelling() -> None:
    assert ">Bb3<" in _render_svg(spelling=SpellingPreference(use_flats=True))
    assert ">A#3<" in _render_svg(spelling=SpellingPreference(use_flats=False))
    assert ">Sib3<" in _render_svg(spelling=SpellingPreference(use_flats=True, notation="french"))


def test_svg_role_classes() -> None:
    content = _render_svg(with_extras=True)
    assert "note-circle note-ding" in content
    assert "note-circle note-mutant" in content
    assert "note-circle note-bottom" in content


def test_svg_bottoms_are_dashed() -> None:
    assert 'stroke-dasharray="3 2"' in _render_svg(with_extras=True)
    assert "stroke-dasharray" not in _render_svg()


def test_svg_viewbox_is_taller_with_bottoms() -> None:
    assert 'viewBox="0 0 300 300"' in _render_svg()
    assert 'viewBox="0 0 300 345"' in _render_svg(with_extras=True)


def test_svg_shell_gradient_and_wave_container() -> None:
    content = _render_svg()
    assert 'id="shell-gradient"' in content
    assert "url(#shell-gradient)" in content
    assert 'class="wave-container"' in content


def test_svg_ding_is_drawn_at_the_centre() -> None:
    content = _render_svg()
    ding_group = re.search(r'<g [^>]*data-role="ding"[^>]*>', content)
    assert ding_group is not None
    assert 'data-x="150.00"' in ding_group.group(0)
    assert 'data-y="150.00"' in ding_group.group(0)


def test_svg_uses_custom_style() -> None:
    renderer = SvgDiagramRenderer(DiagramStyle(tonal_fill="#123456"))
    content = renderer.render(
        title="",
        positioned=_sample_positioned(),
        size=300.0,
        spelling=SpellingPreference(),
    )
    assert "#123456" in content


def test_svg_fallback_contains_raw_layout() -> None:
    content = SvgDiagramRenderer().render_fallback(title="", layout="D/-A-??")
    assert "<svg" in content
    assert "D/-A-??" in content
    assert "note-group" not in content


# ---------------------------------------------------------------------------
# HTML
# ---------------------------------------------------------------------------

def test_html_renderer_default_extension() -> None:
    assert HtmlDiagramRenderer().default_extension == ".html"


def test_build_html_title_in_title_tag_and_h1() -> None:
    html = HtmlDiagramRenderer().build_html("D Kurd", "<p/>")
    assert "<title>D Kurd</title>" in html
    assert "<h1>D Kurd</h1>" in html


def test_build_html_empty_title_no_h1() -> None:
    html = HtmlDiagramRenderer().build_html("", "<p/>")
    assert "<h1>" not in html


def test_build_html_escapes_title() -> None:
    html = HtmlDiagramRenderer().build_html("<Kurd & Co>", "")
    assert "&lt;Kurd &amp; Co&gt;" in html
    assert "<Kurd & Co>" not in html


def test_build_html_print_media_query_present() -> None:
    assert "@media print" in HtmlDiagramRenderer().build_html("T", "")


def test_html_wraps_svg_and_lists_notes() -> None:
    html = HtmlDiagramRenderer().render(
        title="D Kurd",
        positioned=_sample_positioned(),
        size=300.0,
        spelling=SpellingPreference(use_flats=True),
    )
    assert html.startswith("<!DOCTYPE html>")
    assert '<div class="handpan-visual"><svg' in html
    assert "D3 • A3 • Bb3 • C4" in html
    assert "4 notes" in html


def test_html_legend_only_with_mutants_or_bottoms() -> None:
    renderer = HtmlDiagramRenderer()
    plain = renderer.render(
        title="", positioned=_sample_positioned(), size=300.0, spelling=SpellingPreference()
    )
    extras = renderer.render(
        title="", positioned=_sample_positioned(with_extras=True), size=300.0, spelling=SpellingPreference()
    )
    assert 'class="handpan-legend"' not in plain
    assert 'class="handpan-legend"' in extras
    assert "legend-dot--mutant" in extras
    assert "legend-dot--bottom" in extras


def test_html_fallback_escapes_layout() -> None:
    html = HtmlDiagramRenderer().render_fallback(title="", layout="D/<A>")
    assert '<pre class="layout-fallback">D/&lt;A&gt;</pre>' in html


# ---------------------------------------------------------------------------
# PDF
# ---------------------------------------------------------------------------

def test_pdf_renderer_is_binary() -> None:
    renderer = PdfDiagramRenderer()
    assert renderer.default_extension == ".pdf"
    assert renderer.is_binary is True


def test_pdf_label_uses_octave_subscript() -> None:
    item = _sample_positioned()[2]
    label = PdfDiagramRenderer()._label(SpellingPreference(use_flats=True), item)
    assert label == "Bb$_{3}$"


def test_pdf_render_produces_pdf_bytes() -> None:
    content = PdfDiagramRenderer().render(
        title="D Kurd",
        positioned=_sample_positioned(with_extras=True),
        size=300.0,
        spelling=SpellingPreference(use_flats=True),
    )
    assert content.startswith(b"%PDF")
