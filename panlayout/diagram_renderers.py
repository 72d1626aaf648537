"""Renderer implementations for handpan diagram output formats."""

from __future__ import annotations

import io
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any

import svgwrite

from panlayout.layout_models import NoteRole, PositionedNote, SpellingPreference
from panlayout.radial_layout import RadialLayout


def _escape_html(text: str) -> str:
    """Escape the three characters that are unsafe in HTML text content."""
    return text.replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;")


@dataclass(frozen=True)
class DiagramStyle:
    """Colour palette shared by every renderer (steel greys, dark bottoms)."""

    shell_outer: str = "#7A7A7A"
    shell_mid: str = "#B8B8B8"
    shell_inner: str = "#E8E8E8"
    shell_stroke: str = "#909090"
    ding_fill: str = "#D0D0D0"
    ding_halo: str = "#DCDCDC"
    tonal_fill: str = "#A0A0A0"
    mutant_fill: str = "#B8B8B8"
    mutant_stroke: str = "#787878"
    bottom_fill: str = "#505050"
    bottom_stroke: str = "#505050"
    note_stroke: str = "#686868"
    note_text: str = "#3A3A3A"
    bottom_text: str = "#E8E8E8"
    accent: str = "#0D7377"

    def fill(self, role: NoteRole) -> str:
        return {
            NoteRole.DING: self.ding_fill,
            NoteRole.TONAL: self.tonal_fill,
            NoteRole.MUTANT: self.mutant_fill,
            NoteRole.BOTTOM: self.bottom_fill,
        }[role]

    def stroke(self, role: NoteRole) -> str:
        if role is NoteRole.MUTANT:
            return self.mutant_stroke
        if role is NoteRole.BOTTOM:
            return self.bottom_stroke
        return self.note_stroke

    def text(self, role: NoteRole) -> str:
        return self.bottom_text if role is NoteRole.BOTTOM else self.note_text


# Label size relative to the tonal label size
_FONT_FACTORS = {
    NoteRole.DING: 1.1,
    NoteRole.TONAL: 1.0,
    NoteRole.MUTANT: 0.9,
    NoteRole.BOTTOM: 0.9,
}


class DiagramRenderer(ABC):
    """Abstract diagram renderer."""

    def __init__(self, style: DiagramStyle | None = None) -> None:
        self.style = style or DiagramStyle()

    @property
    @abstractmethod
    def default_extension(self) -> str:
        """Default filename extension for this renderer."""

    @property
    def is_binary(self) -> bool:
        """True when render() returns bytes rather than text."""
        return False

    @abstractmethod
    def render(
        self,
        *,
        title: str,
        positioned: list[PositionedNote],
        size: float,
        spelling: SpellingPreference,
    ) -> str | bytes:
        """Render positioned notes into file content."""

    @abstractmethod
    def render_fallback(self, *, title: str, layout: str) -> str | bytes:
        """Render the raw layout string as plain text when it could not be parsed."""


class SvgDiagramRenderer(DiagramRenderer):
    """Render a positioned layout as a standalone SVG drawing via svgwrite."""

    FONT_RATIO = 0.032  # tonal label size relative to diagram size
    BOTTOM_VIEW_FACTOR = 1.15  # taller viewBox when bottoms hang below the shell
    FONT_FAMILY = "system-ui, sans-serif"

    @property
    def default_extension(self) -> str:
        return ".svg"

    def render(
        self,
        *,
        title: str,
        positioned: list[PositionedNote],
        size: float,
        spelling: SpellingPreference,
    ) -> str:
        return self.build_drawing(title, positioned, size, spelling).tostring()

    def build_drawing(
        self,
        title: str,
        positioned: list[PositionedNote],
        size: float,
        spelling: SpellingPreference,
    ) -> svgwrite.Drawing:
        """
        Build the svgwrite drawing for a layout.

        Layout coordinates are y-up around the shell centre; they are mapped
        to SVG space with the centre at (size/2, size/2) and y flipped.
        Every note is a ``<g class="note-group">`` carrying data attributes
        an interactive player needs to trigger the right sample.
        """
        geometry = RadialLayout(size)
        has_bottoms = any(item.role is NoteRole.BOTTOM for item in positioned)
        view_height = size * self.BOTTOM_VIEW_FACTOR if has_bottoms else size
        center = size / 2
        style = self.style

        dwg = svgwrite.Drawing(
            size=(f"{size:g}", f"{view_height:g}"),
            viewBox=f"0 0 {size:g} {view_height:g}",
            debug=False,
        )
        dwg["style"] = "overflow: visible;"
        if title:
            dwg.set_desc(title=title)

        gradient = dwg.radialGradient(center=("30%", "30%"), id="shell-gradient")
        gradient.add_stop_color(offset="0%", color=style.shell_inner)
        gradient.add_stop_color(offset="70%", color=style.shell_mid)
        gradient.add_stop_color(offset="100%", color=style.shell_outer)
        dwg.defs.add(gradient)

        shell_radius = geometry.shell_radius
        dwg.add(dwg.circle(center=(center, center), r=shell_radius, fill=gradient.get_paint_server()))
        dwg.add(
            dwg.circle(
                center=(center, center),
                r=shell_radius - 2,
                fill="none",
                stroke=style.shell_stroke,
                stroke_width=1.5,
            )
        )
        dwg.add(dwg.g(class_="wave-container"))

        font_size = size * self.FONT_RATIO
        for index, item in enumerate(positioned):
            x = center + item.x
            y = center - item.y
            role = item.role
            group = dwg.g(
                class_="note-group",
                **{
                    "data-note": item.note.name,
                    "data-sample": item.note.sample_name,
                    "data-role": role.value,
                    "data-index": str(index),
                    "data-x": f"{x:.2f}",
                    "data-y": f"{y:.2f}",
                },
            )
            circle = dwg.circle(
                center=(round(x, 2), round(y, 2)),
                r=round(geometry.note_radius(role), 2),
                class_=f"note-circle note-{role.value}",
                fill=style.fill(role),
                stroke=style.stroke(role),
                stroke_width=1.5,
            )
            if role is NoteRole.BOTTOM:
                circle["stroke-dasharray"] = "3 2"
            group.add(circle)
            group.add(
                dwg.text(
                    spelling.label(item.pitch_class, item.octave),
                    insert=(round(x, 2), round(y, 2)),
                    class_="note-label",
                    fill=style.text(role),
                    text_anchor="middle",
                    dominant_baseline="central",
                    font_size=f"{font_size * _FONT_FACTORS[role]:.2f}px",
                    font_weight="600",
                    font_family=self.FONT_FAMILY,
                )
            )
            dwg.add(group)

        return dwg

    def render_fallback(self, *, title: str, layout: str) -> str:
        width = max(200, 9 * len(layout))
        dwg = svgwrite.Drawing(size=(f"{width}", "40"), viewBox=f"0 0 {width} 40", debug=False)
        if title:
            dwg.set_desc(title=title)
        dwg.add(
            dwg.text(
                layout,
                insert=(10, 25),
                class_="layout-fallback",
                fill=self.style.note_text,
                font_size="14px",
                font_family="monospace",
            )
        )
        return dwg.tostring()


class HtmlDiagramRenderer(DiagramRenderer):
    """Wrap the SVG diagram in a self-contained HTML page with a note legend."""

    def __init__(self, style: DiagramStyle | None = None) -> None:
        super().__init__(style)
        self.svg_renderer = SvgDiagramRenderer(self.style)

    @property
    def default_extension(self) -> str:
        return ".html"

    def render(
        self,
        *,
        title: str,
        positioned: list[PositionedNote],
        size: float,
        spelling: SpellingPreference,
    ) -> str:
        svg = self.svg_renderer.render(title="", positioned=positioned, size=size, spelling=spelling)
        labels = [spelling.label(item.pitch_class, item.octave) for item in positioned]
        body = (
            f'  <div class="handpan-visual">{svg}</div>\n'
            f"{self._legend(positioned)}"
            f'  <div class="handpan-info">\n'
            f'    <p class="handpan-scale-notes">{_escape_html(" • ".join(labels))}</p>\n'
            f'    <p class="handpan-scale-count">{len(positioned)} notes</p>\n'
            f"  </div>\n"
        )
        return self.build_html(title, body)

    def render_fallback(self, *, title: str, layout: str) -> str:
        body = f'  <pre class="layout-fallback">{_escape_html(layout)}</pre>\n'
        return self.build_html(title, body)

    def _legend(self, positioned: list[PositionedNote]) -> str:
        """Legend markup, only when the layout has mutants or bottoms."""
        roles = {item.role for item in positioned}
        if NoteRole.MUTANT not in roles and NoteRole.BOTTOM not in roles:
            return ""
        items = ['<span class="legend-item"><span class="legend-dot legend-dot--tonal"></span> Tonal</span>']
        if NoteRole.MUTANT in roles:
            items.append('<span class="legend-item"><span class="legend-dot legend-dot--mutant"></span> Mutant</span>')
        if NoteRole.BOTTOM in roles:
            items.append('<span class="legend-item"><span class="legend-dot legend-dot--bottom"></span> Bottom</span>')
        return f'  <div class="handpan-legend">{"".join(items)}</div>\n'

    def build_html(self, title: str, body: str) -> str:
        """
        Wrap body markup in a self-contained HTML document.

        The stylesheet includes screen styles (white card on a grey
        background) and print styles (no shadow, full width).
        """
        style = self.style
        title_safe = _escape_html(title)
        heading = f"  <h1>{title_safe}</h1>\n" if title else ""

        return f"""<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="UTF-8" />
  <meta name="viewport" content="width=device-width, initial-scale=1.0" />
  <title>{title_safe}</title>
  <style>
    *, *::before, *::after {{ box-sizing: border-box; }}
    body {{
      font-family: system-ui, sans-serif;
      background: #f0f0f0;
      margin: 0;
      padding: 2rem;
      text-align: center;
    }}
    h1 {{
      font-size: 1.6rem;
      margin-bottom: 2rem;
      color: #222;
    }}
    .handpan-visual {{
      background: #fff;
      box-shadow: 0 2px 8px rgba(0, 0, 0, 0.15);
      margin: 0 auto 1.5rem;
      max-width: 480px;
      padding: 1rem;
    }}
    .handpan-visual svg {{
      display: block;
      width: 100%;
      height: auto;
    }}
    .handpan-legend {{
      display: flex;
      gap: 1rem;
      justify-content: center;
      font-size: 0.9rem;
    }}
    .legend-dot {{
      display: inline-block;
      width: 0.8rem;
      height: 0.8rem;
      border-radius: 50%;
      vertical-align: middle;
    }}
    .legend-dot--tonal {{ background: {style.tonal_fill}; }}
    .legend-dot--mutant {{ background: {style.mutant_fill}; }}
    .legend-dot--bottom {{ background: {style.bottom_fill}; }}
    .handpan-scale-notes {{
      color: {style.accent};
      font-weight: 600;
    }}
    @media print {{
      body {{
        background: #fff;
        padding: 0;
      }}
      .handpan-visual {{
        box-shadow: none;
        max-width: 100%;
      }}
    }}
  </style>
</head>
<body>
{heading}{body}</body>
</html>"""


class PdfDiagramRenderer(DiagramRenderer):
    """
    Render the diagram as a vector PDF via matplotlib.

    Layout units are mapped so that the full diagram ``size`` measures
    ``diagram_mm`` on paper. The shell gradient is approximated with
    stepped concentric fills, which PDF viewers and printers reproduce
    reliably.
    """

    MM_PER_INCH = 25.4
    REFERENCE_MM = 80.0  # label sizes below are tuned for an 80 mm diagram
    LABEL_POINTS = {
        NoteRole.DING: 9.0,
        NoteRole.TONAL: 8.0,
        NoteRole.MUTANT: 7.5,
        NoteRole.BOTTOM: 7.5,
    }
    GRADIENT_STEPS = 8
    MARGIN_RATIO = 0.03
    TITLE_BAND_MM = 12.0

    def __init__(self, style: DiagramStyle | None = None, diagram_mm: float = 80.0) -> None:
        super().__init__(style)
        self.diagram_mm = diagram_mm

    @property
    def default_extension(self) -> str:
        return ".pdf"

    @property
    def is_binary(self) -> bool:
        return True

    def render(
        self,
        *,
        title: str,
        positioned: list[PositionedNote],
        size: float,
        spelling: SpellingPreference,
    ) -> bytes:
        from matplotlib.patches import Circle

        geometry = RadialLayout(size)
        min_x, min_y, max_x, max_y = geometry.extent(positioned)
        margin = size * self.MARGIN_RATIO
        min_x, min_y, max_x, max_y = min_x - margin, min_y - margin, max_x + margin, max_y + margin

        mm_per_unit = self.diagram_mm / size
        fig, ax = self._new_figure(
            (max_x - min_x) * mm_per_unit,
            (max_y - min_y) * mm_per_unit,
            title,
        )
        ax.set_xlim(min_x, max_x)
        ax.set_ylim(min_y, max_y)

        self._draw_shell(ax, geometry)

        font_scale = self.diagram_mm / self.REFERENCE_MM
        style = self.style
        for item in positioned:
            role = item.role
            radius = geometry.note_radius(role)
            if role is NoteRole.DING:
                ax.add_patch(Circle((item.x, item.y), radius * 1.3, facecolor=style.ding_halo, edgecolor="none"))
            ax.add_patch(
                Circle(
                    (item.x, item.y),
                    radius,
                    facecolor=style.fill(role),
                    edgecolor=style.stroke(role),
                    linewidth=0.85,
                    linestyle="--" if role is NoteRole.BOTTOM else "-",
                )
            )
            ax.text(
                item.x,
                item.y,
                self._label(spelling, item),
                ha="center",
                va="center",
                color=style.text(role),
                fontsize=self.LABEL_POINTS[role] * font_scale,
                fontweight="bold",
                family="sans-serif",
            )

        return self._to_pdf_bytes(fig, title)

    def render_fallback(self, *, title: str, layout: str) -> bytes:
        fig, ax = self._new_figure(self.diagram_mm, self.TITLE_BAND_MM, title)
        ax.set_xlim(0, 1)
        ax.set_ylim(0, 1)
        ax.text(0.5, 0.5, layout, ha="center", va="center", family="monospace", fontsize=10)
        return self._to_pdf_bytes(fig, title)

    def _label(self, spelling: SpellingPreference, item: PositionedNote) -> str:
        """Note name with the octave as a subscript, e.g. 'Bb$_{3}$'."""
        base = spelling.label(item.pitch_class)
        return f"{base}$_{{{item.octave}}}$"

    def _new_figure(self, width_mm: float, height_mm: float, title: str) -> tuple[Any, Any]:
        from matplotlib.figure import Figure

        band_mm = self.TITLE_BAND_MM if title else 0.0
        total_height_mm = height_mm + band_mm
        fig = Figure(figsize=(width_mm / self.MM_PER_INCH, total_height_mm / self.MM_PER_INCH))
        ax = fig.add_axes((0.0, 0.0, 1.0, height_mm / total_height_mm))
        ax.set_aspect("equal")
        ax.set_axis_off()
        if title:
            fig.text(0.5, 1 - (band_mm / 2) / total_height_mm, title, ha="center", va="center", fontsize=12)
        return fig, ax

    def _draw_shell(self, ax: Any, geometry: RadialLayout) -> None:
        from matplotlib.colors import to_rgb
        from matplotlib.patches import Circle

        style = self.style
        outer = to_rgb(style.shell_outer)
        inner = to_rgb(style.shell_mid)
        shell_radius = geometry.shell_radius
        for step in range(self.GRADIENT_STEPS):
            t = step / (self.GRADIENT_STEPS - 1)
            colour = tuple(o + t * (i - o) for o, i in zip(outer, inner))
            ax.add_patch(Circle((0.0, 0.0), shell_radius * (1 - t * 0.08), facecolor=colour, edgecolor="none"))
        ax.add_patch(
            Circle((0.0, 0.0), shell_radius * 0.985, fill=False, edgecolor=style.shell_stroke, linewidth=0.85)
        )

    def _to_pdf_bytes(self, fig: Any, title: str) -> bytes:
        buffer = io.BytesIO()
        fig.savefig(buffer, format="pdf", metadata={"Title": title or "Handpan layout"})
        return buffer.getvalue()
