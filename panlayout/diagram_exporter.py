"""DiagramExporter: turns a layout string into SVG, HTML or PDF diagram output."""

from __future__ import annotations

import logging
from typing import Final

from panlayout.diagram_renderers import (
    DiagramRenderer,
    DiagramStyle,
    HtmlDiagramRenderer,
    PdfDiagramRenderer,
    SvgDiagramRenderer,
)
from panlayout.layout_models import ParseFailure, PositionedNote, SpellingPreference
from panlayout.layout_parser import LayoutParser
from panlayout.radial_layout import RadialLayout
from panlayout.speller import DEFAULT_MODE, spelling_for

logger = logging.getLogger(__name__)

SUPPORTED_FORMATS: Final[set[str]] = {"svg", "html", "pdf"}


class LayoutParseError(ValueError):
    """Raised at the export boundary when a layout string cannot be parsed."""

    def __init__(self, failure: ParseFailure) -> None:
        super().__init__(failure.message)
        self.failure = failure


class DiagramExporter:
    """
    Convert a layout string into diagram output via a pluggable renderer.

    Supported formats:
    - ``svg``:  standalone SVG drawing with per-note data attributes.
    - ``html``: self-contained page wrapping the SVG with a note legend.
    - ``pdf``:  vector PDF drawn with matplotlib.

    The spelling (sharps or flats) is decided from the parsed ding and the
    configured mode, so every renderer labels notes the same way.
    """

    def __init__(
        self,
        title: str = "",
        output_format: str = "svg",
        size: float = 300.0,
        mode: str = DEFAULT_MODE,
        notation: str = "american",
        fallback_to_text: bool = False,
        style: DiagramStyle | None = None,
    ) -> None:
        """
        Args:
            title:            Heading shown in the output; may be empty.
            output_format:    One of SUPPORTED_FORMATS (case-insensitive).
            size:             Diagram size in renderer units (px for SVG/HTML).
            mode:             Musical mode used by the speller.
            notation:         "american" or "french" note names.
            fallback_to_text: Render the raw layout as text instead of raising
                              when it cannot be parsed.
            style:            Colour palette override.
        """
        self.title = title
        normalized = output_format.strip().lower()
        if normalized not in SUPPORTED_FORMATS:
            supported = ", ".join(sorted(SUPPORTED_FORMATS))
            raise ValueError(f"Unsupported output format '{output_format}'. Use one of: {supported}.")
        self.output_format = normalized
        self.size = size
        self.mode = mode
        self.notation = notation
        self.fallback_to_text = fallback_to_text
        self.renderer = self._build_renderer(normalized, style)
        self.parser = LayoutParser()
        self.geometry = RadialLayout(size)

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _build_renderer(self, output_format: str, style: DiagramStyle | None) -> DiagramRenderer:
        if output_format == "html":
            return HtmlDiagramRenderer(style)
        if output_format == "pdf":
            return PdfDiagramRenderer(style)
        return SvgDiagramRenderer(style)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def prepare(self, layout: str) -> tuple[list[PositionedNote], SpellingPreference]:
        """
        Parse, position and spell a layout.

        Raises:
            LayoutParseError: If the layout cannot be parsed.
            ValueError:       If the mode or notation is unsupported.
        """
        result = self.parser.parse(layout)
        if isinstance(result, ParseFailure):
            raise LayoutParseError(result)

        ding = result[0]
        spelling = spelling_for(ding.pitch_class, self.mode, self.notation)
        logger.debug(
            "Layout %r: %d notes, ding %s, %s",
            layout,
            len(result),
            ding.name,
            "flats" if spelling.use_flats else "sharps",
        )
        return self.geometry.layout(result), spelling

    def render(self, layout: str) -> str | bytes:
        """
        Render a layout to file content in the configured format.

        Raises:
            LayoutParseError: If the layout cannot be parsed and
                              fallback_to_text is off.
        """
        try:
            positioned, spelling = self.prepare(layout)
        except LayoutParseError as exc:
            if not self.fallback_to_text:
                raise
            logger.warning("Rendering raw layout text: %s", exc)
            return self.render_fallback(layout)

        return self.render_prepared(positioned, spelling)

    def render_prepared(self, positioned: list[PositionedNote], spelling: SpellingPreference) -> str | bytes:
        """Render notes already positioned by prepare()."""
        return self.renderer.render(
            title=self.title,
            positioned=positioned,
            size=self.size,
            spelling=spelling,
        )

    def render_fallback(self, layout: str) -> str | bytes:
        """Render the raw layout string as text."""
        return self.renderer.render_fallback(title=self.title, layout=layout)

    def write(self, content: str | bytes, output_path: str) -> None:
        """
        Write rendered content to disk, as bytes or UTF-8 text.

        Raises:
            OSError: If the output file cannot be written.
        """
        if isinstance(content, bytes):
            with open(output_path, "wb") as fh:
                fh.write(content)
        else:
            with open(output_path, "w", encoding="utf-8") as fh:
                fh.write(content)

    def export(self, layout: str, output_path: str) -> None:
        """
        Render a layout and write it to disk.

        Raises:
            ValueError: If parsing fails or required data is missing.
            OSError:    If the output file cannot be written.
        """
        self.write(self.render(layout), output_path)
