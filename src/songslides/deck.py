"""Slide plan → ``.pptx`` bytes.

Renders :class:`~songslides.models.SlideContent` items with python-pptx on a
13.333" × 7.5" widescreen canvas, one blank-layout slide per item:

+-----------+----------------------------------------------------------+
| kind      | content                                                  |
+===========+==========================================================+
| cover     | bold title, date underneath                              |
+-----------+----------------------------------------------------------+
| title     | bold song title, artist underneath, short accent bar     |
+-----------+----------------------------------------------------------+
| lyrics    | optional italic section label in the accent colour, then |
|           | one centred paragraph per lyric line                     |
+-----------+----------------------------------------------------------+
"""

import io
import logging
from dataclasses import dataclass

from pptx import Presentation
from pptx.dml.color import RGBColor
from pptx.enum.shapes import MSO_SHAPE
from pptx.enum.text import MSO_ANCHOR, PP_ALIGN
from pptx.util import Inches, Pt

from .exceptions import SettingsError
from .models import SlideContent
from .settings import GenerateSettings

logger = logging.getLogger(__name__)

SLIDE_W = 13.333
SLIDE_H = 7.5
MARGIN = 1.0
BLANK_LAYOUT = 6


@dataclass(frozen=True)
class Theme:
    background: str
    text: str
    subtitle: str
    accent: str
    font: str = "Calibri"
    title_size: int = 44
    lyrics_size: int = 36
    subtitle_size: int = 20


THEMES = {
    "dark": Theme(background="0A0A0F", text="FFFFFF", subtitle="A0A0B8", accent="F97316"),
    "light": Theme(background="F8FAFC", text="1A1A2E", subtitle="6B7280", accent="F97316"),
}


def hex_to_rgb(value: str) -> RGBColor:
    return RGBColor.from_string(value.lstrip("#").upper())


def lyrics_font_size(base: int, lines_per_slide: int) -> int:
    """Fewer lines get bigger text: 2 → base+6, 3 → base, 4 → base-4."""
    if lines_per_slide == 2:
        return base + 6
    if lines_per_slide == 4:
        return base - 4
    return base


class DeckBuilder:
    """Render a slide plan to a presentation using one theme."""

    def __init__(self, settings: GenerateSettings):
        self.settings = settings
        self.theme = THEMES[settings.theme]

    def build(self, slides: list[SlideContent]) -> bytes:
        """Return the ``.pptx`` file for *slides* as bytes."""
        prs = Presentation()
        prs.slide_width = Inches(SLIDE_W)
        prs.slide_height = Inches(SLIDE_H)

        for content in slides:
            slide = self._new_slide(prs)
            if content.kind == "cover":
                self._render_cover(slide, content)
            elif content.kind == "title":
                self._render_title(slide, content)
            else:
                self._render_lyrics(slide, content)

        buf = io.BytesIO()
        prs.save(buf)
        logger.info("built deck with %d slides", len(slides))
        return buf.getvalue()

    # -- slide kinds -------------------------------------------------------

    def _render_cover(self, slide, content: SlideContent) -> None:
        top = SLIDE_H * 0.33
        self._add_text(slide, [content.title or "Worship Set"], top, 1.0,
                       self.theme.title_size, self.theme.text, bold=True)
        if content.date:
            self._add_text(slide, [content.date], top + 1.15, 0.5,
                           self.theme.subtitle_size, self.theme.subtitle)

    def _render_title(self, slide, content: SlideContent) -> None:
        top = SLIDE_H * 0.35
        self._add_text(slide, [content.title or ""], top, 1.0,
                       self.theme.title_size, self.theme.text, bold=True)
        if content.artist:
            self._add_text(slide, [content.artist], top + 1.15, 0.5,
                           self.theme.subtitle_size, self.theme.subtitle)
        bar = slide.shapes.add_shape(
            MSO_SHAPE.RECTANGLE,
            Inches(SLIDE_W * 0.42), Inches(top + 2.0), Inches(SLIDE_W * 0.16), Inches(0.05),
        )
        bar.fill.solid()
        bar.fill.fore_color.rgb = hex_to_rgb(self.theme.accent)
        bar.line.fill.background()

    def _render_lyrics(self, slide, content: SlideContent) -> None:
        if self.settings.background_image:
            self._add_background_image(slide)
        top = MARGIN
        if content.section_label:
            self._add_text(slide, [content.section_label], top, 0.4, 14,
                           self.theme.accent, italic=True)
            top += 0.55
        size = lyrics_font_size(self.theme.lyrics_size, self.settings.lines_per_slide)
        self._add_text(slide, content.lines, top, SLIDE_H - top - MARGIN, size,
                       self.theme.text, middle=True, spacing=1.3)

    # -- helpers -----------------------------------------------------------

    def _new_slide(self, prs):
        slide = prs.slides.add_slide(prs.slide_layouts[BLANK_LAYOUT])
        fill = slide.background.fill
        fill.solid()
        fill.fore_color.rgb = hex_to_rgb(self.theme.background)
        return slide

    def _add_background_image(self, slide) -> None:
        try:
            slide.shapes.add_picture(
                self.settings.background_image, 0, 0, Inches(SLIDE_W), Inches(SLIDE_H)
            )
        except (OSError, ValueError) as exc:
            raise SettingsError(
                f"Could not use background image {self.settings.background_image}: {exc}"
            ) from exc

    def _add_text(self, slide, lines: list[str], top: float, height: float, size: int,
                  color: str, bold: bool = False, italic: bool = False,
                  middle: bool = False, spacing: float | None = None) -> None:
        box = slide.shapes.add_textbox(
            Inches(MARGIN), Inches(top), Inches(SLIDE_W - MARGIN * 2), Inches(height)
        )
        tf = box.text_frame
        tf.word_wrap = True
        if middle:
            tf.vertical_anchor = MSO_ANCHOR.MIDDLE

        # One paragraph per line; the first reuses the auto-created paragraph.
        for i, text in enumerate(lines):
            p = tf.paragraphs[0] if i == 0 else tf.add_paragraph()
            p.alignment = PP_ALIGN.CENTER
            if spacing:
                p.line_spacing = spacing
            run = p.add_run()
            run.text = text
            run.font.name = self.theme.font
            run.font.size = Pt(size)
            run.font.bold = bold
            run.font.italic = italic
            run.font.color.rgb = hex_to_rgb(color)


def build_deck(slides: list[SlideContent], settings: GenerateSettings) -> bytes:
    return DeckBuilder(settings).build(slides)
