"""
Document composition for SmartSlide.

Turns ordered slide payloads into a paginated PDF: slide markup is reduced
to paragraphs, laid out by :mod:`smartslide.document.layout` and drawn with
the ReportLab canvas. Output is byte-for-byte reproducible for the same input.
"""

from __future__ import annotations

import io
from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Any

from loguru import logger
from reportlab.lib.units import mm
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.ttfonts import TTFont
from reportlab.pdfgen import canvas

from .container import SlidePayload
from .errors import MalformedMarkupError, RenderError
from .layout import (
    NO_TEXT_PLACEHOLDER,
    UNREADABLE_SLIDE_PLACEHOLDER,
    LayoutSettings,
    LineRole,
    PageLayout,
    SlideBlock,
    layout_document,
)
from .markup import MarkupParseError, extract_text, parse_markup

DOCUMENT_TITLE = "Extracted slide text"
DOCUMENT_CREATOR = "SmartSlide Reviewer"
# The built-in Type 1 fonts are drawn with WinAnsi encoding
STANDARD_FONT_ENCODING = "cp1252"
MISSING_GLYPH_SAMPLE = 20

_ROLE_COLORS = {
    LineRole.HEADER: (0.0, 0.0, 0.0),
    LineRole.BODY: (0.0, 0.0, 0.0),
    LineRole.PLACEHOLDER: (150 / 255, 150 / 255, 150 / 255),
    LineRole.FOOTER: (150 / 255, 150 / 255, 150 / 255),
}


def has_glyph(font: Any, char: str) -> bool:
    if isinstance(font, TTFont):
        return ord(char) in font.face.charToGlyph
    try:
        char.encode(STANDARD_FONT_ENCODING)
    except UnicodeEncodeError:
        return False
    return True


class MalformedSlidePolicy(str, Enum):
    ABORT = "abort"
    PLACEHOLDER = "placeholder"

    @classmethod
    def parse(cls, value: MalformedSlidePolicy | str) -> MalformedSlidePolicy:
        try:
            return cls(value)
        except ValueError as exc:
            choices = ", ".join(policy.value for policy in cls)
            raise RenderError(
                f"Unsupported malformed slide policy {value!r}, expected one of: {choices}."
            ) from exc


@dataclass(frozen=True)
class ComposedDocument:
    content: bytes
    pages: list[PageLayout]

    @property
    def page_count(self) -> int:
        return len(self.pages)


class DocumentComposer:
    """Builds the extracted-text PDF for an ordered list of slides."""

    def __init__(
        self,
        settings: LayoutSettings | None = None,
        *,
        malformed_policy: MalformedSlidePolicy | str = MalformedSlidePolicy.ABORT,
        font_path: str | None = None,
    ) -> None:
        self.settings = settings or LayoutSettings()
        self.malformed_policy = MalformedSlidePolicy.parse(malformed_policy)
        if font_path:
            try:
                pdfmetrics.registerFont(TTFont(self.settings.font_name, font_path))
            except Exception as exc:
                raise RenderError(f"Unable to load font file {font_path}") from exc

    def measure(self, text: str, font_size: float) -> float:
        return pdfmetrics.stringWidth(text, self.settings.font_name, font_size) / mm

    def slide_blocks(self, slides: Sequence[SlidePayload]) -> list[SlideBlock]:
        blocks: list[SlideBlock] = []
        for number, slide in enumerate(slides, 1):
            try:
                slide_text = extract_text(parse_markup(slide.raw_xml))
            except MarkupParseError as exc:
                if self.malformed_policy is MalformedSlidePolicy.ABORT:
                    raise MalformedMarkupError(number, str(exc)) from exc
                logger.warning(f"Slide {number} markup unreadable, emitting placeholder")
                blocks.append(
                    SlideBlock(number, [], placeholder=UNREADABLE_SLIDE_PLACEHOLDER)
                )
                continue

            if slide_text.paragraphs:
                blocks.append(SlideBlock(number, slide_text.paragraphs))
            else:
                blocks.append(SlideBlock(number, [], placeholder=NO_TEXT_PLACEHOLDER))
            logger.debug(
                f"Slide {number}: {len(slide_text.paragraphs)} paragraph(s) "
                f"via {slide_text.source.value}"
            )
        return blocks

    def layout(self, slides: Sequence[SlidePayload]) -> list[PageLayout]:
        self._check_renderable()
        blocks = self.slide_blocks(slides)
        self._warn_missing_glyphs(blocks)
        return layout_document(blocks, self.settings, self.measure)

    def compose_document(self, slides: Sequence[SlidePayload]) -> ComposedDocument:
        if not slides:
            raise RenderError("There are no slides to render.")
        pages = self.layout(slides)
        content = self._render(pages)
        logger.debug(
            f"Composed {len(pages)} page(s) from {len(slides)} slide(s), "
            f"{len(content)} bytes"
        )
        return ComposedDocument(content=content, pages=pages)

    def compose(self, slides: Sequence[SlidePayload]) -> bytes:
        return self.compose_document(slides).content

    def _check_renderable(self) -> None:
        s = self.settings
        if s.page_width <= 0 or s.page_height <= 0:
            raise RenderError(
                f"Unsupported page size {s.page_width} x {s.page_height} mm."
            )
        if s.content_width <= 0 or s.body_top >= s.printable_bottom:
            raise RenderError("Page margins leave no room for content.")
        try:
            pdfmetrics.getFont(s.font_name)
        except Exception as exc:
            raise RenderError(f"Unknown font: {s.font_name}") from exc

    def _warn_missing_glyphs(self, blocks: Sequence[SlideBlock]) -> None:
        font = pdfmetrics.getFont(self.settings.font_name)
        for block in blocks:
            missing = sorted(
                {
                    char
                    for paragraph in block.paragraphs
                    for char in paragraph
                    if not char.isspace() and not has_glyph(font, char)
                }
            )
            if missing:
                logger.warning(
                    f"Slide {block.number}: font {self.settings.font_name} cannot draw "
                    f"{''.join(missing[:MISSING_GLYPH_SAMPLE])!r}, set PDF_FONT_PATH "
                    "to a TrueType font that covers these characters"
                )

    def _render(self, pages: Sequence[PageLayout]) -> bytes:
        s = self.settings
        buffer = io.BytesIO()
        try:
            pdf = canvas.Canvas(
                buffer,
                pagesize=(s.page_width * mm, s.page_height * mm),
                invariant=1,
            )
            pdf.setTitle(DOCUMENT_TITLE)
            pdf.setAuthor(DOCUMENT_CREATOR)
            pdf.setCreator(DOCUMENT_CREATOR)
            for page in pages:
                for line in page.lines:
                    pdf.setFont(s.font_name, line.font_size)
                    pdf.setFillColorRGB(*_ROLE_COLORS[line.role])
                    pdf.drawString(
                        line.x * mm, (s.page_height - line.y) * mm, line.text
                    )
                pdf.showPage()
            pdf.save()
        except Exception as exc:
            raise RenderError() from exc
        return buffer.getvalue()
