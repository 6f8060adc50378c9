"""
Page layout for the extracted-text document.

Layout is computed without touching a PDF backend: text widths come from a
``TextMeasure`` callable and every placement decision threads an immutable
``LayoutCursor`` through pure functions. The composer renders the resulting
``PageLayout`` list afterwards.

All coordinates are millimetres measured from the top-left corner of the
page; ``y`` is the text baseline. Font sizes are points.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any

from reportlab.lib import pagesizes
from reportlab.lib.units import mm

from smartslide.configs.config import DEFAULT_FOOTER_TEXT

from .errors import RenderError

NO_TEXT_PLACEHOLDER = "[No textual content detected on this slide]"
UNREADABLE_SLIDE_PLACEHOLDER = "[This slide could not be read]"

PAGE_FORMATS = {
    "a3": pagesizes.A3,
    "a4": pagesizes.A4,
    "letter": pagesizes.LETTER,
    "legal": pagesizes.LEGAL,
}

# (text, font size in points) -> width in millimetres
TextMeasure = Callable[[str, float], float]


class LineRole(Enum):
    HEADER = "header"
    BODY = "body"
    PLACEHOLDER = "placeholder"
    FOOTER = "footer"


@dataclass(frozen=True)
class LayoutSettings:
    page_width: float = 297.0
    page_height: float = 210.0
    margin: float = 10.0
    header_y: float = 15.0
    header_font_size: float = 16.0
    body_top: float = 30.0
    body_font_size: float = 12.0
    line_height: float = 6.0
    paragraph_gap: float = 2.0
    continuation_top: float = 20.0
    placeholder_font_size: float = 10.0
    footer_offset: float = 5.0
    footer_font_size: float = 8.0
    font_name: str = "Helvetica"
    header_template: str = "Slide {number} (Extracted Text)"
    footer_text: str = DEFAULT_FOOTER_TEXT

    @property
    def content_width(self) -> float:
        return self.page_width - 2 * self.margin

    @property
    def printable_bottom(self) -> float:
        return self.page_height - self.margin

    @property
    def footer_y(self) -> float:
        return self.page_height - self.footer_offset

    @classmethod
    def from_config(cls, cfg: Any) -> LayoutSettings:
        fmt = PAGE_FORMATS.get(cfg.pdf_page_format)
        if fmt is None:
            raise RenderError(
                f"Unsupported page format {cfg.pdf_page_format!r}, "
                f"expected one of: {', '.join(sorted(PAGE_FORMATS))}."
            )
        width, height = (dim / mm for dim in fmt)
        if cfg.pdf_orientation == "landscape":
            width, height = max(width, height), min(width, height)
        elif cfg.pdf_orientation == "portrait":
            width, height = min(width, height), max(width, height)
        else:
            raise RenderError(
                f"Unsupported orientation {cfg.pdf_orientation!r}, "
                "expected landscape or portrait."
            )
        return cls(
            page_width=round(width, 3),
            page_height=round(height, 3),
            margin=cfg.pdf_margin_mm,
            font_name=cfg.pdf_font_name,
            footer_text=cfg.pdf_footer_text,
        )


@dataclass(frozen=True)
class PlacedLine:
    text: str
    x: float
    y: float
    font_size: float
    role: LineRole


@dataclass
class PageLayout:
    slide_number: int
    is_continuation: bool = False
    lines: list[PlacedLine] = field(default_factory=list)

    def texts(self, role: LineRole | None = None) -> list[str]:
        return [line.text for line in self.lines if role is None or line.role is role]


@dataclass(frozen=True)
class LayoutCursor:
    page_index: int
    y_offset: float
    page_has_body: bool = False

    def next_page(self, top: float) -> LayoutCursor:
        return LayoutCursor(page_index=self.page_index + 1, y_offset=top)


@dataclass(frozen=True)
class Placement:
    page_index: int
    line: PlacedLine


@dataclass(frozen=True)
class SlideBlock:
    """Text of one slide ready for layout.

    ``placeholder`` replaces the paragraphs when set.
    """

    number: int
    paragraphs: Sequence[str]
    placeholder: str | None = None


def wrap_text(text: str, max_width: float, measure: Callable[[str], float]) -> list[str]:
    """Greedy word wrap.

    Words are packed onto a line until the next one would overflow
    ``max_width``. A single word wider than the line is split at character
    boundaries. Explicit newlines start a new line.
    """
    lines: list[str] = []
    for segment in text.splitlines():
        current = ""
        for word in segment.split():
            candidate = f"{current} {word}" if current else word
            if measure(candidate) <= max_width:
                current = candidate
                continue
            if current:
                lines.append(current)
            while len(word) > 1 and measure(word) > max_width:
                cut = _longest_fitting_prefix(word, max_width, measure)
                lines.append(word[:cut])
                word = word[cut:]
            current = word
        if current:
            lines.append(current)
    return lines


def _longest_fitting_prefix(
    word: str, max_width: float, measure: Callable[[str], float]
) -> int:
    lo, hi = 1, len(word)
    while lo < hi:
        mid = (lo + hi + 1) // 2
        if measure(word[:mid]) <= max_width:
            lo = mid
        else:
            hi = mid - 1
    return lo


def place_lines(
    cursor: LayoutCursor,
    lines: Sequence[str],
    settings: LayoutSettings,
    *,
    font_size: float,
    role: LineRole = LineRole.BODY,
) -> tuple[LayoutCursor, list[Placement]]:
    """Place the wrapped lines of one paragraph starting at ``cursor``.

    If the whole paragraph does not fit above the printable bottom, it moves
    to a new page first. A page that has no body lines yet is never left
    behind, and a paragraph taller than a full page continues line by line
    on further pages.
    """
    bottom = settings.printable_bottom
    height = settings.line_height
    if cursor.page_has_body and cursor.y_offset + len(lines) * height > bottom:
        cursor = cursor.next_page(settings.continuation_top)

    placements: list[Placement] = []
    for text in lines:
        if cursor.page_has_body and cursor.y_offset + height > bottom:
            cursor = cursor.next_page(settings.continuation_top)
        placements.append(
            Placement(
                cursor.page_index,
                PlacedLine(text, settings.margin, cursor.y_offset, font_size, role),
            )
        )
        cursor = replace(cursor, y_offset=cursor.y_offset + height, page_has_body=True)

    cursor = replace(cursor, y_offset=cursor.y_offset + settings.paragraph_gap)
    return cursor, placements


def layout_slide(
    block: SlideBlock,
    first_page_index: int,
    settings: LayoutSettings,
    measure: TextMeasure,
) -> list[PageLayout]:
    """Lay out one slide: a header page plus any overflow pages it needs."""
    pages = [PageLayout(slide_number=block.number)]
    pages[0].lines.append(
        PlacedLine(
            settings.header_template.format(number=block.number),
            settings.margin,
            settings.header_y,
            settings.header_font_size,
            LineRole.HEADER,
        )
    )

    if block.placeholder is not None:
        texts: Sequence[str] = [block.placeholder]
        font_size, role = settings.placeholder_font_size, LineRole.PLACEHOLDER
    else:
        texts = block.paragraphs
        font_size, role = settings.body_font_size, LineRole.BODY

    cursor = LayoutCursor(page_index=first_page_index, y_offset=settings.body_top)
    for text in texts:
        wrapped = wrap_text(
            text, settings.content_width, lambda s: measure(s, font_size)
        )
        if not wrapped:
            continue
        cursor, placements = place_lines(
            cursor, wrapped, settings, font_size=font_size, role=role
        )
        for placement in placements:
            while placement.page_index - first_page_index >= len(pages):
                pages.append(PageLayout(slide_number=block.number, is_continuation=True))
            pages[placement.page_index - first_page_index].lines.append(placement.line)

    for page in pages:
        page.lines.append(
            PlacedLine(
                settings.footer_text,
                settings.margin,
                settings.footer_y,
                settings.footer_font_size,
                LineRole.FOOTER,
            )
        )
    return pages


def layout_document(
    blocks: Sequence[SlideBlock], settings: LayoutSettings, measure: TextMeasure
) -> list[PageLayout]:
    pages: list[PageLayout] = []
    for block in blocks:
        pages.extend(layout_slide(block, len(pages), settings, measure))
    return pages
