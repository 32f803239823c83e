"""Page flow engine for the service contract PDF.

The engine owns a vertical cursor (page number, y in millimetres from the top
of the page) and streams typed blocks onto a reportlab canvas, breaking pages
before a block would run into the footer area.

Page breaks always happen in this order: footer on the page being left, new
page, repeated header hook, cursor reset, style re-applied. Every block brings
its own immutable ``TextStyle``; footer and header drawing run inside
``saveState()``/``restoreState()`` so their accent colour never reaches body
text.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Callable, Iterable, Optional, Union

from reportlab.lib.colors import Color
from reportlab.lib.units import mm
from reportlab.lib.utils import ImageReader, simpleSplit
from reportlab.pdfbase.pdfmetrics import stringWidth
from reportlab.pdfgen import canvas

from .assets import AssetResult, Loaded
from .pdf_theme import (
    A4_GEOMETRY,
    ACCENT,
    FONT_BOLD,
    FONT_ITALIC,
    FONT_REGULAR,
    INK,
    PageGeometry,
)
from .signature_ink import normalize_ink

logger = logging.getLogger(__name__)

FOOTER_LABEL = 'LABORATÓRIO CRIATIVO'
HEADER_FALLBACK_TITLE = 'zafira'


class Emphasis(str, Enum):
    NORMAL = 'normal'
    BOLD = 'bold'
    ITALIC = 'italic'


class Alignment(str, Enum):
    LEFT = 'left'
    CENTER = 'center'
    RIGHT = 'right'
    # Drawn left-aligned; lines are wrapped but never stretched.
    JUSTIFY = 'justify'


_FONTS = {
    Emphasis.NORMAL: FONT_REGULAR,
    Emphasis.BOLD: FONT_BOLD,
    Emphasis.ITALIC: FONT_ITALIC,
}


@dataclass(frozen=True)
class TextStyle:
    font_size: float = 10
    emphasis: Emphasis = Emphasis.NORMAL
    alignment: Alignment = Alignment.JUSTIFY
    color: Color = INK

    @property
    def font_name(self) -> str:
        return _FONTS[self.emphasis]

    def derive(self, **changes) -> 'TextStyle':
        return replace(self, **changes)


BODY_STYLE = TextStyle()
SECTION_TITLE_STYLE = TextStyle(font_size=10, emphasis=Emphasis.BOLD, alignment=Alignment.CENTER)
SIGNATURE_NAME_STYLE = TextStyle(font_size=10, alignment=Alignment.LEFT)
SIGNATURE_AFFILIATION_STYLE = TextStyle(font_size=8, alignment=Alignment.LEFT)


@dataclass(frozen=True)
class TextBlock:
    text: str
    style: TextStyle = BODY_STYLE
    # Gap after the block; None means the geometry default.
    spacing: Optional[float] = None


@dataclass(frozen=True)
class Spacer:
    height: float


@dataclass(frozen=True)
class SectionTitle:
    text: str


@dataclass(frozen=True)
class SignatureParty:
    name: str
    affiliation: str
    signature: Optional[AssetResult] = None


@dataclass(frozen=True)
class SignatureBlock:
    left: SignatureParty
    right: SignatureParty
    # Only the contractor (left) signature is normalized by default.
    normalize_left: bool = True
    normalize_right: bool = False


Block = Union[TextBlock, Spacer, SectionTitle, SignatureBlock]


@dataclass(frozen=True)
class Placement:
    page: int
    kind: str
    text: str
    y: float


def wrap_text(text: str, style: TextStyle, width: float) -> list[str]:
    """Wrap ``text`` to ``width`` millimetres, keeping explicit blank lines."""
    lines: list[str] = []
    for raw_line in (text or '').split('\n'):
        if not raw_line.strip():
            lines.append('')
            continue
        lines.extend(simpleSplit(raw_line, style.font_name, style.font_size, width * mm))
    return lines


@dataclass
class PageFlowEngine:
    c: canvas.Canvas
    geometry: PageGeometry = A4_GEOMETRY
    logo: Optional[AssetResult] = None
    repeated_header: Optional[Callable[['PageFlowEngine'], None]] = None
    footer_label: str = FOOTER_LABEL

    page_number: int = field(default=1, init=False)
    y: float = field(default=0.0, init=False)
    current_style: TextStyle = field(default=BODY_STYLE, init=False)
    journal: list[Placement] = field(default_factory=list, init=False)
    _closed: bool = field(default=False, init=False)

    def __post_init__(self):
        self.y = self.geometry.first_page_top

    # ------------------------------------------------------------------
    # Coordinates and style
    # ------------------------------------------------------------------

    def pdf_y(self, y: float) -> float:
        """Convert a top-down millimetre offset to reportlab's bottom-up points."""
        return (self.geometry.page_height - y) * mm

    def _apply_style(self, style: TextStyle) -> None:
        self.c.setFont(style.font_name, style.font_size)
        self.c.setFillColor(style.color)
        self.c.setStrokeColor(style.color)
        self.current_style = style

    def _record(self, kind: str, text: str = '') -> None:
        self.journal.append(Placement(page=self.page_number, kind=kind, text=text, y=self.y))

    def _draw_line_of_text(self, line: str, y: float, alignment: Alignment) -> None:
        g = self.geometry
        if alignment == Alignment.CENTER:
            self.c.drawCentredString(g.page_width / 2 * mm, self.pdf_y(y), line)
        elif alignment == Alignment.RIGHT:
            self.c.drawRightString((g.page_width - g.margin) * mm, self.pdf_y(y), line)
        else:
            self.c.drawString(g.margin * mm, self.pdf_y(y), line)

    def _draw_image(self, image, x: float, top: float, width: float, height: float) -> None:
        self.c.drawImage(
            ImageReader(image),
            x * mm,
            self.pdf_y(top + height),
            width=width * mm,
            height=height * mm,
            mask='auto',
        )

    # ------------------------------------------------------------------
    # Header / footer
    # ------------------------------------------------------------------

    def draw_first_page_header(self) -> None:
        g = self.geometry
        self.c.saveState()
        drawn = False
        if isinstance(self.logo, Loaded):
            try:
                self._draw_image(
                    self.logo.image,
                    (g.page_width - g.header_logo_width) / 2,
                    g.header_logo_top,
                    g.header_logo_width,
                    g.header_logo_height,
                )
                drawn = True
            except (OSError, ValueError) as e:
                logger.warning(f"Logo could not be drawn, using text header: {e}")
        if not drawn:
            self.c.setFillColor(INK)
            self.c.setFont(FONT_BOLD, 24)
            self.c.drawCentredString(g.page_width / 2 * mm, self.pdf_y(g.header_fallback_baseline), HEADER_FALLBACK_TITLE)

        self.c.setStrokeColor(ACCENT)
        self.c.setLineWidth(g.rule_width * mm)
        self.c.line(g.margin * mm, self.pdf_y(g.header_rule_y), (g.page_width - g.margin) * mm, self.pdf_y(g.header_rule_y))
        self.c.restoreState()
        self._record('header', 'logo' if drawn else HEADER_FALLBACK_TITLE)

    def draw_footer(self) -> None:
        g = self.geometry
        saved_style = self.current_style
        self.c.saveState()

        rule_y = self.pdf_y(g.footer_y - g.footer_rule_gap)
        self.c.setStrokeColor(ACCENT)
        self.c.setLineWidth(g.rule_width * mm)
        self.c.line(g.margin * mm, rule_y, (g.page_width - g.margin) * mm, rule_y)

        font_size = 8
        tracking = g.footer_tracking * mm
        label_width = stringWidth(self.footer_label, FONT_BOLD, font_size) + tracking * (len(self.footer_label) - 1)
        self.c.setFillColor(ACCENT)
        self.c.setFont(FONT_BOLD, font_size)
        self.c.drawString(
            g.page_width / 2 * mm - label_width / 2,
            self.pdf_y(g.footer_y),
            self.footer_label,
            charSpace=tracking,
        )

        self.c.restoreState()
        self.current_style = saved_style
        self._record('footer', self.footer_label)

    def break_page(self, top: float) -> None:
        self.draw_footer()
        self.c.showPage()
        self.page_number += 1
        if self.repeated_header is not None:
            self.repeated_header(self)
        self.y = top
        # showPage() resets the graphics state; body text continues in ink.
        self._apply_style(self.current_style.derive(color=INK))
        self._record('page_break')

    # ------------------------------------------------------------------
    # Block placement
    # ------------------------------------------------------------------

    def place_text(self, block: TextBlock, *, kind: str = 'text') -> None:
        g = self.geometry
        style = block.style
        lines = wrap_text(block.text, style, g.content_width)
        line_height = g.line_height(style.font_size)
        height = len(lines) * line_height

        if self.y + height > g.text_limit:
            self.break_page(g.continuation_top)

        self._apply_style(style)
        self._record(kind, block.text)
        for i, line in enumerate(lines):
            if line:
                self._draw_line_of_text(line, self.y + i * line_height, style.alignment)

        spacing = g.default_spacing if block.spacing is None else block.spacing
        self.y += height + spacing

    def place_spacer(self, height: float) -> None:
        g = self.geometry
        self.y += height
        self._record('spacer', str(height))
        if self.y > g.spacer_limit:
            self.break_page(g.continuation_top)

    def place_section_title(self, text: str) -> None:
        g = self.geometry
        # Not enough room to start a section: move the title to a fresh page.
        if self.y > g.title_limit:
            self.break_page(g.title_continuation_top)
        self.place_text(TextBlock(text, SECTION_TITLE_STYLE, spacing=g.title_spacing), kind='title')
        self._apply_style(BODY_STYLE)

    def _draw_signature(self, party: SignatureParty, x: float, line_y: float, *, normalize: bool) -> None:
        if not isinstance(party.signature, Loaded):
            if party.signature is not None:
                logger.info(f"Signature slot for {party.name!r} left blank: {party.signature.reason}")
            return
        image = normalize_ink(party.signature.image) if normalize else party.signature.image
        try:
            self._draw_image(image, x + 5, line_y - 25, 40, 20)
        except (OSError, ValueError) as e:
            logger.warning(f"Signature image for {party.name!r} could not be drawn: {e}")

    def place_signature_block(self, block: SignatureBlock) -> None:
        g = self.geometry
        if self.y > g.signature_limit:
            self.break_page(g.signature_continuation_top)

        line_length = 70
        line_y = self.y + 10
        left_x = g.margin
        right_x = g.page_width - g.margin - line_length

        self._apply_style(SIGNATURE_NAME_STYLE)
        self.c.setLineWidth(0.5 * mm)
        for x in (left_x, right_x):
            self.c.line(x * mm, self.pdf_y(line_y), (x + line_length) * mm, self.pdf_y(line_y))

        for x, party in ((left_x, block.left), (right_x, block.right)):
            self._apply_style(SIGNATURE_NAME_STYLE)
            self.c.drawString(x * mm, self.pdf_y(line_y + 5), party.name)
            self._apply_style(SIGNATURE_AFFILIATION_STYLE)
            self.c.drawString(x * mm, self.pdf_y(line_y + 10), party.affiliation)

        self._draw_signature(block.left, left_x, line_y, normalize=block.normalize_left)
        self._draw_signature(block.right, right_x, line_y, normalize=block.normalize_right)

        self._record('signature', f"{block.left.name} | {block.right.name}")
        self.y = line_y + 15
        self._apply_style(BODY_STYLE)

    def place(self, block: Block) -> None:
        if isinstance(block, TextBlock):
            self.place_text(block)
        elif isinstance(block, Spacer):
            self.place_spacer(block.height)
        elif isinstance(block, SectionTitle):
            self.place_section_title(block.text)
        elif isinstance(block, SignatureBlock):
            self.place_signature_block(block)
        else:
            raise TypeError(f"Unsupported block: {block!r}")

    def place_all(self, blocks: Iterable[Block]) -> None:
        for block in blocks:
            self.place(block)

    def finish(self) -> None:
        """Footer on the last page. The canvas is left open for the caller."""
        if self._closed:
            return
        self.draw_footer()
        self._closed = True
