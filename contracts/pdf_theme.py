"""Page geometry and colours shared by the contract and audit pages.

All lengths are millimetres measured from the top-left corner of an A4
portrait page; the flow engine converts them to PDF points when drawing.
"""

from __future__ import annotations

from dataclasses import dataclass

from reportlab.lib.colors import Color, HexColor
from reportlab.lib.pagesizes import A4
from reportlab.lib.units import mm

INK = Color(0, 0, 0)
ACCENT = HexColor('#472d76')
AUDIT_ACCENT = Color(128 / 255.0, 0, 128 / 255.0)
AUDIT_BOX_FILL = Color(245 / 255.0, 245 / 255.0, 245 / 255.0)

FONT_REGULAR = 'Helvetica'
FONT_BOLD = 'Helvetica-Bold'
FONT_ITALIC = 'Helvetica-Oblique'


@dataclass(frozen=True)
class PageGeometry:
    page_width: float = A4[0] / mm
    page_height: float = A4[1] / mm
    margin: float = 20.0

    # Space kept free above the bottom margin for the footer.
    footer_reserve: float = 25.0
    # A section title needs this much room left or it moves to the next page.
    orphan_reserve: float = 70.0
    # Spacers break when the cursor passes this reserve.
    spacer_reserve: float = 20.0
    # Signature block breaks when less than this is left from the page edge.
    signature_reserve: float = 60.0

    first_page_top: float = 50.0
    continuation_top: float = 30.0
    title_continuation_top: float = 20.0
    signature_continuation_top: float = 40.0

    line_factor: float = 0.5
    default_spacing: float = 1.5
    title_spacing: float = 2.0

    header_logo_top: float = 10.0
    header_logo_width: float = 50.0
    header_logo_height: float = 16.0
    header_fallback_baseline: float = 25.0
    header_rule_y: float = 35.0

    footer_offset: float = 15.0
    footer_rule_gap: float = 5.0
    footer_tracking: float = 3.0
    rule_width: float = 1.0

    @property
    def content_width(self) -> float:
        return self.page_width - 2 * self.margin

    @property
    def text_limit(self) -> float:
        return self.page_height - self.margin - self.footer_reserve

    @property
    def title_limit(self) -> float:
        return self.page_height - self.margin - self.orphan_reserve

    @property
    def spacer_limit(self) -> float:
        return self.page_height - self.margin - self.spacer_reserve

    @property
    def signature_limit(self) -> float:
        return self.page_height - self.signature_reserve

    @property
    def footer_y(self) -> float:
        return self.page_height - self.footer_offset

    def line_height(self, font_size: float) -> float:
        return font_size * self.line_factor


A4_GEOMETRY = PageGeometry()
