"""Audit log page appended to a signed contract.

The page has a static layout and is drawn directly on the canvas; it does not
go through the page flow engine and assumes its content fits on one page.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from email.utils import format_datetime
from typing import Optional
from zoneinfo import ZoneInfo

from reportlab.lib.units import mm
from reportlab.lib.utils import ImageReader
from reportlab.pdfgen import canvas

from .assets import AssetResult, Loaded
from .contract_data import ContractData
from .fingerprint import build_seed, epoch_millis, generate_fingerprint
from .pdf_flow import TextStyle, wrap_text
from .pdf_theme import A4_GEOMETRY, AUDIT_ACCENT, AUDIT_BOX_FILL, FONT_BOLD, FONT_REGULAR, INK, PageGeometry

logger = logging.getLogger(__name__)

BRASILIA = ZoneInfo('America/Sao_Paulo')

TITLE = 'LOG DE AUDITORIA E ASSINATURA ELETRÔNICA'
SIGNATORY_SECTION = 'DADOS DO SIGNATÁRIO (CONTRATANTE)'
EVIDENCE_SECTION = 'EVIDÊNCIAS TÉCNICAS E RASTREABILIDADE'
DECLARATION_TITLE = 'DECLARAÇÃO DE ACEITE E VALIDADE JURÍDICA'
VISUAL_SIGNATURE_TITLE = 'REPRESENTAÇÃO VISUAL DA ASSINATURA'
PENDING_SIGNATURE = '[Assinatura Digital Pendente]'
FOOTER_TEXT = 'DOCUMENTO ASSINADO ELETRONICAMENTE E AUDITADO POR ZAFIRA HUB'

EMAIL_FALLBACK = 'Não informado no cadastro / Presencial'
IP_FALLBACK = 'Não registrado (Assinatura Local)'
USER_AGENT_FALLBACK = 'Não registrado'
FINGERPRINT_LABEL = 'Hash Assinatura (Simulado)'
USER_AGENT_MAX = 50

DECLARATION_PARAGRAPHS = (
    'O signatário declara que leu e aceitou integralmente os Termos e Condições de Uso, a Política '
    'de Privacidade e o Termo de Aceite de Assinatura Eletrônica da plataforma Zafira.',
    'A assinatura eletrônica aposta neste documento representa a livre manifestação de vontade das '
    'partes, realizada por meio eletrônico, sendo juridicamente válida para fins de contratos de '
    'natureza privada, nos termos do ordenamento jurídico brasileiro.',
    'As evidências técnicas registradas neste Log de Auditoria reforçam a autenticidade, a '
    'integridade e a rastreabilidade do ato de assinatura, sem prejuízo de outros meios de '
    'comprovação admitidos em direito, conforme a legislação brasileira.',
)

_BASE36 = '0123456789abcdefghijklmnopqrstuvwxyz'


def to_base36(value: int) -> str:
    if value == 0:
        return '0'
    digits = []
    while value:
        value, rem = divmod(value, 36)
        digits.append(_BASE36[rem])
    return ''.join(reversed(digits))


def local_document_id(instant: datetime) -> str:
    return f"LOC-{to_base36(epoch_millis(instant)).upper()}"


def format_utc(instant: datetime) -> str:
    if instant.tzinfo is None:
        instant = instant.replace(tzinfo=timezone.utc)
    return format_datetime(instant.astimezone(timezone.utc), usegmt=True)


def format_brasilia(instant: datetime) -> str:
    if instant.tzinfo is None:
        instant = instant.replace(tzinfo=timezone.utc)
    return instant.astimezone(BRASILIA).strftime('%d/%m/%Y, %H:%M:%S')


def truncate_user_agent(user_agent: Optional[str]) -> str:
    if not user_agent:
        return USER_AGENT_FALLBACK
    return user_agent[:USER_AGENT_MAX] + '...'


@dataclass(frozen=True)
class AuditEvidence:
    document_id: str
    fingerprint: str
    ip_address: str
    signed_at_utc: str
    signed_at_brasilia: str
    user_agent: str

    @property
    def fingerprint_display(self) -> str:
        return self.fingerprint[:32].upper()


def collect_evidence(
    data: ContractData,
    *,
    client_signature: Optional[AssetResult] = None,
    contractor_signature: Optional[AssetResult] = None,
    instant: Optional[datetime] = None,
) -> AuditEvidence:
    instant = instant or datetime.now(timezone.utc)
    seed = build_seed(
        record_id=data.id,
        razao_social=data.razao_social,
        cnpj=data.cnpj,
        created=instant,
        client_signature=getattr(client_signature, 'source_text', '') or '',
        contractor_signature=getattr(contractor_signature, 'source_text', '') or '',
    )
    signed_at = data.signed_at if isinstance(data.signed_at, datetime) else instant
    return AuditEvidence(
        document_id=data.id or local_document_id(instant),
        fingerprint=generate_fingerprint(seed, instant),
        ip_address=data.ip_address or IP_FALLBACK,
        signed_at_utc=format_utc(signed_at),
        signed_at_brasilia=format_brasilia(signed_at),
        user_agent=truncate_user_agent(data.user_agent),
    )


class AuditPageBuilder:
    """Draws the audit log on the canvas's current page."""

    box_left = 20
    box_width = 170
    label_x = 25
    value_x = 75
    row_height = 6
    section_top = 55

    def __init__(self, c: canvas.Canvas, geometry: PageGeometry = A4_GEOMETRY):
        self.c = c
        self.geometry = geometry
        self.y = float(self.section_top)

    def pdf_y(self, y: float) -> float:
        return (self.geometry.page_height - y) * mm

    def _banner(self) -> None:
        c = self.c
        c.setFillColor(INK)
        c.setFont(FONT_BOLD, 14)
        c.drawCentredString(self.geometry.page_width / 2 * mm, self.pdf_y(20), TITLE)
        c.setStrokeColor(AUDIT_ACCENT)
        c.setLineWidth(0.5 * mm)
        c.line(self.box_left * mm, self.pdf_y(25), (self.box_left + self.box_width) * mm, self.pdf_y(25))

    def _section(self, title: str, items: list[tuple[str, str]]) -> None:
        c = self.c
        box_height = 8 + len(items) * self.row_height
        c.setFillColor(AUDIT_BOX_FILL)
        c.rect(
            self.box_left * mm,
            self.pdf_y(self.y + box_height),
            self.box_width * mm,
            box_height * mm,
            stroke=0,
            fill=1,
        )

        c.setFillColor(INK)
        c.setFont(FONT_BOLD, 10)
        c.drawString(self.label_x * mm, self.pdf_y(self.y + 6), title)
        for i, (label, value) in enumerate(items):
            row_y = self.pdf_y(self.y + 12 + i * self.row_height)
            c.setFont(FONT_REGULAR, 10)
            c.drawString(self.label_x * mm, row_y, f"{label}:")
            c.setFont(FONT_BOLD, 10)
            c.drawString(self.value_x * mm, row_y, value or '')

        self.y += 20 + len(items) * self.row_height

    def _declaration(self) -> None:
        c = self.c
        c.setFillColor(INK)
        c.setFont(FONT_BOLD, 10)
        c.drawString(self.box_left * mm, self.pdf_y(self.y), DECLARATION_TITLE)
        self.y += 6

        style = TextStyle(font_size=9)
        lines = wrap_text('\n\n'.join(DECLARATION_PARAGRAPHS), style, self.box_width)
        line_height = self.geometry.line_height(style.font_size)
        c.setFont(style.font_name, style.font_size)
        for i, line in enumerate(lines):
            if line:
                c.drawString(self.box_left * mm, self.pdf_y(self.y + i * line_height), line)
        self.y += len(lines) * line_height + 6

    def _visual_signature(self, client_signature: Optional[AssetResult]) -> None:
        c = self.c
        c.setFillColor(INK)
        c.setFont(FONT_BOLD, 10)
        c.drawString(self.box_left * mm, self.pdf_y(self.y), VISUAL_SIGNATURE_TITLE)
        self.y += 5

        drawn = False
        if isinstance(client_signature, Loaded):
            try:
                c.drawImage(
                    ImageReader(client_signature.image),
                    self.box_left * mm,
                    self.pdf_y(self.y + 30),
                    width=60 * mm,
                    height=30 * mm,
                    mask='auto',
                )
                drawn = True
            except (OSError, ValueError) as e:
                logger.warning(f"Client signature could not be drawn on audit page: {e}")
        if not drawn:
            c.drawString(self.box_left * mm, self.pdf_y(self.y + 10), PENDING_SIGNATURE)
        self.y += 40

    def _footer(self) -> None:
        c = self.c
        c.setStrokeColor(AUDIT_ACCENT)
        c.setLineWidth(0.5 * mm)
        c.line(self.box_left * mm, self.pdf_y(280), (self.box_left + self.box_width) * mm, self.pdf_y(280))
        c.setFillColor(AUDIT_ACCENT)
        c.setFont(FONT_REGULAR, 8)
        c.drawCentredString(self.geometry.page_width / 2 * mm, self.pdf_y(285), FOOTER_TEXT)

    def draw(self, data: ContractData, evidence: AuditEvidence, client_signature: Optional[AssetResult] = None) -> None:
        self.c.saveState()
        self._banner()
        self._section(SIGNATORY_SECTION, [
            ('Nome', data.responsavel_nome),
            ('CPF', data.responsavel_cpf),
            ('Email', data.email or EMAIL_FALLBACK),
            ('Empresa', data.razao_social),
        ])
        self._section(EVIDENCE_SECTION, [
            ('ID do Documento', evidence.document_id),
            (FINGERPRINT_LABEL, evidence.fingerprint_display),
            ('Endereço IP', evidence.ip_address),
            ('Data/Hora (UTC)', evidence.signed_at_utc),
            ('Data/Hora (Brasília)', evidence.signed_at_brasilia),
            ('User Agent', evidence.user_agent),
        ])
        self._declaration()
        self._visual_signature(client_signature)
        self._footer()
        self.c.restoreState()
