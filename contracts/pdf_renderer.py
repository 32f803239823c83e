"""Contract PDF rendering entry point.

Each call owns its own canvas and flow engine, so concurrent renders never
share cursor state.
"""

from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass
from datetime import datetime, timezone
from io import BytesIO
from typing import Any, Optional

from prometheus_client import Counter
from reportlab.lib.units import mm
from reportlab.pdfgen import canvas

from .assets import AssetResult, load_image
from .contract_data import ContractData
from .pdf_audit import AuditEvidence, AuditPageBuilder, collect_evidence
from .pdf_composer import compose_contract
from .pdf_flow import PageFlowEngine, Placement
from .pdf_theme import A4_GEOMETRY, PageGeometry

logger = logging.getLogger(__name__)

CONTRACTS_RENDERED = Counter(
    'zafira_contract_pdfs_rendered_total',
    'Contract PDFs rendered',
    ['audit_log'],
)
ASSETS_UNAVAILABLE = Counter(
    'zafira_contract_assets_unavailable_total',
    'Logo or signature images that could not be loaded for a render',
    ['asset'],
)


@dataclass(frozen=True)
class ContractPdfResult:
    pdf_bytes: bytes
    filename: str
    page_count: int
    journal: tuple[Placement, ...] = ()
    evidence: Optional[AuditEvidence] = None
    path: Optional[str] = None


def contract_filename(razao_social: str) -> str:
    company = re.sub(r'\s+', '_', razao_social or '')
    return f"Contrato_Zafira_{company}.pdf"


def _load(source: Any, label: str) -> Optional[AssetResult]:
    if source is None:
        return None
    result = load_image(source, label=label)
    if not result.available:
        ASSETS_UNAVAILABLE.labels(asset=label).inc()
    return result


def render_contract_pdf(
    data: ContractData,
    *,
    contractor_signature: Any = None,
    client_signature: Any = None,
    logo: Any = None,
    include_audit_log: bool = True,
    return_bytes: bool = True,
    destination: Optional[str] = None,
    instant: Optional[datetime] = None,
    geometry: PageGeometry = A4_GEOMETRY,
) -> ContractPdfResult:
    """Render the contract, optionally followed by the audit log page.

    Image sources may be Pillow images, bytes, data URLs, URLs or file paths.
    An image that cannot be loaded is logged and left out of the document.
    With ``return_bytes=False`` the PDF is also written to ``destination``.
    """
    if not return_bytes and not destination:
        raise ValueError('destination is required when return_bytes is False')

    instant = instant or datetime.now(timezone.utc)
    contractor = _load(contractor_signature, 'contractor signature')
    client = _load(client_signature, 'client signature')
    logo_asset = _load(logo, 'logo')

    buffer = BytesIO()
    c = canvas.Canvas(buffer, pagesize=(geometry.page_width * mm, geometry.page_height * mm))
    c.setTitle(f"Contrato de Prestação de Serviços - {data.razao_social}".strip())
    c.setAuthor('Zafira Comunicação e Marketing')

    engine = PageFlowEngine(c, geometry=geometry, logo=logo_asset)
    engine.draw_first_page_header()
    engine.place_all(compose_contract(data, contractor_signature=contractor, client_signature=client))
    engine.finish()
    page_count = engine.page_number

    evidence = None
    if include_audit_log:
        c.showPage()
        evidence = collect_evidence(
            data,
            client_signature=client,
            contractor_signature=contractor,
            instant=instant,
        )
        AuditPageBuilder(c, geometry).draw(data, evidence, client)
        page_count += 1

    c.save()
    pdf_bytes = buffer.getvalue()
    CONTRACTS_RENDERED.labels(audit_log=str(bool(include_audit_log)).lower()).inc()

    filename = contract_filename(data.razao_social)
    path = None
    if not return_bytes:
        os.makedirs(destination, exist_ok=True)
        path = os.path.join(destination, filename)
        with open(path, 'wb') as fh:
            fh.write(pdf_bytes)
        logger.info(f"Contract PDF written to {path} ({page_count} pages)")

    return ContractPdfResult(
        pdf_bytes=pdf_bytes,
        filename=filename,
        page_count=page_count,
        journal=tuple(engine.journal),
        evidence=evidence,
        path=path,
    )
