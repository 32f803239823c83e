"""Contract record operations: signing, rendering and delivery.

Views stay thin; every state change of a ContractRecord goes through here.
"""

from __future__ import annotations

import base64
import logging
import uuid
from io import BytesIO
from typing import Any, Optional

from django.conf import settings
from django.db import transaction
from django.utils import timezone
from PIL import Image

from notifications.email_service import EmailService
from notifications.webhook_service import WebhookService

from .models import ContractAuditEvent, ContractRecord
from .pdf_renderer import ContractPdfResult, render_contract_pdf
from .signature_ink import has_visible_ink

logger = logging.getLogger(__name__)

TERMS_NOT_ACCEPTED = 'Por favor, leia e aceite os Termos e Condições'
SIGNATURE_EMPTY = 'Por favor, assine o contrato.'
ALREADY_SIGNED = 'Contrato já assinado'
SIGNATURE_NOT_FOUND = 'Assinatura do cliente não encontrada.'
INVALID_EMAIL = 'Por favor, insira um email válido.'
NOT_SIGNED = 'O contrato precisa estar assinado antes do envio.'


class ContractServiceError(Exception):
    """Base class for rejections reported back to the API caller."""


class SigningRejected(ContractServiceError):
    pass


class SignatureMissing(ContractServiceError):
    pass


class DeliveryRejected(ContractServiceError):
    pass


def log_event(
    record: ContractRecord,
    event: str,
    message: str = '',
    *,
    ip_address: Optional[str] = None,
    user_agent: Optional[str] = None,
    extra: Optional[dict] = None,
) -> ContractAuditEvent:
    return ContractAuditEvent.objects.create(
        record=record,
        event=event,
        message=message,
        ip_address=ip_address,
        user_agent=user_agent,
        extra=extra or {},
    )


# ============================================================================
# LOOKUP
# ============================================================================

def find_by_key(key: Any) -> Optional[ContractRecord]:
    """Resolve a client link key: the access key first, then the record id."""
    try:
        parsed = key if isinstance(key, uuid.UUID) else uuid.UUID(str(key))
    except (TypeError, ValueError):
        return None
    record = ContractRecord.objects.filter(access_key=parsed).first()
    if record is None:
        record = ContractRecord.objects.filter(id=parsed).first()
    return record


def list_recent(limit: Optional[int] = None):
    limit = limit or getattr(settings, 'RECENT_CONTRACTS_LIMIT', 20)
    return ContractRecord.objects.order_by('-created_at')[:limit]


def signing_link(record: ContractRecord) -> str:
    return f"{settings.FRONTEND_BASE_URL}/c/{record.access_key}"


# ============================================================================
# SIGNING
# ============================================================================

def parse_signature_data_url(data_url: str) -> tuple[str, Image.Image]:
    """Decode a captured signature and re-encode it as a PNG data URL."""
    raw = str(data_url or '').strip()
    if not raw.startswith('data:'):
        raise ValueError('Expected a data URL')
    header, _, b64 = raw.partition(',')
    if 'base64' not in header.lower():
        raise ValueError('Expected base64 data URL')
    img = Image.open(BytesIO(base64.b64decode(b64)))
    img.load()
    out = BytesIO()
    img.save(out, format='PNG')
    png_data_url = 'data:image/png;base64,' + base64.b64encode(out.getvalue()).decode('ascii')
    return png_data_url, img


def sign_contract(
    record_id: Any,
    *,
    signature_data_url: Optional[str],
    terms_accepted: bool,
    ip_address: Optional[str] = None,
    user_agent: Optional[str] = None,
) -> ContractRecord:
    """Transition pending -> signed.

    Terms acceptance and a non-empty signature are checked before the record is
    touched; a rejected attempt leaves it exactly as it was.
    """
    if not terms_accepted:
        raise SigningRejected(TERMS_NOT_ACCEPTED)
    if not signature_data_url:
        raise SigningRejected(SIGNATURE_EMPTY)
    try:
        png_data_url, image = parse_signature_data_url(signature_data_url)
    except (OSError, ValueError) as e:
        raise SigningRejected(f'Assinatura inválida: {e}') from e
    if not has_visible_ink(image):
        raise SigningRejected(SIGNATURE_EMPTY)

    with transaction.atomic():
        record = ContractRecord.objects.select_for_update().get(pk=record_id)
        if record.is_signed:
            raise SigningRejected(ALREADY_SIGNED)

        record.status = ContractRecord.STATUS_SIGNED
        record.client_signature = png_data_url
        record.signed_at = timezone.now()
        record.ip_address = ip_address
        record.user_agent = user_agent
        record.terms_accepted = True
        record.save(update_fields=[
            'status', 'client_signature', 'signed_at', 'ip_address',
            'user_agent', 'terms_accepted', 'updated_at',
        ])

        log_event(
            record,
            'signed',
            f"Contract signed by {record.responsavel_nome or 'client'}",
            ip_address=ip_address,
            user_agent=user_agent,
        )

    logger.info(f"Contract {record.id} signed from {ip_address}")
    return record


# ============================================================================
# RENDERING
# ============================================================================

def render_record_pdf(record: ContractRecord, *, include_audit_log: bool = True) -> ContractPdfResult:
    if include_audit_log and not record.client_signature:
        raise SignatureMissing(SIGNATURE_NOT_FOUND)
    return render_contract_pdf(
        record.to_contract_data(),
        contractor_signature=settings.CONTRACTOR_SIGNATURE_SOURCE,
        client_signature=record.client_signature,
        logo=settings.CONTRACT_LOGO_SOURCE,
        include_audit_log=include_audit_log,
    )


# ============================================================================
# DELIVERY
# ============================================================================

def is_valid_delivery_email(email: Optional[str]) -> bool:
    email = (email or '').strip()
    return '@' in email and '.' in email


def request_email_delivery(
    record: ContractRecord,
    email: Optional[str],
    *,
    ip_address: Optional[str] = None,
    user_agent: Optional[str] = None,
) -> ContractRecord:
    """Send the signed contract with its audit page and annotate the record.

    The webhook wins when configured, SMTP is the fallback; when neither is
    available (or the transport fails) the request is kept as pending_send.
    """
    email = (email or '').strip()
    if not is_valid_delivery_email(email):
        raise DeliveryRejected(INVALID_EMAIL)
    if not record.is_signed:
        raise DeliveryRejected(NOT_SIGNED)

    pdf = render_record_pdf(record, include_audit_log=True)

    email_status = ContractRecord.EMAIL_PENDING_SEND
    webhook = WebhookService()
    mailer = EmailService()
    if webhook.configured:
        if webhook.send_contract(
            email=email,
            contract_id=str(record.id),
            client_name=record.razao_social,
            filename=f"Contrato_{record.razao_social}.pdf",
            pdf_bytes=pdf.pdf_bytes,
        ):
            email_status = ContractRecord.EMAIL_SENT_VIA_WEBHOOK
    elif mailer.configured:
        if mailer.send_signed_contract_email(
            recipient_email=email,
            recipient_name=record.responsavel_nome or record.razao_social,
            company_name=record.razao_social,
            signed_at_iso=record.signed_at.isoformat() if record.signed_at else None,
            attachments=[{
                'filename': pdf.filename,
                'content': pdf.pdf_bytes,
                'content_type': 'application/pdf',
            }],
        ):
            email_status = ContractRecord.EMAIL_SENT_VIA_EMAIL

    record.sent_to_email = email
    record.email_status = email_status
    record.email_requested_at = timezone.now()
    record.save(update_fields=['sent_to_email', 'email_status', 'email_requested_at', 'updated_at'])

    log_event(
        record,
        'email_requested',
        f"Delivery to {email}: {email_status}",
        ip_address=ip_address,
        user_agent=user_agent,
        extra={'email_status': email_status},
    )
    return record


def purge_all() -> int:
    """Bulk administrative reset. Returns how many records were deleted."""
    count = ContractRecord.objects.count()
    ContractRecord.objects.all().delete()
    logger.warning(f"All contract records deleted ({count})")
    return count
