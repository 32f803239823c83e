"""Contract record endpoints.

Staff create records, list and download them; clients open a record through
its access link, sign it and request delivery of the signed PDF.
"""

from __future__ import annotations

import logging
from io import BytesIO

from django.conf import settings
from django.http import FileResponse, Http404
from django.shortcuts import get_object_or_404

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny, IsAdminUser
from rest_framework.response import Response

from . import services
from .catalog import AVAILABLE_SERVICES
from .contract_data import ContractData
from .models import ContractRecord, default_signature_date
from .pdf_renderer import render_contract_pdf
from .serializers import (
    ContractAuditEventSerializer,
    ContractRecordListSerializer,
    ContractRecordSerializer,
    EmailRequestSerializer,
    SignContractSerializer,
)

logger = logging.getLogger(__name__)


def _client_ip(request) -> str | None:
    xff = request.META.get('HTTP_X_FORWARDED_FOR')
    if xff:
        parts = [p.strip() for p in str(xff).split(',') if p.strip()]
        if parts:
            return parts[0]
    ip = request.META.get('REMOTE_ADDR')
    return str(ip).strip() if ip else None


def _user_agent(request) -> str | None:
    ua = request.META.get('HTTP_USER_AGENT')
    return str(ua).strip() if ua else None


def _pdf_response(pdf_bytes: bytes, filename: str) -> FileResponse:
    return FileResponse(
        BytesIO(pdf_bytes),
        as_attachment=True,
        filename=filename,
        content_type='application/pdf',
    )


def _get_by_key_or_404(key) -> ContractRecord:
    record = services.find_by_key(key)
    if record is None:
        raise Http404('Contrato não encontrado')
    return record


def _truthy(value) -> bool:
    return str(value or '').strip().lower() in ('1', 'true', 'yes', 'y', 'on')


# ============================================================================
# STAFF ENDPOINTS
# ============================================================================

@api_view(['POST'])
@permission_classes([IsAdminUser])
def contract_create(request):
    """Create a pending contract and return it with its client signing link."""
    serializer = ContractRecordSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    record = serializer.save()
    services.log_event(
        record,
        'created',
        f"Created by {getattr(request.user, 'username', '') or 'staff'}",
        ip_address=_client_ip(request),
        user_agent=_user_agent(request),
    )
    logger.info(f"Contract {record.id} created for {record.razao_social}")

    data = ContractRecordSerializer(record).data
    data['link'] = services.signing_link(record)
    return Response(data, status=status.HTTP_201_CREATED)


@api_view(['GET'])
@permission_classes([IsAdminUser])
def contract_recent(request):
    """Most recent contracts, newest first."""
    try:
        limit = int(request.query_params.get('limit') or 0) or None
    except ValueError:
        return Response({'error': 'limit must be an integer'}, status=status.HTTP_400_BAD_REQUEST)
    if limit is not None:
        limit = max(1, min(limit, 200))

    records = services.list_recent(limit)
    return Response({
        'count': len(records),
        'results': ContractRecordListSerializer(records, many=True).data,
    })


@api_view(['GET'])
@permission_classes([IsAdminUser])
def contract_detail(request, record_id):
    record = get_object_or_404(ContractRecord, id=record_id)
    data = ContractRecordSerializer(record).data
    data['link'] = services.signing_link(record)
    data['auditEvents'] = ContractAuditEventSerializer(record.audit_events.all(), many=True).data
    return Response(data)


@api_view(['GET'])
@permission_classes([IsAdminUser])
def contract_pdf(request, record_id):
    """Download a stored contract.

    ?audit=1 renders the signed version with the audit log page and requires
    the client signature.
    """
    record = get_object_or_404(ContractRecord, id=record_id)
    include_audit_log = _truthy(request.query_params.get('audit'))
    try:
        pdf = services.render_record_pdf(record, include_audit_log=include_audit_log)
    except services.SignatureMissing as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

    services.log_event(
        record,
        'pdf_downloaded',
        'Staff download',
        ip_address=_client_ip(request),
        user_agent=_user_agent(request),
        extra={'audit_log': include_audit_log},
    )
    return _pdf_response(pdf.pdf_bytes, pdf.filename)


@api_view(['POST'])
@permission_classes([IsAdminUser])
def contract_preview_pdf(request):
    """Render unsaved form data, without the audit log page."""
    serializer = ContractRecordSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    values = dict(serializer.validated_data)
    values.setdefault('data_assinatura', default_signature_date())

    pdf = render_contract_pdf(
        ContractData.from_values(values),
        contractor_signature=settings.CONTRACTOR_SIGNATURE_SOURCE,
        logo=settings.CONTRACT_LOGO_SOURCE,
        include_audit_log=False,
    )
    return _pdf_response(pdf.pdf_bytes, pdf.filename)


@api_view(['POST'])
@permission_classes([IsAdminUser])
def contract_reset(request):
    """Delete every contract record."""
    if not _truthy(request.data.get('confirm')):
        return Response({'error': 'confirm=true is required'}, status=status.HTTP_400_BAD_REQUEST)
    deleted = services.purge_all()
    return Response({'deleted': deleted})


@api_view(['GET'])
@permission_classes([AllowAny])
def service_catalog(request):
    return Response({'services': list(AVAILABLE_SERVICES)})


# ============================================================================
# CLIENT ENDPOINTS (access link)
# ============================================================================

@api_view(['GET'])
@permission_classes([AllowAny])
def client_contract(request, key):
    record = _get_by_key_or_404(key)
    services.log_event(
        record,
        'viewed',
        'Client opened the signing link',
        ip_address=_client_ip(request),
        user_agent=_user_agent(request),
    )
    return Response(ContractRecordSerializer(record).data)


@api_view(['POST'])
@permission_classes([AllowAny])
def client_sign(request, key):
    record = _get_by_key_or_404(key)
    payload = SignContractSerializer(data=request.data)
    payload.is_valid(raise_exception=True)

    ip = _client_ip(request)
    ua = _user_agent(request)
    try:
        record = services.sign_contract(
            record.id,
            signature_data_url=payload.validated_data['signature'],
            terms_accepted=payload.validated_data['termsAccepted'],
            ip_address=ip,
            user_agent=ua,
        )
    except services.SigningRejected as e:
        services.log_event(record, 'sign_rejected', str(e), ip_address=ip, user_agent=ua)
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

    return Response(ContractRecordSerializer(record).data)


@api_view(['GET'])
@permission_classes([AllowAny])
def client_pdf(request, key):
    """Signed contract with the audit log page."""
    record = _get_by_key_or_404(key)
    try:
        pdf = services.render_record_pdf(record, include_audit_log=True)
    except services.SignatureMissing as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

    services.log_event(
        record,
        'pdf_downloaded',
        'Client download',
        ip_address=_client_ip(request),
        user_agent=_user_agent(request),
    )
    return _pdf_response(pdf.pdf_bytes, pdf.filename)


@api_view(['POST'])
@permission_classes([AllowAny])
def client_email(request, key):
    record = _get_by_key_or_404(key)
    payload = EmailRequestSerializer(data=request.data)
    payload.is_valid(raise_exception=True)
    try:
        record = services.request_email_delivery(
            record,
            payload.validated_data['email'],
            ip_address=_client_ip(request),
            user_agent=_user_agent(request),
        )
    except services.DeliveryRejected as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

    return Response({
        'sentToEmail': record.sent_to_email,
        'emailStatus': record.email_status,
        'emailRequestedAt': record.email_requested_at,
    })
