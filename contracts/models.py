"""
Service contract records and their signing audit trail
"""
from django.db import models
from django.utils import timezone
import uuid

from .contract_data import ContractData

MONTHS_PT_BR = (
    'janeiro', 'fevereiro', 'março', 'abril', 'maio', 'junho',
    'julho', 'agosto', 'setembro', 'outubro', 'novembro', 'dezembro',
)


def long_date_pt_br(value) -> str:
    """17 de outubro de 2026"""
    return f"{value.day} de {MONTHS_PT_BR[value.month - 1]} de {value.year}"


def default_signature_date() -> str:
    return long_date_pt_br(timezone.localdate())


class ContractRecord(models.Model):
    """
    A service contract between Zafira and a client company.

    Created pending by staff, signed once by the client through its access link.
    """
    STATUS_PENDING = 'pending'
    STATUS_SIGNED = 'signed'
    STATUS_CHOICES = [
        (STATUS_PENDING, 'Pending'),
        (STATUS_SIGNED, 'Signed'),
    ]

    EMAIL_SENT_VIA_WEBHOOK = 'sent_via_webhook'
    EMAIL_SENT_VIA_EMAIL = 'sent_via_email'
    EMAIL_PENDING_SEND = 'pending_send'
    EMAIL_STATUS_CHOICES = [
        (EMAIL_SENT_VIA_WEBHOOK, 'Sent via webhook'),
        (EMAIL_SENT_VIA_EMAIL, 'Sent via email'),
        (EMAIL_PENDING_SEND, 'Pending send'),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    access_key = models.UUIDField(default=uuid.uuid4, unique=True, editable=False, help_text='Token used in the client signing link')

    # Contracting company
    razao_social = models.CharField(max_length=255, help_text='Company legal name')
    cnpj = models.CharField(max_length=32, blank=True, default='')
    endereco_empresa = models.CharField(max_length=500, blank=True, default='')
    cep_empresa = models.CharField(max_length=16, blank=True, default='')
    cidade_empresa = models.CharField(max_length=120, blank=True, default='')

    # Legal representative
    responsavel_nome = models.CharField(max_length=255, blank=True, default='')
    responsavel_estado_civil = models.CharField(max_length=60, blank=True, default='')
    responsavel_profissao = models.CharField(max_length=120, blank=True, default='')
    responsavel_rg = models.CharField(max_length=40, blank=True, default='')
    responsavel_cpf = models.CharField(max_length=20, blank=True, default='')
    responsavel_endereco = models.CharField(max_length=500, blank=True, default='')
    responsavel_cidade = models.CharField(max_length=120, blank=True, default='')
    responsavel_estado = models.CharField(max_length=60, blank=True, default='')
    email = models.EmailField(blank=True, default='')

    # Terms (display strings, never parsed as numbers)
    data_inicio = models.CharField(max_length=40, blank=True, default='')
    data_fim = models.CharField(max_length=40, blank=True, default='')
    contract_duration = models.CharField(max_length=10, default='4', help_text='Duration in months')
    quantidade_meses_pagamento = models.CharField(max_length=10, default='4', help_text='Number of monthly payments')
    valor_total = models.CharField(max_length=40, blank=True, default='')
    valor_total_extenso = models.CharField(max_length=255, blank=True, default='', help_text='Total amount written out')
    valor_mensal = models.CharField(max_length=40, blank=True, default='')
    valor_mensal_extenso = models.CharField(max_length=255, blank=True, default='', help_text='Monthly amount written out')
    dia_pagamento = models.CharField(max_length=10, blank=True, default='')
    cidade_assinatura = models.CharField(max_length=120, default='Campo Grande/MS')
    data_assinatura = models.CharField(max_length=60, default=default_signature_date, help_text='Long pt-BR date printed above the signatures')

    selected_services = models.JSONField(default=list, help_text='Service texts, may contain the [QTD] placeholder')
    service_quantities = models.JSONField(default=dict, help_text='Service text -> quantity for [QTD] services')

    # Signing
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=STATUS_PENDING)
    client_signature = models.TextField(blank=True, null=True, help_text='PNG data URL captured from the client')
    signed_at = models.DateTimeField(null=True, blank=True)
    ip_address = models.CharField(max_length=64, blank=True, null=True)
    user_agent = models.TextField(blank=True, null=True)
    terms_accepted = models.BooleanField(default=False)

    # Delivery
    sent_to_email = models.EmailField(blank=True, null=True)
    email_status = models.CharField(max_length=30, choices=EMAIL_STATUS_CHOICES, blank=True, null=True)
    email_requested_at = models.DateTimeField(null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True, db_index=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'contract_records'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['status'], name='contract_re_status_3f9a1c_idx'),
        ]

    def __str__(self):
        return f"{self.razao_social} ({self.status})"

    @property
    def is_signed(self) -> bool:
        return self.status == self.STATUS_SIGNED

    def to_contract_data(self) -> ContractData:
        return ContractData.from_values({
            'id': self.id,
            'razao_social': self.razao_social,
            'cnpj': self.cnpj,
            'endereco_empresa': self.endereco_empresa,
            'cep_empresa': self.cep_empresa,
            'cidade_empresa': self.cidade_empresa,
            'responsavel_nome': self.responsavel_nome,
            'responsavel_estado_civil': self.responsavel_estado_civil,
            'responsavel_profissao': self.responsavel_profissao,
            'responsavel_rg': self.responsavel_rg,
            'responsavel_cpf': self.responsavel_cpf,
            'responsavel_endereco': self.responsavel_endereco,
            'responsavel_cidade': self.responsavel_cidade,
            'responsavel_estado': self.responsavel_estado,
            'email': self.email,
            'data_inicio': self.data_inicio,
            'data_fim': self.data_fim,
            'contract_duration': self.contract_duration,
            'quantidade_meses_pagamento': self.quantidade_meses_pagamento,
            'valor_total': self.valor_total,
            'valor_total_extenso': self.valor_total_extenso,
            'valor_mensal': self.valor_mensal,
            'valor_mensal_extenso': self.valor_mensal_extenso,
            'dia_pagamento': self.dia_pagamento,
            'cidade_assinatura': self.cidade_assinatura,
            'data_assinatura': self.data_assinatura,
            'selected_services': self.selected_services or [],
            'service_quantities': self.service_quantities or {},
            'ip_address': self.ip_address,
            'user_agent': self.user_agent,
            'signed_at': self.signed_at,
        })


class ContractAuditEvent(models.Model):
    """Append-only trail of what happened to a contract record."""
    EVENT_CHOICES = [
        ('created', 'Created'),
        ('viewed', 'Viewed'),
        ('signed', 'Signed'),
        ('sign_rejected', 'Sign rejected'),
        ('pdf_downloaded', 'PDF downloaded'),
        ('email_requested', 'Email requested'),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    record = models.ForeignKey(ContractRecord, on_delete=models.CASCADE, related_name='audit_events')
    event = models.CharField(max_length=30, choices=EVENT_CHOICES)
    message = models.TextField(blank=True, default='')
    ip_address = models.CharField(max_length=64, blank=True, null=True)
    user_agent = models.TextField(blank=True, null=True)
    extra = models.JSONField(default=dict, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'contract_audit_events'
        ordering = ['created_at']
        indexes = [
            models.Index(fields=['record', 'event'], name='contract_au_record__8b2e4d_idx'),
        ]

    def __str__(self):
        return f"{self.event} @ {self.created_at}"
