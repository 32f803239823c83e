import contracts.models
import django.db.models.deletion
import uuid
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='ContractRecord',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('access_key', models.UUIDField(default=uuid.uuid4, editable=False, help_text='Token used in the client signing link', unique=True)),
                ('razao_social', models.CharField(help_text='Company legal name', max_length=255)),
                ('cnpj', models.CharField(blank=True, default='', max_length=32)),
                ('endereco_empresa', models.CharField(blank=True, default='', max_length=500)),
                ('cep_empresa', models.CharField(blank=True, default='', max_length=16)),
                ('cidade_empresa', models.CharField(blank=True, default='', max_length=120)),
                ('responsavel_nome', models.CharField(blank=True, default='', max_length=255)),
                ('responsavel_estado_civil', models.CharField(blank=True, default='', max_length=60)),
                ('responsavel_profissao', models.CharField(blank=True, default='', max_length=120)),
                ('responsavel_rg', models.CharField(blank=True, default='', max_length=40)),
                ('responsavel_cpf', models.CharField(blank=True, default='', max_length=20)),
                ('responsavel_endereco', models.CharField(blank=True, default='', max_length=500)),
                ('responsavel_cidade', models.CharField(blank=True, default='', max_length=120)),
                ('responsavel_estado', models.CharField(blank=True, default='', max_length=60)),
                ('email', models.EmailField(blank=True, default='', max_length=254)),
                ('data_inicio', models.CharField(blank=True, default='', max_length=40)),
                ('data_fim', models.CharField(blank=True, default='', max_length=40)),
                ('contract_duration', models.CharField(default='4', help_text='Duration in months', max_length=10)),
                ('quantidade_meses_pagamento', models.CharField(default='4', help_text='Number of monthly payments', max_length=10)),
                ('valor_total', models.CharField(blank=True, default='', max_length=40)),
                ('valor_total_extenso', models.CharField(blank=True, default='', help_text='Total amount written out', max_length=255)),
                ('valor_mensal', models.CharField(blank=True, default='', max_length=40)),
                ('valor_mensal_extenso', models.CharField(blank=True, default='', help_text='Monthly amount written out', max_length=255)),
                ('dia_pagamento', models.CharField(blank=True, default='', max_length=10)),
                ('cidade_assinatura', models.CharField(default='Campo Grande/MS', max_length=120)),
                ('data_assinatura', models.CharField(default=contracts.models.default_signature_date, help_text='Long pt-BR date printed above the signatures', max_length=60)),
                ('selected_services', models.JSONField(default=list, help_text='Service texts, may contain the [QTD] placeholder')),
                ('service_quantities', models.JSONField(default=dict, help_text='Service text -> quantity for [QTD] services')),
                ('status', models.CharField(choices=[('pending', 'Pending'), ('signed', 'Signed')], default='pending', max_length=20)),
                ('client_signature', models.TextField(blank=True, help_text='PNG data URL captured from the client', null=True)),
                ('signed_at', models.DateTimeField(blank=True, null=True)),
                ('ip_address', models.CharField(blank=True, max_length=64, null=True)),
                ('user_agent', models.TextField(blank=True, null=True)),
                ('terms_accepted', models.BooleanField(default=False)),
                ('sent_to_email', models.EmailField(blank=True, max_length=254, null=True)),
                ('email_status', models.CharField(blank=True, choices=[('sent_via_webhook', 'Sent via webhook'), ('sent_via_email', 'Sent via email'), ('pending_send', 'Pending send')], max_length=30, null=True)),
                ('email_requested_at', models.DateTimeField(blank=True, null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True, db_index=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'db_table': 'contract_records',
                'ordering': ['-created_at'],
                'indexes': [models.Index(fields=['status'], name='contract_re_status_3f9a1c_idx')],
            },
        ),
        migrations.CreateModel(
            name='ContractAuditEvent',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('event', models.CharField(choices=[('created', 'Created'), ('viewed', 'Viewed'), ('signed', 'Signed'), ('sign_rejected', 'Sign rejected'), ('pdf_downloaded', 'PDF downloaded'), ('email_requested', 'Email requested')], max_length=30)),
                ('message', models.TextField(blank=True, default='')),
                ('ip_address', models.CharField(blank=True, max_length=64, null=True)),
                ('user_agent', models.TextField(blank=True, null=True)),
                ('extra', models.JSONField(blank=True, default=dict)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('record', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='audit_events', to='contracts.contractrecord')),
            ],
            options={
                'db_table': 'contract_audit_events',
                'ordering': ['created_at'],
                'indexes': [models.Index(fields=['record', 'event'], name='contract_au_record__8b2e4d_idx')],
            },
        ),
    ]
