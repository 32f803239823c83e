import os
import uuid
from datetime import timedelta
from unittest import mock

import requests
from django.contrib.auth import get_user_model
from django.core.cache import cache
from django.test import TestCase, override_settings
from django.utils import timezone
from rest_framework.test import APIClient

from contracts import services
from contracts.models import ContractAuditEvent, ContractRecord

from .utils import QTD_SERVICE, REELS_SERVICE, contract_payload, signature_data_url

NO_ASSETS = dict(CONTRACT_LOGO_SOURCE=None, CONTRACTOR_SIGNATURE_SOURCE=None, CONTRACT_WEBHOOK_URL=None)


def _create_record(**overrides):
    values = {
        'razao_social': 'Loja Exemplo Ltda',
        'cnpj': '12.345.678/0001-90',
        'responsavel_nome': 'Maria Souza',
        'responsavel_cpf': '123.456.789-00',
        'valor_total': '4.000,00',
        'selected_services': [QTD_SERVICE, REELS_SERVICE],
        'service_quantities': {QTD_SERVICE: '4'},
    }
    values.update(overrides)
    return ContractRecord.objects.create(**values)


def _body(response):
    return b''.join(response.streaming_content)


@override_settings(FRONTEND_BASE_URL='https://app.zafira.test', **NO_ASSETS)
class StaffContractApiTests(TestCase):
    def setUp(self):
        cache.clear()
        self.client = APIClient()
        self.staff = get_user_model().objects.create_user(username='staff', password='pass1234', is_staff=True)
        self.client.force_authenticate(user=self.staff)

    def test_create_contract(self):
        res = self.client.post('/api/v1/contracts/', contract_payload(), format='json')
        self.assertEqual(res.status_code, 201)
        payload = res.json()
        record = ContractRecord.objects.get(id=payload['id'])
        self.assertEqual(record.status, ContractRecord.STATUS_PENDING)
        self.assertEqual(record.razao_social, 'Loja Exemplo Ltda')
        self.assertEqual(record.service_quantities, {QTD_SERVICE: '4'})
        self.assertEqual(payload['link'], f"https://app.zafira.test/c/{record.access_key}")
        self.assertTrue(ContractAuditEvent.objects.filter(record=record, event='created').exists())

    def test_create_prunes_quantities_and_applies_defaults(self):
        res = self.client.post(
            '/api/v1/contracts/',
            contract_payload(
                selectedServices=[REELS_SERVICE],
                serviceQuantities={QTD_SERVICE: '4', REELS_SERVICE: '2'},
                contractDuration='',
                cidadeAssinatura='',
            ),
            format='json',
        )
        self.assertEqual(res.status_code, 201)
        record = ContractRecord.objects.get(id=res.json()['id'])
        self.assertEqual(record.service_quantities, {})
        self.assertEqual(record.contract_duration, '4')
        self.assertEqual(record.cidade_assinatura, 'Campo Grande/MS')
        self.assertTrue(record.data_assinatura)

    def test_create_requires_company_name(self):
        payload = contract_payload()
        payload.pop('razaoSocial')
        res = self.client.post('/api/v1/contracts/', payload, format='json')
        self.assertEqual(res.status_code, 400)
        self.assertEqual(ContractRecord.objects.count(), 0)

    def test_recent_newest_first(self):
        now = timezone.now()
        records = [_create_record(razao_social=f'Empresa {i}') for i in range(3)]
        for i, record in enumerate(records):
            ContractRecord.objects.filter(pk=record.pk).update(created_at=now - timedelta(minutes=10 - i))

        res = self.client.get('/api/v1/contracts/recent/')
        self.assertEqual(res.status_code, 200)
        self.assertEqual(
            [r['razaoSocial'] for r in res.json()['results']],
            ['Empresa 2', 'Empresa 1', 'Empresa 0'],
        )

        res = self.client.get('/api/v1/contracts/recent/', {'limit': 2})
        self.assertEqual(res.json()['count'], 2)

        res = self.client.get('/api/v1/contracts/recent/', {'limit': 'abc'})
        self.assertEqual(res.status_code, 400)

    def test_detail_includes_audit_trail(self):
        record = _create_record()
        services.log_event(record, 'viewed', 'opened')
        res = self.client.get(f'/api/v1/contracts/{record.id}/')
        self.assertEqual(res.status_code, 200)
        self.assertEqual([e['event'] for e in res.json()['auditEvents']], ['viewed'])
        self.assertTrue(res.json()['link'].endswith(str(record.access_key)))

    def test_pdf_download(self):
        record = _create_record()
        res = self.client.get(f'/api/v1/contracts/{record.id}/pdf/')
        self.assertEqual(res.status_code, 200)
        self.assertEqual(res['Content-Type'], 'application/pdf')
        self.assertIn('Contrato_Zafira_Loja_Exemplo_Ltda.pdf', res['Content-Disposition'])
        self.assertTrue(_body(res).startswith(b'%PDF'))

    def test_pdf_with_audit_requires_signature(self):
        record = _create_record()
        res = self.client.get(f'/api/v1/contracts/{record.id}/pdf/', {'audit': '1'})
        self.assertEqual(res.status_code, 400)
        self.assertEqual(res.json()['error'], services.SIGNATURE_NOT_FOUND)

    def test_preview_pdf(self):
        res = self.client.post('/api/v1/contracts/preview-pdf/', contract_payload(), format='json')
        self.assertEqual(res.status_code, 200)
        self.assertTrue(_body(res).startswith(b'%PDF'))
        self.assertEqual(ContractRecord.objects.count(), 0)

    def test_reset_requires_confirmation(self):
        _create_record()
        _create_record()
        res = self.client.post('/api/v1/contracts/reset/', {}, format='json')
        self.assertEqual(res.status_code, 400)
        self.assertEqual(ContractRecord.objects.count(), 2)

        res = self.client.post('/api/v1/contracts/reset/', {'confirm': True}, format='json')
        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.json(), {'deleted': 2})
        self.assertEqual(ContractRecord.objects.count(), 0)

    def test_staff_only(self):
        other = APIClient()
        user = get_user_model().objects.create_user(username='client', password='pass1234')
        other.force_authenticate(user=user)
        self.assertEqual(other.get('/api/v1/contracts/recent/').status_code, 403)
        self.assertIn(APIClient().get('/api/v1/contracts/recent/').status_code, (401, 403))

    def test_service_catalog_is_public(self):
        res = APIClient().get('/api/v1/services/')
        self.assertEqual(res.status_code, 200)
        self.assertIn(QTD_SERVICE, res.json()['services'])


@override_settings(**NO_ASSETS)
class ClientSigningApiTests(TestCase):
    def setUp(self):
        cache.clear()
        self.client = APIClient()
        self.record = _create_record(email='maria@example.com')
        self.base = f'/api/v1/c/{self.record.access_key}/'

    def _assert_untouched(self):
        self.record.refresh_from_db()
        self.assertEqual(self.record.status, ContractRecord.STATUS_PENDING)
        self.assertIsNone(self.record.client_signature)
        self.assertIsNone(self.record.signed_at)
        self.assertFalse(self.record.terms_accepted)

    def test_open_by_access_key_or_id(self):
        res = self.client.get(self.base)
        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.json()['razaoSocial'], 'Loja Exemplo Ltda')
        self.assertTrue(ContractAuditEvent.objects.filter(record=self.record, event='viewed').exists())

        self.assertEqual(self.client.get(f'/api/v1/c/{self.record.id}/').status_code, 200)

    def test_unknown_key(self):
        self.assertEqual(self.client.get(f'/api/v1/c/{uuid.uuid4()}/').status_code, 404)
        self.assertEqual(self.client.get('/api/v1/c/not-a-key/').status_code, 404)

    def test_sign_without_terms_is_rejected(self):
        res = self.client.post(
            self.base + 'sign/',
            {'signature': signature_data_url(), 'termsAccepted': False},
            format='json',
        )
        self.assertEqual(res.status_code, 400)
        self.assertEqual(res.json()['error'], services.TERMS_NOT_ACCEPTED)
        self._assert_untouched()
        self.assertTrue(ContractAuditEvent.objects.filter(record=self.record, event='sign_rejected').exists())

    def test_sign_without_signature_is_rejected(self):
        for signature in ('', signature_data_url(visible=False)):
            res = self.client.post(
                self.base + 'sign/',
                {'signature': signature, 'termsAccepted': True},
                format='json',
            )
            self.assertEqual(res.status_code, 400)
            self.assertEqual(res.json()['error'], services.SIGNATURE_EMPTY)
        self._assert_untouched()

    def test_sign_with_garbage_signature(self):
        res = self.client.post(
            self.base + 'sign/',
            {'signature': 'data:image/png;base64,bm90IGFuIGltYWdl', 'termsAccepted': True},
            format='json',
        )
        self.assertEqual(res.status_code, 400)
        self._assert_untouched()

    def test_sign(self):
        res = self.client.post(
            self.base + 'sign/',
            {'signature': signature_data_url(), 'termsAccepted': True},
            format='json',
            HTTP_X_FORWARDED_FOR='203.0.113.9, 10.0.0.1',
            HTTP_USER_AGENT='Mozilla/5.0 (X11; Linux x86_64)',
        )
        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.json()['status'], 'signed')

        self.record.refresh_from_db()
        self.assertTrue(self.record.is_signed)
        self.assertTrue(self.record.client_signature.startswith('data:image/png;base64,'))
        self.assertIsNotNone(self.record.signed_at)
        self.assertEqual(self.record.ip_address, '203.0.113.9')
        self.assertEqual(self.record.user_agent, 'Mozilla/5.0 (X11; Linux x86_64)')
        self.assertTrue(self.record.terms_accepted)

    def test_sign_twice(self):
        payload = {'signature': signature_data_url(), 'termsAccepted': True}
        self.assertEqual(self.client.post(self.base + 'sign/', payload, format='json').status_code, 200)
        self.record.refresh_from_db()
        first_signed_at = self.record.signed_at

        res = self.client.post(self.base + 'sign/', payload, format='json')
        self.assertEqual(res.status_code, 400)
        self.assertEqual(res.json()['error'], services.ALREADY_SIGNED)
        self.record.refresh_from_db()
        self.assertEqual(self.record.signed_at, first_signed_at)

    def test_pdf_requires_signature(self):
        res = self.client.get(self.base + 'pdf/')
        self.assertEqual(res.status_code, 400)
        self.assertEqual(res.json()['error'], services.SIGNATURE_NOT_FOUND)

    def test_signed_pdf(self):
        self.client.post(self.base + 'sign/', {'signature': signature_data_url(), 'termsAccepted': True}, format='json')
        res = self.client.get(self.base + 'pdf/')
        self.assertEqual(res.status_code, 200)
        self.assertTrue(_body(res).startswith(b'%PDF'))
        self.assertTrue(ContractAuditEvent.objects.filter(record=self.record, event='pdf_downloaded').exists())


@override_settings(**NO_ASSETS)
class EmailDeliveryApiTests(TestCase):
    def setUp(self):
        cache.clear()
        self.client = APIClient()
        self.record = _create_record()
        services.sign_contract(
            self.record.id,
            signature_data_url=signature_data_url(),
            terms_accepted=True,
            ip_address='203.0.113.9',
        )
        self.url = f'/api/v1/c/{self.record.access_key}/email/'

    def test_invalid_email(self):
        for email in ('', 'maria', 'maria@example'):
            res = self.client.post(self.url, {'email': email}, format='json')
            self.assertEqual(res.status_code, 400)
            self.assertEqual(res.json()['error'], services.INVALID_EMAIL)
        self.record.refresh_from_db()
        self.assertIsNone(self.record.email_status)

    def test_unsigned_contract(self):
        pending = _create_record()
        res = self.client.post(f'/api/v1/c/{pending.access_key}/email/', {'email': 'a@b.com'}, format='json')
        self.assertEqual(res.status_code, 400)
        self.assertEqual(res.json()['error'], services.NOT_SIGNED)

    @override_settings(CONTRACT_WEBHOOK_URL='https://hooks.example.com/contracts')
    def test_webhook_delivery(self):
        with mock.patch('notifications.webhook_service.requests.post') as post:
            res = self.client.post(self.url, {'email': 'maria@example.com'}, format='json')

        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.json()['emailStatus'], ContractRecord.EMAIL_SENT_VIA_WEBHOOK)
        self.assertEqual(res.json()['sentToEmail'], 'maria@example.com')

        args, kwargs = post.call_args
        self.assertEqual(args[0], 'https://hooks.example.com/contracts')
        self.assertEqual(kwargs['data']['email'], 'maria@example.com')
        self.assertEqual(kwargs['data']['contract_id'], str(self.record.id))
        filename, pdf_bytes, content_type = kwargs['files']['file']
        self.assertEqual(filename, 'Contrato_Loja Exemplo Ltda.pdf')
        self.assertTrue(pdf_bytes.startswith(b'%PDF'))
        self.assertEqual(content_type, 'application/pdf')

    @override_settings(CONTRACT_WEBHOOK_URL='https://hooks.example.com/contracts')
    def test_webhook_failure_is_pending(self):
        with mock.patch('notifications.webhook_service.requests.post', side_effect=requests.ConnectionError('down')):
            with mock.patch.dict(os.environ, {'EMAIL_HOST_PASSWORD': ''}):
                res = self.client.post(self.url, {'email': 'maria@example.com'}, format='json')
        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.json()['emailStatus'], ContractRecord.EMAIL_PENDING_SEND)

    def test_smtp_delivery(self):
        with mock.patch.dict(os.environ, {'EMAIL_HOST_PASSWORD': 'secret', 'EMAIL_HOST_USER': 'contratos@zafira.test'}):
            with mock.patch('notifications.email_service.smtplib.SMTP') as smtp:
                res = self.client.post(self.url, {'email': 'maria@example.com'}, format='json')

        self.assertEqual(res.json()['emailStatus'], ContractRecord.EMAIL_SENT_VIA_EMAIL)
        server = smtp.return_value.__enter__.return_value
        server.login.assert_called_once_with('contratos@zafira.test', 'secret')
        server.send_message.assert_called_once()

    def test_no_transport_keeps_request_pending(self):
        with mock.patch.dict(os.environ, {'EMAIL_HOST_PASSWORD': ''}):
            res = self.client.post(self.url, {'email': 'maria@example.com'}, format='json')
        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.json()['emailStatus'], ContractRecord.EMAIL_PENDING_SEND)

        self.record.refresh_from_db()
        self.assertEqual(self.record.sent_to_email, 'maria@example.com')
        self.assertIsNotNone(self.record.email_requested_at)
        event = ContractAuditEvent.objects.get(record=self.record, event='email_requested')
        self.assertEqual(event.extra, {'email_status': ContractRecord.EMAIL_PENDING_SEND})
