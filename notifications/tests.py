"""
Tests for contract delivery transports
"""
import os
from unittest import mock

import requests
from django.test import SimpleTestCase, override_settings

from notifications.email_service import EmailService
from notifications.webhook_service import WebhookService


class WebhookServiceTests(SimpleTestCase):
    def _send(self, service):
        return service.send_contract(
            email='maria@example.com',
            contract_id='abc',
            client_name='Loja',
            filename='Contrato_Loja.pdf',
            pdf_bytes=b'%PDF-1.4',
        )

    @override_settings(CONTRACT_WEBHOOK_URL=None)
    def test_not_configured(self):
        service = WebhookService()
        self.assertFalse(service.configured)
        with mock.patch('notifications.webhook_service.requests.post') as post:
            self.assertFalse(self._send(service))
        post.assert_not_called()

    @override_settings(CONTRACT_WEBHOOK_URL='https://hooks.example.com/in', CONTRACT_WEBHOOK_TIMEOUT=7)
    def test_multipart_upload(self):
        with mock.patch('notifications.webhook_service.requests.post') as post:
            self.assertTrue(self._send(WebhookService()))
        post.assert_called_once_with(
            'https://hooks.example.com/in',
            data={'email': 'maria@example.com', 'contract_id': 'abc', 'client_name': 'Loja'},
            files={'file': ('Contrato_Loja.pdf', b'%PDF-1.4', 'application/pdf')},
            timeout=7,
        )
        post.return_value.raise_for_status.assert_called_once()

    def test_http_error(self):
        response = mock.MagicMock()
        response.raise_for_status.side_effect = requests.HTTPError('502')
        with mock.patch('notifications.webhook_service.requests.post', return_value=response):
            with self.assertLogs('notifications.webhook_service', level='ERROR'):
                self.assertFalse(self._send(WebhookService(url='https://hooks.example.com/in')))


class EmailServiceTests(SimpleTestCase):
    env = {
        'EMAIL_HOST': 'smtp.zafira.test',
        'EMAIL_PORT': '2525',
        'EMAIL_HOST_USER': 'contratos@zafira.test',
        'EMAIL_HOST_PASSWORD': 'secret',
    }

    def _send(self, service):
        return service.send_signed_contract_email(
            recipient_email='maria@example.com',
            recipient_name='Maria Souza',
            company_name='Loja Exemplo Ltda',
            signed_at_iso='2026-01-05T15:30:00+00:00',
            attachments=[{'filename': 'Contrato.pdf', 'content': b'%PDF-1.4', 'content_type': 'application/pdf'}],
        )

    def test_configured_only_with_password(self):
        with mock.patch.dict(os.environ, {'EMAIL_HOST_PASSWORD': ''}):
            self.assertFalse(EmailService().configured)
        with mock.patch.dict(os.environ, self.env):
            self.assertTrue(EmailService().configured)

    def test_sends_pdf_attachment(self):
        with mock.patch.dict(os.environ, self.env):
            with mock.patch('notifications.email_service.smtplib.SMTP') as smtp:
                self.assertTrue(self._send(EmailService()))

        smtp.assert_called_once_with('smtp.zafira.test', 2525)
        server = smtp.return_value.__enter__.return_value
        server.starttls.assert_called_once()
        msg = server.send_message.call_args[0][0]
        self.assertEqual(msg['To'], 'maria@example.com')
        self.assertEqual(msg['Subject'], 'Contrato assinado - Loja Exemplo Ltda')
        filenames = [part.get_filename() for part in msg.walk() if part.get_filename()]
        self.assertEqual(filenames, ['Contrato.pdf'])

    def test_smtp_failure(self):
        with mock.patch.dict(os.environ, self.env):
            with mock.patch('notifications.email_service.smtplib.SMTP', side_effect=OSError('refused')):
                with self.assertLogs('notifications.email_service', level='ERROR'):
                    self.assertFalse(self._send(EmailService()))
