"""
Webhook delivery of signed contracts.

The configured endpoint (an automation workflow) receives a multipart upload
with the PDF and forwards it to the client.
"""

import logging
from typing import Optional

import requests
from django.conf import settings

logger = logging.getLogger(__name__)


class WebhookService:
    """Upload signed contract PDFs to the delivery webhook"""

    def __init__(self, url: Optional[str] = None, timeout: Optional[float] = None):
        self.url = (url or getattr(settings, 'CONTRACT_WEBHOOK_URL', None) or '').strip()
        self.timeout = timeout or getattr(settings, 'CONTRACT_WEBHOOK_TIMEOUT', 30)

    @property
    def configured(self) -> bool:
        return bool(self.url)

    def send_contract(
        self,
        *,
        email: str,
        contract_id: str,
        client_name: str,
        filename: str,
        pdf_bytes: bytes,
    ) -> bool:
        """Post the PDF as multipart form data; False when the upload fails."""
        if not self.configured:
            return False
        try:
            response = requests.post(
                self.url,
                data={
                    'email': email,
                    'contract_id': contract_id,
                    'client_name': client_name,
                },
                files={'file': (filename, pdf_bytes, 'application/pdf')},
                timeout=self.timeout,
            )
            response.raise_for_status()
        except requests.RequestException as e:
            logger.error(f"Failed to deliver contract {contract_id} via webhook: {str(e)}")
            return False

        logger.info(f"Contract {contract_id} sent to webhook for {email}")
        return True
