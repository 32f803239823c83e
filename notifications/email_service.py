"""
Email Notification Service

Sends signed service contracts to clients over SMTP, with the rendered PDF
attached.
"""

import os
import smtplib
import logging
import mimetypes
from email.mime.text import MIMEText
from email.mime.multipart import MIMEMultipart
from email.mime.application import MIMEApplication
from typing import Dict, List, Optional
from datetime import datetime

logger = logging.getLogger(__name__)


class EmailService:
    """
    Service for sending contract emails
    """

    def __init__(self):
        """Initialize email service with SMTP configuration"""
        self.smtp_host = os.getenv('EMAIL_HOST', 'smtp.gmail.com')
        self.smtp_port = int(os.getenv('EMAIL_PORT', 587))
        self.sender_email = (
            (os.getenv('EMAIL_HOST_USER') or '').strip()
            or (os.getenv('DEFAULT_FROM_EMAIL') or '').strip()
            or 'noreply@zafira.com.br'
        )
        self.sender_password = (os.getenv('EMAIL_HOST_PASSWORD') or '').strip()

    @property
    def configured(self) -> bool:
        return bool(self.sender_password)

    def send_signed_contract_email(
        self,
        *,
        recipient_email: str,
        recipient_name: str,
        company_name: str,
        signed_at_iso: Optional[str],
        attachments: List[Dict],
    ) -> bool:
        """Send the signed contract (with audit log page) to the client."""
        try:
            subject = f"Contrato assinado - {company_name}"
            html_body = self._get_signed_contract_template(
                recipient_name=recipient_name,
                company_name=company_name,
                signed_at_iso=signed_at_iso,
            )
            return self._send_email(
                recipient_email=recipient_email,
                subject=subject,
                html_body=html_body,
                notification_type='contract_signed',
                attachments=attachments,
            )
        except Exception as e:
            logger.error(f"Failed to send signed contract email: {str(e)}")
            return False

    def _send_email(
        self,
        recipient_email: str,
        subject: str,
        html_body: str,
        notification_type: str = 'general',
        attachments: Optional[List[Dict]] = None,
    ) -> bool:
        """
        Internal method to send email via SMTP

        Args:
            recipient_email: Recipient's email address
            subject: Email subject
            html_body: HTML email body
            notification_type: Type of notification
            attachments: dicts with filename, content and content_type

        Returns:
            True if sent successfully
        """
        try:
            attachments = attachments or []

            # mixed: attachments, alternative: html/plain body
            msg = MIMEMultipart('mixed')
            msg['Subject'] = subject
            msg['From'] = self.sender_email
            msg['To'] = recipient_email
            msg['X-Notification-Type'] = notification_type
            msg['X-Timestamp'] = datetime.now().isoformat()

            alt = MIMEMultipart('alternative')
            alt.attach(MIMEText("Seu contrato assinado segue em anexo.", 'plain'))
            alt.attach(MIMEText(html_body, 'html'))
            msg.attach(alt)

            for att in attachments:
                filename = str(att.get('filename') or '').strip() or 'contrato.pdf'
                content = att.get('content')
                if content is None:
                    continue

                content_type = str(att.get('content_type') or '').strip()
                if not content_type:
                    guessed, _ = mimetypes.guess_type(filename)
                    content_type = guessed or 'application/octet-stream'

                maintype, _, subtype = content_type.partition('/')
                if maintype != 'application':
                    subtype = 'octet-stream'
                mime_part = MIMEApplication(bytes(content), _subtype=subtype or 'octet-stream')
                mime_part.add_header('Content-Disposition', 'attachment', filename=filename)
                msg.attach(mime_part)

            with smtplib.SMTP(self.smtp_host, self.smtp_port) as server:
                server.starttls()
                if self.sender_password:
                    server.login(self.sender_email, self.sender_password)
                server.send_message(msg)

            logger.info(f"Email sent successfully to {recipient_email}")
            return True
        except (smtplib.SMTPException, OSError) as e:
            logger.error(f"Failed to send email: {str(e)}")
            return False

    def _get_signed_contract_template(
        self,
        *,
        recipient_name: str,
        company_name: str,
        signed_at_iso: Optional[str],
    ) -> str:
        signed_line = (
            f"<p style=\"margin: 6px 0; color: #555;\"><strong>Assinado em:</strong> {signed_at_iso}</p>"
            if signed_at_iso
            else ""
        )

        return f"""
        <!DOCTYPE html>
        <html>
        <head>
            <meta charset=\"UTF-8\">
            <style>
                body {{ font-family: 'Segoe UI', Tahoma, Geneva, Verdana, sans-serif; line-height: 1.6; color: #111; }}
                .container {{ max-width: 640px; margin: 0 auto; background-color: #f5f5f5; padding: 22px; border-radius: 10px; }}
                .header {{ background: #472d76; color: white; padding: 20px; border-radius: 10px 10px 0 0; }}
                .header h1 {{ margin: 0; font-size: 20px; }}
                .content {{ background-color: white; padding: 26px; border-radius: 0 0 10px 10px; }}
                .card {{ background: #f6f3fb; border: 1px solid #d9cdee; border-radius: 10px; padding: 14px 16px; margin: 14px 0; }}
                .muted {{ color: #6b7280; font-size: 12px; }}
            </style>
        </head>
        <body>
            <div class=\"container\">
                <div class=\"header\">
                    <h1>Contrato assinado</h1>
                </div>
                <div class=\"content\">
                    <p>Olá <strong>{recipient_name}</strong>,</p>
                    <p>O contrato de prestação de serviços com a Zafira Comunicação foi assinado eletronicamente.</p>
                    <div class=\"card\">
                        <p style=\"margin: 6px 0;\"><strong>Empresa:</strong> {company_name}</p>
                        {signed_line}
                    </div>
                    <p>Em anexo: contrato assinado com o log de auditoria.</p>
                    <p class=\"muted\">Esta é uma mensagem automática. Por favor, não responda.</p>
                </div>
            </div>
        </body>
        </html>
        """
