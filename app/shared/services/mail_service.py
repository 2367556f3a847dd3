import smtplib
import logging
from email.message import EmailMessage
from typing import Optional

from app.config.settings import settings

logger = logging.getLogger(__name__)


class MailService:
    """Envío de correos HTML por SMTP directo"""

    def __init__(self, config=settings):
        self.config = config

    @property
    def enabled(self) -> bool:
        return self.config.mail_enabled

    def build_message(
        self,
        to_email: str,
        subject: str,
        text_body: str,
        html_body: str,
        from_email: Optional[str] = None
    ) -> EmailMessage:
        """Mensaje multipart: texto plano como respaldo y HTML como alternativa principal"""
        msg = EmailMessage()
        msg['Subject'] = subject
        msg['From'] = self.config.mail_from or from_email or self.config.smtp_username
        msg['To'] = to_email
        if from_email and self.config.mail_from and from_email != self.config.mail_from:
            msg['Reply-To'] = from_email

        msg.set_content(text_body)
        msg.add_alternative(html_body, subtype='html')
        return msg

    def send_html(
        self,
        to_email: str,
        subject: str,
        text_body: str,
        html_body: str,
        from_email: Optional[str] = None
    ) -> bool:
        """
        Enviar correo HTML.

        Returns:
            True si se entregó al servidor SMTP, False si el correo está
            deshabilitado (sin SMTP_HOST configurado).

        Raises:
            smtplib.SMTPException / OSError si el servidor rechaza o no responde
        """
        if not self.enabled:
            logger.warning(f"[MAIL DISABLED] Correo '{subject}' para {to_email} omitido")
            return False

        msg = self.build_message(to_email, subject, text_body, html_body, from_email)

        logger.info(f"[EMAIL] Enviando '{subject}' a {to_email} via {self.config.smtp_host}:{self.config.smtp_port}")
        with smtplib.SMTP(self.config.smtp_host, self.config.smtp_port, timeout=self.config.smtp_timeout) as smtp:
            if self.config.smtp_use_tls:
                smtp.starttls()
            if self.config.smtp_username and self.config.smtp_password:
                smtp.login(self.config.smtp_username, self.config.smtp_password)
            smtp.send_message(msg)

        logger.info(f"[EMAIL] Correo enviado a {to_email}")
        return True


mail_service = MailService()
