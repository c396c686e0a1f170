"""
Outbound email notifications for lifecycle transitions.

Services call Notifier.notify() only after their database commit. notify() never raises:
transport failures are logged and reported as False so the state change that triggered
the message always stands.
"""

import asyncio
import html
import logging
import smtplib
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from typing import Optional

from app.core.config import Settings, settings

logger = logging.getLogger(__name__)


class Notifier:
    """Outbound port consumed by the lifecycle services."""

    async def notify(self, to_address: str, subject: str, body: str) -> bool:
        raise NotImplementedError


class EmailNotifier(Notifier):
    """SMTP delivery; the blocking smtplib call runs in the default executor."""

    def __init__(self, config: Optional[Settings] = None) -> None:
        self.config = config or settings

    def _build_message(self, to_address: str, subject: str, body: str) -> MIMEMultipart:
        msg = MIMEMultipart("alternative")
        msg["Subject"] = subject
        msg["From"] = self.config.smtp_from
        msg["To"] = to_address
        msg.attach(MIMEText(body, "plain"))
        html_body = (
            '<div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">'
            f'<h2 style="color: #333;">{html.escape(subject)}</h2>'
            '<div style="background-color: #f5f5f5; padding: 20px; border-radius: 5px;">'
            f'<p style="color: #666; line-height: 1.6; white-space: pre-line;">{html.escape(body)}</p>'
            "</div>"
            '<div style="margin-top: 20px; color: #999; font-size: 12px;">'
            "<p>This is an automated message, please do not reply directly.</p>"
            "</div></div>"
        )
        msg.attach(MIMEText(html_body, "html"))
        return msg

    def _send(self, to_address: str, subject: str, body: str) -> None:
        msg = self._build_message(to_address, subject, body)
        with smtplib.SMTP(self.config.smtp_host, self.config.smtp_port, timeout=10) as server:
            if self.config.smtp_use_tls:
                server.starttls()
            if self.config.smtp_username and self.config.smtp_password:
                server.login(self.config.smtp_username, self.config.smtp_password)
            server.send_message(msg, to_addrs=[to_address])

    async def notify(self, to_address: str, subject: str, body: str) -> bool:
        if not to_address:
            return False
        if not self.config.smtp_host:
            logger.info("SMTP not configured; skipping email %r to %s", subject, to_address)
            return False
        loop = asyncio.get_running_loop()
        try:
            await loop.run_in_executor(None, self._send, to_address, subject, body)
        except Exception:
            logger.exception("Failed to send email %r to %s", subject, to_address)
            return False
        logger.info("Email %r sent to %s", subject, to_address)
        return True


async def notify_safely(notifier: Notifier, to_address: Optional[str], subject: str, body: str) -> bool:
    """Call-site guard: any notifier error (including third-party ports) is logged, never raised."""
    if not to_address:
        return False
    try:
        return await notifier.notify(to_address, subject, body)
    except Exception:
        logger.exception("Notifier raised while sending %r to %s", subject, to_address)
        return False


_email_notifier = EmailNotifier()


def get_notifier() -> Notifier:
    return _email_notifier
