import smtplib

import pytest

from app.core.config import settings
from app.core.notifications import EmailNotifier, Notifier, notify_safely


class ExplodingNotifier(Notifier):
    async def notify(self, to_address: str, subject: str, body: str) -> bool:
        raise RuntimeError("boom")


@pytest.mark.asyncio
async def test_email_notifier_skips_without_smtp_host() -> None:
    notifier = EmailNotifier(settings.model_copy(update={"smtp_host": None}))
    assert await notifier.notify("someone@curtin.edu.au", "Subject", "Body") is False


@pytest.mark.asyncio
async def test_email_notifier_reports_transport_failure(monkeypatch) -> None:
    def refuse(*args, **kwargs):
        raise smtplib.SMTPConnectError(421, "unavailable")

    monkeypatch.setattr(smtplib, "SMTP", refuse)
    notifier = EmailNotifier(settings.model_copy(update={"smtp_host": "mail.invalid"}))
    assert await notifier.notify("someone@curtin.edu.au", "Subject", "Body") is False


@pytest.mark.asyncio
async def test_email_notifier_sends_multipart(monkeypatch) -> None:
    sent = []

    class FakeSMTP:
        def __init__(self, host, port, timeout=None):
            self.host = host

        def __enter__(self):
            return self

        def __exit__(self, *exc):
            return False

        def starttls(self):
            pass

        def login(self, username, password):
            pass

        def send_message(self, msg, to_addrs=None):
            sent.append((msg, to_addrs))

    monkeypatch.setattr(smtplib, "SMTP", FakeSMTP)
    notifier = EmailNotifier(settings.model_copy(update={"smtp_host": "mail.test"}))
    assert await notifier.notify("someone@curtin.edu.au", "Hello <there>", "Line one") is True

    msg, to_addrs = sent[0]
    assert to_addrs == ["someone@curtin.edu.au"]
    assert msg["Subject"] == "Hello <there>"
    assert msg.get_content_type() == "multipart/alternative"
    html_part = msg.get_payload()[1].get_payload(decode=True).decode()
    assert "Hello &lt;there&gt;" in html_part


@pytest.mark.asyncio
async def test_notify_safely_swallows_errors() -> None:
    assert await notify_safely(ExplodingNotifier(), "someone@curtin.edu.au", "S", "B") is False
    assert await notify_safely(ExplodingNotifier(), None, "S", "B") is False
