from unittest.mock import AsyncMock

import aiosmtplib
import pytest

from expocrm.models.user_settings import UserSettings
from expocrm.notifications import email_sender
from expocrm.notifications.email_sender import EmailSender


@pytest.fixture
def sender():
    return EmailSender(smtp_host="smtp.acme.test", smtp_user="ana@acme.test", smtp_password="x", signature="-- Ana")


def test_stored_settings_win(monkeypatch):
    monkeypatch.setattr(email_sender.Config, "SMTP_HOST", "env.smtp.test")
    settings = UserSettings(smtp_host="", smtp_user="ana@acme.test", smtp_port=2525)

    sender = EmailSender.from_settings(settings)

    assert sender.smtp_host == "env.smtp.test"
    assert sender.smtp_user == "ana@acme.test"
    assert sender.smtp_port == 2525


def test_message_carries_signature(sender):
    msg = sender.build_message({"email": "bob@beta.test", "name": "Bob"}, "Hi", "Body")

    assert msg["To"] == "Bob <bob@beta.test>"
    assert msg["Subject"] == "Hi"
    assert msg.get_payload()[0].get_payload(decode=True).decode() == "Body\n\n-- Ana"


@pytest.mark.asyncio
async def test_not_configured():
    result = await EmailSender().send({"email": "bob@beta.test"}, "Hi", "Body")
    assert not result.success
    assert result.error == "SMTP not configured"


@pytest.mark.asyncio
async def test_send(monkeypatch, sender):
    send = AsyncMock()
    monkeypatch.setattr(email_sender.aiosmtplib, "send", send)

    result = await sender.send({"email": "bob@beta.test"}, "Hi", "Body")

    assert result.success
    assert send.await_args.kwargs["hostname"] == "smtp.acme.test"
    assert send.await_args.kwargs["start_tls"] is True


@pytest.mark.asyncio
async def test_smtp_failure(monkeypatch, sender):
    monkeypatch.setattr(email_sender.aiosmtplib, "send", AsyncMock(side_effect=aiosmtplib.SMTPException("refused")))

    result = await sender.send({"email": "bob@beta.test"}, "Hi", "Body")

    assert not result.success
    assert "refused" in result.error
