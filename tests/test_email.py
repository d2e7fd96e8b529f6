"""EmailService delivery and background task registry"""

import asyncio
import smtplib

import pytest

from dsa_tracker.backend.utils import email as email_module
from dsa_tracker.backend.utils.background import fire_and_forget, pending_tasks
from dsa_tracker.backend.utils.email import EmailService


class RecordingSMTP:
    instances = []

    def __init__(self, host, port, timeout=None):
        self.host = host
        self.port = port
        self.messages = []
        self.started_tls = False
        RecordingSMTP.instances.append(self)

    def starttls(self):
        self.started_tls = True

    def login(self, user, password):
        if password == "wrong":
            raise smtplib.SMTPAuthenticationError(535, b"bad credentials")

    def send_message(self, msg):
        self.messages.append(msg)

    def close(self):
        pass


@pytest.fixture
def smtp(monkeypatch):
    RecordingSMTP.instances = []
    monkeypatch.setattr(email_module.smtplib, "SMTP", RecordingSMTP)
    return RecordingSMTP


def _configured(settings, **overrides):
    return settings.model_copy(update={
        "smtp_user": "bot@example.com",
        "smtp_password": "app-password",
        **overrides,
    })


@pytest.mark.asyncio
async def test_unconfigured_smtp_fails_outside_debug(settings):
    service = EmailService(settings)
    assert await service.send_verification_code("ann@example.com", "123456", "Ann") is False


@pytest.mark.asyncio
async def test_unconfigured_smtp_logs_code_in_debug(settings, caplog):
    service = EmailService(settings.model_copy(update={"debug": True}))
    with caplog.at_level("INFO"):
        assert await service.send_verification_code("ann@example.com", "123456", "Ann") is True
    assert "123456" in caplog.text


@pytest.mark.asyncio
async def test_verification_email_content(settings, smtp):
    service = EmailService(_configured(settings))
    assert await service.send_verification_code("ann@example.com", "654321", "<Ann>") is True

    server = smtp.instances[0]
    assert server.started_tls
    msg = server.messages[0]
    assert msg["To"] == "ann@example.com"
    assert "Verify" in msg["Subject"]

    plain, html = (part.get_payload(decode=True).decode() for part in msg.get_payload())
    assert "654321" in plain
    assert "10 minutes" in plain
    assert "&lt;Ann&gt;" in html


@pytest.mark.asyncio
async def test_smtp_failure_reported_as_false(settings, smtp):
    service = EmailService(_configured(settings, smtp_password="wrong"))
    assert await service.send_welcome("ann@example.com", "Ann") is False


@pytest.mark.asyncio
async def test_fire_and_forget_keeps_task_until_done(caplog):
    release = asyncio.Event()

    async def job():
        await release.wait()
        return False

    task = fire_and_forget(job(), name="welcome-email")
    assert task in pending_tasks()

    release.set()
    with caplog.at_level("ERROR"):
        await task
        await asyncio.sleep(0)

    assert task not in pending_tasks()
    assert "welcome-email reported failure" in caplog.text
