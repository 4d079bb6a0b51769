"""Tests for the e-mail notifier."""

import pytest
import pytest_asyncio

from shop.schemas.order import PersistedOrder
from shop.services.notifier import SUBJECT, Notifier, format_order_html
from shop.utils.errors import NotificationError
from shop.utils.log import Log


def _order(**overrides):
    values = {
        "name": "Ana",
        "phone": "555",
        "perfumeId": "2",
        "perfumeName": "Rose",
        "quantity": "1",
        "deliveryAddress": "Main St",
        "date": "2025-03-01 14:30:05",
    }
    values.update(overrides)
    return PersistedOrder(**values)


@pytest_asyncio.fixture()
async def log(tmp_path):
    log = Log(str(tmp_path / "log"), "0")
    yield log
    await log.shutdown()


def _log_text(tmp_path):
    return "".join(p.read_text(encoding="utf-8") for p in (tmp_path / "log").rglob("*.log"))


def test_html_lists_every_field():
    body = format_order_html(_order(deliveryAddress="<b>Main</b>", phone=""))

    for key in ("name", "phone", "perfumeId", "perfumeName", "quantity", "deliveryAddress", "date"):
        assert f"<strong>{key}:</strong>" in body
    assert "&lt;b&gt;Main&lt;/b&gt;" in body
    assert "<strong>phone:</strong> N/A" in body


@pytest.mark.asyncio
async def test_disabled_without_credentials(settings, log, monkeypatch):
    async def fail_send(*args, **kwargs):
        raise AssertionError("must not send")

    monkeypatch.setattr("shop.services.notifier.aiosmtplib.send", fail_send)
    notifier = Notifier(settings, log)

    assert notifier.enabled is False
    assert notifier.notify(_order()) is None
    assert notifier.pending == 0


@pytest.mark.asyncio
async def test_sends_message(email_settings, log, monkeypatch):
    calls = []

    async def fake_send(message, **kwargs):
        calls.append((message, kwargs))

    monkeypatch.setattr("shop.services.notifier.aiosmtplib.send", fake_send)
    notifier = Notifier(email_settings, log)

    task = notifier.notify(_order())
    assert await task is True

    message, kwargs = calls[0]
    assert message["Subject"] == SUBJECT
    assert message["From"] == message["To"] == "shop@example.com"
    assert kwargs["hostname"] == "smtp.gmail.com"
    assert kwargs["use_tls"] is True
    assert notifier.pending == 0


@pytest.mark.asyncio
async def test_explicit_recipient(email_settings, log):
    notifier = Notifier(email_settings.model_copy(update={"EMAIL_TO": "owner@example.com"}), log)
    message = notifier.build_message(_order())
    assert message["To"] == "owner@example.com"
    assert message["From"] == "shop@example.com"


@pytest.mark.asyncio
async def test_failure_is_logged_not_raised(email_settings, log, monkeypatch, tmp_path):
    async def broken_send(*args, **kwargs):
        raise OSError("smtp down")

    monkeypatch.setattr("shop.services.notifier.aiosmtplib.send", broken_send)
    notifier = Notifier(email_settings, log)

    notifier.notify(_order())
    await notifier.drain()

    assert isinstance(notifier.last_error, NotificationError)
    assert "smtp down" in notifier.last_error.detail
    await log.shutdown()
    assert "smtp down" in _log_text(tmp_path)


@pytest.mark.asyncio
async def test_send_wraps_transport_errors(email_settings, log, monkeypatch):
    async def broken_send(*args, **kwargs):
        raise ConnectionRefusedError("refused")

    monkeypatch.setattr("shop.services.notifier.aiosmtplib.send", broken_send)

    with pytest.raises(NotificationError):
        await Notifier(email_settings, log).send(_order())
