"""
Tests for the notification dispatcher.

The transport is an AsyncMock; these tests check what gets sent, to whom,
and how primary vs. secondary delivery failures are handled.
"""

import logging
from unittest.mock import AsyncMock

import pytest

from app.models.notification import (
    ContactRequest,
    GenericEmailRequest,
    StatusUpdateRequest,
    WelcomeRequest,
)
from app.services.dispatcher import NotificationDispatcher
from app.services.email_transport import TransportError
from app.services.notification_errors import (
    MissingRequiredField,
    PrimaryDeliveryFailed,
)

SENDER = "AlmondSense <onboarding@resend.dev>"


def _make_transport(*side_effect):
    transport = AsyncMock()
    if side_effect:
        transport.send.side_effect = list(side_effect)
    else:
        transport.send.return_value = {"id": "email-123"}
    return transport


def _contact(**overrides) -> ContactRequest:
    fields = {
        "name": "Ana",
        "email": "ana@x.com",
        "phone": "08123456789",
        "service": "Land Clearing",
    }
    fields.update(overrides)
    return ContactRequest(**fields)


def _sent_emails(transport):
    return [call.args[0] for call in transport.send.await_args_list]


class TestContactDispatch:

    @pytest.mark.asyncio
    async def test_confirmation_sent_without_admin_alert(self):
        transport = _make_transport()
        dispatcher = NotificationDispatcher(transport, sender=SENDER)

        result = await dispatcher.dispatch(_contact())

        assert result == {"id": "email-123"}
        emails = _sent_emails(transport)
        assert len(emails) == 1
        assert emails[0].to == "ana@x.com"
        assert emails[0].sender == SENDER
        assert emails[0].subject == "Terima Kasih atas Pengajuan Anda - Land Clearing"
        assert "Ana" in emails[0].html
        assert "Land Clearing" in emails[0].html

    @pytest.mark.asyncio
    async def test_recipient_is_unescaped_while_body_is_escaped(self):
        transport = _make_transport()
        dispatcher = NotificationDispatcher(transport, sender=SENDER)

        await dispatcher.dispatch(_contact(email="o'brien@x.com", name="O'Brien"))

        email = _sent_emails(transport)[0]
        assert email.to == "o'brien@x.com"
        assert "O&#039;Brien" in email.html
        assert "O'Brien" not in email.html

    @pytest.mark.asyncio
    async def test_admin_alert_sent_after_confirmation(self):
        transport = _make_transport({"id": "customer"}, {"id": "admin"})
        dispatcher = NotificationDispatcher(transport, sender=SENDER)

        result = await dispatcher.dispatch(_contact(admin_email="admin@x.com"))

        assert result == {"id": "customer"}
        customer, admin = _sent_emails(transport)
        assert customer.to == "ana@x.com"
        assert admin.to == "admin@x.com"
        assert admin.subject == "[Pengajuan Baru] Land Clearing - Ana"
        assert "Pengajuan Baru Masuk" in admin.html

    @pytest.mark.asyncio
    async def test_invalid_admin_email_skipped_silently(self):
        transport = _make_transport()
        dispatcher = NotificationDispatcher(transport, sender=SENDER)

        result = await dispatcher.dispatch(_contact(admin_email="not-an-email"))

        assert result == {"id": "email-123"}
        assert transport.send.await_count == 1

    @pytest.mark.asyncio
    async def test_admin_email_with_trailing_newline_skipped(self):
        transport = _make_transport()
        dispatcher = NotificationDispatcher(transport, sender=SENDER)

        await dispatcher.dispatch(_contact(admin_email="admin@x.com\n"))

        assert [email.to for email in _sent_emails(transport)] == ["ana@x.com"]

    @pytest.mark.asyncio
    async def test_admin_alert_failure_is_logged_not_raised(self, caplog):
        transport = _make_transport({"id": "customer"}, TransportError("Resend API error: boom"))
        dispatcher = NotificationDispatcher(transport, sender=SENDER)

        with caplog.at_level(logging.ERROR, logger="app.services.dispatcher"):
            result = await dispatcher.dispatch(_contact(admin_email="admin@x.com"))

        assert result == {"id": "customer"}
        assert transport.send.await_count == 2
        assert "Failed to send admin notification" in caplog.text
        assert "boom" in caplog.text

    @pytest.mark.asyncio
    async def test_admin_alert_unexpected_error_is_swallowed(self):
        transport = _make_transport({"id": "customer"}, RuntimeError("socket closed"))
        dispatcher = NotificationDispatcher(transport, sender=SENDER)

        result = await dispatcher.dispatch(_contact(admin_email="admin@x.com"))

        assert result == {"id": "customer"}

    @pytest.mark.asyncio
    async def test_primary_failure_skips_admin_alert(self):
        transport = _make_transport(TransportError("Resend API error: invalid key"))
        dispatcher = NotificationDispatcher(transport, sender=SENDER)

        with pytest.raises(PrimaryDeliveryFailed) as exc_info:
            await dispatcher.dispatch(_contact(admin_email="admin@x.com"))

        assert exc_info.value.message == "Resend API error: invalid key"
        assert transport.send.await_count == 1

    @pytest.mark.asyncio
    async def test_validation_failure_sends_nothing(self):
        transport = _make_transport()
        dispatcher = NotificationDispatcher(transport, sender=SENDER)

        with pytest.raises(MissingRequiredField):
            await dispatcher.dispatch(_contact(service=None))

        transport.send.assert_not_awaited()


class TestOtherKinds:

    @pytest.mark.asyncio
    async def test_status_update(self):
        transport = _make_transport()
        dispatcher = NotificationDispatcher(transport, sender=SENDER)

        await dispatcher.dispatch(StatusUpdateRequest(
            name="Ana", email="ana@x.com", service="Survey", new_status="success",
        ))

        email = _sent_emails(transport)[0]
        assert email.to == "ana@x.com"
        assert email.subject == "Update Status Pengajuan - Survey"
        assert "Status: Berhasil" in email.html

    @pytest.mark.asyncio
    async def test_welcome(self):
        transport = _make_transport()
        dispatcher = NotificationDispatcher(transport, sender=SENDER)

        await dispatcher.dispatch(WelcomeRequest(name="Ana", email="ana@x.com"))

        email = _sent_emails(transport)[0]
        assert email.subject == "Selamat Datang di AlmondSense"
        assert "Halo, Ana!" in email.html

    @pytest.mark.asyncio
    async def test_generic_uses_overrides_and_escapes_text(self):
        transport = _make_transport()
        dispatcher = NotificationDispatcher(transport, sender=SENDER)

        await dispatcher.dispatch(GenericEmailRequest(
            to=["a@x.com", "b@x.com"],
            subject="<Report>",
            text="1 < 2",
            sender="Ops <ops@x.com>",
            reply_to="reply@x.com",
        ))

        email = _sent_emails(transport)[0]
        assert email.sender == "Ops <ops@x.com>"
        assert email.to == ["a@x.com", "b@x.com"]
        assert email.subject == "&lt;Report&gt;"
        assert email.html == "1 &lt; 2"
        assert email.reply_to == "reply@x.com"

    @pytest.mark.asyncio
    async def test_generic_html_passed_through(self):
        transport = _make_transport()
        dispatcher = NotificationDispatcher(transport, sender=SENDER)

        await dispatcher.dispatch(GenericEmailRequest(to="a@x.com", subject="Hi", html="<p>Hi</p>"))

        email = _sent_emails(transport)[0]
        assert email.sender == SENDER
        assert email.html == "<p>Hi</p>"


class TestDefaultSender:

    def test_sender_from_environment(self, monkeypatch):
        monkeypatch.setenv("EMAIL_FROM_ADDRESS", "Berkah Jaya <noreply@berkahjaya.com>")
        dispatcher = NotificationDispatcher(AsyncMock())
        assert dispatcher.sender == "Berkah Jaya <noreply@berkahjaya.com>"

    def test_sender_default(self, monkeypatch):
        monkeypatch.delenv("EMAIL_FROM_ADDRESS", raising=False)
        dispatcher = NotificationDispatcher(AsyncMock())
        assert dispatcher.sender == SENDER
