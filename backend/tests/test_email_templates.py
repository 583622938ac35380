"""
Tests for the HTML email renderers.

Renderers receive already-sanitized payloads, so these tests either pass
plain values or run the payload through sanitize_request first.
"""

import pytest

from app.models.notification import (
    ContactRequest,
    GenericEmailRequest,
    NotificationKind,
    StatusUpdateRequest,
    WelcomeRequest,
)
from app.services import email_templates
from app.services.email_templates import (
    STATUS_STYLES,
    render,
    render_admin_notification,
    render_contact_confirmation,
    render_status_update,
    render_welcome,
    status_style,
)
from app.services.sanitizer import sanitize_request


def _contact(**overrides) -> ContactRequest:
    fields = {
        "name": "Ana",
        "email": "ana@x.com",
        "phone": "08123456789",
        "service": "Land Clearing",
    }
    fields.update(overrides)
    return ContactRequest(**fields)


def _status(new_status: str) -> StatusUpdateRequest:
    return StatusUpdateRequest(
        name="Ana",
        email="ana@x.com",
        service="Survey",
        old_status="pending",
        new_status=new_status,
    )


class TestContactConfirmation:

    def test_greets_and_lists_required_fields(self):
        html = render_contact_confirmation(_contact())

        assert html.lstrip().startswith("<!DOCTYPE html>")
        assert "Halo, Ana!" in html
        assert "Land Clearing" in html
        assert "08123456789" in html
        assert "1x24 jam kerja" in html

    def test_optional_rows_absent_when_not_supplied(self):
        html = render_contact_confirmation(_contact())

        assert "Perusahaan:" not in html
        assert "Luas Lahan:" not in html
        assert "Pesan:" not in html

    def test_optional_rows_present_when_supplied(self):
        html = render_contact_confirmation(_contact(company="PT Maju", land_size="5 ha", message="Segera"))

        assert "Perusahaan:" in html and "PT Maju" in html
        assert "Luas Lahan:" in html and "5 ha" in html
        assert "Pesan:" in html and "Segera" in html

    def test_sanitized_markup_is_inert(self):
        request = _contact(message="<script>alert('x')</script>", company="A & <B>")
        html = render_contact_confirmation(sanitize_request(request))

        assert "<script" not in html
        assert "&lt;script&gt;alert(&#039;x&#039;)&lt;/script&gt;" in html
        assert "A &amp; &lt;B&gt;" in html


class TestAdminNotification:

    def test_lists_contact_details(self):
        html = render_admin_notification(_contact(company="PT Maju"))

        assert "Pengajuan Baru Masuk" in html
        assert "ana@x.com" in html
        assert "Land Clearing" in html
        assert "PT Maju" in html
        assert "Luas Lahan:" not in html


class TestStatusUpdate:

    @pytest.mark.parametrize("status", ["pending", "negosiasi", "success"])
    def test_known_statuses_use_table(self, status):
        style = STATUS_STYLES[status]
        html = render_status_update(_status(status))

        assert f"Status: {style.label}" in html
        assert style.color in html
        assert style.icon in html

    def test_unknown_status_uses_fallback(self):
        html = render_status_update(_status("on_hold"))

        assert "Status: on_hold" in html
        assert "border: 2px solid #666" in html
        assert "📋" in html

    def test_status_style_fallback_never_fails(self):
        assert status_style(None).label == ""
        assert status_style("archived").color == "#666"

    def test_congratulation_only_on_success(self):
        assert "Selamat! Pengajuan Anda telah berhasil diproses" in render_status_update(_status("success"))
        assert "Selamat! Pengajuan Anda" not in render_status_update(_status("pending"))
        assert "Selamat! Pengajuan Anda" not in render_status_update(_status("negosiasi"))

    def test_negotiation_block_only_on_negosiasi(self):
        assert "proses negosiasi lebih lanjut" in render_status_update(_status("negosiasi"))
        assert "proses negosiasi lebih lanjut" not in render_status_update(_status("success"))
        assert "proses negosiasi lebih lanjut" not in render_status_update(_status("Negosiasi"))


class TestWelcome:

    def test_greets_and_lists_services(self):
        html = render_welcome(WelcomeRequest(name="Ana", email="ana@x.com"))

        assert "Halo, Ana!" in html
        for service in email_templates.WELCOME_SERVICES:
            assert service in html
        assert "Mulai Konsultasi" in html


class TestRenderDispatch:

    def test_contact_kind_renders_confirmation(self):
        assert "1x24 jam kerja" in render(NotificationKind.CONTACT, _contact())

    def test_generic_prefers_html(self):
        request = GenericEmailRequest(to="a@x.com", subject="Hi", html="<p>Body</p>", text="ignored")
        assert render(NotificationKind.GENERIC, request) == "<p>Body</p>"

    def test_generic_falls_back_to_text_then_empty(self):
        assert render(NotificationKind.GENERIC, GenericEmailRequest(text="plain")) == "plain"
        assert render(NotificationKind.GENERIC, GenericEmailRequest()) == ""

    def test_accepts_kind_value_string(self):
        html = render("welcome", WelcomeRequest(name="Ana", email="ana@x.com"))
        assert "Selamat Datang" in html


class TestSubjects:

    def test_subjects(self):
        contact = _contact()
        assert email_templates.contact_subject(contact) == "Terima Kasih atas Pengajuan Anda - Land Clearing"
        assert email_templates.admin_subject(contact) == "[Pengajuan Baru] Land Clearing - Ana"
        assert email_templates.status_subject(_status("success")) == "Update Status Pengajuan - Survey"
        assert email_templates.WELCOME_SUBJECT == "Selamat Datang di AlmondSense"
