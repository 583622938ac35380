"""
HTML email templates for the send-email function.

Every renderer expects an already-sanitized payload (see
app.services.sanitizer) and interpolates its fields verbatim; nothing is
escaped here.

Public API:
  render_contact_confirmation(data: ContactRequest) -> str
  render_admin_notification(data: ContactRequest) -> str
  render_status_update(data: StatusUpdateRequest) -> str
  render_welcome(data: WelcomeRequest) -> str
  render(kind: NotificationKind, payload) -> str
"""

from typing import NamedTuple, Optional

from app.models.notification import (
    ContactRequest,
    GenericEmailRequest,
    NotificationKind,
    StatusUpdateRequest,
    WelcomeRequest,
)

BRAND_NAME = "AlmondSense"
COMPANY_NAME = "PT Berkah Jaya Kontraktor"
CONTACT_LINE = "📧 info@berkahjaya.com | 📞 (021) 1234-5678"
COPYRIGHT_LINE = f"© 2024 {COMPANY_NAME}. All rights reserved."

THEME = {
    "primary": "#1a5f2a",
    "primary_light": "#2d8a3e",
    "header_subtitle": "#c8e6c9",
    "alert": "#d97706",
    "alert_light": "#f59e0b",
    "alert_bg": "#fef3c7",
    "alert_text": "#92400e",
    "success_bg": "#e8f5e9",
    "success_text": "#2e7d32",
    "info_bg": "#e3f2fd",
    "info_text": "#1565c0",
    "panel_bg": "#f8f9fa",
}

WELCOME_SUBJECT = f"Selamat Datang di {BRAND_NAME}"

WELCOME_SERVICES = [
    "Pematangan Lahan &amp; Land Clearing",
    "Galian Tanah &amp; Urugan",
    "Pembangunan Jalan &amp; Drainase",
    "Konstruksi Bangunan Komersial",
]


class StatusStyle(NamedTuple):
    label: str
    color: str
    icon: str


STATUS_STYLES = {
    "pending": StatusStyle("Menunggu", "#f59e0b", "⏳"),
    "negosiasi": StatusStyle("Negosiasi", "#3b82f6", "💬"),
    "success": StatusStyle("Berhasil", "#10b981", "✅"),
}

_FALLBACK_STATUS_COLOR = "#666"
_FALLBACK_STATUS_ICON = "📋"


# ---------------------------------------------------------------------------
# Subjects
# ---------------------------------------------------------------------------

def contact_subject(data: ContactRequest) -> str:
    return f"Terima Kasih atas Pengajuan Anda - {data.service}"


def admin_subject(data: ContactRequest) -> str:
    return f"[Pengajuan Baru] {data.service} - {data.name}"


def status_subject(data: StatusUpdateRequest) -> str:
    return f"Update Status Pengajuan - {data.service}"


# ---------------------------------------------------------------------------
# Layout helpers
# ---------------------------------------------------------------------------

def get_base_template(title: str, header: str, content: str, footer: str) -> str:
    """Shared document shell: a 600px card with header, content and footer rows."""
    return f"""
<!DOCTYPE html>
<html>
<head>
  <meta charset="utf-8">
  <meta name="viewport" content="width=device-width, initial-scale=1.0">
  <title>{title}</title>
</head>
<body style="margin: 0; padding: 0; font-family: 'Segoe UI', Tahoma, Geneva, Verdana, sans-serif; background-color: #f4f4f4;">
  <table role="presentation" style="width: 100%; border-collapse: collapse;">
    <tr>
      <td align="center" style="padding: 40px 0;">
        <table role="presentation" style="width: 600px; border-collapse: collapse; background-color: #ffffff; border-radius: 8px; box-shadow: 0 2px 8px rgba(0,0,0,0.1);">
          <!-- Header -->
          <tr>
{header}
          </tr>
          <!-- Content -->
          <tr>
            <td style="padding: 40px 30px;">
{content}
            </td>
          </tr>
          <!-- Footer -->
          <tr>
{footer}
          </tr>
        </table>
      </td>
    </tr>
  </table>
</body>
</html>
"""


def _green_header(title: str, subtitle: Optional[str] = None, padding: str = "30px") -> str:
    subtitle_html = ""
    if subtitle:
        subtitle_html = (
            f'\n              <p style="color: {THEME["header_subtitle"]}; margin: 10px 0 0 0; '
            f'text-align: center; font-size: 14px;">{subtitle}</p>'
        )
    return f"""            <td style="background: linear-gradient(135deg, {THEME["primary"]} 0%, {THEME["primary_light"]} 100%); padding: {padding}; border-radius: 8px 8px 0 0; text-align: center;">
              <h1 style="color: #ffffff; margin: 0; font-size: 24px; text-align: center;">{title}</h1>{subtitle_html}
            </td>"""


def _company_footer(with_copyright: bool = True) -> str:
    copyright_html = ""
    if with_copyright:
        copyright_html = (
            f'\n              <p style="color: #999; margin: 0; font-size: 12px;">{COPYRIGHT_LINE}</p>'
        )
    return f"""            <td style="background-color: {THEME["panel_bg"]}; padding: 30px; border-radius: 0 0 8px 8px; border-top: 1px solid #eee; text-align: center;">
              <p style="color: #666; margin: 0 0 10px 0; font-size: 14px;">{CONTACT_LINE}</p>{copyright_html}
            </td>"""


def _detail_row(label: str, value: Optional[str], bold_label: bool = False, top_align: bool = False) -> str:
    """One label/value row; optional fields render nothing when absent."""
    if not value:
        return ""
    label_style = "padding: 8px 0; color: #666; width: 140px;"
    if bold_label:
        label_style += " font-weight: bold;"
    if top_align:
        label_style += " vertical-align: top;"
    return f"""
                  <tr>
                    <td style="{label_style}">{label}:</td>
                    <td style="padding: 8px 0; color: #333;">{value}</td>
                  </tr>"""


def _optional_rows(data: ContactRequest, bold_label: bool = False) -> str:
    return "".join([
        _detail_row("Perusahaan", data.company, bold_label),
        _detail_row("Luas Lahan", data.land_size, bold_label),
        _detail_row("Pesan", data.message, bold_label, top_align=True),
    ])


# ---------------------------------------------------------------------------
# Renderers
# ---------------------------------------------------------------------------

def render_contact_confirmation(data: ContactRequest) -> str:
    """Acknowledgement sent to the customer who filled in the contact form."""
    rows = (
        _detail_row("Layanan", data.service)
        + _detail_row("No. Telepon", data.phone)
        + _optional_rows(data)
    )
    content = f"""
              <h2 style="color: {THEME["primary"]}; margin: 0 0 20px 0; font-size: 20px;">Halo, {data.name}! 👋</h2>
              <p style="color: #333; line-height: 1.6; margin: 0 0 20px 0;">
                Terima kasih telah menghubungi kami. Kami telah menerima pengajuan Anda dan tim kami akan segera menindaklanjuti.
              </p>
              <div style="background-color: {THEME["panel_bg"]}; border-left: 4px solid {THEME["primary"]}; padding: 20px; margin: 20px 0; border-radius: 0 4px 4px 0;">
                <h3 style="color: {THEME["primary"]}; margin: 0 0 15px 0; font-size: 16px;">📋 Detail Pengajuan:</h3>
                <table style="width: 100%; border-collapse: collapse;">{rows}
                </table>
              </div>
              <div style="background-color: {THEME["success_bg"]}; padding: 20px; border-radius: 4px; margin: 20px 0;">
                <p style="color: {THEME["success_text"]}; margin: 0; font-size: 14px;">
                  <strong>⏱️ Estimasi Waktu:</strong> Tim kami akan menghubungi Anda dalam 1x24 jam kerja.
                </p>
              </div>
              <p style="color: #333; line-height: 1.6; margin: 20px 0 0 0;">
                Jika Anda memiliki pertanyaan, jangan ragu untuk menghubungi kami.
              </p>"""
    return get_base_template(
        title="Konfirmasi Pengajuan",
        header=_green_header(BRAND_NAME, subtitle="Pertanian Digital Cerdas"),
        content=content,
        footer=_company_footer(),
    )


def render_admin_notification(data: ContactRequest) -> str:
    """Alert sent to staff when a new contact form submission arrives."""
    rows = (
        _detail_row("Nama", data.name, bold_label=True)
        + _detail_row("Email", data.email, bold_label=True)
        + _detail_row("Telepon", data.phone, bold_label=True)
        + _detail_row("Layanan", data.service, bold_label=True)
        + _optional_rows(data, bold_label=True)
    )
    header = f"""            <td style="background: linear-gradient(135deg, {THEME["alert"]} 0%, {THEME["alert_light"]} 100%); padding: 30px; border-radius: 8px 8px 0 0;">
              <h1 style="color: #ffffff; margin: 0; font-size: 24px; text-align: center;">🔔 Pengajuan Baru Masuk!</h1>
            </td>"""
    content = f"""
              <div style="background-color: {THEME["alert_bg"]}; border-left: 4px solid {THEME["alert"]}; padding: 20px; margin-bottom: 20px; border-radius: 0 4px 4px 0;">
                <h3 style="color: {THEME["alert_text"]}; margin: 0 0 15px 0; font-size: 16px;">📋 Detail Pengajuan:</h3>
                <table style="width: 100%; border-collapse: collapse;">{rows}
                </table>
              </div>
              <p style="color: #666; font-size: 14px; margin: 20px 0 0 0;">
                Silakan tindak lanjuti pengajuan ini secepatnya.
              </p>"""
    footer = f"""            <td style="background-color: {THEME["panel_bg"]}; padding: 20px; border-radius: 0 0 8px 8px; border-top: 1px solid #eee; text-align: center;">
              <p style="color: #999; margin: 0; font-size: 12px;">Email ini dikirim otomatis dari sistem {BRAND_NAME}.</p>
            </td>"""
    return get_base_template(title="Pengajuan Baru", header=header, content=content, footer=footer)


def status_style(status: Optional[str]) -> StatusStyle:
    """Label, color and icon for a status; unknown values get a neutral style."""
    style = STATUS_STYLES.get(status or "")
    if style is not None:
        return style
    return StatusStyle(status or "", _FALLBACK_STATUS_COLOR, _FALLBACK_STATUS_ICON)


def render_status_update(data: StatusUpdateRequest) -> str:
    """Notice sent to the customer when a submission's status changes."""
    style = status_style(data.new_status)

    extra = ""
    if data.new_status == "success":
        extra = f"""
              <div style="background-color: {THEME["success_bg"]}; padding: 20px; border-radius: 4px; margin: 20px 0; text-align: center;">
                <p style="color: {THEME["success_text"]}; margin: 0; font-size: 16px;">
                  🎉 Selamat! Pengajuan Anda telah berhasil diproses.
                </p>
              </div>"""
    elif data.new_status == "negosiasi":
        extra = f"""
              <div style="background-color: {THEME["info_bg"]}; padding: 20px; border-radius: 4px; margin: 20px 0;">
                <p style="color: {THEME["info_text"]}; margin: 0; font-size: 14px;">
                  💼 Tim kami akan segera menghubungi Anda untuk proses negosiasi lebih lanjut.
                </p>
              </div>"""

    content = f"""
              <h2 style="color: #333; margin: 0 0 20px 0; font-size: 20px;">Halo, {data.name}!</h2>
              <p style="color: #333; line-height: 1.6; margin: 0 0 20px 0;">
                Status pengajuan layanan <strong>{data.service}</strong> Anda telah diperbarui.
              </p>
              <div style="text-align: center; padding: 30px 0;">
                <div style="display: inline-block; background-color: {style.color}20; padding: 20px 40px; border-radius: 8px; border: 2px solid {style.color};">
                  <span style="font-size: 32px;">{style.icon}</span>
                  <p style="color: {style.color}; font-size: 18px; font-weight: 600; margin: 10px 0 0 0;">
                    Status: {style.label}
                  </p>
                </div>
              </div>{extra}"""
    return get_base_template(
        title="Update Status",
        header=_green_header(COMPANY_NAME),
        content=content,
        footer=_company_footer(with_copyright=False),
    )


def render_welcome(data: WelcomeRequest) -> str:
    """Greeting sent to a newly registered user."""
    services = "\n".join(f"                  <li>{service}</li>" for service in WELCOME_SERVICES)
    content = f"""
              <h2 style="color: #333; margin: 0 0 20px 0; font-size: 22px;">Halo, {data.name}! 👋</h2>
              <p style="color: #333; line-height: 1.8; margin: 0 0 20px 0; font-size: 16px;">
                Terima kasih telah bergabung dengan {COMPANY_NAME}. Kami sangat senang Anda mempercayakan kebutuhan konstruksi Anda kepada kami.
              </p>
              <div style="background-color: {THEME["panel_bg"]}; padding: 25px; border-radius: 8px; margin: 25px 0;">
                <h3 style="color: {THEME["primary"]}; margin: 0 0 15px 0; font-size: 16px;">🏗️ Layanan Kami:</h3>
                <ul style="color: #555; line-height: 2; margin: 0; padding-left: 20px;">
{services}
                </ul>
              </div>
              <div style="text-align: center; margin: 30px 0;">
                <a href="#" style="display: inline-block; background-color: {THEME["primary"]}; color: #ffffff; text-decoration: none; padding: 15px 40px; border-radius: 6px; font-weight: 600; font-size: 16px;">
                  Mulai Konsultasi
                </a>
              </div>"""
    return get_base_template(
        title="Selamat Datang",
        header=_green_header("🎉 Selamat Datang!", subtitle=COMPANY_NAME, padding="40px 30px"),
        content=content,
        footer=_company_footer(),
    )


def _render_generic(data: GenericEmailRequest) -> str:
    # Raw html wins; text is expected to be escaped already
    return data.html or data.text or ""


_RENDERERS = {
    NotificationKind.CONTACT: render_contact_confirmation,
    NotificationKind.STATUS_UPDATE: render_status_update,
    NotificationKind.WELCOME: render_welcome,
    NotificationKind.GENERIC: _render_generic,
}


def render(kind: NotificationKind, payload) -> str:
    """Render the customer-facing body for a notification kind."""
    return _RENDERERS[NotificationKind(kind)](payload)
