"""
Notification dispatcher for the send-email function.

Pipeline for one request:

  validate -> sanitize -> render -> primary delivery
           -> (contact only) secondary admin alert

The primary delivery decides the outcome: its failure raises
PrimaryDeliveryFailed, its success returns the transport response. The
secondary admin alert runs only after a successful primary delivery and
only when an admin address was supplied that passes the email-shape check.
_send_admin_alert() returns None and reports failures to the log only;
the customer acknowledgement never depends on staff notification.

Environment variables
---------------------
EMAIL_FROM_ADDRESS   Default sender (default: "AlmondSense <onboarding@resend.dev>").
"""

import logging
import os
from typing import Optional

from app.models.notification import (
    ContactRequest,
    GenericEmailRequest,
    NotificationRequest,
    OutboundEmail,
    StatusUpdateRequest,
    WelcomeRequest,
)
from app.services import email_templates
from app.services.email_transport import ResendTransport, TransportError, get_transport
from app.services.notification_errors import PrimaryDeliveryFailed, SecondaryDeliveryFailed
from app.services.sanitizer import sanitize_request
from app.services.validator import is_valid_email, validate

logger = logging.getLogger(__name__)

DEFAULT_SENDER = "AlmondSense <onboarding@resend.dev>"


def _default_sender() -> str:
    return os.getenv("EMAIL_FROM_ADDRESS") or DEFAULT_SENDER


class NotificationDispatcher:
    def __init__(self, transport: ResendTransport, sender: Optional[str] = None):
        self.transport = transport
        self.sender = sender or _default_sender()

    # ------------------------------------------------------------------
    # Email construction
    # ------------------------------------------------------------------

    def build_email(self, request: NotificationRequest, safe: NotificationRequest) -> OutboundEmail:
        """
        Build the customer-facing email.

        ``request`` is the raw request and supplies the recipient address;
        ``safe`` is its sanitized copy and supplies everything rendered.
        """
        kind = request.kind
        html = email_templates.render(kind, safe)

        if isinstance(request, ContactRequest):
            subject = email_templates.contact_subject(safe)
        elif isinstance(request, StatusUpdateRequest):
            subject = email_templates.status_subject(safe)
        elif isinstance(request, WelcomeRequest):
            subject = email_templates.WELCOME_SUBJECT
        elif isinstance(request, GenericEmailRequest):
            return OutboundEmail(
                sender=request.sender or self.sender,
                to=request.to,
                subject=safe.subject,
                html=html,
                reply_to=request.reply_to,
            )
        else:
            raise TypeError(f"Unsupported request type: {type(request).__name__}")

        return OutboundEmail(sender=self.sender, to=request.email, subject=subject, html=html)

    def build_admin_alert(self, request: ContactRequest, safe: ContactRequest) -> OutboundEmail:
        return OutboundEmail(
            sender=self.sender,
            to=request.admin_email,
            subject=email_templates.admin_subject(safe),
            html=email_templates.render_admin_notification(safe),
        )

    # ------------------------------------------------------------------
    # Delivery
    # ------------------------------------------------------------------

    async def dispatch(self, request: NotificationRequest) -> dict:
        """
        Validate, render and deliver one notification.

        Returns:
            The transport response for the primary email.

        Raises:
            ValidationFailed: the request broke a validation rule; nothing is sent.
            PrimaryDeliveryFailed: the transport rejected the primary email.
        """
        validate(request)
        safe = sanitize_request(request)
        email = self.build_email(request, safe)

        logger.info(f"Sending {request.kind.value} email to: {', '.join(email.recipient_list)}")
        try:
            response = await self.transport.send(email)
        except TransportError as exc:
            raise PrimaryDeliveryFailed(str(exc)) from exc
        logger.info("Email sent successfully")

        if isinstance(request, ContactRequest):
            await self._send_admin_alert(request, safe)

        return response

    async def _send_admin_alert(self, request: ContactRequest, safe: ContactRequest) -> None:
        """
        Best-effort staff alert for a contact submission.

        A skipped or failed alert is written to the log and never reaches the
        caller's response.
        """
        if not request.admin_email:
            return
        if not is_valid_email(request.admin_email):
            logger.warning("Skipping admin notification: admin email is not a valid address")
            return

        try:
            await self.transport.send(self.build_admin_alert(request, safe))
        except Exception as exc:
            failure = SecondaryDeliveryFailed(str(exc))
            logger.error(f"Failed to send admin notification: {failure.message}")
            return
        logger.info("Admin notification email sent")


def get_dispatcher() -> NotificationDispatcher:
    """FastAPI dependency: dispatcher bound to the process-wide transport."""
    return NotificationDispatcher(get_transport())
