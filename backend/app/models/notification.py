"""
Pydantic models for the send-email function.

Request models (one per notification kind):
  ContactRequest        - website contact form submission
  StatusUpdateRequest   - submission status changed in the dashboard
  WelcomeRequest        - new user registered
  GenericEmailRequest   - pass-through email, selected when "type" is absent

Other models:
  OutboundEmail         - a fully rendered email ready for the transport
  NotificationResponse  - the JSON envelope returned to the caller

JSON bodies use camelCase keys (landSize, adminEmail, newStatus, replyTo...);
the models expose snake_case attributes through aliases.
"""

from enum import Enum
from typing import Any, List, Literal, Optional, Union

from pydantic import BaseModel, Field, ValidationError

from app.services.notification_errors import MalformedBody, UnknownNotificationKind


class NotificationKind(str, Enum):
    CONTACT = "contact"
    STATUS_UPDATE = "status_update"
    WELCOME = "welcome"
    GENERIC = "generic"


# ---------------------------------------------------------------------------
# Request variants
# ---------------------------------------------------------------------------

class _NotificationBase(BaseModel):
    # Unknown keys from other variants are dropped rather than rejected
    model_config = {"extra": "ignore", "populate_by_name": True}


class ContactRequest(_NotificationBase):
    type: Literal["contact"] = "contact"
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    company: Optional[str] = None
    service: Optional[str] = None
    message: Optional[str] = None
    land_size: Optional[str] = Field(None, alias="landSize")
    admin_email: Optional[str] = Field(None, alias="adminEmail")

    @property
    def kind(self) -> NotificationKind:
        return NotificationKind.CONTACT


class StatusUpdateRequest(_NotificationBase):
    type: Literal["status_update"] = "status_update"
    name: Optional[str] = None
    email: Optional[str] = None
    service: Optional[str] = None
    old_status: Optional[str] = Field(None, alias="oldStatus")
    new_status: Optional[str] = Field(None, alias="newStatus")

    @property
    def kind(self) -> NotificationKind:
        return NotificationKind.STATUS_UPDATE


class WelcomeRequest(_NotificationBase):
    type: Literal["welcome"] = "welcome"
    name: Optional[str] = None
    email: Optional[str] = None

    @property
    def kind(self) -> NotificationKind:
        return NotificationKind.WELCOME


class GenericEmailRequest(_NotificationBase):
    to: Optional[Union[str, List[str]]] = None
    subject: Optional[str] = None
    html: Optional[str] = None
    text: Optional[str] = None
    sender: Optional[str] = Field(None, alias="from")
    reply_to: Optional[str] = Field(None, alias="replyTo")

    @property
    def kind(self) -> NotificationKind:
        return NotificationKind.GENERIC

    @property
    def recipients(self) -> List[str]:
        """Recipients as a list, whether the body sent one address or many."""
        if self.to is None:
            return []
        if isinstance(self.to, str):
            return [self.to]
        return list(self.to)


NotificationRequest = Union[ContactRequest, StatusUpdateRequest, WelcomeRequest, GenericEmailRequest]

_MODELS_BY_TYPE = {
    NotificationKind.CONTACT.value: ContactRequest,
    NotificationKind.STATUS_UPDATE.value: StatusUpdateRequest,
    NotificationKind.WELCOME.value: WelcomeRequest,
}


def _describe_validation_error(exc: ValidationError) -> str:
    first = exc.errors()[0]
    location = ".".join(str(part) for part in first.get("loc", ()))
    if location:
        return f"{location}: {first.get('msg')}"
    return str(first.get("msg"))


def parse_notification(body: Any) -> NotificationRequest:
    """
    Decode a JSON body into exactly one request variant.

    The ``type`` discriminant is inspected before any field: a body without
    it is a generic email, a body with an unrecognised value is rejected
    with UnknownNotificationKind. Field-level type errors (e.g. a number
    where a string is expected) raise MalformedBody.
    """
    if not isinstance(body, dict):
        raise MalformedBody("Request body must be a JSON object")

    if "type" not in body:
        model = GenericEmailRequest
    else:
        kind = body["type"]
        model = _MODELS_BY_TYPE.get(kind) if isinstance(kind, str) else None
        if model is None:
            raise UnknownNotificationKind(kind)

    try:
        return model.model_validate(body)
    except ValidationError as exc:
        raise MalformedBody(f"Invalid request body: {_describe_validation_error(exc)}") from exc


# ---------------------------------------------------------------------------
# Outbound email and response envelope
# ---------------------------------------------------------------------------

class OutboundEmail(BaseModel):
    """A rendered email, immutable once built."""

    model_config = {"frozen": True}

    sender: str
    to: Union[str, List[str]]
    subject: str
    html: str
    reply_to: Optional[str] = None

    def to_payload(self) -> dict:
        """Resend API request body."""
        payload = {
            "from": self.sender,
            "to": self.to if isinstance(self.to, str) else list(self.to),
            "subject": self.subject,
            "html": self.html,
        }
        if self.reply_to:
            payload["reply_to"] = self.reply_to
        return payload

    @property
    def recipient_list(self) -> List[str]:
        return [self.to] if isinstance(self.to, str) else list(self.to)


class NotificationResponse(BaseModel):
    success: bool
    data: Optional[Any] = None
    error: Optional[str] = None
