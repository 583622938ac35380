"""
Input validation for notification requests.

validate() checks only the rules relevant to the request's kind and raises
on the first violated rule; errors are never aggregated. Rules run in this
fixed order:

  presence -> email format -> phone format -> name length ->
  company length -> message length -> service length -> land size length

Public API:
  validate(request) -> None
  is_valid_email(value) -> bool
  is_valid_phone(value) -> bool
  within_length(value, max_length) -> bool
"""

import re
from typing import Optional

from app.models.notification import (
    ContactRequest,
    GenericEmailRequest,
    NotificationRequest,
    StatusUpdateRequest,
    WelcomeRequest,
)
from app.services.notification_errors import (
    FieldTooLong,
    InvalidEmailFormat,
    InvalidPhoneFormat,
    MissingRequiredField,
)

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

# Always applied with fullmatch(); a trailing "\n" must not pass
_EMAIL_RE = re.compile(r"[^\s@]+@[^\s@]+\.[^\s@]+")
# ASCII digits; \s is any Unicode whitespace, so pasted non-breaking spaces pass
_PHONE_RE = re.compile(r"[0-9\s\-+()]{6,20}")

MAX_EMAIL_LENGTH = 255
MAX_NAME_LENGTH = 200
MAX_COMPANY_LENGTH = 200
MAX_SERVICE_LENGTH = 100
MAX_LAND_SIZE_LENGTH = 100
MAX_MESSAGE_LENGTH = 5000


# ---------------------------------------------------------------------------
# Field checks
# ---------------------------------------------------------------------------

def is_valid_email(value: Optional[str]) -> bool:
    if not value:
        return False
    return bool(_EMAIL_RE.fullmatch(value)) and len(value) <= MAX_EMAIL_LENGTH


def is_valid_phone(value: Optional[str]) -> bool:
    if not value:
        return False
    return bool(_PHONE_RE.fullmatch(value))


def within_length(value: Optional[str], max_length: int) -> bool:
    """Absent values always pass; length rules only apply to supplied fields."""
    if not value:
        return True
    return len(value) <= max_length


def _check_length(value: Optional[str], max_length: int, label: str, field: str) -> None:
    if not within_length(value, max_length):
        raise FieldTooLong(f"{label} too long (max {max_length} characters)", field=field)


def _check_email(value: str) -> None:
    if not is_valid_email(value):
        raise InvalidEmailFormat("Invalid email format", field="email")


# ---------------------------------------------------------------------------
# Per-kind rule sets
# ---------------------------------------------------------------------------

def _validate_contact(request: ContactRequest) -> None:
    if not (request.name and request.email and request.phone and request.service):
        raise MissingRequiredField("Missing required fields: name, email, phone, service")

    _check_email(request.email)

    if not is_valid_phone(request.phone):
        raise InvalidPhoneFormat("Invalid phone format", field="phone")

    _check_length(request.name, MAX_NAME_LENGTH, "Name", "name")
    _check_length(request.company, MAX_COMPANY_LENGTH, "Company name", "company")
    _check_length(request.message, MAX_MESSAGE_LENGTH, "Message", "message")
    _check_length(request.service, MAX_SERVICE_LENGTH, "Service name", "service")
    _check_length(request.land_size, MAX_LAND_SIZE_LENGTH, "Land size", "landSize")


def _validate_status_update(request: StatusUpdateRequest) -> None:
    if not (request.name and request.email and request.service and request.new_status):
        raise MissingRequiredField("Missing required fields for status update")

    _check_email(request.email)
    _check_length(request.name, MAX_NAME_LENGTH, "Name", "name")


def _validate_welcome(request: WelcomeRequest) -> None:
    if not (request.name and request.email):
        raise MissingRequiredField("Missing required fields for welcome email")

    _check_email(request.email)
    _check_length(request.name, MAX_NAME_LENGTH, "Name", "name")


def _validate_generic(request: GenericEmailRequest) -> None:
    recipients = request.recipients
    if not recipients or not request.subject:
        raise MissingRequiredField("Missing required fields: to, subject")

    for address in recipients:
        if not is_valid_email(address):
            raise InvalidEmailFormat(f"Invalid email format: {address}", field="to")


_VALIDATORS = {
    ContactRequest: _validate_contact,
    StatusUpdateRequest: _validate_status_update,
    WelcomeRequest: _validate_welcome,
    GenericEmailRequest: _validate_generic,
}


def validate(request: NotificationRequest) -> None:
    """
    Validate a parsed request.

    Raises:
        ValidationFailed subclass naming the first violated rule.
    """
    _VALIDATORS[type(request)](request)
