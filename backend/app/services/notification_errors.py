"""
Error taxonomy for the send-email function.

Every error the notification pipeline can raise derives from
NotificationError, which carries the HTTP status and the user-visible
message the endpoint puts into the ``{success: false, error: ...}`` envelope.

  RateLimitExceeded         429
  MalformedBody             500  (JSON parse / shape failure)
  UnknownNotificationKind   500
  ValidationFailed          500  (and its four rule-specific subclasses)
  PrimaryDeliveryFailed     500
  SecondaryDeliveryFailed   never raised to the caller; logged only
"""

from typing import Optional


RATE_LIMIT_MESSAGE = "Too many requests. Please try again later."


class NotificationError(Exception):
    """Base class for every error surfaced by the send-email endpoint."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class RateLimitExceeded(NotificationError):
    status_code = 429

    def __init__(self, client_id: str):
        super().__init__(RATE_LIMIT_MESSAGE)
        self.client_id = client_id


class MalformedBody(NotificationError):
    pass


class UnknownNotificationKind(NotificationError):
    def __init__(self, kind: object):
        super().__init__("Invalid email type")
        self.kind = kind


class ValidationFailed(NotificationError):
    """
    A request broke one validation rule.

    ``rule`` is a stable identifier for the violated rule; ``field`` names the
    offending field when there is a single one.
    """

    rule = "validation_failed"

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.field = field


class MissingRequiredField(ValidationFailed):
    rule = "missing_required_field"


class InvalidEmailFormat(ValidationFailed):
    rule = "invalid_email_format"


class InvalidPhoneFormat(ValidationFailed):
    rule = "invalid_phone_format"


class FieldTooLong(ValidationFailed):
    rule = "field_too_long"


class PrimaryDeliveryFailed(NotificationError):
    pass


class SecondaryDeliveryFailed(NotificationError):
    pass
