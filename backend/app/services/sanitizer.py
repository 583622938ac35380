"""
HTML escaping for user-supplied notification fields.

escape_html() is applied exactly once, to every user-controllable string
before it is interpolated into an email body. It is not idempotent:
escaping "&amp;" again yields "&amp;amp;", so callers must never escape an
already-sanitized payload.

The recipient address used for delivery is never taken from the sanitized
copy; only the rendered body sees escaped values.
"""

from typing import Optional

from app.models.notification import (
    ContactRequest,
    GenericEmailRequest,
    StatusUpdateRequest,
    WelcomeRequest,
)

# "&" must be replaced first so the entities below are not re-escaped
_HTML_ESCAPES = (
    ("&", "&amp;"),
    ("<", "&lt;"),
    (">", "&gt;"),
    ('"', "&quot;"),
    ("'", "&#039;"),
)

# Fields escaped per request kind; anything not listed is not user text
_SANITIZED_FIELDS = {
    ContactRequest: ("name", "email", "phone", "company", "service", "message", "land_size", "admin_email"),
    StatusUpdateRequest: ("name", "email", "service", "old_status", "new_status"),
    WelcomeRequest: ("name", "email"),
    # html is passed through untouched; only subject and plain text are user text
    GenericEmailRequest: ("subject", "text"),
}


def escape_html(value: Optional[str]) -> str:
    """Escape the five HTML-significant characters. None or "" become ""."""
    if not value:
        return ""
    for char, entity in _HTML_ESCAPES:
        value = value.replace(char, entity)
    return value


def sanitize_request(request):
    """
    Return a copy of a request with every user-supplied string escaped.
    Absent optional fields stay None. For generic emails the raw ``html``
    body and the addressing fields are left as sent.
    """
    fields = _SANITIZED_FIELDS.get(type(request))
    if fields is None:
        raise TypeError(f"Cannot sanitize {type(request).__name__}")

    updates = {}
    for field in fields:
        value = getattr(request, field)
        if value is not None:
            updates[field] = escape_html(value)

    return request.model_copy(update=updates)
