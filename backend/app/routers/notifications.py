"""
send-email endpoint.

Every path accepts:
  OPTIONS  - CORS preflight, answered immediately with an empty body
  POST     - JSON notification request (see app.models.notification)

Request flow and outcomes:

  preflight                      -> 204, empty body
  rate limit exceeded            -> 429 {success: false, error}
  body is not valid JSON         -> 500 {success: false, error}
  unknown "type" / bad fields    -> 500 {success: false, error}
  validation rule violated       -> 500 {success: false, error: <rule message>}
  transport rejected the email   -> 500 {success: false, error: <transport text>}
  delivered                      -> 200 {success: true, data: <transport response>}

CORS headers are attached to every response.
"""

import logging
from typing import Any, Optional

from fastapi import APIRouter, Depends, Request, Response
from fastapi.responses import JSONResponse

from app.models.notification import NotificationResponse, parse_notification
from app.services.dispatcher import NotificationDispatcher, get_dispatcher
from app.services.notification_errors import (
    MalformedBody,
    NotificationError,
    RateLimitExceeded,
)
from app.services.rate_limiter import client_id_from_headers, rate_limiter

logger = logging.getLogger(__name__)

router = APIRouter()

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "authorization, x-client-info, apikey, content-type",
}


def _envelope(status_code: int, data: Any = None, error: Optional[str] = None) -> JSONResponse:
    """Success bodies always carry ``data`` (even null); failures carry ``error``."""
    body = NotificationResponse(success=error is None, data=data, error=error)
    if body.success:
        content = body.model_dump(include={"success", "data"})
    else:
        content = body.model_dump(include={"success", "error"})
    return JSONResponse(status_code=status_code, content=content, headers=CORS_HEADERS)


async def _read_json(request: Request) -> Any:
    try:
        return await request.json()
    except ValueError as exc:
        raise MalformedBody(f"Invalid JSON body: {exc}") from exc


@router.options("/{path:path}")
async def preflight(path: str) -> Response:
    return Response(status_code=204, headers=CORS_HEADERS)


@router.post("/{path:path}")
async def send_email(
    path: str,
    request: Request,
    dispatcher: NotificationDispatcher = Depends(get_dispatcher),
):
    """
    Validate, render and deliver one notification email.

    Rate limited per client (first X-Forwarded-For address, then
    CF-Connecting-IP, then a shared "unknown" bucket).
    """
    logger.info("Email function invoked")
    client_id = client_id_from_headers(request.headers)

    try:
        if not rate_limiter.admit(client_id):
            raise RateLimitExceeded(client_id)

        body = await _read_json(request)
        notification = parse_notification(body)
        logger.info(f"Request type: {notification.kind.value}")

        data = await dispatcher.dispatch(notification)
    except RateLimitExceeded as exc:
        logger.warning(f"Rate limit exceeded for IP: {exc.client_id}")
        return _envelope(exc.status_code, error=exc.message)
    except NotificationError as exc:
        logger.error(f"Error in send-email function: {exc.message}")
        return _envelope(exc.status_code, error=exc.message)
    except Exception as exc:
        logger.exception(f"Unexpected error in send-email function: {exc}")
        return _envelope(500, error="Unknown error")

    return _envelope(200, data=data)
