"""
Resend transactional-email transport.

Delivers an OutboundEmail through the Resend HTTP API and returns the
provider's JSON response (e.g. {"id": "..."}). Failures are raised as
TransportError carrying the provider's error text; nothing is retried and
the only timeout is the HTTP client's own.

Environment variables
---------------------
RESEND_API_KEY          API key sent as a Bearer token. Not validated here:
                        a missing key surfaces as a 401 from Resend.
RESEND_API_URL          Endpoint (default: https://api.resend.com/emails).
RESEND_TIMEOUT_SECONDS  HTTP timeout (default: 10).
"""

import logging
import os
from typing import Optional

import httpx

from app.models.notification import OutboundEmail

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "https://api.resend.com/emails"
DEFAULT_TIMEOUT_SECONDS = 10.0


class TransportError(Exception):
    """Resend rejected the email or could not be reached."""


class ResendTransport:
    def __init__(
        self,
        api_key: Optional[str],
        api_url: str = DEFAULT_API_URL,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.api_key = api_key
        self.api_url = api_url
        self.timeout = timeout
        self._client = client

    def _headers(self) -> dict:
        return {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self.api_key or ''}",
        }

    async def send(self, email: OutboundEmail) -> dict:
        """
        POST the email to Resend.

        Returns:
            The decoded JSON response body.

        Raises:
            TransportError: non-2xx response or network failure.
        """
        payload = email.to_payload()
        try:
            if self._client is not None:
                response = await self._client.post(self.api_url, json=payload, headers=self._headers())
            else:
                async with httpx.AsyncClient(timeout=self.timeout) as client:
                    response = await client.post(self.api_url, json=payload, headers=self._headers())
        except httpx.HTTPError as exc:
            raise TransportError(f"Resend request failed: {exc}") from exc

        if not response.is_success:
            raise TransportError(f"Resend API error: {response.text}")

        try:
            return response.json()
        except ValueError as exc:
            raise TransportError(f"Resend returned an invalid response: {response.text}") from exc


_transport: Optional[ResendTransport] = None


def get_transport() -> ResendTransport:
    """Return the process-wide transport, built from the environment on first use."""
    global _transport
    if _transport is None:
        _transport = ResendTransport(
            api_key=os.getenv("RESEND_API_KEY"),
            api_url=os.getenv("RESEND_API_URL", DEFAULT_API_URL),
            timeout=float(os.getenv("RESEND_TIMEOUT_SECONDS", str(DEFAULT_TIMEOUT_SECONDS))),
        )
    return _transport
