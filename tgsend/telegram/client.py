"""Telegram Bot API client for sendMessage.

One outbound POST per call, no retries. Failures come back as a tagged
SendResult instead of an exception so callers can switch on the kind.
"""

from __future__ import annotations

import json
import logging
from typing import Any

import httpx

from tgsend.config import DEFAULT_API_BASE, TOKEN_ENV_VAR, ConfigurationError
from tgsend.models import FailureKind, OutboundPayload, SendFailure, SendResult

logger = logging.getLogger(__name__)


class TelegramClient:
    """Sends text messages through the Telegram Bot API."""

    def __init__(
        self,
        bot_token: str,
        api_base: str = DEFAULT_API_BASE,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._bot_token = bot_token
        self._api_base = api_base.rstrip("/")
        self._timeout = timeout
        self._transport = transport

    @property
    def send_url(self) -> str:
        return f"{self._api_base}/bot{self._bot_token}/sendMessage"

    async def send_message(self, chat_id: str, text: str) -> SendResult:
        try:
            payload = OutboundPayload(chat_id=chat_id, text=text)
            async with self._client() as client:
                resp = await client.post(self.send_url, json=payload.model_dump())
        except httpx.TransportError as exc:
            return self._failed(SendFailure(
                kind=FailureKind.NETWORK,
                message=str(exc) or type(exc).__name__,
            ))
        except Exception as exc:  # classified and reported to the caller
            return self._failed(classify_error(exc))

        if not resp.is_success:
            body = _parse_body(resp)
            description = body.get("description") if isinstance(body, dict) else None
            return self._failed(SendFailure(
                kind=FailureKind.UPSTREAM,
                message=f"Request failed with status code {resp.status_code}",
                status_code=resp.status_code,
                body=body,
                description=description if isinstance(description, str) else None,
            ))

        try:
            data = resp.json()
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            return self._failed(SendFailure(
                kind=FailureKind.UNKNOWN,
                message=f"Invalid JSON in Telegram response: {exc}",
                status_code=resp.status_code,
            ))
        if not isinstance(data, dict):
            return self._failed(SendFailure(
                kind=FailureKind.UNKNOWN,
                message="Unexpected Telegram response shape",
                status_code=resp.status_code,
                body=data,
            ))
        return SendResult.success(data)

    def _client(self) -> httpx.AsyncClient:
        kwargs: dict[str, Any] = {"verify": True}
        if self._timeout is not None:
            kwargs["timeout"] = self._timeout
        if self._transport is not None:
            kwargs["transport"] = self._transport
        return httpx.AsyncClient(**kwargs)

    def _failed(self, failure: SendFailure) -> SendResult:
        # httpx error strings can embed the request URL, which carries the token
        failure = failure.model_copy(update={"message": self._redact(failure.message)})
        logger.error("Failed to send Telegram message: %s", failure.message)
        if failure.body is not None:
            logger.error("Telegram error details: %s", failure.body)
        return SendResult.fail(failure)

    def _redact(self, text: str) -> str:
        return text.replace(self._bot_token, "<redacted>")


def classify_error(exc: Exception) -> SendFailure:
    """Map a local exception to a config or unknown failure."""
    message = str(exc) or type(exc).__name__
    if isinstance(exc, ConfigurationError) or TOKEN_ENV_VAR in message:
        kind = FailureKind.CONFIG
    else:
        kind = FailureKind.UNKNOWN
    return SendFailure(kind=kind, message=message)


def _parse_body(resp: httpx.Response) -> Any:
    try:
        return resp.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        return resp.text
