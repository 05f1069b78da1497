"""FastAPI application exposing the sendMessage endpoint."""

from __future__ import annotations

import json
import logging
from typing import Any

from fastapi import FastAPI, Request, Response
from fastapi.responses import JSONResponse

from tgsend.api.cors import CORSHeadersMiddleware
from tgsend.config import Settings
from tgsend.models import (
    ApiResponse,
    FailureKind,
    SendFailure,
    SendResult,
    now_iso,
)
from tgsend.telegram.client import TelegramClient, classify_error

logger = logging.getLogger(__name__)

SEND_MESSAGE_PATH = "/api/sendMessage"

_FAILURE_STATUS: dict[FailureKind, int] = {
    FailureKind.UPSTREAM: 400,
    FailureKind.NETWORK: 503,
    FailureKind.CONFIG: 500,
    FailureKind.UNKNOWN: 500,
}

_MISSING_FAILURE = SendFailure(
    kind=FailureKind.UNKNOWN, message="Send failed without failure details",
)


def create_app_from_env() -> FastAPI:
    """Factory for uvicorn --factory: resolves settings once, fails without a token."""
    return create_app(Settings.from_env())


def create_app(
    settings: Settings,
    client: TelegramClient | None = None,
) -> FastAPI:
    """Create the app with an explicit settings object and optional client."""
    if client is None:
        client = TelegramClient(
            settings.bot_token,
            api_base=settings.api_base,
            timeout=settings.request_timeout,
        )
    app = FastAPI(docs_url=None, redoc_url=None, openapi_url=None)

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    async def send_message(request: Request) -> Response:
        if request.method == "OPTIONS":
            return Response(status_code=200)

        if request.method != "POST":
            return _json_response(405, ApiResponse(
                success=False, error="Method not supported. Use POST.",
            ))

        try:
            body = await _read_body(request)
            text = body.get("text")
            chat_id = body.get("id")

            if _is_blank(text):
                return _json_response(400, ApiResponse(
                    success=False,
                    error='Parameter "text" is required and must not be empty',
                ))
            if _is_blank(chat_id):
                return _json_response(400, ApiResponse(
                    success=False,
                    error='Parameter "id" (chat_id) is required and must not be empty',
                ))

            result = await client.send_message(chat_id, text)
        except Exception as exc:  # nothing escapes the route boundary
            logger.exception("Unexpected error handling sendMessage request")
            result = SendResult.fail(classify_error(exc))

        if result.ok:
            logger.info("Message sent to chat %s: %s...", chat_id, text[:50])
            return _json_response(200, ApiResponse(
                success=True,
                message="Message sent successfully",
                telegram_response=result.response,
                timestamp=now_iso(),
            ))

        return _failure_response(result.failure or _MISSING_FAILURE, settings)

    # methods=None accepts every verb so the method gate above answers them all
    app.add_route(SEND_MESSAGE_PATH, send_message, include_in_schema=False)
    app.add_middleware(CORSHeadersMiddleware)

    return app


async def _read_body(request: Request) -> dict[str, Any]:
    """Parse the JSON body; anything other than a JSON object reads as empty."""
    try:
        body = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        return {}
    return body if isinstance(body, dict) else {}


def _is_blank(value: object) -> bool:
    return not isinstance(value, str) or not value.strip()


def _failure_response(failure: SendFailure, settings: Settings) -> JSONResponse:
    logger.error(
        "Error processing request (%s): %s", failure.kind.value, failure.message,
    )
    if failure.kind is FailureKind.UPSTREAM:
        error = f"Telegram API error: {failure.description or failure.message}"
    elif failure.kind is FailureKind.NETWORK:
        error = "Could not connect to Telegram API"
    elif failure.kind is FailureKind.CONFIG:
        error = "Bot configuration error"
    else:
        error = "Internal server error"

    fields: dict[str, Any] = {"success": False, "error": error}
    if settings.development:
        fields["details"] = failure.message
    return _json_response(_FAILURE_STATUS[failure.kind], ApiResponse(**fields))


def _json_response(status_code: int, body: ApiResponse) -> JSONResponse:
    return JSONResponse(body.to_json(), status_code=status_code)
