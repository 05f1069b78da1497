"""Shared test fixtures for telegram-send-api."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

import httpx
import pytest

from tgsend.config import Settings
from tgsend.telegram.client import TelegramClient

BOT_TOKEN = "123456:TEST-TOKEN"


def make_settings(**kwargs: Any) -> Settings:
    """Factory for Settings with sensible defaults."""
    defaults: dict[str, Any] = {"bot_token": BOT_TOKEN}
    defaults.update(kwargs)
    return Settings(**defaults)


def make_ok_body(chat_id: int = 12345, text: str = "Hello") -> dict[str, Any]:
    """A successful sendMessage body as Telegram returns it."""
    return {
        "ok": True,
        "result": {
            "message_id": 42,
            "chat": {"id": chat_id, "type": "private"},
            "date": 1700000000,
            "text": text,
        },
    }


class RecordingTransport(httpx.MockTransport):
    """MockTransport that keeps every request it sees."""

    def __init__(self, handler: Callable[[httpx.Request], httpx.Response]) -> None:
        self.requests: list[httpx.Request] = []

        def _record(request: httpx.Request) -> httpx.Response:
            self.requests.append(request)
            return handler(request)

        super().__init__(_record)


@pytest.fixture
def settings() -> Settings:
    return make_settings()


@pytest.fixture
def telegram_transport():
    """Build a RecordingTransport answering with a fixed status and JSON body."""

    def _create(
        status_code: int = 200, json_body: Any = None,
    ) -> RecordingTransport:
        body = make_ok_body() if json_body is None else json_body
        return RecordingTransport(
            lambda request: httpx.Response(status_code, json=body),
        )

    return _create


@pytest.fixture
def make_client():
    def _create(transport: httpx.AsyncBaseTransport) -> TelegramClient:
        return TelegramClient(BOT_TOKEN, transport=transport)

    return _create
