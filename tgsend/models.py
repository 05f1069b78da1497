"""Pydantic models shared by the Telegram client and the HTTP layer."""

from __future__ import annotations

from datetime import UTC, datetime
from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

# --- Outbound ---


class OutboundPayload(BaseModel):
    """JSON body of a Telegram sendMessage call."""

    model_config = ConfigDict(frozen=True)

    chat_id: str
    text: str
    parse_mode: Literal["HTML"] = "HTML"


# --- Send result ---


class FailureKind(str, Enum):
    UPSTREAM = "upstream"
    NETWORK = "network"
    CONFIG = "config"
    UNKNOWN = "unknown"


class SendFailure(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: FailureKind
    message: str
    status_code: int | None = None
    body: Any = None
    description: str | None = None


class SendResult(BaseModel):
    """Outcome of one sendMessage call: a response on success, a failure otherwise."""

    model_config = ConfigDict(frozen=True)

    ok: bool
    response: dict[str, Any] | None = None
    failure: SendFailure | None = None

    @classmethod
    def success(cls, response: dict[str, Any]) -> SendResult:
        return cls(ok=True, response=response)

    @classmethod
    def fail(cls, failure: SendFailure) -> SendResult:
        return cls(ok=False, failure=failure)


# --- HTTP response ---


def now_iso() -> str:
    """Current UTC time as ISO-8601 with millisecond precision and a Z suffix."""
    stamp = datetime.now(UTC).isoformat(timespec="milliseconds")
    return stamp.replace("+00:00", "Z")


class ApiResponse(BaseModel):
    """Normalized JSON body; fields never passed to the constructor are omitted."""

    model_config = ConfigDict(populate_by_name=True)

    success: bool
    message: str | None = None
    error: str | None = None
    telegram_response: dict[str, Any] | None = Field(
        default=None, alias="telegramResponse",
    )
    timestamp: str | None = None
    details: str | None = None

    def to_json(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_unset=True)
