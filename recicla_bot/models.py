"""Shared Pydantic data models for recicla-bot."""

from __future__ import annotations

from datetime import UTC, datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

# --- Enums ---


class AuditEventType(str, Enum):
    CLASSIFICATION = "classification"
    WEBHOOK_FAILURE = "webhook_failure"


class RiskLevel(str, Enum):
    MEDIUM = "medium"
    LOW = "low"
    INFO = "info"


# --- Telegram update models ---
# Unknown fields are ignored.


class Chat(BaseModel):
    id: int


class PhotoSize(BaseModel):
    file_id: str
    file_unique_id: str = ""
    width: int = 0
    height: int = 0
    file_size: int = 0


class Document(BaseModel):
    file_id: str = ""
    file_name: str | None = None
    mime_type: str | None = None
    file_size: int | None = None


class Message(BaseModel):
    chat: Chat
    photo: list[PhotoSize] = Field(default_factory=list)
    document: Document | None = None
    text: str | None = None
    caption: str | None = None


class InboundUpdate(BaseModel):
    update_id: int = 0
    message: Message


# --- Telegram file models ---


class FileDescriptor(BaseModel):
    model_config = ConfigDict(frozen=True)

    file_id: str
    file_path: str
    file_size: int | None = None


# --- Classifier models ---


class ClassificationResult(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    label: str = Field(alias="class")
    probability: str


# --- Reply models ---


class OutboundReply(BaseModel):
    model_config = ConfigDict(frozen=True)

    chat_id: int
    text: str


# --- Audit Models ---


def _now_iso() -> str:
    return datetime.now(UTC).isoformat()


class AuditEvent(BaseModel):
    timestamp: str = Field(default_factory=_now_iso)
    event_type: AuditEventType
    chat_id: int | None = None
    action: str
    result: str  # "success" | "failure"
    risk_level: RiskLevel
    details: dict[str, object] | None = None
