"""Webhook classification pipeline.

Runs one inbound update through four stages, strictly in order:
1. Decode the update and pick the file identifier
2. Fetch the file from Telegram (getFile + download)
3. Classify the image bytes
4. Reply to the chat with the localized label

The first failing stage aborts the request. The chat user is not notified
of failures; the webhook caller gets 400 or 500.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

from recicla_bot.models import AuditEvent, AuditEventType, RiskLevel
from recicla_bot.webhook.decoder import decode_update, select_file_id
from recicla_bot.webhook.errors import PipelineError
from recicla_bot.webhook.reply import build_reply

if TYPE_CHECKING:
    from recicla_bot.audit.logger import AuditLogger
    from recicla_bot.webhook.classifier import ClassifierClient
    from recicla_bot.webhook.telegram import TelegramClient

logger = logging.getLogger(__name__)


class PipelineStage(str, Enum):
    DECODING = "decoding"
    FETCHING = "fetching"
    CLASSIFYING = "classifying"
    REPLYING = "replying"
    DONE = "done"
    FAILED = "failed"


@dataclass
class WebhookResponse:
    """Outcome of one webhook request."""

    status_code: int
    stage: PipelineStage
    error: str | None = None


class ClassificationPipeline:
    """Stateless per-request orchestrator; safe to share across requests."""

    def __init__(
        self,
        telegram: TelegramClient,
        classifier: ClassifierClient,
        audit_logger: AuditLogger | None = None,
    ) -> None:
        self._telegram = telegram
        self._classifier = classifier
        self._audit = audit_logger

    async def handle(self, body: bytes) -> WebhookResponse:
        stage = PipelineStage.DECODING
        chat_id: int | None = None

        try:
            update = decode_update(body)
            chat_id = update.message.chat.id
            file_id = select_file_id(update.message)

            stage = PipelineStage.FETCHING
            image = await self._telegram.fetch(file_id)

            stage = PipelineStage.CLASSIFYING
            result = await self._classifier.classify(image)

            stage = PipelineStage.REPLYING
            reply = build_reply(chat_id, result)
            await self._telegram.send_message(reply)
        except PipelineError as exc:
            logger.error("Webhook failed while %s: %s", stage.value, exc)
            self._audit_failure(chat_id, stage, exc)
            return WebhookResponse(
                status_code=exc.status_code,
                stage=PipelineStage.FAILED,
                error=str(exc),
            )

        self._record(AuditEvent(
            event_type=AuditEventType.CLASSIFICATION,
            chat_id=chat_id,
            action="classify",
            result="success",
            risk_level=RiskLevel.INFO,
            details={
                "update_id": update.update_id,
                "file_id": file_id,
                "label": result.label,
                "probability": result.probability,
            },
        ))

        return WebhookResponse(status_code=200, stage=PipelineStage.DONE)

    def _audit_failure(
        self, chat_id: int | None, stage: PipelineStage, exc: PipelineError,
    ) -> None:
        self._record(AuditEvent(
            event_type=AuditEventType.WEBHOOK_FAILURE,
            chat_id=chat_id,
            action=stage.value,
            result="failure",
            risk_level=RiskLevel.MEDIUM if exc.status_code >= 500 else RiskLevel.LOW,
            details={
                "error_kind": exc.kind,
                "status_code": exc.status_code,
                "message": str(exc),
            },
        ))

    def _record(self, event: AuditEvent) -> None:
        """Write an audit event. A failed write is logged and never alters the response."""
        if not self._audit:
            return
        try:
            self._audit.log(event)
        except OSError:
            logger.exception("Failed to write audit event %s", event.event_type.value)
