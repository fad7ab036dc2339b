"""FastAPI webhook receiver application."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request, Response

from recicla_bot.audit.logger import AuditLogger
from recicla_bot.config import Settings
from recicla_bot.webhook.classifier import ClassifierClient
from recicla_bot.webhook.pipeline import ClassificationPipeline
from recicla_bot.webhook.telegram import TelegramClient

logger = logging.getLogger(__name__)

_MAX_WEBHOOK_BODY_SIZE = 1024 * 1024  # 1MB


def create_app_from_env() -> FastAPI:
    """Factory for uvicorn --factory: reads config from environment variables."""
    return create_app(Settings.from_env())


def build_pipeline(settings: Settings) -> ClassificationPipeline:
    telegram = TelegramClient(
        bot_token=settings.bot_token,
        api_base=settings.telegram_api_base,
        timeout=settings.telegram_timeout,
        max_file_size=settings.max_file_size,
    )
    classifier = ClassifierClient(
        endpoint=settings.classifier_url,
        timeout=settings.classifier_timeout,
        status_policy=settings.classifier_status_policy,
    )
    audit_logger = (
        AuditLogger(settings.audit_log_path) if settings.audit_log_path else None
    )
    return ClassificationPipeline(telegram, classifier, audit_logger)


def create_app(
    settings: Settings,
    pipeline: ClassificationPipeline | None = None,
) -> FastAPI:
    """Create the webhook app. Every POST, on any path, is a Telegram update."""
    app = FastAPI(docs_url=None, redoc_url=None, openapi_url=None)
    handler = pipeline or build_pipeline(settings)

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.post("/{path:path}")
    async def webhook(request: Request, path: str) -> Response:
        body = await request.body()
        if len(body) > _MAX_WEBHOOK_BODY_SIZE:
            logger.warning("Rejected webhook body of %d bytes on /%s", len(body), path)
            return Response(status_code=413)

        outcome = await handler.handle(body)
        return Response(status_code=outcome.status_code)

    return app
