"""Shared test fixtures for recicla-bot."""

from __future__ import annotations

import json
from typing import Any

import httpx
import pytest

from recicla_bot.config import Settings
from recicla_bot.webhook.classifier import ClassifierClient
from recicla_bot.webhook.pipeline import ClassificationPipeline
from recicla_bot.webhook.telegram import TelegramClient

BOT_TOKEN = "123:ABC"
CLASSIFIER_URL = "https://classifier.test/predict"
JPEG_BYTES = bytes([0xFF, 0xD8])


# --- Factory functions for test data ---


def make_photo(file_id: str, width: int = 90, **kwargs: Any) -> dict[str, Any]:
    defaults: dict[str, Any] = {
        "file_id": file_id,
        "file_unique_id": f"u-{file_id}",
        "width": width,
        "height": width,
        "file_size": width * 100,
    }
    defaults.update(kwargs)
    return defaults


def make_update(
    chat_id: int = 42,
    photo: list[dict[str, Any]] | None = None,
    document: dict[str, Any] | None = None,
    update_id: int = 1,
    **message_fields: Any,
) -> dict[str, Any]:
    message: dict[str, Any] = {"message_id": 7, "chat": {"id": chat_id}}
    if photo is not None:
        message["photo"] = photo
    if document is not None:
        message["document"] = document
    message.update(message_fields)
    return {"update_id": update_id, "message": message}


def encode(update: dict[str, Any]) -> bytes:
    return json.dumps(update).encode()


# --- Fake upstream services ---


class FakeTelegramAPI:
    """Bot API stand-in served through httpx.MockTransport."""

    def __init__(
        self,
        file_path: str = "p1",
        content: bytes = JPEG_BYTES,
        resolve_status: int = 200,
        resolve_body: Any = None,
        download_status: int = 200,
        send_status: int = 200,
    ) -> None:
        self.file_path = file_path
        self.content = content
        self.resolve_status = resolve_status
        self.resolve_body = resolve_body
        self.download_status = download_status
        self.send_status = send_status
        self.requests: list[httpx.Request] = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path

        if path.startswith(f"/file/bot{BOT_TOKEN}/"):
            return httpx.Response(self.download_status, content=self.content)
        if path == f"/bot{BOT_TOKEN}/getFile":
            body = self.resolve_body
            if body is None:
                body = {
                    "ok": True,
                    "result": {
                        "file_id": request.url.params["file_id"],
                        "file_path": self.file_path,
                    },
                }
            return httpx.Response(self.resolve_status, json=body)
        if path == f"/bot{BOT_TOKEN}/sendMessage":
            return httpx.Response(self.send_status, json={"ok": self.send_status == 200})
        return httpx.Response(404)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    def calls(self, kind: str) -> list[httpx.Request]:
        """Recorded requests of one kind: getFile, download, or sendMessage."""
        if kind == "download":
            return [r for r in self.requests if r.url.path.startswith("/file/")]
        return [r for r in self.requests if r.url.path.endswith(f"/{kind}")]


class FakeClassifier:
    """Classifier endpoint stand-in served through httpx.MockTransport."""

    def __init__(
        self,
        label: str = "plastic",
        probability: str = "87%",
        status: int = 200,
        body: bytes | None = None,
    ) -> None:
        self.status = status
        self.body = body if body is not None else json.dumps(
            {"class": label, "probability": probability},
        ).encode()
        self.requests: list[httpx.Request] = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return httpx.Response(self.status, content=self.body)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)


def make_pipeline(
    telegram_api: FakeTelegramAPI,
    classifier: FakeClassifier,
    **kwargs: Any,
) -> ClassificationPipeline:
    return ClassificationPipeline(
        telegram=TelegramClient(BOT_TOKEN, transport=telegram_api.transport),
        classifier=ClassifierClient(CLASSIFIER_URL, transport=classifier.transport),
        **kwargs,
    )


@pytest.fixture
def settings() -> Settings:
    return Settings(bot_token=BOT_TOKEN, classifier_url=CLASSIFIER_URL)


@pytest.fixture
def telegram_api() -> FakeTelegramAPI:
    return FakeTelegramAPI()


@pytest.fixture
def classifier() -> FakeClassifier:
    return FakeClassifier()
