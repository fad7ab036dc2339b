"""Telegram Bot API client: file resolution, download, and replies.

File download is a two-step process:
1. GET /bot{token}/getFile?file_id=... -> file_path
2. GET /file/bot{token}/{file_path} -> raw bytes

The bot token is part of every URL, so URLs are never logged verbatim.
"""

from __future__ import annotations

import logging

import httpx
from pydantic import ValidationError

from recicla_bot.config import DEFAULT_MAX_FILE_SIZE
from recicla_bot.models import FileDescriptor, OutboundReply
from recicla_bot.webhook.errors import FetchError, FetchStage, SendError

logger = logging.getLogger(__name__)

_DEFAULT_API_BASE = "https://api.telegram.org"


class TelegramClient:
    """Calls the Telegram Bot API on behalf of one bot token."""

    def __init__(
        self,
        bot_token: str,
        api_base: str = _DEFAULT_API_BASE,
        timeout: float = 30.0,
        max_file_size: int = DEFAULT_MAX_FILE_SIZE,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._bot_token = bot_token
        self._api_base = api_base.rstrip("/")
        self._timeout = timeout
        self._max_file_size = max_file_size
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            verify=True, timeout=self._timeout, transport=self._transport,
        )

    def _redact(self, text: str) -> str:
        return text.replace(self._bot_token, "<token>")

    async def fetch(self, file_id: str) -> bytes:
        """Resolve a file identifier and download its bytes."""
        descriptor = await self.resolve_file(file_id)
        return await self.download_file(descriptor)

    async def resolve_file(self, file_id: str) -> FileDescriptor:
        """Resolve a file identifier to its remote path via getFile."""
        url = f"{self._api_base}/bot{self._bot_token}/getFile"

        try:
            async with self._client() as client:
                resp = await client.get(url, params={"file_id": file_id})
        except httpx.HTTPError as exc:
            raise FetchError(
                FetchStage.RESOLVE, f"getFile request failed: {self._redact(str(exc))}",
            ) from exc

        if resp.status_code != 200:
            raise FetchError(
                FetchStage.RESOLVE, f"getFile returned status {resp.status_code}",
            )

        try:
            data = resp.json()
        except ValueError as exc:
            raise FetchError(FetchStage.RESOLVE, "getFile returned invalid JSON") from exc

        if not isinstance(data, dict) or not data.get("ok"):
            raise FetchError(FetchStage.RESOLVE, f"getFile returned not-ok: {data}")

        try:
            descriptor = FileDescriptor.model_validate(data.get("result"))
        except ValidationError as exc:
            raise FetchError(FetchStage.RESOLVE, "getFile result has no file_path") from exc

        logger.debug("Resolved file %s to %s", descriptor.file_id, descriptor.file_path)
        return descriptor

    async def download_file(self, descriptor: FileDescriptor) -> bytes:
        """Download the bytes behind a resolved file.

        The size cap is enforced before download (via the reported
        file_size) and while streaming (on the running byte count).
        """
        if descriptor.file_size and descriptor.file_size > self._max_file_size:
            raise FetchError(
                FetchStage.DOWNLOAD,
                f"File too large: {descriptor.file_size} bytes (max {self._max_file_size})",
            )

        url = f"{self._api_base}/file/bot{self._bot_token}/{descriptor.file_path}"

        size_bytes = 0
        data = bytearray()
        try:
            async with self._client() as client:
                async with client.stream("GET", url) as resp:
                    if resp.status_code != 200:
                        raise FetchError(
                            FetchStage.DOWNLOAD,
                            f"file download returned status {resp.status_code}",
                        )
                    async for chunk in resp.aiter_bytes():
                        size_bytes += len(chunk)
                        if size_bytes > self._max_file_size:
                            raise FetchError(
                                FetchStage.DOWNLOAD,
                                f"Downloaded file too large: over {self._max_file_size} bytes",
                            )
                        data.extend(chunk)
        except httpx.HTTPError as exc:
            raise FetchError(
                FetchStage.DOWNLOAD, f"file download failed: {self._redact(str(exc))}",
            ) from exc

        logger.debug("Downloaded %d bytes for file %s", size_bytes, descriptor.file_id)
        return bytes(data)

    async def send_message(self, reply: OutboundReply) -> None:
        """Send a text reply to a chat via sendMessage.

        No retries: a non-200 response or a transport failure raises SendError.
        """
        url = f"{self._api_base}/bot{self._bot_token}/sendMessage"

        try:
            async with self._client() as client:
                resp = await client.post(url, json=reply.model_dump())
        except httpx.HTTPError as exc:
            raise SendError(
                f"sendMessage request failed: {self._redact(str(exc))}",
            ) from exc

        if resp.status_code != 200:
            raise SendError(
                f"sendMessage returned status {resp.status_code}",
                status_code=resp.status_code,
            )
