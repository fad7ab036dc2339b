"""Client for the waste-classification endpoint."""

from __future__ import annotations

import logging
from dataclasses import dataclass

import httpx
from pydantic import ValidationError

from recicla_bot.config import ClassifierStatusPolicy
from recicla_bot.models import ClassificationResult
from recicla_bot.webhook.errors import ClassifyError, ClassifyErrorKind

logger = logging.getLogger(__name__)

_IMAGE_CONTENT_TYPE = "image/jpeg"


@dataclass(frozen=True)
class ClassifierResponse:
    """Raw HTTP outcome of a classifier call, before the body is trusted."""

    status_code: int
    content: bytes

    @property
    def ok(self) -> bool:
        return self.status_code == 200


class ClassifierClient:
    """POSTs raw image bytes to the classifier and parses its verdict."""

    def __init__(
        self,
        endpoint: str,
        timeout: float = 10.0,
        status_policy: ClassifierStatusPolicy = ClassifierStatusPolicy.ABORT,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._endpoint = endpoint
        self._timeout = timeout
        self._status_policy = status_policy
        self._transport = transport

    async def classify(self, image: bytes) -> ClassificationResult:
        """Classify an image.

        A non-200 status is always logged. With the ABORT policy it fails
        the call; with TRUST_BODY the body is decoded anyway.
        """
        response = await self._post(image)

        if not response.ok:
            logger.warning(
                "Classify request failed with response code: %d", response.status_code,
            )
            if self._status_policy is ClassifierStatusPolicy.ABORT:
                raise ClassifyError(
                    ClassifyErrorKind.STATUS,
                    f"classifier returned status {response.status_code}",
                )

        try:
            result = ClassificationResult.model_validate_json(response.content)
        except ValidationError as exc:
            raise ClassifyError(
                ClassifyErrorKind.DECODE, f"could not decode classifier response: {exc}",
            ) from exc

        logger.info("Classified image as %s (%s)", result.label, result.probability)
        return result

    async def _post(self, image: bytes) -> ClassifierResponse:
        try:
            async with httpx.AsyncClient(transport=self._transport) as client:
                resp = await client.post(
                    self._endpoint,
                    content=image,
                    headers={"Content-Type": _IMAGE_CONTENT_TYPE},
                    timeout=self._timeout,
                )
        except httpx.TimeoutException as exc:
            raise ClassifyError(
                ClassifyErrorKind.TIMEOUT,
                f"classifier did not answer within {self._timeout}s",
            ) from exc
        except httpx.HTTPError as exc:
            raise ClassifyError(
                ClassifyErrorKind.TRANSPORT, f"classify request failed: {exc}",
            ) from exc

        return ClassifierResponse(status_code=resp.status_code, content=resp.content)
