"""Inbound Telegram update decoding and attachment selection."""

from __future__ import annotations

import logging

from pydantic import ValidationError

from recicla_bot.models import InboundUpdate, Message
from recicla_bot.webhook.errors import DecodeError, MissingAttachmentError

logger = logging.getLogger(__name__)


def decode_update(body: bytes) -> InboundUpdate:
    """Parse a raw webhook body into an InboundUpdate.

    Unknown fields are ignored. Malformed JSON or a payload without a
    message/chat raises DecodeError.
    """
    try:
        update = InboundUpdate.model_validate_json(body)
    except ValidationError as exc:
        raise DecodeError(f"Could not decode request body: {exc}") from exc

    logger.debug("Decoded update: %s", update.model_dump(exclude_none=True))
    return update


def select_file_id(message: Message) -> str:
    """Pick the file identifier to classify.

    An explicit document wins. Otherwise the last photo size is used, since
    Telegram orders sizes from smallest to largest.
    """
    if message.document is not None and message.document.file_id:
        return message.document.file_id

    if message.photo and message.photo[-1].file_id:
        return message.photo[-1].file_id

    raise MissingAttachmentError()
