"""Localized reply text for classification results."""

from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType

from recicla_bot.models import ClassificationResult, OutboundReply
from recicla_bot.webhook.errors import UnknownClassError

LOCALIZED_CLASSES: Mapping[str, str] = MappingProxyType({
    "cardboard": "carton",
    "glass": "vidrio",
    "metal": "metal",
    "organic": "organico",
    "paper": "papel",
    "plastic": "plastico",
    "trash": "otros",
})

REPLY_TEMPLATE = "Hay un {probability} de probabilidad que su residuo sea de tipo: {label}"


def localize(label: str) -> str:
    """Return the Spanish phrase for a classifier label."""
    try:
        return LOCALIZED_CLASSES[label]
    except KeyError:
        raise UnknownClassError(label) from None


def format_reply(result: ClassificationResult) -> str:
    # probability is passed through verbatim
    return REPLY_TEMPLATE.format(
        probability=result.probability, label=localize(result.label),
    )


def build_reply(chat_id: int, result: ClassificationResult) -> OutboundReply:
    return OutboundReply(chat_id=chat_id, text=format_reply(result))
