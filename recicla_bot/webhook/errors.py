"""Errors raised by the classification pipeline stages.

Each error carries the HTTP status the webhook caller receives when the
request fails with it.
"""

from __future__ import annotations

from enum import Enum


class FetchStage(str, Enum):
    RESOLVE = "resolve"
    DOWNLOAD = "download"


class ClassifyErrorKind(str, Enum):
    TIMEOUT = "timeout"
    TRANSPORT = "transport"
    STATUS = "status"
    DECODE = "decode"


class PipelineError(Exception):
    """Base class for errors that abort a webhook request."""

    status_code = 500
    kind = "pipeline"


class DecodeError(PipelineError):
    """Raised when the inbound body is not a well-formed update."""

    status_code = 400
    kind = "decode"


class MissingAttachmentError(PipelineError):
    """Raised when the message carries neither a document nor a photo."""

    status_code = 400
    kind = "missing_attachment"

    def __init__(self, message: str = "Message has no document or photo attachment") -> None:
        super().__init__(message)


class FetchError(PipelineError):
    """Raised when resolving or downloading a Telegram file fails."""

    kind = "fetch"

    def __init__(self, stage: FetchStage, message: str) -> None:
        self.stage = stage
        super().__init__(f"{stage.value}: {message}")


class ClassifyError(PipelineError):
    """Raised when the classifier call fails or returns an unusable body."""

    kind = "classify"

    def __init__(self, error_kind: ClassifyErrorKind, message: str) -> None:
        self.error_kind = error_kind
        super().__init__(f"{error_kind.value}: {message}")


class UnknownClassError(PipelineError):
    """Raised when the classifier label has no localized phrase."""

    kind = "unknown_class"

    def __init__(self, label: str) -> None:
        self.label = label
        super().__init__(f"Unknown classification label: {label!r}")


class SendError(PipelineError):
    """Raised when the sendMessage call fails."""

    kind = "send"

    def __init__(self, message: str, status_code: int | None = None) -> None:
        # status of the Telegram response, None for transport failures
        self.response_status = status_code
        super().__init__(message)
