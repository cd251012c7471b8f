"""Error taxonomy for the transcription pipeline.

Every failure surfaces as one of these. ``http_status`` is how the gateway
renders it; ``user_message`` is the text shown to the caller.
"""
from enum import Enum
from typing import Optional

from scribegate.constants import (
    ERR_EMPTY_PAYLOAD,
    ERR_EMPTY_TRANSCRIPT,
    ERR_PAYLOAD_TOO_LARGE,
    ERR_PROVIDER_MALFORMED,
    ERR_PROVIDER_RATE_LIMITED,
    ERR_PROVIDER_UNAUTHORIZED,
    ERR_PROVIDER_UNAVAILABLE,
    ERR_PROVIDER_UNKNOWN,
    ERR_UNSUPPORTED_FORMAT,
)


class ScribegateError(Exception):
    http_status: int = 500

    @property
    def user_message(self) -> str:
        return str(self)


# ── payload validation ────────────────────────────────────────────────────────


class PayloadValidationError(ScribegateError):
    """The upload itself is unusable; the caller must fix it."""

    http_status = 400


class EmptyPayloadError(PayloadValidationError):

    def __init__(self) -> None:
        super().__init__(ERR_EMPTY_PAYLOAD)


class UnsupportedFormatError(PayloadValidationError):

    def __init__(self, declared_type: Optional[str]) -> None:
        self.declared_type = declared_type
        super().__init__(ERR_UNSUPPORTED_FORMAT % (declared_type or "<missing>"))


class PayloadTooLargeError(PayloadValidationError):

    def __init__(self, size: int, limit: int) -> None:
        self.size = size
        self.limit = limit
        super().__init__(ERR_PAYLOAD_TOO_LARGE % (size, limit))


# ── provider failures ─────────────────────────────────────────────────────────


class ProviderErrorKind(Enum):
    UNAUTHORIZED = "unauthorized"
    RATE_LIMITED = "rate_limited"
    UNAVAILABLE = "unavailable"
    MALFORMED = "malformed"
    UNKNOWN = "unknown"


_KIND_STATUS = {
    ProviderErrorKind.UNAUTHORIZED: 502,
    ProviderErrorKind.RATE_LIMITED: 503,
    ProviderErrorKind.UNAVAILABLE: 503,
    ProviderErrorKind.MALFORMED: 502,
    ProviderErrorKind.UNKNOWN: 500,
}

_KIND_MESSAGE = {
    ProviderErrorKind.UNAUTHORIZED: ERR_PROVIDER_UNAUTHORIZED,
    ProviderErrorKind.RATE_LIMITED: ERR_PROVIDER_RATE_LIMITED,
    ProviderErrorKind.UNAVAILABLE: ERR_PROVIDER_UNAVAILABLE,
    ProviderErrorKind.MALFORMED: ERR_PROVIDER_MALFORMED,
    ProviderErrorKind.UNKNOWN: ERR_PROVIDER_UNKNOWN,
}


class ProviderError(ScribegateError):
    """A provider call failed. ``status`` and ``message`` are the provider's raw values."""

    def __init__(
        self,
        kind: ProviderErrorKind,
        message: str,
        status: Optional[int] = None,
        provider: Optional[str] = None,
    ) -> None:
        self.kind = kind
        self.message = message
        self.status = status
        self.provider = provider
        super().__init__(f"[{provider or '?'}] {kind.value} (status={status}): {message}")

    @property
    def retryable(self) -> bool:
        return self.kind in (ProviderErrorKind.RATE_LIMITED, ProviderErrorKind.UNAVAILABLE)

    @property
    def http_status(self) -> int:  # type: ignore[override]
        return _KIND_STATUS[self.kind]

    @property
    def user_message(self) -> str:
        return _KIND_MESSAGE[self.kind]


def status_to_kind(status: int) -> ProviderErrorKind:
    """Map a non-2xx transport status onto the provider error taxonomy."""
    match status:
        case 401 | 403:
            return ProviderErrorKind.UNAUTHORIZED
        case 429:
            return ProviderErrorKind.RATE_LIMITED
        case s if 500 <= s <= 599:
            return ProviderErrorKind.UNAVAILABLE
        case _:
            return ProviderErrorKind.UNKNOWN


# ── transcript assembly ───────────────────────────────────────────────────────


class EmptyTranscriptError(ScribegateError):
    """The provider answered successfully but recognized nothing."""

    http_status = 422

    def __init__(self, provider: Optional[str] = None) -> None:
        self.provider = provider
        super().__init__(ERR_EMPTY_TRANSCRIPT)
