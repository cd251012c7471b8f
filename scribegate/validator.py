"""AudioPayload validation — pure checks over an upload before any provider call."""
from typing import Iterable, Optional

from scribegate.errors import EmptyPayloadError, PayloadTooLargeError, UnsupportedFormatError
from scribegate.models import AudioPayload


def normalize_mime_type(declared: Optional[str]) -> str:
    """'Audio/WAV; codecs=1' → 'audio/wav'. None → ''."""
    return (declared or "").split(";", 1)[0].strip().lower()


def validate(
    data: bytes,
    declared_type: Optional[str],
    *,
    allowed_types: Iterable[str],
    max_bytes: int,
    sample_rate_hz: Optional[int] = None,
    encoding: Optional[str] = None,
) -> AudioPayload:
    """Return an immutable AudioPayload or raise a PayloadValidationError.

    Checks run empty → format → size, so an empty upload with a bogus type
    reports emptiness first.
    """
    mime_type = normalize_mime_type(declared_type)
    allowed = frozenset(map(normalize_mime_type, allowed_types))

    match len(data):
        case 0:
            raise EmptyPayloadError()
        case _ if mime_type not in allowed:
            raise UnsupportedFormatError(declared_type)
        case size if size > max_bytes:
            raise PayloadTooLargeError(size, max_bytes)
        case _:
            return AudioPayload(
                data=bytes(data),
                mime_type=mime_type,
                sample_rate_hz=sample_rate_hz,
                encoding=encoding,
            )
