from dataclasses import dataclass, field
from typing import Optional

from scribegate.constants import MIME_ENCODINGS, SEGMENT_SEPARATOR
from scribegate.errors import EmptyTranscriptError


@dataclass(frozen=True)
class AudioPayload:
    data: bytes = field(repr=False)
    mime_type: str
    sample_rate_hz: Optional[int] = None
    encoding: Optional[str] = None

    @property
    def size(self) -> int:
        return len(self.data)


@dataclass(frozen=True)
class TranscriptionRequest:
    audio: bytes = field(repr=False)
    mime_type: str
    language_code: str
    encoding: Optional[str] = None
    sample_rate_hz: Optional[int] = None

    @classmethod
    def from_payload(cls, payload: AudioPayload, language_code: str) -> "TranscriptionRequest":
        """Explicit encoding hint wins; otherwise derive it from the MIME type."""
        return cls(
            audio=payload.data,
            mime_type=payload.mime_type,
            language_code=language_code,
            encoding=payload.encoding or MIME_ENCODINGS.get(payload.mime_type),
            sample_rate_hz=payload.sample_rate_hz,
        )


@dataclass(frozen=True)
class TranscriptionResult:
    segments: tuple[str, ...]
    provider: str = ""
    attempts: int = 1
    separator: str = SEGMENT_SEPARATOR

    def __post_init__(self) -> None:
        match self.segments:
            case ():
                raise EmptyTranscriptError(self.provider or None)
            case _:
                pass

    @property
    def text(self) -> str:
        return self.separator.join(self.segments)
