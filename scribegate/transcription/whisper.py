"""WhisperTranscriptionClient — OpenAI Whisper speech-to-text backend."""
import io
import logging
from typing import Any

import openai
from openai import AsyncOpenAI

from scribegate.constants import (
    MIME_EXTENSIONS,
    PROVIDER_WHISPER,
    WHISPER_FILENAME_PREFIX,
    WHISPER_MODEL,
    WHISPER_RESPONSE_FORMAT,
)
from scribegate.errors import ProviderError, ProviderErrorKind, status_to_kind
from scribegate.models import TranscriptionRequest
from scribegate.transcription.client import TranscriptionClient

logger = logging.getLogger(__name__)


def _whisper_language(language_code: str) -> str:
    """Whisper takes ISO-639-1: 'en-US' → 'en'."""
    return language_code.split("-", 1)[0].lower()


def _segments_from_response(response: Any) -> tuple[str, ...]:
    segments = getattr(response, "segments", None)
    text = getattr(response, "text", None)
    match (segments, text):
        case (list() as segs, _) if segs:
            return tuple(t for t in (str(s.text).strip() for s in segs) if t)
        case (_, str() as t):
            return (t.strip(),) if t.strip() else ()
        case _:
            raise ValueError("response carries neither segments nor text")


def _error_kind(exc: openai.APIError) -> ProviderErrorKind:
    match exc:
        case openai.AuthenticationError() | openai.PermissionDeniedError():
            return ProviderErrorKind.UNAUTHORIZED
        case openai.RateLimitError():
            return ProviderErrorKind.RATE_LIMITED
        case openai.APIConnectionError() | openai.InternalServerError():
            return ProviderErrorKind.UNAVAILABLE
        case openai.APIResponseValidationError():
            return ProviderErrorKind.MALFORMED
        case openai.APIStatusError(status_code=status):
            return status_to_kind(status)
        case _:
            return ProviderErrorKind.UNKNOWN


class WhisperTranscriptionClient(TranscriptionClient):

    def __init__(self, api_key: str, model: str = WHISPER_MODEL) -> None:
        # Retries belong to the orchestrator; the SDK must not add its own.
        self._client = AsyncOpenAI(api_key=api_key, max_retries=0)
        self._model = model

    @property
    def name(self) -> str:
        return PROVIDER_WHISPER

    async def transcribe(self, request: TranscriptionRequest) -> tuple[str, ...]:
        audio_file = io.BytesIO(request.audio)
        extension = MIME_EXTENSIONS.get(request.mime_type, "bin")
        audio_file.name = f"{WHISPER_FILENAME_PREFIX}.{extension}"
        try:
            response = await self._client.audio.transcriptions.create(
                model=self._model,
                file=audio_file,
                language=_whisper_language(request.language_code),
                response_format=WHISPER_RESPONSE_FORMAT,
            )
        except openai.APIError as exc:
            status = getattr(exc, "status_code", None)
            raise ProviderError(
                _error_kind(exc), str(exc)[:200], status=status, provider=self.name
            ) from exc

        try:
            return _segments_from_response(response)
        except ValueError as exc:
            logger.error("Unreadable response from %s: %s", self.name, exc)
            raise ProviderError(
                ProviderErrorKind.MALFORMED, str(exc), provider=self.name
            ) from exc

    async def aclose(self) -> None:
        await self._client.close()
