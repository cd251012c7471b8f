"""MockTranscriptionClient — deterministic local backend, no network."""
from typing import Iterable

from scribegate.constants import MOCK_SEGMENTS, PROVIDER_MOCK
from scribegate.models import TranscriptionRequest
from scribegate.transcription.client import TranscriptionClient


class MockTranscriptionClient(TranscriptionClient):

    def __init__(self, segments: Iterable[str] = MOCK_SEGMENTS) -> None:
        self._segments = tuple(segments)
        self.calls = 0

    @property
    def name(self) -> str:
        return PROVIDER_MOCK

    async def transcribe(self, request: TranscriptionRequest) -> tuple[str, ...]:
        self.calls += 1
        return self._segments
