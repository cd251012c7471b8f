"""Startup-time backend selection — the only place that branches on provider."""
from scribegate.config import Config
from scribegate.constants import PROVIDER_MOCK, PROVIDER_REST, PROVIDER_WHISPER
from scribegate.transcription.client import TranscriptionClient
from scribegate.transcription.mock import MockTranscriptionClient
from scribegate.transcription.rest import RestTranscriptionClient
from scribegate.transcription.whisper import WhisperTranscriptionClient


def create_transcription_client(config: Config) -> TranscriptionClient:
    match (config.provider, config.api_key):
        case (p, str() as key) if p == PROVIDER_REST and key:
            return RestTranscriptionClient(key, config.api_url, timeout=config.request_timeout)
        case (p, str() as key) if p == PROVIDER_WHISPER and key:
            return WhisperTranscriptionClient(key, config.whisper_model)
        case (p, _) if p == PROVIDER_MOCK:
            return MockTranscriptionClient()
        case (p, _):
            raise ValueError(f"Cannot build transcription client for provider {p!r}")
