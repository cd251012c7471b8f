from dataclasses import dataclass, field
from typing import Optional
import os
from dotenv import load_dotenv

from scribegate.constants import (
    DEFAULT_ALLOWED_MIME_TYPES,
    DEFAULT_HOST,
    DEFAULT_LANGUAGE,
    DEFAULT_MAX_CONCURRENCY,
    DEFAULT_MAX_PAYLOAD_BYTES,
    DEFAULT_PORT,
    DEFAULT_REQUEST_TIMEOUT,
    DEFAULT_REST_API_URL,
    DEFAULT_RETRY_ATTEMPTS,
    DEFAULT_RETRY_BASE_DELAY,
    DEFAULT_RETRY_MAX_DELAY,
    PROVIDER_MOCK,
    PROVIDER_REST,
    PROVIDERS,
    WHISPER_MODEL,
)


def _parse_number(name: str, raw: str, cast: type):
    try:
        return cast(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}") from None


@dataclass(frozen=True)
class Config:
    provider: str
    api_key: Optional[str] = field(repr=False)
    api_url: str
    whisper_model: str
    allowed_mime_types: tuple[str, ...]
    max_payload_bytes: int
    default_language: str
    retry_attempts: int
    retry_base_delay: float
    retry_max_delay: float
    request_timeout: float
    max_concurrency: int
    log_level: str
    host: str
    port: int

    @classmethod
    def from_env(cls) -> "Config":
        load_dotenv()

        provider = os.getenv("TRANSCRIPTION_PROVIDER", PROVIDER_REST).strip().lower()
        api_key = os.getenv("TRANSCRIPTION_API_KEY") or None
        api_url = os.getenv("TRANSCRIPTION_API_URL") or DEFAULT_REST_API_URL
        whisper_model = os.getenv("WHISPER_MODEL") or WHISPER_MODEL
        raw_types = os.getenv("ALLOWED_MIME_TYPES", DEFAULT_ALLOWED_MIME_TYPES)
        raw_max_bytes = os.getenv("MAX_PAYLOAD_BYTES", str(DEFAULT_MAX_PAYLOAD_BYTES))
        default_language = os.getenv("DEFAULT_LANGUAGE") or DEFAULT_LANGUAGE
        raw_attempts = os.getenv("RETRY_ATTEMPTS", str(DEFAULT_RETRY_ATTEMPTS))
        raw_base_delay = os.getenv("RETRY_BASE_DELAY", str(DEFAULT_RETRY_BASE_DELAY))
        raw_max_delay = os.getenv("RETRY_MAX_DELAY", str(DEFAULT_RETRY_MAX_DELAY))
        raw_timeout = os.getenv("REQUEST_TIMEOUT", str(DEFAULT_REQUEST_TIMEOUT))
        raw_concurrency = os.getenv("MAX_CONCURRENCY", str(DEFAULT_MAX_CONCURRENCY))
        log_level = os.getenv("LOG_LEVEL", "INFO")
        host = os.getenv("HOST", DEFAULT_HOST)
        raw_port = os.getenv("PORT", str(DEFAULT_PORT))

        mime_types = tuple(t.strip().lower() for t in raw_types.split(",") if t.strip())

        return cls._validate(
            provider=provider,
            api_key=api_key,
            api_url=api_url,
            whisper_model=whisper_model,
            allowed_mime_types=mime_types,
            max_payload_bytes=_parse_number("MAX_PAYLOAD_BYTES", raw_max_bytes, int),
            default_language=default_language,
            retry_attempts=_parse_number("RETRY_ATTEMPTS", raw_attempts, int),
            retry_base_delay=_parse_number("RETRY_BASE_DELAY", raw_base_delay, float),
            retry_max_delay=_parse_number("RETRY_MAX_DELAY", raw_max_delay, float),
            request_timeout=_parse_number("REQUEST_TIMEOUT", raw_timeout, float),
            max_concurrency=_parse_number("MAX_CONCURRENCY", raw_concurrency, int),
            log_level=log_level,
            host=host,
            port=_parse_number("PORT", raw_port, int),
        )

    @staticmethod
    def _validate(
        provider: str,
        api_key: Optional[str],
        api_url: str,
        whisper_model: str,
        allowed_mime_types: tuple[str, ...],
        max_payload_bytes: int,
        default_language: str,
        retry_attempts: int,
        retry_base_delay: float,
        retry_max_delay: float,
        request_timeout: float,
        max_concurrency: int,
        log_level: str,
        host: str,
        port: int,
    ) -> "Config":
        match provider:
            case p if p not in PROVIDERS:
                raise ValueError(
                    f"TRANSCRIPTION_PROVIDER must be one of {', '.join(PROVIDERS)}, got {p!r}"
                )
            case _:
                pass

        match (provider, api_key):
            case (p, None | "") if p != PROVIDER_MOCK:
                raise ValueError(f"TRANSCRIPTION_API_KEY must be set for provider {p!r}")
            case _:
                pass

        match allowed_mime_types:
            case ():
                raise ValueError("ALLOWED_MIME_TYPES must list at least one type")
            case _:
                pass

        match (max_payload_bytes, retry_attempts, max_concurrency):
            case (b, _, _) if b <= 0:
                raise ValueError("MAX_PAYLOAD_BYTES must be positive")
            case (_, a, _) if a < 1:
                raise ValueError("RETRY_ATTEMPTS must be at least 1")
            case (_, _, c) if c < 1:
                raise ValueError("MAX_CONCURRENCY must be at least 1")
            case _:
                pass

        match (retry_base_delay, retry_max_delay, request_timeout):
            case (b, m, _) if b < 0 or m < 0:
                raise ValueError("RETRY_BASE_DELAY and RETRY_MAX_DELAY must not be negative")
            case (_, _, t) if t <= 0:
                raise ValueError("REQUEST_TIMEOUT must be positive")
            case _:
                pass

        return Config(
            provider=provider,
            api_key=api_key,
            api_url=api_url,
            whisper_model=whisper_model,
            allowed_mime_types=allowed_mime_types,
            max_payload_bytes=max_payload_bytes,
            default_language=default_language,
            retry_attempts=retry_attempts,
            retry_base_delay=retry_base_delay,
            retry_max_delay=retry_max_delay,
            request_timeout=request_timeout,
            max_concurrency=max_concurrency,
            log_level=log_level,
            host=host,
            port=port,
        )
