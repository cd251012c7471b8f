"""TranscriptionOrchestrator — validate → build request → dispatch with retry → assemble."""
import asyncio
import logging
import time
from typing import Awaitable, Callable, Optional

from tenacity import (
    AsyncRetrying,
    before_sleep_log,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)

from scribegate.config import Config
from scribegate.constants import (
    MSG_DISPATCH,
    MSG_EMPTY_TRANSCRIPT,
    MSG_PAYLOAD_REJECTED,
    MSG_PROVIDER_FAILED,
    MSG_TIMEOUT,
    MSG_TRANSCRIBED,
)
from scribegate.errors import (
    EmptyTranscriptError,
    PayloadValidationError,
    ProviderError,
    ProviderErrorKind,
)
from scribegate.models import TranscriptionRequest, TranscriptionResult
from scribegate.transcription.client import TranscriptionClient
from scribegate.validator import validate

logger = logging.getLogger(__name__)

Sleep = Callable[[float], Awaitable[None]]


def _is_retryable(exc: BaseException) -> bool:
    match exc:
        case ProviderError() if exc.retryable:
            return True
        case _:
            return False


class TranscriptionOrchestrator:
    """Owns one request's lifecycle. Safe to share across concurrent requests.

    The only shared state is the read-only config, the provider client and the
    semaphore that caps in-flight provider calls process-wide.
    """

    def __init__(
        self,
        config: Config,
        client: TranscriptionClient,
        *,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        self._config = config
        self._client = client
        self._sleep = sleep
        self._semaphore = asyncio.Semaphore(config.max_concurrency)

    @property
    def provider_name(self) -> str:
        return self._client.name

    async def process(
        self,
        raw_bytes: bytes,
        declared_type: Optional[str],
        language_code: Optional[str] = None,
        *,
        sample_rate_hz: Optional[int] = None,
    ) -> TranscriptionResult:
        try:
            payload = validate(
                raw_bytes,
                declared_type,
                allowed_types=self._config.allowed_mime_types,
                max_bytes=self._config.max_payload_bytes,
                sample_rate_hz=sample_rate_hz,
            )
        except PayloadValidationError as exc:
            logger.info(MSG_PAYLOAD_REJECTED, exc)
            raise

        request = TranscriptionRequest.from_payload(
            payload, language_code or self._config.default_language
        )

        start = time.time()
        segments, attempts = await self._dispatch(request)
        elapsed = time.time() - start

        match segments:
            case ():
                logger.warning(MSG_EMPTY_TRANSCRIPT, self._client.name)
                raise EmptyTranscriptError(self._client.name)
            case _:
                pass

        result = TranscriptionResult(
            segments=segments, provider=self._client.name, attempts=attempts
        )
        logger.info(MSG_TRANSCRIBED, len(segments), self._client.name, elapsed, attempts)
        return result

    async def _dispatch(self, request: TranscriptionRequest) -> tuple[tuple[str, ...], int]:
        """Call the provider, retrying RateLimited/Unavailable with exponential backoff.

        Delay before retry n is min(base * 2**(n-1), max). Once attempts run out
        the last ProviderError is re-raised unchanged.
        """
        retrying = AsyncRetrying(
            stop=stop_after_attempt(self._config.retry_attempts),
            wait=wait_exponential(
                multiplier=self._config.retry_base_delay,
                max=self._config.retry_max_delay,
            ),
            retry=retry_if_exception(_is_retryable),
            before_sleep=before_sleep_log(logger, logging.WARNING),
            sleep=self._sleep,
            reraise=True,
        )
        segments: tuple[str, ...] = ()
        attempt_number = 0
        async for attempt in retrying:
            with attempt:
                attempt_number = attempt.retry_state.attempt_number
                segments = await self._attempt(request, attempt_number)
        return segments, attempt_number

    async def _attempt(self, request: TranscriptionRequest, attempt_number: int) -> tuple[str, ...]:
        name = self._client.name
        timeout = self._config.request_timeout
        async with self._semaphore:
            logger.info(
                MSG_DISPATCH,
                name,
                attempt_number,
                self._config.retry_attempts,
                len(request.audio),
                request.mime_type,
            )
            try:
                segments = await asyncio.wait_for(self._client.transcribe(request), timeout=timeout)
            except asyncio.TimeoutError as exc:
                logger.warning(MSG_TIMEOUT, timeout)
                raise ProviderError(
                    ProviderErrorKind.UNAVAILABLE, f"timed out after {timeout}s", provider=name
                ) from exc
            except ProviderError as exc:
                logger.warning(MSG_PROVIDER_FAILED, name, attempt_number, exc)
                raise
            except Exception as exc:
                logger.exception(MSG_PROVIDER_FAILED, name, attempt_number, exc)
                raise ProviderError(
                    ProviderErrorKind.UNKNOWN, repr(exc)[:200], provider=name
                ) from exc
        return tuple(segments)
