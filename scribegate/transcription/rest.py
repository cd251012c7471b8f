"""RestTranscriptionClient — cloud speech REST backend over httpx.

Speaks the Google Speech-to-Text v1 ``speech:recognize`` shape:

    POST {api_url}
    Authorization: Bearer <key>
    {"config": {"encoding": ..., "sampleRateHertz": ..., "languageCode": ...},
     "audio": {"content": <base64>}}

and reads back ``{"results": [{"alternatives": [{"transcript": ...}]}]}``.
"""
import base64
import logging
from typing import Any, Optional

import httpx

from scribegate.constants import DEFAULT_REQUEST_TIMEOUT, PROVIDER_REST, REST_AUTH_SCHEME
from scribegate.errors import ProviderError, ProviderErrorKind, status_to_kind
from scribegate.models import TranscriptionRequest
from scribegate.transcription.client import TranscriptionClient

logger = logging.getLogger(__name__)


def build_body(request: TranscriptionRequest) -> dict[str, Any]:
    config: dict[str, Any] = {"languageCode": request.language_code}
    match request.encoding:
        case str() as enc if enc:
            config["encoding"] = enc
        case _:
            pass
    match request.sample_rate_hz:
        case int() as rate if rate > 0:
            config["sampleRateHertz"] = rate
        case _:
            pass
    return {
        "config": config,
        "audio": {"content": base64.standard_b64encode(request.audio).decode("ascii")},
    }


def parse_segments(body: Any) -> tuple[str, ...]:
    """First alternative of every result, in order. Raises ValueError on a bad shape."""
    match body:
        case dict() if "results" not in body:
            return ()
        case {"results": list() as results}:
            pass
        case _:
            raise ValueError("response body has no results list")

    segments = []
    for result in results:
        match result:
            case {"alternatives": [{"transcript": str() as text}, *_]}:
                segments.append(text.strip())
            case {"alternatives": []}:
                continue
            case {"alternatives": [dict() as alt, *_]} if "transcript" not in alt:
                continue
            case dict() if "alternatives" not in result:
                continue
            case _:
                raise ValueError(f"unexpected result entry: {result!r}"[:200])
    return tuple(s for s in segments if s)


class RestTranscriptionClient(TranscriptionClient):

    def __init__(
        self,
        api_key: str,
        api_url: str,
        timeout: float = DEFAULT_REQUEST_TIMEOUT,
        http_client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self._api_url = api_url
        self._headers = {"Authorization": f"{REST_AUTH_SCHEME} {api_key}"}
        self._client = http_client or httpx.AsyncClient(timeout=timeout)

    @property
    def name(self) -> str:
        return PROVIDER_REST

    async def transcribe(self, request: TranscriptionRequest) -> tuple[str, ...]:
        try:
            response = await self._client.post(
                self._api_url,
                json=build_body(request),
                headers=self._headers,
            )
        except httpx.TimeoutException as exc:
            raise ProviderError(
                ProviderErrorKind.UNAVAILABLE, f"timeout: {exc}", provider=self.name
            ) from exc
        except httpx.TransportError as exc:
            raise ProviderError(
                ProviderErrorKind.UNAVAILABLE, f"transport error: {exc}", provider=self.name
            ) from exc

        match response.status_code:
            case s if 200 <= s <= 299:
                pass
            case s:
                raise ProviderError(
                    status_to_kind(s), response.text[:200], status=s, provider=self.name
                )

        try:
            return parse_segments(response.json())
        except ValueError as exc:
            logger.error("Unreadable response from %s: %s", self.name, exc)
            raise ProviderError(
                ProviderErrorKind.MALFORMED,
                str(exc),
                status=response.status_code,
                provider=self.name,
            ) from exc

    async def aclose(self) -> None:
        await self._client.aclose()
