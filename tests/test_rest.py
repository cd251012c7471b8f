"""TDD: REST transcription backend tests written FIRST"""
import base64
import json

import httpx
import pytest

from scribegate.errors import ProviderError, ProviderErrorKind
from scribegate.models import TranscriptionRequest
from scribegate.transcription.client import TranscriptionClient
from scribegate.transcription.rest import RestTranscriptionClient, build_body, parse_segments

API_URL = "https://stt.example.com/v1/speech:recognize"


def make_request(audio: bytes = b"RIFF-audio", **kwargs) -> TranscriptionRequest:
    defaults = dict(
        audio=audio,
        mime_type="audio/wav",
        language_code="en-US",
        encoding="LINEAR16",
        sample_rate_hz=16000,
    )
    defaults.update(kwargs)
    return TranscriptionRequest(**defaults)


def make_client(handler) -> RestTranscriptionClient:
    http = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return RestTranscriptionClient(api_key="test-key", api_url=API_URL, http_client=http)


def google_body(*transcripts: str) -> dict:
    return {"results": [{"alternatives": [{"transcript": t, "confidence": 0.9}]} for t in transcripts]}


def test_rest_client_implements_abc():
    assert issubclass(RestTranscriptionClient, TranscriptionClient)


# ── wire format ───────────────────────────────────────────────────────────────


def test_build_body_base64_encodes_audio_and_sets_config():
    body = build_body(make_request(b"\x00\x01binary"))

    assert base64.b64decode(body["audio"]["content"]) == b"\x00\x01binary"
    assert body["config"] == {
        "languageCode": "en-US",
        "encoding": "LINEAR16",
        "sampleRateHertz": 16000,
    }


def test_build_body_omits_unknown_hints():
    body = build_body(make_request(encoding=None, sample_rate_hz=None))
    assert body["config"] == {"languageCode": "en-US"}


async def test_transcribe_posts_json_with_bearer_token():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["method"] = request.method
        seen["url"] = str(request.url)
        seen["auth"] = request.headers["authorization"]
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json=google_body("hello"))

    client = make_client(handler)
    audio = b"RIFF-bytes"
    request = make_request(audio)

    await client.transcribe(request)

    assert seen["method"] == "POST"
    assert seen["url"] == API_URL
    assert seen["auth"] == "Bearer test-key"
    assert base64.b64decode(seen["body"]["audio"]["content"]) == audio
    assert request.audio == audio


async def test_transcribe_returns_segments_in_provider_order():
    client = make_client(lambda _: httpx.Response(200, json=google_body(" hello ", "world")))

    segments = await client.transcribe(make_request())

    assert segments == ("hello", "world")


async def test_transcribe_empty_results_returns_no_segments():
    """Google answers silence with an empty object."""
    client = make_client(lambda _: httpx.Response(200, json={}))

    assert await client.transcribe(make_request()) == ()


# ── failure mapping ───────────────────────────────────────────────────────────


@pytest.mark.parametrize(
    "status, kind",
    [
        (401, ProviderErrorKind.UNAUTHORIZED),
        (403, ProviderErrorKind.UNAUTHORIZED),
        (429, ProviderErrorKind.RATE_LIMITED),
        (500, ProviderErrorKind.UNAVAILABLE),
        (503, ProviderErrorKind.UNAVAILABLE),
        (400, ProviderErrorKind.UNKNOWN),
        (404, ProviderErrorKind.UNKNOWN),
    ],
)
async def test_transcribe_maps_http_status(status, kind):
    client = make_client(lambda _: httpx.Response(status, text="provider said no"))

    with pytest.raises(ProviderError) as exc_info:
        await client.transcribe(make_request())

    assert exc_info.value.kind is kind
    assert exc_info.value.status == status
    assert exc_info.value.message == "provider said no"
    assert exc_info.value.provider == "rest"


async def test_transcribe_timeout_is_unavailable():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("slow", request=request)

    with pytest.raises(ProviderError) as exc_info:
        await make_client(handler).transcribe(make_request())

    assert exc_info.value.kind is ProviderErrorKind.UNAVAILABLE


async def test_transcribe_connection_failure_is_unavailable():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("refused", request=request)

    with pytest.raises(ProviderError) as exc_info:
        await make_client(handler).transcribe(make_request())

    assert exc_info.value.kind is ProviderErrorKind.UNAVAILABLE


@pytest.mark.parametrize(
    "response",
    [
        httpx.Response(200, text="<html>not json</html>"),
        httpx.Response(200, json=["a", "list"]),
        httpx.Response(200, json={"results": "nope"}),
        httpx.Response(200, json={"results": [{"alternatives": [{"transcript": 42}]}]}),
        httpx.Response(200, json={"results": ["string-entry"]}),
    ],
)
async def test_transcribe_schema_invalid_body_is_malformed(response):
    client = make_client(lambda _: response)

    with pytest.raises(ProviderError) as exc_info:
        await client.transcribe(make_request())

    assert exc_info.value.kind is ProviderErrorKind.MALFORMED


# ── parse_segments ────────────────────────────────────────────────────────────


def test_parse_segments_uses_first_alternative_only():
    body = {"results": [{"alternatives": [{"transcript": "best"}, {"transcript": "runner-up"}]}]}
    assert parse_segments(body) == ("best",)


def test_parse_segments_skips_blank_and_alternative_less_results():
    body = {
        "results": [
            {"alternatives": [{"transcript": "one"}]},
            {"alternatives": []},
            {"alternatives": [{"confidence": 0.1}]},
            {"resultEndTime": "3.2s"},
            {"alternatives": [{"transcript": "   "}]},
            {"alternatives": [{"transcript": "two"}]},
        ]
    }
    assert parse_segments(body) == ("one", "two")


async def test_aclose_closes_http_client():
    http = httpx.AsyncClient(transport=httpx.MockTransport(lambda _: httpx.Response(200)))
    client = RestTranscriptionClient(api_key="k", api_url=API_URL, http_client=http)

    await client.aclose()

    assert http.is_closed


# ── per-call timeout ──────────────────────────────────────────────────────────


async def test_built_http_client_uses_configured_timeout():
    client = RestTranscriptionClient(api_key="k", api_url=API_URL, timeout=42.0)

    assert client._client.timeout == httpx.Timeout(42.0)
    await client.aclose()


async def test_default_timeout_matches_request_timeout_default():
    client = RestTranscriptionClient(api_key="k", api_url=API_URL)

    assert client._client.timeout == httpx.Timeout(30.0)
    await client.aclose()
