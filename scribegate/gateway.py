"""Request gateway — thin FastAPI layer around TranscriptionOrchestrator.process."""
import asyncio
import logging
from contextlib import asynccontextmanager
from typing import Awaitable, Optional, TypeVar

from fastapi import FastAPI, Query, Request
from fastapi.responses import JSONResponse

from scribegate.config import Config
from scribegate.constants import (
    DISCONNECT_POLL_INTERVAL,
    MSG_CLIENT_DISCONNECTED,
    MSG_SHUTDOWN,
    ROUTE_HEALTH,
    ROUTE_TRANSCRIBE,
)
from scribegate.errors import PayloadTooLargeError, ScribegateError
from scribegate.orchestrator import TranscriptionOrchestrator
from scribegate.transcription.client import TranscriptionClient

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _declared_length(request: Request) -> Optional[int]:
    raw = request.headers.get("content-length")
    match raw:
        case str() as value if value.isdigit():
            return int(value)
        case _:
            return None


async def _read_capped(request: Request, limit: int) -> bytes:
    """Buffer the body, failing as soon as it grows past ``limit`` bytes."""
    buffer = bytearray()
    async for chunk in request.stream():
        buffer.extend(chunk)
        match len(buffer):
            case size if size > limit:
                raise PayloadTooLargeError(size, limit)
            case _:
                pass
    return bytes(buffer)


async def _cancel_on_disconnect(request: Request, work: Awaitable[T]) -> T:
    """Await ``work``, cancelling it if the client goes away first."""
    task = asyncio.ensure_future(work)
    try:
        while not task.done():
            done, _ = await asyncio.wait({task}, timeout=DISCONNECT_POLL_INTERVAL)
            if done:
                break
            if await request.is_disconnected():
                logger.info(MSG_CLIENT_DISCONNECTED)
                task.cancel()
                break
        return await task
    finally:
        if not task.done():
            task.cancel()


def create_app(
    config: Config,
    client: TranscriptionClient,
    orchestrator: Optional[TranscriptionOrchestrator] = None,
) -> FastAPI:
    orchestrator = orchestrator or TranscriptionOrchestrator(config, client)

    @asynccontextmanager
    async def lifespan(_: FastAPI):
        yield
        logger.info(MSG_SHUTDOWN, client.name)
        await client.aclose()

    app = FastAPI(title="scribegate", lifespan=lifespan)

    @app.exception_handler(ScribegateError)
    async def _render_error(_: Request, exc: ScribegateError) -> JSONResponse:
        return JSONResponse(status_code=exc.http_status, content={"error": exc.user_message})

    @app.get(ROUTE_HEALTH)
    async def healthz() -> dict[str, str]:
        return {"status": "ok", "provider": orchestrator.provider_name}

    @app.post(ROUTE_TRANSCRIBE)
    async def transcribe(
        request: Request,
        language: Optional[str] = Query(default=None, min_length=2, max_length=35),
        sample_rate: Optional[int] = Query(default=None, gt=0),
    ) -> dict[str, str]:
        # Refuse oversized uploads before buffering them.
        match _declared_length(request):
            case int() as length if length > config.max_payload_bytes:
                raise PayloadTooLargeError(length, config.max_payload_bytes)
            case _:
                pass

        body = await _read_capped(request, config.max_payload_bytes)
        result = await _cancel_on_disconnect(
            request,
            orchestrator.process(
                body,
                request.headers.get("content-type"),
                language,
                sample_rate_hz=sample_rate,
            ),
        )
        return {"transcription": result.text}

    return app
