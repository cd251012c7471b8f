"""Entry point — wires Config → TranscriptionClient → Orchestrator → gateway."""
import logging

import uvicorn
from rich.logging import RichHandler

from scribegate.config import Config
from scribegate.constants import MSG_SERVER_STARTING
from scribegate.gateway import create_app
from scribegate.orchestrator import TranscriptionOrchestrator
from scribegate.transcription.factory import create_transcription_client


def _setup_logging(level: str) -> None:
    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    list(map(root.removeHandler, root.handlers[:]))
    root.addHandler(RichHandler(rich_tracebacks=True))


def main() -> None:
    config = Config.from_env()
    _setup_logging(config.log_level)

    logger = logging.getLogger(__name__)
    logger.info(MSG_SERVER_STARTING, config.host, config.port, config.provider)

    client = create_transcription_client(config)
    orchestrator = TranscriptionOrchestrator(config, client)
    app = create_app(config, client, orchestrator)
    uvicorn.run(app, host=config.host, port=config.port, log_config=None)


if __name__ == "__main__":
    main()
