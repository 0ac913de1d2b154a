"""Entry point — wires Config → AnalysisPipeline → FastAPI app → uvicorn."""
import logging

import uvicorn
from rich.logging import RichHandler

from cropscan.app import create_app
from cropscan.config import Config
from cropscan.constants import MSG_SERVICE_STARTING


def _setup_logging(level: str) -> None:
    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    list(map(root.removeHandler, root.handlers[:]))
    root.addHandler(RichHandler(rich_tracebacks=True))


def main() -> None:
    config = Config.from_env()
    _setup_logging(config.log_level)

    logger = logging.getLogger(__name__)
    logger.info(MSG_SERVICE_STARTING, config.host, config.port)

    # log_config=None keeps uvicorn on the root RichHandler.
    uvicorn.run(create_app(config), host=config.host, port=config.port, log_config=None)


if __name__ == "__main__":
    main()
