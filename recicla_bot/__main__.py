"""Process entry point: serve the webhook on the configured port."""

from __future__ import annotations

import logging

import uvicorn

from recicla_bot.config import Settings
from recicla_bot.log import setup_logging
from recicla_bot.server.app import create_app

logger = logging.getLogger(__name__)


def main() -> None:
    settings = Settings.from_env()
    setup_logging(settings.log_level)
    logger.info("Listening on port %d", settings.port)
    uvicorn.run(
        create_app(settings),
        host="0.0.0.0",
        port=settings.port,
        log_config=None,
    )


if __name__ == "__main__":
    main()
