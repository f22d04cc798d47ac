# src/todolist/cli/main.py

"""
CLI entrypoint.

Initializes logging, builds AppState (opens the database once),
then serves the API + static frontend with uvicorn until interrupted.
"""

from __future__ import annotations

import asyncio
import logging

import uvicorn

from ..cli.bootstrap import create_initial_state, shutdown_state
from ..config import get_settings
from ..logging_setup import setup_logging
from ..web.app import create_app

logger = logging.getLogger(__name__)


def main() -> None:
    settings = get_settings()

    level_name = str(getattr(settings, "log_level", "INFO")).upper()
    console_level = getattr(logging, level_name, logging.INFO)

    log_dir = settings.data_dir if settings.log_to_file else None
    setup_logging(log_dir=log_dir, console_level=console_level)

    logging.getLogger("uvicorn.access").setLevel(logging.INFO)

    logger.info("Starting %s...", settings.app_name)

    state = create_initial_state(settings=settings)
    try:
        total = asyncio.run(state.todo_service.count())
        logger.info("Todos table ready db=%s total=%s", settings.db_path, total)

        app = create_app(
            state.todo_service,
            title=settings.app_name,
            static_dir=settings.static_dir if settings.serve_static else None,
        )

        logger.info("Server is running on http://%s:%s", settings.host, settings.port)
        # log_config=None keeps uvicorn on the handlers installed by setup_logging().
        uvicorn.run(app, host=settings.host, port=settings.port, log_config=None)
    finally:
        shutdown_state(state)
        logger.info("Bye.")


if __name__ == "__main__":
    main()
