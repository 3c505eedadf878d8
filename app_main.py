"""Application entry point for Quiz Portal."""

from __future__ import annotations

from quiz_portal.constants.network_constants import DEFAULT_HOST, DEFAULT_PORT
from quiz_portal.constants.storage_constants import DEFAULT_DATA_DIR
from quiz_portal.core.context import AppContext
from quiz_portal.core.quiz_portal import QuizPortal
from quiz_portal.core.storage import FileStore
from quiz_portal.server.api_server import run_api_server
from quiz_portal.utils.logging_config import configure_logging


def main() -> None:
    """Initialize logging, open the data directory, seed defaults and serve the API."""
    logger = configure_logging()
    logger.info("Starting Quiz Portal…")

    store = FileStore(DEFAULT_DATA_DIR)
    portal = QuizPortal(AppContext(store=store))
    portal.initialize_defaults()
    logger.info("Documents stored in %s", store.data_dir)
    logger.info("API available at http://%s:%d/", DEFAULT_HOST, DEFAULT_PORT)

    run_api_server(portal=portal, host=DEFAULT_HOST, port=DEFAULT_PORT)


if __name__ == "__main__":
    main()
