"""
Module entry point for running the application.
"""
import logging

import uvicorn

from .core.bootstrap import create_app
from .core.logging_config import setup_logging
from .core.settings import get_settings


def main() -> None:
    """Load settings, configure logging and serve the API."""
    settings = get_settings()
    setup_logging(
        log_level=settings.log_level,
        log_dir=settings.log_dir,
        log_to_file=settings.log_to_file,
    )
    logging.getLogger(__name__).info(
        f"Listening on {settings.server_address}",
        extra={'extra_data': {'environment': settings.environment}}
    )

    uvicorn.run(
        create_app(settings),
        host=settings.host,
        port=settings.port,
        log_config=None,
    )


if __name__ == "__main__":
    main()
