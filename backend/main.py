"""
Uniswap V2 Estimator - ASGI entry point.

Run with ``uvicorn main:app --port 1337`` from the backend directory.

File: backend/main.py
"""

from __future__ import annotations

import logging

from swap_estimator.core.bootstrap import create_app
from swap_estimator.core.logging_config import setup_logging
from swap_estimator.core.settings import get_settings

settings = get_settings()

# Initialize structured logging FIRST
setup_logging(
    log_level=settings.log_level,
    log_dir=settings.log_dir,
    log_to_file=settings.log_to_file,
)
logger = logging.getLogger(__name__)

app = create_app(settings)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host=settings.host, port=settings.port, log_config=None)
