"""
Main application entry point for the quiz service.

Usage:
    - Direct: python -m pmpquiz.main
    - Console script: pmpquiz-server
    - ASGI server: uvicorn pmpquiz.main:app
"""

import uvicorn

from pmpquiz import create_app
from pmpquiz.config import settings
from pmpquiz.common.logger import app_logger

logger = app_logger.getChild("main")

app = create_app(settings)


def run() -> None:
    """Run the application with uvicorn using the configured host and port."""
    logger.info(f"Starting server on {settings.HOST}:{settings.PORT} (reload: {settings.RELOAD})")

    uvicorn.run(
        "pmpquiz.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.RELOAD,
        log_level=settings.LOG_LEVEL.lower(),
    )


if __name__ == "__main__":
    run()
