"""Server run script."""

import logging

import uvicorn
from src.api.config import settings
from src.core.logging_config import configure_logging

if __name__ == "__main__":
    configure_logging(getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO))
    uvicorn.run(
        "src.api.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
    )
