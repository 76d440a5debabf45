import logging

import uvicorn

from app.core.config import get_settings

logger = logging.getLogger(__name__)


def main():
    settings = get_settings()
    logger.info("Starting showarr on http://127.0.0.1:8000")
    uvicorn.run(
        "app.main:app",
        host="127.0.0.1",
        port=8000,
        reload=settings.debug,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
