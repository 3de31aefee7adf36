import logging

import uvicorn
from calendar_oauth_app.config import settings


def run() -> None:
    logging.basicConfig(
        level=settings.LOG_LEVEL,
        format='%(asctime)s %(levelname)s %(name)s: %(message)s',
    )
    uvicorn.run(
        "calendar_oauth_app.api:app",
        host=settings.BACKEND_HOST,
        port=settings.BACKEND_PORT,
        reload=settings.RELOAD,
        log_level=settings.LOG_LEVEL.lower(),
    )


if __name__ == '__main__':
    run()
