import logging

import uvicorn
from gcal_relay.config import settings


def main() -> None:
    logging.basicConfig(
        level=settings.LOG_LEVEL,
        format="%(asctime)s %(name)-24s %(levelname)-7s %(message)s",
    )
    uvicorn.run("gcal_relay.api:app", host=settings.BACKEND_HOST, port=settings.BACKEND_PORT, reload=settings.RELOAD)


if __name__ == '__main__':
    main()
