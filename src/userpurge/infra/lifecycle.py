import logging

from userpurge.core.logging import configure_logging
from userpurge.core.settings import Settings
from userpurge.infra.db import close_client, get_client, ping

log = logging.getLogger(__name__)


async def on_startup(settings: Settings):
    configure_logging(settings)
    get_client()
    if await ping():
        log.info("Connected to MongoDB", extra={"db_name": settings.db_name})
    else:
        log.warning("MongoDB unreachable at startup", extra={"db_name": settings.db_name})


async def on_shutdown():
    await close_client()
