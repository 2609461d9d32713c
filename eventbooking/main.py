"""
Event booking data layer - process lifecycle
"""

import logging
from typing import Optional

from eventbooking.core.config import settings
from eventbooking.core.db import ConnectionCache, get_connection_cache, install_signal_handlers
from eventbooking.services.repositories import BookingRepo, EventRepo

logger = logging.getLogger(__name__)


def configure_logging() -> None:
    logging.basicConfig(
        level=settings.LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def startup(cache: Optional[ConnectionCache] = None) -> ConnectionCache:
    """Connect, create indexes and hook termination signals"""
    cache = cache or get_connection_cache()
    cache.acquire()
    events = EventRepo(cache)
    events.ensure_indexes()
    BookingRepo(cache, events).ensure_indexes()
    logger.info("Indexes ensured on %s", cache.db_name)
    install_signal_handlers(cache)
    return cache


def shutdown(cache: Optional[ConnectionCache] = None) -> None:
    cache = cache or get_connection_cache()
    cache.release()
    logger.info("Application shutdown")


if __name__ == "__main__":
    configure_logging()
    cache = startup()
    logger.info("MongoDB connection status: %s", cache.status())
    shutdown(cache)
