"""
MongoDB connection cache

One live client per process. Callers that arrive while the first connection
attempt is still running wait on that same attempt instead of opening their own.
"""

from __future__ import annotations

import logging
import signal
import sys
import threading
from concurrent.futures import Future
from functools import lru_cache
from typing import Any, Callable, Dict, Optional

from pymongo import MongoClient, monitoring
from pymongo.database import Database

from eventbooking.core.config import settings
from eventbooking.core.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

DISCONNECTED = 0
CONNECTED = 1
CONNECTING = 2
DISCONNECTING = 3

READY_STATES: Dict[int, str] = {
    DISCONNECTED: "disconnected",
    CONNECTED: "connected",
    CONNECTING: "connecting",
    DISCONNECTING: "disconnecting",
}


class TransportLogger(monitoring.ServerListener):
    """Logs server open/error/close transitions. Never touches the cache."""

    def opened(self, event: monitoring.ServerOpeningEvent) -> None:
        logger.info("MongoDB server %s opened", event.server_address)

    def description_changed(self, event: monitoring.ServerDescriptionChangedEvent) -> None:
        new = event.new_description
        previous = event.previous_description
        if new.error is not None:
            logger.error("MongoDB connection error on %s: %s", event.server_address, new.error)
        elif previous.server_type_name == "Unknown" and new.server_type_name != "Unknown":
            logger.info("Connected to MongoDB server %s (%s)", event.server_address, new.server_type_name)

    def closed(self, event: monitoring.ServerClosedEvent) -> None:
        logger.info("MongoDB server %s disconnected", event.server_address)


class ConnectionCache:
    """Holds at most one client and at most one in-flight connection attempt."""

    def __init__(
        self,
        url: Optional[str],
        db_name: str = "eventbooking",
        max_pool_size: int = 10,
        server_selection_timeout_ms: int = 5000,
        socket_timeout_ms: int = 45000,
        buffer_commands: bool = False,
        client_factory: Callable[..., Any] = MongoClient,
    ):
        if not url:
            raise ConfigurationError("Please define the MONGODB_URL environment variable inside .env")

        self.url = url
        self.db_name = db_name
        self.max_pool_size = max_pool_size
        self.server_selection_timeout_ms = server_selection_timeout_ms
        self.socket_timeout_ms = socket_timeout_ms
        self.buffer_commands = buffer_commands
        self._client_factory = client_factory

        # Reentrant: the signal handler may call release() while this thread holds it
        self._lock = threading.RLock()
        self.handle: Optional[Any] = None
        self.pending: Optional[Future] = None
        self.ready_state = DISCONNECTED

    def acquire(self) -> Any:
        """Return the live client, connecting on first use."""
        handle = self.handle
        if handle is not None:
            logger.debug("Using existing MongoDB connection")
            return handle

        with self._lock:
            if self.handle is not None:
                return self.handle
            pending = self.pending
            owner = pending is None
            if owner:
                pending = Future()
                self.pending = pending
                self.ready_state = CONNECTING

        if not owner:
            # Same outcome as the caller that started the attempt
            return pending.result()

        logger.info("Creating new MongoDB connection...")
        try:
            client = self._connect()
        except BaseException as exc:
            logger.error("MongoDB connection error: %s", exc)
            with self._lock:
                self.pending = None
                self.handle = None
                self.ready_state = DISCONNECTED
            pending.set_exception(exc)
            raise

        with self._lock:
            self.handle = client
            self.ready_state = CONNECTED
        pending.set_result(client)
        logger.info("Successfully connected to MongoDB")
        return client

    def _connect(self) -> Any:
        client = self._client_factory(
            self.url,
            maxPoolSize=self.max_pool_size,
            serverSelectionTimeoutMS=self.server_selection_timeout_ms,
            socketTimeoutMS=self.socket_timeout_ms,
            event_listeners=[TransportLogger()],
        )
        if not self.buffer_commands:
            # Fail now rather than let the first operation wait on server selection
            try:
                client.admin.command("ping")
            except BaseException:
                client.close()
                raise
        return client

    def release(self) -> None:
        """Close the client if one is open. No-op otherwise."""
        with self._lock:
            handle = self.handle
            if handle is None:
                return
            self.ready_state = DISCONNECTING

        try:
            handle.close()
        finally:
            with self._lock:
                self.handle = None
                self.pending = None
                self.ready_state = DISCONNECTED
        logger.info("Disconnected from MongoDB")

    def status(self) -> str:
        """Connection phase; a connected client with no reachable server reports "connecting"."""
        handle = self.handle
        if handle is not None and self.ready_state == CONNECTED:
            if not handle.topology_description.has_readable_server():
                return READY_STATES[CONNECTING]
        return READY_STATES.get(self.ready_state, "unknown")

    def is_connected(self) -> bool:
        return self.status() == READY_STATES[CONNECTED]

    def database(self) -> Database:
        """Configured database on the live client"""
        return self.acquire()[self.db_name]


@lru_cache(maxsize=1)
def get_connection_cache() -> ConnectionCache:
    """Build the process-wide cache from settings on first use."""
    return ConnectionCache(
        settings.MONGODB_URL,
        db_name=settings.MONGODB_DB_NAME,
        max_pool_size=settings.MONGODB_MAX_POOL_SIZE,
        server_selection_timeout_ms=settings.MONGODB_SERVER_SELECTION_TIMEOUT_MS,
        socket_timeout_ms=settings.MONGODB_SOCKET_TIMEOUT_MS,
        buffer_commands=settings.MONGODB_BUFFER_COMMANDS,
    )


def install_signal_handlers(cache: ConnectionCache, signals=(signal.SIGINT, signal.SIGTERM)) -> None:
    """Release the connection and exit on termination signals.

    Must be called from the main thread.
    """

    def _shutdown(signum, frame):
        logger.info("Received signal %s, closing MongoDB connection", signum)
        cache.release()
        sys.exit(0)

    for sig in signals:
        signal.signal(sig, _shutdown)
