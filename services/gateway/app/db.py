"""MongoDB connectivity helpers for the gateway service.

This module owns the lifecycle of the single `MongoClient` shared by every
request:

- `connect` builds the client and verifies the store answers before the
  listener starts (no retries; the caller decides whether to abort)
- `ping` is the liveness probe reused by the health endpoint
- `close` releases the client on shutdown
- `get_client` is the FastAPI dependency handing the client to route handlers

`store_deadline` wraps every store call so driver failures surface as the
gateway's own `StoreError` family.
"""

from contextlib import contextmanager
import logging

from bson.errors import BSONError
from fastapi import Request
import pymongo
from pymongo import MongoClient, ReadPreference
from pymongo.errors import PyMongoError

from .errors import ConfigError, PingError, SessionStartError, StoreError, StoreTimeoutError

logger = logging.getLogger(__name__)

CONNECT_TIMEOUT = 5.0
PING_TIMEOUT = 2.0


@contextmanager
def store_deadline(timeout: float | None = None):
    """Run the enclosed store calls under a deadline.

    Args:
        timeout: Seconds left before the deadline, or None for no deadline.

    Raises:
        StoreTimeoutError: If the deadline has already passed or the driver
            reports a timeout.
        StoreError: For any other driver or BSON failure.
    """
    if timeout is not None and timeout <= 0:
        raise StoreTimeoutError("deadline exceeded before the store was called")

    try:
        with pymongo.timeout(timeout):
            yield
    except PyMongoError as exc:
        if exc.timeout:
            raise StoreTimeoutError(str(exc)) from exc
        raise StoreError(str(exc)) from exc
    except BSONError as exc:
        raise StoreError(str(exc)) from exc


def connect(uri: str, connect_timeout: float = CONNECT_TIMEOUT, ping_timeout: float = PING_TIMEOUT, **client_options) -> MongoClient:
    """Open a client and verify the store is reachable.

    Args:
        uri: MongoDB connection string.
        connect_timeout: Seconds allowed to establish the session.
        ping_timeout: Seconds allowed for the liveness probe.
        **client_options: Extra keyword arguments for `MongoClient`.

    Returns:
        pymongo.MongoClient: A connected client, safe to share between threads.

    Raises:
        ConfigError: If `uri` is empty.
        SessionStartError: If the client could not be created.
        PingError: If the store did not answer the probe in time.
    """
    if not uri:
        raise ConfigError("please specify MONGO_URI")

    timeout_ms = int(connect_timeout * 1000)
    try:
        client = MongoClient(
            uri,
            connectTimeoutMS=timeout_ms,
            serverSelectionTimeoutMS=timeout_ms,
            **client_options,
        )
    except (PyMongoError, ValueError, TypeError) as exc:
        raise SessionStartError(f"failed to start connection to mongo db: {exc}") from exc

    try:
        ping(client, timeout=ping_timeout)
    except StoreError as exc:
        close(client)
        raise PingError(f"failed to ping mongo db: {exc}") from exc

    logger.info("connected to mongo db")
    return client


def ping(client: MongoClient, timeout: float | None = None) -> None:
    """Send `ping` to the store, preferring the primary.

    Raises:
        StoreError: If the store does not answer (StoreTimeoutError on deadline).
    """
    with store_deadline(timeout):
        client.admin.command("ping", read_preference=ReadPreference.PRIMARY_PREFERRED)


def close(client: MongoClient) -> None:
    """Best-effort release of the client; failures are logged, not raised."""
    try:
        client.close()
    except PyMongoError as exc:
        logger.warning("failed to close mongo client: %s", exc)


def get_client(request: Request) -> MongoClient:
    """FastAPI dependency returning the client the app was built with."""
    return request.app.state.client
