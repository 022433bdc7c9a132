"""FastAPI application factory / entrypoint.

This service exposes HTTP endpoints for:
- reading the latest document of a collection (`GET /data/<collection>`)
- inserting a form as a new document (`POST /data/<collection>`)
- liveness (`/healthcheck`) and diagnostics (`/info`)

Operational notes:
- The MongoDB client is created once by `main` and injected into `create_app`;
  the app closes it on shutdown.
- Startup is fail-fast: missing configuration or an unreachable store ends the
  process with exit code 1.
"""

from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI
from pymongo import MongoClient
import uvicorn

from common.logging import configure_logging

from .db import close, connect
from .errors import ConfigError, StoreConnectionError
from .middleware import install_middleware
from .routes import router
from .service import DocumentService
from .settings import Settings, load_settings

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    logger.info("shutting down, closing mongo client")
    close(app.state.client)


def create_app(client: MongoClient, settings: Settings | None = None) -> FastAPI:
    """Build the gateway app around an already connected client.

    Args:
        client: Shared MongoDB client used by every request.
        settings: Service settings; defaults are used when omitted.

    Returns:
        FastAPI: The configured application.
    """
    settings = settings or Settings()

    app = FastAPI(title="Document Gateway", version="0.1.0", lifespan=lifespan)
    app.state.settings = settings
    app.state.client = client
    app.state.service = DocumentService(client, settings.mongo_database)

    install_middleware(app, request_timeout=settings.request_timeout)
    app.include_router(router)
    return app


def main() -> int:
    """Run the gateway until it is terminated.

    Returns:
        The process exit code (0 = clean shutdown, 1 = startup failure).
    """
    try:
        settings = load_settings()
    except ConfigError as exc:
        configure_logging()
        logger.critical("%s", exc)
        return 1

    configure_logging(settings.log_level, settings.log_json, service="gateway")
    logger.info("using PORT = %s", settings.port)
    logger.info("using database %r", settings.mongo_database)

    try:
        client = connect(
            settings.mongo_uri,
            connect_timeout=settings.connect_timeout,
            ping_timeout=settings.ping_timeout,
        )
    except StoreConnectionError as exc:
        logger.critical("%s", exc)
        return 1

    app = create_app(client, settings)
    uvicorn.run(app, host=settings.host, port=settings.port, log_config=None, access_log=False)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
