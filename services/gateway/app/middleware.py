"""Request middleware: request id, per-request deadline, access log, recovery."""

import logging
import time
import uuid

from fastapi import FastAPI, Request
from fastapi.responses import PlainTextResponse

from common.logging import request_id_var

logger = logging.getLogger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"


def remaining_time(request: Request) -> float | None:
    """Seconds left before the request deadline, or None if no deadline is set."""
    deadline = getattr(request.state, "deadline", None)
    if deadline is None:
        return None
    return deadline - time.monotonic()


def install_middleware(app: FastAPI, request_timeout: float) -> None:
    """Register the request context middleware on `app`.

    Args:
        app: Application to decorate.
        request_timeout: Seconds each request may spend before store calls
            start failing with `StoreTimeoutError`.
    """

    @app.middleware("http")
    async def request_context(request: Request, call_next):
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
        token = request_id_var.set(request_id)
        request.state.request_id = request_id
        request.state.deadline = time.monotonic() + request_timeout
        started = time.perf_counter()

        try:
            response = await call_next(request)
        except Exception:
            logger.exception("unhandled error on %s %s", request.method, request.url.path)
            response = PlainTextResponse("Internal Server Error", status_code=500)

        response.headers[REQUEST_ID_HEADER] = request_id
        logger.info(
            "%s %s -> %d in %.1fms",
            request.method,
            request.url.path,
            response.status_code,
            (time.perf_counter() - started) * 1000,
        )
        request_id_var.reset(token)
        return response
