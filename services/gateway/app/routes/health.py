"""Liveness and diagnostic routes."""

import logging
import socket

from fastapi import APIRouter, Depends, Request
from fastapi.responses import PlainTextResponse
from pymongo import MongoClient

from ..db import get_client, ping
from ..errors import StoreError
from ..middleware import remaining_time

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])

INFO_TEMPLATE = """
hostname=  {hostname}
host    =  {host}
url     =  {url}"""


def _hostname() -> str:
    try:
        return socket.gethostname() or "missing"
    except OSError:
        return "missing"


@router.get("/healthcheck", response_class=PlainTextResponse)
def healthcheck(request: Request, client: MongoClient = Depends(get_client)):
    """Ping the store within the request deadline.

    Returns:
        PlainTextResponse: 200 `OK!`, or 500 `failed to connect to db`. The
        cause is logged but never returned to the caller.
    """
    try:
        ping(client, timeout=remaining_time(request))
    except StoreError as exc:
        logger.warning("health check failed: %s", exc)
        return PlainTextResponse("failed to connect to db", status_code=500)
    return PlainTextResponse("OK!")


@router.get("/info", response_class=PlainTextResponse)
def info(request: Request):
    """Report the process hostname, the Host header and the request URL."""
    url = request.url.path
    if request.url.query:
        url = f"{url}?{request.url.query}"

    return PlainTextResponse(
        INFO_TEMPLATE.format(
            hostname=_hostname(),
            host=request.headers.get("host", ""),
            url=url,
        )
    )
