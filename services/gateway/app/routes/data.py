"""Collection data routes.

`/data/<collection>` reads the latest document of a collection (GET) or inserts
the posted form as a new document (POST). The collection is everything after
the literal `/data/` prefix, so `/data/data` targets `data` and `/data/a/b`
targets `a/b`.

Failures are plain-text 500 responses carrying the underlying cause.
"""

import logging

from bson import json_util
from fastapi import APIRouter, Depends, Request
from fastapi.responses import PlainTextResponse, Response

from ..errors import ParseError, StoreError
from ..forms import form_to_document, parse_form
from ..middleware import remaining_time
from ..service import DocumentService, get_service

logger = logging.getLogger(__name__)

router = APIRouter(tags=["data"])


async def request_body(request: Request) -> bytes:
    """Read the raw body before the (sync) handler runs in the threadpool."""
    return await request.body()


@router.get("/data/{collection:path}")
def read_latest(
    collection: str,
    request: Request,
    service: DocumentService = Depends(get_service),
):
    """Return the most recently inserted document of a collection.

    Args:
        collection: Collection name taken from the path.
        request: Incoming request (carries the deadline).
        service: Document service (injected).

    Returns:
        Response: 200 with the document as indented Extended JSON, or 500 with
        `failed to connect to db: <cause>` / `failed to marshal data: <cause>`.
    """
    try:
        document = service.fetch_latest(collection, timeout=remaining_time(request))
    except StoreError as exc:
        logger.warning("read from %r failed: %s", collection, exc)
        return PlainTextResponse(f"failed to connect to db: {exc}", status_code=500)

    try:
        body = json_util.dumps(document, indent=2)
    except (TypeError, ValueError) as exc:
        logger.warning("could not serialize document from %r: %s", collection, exc)
        return PlainTextResponse(f"failed to marshal data: {exc}", status_code=500)

    return Response(content=body, media_type="application/json")


@router.post("/data/{collection:path}")
def write_document(
    collection: str,
    request: Request,
    body: bytes = Depends(request_body),
    service: DocumentService = Depends(get_service),
):
    """Insert the posted form as a new document.

    Every form field becomes a document field holding the list of its values.
    URL query parameters are merged in after the body values.

    Returns:
        Response: 200 with an empty body, or 500 with
        `failed to handle request: <cause>`.
    """
    try:
        form = parse_form(body, request.headers.get("content-type"), request.url.query)
        service.insert(collection, form_to_document(form), timeout=remaining_time(request))
    except (ParseError, StoreError) as exc:
        logger.warning("write to %r failed: %s", collection, exc)
        return PlainTextResponse(f"failed to handle request: {exc}", status_code=500)

    return Response(status_code=200)
