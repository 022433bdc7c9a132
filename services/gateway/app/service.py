"""Document access service.

`DocumentService` maps a caller-supplied collection name onto a collection of
the configured database and offers the two operations the gateway needs:

- `insert`: append one document, creating the collection on first write
- `fetch_latest`: the document with the greatest `_id` (most recently inserted)

Collection names are used as given; the only validation is the store's own
(an invalid name surfaces as `StoreError`). Documents are plain dicts, so
field order is preserved on the way in and out.
"""

from typing import Any, Mapping

from bson import ObjectId
from fastapi import Request
from pymongo import DESCENDING, MongoClient

from .db import store_deadline
from .errors import NotFoundError, StoreError
from .settings import DEFAULT_DATABASE


class DocumentService:
    """Insert and fetch-latest operations over one database."""

    def __init__(self, client: MongoClient, database: str = DEFAULT_DATABASE):
        self.client = client
        self.database = database

    def fetch_latest(self, collection: str, timeout: float | None = None) -> dict[str, Any]:
        """Return the most recently inserted document of `collection`.

        Args:
            collection: Collection name.
            timeout: Seconds left before the request deadline (None = no deadline).

        Returns:
            dict: The document, including its `_id`, in stored field order.

        Raises:
            NotFoundError: If the collection is empty or does not exist.
            StoreTimeoutError: If the deadline elapses.
            StoreError: For any other store failure.
        """
        with store_deadline(timeout):
            document = self.client[self.database][collection].find_one(
                {}, sort=[("_id", DESCENDING)]
            )

        if document is None:
            raise NotFoundError(f"no documents in collection {collection!r}")
        return document

    def insert(self, collection: str, document: Mapping[str, Any], timeout: float | None = None) -> ObjectId:
        """Append `document` to `collection`.

        The document is copied before insertion; the caller's mapping is left
        untouched. Calling twice inserts two documents.

        Args:
            collection: Collection name; created by the store if missing.
            document: Field name to value mapping.
            timeout: Seconds left before the request deadline (None = no deadline).

        Returns:
            bson.ObjectId: The id assigned to the new document.

        Raises:
            StoreTimeoutError: If the deadline elapses (the write may or may not
                have been applied).
            StoreError: If the write fails or is not acknowledged.
        """
        with store_deadline(timeout):
            result = self.client[self.database][collection].insert_one(dict(document))

        if not result.acknowledged:
            raise StoreError(f"insert into {collection!r} was not acknowledged")
        return result.inserted_id


def get_service(request: Request) -> DocumentService:
    """FastAPI dependency returning the service bound to the app's client."""
    return request.app.state.service
