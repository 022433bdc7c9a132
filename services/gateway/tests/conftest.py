"""Shared fixtures for the gateway tests.

`FakeMongoClient` implements the small slice of the pymongo client API the
gateway uses, backed by in-memory lists, so route and service tests run without
a database.
"""

from types import SimpleNamespace
import logging
import threading

from bson import ObjectId
from fastapi.testclient import TestClient
from pymongo.errors import InvalidName, ServerSelectionTimeoutError
import pytest

from services.gateway.app.main import create_app
from services.gateway.app.service import DocumentService
from services.gateway.app.settings import Settings


class FakeCollection:
    def __init__(self, client, name):
        self.client = client
        self.name = name
        self.documents = []
        self.lock = threading.Lock()

    def find_one(self, filter=None, sort=None):
        self.client.calls.append(("find_one", self.name, filter, sort))
        self.client.raise_if_failing()
        with self.lock:
            if not self.documents:
                return None
            if sort == [("_id", -1)]:
                return dict(max(self.documents, key=lambda d: d["_id"]))
            return dict(self.documents[0])

    def insert_one(self, document):
        self.client.calls.append(("insert_one", self.name, document))
        self.client.raise_if_failing()
        # pymongo adds `_id` to the dict it is handed
        document.setdefault("_id", ObjectId())
        with self.lock:
            self.documents.append(dict(document))
        return SimpleNamespace(inserted_id=document["_id"], acknowledged=self.client.acknowledged)


class FakeDatabase:
    def __init__(self, client, name):
        self.client = client
        self.name = name
        self.collections = {}
        self.lock = threading.Lock()

    def __getitem__(self, name):
        if not name or "$" in name or name.startswith(".") or name.endswith("."):
            raise InvalidName(f"collection names must not be empty or contain '$': {name!r}")
        with self.lock:
            if name not in self.collections:
                self.collections[name] = FakeCollection(self.client, name)
            return self.collections[name]


class FakeAdmin:
    def __init__(self, client):
        self.client = client

    def command(self, name, read_preference=None):
        self.client.calls.append(("command", name, read_preference))
        if not self.client.reachable:
            raise ServerSelectionTimeoutError("localhost:27017: timed out")
        return {"ok": 1.0}


class FakeMongoClient:
    def __init__(self):
        self.databases = {}
        self.admin = FakeAdmin(self)
        self.calls = []
        self.reachable = True
        self.acknowledged = True
        self.failure = None
        self.closed = False

    def __getitem__(self, name):
        if name not in self.databases:
            self.databases[name] = FakeDatabase(self, name)
        return self.databases[name]

    def raise_if_failing(self):
        if self.failure is not None:
            raise self.failure

    def close(self):
        self.closed = True

    def documents(self, collection, database="app-db"):
        return self[database][collection].documents


@pytest.fixture
def fake_client():
    return FakeMongoClient()


@pytest.fixture
def settings():
    return Settings(mongo_uri="mongodb://fake:27017")


@pytest.fixture
def service(fake_client):
    return DocumentService(fake_client)


@pytest.fixture
def app(fake_client, settings):
    return create_app(fake_client, settings)


@pytest.fixture
def client(app):
    return TestClient(app)


@pytest.fixture
def restore_logging():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
