"""
Shared fixtures: an in-memory stand-in for the MongoDB client
"""

from copy import deepcopy
from types import SimpleNamespace

import pytest
from bson import ObjectId
from pymongo.errors import DuplicateKeyError

from eventbooking.core.db import ConnectionCache
from eventbooking.services.repositories import BookingRepo, EventRepo

TEST_MONGODB_URL = "mongodb://localhost:27017/test-db"


def _matches(doc, filter):
    return all(doc.get(key) == value for key, value in filter.items())


class FakeCollection:
    """Enough of pymongo's Collection for the repositories, including unique indexes"""

    def __init__(self, name):
        self.name = name
        self.docs = {}
        self.indexes = {"_id_": {"key": [("_id", 1)], "unique": True}}

    def create_indexes(self, models):
        names = []
        for model in models:
            spec = model.document
            self.indexes[spec["name"]] = {
                "key": list(spec["key"].items()),
                "unique": spec.get("unique", False),
            }
            names.append(spec["name"])
        return names

    def index_information(self):
        return deepcopy(self.indexes)

    def _check_unique(self, doc, exclude_id=None):
        for name, info in self.indexes.items():
            if not info["unique"] or name == "_id_":
                continue
            fields = [field for field, _ in info["key"]]
            key = {field: doc.get(field) for field in fields}
            for other in self.docs.values():
                if other["_id"] != exclude_id and _matches(other, key):
                    raise DuplicateKeyError(
                        f"E11000 duplicate key error collection: {self.name} index: {name}",
                        11000,
                        {"keyValue": key},
                    )

    def insert_one(self, doc):
        doc = deepcopy(doc)
        doc.setdefault("_id", ObjectId())
        self._check_unique(doc)
        self.docs[doc["_id"]] = doc
        return SimpleNamespace(inserted_id=doc["_id"], acknowledged=True)

    def replace_one(self, filter, doc):
        current = self.find_one(filter)
        if current is None:
            return SimpleNamespace(matched_count=0, modified_count=0)
        new = deepcopy(doc)
        new["_id"] = current["_id"]
        self._check_unique(new, exclude_id=current["_id"])
        self.docs[new["_id"]] = new
        return SimpleNamespace(matched_count=1, modified_count=1)

    def find(self, filter=None):
        return [deepcopy(doc) for doc in self.docs.values() if _matches(doc, filter or {})]

    def find_one(self, filter=None):
        found = self.find(filter)
        return found[0] if found else None

    def count_documents(self, filter, limit=0):
        count = len(self.find(filter))
        return min(count, limit) if limit else count

    def delete_one(self, filter):
        doc = self.find_one(filter)
        if doc is None:
            return SimpleNamespace(deleted_count=0)
        del self.docs[doc["_id"]]
        return SimpleNamespace(deleted_count=1)

    def delete_many(self, filter):
        doomed = [doc["_id"] for doc in self.find(filter)]
        for doc_id in doomed:
            del self.docs[doc_id]
        return SimpleNamespace(deleted_count=len(doomed))


class FakeDatabase:
    def __init__(self):
        self.collections = {}

    def __getitem__(self, name):
        return self.collections.setdefault(name, FakeCollection(name))


class FakeTopology:
    """Topology description whose server availability a test can flip"""

    def __init__(self):
        self.readable = True

    def has_readable_server(self, read_preference=None):
        return self.readable


class FakeClient:
    """Stands in for MongoClient; records the options it was built with"""

    def __init__(self, url, **options):
        self.url = url
        self.options = options
        self.closed = False
        self.pings = 0
        self.databases = {}
        self.admin = SimpleNamespace(command=self._command)
        self.topology_description = FakeTopology()

    def _command(self, name):
        self.pings += 1
        return {"ok": 1.0}

    def __getitem__(self, name):
        return self.databases.setdefault(name, FakeDatabase())

    def close(self):
        self.closed = True


@pytest.fixture
def cache():
    """Connection cache backed by the in-memory client"""
    cache = ConnectionCache(TEST_MONGODB_URL, db_name="test-db", client_factory=FakeClient)
    yield cache
    cache.release()

@pytest.fixture
def event_repo(cache):
    repo = EventRepo(cache)
    repo.ensure_indexes()
    return repo

@pytest.fixture
def booking_repo(cache, event_repo):
    repo = BookingRepo(cache, event_repo)
    repo.ensure_indexes()
    return repo

@pytest.fixture
def valid_event_data():
    """A complete, valid Event payload"""
    return {
        "title": "Tech Conference 2024",
        "description": "A conference about technology",
        "overview": "Overview of the tech conference",
        "image": "https://example.com/image.jpg",
        "venue": "Convention Center",
        "location": "San Francisco, CA",
        "date": "2024-12-15",
        "time": "09:00",
        "mode": "hybrid",
        "audience": "Developers",
        "agenda": ["Opening keynote", "Workshops", "Networking"],
        "organizer": "Tech Events Inc.",
        "tags": ["technology", "conference"],
    }

@pytest.fixture
def saved_event(event_repo, valid_event_data):
    return event_repo.create(valid_event_data)
