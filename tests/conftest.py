"""
Shared fixtures: an app wired to in-memory dummy collections instead of MongoDB.
"""

import asyncio
import re
from datetime import datetime, timedelta, timezone
from types import SimpleNamespace

import pytest
from bson import ObjectId
from fastapi.testclient import TestClient
from pymongo.errors import DuplicateKeyError

from app.database import ensure_indexes, get_db
from app.main import create_app
from app.utils.auth import get_current_user


def _matches(doc, query):
    for key, condition in query.items():
        if key == "$or":
            if not any(_matches(doc, sub) for sub in condition):
                return False
            continue
        value = doc.get(key)
        if isinstance(condition, dict):
            if "$regex" in condition:
                flags = re.IGNORECASE if "i" in condition.get("$options", "") else 0
                if not isinstance(value, str) or not re.search(condition["$regex"], value, flags):
                    return False
            if "$in" in condition and value not in condition["$in"]:
                return False
            if "$gte" in condition and (value is None or value < condition["$gte"]):
                return False
        elif value != condition:
            return False
    return True


class DummyCursor(object):
    """Mimics the chainable Motor cursor."""

    def __init__(self, docs):
        self._docs = list(docs)

    def sort(self, key, direction):
        self._docs.sort(key=lambda d: (d.get(key) is not None, d.get(key)), reverse=direction < 0)
        return self

    def skip(self, count):
        self._docs = self._docs[count:]
        return self

    def limit(self, count):
        self._docs = self._docs[:count]
        return self

    async def to_list(self, length=None):
        return list(self._docs if length is None else self._docs[:length])

    def __aiter__(self):
        self._iter = iter(self._docs)
        return self

    async def __anext__(self):
        try:
            return next(self._iter)
        except StopIteration:
            raise StopAsyncIteration


class DummyCollection(object):
    """In-memory collection; unique keys come from the indexes created on it."""

    def __init__(self):
        self.docs = []
        self.indexes = []
        self.fail_with = None

    @property
    def unique_keys(self):
        return [tuple(k for k, _ in index["keys"]) for index in self.indexes if index["unique"]]

    async def create_index(self, keys, unique=False, **kwargs):
        self.indexes.append({"keys": list(keys), "unique": unique, **kwargs})
        return kwargs.get("name") or "_".join(f"{k}_{d}" for k, d in keys)

    def _check_failure(self):
        if self.fail_with is not None:
            raise self.fail_with

    def find(self, query=None, projection=None):
        self._check_failure()
        return DummyCursor(d for d in self.docs if _matches(d, query or {}))

    async def find_one(self, query, projection=None):
        self._check_failure()
        for doc in self.docs:
            if _matches(doc, query):
                if projection and not any(projection.values()):
                    return {k: v for k, v in doc.items() if k not in projection}
                return dict(doc)
        return None

    async def count_documents(self, query):
        self._check_failure()
        return sum(1 for d in self.docs if _matches(d, query))

    async def insert_one(self, document):
        self._check_failure()
        for fields in self.unique_keys:
            if any(all(d.get(k) == document.get(k) for k in fields) for d in self.docs):
                raise DuplicateKeyError("E11000 duplicate key error")
        document.setdefault("_id", ObjectId())
        self.docs.append(dict(document))
        return SimpleNamespace(inserted_id=document["_id"])

    async def find_one_and_update(self, query, update, return_document=None):
        self._check_failure()
        for doc in self.docs:
            if _matches(doc, query):
                doc.update(update.get("$set", {}))
                return dict(doc)
        return None

    def aggregate(self, pipeline):
        self._check_failure()
        docs = self.docs
        rows = []
        for stage in pipeline:
            if "$match" in stage:
                docs = [d for d in docs if _matches(d, stage["$match"])]
            if "$group" in stage:
                field = stage["$group"]["_id"].lstrip("$")
                counts = {}
                for d in docs:
                    counts[d.get(field)] = counts.get(d.get(field), 0) + 1
                rows = [{"_id": k, "count": v} for k, v in counts.items()]
        return DummyCursor(rows)


class DummyDatabase(object):
    def __init__(self):
        self.applications = DummyCollection()
        self.users = DummyCollection()


@pytest.fixture
def db():
    database = DummyDatabase()
    loop = asyncio.new_event_loop()
    try:
        loop.run_until_complete(ensure_indexes(database))
    finally:
        loop.close()
    return database


@pytest.fixture
def applicant(db):
    user = {"_id": ObjectId(), "name": "Alice Smith", "email": "alice@mail.com", "role": "user"}
    db.users.docs.append(user)
    return user


@pytest.fixture
def other_applicant(db):
    user = {"_id": ObjectId(), "name": "Bob Jones", "email": "bob@mail.com", "role": "user"}
    db.users.docs.append(user)
    return user


@pytest.fixture
def admin(db):
    user = {"_id": ObjectId(), "name": "Reviewer", "email": "admin@mail.com", "role": "admin"}
    db.users.docs.append(user)
    return user


@pytest.fixture
def app(db):
    application = create_app()
    application.dependency_overrides[get_db] = lambda: db
    yield application
    application.dependency_overrides.clear()


@pytest.fixture
def client(app):
    # No context manager: the lifespan (real MongoDB connection) is not started
    return TestClient(app)


@pytest.fixture
def login_as(app):
    """Make every request run as the given user."""
    def _login(user):
        app.dependency_overrides[get_current_user] = lambda: user
    return _login


def valid_payload(**overrides):
    payload = {
        "jobId": "ml-intern-2025",
        "fullName": "  Alice Smith ",
        "email": "Alice.Smith@Mail.com",
        "phone": "+91 98765 43210",
        "location": "Hyderabad",
        "portfolioUrl": "https://github.com/alice",
        "linkedinProfile": "linkedin.com/in/alice",
        "educationStatus": "Final year",
        "degreeDiscipline": "B.Tech Computer Science",
        "researchPapers": "One paper on graph neural networks",
        "internshipExperience": "Six months at a vision startup",
        "duration": "6",
        "aiMlProjects": "Transformer-based resume parser",
        "motivation": "I want to ship real ML products",
    }
    payload.update(overrides)
    return payload


def make_application(applied_by, **overrides):
    now = datetime.now(timezone.utc)
    doc = {
        "_id": ObjectId(),
        **valid_payload(fullName="Alice Smith", email="alice.smith@mail.com"),
        "status": "pending",
        "appliedBy": applied_by,
        "createdAt": now,
        "updatedAt": now,
    }
    doc.update(overrides)
    return doc


def days_ago(days):
    return datetime.now(timezone.utc) - timedelta(days=days)


