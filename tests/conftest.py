"""Shared fixtures: an in-memory MongoDB behind the async collection API."""

from datetime import UTC, datetime
from typing import Any

import mongomock
import pytest
from fastapi.testclient import TestClient

import config
from dependencies import get_database, get_gcs_client, get_static_paths
from main import app
from paths import FallbackPolicy, StaticPaths


class AsyncCursor:
    """Async iteration over a mongomock cursor, like pymongo's AsyncCursor."""

    def __init__(self, cursor):
        self._cursor = cursor

    def sort(self, *args: Any, **kwargs: Any) -> "AsyncCursor":
        self._cursor = self._cursor.sort(*args, **kwargs)
        return self

    def limit(self, count: int) -> "AsyncCursor":
        self._cursor = self._cursor.limit(count)
        return self

    def __aiter__(self):
        return self._iterate()

    async def _iterate(self):
        for doc in self._cursor:
            yield doc


class AsyncCollection:
    def __init__(self, collection):
        self.sync = collection

    def find(self, *args: Any, **kwargs: Any) -> AsyncCursor:
        return AsyncCursor(self.sync.find(*args, **kwargs))

    async def find_one(self, *args: Any, **kwargs: Any):
        return self.sync.find_one(*args, **kwargs)

    async def insert_one(self, document: dict, *args: Any, **kwargs: Any):
        return self.sync.insert_one(document, *args, **kwargs)


class AsyncDatabase:
    def __init__(self, database):
        self.sync = database

    def __getitem__(self, name: str) -> AsyncCollection:
        return AsyncCollection(self.sync[name])


@pytest.fixture
def db() -> AsyncDatabase:
    """Fixture dataset: two posts by one author, comments in every moderation state."""
    database = mongomock.MongoClient()[config.DATABASE_NAME]
    database[config.AUTHORS_COLLECTION].insert_one(
        {"_id": "a1", "name": "Grace Hopper", "image": {"asset": {"_ref": "image-abc123-200x200-png"}}}
    )
    database[config.POSTS_COLLECTION].insert_many([
        {
            "_id": "p1",
            "title": "Compilers for everyone",
            "description": "Why we should let machines write machine code",
            "slug": "compilers-for-everyone",
            "author": "a1",
            "mainImage": {"asset": {"_ref": "image-def456-1200x800-jpg"}},
            "body": [{"_type": "block", "style": "normal", "children": [{"_type": "span", "text": "Hello"}]}],
            "createdAt": datetime(2022, 5, 1, tzinfo=UTC),
        },
        {
            "_id": "p2",
            "title": "Nanoseconds",
            "description": "A length of wire",
            "slug": "nanoseconds",
            "author": "a1",
            "mainImage": None,
            "body": [],
            "createdAt": datetime(2022, 6, 1, tzinfo=UTC),
        },
    ])
    database[config.COMMENTS_COLLECTION].insert_many([
        {"_id": "c1", "post": "p1", "name": "Ada", "email": "ada@example.com", "comment": "Approved on p1",
         "approved": True},
        {"_id": "c2", "post": "p1", "name": "Bob", "email": "bob@example.com", "comment": "Pending on p1",
         "approved": False},
        {"_id": "c3", "post": "p1", "name": "Eve", "email": "eve@example.com", "comment": "Never moderated"},
        {"_id": "c4", "post": "p2", "name": "Ada", "email": "ada@example.com", "comment": "Approved on p2",
         "approved": True},
    ])
    return AsyncDatabase(database)


@pytest.fixture
def approve(db: AsyncDatabase):
    """What a moderator does in the content studio, outside the API."""
    def _approve(comment_filter: dict) -> int:
        result = db.sync[config.COMMENTS_COLLECTION].update_many(comment_filter, {"$set": {"approved": True}})
        return result.modified_count
    return _approve


@pytest.fixture
def paths() -> StaticPaths:
    return StaticPaths(["compilers-for-everyone", "nanoseconds"], fallback=FallbackPolicy.BLOCKING)


@pytest.fixture
def client(db: AsyncDatabase, paths: StaticPaths):
    app.dependency_overrides[get_database] = lambda: db
    app.dependency_overrides[get_gcs_client] = lambda: None
    app.dependency_overrides[get_static_paths] = lambda: paths
    yield TestClient(app)
    app.dependency_overrides.clear()
