"""
Shared fixtures. Every test runs against an in-memory mongomock server, so no database is needed.
"""

from enum import StrEnum

import mongomock
from mongomock.store import ServerStore
import pytest

from burrow import Burrow, ConnectionConfig, Document, IndexSpec, ModelRegistry, SchemaConfig


class Mood(StrEnum):
    HAPPY = "happy"
    GRUMPY = "grumpy"


class Person(Document):
    __indexes__ = (IndexSpec("name"), )

    name: str
    likes: int = 0
    tags: list[str] = SchemaConfig(default_factory=list)
    mood: Mood | None = None


class BlogPost(Document):
    __collection_name__ = "posts"

    title: str
    score: float = 0.0


@pytest.fixture
def server_store():
    """ One in-memory server. Clients built from it see each other's writes. """
    return ServerStore()


@pytest.fixture
def make_config(server_store):
    def _make_config(database_name: str = "burrow_test") -> ConnectionConfig:
        return ConnectionConfig(
            database_name=database_name,
            client_factory=lambda host=None, **options: mongomock.MongoClient(host, _store=server_store, **options),
        )
    return _make_config


@pytest.fixture
def registry():
    registry = ModelRegistry()
    registry.register(Person)
    registry.register(BlogPost, name="Post")
    return registry


@pytest.fixture
def burrow(make_config, registry):
    burrow = Burrow(make_config(), registry)
    yield burrow
    burrow.close()


@pytest.fixture
def people(burrow):
    return burrow.collection("Person")
