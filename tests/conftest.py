import os

import pytest
from fastapi.testclient import TestClient

# Ensure we default to memory backend for tests to avoid filesystem dependencies
os.environ.setdefault("PERSISTENCE_BACKEND", "memory")

from todo_store.main import app  # noqa: E402
from todo_store.repositories import InMemoryStorage, ToDoStore, get_store  # noqa: E402

from .fakes import FakeClock, sequential_ids  # noqa: E402


@pytest.fixture()
def clock():
    return FakeClock()


@pytest.fixture()
def store(clock):
    return ToDoStore(InMemoryStorage(), clock=clock, id_factory=sequential_ids())


@pytest.fixture()
def client(store):
    # Each test gets its own empty store behind the API
    app.dependency_overrides[get_store] = lambda: store
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
