"""Root conftest: shared test configuration and fixtures.

Invariants:
    - Every test gets a fresh FakeCollection and a TickingClock
    - get_book_repository overridden so routes never touch a real MongoDB
"""

import os

# Ensure tests don't accidentally target a real database
os.environ.setdefault("MONGODB_URL", "mongodb://127.0.0.1:27017")
os.environ.setdefault("MONGODB_DATABASE", "booksDB_test")
os.environ.setdefault("LOG_FORMAT", "text")

import pytest  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402

from books_api.infrastructure.book_repository import BookRepository  # noqa: E402
from books_api.infrastructure.database import get_book_repository  # noqa: E402
from books_api.main import app  # noqa: E402
from tests.fake_mongo import FakeCollection, TickingClock  # noqa: E402


@pytest.fixture
def fake_collection():
    return FakeCollection()


@pytest.fixture
def clock():
    return TickingClock()


@pytest.fixture
def repository(fake_collection, clock):
    return BookRepository(fake_collection, clock=clock)


@pytest.fixture
async def client(repository):
    """FastAPI test client with the repository dependency overridden."""
    app.dependency_overrides[get_book_repository] = lambda: repository
    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c
    app.dependency_overrides.clear()
