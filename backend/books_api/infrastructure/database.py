"""Database Connection Manager: async MongoDB client owning the books collection.

Invariants:
    - One client per process, created in the FastAPI lifespan and closed on shutdown
    - The client and repository live on app.state; routes receive them via Depends
    - A malformed endpoint fails at connect() with DatabaseConnectionError
    - Pooling and per-operation timeouts are left to driver defaults

Design Decisions:
    - tz_aware client: added_at comes back as an aware UTC datetime
    - No connectivity check at connect(): the driver connects lazily, readiness
      checks call health_check()
"""

import logging

from fastapi import Request
from pymongo import AsyncMongoClient
from pymongo.errors import ConfigurationError, PyMongoError

from books_api.core.errors import DatabaseConnectionError
from books_api.core.repository_protocols import BookStore

logger = logging.getLogger(__name__)


class MongoConnectionManager:
    """Owns the MongoDB client and the books collection handle."""

    def __init__(self, client, database_name: str, collection_name: str):
        self.client = client
        self.database_name = database_name
        self.collection_name = collection_name
        self.collection = client[database_name][collection_name]

    @classmethod
    def connect(
        cls, url: str, database_name: str, collection_name: str,
    ) -> "MongoConnectionManager":
        """Build the client for url; no IO happens until the first operation."""
        try:
            client = AsyncMongoClient(url, tz_aware=True)
        except (ConfigurationError, ValueError) as e:
            logger.error(f"Invalid MongoDB configuration: {e}")
            raise DatabaseConnectionError(str(e), "connect") from e
        logger.info(
            f"MongoDB client ready for {database_name}.{collection_name}",
        )
        return cls(client, database_name, collection_name)

    async def health_check(self) -> bool:
        """Ping the server (for readiness checks)."""
        try:
            await self.client.admin.command("ping")
            return True
        except PyMongoError as e:
            logger.error(f"MongoDB health check failed: {e}")
            return False

    async def close(self) -> None:
        await self.client.close()


def get_database(request: Request) -> MongoConnectionManager:
    """FastAPI dependency for the connection manager."""
    database = getattr(request.app.state, "database", None)
    if database is None:
        raise RuntimeError("Database not initialized")
    return database


def get_book_repository(request: Request) -> BookStore:
    """FastAPI dependency for the book repository."""
    repository = getattr(request.app.state, "book_repository", None)
    if repository is None:
        raise RuntimeError("Database not initialized")
    return repository
