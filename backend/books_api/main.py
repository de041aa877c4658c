"""Books API: FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map every rejection to {"message": ...} JSON
    - CORS configured from settings (not hardcoded)
    - MongoDB client and BookRepository built once in the lifespan, stored on
      app.state, and injected into routes via Depends
"""

import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from books_api.api.error_handlers import register_error_handlers
from books_api.api.routes import books, health
from books_api.config import get_settings
from books_api.infrastructure.book_repository import BookRepository
from books_api.infrastructure.database import MongoConnectionManager
from books_api.infrastructure.observability import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    database = MongoConnectionManager.connect(
        settings.mongodb_url,
        settings.mongodb_database,
        settings.mongodb_collection,
    )
    app.state.database = database
    app.state.book_repository = BookRepository(database.collection)
    logger.info("Books API started")
    yield
    logger.info("Books API shutting down")
    await database.close()


def create_app() -> FastAPI:
    settings = get_settings()
    app = FastAPI(title="Books API", version="1.0.0", lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(health.router)
    app.include_router(books.router)

    register_error_handlers(app)
    return app


app = create_app()


def run() -> None:
    """Console entry point: serve the app with uvicorn."""
    settings = get_settings()
    uvicorn.run(
        "books_api.main:app", host=settings.api_host, port=settings.api_port,
    )


if __name__ == "__main__":
    run()
