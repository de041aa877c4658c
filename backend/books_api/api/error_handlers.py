"""Error Handlers: global exception handlers translating rejections into {"message": ...}.

Invariants:
    - BookServiceError -> its own http_status and public message
    - RequestValidationError (bad JSON, missing/mistyped field) -> 400 "Invalid Body"
    - Routing misses -> 404 "Not Found"; wrong verb on a known path -> 405 "Method Not Allowed"
    - Exception (catch-all) -> 500 "Internal Server Error", never leaks internal details
    - The specific error kind is only logged, never returned
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from books_api.core.errors import BookServiceError, INTERNAL_ERROR_MESSAGE

logger = logging.getLogger(__name__)

INVALID_BODY_MESSAGE = "Invalid Body"
HTTP_STATUS_MESSAGES = {
    status.HTTP_404_NOT_FOUND: "Not Found",
    status.HTTP_405_METHOD_NOT_ALLOWED: "Method Not Allowed",
}


def register_error_handlers(app: FastAPI) -> None:
    """Register all global error handlers on the FastAPI app."""
    _register_book_service_error_handler(app)
    _register_validation_error_handler(app)
    _register_http_error_handler(app)
    _register_generic_error_handler(app)


def _register_book_service_error_handler(app: FastAPI) -> None:
    """Register data-access/domain error handler."""

    @app.exception_handler(BookServiceError)
    async def book_service_error_handler(request: Request, exc: BookServiceError):
        """Handle all Books API application errors."""
        log = logger.warning if exc.http_status < 500 else logger.error
        log(
            f"{type(exc).__name__}: {exc.message}",
            extra={**exc.to_log_extra(), "path": request.url.path},
        )
        return JSONResponse(
            status_code=exc.http_status, content=exc.to_response(),
        )


def _register_validation_error_handler(app: FastAPI) -> None:
    """Register Pydantic validation error handler."""

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        request: Request, exc: RequestValidationError,
    ):
        logger.warning(
            f"Validation error on {request.url.path}: {exc.errors()}",
            extra={"path": request.url.path, "method": request.method},
        )
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"message": INVALID_BODY_MESSAGE},
        )


def _register_http_error_handler(app: FastAPI) -> None:
    """Register routing/HTTP error handler (404, 405, ...)."""

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        message = HTTP_STATUS_MESSAGES.get(exc.status_code, str(exc.detail))
        return JSONResponse(
            status_code=exc.status_code,
            content={"message": message},
            headers=getattr(exc, "headers", None),
        )


def _register_generic_error_handler(app: FastAPI) -> None:
    """Register catch-all error handler."""

    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception):
        """Catch-all: never leaks internal details."""
        logger.error(
            f"Unhandled exception on {request.url.path}: {exc}",
            exc_info=True,
            extra={"path": request.url.path, "method": request.method},
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"message": INTERNAL_ERROR_MESSAGE},
        )
