"""FastAPI application factory and setup."""

import time
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger
from starlette.responses import JSONResponse

from .. import __version__
from ..db.sqlite import Database, get_db
from ..errors import BookReviewError, StoreFailure, ValidationFailure
from .routers import auth, books, reviews


def _error_response(exc: BookReviewError) -> JSONResponse:
    """``{"msg": ...}`` body with the error's status; store failures stay generic."""
    if isinstance(exc, StoreFailure):
        return JSONResponse(status_code=500, content={"msg": "Server error"})
    return JSONResponse(status_code=exc.status_code, content={"msg": exc.message})


def _validation_message(exc: RequestValidationError) -> str:
    """Short message naming the first invalid field."""
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    first = errors[0]
    field = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = first.get("msg", "is invalid")
    return f"{field}: {message}" if field else message


def create_app(db: Optional[Database] = None) -> FastAPI:
    """Build the API application.

    Args:
        db: Database to serve from (defaults to the global database)

    Returns:
        Configured FastAPI app
    """
    app = FastAPI(
        title="Book Reviews",
        description="Book catalog with star ratings and text reviews.",
        version=__version__,
    )
    app.state.db = db or get_db()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        start = time.perf_counter()
        response = await call_next(request)
        duration_ms = (time.perf_counter() - start) * 1000
        logger.info(
            "{} {} -> {} ({:.1f} ms)",
            request.method,
            request.url.path,
            response.status_code,
            duration_ms,
        )
        return response

    @app.exception_handler(BookReviewError)
    async def handle_book_review_error(request: Request, exc: BookReviewError):
        return _error_response(exc)

    @app.exception_handler(RequestValidationError)
    async def handle_validation_error(request: Request, exc: RequestValidationError):
        return _error_response(ValidationFailure(_validation_message(exc)))

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        logger.exception("Unhandled error on {} {}", request.method, request.url.path)
        return JSONResponse(status_code=500, content={"msg": "Server error"})

    @app.get("/")
    def health_check() -> dict[str, str]:
        return {"status": "ok", "message": "API Running"}

    app.include_router(auth.router, prefix="/api/auth", tags=["auth"])
    app.include_router(books.router, prefix="/api/books", tags=["books"])
    app.include_router(reviews.router, prefix="/api/reviews", tags=["reviews"])

    return app
