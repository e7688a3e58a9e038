"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager
from datetime import timedelta

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from src.api import auth, posts
from src.config import Settings, get_settings
from src.database import Database
from src.errors import BlogError, StoreError, ValidationError
from src.services.auth import CredentialHasher, TokenService

logger = logging.getLogger(__name__)

LOCATION_PREFIXES = ("body", "query", "path", "header")


def blog_error_handler(request: Request, exc: BlogError) -> JSONResponse:
    """Render a service error with its status code."""
    content: dict = {"detail": exc.detail}
    if isinstance(exc, ValidationError) and exc.errors:
        content["errors"] = exc.errors
    return JSONResponse(status_code=exc.status_code, content=content, headers=exc.headers)


def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Report invalid input as 400 with one message per field."""
    errors = []
    for error in exc.errors():
        field = ".".join(str(part) for part in error["loc"] if part not in LOCATION_PREFIXES)
        errors.append(f"{field}: {error['msg']}" if field else error["msg"])
    return blog_error_handler(request, ValidationError("Validation failed", errors=errors))


def store_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    """Log database failures; clients only get a generic message."""
    logger.error(f"Database error on {request.method} {request.url.path}: {exc}")
    return blog_error_handler(request, StoreError())


def unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Anything unhandled still gets the JSON error shape, never a traceback."""
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return blog_error_handler(request, StoreError())


def create_app(settings: Settings | None = None, database: Database | None = None) -> FastAPI:
    """Build the application.

    ``database`` lets callers (tests, scripts) supply their own store; by
    default one is created from ``settings.database_url`` at startup.
    """
    settings = settings or get_settings()
    logging.basicConfig(level=settings.log_level.upper())

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Create the data store on startup and dispose of it on shutdown."""
        db = database or Database(settings.database_url)
        if settings.should_create_tables:
            db.create_all()
        app.state.database = db
        logger.info(f"Blog API started ({settings.environment})")
        yield
        if database is None:
            db.dispose()

    app = FastAPI(
        title="Blog API",
        description="Blog backend with JWT authentication and post ownership",
        version="0.1.0",
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.credential_hasher = CredentialHasher(rounds=settings.bcrypt_rounds)
    app.state.token_service = TokenService(
        settings.jwt_secret,
        algorithm=settings.jwt_algorithm,
        expires_in=timedelta(minutes=settings.jwt_expiration_minutes),
    )

    # CORS middleware for development
    if settings.is_development:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=["http://localhost:3000", "http://localhost:5173"],
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    app.add_exception_handler(BlogError, blog_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(SQLAlchemyError, store_error_handler)
    app.add_exception_handler(Exception, unexpected_error_handler)

    # Register routers
    app.include_router(auth.router)
    app.include_router(posts.router)

    @app.get("/health")
    async def health_check():
        """Health check endpoint."""
        return {"status": "healthy", "environment": settings.environment}

    return app
