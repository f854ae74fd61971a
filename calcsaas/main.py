"""FastAPI application factory. No business logic; only wiring, lifespan and error mapping."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from dotenv import load_dotenv

load_dotenv()

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from calcsaas.api import build_router
from calcsaas.core.config import Settings, get_settings
from calcsaas.core.database import build_engine, build_session_factory
from calcsaas.core.errors import ServiceError
from calcsaas.core.security import TokenService
from calcsaas.models import Base

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Own the database engine for the process lifetime and build shared components once."""
    settings: Settings = app.state.settings
    engine = build_engine(settings)
    if settings.AUTO_CREATE_TABLES:
        Base.metadata.create_all(engine)
    app.state.engine = engine
    app.state.session_factory = build_session_factory(engine)
    app.state.token_service = TokenService.from_settings(settings)
    logger.info("Database ready: %s", engine.url.render_as_string(hide_password=True))
    try:
        yield
    finally:
        engine.dispose()
        logger.info("Database connection closed.")


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


async def handle_service_error(request: Request, exc: ServiceError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(
            "%s on %s %s: %r",
            type(exc).__name__,
            request.method,
            request.url.path,
            exc.cause,
        )
    return _error(exc.status_code, exc.message)


async def handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    return _error(status.HTTP_400_BAD_REQUEST, "Invalid request body")


async def handle_http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    # Unknown path and known path with the wrong method both read as "no such route".
    if exc.status_code in (status.HTTP_404_NOT_FOUND, status.HTTP_405_METHOD_NOT_ALLOWED):
        return _error(status.HTTP_404_NOT_FOUND, "Route not found")
    return _error(exc.status_code, str(exc.detail))


async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, "Something went wrong!")


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the application. Settings are fixed for the lifetime of the returned app."""
    settings = settings or get_settings()

    app = FastAPI(
        title="Calculator SaaS API",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )
    app.state.settings = settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"] if settings.APP_ENV == "dev" else [],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(ServiceError, handle_service_error)
    app.add_exception_handler(RequestValidationError, handle_validation_error)
    app.add_exception_handler(StarletteHTTPException, handle_http_error)
    app.add_exception_handler(Exception, handle_unexpected_error)

    app.include_router(build_router(include_debug=settings.DEBUG), prefix=settings.API_PREFIX)

    @app.get("/")
    def root() -> dict[str, str]:
        """Root route; minimal payload for discovery."""
        return {"message": "Calculator SaaS API is running!"}

    return app


app = create_app()
