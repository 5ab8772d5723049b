"""FastAPI application entry point."""

import uuid
from collections.abc import AsyncIterator, Callable
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from cookbook.client.base import CookbookClient
from cookbook.client.http import CookbookHttpClient
from cookbook.config import get_settings
from cookbook.errors import (
    CookbookError,
    EntityNotFound,
    InvalidEntity,
    InvalidToken,
    SessionExpired,
)
from cookbook.logging_config import LoggingContext, configure_logging, get_logger
from cookbook.routers import entities_router
from cookbook.routers.entities import get_client

settings = get_settings()

# Configure logging on module load
configure_logging(log_level=settings.log_level)
logger = get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"

# Most specific first; the first matching class decides the status.
_ERROR_STATUS: list[tuple[type[CookbookError], int]] = [
    (InvalidEntity, 422),
    (EntityNotFound, 404),
    (SessionExpired, 401),
    (InvalidToken, 401),
    (CookbookError, 502),
]


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan handler for startup and shutdown events."""
    logger.info("Starting Cookbook connector API")
    app.state.cookbook_client = CookbookHttpClient()

    yield

    logger.info("Shutting down Cookbook connector API")
    await app.state.cookbook_client.close()
    app.state.cookbook_client = None


app = FastAPI(
    title="Cookbook Connector API",
    description="Recipe and ingredient operations backed by the cookbook service",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins.split(","),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(entities_router)


@app.exception_handler(CookbookError)
async def cookbook_error_handler(request: Request, exc: CookbookError) -> JSONResponse:
    """Map connector errors onto HTTP responses."""
    status_code = next(code for cls, code in _ERROR_STATUS if isinstance(exc, cls))
    content: dict = {"detail": str(exc), "error": type(exc).__name__}
    if isinstance(exc, InvalidEntity) and exc.fields:
        content["fields"] = list(exc.fields)
    if exc.status_code is not None:
        content["upstream_status"] = exc.status_code

    logger.warning(f"{request.method} {request.url.path} failed: {type(exc).__name__}: {exc}")
    return JSONResponse(status_code=status_code, content=content)


@app.middleware("http")
async def request_id_middleware(request: Request, call_next: Callable) -> Response:
    """Tag every log line of a request with its request id."""
    request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
    with LoggingContext(request_id=request_id):
        response = await call_next(request)
    response.headers[REQUEST_ID_HEADER] = request_id
    return response


@app.get("/health")
async def health_check(client: CookbookClient = Depends(get_client)) -> dict:
    """Health check including reachability of the cookbook service."""
    cookbook_ok = await client.health_check()
    return {
        "status": "ok" if cookbook_ok else "degraded",
        "service": "cookbook-connector",
        "cookbook": cookbook_ok,
    }


@app.get("/")
async def root() -> dict:
    """Root endpoint with API information."""
    return {
        "name": "Cookbook Connector API",
        "version": "0.1.0",
        "docs": "/docs",
        "health": "/health",
    }
