import logging
import uuid
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from sqlalchemy.exc import DBAPIError, OperationalError
from starlette.exceptions import HTTPException as StarletteHTTPException

from backend.clients.rest_countries import CountriesClient
from backend.db.connection import (
    dispose_engine,
    get_database_type,
    get_database_url,
    get_session_factory,
    init_models,
    sanitize_database_url,
)
from backend.services.country_catalog import CountryCatalog
from backend.services.favorites import (
    FavoritesStore,
    InvalidCountryId,
    SqlKeyValueStorage,
)
from backend.settings import AppSettings, get_settings

from .api import countries, favorites, rankings, regions
from .schemas.error import ErrorType, ValidationErrorDetail
from .utils.error_responses import (
    build_error_response,
    build_validation_error_response,
)
from .utils.request_context import get_request_id, set_request_id

settings = get_settings()

# Configure logging
logging.basicConfig(
    level=settings.log_level_numeric,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


def validate_environment(active_settings: AppSettings | None = None) -> None:
    """Log warnings for optional configuration left at its default."""
    warnings = (active_settings or settings).optional_config_warnings()
    if warnings:
        logger.warning("=" * 60)
        logger.warning("Environment Configuration Warnings:")
        for warning in warnings:
            logger.warning("  • %s", warning)
        logger.warning("=" * 60)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Open the shared HTTP client and storage, then release them on shutdown."""
    validate_environment()

    logger.info("=" * 60)
    logger.info("Country Atlas API - Startup")
    logger.info("=" * 60)
    logger.info("Countries API: %s", settings.resolved_countries_api_base_url)
    logger.info("Storage Type: %s", get_database_type().upper())
    logger.info("Storage URL: %s", sanitize_database_url(get_database_url()))
    logger.info("=" * 60)

    await init_models()

    http_client = httpx.AsyncClient()
    countries_client = CountriesClient(
        http_client,
        base_url=settings.resolved_countries_api_base_url,
        all_fields=settings.countries_api_fields,
    )
    app.state.countries_client = countries_client
    app.state.country_catalog = CountryCatalog(countries_client)
    app.state.favorites_store = FavoritesStore(
        SqlKeyValueStorage(get_session_factory()),
        key=settings.favorites_storage_key,
    )

    yield

    logger.info("Shutting down Country Atlas API")
    await http_client.aclose()
    await dispose_engine()


app = FastAPI(
    title="Country Atlas API",
    version="0.1.0",
    description="Searchable encyclopedia of countries backed by the REST Countries API.",
    lifespan=lifespan,
    redirect_slashes=False,
)


def _default_origins() -> list[str]:
    ports = list(range(3000, 3011)) + [5173]
    origins = []
    for host in ("localhost", "127.0.0.1"):
        origins.extend([f"http://{host}:{port}" for port in ports])
    return origins


def _combine_origins(*origin_groups: list[str]) -> list[str]:
    """Merge origins preserving order and removing duplicates."""
    seen: set[str] = set()
    combined: list[str] = []
    for group in origin_groups:
        for origin in group:
            normalized = origin.rstrip("/")
            if normalized and normalized not in seen:
                seen.add(normalized)
                combined.append(normalized)
    return combined


allow_origins = _combine_origins(_default_origins(), settings.cors_allow_origins)
logger.info("Configured CORS allow_origins: %s", ", ".join(allow_origins))

app.add_middleware(
    CORSMiddleware,
    allow_origins=allow_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    allow_origin_regex=settings.cors_allow_origin_regex,
)


# Middleware to add request ID to each request
@app.middleware("http")
async def add_request_id(request: Request, call_next):
    """Add unique request ID to each request for tracking."""
    request_id = str(uuid.uuid4())
    set_request_id(request_id)
    response = await call_next(request)
    response.headers["X-Request-ID"] = request_id
    return response


def _validation_details(exc: RequestValidationError | ValidationError) -> list[ValidationErrorDetail]:
    return [
        ValidationErrorDetail(
            field=".".join(str(loc) for loc in error["loc"]),
            message=error["msg"],
            value=error.get("input"),
        )
        for error in exc.errors()
    ]


# Exception handlers
@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Handle FastAPI request validation errors."""
    errors = _validation_details(exc)

    logger.warning(
        "Validation error for request %s to %s: %s errors",
        get_request_id(),
        request.url.path,
        len(errors),
    )

    error_response = build_validation_error_response(
        message="Request validation failed",
        detail=f"{len(errors)} validation error(s)",
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        path=str(request.url.path),
        errors=errors,
    )

    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content=error_response.model_dump(mode="json"),
    )


@app.exception_handler(ValidationError)
async def pydantic_validation_exception_handler(request: Request, exc: ValidationError):
    """Handle Pydantic validation errors raised while building responses."""
    errors = _validation_details(exc)

    logger.warning(
        "Pydantic validation error for request %s to %s: %s errors",
        get_request_id(),
        request.url.path,
        len(errors),
    )

    error_response = build_validation_error_response(
        message="Data validation failed",
        detail=f"{len(errors)} validation error(s)",
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        path=str(request.url.path),
        errors=errors,
    )

    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content=error_response.model_dump(mode="json"),
    )


@app.exception_handler(InvalidCountryId)
async def invalid_country_id_handler(request: Request, exc: InvalidCountryId):
    """Reject blank country identifiers in paths such as ``/favorites/%20/toggle``."""
    error_response = build_validation_error_response(
        message="Request validation failed",
        detail=str(exc),
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        path=str(request.url.path),
        errors=[
            ValidationErrorDetail(
                field="path.country_id",
                message=str(exc),
                value=request.path_params.get("country_id"),
            )
        ],
    )

    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content=error_response.model_dump(mode="json"),
    )


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Render ``HTTPException`` (404s in particular) with the shared error shape."""
    if exc.status_code == status.HTTP_404_NOT_FOUND:
        error_type = ErrorType.NOT_FOUND
        message = "Resource not found"
    elif exc.status_code < 500:
        error_type = ErrorType.VALIDATION_ERROR
        message = "Request could not be processed"
    else:
        error_type = ErrorType.INTERNAL_ERROR
        message = "Internal server error"

    error_response = build_error_response(
        error_type=error_type,
        message=message,
        detail=str(exc.detail) if exc.detail is not None else None,
        status_code=exc.status_code,
        path=str(request.url.path),
    )

    return JSONResponse(
        status_code=exc.status_code,
        content=error_response.model_dump(mode="json"),
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(OperationalError)
@app.exception_handler(DBAPIError)
async def database_connection_exception_handler(request: Request, exc: Exception):
    """Handle storage connectivity errors."""
    logger.error(
        "Database connection error for request %s to %s: %s",
        get_request_id(),
        request.url.path,
        str(exc),
    )

    error_response = build_error_response(
        error_type=ErrorType.DATABASE_ERROR,
        message="Favorites storage unavailable",
        detail="Unable to reach the favorites storage. Please try again later.",
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        path=str(request.url.path),
        retry_after=5,
    )

    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content=error_response.model_dump(mode="json"),
    )


@app.exception_handler(Exception)
async def generic_exception_handler(request: Request, exc: Exception):
    """Handle all other unhandled exceptions."""
    logger.exception(
        "Unhandled exception for request %s to %s: %s",
        get_request_id(),
        request.url.path,
        type(exc).__name__,
    )

    error_response = build_error_response(
        error_type=ErrorType.INTERNAL_ERROR,
        message="Internal server error",
        detail=f"An unexpected error occurred: {type(exc).__name__}",
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        path=str(request.url.path),
    )

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_response.model_dump(mode="json"),
    )


@app.get("/health", tags=["system"])
async def healthcheck() -> dict[str, str]:
    """Simple health endpoint for readiness checks."""
    return {"status": "ok"}


app.include_router(countries.router, prefix="/countries", tags=["countries"])
app.include_router(regions.router, prefix="/regions", tags=["regions"])
app.include_router(rankings.router, prefix="/rankings", tags=["rankings"])
app.include_router(favorites.router, prefix="/favorites", tags=["favorites"])
