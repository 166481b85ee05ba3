"""FastAPI application entry point."""

import logging
import sys
import traceback

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from sqlalchemy.exc import DataError, IntegrityError, OperationalError

from travelin_api import __version__
from travelin_api.config import settings
from travelin_api.errors import (
    ApiError,
    ConflictError,
    InternalServerError,
    InvalidDataError,
    MandatoryDataMissingError,
)
from travelin_api.errors import ValidationError as ApiValidationError
from travelin_api.formatting import format_error
from travelin_api.routers import auth_router
from travelin_api.routes import bookings_router, favorites_router, pois_router

logger = logging.getLogger(__name__)


def setup_logging() -> None:
    """Configure logging for the API."""
    level = getattr(logging, settings.log_level.upper(), logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stdout,
    )


setup_logging()

app = FastAPI(
    title="Travelin API",
    description="Points of interest search, favorites and bookings",
    version=__version__,
)

# CORS middleware - allow frontend origins
origins = list(settings.cors_origins)
if settings.frontend_url and settings.frontend_url not in origins:
    origins.append(settings.frontend_url)

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_middleware(GZipMiddleware, minimum_size=1000)

app.include_router(auth_router)
app.include_router(pois_router)
app.include_router(bookings_router)
app.include_router(favorites_router)


@app.get("/")
async def root():
    """Service info."""
    return {
        "status": "ok",
        "service": "travelin-api",
        "version": __version__,
        "api": f"{settings.base_url}{settings.api_prefix}",
    }


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {"status": "healthy"}


@app.get(settings.api_prefix)
async def api_index():
    """Index of the available endpoints."""
    prefix = f"{settings.base_url}{settings.api_prefix}"
    return {
        "data": {
            "version": "v1",
            "endpoints": {
                "auth": f"{prefix}/auth",
                "pois": f"{prefix}/reference-data/locations/pois",
                "poisBySquare": f"{prefix}/reference-data/locations/pois/by-square",
                "poisByName": f"{prefix}/reference-data/locations/pois/by-name",
                "bookings": f"{prefix}/bookings",
                "availability": f"{prefix}/bookings/availability",
                "favorites": f"{prefix}/favorites",
            },
        }
    }


def _error_response(error: ApiError) -> JSONResponse:
    return JSONResponse(
        status_code=error.status,
        content=format_error(error.status, error.code, error.title, error.detail, error.source),
    )


@app.exception_handler(ApiError)
async def api_error_handler(request: Request, exc: ApiError):
    """Render domain errors as an ``errors`` envelope."""
    if exc.status >= 500:
        logger.error("API error on %s %s: %s", request.method, request.url, exc)
    else:
        logger.debug("API error on %s %s: %s", request.method, request.url, exc)
    return _error_response(exc)


@app.exception_handler(RequestValidationError)
async def request_validation_error_handler(request: Request, exc: RequestValidationError):
    """Handle malformed bodies, paths and query strings.

    Only the first problem is reported, with the offending field in
    ``source.parameter``.
    """
    errors = exc.errors()
    first = errors[0] if errors else {}
    loc = [str(part) for part in first.get("loc", ()) if part not in ("body", "query", "path")]
    parameter = loc[-1] if loc else None
    message = first.get("msg", "Invalid request")
    source = {"parameter": parameter} if parameter else None

    if first.get("type") == "missing":
        error = MandatoryDataMissingError(f"{parameter or 'field'} is required", source)
    else:
        detail = f"{parameter}: {message}" if parameter else message
        error = ApiValidationError(detail, source)
    return _error_response(error)


@app.exception_handler(IntegrityError)
async def integrity_error_handler(request: Request, exc: IntegrityError):
    """Handle database integrity errors (unique constraint, foreign key violations).

    Returns 409 Conflict for constraint violations.
    """
    logger.warning(
        "Database integrity error on %s %s: %s", request.method, request.url, exc.orig
    )
    error_msg = str(exc.orig) if exc.orig else str(exc)

    if "foreign key" in error_msg.lower():
        detail = "Referenced resource does not exist"
    elif "unique" in error_msg.lower() or "duplicate" in error_msg.lower():
        detail = "Resource already exists"
    else:
        detail = "Database constraint violation"

    return _error_response(ConflictError(detail))


@app.exception_handler(OperationalError)
async def operational_error_handler(request: Request, exc: OperationalError):
    """Handle database operational errors (connection issues, timeouts).

    Returns 503 Service Unavailable for database connectivity issues.
    """
    logger.error(
        "Database operational error on %s %s: %s\n%s",
        request.method,
        request.url,
        exc,
        traceback.format_exc(),
    )
    error = InternalServerError("Database temporarily unavailable")
    return JSONResponse(
        status_code=503,
        content=format_error(503, error.code, error.title, error.detail),
    )


@app.exception_handler(DataError)
async def data_error_handler(request: Request, exc: DataError):
    """Handle database data errors (invalid data types, out of range values).

    Returns 400 Bad Request for invalid data.
    """
    logger.warning("Database data error on %s %s: %s", request.method, request.url, exc.orig)
    return _error_response(InvalidDataError("Invalid data format for database field"))


@app.exception_handler(ValidationError)
async def validation_error_handler(request: Request, exc: ValidationError):
    """Handle Pydantic validation errors that occur in business logic.

    FastAPI reports request validation errors through RequestValidationError.
    This catches validation errors raised while building read models or
    responses.
    """
    logger.warning("Validation error on %s %s: %s", request.method, request.url, exc)
    return JSONResponse(
        status_code=422,
        content=format_error(422, 477, "INVALID FORMAT", "Data validation failed"),
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Log unhandled errors with their stack trace and return a 500 envelope."""
    logger.error(
        "Unhandled exception on %s %s: %s\n%s",
        request.method,
        request.url,
        exc,
        traceback.format_exc(),
    )
    return _error_response(InternalServerError())
