from fastapi import Request, status
from fastapi.responses import JSONResponse
from loguru import logger
from starlette.exceptions import HTTPException as StarletteHTTPException


class AcademyError(Exception):
    """Base class for errors raised by the enrollment service."""


class PersistenceError(AcademyError):
    """The database rejected an insert, returned no row, or is not configured."""


class BlobUploadError(AcademyError):
    """Object storage rejected or failed an upload."""


async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    headers = getattr(exc, "headers", None)
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail},
        headers=headers,
    )


async def academy_error_handler(request: Request, exc: AcademyError) -> JSONResponse:
    logger.opt(exception=exc).error(
        "{} on {} {}: {}", type(exc).__name__, request.method, request.url.path, exc
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "Service unavailable", "details": str(exc)},
    )


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.opt(exception=exc).error(
        "Unhandled error on {} {}: {}", request.method, request.url.path, exc
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "Internal server error", "details": str(exc)},
    )
