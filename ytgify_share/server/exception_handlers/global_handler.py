"""
Exception handlers for the FastAPI application.

Domain errors (``YtgifyError``) become ``{"error", "message", "details"}``
bodies with the status code the error carries. Request validation failures
are reported the same way with status 422. Anything else is logged with an
error id and answered with a 500.
"""

import traceback
import uuid

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from ytgify_share.core.errors import YtgifyError
from ytgify_share.core.logging_config import get_logger
from ytgify_share.core.monitoring import log_error

logger = get_logger(__name__)


def _location(loc) -> str:
    parts = [str(p) for p in loc if p not in ("body", "query", "path", "header")]
    return ".".join(parts) or "request"


async def ytgify_error_handler(request: Request, exc: YtgifyError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(f"{type(exc).__name__} in {request.method} {request.url.path}: {exc.message}")
    else:
        logger.debug(f"{type(exc).__name__} ({exc.status_code}) in {request.method} {request.url.path}: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=jsonable_encoder(exc.to_dict()))


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    details = [f"{_location(err.get('loc', ()))}: {err.get('msg')}" for err in exc.errors()]
    logger.debug(f"Request validation failed for {request.method} {request.url.path}: {details}")
    return JSONResponse(
        status_code=422,
        content={"error": "Validation failed", "message": "Validation failed", "details": details},
    )


async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Log an unhandled exception and answer with a 500.

    The response carries an error id that clients can quote when reporting
    the problem; the same id is in the log record.

    Args:
        request: The HTTP request that caused the exception
        exc: The exception that was raised

    Returns:
        JSONResponse with the error id
    """
    error_id = uuid.uuid4().hex[:12]

    logger.error(
        f"Unhandled exception [{error_id}] in {request.method} {request.url.path}: {str(exc)}",
        exc_info=True,
        extra={
            "error_id": error_id,
            "method": request.method,
            "path": request.url.path,
            "query_params": dict(request.query_params),
            "client": request.client.host if request.client else "unknown",
            "error_type": type(exc).__name__,
            "traceback": traceback.format_exc(),
        },
    )
    log_error(type(exc).__name__, str(exc), {"error_id": error_id, "path": request.url.path})

    return JSONResponse(
        status_code=500,
        content={
            "error": "Internal server error",
            "message": "Something went wrong",
            "error_id": error_id,
        },
    )


def setup_exception_handlers(app: FastAPI) -> None:
    """
    Register exception handlers with the FastAPI application.

    Args:
        app: The FastAPI application instance
    """
    app.add_exception_handler(YtgifyError, ytgify_error_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, global_exception_handler)
    logger.debug("Exception handlers registered successfully")
