"""
Exception Handlers for the FastAPI Application.

- ``UserFriendlyError`` subclasses become their JSON form with their status.
- Request validation errors on the sign-in email become ``INVALID_EMAIL`` and
  missing magic link parameters become ``INVALID_EMAIL_TOKEN``; other
  validation errors keep the default 422 answer.
- Any other exception is logged with an error ID and answered with a 500.
"""

import traceback

from fastapi import FastAPI, Request
from fastapi.exception_handlers import request_validation_exception_handler
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from affine_cloud.core.errors import InternalServerError, InvalidEmail, InvalidEmailToken, UserFriendlyError
from affine_cloud.core.logging_config import get_logger
from affine_cloud.core.monitoring import log_error
from affine_cloud.server.core.constant import API_PREFIX

logger = get_logger(__name__)

AUTH_PATH_PREFIX = f"{API_PREFIX}/auth/"
MAGIC_LINK_PATH = f"{AUTH_PATH_PREFIX}magic-link"


async def user_friendly_error_handler(request: Request, exc: UserFriendlyError) -> JSONResponse:
    """Serialize a domain error into ``{status, code, type, name, message, data}``."""
    if exc.status >= 500:
        logger.error(f"{exc.name.value} in {request.method} {request.url.path}: {exc.message}")
        log_error(exc.name.value, exc.message, {"method": request.method, "path": request.url.path})
    else:
        logger.info(f"{exc.name.value} in {request.method} {request.url.path}")
    return JSONResponse(status_code=exc.status, content=exc.to_json())


def _is_email_error(error: dict) -> bool:
    loc = tuple(error.get("loc", ()))
    return loc == ("body",) or loc[:2] == ("body", "email")


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    path = request.url.path
    if path == MAGIC_LINK_PATH:
        return await user_friendly_error_handler(request, InvalidEmailToken())
    if path.startswith(AUTH_PATH_PREFIX) and any(_is_email_error(error) for error in exc.errors()):
        return await user_friendly_error_handler(request, InvalidEmail())
    return await request_validation_exception_handler(request, exc)


async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Global exception handler to log detailed error information.

    This handler is called for any unhandled exception in the application.
    It logs the full error context and returns a JSON response with an error ID
    that clients can use to reference the error when reporting issues.

    Args:
        request: The HTTP request that caused the exception
        exc: The exception that was raised

    Returns:
        JSONResponse with error details and error ID
    """
    error_id = id(exc)

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

    body = InternalServerError().to_json()
    body["error_id"] = error_id
    body["error_type"] = type(exc).__name__
    return JSONResponse(status_code=500, content=body)


def setup_exception_handlers(app: FastAPI) -> None:
    """
    Register exception handlers with the FastAPI application.

    Args:
        app: The FastAPI application instance
    """
    app.add_exception_handler(UserFriendlyError, user_friendly_error_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, global_exception_handler)
    logger.debug("Exception handlers registered successfully")
