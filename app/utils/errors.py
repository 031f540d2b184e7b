"""Error response helpers and application-wide exception handlers."""
import logging

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


def field_errors_response(errors: list[dict]) -> JSONResponse:
    """
    Build a 400 response listing field-level problems.

    Args:
        errors: Items of the form {"field": ..., "message": ...}

    Returns:
        JSONResponse with body {"detail": "Validation error", "errors": [...]}
    """
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": "Validation error", "errors": errors},
    )


def _field_name(loc: tuple) -> str:
    # Drop the request part ("body", "path", "query") from the location
    return ".".join(str(part) for part in loc[1:]) or str(loc[0])


def _error_message(error: dict) -> str:
    if error.get("type") == "value_error" and "error" in error.get("ctx", {}):
        return str(error["ctx"]["error"])
    return error["msg"]


async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Report malformed input as 400 with one entry per offending field."""
    errors = [
        {"field": _field_name(error["loc"]), "message": _error_message(error)}
        for error in exc.errors()
    ]
    logger.info(f"Rejected {request.method} {request.url.path}: {errors}")
    return field_errors_response(errors)


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Log unexpected failures in full and return a generic 500."""
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error"},
    )
