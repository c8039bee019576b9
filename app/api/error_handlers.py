"""
Exception Handlers
------------------
Application-wide handlers registered on the FastAPI app.

Validation failures are reshaped into {message, errors: {field: [..]}}
and anything unhandled becomes a generic 500 with no internals.
"""

from typing import Dict, List

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from loguru import logger


def _field_name(location: tuple) -> str:
    parts = [str(part) for part in location if part not in ("body", "query", "header")]
    return ".".join(parts) or "body"


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Return 422 with per-field messages."""
    errors: Dict[str, List[str]] = {}
    for error in exc.errors():
        errors.setdefault(_field_name(tuple(error.get("loc", ()))), []).append(
            error.get("msg", "Invalid value")
        )

    first_field = next(iter(errors), "body")
    message = f"{first_field}: {errors[first_field][0]}" if errors else "Invalid request"

    logger.info(f"Request validation failed on {request.url.path}: {list(errors)}")
    return JSONResponse(
        status_code=422,
        content={"message": message, "errors": errors},
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Log the failure and answer with a generic server error."""
    logger.opt(exception=exc).error(f"Unhandled error on {request.url.path}: {exc}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"message": "Server Error"},
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
