"""Global exception handlers for FastAPI."""

import logging

from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.requests import Request
from starlette.responses import JSONResponse

from .llm.client import LLMUnavailableError

logger = logging.getLogger(__name__)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Handle HTTPException -- return detail without extra info."""
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail},
        headers=getattr(exc, "headers", None),
    )


def _field_name(loc: tuple) -> str:
    field_parts = [str(part) for part in loc if part != "body"]
    return ".".join(field_parts) if field_parts else "unknown"


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Handle RequestValidationError.

    Request bodies carry unmasked clinical text, so neither the response nor
    the log includes the rejected ``input`` value; only the field path, the
    message and the error type are reported.
    """
    errors = [
        {
            "field": _field_name(error.get("loc", ())),
            "msg": error.get("msg", "Validation error"),
            "type": error.get("type", "value_error"),
        }
        for error in exc.errors()
    ]
    fields = ", ".join(error["field"] for error in errors)
    logger.info(f"Rejected {request.method} {request.url.path}: invalid {fields}")
    return JSONResponse(
        status_code=422,
        content={"detail": errors},
    )


async def llm_unavailable_handler(request: Request, exc: LLMUnavailableError) -> JSONResponse:
    """Handle a missing LLM configuration as a temporary outage."""
    logger.error(f"LLM unavailable on {request.method} {request.url.path}: {exc}")
    return JSONResponse(
        status_code=503,
        content={"detail": "LLM が設定されていません。"},
    )


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle unexpected exceptions -- log but never expose stack trace."""
    logger.exception("Unhandled exception on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=500,
        content={"detail": "Internal server error"},
    )
