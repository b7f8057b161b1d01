"""Exception handlers rendering RFC 7807 Problem Details.

See: https://tools.ietf.org/html/rfc7807
"""

from typing import TYPE_CHECKING, Any, cast

import structlog
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict

from rolematrix.config import get_settings
from rolematrix.core.errors.exceptions import AppException, HierarchyError


if TYPE_CHECKING:
    from starlette.types import ExceptionHandler


logger = structlog.get_logger()


class FieldError(BaseModel):
    """One invalid request field."""

    field: str
    message: str
    type: str | None = None


class ProblemDetail(BaseModel):
    """Problem Details body.

    Extra members (``resource``, ``resource_id``, ``errors`` ...) come from
    the exception's details.
    """

    model_config = ConfigDict(extra="allow")

    type: str
    title: str
    status: int
    detail: str
    instance: str | None = None
    errors: list[FieldError] | None = None
    trace_id: str | None = None


def _problem(
    request: Request,
    status_code: int,
    error_code: str,
    detail: str,
    **extra: Any,
) -> JSONResponse:
    body = ProblemDetail(
        type=f"{get_settings().api_docs_base_url}/errors/{error_code}",
        title=error_code.replace("_", " ").title(),
        status=status_code,
        detail=detail,
        instance=request.url.path,
        trace_id=getattr(request.state, "request_id", None),
        **extra,
    )
    return JSONResponse(status_code=status_code, content=body.model_dump(exclude_none=True))


async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
    """Render an AppException with its details as extra members.

    A HierarchyError means the server's configuration is broken, so its
    details are logged but kept out of the response.
    """
    if isinstance(exc, HierarchyError):
        logger.error(
            "hierarchy_error",
            message=exc.message,
            path=request.url.path,
            details=exc.details,
        )
        return _problem(request, exc.status_code, exc.error_code, exc.message)

    logger.warning(
        "app_exception",
        error_code=exc.error_code,
        status_code=exc.status_code,
        path=request.url.path,
        details=exc.details,
    )
    reserved = ProblemDetail.model_fields.keys()
    extra = {key: value for key, value in exc.details.items() if key not in reserved}
    if "errors" in exc.details:
        extra["errors"] = exc.details["errors"]
    return _problem(request, exc.status_code, exc.error_code, exc.message, **extra)


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Render request validation failures as a 422 with one entry per field."""
    errors = [
        FieldError(
            field=".".join(str(part) for part in error.get("loc", ()) if part != "body")
            or "unknown",
            message=error.get("msg", "Invalid value"),
            type=error.get("type"),
        )
        for error in exc.errors()
    ]
    logger.warning("validation_error", path=request.url.path, error_count=len(errors))
    return _problem(
        request,
        status.HTTP_422_UNPROCESSABLE_ENTITY,
        "validation_error",
        "Request validation failed",
        errors=errors,
    )


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Log an unexpected exception and hide it behind a generic 500."""
    logger.exception(
        "unhandled_exception",
        path=request.url.path,
        error_type=type(exc).__name__,
    )
    return _problem(
        request,
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "internal_error",
        "An unexpected error occurred",
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Install the Problem Details handlers on ``app``."""
    app.add_exception_handler(
        AppException, cast("ExceptionHandler", app_exception_handler)
    )
    app.add_exception_handler(
        RequestValidationError, cast("ExceptionHandler", validation_exception_handler)
    )
    app.add_exception_handler(Exception, generic_exception_handler)
