"""Error handling module with RFC 7807 Problem Details."""

from rolematrix.core.errors.exceptions import (
    AppException,
    BadRequestError,
    ConflictError,
    HierarchyError,
    NotFoundError,
    ValidationError,
)
from rolematrix.core.errors.handlers import (
    FieldError,
    ProblemDetail,
    register_exception_handlers,
)


__all__ = [
    # Exceptions
    "AppException",
    "BadRequestError",
    "ConflictError",
    # Handlers
    "FieldError",
    "HierarchyError",
    "NotFoundError",
    "ProblemDetail",
    "ValidationError",
    "register_exception_handlers",
]
