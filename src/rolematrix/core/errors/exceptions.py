"""Exception hierarchy for rolematrix.

Every error that can reach an API client derives from AppException and
carries its own HTTP status and machine-readable code; the handlers in
``handlers.py`` turn them into Problem Details bodies.
"""

from typing import Any


class AppException(Exception):
    """Base class for rolematrix errors.

    Attributes:
        message: Human-readable error message
        error_code: Machine-readable code, also the last segment of the problem type URI
        status_code: HTTP status of the response
        details: Extra members merged into the problem body
    """

    message: str = "An unexpected error occurred"
    error_code: str = "internal_error"
    status_code: int = 500

    def __init__(
        self,
        message: str | None = None,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.message = message or type(self).message
        self.error_code = error_code or type(self).error_code
        self.details = dict(details or {})
        super().__init__(self.message)


class NotFoundError(AppException):
    """A role, action, hierarchy node, popup session or user does not exist.

    Example:
        raise NotFoundError("Role not found", resource="role", resource_id="Auditor")
    """

    message = "Resource not found"
    error_code = "not_found"
    status_code = 404

    def __init__(
        self,
        message: str | None = None,
        resource: str | None = None,
        resource_id: str | None = None,
        **kwargs: Any,
    ) -> None:
        details = dict(kwargs.pop("details", None) or {})
        if resource:
            details["resource"] = resource
        if resource_id:
            details["resource_id"] = resource_id
        super().__init__(message, details=details, **kwargs)


class ConflictError(AppException):
    """The change clashes with existing data, e.g. a duplicate email."""

    message = "Resource conflict"
    error_code = "conflict"
    status_code = 409


class ValidationError(AppException):
    """Input passed schema validation but breaks a business rule.

    Example:
        raise ValidationError(
            "Name and Email are required",
            errors=[{"field": "name", "message": "Field required"}],
        )
    """

    message = "Validation error"
    error_code = "validation_error"
    status_code = 422

    def __init__(
        self,
        message: str | None = None,
        errors: list[dict[str, Any]] | None = None,
        **kwargs: Any,
    ) -> None:
        details = dict(kwargs.pop("details", None) or {})
        if errors:
            details["errors"] = errors
        super().__init__(message, details=details, **kwargs)


class BadRequestError(AppException):
    """The request cannot be applied in the current state, e.g. a closed popup editor."""

    message = "Bad request"
    error_code = "bad_request"
    status_code = 400


class HierarchyError(AppException):
    """The module hierarchy, a seed file or a hierarchy path is malformed.

    This is a configuration fault rather than a client error: duplicate
    sibling names, a popup without a submodule, an unparseable permission
    id. API code that builds paths from request input converts it to
    NotFoundError before it can reach a client.
    """

    message = "Invalid module hierarchy"
    error_code = "invalid_hierarchy"
    status_code = 500
