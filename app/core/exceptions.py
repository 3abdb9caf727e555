"""Custom exceptions for the application."""

from fastapi import HTTPException, status


class ApplicationError(Exception):
    """Base exception for application errors."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(self.message)


class GatewayError(ApplicationError):
    """Raised when the data store fails on a primary read or write path."""

    def __init__(self, operation: str, detail: str):
        self.operation = operation
        self.detail = detail
        super().__init__(f"Failed to {operation}: {detail}")


class NotFoundError(ApplicationError):
    """Raised when a requested record does not exist."""

    def __init__(self, resource: str, resource_id: str):
        self.resource = resource
        self.resource_id = resource_id
        super().__init__(f"{resource} {resource_id} not found")


class PermissionDeniedError(ApplicationError):
    """Raised when the caller may not perform an action."""

    def __init__(self, detail: str = "Not enough permissions"):
        self.detail = detail
        super().__init__(detail)


class DuplicateApplicationError(ApplicationError):
    """Raised when a developer already has a live application to a project."""

    def __init__(self, project_id: str, developer_id: str):
        self.project_id = project_id
        self.developer_id = developer_id
        super().__init__(
            f"Developer {developer_id} already applied to project {project_id}"
        )


class InvalidTransitionError(ApplicationError):
    """Raised on an application status change the lifecycle does not allow."""

    def __init__(self, current: str, target: str):
        self.current = current
        self.target = target
        super().__init__(f"Cannot change application status from {current} to {target}")


class ApplicationNotEditableError(ApplicationError):
    """Raised when an applicant edits an application that is no longer pending."""

    def __init__(self, application_id: str, current: str):
        self.application_id = application_id
        self.current = current
        super().__init__(f"Application {application_id} is {current} and can no longer be edited")


def bad_gateway_exception(detail: str = "Data store unavailable") -> HTTPException:
    """Return a 502 Bad Gateway exception."""
    return HTTPException(
        status_code=status.HTTP_502_BAD_GATEWAY,
        detail=detail,
    )


def forbidden_exception(detail: str = "Not enough permissions") -> HTTPException:
    """Return a 403 Forbidden exception."""
    return HTTPException(
        status_code=status.HTTP_403_FORBIDDEN,
        detail=detail,
    )


def not_found_exception(detail: str = "Resource not found") -> HTTPException:
    """Return a 404 Not Found exception."""
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail=detail,
    )


def conflict_exception(detail: str = "Conflict") -> HTTPException:
    """Return a 409 Conflict exception."""
    return HTTPException(
        status_code=status.HTTP_409_CONFLICT,
        detail=detail,
    )


def to_http_exception(error: ApplicationError) -> HTTPException:
    """Map a domain error onto the HTTP error a client should see."""
    if isinstance(error, NotFoundError):
        return not_found_exception(error.message)
    if isinstance(error, PermissionDeniedError):
        return forbidden_exception(error.detail)
    if isinstance(
        error,
        (DuplicateApplicationError, InvalidTransitionError, ApplicationNotEditableError),
    ):
        return conflict_exception(error.message)
    if isinstance(error, GatewayError):
        return bad_gateway_exception(error.message)
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=error.message)


def unauthorized_exception(detail: str = "Not authenticated") -> HTTPException:
    """Return a 401 Unauthorized exception."""
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
    )
