# Overview: Domain error taxonomy shared by services and routes.

"""
Every failure a service can raise on purpose is a ServiceError.

Routes turn a ServiceError into a JSON body of the form
{"message": ..., "code": ...} with the error's status_code. The message is
fixed per failure so clients never see internal detail.
"""
from __future__ import annotations


class ServiceError(Exception):
    status_code = 500
    code = "internal_error"
    message = "Internal server error"

    def __init__(
        self,
        message: str | None = None,
        *,
        status_code: int | None = None,
        code: str | None = None,
        details: dict | None = None,
    ):
        super().__init__(message or self.message)
        self.message = message or self.message
        if status_code is not None:
            self.status_code = status_code
        if code is not None:
            self.code = code
        self.details = details or {}

    def to_dict(self) -> dict:
        body = {"message": self.message, "code": self.code}
        if self.details:
            body["details"] = self.details
        return body


class ValidationError(ServiceError):
    """400-level input problem."""
    status_code = 400
    code = "validation_error"
    message = "Invalid request"


class ConflictError(ServiceError):
    """Duplicate unique key. Reported as 400 to match existing clients."""
    status_code = 400
    code = "conflict"
    message = "Resource already exists"


class AuthError(ServiceError):
    """Missing, invalid or expired token, or bad login credentials."""
    status_code = 401
    code = "invalid_token"
    message = "Invalid or expired token"


class AuthorizationError(ServiceError):
    """Authenticated, but the role or ownership does not allow the action."""
    status_code = 403
    code = "forbidden"
    message = "Not allowed"


class NotFoundError(ServiceError):
    status_code = 404
    code = "not_found"
    message = "Not found"


class InternalError(ServiceError):
    """Catch-all for unexpected data-access failures."""
