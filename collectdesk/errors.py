"""Error taxonomy shared by the services and the JSON endpoints.

Services raise a :class:`ServiceError` subclass; each blueprint registers
:func:`handle_service_error` so the caller only ever sees
``{"error": <message>}`` with the matching status code.
"""

from flask import current_app
from werkzeug.exceptions import HTTPException


class ServiceError(Exception):
    """Base class for failures that are safe to report to the caller."""

    code = "error"
    status = 400
    message = "Request failed"

    def __init__(self, message: str | None = None, status: int | None = None):
        super().__init__(message or self.message)
        self.message = message or self.message
        if status is not None:
            self.status = status

    def to_response(self):
        return {"error": self.message}, self.status


class ValidationError(ServiceError):
    code = "validation_error"
    status = 400
    message = "Invalid request"


class NotFound(ServiceError):
    code = "not_found"
    status = 404
    message = "Not found"


class Unauthenticated(ServiceError):
    code = "unauthenticated"
    status = 401
    message = "Invalid or expired session"


class Unauthorized(ServiceError):
    code = "unauthorized"
    status = 401
    message = "Not authorized"


class SessionExpired(Unauthenticated):
    code = "session_expired"
    message = "Session has expired, please log in again"


class Forbidden(ServiceError):
    code = "forbidden"
    status = 403
    message = "This account is disabled"


class Conflict(ServiceError):
    code = "conflict"
    status = 409
    message = "This name already exists"


class NothingToBatch(ServiceError):
    code = "nothing_to_batch"
    status = 400
    message = "No pending submissions to batch"


class InternalError(ServiceError):
    code = "internal_error"
    status = 500
    message = "Internal error, please try again"


def handle_service_error(exc: ServiceError):
    return exc.to_response()


def handle_unexpected_error(exc: Exception):
    if isinstance(exc, HTTPException):
        return {"error": exc.description}, exc.code
    current_app.logger.exception("Unhandled error: %s", exc)
    return InternalError().to_response()


def register_error_handlers(bp) -> None:
    """Attach the JSON error handlers to a blueprint."""
    bp.register_error_handler(ServiceError, handle_service_error)
    bp.register_error_handler(Exception, handle_unexpected_error)
