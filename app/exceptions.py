# app/exceptions.py
"""
Domain errors raised by the service layer.

Each carries an HTTP status code so the API layer can translate it without a
lookup table. Storage faults (SQLAlchemy errors) are never wrapped in these:
they surface unchanged as infrastructure errors.
"""

from typing import Any, Optional


class RentalError(Exception):
    """Base class for all domain failures."""

    error = "rental_error"
    status_code = 400

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class AuthorizationError(RentalError):
    """No session, or the session role is insufficient."""

    error = "authorization_error"
    status_code = 403


class ValidationError(RentalError):
    """Structurally invalid input. Raised before any storage call."""

    error = "validation_error"
    status_code = 422


class ConflictError(RentalError):
    """A lifecycle guard rejected the transition."""

    error = "conflict"
    status_code = 409

    def __init__(self, message: str, plate: Optional[str] = None, status: Optional[str] = None):
        self.plate = plate
        self.status = status
        super().__init__(message)


class NotFoundError(RentalError):
    """Referenced record does not exist."""

    error = "not_found"
    status_code = 404

    def __init__(self, resource: str, resource_id: Any = None):
        self.resource = resource
        self.resource_id = resource_id
        message = f"{resource} not found"
        if resource_id is not None:
            message = f"{resource} {resource_id} not found"
        super().__init__(message)
