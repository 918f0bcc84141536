"""
Application error taxonomy.

Services raise these; the handlers registered in ``proctorhub.main`` render
them as ``{"message": ..., "error"?: ...}`` with the matching status code.
"""
from typing import Optional


class ProctorHubError(Exception):
    status_code = 500
    default_message = "Server error"

    def __init__(self, message: Optional[str] = None, error: Optional[str] = None):
        self.message = message or self.default_message
        self.error = error
        super().__init__(self.message)

    def to_dict(self) -> dict:
        body = {"message": self.message}
        if self.error:
            body["error"] = self.error
        return body


class ValidationError(ProctorHubError):
    status_code = 400
    default_message = "Invalid data provided"


class ConflictError(ProctorHubError):
    status_code = 400
    default_message = "Resource already exists"


class AuthenticationError(ProctorHubError):
    status_code = 401
    default_message = "Authentication token required"


class InvalidTokenError(ProctorHubError):
    status_code = 403
    default_message = "Invalid or expired token"


class ForbiddenError(ProctorHubError):
    status_code = 403
    default_message = "Access denied"


class NotFoundError(ProctorHubError):
    status_code = 404
    default_message = "Not found"
