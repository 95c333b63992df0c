"""
Error taxonomy for the API. Every error reaches the client as the standard
envelope {statusCode, data: null, message, success: false, errors}.
"""
from fastapi import status


class ApiError(Exception):
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "Something went wrong"

    def __init__(self, message: str | None = None, errors: list | None = None):
        self.message = message or self.default_message
        self.errors = errors or []
        super().__init__(self.message)


class ValidationError(ApiError):
    """Malformed id, missing or blank required field, unknown sort field."""
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid request"


class NotFoundError(ApiError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Resource not found"


class AuthorizationError(ApiError):
    """Non-owner mutation or self-subscription."""
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "You are not allowed to perform this action"


class ConflictError(ApiError):
    """Duplicate edge or duplicate playlist membership."""
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Resource already exists"


class UpstreamError(ApiError):
    """Media upload collaborator failed. Never retried here."""
    status_code = status.HTTP_502_BAD_GATEWAY
    default_message = "Upload failed"
