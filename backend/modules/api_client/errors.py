"""Exceptions raised while talking to the rewards backend."""

from typing import Optional

UNREACHABLE_MESSAGE = "Unable to reach the server. Please try again."
UNEXPECTED_FORMAT_MESSAGE = "Unexpected response format from server."


class BackendClientError(Exception):
    """Base exception for backend client errors."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidInputError(BackendClientError):
    """Raised when input is rejected locally, before any request is sent."""
    pass


class TransportError(BackendClientError):
    """Raised when the backend cannot be reached or answers with an unusable body."""

    def __init__(self, message: str = UNREACHABLE_MESSAGE):
        super().__init__(message)


class BackendError(BackendClientError):
    """Raised when the backend answers with a failure envelope."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class UnauthenticatedError(BackendError):
    """Raised when no token is available or the backend rejects it."""

    def __init__(self, message: str = "Your session has expired. Please log in again.",
                 status_code: Optional[int] = 401):
        super().__init__(message, status_code)
