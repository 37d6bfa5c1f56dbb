"""Domain errors raised by the storage layer and auth dependencies.

Each error carries the HTTP status it maps to; ``main.create_app`` registers a
single handler that renders them as ``{"detail": message}``.
"""

from fastapi import status


class TaskBeaconError(Exception):
    """Base class for errors that are reported back to the client."""

    status_code: int = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class UnauthenticatedError(TaskBeaconError):
    """No resolvable identity on the request."""

    status_code = status.HTTP_401_UNAUTHORIZED


class NotFoundError(TaskBeaconError):
    """Entity is absent or owned by another user."""

    status_code = status.HTTP_404_NOT_FOUND


class InvalidInputError(TaskBeaconError):
    status_code = status.HTTP_400_BAD_REQUEST


class ConflictError(TaskBeaconError):
    status_code = status.HTTP_400_BAD_REQUEST


class LimitExceededError(TaskBeaconError):
    status_code = status.HTTP_400_BAD_REQUEST
