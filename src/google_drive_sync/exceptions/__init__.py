from .base import GoogleDriveSyncError, AuthenticationError, APIError, ValidationError
from .auth import (
    NotAuthorizedError, AuthorizationResponseError, ConfigurationError
)
from .drive import DriveHttpError

__all__ = [
    "GoogleDriveSyncError",
    "AuthenticationError",
    "APIError",
    "ValidationError",
    "NotAuthorizedError",
    "AuthorizationResponseError",
    "ConfigurationError",
    "DriveHttpError",
]
