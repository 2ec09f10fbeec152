from typing import Optional

from .base import APIError
from ..services.drive.constants import AUTH_ERROR_STATUSES


class DriveHttpError(APIError):
    """
    Raised when a Drive REST call fails.

    Args:
        status: HTTP status code, or None when the request never got a response.
        message: Reason phrase or error message returned by the API.
    """

    def __init__(self, status: Optional[int], message: str):
        super().__init__(f"Drive API error {status}: {message}")
        self.status = status
        self.message = message

    @property
    def is_auth_error(self) -> bool:
        return self.status in AUTH_ERROR_STATUSES
