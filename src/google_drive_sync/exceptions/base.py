class GoogleDriveSyncError(Exception):
    """Base exception for all Google Drive sync errors."""
    pass


class AuthenticationError(GoogleDriveSyncError):
    """Raised when authentication fails."""
    pass


class APIError(GoogleDriveSyncError):
    """Raised when API calls fail."""
    pass


class ValidationError(GoogleDriveSyncError):
    """Raised when input validation fails."""
    pass
