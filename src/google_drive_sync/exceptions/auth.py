from .base import AuthenticationError, ValidationError


class NotAuthorizedError(AuthenticationError):
    """Raised when a call needs an access token and none is held."""
    pass


class AuthorizationResponseError(AuthenticationError):
    """Raised when an OAuth redirect cannot be parsed into an access token."""
    pass


class ConfigurationError(ValidationError):
    """Raised when sync settings are missing or invalid."""
    pass
