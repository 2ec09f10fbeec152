"""Authentication: token context, persistence and the OAuth2 implicit flow."""

from .manager import TokenManager
from .storage import KeyValueStorage, MemoryStorage, JsonFileStorage
from .oauth import build_authorization_url, parse_authorization_response, generate_security_token

__all__ = [
    "TokenManager",
    "KeyValueStorage",
    "MemoryStorage",
    "JsonFileStorage",
    "build_authorization_url",
    "parse_authorization_response",
    "generate_security_token",
]
