"""
Access token context shared by the Drive client and the sync provider.

One `TokenManager` instance holds the bearer token for one sync session,
mirrored to a key-value storage so that the session survives restarts.
"""

import logging
from typing import Optional, Dict

from google.oauth2.credentials import Credentials

from .storage import KeyValueStorage, MemoryStorage
from ..services.drive.constants import TOKEN_STORAGE_KEY
from ..utils.log_sanitizer import sanitize_token

logger = logging.getLogger(__name__)


class TokenManager:
    """
    Holds the in-memory OAuth2 credentials and their persisted copy.

    Implicit-flow tokens carry no refresh token, so the credentials are only
    ever replaced or cleared, never refreshed.
    """

    def __init__(self, storage: Optional[KeyValueStorage] = None, storage_key: str = TOKEN_STORAGE_KEY):
        """
        Initialize token manager.

        Args:
            storage: Persistent storage for the token (defaults to in-memory)
            storage_key: Key under which the token is persisted
        """
        self.storage = storage if storage is not None else MemoryStorage()
        self.storage_key = storage_key
        self._credentials: Optional[Credentials] = None

    @property
    def credentials(self) -> Optional[Credentials]:
        return self._credentials

    @property
    def token(self) -> Optional[str]:
        """The current bearer token, or None."""
        if self._credentials is None:
            return None
        return self._credentials.token

    @property
    def has_token(self) -> bool:
        return bool(self.token)

    def set_token(self, token: str) -> None:
        """
        Make `token` the active access token and persist it.

        Args:
            token: Bearer token returned by the OAuth redirect
        """
        self._credentials = Credentials(token=token)
        self.storage.set_item(self.storage_key, token)
        logger.info("Access token stored %s", sanitize_token(token))

    def load_persisted(self) -> Optional[str]:
        """
        Replace the in-memory token with the persisted one.

        Returns:
            The loaded token, or None if nothing was persisted
        """
        token = self.storage.get_item(self.storage_key)
        self._credentials = Credentials(token=token) if token else None
        if token:
            logger.info("Loaded persisted access token %s", sanitize_token(token))
        return token

    def clear(self, forget: bool = False) -> None:
        """
        Drop the in-memory token.

        Args:
            forget: Also remove the persisted copy
        """
        self._credentials = None
        if forget:
            self.storage.remove_item(self.storage_key)
            logger.info("Access token removed from storage")

    def apply(self, headers: Dict[str, str]) -> Dict[str, str]:
        """
        Add the bearer authorization header to `headers`.

        Args:
            headers: Request headers to update in place

        Returns:
            The same headers dictionary
        """
        if self._credentials is not None:
            self._credentials.apply(headers)
        return headers
