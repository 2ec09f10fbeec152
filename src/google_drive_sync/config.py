"""
Settings for the Google Drive sync provider.

Values come from keyword arguments or, through `SyncSettings.from_env`, from
`GOOGLE_DRIVE_*` environment variables.
"""

import os
from dataclasses import dataclass
from typing import Optional, Mapping

from .exceptions import ConfigurationError
from .services.drive.constants import (
    PROVIDER_NAME, DEFAULT_POLL_INTERVAL, DEFAULT_ERROR_POLL_INTERVAL
)

DEFAULT_REDIRECT_URI = f"https://localhost/oauth2callback?provider={PROVIDER_NAME}"
DEFAULT_STORAGE_PATH = os.path.join("~", ".google-drive-sync", "storage.json")


def _parse_seconds(name: str, value: Optional[str], default: Optional[float]) -> Optional[float]:
    if value is None or value.strip() == "":
        return default
    try:
        seconds = float(value)
    except ValueError:
        raise ConfigurationError(f"{name} must be a number of seconds, got {value!r}")
    if seconds <= 0:
        raise ConfigurationError(f"{name} must be positive, got {value!r}")
    return seconds


@dataclass
class SyncSettings:
    """
    Configuration for one Google Drive sync session.
    Args:
        client_id: OAuth client ID used for the implicit flow.
        redirect_uri: Redirect target registered for the OAuth client.
        storage_path: JSON file holding the persisted access token.
        poll_interval: Seconds between change checks after a successful check.
        error_poll_interval: Seconds before the next check after a failed one.
        request_timeout: Total timeout for a single HTTP call, None for no timeout.
    """
    client_id: Optional[str] = None
    redirect_uri: str = DEFAULT_REDIRECT_URI
    storage_path: str = DEFAULT_STORAGE_PATH
    poll_interval: float = DEFAULT_POLL_INTERVAL
    error_poll_interval: float = DEFAULT_ERROR_POLL_INTERVAL
    request_timeout: Optional[float] = None

    def __post_init__(self):
        if self.poll_interval <= 0:
            raise ConfigurationError("poll_interval must be positive")
        if self.error_poll_interval <= 0:
            raise ConfigurationError("error_poll_interval must be positive")
        if self.request_timeout is not None and self.request_timeout <= 0:
            raise ConfigurationError("request_timeout must be positive")

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "SyncSettings":
        """
        Build settings from environment variables.

        Args:
            environ: Mapping to read instead of os.environ

        Returns:
            SyncSettings populated from GOOGLE_DRIVE_* variables
        """
        env = os.environ if environ is None else environ
        return cls(
            client_id=env.get("GOOGLE_DRIVE_CLIENT_ID") or None,
            redirect_uri=env.get("GOOGLE_DRIVE_REDIRECT_URI") or DEFAULT_REDIRECT_URI,
            storage_path=env.get("GOOGLE_DRIVE_STORAGE_PATH") or DEFAULT_STORAGE_PATH,
            poll_interval=_parse_seconds(
                "GOOGLE_DRIVE_POLL_INTERVAL", env.get("GOOGLE_DRIVE_POLL_INTERVAL"), DEFAULT_POLL_INTERVAL
            ),
            error_poll_interval=_parse_seconds(
                "GOOGLE_DRIVE_ERROR_POLL_INTERVAL", env.get("GOOGLE_DRIVE_ERROR_POLL_INTERVAL"),
                DEFAULT_ERROR_POLL_INTERVAL
            ),
            request_timeout=_parse_seconds(
                "GOOGLE_DRIVE_REQUEST_TIMEOUT", env.get("GOOGLE_DRIVE_REQUEST_TIMEOUT"), None
            ),
        )
