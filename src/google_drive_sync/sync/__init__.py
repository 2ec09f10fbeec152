"""Settings sync provider and its change poller."""

from .provider import GoogleDriveSyncProvider
from .poller import ChangePoller, PollerState
from .state import FolderState

__all__ = [
    "GoogleDriveSyncProvider",
    "ChangePoller",
    "PollerState",
    "FolderState",
]
