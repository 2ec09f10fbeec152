"""
Google Drive settings sync.

Keeps small JSON settings documents in the Google Drive app data folder and
notifies the host application when they change remotely.
"""

from .auth import TokenManager, KeyValueStorage, MemoryStorage, JsonFileStorage
from .clients.drive import AsyncDriveClient
from .config import SyncSettings
from .services.drive import DriveFile, DriveChange, ChangePage
from .sync import GoogleDriveSyncProvider, ChangePoller, PollerState

__version__ = "0.1.0"

__all__ = [
    "GoogleDriveSyncProvider",
    "AsyncDriveClient",
    "TokenManager",
    "KeyValueStorage",
    "MemoryStorage",
    "JsonFileStorage",
    "SyncSettings",
    "DriveFile",
    "DriveChange",
    "ChangePage",
    "ChangePoller",
    "PollerState",
]
