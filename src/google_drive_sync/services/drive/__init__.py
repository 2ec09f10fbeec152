"""Drive service types and constants for the app data folder."""

from .types import DriveFile, DriveChange, ChangePage
from . import constants

__all__ = [
    # Data types
    "DriveFile",
    "DriveChange",
    "ChangePage",

    "constants",
]
