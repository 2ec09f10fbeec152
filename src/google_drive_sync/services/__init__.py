"""Google API services used by the sync provider."""

from . import drive

__all__ = [
    "drive",
]
