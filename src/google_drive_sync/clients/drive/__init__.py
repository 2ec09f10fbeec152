"""Drive client module for the app data folder REST API."""

from .async_client import AsyncDriveClient, build_multipart_body

__all__ = [
    "AsyncDriveClient",
    "build_multipart_body",
]
