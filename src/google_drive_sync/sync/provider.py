"""
Google Drive sync provider.

Stores settings files as JSON documents in the Drive app data folder and
watches the folder's change log, telling the host to re-sync whenever the
remote side moves.
"""

import asyncio
import inspect
import logging
import webbrowser
from typing import Any, Awaitable, Callable, Optional, Union

from ..auth.manager import TokenManager
from ..auth.oauth import parse_authorization_response
from ..auth.storage import JsonFileStorage, KeyValueStorage
from ..clients.drive.async_client import AsyncDriveClient
from ..config import SyncSettings, DEFAULT_REDIRECT_URI
from ..exceptions import AuthorizationResponseError
from ..services.drive.constants import (
    PROVIDER_NAME, DEFAULT_POLL_INTERVAL, DEFAULT_ERROR_POLL_INTERVAL
)
from ..services.drive.types import DriveFile
from ..utils.log_sanitizer import sanitize_for_logging, sanitize_error
from .poller import ChangePoller
from .state import FolderState

logger = logging.getLogger(__name__)

Listener = Callable[[], Union[None, Awaitable[None]]]
TabOpener = Callable[[str], Any]


async def _call(callback: Callable, *args) -> Any:
    result = callback(*args)
    if inspect.isawaitable(result):
        result = await result
    return result


class GoogleDriveSyncProvider:
    """
    Settings storage backed by the Google Drive app data folder.

    Usage:
        provider = GoogleDriveSyncProvider.from_settings(SyncSettings.from_env(), on_sync_required)
        await provider.init()
        await provider.save("settings.json", {"filters": []})
        data = await provider.load("settings.json")
    """

    def __init__(
            self,
            client: AsyncDriveClient,
            on_sync_required: Listener,
            open_tab: TabOpener = webbrowser.open,
            redirect_uri: str = DEFAULT_REDIRECT_URI,
            poll_interval: float = DEFAULT_POLL_INTERVAL,
            error_poll_interval: float = DEFAULT_ERROR_POLL_INTERVAL,
            sleep: Callable[[float], Awaitable[None]] = asyncio.sleep
    ):
        """
        Initialize the provider.

        Args:
            client: Drive client sharing this session's token context
            on_sync_required: Called (or awaited) when a full re-sync is needed
            open_tab: Opens the authorization URL in a browser tab or window
            redirect_uri: OAuth redirect target
            poll_interval: Seconds between successful change checks
            error_poll_interval: Seconds before retrying a failed change check
            sleep: Coroutine used by the poller to wait
        """
        self.client = client
        self.tokens: TokenManager = client.tokens
        self.folder = FolderState()
        self.redirect_uri = redirect_uri
        self._on_sync_required = on_sync_required
        self._open_tab = open_tab
        self.poller = ChangePoller(
            self._sync_list_changes,
            is_active=lambda: self.tokens.has_token,
            interval=poll_interval,
            error_interval=error_poll_interval,
            sleep=sleep,
        )

    @classmethod
    def from_settings(
            cls,
            settings: SyncSettings,
            on_sync_required: Listener,
            open_tab: TabOpener = webbrowser.open,
            storage: Optional[KeyValueStorage] = None
    ) -> "GoogleDriveSyncProvider":
        """
        Wire storage, token context, client and provider from settings.

        Args:
            settings: Sync settings
            on_sync_required: Listener notified when a re-sync is needed
            open_tab: Opens the authorization URL
            storage: Token storage, defaults to a JSON file at settings.storage_path

        Returns:
            A ready-to-init provider
        """
        if storage is None:
            storage = JsonFileStorage(settings.storage_path)
        client = AsyncDriveClient(
            TokenManager(storage),
            client_id=settings.client_id,
            request_timeout=settings.request_timeout,
        )
        return cls(
            client,
            on_sync_required,
            open_tab=open_tab,
            redirect_uri=settings.redirect_uri,
            poll_interval=settings.poll_interval,
            error_poll_interval=settings.error_poll_interval,
        )

    @property
    def name(self) -> str:
        return PROVIDER_NAME

    async def _sync_list_files(self) -> None:
        files = await self.client.list_files()
        self.folder.replace_files(files)

    async def _sync_list_changes(self) -> None:
        if self.folder.change_cursor is None:
            self.folder.change_cursor = await self.client.get_start_page_token()

        page = await self.client.list_all_changes(self.folder.change_cursor)
        if page.new_start_page_token:
            self.folder.change_cursor = page.new_start_page_token

        if page.changes or self.folder.files is None:
            logger.info("Remote changes detected (%d), sync required", len(page.changes))
            await _call(self._on_sync_required)

    async def _get_file_id_by_name(self, name: str) -> Optional[str]:
        await self._sync_list_files()
        return self.folder.get_file_id(name)

    async def load(self, name: str) -> Any:
        """
        Loads file content by name.

        Args:
            name: File name

        Returns:
            The decoded JSON content, None if no such file exists, or False on error
        """
        try:
            file_id = await self._get_file_id_by_name(name)
            if not file_id:
                return None
            return await self.client.download_file(file_id)
        except Exception as e:
            sanitized = sanitize_for_logging(name=name, error=e)
            logger.error("Google Drive sync error %s %s", sanitized['name'], sanitized['error'])
            return False

    async def save(self, name: str, data: Any) -> Union[DriveFile, bool]:
        """
        Saves file content under `name`, creating or updating the remote file.

        Args:
            name: File name
            data: JSON-serializable content

        Returns:
            Metadata of the uploaded file, or False on error
        """
        try:
            file_id = await self._get_file_id_by_name(name)
            file = await self.client.upload_file(file_id, name, data)
            if self.folder.files is None:
                self.folder.files = {}
            self.folder.files[name] = file
            return file
        except Exception as e:
            sanitized = sanitize_for_logging(name=name, error=e)
            logger.error("Google Drive sync error %s %s", sanitized['name'], sanitized['error'])
            return False

    def is_authorized(self) -> bool:
        if not self.tokens.has_token:
            logger.warning("Unauthorized! Please set access token first.")
            return False
        return True

    async def logout(self) -> None:
        """Revokes the Google Drive token."""
        await self.client.revoke_token()

    async def init(self, token: Optional[str] = None, security_token: Optional[str] = None) -> None:
        """
        Resolve the access token and start polling, or start authorization.

        Args:
            token: Access token from the OAuth redirect; persisted when given
            security_token: State value from the OAuth redirect, checked
                against the one staged when the authorization URL was built
        """
        if security_token and not self.client.verify_security_token(security_token):
            logger.warning("Security token doesn't match")
            return

        if token:
            self.tokens.set_token(token)
        else:
            self.tokens.load_persisted()

        if self.tokens.has_token:
            self.poller.start()
        else:
            url = self.client.get_authentication_url(self.redirect_uri)
            logger.info("Opening authorization page %s", sanitize_for_logging(url=url)['url'])
            await _call(self._open_tab, url)

    async def complete_authorization(self, redirect_url: str) -> bool:
        """
        Finish the implicit flow from the redirect URL the browser landed on.

        Args:
            redirect_url: Redirect URL including the token fragment

        Returns:
            True if the provider is authorized afterwards
        """
        try:
            credentials, state = parse_authorization_response(redirect_url, self.client.client_id)
        except AuthorizationResponseError as e:
            logger.error("Authorization failed: %s", sanitize_error(e))
            return False

        if not state:
            logger.warning("Authorization response carries no security token")
            return False

        await self.init(credentials.token, state)
        return self.tokens.has_token

    async def shutdown(self) -> None:
        """Stops polling and forgets the in-memory token; the persisted token is kept."""
        await self.poller.stop()
        self.tokens.clear()

    async def close(self) -> None:
        await self.shutdown()
        await self.client.close()
