"""
Asynchronous client for the Google Drive v3 REST API, scoped to the app data folder.

Requests are issued directly over aiohttp with a bearer token taken from the
shared `TokenManager`; a 401/403 response revokes that token so the next
operation goes back through authorization instead of looping on a dead token.
"""

import asyncio
import logging
import secrets
from typing import Any, Dict, List, Optional

import aiohttp

from ...auth.manager import TokenManager
from ...auth.oauth import build_authorization_url, generate_security_token
from ...exceptions import DriveHttpError, NotAuthorizedError
from ...services.drive.constants import (
    APP_DATA_FOLDER, AUTH_ERROR_STATUSES, CHANGES_URL, FILES_URL, MULTIPART_BOUNDARY,
    REVOKE_URL, START_PAGE_TOKEN_URL, UPLOAD_URL
)
from ...services.drive.types import ChangePage, DriveFile
from ...utils.log_sanitizer import sanitize_for_logging, sanitize_error, sanitize_token

logger = logging.getLogger(__name__)

FILE_FIELDS = "id, name, mimeType, modifiedTime, parents"
LIST_FILES_FIELDS = f"nextPageToken, files({FILE_FIELDS})"
LIST_CHANGES_FIELDS = f"nextPageToken, newStartPageToken, changes(fileId, removed, time, file({FILE_FIELDS}))"


def build_multipart_body(metadata: Dict[str, Any], data: Any) -> aiohttp.MultipartWriter:
    """
    Build a `multipart/related` upload body.

    Args:
        metadata: File metadata, sent as the first JSON part
        data: File content, sent JSON-encoded as the second part

    Returns:
        MultipartWriter usable as aiohttp request data
    """
    writer = aiohttp.MultipartWriter("related", boundary=MULTIPART_BOUNDARY)
    writer.append_json(metadata)
    writer.append_json(data)
    return writer


class AsyncDriveClient:
    """
    Thin async wrapper over the Drive endpoints the sync provider needs.

    Usage:
        async with AsyncDriveClient(TokenManager(storage), client_id) as client:
            files = await client.list_files()
    """

    def __init__(
            self,
            tokens: TokenManager,
            client_id: Optional[str] = None,
            session: Optional[aiohttp.ClientSession] = None,
            request_timeout: Optional[float] = None
    ):
        """
        Initialize the Drive client.

        Args:
            tokens: Token context supplying the bearer token
            client_id: OAuth client ID, needed only for authorization URLs
            session: aiohttp session to use; one is created lazily otherwise
            request_timeout: Total per-request timeout in seconds, None for none
        """
        self.tokens = tokens
        self.client_id = client_id
        self._session = session
        self._owns_session = session is None
        self._request_timeout = request_timeout
        self._security_token: Optional[str] = None

    async def __aenter__(self) -> "AsyncDriveClient":
        return self

    async def __aexit__(self, exc_type, exc, tb):
        await self.close()

    def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=self._request_timeout)
            )
            self._owns_session = True
        return self._session

    async def close(self) -> None:
        """Close the HTTP session if this client created it."""
        if self._session is not None and self._owns_session and not self._session.closed:
            await self._session.close()
        if self._owns_session:
            self._session = None

    @staticmethod
    async def _read_error_message(response: aiohttp.ClientResponse) -> str:
        try:
            body = await response.json(content_type=None)
        except (aiohttp.ClientError, ValueError):
            body = None
        if isinstance(body, dict) and isinstance(body.get('error'), dict):
            message = body['error'].get('message')
            if message:
                return message
        return response.reason or ""

    async def _request(
            self,
            method: str,
            url: str,
            params: Optional[Dict[str, str]] = None,
            data: Any = None,
            headers: Optional[Dict[str, str]] = None
    ) -> Any:
        """
        Issue an authenticated request and return the decoded JSON body.

        Returns:
            Decoded JSON, or None for 204 No Content

        Raises:
            NotAuthorizedError: If no access token is held
            DriveHttpError: On any non-success status or transport failure
        """
        if not self.tokens.has_token:
            raise NotAuthorizedError("Access token is empty, authorization required")

        request_headers = self.tokens.apply(dict(headers or {}))
        session = self._get_session()
        status = None

        try:
            async with session.request(
                method, url, params=params, data=data, headers=request_headers
            ) as response:
                status = response.status
                if status == 204:
                    return None
                if status == 200:
                    return await response.json(content_type=None)
                message = await self._read_error_message(response)
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            logger.error("%s %s failed: %s", method, url, sanitize_error(e))
            raise DriveHttpError(status, str(e) or type(e).__name__) from e
        except ValueError as e:
            raise DriveHttpError(status, f"Invalid JSON response: {e}") from e

        logger.error("%s %s returned %s: %s", method, url, status, message)
        if status in AUTH_ERROR_STATUSES:
            await self.revoke_token()
        raise DriveHttpError(status, message)

    async def upload_file(self, file_id: Optional[str], name: str, data: Any) -> DriveFile:
        """
        Uploads a JSON document into the app data folder.

        https://developers.google.com/drive/api/v3/reference/files/create
        https://developers.google.com/drive/api/v3/reference/files/update

        Args:
            file_id: Existing file ID to update, or None to create a new file
            name: File name (used only on create)
            data: JSON-serializable file content

        Returns:
            Metadata of the created or updated file
        """
        sanitized = sanitize_for_logging(file_id=file_id, name=name)
        if file_id:
            method = "PATCH"
            url = f"{UPLOAD_URL}/{file_id}"
            metadata = {}
            logger.info("Updating file %s %s", sanitized['name'], sanitized['file_id'])
        else:
            method = "POST"
            url = UPLOAD_URL
            metadata = {
                'name': name,
                'parents': [APP_DATA_FOLDER],
            }
            logger.info("Creating file %s", sanitized['name'])

        body = build_multipart_body(metadata, data)
        response = await self._request(method, url, params={'uploadType': 'multipart'}, data=body)
        return DriveFile.from_api(response or {})

    async def download_file(self, file_id: str) -> Any:
        """
        Loads file content by identifier.

        https://developers.google.com/drive/api/v3/reference/files/get

        Args:
            file_id: File identifier

        Returns:
            The decoded JSON content of the file
        """
        logger.info("Downloading file %s", sanitize_for_logging(file_id=file_id)['file_id'])
        return await self._request("GET", f"{FILES_URL}/{file_id}", params={'alt': 'media'})

    async def get_start_page_token(self) -> str:
        """
        https://developers.google.com/drive/api/v3/reference/changes/getStartPageToken
        """
        response = await self._request("GET", START_PAGE_TOKEN_URL)
        return response.get('startPageToken')

    async def list_changes(self, token: str) -> ChangePage:
        """
        Fetches one page of app data folder changes since `token`.

        https://developers.google.com/drive/api/v3/reference/changes/list

        Args:
            token: Page token from a previous call or get_start_page_token

        Returns:
            ChangePage holding the changes and the next cursor
        """
        params = {
            'pageToken': token,
            'spaces': APP_DATA_FOLDER,
            'fields': LIST_CHANGES_FIELDS,
        }
        response = await self._request("GET", CHANGES_URL, params=params)
        return ChangePage.from_api(response or {})

    async def list_all_changes(self, token: str) -> ChangePage:
        """
        Fetches every change since `token`, following `nextPageToken`.

        Args:
            token: Page token from a previous call or get_start_page_token

        Returns:
            ChangePage with all changes and the final `new_start_page_token`
        """
        all_changes = []
        current_token = token

        while current_token:
            page = await self.list_changes(current_token)
            all_changes.extend(page.changes)

            if page.new_start_page_token:
                return ChangePage(changes=all_changes, new_start_page_token=page.new_start_page_token)

            current_token = page.next_page_token

        return ChangePage(changes=all_changes)

    async def list_files(self) -> List[DriveFile]:
        """
        Lists every file in the app data folder.

        https://developers.google.com/drive/api/v3/reference/files/list
        """
        files = []
        page_token = None

        while True:
            params = {
                'spaces': APP_DATA_FOLDER,
                'fields': LIST_FILES_FIELDS,
            }
            if page_token:
                params['pageToken'] = page_token

            response = await self._request("GET", FILES_URL, params=params)
            files.extend(DriveFile.from_api(item) for item in response.get('files', []))

            page_token = response.get('nextPageToken')
            if not page_token:
                break

        logger.info("Found %d files in the app data folder", len(files))
        return files

    async def delete_file(self, file_id: str) -> None:
        """
        https://developers.google.com/drive/api/v3/reference/files/delete
        """
        logger.info("Deleting file %s", sanitize_for_logging(file_id=file_id)['file_id'])
        await self._request("DELETE", f"{FILES_URL}/{file_id}")

    def get_security_token(self) -> str:
        """
        Returns the staged one-time security token, generating one if needed.
        """
        if self._security_token is None:
            self._security_token = generate_security_token()
        return self._security_token

    def verify_security_token(self, candidate: Optional[str]) -> bool:
        """
        Checks `candidate` against the staged security token and clears it.

        Args:
            candidate: State value returned in the OAuth redirect

        Returns:
            True if a token was staged and matches
        """
        staged, self._security_token = self._security_token, None
        if not staged or not candidate:
            return False
        return secrets.compare_digest(staged, candidate)

    def get_authentication_url(self, redirect_uri: str) -> str:
        """
        https://developers.google.com/identity/protocols/oauth2/javascript-implicit-flow

        Args:
            redirect_uri: Redirect target registered for the OAuth client

        Returns:
            Authorization URL carrying the security token as `state`
        """
        return build_authorization_url(self.client_id, redirect_uri, self.get_security_token())

    async def revoke_token(self) -> None:
        """
        Forgets the access token and asks Google to revoke it.

        The token is cleared locally first; the revoke request is best-effort
        and its failures are only logged.
        """
        token = self.tokens.token
        if not token:
            return

        self.tokens.clear(forget=True)
        logger.info("Revoking access token %s", sanitize_token(token))

        try:
            async with self._get_session().request("GET", REVOKE_URL, params={'token': token}) as response:
                if response.status != 200:
                    logger.warning("Token revocation returned status %s", response.status)
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            logger.warning("Token revocation request failed: %s", sanitize_error(e))
