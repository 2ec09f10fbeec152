"""
OAuth2 implicit-flow helpers for Google Drive.

The implicit grant returns the access token directly in the redirect URL
fragment, so there is no code exchange and no client secret. oauthlib's
`MobileApplicationClient` implements this grant; requests-oauthlib drives it
through the same `OAuth2Session` that google-auth-oauthlib builds upon.
"""

import logging
from typing import List, Optional, Tuple

from google.oauth2.credentials import Credentials
from google_auth_oauthlib.helpers import credentials_from_session
from oauthlib.common import generate_token
from oauthlib.oauth2 import MobileApplicationClient, OAuth2Error
from requests_oauthlib import OAuth2Session

from ..exceptions import AuthorizationResponseError, ConfigurationError
from ..services.drive.constants import AUTHORIZATION_URL, SCOPES
from ..utils.log_sanitizer import sanitize_url

logger = logging.getLogger(__name__)

SECURITY_TOKEN_LENGTH = 30


def generate_security_token() -> str:
    """Generate a random one-time value for the OAuth `state` parameter."""
    return generate_token(length=SECURITY_TOKEN_LENGTH)


def _create_session(
        client_id: Optional[str],
        redirect_uri: Optional[str] = None,
        scopes: Optional[List[str]] = None
) -> OAuth2Session:
    return OAuth2Session(
        client=MobileApplicationClient(client_id),
        redirect_uri=redirect_uri,
        scope=scopes,
    )


def build_authorization_url(
        client_id: str,
        redirect_uri: str,
        state: str,
        scopes: Optional[List[str]] = None
) -> str:
    """
    Build the implicit-flow authorization URL.

    Args:
        client_id: OAuth client ID of the application
        redirect_uri: Where Google redirects with the token fragment
        state: Anti-forgery security token echoed back in the redirect
        scopes: Requested scopes (defaults to drive.file + drive.appdata)

    Returns:
        Authorization URL to open in a browser tab
    """
    if not client_id:
        raise ConfigurationError("An OAuth client ID is required to build the authorization URL")
    if not redirect_uri:
        raise ConfigurationError("A redirect URI is required to build the authorization URL")

    session = _create_session(client_id, redirect_uri, scopes or SCOPES)
    url, _ = session.authorization_url(AUTHORIZATION_URL, state=state)
    logger.debug("Built authorization URL %s", sanitize_url(url))
    return url


def parse_authorization_response(
        redirect_url: str,
        client_id: Optional[str] = None,
        scopes: Optional[List[str]] = None
) -> Tuple[Credentials, Optional[str]]:
    """
    Extract the access token and state from an implicit-flow redirect.

    The state is returned rather than checked here; the caller validates it
    against the security token it staged.

    Args:
        redirect_url: Full redirect URL including the `#access_token=...` fragment
        client_id: OAuth client ID, recorded on the credentials
        scopes: Scopes that were requested

    Returns:
        Tuple of (credentials, state)

    Raises:
        AuthorizationResponseError: If the redirect carries an OAuth error or no token
    """
    session = _create_session(client_id, scopes=scopes or SCOPES)
    try:
        token = session.token_from_fragment(redirect_url)
    except (OAuth2Error, ValueError) as e:
        logger.error("Invalid authorization response %s: %s", sanitize_url(redirect_url), e)
        raise AuthorizationResponseError(f"Invalid authorization response: {e}") from e

    if "expires_at" in token:
        credentials = credentials_from_session(session, {"client_id": client_id})
    else:
        credentials = Credentials(token=token["access_token"], client_id=client_id, scopes=session.scope)

    return credentials, token.get("state")
