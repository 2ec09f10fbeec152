"""
Log sanitization utilities to keep credentials out of log output.

Access tokens, OAuth state values and Drive identifiers are reduced to a
short, non-reversible description before they are logged.
"""

import re
from typing import Optional
from urllib.parse import urlsplit, urlunsplit, parse_qsl, urlencode


SENSITIVE_PARAMS = ('token', 'access_token', 'state', 'refresh_token', 'id_token')


def sanitize_token(token: Optional[str]) -> str:
    """
    Sanitize an access or security token for logging by showing only its length.

    Args:
        token: Token to sanitize

    Returns:
        Sanitized token representation

    Example:
        "ya29.a0Af..." -> "[token] (143 chars)"
    """
    if not token:
        return "[no-token]"
    return f"[token] ({len(token)} chars)"


def _redact_params(query: str) -> str:
    if not query:
        return query
    pairs = []
    for key, value in parse_qsl(query, keep_blank_values=True):
        if key in SENSITIVE_PARAMS:
            value = "[REDACTED]"
        pairs.append((key, value))
    return urlencode(pairs, safe="[]")


def sanitize_url(url: Optional[str]) -> str:
    """
    Sanitize a URL for logging by redacting credential-bearing parameters.

    Both the query string and the fragment are redacted, since the implicit
    OAuth flow returns the access token in the fragment.

    Args:
        url: URL to sanitize

    Returns:
        URL with token/state values replaced by [REDACTED]
    """
    if not url:
        return "[no-url]"

    parts = urlsplit(url)
    return urlunsplit((
        parts.scheme,
        parts.netloc,
        parts.path,
        _redact_params(parts.query),
        _redact_params(parts.fragment),
    ))


def sanitize_file_id(file_id: Optional[str]) -> str:
    """
    Sanitize a Drive file ID for logging.

    Args:
        file_id: File ID to sanitize

    Returns:
        Sanitized file ID representation
    """
    if not file_id:
        return "[no-file-id]"

    # Show only first 6 and last 4 characters
    if len(file_id) <= 10:
        return f"[file-id: {file_id}]"
    else:
        return f"[file-id: {file_id[:6]}...{file_id[-4:]}]"


def sanitize_filename(filename: Optional[str]) -> str:
    """
    Sanitize filename for logging.

    Args:
        filename: Filename to sanitize

    Returns:
        Sanitized filename representation
    """
    if not filename:
        return "[no-filename]"

    # Show only extension and length for privacy
    parts = filename.split('.')
    if len(parts) > 1:
        extension = parts[-1].lower()
        return f"[file.{extension}] ({len(filename)} chars)"
    else:
        return f"[file] ({len(filename)} chars)"


def sanitize_error(error: BaseException) -> str:
    """
    Sanitize an exception message, redacting bearer tokens and token parameters.

    Args:
        error: Exception to describe

    Returns:
        Exception type and redacted message
    """
    message = str(error)
    message = re.sub(r'Bearer\s+[A-Za-z0-9._\-~+/]+=*', 'Bearer [REDACTED]', message)
    message = re.sub(r'((?:access_)?token=)[^&\s#]+', r'\1[REDACTED]', message)
    return f"{type(error).__name__}: {message}"


def sanitize_for_logging(**kwargs) -> dict:
    """
    Sanitize multiple fields for logging in one call.

    Args:
        **kwargs: Fields to sanitize (token, url, file_id, name, error, etc.)

    Returns:
        Dictionary with sanitized values
    """
    sanitized = {}

    for key, value in kwargs.items():
        if key in ('token', 'access_token', 'security_token', 'state'):
            sanitized[key] = sanitize_token(value)
        elif key in ('url', 'redirect_url', 'redirect_uri'):
            sanitized[key] = sanitize_url(value)
        elif key == 'file_id':
            sanitized[key] = sanitize_file_id(value)
        elif key in ('name', 'filename'):
            sanitized[key] = sanitize_filename(value)
        elif key == 'error' and isinstance(value, BaseException):
            sanitized[key] = sanitize_error(value)
        else:
            # Other fields carry no credentials
            sanitized[key] = value

    return sanitized
