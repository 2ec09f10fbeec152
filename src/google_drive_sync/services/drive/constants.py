"""Constants for the Google Drive v3 REST API and the app data folder."""

PROVIDER_NAME = "GOOGLE_DRIVE"

# Drive v3 endpoints
API_BASE = "https://www.googleapis.com/drive/v3"
FILES_URL = f"{API_BASE}/files"
CHANGES_URL = f"{API_BASE}/changes"
START_PAGE_TOKEN_URL = f"{CHANGES_URL}/startPageToken"
UPLOAD_URL = "https://www.googleapis.com/upload/drive/v3/files"

# OAuth2 endpoints
AUTHORIZATION_URL = "https://accounts.google.com/o/oauth2/v2/auth"
REVOKE_URL = "https://accounts.google.com/o/oauth2/revoke"

SCOPES = [
    "https://www.googleapis.com/auth/drive.file",
    "https://www.googleapis.com/auth/drive.appdata",
]

APP_DATA_FOLDER = "appDataFolder"
MULTIPART_BOUNDARY = "-------314159265358979323846"

# Statuses that force the access token to be revoked
AUTH_ERROR_STATUSES = (401, 403)

# Persisted key holding the bearer token
TOKEN_STORAGE_KEY = "google-drive-auth-token"

# Polling intervals in seconds
DEFAULT_POLL_INTERVAL = 60
DEFAULT_ERROR_POLL_INTERVAL = 5 * 60
