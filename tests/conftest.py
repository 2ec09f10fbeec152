import pytest
import sys
from pathlib import Path
from unittest.mock import Mock

# Add the project root to the Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from src.google_drive_sync.auth.manager import TokenManager
from src.google_drive_sync.auth.storage import MemoryStorage
from src.google_drive_sync.clients.drive.async_client import AsyncDriveClient
from tests.drive_fakes import FakeDrive


@pytest.fixture
def storage():
    """Empty in-memory token storage."""
    return MemoryStorage()


@pytest.fixture
def token_manager(storage):
    """Token context holding a valid token."""
    manager = TokenManager(storage)
    manager.set_token("test-token")
    return manager


@pytest.fixture
def mock_session():
    """Mock aiohttp session; configure session.request.return_value/side_effect per test."""
    session = Mock()
    session.closed = False
    session.request = Mock()
    return session


@pytest.fixture
def drive_client(token_manager, mock_session):
    """Drive client wired to the mock session."""
    return AsyncDriveClient(token_manager, client_id="client-123.apps.googleusercontent.com", session=mock_session)


@pytest.fixture
def sample_file_response():
    """Sample Drive API file resource."""
    return {
        "id": "1AbCdEfGhIjKlMnOp",
        "name": "settings.json",
        "mimeType": "application/json",
        "modifiedTime": "2025-01-15T10:00:00.000Z",
        "parents": ["appDataFolder"],
    }


@pytest.fixture
def fake_drive():
    """In-memory Drive accepting the token 'valid-token'."""
    return FakeDrive()
