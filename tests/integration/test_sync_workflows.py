"""
Integration tests for settings sync workflows.

These tests run the provider, client and poller together against an
in-memory Drive, simulating a second device by editing the fake directly.
"""

import pytest
import asyncio
from unittest.mock import Mock

from src.google_drive_sync.auth.manager import TokenManager
from src.google_drive_sync.auth.storage import MemoryStorage
from src.google_drive_sync.clients.drive.async_client import AsyncDriveClient
from src.google_drive_sync.services.drive import constants
from src.google_drive_sync.sync.provider import GoogleDriveSyncProvider
from tests.drive_fakes import FakeClock


def _build_provider(fake_drive, storage, listener, clock):
    client = AsyncDriveClient(TokenManager(storage), client_id="client-123", session=fake_drive)
    return GoogleDriveSyncProvider(client, listener, open_tab=Mock(), sleep=clock.sleep)


@pytest.fixture
def listener():
    return Mock()


@pytest.mark.integration
class TestSettingsWorkflows:
    """Test storing and reading settings documents."""

    @pytest.fixture
    def provider(self, fake_drive, storage, listener):
        return _build_provider(fake_drive, storage, listener, FakeClock(ticks=0))

    @pytest.mark.asyncio
    async def test_save_then_load(self, provider, fake_drive):
        """Test a saved document is stored in the app data folder and reads back."""
        await provider.init("valid-token")
        settings = {"timestamp": 1700000000, "filters": ["||example.org^"]}

        file = await provider.save("settings.json", settings)
        loaded = await provider.load("settings.json")

        assert loaded == settings
        assert fake_drive.files[file.file_id]["name"] == "settings.json"
        assert file.parents == [constants.APP_DATA_FOLDER]
        await provider.shutdown()

    @pytest.mark.asyncio
    async def test_repeated_save_updates_in_place(self, provider, fake_drive):
        """Test saving the same name twice keeps a single remote file."""
        await provider.init("valid-token")

        first = await provider.save("settings.json", {"version": 1})
        second = await provider.save("settings.json", {"version": 2})

        assert first.file_id == second.file_id
        assert len(fake_drive.files) == 1
        assert await provider.load("settings.json") == {"version": 2}
        methods = [call[0] for call in fake_drive.calls if call[1].startswith(constants.UPLOAD_URL)]
        assert methods == ["POST", "PATCH"]
        await provider.shutdown()

    @pytest.mark.asyncio
    async def test_load_missing_document(self, provider):
        await provider.init("valid-token")

        assert await provider.load("filters.json") is None
        await provider.shutdown()

    @pytest.mark.asyncio
    async def test_document_written_elsewhere_is_visible(self, provider, fake_drive):
        fake_drive.put_file("filters.json", [{"id": 1}])
        await provider.init("valid-token")

        assert await provider.load("filters.json") == [{"id": 1}]
        await provider.shutdown()

    @pytest.mark.asyncio
    async def test_delete_file(self, provider, fake_drive):
        await provider.init("valid-token")
        file = await provider.save("settings.json", {})

        await provider.client.delete_file(file.file_id)

        assert fake_drive.files == {}
        assert await provider.load("settings.json") is None
        await provider.shutdown()


@pytest.mark.integration
class TestChangeTrackingWorkflows:
    """Test change polling end to end."""

    @pytest.mark.asyncio
    async def test_first_poll_then_remote_change(self, fake_drive, storage, listener):
        """Test the first poll requests a sync and a later remote edit triggers another."""
        fake_drive.put_file("settings.json", {"version": 1})
        clock = FakeClock(ticks=0)
        provider = _build_provider(fake_drive, storage, listener, clock)

        await provider.init("valid-token")
        await asyncio.wait_for(clock.exhausted.wait(), timeout=1)
        await provider.shutdown()
        provider.tokens.set_token("valid-token")

        await provider._sync_list_changes()
        assert listener.call_count == 1
        cursor = provider.folder.change_cursor

        await provider.load("settings.json")
        await provider._sync_list_changes()
        assert listener.call_count == 1

        file_id = provider.folder.get_file_id("settings.json")
        fake_drive.update_content(file_id, {"version": 2})
        await provider._sync_list_changes()

        assert listener.call_count == 2
        assert int(provider.folder.change_cursor) == int(cursor) + 1

    @pytest.mark.asyncio
    async def test_poller_drives_change_checks(self, fake_drive, storage, listener):
        """Test every poll asks for a sync until the folder has been listed."""
        clock = FakeClock(ticks=2)
        provider = _build_provider(fake_drive, storage, listener, clock)

        await provider.init("valid-token")
        await asyncio.wait_for(clock.exhausted.wait(), timeout=1)

        assert clock.delays == [0, 60, 60]
        assert listener.call_count == 2
        await provider.shutdown()


@pytest.mark.integration
class TestAuthorizationWorkflows:
    """Test authorization loss and recovery."""

    @pytest.mark.asyncio
    async def test_rejected_token_is_revoked(self, fake_drive, listener):
        """Test a 401 from Drive drops the token everywhere and stops polling."""
        storage = MemoryStorage()
        clock = FakeClock(ticks=5)
        provider = _build_provider(fake_drive, storage, listener, clock)

        await provider.init("expired-token")
        for _ in range(10):
            await asyncio.sleep(0)

        assert provider.is_authorized() is False
        assert storage.get_item(constants.TOKEN_STORAGE_KEY) is None
        assert fake_drive.revoked == ["expired-token"]
        assert provider.poller.is_running is False
        assert await provider.save("settings.json", {}) is False

    @pytest.mark.asyncio
    async def test_restart_reuses_persisted_token(self, fake_drive, storage, listener):
        """Test a second provider sharing storage starts without re-authorization."""
        first = _build_provider(fake_drive, storage, listener, FakeClock(ticks=0))
        await first.init("valid-token")
        await first.save("settings.json", {"version": 1})
        await first.shutdown()

        second = _build_provider(fake_drive, storage, listener, FakeClock(ticks=0))
        await second.init()

        assert second.is_authorized() is True
        second._open_tab.assert_not_called()
        assert await second.load("settings.json") == {"version": 1}
        await second.shutdown()
