import pytest
from datetime import datetime, timezone

from src.google_drive_sync.services.drive.types import DriveFile, DriveChange, ChangePage
from src.google_drive_sync.sync.state import FolderState


@pytest.mark.unit
class TestDriveFile:
    """Test cases for the DriveFile type."""

    def test_from_api(self, sample_file_response):
        file = DriveFile.from_api(sample_file_response)

        assert file.file_id == "1AbCdEfGhIjKlMnOp"
        assert file.id == file.file_id
        assert file.name == "settings.json"
        assert file.mime_type == "application/json"
        assert file.modified_time == datetime(2025, 1, 15, 10, 0, tzinfo=timezone.utc)
        assert file.parents == ["appDataFolder"]
        assert file.raw == sample_file_response

    def test_from_api_keeps_unknown_fields(self):
        file = DriveFile.from_api({"id": "file-1", "size": "42"})

        assert file.raw["size"] == "42"
        assert file.to_dict() == {"id": "file-1", "size": "42"}

    def test_invalid_timestamp(self):
        file = DriveFile.from_api({"id": "file-1", "modifiedTime": "yesterday"})

        assert file.modified_time is None

    def test_to_dict_overlays_typed_fields(self, sample_file_response):
        file = DriveFile.from_api(sample_file_response)
        file.name = "filters.json"

        result = file.to_dict()

        assert result["name"] == "filters.json"
        assert result["id"] == "1AbCdEfGhIjKlMnOp"

    def test_str(self):
        assert str(DriveFile(file_id="file-1", name="settings.json")) == "settings.json (file-1)"


@pytest.mark.unit
class TestChangePage:
    """Test parsing of changes.list pages."""

    def test_last_page(self, sample_file_response):
        page = ChangePage.from_api({
            "newStartPageToken": "42",
            "changes": [
                {"fileId": "1AbCdEfGhIjKlMnOp", "removed": False, "file": sample_file_response,
                 "time": "2025-01-15T10:00:00.000Z"},
                {"fileId": "file-2", "removed": True},
            ],
        })

        assert len(page) == 2
        assert page.next_page_token is None
        assert page.new_start_page_token == "42"
        assert page.changes[0].file.name == "settings.json"
        assert page.changes[0].time.year == 2025
        assert page.changes[1].removed is True
        assert page.changes[1].file is None

    def test_intermediate_page(self):
        page = ChangePage.from_api({"nextPageToken": "7", "changes": []})

        assert len(page) == 0
        assert page.next_page_token == "7"
        assert page.new_start_page_token is None

    def test_null_changes(self):
        assert ChangePage.from_api({"changes": None}).changes == []

    def test_change_defaults(self):
        change = DriveChange.from_api({})

        assert change.file_id is None
        assert change.removed is False


@pytest.mark.unit
class TestFolderState:
    """Test the local view of the app data folder."""

    def test_unlisted_folder(self):
        state = FolderState()

        assert state.files is None
        assert state.get_file_id("settings.json") is None

    def test_replace_files(self):
        state = FolderState()
        state.replace_files([
            DriveFile(file_id="file-1", name="settings.json"),
            DriveFile(file_id="file-2", name="filters.json"),
        ])

        assert state.get_file_id("filters.json") == "file-2"
        assert state.get_file_id("missing.json") is None

    def test_replace_files_drops_stale_entries(self):
        state = FolderState()
        state.replace_files([DriveFile(file_id="file-1", name="settings.json")])

        state.replace_files([])

        assert state.files == {}
        assert state.get_file_id("settings.json") is None
