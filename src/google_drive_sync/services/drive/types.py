import logging
from datetime import datetime
from typing import Optional, List, Dict, Any
from dataclasses import dataclass, field

logger = logging.getLogger(__name__)


def _parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    if not value:
        return None
    try:
        return datetime.fromisoformat(value.replace('Z', '+00:00'))
    except ValueError:
        logger.warning("Failed to parse timestamp: %s", value)
        return None


@dataclass
class DriveFile:
    """
    Represents a file in the Google Drive app data folder.

    Only the fields the sync provider relies on are typed; the complete API
    response is preserved in `raw`.
    Args:
        file_id: The unique identifier for the file.
        name: The name of the file.
        mime_type: The MIME type of the file.
        modified_time: When the file was last modified.
        parents: List of parent folder IDs.
        raw: The metadata dictionary as returned by the Drive API.
    """
    file_id: Optional[str] = None
    name: Optional[str] = None
    mime_type: Optional[str] = None
    modified_time: Optional[datetime] = None
    parents: List[str] = field(default_factory=list)
    raw: Dict[str, Any] = field(default_factory=dict, repr=False)

    @property
    def id(self) -> Optional[str]:
        return self.file_id

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "DriveFile":
        """
        Creates a DriveFile from a Drive API `File` resource.
        Args:
            data: A dictionary containing file metadata from the Drive API.
        Returns:
            A DriveFile instance populated with the data from the dictionary.
        """
        return cls(
            file_id=data.get('id'),
            name=data.get('name'),
            mime_type=data.get('mimeType'),
            modified_time=_parse_timestamp(data.get('modifiedTime')),
            parents=list(data.get('parents', [])),
            raw=dict(data),
        )

    def to_dict(self) -> dict:
        """
        Converts the DriveFile back to Drive API metadata.
        Returns:
            The raw metadata, overlaid with any typed fields that are set.
        """
        result = dict(self.raw)
        if self.file_id:
            result["id"] = self.file_id
        if self.name:
            result["name"] = self.name
        if self.mime_type:
            result["mimeType"] = self.mime_type
        if self.parents:
            result["parents"] = list(self.parents)
        return result

    def __str__(self):
        return f"{self.name} ({self.file_id})"


@dataclass
class DriveChange:
    """
    A single entry of the Drive change log.
    Args:
        file_id: ID of the file that changed.
        removed: Whether the file was removed or access to it was lost.
        file: Updated file metadata, absent for removals.
        time: When the change was recorded.
    """
    file_id: Optional[str] = None
    removed: bool = False
    file: Optional[DriveFile] = None
    time: Optional[datetime] = None

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "DriveChange":
        file_data = data.get('file')
        return cls(
            file_id=data.get('fileId'),
            removed=bool(data.get('removed', False)),
            file=DriveFile.from_api(file_data) if file_data else None,
            time=_parse_timestamp(data.get('time')),
        )


@dataclass
class ChangePage:
    """
    A page of changes returned by `changes.list`.

    Exactly one of `next_page_token` and `new_start_page_token` is set by the
    API: the former when more pages follow, the latter on the last page.
    """
    changes: List[DriveChange] = field(default_factory=list)
    next_page_token: Optional[str] = None
    new_start_page_token: Optional[str] = None

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "ChangePage":
        return cls(
            changes=[DriveChange.from_api(change) for change in data.get('changes') or []],
            next_page_token=data.get('nextPageToken'),
            new_start_page_token=data.get('newStartPageToken'),
        )

    def __len__(self):
        return len(self.changes)
