from dataclasses import dataclass
from typing import Dict, Optional

from ..services.drive.types import DriveFile


@dataclass
class FolderState:
    """
    Local view of the app data folder.
    Args:
        change_cursor: Page token marking the last seen position in the change log.
        files: File name to metadata map, None until the first full listing.
    """
    change_cursor: Optional[str] = None
    files: Optional[Dict[str, DriveFile]] = None

    def replace_files(self, files) -> None:
        self.files = {file.name: file for file in files}

    def get_file_id(self, name: str) -> Optional[str]:
        if not self.files:
            return None
        file = self.files.get(name)
        return file.file_id if file else None
