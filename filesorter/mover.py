"""
FileSorter File Mover

Moves a single file into a category folder under the scanned
directory and reports the result as a MoveOutcome.
"""

import logging
import os
import shutil
from dataclasses import asdict, dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Optional, Union

logger = logging.getLogger(__name__)


class OutcomeStatus(str, Enum):
    MOVED = "moved"
    SKIPPED = "skipped"
    FAILED = "failed"
    INVALID = "invalid"  # the scan itself was rejected


@dataclass
class MoveOutcome:
    """Result of handling one file during a scan"""

    filename: str
    status: OutcomeStatus
    folder: Optional[str] = None
    destination: Optional[str] = None  # final file path, on success
    error_message: str = ""

    @property
    def ok(self) -> bool:
        return self.status in (OutcomeStatus.MOVED, OutcomeStatus.SKIPPED)

    @property
    def destination_dir(self) -> Optional[str]:
        return os.path.dirname(self.destination) if self.destination else None

    def log_line(self) -> str:
        """Format the outcome as one line for the user-facing log"""
        if self.status is OutcomeStatus.MOVED:
            return f"Moved {self.filename} → {self.destination_dir}"
        if self.status is OutcomeStatus.SKIPPED:
            return f"Skipped {self.filename}: no matching category"
        if self.status is OutcomeStatus.INVALID:
            return f"Error: {self.error_message}"
        return f"Error moving {self.filename}: {self.error_message}"

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["status"] = self.status.value
        return data

    def __str__(self) -> str:
        return self.log_line()


def _is_inside(base: str, path: str) -> bool:
    try:
        return path != base and os.path.commonpath([base, path]) == base
    except ValueError:  # different drives
        return False


def move_file(
    file_path: Union[str, Path],
    folder_name: str,
    base_directory: Union[str, Path]
) -> MoveOutcome:
    """
    Move a file into base_directory/folder_name.

    Missing folders are created. A file with the same name at the
    destination is replaced. I/O errors are returned as a failed
    outcome, never raised.

    Args:
        file_path: File to move
        folder_name: Destination folder, relative to base_directory
        base_directory: The directory being organized

    Returns:
        MoveOutcome with status MOVED or FAILED
    """
    source = Path(file_path)
    filename = source.name
    base = os.path.abspath(str(base_directory))
    dest_folder = Path(os.path.normpath(os.path.join(base, folder_name)))

    # Absolute or ".." folder names must not lead outside the scanned directory
    if not _is_inside(base, str(dest_folder)):
        logger.error(f"Refusing to move {source} outside {base}: {folder_name!r}")
        return MoveOutcome(
            filename=filename,
            status=OutcomeStatus.FAILED,
            folder=folder_name,
            error_message=f"folder {folder_name!r} is not inside {base}"
        )

    try:
        dest_folder.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        logger.error(f"Could not create {dest_folder}: {e}")
        return MoveOutcome(
            filename=filename,
            status=OutcomeStatus.FAILED,
            folder=folder_name,
            error_message=f"cannot create folder {dest_folder}: {e.strerror or e}"
        )

    dest_path = dest_folder / filename

    # shutil.move would drop the file inside a same-named directory
    if dest_path.is_dir():
        return MoveOutcome(
            filename=filename,
            status=OutcomeStatus.FAILED,
            folder=folder_name,
            error_message=f"{dest_path} is a directory"
        )

    try:
        if dest_path.exists() and not dest_path.samefile(source):
            logger.warning(f"Replacing existing file {dest_path}")
        shutil.move(str(source), str(dest_path))
    except OSError as e:
        logger.error(f"Move error: {source} -> {dest_path}: {e}")
        return MoveOutcome(
            filename=filename,
            status=OutcomeStatus.FAILED,
            folder=folder_name,
            error_message=e.strerror or str(e)
        )

    logger.info(f"Moved {source} -> {dest_path}")
    return MoveOutcome(
        filename=filename,
        status=OutcomeStatus.MOVED,
        folder=folder_name,
        destination=str(dest_path)
    )
