"""
FileSorter Main Engine

The Organizer lists a directory, classifies each file and moves
it into its category folder, collecting one outcome per file.
"""

import json
import logging
import os
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Dict, Iterator, List, Mapping, Optional

from tqdm import tqdm

from filesorter.categorizer import Categorizer
from filesorter.config import Config, Settings
from filesorter.mover import MoveOutcome, OutcomeStatus, move_file
from filesorter.store import CategoryStore

logger = logging.getLogger(__name__)


# ═══════════════════════════════════════════════════════════════════════════
# DATA CLASSES
# ═══════════════════════════════════════════════════════════════════════════

@dataclass
class ScanResult:
    """Outcomes of one organize call, in processing order"""

    directory: str
    outcomes: List[MoveOutcome] = field(default_factory=list)
    timestamp: str = field(default_factory=lambda: datetime.now().isoformat())

    def __iter__(self) -> Iterator[MoveOutcome]:
        return iter(self.outcomes)

    def __len__(self) -> int:
        return len(self.outcomes)

    def _with_status(self, status: OutcomeStatus) -> List[MoveOutcome]:
        return [o for o in self.outcomes if o.status is status]

    @property
    def moved(self) -> List[MoveOutcome]:
        return self._with_status(OutcomeStatus.MOVED)

    @property
    def skipped(self) -> List[MoveOutcome]:
        return self._with_status(OutcomeStatus.SKIPPED)

    @property
    def failed(self) -> List[MoveOutcome]:
        return self._with_status(OutcomeStatus.FAILED)

    @property
    def is_valid(self) -> bool:
        """False when the directory itself was rejected"""
        return not self._with_status(OutcomeStatus.INVALID)

    def log_lines(self) -> List[str]:
        return [o.log_line() for o in self.outcomes]

    def summary(self) -> Dict[str, int]:
        """Count moved files per destination folder"""
        counts: Dict[str, int] = {}
        for outcome in self.moved:
            counts[outcome.folder] = counts.get(outcome.folder, 0) + 1
        return counts

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON export"""
        return {
            "timestamp": self.timestamp,
            "directory": self.directory,
            "moved": len(self.moved),
            "skipped": len(self.skipped),
            "failed": len(self.failed),
            "summary": self.summary(),
            "outcomes": [o.to_dict() for o in self.outcomes]
        }

    def save(self, filepath: str) -> None:
        """Save the scan result to a JSON file"""
        with open(filepath, 'w', encoding='utf-8') as f:
            json.dump(self.to_dict(), f, indent=2, ensure_ascii=False)


# ═══════════════════════════════════════════════════════════════════════════
# MAIN ENGINE
# ═══════════════════════════════════════════════════════════════════════════

class Organizer:
    """
    Sorts the files of one directory into category subfolders.

    Example usage:
        store = CategoryStore.load("categories.json")
        organizer = Organizer(store)
        result = organizer.organize("/path/to/messy/folder")
        for line in result.log_lines():
            print(line)
    """

    def __init__(
        self,
        store: Optional[Mapping[str, str]] = None,
        config: Optional[Config] = None
    ):
        """
        Args:
            store: Custom rules; loaded from the configured file if omitted
            config: Pre-loaded Config object
        """
        self.config = config or Config()

        if store is None:
            store = CategoryStore.load(self.config.get_categories_path())
        self.store = store

        self.categorizer = Categorizer(self.store, self.config.default_categories)

        self._progress_callback: Optional[Callable[[int, int, str], None]] = None

    @property
    def settings(self) -> Settings:
        return self.config.settings

    def set_progress_callback(self, callback: Callable[[int, int, str], None]) -> None:
        """
        Set a callback for progress updates.

        Args:
            callback: Function(current, total, filename) called on each file
        """
        self._progress_callback = callback

    def _reject(self, directory_path: str, reason: str) -> ScanResult:
        logger.error(reason)
        return ScanResult(
            directory=directory_path,
            outcomes=[MoveOutcome(
                filename="",
                status=OutcomeStatus.INVALID,
                error_message=reason
            )]
        )

    def _list_files(self, directory: str) -> List[os.DirEntry]:
        # Snapshot the listing so folders created during the scan are not visited
        with os.scandir(directory) as it:
            entries = list(it)

        files = []
        for entry in entries:
            try:
                if not entry.is_file():
                    continue
            except OSError:
                continue
            if self.settings.skip_hidden and entry.name.startswith('.'):
                continue
            files.append(entry)
        return files

    def organize(
        self,
        directory_path: str,
        show_progress: Optional[bool] = None
    ) -> ScanResult:
        """
        Sort every file directly inside a directory.

        Subdirectories are left alone. A file that fails to move is
        reported and the scan continues with the next one.

        Args:
            directory_path: Directory to organize
            show_progress: Show a progress bar; defaults to the setting

        Returns:
            ScanResult with one outcome per file, or a single INVALID
            outcome when the directory was rejected
        """
        if directory_path is None or not str(directory_path).strip():
            return self._reject("", "No directory selected")

        directory = os.path.abspath(str(directory_path).strip())
        if not os.path.isdir(directory):
            return self._reject(directory, f"Not a directory: {directory}")

        try:
            files = self._list_files(directory)
        except OSError as e:
            return self._reject(directory, f"Cannot read directory {directory}: {e.strerror or e}")

        logger.info(f"Organizing {len(files)} files in {directory}")
        result = ScanResult(directory=directory)

        if show_progress is None:
            show_progress = self.settings.show_progress

        iterator = tqdm(files, desc="Sorting", unit="file") if show_progress else files
        total = len(files)

        for i, entry in enumerate(iterator):
            folder, source = self.categorizer.describe(entry.name)

            if folder is None:
                outcome = MoveOutcome(filename=entry.name, status=OutcomeStatus.SKIPPED)
            else:
                logger.debug(f"{entry.name} → {folder} ({source} rule)")
                outcome = move_file(entry.path, folder, directory)

            result.outcomes.append(outcome)

            if self._progress_callback:
                self._progress_callback(i + 1, total, entry.name)

        logger.info(
            f"Moved {len(result.moved)}, skipped {len(result.skipped)}, "
            f"errors {len(result.failed)}"
        )
        return result
