"""
FileSorter - Rule-based File Categorization

Sorts the files of a folder into subfolders by extension, using
user-defined categories first and a built-in table second.
"""

__version__ = "1.0.0"
__author__ = "FileSorter Contributors"

from filesorter.engine import Organizer, ScanResult
from filesorter.categorizer import Categorizer, classify, get_extension
from filesorter.mover import MoveOutcome, OutcomeStatus, move_file
from filesorter.store import CategoryStore, CategoryStoreError
from filesorter.config import Config, DEFAULT_CATEGORIES, load_config

__all__ = [
    "Organizer",
    "ScanResult",
    "Categorizer",
    "classify",
    "get_extension",
    "MoveOutcome",
    "OutcomeStatus",
    "move_file",
    "CategoryStore",
    "CategoryStoreError",
    "Config",
    "DEFAULT_CATEGORIES",
    "load_config",
    "__version__",
]
