"""
FileSorter Categorization Engine

Resolves the destination folder for a file from its extension:
custom rules first, then the built-in default table.
"""

import logging
from typing import Mapping, Optional, Tuple

from filesorter.config import DEFAULT_CATEGORIES, WILDCARD, split_extensions, validate_default_table

logger = logging.getLogger(__name__)


def get_extension(filename: str) -> str:
    """
    Get the lowercase extension of a filename, without the dot.

    Files without a dot, or whose only dot is the first character
    (".gitignore"), have no extension.
    """
    i = filename.rfind('.')
    return filename[i + 1:].lower() if i > 0 else ""


def classify(
    filename: str,
    store: Mapping[str, str],
    default_table: Mapping[str, str] = DEFAULT_CATEGORIES
) -> Optional[str]:
    """
    Resolve the destination folder name for a file.

    Args:
        filename: Name of the file (not a path)
        store: Custom rules, extension -> folder
        default_table: Folder -> comma-separated extensions

    Returns:
        Folder name, or None when nothing matches
    """
    folder, _ = _resolve(filename, store, default_table)
    return folder


def _resolve(
    filename: str,
    store: Mapping[str, str],
    default_table: Mapping[str, str]
) -> Tuple[Optional[str], Optional[str]]:
    ext = get_extension(filename)

    if ext in store:
        return store[ext], "custom"

    for folder, extensions in default_table.items():
        tokens = split_extensions(extensions)
        if ext in tokens or WILDCARD in tokens:
            return folder, "default"

    return None, None


class Categorizer:
    """Categorizes files by extension against custom and default rules"""

    def __init__(
        self,
        store: Optional[Mapping[str, str]] = None,
        default_table: Optional[Mapping[str, str]] = None
    ):
        """
        Args:
            store: Custom rules (a CategoryStore or any mapping)
            default_table: Replacement default table, validated on use
        """
        self.store = store if store is not None else {}

        if default_table is None:
            default_table = DEFAULT_CATEGORIES
        else:
            validate_default_table(default_table)
        self.default_table = default_table

    def categorize(self, filename: str) -> Optional[str]:
        """Get the destination folder for a filename, or None"""
        return classify(filename, self.store, self.default_table)

    def describe(self, filename: str) -> Tuple[Optional[str], Optional[str]]:
        """
        Get the destination folder and which rule set produced it.

        Returns:
            Tuple of (folder, source) where source is "custom", "default"
            or None when nothing matched
        """
        folder, source = _resolve(filename, self.store, self.default_table)
        logger.debug(f"{filename}: {folder or 'no match'} ({source or '-'})")
        return folder, source
