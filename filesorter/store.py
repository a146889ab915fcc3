"""
FileSorter Category Store

User-defined extension → folder rules, persisted as a JSON
array in categories.json.
"""

import json
import logging
import os
import stat
import tempfile
from collections.abc import Mapping
from pathlib import Path
from typing import Dict, Iterator, List, NamedTuple, Optional, Union

logger = logging.getLogger(__name__)

DEFAULT_STORE_FILE = "categories.json"


class CategoryStoreError(Exception):
    """Raised when the rules document cannot be written"""


class CategoryRule(NamedTuple):
    extension: str
    folder: str


def normalize_extension(extension: str) -> str:
    """Lowercase an extension and drop surrounding whitespace and leading dots"""
    return extension.strip().lower().lstrip(".")


def check_folder(folder: str) -> str:
    """
    Strip a folder name and make sure it stays inside the sorted directory.

    Raises:
        ValueError: if the folder is empty, absolute or climbs out with ".."
    """
    folder = folder.strip()
    if not folder:
        raise ValueError("Folder must not be empty")
    path = Path(folder)
    if not path.parts:
        raise ValueError(f"Folder must name a subfolder, got {folder!r}")
    if path.anchor or os.path.isabs(folder):
        raise ValueError(f"Folder must be a relative name, got {folder!r}")
    if ".." in path.parts:
        raise ValueError(f"Folder must not contain '..', got {folder!r}")
    return folder


class CategoryStore(Mapping):
    """
    Custom categorization rules keyed by extension.

    Reads like a dict ({"txt": "Notes"}); changes go through add(),
    edit() and remove(), each of which writes the whole store back
    to disk.
    """

    def __init__(self, path: Union[str, Path] = DEFAULT_STORE_FILE):
        self.path = Path(path)
        self._rules: Dict[str, str] = {}
        self.load_error: Optional[str] = None

    # Mapping protocol

    def __getitem__(self, extension: str) -> str:
        return self._rules[extension]

    def __iter__(self) -> Iterator[str]:
        return iter(self._rules)

    def __len__(self) -> int:
        return len(self._rules)

    def __repr__(self) -> str:
        return f"CategoryStore({str(self.path)!r}, {self._rules!r})"

    # Loading

    @classmethod
    def load(cls, path: Union[str, Path] = DEFAULT_STORE_FILE) -> "CategoryStore":
        """
        Load rules from disk.

        A missing document gives an empty store. A malformed one is
        logged, recorded on ``load_error`` and also gives an empty store.
        """
        store = cls(path)
        if not store.path.exists():
            logger.debug(f"No rules document at {store.path}, starting empty")
            return store

        try:
            with open(store.path, 'r', encoding='utf-8') as f:
                data = json.load(f)
            store._rules = cls._parse(data)
        except (OSError, ValueError) as e:
            store._rules = {}
            store.load_error = f"Error loading categories: {e}"
            logger.error(store.load_error)
        else:
            logger.info(f"Loaded {len(store)} custom rules from {store.path}")

        return store

    @staticmethod
    def _parse(data) -> Dict[str, str]:
        if not isinstance(data, list):
            raise ValueError("expected a JSON array of rules")

        rules: Dict[str, str] = {}
        for i, item in enumerate(data):
            if not isinstance(item, dict):
                raise ValueError(f"rule #{i} is not an object")
            extension = item.get("extension")
            folder = item.get("folder")
            if not isinstance(extension, str) or not isinstance(folder, str):
                raise ValueError(f"rule #{i} needs string 'extension' and 'folder'")

            extension = normalize_extension(extension)
            if not extension:
                logger.warning(f"Ignoring empty rule #{i} in categories document")
                continue
            try:
                rules[extension] = check_folder(folder)
            except ValueError as e:
                logger.warning(f"Ignoring rule #{i} in categories document: {e}")
        return rules

    # Mutation

    def add(self, extension: str, folder: str) -> None:
        """
        Add or overwrite the rule for an extension and persist.

        Raises:
            ValueError: if extension is empty or folder is not a usable
                relative folder name
            CategoryStoreError: if the store could not be written
        """
        key = normalize_extension(extension)
        if not key:
            raise ValueError("Extension must not be empty")
        folder = check_folder(folder)

        previous = dict(self._rules)
        self._rules[key] = folder
        self._commit(previous)
        logger.info(f"Added rule .{key} → {folder}")

    def edit(self, extension: str, new_folder: str) -> bool:
        """
        Change the folder of an existing rule and persist.

        Returns:
            False if no rule exists for the extension
        """
        key = normalize_extension(extension)
        if key not in self._rules:
            return False
        new_folder = check_folder(new_folder)

        previous = dict(self._rules)
        self._rules[key] = new_folder
        self._commit(previous)
        logger.info(f"Edited rule .{key} → {new_folder}")
        return True

    def remove(self, extension: str) -> bool:
        """
        Delete the rule for an extension and persist.

        Returns:
            False if there was nothing to remove
        """
        key = normalize_extension(extension)
        if key not in self._rules:
            return False

        previous = dict(self._rules)
        del self._rules[key]
        self._commit(previous)
        logger.info(f"Removed rule .{key}")
        return True

    def _commit(self, previous: Dict[str, str]) -> None:
        # Keep memory in step with disk when the write fails
        try:
            self.persist()
        except CategoryStoreError:
            self._rules = previous
            raise

    # Persistence

    def rules(self) -> List[CategoryRule]:
        return [CategoryRule(ext, folder) for ext, folder in self._rules.items()]

    def to_list(self) -> List[Dict[str, str]]:
        return [{"extension": r.extension, "folder": r.folder} for r in self.rules()]

    def _file_mode(self) -> int:
        # mkstemp creates 0600 files; keep the existing mode or honour the umask
        try:
            return stat.S_IMODE(os.stat(self.path).st_mode)
        except FileNotFoundError:
            umask = os.umask(0)
            os.umask(umask)
            return 0o666 & ~umask

    def persist(self) -> None:
        """
        Write all rules to disk.

        The document is written to a temporary file next to the target
        and swapped in with os.replace, so readers never see a partial
        file.

        Raises:
            CategoryStoreError: on any I/O failure
        """
        directory = self.path.parent
        tmp_path = None
        try:
            fd, tmp_path = tempfile.mkstemp(
                prefix=f".{self.path.name}.", suffix=".tmp", dir=str(directory)
            )
            with os.fdopen(fd, 'w', encoding='utf-8') as f:
                json.dump(self.to_list(), f, indent=2, ensure_ascii=False)
                f.write("\n")
            os.chmod(tmp_path, self._file_mode())
            os.replace(tmp_path, self.path)
            tmp_path = None
        except OSError as e:
            message = f"Error saving categories: {e}"
            logger.error(message)
            raise CategoryStoreError(message) from e
        finally:
            if tmp_path and os.path.exists(tmp_path):
                os.unlink(tmp_path)

        logger.debug(f"Saved {len(self)} rules to {self.path}")
