"""
FileSorter Configuration Management

Holds the built-in default category table, runtime settings,
and loading of settings from a config file and environment.
"""

import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Any, Mapping, Optional


WILDCARD = "*"
CONFIG_FILE_NAME = "filesorter.json"


# ═══════════════════════════════════════════════════════════════════════════
# DEFAULT CATEGORIES
# ═══════════════════════════════════════════════════════════════════════════

# folder name -> comma-separated extensions, checked in this order
DEFAULT_CATEGORIES: Mapping[str, str] = MappingProxyType({
    "Documents": "pdf,doc,docx,txt,xls,xlsx,ppt,pptx,csv",
    "Images": "jpg,jpeg,png,gif,bmp,svg",
    "Videos": "mp4,mkv,avi,mov,flv",
    "Music": "mp3,wav,aac,flac,m4a",
    "Executables": "exe,msi,bat,sh,jar",
    "Archives": "zip,rar,7z,tar,gz",
})


def split_extensions(extensions: str) -> list:
    """Split a comma-separated extension list into lowercase tokens"""
    return [token.strip().lower() for token in extensions.split(",") if token.strip()]


def validate_default_table(table: Mapping[str, str]) -> None:
    """
    Check that a default table resolves the same way in any order.

    Each extension may be listed under one folder only, and at most one
    entry may use the wildcard, which must then be the last entry.

    Raises:
        ValueError: if the table violates one of the rules above
    """
    owners = {}
    folders = list(table.keys())

    for index, folder in enumerate(folders):
        for ext in split_extensions(table[folder]):
            if ext == WILDCARD:
                if index != len(folders) - 1:
                    raise ValueError(
                        f"Wildcard entry '{folder}' must be the last default category"
                    )
                continue
            if ext in owners:
                raise ValueError(
                    f"Extension '{ext}' is listed under both '{owners[ext]}' and '{folder}'"
                )
            owners[ext] = folder


validate_default_table(DEFAULT_CATEGORIES)


# ═══════════════════════════════════════════════════════════════════════════
# SETTINGS
# ═══════════════════════════════════════════════════════════════════════════

@dataclass
class Settings:
    """Runtime settings for FileSorter"""

    # Custom rules document, relative to the working directory
    categories_file: str = "categories.json"

    # File handling
    skip_hidden: bool = False

    # Display
    show_progress: bool = False

    # Logging
    log_file: Optional[str] = None
    verbose: bool = False


# ═══════════════════════════════════════════════════════════════════════════
# CONFIG CLASS
# ═══════════════════════════════════════════════════════════════════════════

@dataclass
class Config:
    """FileSorter configuration container"""

    settings: Settings = field(default_factory=Settings)

    # Never mutated; shared by every Categorizer built from this config
    default_categories: Mapping[str, str] = field(default_factory=lambda: DEFAULT_CATEGORIES)

    def get_categories_path(self) -> Path:
        """Resolve the custom rules document path"""
        return Path(self.settings.categories_file)


# ═══════════════════════════════════════════════════════════════════════════
# CONFIG LOADING
# ═══════════════════════════════════════════════════════════════════════════

def get_user_config_dir() -> Path:
    """Get the user config directory (~/.filesorter/)"""
    return Path.home() / ".filesorter"


def get_user_config_path() -> Path:
    """Get the user config file path (~/.filesorter/config.json)"""
    return get_user_config_dir() / "config.json"


def find_config_file(start_path: Optional[str] = None) -> Optional[Path]:
    """
    Find a filesorter config file.

    The working directory is checked first, since categories.json is
    resolved against it too, then ~/.filesorter/config.json.
    """
    local = Path(start_path or Path.cwd()) / CONFIG_FILE_NAME
    if local.is_file():
        return local

    user_config = get_user_config_path()
    if user_config.is_file():
        return user_config

    return None


def _apply_settings(config: Config, settings: Any, path: Path) -> None:
    if not isinstance(settings, dict):
        raise ValueError(f"'settings' must be a JSON object in {path}")

    for key, value in settings.items():
        if not hasattr(config.settings, key):
            continue
        default = getattr(Settings(), key)
        expected = str if default is None else type(default)
        if not (isinstance(value, expected) or (default is None and value is None)):
            raise ValueError(
                f"Setting '{key}' in {path} must be {expected.__name__}, got {value!r}"
            )
        setattr(config.settings, key, value)


def load_config(config_path: Optional[str] = None) -> Config:
    """
    Load configuration from file or use defaults.

    Args:
        config_path: Explicit path to config file, or None to auto-detect

    Returns:
        Config object with loaded settings
    """
    config = Config()
    _apply_environment(config)

    if config_path:
        path = Path(config_path)
        if not path.is_file():
            raise FileNotFoundError(f"Config file not found: {config_path}")
    else:
        path = find_config_file()

    if not path:
        return config

    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON in config file: {e}")

    if not isinstance(data, dict):
        raise ValueError(f"Config file must contain a JSON object: {path}")

    _apply_settings(config, data.get("settings", {}), path)

    # Environment wins over the config file
    _apply_environment(config)

    return config


def _apply_environment(config: Config) -> None:
    env_path = os.environ.get("FILESORTER_CATEGORIES_FILE")
    if env_path:
        config.settings.categories_file = env_path


def save_config_template(path: str) -> None:
    """Save a template configuration file"""
    template = {
        "settings": {
            "categories_file": "categories.json",
            "skip_hidden": False,
            "show_progress": False,
            "verbose": False
        }
    }

    with open(path, 'w', encoding='utf-8') as f:
        json.dump(template, f, indent=2)
