"""
FileSorter Utility Functions

Logging setup and text formatting for the command line.
"""

import logging
from typing import Dict, List, Mapping, Optional

from filesorter.config import split_extensions

logger = logging.getLogger(__name__)


# ═══════════════════════════════════════════════════════════════════════════
# LOGGING
# ═══════════════════════════════════════════════════════════════════════════

def setup_logging(
    log_file: Optional[str] = None,
    verbose: bool = False
) -> logging.Logger:
    """
    Configure the filesorter package logger.

    Warnings and errors go to stderr, stdout is left for the move log.
    A log file, when given, records every move at INFO level.
    Calling this again replaces the handlers from the previous call.

    Args:
        log_file: Optional file to write logs to
        verbose: If True, use DEBUG level everywhere
    """
    package_logger = logging.getLogger("filesorter")
    for handler in list(package_logger.handlers):
        if getattr(handler, "_filesorter", False):
            package_logger.removeHandler(handler)
            handler.close()

    console = logging.StreamHandler()
    console.setLevel(logging.DEBUG if verbose else logging.WARNING)
    console.setFormatter(logging.Formatter('%(levelname)s: %(message)s'))
    handlers: List[logging.Handler] = [console]

    if log_file:
        file_handler = logging.FileHandler(log_file, encoding='utf-8')
        file_handler.setLevel(logging.DEBUG if verbose else logging.INFO)
        file_handler.setFormatter(
            logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')
        )
        handlers.append(file_handler)

    for handler in handlers:
        handler._filesorter = True
        package_logger.addHandler(handler)

    package_logger.setLevel(logging.DEBUG if verbose else logging.INFO)
    return package_logger


# ═══════════════════════════════════════════════════════════════════════════
# DISPLAY UTILITIES
# ═══════════════════════════════════════════════════════════════════════════

def format_rule_table(rules: Mapping[str, str]) -> str:
    """Format custom rules as 'ext → folder' lines"""
    if not rules:
        return "No custom categories"

    width = max(len(ext) for ext in rules) + 1
    return '\n'.join(
        f"  .{ext:<{width}} → {folder}" for ext, folder in rules.items()
    )


def format_default_table(table: Mapping[str, str]) -> str:
    """Format the built-in categories as a display table"""
    lines = []
    for folder, extensions in table.items():
        lines.append(f"  {folder:<12} {', '.join(split_extensions(extensions))}")
    return '\n'.join(lines)


def format_summary(summary: Dict[str, int], skipped: int, failed: int) -> str:
    """One-line scan summary"""
    moved = sum(summary.values())
    parts = [f"{folder}: {count}" for folder, count in sorted(summary.items())]
    detail = f" ({', '.join(parts)})" if parts else ""
    return f"Moved {moved} files{detail}, skipped {skipped}, errors {failed}"
