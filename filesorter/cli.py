"""
FileSorter command line interface
"""

import argparse
import logging
import sys
from typing import List, Optional

from filesorter import __version__
from filesorter.config import Config, load_config, save_config_template
from filesorter.engine import Organizer
from filesorter.store import CategoryStore, CategoryStoreError
from filesorter.utils import format_default_table, format_rule_table, format_summary, setup_logging

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="filesorter",
        description="Sort the files of a folder into subfolders by extension.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--config", help="Path to a filesorter.json config file")
    parser.add_argument("--rules-file", help="Custom categories document (default: categories.json)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    parser.add_argument("--log-file", help="Also write logs to this file")

    sub = parser.add_subparsers(dest="command", required=True)

    sort_p = sub.add_parser("sort", help="Organize the files of a directory")
    sort_p.add_argument("directory", help="Directory to organize")
    sort_p.add_argument("--progress", action="store_true", help="Show a progress bar")
    sort_p.add_argument("--report", help="Write the scan result as JSON to this file")

    rules_p = sub.add_parser("rules", help="Manage custom categories")
    rules_sub = rules_p.add_subparsers(dest="action", required=True)
    rules_sub.add_parser("list", help="Show custom categories")

    add_p = rules_sub.add_parser("add", help="Add or replace a category")
    add_p.add_argument("extension", help="File extension, without dot")
    add_p.add_argument("folder", help="Folder name for files with this extension")

    edit_p = rules_sub.add_parser("edit", help="Change the folder of a category")
    edit_p.add_argument("extension")
    edit_p.add_argument("folder")

    remove_p = rules_sub.add_parser("remove", help="Delete a category")
    remove_p.add_argument("extension")

    sub.add_parser("defaults", help="Show the built-in categories")

    init_p = sub.add_parser("init-config", help="Write a config file template")
    init_p.add_argument("path", nargs="?", default="filesorter.json")

    return parser


def _load_store(config: Config) -> CategoryStore:
    store = CategoryStore.load(config.get_categories_path())
    if store.load_error:
        print(store.load_error, file=sys.stderr)
    return store


def cmd_sort(args: argparse.Namespace, config: Config) -> int:
    organizer = Organizer(_load_store(config), config)
    show_progress = args.progress or config.settings.show_progress
    result = organizer.organize(args.directory, show_progress=show_progress)

    for line in result.log_lines():
        print(line)

    if not result.is_valid:
        return 1

    print(format_summary(result.summary(), len(result.skipped), len(result.failed)))

    if args.report:
        result.save(args.report)

    return 0 if all(outcome.ok for outcome in result) else 1


def cmd_rules(args: argparse.Namespace, config: Config) -> int:
    store = _load_store(config)

    if args.action == "list":
        print(format_rule_table(store))
        return 0

    extension = args.extension.strip()
    if not extension.lstrip("."):
        print("Error: extension must not be empty", file=sys.stderr)
        return 2

    folder = getattr(args, "folder", None)
    if folder is not None and not folder.strip():
        print("Error: folder must not be empty", file=sys.stderr)
        return 2

    try:
        if args.action == "add":
            store.add(extension, folder)
        elif args.action == "edit":
            if not store.edit(extension, folder):
                print(f"Error: no custom category for .{extension.lstrip('.')}", file=sys.stderr)
                return 1
        elif args.action == "remove":
            if not store.remove(extension):
                print(f"No custom category for .{extension.lstrip('.')}")
                return 0
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2
    except CategoryStoreError as e:
        print(str(e), file=sys.stderr)
        return 1

    print(format_rule_table(store))
    return 0


def cmd_defaults(args: argparse.Namespace, config: Config) -> int:
    print(format_default_table(config.default_categories))
    return 0


def cmd_init_config(args: argparse.Namespace, config: Config) -> int:
    save_config_template(args.path)
    print(f"Wrote {args.path}")
    return 0


COMMANDS = {
    "sort": cmd_sort,
    "rules": cmd_rules,
    "defaults": cmd_defaults,
    "init-config": cmd_init_config,
}


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        config = load_config(args.config)
    except (FileNotFoundError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    if args.rules_file:
        config.settings.categories_file = args.rules_file

    setup_logging(
        log_file=args.log_file or config.settings.log_file,
        verbose=args.verbose or config.settings.verbose
    )

    return COMMANDS[args.command](args, config)
