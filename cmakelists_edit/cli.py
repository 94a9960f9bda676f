"""
`cmakelists-edit` command line front end.

Commands
--------
cmakelists-edit -t app add src/a.cpp src/b.cpp   -- add files to target app
cmakelists-edit -t app del src/a.cpp             -- remove files
cmakelists-edit -t app ren src/a.cpp src/c.cpp   -- rename a file
cmakelists-edit list                             -- show targets and files

Global options: ``-f FILE`` (default CMakeLists.txt), ``--sort``,
``--no-create``, ``--dry-run`` (print the result instead of saving),
``--config PATH``, ``-v``.
"""

from __future__ import annotations

import argparse
import locale
import logging
import sys
from typing import Optional

from .config import Config
from .editing import BlockCreationPolicy, CMakeListsFile, SortSectionPolicy
from .file_buffer import StandardFileBuffer
from .kinds import detect_file_kind

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _open_listsfile(args: argparse.Namespace, cfg: Config) -> Optional[CMakeListsFile]:
    """Load and parse the listfile, reporting failures on stderr."""
    buffer = StandardFileBuffer(args.file)
    if not buffer.load():
        print(f"Could not open CMakeLists file {args.file}", file=sys.stderr)
        return None

    listsfile = CMakeListsFile(buffer, cfg)
    if not listsfile.is_loaded:
        print(f"Could not parse CMakeLists file {args.file}", file=sys.stderr)
        return None

    if args.sort:
        listsfile.set_sort_section_policy(SortSectionPolicy.SORT)
    if args.no_create:
        listsfile.set_block_creation_policy(BlockCreationPolicy.NO_CREATE)
    return listsfile


def _require_target(args: argparse.Namespace, cfg: Config) -> Optional[str]:
    target = args.target or cfg.DEFAULT_TARGET
    if not target:
        print("No target specified (use --target)", file=sys.stderr)
    return target


def _finish(listsfile: CMakeListsFile, args: argparse.Namespace) -> bool:
    """Print or persist the result. Returns False if saving failed."""
    if args.dry_run:
        sys.stdout.write(listsfile.write().decode("utf-8", "surrogateescape"))
        return True
    if not listsfile.is_dirty:
        return True
    if not listsfile.save():
        print(f"Could not save CMakeLists file {args.file}", file=sys.stderr)
        return False
    return True


# ---------------------------------------------------------------------------
# Sub-command handlers
# ---------------------------------------------------------------------------

def _cmd_add(args: argparse.Namespace, listsfile: CMakeListsFile, target: str) -> int:
    failed = 0
    for file_name in args.files:
        if not listsfile.add_source_file(target, file_name,
                                         detect_file_kind(file_name)):
            print(f"Could not add {file_name} to {target}", file=sys.stderr)
            failed += 1
    return failed


def _cmd_del(args: argparse.Namespace, listsfile: CMakeListsFile, target: str) -> int:
    failed = 0
    for file_name in args.files:
        if not listsfile.remove_source_file(target, file_name):
            print(f"Could not remove {file_name} from {target}", file=sys.stderr)
            failed += 1
    return failed


def _cmd_ren(args: argparse.Namespace, listsfile: CMakeListsFile, target: str) -> int:
    if not listsfile.rename_source_file(target, args.old, args.new):
        print(f"Could not rename {args.old} in {target}", file=sys.stderr)
        return 1
    return 0


def _cmd_list(args: argparse.Namespace, listsfile: CMakeListsFile) -> int:
    targets = [args.target] if args.target else listsfile.targets()
    for target in targets:
        files = listsfile.source_files(target)
        print(f"{target}  [{len(files)} file(s)]")
        for file_name in files:
            print(f"  {file_name}")
    return 0


_EDIT_COMMANDS = {
    "add": _cmd_add,
    "del": _cmd_del,
    "ren": _cmd_ren,
}


# ---------------------------------------------------------------------------
# Argument parsing
# ---------------------------------------------------------------------------

def _build_parser() -> argparse.ArgumentParser:
    """Build and return the argument parser."""
    parser = argparse.ArgumentParser(
        prog="cmakelists-edit",
        description="Add, rename and remove source files in a CMakeLists file",
    )
    parser.add_argument("-f", "--file", default="CMakeLists.txt",
                        help="Listfile to edit (default: CMakeLists.txt)")
    parser.add_argument("-t", "--target", default=None,
                        help="Target whose sources are edited "
                             "(default: from config)")
    parser.add_argument("--sort", action="store_true",
                        help="Sort the section after adding/renaming a file")
    parser.add_argument("--no-create", action="store_true",
                        help="Fail instead of creating a target_sources block "
                             "for unknown targets")
    parser.add_argument("--dry-run", action="store_true",
                        help="Print the resulting file instead of saving it")
    parser.add_argument("--config", default=None,
                        help="Path to .cmakelists-edit.yaml config file")
    parser.add_argument("-v", "--verbose", action="store_true",
                        help="Enable debug logging")

    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")
    subparsers.required = True

    add_p = subparsers.add_parser("add", help="Add source files")
    add_p.add_argument("files", nargs="+", help="Files to add")

    del_p = subparsers.add_parser("del", help="Remove source files")
    del_p.add_argument("files", nargs="+", help="Files to remove")

    ren_p = subparsers.add_parser("ren", help="Rename a source file")
    ren_p.add_argument("old", help="Current file name")
    ren_p.add_argument("new", help="New file name")

    subparsers.add_parser("list", help="List targets and their source files")

    return parser


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

def main(argv: Optional[list[str]] = None) -> int:
    """
    Main entry point for ``cmakelists-edit``.

    Parameters
    ----------
    argv:
        Argument list without the program name. Defaults to sys.argv.

    Returns
    -------
    int
        0 on success, 1 if the file could not be loaded or any
        requested edit failed.
    """
    parser = _build_parser()
    args = parser.parse_args(argv)

    # Configure logging if not already configured
    if not logging.root.handlers:
        logging.basicConfig(
            level=logging.DEBUG if args.verbose else logging.WARNING,
            format="%(levelname)s  %(name)s  %(message)s",
        )

    # Sorted sections follow the user's collation order.
    try:
        locale.setlocale(locale.LC_COLLATE, "")
    except locale.Error as exc:
        logger.debug("[CMakeEdit] Could not set collation locale: %s", exc)

    cfg = Config.load(args.config)
    listsfile = _open_listsfile(args, cfg)
    if listsfile is None:
        return 1

    if args.command == "list":
        return _cmd_list(args, listsfile)

    target = _require_target(args, cfg)
    if not target:
        return 1

    failed = _EDIT_COMMANDS[args.command](args, listsfile, target)
    logger.debug("[CMakeEdit] %s finished with %d failure(s)",
                 args.command, failed)

    if not _finish(listsfile, args):
        return 1
    return 1 if failed else 0


if __name__ == "__main__":
    sys.exit(main())
