# fstree/cli.py

"""
Command-line front door for fstree.

Parses CLI options, decides whether to color, and streams the rendered tree
to stdout or to a file.
"""


from __future__ import annotations

import argparse
import logging
import os
import sys
from typing import TextIO

from fstree.errors import TreeError
from fstree.output import open_sink, write_tree
from fstree.tree import walk


def _non_negative_int(value: str) -> int:
    """argparse type for non-negative integer values."""
    try:
        parsed = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid integer value: {value!r}") from exc
    if parsed < 0:
        raise argparse.ArgumentTypeError("value must be >= 0")
    return parsed


def build_parser() -> argparse.ArgumentParser:
    """
    Build the argument parser for the ``fstree`` command.

    Returns
    -------
    argparse.ArgumentParser
        Parser whose namespace holds ``directory``, ``depth``, ``all``,
        ``no_color``, ``output``, ``long``, ``follow_links``, ``noreport``
        and ``verbose``.
    """

    parser = argparse.ArgumentParser(
        prog="fstree",
        description="Display a directory hierarchy as an indented tree.",
    )
    parser.add_argument("directory", nargs="?", default=".", help="Root directory to display (default: .).")
    parser.add_argument("-d", "--depth", type=_non_negative_int, default=None, help="Maximum depth to traverse.")
    parser.add_argument("-a", "--all", action="store_true", help="Show hidden files.")
    parser.add_argument("-n", "--no-color", action="store_true", help="Disable colors.")
    parser.add_argument("-o", "--output", metavar="FILE", default=None, help="Write to FILE instead of stdout.")
    parser.add_argument(
        "-l",
        "--long",
        action="store_true",
        help="Show symlink targets, sizes and modification times.",
    )
    parser.add_argument(
        "--follow-links",
        action="store_true",
        help="Descend into symbolic links to directories.",
    )
    parser.add_argument("--noreport", action="store_true", help="Omit the directory and file count footer.")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log skipped entries to stderr.")
    return parser


def use_color(args: argparse.Namespace, stream: TextIO) -> bool:
    """
    Decide whether the rendered tree should be colored.

    Color is used only when ``stream`` is an interactive terminal, and never
    with ``--no-color``, ``--output`` or a non-empty ``NO_COLOR`` variable.

    Parameters
    ----------
    args : argparse.Namespace
        Parsed command-line arguments.
    stream : TextIO
        Stream the tree will be written to.

    Returns
    -------
    bool
        ``True`` if names should be wrapped in color codes.
    """

    if args.no_color or args.output is not None or os.environ.get("NO_COLOR"):
        return False
    isatty = getattr(stream, "isatty", None)
    return bool(isatty and isatty())


def main(argv: list[str] | None = None) -> int:
    """
    Parse arguments and print the tree.

    Fatal conditions (missing root, root not a directory, unwritable output
    file) exit through ``SystemExit`` with a message and no tree body.
    Unreadable subdirectories are reported inline and do not change the exit
    status.

    Parameters
    ----------
    argv : list[str] | None, optional
        Arguments to parse instead of ``sys.argv[1:]``.

    Returns
    -------
    int
        Process exit status, ``0`` on success.

    Raises
    ------
    SystemExit
        On a fatal condition or a usage error.
    """
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s: %(message)s",
    )

    color = use_color(args, sys.stdout)
    try:
        lines = walk(
            args.directory,
            max_depth=args.depth,
            show_hidden=args.all,
            color=color,
            details=args.long,
            follow_symlinks=args.follow_links,
        )
        with open_sink(args.output) as out:
            write_tree(lines, out, strip_color=args.output is not None, report=not args.noreport)
    except (TreeError, OSError) as exc:
        raise SystemExit(f"fstree: {exc}") from exc
    return 0


if __name__ == "__main__":
    sys.exit(main())
