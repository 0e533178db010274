"""CLI entry point for bestls — I/O boundary only."""

from __future__ import annotations

import argparse
import logging
import shutil
import sys
from dataclasses import replace
from pathlib import Path

from bestls import BestlsError, __version__
from bestls.listing import ListRequest, ListResult, list_entries
from bestls.sorter import SortKey

logger = logging.getLogger(__name__)

_LOG_FORMAT = "bestls: %(levelname)s: %(message)s"


def build_parser() -> argparse.ArgumentParser:
    """Build and return the CLI argument parser.

    Returns:
        argparse.ArgumentParser: Configured parser for the ``bestls`` command.
    """
    parser = argparse.ArgumentParser(
        prog="bestls",
        description="A faster, prettier ls: colored tables, JSON output and filters",
        epilog=(
            "examples:\n"
            "  bestls -p ./src\n"
            "  bestls --json --sort size\n"
            "  bestls --tree --depth 2 --filter-ext py,md\n"
            "  bestls theme init"
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "-p",
        "--path",
        default=".",
        help="Directory path to list (default: current directory)",
    )
    parser.add_argument(
        "-a",
        "--all",
        action="store_true",
        dest="show_hidden",
        help="Include hidden files (starting with .)",
    )
    parser.add_argument(
        "-s",
        "--sort",
        choices=[key.value for key in SortKey],
        default=SortKey.NAME.value,
        dest="sort_by",
        help="Sort by name, size or modification date (default: name)",
    )
    parser.add_argument(
        "--order",
        choices=["asc", "desc"],
        default="asc",
        help="Sort direction: asc (default) or desc",
    )

    # output
    parser.add_argument(
        "--format",
        choices=["table", "json", "json-pretty"],
        default="table",
        dest="output_format",
        help="Output format (legacy --json/--json-pretty flags override this)",
    )
    parser.add_argument(
        "-j",
        "--json",
        action="store_true",
        help="Output compact JSON (deprecated, use --format json)",
    )
    parser.add_argument(
        "--json-pretty",
        action="store_true",
        dest="json_pretty",
        help="Output pretty-printed JSON (deprecated, use --format json-pretty)",
    )
    parser.add_argument(
        "--compact",
        action="store_true",
        help="Output names in a single column",
    )
    parser.add_argument(
        "--columns",
        default=None,
        help="Comma-separated table columns: name,type,size,date,permissions,owner,group",
    )
    parser.add_argument(
        "--no-color",
        action="store_true",
        dest="no_color",
        help="Disable colored output",
    )
    parser.add_argument(
        "--out",
        default=None,
        dest="output_file",
        help="Write output to a file instead of stdout",
    )

    # traversal
    parser.add_argument(
        "--tree",
        action="store_true",
        help="List subdirectories recursively",
    )
    parser.add_argument(
        "--depth",
        type=int,
        default=None,
        help="Maximum depth for --tree (0 lists only the top level)",
    )
    parser.add_argument(
        "--gitignore",
        action="store_true",
        help="Hide entries matched by the .gitignore in the listed directory",
    )
    parser.add_argument(
        "--workers",
        type=int,
        default=None,
        help="Threads used to read metadata (default: CPU count)",
    )

    # filters
    parser.add_argument(
        "--filter-ext",
        default=None,
        dest="filter_ext",
        help="Only show files with these extensions, e.g. rs,txt,md",
    )
    parser.add_argument(
        "--filter-name",
        default=None,
        dest="filter_name",
        help="Only show files whose name matches a '*' pattern, e.g. '*.txt'",
    )
    parser.add_argument(
        "--min-size",
        default=None,
        dest="min_size",
        help="Only show files of at least this size, e.g. 100B, 1KB, 1.5MB",
    )
    parser.add_argument(
        "--max-size",
        default=None,
        dest="max_size",
        help="Only show files of at most this size",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log diagnostics to stderr",
    )

    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")
    theme_parser = subparsers.add_parser("theme", help="Manage the color theme file")
    theme_sub = theme_parser.add_subparsers(dest="theme_command", metavar="ACTION")
    theme_sub.required = True
    init_parser = theme_sub.add_parser("init", help="Write a sample theme file")
    init_parser.add_argument(
        "--show",
        action="store_true",
        help="Print the file path after creating it",
    )
    theme_sub.add_parser("path", help="Print the theme file path")
    theme_sub.add_parser("reset", help="Delete the theme file to restore defaults")
    return parser


def run_bestls(argv: list[str] | None = None) -> str:
    """Run bestls with provided CLI args and return formatted output.

    Apart from ``theme init``/``theme reset``, this function has no side
    effects and is the primary test target for CLI behavior.

    Args:
        argv: Command-line argument list without program name. If ``None``,
            uses process arguments via ``argparse`` defaults.

    Returns:
        str: Final rendered output.

    Raises:
        BestlsError: On any user-facing validation or I/O error.
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    return _run_with_args(args)


def _effective_format(args: argparse.Namespace) -> str:
    """Resolve the output format; legacy flags override ``--format``."""
    if args.json_pretty:
        return "json-pretty"
    if args.json:
        return "json"
    return args.output_format


def _validate_option_combinations(args: argparse.Namespace) -> None:
    """Validate incompatible CLI option combinations.

    Args:
        args: Parsed CLI namespace.

    Raises:
        BestlsError: If incompatible options are combined.
    """
    if args.depth is not None and not args.tree:
        raise BestlsError("--depth requires --tree")
    if args.depth is not None and args.depth < 0:
        raise BestlsError("Invalid depth, must be 0 or greater.")
    if args.workers is not None and args.workers < 1:
        raise BestlsError("--workers must be a positive integer")
    if args.compact and args.columns is not None:
        raise BestlsError("--compact is incompatible with --columns")
    if _effective_format(args) != "table":
        if args.compact:
            raise BestlsError("--compact is incompatible with JSON output")
        if args.columns is not None:
            raise BestlsError("--columns is incompatible with JSON output")
        if args.no_color:
            raise BestlsError("--no-color is incompatible with JSON output")


def _build_request(args: argparse.Namespace) -> ListRequest:
    return ListRequest(
        root=Path(args.path),
        recursive=args.tree,
        max_depth=args.depth,
        extensions=args.filter_ext,
        name_glob=args.filter_name,
        min_size=args.min_size,
        max_size=args.max_size,
        show_hidden=args.show_hidden,
        sort_key=SortKey.parse(args.sort_by),
        descending=args.order == "desc",
        gitignore=args.gitignore,
        workers=args.workers,
    )


def _format_output(
    args: argparse.Namespace, result: ListResult, root: Path, width: int | None
) -> str:
    """Render listing entries using the selected output options.

    Args:
        args: Parsed CLI namespace.
        result: Sorted listing.
        root: Resolved listing root.
        width: Console width for table layout, ``None`` for the default.

    Returns:
        str: Rendered output.

    Raises:
        BestlsError: If ``--columns`` names an unknown column.
    """
    output_format = _effective_format(args)
    if output_format != "table":
        from bestls.formatter.json_ import format_json

        return format_json(result.entries, pretty=output_format == "json-pretty")

    if args.compact:
        from bestls.formatter.compact import format_compact

        return format_compact(result.entries, root_path=root)

    from bestls.formatter.columns import parse_columns
    from bestls.formatter.table import TableOptions, format_table
    from bestls.theme import load_theme

    try:
        columns = parse_columns(args.columns)
    except ValueError as exc:
        raise BestlsError(str(exc)) from exc

    table_opts = TableOptions(
        columns=columns,
        theme=load_theme(),
        color=not args.no_color and not args.output_file,
        root_path=root,
    )
    if width is not None:
        table_opts = replace(table_opts, width=width)
    return format_table(result.entries, table_opts)


def _run_theme_command(args: argparse.Namespace) -> str:
    """Handle ``bestls theme ...``.

    Raises:
        BestlsError: If ``init`` would overwrite an existing file or the file
            cannot be written.
    """
    from bestls.theme import config_path, init_config, reset_config

    path = config_path()
    if args.theme_command == "path":
        return str(path)
    if args.theme_command == "reset":
        if reset_config(path):
            return f"Removed {path}; using the default theme"
        return "No theme file found; already using the default theme"

    try:
        created = init_config(path)
    except FileExistsError as exc:
        raise BestlsError(f"theme file already exists: {path}") from exc
    except OSError as exc:
        raise BestlsError(f"cannot write theme file '{path}': {exc}") from exc
    return f"Created {created}" if args.show else "Created theme file"


def _run_with_args(args: argparse.Namespace, width: int | None = None) -> str:
    """Run the listing/format pipeline for parsed arguments.

    Args:
        args: Parsed CLI namespace.
        width: Console width for table layout.

    Returns:
        str: Rendered output.

    Raises:
        BestlsError: On any user-facing validation or I/O error.
    """
    if args.command == "theme":
        return _run_theme_command(args)

    _validate_option_combinations(args)
    request = _build_request(args)
    result = list_entries(request)
    return _format_output(args, result, Path(args.path).resolve(), width)


def main() -> None:
    """Run the CLI entry point with process arguments.

    Parses args exactly once and writes output to stdout or ``--out`` file.
    Traversal warnings go to stderr through logging. Exits with code 1 on
    user-facing errors.
    """
    parser = build_parser()
    args = parser.parse_args()  # single parse

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format=_LOG_FORMAT,
        stream=sys.stderr,
    )

    width = None if args.output_file else shutil.get_terminal_size((200, 24)).columns
    try:
        output = _run_with_args(args, width)
    except BestlsError as exc:
        sys.stderr.write(f"bestls: {exc}\n")
        sys.exit(1)

    if args.output_file:
        try:
            Path(args.output_file).write_text(output + "\n", encoding="utf-8", newline="")
        except OSError as exc:
            sys.stderr.write(f"bestls: cannot write to '{args.output_file}': {exc}\n")
            sys.exit(1)
        logger.debug("Wrote output to %s", args.output_file)
    else:
        sys.stdout.write(output + "\n")
