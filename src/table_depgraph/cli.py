"""
Command-line interface for table-depgraph
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from table_depgraph import __version__
from table_depgraph.api import load_records
from table_depgraph.errors import DepGraphError
from table_depgraph.pipeline import full_layout
from table_depgraph.types import Direction

logger = logging.getLogger("table_depgraph.cli")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="table-depgraph",
        description="Lay out a table dependency graph from JSON relationship rows",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  table-depgraph deps.json                       # top-to-bottom layout to stdout
  table-depgraph deps.json --direction LR        # left-to-right layout
  table-depgraph deps.json --current db.events   # highlight one table
  cat deps.json | table-depgraph -o layout.json
        """,
    )
    parser.add_argument(
        "input",
        nargs="?",
        default="-",
        help="JSON file with dependency rows, or '-' for stdin (default: -)",
    )
    parser.add_argument(
        "--direction",
        default=Direction.TB.value,
        help="Layout direction, TB or LR (default: TB)",
    )
    parser.add_argument(
        "--current",
        metavar="DATABASE.TABLE",
        help="Table to highlight",
    )
    parser.add_argument(
        "-o",
        "--output",
        help="Write the layout JSON here instead of stdout",
    )
    parser.add_argument(
        "--indent",
        type=int,
        default=2,
        help="JSON indentation (default: 2)",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def split_current(value: str | None) -> tuple[str | None, str | None]:
    """Split ``database.table`` on the first dot; returns (table, database)."""
    if not value:
        return None, None
    database, sep, table = value.partition(".")
    if not sep or not database or not table:
        raise ValueError(f"expected DATABASE.TABLE, got {value!r}")
    return table, database


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point"""
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        direction = Direction.parse(args.direction)
        current_table, current_database = split_current(args.current)
    except ValueError as exc:
        parser.error(str(exc))

    try:
        text = sys.stdin.read() if args.input == "-" else Path(args.input).read_text(encoding="utf-8")
    except OSError as exc:
        parser.error(f"cannot read {args.input}: {exc}")

    try:
        records = load_records(json.loads(text))
    except json.JSONDecodeError as exc:
        parser.error(f"invalid JSON in {args.input}: {exc}")
    except DepGraphError as exc:
        parser.error(str(exc))

    result = full_layout(records, current_table, current_database, direction)
    if result.is_empty:
        logger.info("No tables found")
    else:
        logger.info(result.summary())

    output = json.dumps(result.to_dict(), indent=args.indent)
    if args.output:
        Path(args.output).write_text(output + "\n", encoding="utf-8")
    else:
        sys.stdout.write(output + "\n")
    return 0


if __name__ == "__main__":
    sys.exit(main())
