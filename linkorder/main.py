"""Main CLI entry point for linkorder.

Provides commands: order, cycles
"""

import argparse
import logging
import sys
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

from linkorder.cli.cycles import cycles_command
from linkorder.cli.order import order_command

logger = logging.getLogger("linkorder.cli")


def setup_logging(verbose: bool = False, console: Optional[Console] = None) -> None:
    """Setup logging configuration with Rich integration.

    Args:
        verbose: Enable verbose logging.
        console: Rich Console instance for coordinated output (optional).
    """
    level = logging.DEBUG if verbose else logging.WARNING

    handler = RichHandler(
        console=console,
        show_time=True,
        show_path=False,
        markup=False,
        rich_tracebacks=True,
        tracebacks_show_locals=verbose,
        log_time_format="[%H:%M:%S]",
    )

    logging.basicConfig(
        level=level,
        format="[%(name)s] [%(levelname)s] %(message)s",
        handlers=[handler],
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="linkorder",
        description="Linkorder - static library link-order resolver",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    order_parser = subparsers.add_parser(
        "order",
        help="Resolve link plans for units of a graph definition",
    )
    order_parser.add_argument(
        "graph",
        help="Graph definition (.json/.toml file or inline JSON/TOML)",
    )
    order_parser.add_argument(
        "-u",
        "--unit",
        dest="units",
        action="append",
        help="Unit to resolve (repeatable). Defaults to every declared unit.",
    )
    order_parser.add_argument(
        "-o",
        "--output",
        help="Write plans as JSON to this file instead of printing a table",
    )
    order_parser.add_argument(
        "-c",
        "--config",
        help=(
            "Optional resolver configuration. Can be a path to a TOML/JSON "
            "file or an inline TOML/JSON string. When omitted, built-in "
            "defaults are used."
        ),
    )
    order_parser.add_argument(
        "--all",
        action="store_true",
        help="Also show the full static+shared closure of each unit",
    )

    cycles_parser = subparsers.add_parser(
        "cycles",
        help="Report static dependency cycles in a graph definition",
    )
    cycles_parser.add_argument(
        "graph",
        help="Graph definition (.json/.toml file or inline JSON/TOML)",
    )
    cycles_parser.add_argument(
        "-c",
        "--config",
        help="Optional resolver configuration (TOML/JSON file or inline string)",
    )
    cycles_parser.add_argument(
        "--limit",
        type=int,
        default=20,
        help="Maximum number of cycle groups to report (default: 20, <=0 for no limit)",
    )
    cycles_parser.add_argument(
        "--fail-on-cycle",
        action="store_true",
        help="Exit with non-zero status when static cycles are found",
    )
    return parser


def main(argv: Optional[list] = None) -> int:
    """Main CLI entry point.

    Returns:
        int: Exit code.
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    setup_logging(args.verbose)

    if args.command == "order":
        return order_command(args)
    elif args.command == "cycles":
        return cycles_command(args)
    else:
        parser.print_help()
        return 1


if __name__ == "__main__":
    sys.exit(main())
