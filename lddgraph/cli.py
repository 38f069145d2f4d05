"""CLI entrypoint for lddgraph."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import NoReturn

from .config import ConfigError, LddGraphConfig, load_config
from .logging import configure_logging
from .models import PALETTE
from .orchestrator import DEFAULT_DOT_FILE, Orchestrator, RunSettings
from .tools import LddGraphError
from .walker import DEFAULT_MAX_DEPTH

_EPILOG = (
    "Nodes are rounded boxes filled with their group color and labelled with the "
    "number of exported functions. Edges are labelled with the number of imported "
    "symbols the dependency defines; edges inside one group are bold black, edges "
    "with no called functions are dashed."
)


class _ArgumentParser(argparse.ArgumentParser):
    """Argument parser that reports usage errors with exit status 1."""

    def error(self, message: str) -> NoReturn:
        self.print_usage(sys.stderr)
        self.exit(1, f"{self.prog}: error: {message}\n")


def _non_negative_int(value: str) -> int:
    if not value.isascii() or not value.isdigit():
        raise argparse.ArgumentTypeError(f"requires a numeric argument, got: {value}")
    return int(value)


def _build_parser() -> argparse.ArgumentParser:
    parser = _ArgumentParser(
        prog="lddgraph",
        description="Render the shared-library dependency tree of an ELF file as a Graphviz graph.",
        epilog=_EPILOG,
    )
    parser.add_argument("elf_file", help="Path to the executable ELF file or library.")
    parser.add_argument(
        "--depth",
        type=_non_negative_int,
        default=None,
        help=f"Maximum dependency depth (default: {DEFAULT_MAX_DEPTH}).",
    )
    parser.add_argument(
        "--group",
        dest="groups",
        action="append",
        default=[],
        metavar="PATH",
        help="Path substring defining a colored group (repeatable, e.g. /usr/lib/).",
    )
    parser.add_argument(
        "--output",
        type=Path,
        default=None,
        metavar="DOT_FILE",
        help=f"Output .dot file (default: {DEFAULT_DOT_FILE}).",
    )
    parser.add_argument(
        "--image",
        type=Path,
        default=None,
        metavar="IMAGE_FILE",
        help="Also render a PNG image at this path.",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Configuration file (default: .lddgraph.yml in the current directory, if present).",
    )
    parser.add_argument(
        "--log-file",
        type=Path,
        default=None,
        help="Append a timestamped copy of the log to this file.",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=False,
        help="Log every external command that is run.",
    )
    return parser


def build_settings(args: argparse.Namespace, config: LddGraphConfig) -> RunSettings:
    """Merge CLI flags over configuration values."""
    depth = args.depth if args.depth is not None else config.depth
    return RunSettings(
        elf_file=Path(args.elf_file),
        depth=DEFAULT_MAX_DEPTH if depth is None else depth,
        groups=list(args.groups) if args.groups else list(config.groups),
        output=args.output or config.output or DEFAULT_DOT_FILE,
        image=args.image or config.image,
        palette=tuple(config.palette) or PALETTE,
        search_dirs=config.search_dirs,
    )


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for lddgraph."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    try:
        configure_logging(verbose=bool(args.verbose), log_file=args.log_file)
    except OSError as exc:
        parser.exit(1, f"Error: cannot open log file: {exc}\n")

    try:
        config = load_config(args.config)
    except ConfigError as exc:
        parser.exit(1, f"Error: {exc}\n")

    settings = build_settings(args, config)
    try:
        Orchestrator().run(settings)
    except LddGraphError as exc:
        parser.exit(1, f"Error: {exc}\n")
    except OSError as exc:
        parser.exit(1, f"Error: {exc}\n")


if __name__ == "__main__":
    main(sys.argv[1:])
