"""Command-line entry point for pypstree."""

import argparse
import logging
import sys

from pypstree.builder import build_forest
from pypstree.errors import CycleDetected, MalformedRecord, SourceUnavailable
from pypstree.renderer import STYLES, render
from pypstree.source import SOURCES, get_source

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_SOURCE_UNAVAILABLE = 1
EXIT_CYCLE_DETECTED = 2
EXIT_MALFORMED_RECORD = 3


def _positive_int(value: str) -> int:
    number = int(value)
    if number < 1:
        raise argparse.ArgumentTypeError(f"must be a positive integer, got {value}")
    return number


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        prog="pypstree",
        description="Show running processes as a tree.",
    )
    parser.add_argument(
        "--source",
        choices=sorted(SOURCES),
        default="psutil",
        help="Where to read the process table from (default: psutil)",
    )
    parser.add_argument(
        "--style",
        choices=STYLES,
        default="indent",
        help="Tree drawing style (default: indent)",
    )
    parser.add_argument(
        "--indent",
        type=_positive_int,
        default=2,
        help="Spaces per level for the indent style (default: 2)",
    )
    parser.add_argument(
        "--strict",
        action="store_true",
        help="Fail on malformed process records instead of skipping them",
    )
    parser.add_argument(
        "-i",
        "--interactive",
        action="store_true",
        help="Browse the tree in a terminal UI",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log debug information to stderr",
    )
    return parser.parse_args(argv)


def run(args: argparse.Namespace) -> int:
    """Read the process table, build the forest and print it."""
    source = get_source(args.source, strict=args.strict)
    try:
        records = source.collect()
        forest = build_forest(records)
    except SourceUnavailable as exc:
        logger.error("%s", exc)
        return EXIT_SOURCE_UNAVAILABLE
    except CycleDetected as exc:
        logger.error("%s", exc)
        return EXIT_CYCLE_DETECTED
    except MalformedRecord as exc:
        logger.error("%s", exc)
        return EXIT_MALFORMED_RECORD

    if args.interactive:
        from pypstree.app import PstreeApp

        PstreeApp(forest).run()
        return EXIT_OK

    for line in render(forest, style=args.style, indent=args.indent):
        print(line)
    return EXIT_OK


def main(argv: list[str] | None = None) -> None:
    """Entry point for the pypstree command."""
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(name)s: %(levelname)s: %(message)s",
        stream=sys.stderr,
    )
    sys.exit(run(args))


if __name__ == "__main__":
    main()
