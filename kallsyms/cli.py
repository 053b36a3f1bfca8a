"""Command-line front door for kallsyms.

Reads an ``nm -n -C`` listing, compiles it into the symbol-table assembly
module and writes that module. Any failure exits nonzero before output is
produced, so the build never links a corrupt table.
"""

from __future__ import annotations

import argparse
import logging
import sys

from .errors import KallsymsError
from .generator import generate_kallsyms
from .highlight import DEFAULT_STYLE, colorize_assembly
from .output import STDIO_PATH, read_listing, write_output

LOG_FORMAT = "kallsyms: %(levelname)s: %(message)s"


def _should_colorize(destination: str, no_color: bool) -> bool:
    """Highlight only when writing to an interactive terminal."""
    if no_color or destination != STDIO_PATH:
        return False
    isatty = getattr(sys.stdout, "isatty", None)
    return bool(isatty and isatty())


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="kallsyms",
        description="Compile an nm symbol listing into a kernel symbol-table assembly module.",
    )
    parser.add_argument(
        "input",
        nargs="?",
        default=STDIO_PATH,
        help="Symbol listing produced by 'nm -n'. Defaults to stdin.",
    )
    parser.add_argument(
        "-o",
        "--output",
        default=STDIO_PATH,
        help="Assembly output path. Defaults to stdout.",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log pipeline statistics to stderr.")
    parser.add_argument("--no-color", action="store_true", help="Disable highlighting on a terminal.")
    parser.add_argument("--style", default=DEFAULT_STYLE, help="Pygments style for terminal highlighting.")
    return parser


def main(argv: list[str] | None = None) -> None:
    """Parse CLI arguments and run one generation."""
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format=LOG_FORMAT,
        stream=sys.stderr,
    )

    try:
        text = generate_kallsyms(read_listing(args.input))
        if _should_colorize(args.output, args.no_color):
            text = colorize_assembly(text, args.style)
        write_output(args.output, text)
    except KallsymsError as exc:
        raise SystemExit(f"kallsyms: {exc}") from exc


if __name__ == "__main__":
    main()
