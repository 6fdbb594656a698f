"""Command line interface: read MDX from a file or stdin, print HTML for Vale."""

import argparse
import sys
from pathlib import Path

from loguru import logger

from mdx2vast import __version__
from mdx2vast.config import get_settings
from mdx2vast.converter import to_vale_ast
from mdx2vast.exceptions import InputError, MdxSyntaxError
from mdx2vast.frameworks import FRAMEWORKS
from mdx2vast.logging_config import configure_logging


def read_input(path: str | None) -> str:
    """Read MDX from path, or from stdin when no path is given."""
    if path is None:
        text = sys.stdin.read()
        if not text.strip():
            raise InputError("No input provided.")
        return text

    file = Path(path)
    if not file.is_file():
        raise InputError("File does not exist or the path is incorrect.")
    try:
        return file.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise InputError(f"Error reading the file: {e}") from e


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="mdx2vast", description="Convert MDX to HTML for the Vale linter")
    parser.add_argument("file", nargs="?", help="MDX file to convert (default: read stdin)")
    parser.add_argument(
        "--framework",
        help=f"Framework whose prose components are unwrapped ({', '.join(p.id for p in FRAMEWORKS)}); "
        "overrides MDX2VAST_FRAMEWORK and import detection",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Log conversion decisions to stderr")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    settings = get_settings()
    configure_logging("DEBUG" if args.verbose else settings.log_level)

    try:
        text = read_input(args.file)
        html = to_vale_ast(text, framework=args.framework)
    except InputError as e:
        print(e, file=sys.stderr)
        return e.exit_code
    except MdxSyntaxError as e:
        logger.debug(f"Parse failed: {e.to_dict()}")
        print(f"Error: {e}", file=sys.stderr)
        return e.exit_code

    print(html)
    return 0


if __name__ == "__main__":
    sys.exit(main())
