"""Command-line interface for subgrep."""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from . import __version__
from .config import load_config
from .errors import InvalidPattern
from .parser import DEFAULT_FPS
from .pipeline import compile_pattern
from .searcher import SubtitleSearcher, make_console
from .utils import positive_float


# ------------------------------------------------------------------
# Logging setup (single, authoritative call)
# ------------------------------------------------------------------

def setup_logging(verbosity: int = 0, log_file: Optional[Path] = None) -> None:
    """Route search diagnostics to stderr, keeping stdout for matches only.

    ``-v`` adds per-file detection and parse details, ``-q`` leaves only
    warnings (the summary is logged at INFO and disappears).  With
    ``--log-file`` every record is also written, timestamped, to that file.
    pysubs2 logs each line it reads at DEBUG, so its logger is held at
    WARNING whatever the verbosity.
    """
    level = {-1: logging.WARNING, 0: logging.INFO, 1: logging.DEBUG}.get(
        verbosity, logging.INFO
    )

    root = logging.getLogger()
    root.setLevel(level)
    root.handlers.clear()
    logging.getLogger("pysubs2").setLevel(logging.WARNING)

    console = logging.StreamHandler(sys.stderr)
    console.setFormatter(logging.Formatter("%(message)s"))
    root.addHandler(console)

    if log_file:
        record = logging.FileHandler(log_file, encoding="utf-8")
        record.setFormatter(logging.Formatter("%(asctime)s %(levelname)-7s %(message)s"))
        root.addHandler(record)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="subgrep",
        description="Search subtitle files (SRT, WebVTT, SSA/ASS, MicroDVD, VobSub idx) "
                    "for a regular expression",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s 'final approach'
  %(prog)s -r -d /path/to/movies 'Coruscant'
  %(prog)s -ri 'may the force' --extensions srt ass
  %(prog)s -r 'senator' --report-format json

Config file: create ~/.subgrep.yaml with default settings.
        """,
    )

    parser.add_argument("pattern", metavar="PATTERN",
                        help="Regular expression to search for")
    parser.add_argument("-d", "--directory", type=Path, metavar="DIR",
                        help="Directory to search for subtitles (default: current directory)")
    parser.add_argument("-r", "--recursive", action="store_true",
                        help="Search subdirectories too")

    # ---- matching ----
    parser.add_argument("-i", "--ignore-case", action="store_true",
                        help="Match case-insensitively")
    parser.add_argument("-e", "--extensions", nargs="+", metavar="EXT",
                        help="Only search files with these extensions (e.g. srt ass)")
    parser.add_argument("--encoding",
                        help="Text encoding of subtitle files (default: utf-8-sig)")
    parser.add_argument("--fps", type=positive_float,
                        help=f"Frame rate for MicroDVD files without one (default: {DEFAULT_FPS:g})")

    # ---- output / reporting ----
    parser.add_argument("--color", choices=["auto", "always", "never"],
                        help="Highlight matches with color (default: auto)")
    parser.add_argument("--report-format", choices=["json", "csv"],
                        help="Write a match report in the given format")
    parser.add_argument("--log-file", type=Path,
                        help="Save log output to a file (in addition to stderr)")
    parser.add_argument("--version", action="version",
                        version=f"%(prog)s {__version__}")

    # ---- verbosity ----
    verbosity_group = parser.add_mutually_exclusive_group()
    verbosity_group.add_argument("-v", "--verbose", action="store_true",
                                 help="Enable debug-level output")
    verbosity_group.add_argument("-q", "--quiet", action="store_true",
                                 help="Suppress informational messages (warnings and errors only)")

    return parser


# ------------------------------------------------------------------
# Entry point
# ------------------------------------------------------------------

def main(argv: Optional[List[str]] = None) -> None:
    """Parse arguments, compile the pattern and search the directory."""
    parser = build_parser()
    args = parser.parse_args(argv)

    verbosity = 1 if args.verbose else (-1 if args.quiet else 0)
    setup_logging(verbosity=verbosity, log_file=args.log_file)

    # ------------------------------------------------------------------
    # Load and merge config
    # ------------------------------------------------------------------
    config = load_config()

    recursive = args.recursive or config.get("recursive", False)
    ignore_case = args.ignore_case or config.get("ignore_case", False)
    color = args.color or config.get("color", "auto")
    encoding = args.encoding or config.get("encoding", "utf-8-sig")
    fps = args.fps or float(config.get("fps", DEFAULT_FPS))
    extensions = args.extensions or config.get("extensions")
    report_format = args.report_format or config.get("report_format")

    try:
        "".encode(encoding)
    except LookupError:
        print(f"Error: unknown encoding: {encoding}", file=sys.stderr)
        sys.exit(1)

    # ------------------------------------------------------------------
    # The pattern is compiled once; nothing is searched without it.
    # ------------------------------------------------------------------
    try:
        pattern = compile_pattern(args.pattern, ignore_case=ignore_case)
    except InvalidPattern as exc:
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(1)

    directory = args.directory or Path.cwd()
    if not directory.exists():
        print(f"Error: directory does not exist: {directory}", file=sys.stderr)
        sys.exit(1)
    if not directory.is_dir():
        print(f"Error: not a directory: {directory}", file=sys.stderr)
        sys.exit(1)

    searcher = SubtitleSearcher(
        pattern,
        recursive=recursive,
        encoding=encoding,
        fps=fps,
        extensions=extensions,
        report_format=report_format,
        console=make_console(color),
        err_console=make_console(color, stderr=True),
    )

    searcher.process_directory(directory)
    searcher.print_summary()
