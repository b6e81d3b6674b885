"""Directory walking and match reporting."""

import csv
import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Dict, List, Optional, Pattern, Set

from rich.console import Console
from rich.text import Text

from .errors import ExtractError, UnsupportedFormat
from .matcher import MatchRecord
from .parser import DEFAULT_FPS
from .pipeline import extract_matches

HEADER_STYLE = "bold blue"
MATCH_STYLE = "bold green"
ERROR_STYLE = "red"


def make_console(color: str = "auto", stderr: bool = False) -> Console:
    """Return a rich console honouring the ``auto``/``always``/``never`` policy."""
    if color == "always":
        return Console(stderr=stderr, force_terminal=True, highlight=False)
    if color == "never":
        return Console(stderr=stderr, no_color=True, color_system=None, highlight=False)
    return Console(stderr=stderr, highlight=False)


class SubtitleSearcher:
    """Searches subtitle files under a directory for a regular expression."""

    def __init__(
        self,
        pattern: Pattern[str],
        recursive: bool = False,
        encoding: str = "utf-8-sig",
        fps: float = DEFAULT_FPS,
        extensions: Optional[List[str]] = None,
        report_format: Optional[str] = None,
        console: Optional[Console] = None,
        err_console: Optional[Console] = None,
    ) -> None:
        self.pattern = pattern
        self.recursive = recursive
        self.encoding = encoding
        self.fps = fps
        self.report_format = report_format
        self.console = console or make_console()
        self.err_console = err_console or make_console(stderr=True)

        # Optional whitelist of extensions, stored lower-case without dots.
        self.extensions: Optional[Set[str]] = (
            {ext.lower().lstrip(".") for ext in extensions} if extensions else None
        )

        self.stats: Dict[str, int] = {
            "searched": 0,
            "matched_files": 0,
            "matches": 0,
            "skipped": 0,
            "errors": 0,
        }

        self.start_time: Optional[datetime] = None
        self.end_time: Optional[datetime] = None

        self.match_log: List[Dict] = []

    # ------------------------------------------------------------------
    # Output
    # ------------------------------------------------------------------

    def print_header(self, path: Path) -> None:
        self.console.print(Text(path.name, style=HEADER_STYLE), soft_wrap=True)

    def print_match(self, record: MatchRecord) -> None:
        line = Text(record.text)
        line.stylize(MATCH_STYLE, record.start, record.end)
        self.console.print(line, soft_wrap=True)

    def report_error(self, path: Path, error: Exception) -> None:
        message = Text(str(error), style=ERROR_STYLE)
        message.append(f": {path}")
        self.err_console.print(message, soft_wrap=True)

    # ------------------------------------------------------------------
    # Single-file processing
    # ------------------------------------------------------------------

    def _wants(self, path: Path) -> bool:
        if self.extensions is None:
            return True
        return path.suffix.lower().lstrip(".") in self.extensions

    def process_file(self, path: Path) -> int:
        """Search one file, print its matches and return how many were found.

        Per-file failures are reported on the error console and counted;
        they never propagate.
        """
        try:
            content = path.read_bytes().decode(self.encoding)
            records = extract_matches(path.suffix, content, self.pattern, self.fps)
            count = 0
            for record in records:
                if count == 0:
                    self.print_header(path)
                self.print_match(record)
                if self.report_format:
                    self.match_log.append({
                        "file": str(path),
                        "text": record.text,
                        "start": record.start,
                        "end": record.end,
                        "matched": record.matched,
                    })
                count += 1
        except UnsupportedFormat as exc:
            logging.debug(f"Skipped (unsupported format): {path}")
            self.report_error(path, exc)
            self.stats["skipped"] += 1
            return 0
        except (ExtractError, OSError, UnicodeDecodeError) as exc:
            self.report_error(path, exc)
            self.stats["errors"] += 1
            return 0

        self.stats["searched"] += 1
        if count:
            self.stats["matched_files"] += 1
            self.stats["matches"] += count
        return count

    # ------------------------------------------------------------------
    # Directory processing
    # ------------------------------------------------------------------

    def _walk(self, directory: Path) -> None:
        try:
            children = sorted(directory.iterdir())
        except OSError as exc:
            logging.error(f"Cannot read directory {directory}: {exc}")
            self.stats["errors"] += 1
            return

        for child in children:
            if child.is_dir():
                if child.is_symlink():
                    logging.debug(f"Not following directory symlink: {child}")
                elif self.recursive:
                    self._walk(child)
            elif child.is_file() and self._wants(child):
                self.process_file(child)

    def process_directory(self, directory: Path) -> None:
        """Search every file in *directory*, descending only when recursive."""
        logging.debug(
            f"Searching {directory} for /{self.pattern.pattern}/"
            f"{' (recursive)' if self.recursive else ''}"
        )
        self.start_time = datetime.now()
        self._walk(directory)
        self.end_time = datetime.now()
        self._save_reports()

    # ------------------------------------------------------------------
    # Reports & summary
    # ------------------------------------------------------------------

    def _save_reports(self) -> Optional[Path]:
        """Write a JSON or CSV match report if requested."""
        if not self.report_format:
            return None
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")

        if self.report_format == "json":
            report_file = Path(f"subgrep_report_{timestamp}.json")
            with open(report_file, "w", encoding="utf-8") as fh:
                json.dump(
                    {
                        "timestamp": timestamp,
                        "pattern": self.pattern.pattern,
                        "stats": self.stats,
                        "matches": self.match_log,
                    },
                    fh, indent=2, ensure_ascii=False,
                )
        elif self.report_format == "csv":
            report_file = Path(f"subgrep_report_{timestamp}.csv")
            with open(report_file, "w", newline="", encoding="utf-8") as fh:
                writer = csv.writer(fh)
                writer.writerow(["File", "Start", "End", "Matched", "Text"])
                for entry in self.match_log:
                    writer.writerow([
                        entry["file"],
                        entry["start"],
                        entry["end"],
                        entry["matched"],
                        entry["text"],
                    ])
        else:
            return None

        logging.info(f"Report saved to: {report_file}")
        return report_file

    def print_summary(self) -> None:
        """Log a human-readable search summary."""
        logging.info("=" * 50)
        logging.info("SUMMARY")
        logging.info("=" * 50)
        logging.info(f"Files searched:       {self.stats['searched']}")
        logging.info(f"Files with matches:   {self.stats['matched_files']}")
        logging.info(f"Matches:              {self.stats['matches']}")
        logging.info(f"Files skipped:        {self.stats['skipped']}")
        logging.info(f"Errors encountered:   {self.stats['errors']}")

        if self.start_time and self.end_time:
            duration = self.end_time - self.start_time
            logging.info(f"Duration:             {duration.total_seconds():.2f}s")
