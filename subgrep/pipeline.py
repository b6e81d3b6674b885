"""Single entry point: detect → parse → match for one file."""

import re
from typing import Iterator, Optional, Pattern, Union

from .errors import InvalidPattern, UnsupportedFormat
from .formats import detect
from .matcher import MatchRecord, match_entries
from .parser import DEFAULT_FPS, parse


def compile_pattern(pattern: str, ignore_case: bool = False) -> Pattern[str]:
    """Compile *pattern*, raising :class:`InvalidPattern` on failure."""
    flags = re.IGNORECASE if ignore_case else 0
    try:
        return re.compile(pattern, flags)
    except re.error as exc:
        raise InvalidPattern(f"invalid pattern {pattern!r}: {exc}") from exc


def extract_matches(
    extension_hint: Optional[str],
    content: str,
    pattern: Union[str, Pattern[str]],
    fps: float = DEFAULT_FPS,
) -> Iterator[MatchRecord]:
    """Return the lazy sequence of matches in one subtitle file.

    Detection and parsing happen immediately so that format and parse errors
    are raised by this call; matching only runs as the result is consumed.

    Raises:
        InvalidPattern:    *pattern* is a string that does not compile.
        UnsupportedFormat: no subtitle format could be determined.
        MalformedContent:  the content does not parse as its format.
    """
    if isinstance(pattern, str):
        pattern = compile_pattern(pattern)

    if not content.lstrip("\ufeff").strip():
        return iter(())

    fmt = detect(extension_hint, content)
    if fmt is None:
        raise UnsupportedFormat()

    entries = parse(fmt, content, fps)
    return match_entries(pattern, entries)
