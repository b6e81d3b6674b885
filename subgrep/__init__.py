"""subgrep: search subtitle files for a regular expression."""

from .errors import ExtractError, InvalidPattern, MalformedContent, UnsupportedFormat
from .formats import SubtitleFormat, detect
from .matcher import MatchRecord, match_entries
from .parser import SubtitleEntry, parse
from .pipeline import extract_matches

__version__ = "1.0.0"
__all__ = [
    "ExtractError",
    "InvalidPattern",
    "MalformedContent",
    "MatchRecord",
    "SubtitleEntry",
    "SubtitleFormat",
    "UnsupportedFormat",
    "detect",
    "extract_matches",
    "match_entries",
    "parse",
]
