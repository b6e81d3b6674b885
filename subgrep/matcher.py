"""Regular-expression matching over parsed cues."""

from dataclasses import dataclass
from typing import Iterable, Iterator, Pattern

from .parser import SubtitleEntry


@dataclass(frozen=True)
class MatchRecord:
    """The first match of the pattern inside one cue.

    ``start``/``end`` form a half-open span over ``text`` so that
    ``text[start:end]`` is exactly the matched substring.
    """

    text: str
    start: int
    end: int

    @property
    def before(self) -> str:
        return self.text[:self.start]

    @property
    def matched(self) -> str:
        return self.text[self.start:self.end]

    @property
    def after(self) -> str:
        return self.text[self.end:]


def match_entries(
    pattern: Pattern[str], entries: Iterable[SubtitleEntry]
) -> Iterator[MatchRecord]:
    """Yield one :class:`MatchRecord` per cue whose text matches *pattern*.

    Cues without text are skipped, even for patterns that match the empty
    string.  Only the first match inside a cue is reported.
    """
    for entry in entries:
        if not entry.text:
            continue
        found = pattern.search(entry.text)
        if found is not None:
            yield MatchRecord(entry.text, found.start(), found.end())
