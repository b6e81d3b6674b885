"""Parsing of subtitle files into ordered cue entries.

Text formats are read with :mod:`pysubs2`, which owns timestamp parsing and
markup removal.  pysubs2 is lenient and quietly steps over lines it cannot
place, so every text format is first checked against its block grammar here:
a single malformed cue makes the whole file fail with
:class:`~subgrep.errors.MalformedContent`.  Nothing is silently dropped.

VobSub ``.idx`` files are not supported by pysubs2 and keep a small reader of
their own.
"""

import html
import logging
import re
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Tuple

import pysubs2

from .errors import MalformedContent
from .formats import SubtitleFormat

# Frame rate assumed for MicroDVD files that do not declare one.
DEFAULT_FPS: float = 30.0


@dataclass(frozen=True)
class SubtitleEntry:
    """One cue.  ``start`` is only used for ordering, never for output."""

    index: int
    start: Optional[float]
    text: Optional[str]


# ------------------------------------------------------------------
# Shared helpers
# ------------------------------------------------------------------

_BLOCK_SEPARATOR = re.compile(r"\n[ \t]*\n\s*")


def _normalize(content: str) -> str:
    return content.lstrip("\ufeff").replace("\r\n", "\n").replace("\r", "\n")


def _blocks(content: str) -> List[str]:
    content = content.strip()
    if not content:
        return []
    return _BLOCK_SEPARATOR.split(content)


def _load(content: str, format_: str, **kwargs) -> List[pysubs2.SSAEvent]:
    """Read *content* with pysubs2 and return its dialogue events in file order."""
    try:
        subs = pysubs2.SSAFile.from_string(content, format_=format_, **kwargs)
    except Exception as exc:
        raise MalformedContent(f"cannot read {format_} content: {exc}") from exc
    return [event for event in subs.events if not event.is_comment]


def _entries(
    events: List[pysubs2.SSAEvent],
    expected: int,
    clean: Callable[[str], str] = str,
) -> List[SubtitleEntry]:
    if len(events) != expected:
        raise MalformedContent(
            f"expected {expected} cue(s), only {len(events)} could be read"
        )
    entries = []
    for index, event in enumerate(events):
        text = clean(event.plaintext)
        entries.append(
            SubtitleEntry(index, event.start / 1000, text if text.strip() else None)
        )
    return entries


# ------------------------------------------------------------------
# SubRip (.srt)
# ------------------------------------------------------------------

_SRT_TIMING = re.compile(
    r"^\s*\d{1,2}:\d{2}:\d{2}[,.]\d{1,3}\s*-->\s*\d{1,2}:\d{2}:\d{2}[,.]\d{1,3}"
)


def _parse_subrip(content: str, fps: float) -> List[SubtitleEntry]:
    cues: List[Tuple[str, List[str]]] = []
    for block in _blocks(content):
        lines = block.split("\n")
        pos = 1 if lines[0].strip().isdigit() else 0
        label = lines[0].strip() if pos else str(len(cues) + 1)

        if pos >= len(lines) or not _SRT_TIMING.match(lines[pos]):
            raise MalformedContent(f"cue {label}: missing or invalid timing line")
        if any(_SRT_TIMING.match(line) for line in lines[pos + 1:]):
            raise MalformedContent(f"cue {label}: next cue is not separated by a blank line")
        cues.append((lines[pos].strip(), lines[pos + 1:]))

    document = "".join(
        f"{number}\n{timing}\n" + "".join(line + "\n" for line in text) + "\n"
        for number, (timing, text) in enumerate(cues, start=1)
    )
    return _entries(_load(document, "srt", keep_ssa_tags=True), len(cues))


# ------------------------------------------------------------------
# WebVTT (.vtt)
# ------------------------------------------------------------------

_VTT_HEADER = re.compile(r"\AWEBVTT(?:[ \t].*)?$", re.MULTILINE)
_VTT_TIMING = re.compile(
    r"^(?:\d+:)?\d{2}:\d{2}\.\d{3}[ \t]+-->[ \t]+(?:\d+:)?\d{2}:\d{2}\.\d{3}(?:[ \t]|$)"
)
_VTT_SKIPPED_BLOCKS = ("NOTE", "STYLE", "REGION")


def _is_skipped_vtt_block(first_line: str) -> bool:
    for keyword in _VTT_SKIPPED_BLOCKS:
        if first_line == keyword or first_line.startswith((keyword + " ", keyword + "\t")):
            return True
    return False


def _parse_webvtt(content: str, fps: float) -> List[SubtitleEntry]:
    blocks = _blocks(content)
    if not blocks or not _VTT_HEADER.match(blocks[0]):
        raise MalformedContent("missing WEBVTT header")
    if "-->" in blocks[0]:
        raise MalformedContent("cue 1: no blank line after the WEBVTT header")

    # Identifiers and NOTE/STYLE/REGION blocks are left out of the document
    # handed to pysubs2, which would otherwise read them as cue text.
    cues: List[Tuple[str, List[str]]] = []
    for block in blocks[1:]:
        lines = block.split("\n")
        if _is_skipped_vtt_block(lines[0]):
            continue

        label = len(cues) + 1
        pos = 0 if "-->" in lines[0] else 1
        if pos >= len(lines) or not _VTT_TIMING.match(lines[pos]):
            raise MalformedContent(f"cue {label}: missing or invalid timing line")
        if any("-->" in line for line in lines[pos + 1:]):
            raise MalformedContent(f"cue {label}: next cue is not separated by a blank line")
        cues.append((lines[pos].strip(), lines[pos + 1:]))

    document = "WEBVTT\n\n" + "".join(
        timing + "\n" + "".join(line + "\n" for line in text) + "\n"
        for timing, text in cues
    )
    return _entries(
        _load(document, "vtt", keep_ssa_tags=True), len(cues), html.unescape
    )


# ------------------------------------------------------------------
# SubStation Alpha / Advanced SubStation Alpha (.ssa, .ass)
# ------------------------------------------------------------------

def _parse_substation_alpha(content: str, fps: float) -> List[SubtitleEntry]:
    section = ""
    seen_events = False
    dialogues = 0
    for line in content.split("\n"):
        stripped = line.strip()
        if stripped.startswith("[") and stripped.endswith("]"):
            section = stripped.lower()
            seen_events = seen_events or section == "[events]"
        elif section == "[events]" and stripped.startswith("Dialogue:"):
            dialogues += 1

    if not seen_events:
        raise MalformedContent("missing [Events] section")
    return _entries(_load(content, "ass"), dialogues)


# ------------------------------------------------------------------
# MicroDVD (.sub, .txt)
# ------------------------------------------------------------------

_MICRODVD_LINE = re.compile(r"^\{\d+\}\{\d+\}.+$")
_MICRODVD_RATE = re.compile(r"^\{[01]\}\{[01]\}\s*(\d+(?:\.\d+)?)\s*$")


def _parse_microdvd(content: str, fps: float) -> List[SubtitleEntry]:
    lines: List[str] = []
    for lineno, line in enumerate(content.split("\n"), start=1):
        stripped = line.strip()
        if not stripped:
            continue
        if not _MICRODVD_LINE.match(stripped):
            raise MalformedContent(f"line {lineno}: malformed frame marker")
        lines.append(stripped)

    # {1}{1}23.976 declares the frame rate instead of a cue.
    declared = _MICRODVD_RATE.match(lines[0]) if lines else None
    if declared and float(declared.group(1)) > 0:
        fps = float(declared.group(1))
        lines = lines[1:]

    document = "".join(line + "\n" for line in lines)
    return _entries(_load(document, "microdvd", fps=fps), len(lines))


# ------------------------------------------------------------------
# VobSub index (.idx)
# ------------------------------------------------------------------

_IDX_TIMESTAMP = re.compile(
    r"^timestamp:\s*(\d+):(\d{2}):(\d{2}):(\d{3})\s*,\s*filepos:\s*[0-9a-fA-F]+\s*$"
)


def _parse_vobsub_idx(content: str, fps: float) -> List[SubtitleEntry]:
    # Picture-based: cues carry timing only, their text lives in bitmaps.
    entries: List[SubtitleEntry] = []
    for lineno, line in enumerate(content.split("\n"), start=1):
        stripped = line.strip()
        if not stripped.startswith("timestamp:"):
            continue
        stamp = _IDX_TIMESTAMP.match(stripped)
        if stamp is None:
            raise MalformedContent(f"line {lineno}: invalid timestamp entry")
        hours, minutes, seconds, millis = map(int, stamp.groups())
        start = hours * 3600 + minutes * 60 + seconds + millis / 1000
        entries.append(SubtitleEntry(len(entries), start, None))
    return entries


_PARSERS: Dict[SubtitleFormat, Callable[[str, float], List[SubtitleEntry]]] = {
    SubtitleFormat.SUBRIP: _parse_subrip,
    SubtitleFormat.WEBVTT: _parse_webvtt,
    SubtitleFormat.SUBSTATION_ALPHA: _parse_substation_alpha,
    SubtitleFormat.MICRODVD: _parse_microdvd,
    SubtitleFormat.VOBSUB_IDX: _parse_vobsub_idx,
}


def parse(fmt: SubtitleFormat, content: str, fps: float = DEFAULT_FPS) -> List[SubtitleEntry]:
    """Parse *content* as *fmt* and return its cues in file order.

    Args:
        fmt:     Format previously returned by :func:`~subgrep.formats.detect`.
        content: Decoded file text.
        fps:     Frame rate for frame-based formats without a declared rate.

    Raises:
        MalformedContent: when any cue does not follow the format's grammar.
    """
    entries = _PARSERS[fmt](_normalize(content), fps)
    logging.debug(f"  Parsed {len(entries)} cue(s) as {fmt.name}")
    return entries
