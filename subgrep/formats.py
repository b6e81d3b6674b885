"""Subtitle format detection by extension and content sniffing."""

import logging
from enum import Enum
from typing import Dict, Optional, Union

from pysubs2.exceptions import FormatAutodetectionError
from pysubs2.formats import autodetect_format


class SubtitleFormat(Enum):
    """Subtitle container syntaxes understood by the parser."""

    SUBRIP = "srt"
    WEBVTT = "vtt"
    SUBSTATION_ALPHA = "ass"
    MICRODVD = "sub"
    VOBSUB_IDX = "idx"


# Extension → format.  ``sub`` and ``txt`` are deliberately absent: both are
# shared by several formats (MicroDVD text, binary VobSub, plain notes) and
# always go through sniffing.
EXTENSION_FORMATS: Dict[str, SubtitleFormat] = {
    "srt": SubtitleFormat.SUBRIP,
    "vtt": SubtitleFormat.WEBVTT,
    "ass": SubtitleFormat.SUBSTATION_ALPHA,
    "ssa": SubtitleFormat.SUBSTATION_ALPHA,
    "idx": SubtitleFormat.VOBSUB_IDX,
}

# Only this many leading characters are inspected when sniffing.
SNIFF_LIMIT: int = 4096

_MPEG_PACK_HEADER = b"\x00\x00\x01\xba"

# pysubs2 format identifiers that map onto a supported format.  Anything else
# it recognises (MPL2, TMP, JSON...) is not searched.
_PYSUBS2_FORMATS: Dict[str, SubtitleFormat] = {
    "srt": SubtitleFormat.SUBRIP,
    "vtt": SubtitleFormat.WEBVTT,
    "ass": SubtitleFormat.SUBSTATION_ALPHA,
    "ssa": SubtitleFormat.SUBSTATION_ALPHA,
    "microdvd": SubtitleFormat.MICRODVD,
}


def _normalize_extension(extension: Optional[str]) -> str:
    if not extension:
        return ""
    return extension.lower().lstrip(".")


def sniff(content: Union[bytes, str]) -> Optional[SubtitleFormat]:
    """Guess the format from the first few kilobytes of *content*."""
    if isinstance(content, bytes):
        if content.startswith(_MPEG_PACK_HEADER):
            return None
        head = content[:SNIFF_LIMIT].decode("utf-8", errors="replace")
    else:
        head = content[:SNIFF_LIMIT]

    head = head.lstrip("\ufeff").replace("\r\n", "\n").replace("\r", "\n").lstrip()
    if not head:
        return None
    if head.startswith("# VobSub index file"):
        return SubtitleFormat.VOBSUB_IDX

    try:
        identifier = autodetect_format(head)
    except FormatAutodetectionError as exc:
        logging.debug(f"  Content sniffing inconclusive: {exc}")
        return None
    return _PYSUBS2_FORMATS.get(identifier)


def detect(
    extension: Optional[str], content: Union[bytes, str]
) -> Optional[SubtitleFormat]:
    """Return the subtitle format for a file, or ``None`` to skip it.

    The extension (case-insensitive, leading dot optional) is tried first.
    When it is missing, unknown or ambiguous the content is sniffed instead.
    """
    fmt = EXTENSION_FORMATS.get(_normalize_extension(extension))
    if fmt is not None:
        return fmt
    return sniff(content)
