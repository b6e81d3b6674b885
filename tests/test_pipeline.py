"""End-to-end tests for extract_matches."""

import re

import pytest
from subgrep.errors import ExtractError, InvalidPattern, MalformedContent, UnsupportedFormat
from subgrep.matcher import MatchRecord
from subgrep.pipeline import compile_pattern, extract_matches

CORUSCANT = """\
1
00:02:17,440 --> 00:02:20,375
Senator, we're making
our final approach into Coruscant.

2
00:02:20,476 --> 00:02:22,501
Very good, Lieutenant.
"""


class TestScenarios:
    def test_two_cue_subrip(self) -> None:
        records = list(extract_matches("srt", CORUSCANT, re.compile("final")))
        assert records == [
            MatchRecord(
                "Senator, we're making\nour final approach into Coruscant.", 26, 31
            )
        ]

    @pytest.mark.parametrize("extension", ["srt", "vtt", "ass", "txt", "xyz", "", None])
    def test_empty_content_yields_nothing(self, extension) -> None:
        assert list(extract_matches(extension, "", re.compile("anything"))) == []

    def test_whitespace_only_content_yields_nothing(self) -> None:
        assert list(extract_matches("xyz", "\n  \n", re.compile(""))) == []

    def test_unknown_extension_without_header(self) -> None:
        with pytest.raises(UnsupportedFormat):
            extract_matches("xyz", "Just some notes.\nNothing to see.\n", re.compile("notes"))

    def test_cue_missing_timing_terminator(self) -> None:
        content = "1\n00:02:17,440\nSenator\n"
        with pytest.raises(MalformedContent):
            extract_matches("srt", content, re.compile("Senator"))

    def test_cue_missing_blank_line_terminator(self) -> None:
        content = (
            "1\n00:00:01,000 --> 00:00:02,000\nfirst\n"
            "2\n00:00:03,000 --> 00:00:04,000\nsecond\n"
        )
        with pytest.raises(MalformedContent):
            extract_matches("srt", content, re.compile("second"))


class TestPipeline:
    def test_unknown_extension_with_sniffable_content(self) -> None:
        records = list(extract_matches("bak", CORUSCANT, re.compile("Lieutenant")))
        assert [r.matched for r in records] == ["Lieutenant"]

    def test_extension_with_dot_and_uppercase(self) -> None:
        records = list(extract_matches(".SRT", CORUSCANT, re.compile("good")))
        assert records[0].text == "Very good, Lieutenant."

    def test_string_pattern_is_compiled(self) -> None:
        records = list(extract_matches("srt", CORUSCANT, "Cor\\w+"))
        assert records[0].matched == "Coruscant"

    def test_invalid_string_pattern(self) -> None:
        with pytest.raises(InvalidPattern):
            extract_matches("srt", CORUSCANT, "(unclosed")

    def test_errors_raised_before_iteration(self) -> None:
        # No need to consume the result to see a parse error.
        with pytest.raises(ExtractError):
            extract_matches("srt", "1\nbroken\n", re.compile("x"))

    def test_idempotent(self) -> None:
        pattern = re.compile(r"\w+ant")
        first = list(extract_matches("srt", CORUSCANT, pattern))
        second = list(extract_matches("srt", CORUSCANT, pattern))
        assert first == second
        assert len(first) == 2

    def test_caller_can_stop_early(self) -> None:
        records = extract_matches("srt", CORUSCANT, re.compile("e"))
        assert next(records).start == 1
        records.close()

    def test_microdvd_fps_is_forwarded(self) -> None:
        records = list(extract_matches("sub", "{48}{72}Frame based\n", "based", fps=24.0))
        assert records == [MatchRecord("Frame based", 6, 11)]

    def test_webvtt_pipeline(self) -> None:
        content = "WEBVTT\n\n00:01.000 --> 00:02.000\n<i>May the Force</i> be with you\n"
        (record,) = extract_matches("vtt", content, re.compile("Force be"))
        assert record.text == "May the Force be with you"
        assert record.matched == "Force be"

    def test_vobsub_idx_never_matches(self) -> None:
        content = "# VobSub index file, v7\ntimestamp: 00:00:01:000, filepos: 000000000\n"
        assert list(extract_matches("idx", content, re.compile(""))) == []


class TestCompilePattern:
    def test_ignore_case(self) -> None:
        assert compile_pattern("FINAL", ignore_case=True).search("our final approach")

    def test_error_kinds(self) -> None:
        with pytest.raises(InvalidPattern) as exc_info:
            compile_pattern("[a-")
        assert exc_info.value.kind == "regex"
        assert UnsupportedFormat().kind == "format"
        assert str(UnsupportedFormat()) == "invalid file format"
        assert MalformedContent("bad cue").kind == "parse"
