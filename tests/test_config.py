"""Tests for config loading and validation."""

import textwrap
from pathlib import Path

import pytest
from subgrep.config import load_config, validate_config


class TestValidateConfig:
    def test_empty_config_ok(self) -> None:
        validate_config({})  # should not raise

    def test_all_valid_keys(self) -> None:
        validate_config({
            "recursive": True,
            "ignore_case": False,
            "color": "never",
            "encoding": "latin-1",
            "fps": 23.976,
            "extensions": ["srt", "ass"],
            "report_format": "csv",
        })

    def test_unknown_key_exits(self, capsys: pytest.CaptureFixture) -> None:
        with pytest.raises(SystemExit) as exc_info:
            validate_config({"unknown_key": "value"})
        assert exc_info.value.code == 1
        captured = capsys.readouterr()
        assert "unknown_key" in captured.err

    def test_multiple_errors_reported(self, capsys: pytest.CaptureFixture) -> None:
        with pytest.raises(SystemExit):
            validate_config({"bad_a": 1, "recursive": "yes"})
        captured = capsys.readouterr()
        assert "bad_a" in captured.err
        assert "recursive" in captured.err

    def test_wrong_type_recursive(self, capsys: pytest.CaptureFixture) -> None:
        with pytest.raises(SystemExit) as exc_info:
            validate_config({"recursive": "yes"})  # should be bool
        assert exc_info.value.code == 1

    def test_fps_accepts_int(self) -> None:
        validate_config({"fps": 25})

    def test_fps_rejects_bool(self, capsys: pytest.CaptureFixture) -> None:
        with pytest.raises(SystemExit):
            validate_config({"fps": True})
        assert "fps" in capsys.readouterr().err

    def test_fps_must_be_positive(self, capsys: pytest.CaptureFixture) -> None:
        with pytest.raises(SystemExit):
            validate_config({"fps": 0})
        assert "fps" in capsys.readouterr().err

    def test_invalid_color(self, capsys: pytest.CaptureFixture) -> None:
        with pytest.raises(SystemExit):
            validate_config({"color": "rainbow"})
        assert "color" in capsys.readouterr().err

    def test_invalid_report_format(self, capsys: pytest.CaptureFixture) -> None:
        with pytest.raises(SystemExit):
            validate_config({"report_format": "xml"})
        assert "report_format" in capsys.readouterr().err

    def test_unknown_encoding(self, capsys: pytest.CaptureFixture) -> None:
        with pytest.raises(SystemExit):
            validate_config({"encoding": "klingon-8"})
        assert "klingon-8" in capsys.readouterr().err

    def test_extensions_must_be_strings(self, capsys: pytest.CaptureFixture) -> None:
        with pytest.raises(SystemExit):
            validate_config({"extensions": ["srt", 3]})
        assert "extensions" in capsys.readouterr().err


class TestLoadConfig:
    def test_no_config_returns_empty(self, isolated_home: Path) -> None:
        assert load_config() == {}

    def test_loads_local_yaml(self, isolated_home: Path) -> None:
        (isolated_home / ".subgrep.yaml").write_text(textwrap.dedent("""\
            recursive: true
            extensions:
              - srt
              - vtt
        """))
        result = load_config()
        assert result["recursive"] is True
        assert result["extensions"] == ["srt", "vtt"]

    def test_home_config_takes_precedence(self, isolated_home: Path) -> None:
        home = Path.home()
        (home / ".subgrep.yaml").write_text("color: never\n")
        (isolated_home / ".subgrep.yaml").write_text("color: always\n")
        assert load_config() == {"color": "never"}

    def test_invalid_config_exits(self, isolated_home: Path) -> None:
        (isolated_home / ".subgrep.yaml").write_text("bad_key: value\n")
        with pytest.raises(SystemExit):
            load_config()

    def test_empty_yaml_returns_empty(self, isolated_home: Path) -> None:
        (isolated_home / ".subgrep.yaml").write_text("")
        assert load_config() == {}

    def test_unparseable_yaml_ignored(self, isolated_home: Path) -> None:
        (isolated_home / ".subgrep.yaml").write_text("recursive: [unclosed\n")
        assert load_config() == {}

    def test_non_mapping_ignored(self, isolated_home: Path) -> None:
        (isolated_home / ".subgrep.yaml").write_text("- just\n- a list\n")
        assert load_config() == {}
