"""Shared fixtures."""

import logging
from pathlib import Path
from typing import Iterator

import pytest

CORUSCANT_SRT = """\
1
00:02:17,440 --> 00:02:20,375
Senator, we're making
our final approach into Coruscant.

2
00:02:20,476 --> 00:02:22,501
Very good, Lieutenant.
"""


@pytest.fixture(autouse=True)
def _restore_root_logger() -> Iterator[None]:
    """cli.setup_logging replaces root handlers; put them back after each test."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture
def coruscant_srt() -> str:
    return CORUSCANT_SRT


@pytest.fixture
def isolated_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point HOME and the working directory at empty temp dirs (no config files)."""
    home = tmp_path / "home"
    work = tmp_path / "work"
    home.mkdir()
    work.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.chdir(work)
    return work
