from pathlib import Path
import stat

import pytest


class FakeResolver:
    """Set-backed stand-in for the live shell lookup."""

    def __init__(self, names=()):
        self.names = set(names)
        self.calls = []

    def resolves(self, name):
        self.calls.append(name)
        return name in self.names


@pytest.fixture(autouse=True)
def hermetic_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """
    Autouse: each test runs in its own tmp cwd with its own HOME, so no real
    ~/.bashrc or .env is ever read.
    """
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("HOME", str(home))
    for var in ("REVCMD_RC_FILE", "REVCMD_PATH", "REVCMD_SAMPLE_SIZE", "REVCMD_BUILTINS"):
        monkeypatch.delenv(var, raising=False)
    return tmp_path


@pytest.fixture
def make_bin(tmp_path: Path):
    """Create a directory of executables (and optionally plain files)."""

    def _make(dirname, executables=(), plain=()):
        d = tmp_path / dirname
        d.mkdir(exist_ok=True)
        for name in executables:
            f = d / name
            f.write_text("#!/bin/sh\n")
            f.chmod(f.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
        for name in plain:
            f = d / name
            f.write_text("data\n")
            f.chmod(0o644)
        return d

    return _make


@pytest.fixture
def fake_resolver():
    return FakeResolver
