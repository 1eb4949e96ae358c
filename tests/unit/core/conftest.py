"""Shared fixtures for core unit tests"""

from pathlib import Path

import pytest

from pagepub.config import Settings


@pytest.fixture(name="settings")
def settings_fixture(tmp_path):
    return Settings(source_dir="pages", output_dir=str(tmp_path / "dist"))


@pytest.fixture(name="pages_dir")
def pages_dir_fixture(tmp_path, monkeypatch):
    """A pages/ directory under a clean working directory."""
    monkeypatch.chdir(tmp_path)
    d = Path("pages")
    d.mkdir()
    return d
