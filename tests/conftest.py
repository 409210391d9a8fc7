"""Shared pytest fixtures for the ppcodemap test suite."""

from __future__ import annotations

import pytest

from ppcodemap.codemap import PreprocessedFile
from tests.helpers import SCENARIO


@pytest.fixture
def scenario() -> PreprocessedFile:
    """The three-directive example: two files, one renumbering."""
    return PreprocessedFile(SCENARIO, "scenario.i")


@pytest.fixture
def scenario_file(tmp_path):
    path = tmp_path / "scenario.i"
    path.write_text(SCENARIO)
    return path
