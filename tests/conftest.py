"""Shared fixtures for tests."""

import shutil
import tempfile
from pathlib import Path

import pytest

from team_hq.roster import build_roster


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test data."""
    dirpath = tempfile.mkdtemp()
    yield Path(dirpath)
    shutil.rmtree(dirpath)


@pytest.fixture
def agents_dir(temp_dir):
    """An empty OpenClaw agents directory."""
    path = temp_dir / "agents"
    path.mkdir()
    return path


@pytest.fixture
def roster():
    """The default two-agent roster."""
    return build_roster(
        [
            {"id": "main", "name": "William Strong"},
            {"id": "ryan-chen", "name": "Ryan Chen"},
        ]
    )
