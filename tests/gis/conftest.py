"""Pytest configuration for geoid model file tests.

This conftest is for tests/gis/ directory only: tests here read tables from
tests/fixtures/ (generated by scripts/gen_fixtures.py) or from tmp_path.
"""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest

from tests.conftest_utils import get_fixtures_dir


@pytest.fixture
def fixture_path() -> Callable[[str], Path]:
    """Return a function mapping a fixture filename to its path."""

    def _path(name: str) -> Path:
        return get_fixtures_dir() / name

    return _path
