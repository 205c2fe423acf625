"""Pytest configuration for test discovery and shared fixtures.

This file ensures that:
- `src/` is importable
- Recorded ATOL Online bodies under `tests/fixtures/` are easy to load
"""

from __future__ import annotations

import sys
from collections.abc import Callable
from pathlib import Path

import pytest

# Ensure src directory is in path for imports
repo_root = Path(__file__).parent.parent
src_path = repo_root / "src"
if str(src_path) not in sys.path:
    sys.path.insert(0, str(src_path))

FIXTURES_DIR = Path(__file__).parent / "fixtures"


def read_fixture(name: str) -> str:
    return (FIXTURES_DIR / name).read_text(encoding="utf-8")


@pytest.fixture
def load_fixture() -> Callable[[str], str]:
    """Return a loader for response bodies stored in `tests/fixtures/`."""
    return read_fixture
