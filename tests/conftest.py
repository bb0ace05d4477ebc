from __future__ import annotations

import sys
from pathlib import Path

import pytest

from tests.fixtures.chunks import RecordingWriter

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))


@pytest.fixture
def writer() -> RecordingWriter:
    """Fresh in-memory UI writer for each test."""

    return RecordingWriter()
