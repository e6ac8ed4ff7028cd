"""
Pytest configuration and fixtures
"""
import sys
from pathlib import Path

import pytest

# Make src/ importable when the package is not installed
src_dir = Path(__file__).resolve().parent.parent / "src"
if str(src_dir) not in sys.path:
    sys.path.insert(0, str(src_dir))

from mock_tools.callers import RecordingCaller
from mock_tools.loader import load_fixtures


@pytest.fixture
def fx():
    """Fresh copies of the canned tool payloads"""
    return load_fixtures()


@pytest.fixture
def make_caller():
    """Build a RecordingCaller: make_caller({"execute_spec": payload}, failures={...})"""
    def _make(responses=None, failures=None):
        return RecordingCaller(responses or {}, failures=failures)
    return _make
