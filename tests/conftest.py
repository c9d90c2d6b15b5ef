"""Pytest bootstrap for repo-root imports and shared fixtures."""

import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))


@pytest.fixture
def sleeps():
    """Recorded backoff delays; pass ``sleeps.append`` as a RetryPolicy sleep."""
    return []
