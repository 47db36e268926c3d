# tests/conftest.py
import sys
from pathlib import Path

import pytest

# Add project root to sys.path so the top-level modules import without installing
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))


@pytest.fixture
def smiley():
    return [
        [0, 1, 0, 1, 0],
        [0, 1, 0, 1, 0],
        [0, 0, 0, 0, 0],
        [1, 0, 0, 0, 1],
        [0, 1, 1, 1, 0],
    ]


@pytest.fixture
def frame():
    return [
        [1, 1, 1, 1, 1],
        [1, 0, 0, 0, 1],
        [1, 0, 1, 0, 1],
        [1, 0, 0, 0, 1],
        [1, 1, 1, 1, 1],
    ]


@pytest.fixture
def checker_2x2():
    # Both diagonals give the same hints, so no unique solution
    return [
        [1, 0],
        [0, 1],
    ]
