# tests/conftest.py
import os
import sys

import pytest

# Ensure project root (where src/ lives) is on sys.path
CURRENT_DIR = os.path.dirname(os.path.abspath(__file__))
PROJECT_ROOT = os.path.dirname(CURRENT_DIR)
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

from src.core.config import MazeConfig
from src.core.types import Grid

FAST = dict(scan_delay=0.0, reveal_delay=0.0)


@pytest.fixture
def open_grid():
    """5x5, sealed border, no interior walls, mixed terrain. Cheapest 4-move route costs 8."""
    return Grid.from_strings([
        "#####",
        "#.:~#",
        "#:..#",
        "#~..#",
        "#####",
    ])


@pytest.fixture
def sealed_goal_grid():
    """Goal at (3,3) is boxed in by walls."""
    return Grid.from_strings([
        "#####",
        "#...#",
        "#..##",
        "#.#.#",
        "#####",
    ])


@pytest.fixture
def fast_config():
    return MazeConfig(seed=1234, **FAST)
