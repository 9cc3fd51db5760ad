import os
import sys

import pytest

# pygame must not try to open a real window during tests
os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
os.environ.setdefault("SDL_AUDIODRIVER", "dummy")

# Add project root to sys.path
sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))


@pytest.fixture
def puzzles_dir():
    return os.path.join(PROJECT_ROOT, "puzzles")


@pytest.fixture
def small_puzzle_data():
    """2x2 board: room 0 on the top row, room 1 on the bottom row."""
    return {
        "id": "small",
        "width": 2,
        "height": 2,
        "rooms": [[0, 0], [1, 1]],
        "clues": {"0": 3, "1": 0},
        "solution": [[1, 0], [0, 1]],
    }


@pytest.fixture
def blocks_puzzle_data():
    return {
        "id": "blocks",
        "width": 4,
        "height": 4,
        "rooms": [
            [0, 0, 1, 1],
            [0, 0, 1, 1],
            [2, 2, 3, 3],
            [2, 2, 3, 3],
        ],
        "clues": {"0": 1, "1": 2, "2": None, "3": 1},
        "solution": [
            [1, 0, 1, 0],
            [0, 0, 0, 1],
            [0, 1, 0, 0],
            [0, 0, 1, 0],
        ],
    }
