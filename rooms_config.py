import os
from pathlib import Path

# Project root directory
PROJECT_ROOT = Path(__file__).parent

# Puzzle assets
PUZZLE_DIR = Path(os.environ.get("ROOMS_PUZZLE_DIR", PROJECT_ROOT / "puzzles"))
INDEX_FILE = "index.json"
PROBLEM_FILE_PATTERN = "problem_{id}.json"
SOLUTION_IMAGE_PATTERN = "solution_{id}.png"

# Window / board settings
WINDOW_SIZE = (1200, 800)
FPS = 60
BASE_CELL_SIZE = 48
MIN_ZOOM = 0.2
MAX_ZOOM = 6.0
DRAG_THRESHOLD_PX = 6
MAX_LOG_LINES = 100

# Logging configuration
LOG_LEVEL = os.environ.get("ROOMS_LOG_LEVEL", "INFO")
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
