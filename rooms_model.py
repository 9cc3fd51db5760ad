import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Hashable, List, Mapping, Optional, Tuple

logger = logging.getLogger(__name__)

# ----------------------------
# Cell marks
# ----------------------------

EMPTY = 0
BLACK = 1
WHITE = 2  # White with dot/marker

MARK_NAMES = {EMPTY: "EMPTY", BLACK: "BLACK", WHITE: "WHITE"}

# Click cycle: EMPTY -> BLACK -> WHITE -> EMPTY
_MARK_CYCLE = [EMPTY, BLACK, WHITE]

RoomId = Hashable
Grid = Tuple[Tuple[Any, ...], ...]


# ----------------------------
# Errors
# ----------------------------

class PuzzleError(Exception):
    """Base class for every recoverable puzzle error."""


class IndexLoadError(PuzzleError):
    """The puzzle list is unavailable."""


class PuzzleLoadError(PuzzleError):
    """A named puzzle file is missing or malformed."""


class ValidationError(PuzzleError):
    """Grid dimensions do not agree with the declared width/height."""


class NoSolutionError(PuzzleError):
    """Check or reveal requested without a solution present."""


# ----------------------------
# Puzzle data
# ----------------------------

@dataclass(frozen=True)
class PuzzleData:
    id: str
    width: int
    height: int
    rooms: Grid
    clues: Mapping[str, int] = field(default_factory=lambda: MappingProxyType({}))
    solution: Optional[Grid] = None

    @property
    def has_solution(self) -> bool:
        return self.solution is not None

    def room_at(self, x: int, y: int) -> RoomId:
        return self.rooms[y][x]

    def clue_for(self, room_id: RoomId) -> Optional[int]:
        return self.clues.get(str(room_id))

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height


def next_mark(mark: int) -> int:
    idx = _MARK_CYCLE.index(mark)
    return _MARK_CYCLE[(idx + 1) % len(_MARK_CYCLE)]


def _positive_int(value: Any, name: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(f"'{name}' must be an integer, got {value!r}.")
    if value <= 0:
        raise ValidationError(f"'{name}' must be positive, got {value}.")
    return value


def _grid_shape(grid: Any, name: str) -> Tuple[int, List[int]]:
    if not isinstance(grid, list) or not grid:
        raise ValidationError(f"'{name}' must be a non-empty list of rows.")
    widths = []
    for row in grid:
        if not isinstance(row, list):
            raise ValidationError(f"'{name}' rows must be lists.")
        widths.append(len(row))
    return len(grid), widths


def _check_shape(grid: Any, name: str, width: int, height: int) -> None:
    rows, widths = _grid_shape(grid, name)
    if rows != height:
        raise ValidationError(f"'{name}' has {rows} rows, expected height {height}.")
    for y, w in enumerate(widths):
        if w != width:
            raise ValidationError(f"'{name}' row {y} has {w} cells, expected width {width}.")


def _normalize_clues(raw: Any) -> Dict[str, int]:
    clues: Dict[str, int] = {}
    if raw is None:
        return clues
    if not isinstance(raw, dict):
        raise ValidationError("'clues' must be an object mapping region ids to numbers.")
    for key, value in raw.items():
        if value is None:
            continue
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            logger.debug("Ignoring non-numeric clue %r for region %r", value, key)
            continue
        if not float(value).is_integer():
            logger.debug("Ignoring fractional clue %r for region %r", value, key)
            continue
        clues[str(key)] = int(value)
    return clues


def parse_puzzle(obj: Any, default_id: str = "") -> PuzzleData:
    """Validate a decoded puzzle JSON object and freeze it into a PuzzleData.

    Dimensions may be given as width/height or as cols/rows; when neither is
    present they are taken from the rooms grid. Every grid must match them
    exactly, otherwise ValidationError is raised.
    """
    if not isinstance(obj, dict):
        raise ValidationError("Puzzle data must be a JSON object.")

    rooms = obj.get("rooms")
    n_rows, widths = _grid_shape(rooms, "rooms")

    width = obj.get("width", obj.get("cols"))
    height = obj.get("height", obj.get("rows"))
    width = widths[0] if width is None else _positive_int(width, "width")
    height = n_rows if height is None else _positive_int(height, "height")
    if width <= 0:
        raise ValidationError("'rooms' rows must not be empty.")

    _check_shape(rooms, "rooms", width, height)
    for row in rooms:
        for room_id in row:
            if isinstance(room_id, (list, dict)):
                raise ValidationError(f"Region id {room_id!r} is not a valid token.")

    solution = obj.get("solution")
    frozen_solution: Optional[Grid] = None
    if solution is not None:
        _check_shape(solution, "solution", width, height)
        for y, row in enumerate(solution):
            for x, v in enumerate(row):
                if type(v) is not int or v not in (0, 1):
                    raise ValidationError(f"'solution' must contain only 0/1 values, got {v!r} at ({x},{y}).")
        frozen_solution = tuple(tuple(row) for row in solution)

    puzzle_id = obj.get("id", default_id)
    return PuzzleData(
        id=str(puzzle_id),
        width=width,
        height=height,
        rooms=tuple(tuple(row) for row in rooms),
        clues=MappingProxyType(_normalize_clues(obj.get("clues"))),
        solution=frozen_solution,
    )


# ----------------------------
# Game state
# ----------------------------

class GameState:
    """Per-session grid of cell marks, indexed marks[y][x]."""

    def __init__(self, width: int, height: int) -> None:
        self.width = width
        self.height = height
        self.marks: List[List[int]] = []
        self.reset()

    @classmethod
    def for_puzzle(cls, puzzle: PuzzleData) -> "GameState":
        return cls(puzzle.width, puzzle.height)

    def reset(self) -> None:
        self.marks = [[EMPTY for _ in range(self.width)] for _ in range(self.height)]

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def get(self, x: int, y: int) -> int:
        return self.marks[y][x]

    def cycle(self, x: int, y: int) -> int:
        new_mark = next_mark(self.marks[y][x])
        self.marks[y][x] = new_mark
        return new_mark

    def fill_from_solution(self, solution: Grid, other: int = WHITE) -> None:
        self.marks = [[BLACK if v == 1 else other for v in row] for row in solution]

    def is_all_empty(self) -> bool:
        return all(m == EMPTY for row in self.marks for m in row)

    def snapshot(self) -> List[List[int]]:
        return [row[:] for row in self.marks]
