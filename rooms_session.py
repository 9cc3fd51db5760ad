"""
Session state for one player working on one puzzle at a time.

PuzzleSession owns the loaded PuzzleData, the player's GameState and the
renderer; every load replaces the puzzle and the marks together. Clicks go
through InteractionController, which is the only code that cycles marks.
"""

import logging
from typing import Any, List, Optional, Union

from rooms_checker import CheckResult, check_answer
from rooms_layout import CellBorders, find_disconnected_regions, resolve_borders
from rooms_model import (
    EMPTY,
    WHITE,
    GameState,
    NoSolutionError,
    PuzzleData,
    parse_puzzle,
)

logger = logging.getLogger(__name__)

MSG_SOLVED = "Correct! Congratulations!"
MSG_NOT_SOLVED = "Not solved yet. Check the board again."


class InteractionController:
    """Maps a click on a board cell to one step of the mark cycle."""

    def __init__(self, session: "PuzzleSession") -> None:
        self.session = session

    def handle_cell_click(self, x: int, y: int) -> Optional[int]:
        state = self.session.state
        if state is None or not state.in_bounds(x, y):
            return None
        new_mark = state.cycle(x, y)
        if self.session.renderer is not None:
            self.session.renderer.update_cell(x, y, new_mark)
        return new_mark


class PuzzleSession:
    def __init__(self, renderer: Optional[Any] = None) -> None:
        self.renderer = renderer
        self.puzzle: Optional[PuzzleData] = None
        self.state: Optional[GameState] = None
        self.borders: List[List[CellBorders]] = []
        self.solution_shown = False
        self.generation = 0
        self.controller = InteractionController(self)

    # ----------------------------
    # Loading
    # ----------------------------

    def begin_load(self) -> int:
        """Start a new load request and return its generation number."""
        self.generation += 1
        return self.generation

    def is_current(self, generation: int) -> bool:
        return generation == self.generation

    def load_puzzle(self, data: Union[PuzzleData, dict]) -> None:
        """Install a new puzzle; raises ValidationError and keeps the old one on bad data."""
        puzzle = data if isinstance(data, PuzzleData) else parse_puzzle(data)

        disconnected = find_disconnected_regions(puzzle.rooms)
        if disconnected:
            logger.warning("Puzzle %s has disconnected regions: %s", puzzle.id, disconnected)

        self.puzzle = puzzle
        self.borders = resolve_borders(puzzle.rooms)
        self.state = GameState.for_puzzle(puzzle)
        self.solution_shown = False
        self._rebuild()
        logger.info("Loaded puzzle %s (%dx%d)", puzzle.id, puzzle.width, puzzle.height)

    def reset(self) -> None:
        if self.state is None:
            return
        self.state.reset()
        self.solution_shown = False
        self._rebuild()

    def _rebuild(self) -> None:
        if self.renderer is None:
            return
        marks = self.state.marks if self.state is not None else []
        self.renderer.rebuild(self.puzzle, self.borders, marks)

    # ----------------------------
    # Play
    # ----------------------------

    def handle_cell_click(self, x: int, y: int) -> Optional[int]:
        return self.controller.handle_cell_click(x, y)

    def check_answer(self) -> CheckResult:
        result = check_answer(self.puzzle, self.state)
        logger.info("Checked puzzle %s: solved=%s", self.puzzle.id, result.solved)
        return result

    def toggle_solution_view(self) -> bool:
        """Show the solution on the board, or hide it and clear the marks.

        Returns whether the solution is shown afterwards.
        """
        if self.puzzle is None or self.state is None:
            raise NoSolutionError("No puzzle loaded.")
        if self.puzzle.solution is None:
            raise NoSolutionError(f"Puzzle {self.puzzle.id} has no solution.")

        if self.solution_shown:
            self.state.reset()
            self.solution_shown = False
        else:
            self.state.fill_from_solution(self.puzzle.solution, other=WHITE)
            self.solution_shown = True
        self._rebuild()
        return self.solution_shown

    def check_message(self) -> str:
        """Run the check and turn the outcome into a user-visible message."""
        try:
            result = self.check_answer()
        except NoSolutionError as e:
            return f"Cannot check: {e}"
        return MSG_SOLVED if result.solved else MSG_NOT_SOLVED

    def mark_at(self, x: int, y: int) -> int:
        if self.state is None:
            return EMPTY
        return self.state.get(x, y)
