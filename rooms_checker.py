from dataclasses import dataclass
from typing import Optional

from rooms_model import BLACK, GameState, NoSolutionError, PuzzleData


@dataclass(frozen=True)
class CheckResult:
    solved: bool


def check_answer(puzzle: Optional[PuzzleData], state: Optional[GameState]) -> CheckResult:
    """Compare the user's marks against the stored solution.

    Only BLACK counts as filled: WHITE and EMPTY are both "not filled" here,
    even though they are drawn differently.
    """
    if puzzle is None or state is None:
        raise NoSolutionError("No puzzle loaded.")
    if puzzle.solution is None:
        raise NoSolutionError(f"Puzzle {puzzle.id} has no solution.")

    for y in range(puzzle.height):
        for x in range(puzzle.width):
            user_filled = state.marks[y][x] == BLACK
            solution_filled = puzzle.solution[y][x] == 1
            if user_filled != solution_filled:
                return CheckResult(solved=False)
    return CheckResult(solved=True)
