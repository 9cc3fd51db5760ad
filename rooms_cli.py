import argparse
import json
import sys
from typing import List, Optional

from rooms_checker import check_answer
from rooms_layout import canonical_cells, find_disconnected_regions, resolve_borders
from rooms_loader import load_puzzle_file
from rooms_logging import setup_logger
from rooms_model import BLACK, EMPTY, WHITE, GameState, PuzzleData, PuzzleError, ValidationError

logger = setup_logger("rooms.cli")

MARK_TOKENS = {
    "0": EMPTY, ".": EMPTY, "": EMPTY,
    "1": BLACK, "#": BLACK,
    "2": WHITE, "o": WHITE,
}


def parse_marks(raw, puzzle: PuzzleData) -> GameState:
    """Build a GameState from a marks grid of 0/1/2 numbers or ./#/o strings."""
    if not isinstance(raw, list) or len(raw) != puzzle.height:
        raise ValidationError(f"Marks must have {puzzle.height} rows.")
    state = GameState.for_puzzle(puzzle)
    for y, row in enumerate(raw):
        if isinstance(row, str):
            row = list(row)
        if not isinstance(row, list) or len(row) != puzzle.width:
            raise ValidationError(f"Marks row {y} must have {puzzle.width} cells.")
        for x, token in enumerate(row):
            mark = MARK_TOKENS.get(str(token))
            if mark is None:
                raise ValidationError(f"Unknown mark {token!r} at ({x},{y}).")
            state.marks[y][x] = mark
    return state


def render_ascii(puzzle: PuzzleData) -> str:
    """Walls as '|' and '---', clue labels in the canonical cell of each room."""
    borders = resolve_borders(puzzle.rooms)
    anchors = canonical_cells(puzzle.rooms)
    lines = []
    for y in range(puzzle.height):
        top = "+"
        mid = "|" if borders[y][0].left else " "
        for x in range(puzzle.width):
            b = borders[y][x]
            top += ("---" if b.top else "   ") + "+"
            label = ""
            room_id = puzzle.room_at(x, y)
            if anchors.get(room_id) == (x, y):
                clue = puzzle.clue_for(room_id)
                if clue is not None:
                    label = str(clue)
            mid += f"{label:^3}" + ("|" if b.right else " ")
        lines.append(top)
        lines.append(mid)
    bottom = "+"
    for x in range(puzzle.width):
        bottom += ("---" if borders[-1][x].bottom else "   ") + "+"
    lines.append(bottom)
    return "\n".join(lines)


def cmd_validate(paths: List[str]) -> int:
    failed = 0
    for path in paths:
        try:
            puzzle = load_puzzle_file(path)
        except PuzzleError as e:
            print(f"FAIL {path}: {e}")
            failed += 1
            continue
        disconnected = find_disconnected_regions(puzzle.rooms)
        if disconnected:
            print(f"WARN {path}: disconnected regions {disconnected}")
        print(f"OK   {path} ({puzzle.width}x{puzzle.height}, solution={'yes' if puzzle.has_solution else 'no'})")
    return 1 if failed else 0


def cmd_check(puzzle_path: str, marks_path: str) -> int:
    try:
        puzzle = load_puzzle_file(puzzle_path)
        with open(marks_path, "r", encoding="utf-8") as f:
            state = parse_marks(json.load(f), puzzle)
        result = check_answer(puzzle, state)
    except (PuzzleError, OSError, json.JSONDecodeError) as e:
        print(f"Error: {e}")
        return 1
    print("SOLVED" if result.solved else "NOT SOLVED")
    return 0 if result.solved else 1


def cmd_show(puzzle_path: str) -> int:
    try:
        puzzle = load_puzzle_file(puzzle_path)
    except PuzzleError as e:
        print(f"Error: {e}")
        return 1
    print(render_ascii(puzzle))
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Rooms puzzle tools")
    sub = parser.add_subparsers(dest="command", required=True)

    p_validate = sub.add_parser("validate", help="Validate puzzle files")
    p_validate.add_argument("puzzles", nargs="+")

    p_check = sub.add_parser("check", help="Check a marks file against a puzzle solution")
    p_check.add_argument("puzzle")
    p_check.add_argument("marks")

    p_show = sub.add_parser("show", help="Print a puzzle as ASCII art")
    p_show.add_argument("puzzle")

    args = parser.parse_args(argv)
    logger.debug("Running %s", args.command)

    if args.command == "validate":
        return cmd_validate(args.puzzles)
    if args.command == "check":
        return cmd_check(args.puzzle, args.marks)
    return cmd_show(args.puzzle)


if __name__ == "__main__":
    sys.exit(main())
