import pytest
import sys
import os

# Add project root to sys.path
sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from rooms_model import BLACK, EMPTY, WHITE, NoSolutionError, ValidationError, parse_puzzle
from rooms_session import MSG_NOT_SOLVED, MSG_SOLVED, PuzzleSession


class RecordingRenderer:
    """Stands in for BoardRenderer and records which tier was redrawn."""

    def __init__(self):
        self.rebuilds = []
        self.cell_updates = []

    def rebuild(self, puzzle, borders, marks):
        self.rebuilds.append((puzzle, [row[:] for row in marks]))

    def update_cell(self, x, y, mark):
        self.cell_updates.append((x, y, mark))


@pytest.fixture
def session(small_puzzle_data):
    s = PuzzleSession(RecordingRenderer())
    s.load_puzzle(small_puzzle_data)
    return s


def test_load_resets_state_and_builds_static_layer(session):
    assert session.puzzle.id == "small"
    assert session.state.is_all_empty()
    assert len(session.renderer.rebuilds) == 1
    assert session.borders[0][0].is_canonical


def test_click_cycles_and_updates_single_cell(session):
    assert session.handle_cell_click(1, 0) == BLACK
    assert session.handle_cell_click(1, 0) == WHITE
    assert session.handle_cell_click(1, 0) == EMPTY
    assert session.renderer.cell_updates == [(1, 0, BLACK), (1, 0, WHITE), (1, 0, EMPTY)]
    # Clicks never rebuild the static layer.
    assert len(session.renderer.rebuilds) == 1


def test_click_uses_x_y_coordinates(session):
    session.handle_cell_click(1, 0)
    assert session.state.marks[0][1] == BLACK
    assert session.mark_at(1, 0) == BLACK
    assert session.mark_at(0, 1) == EMPTY


@pytest.mark.parametrize("x, y", [(-1, 0), (2, 0), (0, 2), (5, 5)])
def test_out_of_board_clicks_are_ignored(session, x, y):
    assert session.handle_cell_click(x, y) is None
    assert session.state.is_all_empty()
    assert session.renderer.cell_updates == []


def test_click_without_puzzle_is_noop():
    s = PuzzleSession()
    assert s.handle_cell_click(0, 0) is None


def test_solving_scenario(session):
    session.handle_cell_click(0, 0)
    assert session.state.marks[0][0] == BLACK
    assert not session.check_answer().solved
    assert session.check_message() == MSG_NOT_SOLVED

    session.handle_cell_click(1, 1)
    assert session.check_answer().solved
    assert session.check_message() == MSG_SOLVED


def test_invalid_load_keeps_previous_puzzle(session):
    session.handle_cell_click(0, 0)
    before = session.state.snapshot()

    with pytest.raises(ValidationError):
        session.load_puzzle({"width": 2, "height": 3, "rooms": [[0, 0], [1, 1]]})

    assert session.puzzle.id == "small"
    assert session.state.snapshot() == before
    assert len(session.renderer.rebuilds) == 1


def test_loading_again_resets_marks(session, blocks_puzzle_data, small_puzzle_data):
    session.handle_cell_click(0, 0)
    session.handle_cell_click(1, 1)
    session.load_puzzle(blocks_puzzle_data)
    assert session.state.is_all_empty()
    assert (session.state.width, session.state.height) == (4, 4)

    session.load_puzzle(parse_puzzle(small_puzzle_data))
    assert session.state.is_all_empty()


def test_reset_clears_marks(session):
    session.handle_cell_click(0, 0)
    session.reset()
    assert session.state.is_all_empty()
    assert len(session.renderer.rebuilds) == 2


def test_toggle_solution_view(session):
    session.handle_cell_click(1, 0)
    assert session.toggle_solution_view() is True
    assert session.solution_shown
    assert session.state.marks == [[BLACK, WHITE], [WHITE, BLACK]]

    assert session.toggle_solution_view() is False
    assert not session.solution_shown
    assert session.state.is_all_empty()


def test_new_load_hides_solution(session, blocks_puzzle_data):
    session.toggle_solution_view()
    session.load_puzzle(blocks_puzzle_data)
    assert not session.solution_shown


def test_solution_view_requires_solution(small_puzzle_data):
    data = dict(small_puzzle_data)
    del data["solution"]
    s = PuzzleSession()
    s.load_puzzle(data)
    with pytest.raises(NoSolutionError):
        s.toggle_solution_view()
    assert s.check_message().startswith("Cannot check")


def test_check_without_puzzle():
    s = PuzzleSession()
    with pytest.raises(NoSolutionError):
        s.check_answer()
    with pytest.raises(NoSolutionError):
        s.toggle_solution_view()


def test_generation_counter():
    s = PuzzleSession()
    first = s.begin_load()
    second = s.begin_load()
    assert second == first + 1
    assert s.is_current(second)
    assert not s.is_current(first)


def test_disconnected_region_logs_warning(caplog):
    s = PuzzleSession()
    with caplog.at_level("WARNING", logger="rooms_session"):
        s.load_puzzle({"id": "split", "rooms": [[0, 1, 0], [1, 1, 1]]})
    assert "disconnected" in caplog.text
    assert s.puzzle.id == "split"
