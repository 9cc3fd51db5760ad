import pytest
import sys
import os

# Add project root to sys.path
sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from rooms_layout import (
    CellBorders,
    canonical_cells,
    cell_borders,
    find_disconnected_regions,
    first_cell_by_scan,
    resolve_borders,
)

RECT_LAYOUTS = [
    [[0, 0], [1, 1]],
    [[0, 0, 1, 1],
     [0, 0, 1, 1],
     [2, 2, 3, 3],
     [2, 2, 3, 3]],
    [[1, 1, 2],
     [3, 4, 2],
     [3, 4, 2]],
    [[7]],
]

SHAPED_LAYOUTS = [
    [[1, 1, 2, 3, 3],
     [1, 4, 2, 2, 3],
     [4, 4, 4, 5, 5]],
    # L shapes and a room wrapping around another
    [["a", "a", "a", "b"],
     ["c", "c", "a", "b"],
     ["c", "d", "d", "b"],
     ["c", "c", "c", "b"]],
]

LAYOUTS = RECT_LAYOUTS + SHAPED_LAYOUTS


def test_two_by_two_borders():
    rooms = [[0, 0], [1, 1]]
    borders = resolve_borders(rooms)
    assert borders[0][0] == CellBorders(top=True, bottom=True, left=True, right=False)
    assert borders[0][1] == CellBorders(top=True, bottom=True, left=False, right=True)
    assert borders[1][0] == CellBorders(top=True, bottom=True, left=True, right=False)
    assert borders[1][1] == CellBorders(top=True, bottom=True, left=False, right=True)

    assert borders[0][0].is_canonical
    assert not borders[0][1].is_canonical
    assert borders[1][0].is_canonical
    assert canonical_cells(rooms) == {0: (0, 0), 1: (0, 1)}


def test_single_cell_board_is_all_border():
    b = cell_borders([[5]], 0, 0)
    assert b.top and b.bottom and b.left and b.right
    assert b.is_canonical


@pytest.mark.parametrize("rooms", LAYOUTS)
def test_borders_are_symmetric(rooms):
    borders = resolve_borders(rooms)
    height, width = len(rooms), len(rooms[0])
    for y in range(height):
        for x in range(width):
            if x + 1 < width:
                assert borders[y][x].right == borders[y][x + 1].left, f"vertical edge at ({x},{y})"
            if y + 1 < height:
                assert borders[y][x].bottom == borders[y + 1][x].top, f"horizontal edge at ({x},{y})"


@pytest.mark.parametrize("rooms", LAYOUTS)
def test_board_edges_are_borders(rooms):
    borders = resolve_borders(rooms)
    height, width = len(rooms), len(rooms[0])
    for x in range(width):
        assert borders[0][x].top and borders[height - 1][x].bottom
    for y in range(height):
        assert borders[y][0].left and borders[y][width - 1].right


@pytest.mark.parametrize("rooms", RECT_LAYOUTS)
def test_one_canonical_cell_per_rectangular_room(rooms):
    borders = resolve_borders(rooms)
    counts = {}
    for y, row in enumerate(rooms):
        for x, room_id in enumerate(row):
            if borders[y][x].is_canonical:
                counts[room_id] = counts.get(room_id, 0) + 1
    assert set(counts) == {room_id for row in rooms for room_id in row}
    assert all(n == 1 for n in counts.values()), counts


@pytest.mark.parametrize("rooms", LAYOUTS)
def test_canonical_cell_matches_reading_order_scan(rooms):
    assert find_disconnected_regions(rooms) == []
    assert canonical_cells(rooms) == first_cell_by_scan(rooms)


def test_resolver_is_deterministic():
    rooms = SHAPED_LAYOUTS[1]
    assert resolve_borders(rooms) == resolve_borders([row[:] for row in rooms])


def test_disconnected_region_is_reported():
    rooms = [[0, 1, 0],
             [1, 1, 1]]
    assert find_disconnected_regions(rooms) == [0]
    # Each piece of the split room has its own top-left corner.
    borders = resolve_borders(rooms)
    assert borders[0][0].is_canonical and borders[0][2].is_canonical
    assert canonical_cells(rooms)[0] == (0, 0)


def test_shaped_room_has_several_canonical_cells_but_one_anchor():
    rooms = SHAPED_LAYOUTS[0]
    borders = resolve_borders(rooms)
    # Room 4 is a T with its stem pointing up; stem and left arm both start a row.
    corners = [(x, y) for y, row in enumerate(rooms) for x, room_id in enumerate(row)
               if room_id == 4 and borders[y][x].is_canonical]
    assert corners == [(1, 1), (0, 2)]
    assert canonical_cells(rooms)[4] == (1, 1)
