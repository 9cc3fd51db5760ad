"""
Region boundaries derived from a room-id grid.

A side of a cell is a border when the neighbouring cell across that side is
off the board or belongs to a different room. A cell with a border both on
top and on the left is canonical; a rectangular room has exactly one such
cell, other shapes can have several. The clue label of a room goes on its
first canonical cell in reading order, which is always the first cell of the
room in reading order.
"""

from dataclasses import dataclass
from typing import Dict, List, Sequence, Tuple

from rooms_model import RoomId

RoomGrid = Sequence[Sequence[RoomId]]


@dataclass(frozen=True)
class CellBorders:
    top: bool
    bottom: bool
    left: bool
    right: bool

    @property
    def is_canonical(self) -> bool:
        return self.top and self.left


def _dims(rooms: RoomGrid) -> Tuple[int, int]:
    height = len(rooms)
    width = len(rooms[0]) if height else 0
    return width, height


def cell_borders(rooms: RoomGrid, x: int, y: int) -> CellBorders:
    width, height = _dims(rooms)
    room_id = rooms[y][x]
    return CellBorders(
        top=y == 0 or rooms[y - 1][x] != room_id,
        bottom=y == height - 1 or rooms[y + 1][x] != room_id,
        left=x == 0 or rooms[y][x - 1] != room_id,
        right=x == width - 1 or rooms[y][x + 1] != room_id,
    )


def resolve_borders(rooms: RoomGrid) -> List[List[CellBorders]]:
    """Border descriptor for every cell, indexed [y][x]."""
    width, height = _dims(rooms)
    return [[cell_borders(rooms, x, y) for x in range(width)] for y in range(height)]


def canonical_cells(rooms: RoomGrid) -> Dict[RoomId, Tuple[int, int]]:
    """Map room id -> (x, y) of its first canonical cell in reading order.

    Non-rectangular or split rooms have several canonical cells; only the
    first one anchors the clue label.
    """
    width, height = _dims(rooms)
    out: Dict[RoomId, Tuple[int, int]] = {}
    for y in range(height):
        for x in range(width):
            room_id = rooms[y][x]
            if room_id in out:
                continue
            top = y == 0 or rooms[y - 1][x] != room_id
            left = x == 0 or rooms[y][x - 1] != room_id
            if top and left:
                out[room_id] = (x, y)
    return out


def first_cell_by_scan(rooms: RoomGrid) -> Dict[RoomId, Tuple[int, int]]:
    """Map room id -> (x, y) of its first cell in reading order."""
    width, height = _dims(rooms)
    out: Dict[RoomId, Tuple[int, int]] = {}
    for y in range(height):
        for x in range(width):
            out.setdefault(rooms[y][x], (x, y))
    return out


def find_disconnected_regions(rooms: RoomGrid) -> List[RoomId]:
    """Room ids whose cells do not form a single edge-connected block."""
    width, height = _dims(rooms)
    seen = [[False] * width for _ in range(height)]
    components: Dict[RoomId, int] = {}
    order: List[RoomId] = []

    for sy in range(height):
        for sx in range(width):
            if seen[sy][sx]:
                continue
            room_id = rooms[sy][sx]
            if room_id not in components:
                components[room_id] = 0
                order.append(room_id)
            components[room_id] += 1

            seen[sy][sx] = True
            queue = [(sx, sy)]
            idx = 0
            while idx < len(queue):
                x, y = queue[idx]
                idx += 1
                for dx, dy in [(0, -1), (0, 1), (-1, 0), (1, 0)]:
                    nx, ny = x + dx, y + dy
                    if 0 <= nx < width and 0 <= ny < height:
                        if not seen[ny][nx] and rooms[ny][nx] == room_id:
                            seen[ny][nx] = True
                            queue.append((nx, ny))

    return [room_id for room_id in order if components[room_id] > 1]
