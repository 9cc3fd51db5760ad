import math
import pygame
from dataclasses import dataclass
from typing import Tuple, Optional, List, Sequence
from rooms_model import PuzzleData, BLACK, WHITE
from rooms_layout import CellBorders, canonical_cells
import grid_style

@dataclass
class Camera:
    offset_x: float = 0.0
    offset_y: float = 0.0
    zoom: float = 1.0

    def screen_to_world(self, sx: float, sy: float) -> Tuple[float, float]:
        return (sx - self.offset_x) / self.zoom, (sy - self.offset_y) / self.zoom

    def world_to_screen(self, wx: float, wy: float) -> Tuple[float, float]:
        return wx * self.zoom + self.offset_x, wy * self.zoom + self.offset_y

    def zoom_at(self, mouse_pos: Tuple[int, int], zoom_factor: float, min_zoom: float, max_zoom: float) -> None:
        mx, my = mouse_pos
        wx, wy = self.screen_to_world(mx, my)

        new_zoom = self.zoom * zoom_factor
        new_zoom = max(min_zoom, min(max_zoom, new_zoom))
        if abs(new_zoom - self.zoom) < 1e-9:
            return

        self.zoom = new_zoom
        self.offset_x = mx - wx * self.zoom
        self.offset_y = my - wy * self.zoom


# ----------------------------
# Visual model (no pygame)
# ----------------------------

@dataclass(frozen=True)
class CellView:
    x: int
    y: int
    borders: CellBorders
    clue_label: Optional[str]
    mark: int


def mark_style(mark: int) -> Tuple[Optional[Tuple[int, int, int]], bool]:
    """(fill colour or None for no fill, whether to draw the white marker)."""
    if mark == BLACK:
        return grid_style.COLOR_BLACK, False
    if mark == WHITE:
        return grid_style.COLOR_WHITE, True
    return None, False


def build_board_view(
    puzzle: PuzzleData,
    borders: Sequence[Sequence[CellBorders]],
    marks: Sequence[Sequence[int]]
) -> List[List[CellView]]:
    anchors = canonical_cells(puzzle.rooms)
    view = []
    for y in range(puzzle.height):
        row = []
        for x in range(puzzle.width):
            b = borders[y][x]
            room_id = puzzle.room_at(x, y)
            label = None
            if b.is_canonical and anchors.get(room_id) == (x, y):
                clue = puzzle.clue_for(room_id)
                if clue is not None:
                    label = str(clue)
            row.append(CellView(x=x, y=y, borders=b, clue_label=label, mark=marks[y][x]))
        view.append(row)
    return view


# ----------------------------
# pygame adapter
# ----------------------------

class BoardRenderer:
    """Draws a board in two tiers.

    rebuild() paints the static layer (grid, region borders, clue labels)
    once per puzzle; update_cell() repaints a single cell's fill and restores
    the static layer over it.
    """

    def __init__(self, cell_size: int, font: Optional[pygame.font.Font]) -> None:
        self.cell_size = cell_size
        self.font = font
        self.margin = grid_style.REGION_BORDER_WIDTH
        self.board: Optional[pygame.Surface] = None
        self._static: Optional[pygame.Surface] = None
        self._scaled: Optional[Tuple[float, int, pygame.Surface]] = None
        self._version = 0
        self.rebuild_count = 0
        self.cell_update_count = 0

    def clear(self) -> None:
        self.board = None
        self._static = None
        self._scaled = None

    def cell_rect(self, x: int, y: int) -> pygame.Rect:
        cs = self.cell_size
        return pygame.Rect(self.margin + x * cs, self.margin + y * cs, cs, cs)

    def rebuild(
        self,
        puzzle: Optional[PuzzleData],
        borders: Sequence[Sequence[CellBorders]],
        marks: Sequence[Sequence[int]]
    ) -> None:
        if puzzle is None:
            self.clear()
            return

        view = build_board_view(puzzle, borders, marks)
        size = (puzzle.width * self.cell_size + 2 * self.margin, puzzle.height * self.cell_size + 2 * self.margin)
        self.board = pygame.Surface(size)
        self.board.fill(grid_style.COLOR_CELL_EMPTY)
        self._static = pygame.Surface(size, pygame.SRCALPHA)
        self._static.fill((0, 0, 0, 0))

        for row in view:
            for cell in row:
                self._draw_static_cell(cell)
        for row in view:
            for cell in row:
                self._paint_fill(cell.x, cell.y, cell.mark)

        self.board.blit(self._static, (0, 0))
        self._version += 1
        self.rebuild_count += 1

    def update_cell(self, x: int, y: int, mark: int) -> None:
        if self.board is None or self._static is None:
            return
        self._paint_fill(x, y, mark)
        # Region borders straddle the cell edge, so restore a slightly larger area.
        area = self.cell_rect(x, y).inflate(2 * self.margin, 2 * self.margin)
        area = area.clip(self.board.get_rect())
        self.board.blit(self._static, area.topleft, area)
        self._version += 1
        self.cell_update_count += 1

    def _draw_static_cell(self, cell: CellView) -> None:
        rect = self.cell_rect(cell.x, cell.y)
        sides = [
            (cell.borders.top, rect.topleft, rect.topright),
            (cell.borders.bottom, rect.bottomleft, rect.bottomright),
            (cell.borders.left, rect.topleft, rect.bottomleft),
            (cell.borders.right, rect.topright, rect.bottomright),
        ]
        # Thin lines first so bold borders from either side always win.
        for is_border, start, end in sides:
            if not is_border:
                pygame.draw.line(self._static, grid_style.COLOR_GRID_LINES, start, end, grid_style.GRID_LINE_WIDTH)
        for is_border, start, end in sides:
            if is_border:
                pygame.draw.line(self._static, grid_style.COLOR_REGION_BORDER, start, end, grid_style.REGION_BORDER_WIDTH)

        if cell.clue_label is not None and self.font is not None:
            surf = self.font.render(cell.clue_label, True, grid_style.COLOR_TEXT_CLUE)
            self._static.blit(surf, (rect.x + 4, rect.y + 2))

    def _paint_fill(self, x: int, y: int, mark: int) -> None:
        rect = self.cell_rect(x, y)
        fill, has_marker = mark_style(mark)
        pygame.draw.rect(self.board, fill if fill is not None else grid_style.COLOR_CELL_EMPTY, rect)
        if has_marker:
            radius = max(2, self.cell_size // 8)
            pygame.draw.circle(self.board, grid_style.COLOR_WHITE_MARKER, rect.center, radius)

    def draw(self, screen: pygame.Surface, camera: Camera) -> None:
        if self.board is None:
            return
        sx, sy = camera.world_to_screen(-self.margin, -self.margin)
        if abs(camera.zoom - 1.0) < 1e-9:
            screen.blit(self.board, (int(sx), int(sy)))
            return

        if self._scaled is None or self._scaled[0] != camera.zoom or self._scaled[1] != self._version:
            w, h = self.board.get_size()
            size = (max(1, int(math.ceil(w * camera.zoom))), max(1, int(math.ceil(h * camera.zoom))))
            self._scaled = (camera.zoom, self._version, pygame.transform.smoothscale(self.board, size))
        screen.blit(self._scaled[2], (int(sx), int(sy)))


def pick_cell_from_mouse(puzzle: Optional[PuzzleData], camera: Camera, base_cell_size: int, mouse_pos: Tuple[int, int]) -> Optional[Tuple[int, int]]:
    if puzzle is None:
        return None
    mx, my = mouse_pos
    wx, wy = camera.screen_to_world(mx, my)
    x = int(wx // base_cell_size)
    y = int(wy // base_cell_size)
    if puzzle.in_bounds(x, y):
        return (x, y)
    return None
