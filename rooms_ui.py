"""
Rooms Puzzle Player (Pygame)

Features:
- Pick a puzzle from the list (puzzles/index.json) and load it.
- Play: click cells to mark them, then check the marking against the solution.
- Show Solution toggles the stored answer (and its image, if present) on and off.

Controls:
- Left click: cycle Empty -> Black -> White (dot) -> Empty
- Drag with LMB / MMB: pan
- Mouse wheel: zoom
- Buttons: Load, Check, Show Solution, Reset
"""

from typing import Tuple, Optional, List, Dict

import pygame
import pygame_gui

import grid_style
import rooms_config
from rooms_drawing import BoardRenderer, Camera, pick_cell_from_mouse
from rooms_loader import LoaderWorker, PuzzleEntry, WorkerCommand
from rooms_logging import setup_logger
from rooms_model import NoSolutionError, ValidationError
from rooms_session import MSG_SOLVED, PuzzleSession

logger = setup_logger("rooms")


def html_escape(s: str) -> str:
    return (
        s.replace("&", "&amp;")
         .replace("<", "&lt;")
         .replace(">", "&gt;")
         .replace('"', "&quot;")
         .replace("'", "&#39;")
    )


def sync_solution_button(button, session: PuzzleSession) -> None:
    button.set_text("Hide Solution" if session.solution_shown else "Show Solution")


def make_puzzle_dropdown(
    entries: List[PuzzleEntry],
    manager: pygame_gui.UIManager,
    container: pygame_gui.elements.UIWindow
) -> pygame_gui.elements.UIDropDownMenu:
    options = [e.label for e in entries] or ["(no puzzles)"]
    return pygame_gui.elements.UIDropDownMenu(
        options_list=options,
        starting_option=options[0],
        relative_rect=pygame.Rect(10, 10, 240, 32),
        manager=manager,
        container=container
    )


# ----------------------------
# Main
# ----------------------------

def main() -> None:
    pygame.init()
    pygame.display.set_caption("Rooms Puzzle Player")

    screen = pygame.display.set_mode(rooms_config.WINDOW_SIZE, pygame.RESIZABLE)
    clock = pygame.time.Clock()

    font = pygame.font.SysFont("arial", 20)
    small_font = pygame.font.SysFont("arial", 14)

    ui_manager = pygame_gui.UIManager(screen.get_size())

    controls_win = pygame_gui.elements.UIWindow(
        pygame.Rect(20, 20, 280, 300),
        ui_manager,
        window_display_title="Puzzles",
        resizable=True
    )
    controls_win.close_window_button.hide()
    log_win = pygame_gui.elements.UIWindow(
        pygame.Rect(20, 440, 520, 300),
        ui_manager,
        window_display_title="Log",
        resizable=True
    )
    log_win.close_window_button.hide()

    controls_win.set_minimum_dimensions((280, 300))
    log_win.set_minimum_dimensions((520, 220))

    puzzle_dropdown = make_puzzle_dropdown([], ui_manager, controls_win)
    btn_load = pygame_gui.elements.UIButton(pygame.Rect(10, 52, 240, 36), "Load", ui_manager, container=controls_win)
    btn_check = pygame_gui.elements.UIButton(pygame.Rect(10, 98, 240, 36), "Check", ui_manager, container=controls_win)
    btn_solution = pygame_gui.elements.UIButton(pygame.Rect(10, 144, 240, 36), "Show Solution", ui_manager, container=controls_win)
    btn_reset = pygame_gui.elements.UIButton(pygame.Rect(10, 190, 240, 36), "Reset", ui_manager, container=controls_win)

    log_box = pygame_gui.elements.UITextBox(
        html_text="",
        relative_rect=pygame.Rect(10, 10, 500, 200),
        manager=ui_manager,
        container=log_win,
        anchors={"left": "left", "right": "right", "top": "top", "bottom": "bottom"}
    )
    btn_clear_log = pygame_gui.elements.UIButton(
        pygame.Rect(10, -40, 120, 30),
        "Clear",
        ui_manager,
        container=log_win,
        anchors={"left": "left", "bottom": "bottom"}
    )

    camera = Camera()
    base_cell_size = rooms_config.BASE_CELL_SIZE
    renderer = BoardRenderer(base_cell_size, font)
    session = PuzzleSession(renderer)

    entries_by_label: Dict[str, PuzzleEntry] = {}
    selected_label: Optional[str] = None
    solution_image: Optional[pygame.Surface] = None
    message = ""
    message_color = grid_style.COLOR_MSG_SUCCESS

    def center_camera_on_board() -> None:
        if session.puzzle is None:
            return
        sw, sh = screen.get_size()
        grid_w = session.puzzle.width * base_cell_size
        grid_h = session.puzzle.height * base_cell_size
        camera.zoom = 1.0
        camera.offset_x = (sw - grid_w) * 0.5
        camera.offset_y = (sh - grid_h) * 0.5

    log_lines: List[str] = []

    def log_append(msg: str) -> None:
        if not msg:
            return
        for line in msg.splitlines():
            line = line.strip()
            if line:
                log_lines.append(line)
        if len(log_lines) > rooms_config.MAX_LOG_LINES:
            del log_lines[0:len(log_lines) - rooms_config.MAX_LOG_LINES]

        html = "<br>".join(html_escape(ln) for ln in log_lines)
        log_box.set_text(html)

        # Auto-scroll to bottom
        if log_box.scroll_bar is not None:
            log_box.scroll_bar.set_scroll_from_start_percentage(1.0)

    def log_clear() -> None:
        log_lines.clear()
        log_box.set_text("")

    def show_message(msg: str, ok: bool = True) -> None:
        nonlocal message, message_color
        message = msg
        message_color = grid_style.COLOR_MSG_SUCCESS if ok else grid_style.COLOR_MSG_ERROR
        log_append(msg)
        if ok:
            logger.info(msg)
        else:
            logger.warning(msg)

    def request_load(entry: PuzzleEntry) -> None:
        gen = session.begin_load()
        worker.send(WorkerCommand(kind="load_puzzle", payload={"path": entry.path, "generation": gen}))
        show_message(f"Loading {entry.label}...")

    def is_over_ui(pos: Tuple[int, int]) -> bool:
        for w in (controls_win, log_win):
            if w.visible and w.get_abs_rect().collidepoint(pos):
                return True
        return False

    worker = LoaderWorker(rooms_config.PUZZLE_DIR)
    worker.start()
    worker.send(WorkerCommand(kind="load_index"))
    log_append("Ready.")

    panning = False
    pan_last: Optional[Tuple[int, int]] = None
    lmb_down_pos: Optional[Tuple[int, int]] = None
    lmb_dragging = False
    lmb_down_over_ui = False

    running = True
    while running:
        time_delta = clock.tick(rooms_config.FPS) / 1000.0

        while True:
            res = worker.try_recv()
            if res is None:
                break

            generation = res.payload.get("generation")
            if generation is not None and not session.is_current(generation):
                logger.debug("Dropping stale %s result (generation %s)", res.kind, generation)
                continue

            if res.kind == "error":
                if res.payload.get("request") == "load_solution_image":
                    log_append(res.payload.get("message", "Solution image unavailable."))
                else:
                    show_message(res.payload.get("message", "Load failed."), ok=False)

            elif res.kind == "index_loaded":
                entries: List[PuzzleEntry] = res.payload["entries"]
                entries_by_label = {e.label: e for e in entries}
                puzzle_dropdown.kill()
                puzzle_dropdown = make_puzzle_dropdown(entries, ui_manager, controls_win)
                selected_label = entries[0].label
                log_append(f"Found {len(entries)} puzzles.")
                request_load(entries[0])

            elif res.kind == "puzzle_loaded":
                try:
                    session.load_puzzle(res.payload["puzzle"])
                except ValidationError as e:
                    show_message(f"Invalid puzzle: {e}", ok=False)
                else:
                    solution_image = None
                    sync_solution_button(btn_solution, session)
                    center_camera_on_board()
                    show_message(f"Loaded puzzle {session.puzzle.id}.")

            elif res.kind == "solution_image_loaded":
                if session.solution_shown:
                    solution_image = res.payload["image"]

        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                running = False
                break

            if event.type == pygame.VIDEORESIZE:
                screen = pygame.display.set_mode(event.size, pygame.RESIZABLE)
                ui_manager.set_window_resolution(event.size)

            ui_manager.process_events(event)

            if event.type == pygame_gui.UI_DROP_DOWN_MENU_CHANGED and event.ui_element == puzzle_dropdown:
                selected_label = event.text

            if event.type == pygame_gui.UI_BUTTON_PRESSED:
                if event.ui_element == btn_clear_log:
                    log_clear()

                elif event.ui_element == btn_load:
                    entry = entries_by_label.get(selected_label) if selected_label else None
                    if entry is None:
                        show_message("No puzzle selected.", ok=False)
                    else:
                        request_load(entry)

                elif event.ui_element == btn_check:
                    msg = session.check_message()
                    show_message(msg, ok=(msg == MSG_SOLVED))

                elif event.ui_element == btn_solution:
                    try:
                        shown = session.toggle_solution_view()
                    except NoSolutionError as e:
                        show_message(f"Cannot show solution: {e}", ok=False)
                    else:
                        sync_solution_button(btn_solution, session)
                        if shown:
                            worker.send(WorkerCommand(
                                kind="load_solution_image",
                                payload={"id": session.puzzle.id, "generation": session.generation}
                            ))
                        else:
                            solution_image = None

                elif event.ui_element == btn_reset:
                    session.reset()
                    solution_image = None
                    sync_solution_button(btn_solution, session)
                    log_append("Board reset.")

            if event.type == pygame.MOUSEWHEEL:
                if not is_over_ui(pygame.mouse.get_pos()):
                    if event.y > 0:
                        camera.zoom_at(pygame.mouse.get_pos(), 1.1, rooms_config.MIN_ZOOM, rooms_config.MAX_ZOOM)
                    elif event.y < 0:
                        camera.zoom_at(pygame.mouse.get_pos(), 1.0 / 1.1, rooms_config.MIN_ZOOM, rooms_config.MAX_ZOOM)

            if event.type == pygame.MOUSEBUTTONDOWN:
                if event.button == 2:
                    if not is_over_ui(event.pos):
                        panning = True
                        pan_last = event.pos

                if event.button == 1:
                    lmb_down_pos = event.pos
                    lmb_dragging = False
                    lmb_down_over_ui = is_over_ui(event.pos)
                    if not lmb_down_over_ui:
                        pan_last = event.pos
                        panning = False

            if event.type == pygame.MOUSEMOTION:
                if lmb_down_pos is not None and not lmb_down_over_ui and not lmb_dragging:
                    mx, my = event.pos
                    sx, sy = lmb_down_pos
                    if abs(mx - sx) >= rooms_config.DRAG_THRESHOLD_PX or abs(my - sy) >= rooms_config.DRAG_THRESHOLD_PX:
                        lmb_dragging = True
                        panning = True

                if panning and pan_last is not None:
                    mx, my = event.pos
                    lx, ly = pan_last
                    camera.offset_x += mx - lx
                    camera.offset_y += my - ly
                    pan_last = event.pos

            if event.type == pygame.MOUSEBUTTONUP:
                if event.button == 2:
                    panning = False
                    pan_last = None

                if event.button == 1:
                    if lmb_down_pos is not None and not lmb_down_over_ui and not lmb_dragging:
                        cell = pick_cell_from_mouse(session.puzzle, camera, base_cell_size, event.pos)
                        if cell is not None:
                            x, y = cell
                            session.handle_cell_click(x, y)

                    lmb_down_pos = None
                    lmb_dragging = False
                    lmb_down_over_ui = False
                    panning = False
                    pan_last = None

        ui_manager.update(time_delta)

        screen.fill(grid_style.COLOR_BG)
        renderer.draw(screen, camera)

        if solution_image is not None and session.puzzle is not None:
            board_w = session.puzzle.width * base_cell_size
            sx, sy = camera.world_to_screen(board_w + 24, 0)
            rect = solution_image.get_rect(topleft=(int(sx), int(sy)))
            screen.blit(solution_image, rect)
            pygame.draw.rect(screen, grid_style.COLOR_SOLUTION_FRAME, rect.inflate(4, 4), 2)

        ui_manager.draw_ui(screen)

        if message:
            msg_surf = font.render(message, True, message_color)
            screen.blit(msg_surf, (screen.get_width() - msg_surf.get_width() - 12, 12))
        if session.puzzle is None:
            help_surf = small_font.render("Waiting for a puzzle...", True, (220, 220, 220))
            screen.blit(help_surf, (screen.get_width() - help_surf.get_width() - 12, 40))

        pygame.display.flip()

    worker.stop()
    pygame.quit()


if __name__ == "__main__":
    main()
