import json
import logging
import queue
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Dict, Any, List, Union

import pygame

import rooms_config
from rooms_model import IndexLoadError, PuzzleData, PuzzleError, PuzzleLoadError, parse_puzzle

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


@dataclass(frozen=True)
class PuzzleEntry:
    id: str
    path: Path
    label: str


def problem_path(puzzle_dir: PathLike, puzzle_id: str) -> Path:
    return Path(puzzle_dir) / rooms_config.PROBLEM_FILE_PATTERN.format(id=puzzle_id)


def solution_image_path(puzzle_dir: PathLike, puzzle_id: str) -> Path:
    return Path(puzzle_dir) / rooms_config.SOLUTION_IMAGE_PATTERN.format(id=puzzle_id)


def _id_from_filename(path: Path) -> str:
    stem = path.stem
    prefix = rooms_config.PROBLEM_FILE_PATTERN.split("{id}")[0]
    if prefix and stem.startswith(prefix):
        return stem[len(prefix):]
    return stem


def _scan_dir(puzzle_dir: Path) -> List[PuzzleEntry]:
    entries = []
    for path in sorted(puzzle_dir.glob("*.json")):
        if path.name == rooms_config.INDEX_FILE:
            continue
        pid = _id_from_filename(path)
        entries.append(PuzzleEntry(id=pid, path=path, label=f"Puzzle {pid}"))
    return entries


def load_index(puzzle_dir: PathLike) -> List[PuzzleEntry]:
    """Read the puzzle list.

    The index is either a list of descriptors ``[{"id": ...}, ...]`` or an
    object ``{"files": ["name.json", ...]}``. Without an index file the
    directory is scanned for puzzle JSON files instead.
    """
    puzzle_dir = Path(puzzle_dir)
    index_path = puzzle_dir / rooms_config.INDEX_FILE

    if not index_path.exists():
        logger.info("No %s in %s, scanning directory", rooms_config.INDEX_FILE, puzzle_dir)
        entries = _scan_dir(puzzle_dir) if puzzle_dir.is_dir() else []
        if not entries:
            raise IndexLoadError(f"Puzzle list not found: {index_path}")
        return entries

    try:
        with open(index_path, "r", encoding="utf-8") as f:
            raw = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise IndexLoadError(f"Cannot read {index_path}: {e}") from e

    entries: List[PuzzleEntry] = []
    if isinstance(raw, dict) and isinstance(raw.get("files"), list):
        for name in raw["files"]:
            path = puzzle_dir / str(name)
            entries.append(PuzzleEntry(id=_id_from_filename(path), path=path, label=str(name)))
    elif isinstance(raw, list):
        for item in raw:
            if not isinstance(item, dict) or "id" not in item:
                logger.debug("Skipping index entry without id: %r", item)
                continue
            pid = str(item["id"])
            entries.append(PuzzleEntry(id=pid, path=problem_path(puzzle_dir, pid), label=f"Puzzle {pid}"))
    else:
        raise IndexLoadError(f"Unrecognised index format in {index_path}")

    if not entries:
        raise IndexLoadError("The index contains no puzzles.")
    return entries


def load_puzzle_file(path: PathLike) -> PuzzleData:
    """Read and validate one puzzle file; ValidationError propagates unchanged."""
    path = Path(path)
    try:
        with open(path, "r", encoding="utf-8") as f:
            raw = json.load(f)
    except FileNotFoundError as e:
        raise PuzzleLoadError(f"Puzzle file not found: {path}") from e
    except (OSError, json.JSONDecodeError) as e:
        raise PuzzleLoadError(f"Cannot read puzzle {path}: {e}") from e
    return parse_puzzle(raw, default_id=_id_from_filename(path))


# ----------------------------
# Background loading
# ----------------------------

@dataclass
class WorkerCommand:
    kind: str
    payload: Optional[Dict[str, Any]] = None

@dataclass
class WorkerResult:
    kind: str
    payload: Dict[str, Any]

class LoaderWorker:
    """Loads puzzle assets off the UI thread.

    Commands are processed in order; results are polled with try_recv(). A
    load_puzzle command carries a generation number that is echoed back, so
    the receiver can drop answers to requests it has since superseded.
    """

    def __init__(self, puzzle_dir: PathLike = rooms_config.PUZZLE_DIR) -> None:
        self.puzzle_dir = Path(puzzle_dir)
        self._cmd_q: "queue.Queue[WorkerCommand]" = queue.Queue()
        self._res_q: "queue.Queue[WorkerResult]" = queue.Queue()
        self._stop_evt = threading.Event()
        self._thread = threading.Thread(target=self._run, name="LoaderWorker", daemon=True)

    def start(self) -> None:
        self._thread.start()

    def stop(self) -> None:
        self._stop_evt.set()
        try:
            self._cmd_q.put_nowait(WorkerCommand(kind="stop"))
        except queue.Full:
            pass
        self._thread.join(timeout=1.0)

    def send(self, cmd: WorkerCommand) -> None:
        self._cmd_q.put(cmd)

    def try_recv(self) -> Optional[WorkerResult]:
        try:
            return self._res_q.get_nowait()
        except queue.Empty:
            return None

    def recv(self, timeout: float) -> Optional[WorkerResult]:
        try:
            return self._res_q.get(timeout=timeout)
        except queue.Empty:
            return None

    def _error(self, kind: str, message: str, generation: Optional[int] = None) -> None:
        payload: Dict[str, Any] = {"message": message, "request": kind}
        if generation is not None:
            payload["generation"] = generation
        self._res_q.put(WorkerResult(kind="error", payload=payload))

    def _run(self) -> None:
        while not self._stop_evt.is_set():
            try:
                cmd = self._cmd_q.get(timeout=0.05)
            except queue.Empty:
                continue

            if cmd.kind == "stop":
                return

            payload = cmd.payload or {}

            if cmd.kind == "load_index":
                try:
                    entries = load_index(self.puzzle_dir)
                    self._res_q.put(WorkerResult(kind="index_loaded", payload={"entries": entries}))
                except PuzzleError as e:
                    self._error(cmd.kind, str(e))
                continue

            if cmd.kind == "load_puzzle":
                generation = payload.get("generation")
                path = payload.get("path")
                if path is None and payload.get("id") is not None:
                    path = problem_path(self.puzzle_dir, str(payload["id"]))
                if path is None:
                    self._error(cmd.kind, "Load missing puzzle path.", generation)
                    continue
                try:
                    puzzle = load_puzzle_file(path)
                    self._res_q.put(WorkerResult(kind="puzzle_loaded", payload={"puzzle": puzzle, "generation": generation}))
                except PuzzleError as e:
                    self._error(cmd.kind, str(e), generation)
                continue

            if cmd.kind == "load_solution_image":
                generation = payload.get("generation")
                image_path = solution_image_path(self.puzzle_dir, str(payload.get("id", "")))
                try:
                    image = pygame.image.load(str(image_path))
                    self._res_q.put(WorkerResult(kind="solution_image_loaded", payload={"image": image, "generation": generation}))
                except (pygame.error, OSError) as e:
                    self._error(cmd.kind, f"Solution image unavailable: {image_path} ({e})", generation)
                continue

            self._error(cmd.kind, f"Unknown command: {cmd.kind}")
