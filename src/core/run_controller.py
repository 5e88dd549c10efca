# src/core/run_controller.py
#!/usr/bin/env python3
"""
Run controller - owns one maze session and lets exactly one search run at a time.

Lifecycle:   idle -> running(name) -> idle

- start(name): admitted only from idle; a second request while running is dropped.
  The run itself happens on a single background worker. After every expansion the
  worker publishes a "scan" event and sleeps scan_delay; if a path was found it is
  then revealed one cell at a time ("reveal" events, reveal_delay apart). Stats for
  the algorithm are published only once the reveal is complete.
- generate() / clear(): refused while a run is in flight.

Observers either read the snapshot accessors (state, grid, visited, head,
active_paths, stats, status_message) or drain the progress queue.
"""

import logging
import queue
import random
import threading
import time
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Callable, Dict, FrozenSet, List, Optional

from src.core.config import MazeConfig
from src.core.maze_gen import MazeGenerator
from src.core.search import ALGORITHMS, canonical_name, solve
from src.core.types import (AlgoStats, Cell, Grid, ProgressEvent, RunState,
                            SearchResult, StepResult)

logger = logging.getLogger(__name__)

IDLE = RunState()

# oldest events are dropped past this, so a shell that never polls costs nothing
EVENT_BACKLOG = 4096


class RunController:
    def __init__(self, config: Optional[MazeConfig] = None, rng: Optional[random.Random] = None,
                 grid: Optional[Grid] = None, sleep: Callable[[float], None] = time.sleep,
                 max_events: int = EVENT_BACKLOG):
        self.config = config or MazeConfig()
        self.rng = rng or random.Random(self.config.seed)
        self.generator = MazeGenerator(self.config, self.rng)
        # DFS shuffles draw from their own stream so runs never shift the next maze
        self.search_rng = random.Random(self.rng.random())
        self._sleep = sleep

        self._lock = threading.Lock()
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="maze-run")
        self._events: "queue.Queue[ProgressEvent]" = queue.Queue(maxsize=max_events)
        self._seq = 0

        self._state = IDLE
        self._grid: Optional[Grid] = None
        self._visited: set = set()
        self._head: Optional[Cell] = None
        self._active_paths: Dict[str, List[Cell]] = {}
        self._stats: Dict[str, AlgoStats] = {}
        self._status = ""

        if grid is not None:
            with self._lock:
                self._install(grid, "Map Loaded. Ready.")
        else:
            self.generate()

    # -------------------- read accessors --------------------

    @property
    def state(self) -> RunState:
        with self._lock:
            return self._state

    @property
    def running(self) -> bool:
        return self.state.running

    @property
    def grid(self) -> Grid:
        with self._lock:
            return self._grid

    @property
    def visited(self) -> FrozenSet[Cell]:
        with self._lock:
            return frozenset(self._visited)

    @property
    def head(self) -> Optional[Cell]:
        with self._lock:
            return self._head

    @property
    def active_paths(self) -> Dict[str, List[Cell]]:
        with self._lock:
            return {k: list(v) for k, v in self._active_paths.items()}

    @property
    def stats(self) -> Dict[str, AlgoStats]:
        with self._lock:
            return dict(self._stats)

    @property
    def status_message(self) -> str:
        with self._lock:
            return self._status

    # -------------------- progress channel --------------------

    def poll_events(self) -> List[ProgressEvent]:
        """Everything published since the last poll, oldest first. Never blocks."""
        out: List[ProgressEvent] = []
        while True:
            try:
                out.append(self._events.get_nowait())
            except queue.Empty:
                return out

    def next_event(self, timeout: Optional[float] = None) -> ProgressEvent:
        """Block for the next event; raises queue.Empty on timeout."""
        return self._events.get(timeout=timeout)

    def _publish(self, kind: str, algorithm: Optional[str] = None,
                 cell: Optional[Cell] = None, message: str = "") -> None:
        # caller holds self._lock, so seq order == queue order
        self._seq += 1
        event = ProgressEvent(kind, self._seq, algorithm, cell, message)
        while True:
            try:
                self._events.put_nowait(event)
                return
            except queue.Full:
                try:
                    self._events.get_nowait()
                except queue.Empty:
                    pass  # a poller emptied it meanwhile

    # -------------------- commands --------------------

    def generate(self) -> bool:
        """New maze, all transient state wiped. False if a run is in flight."""
        with self._lock:
            if self._state.running:
                logger.debug("generate refused: %s is running", self._state.algorithm)
                return False
            # built outside the swap so readers never see a half-carved grid
            grid = self.generator.generate()
            self._install(grid, "Map Generated. Ready.")
            return True

    def clear(self) -> bool:
        """Wipe paths, visited cells and stats but keep the maze."""
        with self._lock:
            if self._state.running:
                logger.debug("clear refused: %s is running", self._state.algorithm)
                return False
            self._reset_transient()
            self._status = "Cleared."
            self._publish("cleared", message=self._status)
            return True

    def start(self, name: str) -> Optional["Future[SearchResult]"]:
        """
        Admit and launch one algorithm. Returns the run's Future, or None when
        another run already holds the gate.
        """
        name = canonical_name(name)
        with self._lock:
            if self._state.running:
                logger.debug("start(%s) dropped: %s is running", name, self._state.algorithm)
                return None
            self._state = RunState("running", name)
            self._visited.clear()
            self._head = None
            self._active_paths.pop(name, None)
            grid = self._grid
            self._status = f"Running {name}..."
            self._publish("started", name, message=self._status)
        try:
            return self._executor.submit(self._run, name, grid)
        except RuntimeError:
            # executor already shut down: give the gate back before reporting
            with self._lock:
                self._state = IDLE
                self._status = f"{name} Failed!"
                self._publish("failed", name, message=self._status)
            raise

    def close(self) -> None:
        self._executor.shutdown(wait=True)

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()

    # -------------------- internals --------------------

    def _install(self, grid: Grid, message: str) -> None:
        self._grid = grid
        self._reset_transient()
        self._status = message
        self._publish("generated", message=message)

    def _reset_transient(self) -> None:
        self._visited.clear()
        self._head = None
        self._active_paths.clear()
        self._stats = {name: AlgoStats() for name in ALGORITHMS}

    def _on_scan(self, name: str, res: StepResult) -> None:
        with self._lock:
            self._head = res.current
            self._visited.update(res.marked)
            self._publish("scan", name, res.current)
        if self.config.scan_delay:
            self._sleep(self.config.scan_delay)

    def _run(self, name: str, grid: Grid) -> SearchResult:
        try:
            result = solve(grid, name, rng=self.search_rng, on_step=lambda res: self._on_scan(name, res))
        except Exception:
            # InvariantViolation or worse: free the gate, then let the Future carry it
            logger.exception("%s aborted", name)
            with self._lock:
                self._head = None
                self._state = IDLE
                self._status = f"{name} Failed!"
                self._publish("failed", name, message=self._status)
            raise

        if not result.found:
            with self._lock:
                self._head = None
                self._stats[name] = AlgoStats("failed")
                self._state = IDLE
                self._status = f"{name} Failed!"
                self._publish("failed", name, message=self._status)
            logger.info("%s found no path after %d expansions", name, len(result.trace))
            return result

        with self._lock:
            self._head = None
            self._active_paths[name] = []
        for cell in result.path:
            with self._lock:
                self._active_paths[name].append(cell)
                self._publish("reveal", name, cell)
            if self.config.reveal_delay:
                self._sleep(self.config.reveal_delay)

        with self._lock:
            self._stats[name] = AlgoStats("done", result.steps, result.cost)
            self._state = IDLE
            self._status = f"{name} Finished."
            self._publish("finished", name, message=self._status)
        logger.info("%s finished: %d steps, cost %d, %d cells expanded",
                    name, result.steps, result.cost, len(result.trace))
        return result
