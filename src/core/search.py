# src/core/search.py
#!/usr/bin/env python3
"""
Grid search algorithms - one expansion per step() so a caller can pace and watch them.

Every algorithm implements the same small API:
- init(grid) - reset() - step() -> StepResult

BFS / DFS:
- Unweighted. A cell is marked visited when it is pushed, never pushed twice.
- DFS shuffles the unvisited neighbors of each expanded cell before pushing them.

Dijkstra / A*:
- Weighted by the cost of the cell being entered.
- Lazy deletion: stale heap entries are skipped when popped, no decrease-key.
- A* orders the heap by g + Manhattan(goal) but relaxes on g alone.

All four stop the moment the goal is expanded, or report "no_path" once the
frontier is empty.
"""

import heapq
import random
from collections import deque
from dataclasses import dataclass, field
from math import inf
from typing import Callable, Deque, Dict, List, Optional, Tuple

from src.core.types import StepResult, Grid, Cell, SearchResult, InvariantViolation


# -------------------- shared helpers --------------------

def manhattan(a: Cell, b: Cell) -> int:
    return abs(a[0] - b[0]) + abs(a[1] - b[1])


def reconstruct_path(parent: Dict[Cell, Cell], start: Cell, goal: Cell) -> List[Cell]:
    """Walk parent links back from goal to start, return start -> goal."""
    path: List[Cell] = [goal]
    cur = goal
    while cur != start:
        if cur not in parent:
            raise InvariantViolation(f"path from {goal} breaks at {cur}, never reaches start {start}")
        cur = parent[cur]
        path.append(cur)
        if len(path) > len(parent) + 1:
            raise InvariantViolation(f"parent links from {goal} form a cycle")
    path.reverse()
    return path


def path_cost(grid: Grid, path: List[Cell]) -> int:
    """Sum of the cost of every cell entered; the start cell itself is free."""
    if not path or path[0] != grid.start:
        raise InvariantViolation(f"path does not begin at start {grid.start}")
    total = 0
    for prev, cur in zip(path, path[1:]):
        if manhattan(prev, cur) != 1:
            raise InvariantViolation(f"non-adjacent step {prev} -> {cur}")
        total += grid.cost_of(cur)
    return total


# -------------------- common driver --------------------

@dataclass
class GridSearch:
    name: str = "search"

    grid: Optional[Grid] = None
    parent: Dict[Cell, Cell] = field(default_factory=dict)
    visited: set = field(default_factory=set)
    expanded_count: int = 0
    done: bool = False
    no_path: bool = False
    path: Optional[List[Cell]] = None
    _fresh: List[Cell] = field(default_factory=list)   # marked since the last step()

    def init(self, grid: Grid) -> None:
        self.grid = grid
        self.reset()

    def reset(self) -> None:
        if self.grid is None:
            return
        self.parent.clear()
        self.visited.clear()
        self._fresh.clear()
        self.expanded_count = 0
        self.done = False
        self.no_path = False
        self.path = None
        self._clear_frontier()
        self._seed(self.grid.start)

    # hooks for the concrete algorithms
    def _clear_frontier(self) -> None:
        raise NotImplementedError

    def _seed(self, start: Cell) -> None:
        raise NotImplementedError

    def _pop(self) -> Optional[Cell]:
        raise NotImplementedError

    def _relax(self, u: Cell) -> None:
        raise NotImplementedError

    def _frontier_size(self) -> int:
        raise NotImplementedError

    def _mark(self, c: Cell) -> None:
        if c not in self.visited:
            self.visited.add(c)
            self._fresh.append(c)

    def _drain_marked(self) -> List[Cell]:
        out = self._fresh[:]
        self._fresh.clear()
        return out

    def step(self) -> StepResult:
        if self.grid is None:
            return StepResult(status="idle", metrics={"algo": self.name})

        if self.done:
            return StepResult(status="done", path=self.path, metrics=self._metrics())

        if self.no_path:
            return StepResult(status="no_path", metrics=self._metrics())

        u = self._pop()
        if u is None:
            self.no_path = True
            return StepResult(status="no_path", marked=self._drain_marked(), metrics=self._metrics())

        if self.grid.is_block(u):
            raise InvariantViolation(f"{self.name} expanded wall cell {u}")
        self.expanded_count += 1

        if u == self.grid.goal:
            self.done = True
            self.path = reconstruct_path(self.parent, self.grid.start, u)
            return StepResult(status="done", current=u, marked=self._drain_marked(),
                              path=self.path, metrics=self._metrics())

        self._relax(u)
        return StepResult(status="running", current=u, marked=self._drain_marked(),
                          metrics=self._metrics())

    def _metrics(self) -> dict:
        return {
            "algo": self.name,
            "expanded": self.expanded_count,
            "frontier_size": self._frontier_size(),
            "visited_count": len(self.visited),
            "path_len": len(self.path) if self.path else 0,
            "total_cost": path_cost(self.grid, self.path) if self.path else None,
        }


# -------------------- unweighted --------------------

@dataclass
class BFSAlgo(GridSearch):
    name: str = "BFS"
    queue: Deque[Cell] = field(default_factory=deque)

    def _clear_frontier(self) -> None:
        self.queue.clear()

    def _seed(self, start: Cell) -> None:
        self.queue.append(start)
        self._mark(start)

    def _pop(self) -> Optional[Cell]:
        return self.queue.popleft() if self.queue else None

    def _relax(self, u: Cell) -> None:
        for v in self.grid.neighbors4(u):
            if v not in self.visited:
                self._mark(v)
                self.parent[v] = u
                self.queue.append(v)

    def _frontier_size(self) -> int:
        return len(self.queue)


@dataclass
class DFSAlgo(GridSearch):
    name: str = "DFS"
    stack: List[Cell] = field(default_factory=list)
    rng: random.Random = field(default_factory=random.Random)

    def _clear_frontier(self) -> None:
        self.stack.clear()

    def _seed(self, start: Cell) -> None:
        self.stack.append(start)
        self._mark(start)

    def _pop(self) -> Optional[Cell]:
        return self.stack.pop() if self.stack else None

    def _relax(self, u: Cell) -> None:
        fresh = [v for v in self.grid.neighbors4(u) if v not in self.visited]
        self.rng.shuffle(fresh)
        for v in fresh:
            self._mark(v)
            self.parent[v] = u
            self.stack.append(v)

    def _frontier_size(self) -> int:
        return len(self.stack)


# -------------------- weighted --------------------

@dataclass
class DijkstraAlgo(GridSearch):
    name: str = "Dijkstra"
    open_pq: List[Tuple[int, Cell]] = field(default_factory=list)   # (g, cell)
    g: Dict[Cell, int] = field(default_factory=dict)

    def _clear_frontier(self) -> None:
        self.open_pq.clear()
        self.g.clear()

    def _seed(self, start: Cell) -> None:
        self.g[start] = 0
        heapq.heappush(self.open_pq, (0, start))

    def _pop(self) -> Optional[Cell]:
        while self.open_pq:
            g_u, u = heapq.heappop(self.open_pq)
            if g_u > self.g.get(u, inf):
                continue  # stale
            self._mark(u)
            return u
        return None

    def _relax(self, u: Cell) -> None:
        for v in self.grid.neighbors4(u):
            alt = self.g[u] + self.grid.cost_of(v)
            if alt < self.g.get(v, inf):
                self.g[v] = alt
                self.parent[v] = u
                heapq.heappush(self.open_pq, (alt, v))

    def _frontier_size(self) -> int:
        return len(self.open_pq)


@dataclass
class AStarAlgo(GridSearch):
    """
    Heap entries are (f, h, -g, seq, cell): lower f, then lower h, then deeper g,
    then FIFO by seq. Manhattan distance is admissible because every legal move
    is axis-aligned and costs at least 1.
    """
    name: str = "A*"
    open_pq: List[Tuple[int, int, int, int, Cell]] = field(default_factory=list)
    g: Dict[Cell, int] = field(default_factory=dict)
    seq: int = 0

    def _bump(self) -> int:
        self.seq += 1
        return self.seq

    def _h(self, c: Cell) -> int:
        return manhattan(c, self.grid.goal)

    def _clear_frontier(self) -> None:
        self.open_pq.clear()
        self.g.clear()
        self.seq = 0

    def _seed(self, start: Cell) -> None:
        self.g[start] = 0
        h0 = self._h(start)
        heapq.heappush(self.open_pq, (h0, h0, 0, self._bump(), start))

    def _pop(self) -> Optional[Cell]:
        while self.open_pq:
            _, _, neg_g_u, _, u = heapq.heappop(self.open_pq)
            if -neg_g_u > self.g.get(u, inf):
                continue  # stale
            self._mark(u)
            return u
        return None

    def _relax(self, u: Cell) -> None:
        for v in self.grid.neighbors4(u):
            alt = self.g[u] + self.grid.cost_of(v)
            if alt < self.g.get(v, inf):
                self.g[v] = alt
                self.parent[v] = u
                h_v = self._h(v)
                heapq.heappush(self.open_pq, (alt + h_v, h_v, -alt, self._bump(), v))

    def _frontier_size(self) -> int:
        return len(self.open_pq)


# -------------------- registry + run-to-completion --------------------

ALGORITHMS = {
    "BFS": BFSAlgo,
    "DFS": DFSAlgo,
    "Dijkstra": DijkstraAlgo,
    "A*": AStarAlgo,
}
ALIASES = {"AStar": "A*"}


def canonical_name(name: str) -> str:
    name = ALIASES.get(name, name)
    if name not in ALGORITHMS:
        raise ValueError(f"unknown algorithm {name!r}; expected one of {', '.join(ALGORITHMS)}")
    return name


def make_algo(name: str, rng: Optional[random.Random] = None) -> GridSearch:
    name = canonical_name(name)
    if name == "DFS" and rng is not None:
        return DFSAlgo(rng=rng)
    return ALGORITHMS[name]()


def solve(grid: Grid, name: str, rng: Optional[random.Random] = None,
          on_step: Optional[Callable[[StepResult], None]] = None) -> SearchResult:
    """Drive one algorithm to the end. on_step sees every expansion, in order."""
    algo = make_algo(name, rng)
    algo.init(grid)
    trace: List[Cell] = []
    while True:
        res = algo.step()
        if res.current is not None:
            trace.append(res.current)
            if on_step is not None:
                on_step(res)
        if res.status == "done":
            return SearchResult(algo.name, True, list(res.path), path_cost(grid, res.path), trace)
        if res.status == "no_path":
            return SearchResult(algo.name, False, trace=trace)
