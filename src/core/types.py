# src/core/types.py
#!/usr/bin/env python3
from dataclasses import dataclass, field
from typing import List, Tuple, Optional, Dict, Any, Iterable, Iterator

from src.core.terrain import CellKind, cost, is_passable, SYMBOLS, KIND_BY_SYMBOL

Cell = Tuple[int, int]  # (row, col)

# up, down, left, right; diagonals are never legal moves
DIRECTIONS: Tuple[Cell, ...] = ((-1, 0), (1, 0), (0, -1), (0, 1))


class InvariantViolation(AssertionError):
    """An algorithm broke a rule it must never break (stepped on a wall, lost the start...)."""


@dataclass
class Grid:
    rows: int
    cols: int
    cells: List[List[CellKind]]        # [row][col]
    start: Cell
    goal: Cell

    def in_bounds(self, c: Cell) -> bool:
        r, col = c
        return 0 <= r < self.rows and 0 <= col < self.cols

    def kind_at(self, c: Cell) -> CellKind:
        r, col = c
        return self.cells[r][col]

    def is_block(self, c: Cell) -> bool:
        return not is_passable(self.kind_at(c))

    def cost_of(self, c: Cell) -> int:
        if self.is_block(c):
            raise InvariantViolation(f"Asked cost of a WALL cell {c}")
        return cost(self.kind_at(c))

    def neighbors4(self, c: Cell) -> List[Cell]:
        """Valid moves from c: in bounds and not a wall. Terrain cost plays no part here."""
        r, col = c
        out: List[Cell] = []
        for dr, dc in DIRECTIONS:
            n = (r + dr, col + dc)
            if self.in_bounds(n) and not self.is_block(n):
                out.append(n)
        return out

    def passable_cells(self) -> Iterator[Cell]:
        for r in range(self.rows):
            for c in range(self.cols):
                if is_passable(self.cells[r][c]):
                    yield (r, c)

    def copy(self) -> "Grid":
        return Grid(self.rows, self.cols, [list(row) for row in self.cells], self.start, self.goal)

    def to_strings(self) -> List[str]:
        return ["".join(SYMBOLS[k] for k in row) for row in self.cells]

    @classmethod
    def from_strings(cls, lines: Iterable[str], start: Optional[Cell] = None,
                     goal: Optional[Cell] = None) -> "Grid":
        """Build a grid from its text form. Start/goal default to (1,1) and (rows-2, cols-2)."""
        lines = [ln for ln in lines if ln]
        rows, cols = len(lines), len(lines[0]) if lines else 0
        assert rows > 0 and all(len(ln) == cols for ln in lines), "ragged grid text"
        try:
            cells = [[KIND_BY_SYMBOL[ch] for ch in ln] for ln in lines]
        except KeyError as ex:
            raise ValueError(f"unknown cell symbol {ex.args[0]!r}") from None
        start = start if start is not None else (1, 1)
        goal = goal if goal is not None else (rows - 2, cols - 2)
        return cls(rows, cols, cells, start, goal)


@dataclass
class StepResult:
    status: str                   # "idle" | "running" | "done" | "no_path"
    current: Optional[Cell] = None
    marked: List[Cell] = field(default_factory=list)
    path: Optional[List[Cell]] = None
    metrics: Dict[str, Any] = field(default_factory=dict)


@dataclass
class SearchResult:
    algorithm: str
    found: bool
    path: List[Cell] = field(default_factory=list)
    cost: Optional[int] = None
    trace: List[Cell] = field(default_factory=list)   # expansion order

    @property
    def steps(self) -> Optional[int]:
        return len(self.path) - 1 if self.found else None


@dataclass(frozen=True)
class RunState:
    status: str = "idle"          # "idle" | "running"
    algorithm: Optional[str] = None

    @property
    def running(self) -> bool:
        return self.status == "running"


@dataclass(frozen=True)
class AlgoStats:
    status: str = "not_run"       # "not_run" | "done" | "failed"
    steps: Optional[int] = None
    cost: Optional[int] = None


@dataclass(frozen=True)
class ProgressEvent:
    kind: str                     # generated | cleared | started | scan | reveal | failed | finished
    seq: int
    algorithm: Optional[str] = None
    cell: Optional[Cell] = None
    message: str = ""
