# src/core/maze_gen.py
#!/usr/bin/env python3
"""
Maze generator: randomized Prim carve over odd coordinates, a braid pass that
opens loops, then a terrain re-skin of every passable cell.

The outer ring is never carved. Start and exit are forced to grass at the end,
whatever the carve and re-skin did to them.
"""

import logging
import random
from typing import List, Optional, Tuple

from src.core.config import MazeConfig
from src.core.terrain import CellKind
from src.core.types import Grid, Cell, DIRECTIONS

logger = logging.getLogger(__name__)

WallCandidate = Tuple[int, int, int, int]  # (row, col, dr, dc)


class MazeGenerator:
    def __init__(self, config: Optional[MazeConfig] = None, rng: Optional[random.Random] = None):
        self.config = config or MazeConfig()
        self.rng = rng or random.Random(self.config.seed)

    @property
    def start(self) -> Cell:
        return (1, 1)

    @property
    def goal(self) -> Cell:
        return (self.config.rows - 2, self.config.cols - 2)

    def _interior(self, r: int, c: int) -> bool:
        return 0 < r < self.config.rows - 1 and 0 < c < self.config.cols - 1

    def generate(self) -> Grid:
        """Build a fresh grid. The caller only ever sees the finished object."""
        rows, cols = self.config.rows, self.config.cols
        cells = [[CellKind.WALL] * cols for _ in range(rows)]

        self._carve(cells)
        opened = self._braid(cells)
        self._reskin(cells)

        sr, sc = self.start
        gr, gc = self.goal
        cells[sr][sc] = CellKind.GRASS
        cells[gr][gc] = CellKind.GRASS

        grid = Grid(rows, cols, cells, self.start, self.goal)
        logger.debug("generated %dx%d maze: %d passable cells, %d braided walls",
                     rows, cols, sum(1 for _ in grid.passable_cells()), opened)
        return grid

    # -------------------- stages --------------------

    def _add_walls(self, cells: List[List[CellKind]], r: int, c: int,
                   walls: List[WallCandidate]) -> None:
        for dr, dc in DIRECTIONS:
            nr, nc = r + dr, c + dc
            if self._interior(nr, nc) and cells[nr][nc] is CellKind.WALL:
                walls.append((nr, nc, dr, dc))

    def _carve(self, cells: List[List[CellKind]]) -> None:
        sr, sc = self.start
        cells[sr][sc] = CellKind.GRASS
        walls: List[WallCandidate] = []
        self._add_walls(cells, sr, sc, walls)

        while walls:
            # uniform pick, swap-remove
            idx = self.rng.randrange(len(walls))
            walls[idx], walls[-1] = walls[-1], walls[idx]
            wr, wc, dr, dc = walls.pop()

            nr, nc = wr + dr, wc + dc
            if self._interior(nr, nc) and cells[nr][nc] is CellKind.WALL:
                cells[wr][wc] = CellKind.GRASS
                cells[nr][nc] = CellKind.GRASS
                self._add_walls(cells, nr, nc, walls)

    def _braid(self, cells: List[List[CellKind]]) -> int:
        p = self.config.braid_probability
        opened = 0
        for r in range(1, self.config.rows - 1):
            for c in range(1, self.config.cols - 1):
                if cells[r][c] is not CellKind.WALL:
                    continue
                v = cells[r - 1][c] is not CellKind.WALL and cells[r + 1][c] is not CellKind.WALL
                h = cells[r][c - 1] is not CellKind.WALL and cells[r][c + 1] is not CellKind.WALL
                if (v or h) and self.rng.random() < p:
                    cells[r][c] = CellKind.GRASS
                    opened += 1
        return opened

    def _reskin(self, cells: List[List[CellKind]]) -> None:
        grass = self.config.grass_probability
        mud = grass + self.config.mud_probability
        for row in cells:
            for c, kind in enumerate(row):
                if kind is CellKind.WALL:
                    continue
                roll = self.rng.random()
                if roll < grass:
                    row[c] = CellKind.GRASS
                elif roll < mud:
                    row[c] = CellKind.MUD
                else:
                    row[c] = CellKind.WATER


def generate_maze(config: Optional[MazeConfig] = None, seed: Optional[int] = None) -> Grid:
    """One-shot helper: a fresh generator seeded with `seed` (or config.seed)."""
    config = config or MazeConfig()
    rng = random.Random(config.seed if seed is None else seed)
    return MazeGenerator(config, rng).generate()
