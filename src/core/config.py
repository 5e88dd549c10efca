# src/core/config.py
#!/usr/bin/env python3
"""
Maze / run configuration.

Defaults live as module constants; any of them can be overridden through the
environment (MAZE_ROWS, MAZE_COLS, MAZE_SEED, MAZE_BRAID_PROBABILITY,
MAZE_SCAN_DELAY, MAZE_REVEAL_DELAY) via MazeConfig.from_env().
"""

import os
from dataclasses import dataclass
from typing import Mapping, Optional

ROWS = 21
COLS = 21

BRAID_PROBABILITY = 0.15   # chance a separating wall is knocked out after the carve
GRASS_PROBABILITY = 0.5
MUD_PROBABILITY = 0.3      # water takes whatever is left

# seconds
SCAN_DELAY = 0.010
REVEAL_DELAY = 0.030


@dataclass(frozen=True)
class MazeConfig:
    rows: int = ROWS
    cols: int = COLS
    braid_probability: float = BRAID_PROBABILITY
    grass_probability: float = GRASS_PROBABILITY
    mud_probability: float = MUD_PROBABILITY
    scan_delay: float = SCAN_DELAY
    reveal_delay: float = REVEAL_DELAY
    seed: Optional[int] = None

    def __post_init__(self):
        for label, n in (("rows", self.rows), ("cols", self.cols)):
            if n < 5 or n % 2 == 0:
                raise ValueError(f"{label} must be odd and >= 5, got {n}")
        for label, p in (("braid_probability", self.braid_probability),
                         ("grass_probability", self.grass_probability),
                         ("mud_probability", self.mud_probability)):
            if not 0.0 <= p <= 1.0:
                raise ValueError(f"{label} must be within [0, 1], got {p}")
        if self.grass_probability + self.mud_probability > 1.0:
            raise ValueError("grass_probability + mud_probability must not exceed 1")
        if self.scan_delay < 0 or self.reveal_delay < 0:
            raise ValueError("delays must be >= 0")

    @property
    def water_probability(self) -> float:
        return 1.0 - self.grass_probability - self.mud_probability

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "MazeConfig":
        env = os.environ if env is None else env

        def pick(key, conv, default):
            raw = env.get(key, "").strip()
            if not raw:
                return default
            try:
                return conv(raw)
            except ValueError:
                raise ValueError(f"{key}={raw!r} is not a valid {conv.__name__}") from None

        return cls(
            rows=pick("MAZE_ROWS", int, ROWS),
            cols=pick("MAZE_COLS", int, COLS),
            braid_probability=pick("MAZE_BRAID_PROBABILITY", float, BRAID_PROBABILITY),
            scan_delay=pick("MAZE_SCAN_DELAY", float, SCAN_DELAY),
            reveal_delay=pick("MAZE_REVEAL_DELAY", float, REVEAL_DELAY),
            seed=pick("MAZE_SEED", int, None),
        )
