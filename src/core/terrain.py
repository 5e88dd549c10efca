# src/core/terrain.py
#!/usr/bin/env python3
"""
Terrain model: what a cell is made of and what it costs to step onto it.
"""

from enum import Enum


class CellKind(Enum):
    WALL = 0
    GRASS = 1
    MUD = 2
    WATER = 3


# Sentinel for the impassable kind; never added to a path cost.
WALL_COST = 9999

COSTS = {
    CellKind.GRASS: 1,
    CellKind.MUD: 5,
    CellKind.WATER: 10,
    CellKind.WALL: WALL_COST,
}

# text form used by Grid.to_strings() / Grid.from_strings()
SYMBOLS = {
    CellKind.WALL: "#",
    CellKind.GRASS: ".",
    CellKind.MUD: ":",
    CellKind.WATER: "~",
}
KIND_BY_SYMBOL = {v: k for k, v in SYMBOLS.items()}


def cost(kind: CellKind) -> int:
    return COSTS[kind]


def is_passable(kind: CellKind) -> bool:
    return kind is not CellKind.WALL
