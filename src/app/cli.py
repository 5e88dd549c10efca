# src/app/cli.py
#!/usr/bin/env python3
"""
Maze race - text shell around the run controller.

Generates one weighted maze, then runs the chosen algorithms one after another
(never two at once) and prints how each one did.

    python launcher.py --seed 7 --show
    python -m src.app.cli --algo BFS --algo A* --scan-delay 0

Environment: MAZE_* (see src/core/config.py), MAZE_LOG_LEVEL=DEBUG|INFO|...
"""

# --- bootstrap import path so `from src...` works when run as a script ---
import sys, os
from pathlib import Path
_REPO_ROOT = Path(__file__).resolve().parents[2]
if str(_REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(_REPO_ROOT))
# -------------------------------------------------------------------------

import argparse
import dataclasses
import logging
from typing import Dict, List, Optional, Sequence

from src.core.config import MazeConfig
from src.core.run_controller import RunController
from src.core.search import ALGORITHMS, canonical_name
from src.core.types import Cell, Grid, SearchResult

logger = logging.getLogger("maze_race")

# overlay letters; later algorithms draw over earlier ones
PATH_MARKS = {"BFS": "b", "DFS": "d", "Dijkstra": "j", "A*": "a"}


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="maze-race",
                                description="Race BFS, DFS, Dijkstra and A* through a weighted maze.")
    p.add_argument("--seed", type=int, default=None, help="random seed (maze and DFS shuffles)")
    p.add_argument("--rows", type=int, default=None, help="odd, >= 5")
    p.add_argument("--cols", type=int, default=None, help="odd, >= 5")
    p.add_argument("--algo", action="append", default=None,
                   help=f"algorithm to run, repeatable ({', '.join(ALGORITHMS)}); default: all")
    p.add_argument("--scan-delay", type=float, default=None, help="seconds between expansions")
    p.add_argument("--reveal-delay", type=float, default=None, help="seconds between revealed path cells")
    p.add_argument("--show", action="store_true", help="print the maze with every found path overlaid")
    p.add_argument("--log-level", default=os.getenv("MAZE_LOG_LEVEL", "WARNING").upper(),
                   choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    return p


def resolve_config(args: argparse.Namespace, env=None) -> MazeConfig:
    """Environment first, flags on top."""
    base = MazeConfig.from_env(env)
    overrides = {
        "seed": args.seed,
        "rows": args.rows,
        "cols": args.cols,
        "scan_delay": args.scan_delay,
        "reveal_delay": args.reveal_delay,
    }
    return dataclasses.replace(base, **{k: v for k, v in overrides.items() if v is not None})


def render(grid: Grid, paths: Dict[str, List[Cell]]) -> List[str]:
    rows = [list(line) for line in grid.to_strings()]
    for name, path in paths.items():
        mark = PATH_MARKS.get(name, "*")
        for r, c in path:
            rows[r][c] = mark
    for (r, c), mark in ((grid.start, "S"), (grid.goal, "G")):
        rows[r][c] = mark
    return ["".join(row) for row in rows]


def race(controller: RunController, names: Sequence[str]) -> Dict[str, SearchResult]:
    """Run each algorithm to the end, strictly one at a time."""
    results: Dict[str, SearchResult] = {}
    for name in names:
        future = controller.start(name)
        if future is None:
            logger.warning("%s was not admitted; %s still running", name, controller.state.algorithm)
            continue
        name = canonical_name(name)
        seen = drain_until_done(controller, name)
        results[name] = future.result()
        logger.debug("%s: %d progress events", name, seen)
    return results


def drain_until_done(controller: RunController, name: str) -> int:
    """Consume progress events until the run's finished/failed event; returns how many were read."""
    seen = 0
    while True:
        event = controller.next_event()
        seen += 1
        if event.algorithm == name and event.kind in ("finished", "failed"):
            logger.info(event.message)
            return seen


def format_table(controller: RunController, results: Dict[str, SearchResult]) -> List[str]:
    lines = [f"{'Algorithm':<10} {'Status':<8} {'Steps':>6} {'Cost':>6} {'Expanded':>9}"]
    for name, st in controller.stats.items():
        res = results.get(name)
        expanded = len(res.trace) if res else "-"
        steps = st.steps if st.steps is not None else "-"
        cost = st.cost if st.cost is not None else "-"
        lines.append(f"{name:<10} {st.status:<8} {steps:>6} {cost:>6} {expanded:>9}")
    return lines


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level),
                        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")
    try:
        config = resolve_config(args)
        names = [canonical_name(n) for n in (args.algo or list(ALGORITHMS))]
    except ValueError as ex:
        print(f"maze-race: {ex}", file=sys.stderr)
        return 2

    with RunController(config) as controller:
        results = race(controller, names)
        if args.show:
            print("\n".join(render(controller.grid, controller.active_paths)))
            print()
        print("\n".join(format_table(controller, results)))
        print(controller.status_message)
    return 0


if __name__ == "__main__":
    sys.exit(main())
