from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import List, Optional

from . import __version__
from .app import run_auto, run_gui, run_headless
from .config import Settings
from .exceptions import ConfigError, MazeGenerationError
from .maze.generator import MazeGenerator
from .rng import GameSeeds, coerce_seed
from .utils.logging import configure_logging, verbosity_to_level


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="catmaze",
        description="catmaze - find the cat in a random maze without meeting the monsters",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    mode = parser.add_mutually_exclusive_group()
    mode.add_argument("--gui", action="store_true", help="Force GUI mode (Arcade)")
    mode.add_argument("--headless", action="store_true", help="Force headless mode (console)")
    mode.add_argument(
        "--print-maze",
        type=int,
        metavar="SIZE",
        default=None,
        help="Print a generated maze of the given odd size and exit",
    )
    parser.add_argument("--difficulty", choices=("easy", "medium", "hard"), default=None)
    parser.add_argument("--seed", type=str, default=None, help="Master seed (int or string)")
    parser.add_argument("--settings", dest="settings_path", type=Path, default=None, help="YAML settings file")
    parser.add_argument("--max-steps", type=int, default=None, help="Stop after N ticks (for testing)")
    parser.add_argument("--tick-rate", type=float, default=None, help="Target tick rate (Hz)")
    parser.add_argument("-v", "--verbose", action="count", default=0, help="Increase log verbosity (-v, -vv)")
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    configure_logging(verbosity_to_level(args.verbose))

    if args.print_maze is not None:
        rng = GameSeeds.from_seed(coerce_seed(args.seed)).stream("maze", 0)
        try:
            grid = MazeGenerator(rng).generate(args.print_maze)
        except MazeGenerationError as exc:
            print(f"error: {exc}", file=sys.stderr)
            return 2
        print("\n".join(grid.to_lines()))
        return 0

    try:
        settings = Settings.from_sources(
            file_path=args.settings_path,
            overrides={
                "difficulty": args.difficulty,
                "seed": coerce_seed(args.seed),
                "tick_rate": args.tick_rate,
            },
        )
    except ConfigError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2

    if args.gui:
        return run_gui(settings, max_steps=args.max_steps)
    if args.headless:
        return run_headless(settings, max_steps=args.max_steps)
    return run_auto(settings, max_steps=args.max_steps)


if __name__ == "__main__":
    sys.exit(main())
