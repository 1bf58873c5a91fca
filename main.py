"""CLI entrypoint for the fantasy season simulator.

Usage
-----
::

    python main.py [--seed N]

Runs one seeded 25-agent season over the 2026 calendar, writes
``results/season_simulation.json`` and prints a summary.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from f1_fantasy import __version__
from f1_fantasy.core.season import DEFAULT_SEED, simulate_season
from f1_fantasy.export import build_artifact, render_summary, write_artifact

OUTPUT_PATH: Path = Path(__file__).resolve().parent / "results" / "season_simulation.json"


def _parse_args(argv: list[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Simulate a seeded fantasy season.")
    parser.add_argument(
        "--seed",
        type=int,
        default=DEFAULT_SEED,
        help=f"Master seed for races and agent decisions (default {DEFAULT_SEED}).",
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    """Run the season simulation and write the artifact."""
    args = _parse_args(argv)
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    print(f"F1 Fantasy Engine v{__version__}")
    print("=" * 60)

    result = simulate_season(seed=args.seed)
    artifact = build_artifact(result)
    write_artifact(artifact, OUTPUT_PATH)

    print(render_summary(artifact))
    print(f"\nResults written to {OUTPUT_PATH}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
