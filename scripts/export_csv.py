#!/usr/bin/env python
"""Flatten the season artifact into CSV files.

Reads ``results/season_simulation.json`` (written by ``main.py``) and
writes one CSV per view into ``results/csv/``.

Usage
-----
::

    python main.py
    python scripts/export_csv.py
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

# Ensure the project root is on the import path.
_project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if _project_root not in sys.path:
    sys.path.insert(0, _project_root)

from f1_fantasy.export import export_csv, load_artifact  # noqa: E402

RESULTS_DIR: Path = Path(_project_root) / "results"
ARTIFACT_PATH: Path = RESULTS_DIR / "season_simulation.json"
CSV_DIR: Path = RESULTS_DIR / "csv"


def main() -> None:
    """Load the artifact and export every CSV view."""
    print("=" * 60)
    print("Exporting season artifact to CSV")
    print("=" * 60)

    try:
        artifact = load_artifact(ARTIFACT_PATH)
    except FileNotFoundError:
        print(f"No artifact at {ARTIFACT_PATH}. Run main.py first.")
        return

    for path in export_csv(artifact, CSV_DIR):
        print(f"  wrote {path.relative_to(RESULTS_DIR)}")
    print(f"\nCSV files written to {CSV_DIR}")


if __name__ == "__main__":
    main()
