"""Tests for the season artifact, console summary, CSV export and CLI."""

from __future__ import annotations

import json
import runpy
from pathlib import Path
from typing import Any

import pandas as pd
import pytest

import main
from f1_fantasy.config import load_calendar
from f1_fantasy.core.season import simulate_season
from f1_fantasy.export import (
    build_artifact,
    export_csv,
    load_artifact,
    render_summary,
    write_artifact,
)

# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture(scope="module")
def artifact() -> dict[str, Any]:
    """Artifact of a short three-round season."""
    return build_artifact(simulate_season(seed=7, calendar=load_calendar()[:3]))


# ---------------------------------------------------------------------------
# Artifact
# ---------------------------------------------------------------------------


def test_artifact_keys(artifact: dict[str, Any]) -> None:
    assert set(artifact) == {
        "seed",
        "standings",
        "driverPriceHistory",
        "constructorPriceHistory",
        "driverSeasonStats",
        "constructorSeasonStats",
        "tradeLog",
        "raceResults",
        "tradeCounts",
    }
    assert artifact["seed"] == 7


def test_standings_rows(artifact: dict[str, Any]) -> None:
    rows = artifact["standings"]
    assert [r["rank"] for r in rows] == list(range(1, 26))
    for row in rows:
        assert len(row["racePoints"]) == 3
        banked = row["lockedPoints"] + row["bonusPoints"]
        assert row["totalPoints"] == sum(row["racePoints"]) + banked


def test_constructor_season_stats(artifact: dict[str, Any]) -> None:
    stats = artifact["constructorSeasonStats"]
    history = artifact["constructorPriceHistory"]
    assert set(stats) == set(history)
    assert len(stats) == 11
    for constructor_id, row in stats.items():
        assert row["finalPrice"] == history[constructor_id][-1]
        assert isinstance(row["totalPts"], int)
        assert row["name"]


def test_race_results_top_ten(artifact: dict[str, Any]) -> None:
    for rnd in artifact["raceResults"]:
        positions = [e["position"] for e in rnd["top10"]]
        assert positions == list(range(1, len(positions) + 1))
        assert len(positions) <= 10
    assert artifact["raceResults"][0]["top10"][0]["points"] >= 25


def test_artifact_is_json_round_trippable(artifact: dict[str, Any], tmp_path: Path) -> None:
    path = write_artifact(artifact, tmp_path / "out" / "season.json")
    assert path.exists()
    assert load_artifact(path) == json.loads(json.dumps(artifact))


def test_load_missing_artifact(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        load_artifact(tmp_path / "missing.json")


# ---------------------------------------------------------------------------
# Summary
# ---------------------------------------------------------------------------


def test_summary_mentions_every_section(artifact: dict[str, Any]) -> None:
    text = render_summary(artifact)
    for heading in (
        "FANTASY SEASON SIMULATION",
        "STRATEGY TAG AVERAGES",
        "TOP DRIVERS",
        "MOST TRADED",
        "BIGGEST RISERS",
        "BIGGEST FALLERS",
    ):
        assert heading in text
    assert artifact["standings"][0]["name"] in text


# ---------------------------------------------------------------------------
# CSV export
# ---------------------------------------------------------------------------


def test_export_csv_writes_every_view(artifact: dict[str, Any], tmp_path: Path) -> None:
    paths = export_csv(artifact, tmp_path)
    assert sorted(p.name for p in paths) == [
        "constructor_prices.csv",
        "driver_prices.csv",
        "driver_stats.csv",
        "race_results.csv",
        "standings.csv",
        "trade_log.csv",
    ]

    standings = pd.read_csv(tmp_path / "standings.csv")
    assert len(standings) == 25
    assert {"R1 Pts", "R2 Pts", "R3 Pts"} <= set(standings.columns)

    prices = pd.read_csv(tmp_path / "driver_prices.csv")
    assert list(prices["Round"]) == ["Initial", "R1", "R2", "R3"]
    assert "verstappen" in prices.columns


# ---------------------------------------------------------------------------
# CLI
# ---------------------------------------------------------------------------


def test_main_writes_artifact(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    out = tmp_path / "season_simulation.json"
    monkeypatch.setattr(main, "OUTPUT_PATH", out)
    assert main.main(["--seed", "11"]) == 0
    assert load_artifact(out)["seed"] == 11


def _export_script(monkeypatch: pytest.MonkeyPatch, results_dir: Path) -> Any:
    script = Path(__file__).resolve().parent.parent / "scripts" / "export_csv.py"
    export_main = runpy.run_path(str(script))["main"]
    monkeypatch.setitem(export_main.__globals__, "RESULTS_DIR", results_dir)
    monkeypatch.setitem(
        export_main.__globals__, "ARTIFACT_PATH", results_dir / "season_simulation.json"
    )
    monkeypatch.setitem(export_main.__globals__, "CSV_DIR", results_dir / "csv")
    return export_main


def test_export_script_reports_missing_artifact(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    export_main = _export_script(monkeypatch, tmp_path)
    assert export_main() is None
    assert "Run main.py first" in capsys.readouterr().out
    assert not (tmp_path / "csv").exists()


def test_export_script_writes_csv_files(
    artifact: dict[str, Any], tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    write_artifact(artifact, tmp_path / "season_simulation.json")
    export_main = _export_script(monkeypatch, tmp_path)
    export_main()
    assert (tmp_path / "csv" / "standings.csv").exists()
