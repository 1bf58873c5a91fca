"""Tests for FastF1 results ingestion.

These tests exercise the frame conversion using synthetic DataFrames so
that no network access is required to run the core test suite.
"""

from __future__ import annotations

import pandas as pd
import pytest

from f1_fantasy.core.results import FinishStatus
from f1_fantasy.core.rules import DEFAULT_RULES
from f1_fantasy.core.scoring import base_driver_points
from f1_fantasy.data_ingestion import fastf1_loader
from f1_fantasy.data_ingestion.fastf1_loader import (
    driver_key,
    load_round_result,
    round_result_from_frames,
    session_results_from_frame,
)

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _make_results(rows: list[tuple[str, str, str, float, float]]) -> pd.DataFrame:
    """Build a results frame from (abbr, last name, classified, grid, laps)."""
    return pd.DataFrame(
        [
            {
                "Abbreviation": abbr,
                "LastName": last,
                "ClassifiedPosition": classified,
                "GridPosition": grid,
                "Laps": laps,
            }
            for abbr, last, classified, grid, laps in rows
        ]
    )


def _race_frame() -> pd.DataFrame:
    return _make_results(
        [
            ("VER", "Verstappen", "1", 2.0, 57.0),
            ("NOR", "Norris", "2", 1.0, 57.0),
            ("HUL", "Hülkenberg", "3", 9.0, 57.0),
            ("PER", "Pérez", "R", 12.0, 24.0),
            ("OCO", "Ocon", "D", 14.0, 57.0),
        ]
    )


# ---------------------------------------------------------------------------
# Tests
# ---------------------------------------------------------------------------


def test_driver_key_strips_accents() -> None:
    assert driver_key("Hülkenberg") == "hulkenberg"
    assert driver_key("Pérez") == "perez"
    assert driver_key("De Vries") == "de_vries"


def test_classified_finishers() -> None:
    results = session_results_from_frame(_race_frame(), fastest_lap_driver="NOR")
    assert results["verstappen"].position == 1
    assert results["verstappen"].grid_position == 2
    assert results["hulkenberg"].positions_gained == 6
    assert results["norris"].fastest_lap
    assert not results["verstappen"].fastest_lap


def test_retirement_and_disqualification() -> None:
    results = session_results_from_frame(_race_frame())
    assert results["perez"].status is FinishStatus.DNF
    assert results["perez"].retired_on_lap == 25
    assert results["ocon"].status is FinishStatus.DSQ
    assert results["ocon"].position is None


def test_missing_grid_position_is_unknown() -> None:
    frame = _make_results([("ALB", "Albon", "5", float("nan"), 57.0)])
    assert session_results_from_frame(frame)["albon"].grid_position == 0


def test_round_result_from_race_and_sprint() -> None:
    sprint = _make_results(
        [
            ("NOR", "Norris", "1", 1.0, 19.0),
            ("VER", "Verstappen", "2", 2.0, 19.0),
        ]
    )
    round_result = round_result_from_frames(
        round_index=4,
        name="Bahrain Grand Prix",
        total_laps=57,
        race_df=_race_frame(),
        sprint_df=sprint,
        fastest_lap_driver="VER",
    )
    assert round_result.has_sprint
    assert round_result.fastest_lap_driver == "verstappen"
    assert round_result.classification() == ["verstappen", "norris", "hulkenberg"]
    # P1 from P2 (+1), fastest lap (+1), sprint P2 (7).
    assert base_driver_points(round_result.get("verstappen"), DEFAULT_RULES) == 34
    assert round_result.get("perez").sprint is None  # type: ignore[union-attr]


class _FakeLaps(pd.DataFrame):
    def pick_fastest(self) -> pd.Series:
        return self.sort_values("LapTime").iloc[0]


class _FakeSession:
    def __init__(self, results: pd.DataFrame) -> None:
        self.results = results
        self.event = {"EventName": "Bahrain Grand Prix"}
        self.laps = _FakeLaps(
            {
                "Driver": ["VER", "NOR", "VER"],
                "LapNumber": [56, 57, 57],
                "LapTime": [91.2, 90.8, 91.0],
            }
        )


def test_load_round_result_uses_loaded_sessions(monkeypatch: pytest.MonkeyPatch) -> None:
    requested: list[tuple[int, str, str]] = []

    def fake_load(year: int, event: str, session: str) -> _FakeSession:
        requested.append((year, event, session))
        return _FakeSession(_race_frame())

    monkeypatch.setattr(fastf1_loader, "_load", fake_load)
    round_result = load_round_result(2025, "Bahrain", round_index=4)

    assert requested == [(2025, "Bahrain", "R")]
    assert round_result.name == "Bahrain Grand Prix"
    assert round_result.total_laps == 57
    assert round_result.fastest_lap_driver == "norris"
    assert not round_result.has_sprint
