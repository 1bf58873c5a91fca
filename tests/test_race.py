"""Tests for the seeded race-weekend generator."""

from __future__ import annotations

import pytest

from f1_fantasy.config import load_grid
from f1_fantasy.core.market import DriverProfile
from f1_fantasy.core.race import Weekend, simulate_weekend
from f1_fantasy.core.results import FinishStatus

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _drivers() -> list[DriverProfile]:
    drivers, _ = load_grid()
    return drivers


def _weekend(sprint: bool = False) -> Weekend:
    return Weekend(round_index=3, name="Test Grand Prix", has_sprint=sprint, laps=57)


# ---------------------------------------------------------------------------
# Tests
# ---------------------------------------------------------------------------


def test_same_seed_same_weekend() -> None:
    """Identical seeds reproduce identical results."""
    first = simulate_weekend(_weekend(sprint=True), _drivers(), seed=1042)
    second = simulate_weekend(_weekend(sprint=True), _drivers(), seed=1042)
    assert first == second


def test_different_seeds_differ() -> None:
    results = {
        tuple(simulate_weekend(_weekend(), _drivers(), seed=s).classification())
        for s in range(5)
    }
    assert len(results) > 1


def test_every_driver_has_a_race_result() -> None:
    drivers = _drivers()
    result = simulate_weekend(_weekend(), drivers, seed=7)
    assert set(result.results) == {d.id for d in drivers}
    assert all(r.race is not None for r in result.results.values())
    assert result.total_laps == 57
    assert result.round_index == 3


def test_finishing_positions_are_contiguous() -> None:
    """Finishers hold positions 1..N with no gaps or duplicates."""
    for seed in range(10):
        result = simulate_weekend(_weekend(), _drivers(), seed=seed)
        positions = sorted(
            r.race.position
            for r in result.results.values()
            if r.race is not None and r.race.position is not None
        )
        assert positions == list(range(1, len(positions) + 1))


def test_retirements_carry_a_lap() -> None:
    for seed in range(20):
        result = simulate_weekend(_weekend(), _drivers(), seed=seed)
        for r in result.results.values():
            assert r.race is not None
            if r.race.status is FinishStatus.DNF:
                assert r.race.retired_on_lap is not None
                assert 1 <= r.race.retired_on_lap <= 57


def test_fastest_lap_goes_to_a_top_ten_finisher() -> None:
    result = simulate_weekend(_weekend(), _drivers(), seed=11)
    assert result.fastest_lap_driver is not None
    holder = result.results[result.fastest_lap_driver].race
    assert holder is not None and holder.fastest_lap
    assert holder.position is not None and holder.position <= 10


def test_sprint_only_on_sprint_weekends() -> None:
    plain = simulate_weekend(_weekend(), _drivers(), seed=3)
    sprint = simulate_weekend(_weekend(sprint=True), _drivers(), seed=3)
    assert all(r.sprint is None for r in plain.results.values())
    assert all(r.sprint is not None for r in sprint.results.values())
    assert sprint.has_sprint


def test_grid_positions_are_assigned() -> None:
    result = simulate_weekend(_weekend(), _drivers(), seed=5)
    grid = sorted(r.race.grid_position for r in result.results.values() if r.race is not None)
    assert grid == list(range(1, 23))


def test_weekend_validation() -> None:
    with pytest.raises(ValueError, match="laps"):
        Weekend(round_index=1, name="X", has_sprint=False, laps=0)
    with pytest.raises(ValueError, match="round_index"):
        Weekend(round_index=0, name="X", has_sprint=False, laps=50)
