"""Seeded race-weekend generator.

Produces :class:`~f1_fantasy.core.results.RoundResult` facts for the
season simulator.  Each driver's session performance is drawn as::

    perf = strength + N(0, 15v) * (1 - consistency) + N(0, 5v)

with ``v = 0.7`` for sprints (shorter race, less spread) and ``1.0`` for
grands prix.  Finishers are ranked by descending performance.  All
randomness comes from a single :class:`numpy.random.Generator` so a
weekend is fully reproducible from its seed.
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from f1_fantasy.core.market import DriverProfile
from f1_fantasy.core.results import FinishStatus, RaceResult, RoundResult, SessionResult

RACE_DNF_CHANCE: float = 0.08
SPRINT_DNF_CHANCE: float = 0.03
RACE_DSQ_CHANCE: float = 0.01
SPRINT_VARIANCE: float = 0.7
QUALIFYING_NOISE: float = 6.0
FASTEST_LAP_POOL: int = 10


@dataclass(frozen=True)
class Weekend:
    """One round of the calendar.

    Attributes:
        round_index: 1-based round number.
        name: Grand Prix name.
        has_sprint: Whether a sprint is held.
        laps: Scheduled grand prix distance.
    """

    round_index: int
    name: str
    has_sprint: bool
    laps: int

    def __post_init__(self) -> None:
        """Validate weekend parameters."""
        if self.round_index < 1:
            raise ValueError("round_index must be >= 1.")
        if not self.name:
            raise ValueError("name must not be empty.")
        if self.laps < 1:
            raise ValueError("laps must be >= 1.")


def _qualifying_grid(
    rng: np.random.Generator,
    drivers: list[DriverProfile],
) -> dict[str, int]:
    pace = [(d.strength + rng.normal(0.0, QUALIFYING_NOISE), d.id) for d in drivers]
    ordered = sorted(pace, key=lambda p: -p[0])
    return {driver_id: idx + 1 for idx, (_, driver_id) in enumerate(ordered)}


def simulate_session(
    rng: np.random.Generator,
    drivers: list[DriverProfile],
    grid: dict[str, int],
    sprint: bool,
    laps: int,
) -> tuple[dict[str, SessionResult], str | None]:
    """Simulate one race or sprint.

    Args:
        rng: Seeded generator; draws are taken in *drivers* order.
        drivers: Participating drivers.
        grid: Starting position per driver id.
        sprint: ``True`` for a sprint session.
        laps: Session distance, for retirement laps.

    Returns:
        ``(results, fastest_lap_driver)`` where *results* maps driver id
        to :class:`SessionResult`.  Sprints have no fastest-lap holder.
    """
    variance = SPRINT_VARIANCE if sprint else 1.0
    dnf_chance = SPRINT_DNF_CHANCE if sprint else RACE_DNF_CHANCE
    session_laps = max(1, laps // 3) if sprint else laps

    entries: list[tuple[float, str]] = []
    outcomes: dict[str, SessionResult] = {}
    for drv in drivers:
        perf = (
            drv.strength
            + rng.normal(0.0, 15.0 * variance) * (1.0 - drv.consistency)
            + rng.normal(0.0, 5.0 * variance)
        )
        if rng.random() < dnf_chance:
            outcomes[drv.id] = SessionResult(
                position=None,
                grid_position=grid.get(drv.id, 0),
                status=FinishStatus.DNF,
                retired_on_lap=int(rng.integers(1, session_laps + 1)),
            )
        elif not sprint and rng.random() < RACE_DSQ_CHANCE:
            outcomes[drv.id] = SessionResult(
                position=None,
                grid_position=grid.get(drv.id, 0),
                status=FinishStatus.DSQ,
            )
        else:
            entries.append((perf, drv.id))

    # Stable sort keeps grid-file order between equal performances.
    finishers = [driver_id for _, driver_id in sorted(entries, key=lambda e: -e[0])]

    fastest: str | None = None
    if not sprint and finishers:
        pool = finishers[:FASTEST_LAP_POOL]
        fastest = pool[int(rng.integers(0, len(pool)))]

    for idx, driver_id in enumerate(finishers):
        outcomes[driver_id] = SessionResult(
            position=idx + 1,
            grid_position=grid.get(driver_id, 0),
            fastest_lap=driver_id == fastest,
        )
    return outcomes, fastest


def simulate_weekend(
    weekend: Weekend,
    drivers: list[DriverProfile],
    seed: int,
) -> RoundResult:
    """Generate the full result set for one weekend.

    The sprint (if any) runs before the grand prix and both draw from
    the same generator, so the round is reproducible from *seed* alone.
    """
    rng = np.random.default_rng(seed)
    grid = _qualifying_grid(rng, drivers)

    sprint_results: dict[str, SessionResult] = {}
    if weekend.has_sprint:
        sprint_results, _ = simulate_session(rng, drivers, grid, True, weekend.laps)
    race_results, fastest = simulate_session(rng, drivers, grid, False, weekend.laps)

    results = {
        drv.id: RaceResult(
            driver_id=drv.id,
            race=race_results.get(drv.id),
            sprint=sprint_results.get(drv.id),
        )
        for drv in drivers
    }
    return RoundResult(
        round_index=weekend.round_index,
        name=weekend.name,
        has_sprint=weekend.has_sprint,
        total_laps=weekend.laps,
        results=results,
        fastest_lap_driver=fastest,
    )
