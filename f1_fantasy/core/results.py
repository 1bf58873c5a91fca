"""Race-weekend result facts consumed by the scoring and price models.

Results are immutable once produced for a round, whether they come from
the seeded generator or from a real results feed.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class FinishStatus(str, Enum):
    """Classification outcome of a session."""

    FINISHED = "finished"
    DNF = "dnf"
    DSQ = "dsq"


@dataclass(frozen=True)
class SessionResult:
    """One driver's outcome in a race or sprint.

    Attributes:
        position: Classified finishing position (1-based), ``None`` when
            the driver did not finish or was disqualified.
        grid_position: Starting position (1-based); ``0`` when unknown.
        status: Finishing status.
        fastest_lap: Whether the driver set the fastest lap.
        retired_on_lap: Lap of retirement for a DNF, if known.
    """

    position: int | None
    grid_position: int = 0
    status: FinishStatus = FinishStatus.FINISHED
    fastest_lap: bool = False
    retired_on_lap: int | None = None

    def __post_init__(self) -> None:
        """Validate session result values."""
        if self.status is FinishStatus.FINISHED:
            if self.position is None or self.position < 1:
                raise ValueError("a finished result needs a position >= 1.")
        elif self.position is not None:
            raise ValueError("DNF/DSQ results must not carry a position.")
        if self.grid_position < 0:
            raise ValueError("grid_position must be >= 0.")

    @property
    def finished(self) -> bool:
        return self.status is FinishStatus.FINISHED

    @property
    def positions_gained(self) -> int:
        """Grid minus finish; negative when places were lost."""
        if not self.finished or self.grid_position == 0:
            return 0
        assert self.position is not None
        return self.grid_position - self.position


@dataclass(frozen=True)
class RaceResult:
    """A driver's race and optional sprint outcome for one weekend."""

    driver_id: str
    race: SessionResult | None = None
    sprint: SessionResult | None = None


@dataclass(frozen=True)
class RoundResult:
    """All driver results for one round of the calendar.

    Attributes:
        round_index: 1-based round number.
        name: Event name.
        has_sprint: Whether the weekend included a sprint.
        total_laps: Scheduled race distance, used for the DNF price penalty.
        results: ``{driver_id: RaceResult}``; drivers may be missing.
        fastest_lap_driver: Holder of the race fastest lap, if any.
    """

    round_index: int
    name: str
    has_sprint: bool = False
    total_laps: int = 0
    results: dict[str, RaceResult] = field(default_factory=dict)
    fastest_lap_driver: str | None = None

    def get(self, driver_id: str) -> RaceResult | None:
        """Return the driver's result, or ``None`` when no data exists."""
        return self.results.get(driver_id)

    def classification(self) -> list[str]:
        """Driver ids of race finishers ordered by position."""
        finishers = [
            (r.race.position, driver_id)
            for driver_id, r in self.results.items()
            if r.race is not None and r.race.position is not None
        ]
        return [driver_id for _, driver_id in sorted(finishers)]
