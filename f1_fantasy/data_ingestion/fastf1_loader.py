"""FastF1-based results ingestion for the fantasy engine.

Converts official session classifications into the
:class:`~f1_fantasy.core.results.RoundResult` facts the scoring and
price models consume, so a live season can be scored from real data
instead of the seeded generator.

FastF1 caches data locally after the first download.  Internet access is
required on the initial load of any session.
"""

from __future__ import annotations

import logging
import math
import unicodedata
from typing import Any

import fastf1  # type: ignore[import-untyped]
import pandas as pd

from f1_fantasy.core.results import FinishStatus, RaceResult, RoundResult, SessionResult

logger = logging.getLogger(__name__)

# ClassifiedPosition codes that are not a finishing position.
_DSQ_CODES: frozenset[str] = frozenset({"D", "E"})
_DNF_CODES: frozenset[str] = frozenset({"R", "N", "W", "F"})

# ---------------------------------------------------------------------------
# Frame conversion
# ---------------------------------------------------------------------------


def driver_key(last_name: str) -> str:
    """Normalise a surname to a grid id (``"Hülkenberg"`` -> ``"hulkenberg"``)."""
    ascii_name = (
        unicodedata.normalize("NFKD", last_name).encode("ascii", "ignore").decode("ascii")
    )
    return ascii_name.strip().lower().replace(" ", "_").replace("-", "_")


def _as_int(value: Any) -> int | None:
    if value is None:
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(number):
        return None
    return int(number)


def session_results_from_frame(
    results_df: pd.DataFrame,
    fastest_lap_driver: str | None = None,
) -> dict[str, SessionResult]:
    """Convert a FastF1 ``session.results`` frame into session results.

    Args:
        results_df: Frame with at least ``LastName``,
            ``ClassifiedPosition`` and ``GridPosition``.  ``Laps`` (laps
            completed) is used for retirement laps when present, and
            ``Abbreviation`` for matching *fastest_lap_driver*.
        fastest_lap_driver: Three-letter abbreviation of the fastest-lap
            holder, if known.

    Returns:
        ``{driver_id: SessionResult}`` keyed by :func:`driver_key`.
    """
    out: dict[str, SessionResult] = {}
    has_laps = "Laps" in results_df.columns
    has_abbr = "Abbreviation" in results_df.columns

    for _, row in results_df.iterrows():
        driver_id = driver_key(str(row["LastName"]))
        classified = str(row["ClassifiedPosition"]).strip().upper()
        grid = _as_int(row["GridPosition"]) or 0
        fastest = bool(
            has_abbr and fastest_lap_driver and row["Abbreviation"] == fastest_lap_driver
        )

        if classified.isdigit():
            out[driver_id] = SessionResult(
                position=int(classified),
                grid_position=grid,
                fastest_lap=fastest,
            )
        elif classified in _DSQ_CODES:
            out[driver_id] = SessionResult(
                position=None, grid_position=grid, status=FinishStatus.DSQ
            )
        else:
            if classified not in _DNF_CODES:
                logger.warning(
                    "Unknown ClassifiedPosition %r for %s, treating as DNF",
                    classified,
                    driver_id,
                )
            completed = _as_int(row["Laps"]) if has_laps else None
            out[driver_id] = SessionResult(
                position=None,
                grid_position=grid,
                status=FinishStatus.DNF,
                retired_on_lap=None if completed is None else completed + 1,
            )

    return out


def round_result_from_frames(
    round_index: int,
    name: str,
    total_laps: int,
    race_df: pd.DataFrame,
    sprint_df: pd.DataFrame | None = None,
    fastest_lap_driver: str | None = None,
) -> RoundResult:
    """Assemble a :class:`RoundResult` from race and optional sprint frames."""
    race = session_results_from_frame(race_df, fastest_lap_driver)
    sprint = session_results_from_frame(sprint_df) if sprint_df is not None else {}

    fastest_id = next((d for d, r in race.items() if r.fastest_lap), None)
    results = {
        driver_id: RaceResult(
            driver_id=driver_id,
            race=race.get(driver_id),
            sprint=sprint.get(driver_id),
        )
        for driver_id in list(race) + [d for d in sprint if d not in race]
    }
    return RoundResult(
        round_index=round_index,
        name=name,
        has_sprint=sprint_df is not None,
        total_laps=total_laps,
        results=results,
        fastest_lap_driver=fastest_id,
    )


# ---------------------------------------------------------------------------
# Session loader
# ---------------------------------------------------------------------------


def _load(year: int, event: str, session: str) -> Any:
    fastf1.Cache.enable_cache("fastf1_cache")
    sess = fastf1.get_session(year, event, session)
    sess.load()
    return sess


def load_round_result(
    year: int,
    event: str,
    round_index: int,
    has_sprint: bool = False,
) -> RoundResult:
    """Load a completed weekend via FastF1 and convert it.

    Enables the local disk cache on first call (``fastf1_cache/``).

    Args:
        year: Season year.
        event: Grand Prix name accepted by FastF1 (e.g. ``"Bahrain"``).
        round_index: Round number to stamp on the result.
        has_sprint: Whether to also load the sprint session.

    Returns:
        The weekend as a :class:`RoundResult`.
    """
    race = _load(year, event, "R")
    fastest_lap: str | None = None
    if not race.laps.empty:
        fastest = race.laps.pick_fastest()
        if fastest is not None:
            fastest_lap = str(fastest["Driver"])
    total_laps = int(race.laps["LapNumber"].max()) if not race.laps.empty else 0

    sprint_df: pd.DataFrame | None = None
    if has_sprint:
        sprint_df = _load(year, event, "S").results

    logger.info("Loaded %d %s results from FastF1", year, event)
    return round_result_from_frames(
        round_index,
        str(race.event["EventName"]),
        total_laps,
        race.results,
        sprint_df,
        fastest_lap,
    )
