"""Season artifact, console summary and tabular export.

The JSON artifact is the hand-off format between the simulator and any
downstream tooling; :func:`export_csv` flattens it into one CSV per view.
"""

from __future__ import annotations

import json
import logging
from collections import defaultdict
from pathlib import Path
from typing import Any

import pandas as pd

from f1_fantasy.core.scoring import base_driver_points
from f1_fantasy.core.season import SeasonResult
from f1_fantasy.core.team_score import season_total

logger = logging.getLogger(__name__)

TOP_RESULTS: int = 10

# ---------------------------------------------------------------------------
# Artifact
# ---------------------------------------------------------------------------


def build_artifact(result: SeasonResult) -> dict[str, Any]:
    """Convert a :class:`SeasonResult` into a JSON-serialisable dict.

    Keys: ``seed``, ``standings``, ``driverPriceHistory``,
    ``constructorPriceHistory``, ``driverSeasonStats``,
    ``constructorSeasonStats``, ``tradeLog``, ``raceResults``, ``tradeCounts``.
    """
    standings: list[dict[str, Any]] = []
    for rank, team in enumerate(result.standings, start=1):
        standings.append(
            {
                "rank": rank,
                "userId": team.user_id,
                "name": team.name,
                "strategyTags": list(team.tags),
                "totalPoints": season_total(team),
                "lockedPoints": team.locked_points,
                "bonusPoints": team.bonus_points,
                "budget": team.budget,
                "teamValue": team.team_value,
                "transfers": team.transfers,
                "finalDrivers": team.driver_ids,
                "finalConstructor": (
                    team.constructor.asset_id if team.constructor is not None else None
                ),
                "racePoints": list(team.round_points),
            }
        )

    driver_stats: dict[str, dict[str, Any]] = {}
    for asset in result.market.drivers.values():
        driver_stats[asset.id] = {
            "name": asset.name,
            "totalPts": asset.season_points,
            "avgFinish": round(asset.average_finish, 2),
            "wins": asset.wins,
            "podiums": asset.podiums,
            "dnfs": asset.dnfs,
            "finalPrice": asset.price,
        }

    constructor_stats: dict[str, dict[str, Any]] = {
        asset.id: {
            "name": asset.name,
            "totalPts": asset.season_points,
            "finalPrice": asset.price,
        }
        for asset in result.market.constructors.values()
    }

    race_results: list[dict[str, Any]] = []
    for rnd in result.rounds:
        top: list[dict[str, Any]] = []
        for driver_id in rnd.classification()[:TOP_RESULTS]:
            race = rnd.results[driver_id].race
            top.append(
                {
                    "driverId": driver_id,
                    "position": race.position if race is not None else None,
                    "points": base_driver_points(rnd.get(driver_id), result.rules),
                }
            )
        race_results.append(
            {
                "round": rnd.round_index,
                "name": rnd.name,
                "hasSprint": rnd.has_sprint,
                "top10": top,
                "fastestLap": rnd.fastest_lap_driver or "",
            }
        )

    trade_log = [
        {
            "round": e.round_index,
            "userId": e.user_id,
            "action": e.action.value,
            "assetId": e.asset_id,
            "price": e.price,
            "fee": e.fee,
            "reason": e.reason,
        }
        for e in result.trade_log
    ]

    return {
        "seed": result.seed,
        "standings": standings,
        "driverPriceHistory": result.driver_price_history,
        "constructorPriceHistory": result.constructor_price_history,
        "driverSeasonStats": driver_stats,
        "constructorSeasonStats": constructor_stats,
        "tradeLog": trade_log,
        "raceResults": race_results,
        "tradeCounts": result.trade_counts,
    }


def write_artifact(artifact: dict[str, Any], path: Path) -> Path:
    """Write *artifact* as indented JSON, creating parent directories."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as fh:
        json.dump(artifact, fh, indent=2)
    logger.info("Season artifact written to %s", path)
    return path


def load_artifact(path: Path) -> dict[str, Any]:
    """Read a previously written artifact.

    Raises:
        FileNotFoundError: If *path* does not exist.
    """
    if not path.exists():
        raise FileNotFoundError(f"Artifact not found: {path}")
    with open(path, encoding="utf-8") as fh:
        return json.load(fh)


# ---------------------------------------------------------------------------
# Console summary
# ---------------------------------------------------------------------------


def _price_moves(artifact: dict[str, Any]) -> list[tuple[str, int, int, int]]:
    moves = []
    for driver_id, history in artifact["driverPriceHistory"].items():
        moves.append((driver_id, history[0], history[-1], history[-1] - history[0]))
    return sorted(moves, key=lambda m: m[3], reverse=True)


def render_summary(artifact: dict[str, Any], top_n: int = 5) -> str:
    """Format the season as a plain-text report.

    Sections: final standings, strategy-tag averages, top drivers, most
    traded drivers, biggest price risers and fallers.
    """
    lines: list[str] = []
    banner = "=" * 78

    lines.append(banner)
    lines.append(f"FANTASY SEASON SIMULATION  (seed={artifact['seed']})")
    lines.append(banner)
    lines.append(
        f"  {'#':>2}  {'Manager':<24} {'Points':>7} {'Locked':>7} "
        f"{'Budget':>7} {'Value':>7} {'Trades':>6}"
    )
    for row in artifact["standings"]:
        lines.append(
            f"  {row['rank']:>2}  {row['name']:<24} {row['totalPoints']:>7} "
            f"{row['lockedPoints']:>7} {row['budget']:>7} {row['teamValue']:>7} "
            f"{row['transfers']:>6}"
        )

    # -- Strategy tags --------------------------------------------------------
    by_tag: dict[str, list[int]] = defaultdict(list)
    for row in artifact["standings"]:
        for tag in row["strategyTags"]:
            by_tag[tag].append(row["totalPoints"])
    lines.append("")
    lines.append("STRATEGY TAG AVERAGES")
    lines.append("-" * 40)
    ranked_tags = sorted(
        by_tag.items(), key=lambda kv: sum(kv[1]) / len(kv[1]), reverse=True
    )
    for tag, totals in ranked_tags:
        lines.append(f"  {tag:<22} {sum(totals) / len(totals):>8.1f}  (n={len(totals)})")

    # -- Drivers ----------------------------------------------------------------
    stats = artifact["driverSeasonStats"]
    lines.append("")
    lines.append("TOP DRIVERS")
    lines.append("-" * 40)
    top_drivers = sorted(stats.items(), key=lambda kv: kv[1]["totalPts"], reverse=True)
    for driver_id, s in top_drivers[:top_n]:
        lines.append(
            f"  {driver_id:<12} {s['totalPts']:>5} pts  avg P{s['avgFinish']:<5} "
            f"W{s['wins']} Pod{s['podiums']} DNF{s['dnfs']}"
        )

    lines.append("")
    lines.append("MOST TRADED")
    lines.append("-" * 40)
    traded = sorted(artifact["tradeCounts"].items(), key=lambda kv: kv[1], reverse=True)
    for driver_id, count in traded[:top_n]:
        lines.append(f"  {driver_id:<12} {count:>4} trades")

    moves = _price_moves(artifact)
    lines.append("")
    lines.append("BIGGEST RISERS")
    lines.append("-" * 40)
    for driver_id, start, end, delta in moves[:top_n]:
        lines.append(f"  {driver_id:<12} {start:>4} -> {end:>4}  ({delta:+d})")
    lines.append("")
    lines.append("BIGGEST FALLERS")
    lines.append("-" * 40)
    for driver_id, start, end, delta in list(reversed(moves))[:top_n]:
        lines.append(f"  {driver_id:<12} {start:>4} -> {end:>4}  ({delta:+d})")

    return "\n".join(lines)


# ---------------------------------------------------------------------------
# CSV export
# ---------------------------------------------------------------------------


def _price_frame(history: dict[str, list[int]]) -> pd.DataFrame:
    frame = pd.DataFrame(history)
    labels = ["Initial"] + [f"R{i}" for i in range(1, len(frame))]
    frame.insert(0, "Round", labels)
    return frame


def export_csv(artifact: dict[str, Any], out_dir: Path) -> list[Path]:
    """Write one CSV per view of *artifact* into *out_dir*.

    Files: ``standings.csv``, ``driver_stats.csv``, ``driver_prices.csv``
    (wide, one column per driver), ``constructor_prices.csv``,
    ``race_results.csv`` and ``trade_log.csv``.

    Returns:
        Paths of the written files.
    """
    out_dir.mkdir(parents=True, exist_ok=True)
    written: list[Path] = []

    standings_rows = []
    for row in artifact["standings"]:
        flat = {
            "Rank": row["rank"],
            "Name": row["name"],
            "Strategy Tags": "; ".join(row["strategyTags"]),
            "Total Points": row["totalPoints"],
            "Locked Points": row["lockedPoints"],
            "Bonus Points": row["bonusPoints"],
            "Budget": row["budget"],
            "Team Value": row["teamValue"],
            "Transfers": row["transfers"],
            "Final Drivers": "; ".join(row["finalDrivers"]),
            "Final Constructor": row["finalConstructor"] or "",
        }
        for idx, pts in enumerate(row["racePoints"], start=1):
            flat[f"R{idx} Pts"] = pts
        standings_rows.append(flat)

    stats = pd.DataFrame.from_dict(artifact["driverSeasonStats"], orient="index")
    stats.index.name = "Driver"
    stats = stats.sort_values("totalPts", ascending=False)

    race_rows = []
    for rnd in artifact["raceResults"]:
        flat = {
            "Round": rnd["round"],
            "Name": rnd["name"],
            "Sprint": rnd["hasSprint"],
            "Fastest Lap": rnd["fastestLap"],
        }
        for entry in rnd["top10"]:
            flat[f"P{entry['position']}"] = entry["driverId"]
        race_rows.append(flat)

    tables: dict[str, pd.DataFrame] = {
        "standings.csv": pd.DataFrame(standings_rows),
        "driver_stats.csv": stats.reset_index(),
        "driver_prices.csv": _price_frame(artifact["driverPriceHistory"]),
        "constructor_prices.csv": _price_frame(artifact["constructorPriceHistory"]),
        "race_results.csv": pd.DataFrame(race_rows),
        "trade_log.csv": pd.DataFrame(
            artifact["tradeLog"],
            columns=["round", "userId", "action", "assetId", "price", "fee", "reason"],
        ),
    }
    for filename, frame in tables.items():
        path = out_dir / filename
        frame.to_csv(path, index=False)
        written.append(path)

    logger.info("Exported %d CSV files to %s", len(written), out_dir)
    return written
