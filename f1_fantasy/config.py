"""Configuration loaders for the fantasy engine.

Reads the season calendar, the driver/constructor grid and optional rule
overrides from YAML files under ``data/``.
"""

from __future__ import annotations

import dataclasses
from pathlib import Path
from typing import Any

import yaml

from f1_fantasy.core.market import ConstructorProfile, DriverProfile
from f1_fantasy.core.race import Weekend
from f1_fantasy.core.rules import LockTier, RuleSet

DATA_DIR: Path = Path(__file__).resolve().parent.parent / "data"
CALENDAR_PATH: Path = DATA_DIR / "calendar_2026.yaml"
GRID_PATH: Path = DATA_DIR / "grid_2026.yaml"
RULES_V3_PATH: Path = DATA_DIR / "rules_v3.yaml"

_WEEKEND_FIELDS: tuple[str, ...] = ("round", "name", "sprint", "laps")
_DRIVER_FIELDS: tuple[str, ...] = (
    "id",
    "name",
    "constructor",
    "prior_points",
    "strength",
    "consistency",
)
_CONSTRUCTOR_FIELDS: tuple[str, ...] = ("id", "name", "prior_points", "drivers")


def _read_yaml(path: Path, kind: str) -> Any:
    if not path.exists():
        raise FileNotFoundError(f"{kind} file not found: {path}")
    with open(path, encoding="utf-8") as fh:
        return yaml.safe_load(fh)


def _require(entry: dict, fields: tuple[str, ...], label: str) -> None:
    for name in fields:
        if name not in entry:
            raise ValueError(f"{label} is missing required field '{name}'")


def load_calendar(path: Path | None = None) -> list[Weekend]:
    """Load the race calendar.

    Args:
        path: Optional override for the calendar file path.

    Returns:
        Weekends in round order.

    Raises:
        FileNotFoundError: If the calendar file does not exist.
        ValueError: If an entry is missing fields, has invalid values,
            or rounds are not numbered 1..N in order.
    """
    data = _read_yaml(path or CALENDAR_PATH, "Calendar")
    weekends: list[Weekend] = []

    for idx, entry in enumerate(data["races"]):
        label = f"Race entry {idx} ({entry.get('name', '<unknown>')})"
        _require(entry, _WEEKEND_FIELDS, label)
        if entry["round"] != idx + 1:
            raise ValueError(f"{label}: expected round {idx + 1}, got {entry['round']}")
        if not isinstance(entry["laps"], int) or entry["laps"] < 1:
            raise ValueError(f"{label}: 'laps' must be a positive integer")

        weekends.append(
            Weekend(
                round_index=int(entry["round"]),
                name=str(entry["name"]),
                has_sprint=bool(entry["sprint"]),
                laps=int(entry["laps"]),
            )
        )

    return weekends


def load_grid(
    path: Path | None = None,
) -> tuple[list[DriverProfile], list[ConstructorProfile]]:
    """Load the driver and constructor grid.

    Every constructor must list two known drivers, and each of those
    drivers must name that constructor.

    Raises:
        FileNotFoundError: If the grid file does not exist.
        ValueError: On missing fields or inconsistent pairings.
    """
    data = _read_yaml(path or GRID_PATH, "Grid")

    drivers: list[DriverProfile] = []
    for idx, entry in enumerate(data["drivers"]):
        _require(entry, _DRIVER_FIELDS, f"Driver entry {idx}")
        drivers.append(
            DriverProfile(
                id=str(entry["id"]),
                name=str(entry["name"]),
                constructor_id=str(entry["constructor"]),
                prior_points=int(entry["prior_points"]),
                strength=float(entry["strength"]),
                consistency=float(entry["consistency"]),
            )
        )

    by_id = {d.id: d for d in drivers}
    if len(by_id) != len(drivers):
        raise ValueError("Grid contains duplicate driver ids")

    constructors: list[ConstructorProfile] = []
    for idx, entry in enumerate(data["constructors"]):
        _require(entry, _CONSTRUCTOR_FIELDS, f"Constructor entry {idx}")
        pair = tuple(str(d) for d in entry["drivers"])
        for driver_id in pair:
            driver = by_id.get(driver_id)
            if driver is None:
                raise ValueError(
                    f"Constructor '{entry['id']}' references unknown driver '{driver_id}'"
                )
            if driver.constructor_id != entry["id"]:
                raise ValueError(
                    f"Driver '{driver_id}' races for '{driver.constructor_id}', "
                    f"not '{entry['id']}'"
                )
        constructors.append(
            ConstructorProfile(
                id=str(entry["id"]),
                name=str(entry["name"]),
                prior_points=int(entry["prior_points"]),
                driver_ids=pair,  # type: ignore[arg-type]
            )
        )

    return drivers, constructors


def load_rules(path: Path | None = None) -> RuleSet:
    """Build a :class:`RuleSet`, applying YAML overrides when *path* is given.

    Without a path the standard defaults are returned.  Unknown keys are
    rejected so typos cannot silently fall back to defaults.

    Raises:
        FileNotFoundError: If *path* does not exist.
        ValueError: On unknown keys or an invalid resulting rule set.
    """
    if path is None:
        return RuleSet()

    data = _read_yaml(path, "Rules") or {}
    known = {f.name for f in dataclasses.fields(RuleSet)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ValueError(f"Unknown rule keys: {', '.join(unknown)}")

    overrides: dict[str, Any] = dict(data)
    for key in ("race_points", "sprint_points"):
        if key in overrides:
            overrides[key] = tuple(int(p) for p in overrides[key])
    if "lock_tiers" in overrides:
        overrides["lock_tiers"] = tuple(
            LockTier(max_races=t.get("max_races"), bonus_per_race=int(t["bonus_per_race"]))
            for t in overrides["lock_tiers"]
        )
    if "price_table" in overrides:
        overrides["price_table"] = {
            str(tier): {str(band): int(v) for band, v in row.items()}
            for tier, row in overrides["price_table"].items()
        }

    return RuleSet(**overrides)
