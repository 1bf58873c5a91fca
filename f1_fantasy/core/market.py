"""Market assets (drivers and constructors) and the shared price board.

Profiles are the static grid facts loaded from configuration.  Assets are
the mutable market view of those profiles: price, short points history
and season statistics.  Prices are written only by the price model once
per round.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from f1_fantasy.core.pricing import initial_price
from f1_fantasy.core.rules import RuleSet


class AssetKind(str, Enum):
    """Type of market asset."""

    DRIVER = "driver"
    CONSTRUCTOR = "constructor"


# ---------------------------------------------------------------------------
# Static grid profiles
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class DriverProfile:
    """Immutable grid entry for a driver.

    Attributes:
        id: Stable identifier (e.g. ``"verstappen"``).
        name: Display name.
        constructor_id: Team the driver races for.
        prior_points: Championship points scored the previous season,
            used to seed the opening price.
        strength: Raw pace rating used by the race generator.
        consistency: Fraction in ``[0, 1]`` damping race-to-race noise.
    """

    id: str
    name: str
    constructor_id: str
    prior_points: int
    strength: float
    consistency: float

    def __post_init__(self) -> None:
        """Validate driver profile values."""
        if not self.id:
            raise ValueError("id must not be empty.")
        if self.prior_points < 0:
            raise ValueError("prior_points must be >= 0.")
        if self.strength <= 0.0:
            raise ValueError("strength must be > 0.")
        if not 0.0 <= self.consistency <= 1.0:
            raise ValueError("consistency must be in [0, 1].")


@dataclass(frozen=True)
class ConstructorProfile:
    """Immutable grid entry for a constructor and its two race drivers."""

    id: str
    name: str
    prior_points: int
    driver_ids: tuple[str, str]

    def __post_init__(self) -> None:
        """Validate constructor profile values."""
        if not self.id:
            raise ValueError("id must not be empty.")
        if self.prior_points < 0:
            raise ValueError("prior_points must be >= 0.")
        if len(self.driver_ids) != 2 or self.driver_ids[0] == self.driver_ids[1]:
            raise ValueError(f"constructor '{self.id}' needs two distinct drivers.")


# ---------------------------------------------------------------------------
# Mutable market assets
# ---------------------------------------------------------------------------


@dataclass
class Asset:
    """Market state of one driver or constructor.

    ``recent_points`` is most-recent-first and never longer than the
    rule set's rolling window; ``recent_sprint_flags`` runs in parallel
    and marks sprint weekends.
    """

    id: str
    name: str
    kind: AssetKind
    price: int
    previous_price: int
    recent_points: list[int] = field(default_factory=list)
    recent_sprint_flags: list[bool] = field(default_factory=list)
    season_points: int = 0
    active: bool = True
    constructor_id: str | None = None
    wins: int = 0
    podiums: int = 0
    dnfs: int = 0
    finishes: int = 0
    finish_position_sum: int = 0

    def record_points(self, points: int, sprint_weekend: bool, window: int) -> None:
        """Push one round's points onto the bounded history."""
        self.recent_points.insert(0, points)
        self.recent_sprint_flags.insert(0, sprint_weekend)
        del self.recent_points[window:]
        del self.recent_sprint_flags[window:]
        self.season_points += points

    def set_price(self, new_price: int) -> None:
        """Move to *new_price*, remembering the price it replaces."""
        self.previous_price = self.price
        self.price = new_price

    @property
    def price_change(self) -> int:
        return self.price - self.previous_price

    @property
    def form(self) -> int:
        """Sum of the three most recent point totals."""
        return sum(self.recent_points[:3])

    @property
    def average_finish(self) -> float:
        if self.finishes == 0:
            return 0.0
        return self.finish_position_sum / self.finishes


class Market:
    """Ordered collection of driver and constructor assets.

    Insertion order follows the grid file and is the tie-break order for
    every scan performed by agents and the auto-fill logic.
    """

    __slots__ = ("drivers", "constructors", "driver_profiles", "constructor_profiles")

    def __init__(
        self,
        drivers: list[DriverProfile],
        constructors: list[ConstructorProfile],
        rules: RuleSet,
    ) -> None:
        self.driver_profiles: dict[str, DriverProfile] = {d.id: d for d in drivers}
        self.constructor_profiles: dict[str, ConstructorProfile] = {
            c.id: c for c in constructors
        }
        self.drivers: dict[str, Asset] = {}
        self.constructors: dict[str, Asset] = {}

        for profile in drivers:
            price = initial_price(profile.prior_points, rules)
            self.drivers[profile.id] = Asset(
                id=profile.id,
                name=profile.name,
                kind=AssetKind.DRIVER,
                price=price,
                previous_price=price,
                constructor_id=profile.constructor_id,
            )
        for profile in constructors:
            price = initial_price(profile.prior_points, rules)
            self.constructors[profile.id] = Asset(
                id=profile.id,
                name=profile.name,
                kind=AssetKind.CONSTRUCTOR,
                price=price,
                previous_price=price,
            )

    def driver(self, asset_id: str) -> Asset | None:
        return self.drivers.get(asset_id)

    def constructor(self, asset_id: str) -> Asset | None:
        return self.constructors.get(asset_id)

    def get(self, asset_id: str) -> Asset | None:
        """Look up an asset of either kind."""
        return self.drivers.get(asset_id) or self.constructors.get(asset_id)

    def active_drivers(self) -> list[Asset]:
        return [a for a in self.drivers.values() if a.active]

    def active_constructors(self) -> list[Asset]:
        return [a for a in self.constructors.values() if a.active]

    def price_board(self) -> dict[str, int]:
        """Snapshot ``{asset_id: price}`` across both asset kinds."""
        board = {a.id: a.price for a in self.drivers.values()}
        board.update({a.id: a.price for a in self.constructors.values()})
        return board
