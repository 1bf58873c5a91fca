"""Fantasy points scoring for drivers and constructors.

All functions are pure: they turn immutable result facts plus roster
context (races held, Ace flag, new-signing flag) into an itemised
:class:`ScoreBreakdown`.  Point tables and bonuses come from the
:class:`~f1_fantasy.core.rules.RuleSet` passed in.
"""

from __future__ import annotations

from dataclasses import dataclass

from f1_fantasy.core.results import FinishStatus, RaceResult, SessionResult
from f1_fantasy.core.rules import RuleSet

# Categories that make up the race+sprint component (the part an Ace doubles).
BASE_CATEGORIES: frozenset[str] = frozenset(
    {"race", "sprint", "position", "fastest_lap", "penalty", "average"}
)


@dataclass(frozen=True)
class ScoreItem:
    """One line of a score breakdown."""

    label: str
    points: int
    category: str


@dataclass(frozen=True)
class ScoreBreakdown:
    """Itemised points for one asset in one round.

    Attributes:
        asset_id: Driver or constructor identifier.
        items: Point contributions in the order they were applied.
    """

    asset_id: str
    items: tuple[ScoreItem, ...] = ()

    def _sum(self, *categories: str) -> int:
        return sum(i.points for i in self.items if i.category in categories)

    @property
    def race_points(self) -> int:
        return self._sum("race")

    @property
    def sprint_points(self) -> int:
        return self._sum("sprint")

    @property
    def position_bonus(self) -> int:
        return self._sum("position")

    @property
    def fastest_lap_bonus(self) -> int:
        return self._sum("fastest_lap")

    @property
    def penalties(self) -> int:
        return self._sum("penalty")

    @property
    def ace_bonus(self) -> int:
        return self._sum("ace")

    @property
    def lock_bonus(self) -> int:
        return self._sum("lock")

    @property
    def hot_hand_bonus(self) -> int:
        return self._sum("hot_hand")

    @property
    def base_points(self) -> int:
        """Race+sprint component before Ace, lock and hot-hand extras."""
        return sum(i.points for i in self.items if i.category in BASE_CATEGORIES)

    @property
    def total(self) -> int:
        return sum(i.points for i in self.items)


# ---------------------------------------------------------------------------
# Session scoring
# ---------------------------------------------------------------------------


def _penalty_item(result: SessionResult, rules: RuleSet, prefix: str) -> ScoreItem:
    if result.status is FinishStatus.DSQ:
        return ScoreItem(f"{prefix}DSQ", rules.dsq_penalty, "penalty")
    return ScoreItem(f"{prefix}DNF", rules.dnf_penalty, "penalty")


def score_race_session(result: SessionResult, rules: RuleSet) -> list[ScoreItem]:
    """Score a grand prix result.

    A DNF or DSQ yields only the flat penalty; position points, the
    position bonus and the fastest-lap bonus are all forfeited.
    """
    if not result.finished:
        return [_penalty_item(result, rules, "")]

    assert result.position is not None
    items: list[ScoreItem] = []
    if result.position <= len(rules.race_points):
        items.append(
            ScoreItem(
                f"P{result.position} Finish",
                rules.race_points[result.position - 1],
                "race",
            )
        )

    gained = result.positions_gained
    if gained > 0:
        items.append(
            ScoreItem("Positions Gained", gained * rules.position_gained_bonus, "position")
        )
    elif gained < 0:
        items.append(
            ScoreItem("Positions Lost", gained * rules.position_lost_penalty, "position")
        )

    if result.fastest_lap and result.position <= len(rules.race_points):
        items.append(ScoreItem("Fastest Lap", rules.fastest_lap_bonus, "fastest_lap"))
    return items


def score_sprint_session(result: SessionResult, rules: RuleSet) -> list[ScoreItem]:
    """Score a sprint result (smaller table, no position or lap bonuses)."""
    if not result.finished:
        return [_penalty_item(result, rules, "Sprint ")]

    assert result.position is not None
    if result.position <= len(rules.sprint_points):
        return [
            ScoreItem(
                f"Sprint P{result.position}",
                rules.sprint_points[result.position - 1],
                "sprint",
            )
        ]
    return []


# ---------------------------------------------------------------------------
# Bonuses
# ---------------------------------------------------------------------------


def lock_bonus(races_held: int, rules: RuleSet) -> int:
    """Loyalty bonus for holding an asset for *races_held* races.

    Races are credited band by band up the ladder (1-3 at the first
    rate, 4-6 at the second, the rest at the last).  Holding for the
    full season replaces the ladder with the one-time season bonus.
    """
    if races_held <= 0:
        return 0
    if races_held >= rules.races_per_season:
        return rules.full_season_bonus

    bonus = 0
    covered = 0
    for tier in rules.lock_tiers:
        upper = races_held if tier.max_races is None else min(races_held, tier.max_races)
        if upper <= covered:
            break
        bonus += (upper - covered) * tier.bonus_per_race
        covered = upper
    return bonus


def hot_hand_bonus(race: SessionResult | None, base_points: int, rules: RuleSet) -> int:
    """Bonus for a new signing that delivers straight away.

    A podium earns the podium bonus; otherwise reaching the points
    threshold earns the standard bonus.
    """
    if race is None:
        return 0
    if race.position is not None and 1 <= race.position <= 3:
        return rules.hot_hand_podium_bonus
    if base_points >= rules.hot_hand_min_points:
        return rules.hot_hand_bonus
    return 0


def is_ace_eligible(price: int, rules: RuleSet) -> bool:
    """An asset may be Ace only while priced at or below the ceiling."""
    return price <= rules.ace_max_price


# ---------------------------------------------------------------------------
# Asset scoring
# ---------------------------------------------------------------------------


def score_driver(
    driver_id: str,
    result: RaceResult | None,
    rules: RuleSet,
    races_held: int = 0,
    is_ace: bool = False,
    is_new_signing: bool = False,
) -> ScoreBreakdown:
    """Score one driver for one round.

    Args:
        driver_id: Driver identifier.
        result: The driver's weekend result; ``None`` scores zero.
        rules: Active rule set.
        races_held: Contract age used for the lock bonus.
        is_ace: Whether the driver is the team's eligible Ace.
        is_new_signing: Whether the driver was bought for this round.

    Returns:
        An immutable :class:`ScoreBreakdown`.
    """
    items: list[ScoreItem] = []
    if result is not None:
        if result.race is not None:
            items.extend(score_race_session(result.race, rules))
        if result.sprint is not None:
            items.extend(score_sprint_session(result.sprint, rules))

    base = sum(i.points for i in items)
    if is_ace and base != 0:
        items.append(ScoreItem("Ace Bonus", (rules.ace_multiplier - 1) * base, "ace"))

    lock = lock_bonus(races_held, rules)
    if lock:
        items.append(ScoreItem("Lock Bonus", lock, "lock"))

    if is_new_signing and result is not None:
        hot = hot_hand_bonus(result.race, base, rules)
        if hot:
            items.append(ScoreItem("Hot Hand", hot, "hot_hand"))

    return ScoreBreakdown(asset_id=driver_id, items=tuple(items))


def score_constructor(
    constructor_id: str,
    driver1_total: int,
    driver2_total: int,
    rules: RuleSet,
    races_held: int = 0,
    is_ace: bool = False,
) -> ScoreBreakdown:
    """Score a constructor from its two drivers' totals.

    The average is floored toward negative infinity, so two DNF drivers
    still average to the penalty value.
    """
    average = (driver1_total + driver2_total) // 2
    items: list[ScoreItem] = [ScoreItem("Driver Average", average, "average")]
    if is_ace and average != 0:
        items.append(ScoreItem("Ace Bonus", (rules.ace_multiplier - 1) * average, "ace"))
    lock = lock_bonus(races_held, rules)
    if lock:
        items.append(ScoreItem("Lock Bonus", lock, "lock"))
    return ScoreBreakdown(asset_id=constructor_id, items=tuple(items))


def base_driver_points(result: RaceResult | None, rules: RuleSet) -> int:
    """Driver points with no roster context (no Ace, lock or hot hand)."""
    return score_driver("", result, rules).total
