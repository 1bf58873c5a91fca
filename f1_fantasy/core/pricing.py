"""Price model for fantasy market assets.

Two models are supported, selected by ``RuleSet.price_model``:

- **performance** -- a points-per-price ratio is banded into
  great/good/poor/terrible and combined with the asset's price tier
  (A/B/C) to look up a bounded price delta.
- **rolling** -- the price tracks the average of the most recent race
  scores scaled by the dollars-per-point constant, moving at most the
  per-race cap each round.

A DNF composes an extra lap-scaled penalty on top of either model.
Every result is clamped to ``[min_price, max_price]``.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING

from f1_fantasy.core.results import FinishStatus, RoundResult
from f1_fantasy.core.rules import RuleSet
from f1_fantasy.core.scoring import base_driver_points, score_constructor

if TYPE_CHECKING:
    from f1_fantasy.core.market import Asset, Market

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PriceUpdate:
    """Outcome of one asset's end-of-round repricing."""

    previous_price: int
    new_price: int
    tier: str
    performance: str
    dnf_penalty: int = 0

    @property
    def change(self) -> int:
        return self.new_price - self.previous_price


def _clamp(value: int, low: int, high: int) -> int:
    return max(low, min(high, value))


# ---------------------------------------------------------------------------
# Classification
# ---------------------------------------------------------------------------


def classify_tier(price: float, rules: RuleSet) -> str:
    """Return the price tier; a price exactly on a threshold falls to the lower tier."""
    if price > rules.tier_a_threshold:
        return "A"
    if price > rules.tier_b_threshold:
        return "B"
    return "C"


def classify_performance(points: float, price: float, rules: RuleSet) -> str:
    """Band the points-per-price ratio, highest band first."""
    ratio = points / price if price > 0 else 0.0
    if ratio >= rules.ppm_great:
        return "great"
    if ratio >= rules.ppm_good:
        return "good"
    if ratio >= rules.ppm_poor:
        return "poor"
    return "terrible"


def price_delta(tier: str, performance: str, rules: RuleSet) -> int:
    """Table delta for *tier* x *performance*, clamped to the per-race cap."""
    raw = rules.price_table[tier][performance]
    cap = rules.max_change_per_race
    return _clamp(raw, -cap, cap)


def dnf_price_penalty(retired_on_lap: int, total_laps: int, rules: RuleSet) -> int:
    """Extra price drop for a retirement, larger the earlier it happened.

    Scales linearly from ``dnf_price_penalty_max`` (lap 1) down to
    ``dnf_price_penalty_min`` (final lap), rounded up.

    Args:
        retired_on_lap: Lap of retirement; ``<= 0`` means before lap 1
            completed (or unknown) and draws the maximum.
        total_laps: Scheduled race distance.
        rules: Active rule set.
    """
    high = rules.dnf_price_penalty_max
    low = rules.dnf_price_penalty_min
    if total_laps <= 1:
        return low
    if retired_on_lap <= 0:
        return high
    if retired_on_lap >= total_laps:
        return low
    progress = (retired_on_lap - 1) / (total_laps - 1)
    return math.ceil(low + (high - low) * (1.0 - progress))


# ---------------------------------------------------------------------------
# Price derivation
# ---------------------------------------------------------------------------


def initial_price(prior_points: float, rules: RuleSet) -> int:
    """Opening price from last season's points per race, floored and clamped."""
    raw = math.floor(prior_points * rules.dollars_per_point / rules.races_per_season)
    return _clamp(raw, rules.min_price, rules.max_price)


def next_price(
    price: int,
    points: float,
    rules: RuleSet,
    dnf_lap: int | None = None,
    total_laps: int = 0,
) -> PriceUpdate:
    """Performance-model price after a round.

    Args:
        price: Current price.
        points: Fantasy points scored in the round.
        rules: Active rule set.
        dnf_lap: Retirement lap when the asset did not finish, else ``None``.
        total_laps: Scheduled race distance.

    Returns:
        A :class:`PriceUpdate` with the new price inside the price bounds.
    """
    tier = classify_tier(price, rules)
    performance = classify_performance(points, price, rules)
    delta = price_delta(tier, performance, rules)
    penalty = 0 if dnf_lap is None else dnf_price_penalty(dnf_lap, total_laps, rules)
    new_price = _clamp(price + delta - penalty, rules.min_price, rules.max_price)
    return PriceUpdate(price, new_price, tier, performance, penalty)


def rolling_average(
    points: Sequence[float],
    rules: RuleSet,
    sprint_flags: Sequence[bool] | None = None,
) -> float:
    """Mean of the most recent ``rolling_window`` scores (most recent first).

    When *sprint_flags* are given, sprint weekends count with
    ``sprint_weight`` so their inflated totals do not dominate.
    """
    window = list(points[: rules.rolling_window])
    if not window:
        return 0.0
    if sprint_flags is None:
        return sum(window) / len(window)
    weights = [
        rules.sprint_weight if flag else 1.0
        for flag in list(sprint_flags[: rules.rolling_window])
    ]
    weighted = sum(p * w for p, w in zip(window, weights))
    return weighted / sum(weights)


def rolling_price(
    points: Sequence[float],
    rules: RuleSet,
    sprint_flags: Sequence[bool] | None = None,
) -> int:
    """Target price: rolling average times dollars-per-point, floored and clamped."""
    average = rolling_average(points, rules, sprint_flags)
    raw = math.floor(average * rules.dollars_per_point)
    return _clamp(raw, rules.min_price, rules.max_price)


def rolling_price_update(
    price: int,
    points: Sequence[float],
    rules: RuleSet,
    sprint_flags: Sequence[bool] | None = None,
    dnf_lap: int | None = None,
    total_laps: int = 0,
) -> PriceUpdate:
    """Rolling-model price after a round, capped at the per-race move."""
    target = rolling_price(points, rules, sprint_flags)
    cap = rules.max_change_per_race
    step = _clamp(target - price, -cap, cap)
    penalty = 0 if dnf_lap is None else dnf_price_penalty(dnf_lap, total_laps, rules)
    new_price = _clamp(price + step - penalty, rules.min_price, rules.max_price)
    latest = points[0] if points else 0
    return PriceUpdate(
        price,
        new_price,
        classify_tier(price, rules),
        classify_performance(latest, price, rules),
        penalty,
    )


def replay_prices(
    start_price: int,
    points_by_round: Sequence[float],
    rules: RuleSet,
) -> list[int]:
    """Rebuild a performance-model price path from stored round points.

    Pure and idempotent: replaying the same inputs always yields the same
    path, so a failed recompute can simply be run again.

    Returns:
        Prices after each round, starting with *start_price*.
    """
    path = [start_price]
    for points in points_by_round:
        path.append(next_price(path[-1], points, rules).new_price)
    return path


# ---------------------------------------------------------------------------
# Market update
# ---------------------------------------------------------------------------


def _reprice(
    asset: Asset,
    points: int,
    rules: RuleSet,
    dnf_lap: int | None,
    total_laps: int,
) -> PriceUpdate:
    if rules.price_model == "rolling":
        return rolling_price_update(
            asset.price,
            asset.recent_points,
            rules,
            asset.recent_sprint_flags,
            dnf_lap,
            total_laps,
        )
    return next_price(asset.price, points, rules, dnf_lap, total_laps)


def update_market_prices(
    market: Market,
    round_result: RoundResult,
    rules: RuleSet,
) -> dict[str, PriceUpdate]:
    """Record the round's points on every asset and reprice it.

    Drivers are scored without roster context; constructors take the
    floored average of their two drivers.  Drivers missing from the
    round score zero and take no DNF penalty.

    Returns:
        ``{asset_id: PriceUpdate}`` for every active asset.
    """
    updates: dict[str, PriceUpdate] = {}
    driver_points: dict[str, int] = {}

    for asset in market.drivers.values():
        result = round_result.get(asset.id)
        points = base_driver_points(result, rules)
        driver_points[asset.id] = points
        if not asset.active:
            continue

        dnf_lap: int | None = None
        race = result.race if result is not None else None
        if race is not None:
            if race.status is FinishStatus.DNF:
                asset.dnfs += 1
                dnf_lap = race.retired_on_lap if race.retired_on_lap is not None else 0
            elif race.position is not None:
                asset.finishes += 1
                asset.finish_position_sum += race.position
                if race.position == 1:
                    asset.wins += 1
                if race.position <= 3:
                    asset.podiums += 1

        asset.record_points(points, round_result.has_sprint, rules.rolling_window)
        update = _reprice(asset, points, rules, dnf_lap, round_result.total_laps)
        asset.set_price(update.new_price)
        updates[asset.id] = update

    for asset in market.constructors.values():
        if not asset.active:
            continue
        profile = market.constructor_profiles[asset.id]
        first, second = profile.driver_ids
        points = score_constructor(
            asset.id, driver_points.get(first, 0), driver_points.get(second, 0), rules
        ).total
        asset.record_points(points, round_result.has_sprint, rules.rolling_window)
        update = _reprice(asset, points, rules, None, round_result.total_laps)
        asset.set_price(update.new_price)
        updates[asset.id] = update

    logger.debug(
        "Round %d repriced %d assets", round_result.round_index, len(updates)
    )
    return updates
