"""Team-level round scoring.

Combines the five driver breakdowns and the constructor breakdown of a
roster into one round total, applies the stale-roster penalty and any
externally supplied catch-up bonus, and keeps the season tally.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from f1_fantasy.core.contracts import FantasyTeam
from f1_fantasy.core.market import Market
from f1_fantasy.core.results import RoundResult
from f1_fantasy.core.rules import RuleSet
from f1_fantasy.core.scoring import (
    ScoreBreakdown,
    base_driver_points,
    is_ace_eligible,
    score_constructor,
    score_driver,
)


@dataclass(frozen=True)
class TeamRoundScore:
    """A team's scoring for one round."""

    round_index: int
    drivers: tuple[ScoreBreakdown, ...] = ()
    constructor: ScoreBreakdown | None = None
    stale_penalty: int = 0
    catch_up_bonus: int = 0
    driver_totals: dict[str, int] = field(default_factory=dict)

    @property
    def drivers_total(self) -> int:
        return sum(b.total for b in self.drivers)

    @property
    def constructor_total(self) -> int:
        return self.constructor.total if self.constructor is not None else 0

    @property
    def total(self) -> int:
        return (
            self.drivers_total
            + self.constructor_total
            - self.stale_penalty
            + self.catch_up_bonus
        )


def stale_roster_penalty(races_since_transfer: int, rules: RuleSet) -> int:
    """Points lost for every race beyond the threshold without a transfer."""
    over = races_since_transfer - rules.stale_threshold
    return max(0, over) * rules.stale_penalty_per_race


def score_team_round(
    team: FantasyTeam,
    round_result: RoundResult,
    market: Market,
    rules: RuleSet,
    catch_up_bonus: int = 0,
) -> TeamRoundScore:
    """Score a roster against one round of results.

    The Ace doubles only while its current price stays within the Ace
    ceiling.  A slot is a new signing (hot-hand eligible) when it was
    bought deliberately and has not yet completed a race.

    Args:
        team: Roster to score; read only.
        round_result: Results for the round.
        market: Current market, for Ace eligibility checks.
        rules: Active rule set.
        catch_up_bonus: Additive bonus computed by the caller.

    Returns:
        A :class:`TeamRoundScore`.

    Raises:
        ValueError: If *catch_up_bonus* is negative.
    """
    if catch_up_bonus < 0:
        raise ValueError("catch_up_bonus must be >= 0.")

    def ace_active(asset_id: str) -> bool:
        if team.ace_id != asset_id:
            return False
        asset = market.get(asset_id)
        return asset is not None and is_ace_eligible(asset.price, rules)

    breakdowns: list[ScoreBreakdown] = []
    for slot in team.drivers:
        breakdowns.append(
            score_driver(
                slot.asset_id,
                round_result.get(slot.asset_id),
                rules,
                races_held=slot.races_held,
                is_ace=ace_active(slot.asset_id),
                is_new_signing=slot.races_held == 0 and not slot.reserve,
            )
        )

    constructor_score: ScoreBreakdown | None = None
    if team.constructor is not None:
        profile = market.constructor_profiles.get(team.constructor.asset_id)
        first, second = profile.driver_ids if profile is not None else ("", "")
        constructor_score = score_constructor(
            team.constructor.asset_id,
            base_driver_points(round_result.get(first), rules),
            base_driver_points(round_result.get(second), rules),
            rules,
            races_held=team.constructor.races_held,
            is_ace=ace_active(team.constructor.asset_id),
        )

    return TeamRoundScore(
        round_index=round_result.round_index,
        drivers=tuple(breakdowns),
        constructor=constructor_score,
        stale_penalty=stale_roster_penalty(team.races_since_transfer, rules),
        catch_up_bonus=catch_up_bonus,
        driver_totals={b.asset_id: b.total for b in breakdowns},
    )


def credit_round(team: FantasyTeam, score: TeamRoundScore) -> None:
    """Add a round's points to the team and to each slot's running tally."""
    for slot in team.drivers:
        slot.points_scored += score.driver_totals.get(slot.asset_id, 0)
    if team.constructor is not None and score.constructor is not None:
        team.constructor.points_scored += score.constructor.total
    team.round_points.append(score.total)


def season_total(team: FantasyTeam) -> int:
    """Round totals plus banked points from expired contracts and sale bonuses."""
    return sum(team.round_points) + team.locked_points + team.bonus_points
