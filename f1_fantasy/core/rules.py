"""Immutable game rules for the fantasy economy.

Every tunable constant of the game (budget, price bounds, tier
thresholds, the tier x performance price table, point tables, lock
bonus tiers, contract terms) lives on a single frozen :class:`RuleSet`.
Pure functions across the engine receive the rule set explicitly so
alternate variants can be exercised side by side.
"""

from __future__ import annotations

from dataclasses import dataclass, field

TIERS: tuple[str, ...] = ("A", "B", "C")
PERFORMANCE_BANDS: tuple[str, ...] = ("great", "good", "poor", "terrible")
PRICE_MODELS: tuple[str, ...] = ("performance", "rolling")


@dataclass(frozen=True)
class LockTier:
    """One band of the loyalty bonus ladder.

    Attributes:
        max_races: Last race count (inclusive) covered by this band.
            ``None`` marks the open-ended final band.
        bonus_per_race: Points credited for each race held inside the band.
    """

    max_races: int | None
    bonus_per_race: int

    def __post_init__(self) -> None:
        if self.max_races is not None and self.max_races < 1:
            raise ValueError("max_races must be >= 1 or None.")
        if self.bonus_per_race < 0:
            raise ValueError("bonus_per_race must be >= 0.")


def _default_price_table() -> dict[str, dict[str, int]]:
    return {
        "A": {"great": 36, "good": 12, "poor": -12, "terrible": -36},
        "B": {"great": 24, "good": 7, "poor": -7, "terrible": -24},
        "C": {"great": 12, "good": 5, "poor": -5, "terrible": -12},
    }


def _default_lock_tiers() -> tuple[LockTier, ...]:
    return (
        LockTier(max_races=3, bonus_per_race=1),
        LockTier(max_races=6, bonus_per_race=2),
        LockTier(max_races=None, bonus_per_race=3),
    )


@dataclass(frozen=True)
class RuleSet:
    """Complete configuration of one fantasy game variant.

    The defaults describe the standard variant.  Validation runs in
    ``__post_init__`` so a malformed variant fails at construction time.
    """

    # -- Season ---------------------------------------------------------------
    races_per_season: int = 24
    starting_budget: int = 1000
    team_size: int = 5

    # -- Prices ---------------------------------------------------------------
    price_model: str = "performance"
    dollars_per_point: int = 24
    rolling_window: int = 5
    sprint_weight: float = 0.75
    min_price: int = 5
    max_price: int = 700
    max_change_per_race: int = 60
    tier_a_threshold: int = 240
    tier_b_threshold: int = 120
    ppm_great: float = 0.06
    ppm_good: float = 0.04
    ppm_poor: float = 0.02
    price_table: dict[str, dict[str, int]] = field(
        default_factory=_default_price_table
    )
    dnf_price_penalty_max: int = 10
    dnf_price_penalty_min: int = 1

    # -- Points ---------------------------------------------------------------
    race_points: tuple[int, ...] = (25, 18, 15, 12, 10, 8, 6, 4, 2, 1)
    sprint_points: tuple[int, ...] = (8, 7, 6, 5, 4, 3, 2, 1)
    fastest_lap_bonus: int = 1
    position_gained_bonus: int = 1
    position_lost_penalty: int = 1
    dnf_penalty: int = -5
    dsq_penalty: int = -5
    lock_tiers: tuple[LockTier, ...] = field(default_factory=_default_lock_tiers)
    full_season_bonus: int = 100

    # -- Ace ------------------------------------------------------------------
    ace_multiplier: int = 2
    ace_max_price: int = 240

    # -- Team -----------------------------------------------------------------
    stale_threshold: int = 5
    stale_penalty_per_race: int = 5
    hot_hand_bonus: int = 10
    hot_hand_podium_bonus: int = 15
    hot_hand_min_points: int = 15
    value_capture_rate: int = 5
    value_capture_unit: int = 10

    # -- Contracts ------------------------------------------------------------
    contract_length: int = 5
    lockout_races: int = 1
    early_termination_rate: float = 0.05
    sale_commission_rate: float = 0.0

    def __post_init__(self) -> None:
        """Validate the rule set."""
        if self.races_per_season < 1:
            raise ValueError("races_per_season must be >= 1.")
        if self.starting_budget <= 0:
            raise ValueError("starting_budget must be > 0.")
        if self.team_size < 1:
            raise ValueError("team_size must be >= 1.")
        if self.price_model not in PRICE_MODELS:
            raise ValueError(
                f"price_model must be one of {PRICE_MODELS}, got {self.price_model!r}"
            )
        if self.dollars_per_point <= 0:
            raise ValueError("dollars_per_point must be > 0.")
        if self.rolling_window < 1:
            raise ValueError("rolling_window must be >= 1.")
        if not 0.0 < self.sprint_weight <= 1.0:
            raise ValueError("sprint_weight must be in (0, 1].")

        # --- Price bounds ---
        if not 0 < self.min_price < self.max_price:
            raise ValueError("price bounds must satisfy 0 < min_price < max_price.")
        if self.max_change_per_race <= 0:
            raise ValueError("max_change_per_race must be > 0.")

        # --- Tier thresholds must not overlap ---
        if not 0 < self.tier_b_threshold < self.tier_a_threshold:
            raise ValueError(
                "tier thresholds overlap: need 0 < tier_b_threshold < tier_a_threshold."
            )

        # --- Performance bands evaluated highest-first ---
        if not 0.0 < self.ppm_poor < self.ppm_good < self.ppm_great:
            raise ValueError("PPM bands must satisfy 0 < poor < good < great.")

        # --- Price table is a full tier x performance grid ---
        for tier in TIERS:
            row = self.price_table.get(tier)
            if row is None:
                raise ValueError(f"price_table is missing tier '{tier}'.")
            for band in PERFORMANCE_BANDS:
                if band not in row:
                    raise ValueError(
                        f"price_table tier '{tier}' is missing band '{band}'."
                    )

        if not 0 <= self.dnf_price_penalty_min <= self.dnf_price_penalty_max:
            raise ValueError(
                "DNF price penalty must satisfy 0 <= min <= max."
            )
        if not self.race_points or not self.sprint_points:
            raise ValueError("point tables must not be empty.")

        # --- Lock tiers: ascending, contiguous, open-ended last band ---
        if not self.lock_tiers:
            raise ValueError("lock_tiers must not be empty.")
        previous = 0
        for idx, tier in enumerate(self.lock_tiers):
            is_last = idx == len(self.lock_tiers) - 1
            if tier.max_races is None:
                if not is_last:
                    raise ValueError("only the last lock tier may be open-ended.")
                continue
            if tier.max_races <= previous:
                raise ValueError("lock_tiers must have strictly increasing max_races.")
            previous = tier.max_races
        if self.lock_tiers[-1].max_races is not None:
            raise ValueError("lock_tiers has a gap: the last tier must be open-ended.")

        if self.ace_multiplier < 1:
            raise ValueError("ace_multiplier must be >= 1.")
        if self.stale_threshold < 0 or self.stale_penalty_per_race < 0:
            raise ValueError("stale roster settings must be >= 0.")
        if self.value_capture_unit <= 0:
            raise ValueError("value_capture_unit must be > 0.")
        if self.contract_length < 1:
            raise ValueError("contract_length must be >= 1.")
        if self.lockout_races < 0:
            raise ValueError("lockout_races must be >= 0.")
        if not 0.0 <= self.early_termination_rate < 1.0:
            raise ValueError("early_termination_rate must be in [0, 1).")
        if not 0.0 <= self.sale_commission_rate < 1.0:
            raise ValueError("sale_commission_rate must be in [0, 1).")


DEFAULT_RULES: RuleSet = RuleSet()
