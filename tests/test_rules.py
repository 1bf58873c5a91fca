"""Tests for the immutable rule set and its validation."""

from __future__ import annotations

import dataclasses

import pytest

from f1_fantasy.core.rules import DEFAULT_RULES, LockTier, RuleSet

# ---------------------------------------------------------------------------
# Defaults
# ---------------------------------------------------------------------------


def test_default_rules_match_standard_variant() -> None:
    """The default rule set carries the standard economy constants."""
    rules = DEFAULT_RULES
    assert rules.races_per_season == 24
    assert rules.starting_budget == 1000
    assert rules.team_size == 5
    assert (rules.min_price, rules.max_price) == (5, 700)
    assert rules.max_change_per_race == 60
    assert (rules.tier_a_threshold, rules.tier_b_threshold) == (240, 120)
    assert rules.race_points[0] == 25 and len(rules.race_points) == 10
    assert rules.sprint_points[0] == 8 and len(rules.sprint_points) == 8
    assert rules.contract_length == 5
    assert rules.ace_max_price == 240


def test_rules_are_frozen() -> None:
    """A rule set cannot be mutated after construction."""
    with pytest.raises(dataclasses.FrozenInstanceError):
        DEFAULT_RULES.team_size = 6  # type: ignore[misc]


def test_replace_builds_a_variant() -> None:
    """dataclasses.replace produces a validated variant side by side."""
    variant = dataclasses.replace(DEFAULT_RULES, price_model="rolling")
    assert variant.price_model == "rolling"
    assert DEFAULT_RULES.price_model == "performance"


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------


def test_overlapping_tiers_rejected() -> None:
    """Tier B threshold must sit strictly below tier A."""
    with pytest.raises(ValueError, match="tier thresholds overlap"):
        RuleSet(tier_a_threshold=120, tier_b_threshold=120)


def test_unordered_ppm_bands_rejected() -> None:
    """Performance bands must be strictly ordered poor < good < great."""
    with pytest.raises(ValueError, match="PPM bands"):
        RuleSet(ppm_good=0.07)


def test_price_bounds_rejected() -> None:
    """min_price must be positive and below max_price."""
    with pytest.raises(ValueError, match="price bounds"):
        RuleSet(min_price=800)


def test_incomplete_price_table_rejected() -> None:
    """Every tier must define every performance band."""
    table = {
        "A": {"great": 36, "good": 12, "poor": -12, "terrible": -36},
        "B": {"great": 24, "good": 7, "poor": -7},
        "C": {"great": 12, "good": 5, "poor": -5, "terrible": -12},
    }
    with pytest.raises(ValueError, match="missing band 'terrible'"):
        RuleSet(price_table=table)


def test_unknown_price_model_rejected() -> None:
    with pytest.raises(ValueError, match="price_model"):
        RuleSet(price_model="auction")


def test_lock_tiers_must_end_open() -> None:
    """A closed last lock tier leaves a gap in the ladder."""
    with pytest.raises(ValueError, match="gap"):
        RuleSet(lock_tiers=(LockTier(3, 1), LockTier(6, 2)))


def test_lock_tiers_must_increase() -> None:
    with pytest.raises(ValueError, match="strictly increasing"):
        RuleSet(lock_tiers=(LockTier(6, 1), LockTier(3, 2), LockTier(None, 3)))


def test_negative_lock_bonus_rejected() -> None:
    with pytest.raises(ValueError, match="bonus_per_race"):
        LockTier(max_races=3, bonus_per_race=-1)
