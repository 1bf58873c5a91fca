"""Core scoring, pricing and contract modules for the fantasy engine."""

from f1_fantasy.core.contracts import (
    ContractLedger,
    FantasyTeam,
    RosterSlot,
    TradeAction,
    TradeLogEntry,
)
from f1_fantasy.core.market import (
    Asset,
    AssetKind,
    ConstructorProfile,
    DriverProfile,
    Market,
)
from f1_fantasy.core.pricing import (
    PriceUpdate,
    classify_performance,
    classify_tier,
    dnf_price_penalty,
    initial_price,
    next_price,
    replay_prices,
    rolling_average,
    rolling_price,
    update_market_prices,
)
from f1_fantasy.core.race import Weekend, simulate_weekend
from f1_fantasy.core.results import FinishStatus, RaceResult, RoundResult, SessionResult
from f1_fantasy.core.rules import DEFAULT_RULES, LockTier, RuleSet
from f1_fantasy.core.scoring import (
    ScoreBreakdown,
    ScoreItem,
    base_driver_points,
    lock_bonus,
    score_constructor,
    score_driver,
)
from f1_fantasy.core.team_score import (
    TeamRoundScore,
    score_team_round,
    season_total,
    stale_roster_penalty,
)

__all__ = [
    "Asset",
    "AssetKind",
    "ConstructorProfile",
    "ContractLedger",
    "DEFAULT_RULES",
    "DriverProfile",
    "FantasyTeam",
    "FinishStatus",
    "LockTier",
    "Market",
    "PriceUpdate",
    "RaceResult",
    "RosterSlot",
    "RoundResult",
    "RuleSet",
    "ScoreBreakdown",
    "ScoreItem",
    "SessionResult",
    "TeamRoundScore",
    "TradeAction",
    "TradeLogEntry",
    "Weekend",
    "base_driver_points",
    "classify_performance",
    "classify_tier",
    "dnf_price_penalty",
    "initial_price",
    "lock_bonus",
    "next_price",
    "replay_prices",
    "rolling_average",
    "rolling_price",
    "score_constructor",
    "score_driver",
    "score_team_round",
    "season_total",
    "simulate_weekend",
    "stale_roster_penalty",
    "update_market_prices",
]
