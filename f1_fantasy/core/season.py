"""Seeded multi-agent fantasy season simulator.

Drives every agent in :data:`~f1_fantasy.core.agents.ALL_AGENTS` through
the calendar.  Each round runs the same fixed sequence::

    decide -> apply trades -> race -> score -> reprice -> advance contracts -> snapshot

Seeding follows a two-level scheme.  Agent randomness (random rosters,
random trades) draws from one generator seeded with ``seed``; each race
weekend gets its own generator seeded with::

    race_seed = seed + round_index * 1000

so identical seeds replay identical races, decisions and standings.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import dataclass, field

import numpy as np

from f1_fantasy.config import load_calendar, load_grid, load_rules
from f1_fantasy.core.agents import ALL_AGENTS, AcePolicy, Agent, AgentContext, Decision
from f1_fantasy.core.contracts import ContractLedger, FantasyTeam, TradeLogEntry
from f1_fantasy.core.market import ConstructorProfile, DriverProfile, Market
from f1_fantasy.core.pricing import update_market_prices
from f1_fantasy.core.race import Weekend, simulate_weekend
from f1_fantasy.core.results import RoundResult
from f1_fantasy.core.rules import RuleSet
from f1_fantasy.core.scoring import is_ace_eligible
from f1_fantasy.core.team_score import credit_round, score_team_round, season_total

logger = logging.getLogger(__name__)

DEFAULT_SEED: int = 42


@dataclass
class SeasonResult:
    """Everything a finished simulation produced.

    Attributes:
        seed: Seed the season was run with.
        rules: Rule set used.
        teams: Teams in agent order.
        standings: Teams sorted by season total (ties keep agent order).
        market: Final market state.
        rounds: Generated results per round.
        trade_log: Every ledger transaction in execution order.
        driver_price_history: ``{driver_id: [opening, after R1, ...]}``.
        constructor_price_history: Same for constructors.
        trade_counts: Voluntary buys plus sells per driver.
    """

    seed: int
    rules: RuleSet
    teams: list[FantasyTeam]
    standings: list[FantasyTeam]
    market: Market
    rounds: list[RoundResult] = field(default_factory=list)
    trade_log: list[TradeLogEntry] = field(default_factory=list)
    driver_price_history: dict[str, list[int]] = field(default_factory=dict)
    constructor_price_history: dict[str, list[int]] = field(default_factory=dict)
    trade_counts: dict[str, int] = field(default_factory=dict)


def _apply_decision(
    ledger: ContractLedger,
    team: FantasyTeam,
    decision: Decision,
    round_index: int,
    completed_races: int,
    trade_counts: dict[str, int],
) -> None:
    # Sells before buys so sale proceeds fund the replacements.
    for driver_id in decision.sell:
        if ledger.sell_driver(team, driver_id, round_index, "Strategy trade"):
            trade_counts[driver_id] += 1
    if decision.sell_constructor:
        ledger.sell_constructor(team, round_index, "Strategy trade")

    for driver_id in decision.buy:
        if ledger.buy_driver(team, driver_id, round_index, completed_races, "Strategy trade"):
            trade_counts[driver_id] += 1
    if decision.buy_constructor_id is not None:
        ledger.buy_constructor(
            team, decision.buy_constructor_id, round_index, completed_races, "Strategy trade"
        )

    if decision.ace_id is not None:
        ledger.set_ace(team, decision.ace_id)


def _opening_rosters(
    agents: tuple[Agent, ...],
    teams: list[FantasyTeam],
    ledger: ContractLedger,
    market: Market,
    rules: RuleSet,
    rng: np.random.Generator,
) -> None:
    for agent, team in zip(agents, teams):
        ctx = AgentContext(team, market, 0, 0, None, rng, rules)
        pick = agent.picker(ctx)
        for driver_id in pick.driver_ids:
            ledger.buy_driver(team, driver_id, 0, 0, "Initial pick")
        if pick.constructor_id is not None:
            ledger.buy_constructor(team, pick.constructor_id, 0, 0, "Initial pick")

        if agent.strategy.ace is not AcePolicy.NONE:
            eligible = [
                s.asset_id for s in team.drivers if is_ace_eligible(s.current_price, rules)
            ]
            if eligible:
                ledger.set_ace(team, eligible[0])
        # Opening picks are not transfers.
        team.traded_this_round = False


def simulate_season(
    seed: int = DEFAULT_SEED,
    rules: RuleSet | None = None,
    calendar: list[Weekend] | None = None,
    grid: tuple[list[DriverProfile], list[ConstructorProfile]] | None = None,
    agents: tuple[Agent, ...] = ALL_AGENTS,
) -> SeasonResult:
    """Run one complete, reproducible fantasy season.

    Args:
        seed: Master seed.
        rules: Rule set; defaults to the standard variant.
        calendar: Ordered weekends; defaults to ``data/calendar_2026.yaml``
            truncated to ``rules.races_per_season``.
        grid: ``(drivers, constructors)``; defaults to ``data/grid_2026.yaml``.
        agents: Agents in evaluation order.

    Returns:
        A :class:`SeasonResult`.

    Raises:
        ValueError: If the calendar or the agent list is empty.
    """
    rules = rules or load_rules()
    calendar = calendar if calendar is not None else load_calendar()[: rules.races_per_season]
    drivers, constructors = grid if grid is not None else load_grid()
    if not calendar:
        raise ValueError("calendar must not be empty.")
    if not agents:
        raise ValueError("agents must not be empty.")

    market = Market(drivers, constructors, rules)
    ledger = ContractLedger(market, rules)
    agent_rng = np.random.default_rng(seed)

    teams = [
        FantasyTeam(
            user_id=f"user_{idx + 1}",
            name=agent.name,
            budget=rules.starting_budget,
            tags=agent.tags,
        )
        for idx, agent in enumerate(agents)
    ]

    driver_history: dict[str, list[int]] = {a.id: [a.price] for a in market.drivers.values()}
    constructor_history: dict[str, list[int]] = {
        a.id: [a.price] for a in market.constructors.values()
    }
    trade_counts: dict[str, int] = defaultdict(int)
    rounds: list[RoundResult] = []

    _opening_rosters(agents, teams, ledger, market, rules, agent_rng)

    completed_races = 0
    last_results: RoundResult | None = None

    for weekend in calendar:
        round_index = weekend.round_index

        # -- Decide (every agent sees the same pre-trade state) ---------------
        for team in teams:
            ledger.sync_prices(team)
        decisions = [
            agent.strategy.decide(
                AgentContext(
                    team, market, round_index, completed_races, last_results, agent_rng, rules
                )
            )
            for agent, team in zip(agents, teams)
        ]

        # -- Apply trades in agent order --------------------------------------
        for team, decision in zip(teams, decisions):
            _apply_decision(
                ledger, team, decision, round_index, completed_races, trade_counts
            )

        # -- Race ---------------------------------------------------------------
        race_seed = seed + round_index * 1000
        result = simulate_weekend(weekend, drivers, seed=race_seed)
        rounds.append(result)

        # -- Score ----------------------------------------------------------------
        for team in teams:
            ledger.sync_prices(team)
            ledger.close_transfer_window(team)
            credit_round(team, score_team_round(team, result, market, rules))

        # -- Reprice ------------------------------------------------------------
        update_market_prices(market, result, rules)
        completed_races += 1

        # -- Advance contracts --------------------------------------------------
        for team in teams:
            ledger.advance_contracts(team, round_index, completed_races)
            ledger.sync_prices(team)

        # -- Snapshot -------------------------------------------------------------
        for asset in market.drivers.values():
            driver_history[asset.id].append(asset.price)
        for asset in market.constructors.values():
            constructor_history[asset.id].append(asset.price)

        last_results = result
        logger.info(
            "Round %d (%s) complete, leader %s",
            round_index,
            weekend.name,
            max(teams, key=season_total).name,
        )

    # Stable sort: equal totals keep agent order.
    standings = sorted(teams, key=season_total, reverse=True)

    return SeasonResult(
        seed=seed,
        rules=rules,
        teams=teams,
        standings=standings,
        market=market,
        rounds=rounds,
        trade_log=ledger.trade_log,
        driver_price_history=driver_history,
        constructor_price_history=constructor_history,
        trade_counts={d: trade_counts.get(d, 0) for d in market.drivers},
    )
