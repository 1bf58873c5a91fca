"""Rule-based strategy agents for the season simulator.

Each agent pairs an opening-roster *picker* with a :class:`Strategy`
that proposes trades and an Ace once per round.  Strategies form a
closed family sharing one ``decide`` contract; they read roster and
market state but never mutate it.  The ledger applies (or silently
rejects) whatever they propose.

The fixed order of :data:`ALL_AGENTS` is part of the game balance:
earlier agents get first call on scarce cheap assets.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from enum import Enum

import numpy as np

from f1_fantasy.core.contracts import FantasyTeam, is_locked_out
from f1_fantasy.core.market import Market
from f1_fantasy.core.results import RoundResult
from f1_fantasy.core.rules import RuleSet
from f1_fantasy.core.scoring import base_driver_points, is_ace_eligible

# ---------------------------------------------------------------------------
# Decision contract
# ---------------------------------------------------------------------------

# (sell, buy, sell_constructor, buy_constructor_id)
Trades = tuple[tuple[str, ...], tuple[str, ...], bool, str | None]


@dataclass(frozen=True)
class Decision:
    """Trades and Ace choice proposed by an agent for one round."""

    sell: tuple[str, ...] = ()
    buy: tuple[str, ...] = ()
    ace_id: str | None = None
    sell_constructor: bool = False
    buy_constructor_id: str | None = None


@dataclass(frozen=True)
class InitialPick:
    """Opening roster requested before round 1."""

    driver_ids: tuple[str, ...]
    constructor_id: str | None = None


@dataclass
class AgentContext:
    """Read-only view handed to pickers and strategies."""

    team: FantasyTeam
    market: Market
    round_index: int
    completed_races: int
    last_results: RoundResult | None
    rng: np.random.Generator
    rules: RuleSet

    @property
    def owned(self) -> set[str]:
        return set(self.team.driver_ids)

    def price(self, driver_id: str) -> int:
        asset = self.market.driver(driver_id)
        return asset.price if asset is not None else self.rules.starting_budget + 1

    def locked(self, driver_id: str) -> bool:
        return is_locked_out(self.team.driver_lockouts, driver_id, self.completed_races)

    def shuffled(self, ids: list[str]) -> list[str]:
        return [ids[i] for i in self.rng.permutation(len(ids))]


# ---------------------------------------------------------------------------
# Shared heuristics
# ---------------------------------------------------------------------------


def _form(ctx: AgentContext, driver_id: str) -> int:
    asset = ctx.market.driver(driver_id)
    return asset.form if asset is not None else 0


def _last_points(ctx: AgentContext, driver_id: str) -> int:
    if ctx.last_results is None:
        return 0
    return base_driver_points(ctx.last_results.get(driver_id), ctx.rules)


def _strength(ctx: AgentContext, driver_id: str) -> float:
    return ctx.market.driver_profiles[driver_id].strength


def cheapest_available(
    ctx: AgentContext,
    exclude: set[str],
    count: int,
    budget: int,
) -> list[str]:
    """Cheapest unowned, unlocked drivers that fit *budget* together."""
    candidates = sorted(
        (
            a
            for a in ctx.market.active_drivers()
            if a.id not in exclude and not ctx.locked(a.id)
        ),
        key=lambda a: a.price,
    )
    picks: list[str] = []
    remaining = budget
    for asset in candidates:
        if len(picks) >= count:
            break
        if asset.price <= remaining:
            picks.append(asset.id)
            remaining -= asset.price
    return picks


def best_form_available(ctx: AgentContext, exclude: set[str], max_price: int) -> str | None:
    """Highest recent-form driver not in *exclude* priced within *max_price*."""
    best: str | None = None
    best_form = float("-inf")
    for asset in ctx.market.active_drivers():
        if asset.id in exclude or ctx.locked(asset.id) or asset.price > max_price:
            continue
        if asset.form > best_form:
            best_form = asset.form
            best = asset.id
    return best


def worst_driver(ctx: AgentContext) -> str | None:
    """Owned driver with the weakest recent form."""
    worst: str | None = None
    worst_form = float("inf")
    for driver_id in ctx.team.driver_ids:
        form = _form(ctx, driver_id)
        if form < worst_form:
            worst_form = form
            worst = driver_id
    return worst


def swap_worst(
    ctx: AgentContext,
    protected: Iterable[str] = (),
) -> tuple[tuple[str, ...], tuple[str, ...]]:
    """Propose replacing the worst-form driver with the best affordable form."""
    worst = worst_driver(ctx)
    if worst is None or worst in set(protected):
        return (), ()
    replacement = best_form_available(ctx, ctx.owned, ctx.team.budget + ctx.price(worst))
    if replacement is None:
        return (), ()
    return (worst,), (replacement,)


# ---------------------------------------------------------------------------
# Ace policies
# ---------------------------------------------------------------------------


class AcePolicy(str, Enum):
    """How a strategy nominates its Ace each round."""

    BEST_FORM = "best_form"
    CONSISTENT = "consistent"
    LAST_RACE = "last_race"
    RANDOM = "random"
    NONE = "none"


def _eligible_slots(ctx: AgentContext) -> list[str]:
    return [
        slot.asset_id
        for slot in ctx.team.drivers
        if is_ace_eligible(slot.current_price, ctx.rules)
    ]


def choose_ace(policy: AcePolicy, ctx: AgentContext) -> str | None:
    """Pick an Ace among owned, price-eligible drivers."""
    eligible = _eligible_slots(ctx)
    if not eligible or policy is AcePolicy.NONE:
        return None
    if policy is AcePolicy.RANDOM:
        return eligible[int(ctx.rng.integers(0, len(eligible)))]
    profiles = ctx.market.driver_profiles
    if policy is AcePolicy.CONSISTENT:
        scores = {d: profiles[d].consistency for d in eligible}
    elif policy is AcePolicy.LAST_RACE:
        scores = {d: float(_last_points(ctx, d)) for d in eligible}
    else:
        scores = {d: float(_form(ctx, d)) for d in eligible}
    # max() keeps the first of equal keys, i.e. roster order.
    return max(eligible, key=scores.__getitem__)


# ---------------------------------------------------------------------------
# Strategies
# ---------------------------------------------------------------------------


class Strategy(ABC):
    """Base class for per-round decision heuristics."""

    def __init__(self, ace: AcePolicy = AcePolicy.BEST_FORM) -> None:
        self.ace = ace

    def decide(self, ctx: AgentContext) -> Decision:
        """Return this round's trades plus the Ace nomination."""
        ace_id = choose_ace(self.ace, ctx)
        sell, buy, sell_constructor, buy_constructor = self.trades(ctx)
        return Decision(sell, buy, ace_id, sell_constructor, buy_constructor)

    @abstractmethod
    def trades(self, ctx: AgentContext) -> Trades:
        """Return ``(sell, buy, sell_constructor, buy_constructor_id)``."""


def _on_cadence(round_index: int, start_after: int, every: int) -> bool:
    return round_index > start_after and round_index % every == 0


class Hold(Strategy):
    """Never trades."""

    def trades(self, ctx: AgentContext) -> Trades:
        return (), (), False, None


class CadenceSwap(Strategy):
    """Swap the worst-form driver on a fixed round cadence.

    Trades on rounds after *start_after* that are multiples of *every*;
    drivers in *protected* are never sold.
    """

    def __init__(
        self,
        start_after: int,
        every: int,
        protected: tuple[str, ...] = (),
        ace: AcePolicy = AcePolicy.BEST_FORM,
    ) -> None:
        super().__init__(ace)
        if every < 1:
            raise ValueError("every must be >= 1.")
        self.start_after = start_after
        self.every = every
        self.protected = protected

    def trades(self, ctx: AgentContext) -> Trades:
        if not _on_cadence(ctx.round_index, self.start_after, self.every):
            return (), (), False, None
        sell, buy = swap_worst(ctx, self.protected)
        return sell, buy, False, None


class FixedRoundSwap(Strategy):
    """A single worst-driver swap on one chosen round."""

    def __init__(self, round_index: int, ace: AcePolicy = AcePolicy.BEST_FORM) -> None:
        super().__init__(ace)
        self.round_index = round_index

    def trades(self, ctx: AgentContext) -> Trades:
        if ctx.round_index != self.round_index:
            return (), (), False, None
        sell, buy = swap_worst(ctx)
        return sell, buy, False, None


class StaleGuard(Strategy):
    """Swap the worst driver just before the stale-roster penalty bites."""

    def trades(self, ctx: AgentContext) -> Trades:
        if ctx.team.races_since_transfer < ctx.rules.stale_threshold:
            return (), (), False, None
        sell, buy = swap_worst(ctx)
        return sell, buy, False, None


class ProfitTaker(Strategy):
    """Sell the first driver whose price grew by *gain* and reinvest in form.

    At most one trade per round.
    """

    def __init__(
        self,
        gain: float,
        min_races_held: int = 0,
        start_after: int = 0,
        every: int = 1,
        ace: AcePolicy = AcePolicy.BEST_FORM,
    ) -> None:
        super().__init__(ace)
        self.gain = gain
        self.min_races_held = min_races_held
        self.start_after = start_after
        self.every = every

    def trades(self, ctx: AgentContext) -> Trades:
        if not _on_cadence(ctx.round_index, self.start_after, self.every):
            return (), (), False, None
        for slot in ctx.team.drivers:
            if slot.current_price < slot.purchase_price * self.gain:
                continue
            if slot.races_held < self.min_races_held:
                continue
            replacement = best_form_available(
                ctx, ctx.owned, ctx.team.budget + slot.current_price
            )
            if replacement is not None:
                return (slot.asset_id,), (replacement,), False, None
        return (), (), False, None


class SwingTrader(Strategy):
    """Bank the biggest paper profit and rotate into the cheapest driver."""

    def __init__(
        self,
        min_profit: int = 5,
        start_after: int = 2,
        every: int = 2,
        ace: AcePolicy = AcePolicy.BEST_FORM,
    ) -> None:
        super().__init__(ace)
        self.min_profit = min_profit
        self.start_after = start_after
        self.every = every

    def trades(self, ctx: AgentContext) -> Trades:
        if not _on_cadence(ctx.round_index, self.start_after, self.every):
            return (), (), False, None
        best_profit = 0
        sell_id: str | None = None
        for slot in ctx.team.drivers:
            profit = slot.current_price - slot.purchase_price
            if profit > best_profit:
                best_profit = profit
                sell_id = slot.asset_id
        if sell_id is None or best_profit <= self.min_profit:
            return (), (), False, None
        cheapest = cheapest_available(ctx, ctx.owned, 1, ctx.team.budget + ctx.price(sell_id))
        if not cheapest:
            return (), (), False, None
        return (sell_id,), (cheapest[0],), False, None


class HotHand(Strategy):
    """Chase the best last-race podium finisher not already owned."""

    def trades(self, ctx: AgentContext) -> Trades:
        if ctx.round_index <= 1 or ctx.last_results is None:
            return (), (), False, None
        owned = ctx.owned
        hero = next(
            (d for d in ctx.last_results.classification()[:3] if d not in owned),
            None,
        )
        if hero is None:
            return (), (), False, None
        worst = worst_driver(ctx)
        if worst is None or ctx.price(hero) > ctx.team.budget + ctx.price(worst):
            return (), (), False, None
        return (worst,), (hero,), False, None


class Contrarian(Strategy):
    """Sell the biggest riser, buy the biggest faller."""

    def __init__(
        self,
        min_rise: int = 5,
        start_after: int = 3,
        every: int = 3,
        ace: AcePolicy = AcePolicy.BEST_FORM,
    ) -> None:
        super().__init__(ace)
        self.min_rise = min_rise
        self.start_after = start_after
        self.every = every

    def trades(self, ctx: AgentContext) -> Trades:
        if not _on_cadence(ctx.round_index, self.start_after, self.every):
            return (), (), False, None
        best_rise = 0
        sell_id: str | None = None
        for driver_id in ctx.team.driver_ids:
            asset = ctx.market.driver(driver_id)
            if asset is not None and asset.price_change > best_rise:
                best_rise = asset.price_change
                sell_id = driver_id
        if sell_id is None or best_rise <= self.min_rise:
            return (), (), False, None

        max_price = ctx.team.budget + ctx.price(sell_id)
        best_dip = 0
        buy_id: str | None = None
        owned = ctx.owned
        for asset in ctx.market.active_drivers():
            if asset.id in owned or ctx.locked(asset.id):
                continue
            dip = -asset.price_change
            if dip > best_dip and asset.price <= max_price:
                best_dip = dip
                buy_id = asset.id
        if buy_id is None:
            return (), (), False, None
        return (sell_id,), (buy_id,), False, None


class AceGuard(Strategy):
    """Replace a driver who has priced out of Ace eligibility."""

    def __init__(
        self,
        start_after: int = 3,
        every: int = 3,
        ace: AcePolicy = AcePolicy.BEST_FORM,
    ) -> None:
        super().__init__(ace)
        self.start_after = start_after
        self.every = every

    def trades(self, ctx: AgentContext) -> Trades:
        if not _on_cadence(ctx.round_index, self.start_after, self.every):
            return (), (), False, None
        owned = ctx.owned
        for slot in ctx.team.drivers:
            if is_ace_eligible(slot.current_price, ctx.rules):
                continue
            max_price = ctx.team.budget + slot.current_price
            candidates = [
                a
                for a in ctx.market.active_drivers()
                if a.id not in owned
                and is_ace_eligible(a.price, ctx.rules)
                and a.price <= max_price
                and not ctx.locked(a.id)
            ]
            if candidates:
                best = max(candidates, key=lambda a: _strength(ctx, a.id))
                return (slot.asset_id,), (best.id,), False, None
        return (), (), False, None


class ConstructorHunter(Strategy):
    """Refill an empty constructor slot with the season's top scorer."""

    def trades(self, ctx: AgentContext) -> Trades:
        if ctx.team.constructor is not None or ctx.round_index <= 1:
            return (), (), False, None
        available = [
            a
            for a in ctx.market.active_constructors()
            if not is_locked_out(ctx.team.constructor_lockouts, a.id, ctx.completed_races)
        ]
        if not available:
            return (), (), False, None
        top = max(available, key=lambda a: a.season_points)
        if top.price > ctx.team.budget:
            return (), (), False, None
        return (), (), False, top.id


class RandomTrader(Strategy):
    """Random Ace and, with probability *trade_chance*, a random swap."""

    def __init__(self, trade_chance: float = 0.4) -> None:
        super().__init__(AcePolicy.RANDOM)
        if not 0.0 <= trade_chance <= 1.0:
            raise ValueError("trade_chance must be in [0, 1].")
        self.trade_chance = trade_chance

    def trades(self, ctx: AgentContext) -> Trades:
        if ctx.round_index <= 1 or not ctx.team.drivers:
            return (), (), False, None
        if ctx.rng.random() >= self.trade_chance:
            return (), (), False, None
        sell_id = ctx.team.drivers[int(ctx.rng.integers(0, len(ctx.team.drivers)))].asset_id
        owned = ctx.owned
        available = [
            d for d in ctx.market.drivers if d not in owned and not ctx.locked(d)
        ]
        max_price = ctx.team.budget + ctx.price(sell_id)
        for driver_id in ctx.shuffled(available):
            if ctx.price(driver_id) <= max_price:
                return (sell_id,), (driver_id,), False, None
        return (), (), False, None


# ---------------------------------------------------------------------------
# Opening-roster pickers
# ---------------------------------------------------------------------------

Picker = Callable[[AgentContext], InitialPick]


def _fill(ctx: AgentContext, preferred: Iterable[str], budget: int) -> tuple[str, ...]:
    size = ctx.rules.team_size
    picked: list[str] = []
    for driver_id in preferred:
        if len(picked) >= size:
            break
        price = ctx.price(driver_id)
        if driver_id not in picked and price <= budget:
            picked.append(driver_id)
            budget -= price
    if len(picked) < size:
        picked.extend(cheapest_available(ctx, set(picked), size - len(picked), budget))
    return tuple(picked[:size])


def specific(driver_ids: tuple[str, ...], constructor_id: str | None = None) -> Picker:
    """Named drivers (and constructor) first, topped up with the cheapest."""

    def pick(ctx: AgentContext) -> InitialPick:
        budget = ctx.team.budget
        chosen: str | None = None
        if constructor_id is not None:
            asset = ctx.market.constructor(constructor_id)
            if asset is not None and asset.price <= budget:
                chosen = constructor_id
                budget -= asset.price
        return InitialPick(_fill(ctx, driver_ids, budget), chosen)

    return pick


def greedy(rank: Callable[[AgentContext, str], float]) -> Picker:
    """Mid-priced constructor first, then drivers in descending *rank*."""

    def pick(ctx: AgentContext) -> InitialPick:
        budget = ctx.team.budget
        chosen: str | None = None
        for asset in sorted(ctx.market.active_constructors(), key=lambda a: -a.price):
            if asset.price <= budget * 0.3:
                chosen = asset.id
                budget -= asset.price
                break
        order = sorted(ctx.market.drivers, key=lambda d: -rank(ctx, d))
        return InitialPick(_fill(ctx, order, budget), chosen)

    return pick


def cheapest(with_constructor: bool = False) -> Picker:
    """The cheapest drivers on the grid, optionally the cheapest constructor."""

    def pick(ctx: AgentContext) -> InitialPick:
        order = sorted(ctx.market.drivers, key=lambda d: ctx.price(d))
        constructor_id: str | None = None
        if with_constructor:
            constructors = sorted(ctx.market.active_constructors(), key=lambda a: a.price)
            constructor_id = constructors[0].id if constructors else None
        return specific(tuple(order[: ctx.rules.team_size]), constructor_id)(ctx)

    return pick


def anchor_plus_bargains(anchor: str, bargain_share: float = 0.3) -> Picker:
    """One anchor driver plus drivers priced within a share of the Ace ceiling."""

    def pick(ctx: AgentContext) -> InitialPick:
        ceiling = ctx.rules.ace_max_price * bargain_share
        bargains = sorted(
            (d for d in ctx.market.drivers if ctx.price(d) <= ceiling),
            key=lambda d: ctx.price(d),
        )
        return specific((anchor, *bargains))(ctx)

    return pick


def ace_eligible_strongest() -> Picker:
    """Strongest drivers that are Ace-eligible at opening prices."""

    def pick(ctx: AgentContext) -> InitialPick:
        eligible = sorted(
            (d for d in ctx.market.drivers if is_ace_eligible(ctx.price(d), ctx.rules)),
            key=lambda d: -_strength(ctx, d),
        )
        return specific(tuple(eligible[: ctx.rules.team_size]))(ctx)

    return pick


def top_constructor(extra: tuple[str, ...]) -> Picker:
    """Most expensive constructor, its two drivers, then *extra*."""

    def pick(ctx: AgentContext) -> InitialPick:
        constructors = sorted(ctx.market.active_constructors(), key=lambda a: -a.price)
        if not constructors:
            return specific(extra)(ctx)
        top = constructors[0]
        pair = ctx.market.constructor_profiles[top.id].driver_ids
        return specific((*pair, *extra), top.id)(ctx)

    return pick


def random_roster(with_constructor: bool = False) -> Picker:
    """Shuffle the grid and buy whatever fits, in shuffled order."""

    def pick(ctx: AgentContext) -> InitialPick:
        budget = ctx.team.budget
        picked: list[str] = []
        for driver_id in ctx.shuffled(list(ctx.market.drivers)):
            if len(picked) >= ctx.rules.team_size:
                break
            price = ctx.price(driver_id)
            if price <= budget:
                picked.append(driver_id)
                budget -= price
        constructor_id: str | None = None
        if with_constructor:
            for cid in ctx.shuffled(list(ctx.market.constructors)):
                asset = ctx.market.constructors[cid]
                if asset.price <= budget:
                    constructor_id = cid
                    break
        return InitialPick(tuple(picked), constructor_id)

    return pick


def _value_rank(ctx: AgentContext, driver_id: str) -> float:
    return _strength(ctx, driver_id) / max(ctx.price(driver_id), 1)


# ---------------------------------------------------------------------------
# The field
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Agent:
    """A named simulated manager."""

    name: str
    tags: tuple[str, ...]
    picker: Picker
    strategy: Strategy


_FILLERS: tuple[str, ...] = ("bottas", "perez", "colapinto")

ALL_AGENTS: tuple[Agent, ...] = (
    # Top heavy
    Agent(
        "MaxPower_Mike",
        ("top-heavy", "active"),
        specific(("verstappen", "norris", *_FILLERS)),
        CadenceSwap(start_after=1, every=3),
    ),
    Agent(
        "BigBudget_Brenda",
        ("top-heavy", "passive"),
        specific(("piastri", "leclerc", "russell", "bottas", "perez")),
        Hold(AcePolicy.CONSISTENT),
    ),
    Agent(
        "McLarenStack_Marco",
        ("top-heavy", "passive", "stacker"),
        specific(("norris", "piastri", *_FILLERS), "mclaren"),
        Hold(),
    ),
    # Balanced
    Agent(
        "Balanced_Beth",
        ("balanced", "moderate"),
        specific(("hamilton", "sainz", "alonso", "antonelli", "albon")),
        CadenceSwap(start_after=4, every=4),
    ),
    Agent(
        "Steady_Steve",
        ("balanced", "passive"),
        specific(("leclerc", "sainz", "gasly", "ocon", "bearman")),
        Hold(AcePolicy.CONSISTENT),
    ),
    Agent(
        "FormChaser_Fiona",
        ("balanced", "active"),
        specific(("russell", "hamilton", "albon", "stroll", "hulkenberg")),
        CadenceSwap(start_after=2, every=2, ace=AcePolicy.LAST_RACE),
    ),
    Agent(
        "Optimizer_Oscar",
        ("balanced", "value"),
        greedy(_value_rank),
        ProfitTaker(gain=1.2, min_races_held=2),
    ),
    # Budget / value
    Agent(
        "Bargain_Bob",
        ("budget", "passive"),
        cheapest(with_constructor=True),
        Hold(),
    ),
    Agent(
        "ValuePick_Vera",
        ("budget", "active", "value"),
        anchor_plus_bargains("sainz"),
        ProfitTaker(gain=1.15, start_after=2, every=2),
    ),
    Agent(
        "PennyWise_Pat",
        ("budget", "moderate"),
        cheapest(),
        StaleGuard(),
    ),
    Agent(
        "RisingStars_Rita",
        ("budget", "rookies", "moderate"),
        specific(("antonelli", "hadjar", "bearman", "lawson", "bortoleto")),
        CadenceSwap(start_after=5, every=5),
    ),
    # Team stackers
    Agent(
        "FerrariForever_Franco",
        ("stacker", "moderate"),
        specific(("leclerc", "hamilton", *_FILLERS), "ferrari"),
        CadenceSwap(start_after=4, every=5, protected=("leclerc", "hamilton")),
    ),
    Agent(
        "RedBull_Ravi",
        ("stacker", "moderate"),
        specific(("verstappen", "hadjar", *_FILLERS), "red_bull"),
        CadenceSwap(start_after=4, every=5, protected=("verstappen", "hadjar")),
    ),
    Agent(
        "Mercedes_Maya",
        ("stacker", "moderate"),
        specific(("russell", "antonelli", *_FILLERS), "mercedes"),
        CadenceSwap(start_after=4, every=5, protected=("russell", "antonelli")),
    ),
    # Active traders
    Agent(
        "DayTrader_Dan",
        ("active", "aggressive"),
        specific(("hamilton", "sainz", "albon", "gasly", "ocon")),
        CadenceSwap(start_after=1, every=1),
    ),
    Agent(
        "SwingTrader_Sam",
        ("active", "value"),
        cheapest(),
        SwingTrader(),
    ),
    Agent(
        "HotHand_Hannah",
        ("active", "hot-hand"),
        specific(("russell", "sainz", "albon", "gasly", "hulkenberg")),
        HotHand(),
    ),
    # Passive
    Agent(
        "SetForget_Sean",
        ("passive", "set-and-forget"),
        greedy(_strength),
        Hold(),
    ),
    Agent(
        "Lazy_Larry",
        ("passive", "no-ace"),
        random_roster(),
        Hold(AcePolicy.NONE),
    ),
    Agent(
        "OnceAYear_Olivia",
        ("passive", "rare-trader"),
        specific(("hamilton", "sainz", "alonso", "gasly", "bearman")),
        FixedRoundSwap(round_index=12),
    ),
    # Specialists
    Agent(
        "Contrarian_Carl",
        ("specialist", "contrarian", "active"),
        specific(("alonso", "stroll", "gasly", "ocon", "hulkenberg")),
        Contrarian(),
    ),
    Agent(
        "AceExpert_Amy",
        ("specialist", "ace-focused"),
        ace_eligible_strongest(),
        AceGuard(),
    ),
    Agent(
        "Constructor_Chris",
        ("specialist", "constructor-focused"),
        top_constructor(("albon", "gasly", "bottas")),
        ConstructorHunter(),
    ),
    Agent(
        "Adaptive_Morgan",
        ("specialist", "adaptive"),
        specific(("leclerc", "sainz", "albon", "gasly", "hulkenberg")),
        CadenceSwap(start_after=12, every=2),
    ),
    Agent(
        "Wildcard_Wendy",
        ("specialist", "random"),
        random_roster(with_constructor=True),
        RandomTrader(trade_chance=0.4),
    ),
)
