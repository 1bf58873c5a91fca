"""Tests for the contract ledger: buys, sells, expiry, lockouts and auto-fill."""

from __future__ import annotations

import dataclasses

from f1_fantasy.core.contracts import ContractLedger, FantasyTeam, TradeAction
from f1_fantasy.core.market import ConstructorProfile, DriverProfile, Market
from f1_fantasy.core.rules import DEFAULT_RULES, RuleSet

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

# Default rules price an asset at exactly its prior points.
_PRICES: dict[str, int] = {"d1": 300, "d2": 100, "d3": 80, "d4": 60, "d5": 40, "d6": 20, "d7": 10}


def _market(rules: RuleSet = DEFAULT_RULES) -> Market:
    drivers = [
        DriverProfile(d, d.upper(), "c1" if d in ("d1", "d2") else "c2", p, 70.0, 0.7)
        for d, p in _PRICES.items()
    ]
    constructors = [
        ConstructorProfile("c1", "C1", 150, ("d1", "d2")),
        ConstructorProfile("c2", "C2", 50, ("d3", "d4")),
    ]
    return Market(drivers, constructors, rules)


def _setup(
    budget: int = 1000, rules: RuleSet = DEFAULT_RULES
) -> tuple[ContractLedger, FantasyTeam, Market]:
    market = _market(rules)
    ledger = ContractLedger(market, rules)
    team = FantasyTeam(user_id="user_1", name="Tester", budget=budget)
    return ledger, team, market


# ---------------------------------------------------------------------------
# Buying
# ---------------------------------------------------------------------------


def test_buy_debits_budget_and_logs() -> None:
    ledger, team, _ = _setup()
    assert ledger.buy_driver(team, "d2", 1, 0, "test")
    assert team.budget == 900
    assert team.driver_ids == ["d2"]
    assert team.traded_this_round
    entry = ledger.trade_log[-1]
    assert (entry.action, entry.asset_id, entry.price) == (TradeAction.BUY, "d2", 100)


def test_buy_rejections_leave_state_untouched() -> None:
    """Duplicate, unaffordable and unknown buys are rejected without raising."""
    ledger, team, market = _setup(budget=150)
    assert ledger.buy_driver(team, "d2", 1, 0)
    assert not ledger.buy_driver(team, "d2", 1, 0)
    assert not ledger.buy_driver(team, "d1", 1, 0)
    assert not ledger.buy_driver(team, "ghost", 1, 0)
    market.drivers["d3"].active = False
    assert not ledger.buy_driver(team, "d3", 1, 0)
    assert team.budget == 50
    assert team.driver_ids == ["d2"]
    assert len(ledger.trade_log) == 1


def test_roster_full_rejected() -> None:
    ledger, team, _ = _setup()
    for driver_id in ("d2", "d3", "d4", "d5", "d6"):
        assert ledger.buy_driver(team, driver_id, 1, 0)
    assert not ledger.buy_driver(team, "d7", 1, 0)
    assert len(team.drivers) == 5


def test_single_constructor_slot() -> None:
    ledger, team, _ = _setup()
    assert ledger.buy_constructor(team, "c2", 1, 0)
    assert not ledger.buy_constructor(team, "c1", 1, 0)
    assert team.constructor is not None and team.constructor.asset_id == "c2"
    assert team.budget == 950


# ---------------------------------------------------------------------------
# Selling
# ---------------------------------------------------------------------------


def test_sell_charges_early_termination_fee() -> None:
    """Fee is 5% of the current price per race left on the contract."""
    ledger, team, _ = _setup()
    ledger.buy_driver(team, "d2", 1, 0)
    team.drivers[0].races_held = 2
    assert ledger.sell_driver(team, "d2", 3)
    # floor(100 * 0.05 * 3) = 15
    assert ledger.trade_log[-1].fee == 15
    assert team.budget == 1000 - 15
    assert team.transfers == 1


def test_sell_uses_current_market_price() -> None:
    ledger, team, market = _setup()
    ledger.buy_driver(team, "d2", 1, 0)
    team.drivers[0].races_held = 4
    market.drivers["d2"].set_price(135)
    ledger.sell_driver(team, "d2", 5)
    # floor(135 * 0.05 * 1) = 6
    assert team.budget == 900 + 135 - 6
    # 35 profit captures 3 * 5 bonus points.
    assert team.bonus_points == 15


def test_sell_unowned_rejected() -> None:
    ledger, team, _ = _setup()
    assert not ledger.sell_driver(team, "d2", 1)
    assert not ledger.sell_constructor(team, 1)
    assert team.transfers == 0


def test_selling_the_ace_clears_it() -> None:
    ledger, team, _ = _setup()
    ledger.buy_driver(team, "d2", 1, 0)
    assert ledger.set_ace(team, "d2")
    ledger.sell_driver(team, "d2", 2)
    assert team.ace_id is None


# ---------------------------------------------------------------------------
# Ace
# ---------------------------------------------------------------------------


def test_ace_must_be_owned_and_under_ceiling() -> None:
    ledger, team, _ = _setup()
    ledger.buy_driver(team, "d1", 1, 0)
    ledger.buy_driver(team, "d2", 1, 0)
    assert not ledger.set_ace(team, "d3")
    assert not ledger.set_ace(team, "d1")
    assert ledger.set_ace(team, "d2")
    assert not ledger.set_ace(team, "d1")
    assert team.ace_id == "d2"
    assert ledger.set_ace(team, None)
    assert team.ace_id is None


# ---------------------------------------------------------------------------
# Transfer window
# ---------------------------------------------------------------------------


def test_stale_counter_grows_and_resets() -> None:
    ledger, team, _ = _setup()
    for _ in range(3):
        ledger.close_transfer_window(team)
    assert team.races_since_transfer == 3
    ledger.buy_driver(team, "d7", 4, 3)
    ledger.close_transfer_window(team)
    assert team.races_since_transfer == 0
    assert not team.traded_this_round


# ---------------------------------------------------------------------------
# Expiry and lockout
# ---------------------------------------------------------------------------


def test_contract_expires_after_five_races() -> None:
    """A driver held five races is sold, banked and locked out for one race."""
    ledger, team, _ = _setup()
    ledger.buy_driver(team, "d2", 0, 0)
    team.drivers[0].points_scored = 42

    for completed in range(1, 5):
        ledger.advance_contracts(team, completed, completed)
        assert "d2" in team.driver_ids
    ledger.advance_contracts(team, 5, 5)

    assert "d2" not in team.driver_ids
    assert team.locked_points == 42
    assert team.driver_lockouts == {"d2": 6}
    expiry = [e for e in ledger.trade_log if e.action is TradeAction.SELL_EXPIRY]
    assert [e.asset_id for e in expiry] == ["d2"]
    # Sold at the current price with no commission under default rules.
    assert (expiry[0].price, expiry[0].fee) == (100, 0)
    # 1000 - 100 + 100, then auto-fill buys d7, d6, d5, d4, d3 for 210.
    assert team.budget == 790
    assert sorted(team.driver_ids) == ["d3", "d4", "d5", "d6", "d7"]

    # Locked for the next race, free again after it.
    team.drivers.clear()
    assert not ledger.buy_driver(team, "d2", 6, 5)
    assert ledger.buy_driver(team, "d2", 7, 6)


def test_expiry_refunds_market_price_less_commission() -> None:
    rules = dataclasses.replace(DEFAULT_RULES, sale_commission_rate=0.1, contract_length=1)
    ledger, team, market = _setup(rules=rules)
    ledger.buy_driver(team, "d2", 0, 0)
    market.drivers["d2"].set_price(120)
    ledger.advance_contracts(team, 1, 1)
    refund = [e for e in ledger.trade_log if e.action is TradeAction.SELL_EXPIRY][0]
    assert (refund.price, refund.fee) == (120, 12)


def test_expired_ace_is_cleared() -> None:
    rules = dataclasses.replace(DEFAULT_RULES, contract_length=1)
    ledger, team, _ = _setup(rules=rules)
    ledger.buy_driver(team, "d2", 0, 0)
    ledger.set_ace(team, "d2")
    ledger.advance_contracts(team, 1, 1)
    assert team.ace_id is None


def test_constructor_expiry_and_refill() -> None:
    rules = dataclasses.replace(DEFAULT_RULES, contract_length=2)
    ledger, team, _ = _setup(rules=rules)
    ledger.buy_constructor(team, "c2", 0, 0)
    ledger.advance_contracts(team, 1, 1)
    ledger.advance_contracts(team, 2, 2)
    assert team.constructor_lockouts == {"c2": 3}
    # c2 is locked out, so the reserve fill takes c1.
    assert team.constructor is not None
    assert team.constructor.asset_id == "c1"
    assert team.constructor.reserve


# ---------------------------------------------------------------------------
# Auto-fill
# ---------------------------------------------------------------------------


def test_auto_fill_takes_cheapest_within_budget() -> None:
    ledger, team, _ = _setup(budget=75)
    filled = ledger.auto_fill_drivers(team, 3, 2)
    # 10 + 20 + 40 fit; 60 and up do not.
    assert filled == 3
    assert team.driver_ids == ["d7", "d6", "d5"]
    assert team.budget == 5
    assert all(slot.reserve for slot in team.drivers)


def test_auto_fill_never_overfills_roster() -> None:
    ledger, team, _ = _setup(budget=5000)
    ledger.buy_driver(team, "d1", 1, 0)
    ledger.buy_driver(team, "d2", 1, 0)
    ledger.buy_driver(team, "d3", 1, 0)
    assert ledger.auto_fill_drivers(team, 1, 0) == 2
    assert len(team.drivers) == DEFAULT_RULES.team_size


def test_auto_fill_skips_locked_out_drivers() -> None:
    ledger, team, _ = _setup(budget=30)
    team.driver_lockouts["d7"] = 5
    ledger.auto_fill_drivers(team, 3, 2)
    assert team.driver_ids == ["d6"]


def test_auto_fill_resets_stale_counter_without_counting_a_transfer() -> None:
    ledger, team, _ = _setup()
    team.races_since_transfer = 4
    ledger.auto_fill_drivers(team, 5, 4)
    assert team.races_since_transfer == 0
    assert team.transfers == 0
    assert not team.traded_this_round


def test_team_value_counts_budget_and_roster() -> None:
    ledger, team, market = _setup()
    ledger.buy_driver(team, "d2", 1, 0)
    ledger.buy_constructor(team, "c2", 1, 0)
    market.drivers["d2"].set_price(110)
    ledger.sync_prices(team)
    assert team.team_value == 850 + 110 + 50
