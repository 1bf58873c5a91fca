"""Roster contracts and the trade ledger.

The :class:`ContractLedger` is the only writer of roster state: buys,
voluntary sells, contract expiry and reserve auto-fill all pass through
it and are recorded in an append-only trade log.  Illegal trades are
rejected by returning ``False``; the ledger never raises for them.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from enum import Enum

from f1_fantasy.core.market import Asset, Market
from f1_fantasy.core.rules import RuleSet
from f1_fantasy.core.scoring import is_ace_eligible

logger = logging.getLogger(__name__)


class TradeAction(str, Enum):
    """Kinds of ledger entries."""

    BUY = "buy"
    SELL = "sell"
    SELL_EXPIRY = "sell_expiry"
    RESERVE_FILL = "reserve_fill"
    BUY_CONSTRUCTOR = "buy_constructor"
    SELL_CONSTRUCTOR = "sell_constructor"
    SELL_CONSTRUCTOR_EXPIRY = "sell_constructor_expiry"
    RESERVE_FILL_CONSTRUCTOR = "reserve_fill_constructor"


@dataclass(frozen=True)
class TradeLogEntry:
    """One audited roster transaction."""

    round_index: int
    user_id: str
    action: TradeAction
    asset_id: str
    price: int
    fee: int = 0
    reason: str = ""


@dataclass
class RosterSlot:
    """An owned asset under contract.

    Attributes:
        asset_id: Driver or constructor identifier.
        purchase_price: Price paid at signing.
        current_price: Mirrors the market price while owned.
        races_held: Completed races under this contract.
        contract_length: Races until automatic expiry.
        reserve: True when the slot was filled by auto-fill.
        points_scored: Fantasy points earned while held.
        acquired_round: Round index of the signing (0 = pre-season).
    """

    asset_id: str
    purchase_price: int
    current_price: int
    contract_length: int
    races_held: int = 0
    reserve: bool = False
    points_scored: int = 0
    acquired_round: int = 0

    @property
    def races_remaining(self) -> int:
        return max(0, self.contract_length - self.races_held)

    @property
    def expired(self) -> bool:
        return self.races_held >= self.contract_length


@dataclass
class FantasyTeam:
    """One user's roster, budget and season bookkeeping.

    Lockout maps hold, per asset id, the completed-race count before
    which the asset may not be signed again.
    """

    user_id: str
    name: str
    budget: int
    tags: tuple[str, ...] = ()
    drivers: list[RosterSlot] = field(default_factory=list)
    constructor: RosterSlot | None = None
    ace_id: str | None = None
    races_since_transfer: int = 0
    transfers: int = 0
    traded_this_round: bool = False
    round_points: list[int] = field(default_factory=list)
    driver_lockouts: dict[str, int] = field(default_factory=dict)
    constructor_lockouts: dict[str, int] = field(default_factory=dict)
    locked_points: int = 0
    bonus_points: int = 0

    @property
    def driver_ids(self) -> list[str]:
        return [slot.asset_id for slot in self.drivers]

    def driver_slot(self, asset_id: str) -> RosterSlot | None:
        for slot in self.drivers:
            if slot.asset_id == asset_id:
                return slot
        return None

    def owns(self, asset_id: str) -> bool:
        if self.driver_slot(asset_id) is not None:
            return True
        return self.constructor is not None and self.constructor.asset_id == asset_id

    @property
    def roster_value(self) -> int:
        value = sum(slot.current_price for slot in self.drivers)
        if self.constructor is not None:
            value += self.constructor.current_price
        return value

    @property
    def team_value(self) -> int:
        """Budget plus the market value of every owned asset."""
        return self.budget + self.roster_value


def is_locked_out(lockouts: dict[str, int], asset_id: str, completed_races: int) -> bool:
    """True while *completed_races* has not reached the lockout expiry."""
    expires = lockouts.get(asset_id)
    return expires is not None and completed_races < expires


class ContractLedger:
    """Executes and audits roster transactions against a shared market."""

    def __init__(self, market: Market, rules: RuleSet) -> None:
        self.market = market
        self.rules = rules
        self.trade_log: list[TradeLogEntry] = []

    # -- Internal helpers -----------------------------------------------------

    def _record(
        self,
        round_index: int,
        team: FantasyTeam,
        action: TradeAction,
        asset_id: str,
        price: int,
        fee: int = 0,
        reason: str = "",
    ) -> None:
        self.trade_log.append(
            TradeLogEntry(round_index, team.user_id, action, asset_id, price, fee, reason)
        )

    def _reject(self, team: FantasyTeam, action: str, asset_id: str, why: str) -> bool:
        logger.debug("%s: %s %s rejected (%s)", team.name, action, asset_id, why)
        return False

    def _mark_traded(self, team: FantasyTeam) -> None:
        team.races_since_transfer = 0
        team.traded_this_round = True

    def early_termination_fee(self, slot: RosterSlot, price: int) -> int:
        """Fee for leaving a contract early: a share of price per race remaining."""
        return math.floor(price * self.rules.early_termination_rate * slot.races_remaining)

    def value_capture_bonus(self, purchase_price: int, sale_price: int) -> int:
        """Points for selling above the purchase price."""
        profit = sale_price - purchase_price
        if profit <= 0:
            return 0
        return (profit // self.rules.value_capture_unit) * self.rules.value_capture_rate

    def _check_buy(
        self,
        team: FantasyTeam,
        asset: Asset | None,
        asset_id: str,
        lockouts: dict[str, int],
        completed_races: int,
    ) -> str | None:
        if asset is None:
            return "unknown asset"
        if not asset.active:
            return "inactive asset"
        if team.owns(asset_id):
            return "already owned"
        if is_locked_out(lockouts, asset_id, completed_races):
            return "locked out"
        if asset.price > team.budget:
            return "insufficient budget"
        return None

    # -- Drivers --------------------------------------------------------------

    def buy_driver(
        self,
        team: FantasyTeam,
        asset_id: str,
        round_index: int,
        completed_races: int,
        reason: str = "",
        contract_length: int | None = None,
    ) -> bool:
        """Sign a driver at the current market price.

        Returns:
            ``True`` when the purchase went through, ``False`` when it
            was rejected (roster full, duplicate, locked out, unknown or
            inactive driver, or not affordable).
        """
        if len(team.drivers) >= self.rules.team_size:
            return self._reject(team, "buy", asset_id, "roster full")
        asset = self.market.driver(asset_id)
        problem = self._check_buy(team, asset, asset_id, team.driver_lockouts, completed_races)
        if problem is not None:
            return self._reject(team, "buy", asset_id, problem)
        assert asset is not None

        team.budget -= asset.price
        team.drivers.append(
            RosterSlot(
                asset_id=asset_id,
                purchase_price=asset.price,
                current_price=asset.price,
                contract_length=contract_length or self.rules.contract_length,
                acquired_round=round_index,
            )
        )
        self._mark_traded(team)
        self._record(round_index, team, TradeAction.BUY, asset_id, asset.price, 0, reason)
        return True

    def sell_driver(
        self,
        team: FantasyTeam,
        asset_id: str,
        round_index: int,
        reason: str = "",
    ) -> bool:
        """Release a driver early, charging the early-termination fee."""
        slot = team.driver_slot(asset_id)
        if slot is None:
            return self._reject(team, "sell", asset_id, "not owned")
        asset = self.market.driver(asset_id)
        price = asset.price if asset is not None else slot.current_price
        fee = self.early_termination_fee(slot, price)

        team.bonus_points += self.value_capture_bonus(slot.purchase_price, price)
        team.budget += price - fee
        team.drivers.remove(slot)
        if team.ace_id == asset_id:
            team.ace_id = None
        team.transfers += 1
        self._mark_traded(team)
        self._record(round_index, team, TradeAction.SELL, asset_id, price, fee, reason)
        return True

    # -- Constructor ----------------------------------------------------------

    def buy_constructor(
        self,
        team: FantasyTeam,
        asset_id: str,
        round_index: int,
        completed_races: int,
        reason: str = "",
        contract_length: int | None = None,
    ) -> bool:
        """Sign a constructor into the single constructor slot."""
        if team.constructor is not None:
            return self._reject(team, "buy_constructor", asset_id, "slot taken")
        asset = self.market.constructor(asset_id)
        problem = self._check_buy(
            team, asset, asset_id, team.constructor_lockouts, completed_races
        )
        if problem is not None:
            return self._reject(team, "buy_constructor", asset_id, problem)
        assert asset is not None

        team.budget -= asset.price
        team.constructor = RosterSlot(
            asset_id=asset_id,
            purchase_price=asset.price,
            current_price=asset.price,
            contract_length=contract_length or self.rules.contract_length,
            acquired_round=round_index,
        )
        self._mark_traded(team)
        self._record(
            round_index, team, TradeAction.BUY_CONSTRUCTOR, asset_id, asset.price, 0, reason
        )
        return True

    def sell_constructor(self, team: FantasyTeam, round_index: int, reason: str = "") -> bool:
        """Release the constructor early, charging the early-termination fee."""
        slot = team.constructor
        if slot is None:
            return self._reject(team, "sell_constructor", "-", "no constructor")
        asset = self.market.constructor(slot.asset_id)
        price = asset.price if asset is not None else slot.current_price
        fee = self.early_termination_fee(slot, price)

        team.bonus_points += self.value_capture_bonus(slot.purchase_price, price)
        team.budget += price - fee
        team.constructor = None
        if team.ace_id == slot.asset_id:
            team.ace_id = None
        team.transfers += 1
        self._mark_traded(team)
        self._record(
            round_index, team, TradeAction.SELL_CONSTRUCTOR, slot.asset_id, price, fee, reason
        )
        return True

    # -- Ace ------------------------------------------------------------------

    def set_ace(self, team: FantasyTeam, asset_id: str | None) -> bool:
        """Designate an owned, price-eligible asset as Ace.

        Passing ``None`` clears the Ace.  A rejected request leaves the
        previous Ace in place.
        """
        if asset_id is None:
            team.ace_id = None
            return True
        if not team.owns(asset_id):
            return self._reject(team, "ace", asset_id, "not owned")
        asset = self.market.get(asset_id)
        if asset is None or not is_ace_eligible(asset.price, self.rules):
            return self._reject(team, "ace", asset_id, "above ace ceiling")
        team.ace_id = asset_id
        return True

    # -- Round lifecycle ------------------------------------------------------

    def sync_prices(self, team: FantasyTeam) -> None:
        """Mirror market prices onto every owned slot."""
        for slot in team.drivers:
            asset = self.market.driver(slot.asset_id)
            if asset is not None:
                slot.current_price = asset.price
        if team.constructor is not None:
            asset = self.market.constructor(team.constructor.asset_id)
            if asset is not None:
                team.constructor.current_price = asset.price

    def close_transfer_window(self, team: FantasyTeam) -> None:
        """Advance the stale-roster counter unless the team traded this round."""
        if team.traded_this_round:
            team.races_since_transfer = 0
        else:
            team.races_since_transfer += 1
        team.traded_this_round = False

    def _expire(
        self,
        team: FantasyTeam,
        slot: RosterSlot,
        round_index: int,
        completed_races: int,
        constructor: bool,
    ) -> None:
        asset = (
            self.market.constructor(slot.asset_id)
            if constructor
            else self.market.driver(slot.asset_id)
        )
        price = asset.price if asset is not None else slot.current_price
        commission = math.floor(price * self.rules.sale_commission_rate)
        team.budget += price - commission
        team.locked_points += slot.points_scored
        lockouts = team.constructor_lockouts if constructor else team.driver_lockouts
        lockouts[slot.asset_id] = completed_races + self.rules.lockout_races
        if team.ace_id == slot.asset_id:
            team.ace_id = None
        action = (
            TradeAction.SELL_CONSTRUCTOR_EXPIRY if constructor else TradeAction.SELL_EXPIRY
        )
        self._record(
            round_index,
            team,
            action,
            slot.asset_id,
            price,
            commission,
            f"Contract expired after {slot.races_held} races",
        )
        logger.debug("%s: contract on %s expired", team.name, slot.asset_id)

    def advance_contracts(
        self,
        team: FantasyTeam,
        round_index: int,
        completed_races: int,
    ) -> None:
        """Age every contract by one race, expire the due ones and refill.

        Expired assets are sold at market price (less any commission),
        their points are banked and they are locked out for
        ``lockout_races`` races.  Empty slots left by expiry are then
        auto-filled from the cheapest eligible assets.
        """
        for slot in team.drivers:
            slot.races_held += 1
        if team.constructor is not None:
            team.constructor.races_held += 1

        expired_drivers = [slot for slot in team.drivers if slot.expired]
        for slot in expired_drivers:
            self._expire(team, slot, round_index, completed_races, constructor=False)
        team.drivers = [slot for slot in team.drivers if not slot.expired]

        constructor_expired = False
        if team.constructor is not None and team.constructor.expired:
            self._expire(
                team, team.constructor, round_index, completed_races, constructor=True
            )
            team.constructor = None
            constructor_expired = True

        self._prune_lockouts(team.driver_lockouts, completed_races)
        self._prune_lockouts(team.constructor_lockouts, completed_races)

        if expired_drivers:
            self.auto_fill_drivers(team, round_index, completed_races)
        if constructor_expired:
            self.auto_fill_constructor(team, round_index, completed_races)

    @staticmethod
    def _prune_lockouts(lockouts: dict[str, int], completed_races: int) -> None:
        for asset_id in [a for a, expires in lockouts.items() if completed_races >= expires]:
            del lockouts[asset_id]

    def auto_fill_drivers(
        self,
        team: FantasyTeam,
        round_index: int,
        completed_races: int,
    ) -> int:
        """Greedily fill empty driver slots with the cheapest eligible drivers.

        Returns:
            Number of slots filled.  Partial fills are normal when the
            budget runs short.
        """
        candidates = sorted(
            (
                a
                for a in self.market.active_drivers()
                if not team.owns(a.id)
                and not is_locked_out(team.driver_lockouts, a.id, completed_races)
            ),
            key=lambda a: a.price,
        )
        filled = 0
        for asset in candidates:
            if len(team.drivers) >= self.rules.team_size:
                break
            if asset.price > team.budget:
                continue
            team.budget -= asset.price
            team.drivers.append(
                RosterSlot(
                    asset_id=asset.id,
                    purchase_price=asset.price,
                    current_price=asset.price,
                    contract_length=self.rules.contract_length,
                    reserve=True,
                    acquired_round=round_index,
                )
            )
            team.races_since_transfer = 0
            self._record(
                round_index, team, TradeAction.RESERVE_FILL, asset.id, asset.price, 0,
                "Auto-fill after contract expiry",
            )
            filled += 1
        if filled:
            logger.debug("%s: auto-filled %d driver slot(s)", team.name, filled)
        return filled

    def auto_fill_constructor(
        self,
        team: FantasyTeam,
        round_index: int,
        completed_races: int,
    ) -> bool:
        """Fill an empty constructor slot with the cheapest eligible constructor."""
        if team.constructor is not None:
            return False
        candidates = sorted(
            (
                a
                for a in self.market.active_constructors()
                if not is_locked_out(team.constructor_lockouts, a.id, completed_races)
            ),
            key=lambda a: a.price,
        )
        for asset in candidates:
            if asset.price > team.budget:
                continue
            team.budget -= asset.price
            team.constructor = RosterSlot(
                asset_id=asset.id,
                purchase_price=asset.price,
                current_price=asset.price,
                contract_length=self.rules.contract_length,
                reserve=True,
                acquired_round=round_index,
            )
            team.races_since_transfer = 0
            self._record(
                round_index, team, TradeAction.RESERVE_FILL_CONSTRUCTOR, asset.id,
                asset.price, 0, "Auto-fill after contract expiry",
            )
            return True
        return False
