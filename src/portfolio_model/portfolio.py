# Copyright 2025 Spencer Williams
#
# Use of this source code is governed by an MIT license:
# https://github.com/sw23/life-model/blob/main/LICENSE

"""
Investment portfolio: owns assets, drives daily price ticks and keeps the
summary table in step with every mutation.

A Portfolio is not thread-safe. Hosts that share one between threads must
serialize add/remove/tick/price and quantity updates themselves.
"""

import logging
import re
import uuid
from datetime import date
from typing import Callable, Dict, Iterator, List, Optional, Tuple, Union

import numpy as np

from .asset.base import Asset
from .exceptions import InvalidOwnerError, NotFoundError, ValidationError
from .summary import LiveAssetSummary, SummaryTable

logger = logging.getLogger(__name__)

_UPPER = 'A-ZĄĆĘŁŃÓŚŹŻ'
_LOWER = 'a-ząćęłńóśźż'
# First name, optional middle name, last name with an optional hyphenated part
OWNER_PATTERN = re.compile(
    rf"^[{_UPPER}][{_LOWER}]+(?:\s[{_UPPER}][{_LOWER}]+)?"
    rf"\s[{_UPPER}][{_LOWER}]+(?:-[{_UPPER}][{_LOWER}]+)?$"
)

AssetRef = Union[Asset, uuid.UUID, str]


class Portfolio:
    """A named collection of assets belonging to one owner.

    The portfolio has exclusive ownership of its assets: adding an asset that
    belongs to another portfolio moves it here, removing it leaves it
    orphaned.

    Example:
        >>> portfolio = Portfolio("Main", owner="Warren Buffet")
        >>> portfolio.add_asset(Stock("Apple Inc.", "AAPL", 10, 150.0))
        >>> portfolio.add_asset(Stock("Apple Inc.", "AAPL", 5, 160.0))
        >>> portfolio.summary_table["AAPL"].total_quantity
        15.0
        >>> portfolio.advance_one_tick(date(2025, 1, 2))
    """

    def __init__(self, name: str, owner: str):
        self._portfolio_id = uuid.uuid4()
        self._assets: List[Asset] = []
        self._summary = SummaryTable()
        self.name = name
        self.owner = owner

    @property
    def portfolio_id(self) -> uuid.UUID:
        return self._portfolio_id

    @property
    def name(self) -> str:
        return self._name

    @name.setter
    def name(self, value: str):
        if not isinstance(value, str) or not value.strip():
            raise ValidationError("Portfolio name can't be empty")
        self._name = value

    @property
    def owner(self) -> str:
        return self._owner

    @owner.setter
    def owner(self, value: str):
        if not isinstance(value, str) or not OWNER_PATTERN.match(value):
            raise InvalidOwnerError("Please enter a valid owner name")
        self._owner = value

    @property
    def assets(self) -> Tuple[Asset, ...]:
        return tuple(self._assets)

    @property
    def summary_table(self) -> SummaryTable:
        return self._summary

    # Membership

    def add_asset(self, asset: Asset):
        """Add an asset, taking it over from its current portfolio if it has one."""
        if not isinstance(asset, Asset):
            raise TypeError(f"Expected an Asset, got {type(asset).__name__}")
        if asset.portfolio is self:
            return
        if asset.portfolio is not None:
            asset.portfolio.remove_asset(asset.asset_id)

        self._assets.append(asset)
        asset._portfolio = self
        self.refresh_summary(asset)
        logger.debug("Added %s %s to portfolio %r", asset.type_name, asset.symbol, self._name)

    def remove_asset(self, asset_id: AssetRef) -> bool:
        """Remove an asset by id. Returns False when no asset matches."""
        key = self._coerce_id(asset_id)
        if key is None:
            return False
        for idx, asset in enumerate(self._assets):
            if asset.asset_id == key:
                del self._assets[idx]
                asset._portfolio = None
                self._refresh_key(asset.summary_key)
                logger.debug("Removed %s %s from portfolio %r",
                             asset.type_name, asset.symbol, self._name)
                return True
        return False

    def get_asset(self, asset_id: AssetRef) -> Asset:
        """Look up an asset by id.

        Raises:
            NotFoundError: If no asset has that id
        """
        key = self._coerce_id(asset_id)
        for asset in self._assets:
            if asset.asset_id == key:
                return asset
        raise NotFoundError(f"No asset with id {asset_id} in portfolio {self._name!r}")

    def find_by_symbol(self, symbol: str) -> Optional[Asset]:
        """First asset with the given symbol (case-insensitive), or None."""
        wanted = symbol.strip().upper()
        return next((a for a in self._assets if a.symbol == wanted), None)

    @staticmethod
    def _coerce_id(asset_id: AssetRef) -> Optional[uuid.UUID]:
        if isinstance(asset_id, Asset):
            return asset_id.asset_id
        if isinstance(asset_id, uuid.UUID):
            return asset_id
        try:
            return uuid.UUID(str(asset_id))
        except ValueError:
            return None

    # Summary maintenance

    def refresh_summary(self, asset: Asset, previous_key: Optional[str] = None):
        """Recompute the summary row the asset contributes to.

        Called synchronously after every add, remove, price or quantity change.
        previous_key is also refreshed when a rename moved the asset to a new row.
        """
        key = asset.summary_key
        if previous_key is not None and previous_key != key:
            self._refresh_key(previous_key)
        self._refresh_key(key)

    def _refresh_key(self, key: str):
        members = [a for a in self._assets if a.summary_key == key]
        if not members:
            self._summary._discard(key)
            return
        self._summary._store(LiveAssetSummary.from_assets(key, members))

    def rebuild_summary(self):
        """Drop every summary row and recompute the table from the current assets."""
        self._summary._clear()
        for key in dict.fromkeys(a.summary_key for a in self._assets):
            self._refresh_key(key)

    # Simulation

    def price_groups(self) -> Dict[str, List[Asset]]:
        """Partition assets by group key, keeping portfolio order inside each group."""
        groups: Dict[str, List[Asset]] = {}
        for asset in self._assets:
            groups.setdefault(asset.group_key, []).append(asset)
        return groups

    def advance_one_tick(self, on_date: date, rng: Optional[np.random.Generator] = None):
        """Advance every price by one simulated day.

        The first asset of each group (the leader) simulates its own price;
        the other members are set to the leader's price and get a history
        point for the same date, so lots of one instrument never diverge.
        """
        groups = self.price_groups()
        for members in groups.values():
            leader = members[0]
            leader.simulate_price_change(on_date, rng)
            for follower in members[1:]:
                follower.update_price(leader.current_price)
                follower.record_price(on_date, leader.current_price)
        logger.debug("Portfolio %r ticked to %s: %d groups, value %.2f",
                     self._name, on_date, len(groups), self.total_value())

    # Queries

    def total_value(self) -> float:
        return sum(a.value for a in self._assets)

    def total_cost(self) -> float:
        return sum(a.cost for a in self._assets)

    def total_profit(self) -> float:
        return self.total_value() - self.total_cost()

    def top_movers(self, count: int) -> List[Asset]:
        """Assets with the largest percent change since purchase, best first."""
        if count < 0:
            raise ValueError("count cannot be negative")
        return sorted(self._assets, key=lambda a: a.percent_change, reverse=True)[:count]

    def allocation_by_type(self, as_percentage: bool = True) -> Dict[str, float]:
        """Value held per asset type.

        Args:
            as_percentage: If True (default), values are percentages of the total
                           value and an empty dict is returned when the total is 0.

        Returns:
            Dict mapping type name (e.g., "Stock") to value or percentage
        """
        allocation: Dict[str, float] = {}
        for asset in self._assets:
            allocation[asset.type_name] = allocation.get(asset.type_name, 0.0) + asset.value
        if not as_percentage:
            return allocation

        total = sum(allocation.values())
        if total == 0:
            return {}
        return {name: value / total * 100 for name, value in allocation.items()}

    def find_assets(self, predicate: Callable[[Asset], bool]) -> Iterator[Asset]:
        """Lazily yield the assets matching predicate."""
        if predicate is None:
            raise TypeError("predicate is required")
        return (a for a in self._assets if predicate(a))

    def sorted_by_risk(self, descending: bool = False) -> List[Asset]:
        """Assets ordered by risk assessment; ties keep portfolio order."""
        return sorted(self._assets, key=lambda a: a.risk_assessment, reverse=descending)

    def clone(self, new_name: str) -> 'Portfolio':
        """Deep copy under a new name with fresh ids and a rebuilt summary table.

        Assets are copied with their current volatility and mean return. If a
        market event is active those are the perturbed values and the copy
        keeps them permanently, since the engine only restores assets of the
        portfolio it perturbed. Call ``MarketEventEngine.force_end`` first.
        """
        twin = Portfolio(new_name, self._owner)
        for asset in self._assets:
            copy = asset.clone()
            copy._portfolio = twin
            twin._assets.append(copy)
        twin.rebuild_summary()
        return twin

    def __len__(self) -> int:
        return len(self._assets)

    def __iter__(self) -> Iterator[Asset]:
        return iter(tuple(self._assets))

    def __contains__(self, item: object) -> bool:
        if isinstance(item, (Asset, uuid.UUID, str)):
            key = self._coerce_id(item)
            return any(a.asset_id == key for a in self._assets)
        return False

    def __repr__(self) -> str:
        return f"Portfolio(name={self._name!r}, owner={self._owner!r}, assets={len(self._assets)})"
