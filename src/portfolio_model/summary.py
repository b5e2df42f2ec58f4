# Copyright 2025 Spencer Williams
#
# Use of this source code is governed by an MIT license:
# https://github.com/sw23/life-model/blob/main/LICENSE

"""
Live aggregated view of a portfolio, one row per instrument position.

Rows are only written by ``Portfolio.refresh_summary``; everything else gets a
read-only mapping.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Dict, Iterator, Sequence, TYPE_CHECKING

import pandas as pd

if TYPE_CHECKING:
    from .asset.base import Asset


@dataclass(frozen=True)
class LiveAssetSummary:
    """Aggregate of every lot that shares one summary key.

    Attributes:
        key: Summary table key (symbol, or symbol:id for unique assets)
        symbol: Ticker symbol
        name: Display name, taken from the first lot
        total_quantity: Sum of quantities
        total_cost: Sum of purchase_price * quantity
        total_value: Sum of current_price * quantity
    """
    key: str
    symbol: str
    name: str
    total_quantity: float = 0.0
    total_cost: float = 0.0
    total_value: float = 0.0

    @property
    def average_purchase_price(self) -> float:
        if self.total_quantity == 0:
            return 0.0
        return self.total_cost / self.total_quantity

    @property
    def total_profit(self) -> float:
        return self.total_value - self.total_cost

    @classmethod
    def from_assets(cls, key: str, members: Sequence['Asset']) -> 'LiveAssetSummary':
        """Full recompute over the given members. members must not be empty."""
        first = members[0]
        return cls(
            key=key,
            symbol=first.symbol,
            name=first.name,
            total_quantity=sum(a.quantity for a in members),
            total_cost=sum(a.cost for a in members),
            total_value=sum(a.value for a in members),
        )


class SummaryTable(Mapping):
    """Read-only mapping from summary key to LiveAssetSummary."""

    COLUMNS = ['Symbol', 'Name', 'Total Quantity', 'Average Purchase Price',
               'Total Cost', 'Total Value', 'Total Profit']

    def __init__(self):
        self._rows: Dict[str, LiveAssetSummary] = {}

    def __getitem__(self, key: str) -> LiveAssetSummary:
        return self._rows[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._rows)

    def __len__(self) -> int:
        return len(self._rows)

    def _store(self, summary: LiveAssetSummary):
        self._rows[summary.key] = summary

    def _discard(self, key: str) -> bool:
        return self._rows.pop(key, None) is not None

    def _clear(self):
        self._rows.clear()

    def to_frame(self) -> pd.DataFrame:
        """Summary rows as a DataFrame indexed by key."""
        records = [
            {
                'Key': s.key,
                'Symbol': s.symbol,
                'Name': s.name,
                'Total Quantity': s.total_quantity,
                'Average Purchase Price': s.average_purchase_price,
                'Total Cost': s.total_cost,
                'Total Value': s.total_value,
                'Total Profit': s.total_profit,
            }
            for s in self._rows.values()
        ]
        df = pd.DataFrame(records, columns=['Key'] + self.COLUMNS)
        return df.set_index('Key')

    def __repr__(self) -> str:
        return f"SummaryTable(rows={len(self._rows)})"
