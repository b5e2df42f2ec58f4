# Copyright 2025 Spencer Williams
#
# Use of this source code is governed by an MIT license:
# https://github.com/sw23/life-model/blob/main/LICENSE
import math
from datetime import date
from typing import Any, Dict, Optional

import numpy as np

from ..exceptions import BondRateError
from ..simulation.price_model import next_bond_price
from .base import Asset


class Bond(Asset):
    def __init__(self, name: str, symbol: str, quantity: float, purchase_price: float,
                 rate: float, **kwargs):
        """ Models a fixed-rate bond

        Unlike the other variants the price is never stochastic: every call to
        simulate_price_change accrues one day of interest at the annual rate.

        Args:
            name: Bond name
            symbol: Ticker symbol
            quantity: Number of bonds held
            purchase_price: Price paid per bond
            rate: Annual interest rate as decimal (e.g., 0.05 for 5%). Must be >= 0.
        """
        super().__init__(name, symbol, quantity, purchase_price, **kwargs)
        self.rate = rate

    @property
    def rate(self) -> float:
        return self._rate

    @rate.setter
    def rate(self, value: float):
        try:
            value = float(value)
        except (TypeError, ValueError) as e:
            raise BondRateError(f"Bond rate must be a number, got {value!r}") from e
        if not math.isfinite(value) or value < 0:
            raise BondRateError("Bond rate can't be lower than 0.")
        self._rate = value

    def simulate_price_change(self, on_date: date, rng: Optional[np.random.Generator] = None):
        self._set_current_price(next_bond_price(self._current_price, self._rate))
        self.record_price(on_date)

    def _clone_kwargs(self) -> Dict[str, Any]:
        kwargs = super()._clone_kwargs()
        kwargs['rate'] = self._rate
        return kwargs
