# Copyright 2025 Spencer Williams
#
# Use of this source code is governed by an MIT license:
# https://github.com/sw23/life-model/blob/main/LICENSE
from datetime import date
from typing import Optional

import numpy as np

from ..enums import RiskLevel
from .base import Asset


class Cryptocurrency(Asset):
    """A crypto coin or token. Very volatile."""

    default_volatility = 0.08
    risk = RiskLevel.EXTREMELY_HIGH

    def __init__(self, name: str, symbol: str, quantity: float, purchase_price: float,
                 **kwargs):
        super().__init__(name, symbol, quantity, purchase_price, **kwargs)

    def simulate_price_change(self, on_date: date, rng: Optional[np.random.Generator] = None):
        self._simulate_gbm_step(on_date, rng)
