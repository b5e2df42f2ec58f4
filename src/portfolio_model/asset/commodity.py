# Copyright 2025 Spencer Williams
#
# Use of this source code is governed by an MIT license:
# https://github.com/sw23/life-model/blob/main/LICENSE
from datetime import date
from typing import Any, Dict, Optional, Union

import numpy as np

from ..enums import CommodityUnit, RiskLevel
from ..exceptions import InvalidUnitError
from .base import Asset


def parse_unit(value: Union[CommodityUnit, str]) -> CommodityUnit:
    """Coerce a unit given as enum, member name ("OUNCE") or value ("ounce")."""
    if isinstance(value, CommodityUnit):
        return value
    if isinstance(value, str):
        key = value.strip()
        if key.upper() in CommodityUnit.__members__:
            return CommodityUnit[key.upper()]
        try:
            return CommodityUnit(key.lower())
        except ValueError:
            pass
    raise InvalidUnitError(f"Undefined unit type value: {value!r}")


class Commodity(Asset):
    """A physical commodity such as gold, oil or grain, quoted per unit.

    Lots of the same symbol quoted in different units are simulated as
    separate groups.
    """

    default_volatility = 0.015
    default_mean_return = 0.0003
    risk = RiskLevel.MEDIUM

    def __init__(self, name: str, symbol: str, quantity: float, purchase_price: float,
                 unit: Union[CommodityUnit, str], **kwargs):
        super().__init__(name, symbol, quantity, purchase_price, **kwargs)
        self.unit = unit

    @property
    def unit(self) -> CommodityUnit:
        return self._unit

    @unit.setter
    def unit(self, value: Union[CommodityUnit, str]):
        self._unit = parse_unit(value)

    @property
    def group_key(self) -> str:
        return f"{self._symbol}:{self._unit.name}"

    def simulate_price_change(self, on_date: date, rng: Optional[np.random.Generator] = None):
        self._simulate_gbm_step(on_date, rng)

    def _clone_kwargs(self) -> Dict[str, Any]:
        kwargs = super()._clone_kwargs()
        kwargs['unit'] = self._unit
        return kwargs
