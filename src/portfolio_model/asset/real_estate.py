# Copyright 2025 Spencer Williams
#
# Use of this source code is governed by an MIT license:
# https://github.com/sw23/life-model/blob/main/LICENSE
from dataclasses import dataclass
from datetime import date
from typing import Any, Dict, Optional

import numpy as np

from ..enums import RiskLevel
from ..exceptions import InvalidAddressError, InvalidZipCodeError
from .base import Asset

MIN_ZIP_CODE_LENGTH = 3


@dataclass(frozen=True)
class Address:
    """Postal address of a property.

    Frozen: change an address by assigning a new one (``dataclasses.replace``
    works), which validates again.
    """
    street: str
    house_number: str
    city: str
    zip_code: str
    country: str
    flat_number: str = ''

    def __post_init__(self):
        for field_name in ('street', 'house_number', 'city', 'country'):
            value = getattr(self, field_name)
            if not isinstance(value, str) or not value.strip():
                label = field_name.replace('_', ' ').capitalize()
                raise InvalidAddressError(f"{label} cannot be empty.")
        if not isinstance(self.zip_code, str) or not self.zip_code.strip() \
                or len(self.zip_code) < MIN_ZIP_CODE_LENGTH:
            raise InvalidZipCodeError(f"Invalid ZipCode format: {self.zip_code!r}")
        if not isinstance(self.flat_number, str):
            raise InvalidAddressError("Flat number must be a string.")

    def __str__(self) -> str:
        number = self.house_number
        if self.flat_number:
            number = f"{number}/{self.flat_number}"
        return f"{self.street} {number}, {self.zip_code} {self.city}, {self.country}"


class RealEstate(Asset):
    """A single property.

    Each property is unique: it is never merged with another asset in the
    summary table, and it is simulated in its own group. Its value only moves
    on the first day of each month.
    """

    default_volatility = 0.005
    default_mean_return = 0.00015
    risk = RiskLevel.LOW
    is_mergeable = False

    def __init__(self, name: str, purchase_price: float, address: Address,
                 symbol: str = 'PROP', quantity: float = 1, **kwargs):
        super().__init__(name, symbol, quantity, purchase_price, **kwargs)
        self.address = address

    @property
    def address(self) -> Address:
        return self._address

    @address.setter
    def address(self, value: Address):
        if not isinstance(value, Address):
            raise InvalidAddressError(f"Expected an Address, got {type(value).__name__}")
        self._address = value

    @property
    def group_key(self) -> str:
        return f"{self._symbol}:{self._name}"

    def simulate_price_change(self, on_date: date, rng: Optional[np.random.Generator] = None):
        if on_date.day != 1:
            return
        self._simulate_gbm_step(on_date, rng)

    def _clone_kwargs(self) -> Dict[str, Any]:
        kwargs = super()._clone_kwargs()
        kwargs['address'] = self._address
        return kwargs
