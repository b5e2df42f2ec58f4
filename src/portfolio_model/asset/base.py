# Copyright 2025 Spencer Williams
#
# Use of this source code is governed by an MIT license:
# https://github.com/sw23/life-model/blob/main/LICENSE
import html
import math
import uuid
from abc import ABC, abstractmethod
from datetime import date
from typing import Any, Dict, List, NamedTuple, Optional, Tuple, TYPE_CHECKING

import numpy as np
import pandas as pd

from ..enums import RiskLevel
from ..exceptions import (AssetNameError, AssetSymbolError, InvalidParameterError,
                          InvalidPriceError, InvalidQuantityError)
from ..notifications import PriceChannel
from ..simulation.price_model import next_price

if TYPE_CHECKING:
    from ..portfolio import Portfolio

# Price moves at or below this size are treated as float noise and ignored
PRICE_CHANGE_TOLERANCE = 1e-4


class PricePoint(NamedTuple):
    date: date
    price: float


class Asset(ABC):
    """A position in one instrument held inside a portfolio.

    Subclasses set the class-level defaults and implement
    ``simulate_price_change``. Every price change goes through
    ``_set_current_price`` which keeps the owning portfolio's summary table
    current and then notifies ``on_price_update`` and ``on_critical_drop``.
    """

    default_volatility: float = 0.0
    default_mean_return: float = 0.0002
    risk: RiskLevel = RiskLevel.MEDIUM
    is_mergeable: bool = True

    def __init__(self, name: str, symbol: str, quantity: float, purchase_price: float,
                 volatility: Optional[float] = None, mean_return: Optional[float] = None,
                 low_price_threshold: Optional[float] = None):
        """ Base asset

        Args:
            name: Display name, must not be blank
            symbol: Ticker symbol, stored upper-case
            quantity: Units held, must be greater than 0
            purchase_price: Price paid per unit, must be >= 0. Also the starting current price.
            volatility: Daily volatility. Defaults to the variant default.
            mean_return: Daily mean return. Defaults to the variant default.
            low_price_threshold: Optional price below which on_critical_drop fires.
        """
        self._asset_id = uuid.uuid4()
        self._portfolio: Optional['Portfolio'] = None
        self.on_price_update = PriceChannel()
        self.on_critical_drop = PriceChannel()

        self.name = name
        self.symbol = symbol
        self.quantity = quantity

        purchase_price = self._validate_price(purchase_price)
        self._purchase_price = purchase_price
        self._current_price = purchase_price

        self.volatility = self.default_volatility if volatility is None else volatility
        self.mean_return = self.default_mean_return if mean_return is None else mean_return
        self.low_price_threshold = low_price_threshold
        self._price_history: List[PricePoint] = []

    @staticmethod
    def _validate_price(value: float) -> float:
        try:
            value = float(value)
        except (TypeError, ValueError) as e:
            raise InvalidPriceError(f"Price must be a number, got {value!r}") from e
        if not math.isfinite(value) or value < 0:
            raise InvalidPriceError(f"Price can't be lower than 0 or non-finite, got {value}")
        return value

    @property
    def asset_id(self) -> uuid.UUID:
        return self._asset_id

    @property
    def portfolio(self) -> Optional['Portfolio']:
        """The portfolio that currently owns this asset, if any."""
        return self._portfolio

    @property
    def name(self) -> str:
        return self._name

    @name.setter
    def name(self, value: str):
        if not isinstance(value, str) or not value.strip():
            raise AssetNameError("Asset name can't be empty")
        self._name = value
        self._refresh_summary()

    @property
    def symbol(self) -> str:
        return self._symbol

    @symbol.setter
    def symbol(self, value: str):
        if not isinstance(value, str) or not value.strip():
            raise AssetSymbolError("Asset symbol can't be empty")
        previous_key = self.summary_key if hasattr(self, '_symbol') else None
        self._symbol = value.strip().upper()
        self._refresh_summary(previous_key)

    @property
    def quantity(self) -> float:
        return self._quantity

    @quantity.setter
    def quantity(self, value: float):
        try:
            value = float(value)
        except (TypeError, ValueError) as e:
            raise InvalidQuantityError(f"Quantity must be a number, got {value!r}") from e
        # NaN fails this comparison too
        if not value > 0 or math.isinf(value):
            raise InvalidQuantityError("Quantity must be greater than 0")
        self._quantity = value
        self._refresh_summary()

    @property
    def purchase_price(self) -> float:
        return self._purchase_price

    @property
    def current_price(self) -> float:
        return self._current_price

    @property
    def volatility(self) -> float:
        return self._volatility

    @volatility.setter
    def volatility(self, value: float):
        try:
            value = float(value)
        except (TypeError, ValueError) as e:
            raise InvalidParameterError(f"Volatility must be a number, got {value!r}") from e
        if not math.isfinite(value) or value < 0:
            raise InvalidParameterError(f"Volatility must be finite and >= 0, got {value}")
        self._volatility = value

    @property
    def mean_return(self) -> float:
        return self._mean_return

    @mean_return.setter
    def mean_return(self, value: float):
        try:
            value = float(value)
        except (TypeError, ValueError) as e:
            raise InvalidParameterError(f"Mean return must be a number, got {value!r}") from e
        if not math.isfinite(value):
            raise InvalidParameterError(f"Mean return must be finite, got {value}")
        self._mean_return = value

    @property
    def low_price_threshold(self) -> Optional[float]:
        return self._low_price_threshold

    @low_price_threshold.setter
    def low_price_threshold(self, value: Optional[float]):
        if value is not None:
            try:
                value = float(value)
            except (TypeError, ValueError) as e:
                raise InvalidParameterError(f"Low price threshold must be a number, got {value!r}") from e
            if not math.isfinite(value) or value < 0:
                raise InvalidParameterError(f"Low price threshold must be finite and >= 0, got {value}")
        self._low_price_threshold = value

    @property
    def value(self) -> float:
        return self._quantity * self._current_price

    @property
    def cost(self) -> float:
        return self._quantity * self._purchase_price

    @property
    def percent_change(self) -> float:
        """Change since purchase as a decimal, 0.0 when bought for free."""
        if self._purchase_price == 0:
            return 0.0
        return (self._current_price - self._purchase_price) / self._purchase_price

    @property
    def risk_assessment(self) -> RiskLevel:
        return self.risk

    @property
    def price_history(self) -> Tuple[PricePoint, ...]:
        return tuple(self._price_history)

    @property
    def group_key(self) -> str:
        """Key of the leader/follower group this asset is simulated in."""
        return self._symbol

    @property
    def summary_key(self) -> str:
        """Key of the summary table row this asset contributes to."""
        if self.is_mergeable:
            return self._symbol
        return f"{self._symbol}:{self._asset_id}"

    @property
    def type_name(self) -> str:
        return type(self).__name__

    def update_price(self, new_price: float) -> bool:
        """Set the current price directly. Returns True if the price changed."""
        return self._set_current_price(new_price)

    def record_price(self, on_date: date, price: Optional[float] = None):
        """Append a history point, using the current price when none is given."""
        self._price_history.append(
            PricePoint(on_date, self._current_price if price is None else float(price))
        )

    @abstractmethod
    def simulate_price_change(self, on_date: date, rng: Optional[np.random.Generator] = None):
        """Advance the price for one simulated day."""

    def _simulate_gbm_step(self, on_date: date, rng: Optional[np.random.Generator]):
        self._set_current_price(next_price(self._current_price, self._mean_return,
                                           self._volatility, rng))
        self.record_price(on_date)

    def _set_current_price(self, value: float) -> bool:
        value = self._validate_price(value)
        old_price = self._current_price
        if abs(value - old_price) <= PRICE_CHANGE_TOLERANCE:
            return False

        self._current_price = value
        self._refresh_summary()

        movement = "rose" if value > old_price else "dropped"
        self.on_price_update.dispatch(
            self._symbol, value, f"Price {movement} by ${abs(value - old_price):,.2f}"
        )
        # Level-triggered: re-evaluated on every change while below the threshold
        threshold = self._low_price_threshold
        if threshold is not None and value < threshold:
            self.on_critical_drop.dispatch(self._symbol, value, f"CRITICAL: Below ${threshold:,.2f}")
        return True

    def _refresh_summary(self, previous_key: Optional[str] = None):
        portfolio = getattr(self, '_portfolio', None)
        if portfolio is not None:
            portfolio.refresh_summary(self, previous_key=previous_key)

    def _clone_kwargs(self) -> Dict[str, Any]:
        return {
            'name': self._name,
            'symbol': self._symbol,
            'quantity': self._quantity,
            'purchase_price': self._purchase_price,
            'volatility': self._volatility,
            'mean_return': self._mean_return,
            'low_price_threshold': self._low_price_threshold,
        }

    def clone(self) -> 'Asset':
        """Deep copy with a new id, no subscribers and no owning portfolio."""
        twin = type(self)(**self._clone_kwargs())
        twin._current_price = self._current_price
        twin._price_history = list(self._price_history)
        return twin

    def _restore_state(self, asset_id: uuid.UUID, current_price: float,
                       history: List[PricePoint]):
        """Reinstate persisted identity and price state. Only valid before adding to a portfolio."""
        if self._portfolio is not None:
            raise RuntimeError("Cannot restore state of an asset that belongs to a portfolio")
        self._asset_id = asset_id
        self._current_price = self._validate_price(current_price)
        self._price_history = list(history)

    def history_frame(self) -> pd.DataFrame:
        """Price history as a DataFrame with Date and Price columns."""
        return pd.DataFrame(self._price_history, columns=['Date', 'Price'])

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Asset):
            return NotImplemented
        return self._asset_id == other._asset_id

    def __hash__(self) -> int:
        return hash(self._asset_id)

    def __lt__(self, other: 'Asset') -> bool:
        if not isinstance(other, Asset):
            return NotImplemented
        return self.value < other.value

    def __repr__(self) -> str:
        return (f"{self.type_name}(symbol={self._symbol!r}, quantity={self._quantity}, "
                f"current_price={self._current_price:.4f})")

    def _repr_html_(self):
        desc = '<ul>'
        desc += f'<li>Name: {html.escape(self._name)} ({html.escape(self._symbol)})</li>'
        desc += f'<li>Type: {self.type_name}</li>'
        desc += f'<li>Quantity: {self._quantity:,.4f}</li>'
        desc += f'<li>Purchase Price: ${self._purchase_price:,.2f}</li>'
        desc += f'<li>Current Price: ${self._current_price:,.2f}</li>'
        desc += f'<li>Value: ${self.value:,.2f}</li>'
        desc += f'<li>Risk: {self.risk.name}</li>'
        desc += '</ul>'
        return desc
