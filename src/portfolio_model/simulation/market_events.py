# Copyright 2025 Spencer Williams
#
# Use of this source code is governed by an MIT license:
# https://github.com/sw23/life-model/blob/main/LICENSE

"""
Transient market events.

A market event temporarily multiplies the volatility and shifts the mean
return of the assets it targets. The engine keeps the original parameters of
every targeted asset and writes them back unchanged when the event ends.
"""

import logging
import math
import uuid
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Sequence, Tuple, TYPE_CHECKING

import numpy as np

from ..exceptions import InvalidParameterError

if TYPE_CHECKING:
    from ..asset.base import Asset
    from ..portfolio import Portfolio

logger = logging.getLogger(__name__)

DEFAULT_EVENT_PROBABILITY = 0.10

STABLE_MESSAGE = "Market is stable. No new reports."
ENDED_MESSAGE = "Market event ended. Returning to normal."


def _never(asset: 'Asset') -> bool:
    return False


@dataclass(frozen=True)
class MarketEvent:
    """Definition of a market event.

    Attributes:
        title: Short headline (e.g., "CRYPTO CRASH")
        description: Message shown while the event is active
        duration_ticks: Number of ticks the event lasts (>= 1)
        target: Predicate selecting the affected assets
        volatility_multiplier: Factor applied to volatility (>= 0)
        mean_return_modifier: Amount added to mean return
    """
    title: str
    description: str
    duration_ticks: int
    target: Callable[['Asset'], bool] = field(default=_never, compare=False)
    volatility_multiplier: float = 1.0
    mean_return_modifier: float = 0.0

    def __post_init__(self):
        if self.duration_ticks < 1:
            raise InvalidParameterError("duration_ticks must be at least 1")
        if not math.isfinite(self.volatility_multiplier) or self.volatility_multiplier < 0:
            raise InvalidParameterError(
                f"volatility_multiplier must be finite and >= 0, got {self.volatility_multiplier}"
            )
        if not math.isfinite(self.mean_return_modifier):
            raise InvalidParameterError(
                f"mean_return_modifier must be finite, got {self.mean_return_modifier}"
            )

    @property
    def headline(self) -> str:
        return f"{self.title}: {self.description}"


def default_event_catalog() -> List[MarketEvent]:
    """The built-in event scenarios."""
    from ..asset import Commodity, Cryptocurrency, RealEstate, Stock

    return [
        MarketEvent(
            title="CRYPTO CRASH",
            description="Bitcoin and Altcoins are plunging! Panic in the market.",
            duration_ticks=5,
            target=lambda a: isinstance(a, Cryptocurrency),
            volatility_multiplier=3.0,
            mean_return_modifier=-0.05,
        ),
        MarketEvent(
            title="REAL ESTATE BOOM",
            description="Housing prices are rising due to low interest rates.",
            duration_ticks=8,
            target=lambda a: isinstance(a, RealEstate),
            volatility_multiplier=1.0,
            mean_return_modifier=0.02,
        ),
        MarketEvent(
            title="GEOPOLITICAL UNCERTAINTY",
            description="Investors are fleeing to gold. Stocks are unstable.",
            duration_ticks=6,
            target=lambda a: isinstance(a, (Stock, Commodity)),
            volatility_multiplier=2.5,
            mean_return_modifier=-0.005,
        ),
        MarketEvent(
            title="MARKET STABILIZATION",
            description="The market is calming down after recent events.",
            duration_ticks=3,
            target=lambda a: True,
            volatility_multiplier=0.5,
            mean_return_modifier=0.0,
        ),
    ]


class MarketEventEngine:
    """Idle -> Active -> Idle state machine for market events.

    While idle, each call to ``process_tick`` starts a random catalog event
    with probability ``event_probability``. While active, each call counts
    down the remaining ticks and the event ends when the count reaches 0.
    Only one event is active at a time.

    Example:
        >>> engine = MarketEventEngine(rng=np.random.default_rng(7))
        >>> for day in days:
        ...     engine.process_tick(portfolio)
        ...     portfolio.advance_one_tick(day)
        >>> engine.force_end(portfolio)  # before saving
    """

    def __init__(self,
                 catalog: Optional[Sequence[MarketEvent]] = None,
                 event_probability: float = DEFAULT_EVENT_PROBABILITY,
                 rng: Optional[np.random.Generator] = None):
        """Initialize the engine.

        Args:
            catalog: Events to pick from. If None, uses default_event_catalog().
            event_probability: Chance per idle tick of starting an event.
            rng: numpy Generator for the rolls. If None, a fresh unseeded one.
        """
        if not 0.0 <= event_probability <= 1.0:
            raise ValueError(f"event_probability must be within [0, 1], got {event_probability}")
        self.catalog: List[MarketEvent] = list(default_event_catalog() if catalog is None else catalog)
        self.event_probability = event_probability
        self.rng = rng if rng is not None else np.random.default_rng()

        self._current_event: Optional[MarketEvent] = None
        self._remaining_ticks = 0
        self._backup: Dict[uuid.UUID, Tuple[float, float]] = {}
        self.news_message = STABLE_MESSAGE

    @property
    def current_event(self) -> Optional[MarketEvent]:
        return self._current_event

    @property
    def is_active(self) -> bool:
        return self._current_event is not None

    @property
    def remaining_ticks(self) -> int:
        return self._remaining_ticks

    @property
    def backup(self) -> Dict[uuid.UUID, Tuple[float, float]]:
        """Copy of the saved (volatility, mean_return) per targeted asset id."""
        return dict(self._backup)

    def process_tick(self, portfolio: 'Portfolio') -> Optional[MarketEvent]:
        """Run the event bookkeeping for one tick.

        Returns:
            The event that is active after this tick, or None
        """
        if self._current_event is not None:
            self._remaining_ticks -= 1
            if self._remaining_ticks <= 0:
                self.end_current_event(portfolio)
            return self._current_event

        if self.catalog and self.rng.random() < self.event_probability:
            event = self.catalog[int(self.rng.integers(len(self.catalog)))]
            self.trigger(event, portfolio)
        else:
            self.news_message = STABLE_MESSAGE
        return self._current_event

    def trigger(self, event: MarketEvent, portfolio: 'Portfolio'):
        """Start a specific event now.

        Every targeted asset's new parameters are computed and checked before
        any asset is changed, so a failed trigger leaves the portfolio as it was.

        Raises:
            RuntimeError: If another event is already active
            InvalidParameterError: If the event would push a parameter out of range
        """
        if self._current_event is not None:
            raise RuntimeError(f"Event {self._current_event.title!r} is already active")

        changes = []
        for asset in portfolio:
            if not event.target(asset):
                continue
            volatility = asset.volatility * event.volatility_multiplier
            mean_return = asset.mean_return + event.mean_return_modifier
            if not math.isfinite(volatility) or not math.isfinite(mean_return):
                raise InvalidParameterError(
                    f"Event {event.title!r} would give {asset.symbol} non-finite parameters "
                    f"(volatility={volatility}, mean_return={mean_return})"
                )
            changes.append((asset, volatility, mean_return))

        self._backup.clear()
        for asset, volatility, mean_return in changes:
            self._backup[asset.asset_id] = (asset.volatility, asset.mean_return)
            asset.volatility = volatility
            asset.mean_return = mean_return

        self._current_event = event
        self._remaining_ticks = event.duration_ticks
        self.news_message = event.headline
        logger.info("Market event started: %s (%d ticks, %d assets affected)",
                    event.title, event.duration_ticks, len(self._backup))

    def end_current_event(self, portfolio: 'Portfolio') -> bool:
        """Restore every backed-up asset and return to idle.

        Returns:
            False if no event was active
        """
        if self._current_event is None:
            return False

        for asset in portfolio:
            original = self._backup.get(asset.asset_id)
            if original is not None:
                asset.volatility, asset.mean_return = original

        title = self._current_event.title
        self._current_event = None
        self._remaining_ticks = 0
        self._backup.clear()
        self.news_message = ENDED_MESSAGE
        logger.info("Market event ended: %s", title)
        return True

    def force_end(self, portfolio: 'Portfolio') -> bool:
        """End the active event early, e.g. before saving or shutting down."""
        return self.end_current_event(portfolio)

    def __repr__(self) -> str:
        state = self._current_event.title if self._current_event else 'idle'
        return f"MarketEventEngine(state={state!r}, remaining_ticks={self._remaining_ticks})"
