# Copyright 2025 Spencer Williams
#
# Use of this source code is governed by an MIT license:
# https://github.com/sw23/life-model/blob/main/LICENSE

"""
Day-by-day simulation driver.

SimulationRunner owns the simulated calendar. Each step moves the date one
day forward, lets the market event engine act, ticks the portfolio and
records a snapshot of the result.
"""

import logging
from datetime import date, timedelta
from typing import Any, Dict, List, Optional, TYPE_CHECKING

import numpy as np
import pandas as pd

from .config import SimulationConfig
from .market_events import MarketEventEngine

if TYPE_CHECKING:
    from ..portfolio import Portfolio

logger = logging.getLogger(__name__)


class SimulationRunner:
    """Runs a portfolio through a number of simulated days.

    Example:
        >>> runner = SimulationRunner(portfolio, SimulationConfig(num_days=60, random_seed=42))
        >>> df = runner.run()
        >>> df[['Date', 'Total Value']].tail()
        >>> runner.shutdown()
    """

    COLUMNS = ['Date', 'Total Value', 'Total Profit', 'Active Event', 'News', 'Top Movers']

    def __init__(self,
                 portfolio: 'Portfolio',
                 config: Optional[SimulationConfig] = None,
                 start_date: Optional[date] = None,
                 event_engine: Optional[MarketEventEngine] = None):
        """Initialize the runner.

        Args:
            portfolio: Portfolio to simulate
            config: Simulation configuration. If None, uses defaults.
            start_date: Date before the first simulated day. If None, uses today.
            event_engine: Market event engine. If None, one is built from the
                          config and shares the runner's random generator.
        """
        self.portfolio = portfolio
        self.config = config or SimulationConfig()
        self.current_date = start_date or date.today()

        # With a seed, events and prices draw from one reproducible stream
        if self.config.random_seed is not None:
            self.rng: Optional[np.random.Generator] = np.random.default_rng(self.config.random_seed)
        else:
            self.rng = None

        if event_engine is None:
            event_engine = MarketEventEngine(event_probability=self.config.event_probability,
                                             rng=self.rng)
        self.event_engine = event_engine
        self.snapshots: List[Dict[str, Any]] = []

    def step(self) -> Dict[str, Any]:
        """Simulate one day and return its snapshot."""
        self.current_date += timedelta(days=1)
        self.event_engine.process_tick(self.portfolio)
        self.portfolio.advance_one_tick(self.current_date, self.rng)

        event = self.event_engine.current_event
        movers = self.portfolio.top_movers(self.config.top_movers)
        snapshot = {
            'Date': self.current_date,
            'Total Value': self.portfolio.total_value(),
            'Total Profit': self.portfolio.total_profit(),
            'Active Event': event.title if event is not None else None,
            'News': self.event_engine.news_message,
            'Top Movers': ', '.join(f"{a.symbol} {a.percent_change:+.2%}" for a in movers),
        }
        self.snapshots.append(snapshot)
        return snapshot

    def run(self, num_days: Optional[int] = None) -> pd.DataFrame:
        """Run several days.

        Args:
            num_days: Days to simulate. If None, uses config.num_days.

        Returns:
            DataFrame with one row per simulated day, including earlier runs
        """
        days = self.config.num_days if num_days is None else num_days
        if days < 0:
            raise ValueError("num_days cannot be negative")

        logger.info("Simulating portfolio %r for %d days from %s",
                    self.portfolio.name, days, self.current_date)
        for _ in range(days):
            self.step()
        return self.results()

    def results(self) -> pd.DataFrame:
        return pd.DataFrame(self.snapshots, columns=self.COLUMNS)

    def shutdown(self) -> bool:
        """End any active market event so asset parameters are back to normal.

        Returns:
            True if an event was ended
        """
        ended = self.event_engine.force_end(self.portfolio)
        if ended:
            logger.info("Runner shutdown ended the active market event")
        return ended
