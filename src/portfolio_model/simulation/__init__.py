# Copyright 2025 Spencer Williams
#
# Use of this source code is governed by an MIT license:
# https://github.com/sw23/life-model/blob/main/LICENSE

"""
Market simulation module.

This module provides the daily price model, the transient market event engine
and a runner that drives a portfolio through simulated days.
"""

from .price_model import next_price, next_bond_price, standard_normal, DAYS_PER_YEAR
from .config import SimulationConfig
from .market_events import MarketEvent, MarketEventEngine, default_event_catalog
from .runner import SimulationRunner

__all__ = [
    'next_price',
    'next_bond_price',
    'standard_normal',
    'DAYS_PER_YEAR',
    'SimulationConfig',
    'MarketEvent',
    'MarketEventEngine',
    'default_event_catalog',
    'SimulationRunner',
]
