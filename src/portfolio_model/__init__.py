# Copyright 2025 Spencer Williams
#
# Use of this source code is governed by an MIT license:
# https://github.com/sw23/life-model/blob/main/LICENSE

"""
Portfolio Aggregation & Market Simulation Engine

Tracks positions in stocks, bonds, cryptocurrencies, real estate and
commodities, advances their prices day by day, keeps a live per-instrument
summary and notifies subscribers when prices move or fall below a threshold.

Example usage:
    from datetime import date
    from portfolio_model import Portfolio, Stock, Cryptocurrency, SimulationRunner, SimulationConfig

    portfolio = Portfolio("Main", owner="Warren Buffet")
    portfolio.add_asset(Stock("Apple Inc.", "AAPL", 10, 150.0))
    btc = Cryptocurrency("Bitcoin", "BTC", 0.5, 50000.0, low_price_threshold=45000.0)
    btc.on_critical_drop += lambda symbol, price, msg: print(symbol, msg)
    portfolio.add_asset(btc)

    runner = SimulationRunner(portfolio, SimulationConfig(num_days=30, random_seed=42),
                              start_date=date(2025, 1, 1))
    df = runner.run()
    runner.shutdown()
"""

# Errors
from .exceptions import (
    PortfolioModelError, ValidationError, InvalidQuantityError, InvalidPriceError,
    AssetNameError, AssetSymbolError, BondRateError, InvalidAddressError,
    InvalidZipCodeError, InvalidUnitError, InvalidOwnerError, InvalidParameterError,
    NotFoundError, SimulationInvariantError,
)

# Enums and notifications
from .enums import RiskLevel, CommodityUnit
from .notifications import PriceChannel

# Simulation
from .simulation import (
    next_price,
    next_bond_price,
    SimulationConfig,
    MarketEvent,
    MarketEventEngine,
    default_event_catalog,
    SimulationRunner,
)

# Assets
from .asset import (
    Asset, PricePoint, Stock, Bond, Cryptocurrency, RealEstate, Address,
    Commodity, ASSET_TYPES,
)

# Portfolio
from .summary import LiveAssetSummary, SummaryTable
from .portfolio import Portfolio

# Persistence
from .storage import PortfolioStore, JsonPortfolioStore

# Version
from .__meta__ import __version__

__all__ = [
    # Errors
    'PortfolioModelError', 'ValidationError', 'InvalidQuantityError', 'InvalidPriceError',
    'AssetNameError', 'AssetSymbolError', 'BondRateError', 'InvalidAddressError',
    'InvalidZipCodeError', 'InvalidUnitError', 'InvalidOwnerError', 'InvalidParameterError',
    'NotFoundError', 'SimulationInvariantError',
    # Enums and notifications
    'RiskLevel', 'CommodityUnit', 'PriceChannel',
    # Simulation
    'next_price', 'next_bond_price', 'SimulationConfig', 'MarketEvent',
    'MarketEventEngine', 'default_event_catalog', 'SimulationRunner',
    # Assets
    'Asset', 'PricePoint', 'Stock', 'Bond', 'Cryptocurrency', 'RealEstate', 'Address',
    'Commodity', 'ASSET_TYPES',
    # Portfolio
    'LiveAssetSummary', 'SummaryTable', 'Portfolio',
    # Persistence
    'PortfolioStore', 'JsonPortfolioStore',
    # Version
    '__version__',
]
