# Copyright 2025 Spencer Williams
#
# Use of this source code is governed by an MIT license:
# https://github.com/sw23/life-model/blob/main/LICENSE

"""
Asset variants held in a portfolio.
"""

from .base import Asset, PricePoint, PRICE_CHANGE_TOLERANCE
from .stock import Stock
from .bond import Bond
from .cryptocurrency import Cryptocurrency
from .real_estate import RealEstate, Address
from .commodity import Commodity, parse_unit

ASSET_TYPES = {
    cls.__name__: cls for cls in (Stock, Bond, Cryptocurrency, RealEstate, Commodity)
}

__all__ = [
    'Asset',
    'PricePoint',
    'PRICE_CHANGE_TOLERANCE',
    'Stock',
    'Bond',
    'Cryptocurrency',
    'RealEstate',
    'Address',
    'Commodity',
    'parse_unit',
    'ASSET_TYPES',
]
