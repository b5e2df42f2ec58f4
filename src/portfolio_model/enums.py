# Copyright 2025 Spencer Williams
#
# Use of this source code is governed by an MIT license:
# https://github.com/sw23/life-model/blob/main/LICENSE
from enum import Enum, IntEnum


class RiskLevel(IntEnum):
    """Investment risk classification. Ordered from least to most risky."""
    LOW = 0
    MEDIUM = 1
    HIGH = 2
    EXTREMELY_HIGH = 3


class CommodityUnit(Enum):
    """Units of measure a commodity can be quoted in."""
    OUNCE = 'ounce'
    BARREL = 'barrel'
    TON = 'ton'
    KILOGRAM = 'kilogram'
    GRAM = 'gram'
    BUSHEL = 'bushel'
    LITER = 'liter'
    MWH = 'megawatt-hour'
