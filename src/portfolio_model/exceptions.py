# Copyright 2025 Spencer Williams
#
# Use of this source code is governed by an MIT license:
# https://github.com/sw23/life-model/blob/main/LICENSE

"""
Exception hierarchy for the portfolio model.

Validation errors subclass ValueError and lookup failures subclass LookupError,
so callers that only know the builtin types still catch them.
"""


class PortfolioModelError(Exception):
    """Base class for every error raised by portfolio_model."""


class ValidationError(PortfolioModelError, ValueError):
    """A value was rejected at the point of mutation. Prior state is kept."""


class InvalidQuantityError(ValidationError):
    """Quantity is zero, negative or not a number."""


class InvalidPriceError(ValidationError):
    """Price is negative or not finite."""


class AssetNameError(ValidationError):
    """Asset name is empty."""


class AssetSymbolError(ValidationError):
    """Asset symbol is empty."""


class BondRateError(ValidationError):
    """Bond rate is negative."""


class InvalidAddressError(ValidationError):
    """A required address field is empty."""


class InvalidZipCodeError(InvalidAddressError):
    """Zip code is blank or shorter than three characters."""


class InvalidUnitError(ValidationError):
    """Commodity unit is not one of CommodityUnit."""


class InvalidOwnerError(ValidationError):
    """Portfolio owner does not look like a person's name."""


class InvalidParameterError(ValidationError):
    """Simulation parameter (volatility, mean return, threshold, ...) is out of range."""


class NotFoundError(PortfolioModelError, LookupError):
    """No asset with the requested id exists in the portfolio."""


class SimulationInvariantError(PortfolioModelError, ArithmeticError):
    """The price model produced a non-finite price."""
