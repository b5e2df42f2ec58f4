# Copyright 2025 Spencer Williams
#
# Use of this source code is governed by an MIT license:
# https://github.com/sw23/life-model/blob/main/LICENSE

"""
Daily price models.

``next_price`` advances a price one day under Geometric Brownian Motion, using
a Box-Muller transform of two uniform draws for the normal shock.
``next_bond_price`` applies one day of simple interest at an annual rate.
"""

import math
from typing import Optional

import numpy as np

from ..exceptions import SimulationInvariantError

DAYS_PER_YEAR = 365.0


def _uniform(rng: Optional[np.random.Generator]) -> float:
    if rng is None:
        return float(np.random.random_sample())
    return float(rng.random())


def standard_normal(rng: Optional[np.random.Generator] = None) -> float:
    """Draw one standard normal variate with the Box-Muller transform.

    Both uniforms are taken as ``1 - U[0, 1)`` so they lie in (0, 1] and the
    logarithm is always defined.
    """
    u1 = 1.0 - _uniform(rng)
    u2 = 1.0 - _uniform(rng)
    return math.sqrt(-2.0 * math.log(u1)) * math.sin(2.0 * math.pi * u2)


def next_price(current: float, mean_return: float, volatility: float,
               rng: Optional[np.random.Generator] = None) -> float:
    """Advance a price by one GBM step.

    Args:
        current: Last known price (>= 0)
        mean_return: Daily drift as decimal
        volatility: Daily standard deviation as decimal (>= 0). With 0 the
                    result is exactly ``current * exp(mean_return)``.
        rng: Optional numpy Generator. Uses the global numpy state if None.

    Returns:
        The new price, always finite and non-negative.

    Raises:
        ValueError: If any input is non-finite, or current/volatility negative
        SimulationInvariantError: If the computed price is not finite
    """
    if not (math.isfinite(current) and math.isfinite(mean_return) and math.isfinite(volatility)):
        raise ValueError(
            f"Price model inputs must be finite: current={current}, "
            f"mean_return={mean_return}, volatility={volatility}"
        )
    if current < 0:
        raise ValueError(f"Current price cannot be negative: {current}")
    if volatility < 0:
        raise ValueError(f"Volatility cannot be negative: {volatility}")

    drift = mean_return - 0.5 * volatility ** 2
    shock = volatility * standard_normal(rng)

    try:
        price = current * math.exp(drift + shock)
    except OverflowError as e:
        raise SimulationInvariantError(
            f"Price overflowed: current={current}, drift={drift}, shock={shock}"
        ) from e
    if not math.isfinite(price):
        raise SimulationInvariantError(f"Price model produced a non-finite price: {price}")
    return price


def next_bond_price(current: float, annual_rate: float) -> float:
    """Accrue one day of interest: ``current + current * (annual_rate / 365)``."""
    if not (math.isfinite(current) and math.isfinite(annual_rate)):
        raise ValueError(f"Bond inputs must be finite: current={current}, rate={annual_rate}")
    if annual_rate < 0:
        raise ValueError(f"Bond rate cannot be negative: {annual_rate}")
    return current + current * (annual_rate / DAYS_PER_YEAR)
