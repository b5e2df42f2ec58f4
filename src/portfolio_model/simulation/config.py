# Copyright 2025 Spencer Williams
#
# Use of this source code is governed by an MIT license:
# https://github.com/sw23/life-model/blob/main/LICENSE

"""Configuration for market simulations."""

import os
from dataclasses import dataclass
from typing import Mapping, Optional

ENV_PREFIX = 'PORTFOLIO_SIM_'


@dataclass
class SimulationConfig:
    """Configuration for a simulation run.

    Attributes:
        num_days: Number of daily ticks to run. Default 30.
        event_probability: Chance per idle tick that a market event starts. Default 0.10.
        random_seed: Optional seed for reproducible results. Default None.
        top_movers: Number of top movers reported per day. Default 3.
    """
    num_days: int = 30
    event_probability: float = 0.10
    random_seed: Optional[int] = None
    top_movers: int = 3

    def __post_init__(self):
        if self.num_days < 1:
            raise ValueError("num_days must be at least 1")
        if not 0.0 <= self.event_probability <= 1.0:
            raise ValueError(f"event_probability must be within [0, 1], got {self.event_probability}")
        if self.top_movers < 0:
            raise ValueError("top_movers cannot be negative")

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> 'SimulationConfig':
        """Build a config from PORTFOLIO_SIM_* environment variables.

        Unset variables keep their defaults.
        """
        env = os.environ if environ is None else environ
        kwargs = {}
        days = env.get(ENV_PREFIX + 'DAYS')
        if days:
            kwargs['num_days'] = int(days)
        probability = env.get(ENV_PREFIX + 'EVENT_PROBABILITY')
        if probability:
            kwargs['event_probability'] = float(probability)
        seed = env.get(ENV_PREFIX + 'SEED')
        if seed:
            kwargs['random_seed'] = int(seed)
        movers = env.get(ENV_PREFIX + 'TOP_MOVERS')
        if movers:
            kwargs['top_movers'] = int(movers)
        return cls(**kwargs)
