# lattice_pricing/config.py
# Numerical defaults shared by the sensitivity estimator and the solvers.

from dataclasses import dataclass
from typing import Tuple

__all__ = [
    "BumpSizes",
    "SolverSettings",
    "DEFAULT_BUMPS",
    "VOLATILITY_SOLVER",
    "RATE_SOLVER",
]


@dataclass(frozen=True)
class BumpSizes:
    """
    Finite-difference perturbations used for the Greeks.

    Units:
    - `spot_rel`: relative spot move (0.01 = 1%)
    - `time`: maturity reduction in years (1/365 = one calendar day)
    - `volatility`: absolute vol bump in decimals
    - `rate`: absolute rate bump in decimals
    """

    spot_rel: float = 0.01
    time: float = 1.0 / 365.0
    volatility: float = 0.01
    rate: float = 0.01

    def __post_init__(self):
        for name in ("spot_rel", "time", "volatility", "rate"):
            if not getattr(self, name) > 0:
                raise ValueError(f"{name} bump must be > 0")
        if self.spot_rel >= 1.0:
            raise ValueError("spot_rel bump must be < 1")


@dataclass(frozen=True)
class SolverSettings:
    """Bracket and tolerance for one bisection search."""

    bracket: Tuple[float, float]
    tol: float = 1e-5

    def __post_init__(self):
        low, high = self.bracket
        if not low < high:
            raise ValueError("bracket must satisfy low < high")
        if not self.tol > 0:
            raise ValueError("tol must be > 0")


DEFAULT_BUMPS = BumpSizes()
VOLATILITY_SOLVER = SolverSettings(bracket=(0.001, 5.0))
RATE_SOLVER = SolverSettings(bracket=(-0.1, 0.1))
