# lattice_pricing/__init__.py
"""Binomial-lattice option pricing with finite-difference Greeks and implied parameters."""

from .binomial_tree import LatticeFactors, lattice_factors, price
from .config import DEFAULT_BUMPS, BumpSizes, SolverSettings
from .contract import ExerciseStyle, OptionContract, OptionKind
from .exceptions import ComputationError, InvalidContract, NonConvergence, PricingError
from .greeks import Greeks, greeks
from .implied import ImpliedResult, implied_interest_rate, implied_vol_surface, implied_volatility
from .model import BinomialModel

__all__ = [
    "BinomialModel",
    "BumpSizes",
    "ComputationError",
    "DEFAULT_BUMPS",
    "ExerciseStyle",
    "Greeks",
    "ImpliedResult",
    "InvalidContract",
    "LatticeFactors",
    "NonConvergence",
    "OptionContract",
    "OptionKind",
    "PricingError",
    "SolverSettings",
    "greeks",
    "implied_interest_rate",
    "implied_vol_surface",
    "implied_volatility",
    "lattice_factors",
    "price",
]
