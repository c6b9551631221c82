# lattice_pricing/contract.py

import dataclasses
import math
from dataclasses import dataclass
from enum import Enum

import numpy as np

from .exceptions import InvalidContract

__all__ = [
    "OptionKind",
    "ExerciseStyle",
    "OptionContract",
    "call_payoff",
    "put_payoff",
    "payoff_for",
]


class OptionKind(str, Enum):
    CALL = "call"
    PUT = "put"

    @classmethod
    def parse(cls, value):
        """Accept an OptionKind or one of {'call', 'put', 'C', 'P'} (any case)."""
        if isinstance(value, cls):
            return value
        label = str(value).strip().lower()
        if label in ("call", "c"):
            return cls.CALL
        if label in ("put", "p"):
            return cls.PUT
        raise InvalidContract(f"kind must be 'call' or 'put', got {value!r}")


class ExerciseStyle(str, Enum):
    EUROPEAN = "european"
    AMERICAN = "american"

    @classmethod
    def parse(cls, value):
        if isinstance(value, cls):
            return value
        label = str(value).strip().lower()
        for style in cls:
            if label == style.value:
                return style
        raise InvalidContract(
            f"exercise_style must be 'european' or 'american', got {value!r}"
        )


# -----------------------------
# Payoffs
# -----------------------------
def call_payoff(spot, strike):
    """max(S - K, 0), vectorized over spot."""
    return np.maximum(np.asarray(spot, dtype=float) - strike, 0.0)


def put_payoff(spot, strike):
    """max(K - S, 0), vectorized over spot."""
    return np.maximum(strike - np.asarray(spot, dtype=float), 0.0)


_PAYOFFS = {
    OptionKind.CALL: call_payoff,
    OptionKind.PUT: put_payoff,
}


def payoff_for(kind):
    """Return the payoff function for an option kind."""
    return _PAYOFFS[OptionKind.parse(kind)]


# -----------------------------
# Contract
# -----------------------------
@dataclass(frozen=True)
class OptionContract:
    """
    Terms and market inputs for one vanilla option priced on a binomial lattice.

    Parameters
    ----------
    kind : OptionKind or str
        "call" or "put"
    exercise_style : ExerciseStyle or str
        "european" or "american"
    strike : float
        Strike price
    spot : float
        Current price of the underlying
    rate : float
        Continuously-compounded risk-free rate
    volatility : float
        Annualized volatility (decimals)
    maturity : float
        Time to maturity in years, > 0
    dividend_yield : float
        Continuous dividend yield. Carried with the contract but not used by
        the lattice (see `binomial_tree.price`).
    steps : int
        Number of time slices in the lattice, >= 1

    Instances are immutable; use `replace(...)` to build perturbed copies.
    """

    kind: OptionKind
    exercise_style: ExerciseStyle
    strike: float
    spot: float
    rate: float
    volatility: float
    maturity: float
    dividend_yield: float = 0.0
    steps: int = 100

    def __post_init__(self):
        object.__setattr__(self, "kind", OptionKind.parse(self.kind))
        object.__setattr__(self, "exercise_style", ExerciseStyle.parse(self.exercise_style))

        for name in ("strike", "spot", "rate", "volatility", "maturity", "dividend_yield"):
            try:
                value = float(getattr(self, name))
            except (TypeError, ValueError):
                raise InvalidContract(f"{name} must be a number") from None
            if not math.isfinite(value):
                raise InvalidContract(f"{name} must be finite")
            object.__setattr__(self, name, value)

        steps = self.steps
        try:
            integral = not isinstance(steps, bool) and int(steps) == steps
        except (TypeError, ValueError, OverflowError):
            integral = False
        if not integral:
            raise InvalidContract("steps must be an integer")
        object.__setattr__(self, "steps", int(steps))

        if self.steps < 1:
            raise InvalidContract("steps must be >= 1")
        if self.maturity <= 0:
            raise InvalidContract("maturity must be > 0")
        if self.volatility < 0:
            raise InvalidContract("volatility must be >= 0")
        if self.strike < 0:
            raise InvalidContract("strike must be >= 0")
        if self.spot < 0:
            raise InvalidContract("spot must be >= 0")

    @property
    def is_american(self):
        return self.exercise_style is ExerciseStyle.AMERICAN

    @property
    def payoff(self):
        """Payoff function of the underlying price, fixed by `kind`."""
        return payoff_for(self.kind)

    def replace(self, **changes):
        """Return a validated copy with some fields changed."""
        return dataclasses.replace(self, **changes)
