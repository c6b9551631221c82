# lattice_pricing/greeks.py
# Finite-difference Greeks on the binomial lattice.

import logging
from dataclasses import asdict, dataclass

import pandas as pd

from .binomial_tree import price
from .config import DEFAULT_BUMPS
from .exceptions import ComputationError

__all__ = ["Greeks", "greeks", "delta_gamma", "theta", "vega", "rho"]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Greeks:
    delta: float
    gamma: float
    theta: float
    vega: float
    rho: float

    def as_dict(self):
        return asdict(self)

    def to_series(self):
        return pd.Series(self.as_dict(), name="greeks", dtype=float)


# ---------- one-at-a-time bumps (each on its own copy of the contract) ----------

def delta_gamma(contract, base_price, bumps=DEFAULT_BUMPS):
    """
    Central differences in spot sharing one pair of repricings.

    Delta = (V(S_up) - V(S_down)) / (S_up - S_down)
    Gamma = (V(S_up) - 2 V(S) + V(S_down)) / (h S)^2
    """
    S = contract.spot
    if S == 0:
        raise ComputationError("delta and gamma need a positive spot for the relative bump.")
    h = bumps.spot_rel
    S_up = S * (1.0 + h)
    S_down = S * (1.0 - h)

    price_up = price(contract.replace(spot=S_up))
    price_down = price(contract.replace(spot=S_down))

    delta = (price_up - price_down) / (S_up - S_down)
    gamma = (price_up - 2.0 * base_price + price_down) / (h * S) ** 2
    return delta, gamma


def theta(contract, base_price, bumps=DEFAULT_BUMPS):
    """
    Forward difference over a shorter maturity:
        (V(T - dt) - V(T)) / (-dt)

    This is dV/dT, so a decaying option has a *positive* theta here.
    Raises InvalidContract when maturity <= dt.
    """
    dt = bumps.time
    shorter = price(contract.replace(maturity=contract.maturity - dt))
    return (shorter - base_price) / (-dt)


def vega(contract, base_price, bumps=DEFAULT_BUMPS):
    """Forward difference per 1.00 of volatility."""
    h = bumps.volatility
    return (price(contract.replace(volatility=contract.volatility + h)) - base_price) / h


def rho(contract, base_price, bumps=DEFAULT_BUMPS):
    """Forward difference per 1.00 of rate."""
    h = bumps.rate
    return (price(contract.replace(rate=contract.rate + h)) - base_price) / h


def greeks(contract, base_price=None, bumps=DEFAULT_BUMPS):
    """
    All five finite-difference sensitivities of the lattice price.

    Parameters
    ----------
    contract : OptionContract
    base_price : float, optional
        Cached `price(contract)`; computed when omitted.
    bumps : BumpSizes
        Perturbation sizes (defaults: 1% spot, 1 day, 1 vol point, 1% rate).

    Returns
    -------
    Greeks
    """
    if base_price is None:
        base_price = price(contract)

    d, g = delta_gamma(contract, base_price, bumps)
    result = Greeks(
        delta=d,
        gamma=g,
        theta=theta(contract, base_price, bumps),
        vega=vega(contract, base_price, bumps),
        rho=rho(contract, base_price, bumps),
    )
    logger.debug("greeks %s", result)
    return result
