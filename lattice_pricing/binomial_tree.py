# lattice_pricing/binomial_tree.py

import logging
import math
from dataclasses import dataclass

import numpy as np

from .exceptions import ComputationError

__all__ = ["LatticeFactors", "lattice_factors", "node_prices", "price"]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LatticeFactors:
    """Per-step quantities of a CRR lattice."""

    dt: float
    up: float
    down: float
    probability: float
    discount: float


def lattice_factors(contract):
    """
    Derive the Cox-Ross-Rubinstein factors for a contract.

    Raises
    ------
    ComputationError
        If the risk-neutral up-probability falls outside (0, 1), which
        includes the zero-volatility case where up == down, or if the
        factors overflow a float.
    """
    dt = contract.maturity / contract.steps
    try:
        u = math.exp(contract.volatility * math.sqrt(dt))
        growth = math.exp(contract.rate * dt)
        discount = math.exp(-contract.rate * dt)
    except OverflowError:
        raise ComputationError(
            "Lattice factors overflow; volatility or rate too large for the step size."
        ) from None
    d = 1.0 / u
    if u == d:
        raise ComputationError(
            "Degenerate lattice: up and down factors coincide (volatility too small)."
        )

    # dividend_yield is intentionally absent from the drift
    p = (growth - d) / (u - d)
    if not 0.0 < p < 1.0:
        raise ComputationError(
            f"Invalid risk-neutral probability {p:.6g}; "
            "increase steps or check rate/volatility."
        )

    return LatticeFactors(dt=dt, up=u, down=d, probability=p, discount=discount)


def node_prices(spot, up, down, step):
    """
    Underlying prices on time slice `step`, highest first.

    Node i holds spot * up**(step - i) * down**i for i = 0..step.
    """
    i = np.arange(step + 1)
    return spot * up ** (step - i) * down ** i


def price(contract):
    """
    Price an option by backward induction on a CRR binomial lattice.

    Parameters
    ----------
    contract : OptionContract
        Option terms; never modified.

    Returns
    -------
    float
        Present value at the root of the lattice.

    Notes
    -----
    The continuous dividend yield carried by the contract is not part of the
    risk-neutral drift, so prices do not depend on it.
    """
    f = lattice_factors(contract)
    logger.debug(
        "lattice steps=%d dt=%.6g u=%.8f d=%.8f p=%.8f",
        contract.steps, f.dt, f.up, f.down, f.probability,
    )

    payoff = contract.payoff
    K = contract.strike
    S = contract.spot
    p = f.probability

    # option payoff at maturity
    with np.errstate(over="ignore", invalid="ignore"):
        terminal = node_prices(S, f.up, f.down, contract.steps)
    if not np.all(np.isfinite(terminal)):
        raise ComputationError(
            "Terminal node prices overflow; reduce steps or volatility."
        )
    values = payoff(terminal, K)

    # backward induction
    for step in range(contract.steps - 1, -1, -1):
        values = f.discount * (p * values[:-1] + (1.0 - p) * values[1:])
        if contract.is_american:
            values = np.maximum(values, payoff(node_prices(S, f.up, f.down, step), K))

    return float(values[0])
