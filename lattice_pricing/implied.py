# lattice_pricing/implied.py
# Implied volatility / implied rate by bisection on the lattice price.

import logging
import math
from dataclasses import dataclass
from typing import Optional, Tuple

import numpy as np

from .binomial_tree import price
from .config import RATE_SOLVER, VOLATILITY_SOLVER
from .contract import OptionKind
from .exceptions import NonConvergence, PricingError

__all__ = [
    "ImpliedResult",
    "bisect_parameter",
    "implied_volatility",
    "implied_interest_rate",
    "implied_vol_surface",
]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ImpliedResult:
    """
    Outcome of one bisection search.

    `reason` is one of:
      - "tolerance": a trial price matched the market price within tol
      - "bracketed": the bracket shrank to tol around a sign change
      - "below-bracket" / "above-bracket": the parameter that reproduces the
        market price lies below / above the bracket, so the answer is
        clamped to that edge
      - "max-iterations": the iteration cap was hit first
      - "no-iterations": the bracket was already no wider than tol; the
        midpoint was priced once and did not match
    """

    value: float
    converged: bool
    iterations: int
    model_price: float
    bracket: Tuple[float, float]
    reason: str


def _check_market_price(market_price):
    market_price = float(market_price)
    if not math.isfinite(market_price) or market_price < 0:
        raise ValueError("market_price must be a finite, non-negative number.")
    return market_price


def bisect_parameter(
    contract,
    field: str,
    market_price: float,
    bracket: Tuple[float, float],
    tol: float = 1e-5,
    max_iterations: Optional[int] = None,
    increasing: bool = True,
) -> ImpliedResult:
    """
    Bisection for the value of `field` that reproduces `market_price`.

    The lattice price must be monotone in `field` over the bracket:
    increasing by default, decreasing with ``increasing=False``. Each
    iteration prices a fresh copy of the contract at the bracket midpoint and
    stops early once |model - market| < tol.
    """
    market_price = _check_market_price(market_price)
    low, high = float(bracket[0]), float(bracket[1])
    if not low < high:
        raise ValueError("bracket must satisfy low < high")

    moved_low = moved_high = False
    iterations = 0
    reason = None
    mid = model = math.nan

    while high - low > tol:
        if max_iterations is not None and iterations >= max_iterations:
            reason = "max-iterations"
            break
        mid = 0.5 * (low + high)
        model = price(contract.replace(**{field: mid}))
        iterations += 1
        logger.debug(
            "bisect %s iter=%d low=%.8f high=%.8f mid=%.8f model=%.8f",
            field, iterations, low, high, mid, model,
        )

        if abs(model - market_price) < tol:
            reason = "tolerance"
            break
        elif (model > market_price) == increasing:
            high = mid
            moved_high = True
        else:
            low = mid
            moved_low = True

    if iterations == 0:
        mid = 0.5 * (low + high)
        model = price(contract.replace(**{field: mid}))
        if reason is None:
            reason = "tolerance" if abs(model - market_price) < tol else "no-iterations"

    if reason is None:
        if moved_low and moved_high:
            reason = "bracketed"
        elif moved_high:
            reason = "below-bracket"
        else:
            reason = "above-bracket"

    return ImpliedResult(
        value=mid,
        converged=reason in ("tolerance", "bracketed"),
        iterations=iterations,
        model_price=model,
        bracket=(float(bracket[0]), float(bracket[1])),
        reason=reason,
    )


def _solve(contract, field, market_price, settings, bracket, tol, max_iterations, full_output, disp,
           increasing=True):
    bracket = settings.bracket if bracket is None else bracket
    tol = settings.tol if tol is None else tol

    result = bisect_parameter(contract, field, market_price, bracket, tol, max_iterations, increasing)

    if not result.converged:
        msg = (
            f"implied {field} did not converge for market price {market_price}: "
            f"{result.reason} (last value {result.value:.6g}, "
            f"model price {result.model_price:.6g}, bracket {result.bracket})"
        )
        if disp:
            raise NonConvergence(msg, result)
        logger.warning(msg)

    if full_output:
        return result.value, result
    return result.value


def implied_volatility(
    contract,
    market_price,
    *,
    bracket=None,
    tol=None,
    max_iterations=None,
    full_output=False,
    disp=True,
):
    """
    Volatility that makes the lattice price equal `market_price`.

    Parameters
    ----------
    contract : OptionContract
        All other inputs; its own volatility is ignored.
    market_price : float
        Observed option premium.
    bracket : (float, float), optional
        Search interval, default (0.001, 5.0).
    tol : float, optional
        Bracket width and price tolerance, default 1e-5.
    max_iterations : int, optional
        Hard cap on lattice evaluations.
    full_output : bool
        If True return ``(value, ImpliedResult)``.
    disp : bool
        If True raise NonConvergence when the search does not converge;
        otherwise log a warning and return the bracket-clamped value.
    """
    return _solve(contract, "volatility", market_price, VOLATILITY_SOLVER,
                  bracket, tol, max_iterations, full_output, disp)


def implied_interest_rate(
    contract,
    market_price,
    *,
    bracket=None,
    tol=None,
    max_iterations=None,
    full_output=False,
    disp=True,
):
    """
    Risk-free rate that makes the lattice price equal `market_price`.

    Same protocol as `implied_volatility`; default bracket (-0.1, 0.1).
    Calls gain and puts lose value as the rate rises, so the search
    direction follows the option kind.
    """
    return _solve(contract, "rate", market_price, RATE_SOLVER,
                  bracket, tol, max_iterations, full_output, disp,
                  increasing=contract.kind is OptionKind.CALL)


def implied_vol_surface(contract, prices, strikes, maturities) -> np.ndarray:
    """
    Implied volatility on a (maturity x strike) grid of market prices.

    Points that do not converge, or whose trial lattices are ill-posed, are NaN.
    """
    prices = np.asarray(prices, dtype=float)
    strikes = np.asarray(strikes, dtype=float)
    maturities = np.asarray(maturities, dtype=float)
    nT, nK = len(maturities), len(strikes)
    if prices.shape != (nT, nK):
        raise ValueError("prices must have shape (len(maturities), len(strikes))")

    surface = np.full((nT, nK), np.nan)
    for i, T in enumerate(maturities):
        for j, K in enumerate(strikes):
            try:
                value, result = implied_volatility(
                    contract.replace(strike=K, maturity=T),
                    prices[i, j],
                    full_output=True,
                    disp=False,
                )
            except (PricingError, ValueError):
                continue
            if result.converged:
                surface[i, j] = value

    return surface
