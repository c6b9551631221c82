# lattice_pricing/black_scholes.py
import math

from scipy.stats import norm

from .contract import OptionKind


def black_scholes_price(S, K, T, r, sigma, option_type="call", q=0.0):
    """
    Black-Scholes-Merton price of a European option.

    Used as the continuous-time limit the European lattice converges to.

    Parameters:
        S : float - Spot price
        K : float - Strike price
        T : float - Time to maturity (in years)
        r : float - Risk-free interest rate
        sigma : float - Volatility
        option_type : str - "call" or "put"
        q : float - Continuous dividend yield
    """
    kind = OptionKind.parse(option_type)
    if T <= 0 or sigma <= 0:
        forward_intrinsic = S * math.exp(-q * max(T, 0.0)) - K * math.exp(-r * max(T, 0.0))
        if kind is OptionKind.CALL:
            return max(forward_intrinsic, 0.0)
        return max(-forward_intrinsic, 0.0)

    d1 = (math.log(S / K) + (r - q + 0.5 * sigma**2) * T) / (sigma * math.sqrt(T))
    d2 = d1 - sigma * math.sqrt(T)

    if kind is OptionKind.CALL:
        return float(S * math.exp(-q * T) * norm.cdf(d1) - K * math.exp(-r * T) * norm.cdf(d2))
    return float(K * math.exp(-r * T) * norm.cdf(-d2) - S * math.exp(-q * T) * norm.cdf(-d1))


def european_benchmark(contract):
    """Closed-form price for the contract's terms, ignoring exercise style and dividends."""
    return black_scholes_price(
        contract.spot,
        contract.strike,
        contract.maturity,
        contract.rate,
        contract.volatility,
        option_type=contract.kind,
    )
