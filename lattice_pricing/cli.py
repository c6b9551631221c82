#!/usr/bin/env python
"""Price one option on a binomial lattice and report implied parameters and Greeks.

Typical usage:
    python -m lattice_pricing
    python -m lattice_pricing --kind put --style european --steps 500
    lattice-pricing --market-price 11.2 --log-level DEBUG
"""

from __future__ import annotations

import argparse
import logging
import sys

from lattice_pricing.contract import ExerciseStyle, OptionContract, OptionKind
from lattice_pricing.exceptions import PricingError
from lattice_pricing.model import BinomialModel

logger = logging.getLogger(__name__)


def _parse_args(argv: list[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Binomial-lattice option price, implied volatility/rate and Greeks."
    )
    parser.add_argument("--kind", choices=[k.value for k in OptionKind], default="call")
    parser.add_argument(
        "--style", choices=[s.value for s in ExerciseStyle], default="american",
        help="Exercise style.",
    )
    parser.add_argument("--strike", type=float, default=100.0)
    parser.add_argument("--spot", type=float, default=100.0)
    parser.add_argument("--rate", type=float, default=0.05, help="Risk-free rate (decimals).")
    parser.add_argument("--volatility", type=float, default=0.2, help="Annualized volatility (decimals).")
    parser.add_argument("--maturity", type=float, default=1.0, help="Time to maturity in years.")
    parser.add_argument(
        "--dividend-yield", type=float, default=0.02,
        help="Continuous dividend yield (not used by the lattice).",
    )
    parser.add_argument("--steps", type=int, default=100, help="Number of lattice steps.")
    parser.add_argument(
        "--market-price", type=float, default=10.5,
        help="Observed premium used for the implied volatility/rate searches.",
    )
    parser.add_argument(
        "--log-level", default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    """Run the pricing report; returns the process exit code."""
    args = _parse_args(argv)
    logging.basicConfig(
        level=args.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        contract = OptionContract(
            kind=args.kind,
            exercise_style=args.style,
            strike=args.strike,
            spot=args.spot,
            rate=args.rate,
            volatility=args.volatility,
            maturity=args.maturity,
            dividend_yield=args.dividend_yield,
            steps=args.steps,
        )
        logger.info("Pricing %s", contract)
        model = BinomialModel(contract)

        print(f"Option Price: {model.price():.6g}")

        vol, vol_res = model.implied_volatility(args.market_price, full_output=True, disp=False)
        print(f"Implied Volatility for market price {args.market_price:g}: {vol:.6g}"
              + ("" if vol_res.converged else f" (not converged: {vol_res.reason})"))

        rate, rate_res = model.implied_interest_rate(args.market_price, full_output=True, disp=False)
        print(f"Implied Interest Rate for market price {args.market_price:g}: {rate:.6g}"
              + ("" if rate_res.converged else f" (not converged: {rate_res.reason})"))

        g = model.greeks()
        print(
            f"Delta: {g.delta:.6g}, Gamma: {g.gamma:.6g}, Theta: {g.theta:.6g}, "
            f"Vega: {g.vega:.6g}, Rho: {g.rho:.6g}"
        )
    except (PricingError, ValueError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
