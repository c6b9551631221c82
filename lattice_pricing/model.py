# lattice_pricing/model.py

import pandas as pd

from .binomial_tree import price as lattice_price
from .config import DEFAULT_BUMPS
from .contract import OptionContract
from .greeks import Greeks, greeks as compute_greeks
from .implied import implied_interest_rate, implied_volatility

__all__ = ["BinomialModel"]


class BinomialModel:
    """
    Binomial-lattice pricer bound to one option contract.

    The contract is immutable; every Greek and implied-parameter search prices
    its own perturbed copy, so one model can be shared between threads.

    Example
    -------
    >>> model = BinomialModel.from_terms("call", "american", strike=100, spot=100,
    ...                                  rate=0.05, volatility=0.2, maturity=1.0,
    ...                                  dividend_yield=0.02, steps=100)
    >>> round(model.price(), 2)
    10.43
    """

    def __init__(self, contract: OptionContract, bumps=DEFAULT_BUMPS):
        if not isinstance(contract, OptionContract):
            raise TypeError("contract must be an OptionContract")
        self.contract = contract
        self.bumps = bumps
        self._price = None

    @classmethod
    def from_terms(cls, kind, exercise_style, **terms):
        return cls(OptionContract(kind=kind, exercise_style=exercise_style, **terms))

    def __repr__(self):
        return f"BinomialModel({self.contract!r})"

    def price(self) -> float:
        # contract is frozen, so the base price never goes stale
        if self._price is None:
            self._price = lattice_price(self.contract)
        return self._price

    def greeks(self) -> Greeks:
        return compute_greeks(self.contract, base_price=self.price(), bumps=self.bumps)

    def implied_volatility(self, market_price: float, **kwargs):
        return implied_volatility(self.contract, market_price, **kwargs)

    def implied_interest_rate(self, market_price: float, **kwargs):
        return implied_interest_rate(self.contract, market_price, **kwargs)

    def summary(self, market_price=None) -> pd.Series:
        """
        Price and Greeks (plus implied volatility/rate when a market price is
        given) as one labelled Series. Non-converged implied values are NaN.
        """
        row = {"price": self.price()}
        row.update(self.greeks().as_dict())
        if market_price is not None:
            vol, vol_res = self.implied_volatility(market_price, full_output=True, disp=False)
            rate, rate_res = self.implied_interest_rate(market_price, full_output=True, disp=False)
            row["implied_volatility"] = vol if vol_res.converged else float("nan")
            row["implied_interest_rate"] = rate if rate_res.converged else float("nan")
        return pd.Series(row, name=f"{self.contract.exercise_style.value} {self.contract.kind.value}", dtype=float)
