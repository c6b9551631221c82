# lattice_pricing/exceptions.py


class PricingError(Exception):
    """Base class for every error raised by lattice_pricing."""


class InvalidContract(PricingError, ValueError):
    """Contract fields that cannot define a lattice (steps < 1, maturity <= 0, ...)."""


class ComputationError(PricingError, ArithmeticError):
    """The derived lattice is ill-posed, e.g. risk-neutral probability outside (0, 1)."""


class NonConvergence(PricingError, RuntimeError):
    """
    A root search exhausted its bracket without reproducing the target price.

    The attempted search is kept on ``result`` so callers can still inspect
    the boundary value that was reached.
    """

    def __init__(self, message, result=None):
        super().__init__(message)
        self.result = result
