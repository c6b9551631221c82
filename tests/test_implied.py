# tests/test_implied.py

import math

import numpy as np
import pytest

from lattice_pricing.binomial_tree import price
from lattice_pricing.contract import OptionContract
from lattice_pricing.exceptions import ComputationError, NonConvergence
from lattice_pricing.implied import (
    ImpliedResult,
    bisect_parameter,
    implied_interest_rate,
    implied_vol_surface,
    implied_volatility,
)

# bisection tolerance on both bracket width and price
TOL = 1e-5


def reference_contract(**overrides):
    terms = dict(kind="call", exercise_style="american", strike=100.0, spot=100.0,
                 rate=0.05, volatility=0.2, maturity=1.0, dividend_yield=0.02, steps=100)
    terms.update(overrides)
    return OptionContract(**terms)


# -----------------------------
# Reference scenario
# -----------------------------

def test_reference_implied_volatility():
    vol = implied_volatility(reference_contract(), 10.5)
    assert abs(vol - 0.2019) < 1e-3


def test_reference_implied_interest_rate():
    rate = implied_interest_rate(reference_contract(), 10.5)
    assert abs(rate - 0.0500) < 1e-3


def test_full_output_reports_search():
    value, result = implied_volatility(reference_contract(), 10.5, full_output=True)
    assert isinstance(result, ImpliedResult)
    assert result.converged
    assert result.reason in ("tolerance", "bracketed")
    assert result.value == value
    assert result.bracket == (0.001, 5.0)
    assert 0 < result.iterations <= 19
    assert abs(result.model_price - 10.5) < 1e-2


def test_rate_search_iteration_bound():
    _, result = implied_interest_rate(reference_contract(), 10.5, full_output=True)
    assert result.converged
    assert result.iterations <= 15


@pytest.mark.parametrize("sigma_true, kind, style", [
    (0.1, "call", "european"),
    (0.25, "call", "american"),
    (0.3, "put", "european"),
    (0.5, "put", "american"),
])
def test_implied_volatility_round_trip(sigma_true, kind, style):
    contract = reference_contract(kind=kind, exercise_style=style, dividend_yield=0.0)
    market = price(contract.replace(volatility=sigma_true))

    sigma_est = implied_volatility(contract, market)
    assert np.isclose(sigma_est, sigma_true, rtol=0.0, atol=TOL)


def test_implied_rate_round_trip():
    contract = reference_contract(exercise_style="european")
    market = price(contract.replace(rate=0.03))
    assert np.isclose(implied_interest_rate(contract, market), 0.03, rtol=0.0, atol=TOL)


@pytest.mark.parametrize("style", ["european", "american"])
def test_put_implied_rate(style):
    # put prices fall as the rate rises
    contract = reference_contract(kind="put", exercise_style=style)
    market = price(contract.replace(rate=0.03))

    rate, result = implied_interest_rate(contract, market, full_output=True)
    assert result.converged
    assert np.isclose(rate, 0.03, rtol=0.0, atol=TOL)


def test_put_rate_outside_bracket_is_reported_on_the_right_side():
    contract = reference_contract(kind="put", exercise_style="european")
    market = price(contract.replace(rate=0.3))
    value, result = implied_interest_rate(contract, market, full_output=True, disp=False)
    assert result.reason == "above-bracket"
    assert abs(value - 0.1) < 1e-4


def test_input_contract_volatility_is_ignored():
    a = implied_volatility(reference_contract(volatility=0.2), 10.5)
    b = implied_volatility(reference_contract(volatility=0.9), 10.5)
    assert a == b


# -----------------------------
# Non-convergence
# -----------------------------

def test_price_above_bracket_raises():
    # a call is never worth more than the spot
    with pytest.raises(NonConvergence) as excinfo:
        implied_volatility(reference_contract(), 150.0)
    result = excinfo.value.result
    assert not result.converged
    assert result.reason == "above-bracket"
    assert abs(result.value - 5.0) < 1e-4


def test_price_above_bracket_clamped_without_disp():
    value, result = implied_volatility(reference_contract(), 150.0, full_output=True, disp=False)
    assert not result.converged
    assert abs(value - 5.0) < 1e-4


def test_price_below_bracket():
    # zero rate keeps every trial lattice well-posed down to the lower edge
    contract = reference_contract(rate=0.0)
    value, result = implied_volatility(contract, 1e-3, full_output=True, disp=False)
    assert result.reason == "below-bracket"
    assert not result.converged
    assert abs(value - 0.001) < 1e-4


def test_rate_outside_bracket():
    contract = reference_contract(exercise_style="european")
    market = price(contract.replace(rate=0.3))
    with pytest.raises(NonConvergence):
        implied_interest_rate(contract, market)


def test_custom_bracket_recovers_rate():
    contract = reference_contract(exercise_style="european")
    market = price(contract.replace(rate=0.3))
    rate = implied_interest_rate(contract, market, bracket=(-0.1, 0.5))
    assert np.isclose(rate, 0.3, rtol=0.0, atol=TOL)


def test_ill_posed_trial_lattice_propagates():
    # trial volatilities near the lower edge give q > 1 with a 5% rate
    with pytest.raises(ComputationError):
        implied_volatility(reference_contract(), 1e-4)


def test_max_iterations_cap():
    value, result = implied_volatility(
        reference_contract(), 10.5, max_iterations=3, full_output=True, disp=False
    )
    assert result.reason == "max-iterations"
    assert result.iterations == 3
    assert not result.converged


def test_bracket_narrower_than_tol_is_not_converged():
    value, result = implied_volatility(
        reference_contract(), 12.0, bracket=(0.19, 0.21), tol=0.05,
        full_output=True, disp=False,
    )
    assert result.iterations == 0
    assert result.reason == "no-iterations"
    assert not result.converged
    assert np.isclose(value, 0.2)


def test_zero_iteration_cap_keeps_its_reason():
    contract = reference_contract()
    market = price(contract)
    _, result = implied_volatility(
        contract, market, bracket=(0.1, 0.3), max_iterations=0,
        full_output=True, disp=False,
    )
    assert result.reason == "max-iterations"
    assert not result.converged
    assert np.isclose(result.model_price, market)


@pytest.mark.parametrize("bad", [-1.0, math.nan, math.inf])
def test_invalid_market_price(bad):
    with pytest.raises(ValueError):
        implied_volatility(reference_contract(), bad)


def test_bisect_parameter_rejects_inverted_bracket():
    with pytest.raises(ValueError):
        bisect_parameter(reference_contract(), "volatility", 10.5, (1.0, 0.5))


# -----------------------------
# Surface
# -----------------------------

def test_implied_vol_surface():
    contract = reference_contract(exercise_style="european", rate=0.01, dividend_yield=0.0)
    strikes = np.array([90, 100, 110])
    maturities = np.array([0.5, 1.0])
    sigma_true = 0.25

    prices = np.zeros((len(maturities), len(strikes)))
    for i, T in enumerate(maturities):
        for j, K in enumerate(strikes):
            prices[i, j] = price(contract.replace(strike=K, maturity=T, volatility=sigma_true))

    surface = implied_vol_surface(contract, prices, strikes, maturities)

    assert surface.shape == (len(maturities), len(strikes))
    assert np.allclose(surface, sigma_true, rtol=0.0, atol=TOL)


def test_implied_vol_surface_nan_if_no_solution():
    contract = reference_contract(exercise_style="european", rate=0.01)
    prices = np.array([[1000.0]])
    surface = implied_vol_surface(contract, prices, [100.0], [1.0])
    assert np.isnan(surface[0, 0])


def test_implied_vol_surface_shape_check():
    with pytest.raises(ValueError):
        implied_vol_surface(reference_contract(), np.zeros((2, 2)), [100.0], [1.0])
