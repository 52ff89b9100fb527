"""Financial primitives — annuity, balances, capitalization, cash flows, IRR.

All functions are pure and fall back to linear formulas instead of raising
when a rate or term would cause a division by zero.
"""
from __future__ import annotations

from collections.abc import Sequence

import numpy as np

_IRR_RATE_FLOOR = -0.99
_IRR_RATE_CAP = 10.0


def annuity(principal: float, monthly_rate: float, term: int) -> float:
    """Fixed monthly payment that amortizes ``principal`` over ``term`` months.

    PMT = P * r / (1 - (1+r)^-n)

    A non-positive term means the whole balance is due now, so the principal
    itself is returned.
    """
    if term <= 0:
        return principal
    if monthly_rate <= 0:
        return principal / term
    return principal * monthly_rate / (1.0 - (1.0 + monthly_rate) ** -term)


def outstanding_balance(
    original_principal: float,
    original_payment: float,
    monthly_rate: float,
    months_paid: int,
) -> float:
    """Balance left after ``months_paid`` payments of ``original_payment``.

    B_k = P(1+r)^k - M((1+r)^k - 1)/r
    """
    if monthly_rate <= 0:
        return original_principal - original_payment * months_paid
    growth = (1.0 + monthly_rate) ** months_paid
    return original_principal * growth - original_payment * (growth - 1.0) / monthly_rate


def capitalize_interest(principal: float, monthly_rate: float, months: int) -> float:
    """Compound ``principal`` forward while payments are fully deferred."""
    return principal * (1.0 + monthly_rate) ** months


def build_cash_flows(principal: float, payments: Sequence[float], term: int) -> list[float]:
    """Lender-side cash flows: disbursement at t=0, then ``term`` payments.

    Missing payments are zero-padded; payments past ``term`` are dropped.
    """
    flows = [0.0] * (term + 1)
    flows[0] = -principal
    for i, payment in enumerate(payments[:term], start=1):
        flows[i] = payment or 0.0
    return flows


def solve_irr(
    cash_flows: Sequence[float],
    initial_guess: float = 0.1,
    tolerance: float = 1e-6,
    max_iterations: int = 100,
) -> float:
    """Monthly internal rate of return via Newton-Raphson on NPV.

    Returns the last estimate when the iteration cap is hit or the derivative
    flattens out, so a result is not guaranteed to be converged.
    """
    flows = np.asarray(cash_flows, dtype=float)
    periods = np.arange(flows.size, dtype=float)
    rate = initial_guess

    for _ in range(max_iterations):
        discount = (1.0 + rate) ** periods
        npv = float(np.sum(flows / discount))
        npv_derivative = float(np.sum(-periods * flows / (discount * (1.0 + rate))))

        if abs(npv) < tolerance:
            return rate
        if abs(npv_derivative) < tolerance:
            break

        rate = rate - npv / npv_derivative
        rate = max(_IRR_RATE_FLOOR, min(rate, _IRR_RATE_CAP))

    return rate


def annualize_irr(monthly_rate: float) -> float:
    """Simple x12 scaling (nominal, not effective annual)."""
    return monthly_rate * 12.0
