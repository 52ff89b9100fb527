"""Payment-protection service.

Builds policy limits from settings, derives restructuring inputs from a
credit's current state, and applies a chosen scenario to a protection plan.
"""
from __future__ import annotations

import logging
from typing import Optional

from tanda_engine.config import Settings, settings
from tanda_engine.models.protection import (
    AppliedRestructure,
    CreditState,
    ProtectionPlan,
    ProtectionScenario,
    QuoteInput,
    RestructureOutcome,
)
from tanda_engine.simulation.financial_math import outstanding_balance
from tanda_engine.simulation.policy import PolicyLimits
from tanda_engine.simulation.restructuring import evaluate_protection_demo, evaluate_restructure

logger = logging.getLogger(__name__)


def policy_from_settings(cfg: Settings = settings) -> PolicyLimits:
    return PolicyLimits(
        tir_min_by_market={"aguascalientes": cfg.TIR_MIN_AGS, "edomex": cfg.TIR_MIN_EDOMEX},
        default_market=cfg.DEFAULT_MARKET,
        max_deferral_months=cfg.MAX_DEFERRAL_MONTHS,
        max_step_down_pct=cfg.MAX_STEP_DOWN_PCT,
    )


def restructure(
    current_balance: float,
    monthly_rate: float,
    original_payment: float,
    remaining_term: int,
    affected_months: int,
    market: Optional[str] = None,
) -> RestructureOutcome:
    return evaluate_restructure(
        current_balance, monthly_rate, original_payment, remaining_term, affected_months,
        market=market,
        policy=policy_from_settings(),
        step_down_factor=settings.STEP_DOWN_FACTOR,
    )


def restructure_credit(
    credit: CreditState,
    affected_months: int,
    market: Optional[str] = None,
) -> RestructureOutcome:
    """Relief scenarios for a live credit, starting from its current balance.

    Raises ValueError when the credit has nothing left to restructure.
    """
    remaining_term = credit.original_term - credit.months_paid
    if remaining_term <= 0:
        raise ValueError(
            f"Credit fully paid: {credit.months_paid} of {credit.original_term} months"
        )

    monthly_rate = credit.annual_rate / 12.0
    balance = outstanding_balance(
        credit.amount_financed, credit.monthly_payment, monthly_rate, credit.months_paid,
    )
    if balance <= 0:
        raise ValueError(f"Credit has no outstanding balance ({balance:.2f})")

    logger.info("Restructuring credit: balance %.2f, %d months left, %d affected",
                balance, remaining_term, affected_months)
    return restructure(
        balance, monthly_rate, credit.monthly_payment, remaining_term, affected_months, market,
    )


def protection_demo(
    base_quote: QuoteInput,
    months_to_simulate: int,
    market: Optional[str] = None,
) -> RestructureOutcome:
    return evaluate_protection_demo(
        base_quote,
        months_to_simulate,
        market=market,
        policy=policy_from_settings(),
        annual_rate=settings.DEMO_ANNUAL_RATE,
        months_paid=settings.DEMO_MONTHS_PAID,
        step_down_factor=settings.STEP_DOWN_FACTOR,
    )


def apply_restructure(plan: ProtectionPlan, scenario: ProtectionScenario) -> AppliedRestructure:
    """Consume one restructure from ``plan`` for the chosen scenario.

    The input plan is left untouched; the updated copy is returned.
    """
    if plan.restructures_available <= 0:
        raise ValueError(f"No restructures left on {plan.type.value} plan")

    updated = plan.model_copy(update={
        "restructures_available": plan.restructures_available - 1,
        "restructures_used": plan.restructures_used + 1,
    })
    logger.info("Applied %s restructure; %d left", scenario.type.value, updated.restructures_available)
    return AppliedRestructure(
        plan=updated,
        new_monthly_payment=scenario.new_monthly_payment,
        new_term=scenario.new_term,
        message=f'Restructura de tipo "{scenario.title}" aplicada.',
    )
