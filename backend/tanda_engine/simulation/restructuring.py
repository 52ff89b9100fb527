"""Payment-protection restructuring — defer, step-down and recalendar offers.

Each candidate is checked against policy caps first; accepted candidates get a
synthesized lender cash-flow vector and an annualized IRR compared with the
market's regulatory floor.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Union

from tanda_engine.models.protection import (
    ProtectionScenario,
    ProtectionScenarioType,
    QuoteInput,
    RejectedScenario,
    RestructureOutcome,
)
from tanda_engine.simulation.financial_math import (
    annualize_irr,
    annuity,
    build_cash_flows,
    capitalize_interest,
    outstanding_balance,
    solve_irr,
)
from tanda_engine.simulation.policy import (
    DEFAULT_POLICY,
    PolicyLimits,
    get_tir_min,
    resolve_market,
    validate_scenario_policy,
)

logger = logging.getLogger(__name__)

DEFAULT_STEP_DOWN_FACTOR = 0.5
DEMO_ANNUAL_RATE = 0.255
DEMO_MONTHS_PAID = 12


@dataclass(frozen=True)
class ScenarioTemplate:
    type: ProtectionScenarioType
    title: str
    description: str


_TEMPLATES: tuple[ScenarioTemplate, ...] = (
    ScenarioTemplate(
        type=ProtectionScenarioType.defer,
        title="Pausa y Prorrateo",
        description="Pausa los pagos y distribuye el monto en las mensualidades restantes.",
    ),
    ScenarioTemplate(
        type=ProtectionScenarioType.step_down,
        title="Reducción y Compensación",
        description="Reduce el pago a la mitad y compensa la diferencia más adelante.",
    ),
    ScenarioTemplate(
        type=ProtectionScenarioType.recalendar,
        title="Extensión de Plazo",
        description="Pausa los pagos y extiende el plazo del crédito para compensar.",
    ),
)


def _mxn(amount: float) -> str:
    return f"${amount:,.2f}"


def generate_scenario(
    scenario_type: ProtectionScenarioType,
    title: str,
    description: str,
    current_balance: float,
    monthly_rate: float,
    original_payment: float,
    remaining_term: int,
    affected_months: int,
    reduction_factor: float = 1.0,
    market: Optional[str] = None,
    policy: PolicyLimits = DEFAULT_POLICY,
) -> Union[ProtectionScenario, RejectedScenario]:
    """Build one relief scenario, or the policy rejection that blocks it."""
    reduction_pct = 1.0 - reduction_factor if reduction_factor < 1 else None
    decision = validate_scenario_policy(scenario_type, affected_months, reduction_pct, policy)
    if not decision.valid:
        return RejectedScenario(type=scenario_type, reason=decision.reason or "")

    adjusted_balance = current_balance
    new_term = remaining_term
    term_change = 0
    rest = remaining_term - affected_months

    if scenario_type == ProtectionScenarioType.defer:
        adjusted_balance = capitalize_interest(current_balance, monthly_rate, affected_months)
        new_payment = annuity(adjusted_balance, monthly_rate, rest)
        payments = [0.0] * affected_months + [new_payment] * rest
        cash_flows = build_cash_flows(current_balance, payments, remaining_term)
    elif scenario_type == ProtectionScenarioType.step_down:
        reduced_payment = original_payment * reduction_factor
        balance_after = outstanding_balance(current_balance, reduced_payment, monthly_rate, affected_months)
        new_payment = annuity(balance_after, monthly_rate, rest)
        payments = [reduced_payment] * affected_months + [new_payment] * rest
        cash_flows = build_cash_flows(current_balance, payments, remaining_term)
    elif scenario_type == ProtectionScenarioType.recalendar:
        new_term = remaining_term + affected_months
        term_change = affected_months
        new_payment = original_payment
        payments = [0.0] * affected_months + [original_payment] * remaining_term
        cash_flows = build_cash_flows(current_balance, payments, new_term)
    else:
        raise ValueError(f"Unknown scenario type: {scenario_type!r}")

    irr = annualize_irr(solve_irr(cash_flows))
    tir_ok = irr >= get_tir_min(market, policy)
    capitalized = adjusted_balance - current_balance
    tir_line = f"TIR: {irr * 100:.2f}% {'✓' if tir_ok else '✗'}"

    if scenario_type == ProtectionScenarioType.defer:
        details = [
            f"Pagos de $0 por {affected_months} meses",
            f"Interés capitalizado: {_mxn(capitalized)}",
            f"El pago mensual sube a {_mxn(new_payment)} después.",
            tir_line,
        ]
    elif scenario_type == ProtectionScenarioType.step_down:
        details = [
            f"Pagos de {_mxn(original_payment * reduction_factor)} por {affected_months} meses",
            f"El pago sube a {_mxn(new_payment)} después.",
            tir_line,
        ]
    else:
        details = [
            f"Pagos de $0 por {affected_months} meses",
            f"El plazo se extiende en {affected_months} meses.",
            tir_line,
        ]

    return ProtectionScenario(
        type=scenario_type,
        title=title,
        description=description,
        new_monthly_payment=new_payment,
        new_term=new_term,
        term_change=term_change,
        details=details,
        irr=irr,
        tir_ok=tir_ok,
        cash_flows=cash_flows,
        capitalized_interest=capitalized,
        principal_balance=adjusted_balance,
    )


def evaluate_restructure(
    current_balance: float,
    monthly_rate: float,
    original_payment: float,
    remaining_term: int,
    affected_months: int,
    market: Optional[str] = None,
    policy: PolicyLimits = DEFAULT_POLICY,
    step_down_factor: float = DEFAULT_STEP_DOWN_FACTOR,
) -> RestructureOutcome:
    """Run all three relief strategies, keeping policy rejections with reasons."""
    resolved = resolve_market(market, policy)
    outcome = RestructureOutcome(market=resolved, tir_min=get_tir_min(resolved, policy), scenarios=[])

    if remaining_term <= affected_months:
        logger.info("No relief possible: remaining term %d <= affected months %d",
                    remaining_term, affected_months)
        return outcome

    for template in _TEMPLATES:
        factor = step_down_factor if template.type == ProtectionScenarioType.step_down else 1.0
        candidate = generate_scenario(
            template.type,
            template.title,
            template.description,
            current_balance,
            monthly_rate,
            original_payment,
            remaining_term,
            affected_months,
            reduction_factor=factor,
            market=resolved,
            policy=policy,
        )
        if isinstance(candidate, RejectedScenario):
            logger.info("Scenario %s rejected: %s", candidate.type.value, candidate.reason)
            outcome.rejected.append(candidate)
        else:
            outcome.scenarios.append(candidate)

    return outcome


def simulate_restructure(
    current_balance: float,
    monthly_rate: float,
    original_payment: float,
    remaining_term: int,
    affected_months: int,
    market: Optional[str] = None,
    policy: PolicyLimits = DEFAULT_POLICY,
    step_down_factor: float = DEFAULT_STEP_DOWN_FACTOR,
) -> list[ProtectionScenario]:
    """Accepted relief scenarios only. Fewer than three means some were capped."""
    return evaluate_restructure(
        current_balance, monthly_rate, original_payment, remaining_term,
        affected_months, market, policy, step_down_factor,
    ).scenarios


def evaluate_protection_demo(
    base_quote: QuoteInput,
    months_to_simulate: int,
    market: Optional[str] = None,
    policy: PolicyLimits = DEFAULT_POLICY,
    annual_rate: float = DEMO_ANNUAL_RATE,
    months_paid: int = DEMO_MONTHS_PAID,
    step_down_factor: float = DEFAULT_STEP_DOWN_FACTOR,
) -> RestructureOutcome:
    """Relief scenarios for a quote, as they would look ``months_paid`` months in."""
    monthly_rate = annual_rate / 12.0
    remaining_term = base_quote.term - months_paid
    balance = outstanding_balance(
        base_quote.amount_to_finance, base_quote.monthly_payment, monthly_rate, months_paid,
    )
    return evaluate_restructure(
        balance, monthly_rate, base_quote.monthly_payment, remaining_term,
        months_to_simulate, market, policy, step_down_factor,
    )


def simulate_protection_demo(
    base_quote: QuoteInput,
    months_to_simulate: int,
    market: Optional[str] = None,
    policy: PolicyLimits = DEFAULT_POLICY,
) -> list[ProtectionScenario]:
    return evaluate_protection_demo(base_quote, months_to_simulate, market, policy).scenarios
