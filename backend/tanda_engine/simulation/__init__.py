"""Simulation engine — financial math, events, allocation, tanda runs, restructuring."""
from tanda_engine.simulation.financial_math import (
    annualize_irr,
    annuity,
    build_cash_flows,
    capitalize_interest,
    outstanding_balance,
    solve_irr,
)
from tanda_engine.simulation.policy import PolicyLimits, get_tir_min, validate_scenario_policy
from tanda_engine.simulation.events import apply_month_events, MonthContributions
from tanda_engine.simulation.allocation import allocate_month, AllocationState, AwardTerms
from tanda_engine.simulation.engine import simulate_tanda
from tanda_engine.simulation.restructuring import (
    evaluate_protection_demo,
    evaluate_restructure,
    generate_scenario,
    simulate_protection_demo,
    simulate_restructure,
)

__all__ = [
    "annuity",
    "outstanding_balance",
    "capitalize_interest",
    "build_cash_flows",
    "solve_irr",
    "annualize_irr",
    "PolicyLimits",
    "get_tir_min",
    "validate_scenario_policy",
    "MonthContributions",
    "apply_month_events",
    "AllocationState",
    "AwardTerms",
    "allocate_month",
    "simulate_tanda",
    "generate_scenario",
    "evaluate_restructure",
    "simulate_restructure",
    "evaluate_protection_demo",
    "simulate_protection_demo",
]
