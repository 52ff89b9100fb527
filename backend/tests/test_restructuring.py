"""Tests for the restructuring generator — defer, step-down, recalendar."""
from tanda_engine.models.protection import (
    ProtectionScenarioType,
    QuoteInput,
    RejectedScenario,
)
from tanda_engine.simulation.financial_math import annuity, outstanding_balance
from tanda_engine.simulation.restructuring import (
    evaluate_protection_demo,
    evaluate_restructure,
    generate_scenario,
    simulate_protection_demo,
    simulate_restructure,
)

_BALANCE = 100_000.0
_RATE = 0.02
_TERM = 36
_PAYMENT = annuity(_BALANCE, _RATE, _TERM)


def _scenarios(affected: int = 3, **kwargs):
    return simulate_restructure(_BALANCE, _RATE, _PAYMENT, _TERM, affected, **kwargs)


def _by_type(scenarios):
    return {s.type: s for s in scenarios}


# --- Scenario set tests ---


def test_three_scenarios_in_standard_order():
    types = [s.type for s in _scenarios()]
    assert types == [
        ProtectionScenarioType.defer,
        ProtectionScenarioType.step_down,
        ProtectionScenarioType.recalendar,
    ]


def test_no_relief_when_term_too_short():
    assert simulate_restructure(_BALANCE, _RATE, _PAYMENT, 3, 3) == []
    assert simulate_restructure(_BALANCE, _RATE, _PAYMENT, 2, 5) == []


def test_defer_over_cap_is_absent():
    scenarios = _scenarios(affected=7)
    assert ProtectionScenarioType.defer not in _by_type(scenarios)
    assert len(scenarios) == 2


def test_rejected_scenarios_carry_reason():
    outcome = evaluate_restructure(_BALANCE, _RATE, _PAYMENT, _TERM, 7)
    assert [r.type for r in outcome.rejected] == [ProtectionScenarioType.defer]
    assert "6" in outcome.rejected[0].reason


def test_step_down_factor_over_cap_rejected():
    outcome = evaluate_restructure(_BALANCE, _RATE, _PAYMENT, _TERM, 3, step_down_factor=0.4)
    assert ProtectionScenarioType.step_down in [r.type for r in outcome.rejected]
    assert ProtectionScenarioType.step_down not in _by_type(outcome.scenarios)


# --- Defer tests ---


def test_defer_payment_exceeds_original():
    for affected in range(1, 7):
        defer = _by_type(_scenarios(affected))[ProtectionScenarioType.defer]
        assert defer.new_monthly_payment > _PAYMENT


def test_defer_capitalizes_interest():
    defer = _by_type(_scenarios())[ProtectionScenarioType.defer]
    expected = _BALANCE * (1.02 ** 3 - 1)
    assert abs(defer.capitalized_interest - expected) < 1e-6
    assert abs(defer.principal_balance - (_BALANCE + expected)) < 1e-6


def test_defer_cash_flows_shape():
    defer = _by_type(_scenarios())[ProtectionScenarioType.defer]
    assert len(defer.cash_flows) == _TERM + 1
    assert defer.cash_flows[0] == -_BALANCE
    assert defer.cash_flows[1:4] == [0.0, 0.0, 0.0]
    assert defer.cash_flows[4] == defer.new_monthly_payment
    assert defer.new_term == _TERM
    assert defer.term_change == 0


def test_defer_irr_matches_contract_rate():
    defer = _by_type(_scenarios())[ProtectionScenarioType.defer]
    assert abs(defer.irr - _RATE * 12) < 1e-6


# --- Step-down tests ---


def test_step_down_compensates_later():
    step = _by_type(_scenarios())[ProtectionScenarioType.step_down]
    assert step.cash_flows[1] == _PAYMENT * 0.5
    assert step.new_monthly_payment > _PAYMENT
    assert abs(step.irr - _RATE * 12) < 1e-6
    assert step.capitalized_interest == 0


def test_step_down_fully_amortizes():
    step = _by_type(_scenarios())[ProtectionScenarioType.step_down]
    reduced = _PAYMENT * 0.5
    after = outstanding_balance(_BALANCE, reduced, _RATE, 3)
    assert abs(outstanding_balance(after, step.new_monthly_payment, _RATE, _TERM - 3)) < 1e-6


# --- Recalendar tests ---


def test_recalendar_extends_term():
    recal = _by_type(_scenarios())[ProtectionScenarioType.recalendar]
    assert recal.new_monthly_payment == _PAYMENT
    assert recal.new_term == _TERM + 3
    assert recal.term_change == 3
    assert len(recal.cash_flows) == _TERM + 3 + 1


def test_recalendar_yields_less_than_defer():
    by_type = _by_type(_scenarios())
    assert by_type[ProtectionScenarioType.recalendar].irr < by_type[ProtectionScenarioType.defer].irr


def test_recalendar_not_capped_by_deferral_limit():
    recal = _by_type(_scenarios(affected=10))[ProtectionScenarioType.recalendar]
    assert recal.term_change == 10


# --- IRR floor tests ---


def test_tir_flag_depends_on_market():
    rich = simulate_restructure(_BALANCE, 0.03, annuity(_BALANCE, 0.03, _TERM), _TERM, 3, market="edomex")
    assert _by_type(rich)[ProtectionScenarioType.defer].tir_ok  # 36% >= 29.9%

    lean = _scenarios(market="edomex")
    assert not _by_type(lean)[ProtectionScenarioType.defer].tir_ok  # 24% < 29.9%


def test_details_mention_irr():
    for scenario in _scenarios():
        assert scenario.details[-1].startswith("TIR: ")
        assert scenario.title
        assert scenario.description


def test_generate_scenario_returns_rejection():
    result = generate_scenario(
        ProtectionScenarioType.defer, "t", "d", _BALANCE, _RATE, _PAYMENT, _TERM, 9,
    )
    assert isinstance(result, RejectedScenario)


# --- Demo tests ---


def _quote(term: int = 48) -> QuoteInput:
    amount = 300_000.0
    return QuoteInput(amount_to_finance=amount, monthly_payment=annuity(amount, 0.255 / 12, term), term=term)


def test_demo_starts_twelve_months_in():
    quote = _quote()
    scenarios = simulate_protection_demo(quote, 3)
    assert len(scenarios) == 3
    expected_balance = outstanding_balance(quote.amount_to_finance, quote.monthly_payment, 0.255 / 12, 12)
    recal = _by_type(scenarios)[ProtectionScenarioType.recalendar]
    assert abs(recal.principal_balance - expected_balance) < 1e-6
    assert recal.new_term == 36 + 3


def test_demo_empty_when_remaining_term_too_short():
    assert simulate_protection_demo(_quote(term=15), 3) == []


def test_demo_outcome_reports_market_floor():
    outcome = evaluate_protection_demo(_quote(), 2, market="edomex")
    assert outcome.market == "edomex"
    assert outcome.tir_min == 0.299
