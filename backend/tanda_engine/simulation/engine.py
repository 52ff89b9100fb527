"""Tanda simulation engine.

Runs a group month by month over the configured horizon: events adjust the
month's contributions, the allocation engine settles debt and awards units,
and the resulting timeline is summarized into KPIs.
"""
from __future__ import annotations

import logging

from tanda_engine.models.tanda import (
    TandaAward,
    TandaGroupInput,
    TandaKpis,
    TandaMemberStatus,
    TandaMonthState,
    TandaSimConfig,
    TandaSimulationResult,
)
from tanda_engine.simulation.allocation import AllocationState, AwardTerms, allocate_month
from tanda_engine.simulation.events import apply_month_events

logger = logging.getLogger(__name__)

# Members in these states never enter the award queue.
_NOT_QUEUED = {TandaMemberStatus.left, TandaMemberStatus.delivered}


def simulate_tanda(group: TandaGroupInput, config: TandaSimConfig) -> TandaSimulationResult:
    """Simulate a tanda group over ``config.horizon_months`` months.

    The input records are not modified; every call works on its own copy of
    member status, queue and debt ledger.
    """
    members = list(group.members)
    product = group.product
    status = {m.id: m.status for m in members}
    state = AllocationState(
        savings=0.0,
        ledger={},
        queue=sorted((m for m in members if m.status not in _NOT_QUEUED), key=lambda m: m.prio),
        status=status,
    )
    require_paid = group.rules.eligibility.require_this_month_paid
    price = product.price

    months: list[TandaMonthState] = []
    awards: list[TandaAward] = []

    for t in range(1, config.horizon_months + 1):
        month = apply_month_events(t, members, config.events, status, price)
        price = month.price
        terms = AwardTerms(
            price=price,
            dp_pct=product.dp_pct,
            fees=product.fees,
            term=product.term,
            monthly_rate=product.rate_annual / 12.0,
        )
        month_state = allocate_month(
            month,
            state,
            members,
            terms,
            require_this_month_paid=require_paid,
            retire_completed=config.retire_completed_debt,
            low_inflow_threshold=config.low_inflow_threshold,
        )
        months.append(month_state)
        awards.extend(month_state.awards)

    result = summarize(months, awards)
    logger.info(
        "Tanda '%s': %d months, %d/%d delivered, coverage %.3f",
        group.name, len(months), result.kpis.delivered_count, len(members),
        result.kpis.coverage_ratio_mean,
    )
    return result


def summarize(months: list[TandaMonthState], awards: list[TandaAward]) -> TandaSimulationResult:
    """Build the result record and KPIs from a finished timeline."""
    delivered = len(awards)
    avg_time_to_award = sum(a.month for a in awards) / delivered if delivered else 0.0

    # Months without debt count as fully covered.
    ratios = [m.inflow / m.debt_due if m.debt_due > 0 else 1.0 for m in months]
    coverage = sum(ratios) / len(ratios) if ratios else 1.0

    return TandaSimulationResult(
        months=months,
        awards_by_member={a.member_id: a for a in awards},
        first_award_t=awards[0].month if awards else None,
        last_award_t=awards[-1].month if awards else None,
        kpis=TandaKpis(
            coverage_ratio_mean=coverage,
            delivered_count=delivered,
            avg_time_to_award=avg_time_to_award,
        ),
    )
