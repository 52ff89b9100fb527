"""Allocation engine — settles a month's debt and awards units from savings.

Debt-first: every existing obligation is serviced out of the month's inflow
before any new unit is funded. A month that cannot cover its debt makes no
awards at all.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from tanda_engine.models.tanda import (
    TandaAward,
    TandaMember,
    TandaMemberStatus,
    TandaMonthState,
    TandaRiskBadge,
)
from tanda_engine.simulation.events import MonthContributions
from tanda_engine.simulation.financial_math import annuity

logger = logging.getLogger(__name__)


@dataclass
class DebtObligation:
    """Monthly debt service owed by an awarded member."""
    member_id: str
    mds: float
    awarded_month: int
    term: int

    def is_due(self, t: int, retire_completed: bool) -> bool:
        # Payments start the month after the award.
        if t <= self.awarded_month:
            return False
        if not retire_completed:
            return True
        return t <= self.awarded_month + self.term


DebtLedger = dict[str, DebtObligation]


@dataclass(frozen=True)
class AwardTerms:
    """Product terms in force for awards made this month."""
    price: float
    dp_pct: float
    fees: float
    term: int
    monthly_rate: float

    @property
    def down_payment(self) -> float:
        return self.price * self.dp_pct + self.fees

    @property
    def financed_principal(self) -> float:
        return self.price * (1.0 - self.dp_pct)


@dataclass
class AllocationState:
    """Mutable run state threaded through the monthly fold."""
    savings: float
    ledger: DebtLedger
    queue: list[TandaMember]  # unawarded members, ascending prio
    status: dict[str, TandaMemberStatus]


def debt_due(ledger: DebtLedger, t: int, retire_completed: bool = False) -> float:
    """Sum of the MDS owed in month ``t``."""
    return sum(ob.mds for ob in ledger.values() if ob.is_due(t, retire_completed))


def _scheduled_inflow(members: list[TandaMember], status: dict[str, TandaMemberStatus]) -> float:
    return sum(
        m.contribution for m in members
        if status[m.id] in (TandaMemberStatus.active, TandaMemberStatus.delivered)
    )


def allocate_month(
    month: MonthContributions,
    state: AllocationState,
    members: list[TandaMember],
    terms: AwardTerms,
    require_this_month_paid: bool,
    retire_completed: bool = False,
    low_inflow_threshold: Optional[float] = None,
) -> TandaMonthState:
    """Settle debt, run the award loop, and return the month's snapshot.

    ``state`` is updated in place: savings, ledger, queue and member status.
    """
    t = month.t
    inflow = month.inflow
    due = debt_due(state.ledger, t, retire_completed)
    deficit = 0.0
    badge = TandaRiskBadge.ok

    if inflow >= due:
        state.savings += inflow - due
        if (
            low_inflow_threshold is not None
            and inflow < low_inflow_threshold * _scheduled_inflow(members, state.status)
        ):
            badge = TandaRiskBadge.low_inflow
    else:
        deficit = due - inflow
        badge = TandaRiskBadge.debt_deficit

    state.savings += month.rescue

    awards: list[TandaAward] = []
    if badge != TandaRiskBadge.debt_deficit:
        awards = _award_loop(month, state, terms, require_this_month_paid)
    else:
        logger.debug("Month %d: debt deficit %.2f blocks awards", t, deficit)

    return TandaMonthState(
        t=t,
        inflow=inflow,
        debt_due=due,
        deficit=deficit,
        savings=state.savings,
        awards=awards,
        risk_badge=badge,
        rescue=month.rescue,
        price=terms.price,
    )


def _award_loop(
    month: MonthContributions,
    state: AllocationState,
    terms: AwardTerms,
    require_this_month_paid: bool,
) -> list[TandaAward]:
    awards: list[TandaAward] = []
    candidates = [m for m in state.queue if state.status[m.id] == TandaMemberStatus.active]

    while state.savings >= terms.down_payment and candidates:
        member = candidates[0]
        paid = month.contributions.get(member.id, 0.0)

        if require_this_month_paid and paid < member.contribution:
            # Strict priority: nobody behind an unpaid head is awarded this month.
            logger.debug("Month %d: %s not eligible (paid %.2f of %.2f)",
                         month.t, member.id, paid, member.contribution)
            break

        candidates.pop(0)
        mds = annuity(terms.financed_principal, terms.monthly_rate, terms.term)
        state.ledger[member.id] = DebtObligation(
            member_id=member.id, mds=mds, awarded_month=month.t, term=terms.term,
        )
        state.savings -= terms.down_payment
        state.queue.remove(member)
        state.status[member.id] = TandaMemberStatus.delivered
        awards.append(TandaAward(member_id=member.id, name=member.name, month=month.t, mds=mds))

    return awards
