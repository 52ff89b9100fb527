"""Pydantic records for the tanda (rotating savings-and-credit) simulator."""
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, model_validator


class TandaMemberStatus(str, Enum):
    active = "active"
    frozen = "frozen"
    left = "left"
    delivered = "delivered"


class TandaEventType(str, Enum):
    """Per-month instruction kinds understood by the event processor."""
    extra = "extra"                # member pays more this month
    miss = "miss"                  # member pays less this month
    rescue = "rescue"              # external injection into the savings pool
    change_price = "change_price"  # unit price override from this month on
    freeze = "freeze"
    unfreeze = "unfreeze"


class TandaRiskBadge(str, Enum):
    ok = "ok"
    debt_deficit = "debtDeficit"
    low_inflow = "lowInflow"


class AllocRule(str, Enum):
    debt_first = "debt_first"


class TandaMember(BaseModel):
    id: str
    name: str
    prio: int
    status: TandaMemberStatus = TandaMemberStatus.active
    contribution: float = Field(ge=0)  # base monthly contribution


class TandaProduct(BaseModel):
    price: float = Field(gt=0)
    dp_pct: float = Field(ge=0, le=1)
    term: int = Field(ge=1)
    rate_annual: float
    fees: float = 0.0


class EligibilityRule(BaseModel):
    require_this_month_paid: bool = True


class TandaRules(BaseModel):
    alloc_rule: AllocRule = AllocRule.debt_first
    eligibility: EligibilityRule = EligibilityRule()


class TandaGroupInput(BaseModel):
    name: str
    members: list[TandaMember]
    product: TandaProduct
    rules: TandaRules = TandaRules()
    seed: int = 0  # reserved for stochastic extensions; unused

    @model_validator(mode="after")
    def _unique_members(self) -> "TandaGroupInput":
        ids = [m.id for m in self.members]
        if len(set(ids)) != len(ids):
            raise ValueError("member ids must be unique within a group")
        prios = [m.prio for m in self.members]
        if len(set(prios)) != len(prios):
            raise ValueError("member priority ranks must be unique within a group")
        return self


class TandaEventData(BaseModel):
    member_id: Optional[str] = None
    amount: float = 0.0


class TandaSimEvent(BaseModel):
    t: int
    type: TandaEventType
    data: TandaEventData = TandaEventData()
    id: Optional[str] = None


class TandaSimConfig(BaseModel):
    horizon_months: int = Field(ge=0)
    events: list[TandaSimEvent] = []
    # Off by default: awarded debt stays on the ledger for the whole horizon.
    retire_completed_debt: bool = False
    # Fraction of scheduled inflow below which an otherwise healthy month is flagged.
    low_inflow_threshold: Optional[float] = Field(default=None, gt=0, le=1)


class TandaAward(BaseModel):
    member_id: str
    name: str
    month: int
    mds: float  # monthly debt service


class TandaMonthState(BaseModel):
    t: int
    inflow: float
    debt_due: float
    deficit: float
    savings: float
    awards: list[TandaAward]
    risk_badge: TandaRiskBadge
    rescue: float = 0.0
    price: float


class TandaKpis(BaseModel):
    coverage_ratio_mean: float
    delivered_count: int
    avg_time_to_award: float


class TandaSimulationResult(BaseModel):
    months: list[TandaMonthState]
    awards_by_member: dict[str, TandaAward]
    first_award_t: Optional[int] = None
    last_award_t: Optional[int] = None
    kpis: TandaKpis


class TandaSimDraft(BaseModel):
    """A group plus its simulation config, as edited in the dashboard."""
    group: TandaGroupInput
    config: TandaSimConfig
