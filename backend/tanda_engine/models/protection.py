"""Pydantic request/response models for payment-protection restructuring."""
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class ProtectionScenarioType(str, Enum):
    defer = "defer"            # pause, capitalize, spread over the rest
    step_down = "step-down"    # reduce, then compensate
    recalendar = "recalendar"  # pause, then extend the term


class ProtectionScenario(BaseModel):
    type: ProtectionScenarioType
    title: str
    description: str
    new_monthly_payment: float
    new_term: int
    term_change: int
    details: list[str]
    irr: float  # annualized (monthly * 12)
    tir_ok: bool
    cash_flows: list[float]
    capitalized_interest: float = 0.0
    principal_balance: float


class RejectedScenario(BaseModel):
    """A scenario that policy caps kept out of the offer."""
    type: ProtectionScenarioType
    reason: str


class RestructureOutcome(BaseModel):
    market: str
    tir_min: float
    scenarios: list[ProtectionScenario]
    rejected: list[RejectedScenario] = []


class RestructureRequest(BaseModel):
    current_balance: float = Field(ge=0)
    monthly_rate: float
    original_payment: float
    remaining_term: int = Field(ge=0)
    affected_months: int = Field(ge=0)
    market: Optional[str] = None


class QuoteInput(BaseModel):
    amount_to_finance: float = Field(gt=0)
    monthly_payment: float = Field(gt=0)
    term: int = Field(gt=0)


class ProtectionDemoRequest(BaseModel):
    base_quote: QuoteInput
    months_to_simulate: int = Field(ge=0)
    market: Optional[str] = None


class CreditState(BaseModel):
    """Current state of a client's installment credit."""
    amount_financed: float = Field(gt=0)
    monthly_payment: float = Field(gt=0)
    original_term: int = Field(gt=0)
    months_paid: int = Field(ge=0)
    annual_rate: float = 0.255


class CreditRestructureRequest(BaseModel):
    credit: CreditState
    affected_months: int = Field(ge=0)
    market: Optional[str] = None


class ProtectionPlanType(str, Enum):
    esencial = "Esencial"
    total = "Total"


class ProtectionPlan(BaseModel):
    type: ProtectionPlanType
    restructures_available: int = Field(ge=0)
    restructures_used: int = Field(default=0, ge=0)
    annual_resets: int = 0


class ApplyRestructureRequest(BaseModel):
    plan: ProtectionPlan
    scenario: ProtectionScenario


class AppliedRestructure(BaseModel):
    plan: ProtectionPlan
    new_monthly_payment: float
    new_term: int
    message: str
