"""Simplified ("senior view") summaries derived from tanda simulation results."""
from enum import Enum
from typing import Optional

from pydantic import BaseModel

from tanda_engine.models.tanda import TandaSimulationResult


class SeniorSummary(BaseModel):
    savings_today: float
    next_delivery_month: int
    suggested_extra: float
    months_advanced: int


class WhatsListKind(str, Enum):
    delivery = "entrega"
    savings = "ahorro"


class WhatsListItem(BaseModel):
    kind: WhatsListKind
    n: int
    month: Optional[int] = None
    person: Optional[str] = None
    accumulated: Optional[float] = None
    remaining: Optional[float] = None


class TimelineDelivery(BaseModel):
    month: int
    member: str
    unit_number: int


class DeltaComparison(BaseModel):
    delta_amount: float
    original: TandaSimulationResult
    with_delta: TandaSimulationResult


class SeniorSummaryResponse(BaseModel):
    summary: SeniorSummary
    items: list[WhatsListItem]
    timeline: list[TimelineDelivery]
    share_text: str
    result: TandaSimulationResult
