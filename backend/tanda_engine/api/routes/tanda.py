"""Tanda simulator API — full timeline, simplified summary, CSV export."""
from typing import Optional

from fastapi import APIRouter
from fastapi.responses import Response
from pydantic import BaseModel

from tanda_engine.models.senior import SeniorSummaryResponse
from tanda_engine.models.tanda import TandaSimDraft, TandaSimulationResult
from tanda_engine.services.reporting import timeline_csv
from tanda_engine.services.senior_summary import (
    extract_senior_summary,
    extract_timeline_deliveries,
    extract_whats_list_items,
    generate_whatsapp_summary,
)
from tanda_engine.services.tanda_service import run_tanda_simulation, simulate_with_delta

router = APIRouter(tags=["tanda"])


class SeniorSummaryRequest(BaseModel):
    """Draft to simulate plus the extra monthly amount to compare against."""
    draft: TandaSimDraft
    delta_amount: Optional[float] = None


@router.post("/tanda/simulate", response_model=TandaSimulationResult)
def simulate_tanda_endpoint(draft: TandaSimDraft):
    """Run the month-by-month simulation for a group draft."""
    return run_tanda_simulation(draft.group, draft.config)


@router.post("/tanda/senior-summary", response_model=SeniorSummaryResponse)
def senior_summary_endpoint(request: SeniorSummaryRequest):
    """Simplified summary: headline numbers, delivery list and share text.

    Runs the draft as-is and with every member paying ``delta_amount`` more,
    reporting how many months sooner the first unit would be delivered.
    """
    group = request.draft.group
    comparison = simulate_with_delta(group, request.draft.config, request.delta_amount)
    result = comparison.original

    summary = extract_senior_summary(comparison.with_delta, result, comparison.delta_amount)
    down_payment = group.product.price * group.product.dp_pct + group.product.fees
    items = extract_whats_list_items(result, down_payment=down_payment)

    return SeniorSummaryResponse(
        summary=summary,
        items=items,
        timeline=extract_timeline_deliveries(result),
        share_text=generate_whatsapp_summary(summary, group.name, items),
        result=result,
    )


@router.post("/tanda/timeline.csv")
def timeline_csv_endpoint(draft: TandaSimDraft):
    """Simulated timeline as CSV, one row per month."""
    result = run_tanda_simulation(draft.group, draft.config)
    return Response(content=timeline_csv(result), media_type="text/csv")
