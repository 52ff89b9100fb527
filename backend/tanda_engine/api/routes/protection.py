"""Payment-protection API — restructuring offers and plan updates."""
from fastapi import APIRouter, HTTPException

from tanda_engine.models.protection import (
    AppliedRestructure,
    ApplyRestructureRequest,
    CreditRestructureRequest,
    ProtectionDemoRequest,
    RestructureOutcome,
    RestructureRequest,
)
from tanda_engine.services.protection_service import (
    apply_restructure,
    protection_demo,
    restructure,
    restructure_credit,
)

router = APIRouter(tags=["protection"])


@router.post("/protection/restructure", response_model=RestructureOutcome)
def restructure_endpoint(request: RestructureRequest):
    """Relief scenarios for an explicit balance, rate, payment and term.

    Scenarios blocked by policy caps are listed under ``rejected``.
    """
    return restructure(
        request.current_balance,
        request.monthly_rate,
        request.original_payment,
        request.remaining_term,
        request.affected_months,
        request.market,
    )


@router.post("/protection/credit", response_model=RestructureOutcome)
def restructure_credit_endpoint(request: CreditRestructureRequest):
    try:
        return restructure_credit(request.credit, request.affected_months, request.market)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))


@router.post("/protection/demo", response_model=RestructureOutcome)
def protection_demo_endpoint(request: ProtectionDemoRequest):
    """What protection would look like a year into a quoted credit."""
    return protection_demo(request.base_quote, request.months_to_simulate, request.market)


@router.post("/protection/apply", response_model=AppliedRestructure)
def apply_restructure_endpoint(request: ApplyRestructureRequest):
    try:
        return apply_restructure(request.plan, request.scenario)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))
