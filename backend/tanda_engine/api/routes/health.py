from fastapi import APIRouter, Depends

from tanda_engine.api.deps import get_policy
from tanda_engine.simulation.policy import PolicyLimits

router = APIRouter(tags=["health"])


@router.get("/health")
def health_check():
    return {"status": "ok", "engine": "tanda"}


@router.get("/policy")
def get_policy_limits(policy: PolicyLimits = Depends(get_policy)):
    """Regulatory floors and relief caps applied to restructuring offers."""
    return {
        "tir_min_by_market": policy.tir_min_by_market,
        "default_market": policy.default_market,
        "max_deferral_months": policy.max_deferral_months,
        "max_step_down_pct": policy.max_step_down_pct,
    }
