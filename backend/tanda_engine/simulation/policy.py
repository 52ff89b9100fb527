"""Restructuring policy — per-market IRR floors and relief caps."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from tanda_engine.models.protection import ProtectionScenarioType


def _default_tir_floors() -> dict[str, float]:
    return {"aguascalientes": 0.255, "edomex": 0.299}


@dataclass(frozen=True)
class PolicyLimits:
    """Jurisdictional limits applied to every relief scenario."""
    tir_min_by_market: dict[str, float] = field(default_factory=_default_tir_floors)
    default_market: str = "aguascalientes"
    max_deferral_months: int = 6
    max_step_down_pct: float = 0.5


@dataclass(frozen=True)
class PolicyDecision:
    valid: bool
    reason: Optional[str] = None


DEFAULT_POLICY = PolicyLimits()


def resolve_market(market: Optional[str], policy: PolicyLimits = DEFAULT_POLICY) -> str:
    """Return a known market name, falling back to the policy default."""
    if market and market in policy.tir_min_by_market:
        return market
    return policy.default_market


def get_tir_min(market: Optional[str], policy: PolicyLimits = DEFAULT_POLICY) -> float:
    """Minimum annualized IRR for a market. Unknown markets get the default tier."""
    return policy.tir_min_by_market[resolve_market(market, policy)]


def validate_scenario_policy(
    scenario_type: ProtectionScenarioType,
    months: int,
    reduction_pct: Optional[float] = None,
    policy: PolicyLimits = DEFAULT_POLICY,
) -> PolicyDecision:
    """Check a relief request against the deferral and step-down caps."""
    if scenario_type == ProtectionScenarioType.defer:
        if months > policy.max_deferral_months:
            return PolicyDecision(
                valid=False,
                reason=(
                    f"El diferimiento no puede exceder {policy.max_deferral_months} meses. "
                    f"Solicitado: {months} meses."
                ),
            )
    elif scenario_type == ProtectionScenarioType.step_down:
        if reduction_pct and reduction_pct > policy.max_step_down_pct:
            return PolicyDecision(
                valid=False,
                reason=(
                    f"La reducción no puede exceder {policy.max_step_down_pct * 100:.0f}%. "
                    f"Solicitado: {reduction_pct * 100:.0f}%."
                ),
            )
    return PolicyDecision(valid=True)
