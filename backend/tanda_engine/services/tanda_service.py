"""Tanda simulation orchestration service.

Wraps the pure engine for the API layer and runs the "what if everyone paid a
little more" comparison used by the simplified group summary.
"""
from __future__ import annotations

import logging
import time

from tanda_engine.config import settings
from tanda_engine.models.senior import DeltaComparison
from tanda_engine.models.tanda import TandaGroupInput, TandaSimConfig, TandaSimulationResult
from tanda_engine.simulation.engine import simulate_tanda

logger = logging.getLogger(__name__)


def run_tanda_simulation(group: TandaGroupInput, config: TandaSimConfig) -> TandaSimulationResult:
    """Run one simulation and log its timing."""
    started = time.perf_counter()
    result = simulate_tanda(group, config)
    logger.info(
        "Simulated '%s' (%d members, %d events) in %.1f ms",
        group.name, len(group.members), len(config.events),
        (time.perf_counter() - started) * 1000,
    )
    return result


def with_contribution_delta(group: TandaGroupInput, delta_amount: float) -> TandaGroupInput:
    """Copy of ``group`` with every member's base contribution raised by ``delta_amount``."""
    members = [
        m.model_copy(update={"contribution": m.contribution + delta_amount})
        for m in group.members
    ]
    return group.model_copy(update={"members": members})


def simulate_with_delta(
    group: TandaGroupInput,
    config: TandaSimConfig,
    delta_amount: float | None = None,
) -> DeltaComparison:
    """Run the group as-is and again with a higher contribution for everyone.

    The two runs share no state.
    """
    if delta_amount is None:
        delta_amount = settings.SENIOR_DELTA_AMOUNT
    original = run_tanda_simulation(group, config)
    with_delta = run_tanda_simulation(with_contribution_delta(group, delta_amount), config)
    return DeltaComparison(delta_amount=delta_amount, original=original, with_delta=with_delta)
