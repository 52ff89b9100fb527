"""Tabular views of simulation results for export."""
from __future__ import annotations

import pandas as pd

from tanda_engine.models.tanda import TandaSimulationResult

TIMELINE_COLUMNS = [
    "t", "inflow", "debt_due", "deficit", "rescue", "savings",
    "price", "risk_badge", "award_count", "awarded",
]


def timeline_frame(result: TandaSimulationResult) -> pd.DataFrame:
    """One row per simulated month."""
    rows = [
        {
            "t": m.t,
            "inflow": round(m.inflow, 2),
            "debt_due": round(m.debt_due, 2),
            "deficit": round(m.deficit, 2),
            "rescue": round(m.rescue, 2),
            "savings": round(m.savings, 2),
            "price": m.price,
            "risk_badge": m.risk_badge.value,
            "award_count": len(m.awards),
            "awarded": ", ".join(a.member_id for a in m.awards),
        }
        for m in result.months
    ]
    return pd.DataFrame(rows, columns=TIMELINE_COLUMNS)


def timeline_csv(result: TandaSimulationResult) -> str:
    return timeline_frame(result).to_csv(index=False)
