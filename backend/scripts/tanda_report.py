#!/usr/bin/env python3
"""Tanda simulation report.

Runs a group draft through the simulator and prints the KPIs, the monthly
timeline, the simplified share message, and how much sooner the first unit
arrives when everyone pays a little more.

Usage:
    cd backend && python scripts/tanda_report.py [--draft draft.json] [--delta 500] [--csv out.csv]

If no draft is specified, a five-member default group is used.
"""
import argparse
import json
import logging
import sys
from pathlib import Path

import pandas as pd

# ---------------------------------------------------------------------------
# Paths
# ---------------------------------------------------------------------------
BACKEND_DIR = Path(__file__).resolve().parent.parent

sys.path.insert(0, str(BACKEND_DIR))

logging.basicConfig(level=logging.INFO, format="%(asctime)s  %(message)s", datefmt="%H:%M:%S")
logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Imports from tanda engine
# ---------------------------------------------------------------------------
from tanda_engine.config import settings
from tanda_engine.models.tanda import TandaSimDraft
from tanda_engine.services.reporting import timeline_frame
from tanda_engine.services.senior_summary import (
    extract_senior_summary,
    extract_whats_list_items,
    generate_whatsapp_summary,
)
from tanda_engine.services.tanda_service import simulate_with_delta

# ---------------------------------------------------------------------------
# Default draft
# ---------------------------------------------------------------------------
DEFAULT_DRAFT = {
    "group": {
        "name": "Tanda Ruta 25",
        "members": [
            {"id": f"M{i}", "name": f"Miembro {i}", "prio": i, "contribution": 5000}
            for i in range(1, 6)
        ],
        "product": {
            "price": 950_000,
            "dp_pct": 0.15,
            "term": 60,
            "rate_annual": 0.299,
            "fees": 10_000,
        },
        "rules": {"alloc_rule": "debt_first", "eligibility": {"require_this_month_paid": True}},
        "seed": 12345,
    },
    "config": {"horizon_months": 48, "events": []},
}


def load_draft(path: Path | None) -> TandaSimDraft:
    if path is None:
        logger.info("No draft given, using default group")
        return TandaSimDraft.model_validate(DEFAULT_DRAFT)
    with open(path, encoding="utf-8") as fh:
        return TandaSimDraft.model_validate(json.load(fh))


def print_report(draft: TandaSimDraft, delta: float, csv_path: Path | None = None) -> None:
    comparison = simulate_with_delta(draft.group, draft.config, delta)
    result = comparison.original
    kpis = result.kpis

    print(f"\n=== {draft.group.name} ===")
    print(f"Members:            {len(draft.group.members)}")
    print(f"Horizon:            {draft.config.horizon_months} months")
    print(f"Delivered:          {kpis.delivered_count}")
    print(f"First / last award: {result.first_award_t} / {result.last_award_t}")
    print(f"Avg time to award:  {kpis.avg_time_to_award:.1f} months")
    print(f"Coverage (mean):    {kpis.coverage_ratio_mean:.3f}")

    df = timeline_frame(result)
    print("\n--- Timeline ---")
    with pd.option_context("display.max_rows", None, "display.width", 140):
        print(df.to_string(index=False))

    if csv_path is not None:
        df.to_csv(csv_path, index=False)
        logger.info("Timeline written to %s", csv_path)

    product = draft.group.product
    summary = extract_senior_summary(comparison.with_delta, result, delta)
    items = extract_whats_list_items(result, down_payment=product.price * product.dp_pct + product.fees)
    print("\n--- Share message ---")
    print(generate_whatsapp_summary(summary, draft.group.name, items))


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------
def main():
    parser = argparse.ArgumentParser(description="Print a tanda simulation report")
    parser.add_argument("--draft", help="Path to a JSON group draft (default: built-in five-member group)")
    parser.add_argument("--delta", type=float, default=settings.SENIOR_DELTA_AMOUNT,
                        help="Extra monthly contribution to compare against")
    parser.add_argument("--csv", help="Also write the timeline to this CSV file")
    args = parser.parse_args()

    draft_path = Path(args.draft) if args.draft else None
    if draft_path is not None and not draft_path.exists():
        print(f"ERROR: Draft not found at {draft_path}")
        sys.exit(1)

    print_report(load_draft(draft_path), args.delta, Path(args.csv) if args.csv else None)


if __name__ == "__main__":
    main()
