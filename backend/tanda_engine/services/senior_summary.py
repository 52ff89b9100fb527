"""Simplified group summaries — headline numbers, delivery list, share text.

Everything here is derived from finished simulation results; nothing re-runs
the engine.
"""
from __future__ import annotations

from typing import Optional

from tanda_engine.models.senior import (
    SeniorSummary,
    TimelineDelivery,
    WhatsListItem,
    WhatsListKind,
)
from tanda_engine.models.tanda import TandaSimulationResult

_MAX_DELIVERY_ITEMS = 5
_MAX_SAVINGS_ITEMS = 3
_MAX_SHARE_ITEMS = 4


def _first_delivery_month(result: TandaSimulationResult) -> int:
    if result.first_award_t is not None:
        return result.first_award_t
    return next((m.t for m in result.months if m.awards), 0)


def extract_senior_summary(
    result: TandaSimulationResult,
    original_result: Optional[TandaSimulationResult] = None,
    delta_amount: float = 500.0,
) -> SeniorSummary:
    """Headline numbers for ``result``.

    When ``original_result`` is the same group without the extra contribution,
    ``months_advanced`` is how much sooner the first unit is delivered.
    """
    savings_today = result.months[0].savings if result.months else 0.0

    months_advanced = 0
    if (
        original_result is not None
        and result.first_award_t is not None
        and original_result.first_award_t is not None
    ):
        months_advanced = max(0, original_result.first_award_t - result.first_award_t)

    return SeniorSummary(
        savings_today=savings_today,
        next_delivery_month=_first_delivery_month(result),
        suggested_extra=delta_amount,
        months_advanced=months_advanced,
    )


def extract_timeline_deliveries(result: TandaSimulationResult) -> list[TimelineDelivery]:
    """One entry per award, numbered within its month."""
    return [
        TimelineDelivery(month=month.t, member=award.name, unit_number=i + 1)
        for month in result.months
        for i, award in enumerate(month.awards)
    ]


def extract_whats_list_items(
    result: TandaSimulationResult,
    down_payment: Optional[float] = None,
) -> list[WhatsListItem]:
    """Short chronological list of upcoming deliveries and savings milestones.

    ``remaining`` on savings items is the gap to ``down_payment`` and is left
    empty when no down payment is given.
    """
    deliveries = [
        WhatsListItem(kind=WhatsListKind.delivery, n=d.unit_number, month=d.month, person=d.member)
        for d in extract_timeline_deliveries(result)
    ][:_MAX_DELIVERY_ITEMS]

    savings_months = [m for m in result.months if not m.awards and m.savings > 0][:_MAX_SAVINGS_ITEMS]
    savings = [
        WhatsListItem(
            kind=WhatsListKind.savings,
            n=i + 1,
            month=m.t,
            accumulated=m.savings,
            remaining=max(0.0, down_payment - m.savings) if down_payment is not None else None,
        )
        for i, m in enumerate(savings_months)
    ]

    return sorted(deliveries + savings, key=lambda item: item.month or 0)


def generate_whatsapp_summary(
    summary: SeniorSummary,
    group_name: str,
    items: list[WhatsListItem],
) -> str:
    """Plain-text message ready to paste into a chat."""
    lines = [
        f"🚛 *{group_name}* - Resumen de Tanda",
        "",
        "📊 *Estado Actual:*",
        f"• Ahorro de hoy: ${summary.savings_today:,.0f}",
        f"• Siguiente entrega: mes {summary.next_delivery_month}",
        f"• Con ${summary.suggested_extra:,.0f} más: adelantan {summary.months_advanced} mes",
        "",
        "📅 *Próximos Eventos:*",
    ]
    for item in items[:_MAX_SHARE_ITEMS]:
        if item.kind == WhatsListKind.delivery:
            lines.append(f"✅ Entrega #{item.n} - mes {item.month} - {item.person}")
        else:
            lines.append(f"💙 Ahorro #{item.n} - ${item.accumulated or 0:,.0f} acumulado")
    lines += ["", "📱 Generado con Conductores del Mundo"]
    return "\n".join(lines)
