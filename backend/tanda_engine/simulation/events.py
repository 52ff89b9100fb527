"""Event processor — turns a month's event list into effective contributions.

Events for month ``t`` are applied in list order on top of each member's base
contribution. Member status (frozen/active) carries across months through the
``status`` map owned by the caller. Freeze applies to active members only, so
unfreeze can never bring back a member who left or was already delivered.
"""
from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass

from tanda_engine.models.tanda import (
    TandaEventType,
    TandaMember,
    TandaMemberStatus,
    TandaSimEvent,
)

logger = logging.getLogger(__name__)

# Statuses that contribute nothing to the pool.
_NON_CONTRIBUTING = {TandaMemberStatus.frozen, TandaMemberStatus.left}


@dataclass
class MonthContributions:
    """Effective inflows for a single month after events."""
    t: int
    contributions: dict[str, float]
    price: float
    rescue: float = 0.0

    @property
    def inflow(self) -> float:
        return sum(self.contributions.values())


@dataclass
class _MonthContext:
    base: dict[str, float]
    status: dict[str, TandaMemberStatus]
    contributions: dict[str, float]
    price: float
    rescue: float = 0.0

    def member(self, event: TandaSimEvent) -> str | None:
        member_id = event.data.member_id
        if member_id not in self.base:
            logger.debug("Month %d: %s event for unknown member %r ignored",
                         event.t, event.type.value, member_id)
            return None
        return member_id


def _apply_extra(ctx: _MonthContext, event: TandaSimEvent) -> None:
    member_id = ctx.member(event)
    if member_id is None or ctx.status[member_id] in _NON_CONTRIBUTING:
        return
    ctx.contributions[member_id] += event.data.amount


def _apply_miss(ctx: _MonthContext, event: TandaSimEvent) -> None:
    member_id = ctx.member(event)
    if member_id is None or ctx.status[member_id] in _NON_CONTRIBUTING:
        return
    # No floor: a negative contribution is unpaid pressure on the pool.
    ctx.contributions[member_id] -= event.data.amount


def _apply_freeze(ctx: _MonthContext, event: TandaSimEvent) -> None:
    member_id = ctx.member(event)
    if member_id is None:
        return
    # Only active members can be frozen; left and delivered are terminal.
    if ctx.status[member_id] != TandaMemberStatus.active:
        logger.debug("Month %d: freeze ignored for %s member %s",
                     event.t, ctx.status[member_id].value, member_id)
        return
    ctx.status[member_id] = TandaMemberStatus.frozen
    ctx.contributions[member_id] = 0.0


def _apply_unfreeze(ctx: _MonthContext, event: TandaSimEvent) -> None:
    member_id = ctx.member(event)
    if member_id is None or ctx.status[member_id] != TandaMemberStatus.frozen:
        return
    ctx.status[member_id] = TandaMemberStatus.active
    ctx.contributions[member_id] += ctx.base[member_id]


def _apply_rescue(ctx: _MonthContext, event: TandaSimEvent) -> None:
    ctx.rescue += event.data.amount


def _apply_change_price(ctx: _MonthContext, event: TandaSimEvent) -> None:
    if event.data.amount <= 0:
        logger.warning("Month %d: ignoring non-positive price %.2f", event.t, event.data.amount)
        return
    ctx.price = event.data.amount


_HANDLERS: dict[TandaEventType, Callable[[_MonthContext, TandaSimEvent], None]] = {
    TandaEventType.extra: _apply_extra,
    TandaEventType.miss: _apply_miss,
    TandaEventType.freeze: _apply_freeze,
    TandaEventType.unfreeze: _apply_unfreeze,
    TandaEventType.rescue: _apply_rescue,
    TandaEventType.change_price: _apply_change_price,
}

_unhandled = set(TandaEventType) - set(_HANDLERS)
if _unhandled:
    raise RuntimeError(f"No handler for event types: {sorted(e.value for e in _unhandled)}")


def events_for_month(events: Sequence[TandaSimEvent], t: int) -> list[TandaSimEvent]:
    """Events scheduled for month ``t``, in their original order."""
    return [e for e in events if e.t == t]


def apply_month_events(
    t: int,
    members: Sequence[TandaMember],
    events: Sequence[TandaSimEvent],
    status: dict[str, TandaMemberStatus],
    price: float,
) -> MonthContributions:
    """Apply month ``t``'s events and return the effective contributions.

    ``status`` is updated in place by freeze/unfreeze events so that the
    change persists into later months.
    """
    base = {m.id: m.contribution for m in members}
    contributions = {
        m.id: 0.0 if status[m.id] in _NON_CONTRIBUTING else m.contribution
        for m in members
    }
    ctx = _MonthContext(base=base, status=status, contributions=contributions, price=price)

    for event in events_for_month(events, t):
        _HANDLERS[event.type](ctx, event)

    return MonthContributions(
        t=t,
        contributions=ctx.contributions,
        price=ctx.price,
        rescue=ctx.rescue,
    )
