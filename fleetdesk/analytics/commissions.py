from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Dict, Iterable, List, Sequence

from fleetdesk.models.fleet import AgentRecord, BookingRecord

logger = logging.getLogger(__name__)

SALES_WEIGHT = Decimal("0.6")
BOOKINGS_WEIGHT = Decimal("0.3")
BOOKING_UNIT_VALUE = Decimal("1000")
COMMISSION_WEIGHT = Decimal("0.1")

ZERO = Decimal("0")


@dataclass
class AgentAggregate:
    agent_id: str
    agent_name: str
    agent_email: str | None = None
    booking_count: int = 0
    total_sales: Decimal = ZERO
    total_commission: Decimal = ZERO
    performance_score: Decimal = ZERO
    rank: int = 0


@dataclass(frozen=True)
class CommissionSummary:
    total_commission: Decimal
    total_sales: Decimal
    completed_bookings: int
    average_commission_rate: Decimal


@dataclass(frozen=True)
class AgentPerformance:
    agent_id: str
    agent_name: str
    agent_email: str | None
    reservations: int
    total_sales: Decimal
    commission: Decimal
    target: Decimal
    progress_pct: Decimal


def commission_rate_for(booking: BookingRecord, default_rate: Decimal) -> Decimal:
    return booking.commission_rate or default_rate


def commission_for(booking: BookingRecord, default_rate: Decimal) -> Decimal:
    if booking.commission_amount is not None:
        return booking.commission_amount
    return booking.amount * commission_rate_for(booking, default_rate)


def performance_score(total_sales: Decimal, booking_count: int, total_commission: Decimal) -> Decimal:
    return (
        total_sales * SALES_WEIGHT
        + booking_count * BOOKING_UNIT_VALUE * BOOKINGS_WEIGHT
        + total_commission * COMMISSION_WEIGHT
    )


def aggregate_commissions(
    bookings: Iterable[BookingRecord],
    agents: Iterable[AgentRecord],
    default_rate: Decimal,
) -> List[AgentAggregate]:
    """One ranked aggregate per rostered agent.

    Rank 1 has the highest performance score; equal scores rank by agent id.
    Bookings for agents missing from the roster are left out.
    """
    by_agent: Dict[str, AgentAggregate] = {}
    for agent in agents:
        by_agent.setdefault(
            agent.id,
            AgentAggregate(
                agent_id=agent.id,
                agent_name=agent.display_name,
                agent_email=agent.email,
            ),
        )

    skipped = 0
    for booking in bookings:
        bucket = by_agent.get(booking.agent_id or "")
        if bucket is None:
            skipped += 1
            logger.warning("Booking %s references unknown agent %r", booking.id, booking.agent_id)
            continue
        bucket.booking_count += 1
        bucket.total_sales += booking.amount
        bucket.total_commission += commission_for(booking, default_rate)
    if skipped:
        logger.info("Left %s booking(s) out of commission totals", skipped)

    for bucket in by_agent.values():
        bucket.performance_score = performance_score(
            bucket.total_sales, bucket.booking_count, bucket.total_commission
        )

    ranked = sorted(by_agent.values(), key=lambda item: (-item.performance_score, item.agent_id))
    for index, item in enumerate(ranked):
        item.rank = index + 1
    return ranked


def sort_aggregates(
    aggregates: Sequence[AgentAggregate],
    sort_by: str,
    sort_order: str,
) -> List[AgentAggregate]:
    """Re-order a ranked leaderboard for display; ranks stay as assigned."""
    if sort_order == "desc":
        return sorted(aggregates, key=lambda item: (-getattr(item, sort_by), item.agent_id))
    return sorted(aggregates, key=lambda item: (getattr(item, sort_by), item.agent_id))


def summarize_commissions(bookings: Sequence[BookingRecord], default_rate: Decimal) -> CommissionSummary:
    if not bookings:
        return CommissionSummary(
            total_commission=ZERO,
            total_sales=ZERO,
            completed_bookings=0,
            average_commission_rate=default_rate,
        )
    total_rate = sum((commission_rate_for(booking, default_rate) for booking in bookings), ZERO)
    return CommissionSummary(
        total_commission=sum((commission_for(booking, default_rate) for booking in bookings), ZERO),
        total_sales=sum((booking.amount for booking in bookings), ZERO),
        completed_bookings=sum(1 for booking in bookings if booking.status == "completed"),
        average_commission_rate=total_rate / len(bookings),
    )


def build_agent_performance(
    aggregates: Iterable[AgentAggregate],
    sales_target: Decimal,
) -> List[AgentPerformance]:
    return [
        AgentPerformance(
            agent_id=item.agent_id,
            agent_name=item.agent_name,
            agent_email=item.agent_email,
            reservations=item.booking_count,
            total_sales=item.total_sales,
            commission=item.total_commission,
            target=sales_target,
            progress_pct=item.total_sales / sales_target * 100,
        )
        for item in aggregates
    ]
