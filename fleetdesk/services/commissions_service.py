from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import List, Optional, Tuple
from zoneinfo import ZoneInfo

from fleetdesk.analytics.commissions import (
    AgentAggregate,
    aggregate_commissions,
    build_agent_performance,
    commission_for,
    commission_rate_for,
    sort_aggregates,
    summarize_commissions,
)
from fleetdesk.core.config import get_settings
from fleetdesk.models.fleet import BookingRecord
from fleetdesk.repositories.agents_repository import AgentsRepository
from fleetdesk.repositories.bookings_repository import BookingsRepository
from fleetdesk.schemas.commissions import (
    AgentPerformanceResponse,
    AgentPerformanceRow,
    AgentPerformanceTotals,
    CommissionBookingDetail,
    CommissionLeaderboardFilters,
    CommissionLeaderboardResponse,
    CommissionLeaderboardRow,
    CommissionPeriodFilters,
    CommissionSummaryView,
    UserCommissionsResponse,
)
from fleetdesk.shared.time import localize, resolve_period


class CommissionsService:
    def __init__(self, bookings_repository: BookingsRepository, agents_repository: AgentsRepository) -> None:
        self.bookings_repository = bookings_repository
        self.agents_repository = agents_repository
        self.settings = get_settings()

    def get_leaderboard(
        self, filters: CommissionLeaderboardFilters, now: Optional[datetime] = None
    ) -> CommissionLeaderboardResponse:
        period_start, period_end = self._resolve_period(filters, now)
        ranked = self._ranked_aggregates(period_start, period_end)
        ordered = sort_aggregates(ranked, filters.sort_by, filters.sort_order)
        return CommissionLeaderboardResponse(
            period_start=period_start,
            period_end=period_end,
            sort_by=filters.sort_by,
            sort_order=filters.sort_order,
            rankings=[self._to_leaderboard_row(item) for item in ordered],
        )

    def get_user_commissions(
        self,
        user_id: str,
        filters: CommissionPeriodFilters,
        now: Optional[datetime] = None,
    ) -> UserCommissionsResponse:
        period_start, period_end = self._resolve_period(filters, now)
        bookings = self.bookings_repository.list_bookings_created_between(
            period_start, period_end, user_id=user_id, with_relations=True
        )
        default_rate = self.settings.default_commission_rate
        summary = summarize_commissions(bookings, default_rate)
        return UserCommissionsResponse(
            user_id=user_id,
            period_start=period_start,
            period_end=period_end,
            summary=CommissionSummaryView(
                total_commission=_money(summary.total_commission),
                total_sales=_money(summary.total_sales),
                completed_bookings=summary.completed_bookings,
                average_commission_rate=round(float(summary.average_commission_rate), 4),
            ),
            bookings=[self._to_booking_detail(booking, default_rate) for booking in bookings],
        )

    def get_agent_performance(
        self, filters: CommissionPeriodFilters, now: Optional[datetime] = None
    ) -> AgentPerformanceResponse:
        period_start, period_end = self._resolve_period(filters, now)
        ranked = self._ranked_aggregates(period_start, period_end)
        target = self.settings.agent_sales_target
        performance = build_agent_performance(ranked, target)
        return AgentPerformanceResponse(
            period_start=period_start,
            period_end=period_end,
            sales_target=_money(target),
            agents=[
                AgentPerformanceRow(
                    agent_id=item.agent_id,
                    agent_name=item.agent_name,
                    agent_email=item.agent_email,
                    reservations=item.reservations,
                    total_sales=_money(item.total_sales),
                    commission=_money(item.commission),
                    target=_money(item.target),
                    progress_pct=_money(item.progress_pct),
                )
                for item in performance
            ],
            totals=AgentPerformanceTotals(
                total_reservations=sum(item.reservations for item in performance),
                total_sales=_money(sum((item.total_sales for item in performance), Decimal("0"))),
                total_commission=_money(sum((item.commission for item in performance), Decimal("0"))),
            ),
        )

    def _ranked_aggregates(self, period_start: date, period_end: date) -> List[AgentAggregate]:
        agents = self.agents_repository.list_agents()
        bookings = self.bookings_repository.list_bookings_created_between(period_start, period_end)
        return aggregate_commissions(bookings, agents, self.settings.default_commission_rate)

    def _resolve_period(self, filters: CommissionPeriodFilters, now: Optional[datetime]) -> Tuple[date, date]:
        tz = ZoneInfo(self.settings.business_timezone)
        today = (localize(now, tz) if now is not None else datetime.now(tz)).date()
        return resolve_period(filters.period, today, filters.start_date, filters.end_date)

    @staticmethod
    def _to_leaderboard_row(item: AgentAggregate) -> CommissionLeaderboardRow:
        return CommissionLeaderboardRow(
            rank=item.rank,
            agent_id=item.agent_id,
            agent_name=item.agent_name,
            agent_email=item.agent_email,
            booking_count=item.booking_count,
            total_sales=_money(item.total_sales),
            total_commission=_money(item.total_commission),
            performance_score=_money(item.performance_score),
        )

    @staticmethod
    def _to_booking_detail(booking: BookingRecord, default_rate: Decimal) -> CommissionBookingDetail:
        return CommissionBookingDetail(
            id=booking.id,
            client_name=booking.client_name("Unknown Client"),
            vehicle_name=booking.vehicle_name("Unknown Vehicle"),
            agent_name=booking.agent_name("No Agent Assigned"),
            amount=_money(booking.amount),
            commission_amount=_money(commission_for(booking, default_rate)),
            commission_rate=float(commission_rate_for(booking, default_rate)),
            start_date=booking.start_date,
            end_date=booking.end_date,
            status=booking.status,
            created_at=booking.created_at,
        )


def _money(value: Decimal) -> float:
    return round(float(value), 2)
