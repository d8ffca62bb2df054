from __future__ import annotations

import os

os.environ.setdefault("SUPABASE_URL", "https://fleetdesk-test.supabase.co")
os.environ.setdefault("SUPABASE_ANON_KEY", "test-anon-key")

from datetime import date, datetime, timezone
from typing import List, Optional

import pytest
from fastapi.testclient import TestClient

from fleetdesk.api.dependencies import get_bookings_service, get_commissions_service
from fleetdesk.main import create_app
from fleetdesk.schemas.bookings import BookingFilters, BookingRow, TimeInfo, UrgencyCategory
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


def make_row(
    booking_id: str,
    category: UrgencyCategory = UrgencyCategory.ACTIVE,
    end_date: Optional[datetime] = None,
    amount: float = 0.0,
    client_name: str = "Unknown",
    vehicle_name: str = "Unknown",
    agent_name: str = "Unknown",
    text: str = "1d 0h 0m remaining",
    pickup_location: str = "",
    return_location: str = "",
) -> BookingRow:
    return BookingRow(
        id=booking_id,
        client_name=client_name,
        vehicle_name=vehicle_name,
        agent_name=agent_name,
        end_date=end_date,
        amount=amount,
        pickup_location=pickup_location,
        return_location=return_location,
        time_info=TimeInfo(text=text, category=category),
    )


class FakeBookingsService:
    def list_bookings(self, filters: BookingFilters, now: Optional[datetime] = None) -> List[BookingRow]:
        _ = filters, now
        return [
            make_row(
                "booking-1",
                category=UrgencyCategory.EXPIRED,
                end_date=datetime(2026, 3, 1, 10, 0, tzinfo=timezone.utc),
                amount=450.0,
                client_name="Salma Idrissi",
                vehicle_name="Dacia Logan",
                agent_name="Youssef Amrani",
                text="2 days ago",
            ),
            make_row(
                "booking-2",
                end_date=datetime(2026, 3, 9, 18, 30, tzinfo=timezone.utc),
                amount=1200.0,
                client_name="Karim Benali",
                vehicle_name="Renault Clio",
                agent_name="Nadia Tazi",
            ),
        ]


class FakeCommissionsService:
    def get_leaderboard(
        self, filters: CommissionLeaderboardFilters, now: Optional[datetime] = None
    ) -> CommissionLeaderboardResponse:
        _ = now
        return CommissionLeaderboardResponse(
            period_start=date(2026, 3, 1),
            period_end=date(2026, 3, 31),
            sort_by=filters.sort_by,
            sort_order=filters.sort_order,
            rankings=[
                CommissionLeaderboardRow(
                    rank=1,
                    agent_id="agent-1",
                    agent_name="Youssef Amrani",
                    agent_email="youssef@example.com",
                    booking_count=2,
                    total_sales=300.0,
                    total_commission=30.0,
                    performance_score=783.0,
                )
            ],
        )

    def get_user_commissions(
        self, user_id: str, filters: CommissionPeriodFilters, now: Optional[datetime] = None
    ) -> UserCommissionsResponse:
        _ = filters, now
        return UserCommissionsResponse(
            user_id=user_id,
            period_start=date(2026, 3, 1),
            period_end=date(2026, 3, 31),
            summary=CommissionSummaryView(
                total_commission=120.0,
                total_sales=1200.0,
                completed_bookings=1,
                average_commission_rate=0.1,
            ),
            bookings=[
                CommissionBookingDetail(
                    id="booking-2",
                    client_name="Karim Benali",
                    vehicle_name="Renault Clio",
                    agent_name="Nadia Tazi",
                    amount=1200.0,
                    commission_amount=120.0,
                    commission_rate=0.1,
                    status="completed",
                )
            ],
        )

    def get_agent_performance(
        self, filters: CommissionPeriodFilters, now: Optional[datetime] = None
    ) -> AgentPerformanceResponse:
        _ = filters, now
        return AgentPerformanceResponse(
            period_start=date(2026, 3, 1),
            period_end=date(2026, 3, 31),
            sales_target=10000.0,
            agents=[
                AgentPerformanceRow(
                    agent_id="agent-1",
                    agent_name="Youssef Amrani",
                    reservations=2,
                    total_sales=2500.0,
                    commission=250.0,
                    target=10000.0,
                    progress_pct=25.0,
                )
            ],
            totals=AgentPerformanceTotals(total_reservations=2, total_sales=2500.0, total_commission=250.0),
        )


@pytest.fixture()
def client() -> TestClient:
    app = create_app()
    app.dependency_overrides[get_bookings_service] = FakeBookingsService
    app.dependency_overrides[get_commissions_service] = FakeCommissionsService
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture()
def row_factory():
    return make_row
