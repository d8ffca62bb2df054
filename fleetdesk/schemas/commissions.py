from __future__ import annotations

from datetime import date, datetime
from typing import List, Optional

from pydantic import ConfigDict, Field

from fleetdesk.shared.base import BaseSchema

LEADERBOARD_SORT_PATTERN = "^(performance_score|booking_count|total_sales|total_commission)$"
PERIOD_PATTERN = "^(today|month|quarter|year)$"


class CommissionPeriodFilters(BaseSchema):
    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    period: str = Field(default="month", pattern=PERIOD_PATTERN)
    start_date: Optional[date] = None
    end_date: Optional[date] = None


class CommissionLeaderboardFilters(CommissionPeriodFilters):
    sort_by: str = Field(default="performance_score", pattern=LEADERBOARD_SORT_PATTERN)
    sort_order: str = Field(default="desc", pattern="^(asc|desc)$")


class CommissionLeaderboardRow(BaseSchema):
    rank: int
    agent_id: str
    agent_name: str
    agent_email: Optional[str] = None
    booking_count: int
    total_sales: float
    total_commission: float
    performance_score: float


class CommissionLeaderboardResponse(BaseSchema):
    period_start: date
    period_end: date
    sort_by: str
    sort_order: str
    rankings: List[CommissionLeaderboardRow]


class CommissionSummaryView(BaseSchema):
    total_commission: float
    total_sales: float
    completed_bookings: int
    average_commission_rate: float


class CommissionBookingDetail(BaseSchema):
    id: str
    client_name: str
    vehicle_name: str
    agent_name: str
    amount: float
    commission_amount: float
    commission_rate: float
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    status: Optional[str] = None
    created_at: Optional[datetime] = None


class UserCommissionsResponse(BaseSchema):
    user_id: str
    period_start: date
    period_end: date
    summary: CommissionSummaryView
    bookings: List[CommissionBookingDetail]


class AgentPerformanceRow(BaseSchema):
    agent_id: str
    agent_name: str
    agent_email: Optional[str] = None
    reservations: int
    total_sales: float
    commission: float
    target: float
    progress_pct: float


class AgentPerformanceTotals(BaseSchema):
    total_reservations: int
    total_sales: float
    total_commission: float


class AgentPerformanceResponse(BaseSchema):
    period_start: date
    period_end: date
    sales_target: float
    agents: List[AgentPerformanceRow]
    totals: AgentPerformanceTotals
