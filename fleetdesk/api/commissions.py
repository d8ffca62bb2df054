from __future__ import annotations

from datetime import date, datetime

from fastapi import APIRouter, Depends, Query

from fleetdesk.api.dependencies import get_commissions_service
from fleetdesk.core.config import get_business_timezone
from fleetdesk.schemas.commissions import (
    LEADERBOARD_SORT_PATTERN,
    PERIOD_PATTERN,
    AgentPerformanceResponse,
    CommissionLeaderboardFilters,
    CommissionLeaderboardResponse,
    CommissionPeriodFilters,
    UserCommissionsResponse,
)
from fleetdesk.services.commissions_service import CommissionsService
from fleetdesk.shared.response import Meta, ResponseEnvelope

router = APIRouter(prefix="/commissions", tags=["commissions"])


def get_period_filters(
    period: str = Query(default="month", pattern=PERIOD_PATTERN),
    start_date: date | None = Query(default=None),
    end_date: date | None = Query(default=None),
) -> CommissionPeriodFilters:
    return CommissionPeriodFilters(period=period, start_date=start_date, end_date=end_date)


def get_leaderboard_filters(
    period: str = Query(default="month", pattern=PERIOD_PATTERN),
    start_date: date | None = Query(default=None),
    end_date: date | None = Query(default=None),
    sort_by: str = Query(default="performance_score", pattern=LEADERBOARD_SORT_PATTERN),
    sort_order: str = Query(default="desc", pattern="^(asc|desc)$"),
) -> CommissionLeaderboardFilters:
    return CommissionLeaderboardFilters(
        period=period,
        start_date=start_date,
        end_date=end_date,
        sort_by=sort_by,
        sort_order=sort_order,
    )


def _meta(source: str, period: str, period_start: date, period_end: date) -> Meta:
    tz = get_business_timezone()
    return Meta(
        as_of=datetime.now(tz).isoformat(),
        source=source,
        time_window=period,
        timezone=str(tz),
        period_start=period_start.isoformat(),
        period_end=period_end.isoformat(),
    )


@router.get("/leaderboard")
def commissions_leaderboard(
    filters: CommissionLeaderboardFilters = Depends(get_leaderboard_filters),
    service: CommissionsService = Depends(get_commissions_service),
) -> ResponseEnvelope[CommissionLeaderboardResponse]:
    data = service.get_leaderboard(filters)
    return ResponseEnvelope(
        data=data,
        pagination=None,
        meta=_meta("agents,bookings", filters.period, data.period_start, data.period_end),
    )


@router.get("/performance")
def agents_performance(
    filters: CommissionPeriodFilters = Depends(get_period_filters),
    service: CommissionsService = Depends(get_commissions_service),
) -> ResponseEnvelope[AgentPerformanceResponse]:
    data = service.get_agent_performance(filters)
    return ResponseEnvelope(
        data=data,
        pagination=None,
        meta=_meta("agents,bookings", filters.period, data.period_start, data.period_end),
    )


@router.get("/users/{user_id}")
def user_commissions(
    user_id: str,
    filters: CommissionPeriodFilters = Depends(get_period_filters),
    service: CommissionsService = Depends(get_commissions_service),
) -> ResponseEnvelope[UserCommissionsResponse]:
    data = service.get_user_commissions(user_id, filters)
    return ResponseEnvelope(
        data=data,
        pagination=None,
        meta=_meta("bookings,clients,vehicles,agents", filters.period, data.period_start, data.period_end),
    )
