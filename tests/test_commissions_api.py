from __future__ import annotations

from typing import List

from fastapi.testclient import TestClient

from fleetdesk.api.dependencies import get_commissions_service
from fleetdesk.core.errors import UpstreamError
from fleetdesk.main import create_app
from fleetdesk.models.fleet import AgentRecord, BookingRecord
from fleetdesk.services.commissions_service import CommissionsService


def test_commissions_leaderboard(client):
    response = client.get("/api/v1/commissions/leaderboard?sort_by=total_sales&sort_order=asc")
    assert response.status_code == 200
    payload = response.json()
    row = payload["data"]["rankings"][0]
    assert row["performanceScore"] == 783.0
    assert row["bookingCount"] == 2
    assert payload["data"]["sortBy"] == "total_sales"
    assert payload["meta"]["timeWindow"] == "month"
    assert payload["meta"]["periodStart"] == "2026-03-01"


def test_commissions_leaderboard_validation_error(client):
    response = client.get("/api/v1/commissions/leaderboard?period=decade")
    assert response.status_code == 422
    assert response.json()["error"]["code"] == "validation_error"


def test_user_commissions(client):
    response = client.get("/api/v1/commissions/users/user-7?period=quarter")
    assert response.status_code == 200
    payload = response.json()
    assert payload["data"]["userId"] == "user-7"
    assert payload["data"]["summary"]["averageCommissionRate"] == 0.1
    assert payload["data"]["bookings"][0]["commissionAmount"] == 120.0
    assert payload["meta"]["timeWindow"] == "quarter"


def test_agents_performance(client):
    response = client.get("/api/v1/commissions/performance")
    assert response.status_code == 200
    payload = response.json()
    assert payload["data"]["agents"][0]["progressPct"] == 25.0
    assert payload["data"]["totals"]["totalReservations"] == 2


class EmptyBookingsRepository:
    def list_bookings_created_between(self, *_: object, **__: object) -> List[BookingRecord]:
        return []


class EmptyAgentsRepository:
    def list_agents(self) -> List[AgentRecord]:
        return []


class FailingAgentsRepository:
    def list_agents(self) -> List[AgentRecord]:
        raise UpstreamError("Failed to load agents", table="agents")


def test_reversed_date_range_returns_bad_request() -> None:
    app = create_app()
    app.dependency_overrides[get_commissions_service] = lambda: CommissionsService(
        bookings_repository=EmptyBookingsRepository(),
        agents_repository=EmptyAgentsRepository(),
    )
    try:
        response = TestClient(app).get(
            "/api/v1/commissions/leaderboard?start_date=2026-03-10&end_date=2026-03-01"
        )
        assert response.status_code == 400
        assert response.json()["error"]["code"] == "bad_request"
    finally:
        app.dependency_overrides.clear()


def test_upstream_failure_returns_error_envelope() -> None:
    app = create_app()
    app.dependency_overrides[get_commissions_service] = lambda: CommissionsService(
        bookings_repository=EmptyBookingsRepository(),
        agents_repository=FailingAgentsRepository(),
    )
    try:
        response = TestClient(app).get("/api/v1/commissions/performance")
        assert response.status_code == 502
        payload = response.json()
        assert payload["error"]["code"] == "upstream_error"
        assert payload["error"]["details"] == {"table": "agents"}
    finally:
        app.dependency_overrides.clear()


def test_today_period_covers_a_single_day() -> None:
    app = create_app()
    app.dependency_overrides[get_commissions_service] = lambda: CommissionsService(
        bookings_repository=EmptyBookingsRepository(),
        agents_repository=EmptyAgentsRepository(),
    )
    try:
        response = TestClient(app).get("/api/v1/commissions/leaderboard?period=today")
        assert response.status_code == 200
        meta = response.json()["meta"]
        assert meta["timeWindow"] == "today"
        assert meta["periodStart"] == meta["periodEnd"]
    finally:
        app.dependency_overrides.clear()
