from __future__ import annotations

from datetime import datetime

from fleetdesk.analytics.booking_sort import filter_bookings, sort_bookings
from fleetdesk.schemas.bookings import UrgencyCategory


def test_urgency_dominates_end_date(row_factory) -> None:
    urgent = row_factory("a", category=UrgencyCategory.URGENT, end_date=datetime(2024, 1, 5, 12, 0))
    active = row_factory("b", category=UrgencyCategory.ACTIVE, end_date=datetime(2024, 1, 3, 12, 0))

    ascending = sort_bookings([active, urgent], "time_info", "asc")
    assert [row.id for row in ascending] == ["a", "b"]

    descending = sort_bookings([urgent, active], "time_info", "desc")
    assert [row.id for row in descending] == ["b", "a"]


def test_time_info_orders_all_categories_then_end_date(row_factory) -> None:
    rows = [
        row_factory("active", category=UrgencyCategory.ACTIVE, end_date=datetime(2024, 1, 9)),
        row_factory("today", category=UrgencyCategory.RETURNING_TODAY, end_date=datetime(2024, 1, 1, 18)),
        row_factory("expired-late", category=UrgencyCategory.EXPIRED, end_date=datetime(2023, 12, 30)),
        row_factory("urgent", category=UrgencyCategory.URGENT, end_date=datetime(2024, 1, 2, 0, 30)),
        row_factory("expired-early", category=UrgencyCategory.EXPIRED, end_date=datetime(2023, 12, 1)),
    ]
    ordered = sort_bookings(rows, "time_info", "asc")
    assert [row.id for row in ordered] == ["expired-early", "expired-late", "urgent", "today", "active"]


def test_amount_sorts_numerically(row_factory) -> None:
    rows = [row_factory("a", amount=900.0), row_factory("b", amount=1200.0), row_factory("c", amount=95.5)]
    assert [row.id for row in sort_bookings(rows, "amount", "asc")] == ["c", "a", "b"]
    assert [row.id for row in sort_bookings(rows, "amount", "desc")] == ["b", "a", "c"]


def test_text_fields_sort_case_insensitively(row_factory) -> None:
    rows = [
        row_factory("1", client_name="zineb"),
        row_factory("2", client_name="Amine"),
        row_factory("3", client_name="mehdi"),
    ]
    assert [row.client_name for row in sort_bookings(rows, "client_name", "asc")] == ["Amine", "mehdi", "zineb"]


def test_undated_rows_sort_after_dated_rows(row_factory) -> None:
    rows = [row_factory("undated"), row_factory("dated", end_date=datetime(2024, 1, 1))]
    assert [row.id for row in sort_bookings(rows, "end_date", "asc")] == ["dated", "undated"]


def test_sort_does_not_mutate_input(row_factory) -> None:
    rows = [row_factory("b", amount=2.0), row_factory("a", amount=1.0)]
    sort_bookings(rows, "amount", "asc")
    assert [row.id for row in rows] == ["b", "a"]


def test_equal_keys_fall_back_to_booking_id(row_factory) -> None:
    rows = [row_factory("c", amount=10.0), row_factory("a", amount=10.0), row_factory("b", amount=10.0)]
    assert [row.id for row in sort_bookings(rows, "amount", "asc")] == ["a", "b", "c"]


def test_filter_matches_client_vehicle_agent_and_id(row_factory) -> None:
    rows = [
        row_factory("bk-100", client_name="Salma Idrissi", vehicle_name="Dacia Logan", agent_name="Nadia Tazi"),
        row_factory("bk-200", client_name="Karim Benali", vehicle_name="Renault Clio", agent_name="Youssef Amrani"),
    ]
    assert [row.id for row in filter_bookings(rows, "logan")] == ["bk-100"]
    assert [row.id for row in filter_bookings(rows, "AMRANI")] == ["bk-200"]
    assert [row.id for row in filter_bookings(rows, "bk-2")] == ["bk-200"]
    assert [row.id for row in filter_bookings(rows, "  ")] == ["bk-100", "bk-200"]
    assert filter_bookings(rows, "peugeot") == []


def test_locations_sort_as_text(row_factory) -> None:
    rows = [
        row_factory("a", pickup_location="Marrakech Menara", return_location="agadir"),
        row_factory("b", pickup_location="casablanca", return_location="Tanger"),
        row_factory("c", pickup_location="Fes", return_location=""),
    ]
    assert [row.id for row in sort_bookings(rows, "pickup_location", "asc")] == ["b", "c", "a"]
    assert [row.id for row in sort_bookings(rows, "return_location", "desc")] == ["b", "a", "c"]
