from __future__ import annotations

from datetime import datetime
from typing import Any, Callable, Iterable, List, Optional, Sequence, Tuple

from fleetdesk.schemas.bookings import BookingRow

SEARCH_FIELDS = ("client_name", "vehicle_name", "id", "agent_name")
DATE_FIELDS = {"start_date", "end_date"}


def filter_bookings(rows: Iterable[BookingRow], search: Optional[str]) -> List[BookingRow]:
    needle = (search or "").strip().lower()
    if not needle:
        return list(rows)
    return [
        row
        for row in rows
        if any(needle in str(getattr(row, field) or "").lower() for field in SEARCH_FIELDS)
    ]


def sort_bookings(rows: Sequence[BookingRow], sort_by: str, sort_order: str) -> List[BookingRow]:
    """Return a new list ordered by ``sort_by``.

    ``time_info`` orders by urgency (expired, urgent, returning today, active)
    and then by end date. ``sort_order == "desc"`` flips every key at once.
    Booking id is the last key so equal rows keep a fixed order.
    """
    key = _sort_key(sort_by)
    return sorted(rows, key=lambda row: (key(row), row.id), reverse=sort_order == "desc")


def _sort_key(sort_by: str) -> Callable[[BookingRow], Tuple[Any, ...]]:
    if sort_by == "time_info":
        return lambda row: (row.time_info.category.sort_rank, *_instant(row.end_date))
    if sort_by == "amount":
        return lambda row: (float(row.amount or 0),)
    if sort_by in DATE_FIELDS:
        return lambda row: _instant(getattr(row, sort_by))
    return lambda row: _text(getattr(row, sort_by, None))


def _instant(value: Optional[datetime]) -> Tuple[int, float]:
    # Undated rows go after dated ones in ascending order.
    if value is None:
        return (1, 0.0)
    return (0, value.timestamp())


def _text(value: Any) -> Tuple[str, str]:
    text = "" if value is None else str(value)
    return (text.casefold(), text)
