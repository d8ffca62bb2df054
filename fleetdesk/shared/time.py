from __future__ import annotations

from datetime import date, datetime, timedelta, tzinfo
from typing import Optional, Tuple

from fleetdesk.core.errors import BadRequestError


def localize(value: datetime, tz: Optional[tzinfo]) -> datetime:
    """Express ``value`` in ``tz``; naive values are taken to already be in ``tz``."""
    if tz is None:
        return value
    if value.tzinfo is None:
        return value.replace(tzinfo=tz)
    return value.astimezone(tz)


def resolve_period(
    period: str,
    today: date,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
) -> Tuple[date, date]:
    """Inclusive ``(start, end)`` dates for a commissions period.

    An explicit ``start_date``/``end_date`` pair wins over ``period``.
    """
    if start_date is not None or end_date is not None:
        if start_date is None or end_date is None:
            raise BadRequestError("start_date and end_date must be provided together")
        if start_date > end_date:
            raise BadRequestError("start_date must not be after end_date")
        return start_date, end_date

    if period == "today":
        return today, today
    if period == "month":
        return today.replace(day=1), _add_months(today.replace(day=1), 1) - timedelta(days=1)
    if period == "quarter":
        quarter_month = 3 * ((today.month - 1) // 3) + 1
        return date(today.year, quarter_month, 1), today
    if period == "year":
        return date(today.year, 1, 1), today
    raise BadRequestError("Unsupported period")


def _add_months(value: date, months: int) -> date:
    month_index = value.month - 1 + months
    year = value.year + month_index // 12
    month = month_index % 12 + 1
    return date(year, month, 1)
