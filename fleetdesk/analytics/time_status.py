"""Countdown / overdue status for a booking's return time.

``compute_time_info`` is what the bookings table shows in its "time" column
and what the urgency sort keys on. It is a pure function of the end
timestamp and an explicit ``now``; callers own the clock.
"""

from __future__ import annotations

import logging
import math
from datetime import datetime, tzinfo
from typing import Any, Optional

from fleetdesk.models.fleet import parse_timestamp
from fleetdesk.schemas.bookings import TimeInfo, UrgencyCategory
from fleetdesk.shared.time import localize

logger = logging.getLogger(__name__)

UNKNOWN_TEXT = "Unknown"

MINUTES_IN_DAY = 1440
MINUTES_IN_ALMOST_TWO_DAYS = 2520
MINUTES_IN_MONTH = 43200
MINUTES_IN_TWO_MONTHS = 86400


def compute_time_info(
    end_date: Any,
    now: datetime,
    tz: Optional[tzinfo] = None,
    unknown_text: str = UNKNOWN_TEXT,
) -> TimeInfo:
    """Describe how long until (or since) ``end_date``.

    Calendar dates are compared in ``tz``. Naive datetimes are read as
    already being in ``tz`` (or compared as-is when ``tz`` is ``None``).
    A missing or unreadable ``end_date`` never raises; it yields an
    ``active`` status with ``unknown_text``.
    """
    end = parse_timestamp(end_date)
    if end is None:
        logger.warning("Cannot compute time status for end date %r", end_date)
        return TimeInfo(text=unknown_text, category=UrgencyCategory.ACTIVE)

    end_local = localize(end, tz)
    now_local = localize(now, tz)
    try:
        seconds_left = (end_local - now_local).total_seconds()
    except TypeError:
        # Mixing naive and aware values with no zone to reconcile them.
        logger.warning("Cannot compare end date %r with %r", end_date, now)
        return TimeInfo(text=unknown_text, category=UrgencyCategory.ACTIVE)

    if end_local.date() == now_local.date():
        return _returning_today(seconds_left)

    if now_local > end_local:
        text = format_distance_ago(end_local, now_local).replace("about ", "")
        return TimeInfo(text=text, category=UrgencyCategory.EXPIRED)

    days_left = _whole(seconds_left, 86400)
    hours_left = _remainder(_whole(seconds_left, 3600), 24)
    minutes_left = _remainder(_whole(seconds_left, 60), 60)

    if days_left > 0:
        return TimeInfo(
            text=f"{days_left}d {hours_left}h {minutes_left}m remaining",
            category=UrgencyCategory.ACTIVE,
        )
    if hours_left > 0:
        category = UrgencyCategory.URGENT if hours_left < 2 else UrgencyCategory.ACTIVE
        return TimeInfo(text=f"{hours_left}h {minutes_left}m remaining", category=category)
    if minutes_left > 0:
        return TimeInfo(text=f"{minutes_left}m remaining", category=UrgencyCategory.URGENT)
    return TimeInfo(text="Due soon", category=UrgencyCategory.URGENT)


def _returning_today(seconds_left: float) -> TimeInfo:
    hours_left = _whole(seconds_left, 3600)
    minutes_left = _remainder(_whole(seconds_left, 60), 60)
    if hours_left > 0:
        text = f"{hours_left}h {minutes_left}m remaining today"
    elif minutes_left > 0:
        text = f"{minutes_left}m remaining today"
    else:
        text = "Due now"
    return TimeInfo(text=text, category=UrgencyCategory.RETURNING_TODAY)


def format_distance_ago(moment: datetime, now: datetime) -> str:
    """Relative phrase for a past ``moment``, e.g. ``"about 3 hours ago"``."""
    seconds = _whole((now - moment).total_seconds(), 1)
    minutes = _round_half_up(seconds / 60)

    if minutes < 2:
        phrase = "less than a minute" if minutes == 0 else "1 minute"
    elif minutes < 45:
        phrase = f"{minutes} minutes"
    elif minutes < 90:
        phrase = "about 1 hour"
    elif minutes < MINUTES_IN_DAY:
        phrase = f"about {_round_half_up(minutes / 60)} hours"
    elif minutes < MINUTES_IN_ALMOST_TWO_DAYS:
        phrase = "1 day"
    elif minutes < MINUTES_IN_MONTH:
        phrase = f"{_round_half_up(minutes / MINUTES_IN_DAY)} days"
    elif minutes < MINUTES_IN_TWO_MONTHS:
        months = _round_half_up(minutes / MINUTES_IN_MONTH)
        phrase = _plural(months, "about 1 month", "about {} months")
    else:
        phrase = _years_or_months(moment, now, minutes)
    return f"{phrase} ago"


def _years_or_months(moment: datetime, now: datetime, minutes: int) -> str:
    months = _calendar_months_between(moment, now)
    if months < 12:
        return _plural(_round_half_up(minutes / MINUTES_IN_MONTH), "1 month", "{} months")
    years = months // 12
    months_into_year = months % 12
    if months_into_year < 3:
        return _plural(years, "about 1 year", "about {} years")
    if months_into_year < 9:
        return _plural(years, "over 1 year", "over {} years")
    return _plural(years + 1, "almost 1 year", "almost {} years")


def _calendar_months_between(earlier: datetime, later: datetime) -> int:
    months = (later.year - earlier.year) * 12 + (later.month - earlier.month)
    # Not a full month yet when the later day/time hasn't caught up.
    if (later.day, later.time()) < (earlier.day, earlier.time()):
        months -= 1
    return max(months, 0)


def _plural(count: int, one: str, many: str) -> str:
    return one if count == 1 else many.format(count)


def _whole(seconds: float, unit_seconds: int) -> int:
    return math.trunc(seconds / unit_seconds)


def _remainder(value: int, modulus: int) -> int:
    # Keeps the dividend's sign, so past-due values stay non-positive.
    return int(math.fmod(value, modulus))


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)
