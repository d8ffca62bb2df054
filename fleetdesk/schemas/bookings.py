from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import ConfigDict, Field

from fleetdesk.shared.base import BaseSchema

BOOKING_SORT_FIELDS = (
    "start_date",
    "end_date",
    "amount",
    "client_name",
    "vehicle_name",
    "agent_name",
    "status",
    "payment_status",
    "id",
    "pickup_location",
    "return_location",
    "time_info",
)
BOOKING_SORT_PATTERN = "^(" + "|".join(BOOKING_SORT_FIELDS) + ")$"


class UrgencyCategory(str, Enum):
    EXPIRED = "expired"
    URGENT = "urgent"
    RETURNING_TODAY = "returning-today"
    ACTIVE = "active"

    @property
    def sort_rank(self) -> int:
        return _URGENCY_RANK[self]


_URGENCY_RANK = {
    UrgencyCategory.EXPIRED: 0,
    UrgencyCategory.URGENT: 1,
    UrgencyCategory.RETURNING_TODAY: 2,
    UrgencyCategory.ACTIVE: 3,
}


class TimeInfo(BaseSchema):
    model_config = ConfigDict(frozen=True)

    text: str
    category: UrgencyCategory


class BookingFilters(BaseSchema):
    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    search: Optional[str] = None
    sort_by: str = Field(default="start_date", pattern=BOOKING_SORT_PATTERN)
    sort_order: str = Field(default="desc", pattern="^(asc|desc)$")
    page: int = Field(default=1, ge=1)
    page_size: int = Field(default=50, ge=1, le=500)


class BookingRow(BaseSchema):
    id: str
    client_id: Optional[str] = None
    client_name: str
    vehicle_id: Optional[str] = None
    vehicle_name: str
    agent_id: Optional[str] = None
    agent_name: str
    user_id: Optional[str] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    status: Optional[str] = None
    payment_status: Optional[str] = None
    amount: float
    commission_rate: Optional[float] = None
    pickup_location: str = ""
    return_location: str = ""
    time_info: TimeInfo

