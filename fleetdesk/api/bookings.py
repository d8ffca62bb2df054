from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from fleetdesk.api.dependencies import get_bookings_service
from fleetdesk.core.config import get_business_timezone
from fleetdesk.schemas.bookings import BOOKING_SORT_PATTERN, BookingFilters, BookingRow
from fleetdesk.services.bookings_service import BookingsService
from fleetdesk.shared.response import Meta, ResponseEnvelope, paginate_list

router = APIRouter(prefix="/bookings", tags=["bookings"])


def get_booking_filters(
    search: Optional[str] = Query(default=None, max_length=200),
    sort_by: str = Query(default="start_date", pattern=BOOKING_SORT_PATTERN),
    sort_order: str = Query(default="desc", pattern="^(asc|desc)$"),
    page: int = Query(default=1, ge=1),
    page_size: int = Query(default=50, ge=1, le=500),
) -> BookingFilters:
    return BookingFilters(
        search=search,
        sort_by=sort_by,
        sort_order=sort_order,
        page=page,
        page_size=page_size,
    )


@router.get("")
def list_bookings(
    filters: BookingFilters = Depends(get_booking_filters),
    service: BookingsService = Depends(get_bookings_service),
) -> ResponseEnvelope[List[BookingRow]]:
    tz = get_business_timezone()
    now = datetime.now(tz)
    rows = service.list_bookings(filters, now=now)
    paged_rows, pagination = paginate_list(rows, filters.page, filters.page_size)
    return ResponseEnvelope(
        data=paged_rows,
        pagination=pagination,
        meta=Meta(
            as_of=now.isoformat(),
            source="bookings,clients,vehicles,agents",
            timezone=str(tz),
        ),
    )
