from __future__ import annotations

from datetime import datetime, tzinfo
from typing import List, Optional
from zoneinfo import ZoneInfo

from fleetdesk.analytics.booking_sort import filter_bookings, sort_bookings
from fleetdesk.analytics.time_status import compute_time_info
from fleetdesk.core.config import get_settings
from fleetdesk.models.fleet import BookingRecord
from fleetdesk.repositories.bookings_repository import BookingsRepository
from fleetdesk.schemas.bookings import BookingFilters, BookingRow
from fleetdesk.shared.time import localize


class BookingsService:
    def __init__(self, repository: BookingsRepository) -> None:
        self.repository = repository
        self.settings = get_settings()

    @property
    def timezone(self) -> tzinfo:
        return ZoneInfo(self.settings.business_timezone)

    def list_bookings(self, filters: BookingFilters, now: Optional[datetime] = None) -> List[BookingRow]:
        tz = self.timezone
        current = localize(now, tz) if now is not None else datetime.now(tz)
        records = self.repository.list_bookings()
        rows = [self._to_row(record, current, tz) for record in records]
        rows = filter_bookings(rows, filters.search)
        return sort_bookings(rows, filters.sort_by, filters.sort_order)

    def _to_row(self, record: BookingRecord, now: datetime, tz: tzinfo) -> BookingRow:
        return BookingRow(
            id=record.id,
            client_id=record.client_id,
            client_name=record.client_name(),
            vehicle_id=record.vehicle_id,
            vehicle_name=record.vehicle_name(),
            agent_id=record.agent_id,
            agent_name=record.agent_name(),
            user_id=record.user_id,
            start_date=localize(record.start_date, tz) if record.start_date else None,
            end_date=localize(record.end_date, tz) if record.end_date else None,
            status=record.status,
            payment_status=record.payment_status,
            amount=round(float(record.amount), 2),
            commission_rate=float(record.commission_rate) if record.commission_rate is not None else None,
            pickup_location=record.pickup_location or "",
            return_location=record.return_location or "",
            time_info=compute_time_info(
                record.end_date,
                now,
                tz=tz,
                unknown_text=self.settings.time_status_unknown_text,
            ),
        )
