from __future__ import annotations

from datetime import date, timedelta
from typing import List, Optional, Tuple

from fleetdesk.core.supabase import SupabaseClient
from fleetdesk.models.fleet import BookingRecord, parse_records

BOOKING_COLUMNS = (
    "id,start_date,end_date,status,payment_status,amount,commission_rate,commission_amount,"
    "client_id,vehicle_id,agent_id,user_id,pickup_location,return_location,created_at"
)
BOOKING_RELATIONS = (
    "clients(id,first_name,last_name),vehicles(id,brand,model),agents(id,first_name,last_name)"
)
BOOKING_ORDER = "created_at.desc,id.desc"


class BookingsRepository:
    def __init__(self) -> None:
        self.client = SupabaseClient()

    def list_bookings(self) -> List[BookingRecord]:
        rows = self.client.select_all(
            table="bookings",
            select=f"{BOOKING_COLUMNS},{BOOKING_RELATIONS}",
            order=BOOKING_ORDER,
        )
        return parse_records(BookingRecord, rows)

    def list_bookings_created_between(
        self,
        start_date: date,
        end_date: date,
        user_id: Optional[str] = None,
        with_relations: bool = False,
    ) -> List[BookingRecord]:
        filters: List[Tuple[str, str]] = [
            ("created_at", f"gte.{start_date.isoformat()}"),
            # end_date is inclusive: everything created before the next midnight.
            ("created_at", f"lt.{(end_date + timedelta(days=1)).isoformat()}"),
        ]
        if user_id:
            filters.append(("user_id", f"eq.{user_id}"))
        select = f"{BOOKING_COLUMNS},{BOOKING_RELATIONS}" if with_relations else BOOKING_COLUMNS
        rows = self.client.select_all(
            table="bookings",
            select=select,
            filters=filters,
            order=BOOKING_ORDER,
        )
        return parse_records(BookingRecord, rows)
