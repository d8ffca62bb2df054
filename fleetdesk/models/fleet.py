"""Strict records parsed from PostgREST rows.

Rows from the hosted database are loosely shaped: optional columns come back
as ``null`` and embedded relations (``clients (...)``, ``vehicles (...)``,
``agents (...)``) arrive either as one object or as a list depending on how
PostgREST resolves the foreign key. Everything downstream of this module sees
fixed shapes only.
"""

from __future__ import annotations

import logging
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Dict, Iterable, List, Optional, Type, TypeVar

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

logger = logging.getLogger(__name__)

RecordT = TypeVar("RecordT", bound=BaseModel)


def parse_timestamp(value: Any) -> Optional[datetime]:
    """Parse an ISO timestamp or date string; ``None`` when it cannot be read."""
    if value is None:
        return None
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    if not isinstance(value, str):
        return None
    text = value.strip()
    if not text:
        return None
    try:
        return datetime.fromisoformat(text.replace("Z", "+00:00"))
    except ValueError:
        return None


def _unwrap_relation(value: Any) -> Any:
    if isinstance(value, list):
        return value[0] if value else None
    return value


def _full_name(first_name: Optional[str], last_name: Optional[str]) -> str:
    return f"{first_name or ''} {last_name or ''}".strip()


class RecordModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class PartyRef(RecordModel):
    id: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None

    @property
    def display_name(self) -> str:
        return _full_name(self.first_name, self.last_name)


class VehicleRef(RecordModel):
    id: str
    brand: Optional[str] = None
    model: Optional[str] = None

    @property
    def display_name(self) -> str:
        return f"{self.brand or ''} {self.model or ''}".strip()


class AgentRecord(RecordModel):
    id: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[str] = None

    @property
    def display_name(self) -> str:
        return _full_name(self.first_name, self.last_name) or self.email or self.id


class BookingRecord(RecordModel):
    id: str
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    status: Optional[str] = None
    payment_status: Optional[str] = None
    amount: Decimal = Decimal("0")
    commission_rate: Optional[Decimal] = None
    commission_amount: Optional[Decimal] = None
    client_id: Optional[str] = None
    vehicle_id: Optional[str] = None
    agent_id: Optional[str] = None
    user_id: Optional[str] = None
    pickup_location: Optional[str] = None
    return_location: Optional[str] = None
    created_at: Optional[datetime] = None
    client: Optional[PartyRef] = Field(default=None, validation_alias="clients")
    vehicle: Optional[VehicleRef] = Field(default=None, validation_alias="vehicles")
    agent: Optional[PartyRef] = Field(default=None, validation_alias="agents")

    @field_validator("start_date", "end_date", "created_at", mode="before")
    @classmethod
    def _lenient_timestamp(cls, value: Any) -> Optional[datetime]:
        return parse_timestamp(value)

    @field_validator("amount", mode="before")
    @classmethod
    def _missing_amount_is_zero(cls, value: Any) -> Any:
        return Decimal("0") if value is None else value

    @field_validator("client", "vehicle", "agent", mode="before")
    @classmethod
    def _single_relation(cls, value: Any) -> Any:
        return _unwrap_relation(value)

    def client_name(self, fallback: str = "Unknown") -> str:
        return (self.client.display_name if self.client else "") or fallback

    def vehicle_name(self, fallback: str = "Unknown") -> str:
        return (self.vehicle.display_name if self.vehicle else "") or fallback

    def agent_name(self, fallback: str = "Unknown") -> str:
        return (self.agent.display_name if self.agent else "") or fallback


def parse_records(model: Type[RecordT], rows: Iterable[Dict[str, Any]]) -> List[RecordT]:
    records: List[RecordT] = []
    for row in rows:
        try:
            records.append(model.model_validate(row))
        except ValidationError as exc:
            logger.warning(
                "Skipping %s row %s: %s",
                model.__name__,
                row.get("id") if isinstance(row, dict) else None,
                exc.errors(include_url=False),
            )
    return records
