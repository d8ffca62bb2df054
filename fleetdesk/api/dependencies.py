from __future__ import annotations

from functools import lru_cache

from fleetdesk.repositories.agents_repository import AgentsRepository
from fleetdesk.repositories.bookings_repository import BookingsRepository
from fleetdesk.services.bookings_service import BookingsService
from fleetdesk.services.commissions_service import CommissionsService


@lru_cache
def get_bookings_repository() -> BookingsRepository:
    return BookingsRepository()


@lru_cache
def get_agents_repository() -> AgentsRepository:
    return AgentsRepository()


def get_bookings_service() -> BookingsService:
    return BookingsService(repository=get_bookings_repository())


def get_commissions_service() -> CommissionsService:
    return CommissionsService(
        bookings_repository=get_bookings_repository(),
        agents_repository=get_agents_repository(),
    )
