from __future__ import annotations

from fastapi import APIRouter

from fleetdesk.api.bookings import router as bookings_router
from fleetdesk.api.commissions import router as commissions_router
from fleetdesk.api.health import router as health_router


api_router = APIRouter()
api_router.include_router(health_router)
api_router.include_router(bookings_router)
api_router.include_router(commissions_router)
