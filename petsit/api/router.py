from __future__ import annotations

from fastapi import APIRouter

from petsit.api.routes import availability, blocked_dates, bookings, entitlement

api_router = APIRouter()

api_router.include_router(availability.router, prefix="/sitters", tags=["availability"])
api_router.include_router(blocked_dates.router, prefix="/sitters", tags=["blocked-dates"])
api_router.include_router(bookings.router, prefix="/bookings", tags=["bookings"])
api_router.include_router(entitlement.router, tags=["entitlement"])
