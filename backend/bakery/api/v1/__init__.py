"""Versioned API router."""

from fastapi import APIRouter

from . import auth, availability, blocked_dates, bookings, health, schedule

router = APIRouter()
router.include_router(health.router, prefix="/health", tags=["health"])
router.include_router(auth.router, prefix="/auth", tags=["auth"])
router.include_router(availability.router, tags=["availability"])
router.include_router(bookings.router, tags=["bookings"])
router.include_router(blocked_dates.router, tags=["blocked-dates"])
router.include_router(schedule.router, tags=["schedule"])

__all__ = ["router"]
