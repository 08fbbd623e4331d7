"""API routes package.

All routers are registered in main.py with /api prefix.
"""

from booking_calendar.api.routes.availability import router as availability_router

__all__ = ["availability_router"]
