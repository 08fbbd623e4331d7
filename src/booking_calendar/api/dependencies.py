"""FastAPI dependency injection providers.

Usage in routes:
    from booking_calendar.api.dependencies import get_availability_source

    @router.get("/properties/{property_id}/availability")
    async def get_availability(
        source: AvailabilitySource = Depends(get_availability_source),
    ):
        ...

Testing:
    Override get_availability_source via app.dependency_overrides, or call
    reset_services() to clear cached instances between tests.
"""

from functools import lru_cache

from booking_calendar.config import CalendarSettings, get_settings
from booking_calendar.engine import AvailabilitySource
from booking_calendar.services import DynamoDBAvailabilitySource, get_dynamodb_service


@lru_cache
def get_availability_source() -> AvailabilitySource:
    """Get cached availability source.

    Returns:
        DynamoDBAvailabilitySource configured with the DynamoDB singleton.
    """
    return DynamoDBAvailabilitySource(db=get_dynamodb_service())


def get_calendar_settings() -> CalendarSettings:
    """Settings for request handlers (cached by get_settings)."""
    return get_settings()


def reset_services() -> None:
    """Clear cached service instances (for testing only)."""
    get_availability_source.cache_clear()
