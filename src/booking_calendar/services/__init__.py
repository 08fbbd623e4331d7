"""Data services backing the calendar engine."""

from .availability_source import (
    DynamoDBAvailabilitySource,
    StaticAvailabilitySource,
    build_snapshot,
    derive_checkout_only,
)
from .dynamodb import DynamoDBService, get_dynamodb_service, reset_dynamodb_service

__all__ = [
    "DynamoDBService",
    "get_dynamodb_service",
    "reset_dynamodb_service",
    "DynamoDBAvailabilitySource",
    "StaticAvailabilitySource",
    "build_snapshot",
    "derive_checkout_only",
]
