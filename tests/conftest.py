"""Pytest configuration and fixtures for booking calendar tests.

This module provides reusable fixtures for testing:
- A fixed reference date and settings
- Fake availability sources with controllable completion
- DynamoDB mocking with moto
- Sample reservation and blocked-date items
"""

import datetime as dt
import os
from typing import Any, Generator

import boto3
import pytest
from moto import mock_aws

# === Environment Setup ===

# Set environment variables for testing before imports
os.environ.setdefault("AWS_DEFAULT_REGION", "eu-west-1")
os.environ.setdefault("DYNAMODB_TABLE_PREFIX", "test-calendar")

if not os.environ.get("AWS_PROFILE") and not os.environ.get("AWS_ACCESS_KEY_ID"):
    os.environ.setdefault("AWS_ACCESS_KEY_ID", "testing")
    os.environ.setdefault("AWS_SECRET_ACCESS_KEY", "testing")

from booking_calendar.config import CalendarSettings, reset_settings  # noqa: E402
from booking_calendar.models import AvailabilitySnapshot  # noqa: E402
from fakes import FakeAvailabilitySource  # noqa: E402

TODAY = dt.date(2024, 6, 1)


# === Singleton Resets ===


@pytest.fixture(autouse=True)
def reset_singletons() -> Generator[None, None, None]:
    """Reset cached settings and services before and after each test.

    Tests using mock_aws get fresh service instances inside the mock
    context rather than reusing ones from a previous test.
    """
    from booking_calendar.api.dependencies import reset_services
    from booking_calendar.services.dynamodb import reset_dynamodb_service

    reset_settings()
    reset_dynamodb_service()
    reset_services()
    yield
    reset_settings()
    reset_dynamodb_service()
    reset_services()


# === Calendar Fixtures ===


@pytest.fixture
def today() -> dt.date:
    """Fixed reference date (2024-06-01)."""
    return TODAY


@pytest.fixture
def settings() -> CalendarSettings:
    """Default settings (allow checkout-only check-ins, no window)."""
    return CalendarSettings(dynamodb_table_prefix="test-calendar")


@pytest.fixture
def june_snapshot() -> AvailabilitySnapshot:
    """Availability for June 2024: a stay on the 15th-16th ending the 17th."""
    return AvailabilitySnapshot(
        booked=["2024-06-15", "2024-06-16"],
        checkout_only=["2024-06-17"],
    )


@pytest.fixture
def fake_source() -> FakeAvailabilitySource:
    """Availability source settled manually by the test."""
    return FakeAvailabilitySource()


# === DynamoDB Fixtures ===


@pytest.fixture
def aws_credentials() -> None:
    """Mocked AWS Credentials for moto."""
    if not os.environ.get("AWS_PROFILE"):
        os.environ["AWS_ACCESS_KEY_ID"] = "testing"
        os.environ["AWS_SECRET_ACCESS_KEY"] = "testing"
        os.environ["AWS_SECURITY_TOKEN"] = "testing"
        os.environ["AWS_SESSION_TOKEN"] = "testing"
    os.environ["AWS_DEFAULT_REGION"] = "eu-west-1"


@pytest.fixture
def dynamodb_client(aws_credentials: None) -> Generator[Any, None, None]:
    """Create a mocked DynamoDB client."""
    with mock_aws():
        client = boto3.client("dynamodb", region_name="eu-west-1")
        yield client


@pytest.fixture
def create_tables(dynamodb_client: Any) -> None:
    """Create the reservations and blocked-dates tables for testing."""
    tables = [
        {
            "TableName": "test-calendar-reservations",
            "KeySchema": [{"AttributeName": "reservation_id", "KeyType": "HASH"}],
            "AttributeDefinitions": [
                {"AttributeName": "reservation_id", "AttributeType": "S"},
                {"AttributeName": "property_id", "AttributeType": "S"},
            ],
            "GlobalSecondaryIndexes": [
                {
                    "IndexName": "property_id-index",
                    "KeySchema": [{"AttributeName": "property_id", "KeyType": "HASH"}],
                    "Projection": {"ProjectionType": "ALL"},
                },
            ],
            "BillingMode": "PAY_PER_REQUEST",
        },
        {
            "TableName": "test-calendar-blocked-dates",
            "KeySchema": [
                {"AttributeName": "property_id", "KeyType": "HASH"},
                {"AttributeName": "date", "KeyType": "RANGE"},
            ],
            "AttributeDefinitions": [
                {"AttributeName": "property_id", "AttributeType": "S"},
                {"AttributeName": "date", "AttributeType": "S"},
            ],
            "BillingMode": "PAY_PER_REQUEST",
        },
    ]

    for table_config in tables:
        dynamodb_client.create_table(**table_config)


# === Sample Data Fixtures ===


@pytest.fixture
def sample_reservations() -> list[dict[str, Any]]:
    """Reservations for prop-001 in June 2024."""
    return [
        {
            "reservation_id": "res-001",
            "property_id": "prop-001",
            "check_in_date": "2024-06-10",
            "check_out_date": "2024-06-13",
            "status": "confirmed",
        },
        {
            "reservation_id": "res-002",
            "property_id": "prop-001",
            "check_in_date": "2024-06-20",
            "check_out_date": "2024-06-22",
            "status": "pending",
        },
        {
            "reservation_id": "res-003",
            "property_id": "prop-001",
            "check_in_date": "2024-06-25",
            "check_out_date": "2024-06-28",
            "status": "cancelled",
        },
        {
            "reservation_id": "res-004",
            "property_id": "prop-002",
            "check_in_date": "2024-06-01",
            "check_out_date": "2024-06-30",
            "status": "confirmed",
        },
    ]


@pytest.fixture
def seeded_tables(
    create_tables: None,
    sample_reservations: list[dict[str, Any]],
) -> None:
    """Tables populated with sample reservations and one host block."""
    dynamodb = boto3.resource("dynamodb", region_name="eu-west-1")
    reservations = dynamodb.Table("test-calendar-reservations")
    for item in sample_reservations:
        reservations.put_item(Item=item)

    blocked = dynamodb.Table("test-calendar-blocked-dates")
    blocked.put_item(
        Item={"property_id": "prop-001", "date": "2024-06-05", "reason": "maintenance"}
    )
