"""Common helpers shared across models."""

from datetime import UTC, date, datetime


def utc_now() -> datetime:
    return datetime.now(UTC)


def local_today() -> date:
    """Calendar day on the device's local clock."""
    return datetime.now().date()
