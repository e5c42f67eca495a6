"""
Time helpers shared by the services.

Timestamps are stored as naive UTC values so that MySQL and SQLite behave the
same way; aware values coming from clients are converted before they are saved.
"""

from datetime import datetime, timezone

import pytz

from config import BUSINESS_TIMEZONE


def utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


def to_naive_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def as_utc(value: datetime) -> datetime:
    """Attach UTC to a naive stored value, or convert an aware one."""
    if value.tzinfo is None:
        return pytz.utc.localize(value)
    return value.astimezone(pytz.utc)


def business_timezone():
    return pytz.timezone(BUSINESS_TIMEZONE)


def to_business_time(value: datetime) -> datetime:
    return as_utc(value).astimezone(business_timezone())
