"""Utility methods used by multiple components."""

from __future__ import annotations

import datetime
import uuid
from typing import overload

__all__ = [
    "dtstamp_factory",
    "uid_factory",
    "local_timezone",
    "normalize_datetime",
    "calendar_date",
]


MIDNIGHT = datetime.time()


def dtstamp_factory() -> datetime.datetime:
    """Factory method for new event timestamps to facilitate mocking."""
    return datetime.datetime.now(tz=datetime.UTC)


def uid_factory() -> str:
    """Factory method for new uids to facilitate mocking."""
    return str(uuid.uuid1())


def local_timezone() -> datetime.tzinfo:
    """Get the local timezone to use when converting date to datetime."""
    if local_tz := datetime.datetime.now().astimezone().tzinfo:
        return local_tz
    return datetime.timezone.utc


def normalize_datetime(
    value: datetime.date | datetime.datetime, tzinfo: datetime.tzinfo | None = None
) -> datetime.datetime:
    """Convert date or datetime to a value that can be used for comparison."""
    if not isinstance(value, datetime.datetime):
        value = datetime.datetime.combine(value, MIDNIGHT)
    if value.tzinfo is None:
        if tzinfo is None:
            tzinfo = local_timezone()
        value = value.replace(tzinfo=tzinfo)
    return value


def calendar_date(
    value: datetime.date | datetime.datetime, tzinfo: datetime.tzinfo | None = None
) -> datetime.date:
    """Return the calendar date of a date or datetime.

    A timezone aware datetime is first converted to `tzinfo` when specified,
    otherwise the date is read in the datetime's own timezone. Floating
    datetimes and dates are returned as is.
    """
    if not isinstance(value, datetime.datetime):
        return value
    if value.tzinfo is not None and tzinfo is not None:
        value = value.astimezone(tzinfo)
    return value.date()


@overload
def parse_date_and_datetime(value: None) -> None: ...


@overload
def parse_date_and_datetime(value: str | datetime.date) -> datetime.date: ...


def parse_date_and_datetime(value: str | datetime.date | None) -> datetime.date | None:
    """Coerce str into date and datetime value."""
    if not isinstance(value, str):
        return value
    if "T" in value or " " in value:
        return datetime.datetime.fromisoformat(value)
    return datetime.date.fromisoformat(value)


def parse_date_and_datetime_list(
    values: list[str | datetime.date] | None,
) -> list[datetime.date]:
    """Coerce a list of str into date and datetime values."""
    if not values:
        return []
    return [parse_date_and_datetime(value) for value in values]
