"""Library for parsing and encoding DATE and DATE-TIME values."""

from __future__ import annotations

import datetime
import logging
import re
import zoneinfo

_LOGGER = logging.getLogger(__name__)

DATE_REGEX = re.compile(r"^([0-9]{4})([0-9]{2})([0-9]{2})$")
DATETIME_REGEX = re.compile(
    r"^([0-9]{4})([0-9]{2})([0-9]{2})T([0-9]{2})([0-9]{2})([0-9]{2})(Z)?$"
)


def parse_date(value: str) -> datetime.date:
    """Parse a YYYYMMDD value into a datetime.date."""
    if not (match := DATE_REGEX.fullmatch(value)):
        raise ValueError(f"Expected value to match DATE pattern: '{value}'")
    year, month, day = (int(part) for part in match.groups())
    return datetime.date(year, month, day)


def parse_date_time(value: str, tzid: str | None = None) -> datetime.datetime:
    """Parse a YYYYMMDDTHHMMSS[Z] value into a datetime.datetime.

    A trailing Z means the value is in UTC, otherwise the value is in the
    `tzid` timezone or floating when no timezone is specified.
    """
    if not (match := DATETIME_REGEX.fullmatch(value)):
        raise ValueError(f"Expected value to match DATE-TIME pattern: '{value}'")
    timezone: datetime.tzinfo | None = None
    if tzid:
        try:
            timezone = zoneinfo.ZoneInfo(tzid)
        except (zoneinfo.ZoneInfoNotFoundError, ValueError) as err:
            raise ValueError(
                f"Expected DATE-TIME TZID value '{tzid}' to be valid timezone"
            ) from err
    elif match.group(7):
        timezone = datetime.timezone.utc
    year, month, day, hour, minute, second = (
        int(part) for part in match.groups()[:6]
    )
    result = datetime.datetime(year, month, day, hour, minute, second, tzinfo=timezone)
    _LOGGER.debug("Parsed date-time %s as %s", value, result)
    return result


def parse_date_or_date_time(value: str) -> datetime.date | datetime.datetime:
    """Parse a value that is either a DATE or a DATE-TIME."""
    if "T" in value:
        return parse_date_time(value)
    return parse_date(value)


def encode_date(value: datetime.date) -> str:
    """Serialize a date as YYYYMMDD."""
    return value.strftime("%Y%m%d")


def encode_date_time(value: datetime.datetime) -> str:
    """Serialize a datetime, converting timezone aware values to UTC."""
    if value.tzinfo is None:
        return value.strftime("%Y%m%dT%H%M%S")
    return value.astimezone(datetime.timezone.utc).strftime("%Y%m%dT%H%M%SZ")


def encode_date_or_date_time(value: datetime.date | datetime.datetime) -> str:
    """Serialize either a DATE or a DATE-TIME value."""
    if isinstance(value, datetime.datetime):
        return encode_date_time(value)
    return encode_date(value)
