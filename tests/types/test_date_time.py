"""Tests for DATE and DATE-TIME values."""

import datetime
import zoneinfo

import pytest

from calseries.types.date_time import (
    encode_date,
    encode_date_or_date_time,
    encode_date_time,
    parse_date,
    parse_date_or_date_time,
    parse_date_time,
)


def test_parse_date() -> None:
    """Test parsing a date value."""
    assert parse_date("20260105") == datetime.date(2026, 1, 5)
    assert encode_date(datetime.date(2026, 1, 5)) == "20260105"


@pytest.mark.parametrize("value", ["2026015", "2026-01-05", "20261305", "abcdefgh"])
def test_parse_date_invalid(value: str) -> None:
    """Test invalid date values."""
    with pytest.raises(ValueError):
        parse_date(value)


def test_parse_date_time() -> None:
    """Test parsing floating, UTC and zoned date times."""
    assert parse_date_time("20260105T090000") == datetime.datetime(2026, 1, 5, 9, 0, 0)
    assert parse_date_time("20260105T090000Z") == datetime.datetime(
        2026, 1, 5, 9, 0, 0, tzinfo=datetime.timezone.utc
    )
    value = parse_date_time("20260105T090000", "America/New_York")
    assert value.tzinfo == zoneinfo.ZoneInfo("America/New_York")
    assert value.hour == 9


@pytest.mark.parametrize(
    ("value", "tzid"),
    [
        ("20260105T0900", None),
        ("20260105", None),
        ("20260105T090000", "Not/A_Zone"),
    ],
)
def test_parse_date_time_invalid(value: str, tzid: str | None) -> None:
    """Test invalid date time values."""
    with pytest.raises(ValueError):
        parse_date_time(value, tzid)


def test_encode_date_time() -> None:
    """Test that aware values are encoded in UTC."""
    assert encode_date_time(datetime.datetime(2026, 1, 5, 9, 0, 0)) == "20260105T090000"
    assert (
        encode_date_time(
            datetime.datetime(
                2026, 1, 5, 9, 0, 0, tzinfo=zoneinfo.ZoneInfo("America/Los_Angeles")
            )
        )
        == "20260105T170000Z"
    )


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ("20260105", datetime.date(2026, 1, 5)),
        ("20260105T090000", datetime.datetime(2026, 1, 5, 9, 0, 0)),
    ],
)
def test_date_or_date_time(
    value: str, expected: datetime.date | datetime.datetime
) -> None:
    """Test values that may be either a date or a date time."""
    assert parse_date_or_date_time(value) == expected
    assert encode_date_or_date_time(expected) == value
