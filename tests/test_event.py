"""Tests for master event records."""

from __future__ import annotations

import datetime
import zoneinfo
from typing import Any

import pytest

from calseries.event import Event
from calseries.exceptions import CalendarParseError
from calseries.types.recur import Frequency, Recur

TZ = zoneinfo.ZoneInfo("America/Los_Angeles")


def test_start_end_aliases() -> None:
    """Test that start and end map to the event fields."""
    event = Event(
        summary="Standup",
        start=datetime.datetime(2026, 1, 5, 9, 0, 0),
        end=datetime.datetime(2026, 1, 5, 10, 0, 0),
    )
    assert event.dtstart == datetime.datetime(2026, 1, 5, 9, 0, 0)
    assert event.dtend == datetime.datetime(2026, 1, 5, 10, 0, 0)
    assert event.start == event.dtstart
    assert event.end == event.dtend
    assert event.computed_duration == datetime.timedelta(hours=1)
    assert not event.all_day
    assert not event.recurring
    assert event.uid == "mock-uid-1"


def test_iso_strings() -> None:
    """Test that date values may be specified as ISO strings."""
    event = Event(summary="Trip", start="2026-01-05", end="2026-01-08")
    assert event.start == datetime.date(2026, 1, 5)
    assert event.end == datetime.date(2026, 1, 8)
    assert event.all_day
    assert event.computed_duration == datetime.timedelta(days=3)

    event = Event(summary="Call", start="2026-01-05T09:00:00")
    assert event.start == datetime.datetime(2026, 1, 5, 9, 0, 0)


def test_default_end() -> None:
    """Test the end of an event without an explicit end."""
    event = Event(start=datetime.date(2026, 1, 5))
    assert event.dtend is None
    assert event.end == datetime.date(2026, 1, 6)

    event = Event(start=datetime.datetime(2026, 1, 5, 9, 0, 0))
    assert event.end == event.start
    assert event.computed_duration == datetime.timedelta(0)


@pytest.mark.parametrize(
    "params",
    [
        {},
        {"start": datetime.date(2026, 1, 5), "end": datetime.date(2026, 1, 4)},
        {
            "start": datetime.datetime(2026, 1, 5, 9, 0, 0),
            "end": datetime.datetime(2026, 1, 5, 8, 0, 0),
        },
        {"start": datetime.date(2026, 1, 5), "end": datetime.datetime(2026, 1, 6, 9, 0)},
        {"start": datetime.datetime(2026, 1, 5, 9, 0), "end": datetime.date(2026, 1, 6)},
        {
            "start": datetime.datetime(2026, 1, 5, 9, 0),
            "end": datetime.datetime(2026, 1, 5, 10, 0, tzinfo=TZ),
        },
        {"start": "not a date"},
        {
            "start": datetime.date(2026, 1, 5),
            "rrule": Recur(freq=Frequency.DAILY),
            "exdate": [datetime.datetime(2026, 1, 6, 9, 0)],
        },
    ],
)
def test_invalid_event(params: dict[str, Any]) -> None:
    """Test that invalid events raise a parse error."""
    with pytest.raises(CalendarParseError):
        Event(summary="Invalid", **params)


def test_recurring_event() -> None:
    """Test a recurring master event with exclusions."""
    event = Event(
        summary="Standup",
        start=datetime.datetime(2026, 1, 5, 9, 0, 0, tzinfo=TZ),
        end=datetime.datetime(2026, 1, 5, 10, 0, 0, tzinfo=TZ),
        rrule=Recur.from_rrule("FREQ=WEEKLY;COUNT=4"),
        exdate=["2026-01-12T17:00:00+00:00"],
    )
    assert event.recurring
    assert event.exdate == [
        datetime.datetime(2026, 1, 12, 17, 0, 0, tzinfo=datetime.timezone.utc)
    ]


def test_timespan() -> None:
    """Test the timespan of an all day event in a timezone."""
    event = Event(start=datetime.date(2026, 1, 5), end=datetime.date(2026, 1, 6))
    timespan = event.timespan_of(TZ)
    assert timespan.start == datetime.datetime(2026, 1, 5, 0, 0, 0, tzinfo=TZ)
    assert timespan.end == datetime.datetime(2026, 1, 6, 0, 0, 0, tzinfo=TZ)
    assert timespan.duration == datetime.timedelta(days=1)


def test_uid_factory() -> None:
    """Test that each event gets a new uid."""
    first = Event(start=datetime.date(2026, 1, 5))
    second = Event(start=datetime.date(2026, 1, 5))
    assert first.uid == "mock-uid-1"
    assert second.uid == "mock-uid-2"
