"""Tests for excluding single occurrences from a master event."""

from __future__ import annotations

import datetime
import zoneinfo
from unittest.mock import patch

import pytest

from calseries.event import Event
from calseries.exceptions import NotFound
from calseries.exclusion import (
    add_exclusion,
    exclusion_days,
    exclusion_value,
    with_exclusion,
)
from calseries.transport import MemoryTransport
from calseries.types.recur import Recur

TZ = zoneinfo.ZoneInfo("America/Los_Angeles")


@pytest.fixture(name="standup")
def mock_standup() -> Event:
    """Fixture for a weekly event in a timezone."""
    return Event(
        uid="standup",
        summary="Standup",
        location="Room 1",
        start=datetime.datetime(2026, 1, 5, 9, 0, 0, tzinfo=TZ),
        end=datetime.datetime(2026, 1, 5, 10, 0, 0, tzinfo=TZ),
        rrule=Recur.from_rrule("FREQ=WEEKLY;COUNT=4"),
        attendees=["mailto:jane@example.com"],
    )


@pytest.fixture(name="trash_day")
def mock_trash_day() -> Event:
    """Fixture for a weekly all day event."""
    return Event(
        uid="trash-day",
        summary="Trash day",
        start=datetime.date(2026, 1, 5),
        rrule=Recur.from_rrule("FREQ=WEEKLY"),
    )


def test_exclusion_value(standup: Event, trash_day: Event) -> None:
    """Test that exclusions match the granularity of the master start."""
    assert exclusion_value(trash_day, datetime.date(2026, 1, 12)) == datetime.date(
        2026, 1, 12
    )
    assert exclusion_value(standup, datetime.date(2026, 1, 12)) == datetime.datetime(
        2026, 1, 12, 17, 0, 0, tzinfo=datetime.timezone.utc
    )
    assert exclusion_value(
        standup, datetime.datetime(2026, 1, 12, 23, 0, 0)
    ) == datetime.datetime(2026, 1, 12, 17, 0, 0, tzinfo=datetime.timezone.utc)


def test_with_exclusion(standup: Event) -> None:
    """Test adding an exclusion leaves other fields unchanged."""
    updated = with_exclusion(standup, datetime.date(2026, 1, 12))
    assert updated is not standup
    assert standup.exdate == []
    assert updated.exdate == [
        datetime.datetime(2026, 1, 12, 17, 0, 0, tzinfo=datetime.timezone.utc)
    ]
    assert exclusion_days(updated) == {datetime.date(2026, 1, 12)}
    assert updated.model_dump(exclude={"exdate"}) == standup.model_dump(
        exclude={"exdate"}
    )


def test_with_exclusion_idempotent(trash_day: Event) -> None:
    """Test that excluding the same day twice has no effect."""
    updated = with_exclusion(trash_day, datetime.date(2026, 1, 12))
    assert with_exclusion(updated, datetime.date(2026, 1, 12)) is updated
    assert updated.exdate == [datetime.date(2026, 1, 12)]


def test_add_exclusion(transport: MemoryTransport, standup: Event) -> None:
    """Test adding an exclusion to a stored master event."""
    transport.put_master(standup)

    updated = add_exclusion(transport, "standup", datetime.date(2026, 1, 19))
    assert updated.exdate == [
        datetime.datetime(2026, 1, 19, 17, 0, 0, tzinfo=datetime.timezone.utc)
    ]

    stored = transport.get_master("standup")
    assert stored.exdate == updated.exdate
    assert stored.summary == "Standup"
    assert stored.location == "Room 1"
    assert stored.attendees == ["mailto:jane@example.com"]
    assert stored.rrule == standup.rrule
    assert stored.start == standup.start
    assert stored.end == standup.end


def test_add_exclusion_twice(transport: MemoryTransport, trash_day: Event) -> None:
    """Test that adding an existing exclusion does not write the record."""
    transport.put_master(trash_day)
    add_exclusion(transport, "trash-day", datetime.date(2026, 1, 12))

    with patch.object(transport, "put_master") as mock_put:
        result = add_exclusion(transport, "trash-day", datetime.date(2026, 1, 12))
    mock_put.assert_not_called()
    assert result.exdate == [datetime.date(2026, 1, 12)]
    assert transport.get_master("trash-day").exdate == [datetime.date(2026, 1, 12)]


def test_add_exclusion_not_found(transport: MemoryTransport) -> None:
    """Test excluding a day from a master that does not exist."""
    with pytest.raises(NotFound):
        add_exclusion(transport, "missing", datetime.date(2026, 1, 12))
