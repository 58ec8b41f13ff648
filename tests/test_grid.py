"""Tests for building the month grid."""

from __future__ import annotations

import datetime
import zoneinfo

import pytest
from freezegun import freeze_time

from calseries.grid import Month, build_grid, group_by_date, padded_window
from calseries.recurrence import Occurrence

TZ = zoneinfo.ZoneInfo("America/Los_Angeles")


def occurrence(uid: str, start: datetime.date | datetime.datetime) -> Occurrence:
    """Create an occurrence starting at the specified time."""
    return Occurrence(
        uid=uid,
        master_uid=uid,
        dtstart=start,
        dtend=start + datetime.timedelta(hours=1),
    )


def test_month() -> None:
    """Test parsing and navigating months."""
    month = Month.parse("2026-01")
    assert month == Month(2026, 1)
    assert str(month) == "2026-01"
    assert month.label == "January 2026"
    assert month.first_day == datetime.date(2026, 1, 1)
    assert month.last_day == datetime.date(2026, 1, 31)
    assert month.previous() == Month(2025, 12)
    assert month.next() == Month(2026, 2)
    assert Month(2025, 12).next() == month
    assert Month(2024, 2).last_day == datetime.date(2024, 2, 29)
    assert Month.of(datetime.date(2026, 3, 15)) == Month(2026, 3)
    assert Month(2025, 12) < month


@pytest.mark.parametrize("value", ["2026-13", "2026", "January", "2026-1-1"])
def test_invalid_month(value: str) -> None:
    """Test invalid month values."""
    with pytest.raises(ValueError):
        Month.parse(value)


def test_invalid_month_number() -> None:
    """Test a month number out of range."""
    with pytest.raises(ValueError):
        Month(2026, 0)


@pytest.mark.parametrize(
    ("month", "expected"),
    [
        (Month(2026, 1), (datetime.date(2025, 12, 28), datetime.date(2026, 1, 31))),
        (Month(2026, 2), (datetime.date(2026, 2, 1), datetime.date(2026, 2, 28))),
        (Month(2026, 3), (datetime.date(2026, 3, 1), datetime.date(2026, 4, 4))),
        (Month(2026, 8), (datetime.date(2026, 7, 26), datetime.date(2026, 9, 5))),
    ],
)
def test_padded_window(
    month: Month, expected: tuple[datetime.date, datetime.date]
) -> None:
    """Test that the grid starts on a Sunday and ends on a Saturday."""
    start, end = padded_window(month)
    assert (start, end) == expected
    assert start.isoweekday() == 7
    assert end.isoweekday() == 6


@pytest.mark.parametrize("month", [Month(2026, value) for value in range(1, 13)])
def test_grid_whole_weeks(month: Month) -> None:
    """Test that every grid contains whole weeks with one today cell."""
    grid = build_grid(month, {}, today=month.first_day + datetime.timedelta(days=9))
    assert len(grid.cells) % 7 == 0
    assert all(len(week) == 7 for week in grid.weeks)
    assert [cell.today for cell in grid.cells].count(True) == 1
    assert all(cell.day.month == month.month for cell in grid.cells if not cell.other_month)
    assert grid.start.isoweekday() == 7
    assert grid.end.isoweekday() == 6


def test_build_grid() -> None:
    """Test placing occurrences in the grid."""
    first = occurrence("first", datetime.datetime(2026, 1, 5, 9, 0, 0))
    second = occurrence("second", datetime.datetime(2026, 1, 5, 12, 0, 0))
    padding = occurrence("padding", datetime.datetime(2025, 12, 29, 9, 0, 0))
    grid = build_grid(
        Month(2026, 1),
        group_by_date([first, second, padding]),
        today=datetime.date(2026, 1, 19),
    )
    assert len(grid.cells) == 35
    assert len(grid.weeks) == 5

    cells = {cell.day: cell for cell in grid.cells}
    assert cells[datetime.date(2025, 12, 28)].other_month
    assert not cells[datetime.date(2026, 1, 1)].other_month
    assert [o.uid for o in cells[datetime.date(2026, 1, 5)].occurrences] == [
        "first",
        "second",
    ]
    assert [o.uid for o in cells[datetime.date(2025, 12, 29)].occurrences] == [
        "padding"
    ]
    assert cells[datetime.date(2026, 1, 19)].today
    assert [o.uid for o in grid.occurrences] == ["padding", "first", "second"]


def test_grid_outside_month() -> None:
    """Test that today is not flagged when viewing another month."""
    grid = build_grid(Month(2026, 3), {}, today=datetime.date(2026, 1, 19))
    assert not any(cell.today for cell in grid.cells)


@freeze_time("2026-01-19 12:00:00")
def test_grid_today_default() -> None:
    """Test that today is read from the wall clock."""
    grid = build_grid(Month(2026, 1), {})
    assert [cell.day for cell in grid.cells if cell.today] == [
        datetime.date(2026, 1, 19)
    ]


def test_group_by_date_timezone() -> None:
    """Test that aware occurrences are grouped in the viewer timezone."""
    late = occurrence(
        "late", datetime.datetime(2026, 1, 6, 2, 0, 0, tzinfo=datetime.timezone.utc)
    )
    all_day = Occurrence(
        uid="all-day",
        master_uid="all-day",
        dtstart=datetime.date(2026, 1, 6),
        dtend=datetime.date(2026, 1, 7),
    )
    grouped = group_by_date([late, all_day], TZ)
    assert grouped == {
        datetime.date(2026, 1, 5): [late],
        datetime.date(2026, 1, 6): [all_day],
    }
    assert group_by_date([late]) == {datetime.date(2026, 1, 6): [late]}
