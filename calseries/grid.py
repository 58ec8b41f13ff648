"""A month grid of calendar days for display.

The grid for a month starts on the Sunday on or before the first day of the
month and ends on the Saturday on or after the last day, so that it always
contains whole weeks. The padding days from the adjacent months are flagged
so they can be rendered differently.

```python
import datetime
from calseries.grid import Month, build_grid

grid = build_grid(Month.parse("2026-01"), {}, today=datetime.date(2026, 1, 19))
for week in grid.weeks:
    print(" ".join(f"{cell.day.day:2}" for cell in week))
```
"""

from __future__ import annotations

import calendar
import dataclasses
import datetime
import logging
from collections.abc import Iterable, Mapping

from .recurrence import Occurrence
from .util import calendar_date

__all__ = [
    "DayCell",
    "Month",
    "MonthGrid",
    "build_grid",
    "group_by_date",
    "padded_window",
]

_LOGGER = logging.getLogger(__name__)

DAYS_PER_WEEK = 7
MONTH_FORMAT = "%Y-%m"


@dataclasses.dataclass(frozen=True, order=True)
class Month:
    """A month of a specific year."""

    year: int
    month: int

    def __post_init__(self) -> None:
        if not 1 <= self.month <= 12:
            raise ValueError(f"Expected month between 1 and 12 but was {self.month}")

    @classmethod
    def parse(cls, value: str) -> Month:
        """Parse a month in YYYY-MM format."""
        parsed = datetime.datetime.strptime(value.strip(), MONTH_FORMAT)
        return cls(parsed.year, parsed.month)

    @classmethod
    def of(cls, day: datetime.date) -> Month:
        """Return the month containing the specified day."""
        return cls(day.year, day.month)

    @property
    def first_day(self) -> datetime.date:
        """Return the first day of the month."""
        return datetime.date(self.year, self.month, 1)

    @property
    def last_day(self) -> datetime.date:
        """Return the last day of the month."""
        return datetime.date(
            self.year, self.month, calendar.monthrange(self.year, self.month)[1]
        )

    def previous(self) -> Month:
        """Return the month before this month."""
        if self.month == 1:
            return Month(self.year - 1, 12)
        return Month(self.year, self.month - 1)

    def next(self) -> Month:
        """Return the month after this month."""
        if self.month == 12:
            return Month(self.year + 1, 1)
        return Month(self.year, self.month + 1)

    @property
    def label(self) -> str:
        """Return the display name of the month, e.g. 'January 2026'."""
        return f"{calendar.month_name[self.month]} {self.year}"

    def __str__(self) -> str:
        return f"{self.year:04d}-{self.month:02d}"


@dataclasses.dataclass
class DayCell:
    """A single day of a month grid."""

    day: datetime.date
    """The calendar date of the cell."""

    other_month: bool = False
    """True for the padding days of the adjacent months."""

    today: bool = False
    """True if the cell is the current date."""

    occurrences: list[Occurrence] = dataclasses.field(default_factory=list)
    """The occurrences starting on this day."""


@dataclasses.dataclass
class MonthGrid:
    """The days of a month padded to whole weeks."""

    month: Month
    cells: list[DayCell]

    @property
    def start(self) -> datetime.date:
        """Return the first day of the grid."""
        return self.cells[0].day

    @property
    def end(self) -> datetime.date:
        """Return the last day of the grid (inclusive)."""
        return self.cells[-1].day

    @property
    def weeks(self) -> list[list[DayCell]]:
        """Return the cells grouped in weeks starting on Sunday."""
        return [
            self.cells[index : index + DAYS_PER_WEEK]
            for index in range(0, len(self.cells), DAYS_PER_WEEK)
        ]

    @property
    def occurrences(self) -> list[Occurrence]:
        """Return all occurrences in the grid in cell order."""
        return [
            occurrence for cell in self.cells for occurrence in cell.occurrences
        ]


def padded_window(month: Month) -> tuple[datetime.date, datetime.date]:
    """Return the first and last day (inclusive) of the grid for the month."""
    first_day = month.first_day
    last_day = month.last_day
    # date.weekday() is 0 for Monday, so Sunday is 6
    start = first_day - datetime.timedelta(days=(first_day.weekday() + 1) % DAYS_PER_WEEK)
    end = last_day + datetime.timedelta(days=(5 - last_day.weekday()) % DAYS_PER_WEEK)
    return start, end


def group_by_date(
    occurrences: Iterable[Occurrence], tzinfo: datetime.tzinfo | None = None
) -> dict[datetime.date, list[Occurrence]]:
    """Group occurrences by the calendar date they start on.

    Timezone aware start times are converted to `tzinfo` when specified
    before taking the date. The order of occurrences is preserved.

    The date a cell is keyed by is the viewer's date, which may differ from
    the date in the occurrence id. The id uses the date in the timezone of
    the master start, as do exclusions, so deleting an occurrence by its id
    always removes the occurrence shown in the cell.
    """
    result: dict[datetime.date, list[Occurrence]] = {}
    for occurrence in occurrences:
        result.setdefault(calendar_date(occurrence.start, tzinfo), []).append(
            occurrence
        )
    return result


def build_grid(
    month: Month,
    occurrences_by_date: Mapping[datetime.date, list[Occurrence]],
    today: datetime.date | None = None,
) -> MonthGrid:
    """Build the grid of day cells for a month.

    The current date is read once from the wall clock unless `today` is
    specified.
    """
    if today is None:
        today = datetime.date.today()
    start, end = padded_window(month)
    cells: list[DayCell] = []
    day = start
    while day <= end:
        cells.append(
            DayCell(
                day=day,
                other_month=(day.year, day.month) != (month.year, month.month),
                today=day == today,
                occurrences=list(occurrences_by_date.get(day, [])),
            )
        )
        day += datetime.timedelta(days=1)
    _LOGGER.debug(
        "Built grid for %s from %s to %s with %d cells", month, start, end, len(cells)
    )
    return MonthGrid(month=month, cells=cells)
