"""A timespan is defined by a start and end time and used for comparisons.

Events and query windows mix all day dates, floating times and timezone
aware times. An all day event does not specify a specific time, but needs
to be interpreted in the timezone of the viewer. A `Timespan` is unambiguous
in that it is always created with a timezone, so it is used as the common
representation when checking whether an occurrence lands in a window.
"""

from __future__ import annotations

import datetime
from typing import Any

from .util import normalize_datetime

__all__ = ["Timespan"]


class Timespan:
    """An unambiguous definition of a start and end time."""

    def __init__(self, start: datetime.datetime, end: datetime.datetime) -> None:
        self._start = start
        self._end = end
        if not self._start.tzinfo:
            raise ValueError(f"Start time did not have a timezone: {self._start}")

    @classmethod
    def of(  # pylint: disable=invalid-name
        cls,
        start: datetime.date | datetime.datetime,
        end: datetime.date | datetime.datetime,
        tzinfo: datetime.tzinfo | None = None,
    ) -> Timespan:
        """Create a Timespan for the specified date range."""
        return Timespan(
            normalize_datetime(start, tzinfo), normalize_datetime(end, tzinfo)
        )

    @property
    def start(self) -> datetime.datetime:
        """Return the timespan start as a datetime."""
        return self._start

    @property
    def end(self) -> datetime.datetime:
        """Return the timespan end as a datetime."""
        return self._end

    @property
    def duration(self) -> datetime.timedelta:
        """Return the timespan duration."""
        return self.end - self.start

    def starts_within(self, other: Timespan) -> bool:
        """Return True if this timespan starts while the other timespan is active."""
        return other.start <= self.start < other.end

    def intersects(self, other: Timespan) -> bool:
        """Return True if this timespan overlaps with the other timespan.

        The end of both timespans is exclusive, though a zero length timespan
        intersects a window that contains its start.
        """
        return (
            other.start <= self.start < other.end
            or other.start < self.end <= other.end
            or self.start <= other.start < self.end
            or self.start < other.end <= self.end
        )

    def __lt__(self, other: Any) -> bool:
        if not isinstance(other, Timespan):
            return NotImplemented
        return (self._start, self._end) < (other.start, other.end)

    def __le__(self, other: Any) -> bool:
        if not isinstance(other, Timespan):
            return NotImplemented
        return (self._start, self._end) <= (other.start, other.end)

    def __repr__(self) -> str:
        return f"Timespan(start={self._start}, end={self._end})"
