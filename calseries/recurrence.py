"""Expansion of master events into the occurrences within a time window.

A recurring master event is a single record, while a calendar view needs
each occurrence as its own item. The expansion starts at the master start,
steps by the rule interval and copies the master to each date, shifting the
end by the same amount so every occurrence keeps the original duration.

```python
import datetime
from calseries.event import Event
from calseries.recurrence import expand
from calseries.types.recur import Recur

event = Event(
    uid="standup",
    summary="Standup",
    start=datetime.datetime(2026, 1, 5, 9, 0),
    end=datetime.datetime(2026, 1, 5, 10, 0),
    rrule=Recur.from_rrule("FREQ=WEEKLY;INTERVAL=1;COUNT=4"),
)
for occurrence in expand(event, datetime.date(2026, 1, 1), datetime.date(2026, 2, 1)):
    print(occurrence.uid, occurrence.start)
```

Month and year steps are computed from the master start with
`dateutil.relativedelta`, which clamps to the last day of shorter months:
a series starting on January 31st repeats on February 28th (or 29th), then
March 31st.
"""

from __future__ import annotations

import datetime
import logging
from collections.abc import Iterable

from dateutil.relativedelta import relativedelta
from pydantic import BaseModel, ConfigDict, Field

from .event import Event
from .exclusion import exclusion_days
from .instance import instance_id
from .timespan import Timespan
from .types.recur import Frequency, Recur
from .util import calendar_date, local_timezone, normalize_datetime

__all__ = [
    "MAX_STEPS",
    "Occurrence",
    "expand",
    "expand_all",
]

_LOGGER = logging.getLogger(__name__)

MAX_STEPS = 1000
"""Maximum number of interval steps taken for a single series."""


class Occurrence(BaseModel):
    """A single appearance of a master event on the calendar.

    Occurrences are derived from a master event for each query and are
    never persisted.
    """

    uid: str
    """The master uid for a single event, or the instance id of an occurrence."""

    master_uid: str
    """The uid of the master event this occurrence was expanded from."""

    dtstart: datetime.datetime | datetime.date
    dtend: datetime.datetime | datetime.date

    summary: str = ""
    description: str | None = None
    location: str | None = None
    created_by: str | None = None
    attendees: list[str] = Field(default_factory=list)

    recurring: bool = False
    """True if the occurrence is one instance of a recurring series."""

    model_config = ConfigDict(frozen=True)

    @property
    def start(self) -> datetime.datetime | datetime.date:
        """Return the start time for the occurrence."""
        return self.dtstart

    @property
    def end(self) -> datetime.datetime | datetime.date:
        """Return the end time for the occurrence."""
        return self.dtend

    @property
    def all_day(self) -> bool:
        """Return True if the occurrence is for whole days without a time."""
        return not isinstance(self.dtstart, datetime.datetime)

    @property
    def occurrence_date(self) -> datetime.date:
        """Return the calendar date the occurrence starts on."""
        return calendar_date(self.dtstart)

    def timespan_of(self, tzinfo: datetime.tzinfo) -> Timespan:
        """Return a timespan representing the occurrence start and end."""
        return Timespan.of(self.dtstart, self.dtend, tzinfo)


def _occurrence(
    master: Event,
    dtstart: datetime.datetime | datetime.date,
    dtend: datetime.datetime | datetime.date,
) -> Occurrence:
    recurring = master.recurring
    return Occurrence(
        uid=instance_id(master.uid, dtstart) if recurring else master.uid,
        master_uid=master.uid,
        dtstart=dtstart,
        dtend=dtend,
        summary=master.summary,
        description=master.description,
        location=master.location,
        created_by=master.created_by,
        attendees=list(master.attendees),
        recurring=recurring,
    )


def _step(
    dtstart: datetime.datetime | datetime.date, rule: Recur, index: int
) -> datetime.datetime | datetime.date:
    """Return the start of the instance `index` steps after the master start."""
    steps = rule.interval * index
    if rule.freq == Frequency.DAILY:
        delta = relativedelta(days=steps)
    elif rule.freq == Frequency.WEEKLY:
        delta = relativedelta(weeks=steps)
    elif rule.freq == Frequency.MONTHLY:
        delta = relativedelta(months=steps)
    else:
        delta = relativedelta(years=steps)
    return dtstart + delta


def _frame(value: datetime.date | datetime.datetime) -> datetime.tzinfo | None:
    """Return the timezone that calendar dates of the value are read in."""
    if isinstance(value, datetime.datetime):
        return value.tzinfo or local_timezone()
    return None


def _past_until(
    current: datetime.date | datetime.datetime,
    until: datetime.date | datetime.datetime,
    tzinfo: datetime.tzinfo,
) -> bool:
    """Return True if the instance starts after the inclusive UNTIL bound."""
    if isinstance(until, datetime.datetime) and isinstance(current, datetime.datetime):
        return normalize_datetime(current, tzinfo) > normalize_datetime(until, tzinfo)
    # A date bound includes the whole day, regardless of the time of the instance
    return calendar_date(current) > calendar_date(until, _frame(current))


def _expand_recurring(
    master: Event,
    rule: Recur,
    window: Timespan,
    tzinfo: datetime.tzinfo,
    max_steps: int,
) -> list[Occurrence]:
    duration = master.computed_duration
    excluded = exclusion_days(master)
    results: list[Occurrence] = []
    for index in range(max_steps):
        if rule.count is not None and index >= rule.count:
            break
        current = _step(master.dtstart, rule, index)
        current_start = normalize_datetime(current, tzinfo)
        if current_start >= window.end:
            break
        if rule.until is not None and _past_until(current, rule.until, tzinfo):
            break
        if current_start < window.start:
            continue
        if calendar_date(current) in excluded:
            _LOGGER.debug("Skipping excluded instance %s of %s", current, master.uid)
            continue
        results.append(_occurrence(master, current, current + duration))
    else:
        if rule.count is None or rule.count > max_steps:
            _LOGGER.debug(
                "Expansion of %s stopped after %d steps", master.uid, max_steps
            )
    _LOGGER.debug(
        "Expanded recurring event %s (%s) to %d occurrences",
        master.uid,
        master.summary,
        len(results),
    )
    return results


def expand(
    master: Event,
    start: datetime.date | datetime.datetime,
    end: datetime.date | datetime.datetime,
    tzinfo: datetime.tzinfo | None = None,
    max_steps: int = MAX_STEPS,
) -> list[Occurrence]:
    """Return the occurrences of a master event within a window.

    The window end is exclusive. A single event is returned if it overlaps
    the window at all, while an instance of a recurring event is returned
    when it starts within the window. Dates and floating times are
    interpreted in `tzinfo`, which defaults to the local timezone.
    """
    if tzinfo is None:
        tzinfo = local_timezone()
    window = Timespan.of(start, end, tzinfo)
    if (rule := master.rrule) is None:
        if master.timespan_of(tzinfo).intersects(window):
            return [_occurrence(master, master.start, master.end)]
        return []
    return _expand_recurring(master, rule, window, tzinfo, max_steps)


def expand_all(
    masters: Iterable[Event],
    start: datetime.date | datetime.datetime,
    end: datetime.date | datetime.datetime,
    tzinfo: datetime.tzinfo | None = None,
    max_steps: int = MAX_STEPS,
) -> list[Occurrence]:
    """Return the occurrences of all master events within a window in order."""
    if tzinfo is None:
        tzinfo = local_timezone()
    occurrences: list[Occurrence] = []
    for master in masters:
        occurrences.extend(expand(master, start, end, tzinfo, max_steps))
    return sorted(occurrences, key=lambda occurrence: occurrence.timespan_of(tzinfo))
