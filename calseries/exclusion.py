"""Editing the exclusion dates of a recurring master event.

Deleting a single occurrence of a recurring event does not remove anything
from the store. Instead the date of the occurrence is added to the
exclusions of the master event, and the whole record is written back.

There is no locking around the read-modify-write edit. Two concurrent edits
of the same master race and the last write wins, so callers that need
stronger guarantees serialize edits to the same master themselves.
"""

from __future__ import annotations

import datetime
import logging

from .event import Event
from .transport import EventTransport
from .util import calendar_date, local_timezone, normalize_datetime

__all__ = [
    "add_exclusion",
    "exclusion_days",
    "exclusion_value",
    "with_exclusion",
]

_LOGGER = logging.getLogger(__name__)


def _frame(master: Event) -> datetime.tzinfo | None:
    if isinstance(master.dtstart, datetime.datetime):
        return master.dtstart.tzinfo or local_timezone()
    return None


def exclusion_value(
    master: Event, day: datetime.date
) -> datetime.date | datetime.datetime:
    """Return the exclusion for the day in the granularity of the master start.

    An all day event is excluded by date. A timed event is excluded by the
    UTC time of the occurrence that starts on that day.
    """
    if isinstance(day, datetime.datetime):
        day = day.date()
    if not isinstance(master.dtstart, datetime.datetime):
        return day
    value = datetime.datetime.combine(day, master.dtstart.timetz())
    return normalize_datetime(value).astimezone(datetime.timezone.utc)


def exclusion_days(master: Event) -> set[datetime.date]:
    """Return the calendar dates excluded from the master event."""
    frame = _frame(master)
    return {calendar_date(value, frame) for value in master.exdate}


def with_exclusion(master: Event, day: datetime.date) -> Event:
    """Return a copy of the master event with the day excluded.

    The master is returned unchanged if the day is already excluded.
    """
    if isinstance(day, datetime.datetime):
        day = day.date()
    if day in exclusion_days(master):
        _LOGGER.debug("Day %s is already excluded from %s", day, master.uid)
        return master
    exdate = [*master.exdate, exclusion_value(master, day)]
    return master.model_copy(update={"exdate": exdate})


def add_exclusion(
    transport: EventTransport, master_id: str, day: datetime.date
) -> Event:
    """Exclude the occurrence on the specified day from a stored master event.

    Fetches the current master record, raising `NotFound` if it does not
    exist, then writes the full record back with the additional exclusion.
    Excluding a day that is already excluded does not write anything.
    Returns the resulting master event.
    """
    master = transport.get_master(master_id)
    updated = with_exclusion(master, day)
    if updated is master:
        return master
    transport.put_master(updated)
    _LOGGER.info(
        "Added exclusion to recurring event %s on %s", master_id, updated.exdate[-1]
    )
    return updated
