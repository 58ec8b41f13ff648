"""Library for managing the lifecycle of master events in a remote calendar.

An `EventStore` is the API used by a calendar UI. It fetches master events
from the remote store through an `EventTransport`, expands them into the
occurrences shown on a month grid, and translates deletions of a single
occurrence or of a whole series into edits of the master records.

Here is an example for setting up an `EventStore`:

```python
import datetime
from calseries.config import CalendarConfig
from calseries.event import Event
from calseries.store import DeleteScope, EventStore
from calseries.transport import MemoryTransport

config = CalendarConfig(calendar="family")
store = EventStore(MemoryTransport.from_config(config), config)

uid = store.create_event(
    Event(summary="Standup", start=datetime.datetime(2026, 1, 5, 9, 0)),
    recurrence="WEEKLY:4",
)
view = store.month_view("2026-01")
for cell in view.grid.cells:
    for occurrence in cell.occurrences:
        print(cell.day, occurrence.uid, occurrence.summary)
```

With output like this:
```
2026-01-05 6d1f...-20260105 Standup
2026-01-12 6d1f...-20260112 Standup
2026-01-19 6d1f...-20260119 Standup
2026-01-26 6d1f...-20260126 Standup
```

You may also delete a specific occurrence, or the whole series:
```python
store.delete_event(f"{uid}-20260112")
store.delete_event(uid, DeleteScope.SERIES)
```
"""

from __future__ import annotations

import dataclasses
import datetime
import enum
import logging
from collections.abc import Callable

from .config import CalendarConfig
from .event import Event
from .exceptions import CalendarError, MalformedRule, NotFound
from .exclusion import add_exclusion
from .grid import Month, MonthGrid, build_grid, group_by_date, padded_window
from .instance import InstanceRef, resolve
from .recurrence import Occurrence, expand_all
from .transport import EventTransport
from .types.recur import BoundKind, Frequency, Recur, decode, encode
from .util import dtstamp_factory, local_timezone

__all__ = [
    "DeleteScope",
    "EventStore",
    "MonthView",
    "RecurrenceSelector",
]

_LOGGER = logging.getLogger(__name__)

SELECTOR_SEPARATOR = ":"


class DeleteScope(str, enum.Enum):
    """Specifies what is deleted when deleting an occurrence."""

    SINGLE = "SINGLE"
    """Only the specified occurrence is removed from the series."""

    SERIES = "SERIES"
    """The master event is removed along with all of its occurrences."""


@dataclasses.dataclass(frozen=True)
class RecurrenceSelector:
    """A simplified recurrence chosen in a form, e.g. weekly for 4 weeks.

    The selector is written as `FREQ:N` such as `DAILY:10`, `WEEKLY:4`
    or `MONTHLY:6`.
    """

    frequency: Frequency
    count: int

    @classmethod
    def parse(cls, value: str) -> RecurrenceSelector:
        """Parse a selector in FREQ:N format."""
        frequency, sep, count = value.partition(SELECTOR_SEPARATOR)
        if not sep:
            raise MalformedRule(f"Expected recurrence selector FREQ:N but was '{value}'")
        rule = decode(encode(frequency, 1, BoundKind.COUNT, count))
        if rule.count is None:
            raise MalformedRule(f"Expected recurrence selector count in '{value}'")
        return cls(frequency=rule.freq, count=rule.count)

    def as_rrule(self) -> Recur:
        """Return the canonical recurrence rule for the selector."""
        return decode(encode(self.frequency, 1, BoundKind.COUNT, self.count))


@dataclasses.dataclass
class MonthView:
    """The contents of a month page of the calendar."""

    month: Month
    grid: MonthGrid
    upcoming: list[Occurrence] = dataclasses.field(default_factory=list)
    errors: list[CalendarError] = dataclasses.field(default_factory=list)
    """Errors encountered while fetching events, shown apart from the grid."""


class EventStore:
    """An event store manages the master events of a remote calendar."""

    def __init__(
        self,
        transport: EventTransport,
        config: CalendarConfig | None = None,
        tzinfo: datetime.tzinfo | None = None,
        dtstamp_fn: Callable[[], datetime.datetime] = lambda: dtstamp_factory(),
    ) -> None:
        """Initialize the EventStore."""
        self._transport = transport
        self._config = config or CalendarConfig()
        self._tzinfo = tzinfo or local_timezone()
        self._dtstamp_fn = dtstamp_fn

    def occurrences(
        self,
        start: datetime.date | datetime.datetime,
        end: datetime.date | datetime.datetime,
    ) -> list[Occurrence]:
        """Return the occurrences of all events starting within the window.

        Raises a `CalendarError` if the master events can't be fetched or
        parsed.
        """
        masters = self._transport.fetch_masters(start, end)
        occurrences = expand_all(
            masters,
            start,
            end,
            tzinfo=self._tzinfo,
            max_steps=self._config.max_expansion_steps,
        )
        _LOGGER.debug(
            "Expanded %d master events to %d occurrences",
            len(masters),
            len(occurrences),
        )
        return occurrences

    def upcoming_events(self, window_days: int | None = None) -> list[Occurrence]:
        """Return the occurrences starting from now within the next days."""
        if window_days is None:
            window_days = self._config.upcoming_days
        now = self._dtstamp_fn().astimezone(self._tzinfo)
        return self.occurrences(now, now + datetime.timedelta(days=window_days))

    def month_view(self, month: Month | str | None = None) -> MonthView:
        """Return the grid of a month along with the upcoming events.

        The month defaults to the current month. Errors fetching events are
        recorded in the view, leaving the grid or upcoming list empty rather
        than partially built.
        """
        today = self._dtstamp_fn().astimezone(self._tzinfo).date()
        if month is None:
            month = Month.of(today)
        elif isinstance(month, str):
            month = Month.parse(month)

        errors: list[CalendarError] = []
        start, end = padded_window(month)
        try:
            occurrences = self.occurrences(start, end + datetime.timedelta(days=1))
        except CalendarError as err:
            _LOGGER.error("Failed to fetch calendar events for %s: %s", month, err)
            errors.append(err)
            occurrences = []
        grid = build_grid(month, group_by_date(occurrences, self._tzinfo), today=today)

        try:
            upcoming = self.upcoming_events()
        except CalendarError as err:
            _LOGGER.error("Failed to fetch upcoming events: %s", err)
            errors.append(err)
            upcoming = []
        return MonthView(month=month, grid=grid, upcoming=upcoming, errors=errors)

    def create_event(
        self,
        event: Event,
        recurrence: RecurrenceSelector | str | None = None,
    ) -> str:
        """Add a master event to the calendar, returning its uid.

        The optional recurrence selector is converted into a canonical
        recurrence rule. An event without an end lasts one hour, or one day
        for an all day event.
        """
        update: dict[str, object] = {"dtstamp": self._dtstamp_fn()}
        if isinstance(recurrence, str):
            recurrence = RecurrenceSelector.parse(recurrence)
        if recurrence is not None:
            update["rrule"] = recurrence.as_rrule()
        if event.dtend is None:
            if event.all_day:
                update["dtend"] = event.dtstart + datetime.timedelta(days=1)
            else:
                update["dtend"] = event.dtstart + datetime.timedelta(hours=1)
        new_event = Event(**{**event.model_dump(), **update})
        self._transport.put_master(new_event)
        _LOGGER.info(
            "Created calendar event %s (%s) rrule=%s",
            new_event.uid,
            new_event.summary,
            new_event.rrule.as_rrule_str() if new_event.rrule else None,
        )
        return new_event.uid

    def _master_exists(self, uid: str) -> bool:
        try:
            self._transport.get_master(uid)
        except NotFound:
            return False
        return True

    def _resolve_stored(self, identifier: str) -> InstanceRef:
        """Resolve an identifier against the master events in the store.

        An identifier that reads as an occurrence id but is also the uid of a
        stored master is ambiguous. It is read as an occurrence when its
        master exists, otherwise as the literal master uid.
        """
        ref = resolve(identifier)
        if not ref.is_instance or not self._master_exists(identifier):
            return ref
        _LOGGER.warning(
            "Ambiguous instance id %s also matches a master event", identifier
        )
        if self._master_exists(ref.master_id):
            return dataclasses.replace(ref, ambiguous=True)
        return InstanceRef(master_id=identifier, ambiguous=True)

    def delete_event(
        self, identifier: str, scope: DeleteScope = DeleteScope.SINGLE
    ) -> InstanceRef:
        """Delete an occurrence, or the whole series, returning the resolved id.

        An identifier of an occurrence deleted with the SINGLE scope adds an
        exclusion to the master event. Otherwise the master event is deleted
        along with all of its occurrences. An identifier that may be read both
        as an occurrence and as a literal master uid is flagged as ambiguous.
        """
        ref = self._resolve_stored(identifier)
        if scope == DeleteScope.SINGLE and ref.is_instance and ref.occurrence_date:
            add_exclusion(self._transport, ref.master_id, ref.occurrence_date)
            return ref

        self._transport.delete_master(ref.master_id)
        _LOGGER.info(
            "Deleted calendar event %s (master %s, scope %s)",
            identifier,
            ref.master_id,
            scope.value,
        )
        return ref
