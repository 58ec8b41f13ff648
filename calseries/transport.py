"""Access to the remote store holding master event records.

The remote store is reached through an `EventTransport`, which reads and
writes whole master records. There is no partial update: every edit is a
read of the full record, a local modification, then a write of the full
record. The transport does not retry and has no timeout of its own.

A `MemoryTransport` keeps serialized records in memory the same way a
calendar collection holds `.ics` objects, which is useful for tests and
local development.
"""

from __future__ import annotations

import datetime
import logging
from typing import TYPE_CHECKING, Protocol

from .event import Event
from .exceptions import CalendarParseError, NotFound, TransportFailure
from .record import DEFAULT_PRODID, decode_event, encode_event
from .timespan import Timespan
from .util import calendar_date, local_timezone

if TYPE_CHECKING:
    from .config import CalendarConfig

__all__ = [
    "EventTransport",
    "MemoryTransport",
]

_LOGGER = logging.getLogger(__name__)


class EventTransport(Protocol):
    """Interface to the remote store of master event records.

    Implementations raise `NotFound` when a record does not exist and
    `TransportFailure` when the store can't be reached or answers
    unexpectedly.
    """

    def fetch_masters(
        self,
        start: datetime.date | datetime.datetime,
        end: datetime.date | datetime.datetime,
    ) -> list[Event]:
        """Return master events whose stored time range could overlap the window.

        The filter is not exact for recurring masters, so callers expand the
        returned masters themselves and should pass a padded window.
        """
        ...

    def get_master(self, uid: str) -> Event:
        """Return the master event with the specified uid."""
        ...

    def put_master(self, event: Event) -> None:
        """Create or replace the full master event record."""
        ...

    def delete_master(self, uid: str) -> None:
        """Delete the master event record, removing the whole series."""
        ...


class MemoryTransport:
    """An in-memory event store holding serialized calendar records."""

    def __init__(
        self,
        calendar: str = "calendar",
        prodid: str = DEFAULT_PRODID,
        tzinfo: datetime.tzinfo | None = None,
    ) -> None:
        """Initialize MemoryTransport."""
        self._calendar = calendar
        self._prodid = prodid
        self._tzinfo = tzinfo
        self._objects: dict[str, str] = {}

    @classmethod
    def from_config(cls, config: CalendarConfig) -> MemoryTransport:
        """Create a transport for the calendar named in the configuration."""
        return cls(calendar=config.calendar, prodid=config.prodid)

    @property
    def objects(self) -> dict[str, str]:
        """Return the serialized records keyed by object path."""
        return dict(self._objects)

    def _path(self, uid: str) -> str:
        return f"{self._calendar}/{uid}.ics"

    def _decode(self, path: str, content: str) -> Event:
        try:
            return decode_event(content)
        except CalendarParseError as err:
            raise TransportFailure(
                f"Failed to parse calendar object {path}: {err}"
            ) from err

    def _may_overlap(
        self,
        event: Event,
        start: datetime.date | datetime.datetime,
        end: datetime.date | datetime.datetime,
    ) -> bool:
        tzinfo = self._tzinfo or local_timezone()
        window = Timespan.of(start, end, tzinfo)
        if (rule := event.rrule) is None:
            return event.timespan_of(tzinfo).intersects(window)
        if event.timespan_of(tzinfo).start >= window.end:
            return False
        if rule.until is not None and calendar_date(rule.until) < calendar_date(
            window.start
        ):
            return False
        return True

    def fetch_masters(
        self,
        start: datetime.date | datetime.datetime,
        end: datetime.date | datetime.datetime,
    ) -> list[Event]:
        """Return master events whose stored time range could overlap the window."""
        events = [
            event
            for path, content in self._objects.items()
            if self._may_overlap(event := self._decode(path, content), start, end)
        ]
        _LOGGER.debug("Fetched %d master events from %s", len(events), self._calendar)
        return events

    def get_master(self, uid: str) -> Event:
        """Return the master event with the specified uid."""
        path = self._path(uid)
        if (content := self._objects.get(path)) is None:
            raise NotFound(f"No calendar object {path}")
        return self._decode(path, content)

    def put_master(self, event: Event) -> None:
        """Create or replace the full master event record."""
        path = self._path(event.uid)
        self._objects[path] = encode_event(event, prodid=self._prodid)
        _LOGGER.debug("Stored calendar object %s", path)

    def delete_master(self, uid: str) -> None:
        """Delete the master event record."""
        path = self._path(uid)
        if self._objects.pop(path, None) is None:
            raise NotFound(f"No calendar object {path}")
        _LOGGER.debug("Removed calendar object %s", path)
