"""A master event record describing a possibly recurring calendar event.

An event start and end time may either be a date and time or just a day
alone. An event with only dates is an all day event. A master event with a
recurrence rule repeats on a schedule, and the exclusion dates suppress
individual occurrences of the series.
"""

# pylint: disable=unnecessary-lambda

from __future__ import annotations

import datetime
import logging
from typing import Annotated, Any, Optional, Self, Union

from pydantic import (
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Field,
    ValidationError,
    model_validator,
)

from .exceptions import CalendarParseError
from .timespan import Timespan
from .types.recur import Recur
from .util import (
    dtstamp_factory,
    normalize_datetime,
    parse_date_and_datetime,
    parse_date_and_datetime_list,
    uid_factory,
)

_LOGGER = logging.getLogger(__name__)

__all__ = ["Event"]


class Event(BaseModel):
    """A master event on a calendar.

    Can either be for a specific day, or with a start and end time.

    The dtstamp and uid functions have factory methods invoked with a lambda to facilitate
    mocking in unit tests.

    Example:
    ```python
    import datetime
    from calseries.event import Event
    from calseries.types.recur import Recur

    event = Event(
        summary="Weekly sync",
        start=datetime.datetime(2026, 1, 5, 9, 0, 0),
        end=datetime.datetime(2026, 1, 5, 10, 0, 0),
        rrule=Recur.from_rrule("FREQ=WEEKLY;INTERVAL=1;COUNT=4"),
    )
    print("The event duration is: ", event.computed_duration)
    ```
    """

    dtstamp: datetime.datetime = Field(default_factory=lambda: dtstamp_factory())
    """Specifies the date and time the record was created."""

    uid: str = Field(default_factory=lambda: uid_factory())
    """A globally unique identifier for the event."""

    # Has an alias of 'start'
    dtstart: Annotated[
        Union[datetime.datetime, datetime.date],
        BeforeValidator(parse_date_and_datetime),
    ]
    """The start time or start day of the event."""

    # Has an alias of 'end'
    dtend: Annotated[
        Union[datetime.datetime, datetime.date, None],
        BeforeValidator(parse_date_and_datetime),
    ] = None
    """The end time or end day of the event."""

    summary: str = ""
    """The title of the event."""

    description: Optional[str] = None
    """A more complete description of the event than provided by the summary."""

    location: Optional[str] = None
    """Defines the intended venue for the activity defined by this event."""

    created_by: Optional[str] = None
    """The user name of the calendar user who created the event."""

    attendees: list[str] = Field(default_factory=list)
    """Specifies participants of the event, typically mailto addresses."""

    rrule: Optional[Recur] = None
    """A recurrence rule specification.

    Only present on master events that repeat. The first instance of the
    series starts at `dtstart`.
    """

    exdate: Annotated[
        list[Union[datetime.datetime, datetime.date]],
        BeforeValidator(parse_date_and_datetime_list),
    ] = Field(default_factory=list)
    """Defines the list of exclusions for a recurring event.

    Exclusions are compared to occurrences by calendar date only. An all day
    event stores dates, and a timed event stores UTC date times.
    """

    model_config = ConfigDict(validate_assignment=True)

    def __init__(self, **data: Any) -> None:
        """Initialize a Calendar Event.

        This method accepts keyword args with field names on the Event such as `summary`,
        `start`, `end`, `description`, etc.
        """
        if "start" in data:
            data["dtstart"] = data.pop("start")
        if "end" in data:
            data["dtend"] = data.pop("end")
        try:
            super().__init__(**data)
        except ValidationError as err:
            _LOGGER.debug("Failed to parse event %s", err)
            message = ["Failed to parse calendar EVENT"]
            for error in err.errors():
                if msg := error.get("msg"):
                    message.append(msg)
            raise CalendarParseError(": ".join(message), detailed_error=str(err)) from err

    @property
    def start(self) -> datetime.datetime | datetime.date:
        """Return the start time for the event."""
        return self.dtstart

    @property
    def end(self) -> datetime.datetime | datetime.date:
        """Return the end time for the event."""
        if self.dtend:
            return self.dtend
        if isinstance(self.dtstart, datetime.datetime):
            return self.dtstart
        return self.dtstart + datetime.timedelta(days=1)

    @property
    def all_day(self) -> bool:
        """Return True if the event is for whole days without a time."""
        return not isinstance(self.dtstart, datetime.datetime)

    @property
    def computed_duration(self) -> datetime.timedelta:
        """Return the event duration."""
        return self.end - self.start

    @property
    def recurring(self) -> bool:
        """Return true if this event is the master of a recurring series."""
        return self.rrule is not None

    def timespan_of(self, tzinfo: datetime.tzinfo) -> Timespan:
        """Return a timespan representing the event start and end."""
        return Timespan.of(
            normalize_datetime(self.start, tzinfo), normalize_datetime(self.end, tzinfo)
        )

    @model_validator(mode="after")
    def _validate_date_types(self) -> Self:
        """Validate that start and end values are the same date or datetime type."""
        dtstart = self.dtstart
        if (dtend := self.dtend) is None:
            return self
        if isinstance(dtstart, datetime.datetime):
            if not isinstance(dtend, datetime.datetime):
                raise ValueError(
                    f"Unexpected dtstart value '{dtstart}' was datetime but "
                    f"dtend value '{dtend}' was not datetime"
                )
            if (dtstart.tzinfo is None) != (dtend.tzinfo is None):
                raise ValueError(
                    f"Expected dtstart '{dtstart}' and dtend '{dtend}' to both "
                    "be floating or both have a timezone"
                )
        elif isinstance(dtend, datetime.datetime):
            raise ValueError(
                f"Unexpected dtstart value '{dtstart}' was date but "
                f"dtend value '{dtend}' was datetime"
            )
        if dtend < dtstart:
            raise ValueError(f"Expected dtend '{dtend}' to not be before dtstart '{dtstart}'")
        return self

    @model_validator(mode="after")
    def _validate_all_day_exdate(self) -> Self:
        """Validate that exclusions of an all day event are dates."""
        if not self.all_day:
            return self
        for value in self.exdate:
            if isinstance(value, datetime.datetime):
                raise ValueError(
                    f"Expected all day event exclusion '{value}' to be a date"
                )
        return self
