"""Encoding of master events as serialized calendar records.

The remote event store holds each master event as an iCalendar object with
a single VEVENT, with the recurrence rule and the exclusion dates stored
inline. This module converts between that text and an `Event`, so records
are validated once when they cross the transport boundary.

```python
import datetime
from calseries.event import Event
from calseries.record import decode_event, encode_event

event = Event(
    uid="standup",
    summary="Standup",
    start=datetime.date(2026, 1, 5),
    end=datetime.date(2026, 1, 6),
)
print(encode_event(event))
```
"""

from __future__ import annotations

import datetime
import logging
import zoneinfo
from typing import Any

from .event import Event
from .exceptions import CalendarParseError
from .parsing.component import ParsedComponent, encode_content, parse_content
from .parsing.const import ATTR_TZID, ATTR_VALUE
from .parsing.property import ParsedProperty, ParsedPropertyParameter
from .types.date_time import encode_date, encode_date_time, parse_date, parse_date_time
from .types.recur import decode
from .types.text import encode_text, parse_text

__all__ = [
    "DEFAULT_PRODID",
    "decode_event",
    "encode_event",
]

_LOGGER = logging.getLogger(__name__)

DEFAULT_PRODID = "-//calseries//Calendar//EN"
VERSION = "2.0"
VALUE_DATE = "DATE"
UTC_KEYS = ("UTC", "Etc/UTC")

COMPONENT_CALENDAR = "vcalendar"
COMPONENT_EVENT = "vevent"

PROP_CREATED_BY = "x-created-by"

# Text properties mapped to the Event field holding them
_TEXT_PROPERTIES = {
    "summary": "summary",
    "description": "description",
    "location": "location",
    PROP_CREATED_BY: "created_by",
}


def _encode_date_value(
    name: str, value: datetime.date | datetime.datetime
) -> ParsedProperty:
    """Encode a date or datetime property with the necessary parameters."""
    if not isinstance(value, datetime.datetime):
        return ParsedProperty(
            name=name,
            value=encode_date(value),
            params=[ParsedPropertyParameter(name=ATTR_VALUE, values=[VALUE_DATE])],
        )
    if isinstance(value.tzinfo, zoneinfo.ZoneInfo) and value.tzinfo.key not in UTC_KEYS:
        return ParsedProperty(
            name=name,
            value=value.strftime("%Y%m%dT%H%M%S"),
            params=[ParsedPropertyParameter(name=ATTR_TZID, values=[value.tzinfo.key])],
        )
    return ParsedProperty(name=name, value=encode_date_time(value))


def _parse_date_values(prop: ParsedProperty) -> list[datetime.date | datetime.datetime]:
    """Parse a date or datetime property, which may hold comma separated values."""
    tzid = prop.get_parameter_value(ATTR_TZID)
    is_date = (prop.get_parameter_value(ATTR_VALUE) or "").upper() == VALUE_DATE
    results: list[datetime.date | datetime.datetime] = []
    for value in prop.value.split(","):
        value = value.strip()
        if is_date or "T" not in value:
            results.append(parse_date(value))
        else:
            results.append(parse_date_time(value, tzid))
    return results


def encode_event(event: Event, prodid: str = DEFAULT_PRODID) -> str:
    """Serialize a master event as a calendar record."""
    properties = [
        ParsedProperty(name="uid", value=event.uid),
        ParsedProperty(name="dtstamp", value=encode_date_time(event.dtstamp)),
        ParsedProperty(name="summary", value=encode_text(event.summary)),
    ]
    if event.description:
        properties.append(
            ParsedProperty(name="description", value=encode_text(event.description))
        )
    if event.location:
        properties.append(
            ParsedProperty(name="location", value=encode_text(event.location))
        )
    properties.append(_encode_date_value("dtstart", event.dtstart))
    if event.dtend is not None:
        properties.append(_encode_date_value("dtend", event.dtend))
    if event.rrule is not None:
        properties.append(ParsedProperty(name="rrule", value=event.rrule.as_rrule_str()))
    for exdate in event.exdate:
        properties.append(_encode_date_value("exdate", exdate))
    for attendee in event.attendees:
        properties.append(ParsedProperty(name="attendee", value=attendee))
    if event.created_by:
        properties.append(
            ParsedProperty(name=PROP_CREATED_BY, value=encode_text(event.created_by))
        )

    calendar = ParsedComponent(
        name=COMPONENT_CALENDAR,
        properties=[
            ParsedProperty(name="version", value=VERSION),
            ParsedProperty(name="prodid", value=prodid),
        ],
        components=[ParsedComponent(name=COMPONENT_EVENT, properties=properties)],
    )
    return encode_content([calendar])


def _event_values(component: ParsedComponent) -> dict[str, Any]:
    """Build the Event constructor arguments from a VEVENT component."""
    values: dict[str, Any] = {}
    attendees: list[str] = []
    exdates: list[datetime.date | datetime.datetime] = []
    for prop in component.properties:
        if prop.name in _TEXT_PROPERTIES:
            values[_TEXT_PROPERTIES[prop.name]] = parse_text(prop.value)
        elif prop.name == "uid":
            values["uid"] = prop.value
        elif prop.name in ("dtstart", "dtend", "dtstamp"):
            values[prop.name] = _parse_date_values(prop)[0]
        elif prop.name == "rrule":
            values["rrule"] = decode(prop.value)
        elif prop.name == "exdate":
            exdates.extend(_parse_date_values(prop))
        elif prop.name == "attendee":
            attendees.append(prop.value)
        else:
            _LOGGER.debug("Ignoring unsupported event property %s", prop.name)
    values["attendees"] = attendees
    values["exdate"] = exdates
    return values


def decode_event(content: str) -> Event:
    """Parse a calendar record into its master event.

    Raises a `CalendarParseError` if the record is not a calendar with an
    event or its values are invalid.
    """
    components = parse_content(content)
    if not components or components[0].name != COMPONENT_CALENDAR:
        raise CalendarParseError("Expected record to contain a VCALENDAR")
    if (component := components[0].get_component(COMPONENT_EVENT)) is None:
        raise CalendarParseError("Expected record to contain a VEVENT")
    try:
        values = _event_values(component)
    except ValueError as err:
        raise CalendarParseError(
            "Failed to parse calendar EVENT values", detailed_error=str(err)
        ) from err
    if not values.get("uid"):
        raise CalendarParseError("Expected calendar EVENT to have a UID")
    if not values.get("dtstart"):
        raise CalendarParseError("Expected calendar EVENT to have a DTSTART")
    if values.get("dtstamp") is not None and not isinstance(
        values["dtstamp"], datetime.datetime
    ):
        del values["dtstamp"]
    return Event(**values)
