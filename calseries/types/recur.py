"""Implementation of the minimal recurrence rule grammar.

A recurrence rule is the compact FREQ/INTERVAL/COUNT/UNTIL description
stored inline on a master event. Only this subset of the rfc5545 grammar is
understood: rules using BYDAY, BYMONTHDAY or other parts are not expanded,
those parts are ignored when decoding.

Many UI components produce and consume the rule as a string. This is an
example of creating a weekly rule and reading it back:

```python
from calseries.types.recur import BoundKind, Frequency, decode, encode

rule = encode(Frequency.WEEKLY, 1, BoundKind.COUNT, 4)
print(rule)
print(decode(rule))
```

The above example will output something like this:
```
FREQ=WEEKLY;INTERVAL=1;COUNT=4
freq=<Frequency.WEEKLY: 'WEEKLY'> interval=1 count=4 until=None
```
"""

from __future__ import annotations

import datetime
import enum
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

from calseries.exceptions import MalformedRule
from calseries.util import parse_date_and_datetime

from .date_time import encode_date_or_date_time, parse_date_or_date_time

__all__ = [
    "BoundKind",
    "Frequency",
    "Recur",
    "decode",
    "encode",
]

_LOGGER = logging.getLogger(__name__)

ATTR_FREQ = "FREQ"
ATTR_INTERVAL = "INTERVAL"
ATTR_COUNT = "COUNT"
ATTR_UNTIL = "UNTIL"
RULE_PREFIX = "RRULE:"


# Note: This can be StrEnum in python 3.11 and higher
class Frequency(str, enum.Enum):
    """Type of recurrence rule."""

    DAILY = "DAILY"
    """Repeating events based on an interval of a day or more."""

    WEEKLY = "WEEKLY"
    """Repeating events based on an interval of a week or more."""

    MONTHLY = "MONTHLY"
    """Repeating events based on an interval of a month or more."""

    YEARLY = "YEARLY"
    """Repeating events based on an interval of a year or more."""


class BoundKind(str, enum.Enum):
    """How the number of instances of a recurrence rule is bounded."""

    NONE = "NONE"
    """The rule repeats forever."""

    COUNT = "COUNT"
    """The rule repeats a fixed number of times."""

    UNTIL = "UNTIL"
    """The rule repeats until an inclusive end date or time."""


class Recur(BaseModel):
    """A recurrence rule specification.

    At most one of `count` or `until` may be set. A rule with neither is
    unbounded and is capped when expanded.
    """

    freq: Frequency

    interval: int = Field(default=1, gt=0)
    """Interval at which the recurrence rule repeats."""

    count: Optional[int] = Field(default=None, gt=0)
    """The number of occurrences to bound the recurrence."""

    until: Annotated[
        Union[datetime.datetime, datetime.date, None],
        BeforeValidator(parse_date_and_datetime),
    ] = None
    """The inclusive end date of the recurrence, or the last instance."""

    model_config = ConfigDict(validate_assignment=True)

    @model_validator(mode="after")
    def _validate_one_bound(self) -> Self:
        """Validate that only one of count or until may be set."""
        if self.count is not None and self.until is not None:
            raise ValueError("Only one of COUNT or UNTIL may be set")
        return self

    @property
    def bound_kind(self) -> BoundKind:
        """Return how the rule is bounded."""
        if self.count is not None:
            return BoundKind.COUNT
        if self.until is not None:
            return BoundKind.UNTIL
        return BoundKind.NONE

    @property
    def bound_value(self) -> int | datetime.date | datetime.datetime | None:
        """Return the value of the rule bound, if any."""
        if self.count is not None:
            return self.count
        return self.until

    def as_rrule_str(self) -> str:
        """Return the Recur instance as a canonical RRULE string."""
        return encode(self.freq, self.interval, self.bound_kind, self.bound_value)

    @classmethod
    def from_rrule(cls, rrule_str: str) -> Recur:
        """Create a Recur object from an RRULE string."""
        return decode(rrule_str)


def _build_recur(**values: Any) -> Recur:
    try:
        return Recur(**values)
    except ValidationError as err:
        _LOGGER.debug("Failed to build recurrence rule %s: %s", values, err)
        messages = [error["msg"] for error in err.errors() if error.get("msg")]
        raise MalformedRule(
            ": ".join(["Invalid recurrence rule", *messages]),
            detailed_error=str(err),
        ) from err


def _parse_frequency(value: Any) -> Frequency:
    if isinstance(value, Frequency):
        return value
    try:
        return Frequency(str(value).strip().upper())
    except ValueError as err:
        raise MalformedRule(f"Unsupported recurrence frequency '{value}'") from err


def _parse_int(name: str, value: Any) -> int:
    if isinstance(value, bool):
        raise MalformedRule(f"Expected integer {name} but was '{value}'")
    if isinstance(value, int):
        return value
    try:
        return int(str(value).strip())
    except ValueError as err:
        raise MalformedRule(f"Expected integer {name} but was '{value}'") from err


def _parse_until(value: Any) -> datetime.date | datetime.datetime:
    if isinstance(value, datetime.date):
        return value
    try:
        return parse_date_or_date_time(str(value).strip())
    except ValueError as err:
        raise MalformedRule(f"Expected date or date-time UNTIL but was '{value}'") from err


def encode(
    frequency: Frequency | str,
    interval: int = 1,
    bound_kind: BoundKind = BoundKind.NONE,
    bound_value: int | str | datetime.date | datetime.datetime | None = None,
) -> str:
    """Encode the parts of a recurrence rule as a canonical RRULE string.

    The INTERVAL is always included, even when it is 1, so that the rule
    round trips unambiguously.
    """
    values: dict[str, Any] = {
        "freq": _parse_frequency(frequency),
        "interval": _parse_int(ATTR_INTERVAL, interval),
    }
    if bound_kind == BoundKind.COUNT:
        values["count"] = _parse_int(ATTR_COUNT, bound_value)
    elif bound_kind == BoundKind.UNTIL:
        values["until"] = _parse_until(bound_value)
    elif bound_value is not None:
        raise MalformedRule(f"Unexpected bound value for unbounded rule: {bound_value}")
    rule = _build_recur(**values)

    result = [f"{ATTR_FREQ}={rule.freq.value}", f"{ATTR_INTERVAL}={rule.interval}"]
    if rule.count is not None:
        result.append(f"{ATTR_COUNT}={rule.count}")
    if rule.until is not None:
        result.append(f"{ATTR_UNTIL}={encode_date_or_date_time(rule.until)}")
    return ";".join(result)


def decode(rule: str) -> Recur:
    """Decode an RRULE string into a Recur.

    Escaped separators are accepted, and unknown parts or fragments without
    a value are ignored. A missing or unsupported frequency, or a value that
    does not parse, raises `MalformedRule`.
    """
    if not isinstance(rule, str):
        raise MalformedRule(f"Expected recurrence rule string but was {rule!r}")
    value = rule.strip()
    if value.upper().startswith(RULE_PREFIX):
        value = value[len(RULE_PREFIX) :]
    value = value.replace("\\;", ";").replace("\\,", ",")

    parts: dict[str, str] = {}
    for part in value.split(";"):
        key, sep, part_value = part.partition("=")
        key = key.strip().upper()
        if not sep:
            if key:
                _LOGGER.debug("Ignoring recurrence rule fragment '%s'", part)
            continue
        if key not in (ATTR_FREQ, ATTR_INTERVAL, ATTR_COUNT, ATTR_UNTIL):
            _LOGGER.debug("Ignoring unsupported recurrence rule part '%s'", part)
            continue
        parts[key] = part_value.strip()

    if ATTR_FREQ not in parts:
        raise MalformedRule(f"Recurrence rule is missing {ATTR_FREQ}: '{rule}'")
    values: dict[str, Any] = {"freq": _parse_frequency(parts[ATTR_FREQ])}
    if ATTR_INTERVAL in parts:
        values["interval"] = _parse_int(ATTR_INTERVAL, parts[ATTR_INTERVAL])
    if ATTR_COUNT in parts:
        values["count"] = _parse_int(ATTR_COUNT, parts[ATTR_COUNT])
    if ATTR_UNTIL in parts:
        values["until"] = _parse_until(parts[ATTR_UNTIL])
    return _build_recur(**values)
