"""Library for handling properties and parameters of a content line.

A property is an individual attribute of a calendar component. This parser
converts a single unfolded content line into a `ParsedProperty` without
interpreting the meaning of the value. For example, given a content line of:

  DTSTART;VALUE=DATE:20260105

This library would create:

  ParsedProperty(
    name='dtstart',
    value='20260105',
    params=[ParsedPropertyParameter(name='VALUE', values=['DATE'])]
  )
"""

from __future__ import annotations

import re
from collections.abc import Generator, Iterable
from dataclasses import dataclass
from typing import Optional

from calseries.exceptions import CalendarParseError

# Parameter values containing these characters must be quoted
_UNSAFE_CHAR_RE = re.compile(r"[,:;]")
_RE_CONTROL_CHARS = re.compile("[\x00-\x08\x0a-\x1f\x7f]")
_RE_NAME = re.compile("[A-Z0-9-]+")
_QUOTE = '"'


@dataclass
class ParsedPropertyParameter:
    """A property parameter such as VALUE=DATE or TZID=Europe/Berlin."""

    name: str
    values: list[str]


@dataclass
class ParsedProperty:
    """A property parsed from a content line."""

    name: str
    value: str
    params: Optional[list[ParsedPropertyParameter]] = None

    def get_parameter_value(self, name: str) -> str | None:
        """Return the single value of the named parameter, if present."""
        for param in self.params or ():
            if param.name.upper() != name.upper():
                continue
            if len(param.values) > 1:
                raise ValueError(
                    f"Expected only a single parameter value, got {param.values}"
                )
            return param.values[0] if param.values else None
        return None

    def ics(self) -> str:
        """Encode the property as an unfolded content line."""
        result = [self.name.upper()]
        for param in self.params or ():
            values = ",".join(
                f'"{value}"' if _UNSAFE_CHAR_RE.search(value) else value
                for value in param.values
            )
            result.append(f";{param.name.upper()}={values}")
        result.append(f":{self.value}")
        return "".join(result)

    @classmethod
    def from_ics(cls, contentline: str) -> ParsedProperty:
        """Decode a ParsedProperty from a content line.

        Will raise a CalendarParseError on failure.
        """
        return _parse_line(contentline)


def _split_param_value(line: str, pos: int) -> tuple[str, int]:
    """Read one parameter value starting at pos, returning it and the new position."""
    if line.startswith(_QUOTE, pos):
        if (end_quote := line.find(_QUOTE, pos + 1)) == -1:
            raise CalendarParseError(
                "Unclosed quoted parameter value", detailed_error=line
            )
        return line[pos + 1 : end_quote], end_quote + 1
    end = pos
    while end < len(line) and line[end] not in ",;:":
        end += 1
    return line[pos:end], end


def _parse_line(line: str) -> ParsedProperty:
    """Parse a single property line."""
    name_match = re.match(r"[^;:]*", line)
    property_name = name_match.group(0).upper() if name_match else ""
    pos = len(property_name)
    if pos >= len(line):
        raise CalendarParseError(
            "Invalid property line, expected ';' or ':' after property name",
            detailed_error=line,
        )
    if not _RE_NAME.fullmatch(property_name):
        raise CalendarParseError(
            f"Invalid property name '{property_name}'", detailed_error=line
        )

    params: list[ParsedPropertyParameter] = []
    while line[pos] == ";":
        if (equals := line.find("=", pos)) == -1:
            raise CalendarParseError(
                "Invalid parameter format: missing '='", detailed_error=line
            )
        param_name = line[pos + 1 : equals].upper()
        if not _RE_NAME.fullmatch(param_name):
            raise CalendarParseError(
                f"Invalid parameter name '{param_name}'", detailed_error=line
            )
        values: list[str] = []
        pos = equals
        while pos < len(line) and line[pos] in "=,":
            value, pos = _split_param_value(line, pos + 1)
            if _RE_CONTROL_CHARS.search(value):
                raise CalendarParseError(
                    f"Invalid parameter value '{value}'", detailed_error=line
                )
            values.append(value)
        if pos >= len(line):
            raise CalendarParseError(
                "Unexpected end of line after parameter value", detailed_error=line
            )
        params.append(ParsedPropertyParameter(name=param_name, values=values))

    if line[pos] != ":":
        raise CalendarParseError(
            f"Expected ':' before property value, got '{line[pos]}'",
            detailed_error=line,
        )
    property_value = line[pos + 1 :]
    if _RE_CONTROL_CHARS.search(property_value):
        raise CalendarParseError(
            f"Property value contains control characters: {property_value}",
            detailed_error=line,
        )
    return ParsedProperty(
        name=property_name.lower(),
        value=property_value,
        params=params or None,
    )


def parse_contentlines(
    contentlines: Iterable[str],
) -> Generator[ParsedProperty, None, None]:
    """Parse content lines into ParsedProperty objects."""
    for contentline in contentlines:
        if not contentline:
            continue
        try:
            yield ParsedProperty.from_ics(contentline)
        except CalendarParseError as err:
            raise CalendarParseError(
                "Failed to parse calendar contents", detailed_error=str(err)
            ) from err
