"""Library for handling components of a serialized calendar record.

A record consists of a VCALENDAR component holding a VEVENT. Components
created here have no semantic meaning, but hold all the properties needed
to build an `calseries.event.Event` elsewhere.
"""

from __future__ import annotations

import re
import textwrap
from collections.abc import Generator
from dataclasses import dataclass, field

from calseries.exceptions import CalendarParseError

from .const import (
    ATTR_BEGIN,
    ATTR_BEGIN_LOWER,
    ATTR_END,
    ATTR_END_LOWER,
    FOLD,
    FOLD_INDENT,
    FOLD_LEN,
)
from .property import ParsedProperty, parse_contentlines

FOLD_RE = re.compile(FOLD, flags=re.MULTILINE)
LINES_RE = re.compile(r"\r?\n")


@dataclass
class ParsedComponent:
    """A component with its properties and sub-components."""

    name: str
    properties: list[ParsedProperty] = field(default_factory=list)
    components: list[ParsedComponent] = field(default_factory=list)

    def get_property(self, name: str) -> ParsedProperty | None:
        """Return the first property with the specified name."""
        for prop in self.properties:
            if prop.name == name:
                return prop
        return None

    def get_properties(self, name: str) -> list[ParsedProperty]:
        """Return all properties with the specified name."""
        return [prop for prop in self.properties if prop.name == name]

    def get_component(self, name: str) -> ParsedComponent | None:
        """Return the first sub-component with the specified name."""
        for component in self.components:
            if component.name == name:
                return component
        return None

    def ics(self) -> str:
        """Encode a component as folded content lines."""
        contentlines = []
        name = self.name.upper()
        contentlines.append(f"{ATTR_BEGIN}:{name}")
        for prop in self.properties:
            contentlines.extend(_fold(prop.ics()))
        contentlines.extend([component.ics() for component in self.components])
        contentlines.append(f"{ATTR_END}:{name}")
        return "\n".join(contentlines)


def _fold(contentline: str) -> list[str]:
    return textwrap.wrap(
        contentline,
        width=FOLD_LEN,
        subsequent_indent=FOLD_INDENT,
        drop_whitespace=False,
        replace_whitespace=False,
        expand_tabs=False,
        break_on_hyphens=False,
    ) or [contentline]


def unfolded_lines(content: str) -> Generator[str, None, None]:
    """Read content and unfold lines."""
    content = FOLD_RE.sub("", content)
    yield from LINES_RE.split(content)


def parse_content(content: str) -> list[ParsedComponent]:
    """Parse content into components holding raw properties.

    This walks through each line and uses a stack to associate properties
    with the current component.
    """
    stack: list[ParsedComponent] = [ParsedComponent(name="stream")]
    for prop in parse_contentlines(unfolded_lines(content)):
        if prop.name == ATTR_BEGIN_LOWER:
            stack.append(ParsedComponent(name=prop.value.lower()))
        elif prop.name == ATTR_END_LOWER:
            if len(stack) == 1:
                raise CalendarParseError(
                    f"Unexpected '{ATTR_END}:{prop.value}' without {ATTR_BEGIN}"
                )
            component = stack.pop()
            if prop.value.lower() != component.name:
                raise CalendarParseError(
                    f"Unexpected '{ATTR_END}:{prop.value}', "
                    f"expected {ATTR_END}:{component.name.upper()}"
                )
            stack[-1].components.append(component)
        else:
            stack[-1].properties.append(prop)
    if len(stack) != 1:
        raise CalendarParseError(
            f"Missing {ATTR_END} for component {stack[-1].name.upper()}"
        )
    return stack[0].components


def encode_content(components: list[ParsedComponent]) -> str:
    """Encode a set of components into content."""
    return "\n".join([component.ics() for component in components])
