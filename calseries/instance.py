"""Identifiers for the individual occurrences of a recurring event.

Every occurrence of a recurring master event is addressed by the master uid
with the occurrence start date appended, for example `standup-20260119`.
The identifier is what a client sends back when deleting an occurrence, and
`resolve` splits it back into the master uid and the occurrence date.

The suffix is detected by splitting on the last dash, so a master uid that
itself ends in a dash and eight digits (e.g. `backup-20250101`) can't be
told apart from an occurrence of a master named `backup`. Such identifiers
are resolved as occurrences and `InstanceRef.ambiguous` can be set by a
caller that knows both interpretations exist in the store.
"""

from __future__ import annotations

import dataclasses
import datetime
import logging

__all__ = [
    "InstanceRef",
    "instance_id",
    "resolve",
]

_LOGGER = logging.getLogger(__name__)

SEPARATOR = "-"
DATE_FORMAT = "%Y%m%d"
DATE_LEN = 8


@dataclasses.dataclass(frozen=True)
class InstanceRef:
    """The result of resolving an instance or master identifier."""

    master_id: str
    """The uid of the master event."""

    occurrence_date: datetime.date | None = None
    """The start date of the occurrence, when the id refers to an occurrence."""

    is_instance: bool = False
    """True if the id refers to a single occurrence of a master event."""

    ambiguous: bool = False
    """True if the id also matches a literal master uid."""


def instance_id(
    master_id: str, occurrence_date: datetime.date | datetime.datetime
) -> str:
    """Return the identifier of the occurrence starting on the specified date.

    A datetime contributes its own calendar date, without any timezone
    conversion. Occurrences keep the timezone of their master start, so the
    date is the one in the master timezone rather than the date of the grid
    cell showing the occurrence to a viewer in another timezone.
    """
    if isinstance(occurrence_date, datetime.datetime):
        occurrence_date = occurrence_date.date()
    return f"{master_id}{SEPARATOR}{occurrence_date.strftime(DATE_FORMAT)}"


def _parse_suffix(suffix: str) -> datetime.date | None:
    if len(suffix) != DATE_LEN or not suffix.isascii() or not suffix.isdigit():
        return None
    try:
        return datetime.date(int(suffix[0:4]), int(suffix[4:6]), int(suffix[6:]))
    except ValueError:
        _LOGGER.debug("Identifier suffix %s is not a valid date", suffix)
        return None


def resolve(identifier: str) -> InstanceRef:
    """Split an identifier into its master uid and occurrence date.

    An identifier whose text after the last dash is exactly eight ASCII
    digits forming a valid YYYYMMDD date is an occurrence. Any other
    identifier is a master uid.
    """
    master_id, sep, suffix = identifier.rpartition(SEPARATOR)
    if not sep or not master_id:
        return InstanceRef(master_id=identifier)
    if (occurrence_date := _parse_suffix(suffix)) is None:
        return InstanceRef(master_id=identifier)
    _LOGGER.debug(
        "Resolved identifier %s to master %s on %s",
        identifier,
        master_id,
        occurrence_date,
    )
    return InstanceRef(
        master_id=master_id, occurrence_date=occurrence_date, is_instance=True
    )
