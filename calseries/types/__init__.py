"""Value types used by calendar events.

The `recur` module contains the recurrence rule model and codec, the
`date_time` and `text` modules handle encoding of individual property
values in a serialized record.
"""

from .recur import BoundKind, Frequency, Recur

__all__ = [
    "BoundKind",
    "Frequency",
    "Recur",
]
