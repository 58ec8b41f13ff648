"""
.. include:: ../README.md
"""

__all__ = [
    "config",
    "event",
    "exceptions",
    "exclusion",
    "grid",
    "instance",
    "record",
    "recurrence",
    "store",
    "timespan",
    "transport",
    "types",
    "util",
]
