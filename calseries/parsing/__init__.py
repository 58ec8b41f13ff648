"""Parsing of the serialized iCalendar records exchanged with the event store."""
