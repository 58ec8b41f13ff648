"""Test fixtures."""

from collections.abc import Generator
import datetime
import zoneinfo
from unittest.mock import patch

import pytest

from calseries.transport import MemoryTransport

TZ = zoneinfo.ZoneInfo("America/Los_Angeles")
PRODID = "-//example//1.2.3"


@pytest.fixture(name="_uid", autouse=True)
def mock_uid() -> Generator[None, None, None]:
    """Patch out uuid creation with a fixed value."""
    counter = 0

    def func() -> str:
        nonlocal counter
        counter += 1
        return f"mock-uid-{counter}"

    with patch("calseries.event.uid_factory", new=func):
        yield


@pytest.fixture(name="dtstamp")
def mock_dtstamp() -> datetime.datetime:
    """Fixture for the current time used when creating records."""
    return datetime.datetime(2026, 1, 10, 12, 0, 0, tzinfo=datetime.timezone.utc)


@pytest.fixture(name="transport")
def mock_transport() -> MemoryTransport:
    """Fixture to create an in-memory event transport."""
    return MemoryTransport(prodid=PRODID, tzinfo=TZ)
