"""Configuration for the event store.

Configuration is an explicit object passed to the `EventStore` and the
transport rather than global state. It may be loaded from the environment
with a fallback to a dotenv style configuration file:

```
# Calendar settings
CALDAV_CALENDAR=family
CALSERIES_UPCOMING_DAYS=14
```
"""

from __future__ import annotations

import logging
from pathlib import Path

from pydantic import AliasChoices, Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from .exceptions import CalendarParseError
from .record import DEFAULT_PRODID
from .recurrence import MAX_STEPS

__all__ = ["CalendarConfig"]

_LOGGER = logging.getLogger(__name__)

ENV_CALENDAR = "CALDAV_CALENDAR"
ENV_UPCOMING_DAYS = "CALSERIES_UPCOMING_DAYS"
ENV_MAX_EXPANSION_STEPS = "CALSERIES_MAX_EXPANSION_STEPS"
ENV_PRODID = "CALSERIES_PRODID"


class CalendarConfig(BaseSettings):
    """Settings for a calendar served by the event store.

    Fields may be set by name when constructed directly, or by their
    environment variable names from the environment or a config file.
    """

    calendar: str = Field(
        default="calendar",
        validation_alias=AliasChoices("calendar", ENV_CALENDAR),
    )
    """Name of the calendar collection holding the master events."""

    upcoming_days: int = Field(
        default=30,
        gt=0,
        validation_alias=AliasChoices("upcoming_days", ENV_UPCOMING_DAYS),
    )
    """Number of days shown in the upcoming events list."""

    max_expansion_steps: int = Field(
        default=MAX_STEPS,
        gt=0,
        validation_alias=AliasChoices("max_expansion_steps", ENV_MAX_EXPANSION_STEPS),
    )
    """Maximum number of interval steps taken when expanding a series."""

    prodid: str = Field(
        default=DEFAULT_PRODID,
        validation_alias=AliasChoices("prodid", ENV_PRODID),
    )
    """Product identifier written to serialized records."""

    model_config = SettingsConfigDict(
        frozen=True,
        extra="ignore",
        case_sensitive=False,
        env_file_encoding="utf-8",
        env_ignore_empty=True,
    )

    @classmethod
    def from_env(cls, config_file: str | Path | None = None) -> CalendarConfig:
        """Load configuration from the environment.

        Values missing from the environment are read from the config file,
        when one is specified and exists. Unset values keep their defaults.
        """
        env_file: Path | None = None
        if config_file is not None:
            env_file = Path(config_file)
            if not env_file.exists():
                _LOGGER.warning("Calendar config file %s does not exist", env_file)
                env_file = None
        try:
            config = cls(_env_file=env_file)
        except ValidationError as err:
            raise CalendarParseError(
                "Invalid calendar configuration", detailed_error=str(err)
            ) from err
        _LOGGER.info("Loaded calendar config for calendar %s", config.calendar)
        return config
