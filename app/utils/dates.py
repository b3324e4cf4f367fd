"""Datetime helpers."""

from __future__ import annotations

import os
from datetime import date, datetime

import pendulum

DEFAULT_TZ = "America/Los_Angeles"


def timezone_name() -> str:
    return os.environ.get("TIMEZONE", DEFAULT_TZ)


def now_in_tz() -> pendulum.DateTime:
    tz = pendulum.timezone(timezone_name())
    return pendulum.now(tz)


def parse_moment(value: object) -> date | None:
    """Coerce a catalog date value (date, datetime or ISO string) to a date/datetime."""
    if value is None or value == "":
        return None
    if isinstance(value, date):
        return value
    parsed = pendulum.parse(str(value), exact=True, tz=None)
    if isinstance(parsed, date):
        return parsed
    raise ValueError(f"Not a date: {value!r}")


def same_calendar_day(value: date, now: date) -> bool:
    """Compare calendar days; aware values are read in the timezone of `now`, or the shop's."""
    if isinstance(value, datetime) and value.tzinfo is not None:
        if isinstance(now, datetime) and now.tzinfo is not None:
            value = value.astimezone(now.tzinfo)
        else:
            value = value.astimezone(pendulum.timezone(timezone_name()))
    return (value.year, value.month, value.day) == (now.year, now.month, now.day)
