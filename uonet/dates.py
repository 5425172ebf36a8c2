"""
Remote date helpers.

The portal renders wall-clock times in Polish local time without an
offset (``2021-01-11 17:30:15``) and dates as ``d.m.yyyy``.
"""

from datetime import date, datetime
from zoneinfo import ZoneInfo

REMOTE_TIMEZONE = ZoneInfo("Europe/Warsaw")


def _parse_date(value: str) -> date:
    year, month, day = (int(part) for part in value.strip().split("-"))
    return date(year, month, day)


def human_date_to_date_string(value: str) -> str:
    """``22.10.2020`` / ``3.2.2020`` -> ``2020-10-22`` / ``2020-02-03``."""
    day, month, year = (int(part) for part in value.strip().split("."))
    return date(year, month, day).isoformat()


def remote_iso_to_date_string(value: str) -> str:
    """``1996-9-3 00:00:00`` -> ``1996-09-03``."""
    return _parse_date(value.strip().split(" ")[0].split("T")[0]).isoformat()


def date_string_to_remote_iso(value: str) -> str:
    """``1996-9-3`` -> ``1996-09-03T00:00:00``."""
    return f"{_parse_date(value).isoformat()}T00:00:00"


def remote_iso_to_extended_iso(value: str) -> str:
    """``2021-01-11 17:30:15`` (Warsaw time) -> ``2021-01-11T17:30:15+01:00``."""
    naive = datetime.fromisoformat(value.strip().replace(" ", "T"))
    return naive.replace(tzinfo=REMOTE_TIMEZONE).isoformat()


def remote_time_to_date_time_string(date_string: str, time_string: str) -> str:
    """Combine a date and an ``HH:MM`` Warsaw time into an offset-aware ISO string."""
    hours, minutes = (int(part) for part in time_string.strip().split(":")[:2])
    day = _parse_date(date_string)
    moment = datetime(day.year, day.month, day.day, hours, minutes, tzinfo=REMOTE_TIMEZONE)
    return moment.isoformat()
