from datetime import date, datetime, timezone
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

WEEKDAYS = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")


def now_in_zone(tz_name: Optional[str]) -> datetime:
    """
    Current time in the given zone. Falls back to UTC when tz_name is empty or unknown.
    """
    now_utc = datetime.now(timezone.utc)

    if not tz_name:
        return now_utc

    try:
        zone = ZoneInfo(tz_name)
    except (ZoneInfoNotFoundError, ValueError):
        return now_utc

    return now_utc.astimezone(zone)


def to_zone(moment: datetime, tz_name: Optional[str] = None) -> datetime:
    """The same instant as wall-clock time in tz_name (naive values are taken as-is)."""
    if moment.tzinfo is not None and tz_name:
        try:
            return moment.astimezone(ZoneInfo(tz_name))
        except (ZoneInfoNotFoundError, ValueError):
            pass
    return moment


def day_key(moment: datetime, tz_name: Optional[str] = None) -> date:
    """Calendar day a timestamp falls on, seen from tz_name."""
    return to_zone(moment, tz_name).date()


def weekday_name(day: date) -> str:
    return WEEKDAYS[day.weekday()]
