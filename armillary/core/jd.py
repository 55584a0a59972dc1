from __future__ import annotations

import logging
import math
from datetime import datetime, timezone, timedelta
from typing import Optional, Tuple
from zoneinfo import ZoneInfo

from armillary.core.errors import InvalidInstantError

logger = logging.getLogger(__name__)

J2000 = 2451545.0
UNIX_EPOCH_JD = 2440587.5
MS_PER_DAY = 86400000

MONTH_DAYS = [31, 28, 31, 30, 31, 30, 31, 31, 30, 31, 30, 31]


def is_leap_year(year: int) -> bool:
    return (year % 4 == 0 and year % 100 != 0) or year % 400 == 0


def days_in_year(year: int) -> int:
    return 366 if is_leap_year(year) else 365


def _days_from_civil(year: int, month: int, day: int) -> int:
    """Days since 1970-01-01 in the proleptic Gregorian calendar (any year)."""
    y = year - (1 if month <= 2 else 0)
    era = y // 400
    yoe = y - era * 400
    doy = (153 * (month + (-3 if month > 2 else 9)) + 2) // 5 + day - 1
    doe = yoe * 365 + yoe // 4 - yoe // 100 + doy
    return era * 146097 + doe - 719468


def day_of_year_to_month_day(day_of_year: int, year: int) -> Tuple[int, int]:
    """
    Input:  day_of_year 1..365/366, year
    Output: (month 1..12, day of month)
    """
    remaining = int(day_of_year)
    if remaining < 1:
        raise InvalidInstantError(f"day_of_year must be >= 1, got {day_of_year}")

    for i, n in enumerate(MONTH_DAYS):
        if i == 1 and is_leap_year(year):
            n += 1
        if remaining <= n:
            return i + 1, remaining
        remaining -= n

    raise InvalidInstantError(f"day_of_year {day_of_year} past the end of {year}")


def julian_date(year: int, day_of_year: int, minutes_utc: float) -> float:
    """
    Julian Date for (year, day-of-year, minutes since 00:00 UTC).

    The day-of-year is taken as an offset from 1 January, so an invalid
    day (366 in a common year) silently runs into the following year.
    JD = unix_millis / 86400000 + 2440587.5
    """
    minutes = float(minutes_utc) % 1440.0
    days = _days_from_civil(int(year), 1, 1) + int(day_of_year) - 1
    millis = days * MS_PER_DAY + int(round(minutes * 60000.0))
    return millis / MS_PER_DAY + UNIX_EPOCH_JD


def jd_to_datetime(jd: float) -> datetime:
    """Inverse of the affine transform above (UTC, tz-aware)."""
    epoch = datetime(1970, 1, 1, tzinfo=timezone.utc)
    return epoch + timedelta(days=jd - UNIX_EPOCH_JD)


def format_hm(minute_of_day: int) -> str:
    m = int(minute_of_day) % 1440
    return f"{m // 60:02d}:{m % 60:02d}"


def utc_minutes_to_local_hm(
    year: int,
    day_of_year: int,
    minute_of_day: int,
    tz: Optional[str] = None,
    longitude_deg: float = 0.0,
) -> str:
    """
    Input:  a UTC clock minute (0..1439) on the given day
            tz like "America/Anchorage" (optional)
    Output: "HH:MM" in tz when given, else UTC.

    If the zone cannot be resolved the local clock is approximated from
    the longitude (15 degrees per hour).
    """
    if not tz:
        return format_hm(minute_of_day)

    try:
        zone = ZoneInfo(tz)
        month, day = day_of_year_to_month_day(day_of_year, year)
        dt_utc = datetime(year, month, day, tzinfo=timezone.utc) + timedelta(minutes=int(minute_of_day))
        return dt_utc.astimezone(zone).strftime("%H:%M")
    except Exception as exc:
        logger.warning("timezone conversion failed for %r (%s), using longitude offset", tz, exc)

    # fallback: longitude / 15 hours
    local = math.floor(int(minute_of_day) + float(longitude_deg) * 4.0)
    return format_hm(local)
