"""
Calendar utilities for pillar calculations.
Handles Julian day counting, the 23:00 BaZi day boundary,
LMT correction, and timestamp normalisation.
"""

from datetime import date, datetime, timedelta, timezone
from typing import Union
import swisseph as swe

# The BaZi day turns over at the start of the Zi hour
DAY_BOUNDARY_HOUR = 23


def julian_day_number(day: Union[date, datetime]) -> int:
    """
    Julian Day Number of a Gregorian calendar date (time of day ignored).

    swe.julday gives the JD at 00:00 UT, which always ends in .5;
    the civil day number is that value rounded up.
    """
    return int(swe.julday(day.year, day.month, day.day, 0.0) + 0.5)


def days_between(start: Union[date, datetime], end: Union[date, datetime]) -> int:
    """
    Whole calendar days from `start` to `end` (negative if `end` is earlier).

    Counts date boundaries, not elapsed time: 23:59 → 00:01 is one day.
    """
    return julian_day_number(end) - julian_day_number(start)


def effective_bazi_date(moment: datetime) -> date:
    """
    The calendar date a moment belongs to in BaZi reckoning.

    From 23:00 onward the moment already belongs to the next day.
    """
    if moment.hour >= DAY_BOUNDARY_HOUR:
        return moment.date() + timedelta(days=1)
    return moment.date()


def lmt_correction(longitude: float, standard_meridian: float = 120.0) -> float:
    """
    Local Mean Time correction in minutes for `--lmt`.

    Four minutes per degree of longitude away from the zone's standard
    meridian; negative west of it.
    """
    return (longitude - standard_meridian) * 4.0


def apply_lmt(clock_time: datetime, longitude: float,
              standard_meridian: float = 120.0) -> datetime:
    """Convert clock time to Local Mean Time."""
    correction_minutes = lmt_correction(longitude, standard_meridian)
    return clock_time + timedelta(minutes=correction_minutes)


def iso_timestamp(moment: datetime) -> str:
    """
    ISO 8601 form of a moment.

    Aware datetimes are expressed in UTC; naive ones are kept as
    wall-clock time since they carry no offset to normalise against.
    """
    if moment.tzinfo is not None and moment.utcoffset() is not None:
        return moment.astimezone(timezone.utc).isoformat()
    return moment.isoformat()
