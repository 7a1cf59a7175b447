"""Exceptions raised by the chart calculation and almanac loading."""


class BaziError(Exception):
    """Base class for chart calculation failures."""


class DateNotFound(BaziError, LookupError):
    """The target date has no record in the supplied almanac window."""


class NoSectionalTermFound(BaziError, LookupError):
    """The backward scan for a month-opening solar term ran out of data.

    Widen the almanac window (request an earlier year too).
    """


class AlmanacUnavailable(BaziError):
    """A provider could not deliver the almanac for one year."""

    def __init__(self, year: int, reason: str):
        super().__init__(f"Almanac for {year} unavailable: {reason}")
        self.year = year
        self.reason = reason
