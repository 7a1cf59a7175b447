"""
Almanac records and the lookups the pillar calculators run over them.

An almanac window is a contiguous, ascending list of AlmanacDay records,
one per calendar day, usually spanning the target year and the year
before it. The core never sorts the window; providers must deliver it
in order.
"""

import json
import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from datetime import date, datetime
from pathlib import Path
from typing import Optional, Protocol, Sequence, Union

from fourpillars.errors import AlmanacUnavailable, DateNotFound, NoSectionalTermFound
from fourpillars.symbols import Pillar, SolarTerm

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AlmanacDay:
    gregorian: date
    lunar_year: str  # sexagenary, e.g. "乙巳"
    solar_term: Optional[SolarTerm] = None  # set only on the day of onset

    @classmethod
    def from_record(cls, record: dict) -> "AlmanacDay":
        """
        Parse one almanac JSON record:

            {"gregorian": {"year": 2026, "month": 1, "date": 5},
             "lunar": {"year": "乙巳"},
             "solarTerm": "小寒"}
        """
        g = record["gregorian"]
        term_name = record.get("solarTerm")
        lunar_year = record["lunar"]["year"]
        Pillar.parse(lunar_year)
        return cls(
            gregorian=date(int(g["year"]), int(g["month"]), int(g["date"])),
            lunar_year=lunar_year,
            solar_term=SolarTerm.from_name(term_name) if term_name else None,
        )


@dataclass(frozen=True)
class ActiveTerm:
    """The sectional term in force on a given day."""
    term: SolarTerm
    index: int  # window position of the term's onset day
    lunar_year: str


# ============================================================
# LOOKUPS
# ============================================================

def locate(days: Sequence[AlmanacDay], target: Union[date, datetime]) -> int:
    """Index of the record for `target`'s calendar date."""
    if isinstance(target, datetime):
        target = target.date()
    for i, day in enumerate(days):
        if day.gregorian == target:
            return i
    raise DateNotFound(f"{target.isoformat()} not found in almanac window "
                       f"of {len(days)} days")


def resolve_active_term(days: Sequence[AlmanacDay], index: int) -> ActiveTerm:
    """
    Search backward from `index` for the most recent sectional term.

    Mid-point terms (e.g. Winter Solstice) are skipped.
    """
    for i in range(index, -1, -1):
        term = days[i].solar_term
        if term is not None and term.is_sectional:
            return ActiveTerm(term=term, index=i, lunar_year=days[i].lunar_year)
    raise NoSectionalTermFound(
        f"No sectional solar term at or before index {index}; "
        f"the almanac window needs more lookback"
    )


def find_last_term(days: Sequence[AlmanacDay], index: int,
                   term: SolarTerm) -> Optional[int]:
    """Index of the latest onset of `term` at or before `index`, if any."""
    for i in range(index, -1, -1):
        if days[i].solar_term is term:
            return i
    return None


# ============================================================
# PROVIDERS
# ============================================================

class AlmanacProvider(Protocol):
    def fetch_year(self, year: int) -> list[AlmanacDay]:
        """Every day of `year` in order; raises AlmanacUnavailable."""
        ...


class JsonAlmanacProvider:
    """Reads `<directory>/<year>.json`, one JSON array per Gregorian year."""

    def __init__(self, directory: Union[str, Path]):
        self.directory = Path(directory)

    def path_for(self, year: int) -> Path:
        return self.directory / f"{year}.json"

    def fetch_year(self, year: int) -> list[AlmanacDay]:
        path = self.path_for(year)
        try:
            with open(path, encoding="utf-8") as f:
                records = json.load(f)
        except (OSError, ValueError) as e:
            raise AlmanacUnavailable(year, str(e)) from e

        if not isinstance(records, list):
            raise AlmanacUnavailable(year, f"{path} does not hold a JSON array")
        try:
            return [AlmanacDay.from_record(r) for r in records]
        except (KeyError, TypeError, ValueError) as e:
            raise AlmanacUnavailable(year, f"malformed record in {path}: {e!r}") from e


def _fetch_or_empty(provider: AlmanacProvider, year: int) -> list[AlmanacDay]:
    try:
        days = provider.fetch_year(year)
    except AlmanacUnavailable as e:
        logger.warning("%s; continuing without it", e)
        return []
    logger.debug("Loaded %d almanac days for %d", len(days), year)
    return days


def load_window(provider: AlmanacProvider, year: int) -> list[AlmanacDay]:
    """
    Almanac window for `year - 1` and `year`, in chronological order.

    Both years are fetched concurrently. A year the provider cannot
    deliver contributes nothing; lookups fail later only if the
    remaining data is insufficient.
    """
    years = (year - 1, year)
    with ThreadPoolExecutor(max_workers=len(years)) as pool:
        parts = list(pool.map(lambda y: _fetch_or_empty(provider, y), years))
    return [day for part in parts for day in part]
