"""
Shared fixtures: almanac windows for 2025-2026.

Term onset dates are China Standard Time. The lunar year pillar flips at
Li Chun, which is how the almanac provider is expected to report it.
"""

import json
from datetime import date, timedelta

import pytest

from fourpillars.almanac import AlmanacDay
from fourpillars.symbols import SolarTerm

TERM_DATES = {
    date(2025, 1, 5): "小寒", date(2025, 1, 20): "大寒",
    date(2025, 2, 3): "立春", date(2025, 2, 18): "雨水",
    date(2025, 3, 5): "驚蟄", date(2025, 3, 20): "春分",
    date(2025, 4, 4): "清明", date(2025, 4, 20): "穀雨",
    date(2025, 5, 5): "立夏", date(2025, 5, 21): "小滿",
    date(2025, 6, 5): "芒種", date(2025, 6, 21): "夏至",
    date(2025, 7, 7): "小暑", date(2025, 7, 22): "大暑",
    date(2025, 8, 7): "立秋", date(2025, 8, 23): "處暑",
    date(2025, 9, 7): "白露", date(2025, 9, 23): "秋分",
    date(2025, 10, 8): "寒露", date(2025, 10, 23): "霜降",
    date(2025, 11, 7): "立冬", date(2025, 11, 22): "小雪",
    date(2025, 12, 7): "大雪", date(2025, 12, 21): "冬至",
    date(2026, 1, 5): "小寒", date(2026, 1, 20): "大寒",
    date(2026, 2, 4): "立春", date(2026, 2, 18): "雨水",
    date(2026, 3, 5): "驚蟄", date(2026, 3, 20): "春分",
    date(2026, 4, 5): "清明", date(2026, 4, 20): "穀雨",
    date(2026, 5, 5): "立夏", date(2026, 5, 21): "小滿",
    date(2026, 6, 5): "芒種", date(2026, 6, 21): "夏至",
    date(2026, 7, 7): "小暑", date(2026, 7, 23): "大暑",
    date(2026, 8, 7): "立秋", date(2026, 8, 23): "處暑",
    date(2026, 9, 7): "白露", date(2026, 9, 23): "秋分",
    date(2026, 10, 8): "寒露", date(2026, 10, 23): "霜降",
    date(2026, 11, 7): "立冬", date(2026, 11, 22): "小雪",
    date(2026, 12, 7): "大雪", date(2026, 12, 22): "冬至",
}

# (first day, year pillar in force from that day)
YEAR_PILLARS = [
    (date(2024, 2, 4), "甲辰"),
    (date(2025, 2, 3), "乙巳"),
    (date(2026, 2, 4), "丙午"),
]


def lunar_year_for(day):
    current = None
    for start, pillar in YEAR_PILLARS:
        if day >= start:
            current = pillar
    return current


def build_days(start, end, terms=None):
    """Contiguous AlmanacDay records from `start` to `end` inclusive."""
    terms = TERM_DATES if terms is None else terms
    days = []
    current = start
    while current <= end:
        name = terms.get(current)
        days.append(AlmanacDay(
            gregorian=current,
            lunar_year=lunar_year_for(current),
            solar_term=SolarTerm.from_name(name) if name else None,
        ))
        current += timedelta(days=1)
    return days


def to_record(day):
    return {
        "gregorian": {"year": day.gregorian.year, "month": day.gregorian.month,
                      "date": day.gregorian.day},
        "lunar": {"year": day.lunar_year},
        "solarTerm": day.solar_term.value if day.solar_term else None,
    }


def write_year(directory, year):
    days = build_days(date(year, 1, 1), date(year, 12, 31))
    path = directory / f"{year}.json"
    path.write_text(json.dumps([to_record(d) for d in days], ensure_ascii=False),
                    encoding="utf-8")
    return path


@pytest.fixture
def window():
    """Two-year window, 2025-01-01 to 2026-12-31."""
    return build_days(date(2025, 1, 1), date(2026, 12, 31))


@pytest.fixture
def almanac_dir(tmp_path):
    """Directory with 2025.json and 2026.json."""
    write_year(tmp_path, 2025)
    write_year(tmp_path, 2026)
    return tmp_path
