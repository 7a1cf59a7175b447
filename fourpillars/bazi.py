"""
BaZi (Four Pillars of Destiny) computation engine.

Handles:
- Year pillar, anchored at Li Chun (Start of Spring) from almanac data
- Month pillar via Five Tigers Escape from the active sectional term
- Day pillar via sexagenary offset from a fixed anchor day
- Hour pillar via Five Rats Escape from the (23:00-shifted) day stem
- Hidden stem extraction and full chart assembly

Design principle: This module COMPUTES. It does not interpret.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Sequence

from fourpillars.almanac import (
    AlmanacDay, AlmanacProvider, find_last_term, load_window, locate,
    resolve_active_term,
)
from fourpillars.calendar import days_between, effective_bazi_date, iso_timestamp
from fourpillars.config import DEFAULT_ANCHOR, Anchor
from fourpillars.symbols import (
    RAT_START_STEMS, TERM_TO_BRANCH, TIGER_START_STEMS, HeavenlyStem, Pillar,
    SolarTerm, branch_for_hour, hidden_stems, stem_at,
)

logger = logging.getLogger(__name__)

POSITIONS = ("year", "month", "day", "hour")


# ============================================================
# PILLAR COMPUTATION
# ============================================================

def year_pillar(days: Sequence[AlmanacDay], index: int) -> tuple[Pillar, bool]:
    """
    Compute the Year Pillar.

    The BaZi year starts at Li Chun (Start of Spring), usually Feb 3-5,
    so the pillar is the lunar year recorded on the latest Li Chun day
    at or before `index`.

    If the window holds no Li Chun, the lunar year of the active
    sectional term is used instead and the result is flagged degraded.

    Returns:
        (pillar, degraded)
    """
    li_chun = find_last_term(days, index, SolarTerm.LI_CHUN)
    if li_chun is not None:
        return Pillar.parse(days[li_chun].lunar_year), False

    active = resolve_active_term(days, index)
    logger.warning(
        "No Li Chun at or before %s in the almanac window; year pillar "
        "taken from %s on %s", days[index].gregorian.isoformat(),
        active.term.value, days[active.index].gregorian.isoformat(),
    )
    return Pillar.parse(active.lunar_year), True


def month_pillar(year: Pillar, term: SolarTerm) -> Pillar:
    """
    Compute the Month Pillar using the Five Tigers Escape (Wu Hu Dun) formula.

    The month branch is fixed by the sectional term that opened the month.
    The month stem is derived from the year stem:
    - Year stem Jia/Ji → month 1 stem starts at Bing
    - Year stem Yi/Geng → month 1 stem starts at Wu
    - Year stem Bing/Xin → month 1 stem starts at Geng
    - Year stem Ding/Ren → month 1 stem starts at Ren
    - Year stem Wu/Gui → month 1 stem starts at Jia
    """
    if term not in TERM_TO_BRANCH:
        raise ValueError(f"{term.value} is not a sectional term")
    branch = TERM_TO_BRANCH[term]

    start_stem = TIGER_START_STEMS[year.stem.index]
    # Months counted from Tiger (index 2)
    months_from_tiger = (branch.index - 2) % 12

    return Pillar(stem=stem_at(start_stem + months_from_tiger), branch=branch)


def day_pillar(moment: datetime, anchor: Anchor = DEFAULT_ANCHOR) -> Pillar:
    """
    Compute the Day Pillar.

    Counts calendar days from the anchor and steps the anchor pillar
    that many places along the 60-cycle. From 23:00 the moment already
    belongs to the next day's pillar.
    """
    diff = days_between(anchor.date, effective_bazi_date(moment))
    return anchor.pillar.shift(diff)


def hour_pillar(moment: datetime, day: Pillar) -> Pillar:
    """
    Compute the Hour Pillar using Five Rats Escape (Wu Shu Dun) formula.

    Chinese hours (shi chen) are 2-hour blocks:
    23:00-00:59 = Zi (Rat)      = branch 0
    01:00-02:59 = Chou (Ox)     = branch 1
    ...
    21:00-22:59 = Hai (Pig)     = branch 11

    Args:
        moment: the unshifted clock time
        day: day pillar from day_pillar(), already advanced for hours >= 23
    """
    branch = branch_for_hour(moment.hour)
    if branch is None:
        raise ValueError(f"Hour out of range: {moment.hour}")

    start_stem = RAT_START_STEMS[day.stem.index]
    stem = stem_at(start_stem + branch.index)
    logger.debug("Hour stem %s (day stem %s, hour %02d:%02d)",
                 stem.chinese, day.stem.chinese, moment.hour, moment.minute)

    return Pillar(stem=stem, branch=branch)


# ============================================================
# FULL CHART COMPUTATION
# ============================================================

@dataclass(frozen=True)
class BaziChart:
    moment: datetime
    year: Pillar
    month: Pillar
    day: Pillar
    hour: Pillar
    active_term: SolarTerm
    year_degraded: bool = False  # year pillar came from the fallback term

    @property
    def pillars(self) -> tuple[Pillar, Pillar, Pillar, Pillar]:
        return (self.year, self.month, self.day, self.hour)

    @property
    def hidden_stems(self) -> tuple[tuple[HeavenlyStem, ...], ...]:
        return tuple(hidden_stems(p.branch) for p in self.pillars)

    @property
    def day_master(self) -> HeavenlyStem:
        return self.day.stem

    def to_dict(self):
        return {
            "isoDate": iso_timestamp(self.moment),
            "pillars": [str(p) for p in self.pillars],
            "activeTerm": self.active_term.value,
            "hiddenStems": ["".join(s.chinese for s in stems)
                            for stems in self.hidden_stems],
            "yearDegraded": self.year_degraded,
            "details": {pos: p.to_dict(pos)
                        for pos, p in zip(POSITIONS, self.pillars)},
        }


def chart_from_days(moment: datetime, days: Sequence[AlmanacDay],
                    anchor: Anchor = DEFAULT_ANCHOR) -> BaziChart:
    """
    Compute a full BaZi chart against an already loaded almanac window.

    Raises:
        DateNotFound: the moment's date is not in `days`
        NoSectionalTermFound: `days` does not reach back to a sectional term
    """
    index = locate(days, moment)
    active = resolve_active_term(days, index)
    logger.debug("Active term for %s: %s (onset %s)", moment.date().isoformat(),
                 active.term.value, days[active.index].gregorian.isoformat())

    yp, degraded = year_pillar(days, index)
    mp = month_pillar(yp, active.term)

    # Day pillar first: the hour stem depends on the shifted day stem
    dp = day_pillar(moment, anchor)
    hp = hour_pillar(moment, dp)

    return BaziChart(
        moment=moment, year=yp, month=mp, day=dp, hour=hp,
        active_term=active.term, year_degraded=degraded,
    )


def compute_chart(moment: datetime, provider: AlmanacProvider,
                  anchor: Anchor = DEFAULT_ANCHOR) -> BaziChart:
    """
    Compute a full BaZi chart, loading the almanac for the moment's year
    and the year before it from `provider`.
    """
    days = load_window(provider, moment.year)
    return chart_from_days(moment, days, anchor)
