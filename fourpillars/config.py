"""
Runtime configuration: the day-pillar anchor and the almanac location.
"""

import os
from dataclasses import dataclass
from datetime import date
from pathlib import Path

from fourpillars.symbols import Pillar

ALMANAC_DIR_ENV = "FOURPILLARS_ALMANAC_DIR"


@dataclass(frozen=True)
class Anchor:
    """A calendar date together with its verified day pillar.

    All day pillars are counted from this point, forwards or backwards.
    """
    date: date
    pillar: Pillar

    @classmethod
    def from_strings(cls, iso_date: str, pillar: str) -> "Anchor":
        return cls(date.fromisoformat(iso_date), Pillar.parse(pillar))


DEFAULT_ANCHOR = Anchor.from_strings("2026-01-07", "辛巳")


def default_almanac_dir() -> Path:
    """
    Directory holding the `<year>.json` almanac files.

    $FOURPILLARS_ALMANAC_DIR wins; otherwise `almanac/` next to the package.
    """
    override = os.environ.get(ALMANAC_DIR_ENV)
    if override:
        return Path(override).expanduser()
    return Path(__file__).parent.parent / "almanac"
