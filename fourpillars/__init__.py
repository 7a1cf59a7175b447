"""BaZi Four Pillars chart calculation from almanac data."""

from fourpillars.almanac import AlmanacDay, JsonAlmanacProvider, load_window, locate, resolve_active_term
from fourpillars.bazi import BaziChart, chart_from_days, compute_chart, day_pillar, hour_pillar, month_pillar, year_pillar
from fourpillars.config import DEFAULT_ANCHOR, Anchor
from fourpillars.errors import AlmanacUnavailable, BaziError, DateNotFound, NoSectionalTermFound
from fourpillars.symbols import Pillar, SolarTerm

__version__ = "0.1.0"
