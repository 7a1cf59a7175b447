"""
CLI wrapper for compute_chart().

Usage:
    python -m fourpillars.run --datetime YYYY-MM-DDTHH:MM \
        [--almanac-dir DIR] [--latitude LAT --longitude LON] \
        [--utc-offset OFFSET] [--lmt] [--verbose]
"""

import argparse
import json
import logging
import sys
from datetime import datetime, timedelta, timezone
from zoneinfo import ZoneInfo

from timezonefinder import TimezoneFinder

from fourpillars.almanac import JsonAlmanacProvider
from fourpillars.bazi import compute_chart
from fourpillars.calendar import apply_lmt
from fourpillars.config import default_almanac_dir
from fourpillars.errors import BaziError

logger = logging.getLogger(__name__)


def localize(moment, latitude=None, longitude=None, utc_offset=None):
    """
    Attach a timezone to a naive clock time.

    A manual UTC offset wins; otherwise the zone is looked up from the
    coordinates (historical DST included via zoneinfo). Without either
    the moment is returned unchanged.
    """
    if moment.tzinfo is not None:
        return moment
    if utc_offset is not None:
        return moment.replace(tzinfo=timezone(timedelta(hours=utc_offset)))
    if latitude is None or longitude is None:
        return moment

    tz_name = TimezoneFinder().timezone_at(lat=latitude, lng=longitude)
    if tz_name is None:
        raise ValueError(f"Could not determine timezone for ({latitude}, {longitude})")
    logger.info("Timezone for (%s, %s): %s", latitude, longitude, tz_name)
    return moment.replace(tzinfo=ZoneInfo(tz_name))


def to_local_mean_time(moment, longitude):
    """
    Shift an aware clock time to Local Mean Time.

    The standard meridian comes from the zone's standard offset (DST stripped).
    """
    offset = moment.utcoffset()
    dst = moment.dst() or timedelta(0)
    standard_meridian = (offset - dst).total_seconds() / 3600 * 15
    return apply_lmt(moment, longitude, standard_meridian)


def build_parser():
    parser = argparse.ArgumentParser(description="Compute a BaZi Four Pillars chart.")
    parser.add_argument("--datetime", required=True, dest="moment",
                        type=datetime.fromisoformat,
                        help="local clock time, e.g. 2026-01-07T18:00")
    parser.add_argument("--almanac-dir", dest="almanac_dir", default=None,
                        help="directory of <year>.json almanac files")
    parser.add_argument("--latitude", type=float, default=None)
    parser.add_argument("--longitude", type=float, default=None)
    parser.add_argument("--utc-offset", dest="utc_offset", type=float, default=None)
    parser.add_argument("--lmt", action="store_true",
                        help="correct the clock time to Local Mean Time (needs --longitude)")
    parser.add_argument("--verbose", "-v", action="store_true")
    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    if args.lmt and args.longitude is None:
        parser.error("--lmt requires --longitude")

    try:
        moment = localize(args.moment, args.latitude, args.longitude, args.utc_offset)
    except ValueError as e:
        parser.error(str(e))
    if args.lmt:
        if moment.utcoffset() is None:
            parser.error("--lmt needs a timezone: pass --utc-offset or --latitude")
        moment = to_local_mean_time(moment, args.longitude)
        logger.info("LMT-corrected time: %s", moment.strftime("%Y-%m-%d %H:%M"))

    provider = JsonAlmanacProvider(args.almanac_dir or default_almanac_dir())
    try:
        chart = compute_chart(moment, provider)
    except BaziError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1

    print(json.dumps(chart.to_dict(), indent=2, ensure_ascii=False))
    return 0


if __name__ == "__main__":
    sys.exit(main())
