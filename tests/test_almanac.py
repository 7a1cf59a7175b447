"""Almanac lookups, JSON provider and window loading."""

import json
from datetime import date, datetime

import pytest

from fourpillars.almanac import (
    AlmanacDay, JsonAlmanacProvider, find_last_term, load_window, locate,
    resolve_active_term,
)
from fourpillars.errors import AlmanacUnavailable, DateNotFound, NoSectionalTermFound
from fourpillars.symbols import SolarTerm

from conftest import build_days, write_year


class TestLocate:

    def test_finds_exact_date(self, window):
        index = locate(window, date(2026, 1, 7))
        assert window[index].gregorian == date(2026, 1, 7)

    def test_accepts_datetime(self, window):
        assert locate(window, datetime(2026, 1, 7, 23, 30)) == locate(window, date(2026, 1, 7))

    def test_missing_date(self, window):
        with pytest.raises(DateNotFound):
            locate(window, date(2027, 1, 1))

    def test_empty_window(self):
        with pytest.raises(DateNotFound):
            locate([], date(2026, 1, 7))


class TestResolveActiveTerm:

    def test_term_in_force(self, window):
        active = resolve_active_term(window, locate(window, date(2026, 1, 7)))
        assert active.term is SolarTerm.XIAO_HAN
        assert window[active.index].gregorian == date(2026, 1, 5)
        assert active.lunar_year == "乙巳"

    def test_onset_day_itself(self, window):
        active = resolve_active_term(window, locate(window, date(2026, 2, 4)))
        assert active.term is SolarTerm.LI_CHUN
        assert active.lunar_year == "丙午"

    def test_skips_mid_point_terms(self, window):
        # Winter Solstice falls on 2025-12-21; Da Xue still governs
        active = resolve_active_term(window, locate(window, date(2025, 12, 21)))
        assert active.term is SolarTerm.DA_XUE

    def test_no_sectional_term(self):
        days = build_days(date(2025, 12, 15), date(2025, 12, 31),
                          terms={date(2025, 12, 21): "冬至"})
        with pytest.raises(NoSectionalTermFound):
            resolve_active_term(days, len(days) - 1)

    def test_window_too_short(self):
        days = build_days(date(2026, 1, 1), date(2026, 1, 31))
        with pytest.raises(NoSectionalTermFound):
            resolve_active_term(days, locate(days, date(2026, 1, 3)))


class TestFindLastTerm:

    def test_latest_occurrence_wins(self, window):
        index = find_last_term(window, locate(window, date(2026, 3, 1)), SolarTerm.LI_CHUN)
        assert window[index].gregorian == date(2026, 2, 4)

    def test_absent(self, window):
        assert find_last_term(window, locate(window, date(2025, 1, 31)), SolarTerm.LI_CHUN) is None


class TestAlmanacDayRecord:

    def test_from_record(self):
        day = AlmanacDay.from_record({
            "gregorian": {"year": 2026, "month": 1, "date": 5},
            "lunar": {"year": "乙巳"},
            "solarTerm": "小寒",
        })
        assert day.gregorian == date(2026, 1, 5)
        assert day.lunar_year == "乙巳"
        assert day.solar_term is SolarTerm.XIAO_HAN

    def test_record_without_term(self):
        day = AlmanacDay.from_record({
            "gregorian": {"year": 2026, "month": 1, "date": 6},
            "lunar": {"year": "乙巳"},
        })
        assert day.solar_term is None


class TestJsonAlmanacProvider:

    def test_reads_year_file(self, almanac_dir):
        days = JsonAlmanacProvider(almanac_dir).fetch_year(2026)
        assert len(days) == 365
        assert days[0].gregorian == date(2026, 1, 1)
        assert days[4].solar_term is SolarTerm.XIAO_HAN

    def test_missing_file(self, tmp_path):
        with pytest.raises(AlmanacUnavailable) as exc:
            JsonAlmanacProvider(tmp_path).fetch_year(1999)
        assert exc.value.year == 1999

    def test_invalid_json(self, tmp_path):
        (tmp_path / "2026.json").write_text("{not json", encoding="utf-8")
        with pytest.raises(AlmanacUnavailable):
            JsonAlmanacProvider(tmp_path).fetch_year(2026)

    def test_not_an_array(self, tmp_path):
        (tmp_path / "2026.json").write_text('{"days": []}', encoding="utf-8")
        with pytest.raises(AlmanacUnavailable):
            JsonAlmanacProvider(tmp_path).fetch_year(2026)

    def test_malformed_record(self, tmp_path):
        records = [{"gregorian": {"year": 2026, "month": 1}, "lunar": {"year": "乙巳"}}]
        (tmp_path / "2026.json").write_text(json.dumps(records), encoding="utf-8")
        with pytest.raises(AlmanacUnavailable):
            JsonAlmanacProvider(tmp_path).fetch_year(2026)

    @pytest.mark.parametrize("lunar_year", [2026, "乙X", "乙巳年", ""])
    def test_malformed_lunar_year(self, tmp_path, lunar_year):
        records = [{"gregorian": {"year": 2026, "month": 1, "date": 1},
                    "lunar": {"year": lunar_year}}]
        (tmp_path / "2026.json").write_text(json.dumps(records, ensure_ascii=False),
                                            encoding="utf-8")
        with pytest.raises(AlmanacUnavailable):
            JsonAlmanacProvider(tmp_path).fetch_year(2026)

    def test_unknown_term_name(self, tmp_path):
        records = [{"gregorian": {"year": 2026, "month": 1, "date": 1},
                    "lunar": {"year": "乙巳"}, "solarTerm": "元旦"}]
        (tmp_path / "2026.json").write_text(json.dumps(records, ensure_ascii=False),
                                            encoding="utf-8")
        with pytest.raises(AlmanacUnavailable):
            JsonAlmanacProvider(tmp_path).fetch_year(2026)


class TestLoadWindow:

    def test_previous_year_then_current(self, almanac_dir):
        days = load_window(JsonAlmanacProvider(almanac_dir), 2026)
        assert len(days) == 365 * 2
        assert days[0].gregorian == date(2025, 1, 1)
        assert days[-1].gregorian == date(2026, 12, 31)

    def test_missing_year_contributes_nothing(self, tmp_path, caplog):
        write_year(tmp_path, 2026)
        days = load_window(JsonAlmanacProvider(tmp_path), 2026)
        assert len(days) == 365
        assert days[0].gregorian == date(2026, 1, 1)
        assert "2025" in caplog.text

    def test_both_missing(self, tmp_path):
        assert load_window(JsonAlmanacProvider(tmp_path), 2026) == []

    def test_other_failures_propagate(self):
        class BrokenProvider:
            def fetch_year(self, year):
                raise RuntimeError("boom")

        with pytest.raises(RuntimeError):
            load_window(BrokenProvider(), 2026)
