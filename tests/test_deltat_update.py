# tests/test_deltat_update.py

import csv
from datetime import date

import pytest

from ephemcore.ephemeris import deltat_update as du
from ephemcore.reference.deltat import read_table

LEAP_SECONDS = """\
#	Updated through IERS Bulletin C
#@	3960057600
2272060800	10	# 1 Jan 1972
2287785600	11	# 1 Jul 1972
3692217600	37	# 1 Jan 2017
not a data line
"""

IERS_C04 = """\
MJD;Year;Month;Day;Type;x_pole;sigma_x_pole;UT1-UTC;sigma_UT1-UTC
59945;2023;1;1;final;0.07;0.0;-0.0172;0.00001
59959;2023;1;15;final;0.06;0.0;-0.0155;0.00001
59973;2023;1;29;final;0.06;0.0;-0.0131;0.00001
59990;2023;2;15;final;0.05;0.0;-0.0112;0.00001
60000;2023;2;25;final;0.05;0.0;;0.00001
60005;2023;3;2;final;0.05;0.0;-0.0098;0.00001
"""


def test_parse_leap_seconds():
    steps = du.parse_leap_seconds(LEAP_SECONDS)
    assert [s.since for s in steps] == [date(1972, 1, 1), date(1972, 7, 1), date(2017, 1, 1)]
    assert steps[-1].tai_minus_utc == 37
    assert du.tai_minus_utc(steps, date(1972, 6, 30)) == 10
    assert du.tai_minus_utc(steps, date(1972, 7, 1)) == 11
    assert du.tai_minus_utc(steps, date(2023, 1, 15)) == 37
    # before the first entry the first offset applies
    assert du.tai_minus_utc(steps, date(1960, 1, 1)) == 10

    with pytest.raises(ValueError):
        du.parse_leap_seconds("# only comments\n")


def test_parse_iers_c04():
    rows = du.parse_iers_c04(IERS_C04)
    # the row with an empty UT1-UTC field is dropped
    assert len(rows) == 5
    assert rows[0].day == date(2023, 1, 1)
    assert rows[1].ut1_minus_utc == pytest.approx(-0.0155)

    with pytest.raises(ValueError):
        du.parse_iers_c04("")
    with pytest.raises(ValueError):
        du.parse_iers_c04("MJD;Year;Month;Day;x_pole\n59945;2023;1;1;0.07\n")


def test_parse_iers_c04_by_mjd():
    text = "mjd,ut1-utc\n59959,-0.0155\n"
    rows = du.parse_iers_c04(text)
    assert rows[0].day == date(2023, 1, 15)


def test_monthly_table():
    eops = du.parse_iers_c04(IERS_C04)
    steps = du.parse_leap_seconds(LEAP_SECONDS)
    table = du.build_monthly_table(eops, steps)

    assert [(r.year, r.month) for r in table] == [(2023, 1), (2023, 2), (2023, 3)]
    jan, feb, mar = table
    assert jan.sample_date == date(2023, 1, 15)
    assert jan.delta_t == pytest.approx(37 + 32.184 + 0.0155)
    assert jan.decimal_year == pytest.approx(2023 + 0.5 / 12.0)
    assert feb.sample_date == date(2023, 2, 15)
    # March has only its second day: the latest available day is used
    assert mar.sample_date == date(2023, 3, 2)


def test_written_table_feeds_the_iers_model(tmp_path):
    table = du.build_monthly_table(du.parse_iers_c04(IERS_C04), du.parse_leap_seconds(LEAP_SECONDS))
    out = du.write_table(table, tmp_path / "sub" / du.TABLE_NAME)
    assert out.is_file()

    with out.open(newline="") as f:
        rows = list(csv.DictReader(f))
    assert tuple(rows[0]) == du.TABLE_HEADER

    with out.open(newline="") as f:
        loaded = read_table(csv.DictReader(f))
    assert len(loaded) == 3
    assert loaded.eval(2023.0 + 0.5 / 12.0) == pytest.approx(table[0].delta_t, abs=1e-6)


def test_default_path_is_in_cache(monkeypatch, tmp_path):
    monkeypatch.setenv("XDG_CACHE_HOME", str(tmp_path))
    assert du.default_table_path() == tmp_path / "ephemcore" / du.TABLE_NAME
