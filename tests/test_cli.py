# tests/test_cli.py

import pytest

from ephemcore.cli import main


def test_time_command(capsys, monkeypatch):
    monkeypatch.setenv("EPHEMCORE_DELTAT_MODEL", "espenak-meeus")
    assert main(["time", "2000-01-01T12:00:00"]) == 0
    out = capsys.readouterr().out
    assert "2000-01-01T12:00:00.000Z" in out
    assert "JD (UT)      = 2451545.000000" in out
    assert "espenak-meeus" in out


def test_seasons_command(capsys):
    assert main(["seasons", "2024"]) == 0
    out = capsys.readouterr().out.splitlines()
    assert len(out) == 4
    assert out[0].startswith("March equinox")
    assert "2024-03-20T03:0" in out[0]
    assert "2024-12-21T09:2" in out[3]


def test_phases_command(capsys):
    assert main(["phases", "2024-01-01", "--count", "2"]) == 0
    out = capsys.readouterr().out.splitlines()
    assert out[0].endswith("third quarter")
    assert out[1].endswith("new moon")
    assert out[1].startswith("2024-01-11")


def test_riseset_command(capsys):
    assert main(["riseset", "2024-03-15", "--lat", "51.5074", "--lon", "-0.1278", "--twilight", "civil"]) == 0
    out = capsys.readouterr().out
    assert "rise         2024-03-15T06:" in out
    assert "civil dawn" in out


def test_library_error_exits_with_status_one(capsys):
    rc = main(["riseset", "2024-03-15", "--lat", "0", "--lon", "0", "--body", "Earth"])
    assert rc == 1
    assert "ephemcore riseset: error:" in capsys.readouterr().err


def test_bad_time_is_a_usage_error(capsys):
    with pytest.raises(SystemExit) as exc:
        main(["time", "yesterday"])
    assert exc.value.code == 2
    assert "invalid time" in capsys.readouterr().err


def test_twilight_is_sun_only():
    with pytest.raises(SystemExit):
        main(["riseset", "2024-03-15", "--lat", "0", "--lon", "0", "--body", "Moon", "--twilight", "civil"])
