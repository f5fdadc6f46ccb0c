# tests/test_cli.py

import pytest

from ficcal.cli import main


def run(capsys, *argv):
    rc = main(list(argv))
    out, err = capsys.readouterr()
    return rc, out, err


def test_parse_and_reformat(capsys):
    rc, out, _ = run(capsys, "parse", "March 8, 2024", "--format", "long")
    assert rc == 0
    assert out.strip() == "Friday, 8th of March, 2024"


def test_parse_relative(capsys):
    rc, out, _ = run(capsys, "parse", "in 3 days", "--relative-to", "2024-02-28")
    assert rc == 0
    assert out.strip() == "2 March 2024"


def test_add_and_diff(capsys):
    rc, out, _ = run(capsys, "add", "2024-02-29", "1y")
    assert (rc, out.strip()) == (0, "1 March 2025")
    rc, out, _ = run(capsys, "diff", "2024-03-01", "2024-02-28", "--format", "relative")
    assert (rc, out.strip()) == (0, "in 2 days")


def test_other_calendar(capsys):
    rc, out, _ = run(capsys, "add", "8 Tertia 1", "5 days", "--calendar", "decimal")
    assert (rc, out.strip()) == (0, "3 Prima 2")


def test_events(capsys):
    rc, out, _ = run(capsys, "events", "2024-01-01", "2024-03-01", "--kind", "phase")
    assert rc == 0
    lines = out.strip().splitlines()
    assert lines
    assert all("Moon" in line for line in lines)
    assert any("full" in line for line in lines)


def test_calendars(capsys):
    rc, out, _ = run(capsys, "calendars")
    assert rc == 0
    assert "reckoning" in out and "twin-moons" in out


def test_world_file(capsys, tmp_path):
    path = tmp_path / "world.yaml"
    path.write_text(
        "calendar:\n  name: tiny\n  months: [{name: Only, days: 3}, {name: Other, days: 4}]\n  weekdays: [Sol]\n",
        encoding="utf-8",
    )
    rc, out, _ = run(capsys, "add", "3 Only 1", "1 day", "--world", str(path))
    assert (rc, out.strip()) == (0, "1 Other 1")


def test_errors_are_reported(capsys):
    rc, _, err = run(capsys, "parse", "30 February 2024")
    assert rc == 2
    assert "out of range" in err
    rc, _, err = run(capsys, "parse", "1 Hammer 1", "--calendar", "nope")
    assert rc == 2
    assert "Unknown calendar" in err


def test_month_grid(capsys):
    rc, out, _ = run(capsys, "month-grid", "--calendar", "decimal", "--year", "1", "--month", "1")
    assert rc == 0
    assert "Prima 1" in out


def test_subcommand_is_required(capsys):
    with pytest.raises(SystemExit):
        main([])
