"""
Tests for the command-line interface.

Runs main() in-process with argument lists and checks exit codes and output.
JSON output is used for value assertions; table output only for smoke checks.
"""

import json

import pytest

import illusionist_cli
from illusionist_cli import main


def _run_json(capsys, argv):
    code = main(argv)
    out = capsys.readouterr().out
    assert code == 0, out
    return json.loads(out)


class TestGenerate:
    """Test the generate subcommand."""

    def test_seeded_json(self, capsys):
        """Defaults give seeded 1m DEMO bars with seed 42."""
        data = _run_json(capsys, ["generate", "--json", "--count", "3", "--start", "2025-01-02 09:30"])
        assert data["model"] == "seeded"
        assert data["symbol"] == "DEMO"
        assert data["seed"] == 42
        assert data["interval"] == "1m"
        assert [b["timestamp"] for b in data["bars"]] == [
            "2025-01-02T09:30:00",
            "2025-01-02T09:31:00",
            "2025-01-02T09:32:00",
        ]

    def test_output_is_deterministic(self, capsys):
        """Two identical invocations print identical bars and hash."""
        argv = ["generate", "--json", "--model", "gbm", "--interval", "5m", "--count", "10",
                "--start", "2025-01-02 09:30", "--hash"]
        first = _run_json(capsys, argv)
        second = _run_json(capsys, argv)
        assert first == second
        assert len(first["hash"]) == 12

    def test_gbm_schedule_anchor(self, capsys):
        """Scheduled gbm bars skip the weekend and open at the anchor."""
        data = _run_json(capsys, [
            "generate", "--json", "--model", "gbm", "--interval", "1h", "--schedule",
            "--anchor-price", "100", "--start", "2025-01-03 15:00", "--count", "3",
        ])
        bars = data["bars"]
        assert [b["timestamp"] for b in bars] == [
            "2025-01-03T15:00:00",
            "2025-01-06T09:30:00",
            "2025-01-06T10:30:00",
        ]
        assert bars[0]["open"] == "100"

    def test_schedule_moves_start_into_session(self, capsys):
        """A Saturday start moves to Monday's session open."""
        data = _run_json(capsys, [
            "generate", "--json", "--model", "gbm", "--interval", "1h", "--schedule",
            "--start", "2025-01-04 12:00", "--count", "1",
        ])
        assert data["bars"][0]["timestamp"] == "2025-01-06T09:30:00"

    def test_env_defaults_used(self, capsys, monkeypatch):
        """ILLUSIONIST_* variables fill in options not given on the command line."""
        monkeypatch.setenv("ILLUSIONIST_SEED", "7")
        monkeypatch.setenv("ILLUSIONIST_SYMBOL", "spy")
        data = _run_json(capsys, ["generate", "--json", "--start", "2025-01-02"])
        assert data["seed"] == 7
        assert data["symbol"] == "SPY"
        assert len(data["bars"]) == 5

    def test_flags_override_env(self, capsys, monkeypatch):
        """Command-line flags win over the environment."""
        monkeypatch.setenv("ILLUSIONIST_SEED", "7")
        data = _run_json(capsys, ["generate", "--json", "--seed", "8", "--count", "1", "--start", "2025-01-02"])
        assert data["seed"] == 8

    def test_table_output(self, capsys):
        """Table output shows the symbol and the demo-data note."""
        code = main(["generate", "--count", "2", "--start", "2025-01-02 09:30"])
        out = capsys.readouterr().out
        assert code == 0
        assert "DEMO" in out
        assert "demo data" in out

    @pytest.mark.parametrize("argv", [
        ["generate", "--interval", "1M"],
        ["generate", "--count", "-1"],
        ["generate", "--start", "yesterday"],
        ["generate", "--anchor-price", "100"],
        ["generate", "--schedule"],
        ["generate", "--model", "gbm", "--volatility", "-1"],
        ["generate", "--model", "gbm", "--anchor-price", "-5"],
        ["generate", "--model", "gbm", "--schedule", "--holidays", "missing.yml"],
        ["generate", "--model", "gbm", "--schedule", "--holidays", "."],
    ])
    def test_configuration_errors_exit_1(self, capsys, argv):
        """Bad options print an error panel and exit 1."""
        assert main(argv) == 1
        assert "ERROR" in capsys.readouterr().out

    def test_price_overflow_exits_1(self, capsys):
        """A drift that overflows the float range is an error, not a traceback."""
        code = main([
            "generate", "--model", "gbm", "--drift", "100000", "--anchor-price", "100",
            "--start", "2025-01-01", "--count", "2", "--interval", "1w",
        ])
        out = capsys.readouterr().out
        assert code == 1
        assert "ERROR" in out
        assert "float" in out


class TestScheduleCommand:
    """Test the schedule subcommand."""

    def test_holiday_skip(self, capsys):
        """New Year's Day is skipped with the default calendar."""
        data = _run_json(capsys, [
            "schedule", "--json", "--interval", "5m", "--from", "2024-12-31 16:30", "--count", "2",
        ])
        assert data["times"] == ["2025-01-02T09:30:00", "2025-01-02T09:35:00"]
        assert data["calendar"] == "US equities 2024-2025"

    def test_custom_calendar(self, capsys, tmp_path):
        """--holidays replaces the default calendar."""
        path = tmp_path / "cal.yml"
        path.write_text("name: Test\nholidays: [2025-01-06]\n")
        data = _run_json(capsys, [
            "schedule", "--json", "--interval", "1h", "--from", "2025-01-03 15:00",
            "--count", "1", "--holidays", str(path),
        ])
        assert data["times"] == ["2025-01-07T09:30:00"]

    def test_table_output(self, capsys):
        """Table output lists bar times with weekday names."""
        code = main(["schedule", "--interval", "1h", "--from", "2025-01-03 15:00", "--count", "2"])
        out = capsys.readouterr().out
        assert code == 0
        assert "2025-01-06 09:30" in out
        assert "Monday" in out

    def test_unreadable_calendar_exits_1(self, capsys, tmp_path):
        """A directory passed as --holidays is reported, not raised."""
        code = main([
            "schedule", "--interval", "1h", "--from", "2025-01-03 15:00", "--holidays", str(tmp_path),
        ])
        assert code == 1
        assert "ERROR" in capsys.readouterr().out


class TestMain:
    """Test dispatch and exit codes."""

    def test_no_command(self, capsys):
        """No subcommand prints help and exits 1."""
        assert main([]) == 1

    def test_keyboard_interrupt(self, monkeypatch, capsys):
        """Ctrl+C exits 130."""
        def interrupted(args):
            raise KeyboardInterrupt

        monkeypatch.setattr(illusionist_cli, "handle_generate", interrupted)
        assert main(["generate"]) == 130

    def test_bad_log_level(self, monkeypatch, capsys):
        """An unknown LOG_LEVEL exits 1 before dispatch."""
        monkeypatch.setenv("LOG_LEVEL", "LOUD")
        assert main(["generate"]) == 1

    def test_bad_environment(self, monkeypatch, capsys):
        """An unknown ILLUSIONIST_MODEL exits 1 before dispatch."""
        monkeypatch.setenv("ILLUSIONIST_MODEL", "heston")
        assert main(["generate"]) == 1
