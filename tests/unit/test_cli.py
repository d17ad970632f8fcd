"""Tests for the timexpr command line."""

import pytest
from typer.testing import CliRunner

from timexpr.cli import app

NOW = "1724606867"  # 2024-08-25T17:27:47Z


@pytest.fixture
def cli_runner():
    """Return a CLI test runner."""
    return CliRunner()


def test_documented_example(cli_runner: CliRunner):
    result = cli_runner.invoke(
        app,
        [
            "--now",
            NOW,
            "full_day(now) + (2000-01-01T00:00:00Z - 1234567890.000) + 1d - 2h - 3s",
        ],
    )
    assert result.exit_code == 0, result.output
    assert result.stdout == "2015-07-12T22:28:27+00:00\n"


def test_words_are_joined(cli_runner: CliRunner):
    result = cli_runner.invoke(app, ["--now", "2000-01-01T00:00:00Z", "now", "+", "1h"])
    assert result.exit_code == 0, result.output
    assert result.stdout.strip() == "2000-01-01T01:00:00+00:00"


def test_double_dash_separator(cli_runner: CliRunner):
    result = cli_runner.invoke(app, ["--now", "2000-01-02T00:00:00Z", "--", "-1d", "+", "now"])
    assert result.exit_code == 0, result.output
    assert result.stdout.strip() == "2000-01-01T00:00:00+00:00"


def test_reads_stdin(cli_runner: CliRunner):
    result = cli_runner.invoke(
        app,
        ["--now", NOW],
        input="now - full_day(now)\n",
    )
    assert result.exit_code == 0, result.output
    assert result.stdout.strip() == "17h27m47s"


def test_duration_seconds(cli_runner: CliRunner):
    result = cli_runner.invoke(
        app,
        ["--duration-format", "seconds", "2000-01-01T01:00:00Z - 2000-01-01T00:00:00Z"],
    )
    assert result.exit_code == 0, result.output
    assert result.stdout.strip() == "3600"


def test_timezone_applied(cli_runner: CliRunner):
    result = cli_runner.invoke(app, ["--tz", "+02:00", "2000-01-01T00:00:00Z"])
    assert result.exit_code == 0, result.output
    assert result.stdout.strip() == "2000-01-01T02:00:00+02:00"


def test_format_pattern(cli_runner: CliRunner):
    result = cli_runner.invoke(app, ["-f", "%Y/%m/%d", "--now", NOW, "full_day(now) + 1d"])
    assert result.exit_code == 0, result.output
    assert result.stdout.strip() == "2024/08/26"


def test_settings_from_environment(cli_runner: CliRunner):
    result = cli_runner.invoke(
        app,
        ["2000-01-01T00:00:00Z"],
        env={"TIMEXPR_TZ": "-01:00", "TIMEXPR_FORMAT": "%H:%M %z"},
    )
    assert result.exit_code == 0, result.output
    assert result.stdout.strip() == "23:00 -0100"


def test_type_error_exits_nonzero(cli_runner: CliRunner):
    result = cli_runner.invoke(app, ["--now", NOW, "now + now"])
    assert result.exit_code == 1
    assert "error: Cannot add instant + instant" in result.output


def test_lex_error_exits_nonzero(cli_runner: CliRunner):
    result = cli_runner.invoke(app, ["2024-01-01"])
    assert result.exit_code == 1
    assert "Incomplete datetime literal" in result.output
    assert "^^^^^^^^^^" in result.output


def test_syntax_error_exits_nonzero(cli_runner: CliRunner):
    result = cli_runner.invoke(app, ["now + (1d"])
    assert result.exit_code == 1
    assert "Unbalanced parentheses" in result.output


def test_empty_stdin(cli_runner: CliRunner):
    result = cli_runner.invoke(app, [], input="")
    assert result.exit_code == 1
    assert "Empty expression" in result.output


def test_invalid_timezone(cli_runner: CliRunner):
    result = cli_runner.invoke(app, ["--tz", "Mars/Olympus", "now"])
    assert result.exit_code == 1
    assert "Invalid UTC offset" in result.output


def test_invalid_now(cli_runner: CliRunner):
    result = cli_runner.invoke(app, ["--now", "1d", "now"])
    assert result.exit_code == 1
    assert "Expected a datetime or timestamp literal" in result.output


def test_explain(cli_runner: CliRunner):
    result = cli_runner.invoke(app, ["--explain", "--now", NOW, "full_day(now) - 1h"])
    assert result.exit_code == 0, result.output
    assert "full_day()" in result.stdout
    assert "duration 3600s" in result.stdout
    assert "result: instant" in result.stdout
    assert result.stdout.rstrip().endswith("2024-08-24T23:00:00+00:00")


def test_explain_reports_type_error(cli_runner: CliRunner):
    result = cli_runner.invoke(app, ["--explain", "full_day(1d)"])
    assert result.exit_code == 1
    assert "full_day() requires an instant, got duration" in result.output


def test_version(cli_runner: CliRunner):
    result = cli_runner.invoke(app, ["--version"])
    assert result.exit_code == 0
    assert "timexpr version" in result.stdout


def test_verbose_logs_evaluation(cli_runner: CliRunner, caplog: pytest.LogCaptureFixture):
    result = cli_runner.invoke(app, ["-V", "--now", NOW, "now + 1s"])
    assert result.exit_code == 0, result.output
    assert "tokens:" in caplog.text
    assert "parsed: (now + 1s)" in caplog.text


def test_long_flat_chain(cli_runner: CliRunner):
    result = cli_runner.invoke(app, ["--now", "0", "now" + " + 1s" * 2000])
    assert result.exit_code == 0, result.output
    assert result.stdout.strip() == "1970-01-01T00:33:20+00:00"


def test_adjacent_durations_in_group(cli_runner: CliRunner):
    result = cli_runner.invoke(app, ["now - (1d 2h)"])
    assert result.exit_code == 1
    assert "Durations must be joined with '+' or '-'" in result.output
    assert "Unbalanced parentheses" not in result.output
