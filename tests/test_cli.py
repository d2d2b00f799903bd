"""Behavioural tests for the preserveorder command line."""

import json

import pandas as pd
import pytest
from click.testing import CliRunner

from preserveorder import __version__
from preserveorder.main import main


@pytest.fixture
def runner():
    return CliRunner()


class TestMergeCommand:
    """merge subcommand."""

    def test_prints_one_label_per_line(self, runner):
        result = runner.invoke(main, ["merge", "1,9", "3,6", "1,3", "6,9"])

        assert result.exit_code == 0
        assert result.stdout.splitlines() == ["1", "3", "6", "9"]

    def test_json_report(self, runner):
        result = runner.invoke(main, ["merge", "--json", "a,b", "b,c"])

        assert result.exit_code == 0
        report = json.loads(result.stdout)
        assert report["labels"] == ["a", "b", "c"]
        assert report["source_count"] == 2
        assert report["rule_count"] == 3

    def test_output_format_from_environment(self, runner, monkeypatch):
        monkeypatch.setenv("OUTPUT_FORMAT", "json")

        result = runner.invoke(main, ["merge", "a,b"])

        assert json.loads(result.stdout)["labels"] == ["a", "b"]

    def test_custom_separator(self, runner):
        result = runner.invoke(main, ["merge", "--separator", "|", "e|d", "d|c"])

        assert result.stdout.splitlines() == ["e", "d", "c"]

    def test_input_file(self, runner, tmp_path):
        path = tmp_path / "sequences.json"
        path.write_text(json.dumps([["b", "c"], ["a", "b"]]), encoding="utf-8")

        result = runner.invoke(main, ["merge", "--input", str(path), "c,d"])

        assert result.exit_code == 0
        assert result.stdout.splitlines() == ["a", "b", "c", "d"]

    def test_input_file_must_be_json_array(self, runner, tmp_path):
        path = tmp_path / "sequences.json"
        path.write_text('{"a": 1}', encoding="utf-8")

        result = runner.invoke(main, ["merge", "--input", str(path)])

        assert result.exit_code == 1
        assert "Invalid input" in result.stderr

    def test_invalid_json_file(self, runner, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("[[", encoding="utf-8")

        result = runner.invoke(main, ["merge", "--input", str(path)])

        assert result.exit_code == 1

    def test_contradiction_exits_nonzero(self, runner):
        result = runner.invoke(main, ["merge", "a,b", "b,a"])

        assert result.exit_code == 1
        assert "Invalid input" in result.stderr
        assert result.stdout == ""

    def test_no_sequences(self, runner):
        result = runner.invoke(main, ["merge"])

        assert result.exit_code == 1
        assert "At least one sequence" in result.stderr


class TestCsvCommands:
    """headers and combine subcommands."""

    def test_headers(self, runner, monthly_exports):
        result = runner.invoke(main, ["headers", *map(str, monthly_exports)])

        assert result.exit_code == 0
        assert result.stdout.splitlines() == ["id", "name", "phone", "email", "created"]

    def test_headers_missing_file_strict(self, runner, monthly_exports, tmp_path):
        result = runner.invoke(main, ["headers", *map(str, monthly_exports), str(tmp_path / "x.csv")])

        assert result.exit_code == 1
        assert "Header Merge Error" in result.stderr

    def test_headers_missing_file_lenient(self, runner, monthly_exports, tmp_path):
        args = ["headers", "--lenient", str(tmp_path / "x.csv"), *map(str, monthly_exports)]

        result = runner.invoke(main, args)

        assert result.exit_code == 0
        assert result.stdout.splitlines()[0] == "id"

    def test_headers_delimiter_option(self, runner, write_csv):
        first = write_csv("a.csv", "id;name\n")
        second = write_csv("b.csv", "name;email\n")

        result = runner.invoke(main, ["headers", "--delimiter", ";", str(first), str(second)])

        assert result.stdout.splitlines() == ["id", "name", "email"]

    def test_combine(self, runner, monthly_exports, tmp_path):
        output = tmp_path / "combined.csv"

        result = runner.invoke(main, ["combine", *map(str, monthly_exports), "-o", str(output)])

        assert result.exit_code == 0
        assert "Wrote 3 rows" in result.stdout
        written = pd.read_csv(output, dtype=str, keep_default_na=False)
        assert list(written.columns) == ["id", "name", "phone", "email", "created"]

    def test_headers_unknown_encoding(self, runner, monthly_exports):
        result = runner.invoke(main, ["headers", str(monthly_exports[0]), "--encoding", "no-such-codec"])

        assert result.exit_code == 1
        assert result.exception is None or isinstance(result.exception, SystemExit)
        assert "Header Merge Error" in result.stderr

    def test_unknown_encoding_from_environment(self, runner, monkeypatch, monthly_exports):
        monkeypatch.setenv("CSV_ENCODING", "no-such-codec")

        result = runner.invoke(main, ["headers", str(monthly_exports[0])])

        assert result.exit_code == 1
        assert "Configuration Error" in result.stderr

    def test_combine_rejects_wide_row(self, runner, write_csv, tmp_path):
        wide = write_csv("wide.csv", "x,y\n1,2,3\n")
        output = tmp_path / "out.csv"

        result = runner.invoke(main, ["combine", str(wide), "-o", str(output)])

        assert result.exit_code == 1
        assert "Combine Error" in result.stderr
        assert not output.exists()

    def test_combine_requires_output(self, runner, monthly_exports):
        result = runner.invoke(main, ["combine", *map(str, monthly_exports)])

        assert result.exit_code == 2


class TestGlobalOptions:
    """Group-level behaviour."""

    def test_config_table(self, runner):
        result = runner.invoke(main, ["config"])

        assert result.exit_code == 0
        assert "CSV delimiter" in result.stdout
        assert "Output format" in result.stdout

    def test_bad_configuration(self, runner, monkeypatch):
        monkeypatch.setenv("OUTPUT_FORMAT", "xml")

        result = runner.invoke(main, ["config"])

        assert result.exit_code == 1
        assert "Configuration Error" in result.stderr

    def test_version(self, runner):
        result = runner.invoke(main, ["--version"])

        assert result.exit_code == 0
        assert __version__ in result.stdout

    def test_debug_and_json_logs(self, runner):
        args = ["--debug", "--json-logs", "--correlation-id", "abc123", "merge", "a,b"]

        result = runner.invoke(main, args)

        assert result.exit_code == 0
        assert result.stdout.splitlines() == ["a", "b"]
        assert "abc123" in result.stderr
