"""Tests for hookscope CLI commands."""

import json
from pathlib import Path

import pytest
import yaml
from click.testing import CliRunner

from hookscope.cli.main import cli

FIXTURES_DIR = Path(__file__).parent / "fixtures"


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def paths():
    return ["--model-path", str(FIXTURES_DIR)]


class TestReport:
    def test_text(self, runner, paths):
        result = runner.invoke(cli, ["report", "fixtures.ticket:Ticket", *paths])
        assert result.exit_code == 0
        assert "Ticket (ticket.py)" in result.output
        assert "callbacks_count: 5" in result.output
        assert "calculated_permutations: 3" in result.output

    def test_json(self, runner, paths):
        result = runner.invoke(cli, ["report", "fixtures.ticket:Ticket", "--format", "json", *paths])
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["model_name"] == "Ticket"
        assert data["model_file_path"] == "ticket.py"
        assert data["included_callbacks_count"] == 2

    def test_yaml(self, runner, paths):
        result = runner.invoke(
            cli, ["report", "fixtures.scenarios:GuardedEvents", "--format", "yaml", *paths]
        )
        assert result.exit_code == 0
        data = yaml.safe_load(result.output)
        assert data["calculated_permutations"] == 4
        assert list(data)[0] == "model_name"

    def test_config_file(self, runner, tmp_path):
        config_file = tmp_path / "hookscope.yaml"
        config_file.write_text(f"model_path: {FIXTURES_DIR}\n")
        result = runner.invoke(
            cli, ["report", "fixtures.ticket:Ticket", "--config", str(config_file), "--format", "json"]
        )
        assert result.exit_code == 0
        assert json.loads(result.output)["model_file_path"] == "ticket.py"


class TestCallbacks:
    def test_text(self, runner, paths):
        result = runner.invoke(cli, ["callbacks", "fixtures.ticket:Ticket", *paths])
        assert result.exit_code == 0
        assert "before_save" in result.output
        assert "set_title  ticket.py:9 -> ticket.py:12 (+3 lines)" in result.output
        assert "if title_is_a_shout" in result.output
        assert "announce_save  announcements.py:10" in result.output

    def test_event_filter_json(self, runner, paths):
        result = runner.invoke(
            cli,
            ["callbacks", "fixtures.ticket:Ticket", "--event", "after_save", "--format", "json", *paths],
        )
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert list(data) == ["after_save"]
        assert data["after_save"][0]["target"] == "announce_save"
        assert data["after_save"][0]["external_callback"] is True

    def test_event_without_callbacks(self, runner, paths):
        result = runner.invoke(cli, ["callbacks", "fixtures.ticket:Ticket", "--event", "after_touch", *paths])
        assert result.exit_code == 0
        assert "No callbacks collected." in result.output


class TestErrors:
    def test_missing_class_separator(self, runner):
        result = runner.invoke(cli, ["report", "fixtures.ticket"])
        assert result.exit_code == 1
        assert "expected MODULE:CLASS" in result.output

    def test_unknown_module(self, runner):
        result = runner.invoke(cli, ["report", "fixtures.nothing_here:Ticket"])
        assert result.exit_code == 1
        assert "cannot import" in result.output

    def test_unknown_class(self, runner):
        result = runner.invoke(cli, ["report", "fixtures.ticket:Nope"])
        assert result.exit_code == 1
        assert "is not a class" in result.output

    def test_model_without_collector(self, runner):
        result = runner.invoke(cli, ["report", "fixtures.scenarios:Plain"])
        assert result.exit_code == 1
        assert "not installed" in result.output
