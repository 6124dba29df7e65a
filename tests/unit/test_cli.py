"""Unit tests for datamap CLI commands."""

from __future__ import annotations

import json

import pytest
from click.testing import CliRunner

from datamap.cli import main


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def bracket_file(tmp_path):
    """Names, types and data uses that look like Rich markup."""
    data = [
        {
            "fides_key": "billing",
            "name": "Billing [legacy]",
            "system_type": "Service",
            "system_dependencies": ["ledger"],
            "privacy_declarations": [
                {
                    "name": "Invoices",
                    "data_use": "provide.[bold]service",
                    "data_categories": ["user.provided.identifiable.contact.email"],
                }
            ],
        },
        {"fides_key": "ledger", "name": "Ledger [/x]", "system_type": "Database"},
    ]
    path = tmp_path / "brackets.json"
    path.write_text(json.dumps(data))
    return path


def test_main_help(runner):
    """datamap --help lists every command."""
    result = runner.invoke(main, ["--help"])
    assert result.exit_code == 0
    for command in ("systems", "lookups", "show", "graph", "info"):
        assert command in result.output


def test_show_help_mentions_argument(runner):
    result = runner.invoke(main, ["show", "--help"])
    assert result.exit_code == 0
    assert "SYSTEM_ID" in result.output


class TestSystems:
    def test_table_output(self, runner, export_file):
        result = runner.invoke(main, ["systems", "--data", str(export_file)])
        assert result.exit_code == 0
        assert "Application (1)" in result.output
        assert "Database (1)" in result.output
        assert "2 of 2 systems" in result.output

    def test_json_output(self, runner, export_file):
        result = runner.invoke(main, ["systems", "--data", str(export_file), "--json"])
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["system_count"] == 2
        assert [g["group_key"] for g in data["groups"]] == ["Application", "Database"]
        assert data["systems"]["warehouse"]["derived_categories"] == ["location"]

    def test_filters_and_layout(self, runner, export_file):
        result = runner.invoke(main, [
            "systems", "--data", str(export_file), "--json",
            "--layout", "data_use", "--category", "email", "--source-type", "derived",
        ])
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["filters"]["layout_mode"] == "data_use"
        assert data["filters"]["data_source_type"] == "derived"
        assert data["groups"] == [
            {"group_key": "improve.system", "group_label": "Improve › System", "systems": ["warehouse"]},
        ]

    def test_repeated_category_is_and(self, runner, export_file):
        result = runner.invoke(main, [
            "systems", "--data", str(export_file), "--json",
            "--category", "email", "--category", "location",
        ])
        assert list(json.loads(result.output)["systems"]) == ["warehouse"]

    def test_no_matches(self, runner, export_file):
        result = runner.invoke(main, ["systems", "--data", str(export_file), "--use", "nothing"])
        assert result.exit_code == 0
        assert "No systems match the current filters." in result.output

    def test_layout_from_env(self, runner, export_file, monkeypatch):
        monkeypatch.setenv("DATAMAP_LAYOUT_MODE", "data_use")
        result = runner.invoke(main, ["systems", "--data", str(export_file), "--json"])
        assert json.loads(result.output)["filters"]["layout_mode"] == "data_use"

    def test_data_file_from_env(self, runner, export_file, monkeypatch):
        monkeypatch.setenv("DATAMAP_DATA_FILE", str(export_file))
        result = runner.invoke(main, ["systems", "--json"])
        assert sorted(json.loads(result.output)["systems"]) == ["crm", "warehouse"]

    def test_bad_source_type(self, runner, export_file):
        result = runner.invoke(main, ["systems", "--data", str(export_file), "--source-type", "inferred"])
        assert result.exit_code != 0

    def test_missing_data_file(self, runner, tmp_path):
        result = runner.invoke(main, ["systems", "--data", str(tmp_path / "missing.json")])
        assert result.exit_code == 1
        assert "Error" in result.output

    def test_invalid_json(self, runner, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{")
        result = runner.invoke(main, ["systems", "--data", str(path)])
        assert result.exit_code == 1
        assert "Invalid JSON" in result.output

    def test_run_log_written(self, runner, export_file, tmp_path, monkeypatch):
        log_dir = tmp_path / "logs"
        monkeypatch.setenv("DATAMAP_LOG_DIR", str(log_dir))
        result = runner.invoke(main, ["systems", "--data", str(export_file), "--json"])
        assert result.exit_code == 0
        [log_file] = list(log_dir.glob("*.jsonl"))
        events = [json.loads(line) for line in log_file.read_text().splitlines()]
        assert events[0] == {**events[0], "event": "stage_start", "stage": "normalize"}
        assert events[-1]["event"] == "run_finish"


class TestLookups:
    def test_json(self, runner, export_file):
        result = runner.invoke(main, ["lookups", "--data", str(export_file), "--json"])
        assert result.exit_code == 0
        assert json.loads(result.output) == {
            "all_data_uses": ["improve.system", "marketing.communications"],
            "all_categories": ["email", "location"],
        }

    def test_table(self, runner, export_file):
        result = runner.invoke(main, ["lookups", "--data", str(export_file)])
        assert result.exit_code == 0
        assert "Data Uses" in result.output
        assert "marketing.communications" in result.output


class TestShow:
    def test_panel(self, runner, export_file):
        result = runner.invoke(main, ["show", "warehouse", "--data", str(export_file)])
        assert result.exit_code == 0
        assert "Warehouse" in result.output
        assert "Derived:" in result.output
        assert "Subjects:" in result.output
        assert "Improve › System" in result.output

    def test_json(self, runner, export_file):
        result = runner.invoke(main, ["show", "crm", "--data", str(export_file), "--json"])
        data = json.loads(result.output)
        assert data["dependencies"] == ["warehouse"]
        assert data["data_subjects"] == ["customer"]

    def test_unknown(self, runner, export_file):
        result = runner.invoke(main, ["show", "nope", "--data", str(export_file)])
        assert result.exit_code == 1
        assert "Unknown system" in result.output


class TestGraph:
    def test_tree(self, runner, export_file):
        result = runner.invoke(main, ["graph", "crm", "--data", str(export_file)])
        assert result.exit_code == 0
        assert "Sends data to" in result.output
        assert "Warehouse" in result.output
        assert "Receives data from" not in result.output

    def test_json(self, runner, export_file):
        result = runner.invoke(main, ["graph", "warehouse", "--data", str(export_file), "--json"])
        data = json.loads(result.output)
        assert data["dependents"] == ["crm"]
        assert data["edges"] == [{"id": "crm-warehouse", "source": "crm", "target": "warehouse"}]
        assert data["incoming"][0]["shared_categories"] == ["email"]

    def test_isolated(self, runner, tmp_path):
        path = tmp_path / "single.json"
        path.write_text(json.dumps([{"fides_key": "solo", "name": "Solo", "system_type": "Service"}]))
        result = runner.invoke(main, ["graph", "solo", "--data", str(path)])
        assert result.exit_code == 0
        assert "No connections" in result.output

    def test_unknown(self, runner, export_file):
        result = runner.invoke(main, ["graph", "nope", "--data", str(export_file)])
        assert result.exit_code == 1


class TestInfo:
    def test_defaults(self, runner):
        result = runner.invoke(main, ["info"])
        assert result.exit_code == 0
        assert "Version" in result.output
        assert "(bundled sample)" in result.output
        assert "system_type" in result.output

    def test_reflects_env(self, runner, monkeypatch):
        monkeypatch.setenv("DATAMAP_VERBOSITY", "1")
        result = runner.invoke(main, ["info"])
        assert "verbose" in result.output


class TestMarkupInData:
    def test_unknown_id_with_closing_tag(self, runner, export_file):
        result = runner.invoke(main, ["show", "[/x]", "--data", str(export_file)])
        assert result.exit_code == 1
        assert "Unknown system: [/x]" in result.output

    def test_systems_table_keeps_brackets(self, runner, bracket_file):
        result = runner.invoke(main, ["systems", "--data", str(bracket_file)])
        assert result.exit_code == 0
        assert "Billing [legacy]" in result.output
        assert "Ledger [/x]" in result.output

    def test_data_use_layout_keeps_brackets(self, runner, bracket_file):
        result = runner.invoke(main, ["systems", "--data", str(bracket_file), "--layout", "data_use"])
        assert result.exit_code == 0
        assert "[bold]" in result.output

    def test_lookups_table_keeps_brackets(self, runner, bracket_file):
        result = runner.invoke(main, ["lookups", "--data", str(bracket_file)])
        assert result.exit_code == 0
        assert "provide.[bold]service" in result.output

    def test_show_panel_title(self, runner, bracket_file):
        result = runner.invoke(main, ["show", "billing", "--data", str(bracket_file)])
        assert result.exit_code == 0
        assert "Billing [legacy]" in result.output

    def test_graph_tree(self, runner, bracket_file):
        result = runner.invoke(main, ["graph", "billing", "--data", str(bracket_file)])
        assert result.exit_code == 0
        assert "Billing [legacy]" in result.output
        assert "Ledger [/x]" in result.output


class TestInvalidSettings:
    def test_bad_verbosity(self, runner, export_file, monkeypatch):
        monkeypatch.setenv("DATAMAP_VERBOSITY", "9")
        result = runner.invoke(main, ["systems", "--data", str(export_file)])
        assert result.exit_code == 1
        assert "invalid settings" in result.output

    def test_bad_layout(self, runner, monkeypatch):
        monkeypatch.setenv("DATAMAP_LAYOUT_MODE", "by_owner")
        result = runner.invoke(main, ["info"])
        assert result.exit_code == 1
        assert "invalid settings" in result.output

    def test_non_utf8_data_file(self, runner, tmp_path):
        path = tmp_path / "latin1.json"
        path.write_bytes(b'[{"fides_key": "caf\xe9"}]')
        result = runner.invoke(main, ["systems", "--data", str(path)])
        assert result.exit_code == 1
        assert "Error" in result.output
