"""Tests for the click command surface."""

from __future__ import annotations

import json
from pathlib import Path
from unittest.mock import patch

import pytest
from click.testing import CliRunner

from patternshift.cli.main import cli
from patternshift.refactor.backup import BackupManager

ANALYSIS_JSON = json.dumps({
    "common_patterns": ["broad except"],
    "variations": [],
    "refactoring_opportunities": [],
    "suggested_approach": "Log the exception.",
})


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture
def backends(project: Path, fake_search, make_hit, stub_generator):
    """Patch the engine's default search and generator."""
    search = fake_search([make_hit("app/client.py", 0.1), make_hit("app/db.py", 0.2)])
    generator = stub_generator([ANALYSIS_JSON])
    with patch("patternshift.refactor.engine.CommandSearch", return_value=search), \
         patch("patternshift.refactor.engine.create_generator", return_value=generator):
        yield search, generator


class TestRefactorCommand:
    def test_dry_run_by_default(self, runner: CliRunner, project: Path, backends):
        before = (project / "app" / "client.py").read_text()
        result = runner.invoke(cli, ["refactor", "error handling", "--target", str(project)])

        assert result.exit_code == 0, result.output
        assert "Would apply changes to app/client.py" in result.output
        assert "Dry run" in result.output
        assert (project / "app" / "client.py").read_text() == before

    def test_execute_with_yes(self, runner: CliRunner, project: Path, backends):
        _, generator = backends
        generator.responses += ["new client\n", "new db\n"]
        result = runner.invoke(cli, ["refactor", "error handling", "--execute", "--yes", "-t", str(project)])

        assert result.exit_code == 0, result.output
        assert (project / "app" / "client.py").read_text() == "new client\n"
        assert "2 refactored" in result.output
        assert BackupManager(project).latest_backup() is not None

    def test_execute_prompts_per_file(self, runner: CliRunner, project: Path, backends):
        _, generator = backends
        generator.responses += ["new db\n"]
        result = runner.invoke(
            cli, ["refactor", "error handling", "--execute", "-t", str(project)], input="n\ny\n"
        )

        assert result.exit_code == 0, result.output
        assert "1 skipped" in result.output
        assert (project / "app" / "db.py").read_text() == "new db\n"

    def test_failure_exit_code(self, runner: CliRunner, project: Path, backends, generation_error):
        _, generator = backends
        generator.responses += [generation_error("boom"), "new db\n"]
        result = runner.invoke(cli, ["refactor", "error handling", "--execute", "-y", "-t", str(project)])

        assert result.exit_code == 1
        assert "boom" in result.output

    def test_plan_and_proposal_shown_before_confirmation(self, runner: CliRunner, project: Path, backends):
        result = runner.invoke(
            cli, ["refactor", "error handling", "--execute", "-t", str(project)], input="n\nn\n"
        )

        assert result.exit_code == 0, result.output
        first_prompt = result.output.index("Apply changes to app/client.py")
        assert result.output.index("broad except") < first_prompt
        assert result.output.index("Refactoring plan") < first_prompt
        assert "Proposed change" in result.output[:first_prompt]
        assert "2 skipped" in result.output

    def test_auto_restore_reported(self, runner: CliRunner, project: Path, backends, generation_error):
        (project / "patternshift.toml").write_text("[backup]\nauto_restore_on_failure = true\n")
        original = (project / "app" / "db.py").read_text()
        _, generator = backends
        generator.responses += [generation_error("boom"), "new db\n"]
        result = runner.invoke(cli, ["refactor", "error handling", "--execute", "-y", "-t", str(project)])

        assert result.exit_code == 1
        assert "rolled back" in result.output
        assert (project / "app" / "db.py").read_text() == original

    def test_no_matches(self, runner: CliRunner, project: Path, backends):
        result = runner.invoke(cli, ["refactor", "error handling", "--threshold", "0.01", "-t", str(project)])

        assert result.exit_code == 0
        assert "No patterns found" in result.output

    def test_threshold_validated(self, runner: CliRunner, project: Path, backends):
        result = runner.invoke(cli, ["refactor", "q", "--threshold", "2", "-t", str(project)])
        assert result.exit_code == 2


class TestAnalyzeCommand:
    def test_prints_analysis(self, runner: CliRunner, project: Path, backends):
        result = runner.invoke(cli, ["analyze", "error handling", "-t", str(project)])

        assert result.exit_code == 0, result.output
        assert "broad except" in result.output
        assert "Log the exception." in result.output


class TestBackupCommands:
    def test_list_empty(self, runner: CliRunner, project: Path):
        result = runner.invoke(cli, ["backup", "list", "-t", str(project)])
        assert "No backups found" in result.output

    def test_restore_last(self, runner: CliRunner, project: Path):
        target = project / "app" / "client.py"
        original = target.read_text()
        backup = BackupManager(project).create_backup([target.resolve()])
        target.write_text("changed\n")

        listing = runner.invoke(cli, ["backup", "list", "-t", str(project)])
        assert backup.path.name in listing.output

        result = runner.invoke(cli, ["backup", "restore", "--last", "-t", str(project)])
        assert result.exit_code == 0, result.output
        assert target.read_text() == original

    def test_restore_by_name(self, runner: CliRunner, project: Path):
        target = project / "app" / "db.py"
        original = target.read_text()
        backup = BackupManager(project).create_backup([target.resolve()])
        target.write_text("changed\n")

        result = runner.invoke(cli, ["backup", "restore", backup.path.name, "-t", str(project)])
        assert result.exit_code == 0, result.output
        assert target.read_text() == original

    def test_restore_unknown_fails(self, runner: CliRunner, project: Path):
        result = runner.invoke(cli, ["backup", "restore", "nope", "-t", str(project)])
        assert result.exit_code == 1
