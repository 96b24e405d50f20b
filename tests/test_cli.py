"""Tests for the branch-comparer command line."""

import json
import tempfile
from pathlib import Path

import pytest
from click.testing import CliRunner
from rich.console import Console

from branch_comparer import __version__
from branch_comparer.cli.main import main
from branch_comparer.cli.notifications import notification_message, root_cause
from branch_comparer.core.exceptions import NetworkError, RefNotFoundError


@pytest.fixture(autouse=True)
def wide_console(monkeypatch):
    """Keep tables on one line so output can be matched."""
    monkeypatch.setattr("branch_comparer.cli.main.console", Console(width=200))


@pytest.fixture
def settings_file():
    with tempfile.TemporaryDirectory() as temp_dir:
        yield Path(temp_dir) / "settings.json"


@pytest.fixture
def run(temp_git_project, settings_file):
    """Invoke the CLI against the test project with an isolated settings file."""
    runner = CliRunner()

    def _run(*args, repo=None):
        base = ["--repo", str(repo or temp_git_project), "--settings-file", str(settings_file)]
        return runner.invoke(main, base + list(args))

    return _run


def test_version():
    result = CliRunner().invoke(main, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.output


def test_branches(run):
    result = run("branches")

    assert result.exit_code == 0
    lines = [line.rstrip() for line in result.output.splitlines()]
    assert "  feature" in lines
    assert "* main" in lines


def test_branches_remote(run, cloned_project):
    result = run("branches", "--remote", repo=cloned_project)

    assert result.exit_code == 0
    assert "origin/feature" in result.output
    assert "origin/HEAD" not in result.output


def test_compare(run):
    result = run("compare", "feature", "main")

    assert result.exit_code == 0, result.output
    assert "In feature, not in main (2)" in result.output
    assert "Add login" in result.output
    assert "Merged PR 17: add auth token" in result.output
    assert "https://dev.azure.com/pullrequest/17" in result.output
    assert "In main, not in feature (0): none" in result.output


def test_compare_remembers_branches(run, settings_file):
    run("compare", "feature", "main")

    stored = json.loads(settings_file.read_text())
    assert stored["source_branch"] == "feature"
    assert stored["target_branch"] == "main"

    result = run("compare")
    assert result.exit_code == 0
    assert "In feature, not in main (2)" in result.output


def test_compare_identical(run):
    result = run("compare", "main", "main")
    assert result.exit_code == 0
    assert "contain the same commits" in result.output


def test_compare_limit(run):
    result = run("compare", "feature", "main", "--limit", "1")

    assert result.exit_code == 0
    assert "... 1 more" in result.output


def test_compare_requires_target(run):
    result = run("compare")
    assert result.exit_code == 2
    assert "Both SOURCE and TARGET" in result.output


def test_compare_unknown_branch_shows_notification(run):
    result = run("compare", "feature", "nope")

    assert result.exit_code == RefNotFoundError.exit_code
    assert "Unknown branch" in result.output
    assert "Reference 'nope' not found" in result.output


def test_invalid_repository_shows_notification(run, settings_file):
    with tempfile.TemporaryDirectory() as temp_dir:
        result = run("branches", repo=Path(temp_dir))

    assert result.exit_code == 2
    assert "Repository error" in result.output
    assert "Not a git repository" in result.output


def test_log(run):
    result = run("log", "feature", "main", "--oneline")

    assert result.exit_code == 0
    lines = result.output.strip().splitlines()
    assert len(lines) == 2
    assert lines[0].endswith("Merged PR 17: add auth token")
    assert lines[1].endswith("Add login")


def test_log_full_format(run):
    result = run("log", "feature", "main")

    assert result.exit_code == 0
    assert "Author: Test User <test@example.com>" in result.output
    assert "    Add login" in result.output


def test_log_empty(run):
    result = run("log", "main", "feature")
    assert result.exit_code == 0
    assert "No commits" in result.output


def test_pr(run):
    result = run("pr", "42")
    assert result.exit_code == 0
    assert result.output.strip() == "https://dev.azure.com/pullrequest/42"


def test_pr_negative(run):
    result = run("pr", "--", "-5")
    assert result.exit_code == 2
    assert "negative" in result.output


def test_fetch_without_remotes(run):
    result = run("fetch")
    assert result.exit_code == 0
    assert "No remotes configured" in result.output


def test_fetch(run, cloned_project):
    result = run("fetch", repo=cloned_project)
    assert result.exit_code == 0
    assert "Fetched origin" in result.output


def test_fetch_unreachable_remote(run, project_repo, temp_git_project):
    project_repo.create_remote("origin", str(temp_git_project.parent / "missing.git"))

    result = run("fetch")

    assert result.exit_code == NetworkError.exit_code
    assert "Network error" in result.output


def test_config_set_and_show(run, settings_file):
    result = run("config", "set", "compare_limit", "10")
    assert result.exit_code == 0

    result = run("config", "set", "source_branch", "1234")
    assert result.exit_code == 0

    stored = json.loads(settings_file.read_text())
    assert stored["compare_limit"] == 10
    assert stored["source_branch"] == "1234"

    result = run("config", "show")
    assert result.exit_code == 0
    assert "compare_limit" in result.output
    assert '"1234"' in result.output


def test_config_set_null_clears_value(run, settings_file):
    run("config", "set", "target_branch", "main")
    run("config", "set", "target_branch", "null")

    assert json.loads(settings_file.read_text())["target_branch"] is None


def test_config_set_unknown_key(run):
    result = run("config", "set", "colour", "blue")
    assert result.exit_code == 5
    assert "Settings error" in result.output


def test_config_set_invalid_template(run):
    result = run("config", "set", "pull_request_uri_template", "https://example.com")
    assert result.exit_code == 5


def test_corrupt_settings_file(run, settings_file):
    settings_file.write_text("{broken")

    result = run("branches")

    assert result.exit_code == 5
    assert "Cannot read settings file" in result.output


def test_debug_flag(run):
    result = run("--debug", "branches")
    assert result.exit_code == 0


def test_notification_message_includes_root_cause():
    try:
        try:
            raise OSError("connection refused")
        except OSError as e:
            raise NetworkError("origin") from e
    except NetworkError as error:
        assert isinstance(root_cause(error), OSError)
        assert notification_message(error) == (
            "Failed to fetch from remote 'origin'. Details: connection refused"
        )


def test_notification_message_without_cause():
    assert notification_message(RefNotFoundError("dev")) == "Reference 'dev' not found."


def test_config_set_template_with_unknown_field(run, settings_file):
    result = run("config", "set", "pull_request_uri_template", "https://h/{org}/pullrequest/{id}")

    assert result.exit_code == 5
    assert "Settings error" in result.output
    assert not settings_file.exists()


def test_log_reflog_selector_is_unknown_ref(run):
    result = run("log", "main@{yesterday}", "main")

    assert result.exit_code == RefNotFoundError.exit_code
    assert "Unknown branch" in result.output
