"""Tests for the projectlens command line interface."""

from pathlib import Path

import pytest
from git import Actor, Repo

from projectlens.cli import main, run
from projectlens.config import Settings

ALICE = Actor("Alice", "alice@example.com")
BOB = Actor("Bob", "bob@example.com")


def create_commit(repo: Repo, relative_path: str, content: str, message: str, when: str, author: Actor = ALICE):
    """Helper function to create a commit in the test repository at a fixed (UTC) time."""
    file_path = Path(repo.working_dir) / relative_path
    file_path.parent.mkdir(parents=True, exist_ok=True)
    file_path.write_text(content)
    repo.index.add([relative_path])
    return repo.index.commit(message, author=author, committer=author, author_date=when, commit_date=when)


@pytest.fixture
def repo_path(tmp_path):
    """Repository with a release and a release candidate, committed on weekdays around noon."""
    repo = Repo.init(tmp_path / "project")

    create_commit(repo, "README.md", "# Project", "Initial commit", "2024-01-02T12:00:00")
    create_commit(repo, "src/app.py", "a", "PROJ-1 add app", "2024-01-03T12:00:00", BOB)
    repo.create_tag("v1.0.0")
    create_commit(repo, "src/app.py", "b", "PROJ-1 fix app", "2024-02-01T12:00:00")
    repo.create_tag("v1.1.0-RC1")

    return str(tmp_path / "project")


@pytest.fixture
def settings(repo_path):
    return Settings(repo_path=repo_path)


def test_commit_count(settings):
    assert run(["commit-count"], settings) == "3"
    assert run(["commit-count", "--author", "bob"], settings) == "1"
    assert run(["commit-count", "--since", "2024-01-03"], settings) == "2"


def test_repo_path_option_wins_over_settings(repo_path):
    assert run(["--repo-path", repo_path, "commit-count"], Settings(repo_path="/nonexistent")) == "3"


def test_commit_count_group(settings):
    output = run(["commit-count-group", "--by", "month"], settings)

    assert "2024-January" in output
    assert output.index("2024-January") < output.index("2024-February")


def test_commit_log(settings):
    output = run(["commit-log", "--limit", "1"], settings)

    assert output.count("Commit: ") == 1
    assert "PROJ-1 fix app" in output


def test_commit_log_by_hash(settings):
    head = Repo(settings.repo_path).head.commit.hexsha

    assert f"Commit: {head}" in run(["commit-log", "--hash", head], settings)
    assert "not found" in run(["commit-log", "--hash", "deadbeef"], settings)


def test_commit_log_before_hash(settings):
    first_parent = Repo(settings.repo_path).head.commit.parents[0].hexsha

    assert run(["commit-log", "--before-hash", first_parent, "--count"], settings) == "2"
    assert run(["commit-log", "--after-hash", first_parent, "--count"], settings) == "2"


def test_commits_with_and_source_files(settings):
    assert run(["commits-with", "proj-1", "--count"], settings) == "2"
    assert run(["commits-to", "README", "--count"], settings) == "1"
    assert run(["source-files", "PROJ-1"], settings) == "src/app.py"


def test_commits_by(settings):
    output = run(["commits-by", "bob"], settings)

    assert "Author: Bob <bob@example.com>" in output
    assert "Alice" not in output


def test_first_and_last_commit(settings):
    assert "Initial commit" in run(["first-commit"], settings)
    assert "PROJ-1 fix app" in run(["last-commit"], settings)
    assert "PROJ-1 add app" in run(["last-commit", "--author", "bob"], settings)
    assert "No matching commit" in run(["first-commit", "--author", "carol"], settings)


def test_release_dates(settings):
    assert run(["release-dates"], settings).split() == ["1.0.0", "2024-01-03"]
    assert run(["release-dates", "--all"], settings).split()[0] == "1.1.0-RC1"


def test_dev_cost(settings):
    output = run(["dev-cost", "--hourly-rate", "100", "--hours-per-day", "4"], settings)

    assert "active_days: 3" in output
    assert "cost: 1200.0" in output


def test_versions_does_not_need_a_repository():
    output = run(["versions", "1.0.0-SNAPSHOT", "1.0.0", "1.0.0-M1", "1.0.0-RC1"], Settings(repo_path="/nonexistent"))

    assert [line.split()[0] for line in output.splitlines()] == ["1.0.0", "1.0.0-RC1", "1.0.0-M1", "1.0.0-SNAPSHOT"]
    assert output.splitlines()[2].endswith("milestone")


def test_main_exit_codes(tmp_path, repo_path, capsys, monkeypatch):
    monkeypatch.delenv("PROJECTLENS_LOG_LEVEL", raising=False)

    assert main(["versions", "2.0", "1.0.0-RC1"]) == 0
    assert "2.0.0" in capsys.readouterr().out

    assert main(["versions", "1.x"]) == 2
    assert main(["--repo-path", str(tmp_path), "commit-count"]) == 1
    assert main(["--repo-path", repo_path, "commit-count", "--since", "yesterday"]) == 2


def test_main_rejects_unknown_log_level(monkeypatch, capsys):
    monkeypatch.setenv("PROJECTLENS_LOG_LEVEL", "LOUD")

    assert main(["versions", "1.0"]) == 2
    assert capsys.readouterr().out == ""


def test_commit_log_hash_range_applies_opposite_date_bound(settings):
    commits = list(Repo(settings.repo_path).iter_commits())
    newest, oldest = commits[0].hexsha, commits[-1].hexsha

    assert run(["commit-log", "-a", oldest, "--since", "2024-02-01", "--count"], settings) == "3"
    assert run(["commit-log", "-a", oldest, "--until", "2024-01-03", "--count"], settings) == "2"
    assert run(["commit-log", "-b", newest, "--until", "2024-01-02", "--count"], settings) == "3"
    assert run(["commit-log", "-b", newest, "--since", "2024-01-03", "--count"], settings) == "2"
    assert run(["commit-log", "-b", newest, "--author", "bob", "--count"], settings) == "1"
