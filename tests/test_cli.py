"""Integration tests for the branchflow CLI."""

import json
import tempfile
from pathlib import Path

import pytest
from git import Git, GitCommandNotFound, Repo
from typer.testing import CliRunner

from branchflow.cli import app
from branchflow.config import ConfigStore, provider_key, repo_branches_key, repo_server_key


@pytest.fixture
def test_repo(test_env: tuple[Path, Path]) -> Path:
    local_path, _ = test_env
    return local_path


@pytest.fixture
def runner() -> CliRunner:
    """Create a CLI test runner."""
    return CliRunner()


def test_branch_create(test_repo: Path, runner: CliRunner, store: ConfigStore) -> None:
    """Test creating a feature branch without prompts."""
    result = runner.invoke(
        app,
        ["branch-create", "CJP-100", "--type", "feature", "--description", "Add login", "--path", str(test_repo)],
    )
    assert result.exit_code == 0, result.stdout
    assert "feature/CJP-100-add_login" in result.stdout
    assert Repo(test_repo).active_branch.name == "feature/CJP-100-add_login"


def test_branch_create_prompts_for_missing_answers(test_repo: Path, runner: CliRunner, store: ConfigStore) -> None:
    """Test that the issue ID and description are asked when not given."""
    result = runner.invoke(
        app,
        ["branch-create", "--type", "hotfix", "--path", str(test_repo)],
        input="CJP-200\n\n",
    )
    assert result.exit_code == 0, result.stdout
    assert Repo(test_repo).active_branch.name == "hotfix/CJP-200"


def test_branch_create_release_merges_develop(test_repo: Path, runner: CliRunner, store: ConfigStore) -> None:
    """Test that the release message mentions the merged develop branch."""
    result = runner.invoke(
        app,
        ["branch-create", "2024-01", "-t", "release", "-d", "", "--path", str(test_repo)],
    )
    assert result.exit_code == 0, result.stdout
    assert "Merged develop" in result.stdout
    assert Repo(test_repo).active_branch.name == "release/2024-01"


def test_branch_create_existing(test_repo: Path, runner: CliRunner, store: ConfigStore) -> None:
    """Test that an existing branch exits with an error."""
    Repo(test_repo).create_head("feature/CJP-300")
    result = runner.invoke(
        app,
        ["branch-create", "CJP-300", "-t", "feature", "-d", "", "--path", str(test_repo)],
    )
    assert result.exit_code == 1
    assert "already exists" in result.stdout


def test_branch_sync_on_source_branch(test_repo: Path, runner: CliRunner, store: ConfigStore) -> None:
    """Test that syncing master does nothing."""
    result = runner.invoke(app, ["branch-sync", "--path", str(test_repo)])
    assert result.exit_code == 0
    assert "Doing nothing" in result.stdout


def test_branch_sync(test_repo: Path, runner: CliRunner, store: ConfigStore) -> None:
    """Test syncing a feature branch with develop."""
    Repo(test_repo).git.checkout("-b", "feature/CJP-400", "master")
    result = runner.invoke(app, ["branch-sync", "--path", str(test_repo)])
    assert result.exit_code == 0, result.stdout
    assert "Synced feature/CJP-400 with develop" in result.stdout
    assert (test_repo / "develop.txt").exists()


def test_invalid_repo(runner: CliRunner, store: ConfigStore) -> None:
    """Test handling of invalid repository path."""
    with tempfile.TemporaryDirectory() as temp_dir:
        result = runner.invoke(app, ["branch-sync", "--path", temp_dir])
        assert result.exit_code == 1
        assert "Failed to open repository" in result.stdout


def test_pr_with_saved_provider(test_repo: Path, runner: CliRunner, store: ConfigStore) -> None:
    """Test printing the pull request page of a known provider."""
    repo = Repo(test_repo)
    remote_url = "git@bitbucket.org:team/widgets.git"
    repo.git.remote("set-url", "origin", remote_url)
    repo.git.checkout("-b", "hotfix/CJP-500")
    store.set(repo_server_key(remote_url), "bitbucket")

    result = runner.invoke(app, ["pr", "--path", str(test_repo)])
    assert result.exit_code == 0, result.stdout
    assert "https://bitbucket.org/team/widgets/pull-requests/new?source=hotfix%2FCJP-500&dest=master" in result.stdout


def test_pr_provider_failure(test_repo: Path, runner: CliRunner, store: ConfigStore) -> None:
    """Test that a provider failure exits with an error."""
    repo = Repo(test_repo)
    repo.git.checkout("-b", "feature/CJP-600")
    store.set(repo_server_key(str(test_repo.parent / "remote")), "github")

    result = runner.invoke(app, ["pr", "--path", str(test_repo)])
    assert result.exit_code == 1
    assert "github operation failed" in result.stdout


def test_config_path(runner: CliRunner, store: ConfigStore) -> None:
    """Test showing the config location."""
    result = runner.invoke(app, ["config", "--path"])
    assert result.exit_code == 0
    assert str(store.path) in result.stdout


def test_config_all_and_clear(runner: CliRunner, store: ConfigStore) -> None:
    """Test showing and clearing all saved data."""
    store.set("git.branch.default.master", "main")

    result = runner.invoke(app, ["config", "--all"])
    assert result.exit_code == 0
    assert json.loads(result.stdout) == {"git": {"branch": {"default": {"master": "main"}}}}

    result = runner.invoke(app, ["config", "--clear"])
    assert result.exit_code == 0
    assert "cleared" in result.stdout
    assert store.all == {}


def test_config_remove_provider_data(runner: CliRunner, store: ConfigStore) -> None:
    """Test removing personal data of one provider or all of them."""
    store.set(provider_key("github"), {"token": "secret"})
    store.set(provider_key("azure"), {"token": "other"})

    result = runner.invoke(app, ["config", "--remove-provider-data", "github"])
    assert result.exit_code == 0
    assert store.get(provider_key()) == {"azure": {"token": "other"}}

    result = runner.invoke(app, ["config", "--remove-provider-data", "all"])
    assert result.exit_code == 0
    assert store.get(provider_key()) is None

    result = runner.invoke(app, ["config", "--remove-provider-data", "gitlab"])
    assert result.exit_code != 0


def test_config_remove_project(test_repo: Path, runner: CliRunner, store: ConfigStore) -> None:
    """Test removing the data saved for the current project."""
    remote_url = str(test_repo.parent / "remote")
    store.set(repo_server_key(remote_url), "github")
    store.set(repo_branches_key(remote_url), {"develop": "dev"})
    store.set("git.branch.default.master", "main")

    result = runner.invoke(app, ["config", "--remove-project", "--repo-dir", str(test_repo)])
    assert result.exit_code == 0
    assert store.all == {"git": {"repo": {}, "branch": {"default": {"master": "main"}, "repo": {}}}}


def test_config_menu(runner: CliRunner, store: ConfigStore) -> None:
    """Test picking an action from the interactive menu."""
    result = runner.invoke(app, ["config"], input="path\n")
    assert result.exit_code == 0
    assert str(store.path) in result.stdout


def test_default_branch_global(runner: CliRunner, store: ConfigStore) -> None:
    """Test changing and showing a global role branch."""
    result = runner.invoke(app, ["default-branch", "master", "main"])
    assert result.exit_code == 0
    assert store.get("git.branch.default.master") == "main"

    result = runner.invoke(app, ["default-branch", "master"])
    assert result.exit_code == 0
    assert "main" in result.stdout


def test_default_branch_repository(test_repo: Path, runner: CliRunner, store: ConfigStore) -> None:
    """Test binding a role for the current repository only."""
    result = runner.invoke(app, ["default-branch", "develop", "integration", "--repo", "--path", str(test_repo)])
    assert result.exit_code == 0
    assert store.get(repo_branches_key(str(test_repo.parent / "remote"))) == {"develop": "integration"}
    assert store.get("git.branch.default.develop") is None


def test_default_branch_repository_outside_repo(runner: CliRunner, store: ConfigStore) -> None:
    """Test that repository bindings need a repository."""
    with tempfile.TemporaryDirectory() as temp_dir:
        result = runner.invoke(app, ["default-branch", "develop", "dev", "--repo", "--path", temp_dir])
        assert result.exit_code == 1


def test_branch_sync_from_other_source(test_repo: Path, runner: CliRunner, store: ConfigStore) -> None:
    """Test syncing with a source given by -f, rebasing."""
    Repo(test_repo).git.checkout("-b", "feature/CJP-401", "develop")
    result = runner.invoke(app, ["branch-sync", "-f", "master", "-r", "--path", str(test_repo)])
    assert result.exit_code == 0, result.stdout
    assert "Synced feature/CJP-401 with master" in result.stdout


def test_git_not_installed(
    test_repo: Path, runner: CliRunner, store: ConfigStore, monkeypatch: pytest.MonkeyPatch
) -> None:
    """Test that a missing git executable exits with an error."""

    def missing(self: Git, *args: str, **kwargs: str) -> str:
        raise GitCommandNotFound("git", "not found")

    monkeypatch.setattr(Git, "version", missing, raising=False)
    result = runner.invoke(app, ["branch-sync", "--path", str(test_repo)])
    assert result.exit_code == 1
    assert "Git is not installed" in result.stdout


def test_config_menu_remove_provider(runner: CliRunner, store: ConfigStore) -> None:
    """Test removing provider data from the interactive menu."""
    store.set(provider_key("github"), {"token": "secret"})
    store.set(provider_key("bitbucket"), {"token": "other"})

    result = runner.invoke(app, ["config"], input="provider\ngithub\n")
    assert result.exit_code == 0, result.stdout
    assert "Data removed successfully!" in result.stdout
    assert store.get(provider_key()) == {"bitbucket": {"token": "other"}}


def test_config_menu_remove_project(test_repo: Path, runner: CliRunner, store: ConfigStore) -> None:
    """Test removing the current project data from the interactive menu."""
    remote_url = str(test_repo.parent / "remote")
    store.set(repo_server_key(remote_url), "azure")
    store.set(repo_branches_key(remote_url), {"master": "main"})

    result = runner.invoke(app, ["config", "--repo-dir", str(test_repo)], input="project\n")
    assert result.exit_code == 0, result.stdout
    assert store.get(repo_server_key(remote_url)) is None
    assert store.get(repo_branches_key(remote_url)) is None


def test_default_branch_show_repository(test_repo: Path, runner: CliRunner, store: ConfigStore) -> None:
    """Test showing the bindings of a role with a repository binding."""
    store.set("git.branch.default.develop", "dev")
    store.set(repo_branches_key(str(test_repo.parent / "remote")), {"develop": "integration"})

    result = runner.invoke(app, ["default-branch", "develop", "--repo", "--path", str(test_repo)])
    assert result.exit_code == 0, result.stdout
    assert "develop branch" in result.stdout
    lines = result.stdout.splitlines()
    assert any("global" in line and "dev" in line for line in lines)
    assert any("repository" in line and "integration" in line for line in lines)
    assert any("effective" in line and "integration" in line for line in lines)
