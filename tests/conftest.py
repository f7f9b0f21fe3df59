"""Test configuration and fixtures."""

from pathlib import Path
from typing import Callable, Generator, Optional, Sequence

import pytest
from git import Actor, Repo

from branchflow.config import CONFIG_PATH_ENV, ConfigStore


class FakePrompter:
    """Prompter answering from scripted replies and recording each question."""

    def __init__(
        self,
        confirms: Sequence[bool] = (),
        selections: Sequence[str] = (),
        texts: Sequence[str] = (),
    ) -> None:
        self.confirms = list(confirms)
        self.selections = list(selections)
        self.texts = list(texts)
        self.calls: list[tuple[str, str]] = []

    def confirm(self, message: str, default: bool = False) -> bool:
        self.calls.append(("confirm", message))
        return self.confirms.pop(0)

    def select(self, message: str, choices: Sequence[str], default: Optional[str] = None) -> str:
        self.calls.append(("select", message))
        answer = self.selections.pop(0)
        assert answer in choices
        return answer

    def text(self, message: str, default: str = "") -> str:
        self.calls.append(("text", message))
        return self.texts.pop(0)


@pytest.fixture
def make_prompter() -> Callable[..., FakePrompter]:
    """Build prompters with scripted answers."""
    return FakePrompter


@pytest.fixture
def store(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> ConfigStore:
    """Config store in a temporary file, also used by the CLI."""
    config_path = tmp_path / "config" / "config.json"
    monkeypatch.setenv(CONFIG_PATH_ENV, str(config_path))
    return ConfigStore()


@pytest.fixture
def test_env(tmp_path: Path) -> Generator[tuple[Path, Path], None, None]:
    """Create a test environment with local and remote repositories.

    The local repository has master and develop, both pushed and tracking
    origin. develop is one commit ahead of master and master is checked out.

    Returns:
        Tuple of (local_repo_path, remote_repo_path)
    """
    remote_path = tmp_path / "remote"
    local_path = tmp_path / "local"
    remote_path.mkdir()
    local_path.mkdir()

    Repo.init(remote_path, bare=True)
    local_repo = Repo.init(local_path)

    author = Actor("Test User", "test@example.com")
    local_repo.config_writer().set_value("user", "name", author.name).release()
    local_repo.config_writer().set_value("user", "email", author.email).release()

    readme = local_path / "README.md"
    readme.write_text("# Test Repository")
    local_repo.index.add(["README.md"])
    local_repo.index.commit("Initial commit", author=author)

    # Ensure we're on master whatever init.defaultBranch says
    if "master" not in local_repo.heads:
        local_repo.create_head("master")
    master = local_repo.heads.master
    master.checkout()

    origin = local_repo.create_remote("origin", url=str(remote_path))
    origin.push("master")
    master.set_tracking_branch(origin.refs.master)

    develop = local_repo.create_head("develop")
    develop.checkout()
    (local_path / "develop.txt").write_text("Develop content")
    local_repo.index.add(["develop.txt"])
    local_repo.index.commit("Add develop work", author=author)
    origin.push("develop")
    develop.set_tracking_branch(origin.refs.develop)

    master.checkout()

    yield local_path, remote_path


@pytest.fixture
def commit_file() -> Callable[[Repo, str, str], None]:
    """Commit a single file on the checked out branch of a repository."""

    def commit(repo: Repo, name: str, content: str) -> None:
        path = Path(repo.working_tree_dir) / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content)
        repo.index.add([name])
        repo.index.commit(f"Add {name}", author=Actor("Test User", "test@example.com"))

    return commit
