"""Git repository operations."""

from dataclasses import dataclass
from pathlib import Path

from git import Git, GitCommandError, GitCommandNotFound, InvalidGitRepositoryError, NoSuchPathError, Repo

from branchflow.errors import GitError, GitNotInstalled, NotAGitRepository
from branchflow.log import get_logger

logger = get_logger("git")


@dataclass(frozen=True)
class GitResult:
    """Outcome of a git invocation."""

    exit_code: int
    stdout: str
    stderr: str


def check_git_installation() -> None:
    """Make sure a git executable is available.

    Raises:
        GitNotInstalled: If git cannot be executed
    """
    try:
        Git().version()
    except (GitCommandNotFound, GitCommandError) as err:
        raise GitNotInstalled("Git is not installed") from err


class GitRepo:
    """Git repository operations."""

    def __init__(self, path: Path) -> None:
        """Initialize repository."""
        try:
            self.repo: Repo = Repo(path, search_parent_directories=True)
            if self.repo.bare:
                raise NotAGitRepository("Cannot operate on bare repository")
        except (GitCommandError, ValueError, InvalidGitRepositoryError, NoSuchPathError) as err:
            raise NotAGitRepository(f"Failed to open repository: {err}") from err

    def run(self, *args: str, check: bool = True) -> GitResult:
        """Run a git subcommand in the repository.

        Args:
            *args: Arguments passed to git, one argv entry each
            check: Raise GitError when git exits with a nonzero status

        Returns:
            GitResult: Exit code and captured output
        """
        logger.debug("git %s", " ".join(args))
        try:
            status, stdout, stderr = self.repo.git.execute(
                ["git", *args],
                with_extended_output=True,
                with_exceptions=False,
            )
        except GitCommandNotFound as err:
            raise GitNotInstalled("Git is not installed") from err

        result = GitResult(exit_code=status, stdout=stdout, stderr=stderr)
        if check and status:
            detail = stderr.strip() or stdout.strip()
            raise GitError(f"git {' '.join(args)} failed: {detail}", exit_code=status)
        return result

    def get_current_branch_name(self) -> str:
        """Get current branch name, empty when HEAD is detached."""
        return self.run("branch", "--show-current").stdout.strip()

    def get_remote_url(self) -> str:
        """Get the URL of the origin remote.

        Raises:
            NotAGitRepository: If no origin remote is configured
        """
        result = self.run("config", "--get", "remote.origin.url", check=False)
        url = result.stdout.strip()
        if result.exit_code or not url:
            raise NotAGitRepository("You are not in a git project")
        return url

    def exists_local_branch(self, branch: str) -> bool:
        """Check if a branch exists locally or is checked out."""
        listed = self.run("branch", "--list", branch).stdout.strip()
        # The current branch is listed with a "* " prefix
        return listed == branch or self.get_current_branch_name() == branch

    def exists_remote_branch(self, branch: str) -> bool:
        """Check if origin has a branch with exactly this name."""
        return self.run("ls-remote", "--heads", "origin", f"refs/heads/{branch}").stdout.strip() != ""

    def is_valid_branch_name(self, branch: str) -> bool:
        """Check if git accepts the name as a branch name."""
        return self.run("check-ref-format", "--branch", branch, check=False).exit_code == 0

    def pull(self, *args: str) -> GitResult:
        """Pull into the current branch."""
        return self.run("pull", *args)

    def fetch_into(self, branch: str) -> GitResult:
        """Fast-forward a local branch that is not checked out from origin."""
        return self.run("fetch", "origin", f"{branch}:{branch}")

    def checkout_new_branch(self, branch: str, start_point: str) -> GitResult:
        """Create a branch at a start point and switch to it."""
        return self.run("checkout", "-b", branch, start_point)

    def merge(self, branch: str) -> GitResult:
        """Merge a branch into the current one without opening an editor."""
        return self.run("merge", "--no-edit", branch)

    def push_upstream(self, branch: str) -> GitResult:
        """Push a branch to origin and track it."""
        return self.run("push", "--set-upstream", "origin", branch)
